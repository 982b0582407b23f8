import itertools
import threading
import time
from typing import Callable


class IdFactory:
    """Builds `{prefix}-{scope}-{epoch_ms}-{sequence}` identifiers.

    The sequence never repeats within one factory, so two ids minted in the
    same millisecond for the same word still differ.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._sequence = itertools.count(1)
        self._lock = threading.Lock()

    def new_id(self, prefix: str, scope: str) -> str:
        with self._lock:
            sequence = next(self._sequence)
        timestamp_ms = int(self._clock() * 1000)
        scope_token = "-".join(str(scope or "").split()) or "none"
        return f"{prefix}-{scope_token}-{timestamp_ms}-{sequence}"
