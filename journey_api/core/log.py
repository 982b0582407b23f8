import logging
import sys


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PACKAGE_LOGGER = "journey_api"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level if isinstance(level, int) else str(level).upper())

    # 재호출 시 핸들러 중복 등록 방지
    if not any(getattr(handler, "_journey_api", False) for handler in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._journey_api = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
