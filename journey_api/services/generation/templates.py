"""Prompt template rendering.

Two template dialects are in use across the flows:

* handlebars-style ``{{field}}`` / ``{{{field}}}`` with ``{{#if}}`` and
  ``{{#each}}`` blocks, and
* eta-style ``<%= it.field %>`` interpolation.

``TemplateEngine.render`` picks the dialect from the markers present in the
template, so flows never need to know which one a template uses. Both
dialects render missing values as an empty string and never escape HTML:
the output is prompt text, not markup.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from typing import Any


_ETA_MARKER = re.compile(r"<%[=~]?")
_ETA_TAG = re.compile(r"<%(?P<mode>[=~]?)-?\s*(?P<expr>.*?)\s*-?%>", re.DOTALL)
_MUSTACHE_TAG = re.compile(r"\{\{\{\s*(?P<raw>[^{}]+?)\s*\}\}\}|\{\{\s*(?P<tag>[^{}]*?)\s*\}\}")
_PATH = re.compile(r"^(?:this|@?[A-Za-z_][\w]*)(?:\.[A-Za-z_][\w]*)*$")


class TemplateEngine:
    def render(self, template: str, variables: Mapping[str, Any]) -> str:
        if not template:
            return ""
        if _ETA_MARKER.search(template):
            return render_eta(template, variables)
        if "{{" in template:
            return render_mustache(template, variables)
        return template


def format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return json.dumps(value, ensure_ascii=False, sort_keys=True)
    if isinstance(value, Sequence):
        return ", ".join(format_value(item) for item in value)
    return str(value)


def _resolve(value: Any, parts: Sequence[str]) -> Any:
    current = value
    for part in parts:
        if isinstance(current, Mapping):
            current = current.get(part)
        else:
            current = getattr(current, part, None)
        if current is None:
            return None
    return current


def _lookup(path: str, frames: Sequence[Any]) -> Any:
    parts = path.split(".")
    if parts[0] == "this":
        return _resolve(frames[-1], parts[1:])
    for frame in reversed(frames):
        if isinstance(frame, Mapping) and parts[0] in frame:
            return _resolve(frame, parts)
    return None


def render_eta(template: str, variables: Mapping[str, Any]) -> str:
    def replace(match: re.Match[str]) -> str:
        if not match.group("mode"):
            raise ValueError(f"unsupported_template_code_block:{match.group(0)}")
        expr = match.group("expr")
        if expr.startswith("it."):
            expr = expr[3:]
        if not _PATH.match(expr):
            raise ValueError(f"unsupported_template_expression:{expr}")
        return format_value(_lookup(expr, [variables]))

    return _ETA_TAG.sub(replace, template)


def _tokenize(template: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    cursor = 0
    for match in _MUSTACHE_TAG.finditer(template):
        if match.start() > cursor:
            tokens.append(("text", template[cursor : match.start()]))
        if match.group("raw") is not None:
            tokens.append(("var", match.group("raw").strip()))
        else:
            tokens.append(("tag", match.group("tag").strip()))
        cursor = match.end()
    if cursor < len(template):
        tokens.append(("text", template[cursor:]))
    return tokens


def _parse(tokens: list[tuple[str, str]], pos: int, closing: str | None) -> tuple[list[tuple], int, str | None]:
    nodes: list[tuple] = []
    while pos < len(tokens):
        kind, value = tokens[pos]
        pos += 1
        if kind == "text":
            nodes.append(("text", value))
            continue
        if kind == "var":
            nodes.append(("var", value))
            continue

        if value.startswith("#if ") or value.startswith("#each "):
            block, path = value[1:].split(None, 1)
            body, pos, stop = _parse(tokens, pos, block)
            alternative: list[tuple] = []
            if stop == "else":
                alternative, pos, stop = _parse(tokens, pos, block)
            if stop != f"/{block}":
                raise ValueError(f"unclosed_template_block:{block}")
            nodes.append((block, path.strip(), body, alternative))
            continue
        if value == "else" or value.startswith("/"):
            if closing is None:
                raise ValueError(f"unexpected_template_tag:{value}")
            return nodes, pos, value
        nodes.append(("var", value))

    if closing is not None:
        raise ValueError(f"unclosed_template_block:{closing}")
    return nodes, pos, None


def _emit(nodes: list[tuple], frames: list[Any], out: list[str]) -> None:
    for node in nodes:
        kind = node[0]
        if kind == "text":
            out.append(node[1])
        elif kind == "var":
            out.append(format_value(_lookup(node[1], frames)))
        elif kind == "if":
            _, path, body, alternative = node
            _emit(body if _lookup(path, frames) else alternative, frames, out)
        elif kind == "each":
            _, path, body, alternative = node
            items = _lookup(path, frames)
            if isinstance(items, Mapping):
                items = list(items.values())
            if not isinstance(items, Sequence) or isinstance(items, str) or not items:
                _emit(alternative, frames, out)
                continue
            for item in items:
                _emit(body, [*frames, item], out)


def render_mustache(template: str, variables: Mapping[str, Any]) -> str:
    for kind, value in _tokenize(template):
        if kind != "text" and not value.startswith(("#", "/")) and value != "else" and not _PATH.match(value):
            raise ValueError(f"unsupported_template_expression:{value}")
    nodes, _, _ = _parse(_tokenize(template), 0, None)
    out: list[str] = []
    _emit(nodes, [variables], out)
    return "".join(out)
