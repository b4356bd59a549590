"""Best-effort parsing of tool arguments that are still streaming in.

While a model streams a tool call, its arguments arrive as a growing
prefix of a JSON object, e.g. ``{"path": "/src/app.py", "limi``. The
tolerant parser closes whatever strings, objects and arrays are still
open and backs off to the last structural boundary until the text
parses, so completed fields are available before the JSON is.

Regex scraping (``scrape_string_field``) is kept as a last resort for
text the tolerant parser cannot recover anything from.
"""
from __future__ import annotations

import json
import re
from typing import Any

# Upper bound on back-off attempts for a single document
_MAX_ATTEMPTS = 64


def _scan(text: str) -> tuple[list[str], bool, bool, list[tuple[int, str]]]:
    """Walk *text* and report its open containers.

    Returns (stack of open brackets, in_string, dangling_escape,
    structural boundaries outside strings as (index, char)).
    """
    stack: list[str] = []
    boundaries: list[tuple[int, str]] = []
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            stack.append(ch)
            boundaries.append((i, ch))
        elif ch in "}]":
            if stack:
                stack.pop()
        elif ch == ",":
            boundaries.append((i, ch))
    return stack, in_string, escaped, boundaries


def _close(text: str) -> str:
    """Append the closers needed to terminate *text*."""
    stack, in_string, escaped, _ = _scan(text)
    if in_string:
        if escaped:
            text = text[:-1]
        text += '"'
    stripped = text.rstrip()
    if stripped.endswith(":"):
        stripped += " null"
    closers = "".join("}" if opener == "{" else "]" for opener in reversed(stack))
    return stripped + closers


def parse_partial_json(text: str | None) -> dict[str, Any]:
    """Parse a possibly-truncated JSON object, returning what is recoverable.

    Only objects are of interest (tool arguments); anything else yields
    an empty dict. Never raises.
    """
    if not text or not text.strip():
        return {}
    try:
        value = json.loads(text)
    except (ValueError, TypeError):
        pass
    else:
        return value if isinstance(value, dict) else {}

    _, _, _, boundaries = _scan(text)
    candidates = [text]
    for index, ch in reversed(boundaries):
        # Drop a trailing comma; keep an opening bracket so it can be closed
        candidates.append(text[:index] if ch == "," else text[: index + 1])

    for candidate in candidates[:_MAX_ATTEMPTS]:
        try:
            value = json.loads(_close(candidate))
        except ValueError:
            continue
        return value if isinstance(value, dict) else {}
    return {}


def scrape_string_field(text: str | None, keys: tuple[str, ...]) -> str | None:
    """Regex fallback: find the first complete ``"key": "value"`` pair."""
    if not text:
        return None
    pattern = r'"(?:%s)"\s*:\s*"([^"]*)"' % "|".join(re.escape(k) for k in keys)
    match = re.search(pattern, text)
    return match.group(1) if match else None


def extract_string_field(
    arguments: dict[str, Any] | None,
    partial_json: str | None,
    keys: tuple[str, ...],
) -> str | None:
    """Look up the first non-empty string among *keys*.

    Structured arguments are preferred; the streaming JSON text is only
    consulted when none of the keys is present there.
    """
    value = _lookup(arguments or {}, keys)
    if value is None and partial_json:
        value = _lookup(parse_partial_json(partial_json), keys)
        if value is None:
            value = scrape_string_field(partial_json, keys) or None
    return value


def _lookup(source: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = source.get(key)
        if isinstance(value, str) and value:
            return value
    return None
