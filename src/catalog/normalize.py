"""Turn locale modules into plain dictionaries without executing them.

Locale files export one object literal. The primary strategy locates that
literal, rewrites it as JSON (comments dropped, trailing commas removed,
strings re-quoted, bare keys quoted) and hands it to orjson. When that
fails, a line-oriented scanner recovers simple ``key: "value"`` pairs and
nested ``key: {`` blocks. The fallback cannot express arrays or multi-line
strings.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import orjson

logger = logging.getLogger(__name__)

_EXPORT_DEFAULT_OBJECT = re.compile(r"\bexport\s+default\s*(?=\{)")
_EXPORT_DEFAULT_NAME = re.compile(r"\bexport\s+default\s+([A-Za-z_$][\w$]*)\s*;?")
_MODULE_EXPORTS_OBJECT = re.compile(r"\bmodule\.exports\s*=\s*(?=\{)")

_WORD = re.compile(r"[A-Za-z_$][\w$]*")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?")
_JSON_LITERALS = frozenset({"true", "false", "null"})

_ESCAPE_SEQUENCE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|.)",
    re.DOTALL,
)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
    "\n": "",
    "\r\n": "",
}

_KEY = r"(?:[A-Za-z_$][\w$]*|'[^']*'|\"[^\"]*\")"
_FALLBACK_NESTED = re.compile(rf"^({_KEY})\s*:\s*\{{(.*)$")
_FALLBACK_PAIR = re.compile(rf"^({_KEY})\s*:\s*([\"'`])(.*)\2\s*,?\s*$")


class LocaleSyntaxError(ValueError):
    """Raised when a locale literal cannot be rewritten as JSON."""


def _unescape_match(match: re.Match[str]) -> str:
    seq = match.group(1)
    if seq.startswith("u{") and seq.endswith("}"):
        return chr(int(seq[2:-1], 16))
    if len(seq) == 5 and seq[0] == "u":
        return chr(int(seq[1:], 16))
    if len(seq) == 3 and seq[0] == "x":
        return chr(int(seq[1:], 16))
    return _SIMPLE_ESCAPES.get(seq, seq)


def unescape(raw: str) -> str:
    """Decode JavaScript string escapes.

    Surrogate-pair escapes such as ``\\uD83D\\uDE00`` are joined into one
    character. Escapes that do not form valid text raise ``LocaleSyntaxError``.
    """
    try:
        text = _ESCAPE_SEQUENCE.sub(_unescape_match, raw)
        return text.encode("utf-16", "surrogatepass").decode("utf-16")
    except ValueError as exc:
        msg = f"Invalid escape sequence in {raw!r}: {exc}"
        raise LocaleSyntaxError(msg) from exc


def _lenient_unescape(raw: str) -> str:
    try:
        return unescape(raw)
    except LocaleSyntaxError:
        return raw


def _unquote_key(key: str) -> str:
    if len(key) >= 2 and key[0] == key[-1] and key[0] in "'\"":
        return _lenient_unescape(key[1:-1])
    return key


def find_object_literal(text: str) -> int | None:
    """Return the offset of the exported object literal's opening brace."""
    matches = list(_EXPORT_DEFAULT_OBJECT.finditer(text))
    if matches:
        return matches[-1].end()

    named = _EXPORT_DEFAULT_NAME.search(text)
    if named is not None:
        declaration = re.compile(
            rf"\b(?:const|let|var)\s+{re.escape(named.group(1))}\b[^=]*=\s*(?=\{{)"
        )
        match = declaration.search(text)
        if match is not None:
            return match.end()

    match = _MODULE_EXPORTS_OBJECT.search(text)
    if match is not None:
        return match.end()
    return None


def _read_string(text: str, start: int) -> tuple[str, int]:
    quote = text[start]
    i = start + 1
    n = len(text)
    while i < n:
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == quote:
            break
        if char == "\n" and quote != "`":
            msg = f"Unterminated string starting at offset {start}"
            raise LocaleSyntaxError(msg)
        i += 1
    else:
        msg = f"Unterminated string starting at offset {start}"
        raise LocaleSyntaxError(msg)

    raw = text[start + 1 : i]
    if quote == "`" and "${" in raw:
        msg = f"Interpolated template literal at offset {start}"
        raise LocaleSyntaxError(msg)
    return unescape(raw), i + 1


def _next_significant(text: str, start: int) -> str:
    i = start
    while i < len(text) and text[i].isspace():
        i += 1
    return text[i] if i < len(text) else ""


def normalize_object_literal(text: str, start: int) -> tuple[str, int]:
    """Rewrite the object literal opening at ``start`` as JSON text.

    Returns the JSON text and the offset just past the closing brace.
    """
    tokens: list[str] = []
    depth = 0
    i = start
    n = len(text)

    while i < n:
        char = text[i]

        if char.isspace():
            i += 1
            continue

        if text.startswith("//", i):
            newline = text.find("\n", i)
            i = n if newline == -1 else newline
            continue

        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                msg = f"Unterminated comment at offset {i}"
                raise LocaleSyntaxError(msg)
            i = end + 2
            continue

        if char in "'\"`":
            start_of_string = i
            value, i = _read_string(text, i)
            try:
                tokens.append(orjson.dumps(value).decode("utf-8"))
            except orjson.JSONEncodeError as exc:
                msg = f"Unencodable string at offset {start_of_string}: {exc}"
                raise LocaleSyntaxError(msg) from exc
            continue

        if char in "{[":
            depth += 1
            tokens.append(char)
            i += 1
            continue

        if char in "}]":
            if tokens and tokens[-1] == ",":
                tokens.pop()
            tokens.append(char)
            depth -= 1
            i += 1
            if depth == 0:
                return "".join(tokens), i
            continue

        if char in ",:":
            tokens.append(char)
            i += 1
            continue

        word = _WORD.match(text, i)
        if word is not None:
            i = word.end()
            if _next_significant(text, i) == ":":
                tokens.append(orjson.dumps(word.group(0)).decode("utf-8"))
            elif word.group(0) in _JSON_LITERALS:
                tokens.append(word.group(0))
            else:
                msg = f"Unsupported expression {word.group(0)!r} at offset {word.start()}"
                raise LocaleSyntaxError(msg)
            continue

        number = _NUMBER.match(text, i)
        if number is not None:
            i = number.end()
            if _next_significant(text, i) == ":":
                tokens.append(orjson.dumps(number.group(0)).decode("utf-8"))
            else:
                tokens.append(number.group(0))
            continue

        msg = f"Unexpected character {char!r} at offset {i}"
        raise LocaleSyntaxError(msg)

    msg = "Unterminated object literal"
    raise LocaleSyntaxError(msg)


def parse_object_literal(text: str) -> dict[str, Any]:
    """Primary strategy: locate, normalize and strictly parse the literal."""
    start = find_object_literal(text)
    if start is None:
        msg = "No exported object literal found"
        raise LocaleSyntaxError(msg)

    json_text, _ = normalize_object_literal(text, start)
    try:
        tree = orjson.loads(json_text)
    except orjson.JSONDecodeError as exc:
        msg = f"Normalized literal is not valid JSON: {exc}"
        raise LocaleSyntaxError(msg) from exc

    if not isinstance(tree, dict):
        msg = "Exported literal is not an object"
        raise LocaleSyntaxError(msg)
    return tree


def _inline_object(rest: str) -> dict[str, Any] | None:
    """Parse an object that opens and closes on one line.

    ``rest`` is the text after the opening brace. Returns None when the
    object stays open past the end of the line.
    """
    if rest.count("}") <= rest.count("{"):
        return None
    try:
        json_text, _ = normalize_object_literal("{" + rest, 0)
        tree = orjson.loads(json_text)
    except (LocaleSyntaxError, orjson.JSONDecodeError):
        return {}
    return tree if isinstance(tree, dict) else {}


def scan_key_values(text: str) -> dict[str, Any]:
    """Fallback strategy: structural line scan for simple pairs."""
    result: dict[str, Any] = {}
    stack: list[dict[str, Any]] = []
    current = result

    for line in text.split("\n"):
        trimmed = line.strip()

        if not trimmed or trimmed.startswith(("//", "/*", "*")):
            continue

        nested = _FALLBACK_NESTED.match(trimmed)
        if nested is not None:
            inline = _inline_object(nested.group(2))
            child: dict[str, Any] = {} if inline is None else inline
            current[_unquote_key(nested.group(1))] = child
            if inline is None:
                stack.append(current)
                current = child
            continue

        if trimmed.startswith("}"):
            if stack:
                current = stack.pop()
            continue

        pair = _FALLBACK_PAIR.match(trimmed)
        if pair is not None:
            current[_unquote_key(pair.group(1))] = _lenient_unescape(pair.group(3))

    return result


def parse_locale_source(text: str, path: str = "<string>") -> dict[str, Any]:
    """Parse a locale module into a nested dictionary.

    Tries the strict strategy first and falls back to the line scanner.
    Never raises; an unparseable file yields an empty dictionary and a
    logged warning.
    """
    try:
        return parse_object_literal(text)
    except LocaleSyntaxError as exc:
        logger.debug(f"Strict parse failed, using line scanner (path={path} error={exc})")

    tree = scan_key_values(text)
    if not tree and text.strip():
        logger.warning(f"Could not parse locale file (path={path})")
    return tree


__all__ = [
    "LocaleSyntaxError",
    "find_object_literal",
    "normalize_object_literal",
    "parse_locale_source",
    "parse_object_literal",
    "scan_key_values",
    "unescape",
]
