"""Split single-file components into template and script sections.

This is a tag scanner, not an HTML parser: it only needs to find the
top-level ``<template>``, ``<script setup>`` and ``<script>`` blocks and the
line each one starts on. Nested ``<template>`` tags inside the markup are
depth-counted so the outer closing tag is the one that ends the block.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from contract.models import Section, SectionKind, SourceDocument

logger = logging.getLogger(__name__)

_TOP_LEVEL_TAG = re.compile(
    r"<!--.*?-->"
    r"|<(?P<open>template|script|style)(?=[\s/>])(?P<attrs>[^>]*?)(?P<self>/?)>"
    r"|</(?P<close>template|script|style)\s*>",
    re.DOTALL,
)
_TEMPLATE_TAG = re.compile(
    r"<!--.*?-->|<template(?=[\s/>])[^>]*?(?P<self>/?)>|(?P<close></template\s*>)",
    re.DOTALL,
)
_SCRIPT_CLOSE = re.compile(r"</script\s*>")
_STYLE_CLOSE = re.compile(r"</style\s*>")
_SETUP_ATTR = re.compile(r"(?:^|\s)setup(?:\s|=|$)")


def source_line(section_line: int, section_start_line: int) -> int:
    """Translate a 1-based line inside a section to a document line."""
    return section_start_line + section_line


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def _find_template_close(text: str, start: int) -> tuple[int, int] | None:
    depth = 1
    for match in _TEMPLATE_TAG.finditer(text, start):
        token = match.group(0)
        if token.startswith("<!--"):
            continue
        if match.group("close"):
            depth -= 1
            if depth == 0:
                return match.start(), match.end()
        elif not match.group("self"):
            depth += 1
    return None


def _find_close(pattern: re.Pattern[str], text: str, start: int) -> tuple[int, int] | None:
    match = pattern.search(text, start)
    if match is None:
        return None
    return match.start(), match.end()


def _make_section(
    kind: SectionKind, text: str, tag_start: int, body_start: int, body_end: int
) -> Section | None:
    content = text[body_start:body_end]
    inline_start = True
    if content.startswith("\r\n"):
        content = content[2:]
        inline_start = False
    elif content.startswith("\n"):
        content = content[1:]
        inline_start = False
    if not content:
        return None
    return Section(
        kind=kind,
        content=content,
        start_line=_line_of(text, tag_start),
        inline_start=inline_start,
    )


def split_sections(text: str, path: str) -> SourceDocument:
    """Locate the template and script blocks of one component.

    Missing blocks are left as ``None``. Structural problems (unclosed
    blocks, duplicates, stray closing tags) never raise: the best-effort
    result is returned and the problem is recorded in ``warnings``.
    """
    found: dict[SectionKind, Section] = {}
    warnings: list[str] = []

    pos = 0
    while True:
        match = _TOP_LEVEL_TAG.search(text, pos)
        if match is None:
            break

        if match.group(0).startswith("<!--"):
            pos = match.end()
            continue

        if match.group("close"):
            warnings.append(
                f"Unexpected </{match.group('close')}> at line "
                f"{_line_of(text, match.start())}"
            )
            pos = match.end()
            continue

        tag = match.group("open")
        if match.group("self"):
            pos = match.end()
            continue

        if tag == "template":
            bounds = _find_template_close(text, match.end())
        elif tag == "script":
            bounds = _find_close(_SCRIPT_CLOSE, text, match.end())
        else:
            bounds = _find_close(_STYLE_CLOSE, text, match.end())

        if bounds is None:
            warnings.append(
                f"Unclosed <{tag}> opened at line {_line_of(text, match.start())}"
            )
            bounds = (len(text), len(text))

        body_end, close_end = bounds
        pos = close_end

        if tag == "style":
            continue

        kind: SectionKind = "template"
        if tag == "script":
            is_setup = _SETUP_ATTR.search(match.group("attrs")) is not None
            kind = "script_setup" if is_setup else "script"

        if kind in found:
            warnings.append(
                f"Duplicate <{tag}> block at line {_line_of(text, match.start())} ignored"
            )
            continue

        section = _make_section(kind, text, match.start(), match.end(), body_end)
        if section is not None:
            found[kind] = section

    if warnings:
        logger.warning(f"Errors parsing {path}: {', '.join(warnings)}")

    return SourceDocument(
        path=path,
        text=text,
        template=found.get("template"),
        script_setup=found.get("script_setup"),
        script=found.get("script"),
        warnings=tuple(warnings),
    )


def parse_file(path: Path) -> SourceDocument:
    """Read a component from disk and split it into sections."""
    text = path.read_text(encoding="utf-8")
    return split_sections(text, str(path))


__all__ = ["parse_file", "source_line", "split_sections"]
