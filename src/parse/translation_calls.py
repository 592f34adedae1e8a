"""Regex-based extraction of ``t()`` / ``$t()`` call sites from components."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contract.models import CallSite

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contract.models import Section, SourceDocument

# Quoted-key shapes leave backticks to the template-literal recognizer so a
# literal is never reported twice.
_INTERPOLATION = re.compile(r"\{\{\s*\$?t\s*\(\s*(['\"])([^'\"]+)\1")
_BOUND_ATTRIBUTE = re.compile(r":\w+(?:-\w+)*=[\"']\s*\$?t\s*\(\s*(['\"])([^'\"]+)\1")
_TEMPLATE_LITERAL = re.compile(r"(?<![\w$])\$?t\s*\(\s*`([^`]+)`")
_SCRIPT_CALL = re.compile(r"\bt\s*\(\s*(['\"])([^'\"]+)\1")
_SCRIPT_TEMPLATE_LITERAL = re.compile(r"\bt\s*\(\s*`([^`]+)`")

_USES_I18N = re.compile(r"useI18n\s*\(")
_DESTRUCTURES_T = re.compile(r"const\s*\{\s*t\s*[,}]")
_IMPORTS_T = re.compile(r"import\s*\{[^}]*\bt\b[^}]*\}\s*from")

_SKIPPED_LINE_PREFIXES = ("import ", "type ")

_INTERPOLATION_MARKER = "${"


@dataclass(frozen=True)
class KeyMatch:
    """One recognizer hit on a single line."""

    key: str
    is_dynamic: bool = False
    raw_pattern: str | None = None


def _literal_match(literal: str) -> KeyMatch:
    if _INTERPOLATION_MARKER in literal:
        return KeyMatch(key="", is_dynamic=True, raw_pattern=f"`{literal}`")
    return KeyMatch(key=literal)


def match_interpolation(line: str) -> list[KeyMatch]:
    """``{{ t('key') }}`` and ``{{ $t("key") }}``."""
    return [KeyMatch(key=m.group(2)) for m in _INTERPOLATION.finditer(line)]


def match_bound_attribute(line: str) -> list[KeyMatch]:
    """``:title="t('key')"`` and ``v-bind:aria-label="$t('key')"``."""
    return [KeyMatch(key=m.group(2)) for m in _BOUND_ATTRIBUTE.finditer(line)]


def match_template_literal(line: str, *, script: bool = False) -> list[KeyMatch]:
    """Backtick arguments; a literal containing ``${`` is dynamic."""
    pattern = _SCRIPT_TEMPLATE_LITERAL if script else _TEMPLATE_LITERAL
    return [_literal_match(m.group(1)) for m in pattern.finditer(line)]


def match_script_call(line: str) -> list[KeyMatch]:
    """Plain ``t('key')`` calls in script code."""
    return [KeyMatch(key=m.group(2)) for m in _SCRIPT_CALL.finditer(line)]


def uses_translation_function(script: str) -> bool:
    """Return True when the script obtains ``t`` from somewhere.

    Scripts without this evidence are not scanned, so unrelated functions
    that happen to be called ``t`` do not produce call sites.
    """
    return bool(
        _USES_I18N.search(script)
        or _DESTRUCTURES_T.search(script)
        or _IMPORTS_T.search(script)
    )


def _to_call_site(match: KeyMatch, path: str, line: int, section: Section) -> CallSite:
    return CallSite(
        key=match.key,
        file=path,
        line=line,
        context="template" if section.kind == "template" else "script",
        is_dynamic=match.is_dynamic,
        raw_pattern=match.raw_pattern,
    )


def extract_from_template(section: Section, path: str) -> list[CallSite]:
    call_sites: list[CallSite] = []
    for index, line in enumerate(section.content.split("\n"), start=1):
        line_number = section.absolute_line(index)
        for match in (
            *match_interpolation(line),
            *match_bound_attribute(line),
            *match_template_literal(line),
        ):
            call_sites.append(_to_call_site(match, path, line_number, section))
    return call_sites


def extract_from_script(section: Section, path: str) -> list[CallSite]:
    if not uses_translation_function(section.content):
        return []

    call_sites: list[CallSite] = []
    for index, line in enumerate(section.content.split("\n"), start=1):
        if line.strip().startswith(_SKIPPED_LINE_PREFIXES):
            continue
        line_number = section.absolute_line(index)
        for match in (
            *match_script_call(line),
            *match_template_literal(line, script=True),
        ):
            call_sites.append(_to_call_site(match, path, line_number, section))
    return call_sites


def extract_translation_keys(document: SourceDocument) -> list[CallSite]:
    """Collect call sites from template, script setup and classic script."""
    call_sites: list[CallSite] = []
    if document.template is not None:
        call_sites.extend(extract_from_template(document.template, document.path))
    if document.script_setup is not None:
        call_sites.extend(extract_from_script(document.script_setup, document.path))
    if document.script is not None:
        call_sites.extend(extract_from_script(document.script, document.path))
    return call_sites


def unique_keys(call_sites: Iterable[CallSite]) -> list[str]:
    """Sorted distinct static keys."""
    return sorted({site.key for site in call_sites if not site.is_dynamic and site.key})


def static_call_sites(call_sites: Iterable[CallSite]) -> list[CallSite]:
    return [site for site in call_sites if not site.is_dynamic and site.key]


def dynamic_call_sites(call_sites: Iterable[CallSite]) -> list[CallSite]:
    return [site for site in call_sites if site.is_dynamic]


__all__ = [
    "KeyMatch",
    "dynamic_call_sites",
    "extract_from_script",
    "extract_from_template",
    "extract_translation_keys",
    "match_bound_attribute",
    "match_interpolation",
    "match_script_call",
    "match_template_literal",
    "static_call_sites",
    "unique_keys",
    "uses_translation_function",
]
