"""Detection of literal template text that bypasses translation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contract.models import HardcodedCandidate, Issue
from scan.files import relative_path

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from contract.models import Confidence, Section, SourceDocument
    from rules.config import HardcodedTextRules

DEFAULT_EXCLUDE_PATTERNS: tuple[re.Pattern[str], ...] = (
    # directives and bindings
    re.compile(r"^v-"),
    re.compile(r"^@"),
    re.compile(r"^:"),
    re.compile(r"^#"),
    # route helpers
    re.compile(r"^route\("),
    re.compile(r"^router\."),
    # urls, mail links, root-relative paths
    re.compile(r"^https?://"),
    re.compile(r"^mailto:"),
    re.compile(r"^/"),
    # kebab-case and snake_case identifiers
    re.compile(r"^[a-z]+(-[a-z]+)+$"),
    re.compile(r"^[a-z]+_[a-z]+", re.IGNORECASE),
    # numbers, colors, leftover interpolation
    re.compile(r"^\d+$"),
    re.compile(r"^#[0-9a-f]{3,8}$", re.IGNORECASE),
    re.compile(r"^\$\{"),
)

_TEXT_NODE = re.compile(r">([^<{]+)<")
_CONTEXT_RADIUS = 20

_COMPONENT_NAME = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
_CONSTANT = re.compile(r"^[A-Z][A-Z0-9_]*$")
_CAMEL_CASE = re.compile(r"^[a-z][a-zA-Z0-9]*$")
_FILE_EXTENSION = re.compile(r"^\.\w+$")
_SENTENCE_START = re.compile(r"^[A-Z][a-z]")
_TERMINAL_PUNCTUATION = re.compile(r"[.!?:,]$")
_CAPITALIZED_WORD = re.compile(r"^[A-Z][a-z]+$")

_CONFIDENCE_RANK: dict[str, int] = {"high": 3, "medium": 2, "low": 1}


@dataclass(frozen=True)
class TextNode:
    text: str
    line: int
    context: str


def extract_text_nodes(template: str) -> list[TextNode]:
    """Text between tags, outside interpolations. Lines are 1-based."""
    nodes: list[TextNode] = []
    for index, line in enumerate(template.split("\n"), start=1):
        for match in _TEXT_NODE.finditer(line):
            text = match.group(1).strip()
            if not text:
                continue
            if "{{" in text or "}}" in text:
                continue
            start = max(0, match.start() - _CONTEXT_RADIUS)
            end = min(len(line), match.end() + _CONTEXT_RADIUS)
            nodes.append(TextNode(text=text, line=index, context=line[start:end]))
    return nodes


def matches_exclusion_pattern(text: str, patterns: Iterable[re.Pattern[str]]) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def is_component_name(text: str) -> bool:
    return _COMPONENT_NAME.match(text) is not None


def is_technical_identifier(text: str) -> bool:
    if _CONSTANT.match(text):
        return True
    if _CAMEL_CASE.match(text) and len(text) < 20:
        return True
    return _FILE_EXTENSION.match(text) is not None


def calculate_confidence(text: str) -> Confidence:
    """Estimate how likely ``text`` is prose shown to users."""
    trimmed = text.strip()

    if _SENTENCE_START.match(trimmed) and " " in trimmed:
        return "high"
    if _TERMINAL_PUNCTUATION.search(trimmed) and len(trimmed) > 5:
        return "high"
    if _CAPITALIZED_WORD.match(trimmed):
        return "medium"
    if " " in trimmed and len(trimmed) > 10:
        return "medium"
    return "low"


def compile_exclude_patterns(rules: HardcodedTextRules) -> list[re.Pattern[str]]:
    return [*DEFAULT_EXCLUDE_PATTERNS, *(re.compile(p) for p in rules.exclude_patterns)]


def is_excluded(
    text: str,
    rules: HardcodedTextRules,
    patterns: Iterable[re.Pattern[str]],
) -> bool:
    """Apply the filters in order; True means the text is not reported."""
    if len(text) < rules.min_length:
        return True
    if rules.exclude_all_caps and text == text.upper() and len(text) > 2:
        return True
    if matches_exclusion_pattern(text, patterns):
        return True
    if is_component_name(text):
        return True
    return is_technical_identifier(text)


def detect_in_section(
    section: Section,
    file: str,
    rules: HardcodedTextRules,
) -> list[HardcodedCandidate]:
    patterns = compile_exclude_patterns(rules)
    return [
        HardcodedCandidate(
            text=node.text,
            file=file,
            line=section.absolute_line(node.line),
            confidence=calculate_confidence(node.text),
            context=node.context,
        )
        for node in extract_text_nodes(section.content)
        if not is_excluded(node.text, rules, patterns)
    ]


def detect_hardcoded_strings(
    document: SourceDocument,
    rules: HardcodedTextRules,
    *,
    root: Path,
) -> list[HardcodedCandidate]:
    """Find untranslated text in the document's template, if it has one."""
    if document.template is None:
        return []
    return detect_in_section(document.template, relative_path(document.path, root), rules)


def candidate_to_issue(candidate: HardcodedCandidate) -> Issue:
    return Issue(
        type="hardcoded_text",
        severity="warning",
        file=candidate.file,
        line=candidate.line,
        text=candidate.text,
        message=(
            f'Potential hardcoded text: "{candidate.text}" '
            f"(confidence: {candidate.confidence})"
        ),
    )


def filter_by_confidence(
    candidates: Iterable[HardcodedCandidate],
    minimum: Confidence,
) -> list[HardcodedCandidate]:
    floor = _CONFIDENCE_RANK[minimum]
    return [c for c in candidates if _CONFIDENCE_RANK[c.confidence] >= floor]


__all__ = [
    "DEFAULT_EXCLUDE_PATTERNS",
    "TextNode",
    "calculate_confidence",
    "candidate_to_issue",
    "detect_hardcoded_strings",
    "detect_in_section",
    "extract_text_nodes",
    "filter_by_confidence",
    "is_component_name",
    "is_excluded",
    "is_technical_identifier",
]
