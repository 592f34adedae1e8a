"""Parsing utilities for component files."""

from parse.sections import parse_file, source_line, split_sections
from parse.translation_calls import (
    extract_from_script,
    extract_from_template,
    extract_translation_keys,
    unique_keys,
    uses_translation_function,
)

__all__ = [
    "extract_from_script",
    "extract_from_template",
    "extract_translation_keys",
    "parse_file",
    "source_line",
    "split_sections",
    "unique_keys",
    "uses_translation_function",
]
