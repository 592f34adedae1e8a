"""Locale catalog loading."""

from catalog.loader import build_lookup, flatten, load_catalog, parse_locale_file
from catalog.normalize import parse_locale_source

__all__ = [
    "build_lookup",
    "flatten",
    "load_catalog",
    "parse_locale_file",
    "parse_locale_source",
]
