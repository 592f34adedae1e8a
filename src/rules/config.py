from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "i18n-audit.toml"

DEFAULT_HARDCODED_EXCLUDE_PATTERNS = ["^v-", "^@", "^:", "^#"]


class HardcodedTextRules(BaseModel):
    """Rules applied when looking for untranslated template text."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_length: int = Field(
        default=3,
        ge=0,
        description="Text shorter than this is ignored",
    )
    exclude_all_caps: bool = Field(
        default=True,
        description="Ignore ALL-CAPS tokens longer than two characters",
    )
    exclude_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_HARDCODED_EXCLUDE_PATTERNS),
        description="Additional regular expressions; matching text is ignored",
    )

    @field_validator("exclude_patterns")
    @classmethod
    def validate_exclude_patterns(cls, v: list[str]) -> list[str]:
        """Reject patterns that are not valid regular expressions."""
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as exc:
                msg = f"Invalid exclude pattern {pattern!r}: {exc}"
                raise ValueError(msg) from exc
        return v


class AuditConfig(BaseModel):
    """Effective configuration of one audit run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    pages_dir: str = Field(
        default="resources/js/Pages",
        description="Directory holding the components to audit",
    )
    locales_dir: str = Field(
        default="resources/js/i18n/locales/en",
        description="Directory holding the reference locale files",
    )
    include_partials: bool = Field(
        default=True,
        description="Audit components under partials directories",
    )
    partials_dir: str = Field(
        default="Partials",
        description="Path segment that marks a partials directory",
    )
    include_pattern: str = Field(
        default="**/*.vue",
        description="Glob (relative to pages_dir) selecting component files",
    )
    output_file: str = Field(
        default="i18n-audit-report.md",
        description="Report path written by the audit command",
    )
    verbose: bool = Field(default=False, description="Log progress details")
    exclude: list[str] = Field(
        default_factory=lambda: ["**/node_modules/**", "**/*.test.vue"],
        description="Glob patterns for files to exclude",
    )
    locale_extensions: list[str] = Field(
        default_factory=lambda: [".ts", ".js"],
        description="Extensions recognized as locale definition files",
    )
    respect_gitignore: bool = Field(
        default=False,
        description="Skip files matched by the project's .gitignore",
    )
    report_catalog_empty_values: bool = Field(
        default=False,
        description="Also report empty catalog values that no component uses",
    )
    hardcoded: HardcodedTextRules = Field(
        default_factory=HardcodedTextRules,
        description="Hardcoded text detection rules",
    )

    @field_validator("locale_extensions")
    @classmethod
    def validate_locale_extensions(cls, v: list[str]) -> list[str]:
        for ext in v:
            if not ext.startswith("."):
                msg = f"Locale extension {ext!r} must start with '.'"
                raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> AuditConfig:
    """Load configuration from i18n-audit.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return AuditConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return AuditConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e


def apply_overrides(config: AuditConfig, **overrides: Any) -> AuditConfig:
    """Return a copy of ``config`` with every non-None override applied.

    Overrides go through validation again, so an invalid per-invocation value
    raises ``ConfigError`` just like an invalid config file would.
    """
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return config

    data = config.model_dump()
    data.update(updates)
    try:
        return AuditConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid override: {e}"
        raise ConfigError(msg) from e
