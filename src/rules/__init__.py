"""Configuration and text rules for the audit."""

from rules.config import (
    AuditConfig,
    ConfigError,
    HardcodedTextRules,
    apply_overrides,
    load_config,
)

__all__ = [
    "AuditConfig",
    "ConfigError",
    "HardcodedTextRules",
    "apply_overrides",
    "load_config",
]
