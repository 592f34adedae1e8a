"""Records exchanged between the audit stages.

Every record is a frozen pydantic model: stages create them once and never
mutate them afterwards.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from rules.config import AuditConfig

# Schema version constant
SCHEMA_VERSION = 1

SectionKind = Literal["template", "script_setup", "script"]
CallContext = Literal["template", "script"]
IssueType = Literal[
    "missing_translation",
    "empty_value",
    "dynamic_key",
    "hardcoded_text",
    "processing_error",
]
Severity = Literal["error", "warning", "info"]
Confidence = Literal["high", "medium", "low"]
FileStatus = Literal["clean", "issues_found"]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class Section(_Record):
    """One delimited region of a component file."""

    kind: SectionKind
    content: str
    start_line: int = Field(description="1-based line of the opening marker")
    inline_start: bool = Field(
        default=False,
        description="Content begins on the marker's own line",
    )

    def absolute_line(self, section_line: int) -> int:
        """Map a 1-based line inside the section to a document line."""
        if self.inline_start:
            return self.start_line + section_line - 1
        return self.start_line + section_line


class SourceDocument(_Record):
    """A component file split into its sections."""

    path: str
    text: str
    template: Section | None = None
    script_setup: Section | None = None
    script: Section | None = None
    warnings: tuple[str, ...] = ()


class CallSite(_Record):
    """A single translation-function invocation found in source."""

    key: str
    file: str
    line: int
    context: CallContext
    is_dynamic: bool = False
    raw_pattern: str | None = None


class CatalogEntry(_Record):
    """A string leaf of a locale definition, keyed by its dotted path."""

    key: str
    value: str
    file: str
    is_empty: bool


class HardcodedCandidate(_Record):
    text: str
    file: str
    line: int
    confidence: Confidence
    context: str


class Issue(_Record):
    """A single audit finding."""

    type: IssueType
    severity: Severity
    file: str
    line: int
    key: str | None = None
    text: str | None = None
    message: str


class FileResult(_Record):
    file: str
    status: FileStatus
    keys_found: int
    issue_count: int


class AuditSummary(_Record):
    files_scanned: int
    total_keys_found: int
    unique_keys_found: int
    missing_translations: int
    hardcoded_strings: int
    empty_values: int
    dynamic_keys: int
    coverage_percentage: float


class AuditReport(_Record):
    """Aggregate result of one audit run."""

    schema_version: int = Field(default=SCHEMA_VERSION)
    timestamp: str
    config: AuditConfig
    summary: AuditSummary
    issues: tuple[Issue, ...] = ()
    file_results: tuple[FileResult, ...] = ()


__all__ = [
    "SCHEMA_VERSION",
    "AuditReport",
    "AuditSummary",
    "CallContext",
    "CallSite",
    "CatalogEntry",
    "Confidence",
    "FileResult",
    "FileStatus",
    "HardcodedCandidate",
    "Issue",
    "IssueType",
    "Section",
    "SectionKind",
    "Severity",
    "SourceDocument",
]
