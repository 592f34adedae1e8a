"""Records shared by every stage of the audit pipeline."""

from contract.models import (
    SCHEMA_VERSION,
    AuditReport,
    AuditSummary,
    CallSite,
    CatalogEntry,
    FileResult,
    HardcodedCandidate,
    Issue,
    Section,
    SourceDocument,
)

__all__ = [
    "SCHEMA_VERSION",
    "AuditReport",
    "AuditSummary",
    "CallSite",
    "CatalogEntry",
    "FileResult",
    "HardcodedCandidate",
    "Issue",
    "Section",
    "SourceDocument",
]
