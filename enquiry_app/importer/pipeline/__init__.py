"""Enquiry import pipeline: column resolution, canonical mapping and orchestration."""

from .canonical import CanonicalAttributes, build_canonical_attributes, clean_string
from .orchestrator import (
    ImportBatch,
    ImportOrchestrator,
    ImportPhase,
    ImportResult,
    ImportRowError,
    derive_field_name,
)
from .resolver import (
    DEFAULT_TIERS,
    CaseInsensitiveHeaderTier,
    ColumnResolver,
    ExactHeaderTier,
    MatchTier,
    NormalizedHeaderTier,
    normalize_header,
)

__all__ = [
    "CanonicalAttributes",
    "CaseInsensitiveHeaderTier",
    "ColumnResolver",
    "DEFAULT_TIERS",
    "ExactHeaderTier",
    "ImportBatch",
    "ImportOrchestrator",
    "ImportPhase",
    "ImportResult",
    "ImportRowError",
    "MatchTier",
    "NormalizedHeaderTier",
    "build_canonical_attributes",
    "clean_string",
    "derive_field_name",
    "normalize_header",
]
