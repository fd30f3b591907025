"""Per-style metadata records and their attachment storage."""

from mto.metadata.record import (
    MetadataRecord,
    OutputDimensions,
    OutputMetadata,
    SourceMetadata,
    normalize_rotation,
    reconcile_dimensions,
)
from mto.metadata.store import (
    AttachmentMetadata,
    InMemoryMetadataStore,
    MetadataStore,
    SqliteMetadataStore,
)

__all__ = [
    "AttachmentMetadata",
    "InMemoryMetadataStore",
    "MetadataRecord",
    "MetadataStore",
    "OutputDimensions",
    "OutputMetadata",
    "SourceMetadata",
    "SqliteMetadataStore",
    "normalize_rotation",
    "reconcile_dimensions",
]
