"""
Storage interfaces consumed by the field registry, the type-safety scanner
and the import orchestrator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from enquiry_app.fields.values import FieldValue


@dataclass(frozen=True)
class FieldPresent:
    """Predicate matching records whose ``dynamic_fields[name]`` exists and is not null."""

    name: str


@dataclass
class EnquiryPatch:
    """Changes applied by :meth:`RecordStore.upsert`.

    ``canonical`` overwrites attributes, ``dynamic_fields`` is merged key by key
    (``None`` removes a key), and ``create_defaults`` only apply to new records.
    """

    canonical: Dict[str, Any] = field(default_factory=dict)
    dynamic_fields: Dict[str, Optional[FieldValue]] = field(default_factory=dict)
    create_defaults: Dict[str, Any] = field(default_factory=dict)


class RecordStore(ABC):
    """
    Persistence abstraction for enquiry records.
    """

    @abstractmethod
    def find(self, filters: Optional[Mapping[str, Any]] = None) -> Sequence[Any]:
        """Return records matching simple attribute equality filters."""

    @abstractmethod
    def find_one(self, key: str) -> Optional[Any]:
        """Return the record with natural key ``key`` or None."""

    @abstractmethod
    def upsert(self, key: str, patch: EnquiryPatch) -> bool:
        """Create or update the record for ``key``; return True when created."""

    @abstractmethod
    def count_where(self, predicate: FieldPresent) -> int:
        """Count records matching ``predicate``."""

    @abstractmethod
    def stream_where(self, predicate: FieldPresent, *, batch_size: int = 200) -> Iterator[Any]:
        """Yield matching records lazily; closing the iterator stops further reads."""

    @abstractmethod
    def bulk_unset_field(self, name: str) -> int:
        """Remove ``name`` from every record's dynamic fields; return how many were touched."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Commit on success, roll back and re-raise on error."""


class FieldDefinitionStore(ABC):
    """
    Persistence abstraction for field definitions.
    """

    @abstractmethod
    def add(self, definition: Any) -> Any:
        """Stage a new definition."""

    @abstractmethod
    def get(self, name: str, *, for_update: bool = False) -> Optional[Any]:
        """Return the definition called ``name``, optionally row-locked."""

    @abstractmethod
    def list_all(self, *, include_inactive: bool = False) -> Sequence[Any]:
        """Return definitions in creation order."""

    @abstractmethod
    def save(self, definition: Any) -> Any:
        """Flush pending changes to ``definition``."""

    @abstractmethod
    def delete(self, definition: Any) -> None:
        """Remove ``definition``."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Commit on success, roll back and re-raise on error."""
