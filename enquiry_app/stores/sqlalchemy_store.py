"""
SQLAlchemy-backed record and field definition stores.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any, Optional

from sqlalchemy.orm import Session

from enquiry_app.fields.values import encode_value
from enquiry_app.models import Enquiry, FieldDefinition, db

from .base import EnquiryPatch, FieldDefinitionStore, FieldPresent, RecordStore


@contextmanager
def _session_transaction(session: Session):
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def _presence_clause(predicate: FieldPresent):
    # JSON null and missing keys both extract as SQL NULL.
    return Enquiry.dynamic_fields[predicate.name].as_string().isnot(None)


class SQLAlchemyRecordStore(RecordStore):
    """
    Persist enquiries through the Flask-SQLAlchemy session.
    """

    def __init__(self, session: Optional[Session] = None, *, batch_size: int = 200) -> None:
        self._session = session if session is not None else db.session
        self._batch_size = max(1, batch_size)

    def find(self, filters: Optional[Mapping[str, Any]] = None) -> Sequence[Enquiry]:
        query = self._session.query(Enquiry)
        if filters:
            query = query.filter_by(**dict(filters))
        return query.order_by(Enquiry.id).all()

    def find_one(self, key: str) -> Optional[Enquiry]:
        return self._session.query(Enquiry).filter_by(enquiry_number=key).one_or_none()

    def upsert(self, key: str, patch: EnquiryPatch) -> bool:
        enquiry = self.find_one(key)
        created = enquiry is None
        if created:
            enquiry = Enquiry(enquiry_number=key, dynamic_fields={})
            for attribute, value in patch.create_defaults.items():
                setattr(enquiry, attribute, value)
            self._session.add(enquiry)

        for attribute, value in patch.canonical.items():
            setattr(enquiry, attribute, value)

        # Reassign rather than mutate so SQLAlchemy detects the JSON change.
        merged = dict(enquiry.dynamic_fields or {})
        for name, value in patch.dynamic_fields.items():
            if value is None:
                merged.pop(name, None)
            else:
                merged[name] = encode_value(value)
        enquiry.dynamic_fields = merged
        enquiry.recompute_fulfillment_time()

        self._session.flush()
        return created

    def count_where(self, predicate: FieldPresent) -> int:
        return self._session.query(Enquiry).filter(_presence_clause(predicate)).count()

    def stream_where(self, predicate: FieldPresent, *, batch_size: Optional[int] = None) -> Iterator[Enquiry]:
        page_size = max(1, batch_size or self._batch_size)
        last_id = 0
        while True:
            page = (
                self._session.query(Enquiry)
                .filter(_presence_clause(predicate), Enquiry.id > last_id)
                .order_by(Enquiry.id)
                .limit(page_size)
                .all()
            )
            if not page:
                return
            yield from page
            if len(page) < page_size:
                return
            last_id = page[-1].id

    def bulk_unset_field(self, name: str) -> int:
        predicate = FieldPresent(name)
        stripped = 0
        last_id = 0
        while True:
            page = (
                self._session.query(Enquiry)
                .filter(_presence_clause(predicate), Enquiry.id > last_id)
                .order_by(Enquiry.id)
                .limit(self._batch_size)
                .all()
            )
            if not page:
                break
            for enquiry in page:
                remaining = dict(enquiry.dynamic_fields or {})
                remaining.pop(name, None)
                enquiry.dynamic_fields = remaining
                stripped += 1
            self._session.flush()
            last_id = page[-1].id
        return stripped

    def transaction(self):
        return _session_transaction(self._session)


class SQLAlchemyFieldDefinitionStore(FieldDefinitionStore):
    """
    Persist field definitions through the Flask-SQLAlchemy session.
    """

    def __init__(self, session: Optional[Session] = None) -> None:
        self._session = session if session is not None else db.session

    def add(self, definition: FieldDefinition) -> FieldDefinition:
        self._session.add(definition)
        self._session.flush()
        return definition

    def get(self, name: str, *, for_update: bool = False) -> Optional[FieldDefinition]:
        query = self._session.query(FieldDefinition).filter_by(name=name)
        if for_update:
            # Rendered as FOR UPDATE on PostgreSQL; SQLite omits it.
            query = query.with_for_update()
        return query.one_or_none()

    def list_all(self, *, include_inactive: bool = False) -> Sequence[FieldDefinition]:
        query = self._session.query(FieldDefinition)
        if not include_inactive:
            query = query.filter(FieldDefinition.is_active.is_(True))
        return query.order_by(FieldDefinition.created_at, FieldDefinition.id).all()

    def save(self, definition: FieldDefinition) -> FieldDefinition:
        self._session.flush()
        return definition

    def delete(self, definition: FieldDefinition) -> None:
        self._session.delete(definition)
        self._session.flush()

    def transaction(self):
        return _session_transaction(self._session)
