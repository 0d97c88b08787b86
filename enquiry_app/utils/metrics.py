"""Prometheus metrics helpers for imports and schema changes."""

from __future__ import annotations

from typing import Literal

from prometheus_client import Counter

_import_rows_counter = Counter(
    "enquiry_import_rows_total",
    "Enquiry import rows processed by outcome.",
    ["outcome"],
)
_import_batches_counter = Counter(
    "enquiry_import_batches_total",
    "Enquiry import batches by final state.",
    ["state"],
)
_type_scan_counter = Counter(
    "field_type_scans_total",
    "Type-safety scans by outcome.",
    ["outcome"],
)
_schema_mutation_counter = Counter(
    "field_schema_mutations_total",
    "Field definition mutations by operation.",
    ["operation"],
)


def record_import_row(outcome: Literal["created", "updated", "failed", "skipped"]) -> None:
    """Increment the per-row import counter."""

    _import_rows_counter.labels(outcome=outcome).inc()


def record_import_batch(state: Literal["completed", "cancelled"]) -> None:
    _import_batches_counter.labels(state=state).inc()


def record_type_scan(outcome: Literal["safe", "unsafe"]) -> None:
    _type_scan_counter.labels(outcome=outcome).inc()


def record_schema_mutation(operation: str) -> None:
    """Count a committed registry mutation (create, update, change_type, delete)."""

    _schema_mutation_counter.labels(operation=operation).inc()
