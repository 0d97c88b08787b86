"""
Field definition registry.

Owns the lifecycle of dynamic field definitions: creation, attribute edits,
type changes guarded by the type-safety scanner, and two-phase deletion.
Every mutation runs in a single store transaction.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from enquiry_app.models.field_definition import FIELD_NAME_PATTERN, FieldDefinition, FieldType
from enquiry_app.stores.base import FieldDefinitionStore, FieldPresent, RecordStore
from enquiry_app.utils.logging_config import get_logger
from enquiry_app.utils.metrics import record_schema_mutation

from .exceptions import (
    ConfirmationRequiredError,
    DuplicateFieldError,
    FieldNotFoundError,
    ImmutableIdentityError,
    InvalidDefinitionError,
    UnsafeTypeChangeError,
)
from .scanner import TypeSafetyScanner

FIELD_NAME_MAX_LENGTH = 100

# Accepted keyword spellings for update(); values are model attribute names.
_UPDATE_KEYS = {
    "name": "name",
    "label": "label",
    "type": "field_type",
    "field_type": "field_type",
    "options": "options",
    "required": "is_required",
    "is_required": "is_required",
    "description": "description",
    "active": "is_active",
    "is_active": "is_active",
}


def normalize_field_name(raw: Any) -> str:
    """Trim, lowercase and validate a field name slug."""
    name = str(raw or "").strip().lower()
    if not name or not FIELD_NAME_PATTERN.match(name):
        raise InvalidDefinitionError(
            "Field name can only contain lowercase letters, numbers, and underscores"
        )
    if len(name) > FIELD_NAME_MAX_LENGTH:
        raise InvalidDefinitionError(f"Field name cannot exceed {FIELD_NAME_MAX_LENGTH} characters")
    return name


def normalize_options(options: Optional[Iterable[Any]]) -> List[str]:
    """Stringify, trim and de-duplicate options, keeping first-seen order."""
    if options is None:
        return []
    if isinstance(options, str):
        raise InvalidDefinitionError("Options must be a list of strings")
    cleaned: List[str] = []
    for option in options:
        if option is None:
            continue
        text = str(option).strip()
        if text and text not in cleaned:
            cleaned.append(text)
    return cleaned


def _normalize_label(raw: Any) -> str:
    label = str(raw or "").strip()
    if not label:
        raise InvalidDefinitionError("Field label is required")
    return label


def _normalize_type(raw: Any) -> FieldType:
    try:
        return FieldType.coerce(raw)
    except ValueError as exc:
        raise InvalidDefinitionError(str(exc)) from exc


class FieldDefinitionRegistry:
    """Create, edit, retype and delete dynamic field definitions."""

    def __init__(
        self,
        definitions: FieldDefinitionStore,
        records: RecordStore,
        *,
        scanner: Optional[TypeSafetyScanner] = None,
        scan_batch_size: int = 200,
    ) -> None:
        self.definitions = definitions
        self.records = records
        self.scanner = scanner or TypeSafetyScanner(records, batch_size=scan_batch_size)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def find(self, name: str) -> Optional[FieldDefinition]:
        return self.definitions.get(str(name or "").strip().lower())

    def get(self, name: str) -> FieldDefinition:
        definition = self.find(name)
        if definition is None:
            raise FieldNotFoundError(name)
        return definition

    def list(self, *, include_inactive: bool = False) -> Sequence[FieldDefinition]:
        return self.definitions.list_all(include_inactive=include_inactive)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def create(
        self,
        name: str,
        label: str,
        field_type: Any = FieldType.TEXT,
        options: Optional[Iterable[Any]] = None,
        required: bool = False,
        description: Optional[str] = None,
    ) -> FieldDefinition:
        slug = normalize_field_name(name)
        clean_label = _normalize_label(label)
        resolved_type = _normalize_type(field_type or FieldType.TEXT)
        clean_options = normalize_options(options)
        if resolved_type is FieldType.SELECT and not clean_options:
            raise InvalidDefinitionError("Select type fields must have at least one option")

        with self.definitions.transaction():
            if self.definitions.get(slug) is not None:
                raise DuplicateFieldError(slug)
            definition = FieldDefinition(
                name=slug,
                label=clean_label,
                field_type=resolved_type,
                options=clean_options,
                is_required=bool(required),
                description=(description or None),
                is_active=True,
            )
            self.definitions.add(definition)

        record_schema_mutation("create")
        get_logger(__name__).info("Created field definition '%s' (%s)", slug, resolved_type.value)
        return definition

    def get_or_create(self, name: str, label: str) -> Tuple[FieldDefinition, bool]:
        """Return the named definition, creating an active text field when missing."""
        existing = self.find(name)
        if existing is not None:
            return existing, False
        try:
            return self.create(name, label, FieldType.TEXT), True
        except DuplicateFieldError:
            # Lost a creation race; the other writer's definition wins.
            return self.get(name), False

    # ------------------------------------------------------------------
    # Attribute edits
    # ------------------------------------------------------------------
    def rename(self, name: str, new_name: str) -> FieldDefinition:
        return self.update(name, name=new_name)

    def relabel(self, name: str, label: str) -> FieldDefinition:
        return self.update(name, label=label)

    def update_options(self, name: str, options: Iterable[Any]) -> FieldDefinition:
        return self.update(name, options=options)

    def update_required(self, name: str, required: bool) -> FieldDefinition:
        return self.update(name, required=required)

    def update_active(self, name: str, active: bool) -> FieldDefinition:
        return self.update(name, active=active)

    def update_description(self, name: str, description: Optional[str]) -> FieldDefinition:
        return self.update(name, description=description)

    def change_type(
        self,
        name: str,
        new_type: Any,
        new_options: Optional[Iterable[Any]] = None,
    ) -> FieldDefinition:
        changes: Dict[str, Any] = {"type": new_type}
        if new_options is not None:
            changes["options"] = new_options
        return self.update(name, **changes)

    def update(self, field_name: str, /, **changes: Any) -> FieldDefinition:
        """Apply a combined edit atomically; type changes and option narrowing are scanned first."""
        normalized = self._normalize_changes(changes)

        with self.definitions.transaction():
            definition = self._require(field_name, for_update=True)
            if "name" in normalized and normalized["name"] != definition.name:
                raise ImmutableIdentityError(definition.name, str(changes.get("name")))
            type_changed = self._apply_type_and_options(definition, normalized)
            for attribute in ("label", "is_required", "description", "is_active"):
                if attribute in normalized:
                    setattr(definition, attribute, normalized[attribute])
            self.definitions.save(definition)

        operation = "change_type" if type_changed else "update"
        record_schema_mutation(operation)
        get_logger(__name__).info(
            "Updated field definition '%s' (%s)", definition.name, ", ".join(sorted(normalized)) or "no changes"
        )
        return definition

    def _normalize_changes(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        normalized: Dict[str, Any] = {}
        for key, value in changes.items():
            attribute = _UPDATE_KEYS.get(key)
            if attribute is None:
                raise InvalidDefinitionError(f"Unknown field attribute '{key}'")
            if attribute == "name":
                normalized["name"] = str(value or "").strip().lower()
            elif attribute == "label":
                normalized["label"] = _normalize_label(value)
            elif attribute == "field_type":
                normalized["field_type"] = _normalize_type(value)
            elif attribute == "options":
                normalized["options"] = normalize_options(value)
            elif attribute == "description":
                normalized["description"] = value or None
            else:
                normalized[attribute] = bool(value)
        return normalized

    def _apply_type_and_options(self, definition: FieldDefinition, changes: Dict[str, Any]) -> bool:
        current_type = definition.field_type
        new_type = changes.get("field_type", current_type)
        new_options = changes["options"] if "options" in changes else list(definition.option_values)

        if new_type is not current_type:
            self._ensure_representable(definition.name, new_type, new_options)
            definition.field_type = new_type
            definition.options = list(new_options)
            return True

        if "options" in changes:
            if new_type is FieldType.SELECT:
                if not new_options:
                    raise InvalidDefinitionError("Select type fields must have at least one option")
                removed = set(definition.option_values) - set(new_options)
                if removed:
                    self._ensure_representable(definition.name, new_type, new_options)
            definition.options = list(new_options)
        return False

    def _ensure_representable(self, name: str, field_type: FieldType, options: Sequence[str]) -> None:
        result = self.scanner.scan(name, field_type, options)
        if not result.safe:
            raise UnsafeTypeChangeError(name, result.reason or "incompatible data", result.records_examined)

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------
    def delete(self, name: str, *, force: bool = False) -> int:
        """Delete a definition, returning how many records lost a value.

        Raises :class:`ConfirmationRequiredError` without mutating anything when
        records still hold a value and ``force`` is false.
        """
        with self.definitions.transaction():
            definition = self._require(name, for_update=True)
            field_name = definition.name
            affected = self.records.count_where(FieldPresent(field_name))
            if affected and not force:
                raise ConfirmationRequiredError(field_name, affected)
            stripped = self.records.bulk_unset_field(field_name) if affected else 0
            self.definitions.delete(definition)

        record_schema_mutation("delete")
        get_logger(__name__).info(
            "Deleted field definition '%s' (values removed from %s enquiries)", field_name, stripped
        )
        return affected

    def _require(self, name: str, *, for_update: bool = False) -> FieldDefinition:
        slug = str(name or "").strip().lower()
        definition = self.definitions.get(slug, for_update=for_update)
        if definition is None:
            raise FieldNotFoundError(name)
        return definition
