"""
Errors raised by the dynamic field schema engine.
"""

from __future__ import annotations


class FieldSchemaError(Exception):
    """Base class for field definition failures."""


class DuplicateFieldError(FieldSchemaError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Field with name '{name}' already exists")


class InvalidDefinitionError(FieldSchemaError):
    """Raised when a definition would violate its own invariants."""


class ImmutableIdentityError(FieldSchemaError):
    def __init__(self, name: str, attempted: str):
        self.name = name
        self.attempted = attempted
        super().__init__(f"Field name cannot be changed (attempted '{name}' -> '{attempted}')")


class FieldNotFoundError(FieldSchemaError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Field '{name}' not found")


class UnsafeTypeChangeError(FieldSchemaError):
    """Existing data cannot be represented under the proposed type."""

    def __init__(self, name: str, reason: str, records_examined: int):
        self.name = name
        self.reason = reason
        self.records_examined = records_examined
        super().__init__(f"Cannot change type of '{name}': {reason}")


class ConfirmationRequiredError(FieldSchemaError):
    """Deleting a populated field needs an explicit force."""

    def __init__(self, name: str, affected_count: int):
        self.name = name
        self.affected_count = affected_count
        super().__init__(
            f"Field '{name}' is used in {affected_count} enquiries. Deleting it will remove data from those records."
        )
