"""Declarative record validation: rule objects, schemas and the engine."""
from student_records.validation.engine import (
    Field,
    Nested,
    Schema,
    UniqueIndex,
    ValidationResult,
    validate,
)
from student_records.validation.errors import (
    DuplicateKeyError,
    StudentValidationError,
    Violation,
    ViolationKind,
)

__all__ = [
    "DuplicateKeyError",
    "Field",
    "Nested",
    "Schema",
    "StudentValidationError",
    "UniqueIndex",
    "ValidationResult",
    "Violation",
    "ViolationKind",
    "validate",
]
