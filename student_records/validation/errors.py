from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


class ViolationKind(str, Enum):
    MISSING_FIELD = "MissingField"
    TOO_LONG = "TooLong"
    INVALID_FORMAT = "InvalidFormat"
    INVALID_ENUM = "InvalidEnum"
    DUPLICATE_KEY = "DuplicateKey"


class Violation(BaseModel):
    field: str
    kind: ViolationKind
    value: Any = None
    message: str


class StudentValidationError(ValueError):
    """Raised by the record service when a payload is not admissible.

    Carries every violation found in one pass, in evaluation order.
    """

    def __init__(self, violations: list[Violation]):
        self.violations = violations
        fields = ", ".join(v.field for v in violations)
        super().__init__(f"invalid student record: {fields}")

    @property
    def only_duplicates(self) -> bool:
        return bool(self.violations) and all(
            v.kind == ViolationKind.DUPLICATE_KEY for v in self.violations
        )


class DuplicateKeyError(Exception):
    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"duplicate value for {field}: {value!r}")

    def to_violation(self) -> Violation:
        return Violation(
            field=self.field,
            kind=ViolationKind.DUPLICATE_KEY,
            value=self.value,
            message=f"{self.value} is already in use",
        )
