from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from student_records.core.logging import get_logger
from student_records.models.student import Student
from student_records.schemas.students import STUDENT
from student_records.services.student_store import StudentStore
from student_records.validation import (
    DuplicateKeyError,
    StudentValidationError,
    ValidationResult,
    validate,
)


def validate_student(
    payload: Mapping[str, Any], store: StudentStore | None = None
) -> ValidationResult:
    """Validate a full candidate record; ``store`` enables uniqueness checks."""
    return validate(STUDENT, payload, index=store)


def _reject(result: ValidationResult, **context: Any) -> None:
    get_logger().info(
        "student.validation.failed",
        violations=[f"{v.field}:{v.kind.value}" for v in result.violations],
        **context,
    )
    raise StudentValidationError(result.violations)


def get_student(db: Session, student_id: str) -> Student | None:
    return StudentStore(db).get_by_id(student_id)


def create_student(db: Session, payload: Mapping[str, Any]) -> Student:
    store = StudentStore(db)
    result = validate_student(payload, store)
    if not result.ok:
        _reject(result, action="create")

    try:
        st = store.insert(result.record)
    except DuplicateKeyError as exc:
        # lost a race with a concurrent insert
        raise StudentValidationError([exc.to_violation()]) from exc

    get_logger().info("student.created", student_id=st.student_id)
    return st


def update_student(
    db: Session, student_id: str, changes: Mapping[str, Any]
) -> Student:
    """Apply ``changes`` to a stored record, re-validating only what changed.

    Sub-record patches are merged over the stored sub-record, then the
    merged sub-record is validated whole. Raises ``LookupError`` when the
    record does not exist.
    """
    store = StudentStore(db)
    st = store.get_by_id(student_id)
    if st is None:
        raise LookupError(student_id)

    current = st.to_record()
    patch: dict[str, Any] = dict(changes)
    for key in ("name", "guardian", "localGuardian"):
        if isinstance(patch.get(key), Mapping):
            patch[key] = {**current[key], **patch[key]}

    result = validate(STUDENT, patch, partial=True)
    if not result.ok:
        _reject(result, action="update", student_id=student_id)

    normalized = {
        key: value for key, value in result.record.items() if current.get(key) != value
    }
    # only keys that actually change need the uniqueness pre-check
    unique_probe = {k: v for k, v in normalized.items() if k in ("id", "email")}
    if unique_probe:
        checked = validate(STUDENT, unique_probe, index=store, partial=True)
        if not checked.ok:
            _reject(checked, action="update", student_id=student_id)

    if not normalized:
        return st

    try:
        st = store.update(student_id, normalized)
    except DuplicateKeyError as exc:
        raise StudentValidationError([exc.to_violation()]) from exc

    get_logger().info(
        "student.updated", student_id=st.student_id, fields=sorted(normalized)
    )
    return st


def block_student(db: Session, student_id: str) -> Student:
    st = update_student(db, student_id, {"isActive": "blocked"})
    get_logger().info("student.blocked", student_id=student_id)
    return st


def delete_student(db: Session, student_id: str) -> bool:
    deleted = StudentStore(db).delete(student_id)
    if deleted:
        get_logger().info("student.deleted", student_id=student_id)
    return deleted
