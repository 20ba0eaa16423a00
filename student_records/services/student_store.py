from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from student_records.core.logging import get_logger
from student_records.models.student import RECORD_COLUMNS, Student
from student_records.validation.errors import DuplicateKeyError

# unique record keys, checked in this order when the database rejects a write
UNIQUE_KEYS = ("id", "email")


class StudentStore:
    """Storage collaborator for student records.

    The unique constraints on ``student_id`` and ``email`` are the
    authoritative guarantee; ``exists_by_*`` only back the validator's
    advisory pre-check.
    """

    def __init__(self, db: Session):
        self.db = db

    def exists_by_id(self, student_id: str) -> bool:
        stmt = select(Student.pk).where(Student.student_id == student_id)
        return self.db.execute(stmt).first() is not None

    def exists_by_email(self, email: str) -> bool:
        stmt = select(Student.pk).where(Student.email == email)
        return self.db.execute(stmt).first() is not None

    def get_by_id(self, student_id: str) -> Student | None:
        stmt = select(Student).where(Student.student_id == student_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def insert(self, record: Mapping[str, Any]) -> Student:
        st = Student(
            **{RECORD_COLUMNS[key]: value for key, value in record.items()}
        )
        self.db.add(st)
        self._commit(record)
        self.db.refresh(st)
        return st

    def update(self, student_id: str, changes: Mapping[str, Any]) -> Student | None:
        st = self.get_by_id(student_id)
        if st is None:
            return None
        for key, value in changes.items():
            # sub-records are replaced whole so JSON columns see the change
            setattr(st, RECORD_COLUMNS[key], value)
        self._commit(changes)
        self.db.refresh(st)
        return st

    def delete(self, student_id: str) -> bool:
        st = self.get_by_id(student_id)
        if st is None:
            return False
        self.db.delete(st)
        self.db.commit()
        return True

    def _commit(self, record: Mapping[str, Any]) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            field, value = self._conflicting_key(record)
            get_logger().warning(
                "student.duplicate_key", field=field, value=value, error=str(exc.orig)
            )
            raise DuplicateKeyError(field, value) from exc

    def _conflicting_key(self, record: Mapping[str, Any]) -> tuple[str, Any]:
        for key in UNIQUE_KEYS:
            if key not in record:
                continue
            probe = self.exists_by_id if key == "id" else self.exists_by_email
            if probe(record[key]):
                return key, record[key]
        # constraint name is driver specific; fall back to the primary key
        return "id", record.get("id")
