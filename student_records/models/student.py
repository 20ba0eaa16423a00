from __future__ import annotations

import datetime as dt
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from student_records.db.base_class import Base


# record key -> column attribute
RECORD_COLUMNS = {
    "id": "student_id",
    "name": "name",
    "gender": "gender",
    "dateOfBirth": "date_of_birth",
    "email": "email",
    "contactNo": "contact_no",
    "emergencyContactNo": "emergency_contact_no",
    "bloodGroup": "blood_group",
    "presentAddress": "present_address",
    "permanentAddress": "permanent_address",
    "guardian": "guardian",
    "localGuardian": "local_guardian",
    "profileImg": "profile_img",
    "isActive": "is_active",
}


class Student(Base):
    """A persisted student record.

    Name, guardian and local guardian are owned sub-records with no identity
    of their own, so they live in JSON columns on the row.
    """

    __tablename__ = "students"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False
    )
    name: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    gender: Mapped[str] = mapped_column(String(16), nullable=False)
    date_of_birth: Mapped[str] = mapped_column(String(10), nullable=False)
    email: Mapped[str] = mapped_column(
        String(320), unique=True, index=True, nullable=False
    )
    contact_no: Mapped[str] = mapped_column(String(32), nullable=False)
    emergency_contact_no: Mapped[str] = mapped_column(String(32), nullable=False)
    blood_group: Mapped[str | None] = mapped_column(String(3), nullable=True)
    present_address: Mapped[str] = mapped_column(String(512), nullable=False)
    permanent_address: Mapped[str] = mapped_column(String(512), nullable=False)
    guardian: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    local_guardian: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    profile_img: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    is_active: Mapped[str] = mapped_column(String(16), default="active", nullable=False)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(tz=dt.UTC),
        nullable=False,
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(tz=dt.UTC),
        onupdate=lambda: dt.datetime.now(tz=dt.UTC),
        nullable=False,
    )

    def to_record(self) -> dict[str, Any]:
        return {key: getattr(self, attr) for key, attr in RECORD_COLUMNS.items()}
