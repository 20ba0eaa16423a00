from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from student_records.validation import Field, Nested, Schema, Violation
from student_records.validation.rules import (
    Alpha,
    Alphanumeric,
    Date,
    Default,
    Email,
    MaxLength,
    OneOf,
    Phone,
    Required,
    Trim,
    Unique,
    Url,
)

GENDERS = ("male", "female", "other")
BLOOD_GROUPS = ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")
STATUSES = ("active", "blocked")

NAME_MAX = 20

_NOT_A_NAME = "{value} is not a valid name. Only letters are allowed."

PERSON_NAME = Schema(
    "name",
    (
        Field(
            "firstName",
            Trim(),
            Required("First name is required and cannot be empty"),
            MaxLength(NAME_MAX, f"First name cannot be more than {NAME_MAX} characters"),
            Alpha(),
        ),
        Field("middleName", Trim(), Alpha()),
        Field(
            "lastName",
            Trim(),
            Required("Last name is required and cannot be empty"),
            MaxLength(NAME_MAX, f"Last name cannot be more than {NAME_MAX} characters"),
            Alpha(),
        ),
    ),
)

GUARDIAN = Schema(
    "guardian",
    (
        Field("fatherName", Trim(), Required("Father's name is required"), Alpha(_NOT_A_NAME)),
        Field("fatherOccupation", Trim(), Required("Father's occupation is required")),
        Field(
            "fatherContactNo",
            Trim(),
            Required("Father's contact number is required"),
            Phone(),
        ),
        Field("motherName", Trim(), Required("Mother's name is required"), Alpha(_NOT_A_NAME)),
        Field("motherOccupation", Trim(), Required("Mother's occupation is required")),
        Field(
            "motherContactNo",
            Trim(),
            Required("Mother's contact number is required"),
            Phone(),
        ),
    ),
)

LOCAL_GUARDIAN = Schema(
    "localGuardian",
    (
        Field("name", Trim(), Required("Local guardian's name is required"), Alpha(_NOT_A_NAME)),
        Field("occupation", Trim(), Required("Local guardian's occupation is required")),
        Field(
            "contactNo",
            Trim(),
            Required("Local guardian's contact number is required"),
            Phone(),
        ),
        Field("address", Trim(), Required("Local guardian's address is required")),
    ),
)

STUDENT = Schema(
    "student",
    (
        Field(
            "id",
            Trim(),
            Required("Student ID is required"),
            Alphanumeric(
                "{value} is not a valid student ID. "
                "Only alphanumeric characters are allowed."
            ),
            Unique("exists_by_id", "Student ID {value} already exists"),
        ),
        Nested("name", PERSON_NAME, "Student name is required"),
        Field(
            "gender",
            Trim(),
            Required("Gender is required"),
            OneOf(
                GENDERS,
                "{value} is not a valid gender. "
                "Valid values are: male, female, or other",
            ),
        ),
        Field("dateOfBirth", Trim(), Required("Date of birth is required"), Date()),
        Field(
            "email",
            Trim(),
            Required("Email address is required"),
            Email(),
            Unique("exists_by_email", "Email address {value} is already registered"),
        ),
        Field(
            "contactNo",
            Trim(),
            Required("Contact number is required"),
            Phone("{value} is not a valid contact number"),
        ),
        Field(
            "emergencyContactNo",
            Trim(),
            Required("Emergency contact number is required"),
            Phone("{value} is not a valid emergency contact number"),
        ),
        Field(
            "bloodGroup",
            Trim(),
            OneOf(
                BLOOD_GROUPS,
                "{value} is not a valid blood group. "
                "Valid values are: A+, A-, B+, B-, AB+, AB-, O+, O-",
            ),
        ),
        Field("presentAddress", Trim(), Required("Present address is required")),
        Field("permanentAddress", Trim(), Required("Permanent address is required")),
        Nested("guardian", GUARDIAN, "Guardian details are required"),
        Nested("localGuardian", LOCAL_GUARDIAN, "Local guardian details are required"),
        Field("profileImg", Trim(), Url()),
        Field(
            "isActive",
            Trim(),
            Default("active"),
            OneOf(
                STATUSES,
                "{value} is not a valid status. Valid values are: active, blocked",
            ),
        ),
    ),
)


class PersonNameOut(BaseModel):
    firstName: str
    middleName: str | None = None
    lastName: str


class GuardianOut(BaseModel):
    fatherName: str
    fatherOccupation: str
    fatherContactNo: str
    motherName: str
    motherOccupation: str
    motherContactNo: str


class LocalGuardianOut(BaseModel):
    name: str
    occupation: str
    contactNo: str
    address: str


class StudentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: PersonNameOut
    gender: str
    dateOfBirth: str
    email: str
    contactNo: str
    emergencyContactNo: str
    bloodGroup: str | None = None
    presentAddress: str
    permanentAddress: str
    guardian: GuardianOut
    localGuardian: LocalGuardianOut
    profileImg: str | None = None
    isActive: str


class ViolationsOut(BaseModel):
    detail: str
    violations: list[Violation]
