import pytest

from student_records.schemas.students import GENDERS, STUDENT
from student_records.validation import ViolationKind, validate
from tests.factories import FakeIndex, make_payload


def kinds(result):
    return [(v.field, v.kind) for v in result.violations]


def test_valid_record_is_accepted_and_normalized(valid_payload):
    result = validate(STUDENT, valid_payload, index=FakeIndex())

    assert result.ok
    assert result.record["isActive"] == "active"
    assert result.record["id"] == "S123"
    assert result.record["name"] == {"firstName": "Ann", "lastName": "Lee"}
    assert result.record["dateOfBirth"] == "2005-04-01"
    assert result.record["guardian"]["motherContactNo"] == "+11234567893"


def test_invalid_email_is_the_only_violation():
    result = validate(STUDENT, make_payload(email="not-an-email"), index=FakeIndex())

    assert len(result.violations) == 1
    violation = result.violations[0]
    assert violation.field == "email"
    assert violation.kind == ViolationKind.INVALID_FORMAT
    assert violation.value == "not-an-email"
    assert violation.message == "not-an-email is not a valid email address"


@pytest.mark.parametrize(
    "field",
    [
        "id",
        "name",
        "gender",
        "dateOfBirth",
        "email",
        "contactNo",
        "emergencyContactNo",
        "presentAddress",
        "permanentAddress",
        "guardian",
        "localGuardian",
    ],
)
def test_missing_top_level_field(field):
    payload = make_payload()
    del payload[field]

    result = validate(STUDENT, payload)

    assert kinds(result) == [(field, ViolationKind.MISSING_FIELD)]


@pytest.mark.parametrize(
    "parent,field",
    [
        ("name", "firstName"),
        ("name", "lastName"),
        ("guardian", "fatherName"),
        ("guardian", "fatherOccupation"),
        ("guardian", "fatherContactNo"),
        ("guardian", "motherName"),
        ("guardian", "motherOccupation"),
        ("guardian", "motherContactNo"),
        ("localGuardian", "name"),
        ("localGuardian", "occupation"),
        ("localGuardian", "contactNo"),
        ("localGuardian", "address"),
    ],
)
def test_missing_nested_field(parent, field):
    payload = make_payload()
    del payload[parent][field]

    result = validate(STUDENT, payload)

    assert kinds(result) == [(f"{parent}.{field}", ViolationKind.MISSING_FIELD)]


@pytest.mark.parametrize("blank", ["", "   ", None])
def test_blank_required_value_counts_as_missing(blank):
    result = validate(STUDENT, make_payload(presentAddress=blank))

    assert kinds(result) == [("presentAddress", ViolationKind.MISSING_FIELD)]
    assert result.violations[0].message == "Present address is required"
    assert result.violations[0].value == blank


@pytest.mark.parametrize("field", ["firstName", "lastName"])
def test_name_longer_than_twenty_is_too_long(field):
    payload = make_payload()
    payload["name"][field] = "A" * 21

    result = validate(STUDENT, payload)

    assert kinds(result) == [(f"name.{field}", ViolationKind.TOO_LONG)]
    assert result.violations[0].message.endswith("cannot be more than 20 characters")


def test_name_of_exactly_twenty_letters_passes():
    payload = make_payload()
    payload["name"]["firstName"] = "A" * 20
    payload["name"]["lastName"] = "B" * 20

    assert validate(STUDENT, payload).ok


@pytest.mark.parametrize("value", ["Ann1", "Ann Marie", "O'Neil", "J."])
@pytest.mark.parametrize("field", ["firstName", "middleName", "lastName"])
def test_non_alphabetic_names_are_invalid(field, value):
    payload = make_payload()
    payload["name"][field] = value

    result = validate(STUDENT, payload)

    assert kinds(result) == [(f"name.{field}", ViolationKind.INVALID_FORMAT)]


def test_guardian_names_must_be_alphabetic():
    payload = make_payload()
    payload["guardian"]["fatherName"] = "Tom2"
    payload["localGuardian"]["name"] = "Kim Lee"

    result = validate(STUDENT, payload)

    assert kinds(result) == [
        ("guardian.fatherName", ViolationKind.INVALID_FORMAT),
        ("localGuardian.name", ViolationKind.INVALID_FORMAT),
    ]
    assert result.violations[0].message == (
        "Tom2 is not a valid name. Only letters are allowed."
    )


def test_middle_name_is_optional():
    payload = make_payload()
    payload["name"]["middleName"] = "  "

    result = validate(STUDENT, payload)

    assert result.ok
    assert "middleName" not in result.record["name"]


@pytest.mark.parametrize("gender", GENDERS)
def test_listed_genders_pass(gender):
    assert validate(STUDENT, make_payload(gender=gender)).ok


@pytest.mark.parametrize("gender", ["Male", "unknown", "f", "FEMALE"])
def test_unlisted_gender_is_invalid_enum(gender):
    result = validate(STUDENT, make_payload(gender=gender))

    assert kinds(result) == [("gender", ViolationKind.INVALID_ENUM)]
    assert result.violations[0].message == (
        f"{gender} is not a valid gender. Valid values are: male, female, or other"
    )


def test_id_must_be_alphanumeric():
    result = validate(STUDENT, make_payload(id="S-123"))

    assert kinds(result) == [("id", ViolationKind.INVALID_FORMAT)]


def test_blood_group_is_optional_but_enumerated():
    payload = make_payload()
    del payload["bloodGroup"]
    assert validate(STUDENT, payload).ok

    result = validate(STUDENT, make_payload(bloodGroup="C+"))
    assert kinds(result) == [("bloodGroup", ViolationKind.INVALID_ENUM)]


def test_profile_image_url_is_checked_only_when_present():
    assert validate(STUDENT, make_payload(profileImg="")).ok
    assert validate(
        STUDENT, make_payload(profileImg="https://cdn.school.edu/ann.png")
    ).ok

    result = validate(STUDENT, make_payload(profileImg="just-text"))
    assert kinds(result) == [("profileImg", ViolationKind.INVALID_FORMAT)]


def test_status_default_and_enumeration():
    assert validate(STUDENT, make_payload(isActive="blocked")).record["isActive"] == (
        "blocked"
    )
    assert validate(STUDENT, make_payload(isActive="  ")).record["isActive"] == "active"

    result = validate(STUDENT, make_payload(isActive="deleted"))
    assert kinds(result) == [("isActive", ViolationKind.INVALID_ENUM)]


def test_values_are_trimmed_before_rules():
    payload = make_payload(email="  ann@x.com ", id=" S123 ")
    payload["name"]["firstName"] = "  Ann  "

    result = validate(STUDENT, payload)

    assert result.ok
    assert result.record["email"] == "ann@x.com"
    assert result.record["id"] == "S123"
    assert result.record["name"]["firstName"] == "Ann"


def test_date_of_birth_is_normalized():
    result = validate(STUDENT, make_payload(dateOfBirth="2005/4/1"))

    assert result.record["dateOfBirth"] == "2005-04-01"


def test_unknown_keys_are_dropped():
    payload = make_payload(nickname="Annie")
    payload["guardian"]["uncle"] = "Bob"

    result = validate(STUDENT, payload)

    assert result.ok
    assert "nickname" not in result.record
    assert "uncle" not in result.record["guardian"]


def test_non_text_and_non_object_values_are_invalid_format():
    result = validate(STUDENT, make_payload(gender=5, guardian="dad"))

    assert kinds(result) == [
        ("guardian", ViolationKind.INVALID_FORMAT),
        ("gender", ViolationKind.INVALID_FORMAT),
    ]


def test_all_violations_are_collected_sub_records_first():
    payload = make_payload(email="nope", gender="robot")
    payload["name"]["firstName"] = "Ann1"
    payload["guardian"]["fatherContactNo"] = "call me"
    del payload["localGuardian"]["address"]

    result = validate(STUDENT, payload)

    assert kinds(result) == [
        ("name.firstName", ViolationKind.INVALID_FORMAT),
        ("guardian.fatherContactNo", ViolationKind.INVALID_FORMAT),
        ("localGuardian.address", ViolationKind.MISSING_FIELD),
        ("gender", ViolationKind.INVALID_ENUM),
        ("email", ViolationKind.INVALID_FORMAT),
    ]


def test_duplicate_id_is_reported():
    index = FakeIndex(ids={"S123"})

    result = validate(STUDENT, make_payload(), index=index)

    assert kinds(result) == [("id", ViolationKind.DUPLICATE_KEY)]
    assert result.violations[0].message == "Student ID S123 already exists"


def test_duplicate_id_and_email_are_both_reported():
    index = FakeIndex(ids={"S123"}, emails={"ann@x.com"})

    result = validate(STUDENT, make_payload(), index=index)

    assert kinds(result) == [
        ("id", ViolationKind.DUPLICATE_KEY),
        ("email", ViolationKind.DUPLICATE_KEY),
    ]


def test_uniqueness_is_not_checked_when_shape_is_invalid():
    index = FakeIndex(ids={"S123"})

    result = validate(STUDENT, make_payload(email="nope"), index=index)

    assert kinds(result) == [("email", ViolationKind.INVALID_FORMAT)]
    assert index.calls == []


def test_partial_validation_checks_present_keys_only():
    assert validate(STUDENT, {}, partial=True).ok

    result = validate(STUDENT, {"email": "nope", "gender": "male"}, partial=True)
    assert kinds(result) == [("email", ViolationKind.INVALID_FORMAT)]
    assert "isActive" not in result.record


def test_non_mapping_payload_is_rejected():
    result = validate(STUDENT, ["S123"])

    assert kinds(result) == [("student", ViolationKind.INVALID_FORMAT)]


def test_partial_validation_keeps_cleared_optional_keys():
    result = validate(STUDENT, {"profileImg": "  ", "bloodGroup": None}, partial=True)

    assert result.ok
    assert result.record == {"profileImg": None, "bloodGroup": None}
