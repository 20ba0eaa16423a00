"""Field rules.

Each rule takes an already-trimmed value and returns ``(value, error)``.
``error`` is ``None`` when the rule passes; otherwise it is the formatted
message and the rule's ``kind`` tells the engine how to classify it.
Rules that normalize (``Trim``, ``Default``, ``Date``) return the new value.
"""
from __future__ import annotations

import ipaddress
import re
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import AnyUrl, EmailStr, TypeAdapter, ValidationError

from student_records.validation.errors import ViolationKind

_ALPHA_RE = re.compile(r"^[A-Za-z]+$")
_ALPHANUMERIC_RE = re.compile(r"^[A-Za-z0-9]+$")
_PHONE_RE = re.compile(
    r"^\+?(?:\d{1,3}[ .-]?)?(?:\(\d{1,4}\)[ .-]?)?\d+(?:[ .-]\d+)*$",
    re.ASCII,
)
_DATE_RE = re.compile(r"^\d{4}([-/])\d{1,2}\1\d{1,2}$")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:(?!\d)")
_TLD_RE = re.compile(r"^[a-z]{2,63}$", re.IGNORECASE)

_email_adapter = TypeAdapter(EmailStr)
_url_adapter = TypeAdapter(AnyUrl)

PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 15
URL_SCHEMES = ("http", "https", "ftp")


class Rule:
    kind: ViolationKind = ViolationKind.INVALID_FORMAT
    # presence rules still run when the value is absent
    runs_on_missing: bool = False
    message: str = "{value} is not valid"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message

    def check(self, value: Any) -> tuple[Any, str | None]:
        if self.accepts(value):
            return value, None
        return value, self.message.format(value=value)

    def accepts(self, value: Any) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Trim(Rule):
    runs_on_missing = True

    def check(self, value: Any) -> tuple[Any, str | None]:
        if isinstance(value, str):
            value = value.strip()
            # empty after trimming counts as absent
            if not value:
                return None, None
        return value, None


class Default(Rule):
    runs_on_missing = True

    def __init__(self, value: Any):
        super().__init__()
        self.value = value

    def check(self, value: Any) -> tuple[Any, str | None]:
        if value is None:
            return self.value, None
        return value, None


class Required(Rule):
    kind = ViolationKind.MISSING_FIELD
    runs_on_missing = True
    message = "This field is required"

    def accepts(self, value: Any) -> bool:
        return value is not None


class MaxLength(Rule):
    kind = ViolationKind.TOO_LONG

    def __init__(self, limit: int, message: str | None = None):
        super().__init__(message or f"Cannot be more than {limit} characters")
        self.limit = limit

    def accepts(self, value: str) -> bool:
        return len(value) <= self.limit


class Alpha(Rule):
    message = "{value} is not a valid format. Only letters are allowed."

    def accepts(self, value: str) -> bool:
        return bool(_ALPHA_RE.fullmatch(value))


class Alphanumeric(Rule):
    message = "{value} is not valid. Only alphanumeric characters are allowed."

    def accepts(self, value: str) -> bool:
        return bool(_ALPHANUMERIC_RE.fullmatch(value))


class Phone(Rule):
    """Permissive, locale-agnostic phone number check."""

    message = "{value} is not a valid phone number"

    def accepts(self, value: str) -> bool:
        if not _PHONE_RE.fullmatch(value):
            return False
        digits = sum(ch in "0123456789" for ch in value)
        return PHONE_MIN_DIGITS <= digits <= PHONE_MAX_DIGITS


class Email(Rule):
    message = "{value} is not a valid email address"

    def accepts(self, value: str) -> bool:
        try:
            _email_adapter.validate_python(value)
        except ValidationError:
            return False
        return True


class Date(Rule):
    message = "{value} is not a valid date format. Please use YYYY-MM-DD format."

    def check(self, value: str) -> tuple[Any, str | None]:
        match = _DATE_RE.fullmatch(value)
        if match:
            sep = match.group(1)
            try:
                parsed = datetime.strptime(value, f"%Y{sep}%m{sep}%d").date()
            except ValueError:
                parsed = None
            if parsed is not None:
                return parsed.isoformat(), None
        return value, self.message.format(value=value)


class Url(Rule):
    message = "{value} is not a valid URL"

    def accepts(self, value: str) -> bool:
        if "://" not in value and _SCHEME_RE.match(value):
            # mailto:, tel: and friends; a bare host:port is still fine
            return False
        candidate = value if "://" in value else f"http://{value}"
        try:
            url = _url_adapter.validate_python(candidate)
        except ValidationError:
            return False
        if url.scheme not in URL_SCHEMES or not url.host:
            return False
        try:
            ipaddress.ip_address(url.host.strip("[]"))
        except ValueError:
            pass
        else:
            return True
        labels = url.host.rstrip(".").split(".")
        return len(labels) > 1 and bool(_TLD_RE.fullmatch(labels[-1]))


class OneOf(Rule):
    kind = ViolationKind.INVALID_ENUM

    def __init__(self, values: Iterable[str], message: str | None = None):
        self.values = tuple(values)
        super().__init__(
            message
            or "{value} is not valid. Valid values are: " + ", ".join(self.values)
        )

    def accepts(self, value: Any) -> bool:
        return value in self.values


class Unique(Rule):
    """Advisory pre-check against the store's unique index.

    ``probe`` names the index method to call, e.g. ``"exists_by_id"``.
    The engine runs these last, and only on otherwise valid records.
    """

    kind = ViolationKind.DUPLICATE_KEY
    message = "{value} is already in use"

    def __init__(self, probe: str, message: str | None = None):
        super().__init__(message)
        self.probe = probe

    def check(self, value: Any) -> tuple[Any, str | None]:
        return value, None

    def check_index(self, value: Any, index: Any) -> str | None:
        if getattr(index, self.probe)(value):
            return self.message.format(value=value)
        return None
