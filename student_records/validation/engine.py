from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from student_records.validation.errors import Violation, ViolationKind
from student_records.validation.rules import Rule, Unique


class UniqueIndex(Protocol):
    def exists_by_id(self, student_id: str) -> bool: ...

    def exists_by_email(self, email: str) -> bool: ...


class Field:
    def __init__(self, name: str, *rules: Rule):
        self.name = name
        self.rules: tuple[Rule, ...] = rules

    def __repr__(self) -> str:
        return f"Field({self.name!r}, {len(self.rules)} rules)"


@dataclass(frozen=True)
class Nested:
    name: str
    schema: Schema
    required_message: str | None = None


@dataclass(frozen=True)
class Schema:
    name: str
    fields: tuple[Field | Nested, ...]

    @property
    def nested(self) -> tuple[Nested, ...]:
        return tuple(f for f in self.fields if isinstance(f, Nested))

    @property
    def scalars(self) -> tuple[Field, ...]:
        return tuple(f for f in self.fields if isinstance(f, Field))


@dataclass
class ValidationResult:
    record: dict[str, Any] = field(default_factory=dict)
    violations: list[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations


def _path(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def _check_field(
    scalar: Field, value: Any, path: str, violations: list[Violation]
) -> Any:
    if value is not None and not isinstance(value, str):
        violations.append(
            Violation(
                field=path,
                kind=ViolationKind.INVALID_FORMAT,
                value=value,
                message=f"{value} is not a valid format. Expected text.",
            )
        )
        return value

    raw = value
    for rule in scalar.rules:
        if value is None and not rule.runs_on_missing:
            # optional and absent
            break
        value, error = rule.check(value)
        if error is not None:
            violations.append(
                Violation(
                    field=path,
                    kind=rule.kind,
                    # blank input is reported as sent, not as the trimmed None
                    value=raw if value is None else value,
                    message=error,
                )
            )
            break
    return value


def _walk(
    schema: Schema,
    payload: Mapping[str, Any],
    prefix: str,
    partial: bool,
    violations: list[Violation],
) -> dict[str, Any]:
    record: dict[str, Any] = {}

    # sub-records first, then scalars
    for sub in schema.nested:
        path = _path(prefix, sub.name)
        if partial and sub.name not in payload:
            continue
        value = payload.get(sub.name)
        if value is None:
            violations.append(
                Violation(
                    field=path,
                    kind=ViolationKind.MISSING_FIELD,
                    value=None,
                    message=sub.required_message or f"{path} is required",
                )
            )
            continue
        if not isinstance(value, Mapping):
            violations.append(
                Violation(
                    field=path,
                    kind=ViolationKind.INVALID_FORMAT,
                    value=value,
                    message=f"{path} must be an object",
                )
            )
            continue
        # sub-records are always checked whole
        record[sub.name] = _walk(sub.schema, value, path, False, violations)

    for scalar in schema.scalars:
        if partial and scalar.name not in payload:
            continue
        value = _check_field(
            scalar, payload.get(scalar.name), _path(prefix, scalar.name), violations
        )
        # an optional key sent blank in an update clears the stored value
        if value is not None or partial:
            record[scalar.name] = value

    return record


def _check_unique(
    schema: Schema,
    record: Mapping[str, Any],
    index: UniqueIndex,
    violations: list[Violation],
) -> None:
    for scalar in schema.scalars:
        value = record.get(scalar.name)
        if value is None:
            continue
        for rule in scalar.rules:
            if not isinstance(rule, Unique):
                continue
            error = rule.check_index(value, index)
            if error is not None:
                violations.append(
                    Violation(
                        field=scalar.name, kind=rule.kind, value=value, message=error
                    )
                )


def validate(
    schema: Schema,
    payload: Mapping[str, Any] | None,
    *,
    index: UniqueIndex | None = None,
    partial: bool = False,
) -> ValidationResult:
    """Run every rule of ``schema`` against ``payload``.

    All violations are collected; nothing short-circuits except within a
    single field. Unique rules are consulted last and only when the record
    is otherwise valid. With ``partial=True`` only keys present in the
    payload are checked, which is what updates need.
    """
    result = ValidationResult()
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        result.violations.append(
            Violation(
                field=schema.name,
                kind=ViolationKind.INVALID_FORMAT,
                value=payload,
                message=f"{schema.name} must be an object",
            )
        )
        return result

    result.record = _walk(schema, payload, "", partial, result.violations)

    if index is not None and not result.violations:
        _check_unique(schema, result.record, index, result.violations)

    return result
