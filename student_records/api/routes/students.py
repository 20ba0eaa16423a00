# student_records/api/routes/students.py
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from student_records.db import get_db
from student_records.models.student import Student
from student_records.schemas.students import StudentOut, ViolationsOut
from student_records.services import student_records as svc
from student_records.validation import StudentValidationError

router = APIRouter(prefix="/students", tags=["students"])

_VIOLATION_RESPONSES: dict[int | str, dict[str, Any]] = {
    409: {"model": ViolationsOut},
    422: {"model": ViolationsOut},
}


def _out(st: Student) -> StudentOut:
    return StudentOut.model_validate(st.to_record())


def _violations_response(exc: StudentValidationError) -> JSONResponse:
    if exc.only_duplicates:
        code, detail = status.HTTP_409_CONFLICT, "Registro duplicado"
    else:
        code, detail = 422, "Registro inválido"
    body = ViolationsOut(detail=detail, violations=exc.violations)
    return JSONResponse(body.model_dump(mode="json"), status_code=code)


@router.post(
    "", response_model=StudentOut, status_code=201, responses=_VIOLATION_RESPONSES
)
def create_student(
    payload: dict[str, Any] = Body(...),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
):
    # o corpo é validado pelas regras do registro, não pelo pydantic
    try:
        st = svc.create_student(db, payload)
    except StudentValidationError as exc:
        return _violations_response(exc)
    return _out(st)


@router.get("/{student_id}", response_model=StudentOut)
def get_student(student_id: str, db: Session = Depends(get_db)):  # noqa: B008
    st = svc.get_student(db, student_id)
    if not st:
        raise HTTPException(404, "Aluno não encontrado")
    return _out(st)


@router.patch(
    "/{student_id}", response_model=StudentOut, responses=_VIOLATION_RESPONSES
)
def update_student(
    student_id: str,
    changes: dict[str, Any] = Body(...),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
):
    try:
        st = svc.update_student(db, student_id, changes)
    except LookupError:
        raise HTTPException(404, "Aluno não encontrado") from None
    except StudentValidationError as exc:
        return _violations_response(exc)
    return _out(st)


@router.post("/{student_id}/block", response_model=StudentOut)
def block_student(student_id: str, db: Session = Depends(get_db)):  # noqa: B008
    try:
        st = svc.block_student(db, student_id)
    except LookupError:
        raise HTTPException(404, "Aluno não encontrado") from None
    return _out(st)


@router.delete("/{student_id}", status_code=204)
def delete_student(student_id: str, db: Session = Depends(get_db)):  # noqa: B008
    if not svc.delete_student(db, student_id):
        raise HTTPException(404, "Aluno não encontrado")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
