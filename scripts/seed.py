# scripts/seed.py
from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from student_records.db import get_db
from student_records.services.student_records import create_student
from student_records.services.student_store import StudentStore
from student_records.validation import StudentValidationError

# ---------------- Dados de Exemplo ----------------
STUDENTS_DATA = [
    ("S1001", "Ana", "Souza", "female", "2008-03-14", "O+"),
    ("S1002", "Bruno", "Lima", "male", "2007-11-02", "A-"),
    ("S1003", "Carla", "Dias", "female", "2009-06-21", None),
    ("S1004", "Davi", "Nogueira", "other", "2008-01-30", "AB+"),
]


def get_session() -> Session:
    gen = get_db()
    return next(gen)  # type: ignore


def build_payload(sid: str, first: str, last: str, gender: str, dob: str, blood):
    payload = {
        "id": sid,
        "name": {"firstName": first, "lastName": last},
        "gender": gender,
        "dateOfBirth": dob,
        "email": f"{first.lower()}.{last.lower()}@school.edu",
        "contactNo": "+5511987650000",
        "emergencyContactNo": "+5511987650001",
        "presentAddress": "Rua das Flores, 100",
        "permanentAddress": "Rua das Flores, 100",
        "guardian": {
            "fatherName": "Marcos",
            "fatherOccupation": "Engenheiro",
            "fatherContactNo": "+5511987650002",
            "motherName": "Patricia",
            "motherOccupation": "Professora",
            "motherContactNo": "+5511987650003",
        },
        "localGuardian": {
            "name": "Roberta",
            "occupation": "Enfermeira",
            "contactNo": "+5511987650004",
            "address": "Av. Central, 55",
        },
    }
    if blood:
        payload["bloodGroup"] = blood
    return payload


def check_tables_exist(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1 FROM students LIMIT 1"))
        return True
    except (ProgrammingError, OperationalError):
        return False


def ensure_students(db: Session) -> int:
    store = StudentStore(db)
    created = 0
    for row in STUDENTS_DATA:
        if store.exists_by_id(row[0]):
            continue
        try:
            create_student(db, build_payload(*row))
        except StudentValidationError as e:
            for v in e.violations:
                print(f"[Seed] {row[0]}: {v.field} {v.kind.value} - {v.message}")
            continue
        created += 1
    return created


def main():
    print("[Seed] Iniciando seed do banco de dados...")
    db = get_session()
    try:
        if not check_tables_exist(db):
            print("[Seed] Erro: a tabela students ainda não foi criada.")
            print("[Seed] Execute as migrações: alembic upgrade head")
            return
        created = ensure_students(db)
        print(f"[Seed] {created} alunos criados.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
