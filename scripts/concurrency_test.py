"""
Concurrency test for student creation.

- Fires N concurrent POST /api/v1/students with the same student id
- Prints the status codes (expect 201 for a single winner, 409 for others)
"""

from __future__ import annotations

import argparse
import asyncio
import uuid

import httpx


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser()
    p.add_argument("--base", default="http://localhost:8000")
    p.add_argument("--n", type=int, default=5, help="number of concurrent requests")
    return p.parse_args()


def build_payload(student_id: str, i: int) -> dict:
    return {
        "id": student_id,
        "name": {"firstName": "Ann", "lastName": "Lee"},
        "gender": "female",
        "dateOfBirth": "2005-04-01",
        # e-mails distintos: só o id colide
        "email": f"ann{i}.{student_id.lower()}@school.edu",
        "contactNo": "+11234567890",
        "emergencyContactNo": "+11234567891",
        "presentAddress": "12 Main St",
        "permanentAddress": "12 Main St",
        "guardian": {
            "fatherName": "Tom",
            "fatherOccupation": "Engineer",
            "fatherContactNo": "+11234567892",
            "motherName": "Mia",
            "motherOccupation": "Teacher",
            "motherContactNo": "+11234567893",
        },
        "localGuardian": {
            "name": "Kim",
            "occupation": "Nurse",
            "contactNo": "+11234567894",
            "address": "9 Oak Ave",
        },
    }


async def run():
    args = parse_args()
    student_id = "C" + uuid.uuid4().hex[:10].upper()

    async with httpx.AsyncClient(timeout=10) as c:
        tasks = [
            c.post(f"{args.base}/api/v1/students", json=build_payload(student_id, i))
            for i in range(args.n)
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

    codes = []
    for r in results:
        if isinstance(r, Exception):
            codes.append(f"EXC:{type(r).__name__}")
        else:
            codes.append(r.status_code)
    print(f"student id: {student_id}")
    print("status codes:", codes)
    winners = sum(1 for code in codes if code == 201)
    print(f"201 count: {winners} (expected 1)")


if __name__ == "__main__":
    asyncio.run(run())
