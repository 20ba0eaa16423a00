"""create students table

Revision ID: 5b1e7c2d9a40
Revises:
Create Date: 2026-10-19 10:12:03.418220

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5b1e7c2d9a40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade():
    op.create_table(
        "students",
        sa.Column("pk", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("student_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.JSON(), nullable=False),
        sa.Column("gender", sa.String(length=16), nullable=False),
        sa.Column("date_of_birth", sa.String(length=10), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("contact_no", sa.String(length=32), nullable=False),
        sa.Column("emergency_contact_no", sa.String(length=32), nullable=False),
        sa.Column("blood_group", sa.String(length=3), nullable=True),
        sa.Column("present_address", sa.String(length=512), nullable=False),
        sa.Column("permanent_address", sa.String(length=512), nullable=False),
        sa.Column("guardian", sa.JSON(), nullable=False),
        sa.Column("local_guardian", sa.JSON(), nullable=False),
        sa.Column("profile_img", sa.String(length=2048), nullable=True),
        sa.Column(
            "is_active",
            sa.String(length=16),
            nullable=False,
            server_default="active",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    )
    # unicidade garantida pelo banco, não pela aplicação
    op.create_index("ix_students_student_id", "students", ["student_id"], unique=True)
    op.create_index("ix_students_email", "students", ["email"], unique=True)


def downgrade():
    op.drop_index("ix_students_email", table_name="students")
    op.drop_index("ix_students_student_id", table_name="students")
    op.drop_table("students")
