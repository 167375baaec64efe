"""create enrollment and scheduling tables

Revision ID: 20261019_01
Revises: 
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_01"
down_revision = None
branch_labels = None
depends_on = None

DAYS = ("lunes", "martes", "miercoles", "jueves", "viernes", "sabado", "domingo")

AUDITED_TABLES = ("students", "teachers", "subjects", "rooms", "time_slots", "schedules", "enrollments")


def _audit_columns():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _audit_index_names(table):
    return f"ix_{table}_created_at", f"ix_{table}_deleted_at"


def upgrade() -> None:
    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("document_id", sa.String(length=20), nullable=True, unique=True),
        sa.Column("email", sa.String(length=120), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_audit_columns(),
    )
    op.create_table(
        "teachers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=120), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_audit_columns(),
    )
    op.create_index("ix_teachers_email", "teachers", ["email"], unique=True)
    op.create_table(
        "subjects",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=True, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_audit_columns(),
    )
    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("room_type", sa.String(length=50), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_audit_columns(),
    )
    op.create_table(
        "time_slots",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("day_of_week", sa.Enum(*DAYS, name="dayofweek"), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("daily_hours", sa.Numeric(5, 2), nullable=False),
        sa.Column("modality", sa.Enum("presencial", "virtual", name="modality"), nullable=False),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("rooms.id"), nullable=True),
        *_audit_columns(),
    )
    op.create_index("ix_time_slots_day_of_week", "time_slots", ["day_of_week"])
    op.create_index("ix_time_slots_room_id", "time_slots", ["room_id"])
    # cierra la carrera entre dos altas simultáneas del mismo horario
    op.create_index(
        "uq_time_slots_presencial",
        "time_slots",
        ["day_of_week", "start_time", "end_time", "room_id"],
        unique=True,
        sqlite_where=sa.text("deleted_at IS NULL AND modality = 'presencial'"),
        postgresql_where=sa.text("deleted_at IS NULL AND modality = 'presencial'"),
    )
    op.create_index(
        "uq_time_slots_virtual",
        "time_slots",
        ["day_of_week", "start_time", "end_time"],
        unique=True,
        sqlite_where=sa.text("deleted_at IS NULL AND modality = 'virtual'"),
        postgresql_where=sa.text("deleted_at IS NULL AND modality = 'virtual'"),
    )
    op.create_table(
        "schedules",
        sa.Column("id", sa.Integer(), primary_key=True),
        *_audit_columns(),
    )
    op.create_table(
        "schedule_time_slots",
        sa.Column("schedule_id", sa.Integer(), sa.ForeignKey("schedules.id"), primary_key=True),
        sa.Column("time_slot_id", sa.Integer(), sa.ForeignKey("time_slots.id"), primary_key=True),
    )
    op.create_table(
        "enrollments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("enrollment_date", sa.Date(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("shift", sa.Enum("manana", "tarde", "noche", name="shift"), nullable=False),
        sa.Column("quantity", sa.Numeric(8, 2), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("hours_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("materials_value", sa.Numeric(12, 2), nullable=True),
        sa.Column("with_vat", sa.Boolean(), nullable=False),
        sa.Column("total_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("notes", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("teacher_id", sa.Integer(), sa.ForeignKey("teachers.id"), nullable=False),
        sa.Column("schedule_id", sa.Integer(), sa.ForeignKey("schedules.id"), nullable=False, unique=True),
        *_audit_columns(),
    )
    op.create_index("ix_enrollments_student_id", "enrollments", ["student_id"])
    op.create_index("ix_enrollments_teacher_id", "enrollments", ["teacher_id"])
    op.create_table(
        "enrollment_subjects",
        sa.Column("enrollment_id", sa.Integer(), sa.ForeignKey("enrollments.id"), primary_key=True),
        sa.Column("subject_id", sa.Integer(), sa.ForeignKey("subjects.id"), primary_key=True),
    )
    for table in AUDITED_TABLES:
        created_ix, deleted_ix = _audit_index_names(table)
        op.create_index(created_ix, table, ["created_at"])
        op.create_index(deleted_ix, table, ["deleted_at"])


def downgrade() -> None:
    for table in AUDITED_TABLES:
        for index_name in _audit_index_names(table):
            op.drop_index(index_name, table_name=table)
    op.drop_table("enrollment_subjects")
    op.drop_index("ix_enrollments_teacher_id", table_name="enrollments")
    op.drop_index("ix_enrollments_student_id", table_name="enrollments")
    op.drop_table("enrollments")
    op.drop_table("schedule_time_slots")
    op.drop_table("schedules")
    op.drop_index("uq_time_slots_virtual", table_name="time_slots")
    op.drop_index("uq_time_slots_presencial", table_name="time_slots")
    op.drop_index("ix_time_slots_room_id", table_name="time_slots")
    op.drop_index("ix_time_slots_day_of_week", table_name="time_slots")
    op.drop_table("time_slots")
    op.drop_table("rooms")
    op.drop_table("subjects")
    op.drop_index("ix_teachers_email", table_name="teachers")
    op.drop_table("teachers")
    op.drop_table("students")
