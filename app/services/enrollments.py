# services/enrollments.py
from decimal import Decimal
from typing import Mapping

from flask import current_app
from sqlalchemy.orm import joinedload, selectinload

from ..errors import NotFound
from ..models import Enrollment, Schedule, TimeSlot
from . import pricing
from .catalog import find_student, find_subjects, find_teacher
from .persistence import (
    create_in_transaction,
    delete_join_rows,
    save_in_transaction,
    soft_delete_in_transaction,
    transaction,
)
from .schedules import build_schedule, replace_slots

# Campos que el llamador puede modificar directamente
EDITABLE_FIELDS = (
    "enrollment_date",
    "start_date",
    "end_date",
    "shift",
    "notes",
    "is_active",
    "unit_price",
    "materials_value",
    "with_vat",
)


def merge_patch(existing: Mapping, patch: Mapping) -> dict:
    """Aplica sobre ``existing`` solo las claves presentes en ``patch``."""
    return {
        key: patch[key] if key in patch else value
        for key, value in existing.items()
    }


def _as_decimal(value):
    return None if value is None else Decimal(str(value))


def _quote(unit_price, slots, materials_value, with_vat) -> pricing.Quote:
    vat_rate = current_app.config.get("VAT_RATE", pricing.DEFAULT_VAT_RATE)
    return pricing.price(unit_price, slots, materials_value, with_vat, vat_rate=vat_rate)


def _apply_quote(enrollment: Enrollment, quote: pricing.Quote) -> Enrollment:
    enrollment.quantity = quote.quantity
    enrollment.hours_value = quote.hours_value
    enrollment.total_value = quote.total
    return enrollment


# -------- Resolución de relaciones --------
def _require_student(student_id):
    student = find_student(student_id)
    if student is None:
        raise NotFound("el alumno", "No existe el alumno")
    return student

def _require_teacher(teacher_id):
    teacher = find_teacher(teacher_id)
    if teacher is None:
        raise NotFound("el profesor", "No existe el profesor")
    return teacher

def _require_subjects(subject_ids):
    requested = set(subject_ids or [])
    subjects = find_subjects(requested)
    missing = requested - {subject.id for subject in subjects}
    if not subjects or missing:
        raise NotFound("las materias", "No existen las materias especificadas")
    return subjects


def _full_load_options():
    return (
        joinedload(Enrollment.student),
        joinedload(Enrollment.teacher),
        selectinload(Enrollment.subjects),
        joinedload(Enrollment.schedule)
        .selectinload(Schedule.time_slots)
        .joinedload(TimeSlot.room),
    )


def _live_enrollment(enrollment_id, *options):
    return (
        Enrollment.query.options(*options)
        .filter_by(id=enrollment_id, deleted_at=None)
        .first()
    )


# -------- Ciclo de vida --------
def create_enrollment(*, student_id, teacher_id, subject_ids, slot_ids,
                      enrollment_date, start_date, end_date, shift,
                      unit_price, materials_value=None, with_vat: bool = False,
                      notes: str = "") -> Enrollment:
    student = _require_student(student_id)
    teacher = _require_teacher(teacher_id)
    subjects = _require_subjects(subject_ids)
    schedule = build_schedule(slot_ids)

    quote = _quote(unit_price, schedule.time_slots, materials_value, with_vat)

    with transaction() as session:
        # la programación se guarda primero; la matrícula la referencia
        create_in_transaction(session, schedule)
        enrollment = Enrollment(
            enrollment_date=enrollment_date,
            start_date=start_date,
            end_date=end_date,
            shift=shift,
            unit_price=_as_decimal(unit_price),
            materials_value=_as_decimal(materials_value),
            with_vat=bool(with_vat),
            notes=notes or "",
            student=student,
            teacher=teacher,
            subjects=subjects,
            schedule=schedule,
        )
        _apply_quote(enrollment, quote)
        create_in_transaction(session, enrollment)

    current_app.logger.info(
        "Matrícula %s creada: alumno=%s profesor=%s total=%s",
        enrollment.id, student.id, teacher.id, enrollment.total_value,
    )
    return enrollment


def update_enrollment(enrollment_id: int, changes: Mapping) -> Enrollment:
    """Actualización parcial: lo que no viene en ``changes`` se conserva.

    ``slot_ids`` reemplaza por completo los horarios de la programación.
    Cantidad, valor de horas y total se recalculan siempre.
    """
    with transaction() as session:
        enrollment = _live_enrollment(
            enrollment_id,
            joinedload(Enrollment.schedule).selectinload(Schedule.time_slots),
            joinedload(Enrollment.teacher),
            joinedload(Enrollment.student),
            selectinload(Enrollment.subjects),
        )
        if enrollment is None:
            raise NotFound("la matrícula", "No se encontró la matrícula")

        if "student_id" in changes:
            enrollment.student = _require_student(changes["student_id"])
        if "teacher_id" in changes:
            enrollment.teacher = _require_teacher(changes["teacher_id"])
        if "subject_ids" in changes:
            enrollment.subjects = _require_subjects(changes["subject_ids"])
        if "slot_ids" in changes:
            replace_slots(enrollment.schedule, changes["slot_ids"])
            save_in_transaction(session, enrollment.schedule)

        current = {field: getattr(enrollment, field) for field in EDITABLE_FIELDS}
        values = merge_patch(current, changes)
        for field in ("enrollment_date", "start_date", "end_date", "shift", "is_active"):
            setattr(enrollment, field, values[field])
        enrollment.notes = values["notes"] or ""
        enrollment.unit_price = _as_decimal(values["unit_price"])
        enrollment.materials_value = _as_decimal(values["materials_value"])
        enrollment.with_vat = bool(values["with_vat"])

        quote = _quote(
            enrollment.unit_price,
            enrollment.schedule.time_slots,
            enrollment.materials_value,
            enrollment.with_vat,
        )
        _apply_quote(enrollment, quote)
        save_in_transaction(session, enrollment)

    current_app.logger.info(
        "Matrícula %s actualizada: cantidad=%s total=%s",
        enrollment.id, enrollment.quantity, enrollment.total_value,
    )
    return enrollment


def delete_enrollment(enrollment_id: int) -> str:
    with transaction() as session:
        enrollment = _live_enrollment(enrollment_id, joinedload(Enrollment.schedule))
        if enrollment is None:
            raise NotFound("la matrícula", f"Matrícula con ID {enrollment_id} no encontrada")

        schedule = enrollment.schedule
        if schedule is not None:
            delete_join_rows(session, schedule.id)
            sharing = Enrollment.query.filter_by(schedule_id=schedule.id, deleted_at=None).all()
            for other in sharing:
                soft_delete_in_transaction(session, other)
            soft_delete_in_transaction(session, schedule)

        if not enrollment.is_deleted:
            soft_delete_in_transaction(session, enrollment)

    current_app.logger.info("Matrícula %s eliminada", enrollment_id)
    return f"Matrícula con ID {enrollment_id} eliminada correctamente"


# -------- Consultas --------
def get_enrollment(enrollment_id: int) -> Enrollment:
    enrollment = _live_enrollment(enrollment_id, *_full_load_options())
    if enrollment is None:
        raise NotFound("la matrícula", "No existe la matricula")
    return enrollment


def list_enrollments_by_teacher(teacher_id: int):
    enrollments = (
        Enrollment.query.options(*_full_load_options())
        .filter_by(teacher_id=teacher_id, deleted_at=None)
        .order_by(Enrollment.id)
        .all()
    )
    if not enrollments:
        raise NotFound(
            "las matrículas",
            f"No hay matrículas para el profesor con ID {teacher_id}",
        )
    return enrollments


def get_enrollment_slots(enrollment_id: int):
    enrollment = _live_enrollment(
        enrollment_id,
        joinedload(Enrollment.schedule)
        .selectinload(Schedule.time_slots)
        .joinedload(TimeSlot.room),
    )
    if enrollment is None:
        raise NotFound("la matrícula", f"No existe la matrícula con ID {enrollment_id}")
    slots = list(enrollment.schedule.time_slots)
    if not slots:
        raise NotFound("los horarios", f"La matrícula con ID {enrollment_id} no tiene horarios")
    return slots


def get_enrollment_subjects(enrollment_id: int):
    enrollment = _live_enrollment(enrollment_id, selectinload(Enrollment.subjects))
    if enrollment is None:
        raise NotFound("la matrícula", f"No existe la matrícula con ID {enrollment_id}")
    subjects = list(enrollment.subjects)
    if not subjects:
        raise NotFound("las materias", f"La matrícula con ID {enrollment_id} no tiene materias")
    return subjects
