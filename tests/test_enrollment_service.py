import sys
from datetime import date, time
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app
from app.errors import NotFound, SlotsNotFound
from app.extensions import db
from app.models import (
    DayOfWeek,
    Enrollment,
    Modality,
    Room,
    Schedule,
    Shift,
    TimeSlot,
    schedule_time_slots,
)
from app.services import admin as admin_service
from app.services import enrollments as enrollment_service
from app.services import timeslots as timeslot_service


class TestConfig:
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    VAT_RATE = Decimal("0.15")


@pytest.fixture
def app():
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def catalog(app):
    student = admin_service.create_student("Ana Pérez", document_id="0102030405")
    teacher = admin_service.create_teacher("Luis Torres", email="luis@example.com")
    other_teacher = admin_service.create_teacher("Marta Ruiz", email="marta@example.com")
    algebra = admin_service.create_subject("Álgebra", code="MAT-101")
    fisica = admin_service.create_subject("Física", code="FIS-101")
    room = admin_service.create_room("Aula 1", 25, "Teórica")
    db.session.commit()

    two_hours = timeslot_service.create_timeslot(
        DayOfWeek.lunes, time(8), time(10), Modality.presencial, room_id=room.id
    )
    three_hours = timeslot_service.create_timeslot(
        DayOfWeek.miercoles, time(14), time(17), Modality.virtual
    )
    other_three_hours = timeslot_service.create_timeslot(
        DayOfWeek.viernes, time(22), time(1), Modality.virtual
    )

    return {
        "student": student.id,
        "teacher": teacher.id,
        "other_teacher": other_teacher.id,
        "subjects": [algebra.id, fisica.id],
        "room": room.id,
        "slots": [two_hours.id, three_hours.id],
        "three_hour_slot": other_three_hours.id,
    }


def _create(catalog, **overrides):
    data = dict(
        student_id=catalog["student"],
        teacher_id=catalog["teacher"],
        subject_ids=catalog["subjects"],
        slot_ids=catalog["slots"],
        enrollment_date=date(2026, 1, 10),
        start_date=date(2026, 2, 1),
        end_date=date(2026, 6, 30),
        shift=Shift.manana,
        unit_price=Decimal("10"),
        materials_value=Decimal("20"),
        with_vat=True,
        notes="Nivel inicial",
    )
    data.update(overrides)
    return enrollment_service.create_enrollment(**data)


def _join_rows(schedule_id):
    return db.session.execute(
        select(func.count())
        .select_from(schedule_time_slots)
        .where(schedule_time_slots.c.schedule_id == schedule_id)
    ).scalar()


def test_create_enrollment_computes_pricing(catalog):
    enrollment = _create(catalog)

    assert enrollment.quantity == Decimal("5.00")
    assert enrollment.hours_value == Decimal("50.00")
    assert enrollment.total_value == Decimal("80.50")
    assert enrollment.is_active is True
    assert [s.id for s in enrollment.subjects] == catalog["subjects"]
    assert sorted(s.id for s in enrollment.schedule.time_slots) == sorted(catalog["slots"])


def test_create_enrollment_without_materials_or_vat(catalog):
    enrollment = _create(catalog, materials_value=None, with_vat=False)
    assert enrollment.total_value == Decimal("50.00")


@pytest.mark.parametrize(
    "override, entity",
    [
        ({"student_id": 999}, "el alumno"),
        ({"teacher_id": 999}, "el profesor"),
        ({"subject_ids": []}, "las materias"),
    ],
)
def test_create_enrollment_requires_existing_relations(catalog, override, entity):
    with pytest.raises(NotFound) as exc_info:
        _create(catalog, **override)
    assert exc_info.value.entity == entity
    assert Schedule.query.count() == 0


def test_create_enrollment_rejects_partially_resolved_subjects(catalog):
    with pytest.raises(NotFound):
        _create(catalog, subject_ids=[catalog["subjects"][0], 999])


def test_create_enrollment_rejects_empty_or_partial_schedule(catalog):
    with pytest.raises(SlotsNotFound):
        _create(catalog, slot_ids=[])

    with pytest.raises(SlotsNotFound) as exc_info:
        _create(catalog, slot_ids=[catalog["slots"][0], 999])
    assert exc_info.value.missing_ids == [999]
    assert Enrollment.query.count() == 0


def test_failed_enrollment_write_rolls_back_schedule(catalog):
    with pytest.raises(IntegrityError):
        _create(catalog, shift=None)

    assert Schedule.query.count() == 0
    assert Enrollment.query.count() == 0


def test_update_schedule_only_recomputes_totals(catalog):
    enrollment = _create(catalog)

    updated = enrollment_service.update_enrollment(
        enrollment.id, {"slot_ids": [catalog["three_hour_slot"]]}
    )

    assert [s.id for s in updated.schedule.time_slots] == [catalog["three_hour_slot"]]
    assert updated.quantity == Decimal("3.00")
    assert updated.unit_price == Decimal("10.00")
    assert updated.hours_value == Decimal("30.00")
    assert updated.total_value == Decimal("57.50")
    assert _join_rows(updated.schedule.id) == 1


def test_update_is_partial(catalog):
    enrollment = _create(catalog)

    updated = enrollment_service.update_enrollment(
        enrollment.id,
        {"teacher_id": catalog["other_teacher"], "with_vat": False, "notes": "Cambio de profesor"},
    )

    assert updated.teacher_id == catalog["other_teacher"]
    assert updated.student_id == catalog["student"]
    assert updated.shift == Shift.manana
    assert updated.materials_value == Decimal("20.00")
    assert updated.total_value == Decimal("70.00")
    assert updated.notes == "Cambio de profesor"


def test_update_can_clear_materials(catalog):
    enrollment = _create(catalog)

    updated = enrollment_service.update_enrollment(enrollment.id, {"materials_value": None})

    assert updated.materials_value is None
    assert updated.total_value == Decimal("57.50")


def test_update_without_changes_is_idempotent(catalog):
    enrollment = _create(catalog)
    before = enrollment.total_value

    updated = enrollment_service.update_enrollment(enrollment.id, {})

    assert updated.total_value == before == Decimal("80.50")


def test_update_with_unknown_relation_leaves_record_untouched(catalog):
    enrollment = _create(catalog)

    with pytest.raises(NotFound):
        enrollment_service.update_enrollment(enrollment.id, {"student_id": 999, "unit_price": 99})
    with pytest.raises(SlotsNotFound):
        enrollment_service.update_enrollment(enrollment.id, {"slot_ids": [999]})

    stored = enrollment_service.get_enrollment(enrollment.id)
    assert stored.unit_price == Decimal("10.00")
    assert len(stored.schedule.time_slots) == 2


def test_update_missing_enrollment(catalog):
    with pytest.raises(NotFound):
        enrollment_service.update_enrollment(12345, {"unit_price": 5})


def test_delete_enrollment_cascades_soft_delete(catalog):
    enrollment = _create(catalog)
    enrollment_id = enrollment.id
    schedule_id = enrollment.schedule_id

    message = enrollment_service.delete_enrollment(enrollment_id)

    assert message == f"Matrícula con ID {enrollment_id} eliminada correctamente"
    with pytest.raises(NotFound):
        enrollment_service.get_enrollment(enrollment_id)

    stored = db.session.get(Enrollment, enrollment_id)
    assert stored.deleted_at is not None
    assert stored.is_active is False
    assert db.session.get(Schedule, schedule_id).deleted_at is not None
    assert _join_rows(schedule_id) == 0

    room = db.session.get(Room, catalog["room"])
    assert room.deleted_at is None
    assert room.is_active is True
    assert all(db.session.get(TimeSlot, sid).deleted_at is None for sid in catalog["slots"])

    with pytest.raises(NotFound):
        enrollment_service.delete_enrollment(enrollment_id)


def test_list_by_teacher(catalog):
    first = _create(catalog)
    second = _create(catalog, slot_ids=[catalog["three_hour_slot"]])

    enrollments = enrollment_service.list_enrollments_by_teacher(catalog["teacher"])

    assert [e.id for e in enrollments] == [first.id, second.id]
    with pytest.raises(NotFound):
        enrollment_service.list_enrollments_by_teacher(catalog["other_teacher"])


def test_slots_and_subjects_by_enrollment(catalog):
    enrollment = _create(catalog)

    slots = enrollment_service.get_enrollment_slots(enrollment.id)
    subjects = enrollment_service.get_enrollment_subjects(enrollment.id)

    assert sorted(s.id for s in slots) == sorted(catalog["slots"])
    presencial = [s for s in slots if s.modality == Modality.presencial]
    assert presencial[0].room.id == catalog["room"]
    assert [s.code for s in subjects] == ["MAT-101", "FIS-101"]

    with pytest.raises(NotFound):
        enrollment_service.get_enrollment_slots(999)
    with pytest.raises(NotFound):
        enrollment_service.get_enrollment_subjects(999)


def test_total_value_is_rounded_before_insert(catalog):
    enrollment = _create(catalog)
    enrollment.total_value = Decimal("80.505")
    db.session.commit()

    assert db.session.get(Enrollment, enrollment.id).total_value == Decimal("80.51")


def test_merge_patch_only_applies_present_keys():
    existing = {"unit_price": Decimal("10"), "with_vat": True, "notes": "a"}

    merged = enrollment_service.merge_patch(existing, {"with_vat": False, "unknown": 1})

    assert merged == {"unit_price": Decimal("10"), "with_vat": False, "notes": "a"}
    assert existing["with_vat"] is True
