# services/timeslots.py
from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from ..errors import NotFound, RoomNotFound, RoomRequired, ScheduleConflict
from ..models import Modality, TimeSlot
from .catalog import find_room
from .conflicts import SlotCandidate, check_conflict
from .persistence import (
    create_in_transaction,
    save_in_transaction,
    soft_delete_in_transaction,
    transaction,
)


def _live_slots_on(day_of_week):
    return TimeSlot.query.filter_by(day_of_week=day_of_week, deleted_at=None).all()


def _require_room(room_id):
    room = find_room(room_id)
    if room is None:
        raise RoomNotFound(room_id)
    return room


def get_timeslot(slot_id: int) -> TimeSlot:
    slot = (
        TimeSlot.query.options(joinedload(TimeSlot.room))
        .filter_by(id=slot_id, deleted_at=None)
        .first()
    )
    if slot is None:
        raise NotFound("el horario", f"Horario con ID {slot_id} no encontrado")
    return slot


def create_timeslot(day_of_week, start_time, end_time, modality: Modality,
                    room_id: int | None = None) -> TimeSlot:
    candidate = SlotCandidate(day_of_week, start_time, end_time, modality, room_id)
    check_conflict(candidate, _live_slots_on(day_of_week))

    room = _require_room(room_id) if room_id is not None else None

    slot = TimeSlot(
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
        daily_hours=candidate.daily_hours,
        modality=modality,
        room=room if modality == Modality.presencial else None,
    )
    try:
        with transaction() as session:
            create_in_transaction(session, slot)
    except IntegrityError as exc:
        raise ScheduleConflict(f"Ya existe un horario el {candidate.describe()}.") from exc

    current_app.logger.info("horario del dia: %s creado (%s)", day_of_week.value, slot.id)
    return slot


def update_timeslot(slot_id: int, day_of_week, start_time, end_time, modality: Modality,
                    room_id: int | None = None) -> TimeSlot:
    """Reemplaza día, horas, modalidad y aula de un horario.

    Las horas diarias siempre se recalculan. Al pasar a virtual el aula se
    desvincula, pero el aula indicada igual debe existir.
    """
    slot = get_timeslot(slot_id)
    candidate = SlotCandidate(day_of_week, start_time, end_time, modality, room_id)
    check_conflict(candidate, _live_slots_on(day_of_week), current=slot)

    if room_id is None:
        raise RoomRequired("Debe especificar un aula para la modalidad presencial o virtual.")
    room = _require_room(room_id)

    slot.day_of_week = day_of_week
    slot.start_time = start_time
    slot.end_time = end_time
    slot.daily_hours = candidate.daily_hours
    slot.modality = modality
    slot.room = room if modality == Modality.presencial else None

    try:
        with transaction() as session:
            save_in_transaction(session, slot)
    except IntegrityError as exc:
        raise ScheduleConflict(f"Ya existe un horario el {candidate.describe()}.") from exc

    current_app.logger.info("Horario %s actualizado a %s", slot.id, candidate.describe())
    return slot


def remove_timeslot(slot_id: int) -> TimeSlot:
    slot = get_timeslot(slot_id)
    with transaction() as session:
        soft_delete_in_transaction(session, slot)
    current_app.logger.info("horario del dia: %s eliminado", slot.day_of_week.value)
    return slot
