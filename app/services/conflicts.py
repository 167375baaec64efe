# services/conflicts.py
"""Detección de choques entre horarios.

Las funciones de este módulo no tocan la base de datos: reciben el
horario candidato y los horarios vigentes ya cargados, y deciden.
"""
from dataclasses import dataclass
from datetime import time
from decimal import Decimal

from ..errors import RoomRequired, ScheduleConflict
from ..models import DayOfWeek, Modality
from .allocator import daily_hours


@dataclass(frozen=True)
class SlotCandidate:
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    modality: Modality
    room_id: int | None = None

    @property
    def daily_hours(self) -> Decimal:
        return daily_hours(self.start_time, self.end_time)

    def describe(self) -> str:
        return (
            f"{self.day_of_week.value} de {self.start_time.strftime('%H:%M')}"
            f" a {self.end_time.strftime('%H:%M')}"
        )


def _same_interval(candidate: SlotCandidate, slot) -> bool:
    return (
        slot.day_of_week == candidate.day_of_week
        and slot.start_time == candidate.start_time
        and slot.end_time == candidate.end_time
    )


def _same_allocation(candidate: SlotCandidate, slot) -> bool:
    return (
        _same_interval(candidate, slot)
        and Decimal(str(slot.daily_hours)) == candidate.daily_hours
        and slot.modality == candidate.modality
    )


def find_conflict(candidate: SlotCandidate, existing_slots, current=None) -> str | None:
    """Devuelve el motivo del choque o ``None`` si el candidato es válido.

    ``current`` es el horario que se está actualizando; nunca choca consigo
    mismo. Lanza ``RoomRequired`` si un horario presencial no trae aula.
    """
    others = [
        slot for slot in existing_slots
        if current is None or slot.id != current.id
    ]

    if candidate.modality == Modality.virtual:
        if any(_same_allocation(candidate, slot) for slot in others):
            return f"Ya existe un horario virtual el {candidate.describe()}."
    elif candidate.modality == Modality.presencial:
        if candidate.room_id is None:
            raise RoomRequired()
        if any(
            _same_allocation(candidate, slot) and slot.room_id == candidate.room_id
            for slot in others
        ):
            return (
                f"Ya existe un horario presencial para el aula {candidate.room_id}"
                f" el {candidate.describe()}."
            )

    if current is not None and not _same_interval(candidate, current):
        if any(_same_interval(candidate, slot) for slot in others):
            return f"Ya existe un horario el {candidate.describe()}."

    return None


def check_conflict(candidate: SlotCandidate, existing_slots, current=None) -> None:
    reason = find_conflict(candidate, existing_slots, current=current)
    if reason is not None:
        raise ScheduleConflict(reason)
