# services/schedules.py
from ..errors import SlotsNotFound
from ..models import Schedule
from .catalog import find_slots


def resolve_slots(slot_ids):
    """Resuelve todos los horarios pedidos o falla.

    Una programación incompleta no se puede cotizar, así que basta con que
    falte un solo ID para rechazar el conjunto completo.
    """
    requested = set(slot_ids or [])
    slots = find_slots(requested)
    missing = requested - {slot.id for slot in slots}
    if not slots or missing:
        raise SlotsNotFound(missing)
    return slots


def build_schedule(slot_ids) -> Schedule:
    return Schedule(time_slots=resolve_slots(slot_ids))


def replace_slots(schedule: Schedule, slot_ids) -> Schedule:
    # reemplazo total, nunca fusión
    schedule.time_slots = resolve_slots(slot_ids)
    return schedule
