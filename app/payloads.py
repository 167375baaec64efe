# app/payloads.py
from decimal import Decimal

from flask import request
from werkzeug.exceptions import BadRequest


# ---------- Entrada ----------
def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("El cuerpo de la solicitud debe ser un objeto JSON.")
    return data


# ---------- Salida ----------
def money(value):
    return None if value is None else f"{Decimal(value):.2f}"

def room_to_dict(room):
    if room is None:
        return None
    return {
        "id": room.id,
        "name": room.name,
        "capacity": room.capacity,
        "room_type": room.room_type,
    }

def timeslot_to_dict(slot):
    return {
        "id": slot.id,
        "day_of_week": slot.day_of_week.name,
        "start_time": slot.start_time.strftime("%H:%M"),
        "end_time": slot.end_time.strftime("%H:%M"),
        "daily_hours": money(slot.daily_hours),
        "modality": slot.modality.name,
        "room": room_to_dict(slot.room),
    }

def subject_to_dict(subject):
    return {"id": subject.id, "name": subject.name, "code": subject.code}

def enrollment_to_dict(enrollment):
    return {
        "id": enrollment.id,
        "enrollment_date": enrollment.enrollment_date.isoformat(),
        "start_date": enrollment.start_date.isoformat(),
        "end_date": enrollment.end_date.isoformat(),
        "shift": enrollment.shift.name,
        "quantity": money(enrollment.quantity),
        "unit_price": money(enrollment.unit_price),
        "hours_value": money(enrollment.hours_value),
        "materials_value": money(enrollment.materials_value),
        "with_vat": enrollment.with_vat,
        "total_value": money(enrollment.total_value),
        "notes": enrollment.notes,
        "is_active": enrollment.is_active,
        "student": {"id": enrollment.student.id, "name": enrollment.student.name},
        "teacher": {"id": enrollment.teacher.id, "name": enrollment.teacher.name},
        "subjects": [subject_to_dict(s) for s in enrollment.subjects],
        "schedule": {
            "id": enrollment.schedule.id,
            "time_slots": [timeslot_to_dict(s) for s in enrollment.schedule.time_slots],
        },
    }
