from flask import Blueprint, jsonify
from werkzeug.exceptions import BadRequest

from .extensions import db
from .forms import RoomForm, TimeSlotForm, load_form
from .models import DayOfWeek, Modality
from .payloads import json_body, room_to_dict, timeslot_to_dict
from .services import admin as admin_service
from .services import timeslots as timeslot_service

bp = Blueprint("horarios", __name__)


def _timeslot_values(form: TimeSlotForm) -> dict:
    return {
        "day_of_week": DayOfWeek[form.day_of_week.data],
        "start_time": form.start_time.data,
        "end_time": form.end_time.data,
        "modality": Modality[form.modality.data],
        "room_id": form.room_id.data,
    }


@bp.route("/horarios", methods=["POST"])
def create_horario():
    form = load_form(TimeSlotForm, json_body())
    slot = timeslot_service.create_timeslot(**_timeslot_values(form))
    return jsonify(
        message=f"horario del dia: {slot.day_of_week.value} creado exitosamente",
        horario=timeslot_to_dict(slot),
    ), 201


@bp.route("/horarios/<int:slot_id>")
def get_horario(slot_id):
    return jsonify(timeslot_to_dict(timeslot_service.get_timeslot(slot_id)))


@bp.route("/horarios/<int:slot_id>", methods=["PUT"])
def update_horario(slot_id):
    form = load_form(TimeSlotForm, json_body())
    slot = timeslot_service.update_timeslot(slot_id, **_timeslot_values(form))
    return jsonify(timeslot_to_dict(slot))


@bp.route("/horarios/<int:slot_id>", methods=["DELETE"])
def remove_horario(slot_id):
    slot = timeslot_service.remove_timeslot(slot_id)
    return jsonify(message=f"horario del dia: {slot.day_of_week.value} eliminado")


@bp.route("/aulas", methods=["POST"])
def create_aula():
    form = load_form(RoomForm, json_body())
    try:
        room = admin_service.create_room(
            name=form.name.data,
            capacity=form.capacity.data,
            room_type=form.room_type.data,
        )
    except ValueError as e:
        raise BadRequest(str(e))
    db.session.commit()
    return jsonify(room_to_dict(room)), 201
