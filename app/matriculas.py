from flask import Blueprint, jsonify

from .forms import EnrollmentForm, load_form
from .models import Shift
from .payloads import (
    enrollment_to_dict,
    json_body,
    subject_to_dict,
    timeslot_to_dict,
)
from .services import enrollments as enrollment_service

bp = Blueprint("matriculas", __name__)


def _enrollment_values(form: EnrollmentForm) -> dict:
    values = {field.name: field.data for field in form}
    if "shift" in values:
        values["shift"] = Shift[values["shift"]]
    return values


@bp.route("/", methods=["POST"])
def create_matricula():
    values = _enrollment_values(load_form(EnrollmentForm, json_body()))
    # una matrícula nueva siempre nace activa
    values.pop("is_active")
    enrollment = enrollment_service.create_enrollment(**values)
    return jsonify(enrollment_to_dict(enrollment)), 201


@bp.route("/<int:enrollment_id>")
def get_matricula(enrollment_id):
    return jsonify(enrollment_to_dict(enrollment_service.get_enrollment(enrollment_id)))


@bp.route("/<int:enrollment_id>", methods=["PATCH"])
def update_matricula(enrollment_id):
    form = load_form(EnrollmentForm, json_body(), partial=True)
    enrollment = enrollment_service.update_enrollment(enrollment_id, _enrollment_values(form))
    return jsonify(enrollment_to_dict(enrollment))


@bp.route("/<int:enrollment_id>", methods=["DELETE"])
def delete_matricula(enrollment_id):
    return jsonify(message=enrollment_service.delete_enrollment(enrollment_id))


@bp.route("/profesor/<int:teacher_id>")
def matriculas_por_profesor(teacher_id):
    enrollments = enrollment_service.list_enrollments_by_teacher(teacher_id)
    return jsonify([enrollment_to_dict(e) for e in enrollments])


@bp.route("/<int:enrollment_id>/horarios")
def horarios_de_matricula(enrollment_id):
    slots = enrollment_service.get_enrollment_slots(enrollment_id)
    return jsonify([timeslot_to_dict(s) for s in slots])


@bp.route("/<int:enrollment_id>/materias")
def materias_de_matricula(enrollment_id):
    subjects = enrollment_service.get_enrollment_subjects(enrollment_id)
    return jsonify([subject_to_dict(s) for s in subjects])
