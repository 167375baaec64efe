from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from werkzeug.exceptions import BadRequest
from wtforms import (
    BooleanField,
    DecimalField,
    FieldList,
    IntegerField,
    SelectField,
    StringField,
    TimeField,
)
from wtforms.fields import DateField
from wtforms.validators import (
    InputRequired,
    Length,
    NumberRange,
    Optional,
    StopValidation,
)

from .models import DayOfWeek, Modality, Shift

REQUIRED = "Este campo es obligatorio."
TIME_FORMATS = ["%H:%M", "%H:%M:%S"]


class InvalidPayload(BadRequest):
    def __init__(self, errors: dict):
        self.errors = errors
        detail = "; ".join(
            f"{field}: {', '.join(str(m) for m in messages)}"
            for field, messages in errors.items()
        )
        super().__init__(detail or "Solicitud inválida.")


def _finite(form, field):
    if field.data is not None and not field.data.is_finite():
        raise StopValidation("Debe ser un número finito.")


def _as_text(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def json_formdata(payload: dict) -> MultiDict:
    """Traduce el JSON a formdata; las listas usan claves ``campo-0``, ``campo-1``."""
    formdata = MultiDict()
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, list):
            for index, item in enumerate(value):
                formdata.add(f"{key}-{index}", _as_text(item))
        else:
            formdata.add(key, _as_text(value))
    return formdata


def load_form(form_cls, payload: dict, *, partial: bool = False):
    """Valida ``payload`` con ``form_cls`` o lanza ``InvalidPayload`` (400).

    En modo parcial solo se validan los campos presentes en el JSON.
    """
    form = form_cls(formdata=json_formdata(payload))
    if partial:
        for name in [field.name for field in form]:
            if name not in payload:
                del form[name]
    if not form.validate():
        raise InvalidPayload(form.errors)
    return form


class ApiForm(FlaskForm):
    class Meta:
        csrf = False


class RoomForm(ApiForm):
    name = StringField("Nombre", validators=[InputRequired(REQUIRED), Length(max=120)])
    capacity = IntegerField(
        "Capacidad",
        validators=[InputRequired(REQUIRED), NumberRange(min=1, message="Debe ser un número positivo.")],
    )
    room_type = StringField("Tipo de aula", validators=[InputRequired(REQUIRED), Length(max=50)])


class TimeSlotForm(ApiForm):
    day_of_week = SelectField(
        "Día",
        choices=[(d.name, d.value) for d in DayOfWeek],
        validators=[InputRequired(REQUIRED)],
    )
    start_time = TimeField("Hora de inicio", format=TIME_FORMATS, validators=[InputRequired(REQUIRED)])
    end_time = TimeField("Hora de salida", format=TIME_FORMATS, validators=[InputRequired(REQUIRED)])
    modality = SelectField(
        "Modalidad",
        choices=[(m.name, m.value) for m in Modality],
        validators=[InputRequired(REQUIRED)],
    )
    room_id = IntegerField("Aula", validators=[Optional()])


class EnrollmentForm(ApiForm):
    student_id = IntegerField("Estudiante", validators=[InputRequired(REQUIRED)])
    teacher_id = IntegerField("Profesor", validators=[InputRequired(REQUIRED)])
    subject_ids = FieldList(
        IntegerField("Materia"),
        validators=[Length(min=1, message="Debe indicar al menos una materia.")],
    )
    slot_ids = FieldList(
        IntegerField("Horario"),
        validators=[Length(min=1, message="Debe indicar al menos un horario.")],
    )
    enrollment_date = DateField("Fecha", format="%Y-%m-%d", validators=[InputRequired(REQUIRED)])
    start_date = DateField("Fecha de inicio", format="%Y-%m-%d", validators=[InputRequired(REQUIRED)])
    end_date = DateField("Fecha final", format="%Y-%m-%d", validators=[InputRequired(REQUIRED)])
    shift = SelectField(
        "Turno",
        choices=[(s.name, s.value) for s in Shift],
        validators=[InputRequired(REQUIRED)],
    )
    unit_price = DecimalField(
        "Precio",
        validators=[InputRequired(REQUIRED), _finite, NumberRange(min=0, message="No puede ser negativo.")],
    )
    materials_value = DecimalField(
        "Valor de materiales",
        validators=[Optional(), _finite, NumberRange(min=0, message="No puede ser negativo.")],
    )
    with_vat = BooleanField("Con IVA")
    is_active = BooleanField("Activa")
    notes = StringField("Observaciones", validators=[Optional(), Length(max=255)])
