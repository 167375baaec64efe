# app/models.py
import enum
from datetime import datetime, timezone

from sqlalchemy import event

from .extensions import db
from .services.pricing import round_currency


# ---------- Mixins ----------
class UtcTimestampMixin:
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class SoftDeleteMixin:
    deleted_at = db.Column(db.DateTime(timezone=True), nullable=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self):
        self.deleted_at = datetime.now(timezone.utc)


# ---------- Enums ----------
class DayOfWeek(enum.Enum):
    lunes = "Lunes"
    martes = "Martes"
    miercoles = "Miércoles"
    jueves = "Jueves"
    viernes = "Viernes"
    sabado = "Sábado"
    domingo = "Domingo"

class Modality(enum.Enum):
    presencial = "Presencial"
    virtual = "Virtual"

class Shift(enum.Enum):
    manana = "Mañana"
    tarde = "Tarde"
    noche = "Noche"


# ---------- Tablas de unión ----------
schedule_time_slots = db.Table(
    "schedule_time_slots",
    db.Column("schedule_id", db.Integer, db.ForeignKey("schedules.id"), primary_key=True),
    db.Column("time_slot_id", db.Integer, db.ForeignKey("time_slots.id"), primary_key=True),
)

enrollment_subjects = db.Table(
    "enrollment_subjects",
    db.Column("enrollment_id", db.Integer, db.ForeignKey("enrollments.id"), primary_key=True),
    db.Column("subject_id", db.Integer, db.ForeignKey("subjects.id"), primary_key=True),
)


# ---------- Personas y catálogo ----------
class Student(UtcTimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "students"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    document_id = db.Column(db.String(20), nullable=True, unique=True)
    email = db.Column(db.String(120), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    enrollments = db.relationship("Enrollment", back_populates="student")

    def __repr__(self):
        return f"<Student {self.name}>"


class Teacher(UtcTimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "teachers"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True, index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    enrollments = db.relationship("Enrollment", back_populates="teacher")

    def __repr__(self):
        return f"<Teacher {self.name}>"


class Subject(UtcTimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "subjects"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    code = db.Column(db.String(20), nullable=True, unique=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Subject {self.name}>"


class Room(UtcTimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "rooms"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    capacity = db.Column(db.Integer, nullable=False)
    room_type = db.Column(db.String(50), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    time_slots = db.relationship("TimeSlot", back_populates="room")

    def __repr__(self):
        return f"<Room {self.name} cap={self.capacity}>"


# ---------- Horarios ----------
class TimeSlot(UtcTimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "time_slots"
    __table_args__ = (
        db.Index(
            "uq_time_slots_presencial",
            "day_of_week", "start_time", "end_time", "room_id",
            unique=True,
            sqlite_where=db.text("deleted_at IS NULL AND modality = 'presencial'"),
            postgresql_where=db.text("deleted_at IS NULL AND modality = 'presencial'"),
        ),
        db.Index(
            "uq_time_slots_virtual",
            "day_of_week", "start_time", "end_time",
            unique=True,
            sqlite_where=db.text("deleted_at IS NULL AND modality = 'virtual'"),
            postgresql_where=db.text("deleted_at IS NULL AND modality = 'virtual'"),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    day_of_week = db.Column(db.Enum(DayOfWeek), nullable=False, index=True)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    daily_hours = db.Column(db.Numeric(5, 2), nullable=False)
    modality = db.Column(db.Enum(Modality), nullable=False)
    room_id = db.Column(db.Integer, db.ForeignKey("rooms.id"), nullable=True, index=True)

    room = db.relationship("Room", back_populates="time_slots")

    def __repr__(self):
        return (
            f"<TimeSlot {self.day_of_week.value} {self.start_time}-{self.end_time}"
            f" {self.modality.name} room={self.room_id}>"
        )


class Schedule(UtcTimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "schedules"

    id = db.Column(db.Integer, primary_key=True)

    time_slots = db.relationship(
        "TimeSlot",
        secondary=schedule_time_slots,
        order_by="TimeSlot.id",
    )
    enrollment = db.relationship("Enrollment", back_populates="schedule", uselist=False)

    def __repr__(self):
        return f"<Schedule {self.id} slots={len(self.time_slots)}>"


# ---------- Matrículas ----------
class Enrollment(UtcTimestampMixin, SoftDeleteMixin, db.Model):
    __tablename__ = "enrollments"

    id = db.Column(db.Integer, primary_key=True)
    enrollment_date = db.Column(db.Date, nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    shift = db.Column(db.Enum(Shift), nullable=False)

    # cantidad = suma de horas diarias de la programación
    quantity = db.Column(db.Numeric(8, 2), nullable=False)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)
    hours_value = db.Column(db.Numeric(12, 2), nullable=False)
    materials_value = db.Column(db.Numeric(12, 2), nullable=True)
    with_vat = db.Column(db.Boolean, default=False, nullable=False)
    total_value = db.Column(db.Numeric(12, 2), nullable=False)

    notes = db.Column(db.String(255), nullable=False, default="")
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    student_id = db.Column(db.Integer, db.ForeignKey("students.id"), nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey("teachers.id"), nullable=False, index=True)
    schedule_id = db.Column(
        db.Integer, db.ForeignKey("schedules.id"), nullable=False, unique=True
    )

    student = db.relationship("Student", back_populates="enrollments")
    teacher = db.relationship("Teacher", back_populates="enrollments")
    subjects = db.relationship("Subject", secondary=enrollment_subjects, order_by="Subject.id")
    schedule = db.relationship("Schedule", back_populates="enrollment")

    def soft_delete(self):
        super().soft_delete()
        self.is_active = False

    def __repr__(self):
        return f"<Enrollment {self.id} student={self.student_id} teacher={self.teacher_id}>"


@event.listens_for(Enrollment, "before_insert")
@event.listens_for(Enrollment, "before_update")
def _round_total_value(_mapper, _connection, target):
    if target.total_value is not None:
        target.total_value = round_currency(target.total_value)
