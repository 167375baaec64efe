# services/catalog.py
from ..models import Room, Student, Subject, Teacher, TimeSlot


def find_student(student_id):
    """Estudiante activo o ``None``."""
    return Student.query.filter_by(id=student_id, is_active=True, deleted_at=None).first()

def find_teacher(teacher_id):
    """Profesor activo o ``None``."""
    return Teacher.query.filter_by(id=teacher_id, is_active=True, deleted_at=None).first()

def find_subjects(subject_ids):
    """Materias activas entre ``subject_ids``; lista vacía si no hay ninguna."""
    ids = list(subject_ids or [])
    if not ids:
        return []
    return (
        Subject.query.filter(Subject.id.in_(ids), Subject.deleted_at.is_(None), Subject.is_active.is_(True))
        .order_by(Subject.id)
        .all()
    )

def find_room(room_id):
    """Aula activa o ``None``."""
    if room_id is None:
        return None
    return Room.query.filter_by(id=room_id, is_active=True, deleted_at=None).first()

def find_slots(slot_ids):
    ids = list(slot_ids or [])
    if not ids:
        return []
    return (
        TimeSlot.query.filter(TimeSlot.id.in_(ids), TimeSlot.deleted_at.is_(None))
        .order_by(TimeSlot.id)
        .all()
    )
