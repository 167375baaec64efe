# services/admin.py
from ..models import Room, Student, Subject, Teacher
from ..extensions import db

# --------- Aulas ---------
def create_room(name: str, capacity: int, room_type: str) -> Room:
    if capacity is None or int(capacity) <= 0:
        raise ValueError("La capacidad del aula debe ser un número positivo")
    room = Room(name=name, capacity=int(capacity), room_type=room_type)
    db.session.add(room)
    return room

def deactivate_room(room: Room):
    room.is_active = False
    return room

# --------- Personas ---------
def create_student(name: str, document_id: str = None, email: str = None) -> Student:
    student = Student(name=name, document_id=document_id, email=email)
    db.session.add(student)
    return student

def create_teacher(name: str, email: str = None) -> Teacher:
    teacher = Teacher(name=name, email=email)
    db.session.add(teacher)
    return teacher

# --------- Materias ---------
def create_subject(name: str, code: str = None) -> Subject:
    subject = Subject(name=name, code=code)
    db.session.add(subject)
    return subject
