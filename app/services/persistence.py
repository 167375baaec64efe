# services/persistence.py
from contextlib import contextmanager

from flask import current_app
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import schedule_time_slots


@contextmanager
def transaction():
    """Unidad de trabajo: commit al salir, rollback ante cualquier error."""
    session = db.session
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        current_app.logger.error("Transacción revertida: %s", exc, exc_info=True)
        raise
    except Exception:
        session.rollback()
        raise


def create_in_transaction(session, obj):
    session.add(obj)
    session.flush()
    return obj


def save_in_transaction(session, obj):
    session.add(obj)
    session.flush()
    return obj


def soft_delete_in_transaction(session, obj):
    obj.soft_delete()
    session.flush()
    return obj


def delete_join_rows(session, schedule_id: int) -> int:
    """Borra las filas programación-horario de una programación."""
    result = session.execute(
        delete(schedule_time_slots).where(schedule_time_slots.c.schedule_id == schedule_id)
    )
    return result.rowcount
