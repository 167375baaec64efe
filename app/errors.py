# app/errors.py


class SchedulingError(ValueError):
    """Error de dominio de matrículas y horarios.

    El mensaje se muestra tal cual al usuario; ``status_code`` lo usa la
    capa HTTP para elegir la respuesta.
    """

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(SchedulingError):
    status_code = 404

    def __init__(self, entity: str, detail: str | None = None):
        self.entity = entity
        super().__init__(detail or f"No existe {entity}")


class RoomRequired(SchedulingError):
    status_code = 400

    def __init__(self, message: str = "Debe especificar un aula para la modalidad presencial."):
        super().__init__(message)


class RoomNotFound(SchedulingError):
    status_code = 404

    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Aula con ID {room_id} no encontrada")


class ScheduleConflict(SchedulingError):
    status_code = 409

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class SlotsNotFound(SchedulingError):
    status_code = 404

    def __init__(self, missing_ids=()):
        self.missing_ids = sorted(missing_ids)
        if self.missing_ids:
            ids = ", ".join(str(i) for i in self.missing_ids)
            message = f"No existen horarios con ID {ids}"
        else:
            message = "No existen horarios"
        super().__init__(message)
