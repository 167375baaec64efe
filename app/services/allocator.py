# services/allocator.py
from datetime import datetime, date, time, timedelta
from decimal import Decimal

from .pricing import round_currency


def daily_hours(start: time, end: time) -> Decimal:
    """Horas entre ``start`` y ``end``; si ``end`` es menor, cruza la medianoche."""
    inicio = datetime.combine(date.min, start)
    salida = datetime.combine(date.min, end)
    if salida < inicio:
        salida += timedelta(days=1)
    seconds = Decimal((salida - inicio).total_seconds())
    return round_currency(seconds / Decimal(3600))
