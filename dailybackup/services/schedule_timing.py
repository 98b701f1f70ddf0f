"""
Cálculo de la hora diaria de ejecución
"""
from datetime import datetime, time, timedelta


def parse_trigger_time(value: str) -> time:
    """
    Convierte HH:MM o HH:MM:SS en un objeto time

    Args:
        value: Hora en formato de 24 horas

    Returns:
        Hora del día

    Raises:
        ValueError: Si el formato o los rangos no son válidos
    """
    parts = str(value or "").strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"El formato de schedule debe ser HH:MM o HH:MM:SS: {value!r}")
    try:
        numbers = [int(p) for p in parts]
    except ValueError:
        raise ValueError(f"Hora inválida: {value!r}") from None
    hour, minute = numbers[0], numbers[1]
    second = numbers[2] if len(numbers) == 3 else 0
    if not (0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 59):
        raise ValueError(f"Hora fuera de rango: {value!r}")
    return time(hour, minute, second)


def next_trigger(now: datetime, at: time) -> datetime:
    """
    Próxima ejecución: hoy a la hora indicada si todavía no pasó,
    si no, mañana a la misma hora

    Args:
        now: Momento actual
        at: Hora diaria de ejecución

    Returns:
        Fecha y hora de la próxima ejecución
    """
    candidate = now.replace(hour=at.hour, minute=at.minute, second=at.second, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate
