"""
Utilidades para trabajar con rangos horarios de ocupación de canchas.

Los horarios se manejan en minutos desde medianoche y los rangos son
semiabiertos: [inicio, fin). Una mejenga de 14:00 a 15:00 no choca con una
reserva de 15:00 a 16:00.
"""

from datetime import date, datetime, timedelta, time
from typing import Tuple

MINUTES_PER_DAY = 24 * 60


def parse_time_to_minutes(time_str: str) -> int:
    """
    Convierte un string de tiempo (HH:MM) a minutos desde medianoche.

    Args:
        time_str: String en formato "HH:MM"

    Returns:
        int: Minutos desde medianoche (0-1439), o -1 si el formato es inválido
    """
    try:
        parts = time_str.split(":")
        if len(parts) != 2:
            return -1
        hours = int(parts[0])
        minutes = int(parts[1])
    except (ValueError, AttributeError):
        return -1

    if not (0 <= hours < 24 and 0 <= minutes < 60):
        return -1
    return hours * 60 + minutes


def minutes_to_time_string(minutes: int) -> str:
    """
    Convierte minutos desde medianoche a string de tiempo (HH:MM).
    """
    hours = minutes // 60
    mins = minutes % 60
    return f"{hours:02d}:{mins:02d}"


def minutes_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def start_instant(day: date, start_minute: int) -> datetime:
    """Fecha y hora en que arranca una ocupación."""
    return datetime.combine(day, time()) + timedelta(minutes=start_minute)


def intervals_overlap(first: Tuple[int, int], second: Tuple[int, int]) -> bool:
    """
    Dos rangos [s1, e1) y [s2, e2) se solapan si s1 < e2 y s2 < e1.

    Cubre los cuatro casos (empieza dentro, termina dentro, contiene, es
    contenido) con una sola condición. Tocarse en el borde no es solapamiento.
    """
    first_start, first_end = first
    second_start, second_end = second
    return first_start < second_end and second_start < first_end
