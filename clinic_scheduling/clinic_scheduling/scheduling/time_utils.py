"""
Time Interval Utilities

Conversions between wall-clock times ("HH:MM") and minute offsets from
midnight, plus the date/timezone helpers shared by the scheduling services.

Minute offsets live in [0, 1440]. 1440 renders as "24:00" so an appointment
may end exactly at midnight; anything past that crosses into the next day and
is rejected with DayBoundaryError.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Union

import pytz


MINUTES_PER_DAY = 24 * 60

TimeValue = Union[str, time, timedelta]
DateValue = Union[str, date, datetime]

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?$")


class DayBoundaryError(ValueError):
	"""El intervalo se sale del día (cruza la medianoche)."""
	pass


def to_minutes(value: TimeValue) -> int:
	"""
	Convierte una hora a minutos desde medianoche.

	Args:
		value: "HH:MM", "HH:MM:SS", datetime.time o timedelta (desde medianoche,
			como devuelve Frappe para campos Time)

	Returns:
		int: hours * 60 + minutes

	Raises:
		ValueError: si el valor no es una hora válida
	"""
	if isinstance(value, time):
		return value.hour * 60 + value.minute

	if isinstance(value, timedelta):
		minutes = int(value.total_seconds() // 60)
		if minutes < 0 or minutes > MINUTES_PER_DAY:
			raise ValueError(f"Time offset out of range: {value}")
		return minutes

	if isinstance(value, str):
		match = _TIME_RE.match(value.strip())
		if not match:
			raise ValueError(f"Invalid time: {value!r}")

		hours, minutes = int(match.group(1)), int(match.group(2))
		if minutes > 59:
			raise ValueError(f"Invalid time: {value!r}")
		if hours > 23 and not (hours == 24 and minutes == 0):
			raise ValueError(f"Invalid time: {value!r}")

		return hours * 60 + minutes

	raise ValueError(f"Cannot convert {type(value)} to time")


def to_time_of_day(minutes: int) -> str:
	"""
	Convierte minutos desde medianoche a "HH:MM".

	Raises:
		DayBoundaryError: si minutes está fuera de [0, 1440]
	"""
	if minutes < 0 or minutes > MINUTES_PER_DAY:
		raise DayBoundaryError(
			f"{minutes} minutes is outside a single day (0-{MINUTES_PER_DAY})"
		)

	hours, mins = divmod(minutes, 60)
	return f"{hours:02d}:{mins:02d}"


def add_duration(start: TimeValue, minutes: int) -> str:
	"""Hora de fin de un intervalo que empieza en start y dura minutes."""
	return to_time_of_day(to_minutes(start) + minutes)


def normalize_time(value: TimeValue) -> str:
	"""Cualquier representación de hora aceptada -> "HH:MM"."""
	return to_time_of_day(to_minutes(value))


def normalize_date(value: DateValue) -> str:
	"""
	Convierte una fecha a "YYYY-MM-DD".

	Strings with a time part ("2024-06-10 09:00:00", "2024-06-10T09:00") keep
	only the date.
	"""
	if isinstance(value, datetime):
		return value.date().isoformat()
	if isinstance(value, date):
		return value.isoformat()
	if isinstance(value, str):
		date_part = value.strip()[:10]
		return date.fromisoformat(date_part).isoformat()

	raise ValueError(f"Cannot convert {type(value)} to date")


def resolve_timezone(tz_name: str) -> pytz.BaseTzInfo:
	"""
	Obtiene el timezone por nombre, usando UTC si no existe.
	"""
	if not tz_name:
		return pytz.UTC

	try:
		return pytz.timezone(tz_name)
	except pytz.UnknownTimeZoneError:
		return pytz.UTC


def local_now(tz_name: str) -> datetime:
	"""Fecha/hora actual (aware) en el timezone indicado."""
	return datetime.now(resolve_timezone(tz_name))
