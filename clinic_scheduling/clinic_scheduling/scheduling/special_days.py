"""
Special-Day Resolver

Decides how a calendar date is scheduled:
- CLOSED: the clinic does not open that day
- SPECIAL_HOURS: it opens with non-standard hours
- DEFAULT: the organization's standard hours apply
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .time_utils import DateValue, normalize_date, normalize_time


CLOSED = "closed"
SPECIAL_HOURS = "special_hours"
DEFAULT = "default"


@dataclass(frozen=True)
class SpecialDay:
	"""Override de horario para una fecha concreta."""

	date: str
	kind: str
	opens: Optional[str] = None
	closes: Optional[str] = None
	reason: Optional[str] = None
	name: Optional[str] = None

	def __post_init__(self) -> None:
		if self.kind not in (CLOSED, SPECIAL_HOURS):
			raise ValueError(f"Unknown special day kind: {self.kind!r}")
		object.__setattr__(self, "date", normalize_date(self.date))
		if self.opens:
			object.__setattr__(self, "opens", normalize_time(self.opens))
		if self.closes:
			object.__setattr__(self, "closes", normalize_time(self.closes))


@dataclass(frozen=True)
class DaySchedule:
	kind: str
	opens: Optional[str] = None
	closes: Optional[str] = None
	reason: Optional[str] = None
	special_day: Optional[SpecialDay] = None


def resolve_special_day(target_date: DateValue, special_days: Iterable[SpecialDay]) -> DaySchedule:
	"""
	Resuelve el tipo de horario de una fecha.

	Busca por coincidencia exacta de fecha; si hay duplicados gana el primero.
	Un SPECIAL_HOURS sin apertura o cierre no define horario y se trata como DEFAULT.

	Args:
		target_date: fecha (date o "YYYY-MM-DD")
		special_days: días especiales configurados

	Returns:
		DaySchedule: CLOSED, SPECIAL_HOURS (con opens/closes) o DEFAULT
	"""
	date_str = normalize_date(target_date)

	match = next((day for day in special_days if day.date == date_str), None)

	if match is None:
		return DaySchedule(kind=DEFAULT)

	if match.kind == CLOSED:
		return DaySchedule(kind=CLOSED, reason=match.reason, special_day=match)

	if match.opens and match.closes:
		return DaySchedule(
			kind=SPECIAL_HOURS,
			opens=match.opens,
			closes=match.closes,
			reason=match.reason,
			special_day=match
		)

	return DaySchedule(kind=DEFAULT)


def find_duplicate_dates(special_days: Iterable[SpecialDay]) -> List[str]:
	"""Fechas configuradas más de una vez, en orden de aparición."""
	seen = set()
	duplicates = []

	for day in special_days:
		if day.date in seen and day.date not in duplicates:
			duplicates.append(day.date)
		seen.add(day.date)

	return duplicates
