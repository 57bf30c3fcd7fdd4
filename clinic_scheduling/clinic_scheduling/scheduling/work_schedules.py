"""
Professional Work Schedules

Weekly working hours of a professional, the breaks inside them and approved
vacations. They narrow the clinic's opening hours: a professional can be
booked only while the clinic is open and they are working.

A professional without any active schedule is treated as working whenever
the clinic is open.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Tuple

from .time_utils import DateValue, TimeValue, normalize_date, normalize_time, to_minutes


WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

APPROVED = "approved"


@dataclass(frozen=True)
class WorkBreak:
	start_time: str
	end_time: str
	is_active: bool = True

	def __post_init__(self) -> None:
		object.__setattr__(self, "start_time", normalize_time(self.start_time))
		object.__setattr__(self, "end_time", normalize_time(self.end_time))
		if to_minutes(self.start_time) >= to_minutes(self.end_time):
			raise ValueError(f"Break start {self.start_time} must be before its end {self.end_time}")

	def contains(self, start_time: TimeValue) -> bool:
		return to_minutes(self.start_time) <= to_minutes(start_time) < to_minutes(self.end_time)


@dataclass(frozen=True)
class WorkSchedule:
	"""Franja de trabajo de un día de la semana, con sus descansos."""

	weekday: str
	start_time: str
	end_time: str
	is_active: bool = True
	breaks: Tuple[WorkBreak, ...] = field(default_factory=tuple)
	buffer_minutes: int = 0
	name: Optional[str] = None

	def __post_init__(self) -> None:
		weekday = (self.weekday or "").strip().capitalize()
		if weekday not in WEEKDAYS:
			raise ValueError(f"Unknown weekday: {self.weekday!r}")
		object.__setattr__(self, "weekday", weekday)

		object.__setattr__(self, "start_time", normalize_time(self.start_time))
		object.__setattr__(self, "end_time", normalize_time(self.end_time))
		if to_minutes(self.start_time) >= to_minutes(self.end_time):
			raise ValueError(f"Schedule start {self.start_time} must be before its end {self.end_time}")

		object.__setattr__(self, "breaks", tuple(self.breaks or ()))
		object.__setattr__(self, "buffer_minutes", int(self.buffer_minutes or 0))
		if self.buffer_minutes < 0:
			raise ValueError("buffer_minutes cannot be negative")

	def active_breaks(self) -> List[WorkBreak]:
		return [b for b in self.breaks if b.is_active]


@dataclass(frozen=True)
class Vacation:
	start_date: str
	end_date: str
	status: str = APPROVED

	def __post_init__(self) -> None:
		object.__setattr__(self, "start_date", normalize_date(self.start_date))
		object.__setattr__(self, "end_date", normalize_date(self.end_date))
		if self.start_date > self.end_date:
			raise ValueError(f"Vacation starts {self.start_date} after it ends {self.end_date}")

	def covers(self, target_date: DateValue) -> bool:
		"""Vacaciones aprobadas que incluyen la fecha (ambos extremos incluidos)."""
		date_str = normalize_date(target_date)
		return (self.status or "").lower() == APPROVED and self.start_date <= date_str <= self.end_date


def weekday_name(target_date: DateValue) -> str:
	"""Nombre del día de la semana ("Monday"...), independiente del locale."""
	return WEEKDAYS[date.fromisoformat(normalize_date(target_date)).weekday()]


def find_vacation(target_date: DateValue, vacations: Iterable[Vacation]) -> Optional[Vacation]:
	return next((v for v in vacations if v.covers(target_date)), None)


def schedules_for_day(target_date: DateValue, schedules: Iterable[WorkSchedule]) -> Optional[List[WorkSchedule]]:
	"""
	Franjas activas del profesional para el día de la semana de target_date.

	Returns:
		None si el profesional no tiene ningún horario activo (sin restricción),
		[] si tiene horario pero no trabaja ese día, o las franjas ordenadas
		por hora de inicio.
	"""
	active = [s for s in schedules if s.is_active]
	if not active:
		return None

	day = weekday_name(target_date)
	return sorted(
		(s for s in active if s.weekday == day),
		key=lambda s: to_minutes(s.start_time)
	)
