"""
Availability Resolver

Answers "is the clinic open" for a date, folding special-day overrides into
the organization's standard hours, and narrows that to the hours a
professional works (weekly schedule, breaks, vacations). It does not look at
existing appointments; whether a concrete slot is free is the conflict
detector's job.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .settings import SchedulingSettings
from .special_days import CLOSED, SPECIAL_HOURS, SpecialDay, resolve_special_day
from .time_utils import DateValue, TimeValue, to_minutes, to_time_of_day
from .work_schedules import Vacation, WorkBreak, WorkSchedule, find_vacation, schedules_for_day


@dataclass(frozen=True)
class OpenInterval:
	opens: str
	closes: str
	is_override: bool = False

	def contains(self, start_time: TimeValue) -> bool:
		"""[opens, closes): la hora de inicio cae dentro del intervalo."""
		return to_minutes(self.opens) <= to_minutes(start_time) < to_minutes(self.closes)

	def as_dict(self) -> dict:
		return {"opens": self.opens, "closes": self.closes, "is_override": self.is_override}


@dataclass(frozen=True)
class WorkingInterval:
	"""Tramo en el que la clínica está abierta y el profesional trabaja."""

	opens: str
	closes: str
	breaks: Tuple[WorkBreak, ...] = field(default_factory=tuple)
	buffer_minutes: int = 0
	is_override: bool = False


@dataclass(frozen=True)
class Eligibility:
	eligible: bool
	reason: Optional[str] = None
	is_override: bool = False


def open_intervals(
	target_date: DateValue,
	special_days: Iterable[SpecialDay],
	settings: Optional[SchedulingSettings] = None
) -> List[OpenInterval]:
	"""
	Intervalos de apertura de una fecha.

	Args:
		target_date: fecha (date o "YYYY-MM-DD")
		special_days: días especiales de la organización/profesional
		settings: horario estándar (08:00-20:00 si no se indica)

	Returns:
		list[OpenInterval]:
			- [] si el día está cerrado
			- [horario especial] con is_override=True
			- [horario estándar] en otro caso
	"""
	settings = settings or SchedulingSettings()
	schedule = resolve_special_day(target_date, special_days)

	if schedule.kind == CLOSED:
		return []

	if schedule.kind == SPECIAL_HOURS:
		return [OpenInterval(opens=schedule.opens, closes=schedule.closes, is_override=True)]

	return [OpenInterval(opens=settings.default_opens, closes=settings.default_closes)]


def working_intervals(
	target_date: DateValue,
	special_days: Iterable[SpecialDay],
	settings: Optional[SchedulingSettings] = None,
	schedules: Iterable[WorkSchedule] = (),
	vacations: Iterable[Vacation] = ()
) -> List[WorkingInterval]:
	"""
	Intervalos de apertura recortados al horario laboral del profesional.

	Returns:
		list[WorkingInterval]:
			- [] si la clínica cierra, el profesional está de vacaciones o no
				trabaja ese día de la semana
			- la intersección apertura/franja laboral, con sus descansos y
				margen entre citas
			- los intervalos de apertura tal cual si el profesional no tiene
				horario configurado
	"""
	clinic = open_intervals(target_date, special_days, settings)
	if not clinic or find_vacation(target_date, vacations):
		return []

	day_schedules = schedules_for_day(target_date, schedules)
	if day_schedules is None:
		return [
			WorkingInterval(opens=i.opens, closes=i.closes, is_override=i.is_override)
			for i in clinic
		]

	intervals = []
	for interval in clinic:
		for schedule in day_schedules:
			opens = max(to_minutes(interval.opens), to_minutes(schedule.start_time))
			closes = min(to_minutes(interval.closes), to_minutes(schedule.end_time))
			if opens >= closes:
				continue

			intervals.append(WorkingInterval(
				opens=to_time_of_day(opens),
				closes=to_time_of_day(closes),
				breaks=tuple(schedule.active_breaks()),
				buffer_minutes=schedule.buffer_minutes,
				is_override=interval.is_override
			))

	return intervals


def check_eligibility(
	target_date: DateValue,
	start_time: TimeValue,
	special_days: Iterable[SpecialDay],
	settings: Optional[SchedulingSettings] = None,
	schedules: Optional[Iterable[WorkSchedule]] = None,
	vacations: Optional[Iterable[Vacation]] = None
) -> Eligibility:
	"""
	Verifica si una hora de inicio cae dentro del horario de apertura y,
	si se indican, del horario laboral del profesional.

	Closed days, special hours and standard hours produce distinct reasons so
	the caller can tell "closed all day" apart from "outside opening hours".
	The clinic's reasons take precedence over the professional's.
	"""
	settings = settings or SchedulingSettings()
	special_days = list(special_days)
	schedule = resolve_special_day(target_date, special_days)

	if schedule.kind == CLOSED:
		reason = "Cerrado todo el día"
		if schedule.reason:
			reason = f"{reason}: {schedule.reason}"
		return Eligibility(eligible=False, reason=reason)

	intervals = open_intervals(target_date, special_days, settings)
	interval = next((i for i in intervals if i.contains(start_time)), None)

	if interval is None:
		if schedule.kind == SPECIAL_HOURS:
			return Eligibility(
				eligible=False,
				reason=f"Fuera del horario especial ({schedule.opens}-{schedule.closes})",
				is_override=True
			)

		return Eligibility(
			eligible=False,
			reason=f"Fuera del horario de apertura ({settings.default_opens}-{settings.default_closes})"
		)

	reason = _professional_restriction(target_date, start_time, schedules or (), vacations or ())
	if reason:
		return Eligibility(eligible=False, reason=reason, is_override=interval.is_override)

	return Eligibility(eligible=True, is_override=interval.is_override)


def _professional_restriction(
	target_date: DateValue,
	start_time: TimeValue,
	schedules: Iterable[WorkSchedule],
	vacations: Iterable[Vacation]
) -> Optional[str]:
	vacation = find_vacation(target_date, vacations)
	if vacation:
		return f"El profesional está de vacaciones ({vacation.start_date} - {vacation.end_date})"

	day_schedules = schedules_for_day(target_date, schedules)
	if day_schedules is None:
		return None
	if not day_schedules:
		return "El profesional no trabaja este día"

	start = to_minutes(start_time)
	for work in day_schedules:
		if not to_minutes(work.start_time) <= start < to_minutes(work.end_time):
			continue

		on_break = next((b for b in work.active_breaks() if b.contains(start)), None)
		if on_break:
			return f"Descanso del profesional ({on_break.start_time}-{on_break.end_time})"
		return None

	hours = ", ".join(f"{w.start_time}-{w.end_time}" for w in day_schedules)
	return f"Fuera del horario del profesional ({hours})"
