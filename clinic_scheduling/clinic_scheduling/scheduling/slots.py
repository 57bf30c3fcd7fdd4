"""
Slot Generation Service

Generates bookable time slots for a professional on a given date, considering:
- Opening hours (standard hours or special-day override)
- The professional's weekly schedule, breaks, buffer time and vacations
- Existing appointments and group activities
- Current time, when the date is today in the organization's timezone
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Tuple

from .availability import WorkingInterval, working_intervals
from .conflicts import ConflictCheckFailed
from .settings import SchedulingSettings
from .store import CANCELLED_STATUS, SchedulingStore, StoreError
from .time_utils import DateValue, normalize_date, resolve_timezone, to_minutes, to_time_of_day


@dataclass(frozen=True)
class BookableSlot:
	start_time: str
	end_time: str

	def as_dict(self) -> dict:
		return {"start_time": self.start_time, "end_time": self.end_time, "available": True}


def generate_bookable_slots(
	organization_id: Any,
	professional_id: Any,
	target_date: DateValue,
	duration_minutes: int,
	store: SchedulingStore,
	settings: Optional[SchedulingSettings] = None,
	now: Optional[datetime] = None
) -> List[BookableSlot]:
	"""
	Genera los huecos libres de un día para una duración de servicio.

	Args:
		organization_id: organización
		professional_id: profesional
		target_date: fecha (date o "YYYY-MM-DD")
		duration_minutes: duración del servicio
		store: almacenamiento de lectura
		settings: configuración de agenda (si no, la de la organización)
		now: instante actual (aware); si cae en target_date se omiten huecos pasados

	Returns:
		list[BookableSlot]: ordenados por hora de inicio

	Raises:
		ValueError: si duration_minutes no es positivo
		ConflictCheckFailed: si no se pudo leer la agenda o contiene datos inválidos

	Algoritmo:
		1. Obtener tramos de trabajo del día (apertura ∩ horario del profesional;
			ninguno si está de vacaciones o no trabaja ese día)
		2. Obtener citas y actividades grupales no canceladas (ocupado),
			ampliadas con el margen entre citas del tramo
		3. Para cada tramo, avanzar en pasos de duration_minutes:
			a. Si el hueco se solapa con algo ocupado o un descanso, saltar a su fin
			b. Si no, añadir el hueco
	"""
	if not duration_minutes or duration_minutes <= 0:
		raise ValueError("duration_minutes must be positive")

	date_str = normalize_date(target_date)

	try:
		settings = settings or store.get_settings(organization_id)
		special_days = store.get_special_days(organization_id, professional_id)
		schedules = store.get_work_schedules(organization_id, professional_id)
		vacations = store.get_vacations(organization_id, professional_id, date_str)
		appointments = store.get_appointments(organization_id, professional_id, date_str)
		group_activities = store.get_group_activities(organization_id, professional_id, date_str)
	except StoreError as e:
		raise ConflictCheckFailed(f"Error al obtener la agenda: {e}") from e

	earliest_start = _earliest_start(date_str, settings, now)
	if earliest_start is None:
		return []

	bookings = _booking_intervals(appointments + group_activities)
	slots = []

	for interval in working_intervals(date_str, special_days, settings, schedules, vacations):
		busy = _busy_intervals(interval, bookings)
		current = to_minutes(interval.opens)
		closes = to_minutes(interval.closes)

		while current + duration_minutes <= closes:
			slot_start = current
			slot_end = current + duration_minutes

			if slot_start < earliest_start:
				current = slot_end
				continue

			blocking = next(
				(b for b in busy if slot_start < b[1] and b[0] < slot_end),
				None
			)
			if blocking:
				current = blocking[1]
				continue

			slots.append(BookableSlot(
				start_time=to_time_of_day(slot_start),
				end_time=to_time_of_day(slot_end)
			))
			current = slot_end

	return slots


def _booking_intervals(rows: List[dict]) -> List[Tuple[int, int]]:
	bookings = []

	for row in rows:
		if (row.get("status") or "").lower() == CANCELLED_STATUS:
			continue
		try:
			bookings.append((to_minutes(row["start_time"]), to_minutes(row["end_time"])))
		except (KeyError, ValueError) as e:
			raise ConflictCheckFailed(f"Registro con horario inválido ({row.get('id')}): {e}") from e

	return bookings


def _busy_intervals(interval: WorkingInterval, bookings: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
	"""Citas ampliadas con el margen del tramo, más sus descansos."""
	buffer = interval.buffer_minutes
	busy = [(start - buffer, end + buffer) for start, end in bookings]
	busy.extend(
		(to_minutes(b.start_time), to_minutes(b.end_time)) for b in interval.breaks
	)
	busy.sort()
	return busy


def _earliest_start(date_str: str, settings: SchedulingSettings, now: Optional[datetime]) -> Optional[int]:
	"""
	Primer minuto reservable del día, o None si la fecha ya pasó.
	"""
	if now is None:
		return 0

	tz = resolve_timezone(settings.timezone)
	local = now.astimezone(tz) if now.tzinfo else tz.localize(now)
	today = local.date().isoformat()

	if date_str < today:
		return None
	if date_str > today:
		return 0

	return local.hour * 60 + local.minute
