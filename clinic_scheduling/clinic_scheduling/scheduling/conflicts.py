"""
Conflict Detection Service

Detects scheduling conflicts between a candidate appointment and the
professional's existing agenda for that day:
- Individual appointments (any status except cancelled)
- Group activities run by the same professional

Intervals are half-open [start, end): back-to-back bookings do not conflict.
The check is advisory; two concurrent bookings can both pass it, so the
database must still enforce exclusivity.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .store import CANCELLED_STATUS, SchedulingStore, StoreError
from .time_utils import TimeValue, add_duration, normalize_date, normalize_time, to_minutes


UNKNOWN_CLIENT = "Cliente desconocido"
UNKNOWN_PROFESSIONAL = "Profesional desconocido"

KIND_APPOINTMENT = "appointment"
KIND_GROUP_ACTIVITY = "group_activity"

# Distinct user-facing messages: a possible overlap can be overridden, an
# unverified check cannot.
CONFLICT_WARNING = "Este horario puede estar ya ocupado"
CHECK_FAILED_ERROR = "No se pudo verificar la disponibilidad, inténtelo de nuevo"


class ConflictCheckFailed(Exception):
	"""
	No se pudo verificar la disponibilidad.

	Distinto de "sin conflictos": el llamador no debe reservar a ciegas.
	"""
	pass


@dataclass
class AppointmentCandidate:
	organization_id: Any
	professional_id: Any
	date: Any
	start_time: Optional[TimeValue]
	duration_minutes: Optional[int]
	exclude_appointment_id: Optional[Any] = None
	exclude_group_activity_id: Optional[Any] = None

	def is_complete(self) -> bool:
		"""Tiene todo lo necesario para consultar conflictos."""
		return bool(
			self.organization_id
			and self.professional_id
			and self.date
			and self.start_time
			and self.duration_minutes
			and self.duration_minutes > 0
		)


@dataclass
class ConflictingAppointment:
	id: Any
	client_name: str
	start_time: str
	end_time: str
	professional_name: str
	status: str
	kind: str = KIND_APPOINTMENT

	def as_dict(self) -> Dict[str, Any]:
		return asdict(self)


def intervals_overlap(
	start_a: TimeValue,
	end_a: TimeValue,
	start_b: TimeValue,
	end_b: TimeValue
) -> bool:
	"""Solapamiento de intervalos semiabiertos: start_a < end_b AND end_a > start_b."""
	return to_minutes(start_a) < to_minutes(end_b) and to_minutes(end_a) > to_minutes(start_b)


def find_conflicts(candidate: AppointmentCandidate, store: SchedulingStore) -> List[ConflictingAppointment]:
	"""
	Busca citas y actividades grupales que se solapan con el candidato.

	Args:
		candidate: cita a validar (nueva o en edición)
		store: almacenamiento de lectura

	Returns:
		list[ConflictingAppointment]: vacío si no hay conflictos o si al
			candidato le faltan datos (no se consulta nada en ese caso)

	Raises:
		ConflictCheckFailed: si la consulta al almacenamiento falla o una fila
			no tiene un horario válido
		DayBoundaryError: si la cita termina después de medianoche

	Algoritmo:
		1. end_time = start_time + duration
		2. Leer citas/actividades no canceladas de (organización, profesional, fecha),
			excluyendo la que se está editando
		3. Filtrar con existing_start < end_time AND existing_end > start_time
		4. Mapear a ConflictingAppointment con nombres por defecto
	"""
	if not candidate.is_complete():
		return []

	date_str = normalize_date(candidate.date)
	start_time = normalize_time(candidate.start_time)
	end_time = add_duration(start_time, candidate.duration_minutes)

	try:
		appointments = store.get_appointments(
			candidate.organization_id,
			candidate.professional_id,
			date_str,
			exclude_id=candidate.exclude_appointment_id
		)
		group_activities = store.get_group_activities(
			candidate.organization_id,
			candidate.professional_id,
			date_str,
			exclude_id=candidate.exclude_group_activity_id
		)
	except StoreError as e:
		raise ConflictCheckFailed(f"Error al verificar conflictos: {e}") from e

	conflicts = []

	for row in appointments:
		if _is_excluded(row, candidate.exclude_appointment_id):
			continue
		conflict = _match_row(row, start_time, end_time, row.get("client_name"), KIND_APPOINTMENT)
		if conflict:
			conflicts.append(conflict)

	for row in group_activities:
		if _is_excluded(row, candidate.exclude_group_activity_id):
			continue
		conflict = _match_row(row, start_time, end_time, row.get("activity_name"), KIND_GROUP_ACTIVITY)
		if conflict:
			conflicts.append(conflict)

	return conflicts


def has_conflicts(candidate: AppointmentCandidate, store: SchedulingStore) -> bool:
	return bool(find_conflicts(candidate, store))


def _is_excluded(row: Dict[str, Any], exclude_id: Optional[Any]) -> bool:
	return exclude_id is not None and str(row.get("id")) == str(exclude_id)


def _match_row(
	row: Dict[str, Any],
	start_time: str,
	end_time: str,
	client_name: Optional[str],
	kind: str
) -> Optional[ConflictingAppointment]:
	# Rows without usable times fail the whole check
	try:
		if not _overlaps_row(row, start_time, end_time):
			return None
		return _conflict_from_row(row, client_name or UNKNOWN_CLIENT, kind)
	except (KeyError, ValueError) as e:
		raise ConflictCheckFailed(f"Registro con horario inválido ({row.get('id')}): {e}") from e


def _overlaps_row(row: Dict[str, Any], start_time: str, end_time: str) -> bool:
	# Rows from an external store are filtered again here; cancelled rows never count.
	if (row.get("status") or "").lower() == CANCELLED_STATUS:
		return False
	return intervals_overlap(row["start_time"], row["end_time"], start_time, end_time)


def _conflict_from_row(row: Dict[str, Any], client_name: str, kind: str) -> ConflictingAppointment:
	professional_name = (
		row.get("professional_name")
		or row.get("professional_email")
		or UNKNOWN_PROFESSIONAL
	)

	return ConflictingAppointment(
		id=row.get("id"),
		client_name=client_name,
		start_time=normalize_time(row["start_time"]),
		end_time=normalize_time(row["end_time"]),
		professional_name=professional_name,
		status=row.get("status") or "",
		kind=kind
	)
