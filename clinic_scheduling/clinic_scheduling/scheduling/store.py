"""
Scheduling Store Interface

Read interface the scheduling services consume. The services never talk to
the database directly; they receive a store, so they can run against Frappe
(frappe_store.FrappeSchedulingStore) or an in-memory fake in tests.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .settings import SchedulingSettings


CANCELLED_STATUS = "cancelled"


class StoreError(Exception):
	"""Error al leer del almacenamiento (consulta fallida, backend caído)."""
	pass


class SchedulingStore(ABC):
	"""
	Interfaz base de lectura para los servicios de agenda.

	Todas las implementaciones deben lanzar StoreError si la lectura falla.
	"""

	@abstractmethod
	def get_appointments(
		self,
		organization_id: Any,
		professional_id: Any,
		date: str,
		exclude_id: Optional[Any] = None
	) -> List[Dict[str, Any]]:
		"""
		Citas no canceladas del profesional en la fecha.

		Args:
			organization_id: organización
			professional_id: profesional
			date: "YYYY-MM-DD"
			exclude_id: id de cita a excluir (edición)

		Returns:
			list[dict]: filas con id, start_time, end_time, status,
				client_name, professional_name, professional_email
		"""
		pass

	@abstractmethod
	def get_group_activities(
		self,
		organization_id: Any,
		professional_id: Any,
		date: str,
		exclude_id: Optional[Any] = None
	) -> List[Dict[str, Any]]:
		"""
		Actividades grupales no canceladas del profesional en la fecha.

		Returns:
			list[dict]: filas con id, activity_name, start_time, end_time, status,
				professional_name, professional_email
		"""
		pass

	@abstractmethod
	def get_special_days(
		self,
		organization_id: Any,
		professional_id: Optional[Any] = None
	) -> List[Any]:
		"""Días especiales configurados (list[SpecialDay]), en orden estable."""
		pass

	@abstractmethod
	def find_client_by_phone(self, organization_id: Any, phone: str) -> Optional[Dict[str, Any]]:
		"""Cliente cuyo teléfono almacenado es exactamente phone, o None."""
		pass

	def get_settings(self, organization_id: Any) -> SchedulingSettings:
		"""Configuración de agenda de la organización."""
		return SchedulingSettings()

	def get_work_schedules(self, organization_id: Any, professional_id: Any) -> List[Any]:
		"""
		Horario semanal del profesional (list[WorkSchedule]) con sus descansos.

		An empty list means no schedule is configured and the professional
		works whenever the clinic is open.
		"""
		return []

	def get_vacations(self, organization_id: Any, professional_id: Any, date: str) -> List[Any]:
		"""Vacaciones aprobadas (list[Vacation]) que incluyen la fecha."""
		return []
