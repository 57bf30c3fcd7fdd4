# Copyright (c) 2026, Clinica Team and contributors
# For license information, please see license.txt

"""
Clinic Appointment DocType

Cita individual de un cliente con un profesional.
"""

import frappe
from frappe import _
from frappe.model.document import Document

from clinic_scheduling.clinic_scheduling.clients.phone import is_valid_phone, normalize_phone
from clinic_scheduling.clinic_scheduling.scheduling.availability import check_eligibility
from clinic_scheduling.clinic_scheduling.scheduling.conflicts import (
	CHECK_FAILED_ERROR,
	CONFLICT_WARNING,
	AppointmentCandidate,
	ConflictCheckFailed,
	find_conflicts,
)
from clinic_scheduling.clinic_scheduling.scheduling.frappe_store import get_store
from clinic_scheduling.clinic_scheduling.scheduling.store import CANCELLED_STATUS, StoreError
from clinic_scheduling.clinic_scheduling.scheduling.time_utils import (
	DayBoundaryError,
	add_duration,
	normalize_date,
	normalize_time,
)


class ClinicAppointment(Document):
	"""
	Clinic Appointment with scheduling validation.

	Flujo:
	1. Se calcula end_time a partir de start_time + duration
	2. Se valida que la clínica esté abierta y el profesional trabaje a esa hora
	3. Se buscan solapamientos con otras citas/actividades del profesional:
		- con conflictos se bloquea salvo que allow_overlap esté marcado
		- si no se puede verificar, se bloquea siempre
	"""

	def validate(self) -> None:
		"""
		Validación antes de guardar.

		Ejecuta:
		1. Validar campos requeridos
		2. Normalizar teléfono del cliente
		3. Calcular end_time
		4. Validar horario de apertura
		5. Validar conflictos
		"""
		self._validate_required_fields()
		self._normalize_client_phone()
		self._calculate_end_time()

		if (self.status or "").lower() == CANCELLED_STATUS:
			return

		store = get_store()
		self._validate_opening_hours(store)
		self._validate_conflicts(store)

	# ===== VALIDATION METHODS =====

	def _validate_required_fields(self) -> None:
		"""Valida organización, profesional, fecha, hora y duración."""
		if not self.organization:
			frappe.throw(_("Organization es requerido"))

		if not self.professional:
			frappe.throw(_("Professional es requerido"))

		if not self.appointment_date or not self.start_time:
			frappe.throw(_("Appointment Date y Start Time son requeridos"))

		if not self.duration or int(self.duration) <= 0:
			frappe.throw(_("Duration debe ser mayor que 0"))

	def _normalize_client_phone(self) -> None:
		"""Guarda el teléfono en formato nacional para que las búsquedas coincidan."""
		if not self.client_phone:
			return

		if not is_valid_phone(self.client_phone):
			frappe.throw(_(f"Número de teléfono inválido: {self.client_phone}"))

		self.client_phone = normalize_phone(self.client_phone)

	def _calculate_end_time(self) -> None:
		"""end_time = start_time + duration; no se permiten citas que crucen medianoche."""
		try:
			self.start_time = normalize_time(self.start_time)
			self.end_time = add_duration(self.start_time, int(self.duration))
		except DayBoundaryError:
			frappe.throw(_("La cita no puede terminar después de medianoche"))
		except ValueError as e:
			frappe.throw(_(f"Hora inválida: {str(e)}"))

	def _validate_opening_hours(self, store) -> None:
		"""
		Bloquea si la clínica está cerrada, la hora cae fuera de horario o el
		profesional no trabaja a esa hora (vacaciones, descanso, otro día).
		"""
		try:
			settings = store.get_settings(self.organization)
			special_days = store.get_special_days(self.organization, self.professional)
			schedules = store.get_work_schedules(self.organization, self.professional)
			vacations = store.get_vacations(
				self.organization,
				self.professional,
				normalize_date(self.appointment_date)
			)
		except StoreError as e:
			frappe.log_error(f"Opening hours check failed for {self.name}: {str(e)}", "Clinic Appointment")
			frappe.throw(_(CHECK_FAILED_ERROR))

		eligibility = check_eligibility(
			self.appointment_date,
			self.start_time,
			special_days,
			settings,
			schedules=schedules,
			vacations=vacations
		)

		if not eligibility.eligible:
			frappe.throw(_(eligibility.reason))

	def _validate_conflicts(self, store) -> None:
		"""
		Valida solapamientos con la agenda del profesional.

		Conflicts block the save unless allow_overlap is set; a failed check
		always blocks.
		"""
		candidate = AppointmentCandidate(
			organization_id=self.organization,
			professional_id=self.professional,
			date=self.appointment_date,
			start_time=self.start_time,
			duration_minutes=int(self.duration),
			exclude_appointment_id=self.name if not self.is_new() else None
		)

		try:
			conflicts = find_conflicts(candidate, store)
		except ConflictCheckFailed as e:
			frappe.log_error(f"Conflict check failed for {self.name}: {str(e)}", "Clinic Appointment")
			frappe.throw(_(CHECK_FAILED_ERROR))

		if not conflicts:
			return

		details = ", ".join(
			f"{c.client_name} ({c.start_time}-{c.end_time})" for c in conflicts
		)

		if self.allow_overlap:
			frappe.msgprint(
				_(f"{CONFLICT_WARNING}: {details}"),
				indicator="orange",
				alert=True
			)
			return

		frappe.throw(
			_(f"{CONFLICT_WARNING}: {details}. Marque 'Allow Overlap' para guardar igualmente.")
		)
