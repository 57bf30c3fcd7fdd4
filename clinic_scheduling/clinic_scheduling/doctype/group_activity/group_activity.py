# Copyright (c) 2026, Clinica Team and contributors
# For license information, please see license.txt

"""
Group Activity DocType

Actividad grupal (clase, taller) dirigida por un profesional. Ocupa su
agenda igual que una cita individual.
"""

import frappe
from frappe import _
from frappe.model.document import Document

from clinic_scheduling.clinic_scheduling.scheduling.conflicts import (
	CHECK_FAILED_ERROR,
	CONFLICT_WARNING,
	AppointmentCandidate,
	ConflictCheckFailed,
	find_conflicts,
)
from clinic_scheduling.clinic_scheduling.scheduling.frappe_store import get_store
from clinic_scheduling.clinic_scheduling.scheduling.store import CANCELLED_STATUS
from clinic_scheduling.clinic_scheduling.scheduling.time_utils import (
	DayBoundaryError,
	add_duration,
	normalize_time,
)


class GroupActivity(Document):

	def validate(self) -> None:
		if not self.organization or not self.professional:
			frappe.throw(_("Organization y Professional son requeridos"))

		if not self.activity_date or not self.start_time:
			frappe.throw(_("Activity Date y Start Time son requeridos"))

		if not self.duration or int(self.duration) <= 0:
			frappe.throw(_("Duration debe ser mayor que 0"))

		try:
			self.start_time = normalize_time(self.start_time)
			self.end_time = add_duration(self.start_time, int(self.duration))
		except DayBoundaryError:
			frappe.throw(_("La actividad no puede terminar después de medianoche"))
		except ValueError as e:
			frappe.throw(_(f"Hora inválida: {str(e)}"))

		if (self.status or "").lower() != CANCELLED_STATUS:
			self._validate_conflicts()

	def _validate_conflicts(self) -> None:
		candidate = AppointmentCandidate(
			organization_id=self.organization,
			professional_id=self.professional,
			date=self.activity_date,
			start_time=self.start_time,
			duration_minutes=int(self.duration),
			exclude_group_activity_id=self.name if not self.is_new() else None
		)

		try:
			conflicts = find_conflicts(candidate, get_store())
		except ConflictCheckFailed as e:
			frappe.log_error(f"Conflict check failed for {self.name}: {str(e)}", "Group Activity")
			frappe.throw(_(CHECK_FAILED_ERROR))

		if conflicts:
			details = ", ".join(f"{c.client_name} ({c.start_time}-{c.end_time})" for c in conflicts)
			frappe.msgprint(
				_(f"{CONFLICT_WARNING}: {details}"),
				indicator="orange",
				alert=True
			)
