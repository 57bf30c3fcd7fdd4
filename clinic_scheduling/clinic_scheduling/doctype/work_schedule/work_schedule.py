# Copyright (c) 2026, Clinica Team and contributors
# For license information, please see license.txt

"""
Work Schedule DocType

Franja semanal de trabajo de un profesional (un día de la semana), con sus
descansos en la tabla hija Work Schedule Break.
"""

import frappe
from frappe import _
from frappe.model.document import Document

from clinic_scheduling.clinic_scheduling.scheduling.time_utils import normalize_time, to_minutes
from clinic_scheduling.clinic_scheduling.scheduling.work_schedules import WEEKDAYS


class WorkSchedule(Document):
	"""
	Work Schedule with validation for breaks.

	Validations:
	- weekday is one of Monday..Sunday
	- start_time < end_time
	- buffer_minutes >= 0
	- each break: start < end, inside the schedule
	- no overlapping active breaks
	- no other active schedule of the professional overlapping on the same weekday
	"""

	def validate(self) -> None:
		if not self.organization or not self.professional:
			frappe.throw(_("Organization y Professional son requeridos"))

		if self.weekday not in WEEKDAYS:
			frappe.throw(_(f"Weekday inválido: {self.weekday}"))

		self.start_time, self.end_time = self._times(self.start_time, self.end_time, _("Horario"))

		if (self.buffer_minutes or 0) < 0:
			frappe.throw(_("Buffer Minutes no puede ser negativo"))

		self._validate_breaks()

		if self.is_active:
			self._validate_no_overlapping_schedules()

	def _validate_breaks(self) -> None:
		start = to_minutes(self.start_time)
		end = to_minutes(self.end_time)
		active = []

		for idx, row in enumerate(self.breaks or [], 1):
			row.start_time, row.end_time = self._times(row.start_time, row.end_time, _(f"Descanso fila {idx}"))

			if to_minutes(row.start_time) < start or to_minutes(row.end_time) > end:
				frappe.throw(
					_(f"Descanso fila {idx} ({row.start_time}-{row.end_time}) fuera del horario ({self.start_time}-{self.end_time})")
				)

			if row.is_active:
				active.append((to_minutes(row.start_time), idx, row))

		# Ordenar y comparar cada par consecutivo
		active.sort(key=lambda x: x[0])
		for (_start, idx, current), (_next_start, next_idx, next_row) in zip(active, active[1:]):
			if to_minutes(current.end_time) > to_minutes(next_row.start_time):
				frappe.throw(
					_(f"Descansos solapados - Fila {idx} ({current.start_time}-{current.end_time}) "
					  f"se solapa con Fila {next_idx} ({next_row.start_time}-{next_row.end_time})")
				)

	def _validate_no_overlapping_schedules(self) -> None:
		filters = {
			"organization": self.organization,
			"professional": self.professional,
			"weekday": self.weekday,
			"is_active": 1
		}
		if not self.is_new():
			filters["name"] = ["!=", self.name]

		for other in frappe.get_all("Work Schedule", filters=filters, fields=["name", "start_time", "end_time"]):
			if to_minutes(self.start_time) < to_minutes(other.end_time) and to_minutes(self.end_time) > to_minutes(other.start_time):
				frappe.throw(
					_(f"{self.weekday}: se solapa con {other.name} ({normalize_time(other.start_time)}-{normalize_time(other.end_time)})")
				)

	def _times(self, start_time, end_time, label):
		if not start_time or not end_time:
			frappe.throw(_(f"{label}: Start Time y End Time son requeridos"))

		try:
			start, end = normalize_time(start_time), normalize_time(end_time)
		except ValueError as e:
			frappe.throw(_(f"{label}: hora inválida: {str(e)}"))

		if to_minutes(start) >= to_minutes(end):
			frappe.throw(_(f"{label}: Start Time ({start}) debe ser menor que End Time ({end})"))

		return start, end
