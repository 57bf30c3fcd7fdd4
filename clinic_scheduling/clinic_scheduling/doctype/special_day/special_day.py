# Copyright (c) 2026, Clinica Team and contributors
# For license information, please see license.txt

"""
Special Day DocType

Override de horario para una fecha concreta:
- Closed: la clínica no abre ese día
- Special Hours: abre con horario distinto al estándar

Puede aplicar a toda la organización o solo a un profesional.
"""

import frappe
from frappe import _
from frappe.model.document import Document

from clinic_scheduling.clinic_scheduling.scheduling.time_utils import to_minutes, normalize_time


class SpecialDay(Document):
	"""
	Special Day with validations.

	Validations:
	- organization, date and day_type required
	- Special Hours requires opens_at and closes_at, opens_at < closes_at
	- Warn on duplicate special days for same date/organization/professional
	"""

	def validate(self) -> None:
		"""
		Validación antes de guardar.
		"""
		self._validate_required_fields()
		self._validate_special_hours()
		self._check_duplicate_special_days()

	def _validate_required_fields(self) -> None:
		"""Valida campos requeridos."""
		if not self.organization:
			frappe.throw(_("Organization es requerido"))

		if not self.date:
			frappe.throw(_("Date es requerido"))

		if self.day_type not in ("Closed", "Special Hours"):
			frappe.throw(_("Day Type debe ser 'Closed' o 'Special Hours'"))

	def _validate_special_hours(self) -> None:
		"""
		Special Hours necesita apertura y cierre; Closed los ignora.
		"""
		if self.day_type == "Closed":
			self.opens_at = None
			self.closes_at = None
			return

		if not self.opens_at:
			frappe.throw(_("Special Hours requiere Opens At"))
		if not self.closes_at:
			frappe.throw(_("Special Hours requiere Closes At"))

		try:
			opens = to_minutes(self.opens_at)
			closes = to_minutes(self.closes_at)
		except ValueError as e:
			frappe.throw(_(f"Hora inválida: {str(e)}"))

		if opens >= closes:
			frappe.throw(
				_(f"Opens At ({normalize_time(self.opens_at)}) debe ser menor que Closes At ({normalize_time(self.closes_at)})")
			)

	def _check_duplicate_special_days(self) -> None:
		"""
		Advierte si ya existe un día especial para la misma fecha y alcance.
		No bloquea: al resolver, gana el primero creado.
		"""
		filters = {
			"organization": self.organization,
			"date": self.date,
			"professional": self.professional or ["is", "not set"],
			"name": ["!=", self.name] if self.name else ["is", "set"]
		}

		existing = frappe.get_all(
			"Special Day",
			filters=filters,
			fields=["name", "day_type"],
			order_by="creation asc"
		)

		if existing:
			frappe.msgprint(
				_(f"Ya existe un día especial ({existing[0].name}, {existing[0].day_type}) para {self.date}. "
				  f"Solo se aplicará el primero creado."),
				indicator="orange",
				alert=True
			)
