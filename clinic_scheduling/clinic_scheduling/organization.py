# Copyright (c) 2026, Clinica Team and contributors
# For license information, please see license.txt

"""
Clinic Organization hooks

Clinic Organization belongs to another app; its scheduling fields are
validated here through doc_events (see hooks.py).
"""

import frappe
from frappe import _

from clinic_scheduling.clinic_scheduling.scheduling.settings import SchedulingSettings


def validate_opening_hours(doc, method=None) -> None:
	"""
	Valida que opens_at sea anterior a closes_at.

	Un solo campo configurado se combina con el valor por defecto del otro
	(08:00 / 20:00), igual que al leer la agenda.
	"""
	try:
		SchedulingSettings.from_mapping({
			"opens_at": doc.get("opens_at"),
			"closes_at": doc.get("closes_at"),
			"timezone": doc.get("timezone")
		})
	except ValueError as e:
		frappe.throw(_(f"Horario de apertura inválido: {str(e)}"))
