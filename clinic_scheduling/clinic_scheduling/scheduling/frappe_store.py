"""
Frappe Scheduling Store

SchedulingStore backed by the site's database through frappe.get_all.

DocTypes read:
- Clinic Appointment
- Group Activity
- Special Day
- Work Schedule (+ Work Schedule Break child table)
- Vacation Request
- Clinic Client
- Clinic Professional (email, shown when a booking has no professional name)
- Clinic Organization (opening hours and timezone)

Rows that cannot be turned into scheduling values (missing times, reversed
hours) raise StoreError like a failed query: the caller cannot verify the
agenda with them.
"""

import frappe
from frappe.utils import get_system_timezone
from typing import Any, Dict, List, Optional

from .settings import SchedulingSettings
from .special_days import CLOSED, SPECIAL_HOURS, SpecialDay, find_duplicate_dates
from .store import CANCELLED_STATUS, SchedulingStore, StoreError
from .work_schedules import APPROVED, Vacation, WorkBreak, WorkSchedule


DAY_TYPES = {
	"Closed": CLOSED,
	"Special Hours": SPECIAL_HOURS,
}

LOG_TITLE = "Scheduling Store"


def get_store() -> "FrappeSchedulingStore":
	return FrappeSchedulingStore()


class FrappeSchedulingStore(SchedulingStore):
	"""Lecturas de agenda desde Frappe."""

	def get_appointments(
		self,
		organization_id: Any,
		professional_id: Any,
		date: str,
		exclude_id: Optional[Any] = None
	) -> List[Dict[str, Any]]:
		filters = {
			"organization": organization_id,
			"professional": professional_id,
			"appointment_date": date,
			"status": ["!=", CANCELLED_STATUS]
		}

		# Excluir la cita en edición
		if exclude_id:
			filters["name"] = ["!=", exclude_id]

		rows = self._get_all(
			"Clinic Appointment",
			filters=filters,
			fields=[
				"name",
				"start_time",
				"end_time",
				"status",
				"client_name",
				"professional_name"
			],
			order_by="start_time asc"
		)
		if not rows:
			return []

		professional_email = self._professional_email(professional_id)

		return [
			{
				"id": row.name,
				"start_time": row.start_time,
				"end_time": row.end_time,
				"status": row.status,
				"client_name": row.client_name,
				"professional_name": row.professional_name,
				"professional_email": professional_email
			}
			for row in rows
		]

	def get_group_activities(
		self,
		organization_id: Any,
		professional_id: Any,
		date: str,
		exclude_id: Optional[Any] = None
	) -> List[Dict[str, Any]]:
		filters = {
			"organization": organization_id,
			"professional": professional_id,
			"activity_date": date,
			"status": ["!=", CANCELLED_STATUS]
		}

		if exclude_id:
			filters["name"] = ["!=", exclude_id]

		rows = self._get_all(
			"Group Activity",
			filters=filters,
			fields=[
				"name",
				"activity_name",
				"start_time",
				"end_time",
				"status",
				"professional_name"
			],
			order_by="start_time asc"
		)
		if not rows:
			return []

		professional_email = self._professional_email(professional_id)

		return [
			{
				"id": row.name,
				"activity_name": row.activity_name,
				"start_time": row.start_time,
				"end_time": row.end_time,
				"status": row.status,
				"professional_name": row.professional_name,
				"professional_email": professional_email
			}
			for row in rows
		]

	def get_special_days(
		self,
		organization_id: Any,
		professional_id: Optional[Any] = None
	) -> List[SpecialDay]:
		"""
		Días especiales de la organización y, si se indica, del profesional.

		Organization-wide rows (no professional) apply to every professional.
		"""
		or_filters = None
		filters = {"organization": organization_id}

		if professional_id:
			or_filters = [
				["professional", "=", professional_id],
				["professional", "is", "not set"]
			]
		else:
			filters["professional"] = ["is", "not set"]

		rows = self._get_all(
			"Special Day",
			filters=filters,
			or_filters=or_filters,
			fields=["name", "date", "day_type", "opens_at", "closes_at", "reason"],
			order_by="date asc, creation asc"
		)

		special_days = []
		for row in rows:
			kind = DAY_TYPES.get(row.day_type)
			if not kind:
				frappe.logger("clinic_scheduling").warning(
					f"Special Day {row.name} has unknown day type '{row.day_type}', ignored"
				)
				continue

			try:
				special_days.append(SpecialDay(
					date=row.date,
					kind=kind,
					opens=row.opens_at,
					closes=row.closes_at,
					reason=row.reason,
					name=row.name
				))
			except ValueError as e:
				raise self._invalid("Special Day", row.name, e) from e

		duplicates = find_duplicate_dates(special_days)
		if duplicates:
			frappe.logger("clinic_scheduling").warning(
				f"Duplicate Special Day dates for {organization_id}/{professional_id or '-'}: "
				f"{', '.join(duplicates)}. Using the first one of each date."
			)

		return special_days

	def get_work_schedules(self, organization_id: Any, professional_id: Any) -> List[WorkSchedule]:
		"""
		Franjas activas del profesional con sus descansos.
		"""
		rows = self._get_all(
			"Work Schedule",
			filters={
				"organization": organization_id,
				"professional": professional_id,
				"is_active": 1
			},
			fields=["name", "weekday", "start_time", "end_time", "buffer_minutes"],
			order_by="start_time asc"
		)
		if not rows:
			return []

		break_rows = self._get_all(
			"Work Schedule Break",
			filters={
				"parenttype": "Work Schedule",
				"parent": ["in", [row.name for row in rows]]
			},
			fields=["parent", "start_time", "end_time", "is_active"],
			order_by="start_time asc"
		)

		breaks_by_schedule = {}
		schedules = []

		try:
			for row in break_rows:
				breaks_by_schedule.setdefault(row.parent, []).append(
					WorkBreak(start_time=row.start_time, end_time=row.end_time, is_active=bool(row.is_active))
				)

			for row in rows:
				schedules.append(WorkSchedule(
					weekday=row.weekday,
					start_time=row.start_time,
					end_time=row.end_time,
					breaks=tuple(breaks_by_schedule.get(row.name, ())),
					buffer_minutes=row.buffer_minutes or 0,
					name=row.name
				))
		except ValueError as e:
			raise self._invalid("Work Schedule", row.get("parent") or row.name, e) from e

		return schedules

	def get_vacations(self, organization_id: Any, professional_id: Any, date: str) -> List[Vacation]:
		rows = self._get_all(
			"Vacation Request",
			filters={
				"professional": professional_id,
				"status": "Approved",
				"start_date": ["<=", date],
				"end_date": [">=", date]
			},
			fields=["name", "start_date", "end_date"]
		)

		try:
			return [
				Vacation(start_date=row.start_date, end_date=row.end_date, status=APPROVED)
				for row in rows
			]
		except ValueError as e:
			raise self._invalid("Vacation Request", professional_id, e) from e

	def find_client_by_phone(self, organization_id: Any, phone: str) -> Optional[Dict[str, Any]]:
		rows = self._get_all(
			"Clinic Client",
			filters={"organization": organization_id, "phone": phone},
			fields=["name", "client_name", "email", "phone"],
			limit_page_length=1
		)

		if not rows:
			return None

		row = rows[0]
		return {
			"id": row.name,
			"name": row.client_name,
			"email": row.email,
			"phone": row.phone
		}

	def get_settings(self, organization_id: Any) -> SchedulingSettings:
		"""
		Horario estándar y timezone de la organización.

		Orden: campos de Clinic Organization -> site_config -> valores por defecto.
		"""
		try:
			site_defaults = SchedulingSettings.from_mapping({
				"opens_at": frappe.conf.get("clinic_scheduling_default_opens"),
				"closes_at": frappe.conf.get("clinic_scheduling_default_closes"),
				"timezone": frappe.conf.get("clinic_scheduling_timezone")
			})
		except ValueError as e:
			raise self._invalid("site_config", "clinic_scheduling_default_*", e) from e

		try:
			values = frappe.db.get_value(
				"Clinic Organization",
				organization_id,
				["opens_at", "closes_at", "timezone"],
				as_dict=True
			)
		except Exception as e:
			frappe.log_error(f"Error reading Clinic Organization {organization_id}: {str(e)}", LOG_TITLE)
			raise StoreError(str(e)) from e

		try:
			settings = SchedulingSettings.from_mapping(values, fallback=site_defaults)
		except ValueError as e:
			raise self._invalid("Clinic Organization", organization_id, e) from e

		if settings.timezone == "system timezone":
			settings = SchedulingSettings(
				default_opens=settings.default_opens,
				default_closes=settings.default_closes,
				timezone=get_system_timezone()
			)

		return settings

	def _professional_email(self, professional_id: Any) -> Optional[str]:
		try:
			return frappe.db.get_value("Clinic Professional", professional_id, "email")
		except Exception as e:
			frappe.log_error(f"Error reading Clinic Professional {professional_id}: {str(e)}", LOG_TITLE)
			raise StoreError(str(e)) from e

	def _get_all(self, doctype: str, **kwargs) -> List[Any]:
		try:
			return frappe.get_all(doctype, **kwargs)
		except Exception as e:
			frappe.log_error(f"Error reading {doctype}: {str(e)}", LOG_TITLE)
			raise StoreError(str(e)) from e

	def _invalid(self, source: str, name: Any, error: Exception) -> StoreError:
		frappe.log_error(f"Invalid scheduling data in {source} {name}: {str(error)}", LOG_TITLE)
		return StoreError(f"Datos inválidos en {source} {name}: {error}")
