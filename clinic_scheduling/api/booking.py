"""
Booking API Endpoints

Whitelisted functions used by the booking UI and the public booking page.
All endpoints allow guest access and are rate limited by IP address.
"""

import frappe
from frappe import _
from typing import Any, Dict, List, Optional

from clinic_scheduling.clinic_scheduling.clients.lookup import InvalidPhoneNumber, find_client_by_phone
from clinic_scheduling.clinic_scheduling.clients.phone import format_phone, normalize_phone
from clinic_scheduling.clinic_scheduling.scheduling.availability import check_eligibility, open_intervals
from clinic_scheduling.clinic_scheduling.scheduling.conflicts import (
	CHECK_FAILED_ERROR,
	CONFLICT_WARNING,
	AppointmentCandidate,
	ConflictCheckFailed,
	find_conflicts,
)
from clinic_scheduling.clinic_scheduling.scheduling.frappe_store import get_store
from clinic_scheduling.clinic_scheduling.scheduling.slots import generate_bookable_slots
from clinic_scheduling.clinic_scheduling.scheduling.store import StoreError
from clinic_scheduling.clinic_scheduling.scheduling.time_utils import DayBoundaryError, local_now

from clinic_scheduling.api.security import (
	check_rate_limit,
	clean_phone_input,
	validate_date,
	validate_duration,
	validate_link,
	validate_time,
)


CONFLICT_STATUS_CLEAR = "clear"
CONFLICT_STATUS_CONFLICTS = "conflicts"
CONFLICT_STATUS_UNVERIFIED = "unverified"
CONFLICT_STATUS_NOT_CHECKED = "not_checked"


@frappe.whitelist(allow_guest=True, methods=['GET'])
def get_open_intervals(organization: str, professional: str, date: str) -> List[Dict[str, Any]]:
	"""
	Horario de apertura de un día para un profesional.

	Rate limited: 30 requests per minute per IP.

	Returns:
		list[dict]: [{"opens": "08:00", "closes": "20:00", "is_override": False}]
			([] si la clínica está cerrada)
	"""
	check_rate_limit("get_open_intervals")

	organization = validate_link("Clinic Organization", organization, "organization")
	professional = validate_link("Clinic Professional", professional, "professional")
	date = validate_date(date, "date")

	store = get_store()

	try:
		settings = store.get_settings(organization)
		special_days = store.get_special_days(organization, professional)
	except StoreError:
		frappe.throw(_(CHECK_FAILED_ERROR))

	return [interval.as_dict() for interval in open_intervals(date, special_days, settings)]


@frappe.whitelist(allow_guest=True, methods=['GET', 'POST'])
def check_slot(
	organization: str,
	professional: str,
	date: str,
	start_time: str,
	duration: int,
	appointment: Optional[str] = None,
	group_activity: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Valida un horario ANTES de guardar la cita.

	Rate limited: 20 requests per minute per IP.

	Args:
		organization: Clinic Organization
		professional: profesional
		date: fecha (YYYY-MM-DD)
		start_time: hora de inicio (HH:MM)
		duration: duración en minutos
		appointment: Clinic Appointment en edición (se excluye)
		group_activity: Group Activity en edición (se excluye)

	Returns:
		dict: {
			"valid": bool,
			"errors": list[str],
			"warnings": list[str],
			"eligibility_ok": bool,
			"conflict_status": "clear" | "conflicts" | "unverified" | "not_checked",
			"conflicts": list[dict]
		}

	"conflicts" is a soft warning the user may override; "unverified" means
	availability could not be checked and the booking must not proceed.
"not_checked" means the slot itself is invalid (it crosses midnight), so
conflicts were never looked up.
	"""
	check_rate_limit("check_slot")

	organization = validate_link("Clinic Organization", organization, "organization")
	professional = validate_link("Clinic Professional", professional, "professional")
	date = validate_date(date, "date")
	start_time = validate_time(start_time, "start_time")
	duration = validate_duration(duration)
	if appointment:
		appointment = validate_link("Clinic Appointment", appointment, "appointment")
	if group_activity:
		group_activity = validate_link("Group Activity", group_activity, "group_activity")

	errors = []
	warnings = []
	eligibility_ok = True
	store = get_store()

	try:
		settings = store.get_settings(organization)
		special_days = store.get_special_days(organization, professional)
		schedules = store.get_work_schedules(organization, professional)
		vacations = store.get_vacations(organization, professional, date)
	except StoreError as e:
		frappe.log_error(f"Error in check_slot: {str(e)}", "Booking API")
		return _unverified(errors, warnings)

	eligibility = check_eligibility(
		date,
		start_time,
		special_days,
		settings,
		schedules=schedules,
		vacations=vacations
	)
	if not eligibility.eligible:
		errors.append(_(eligibility.reason))
		eligibility_ok = False

	candidate = AppointmentCandidate(
		organization_id=organization,
		professional_id=professional,
		date=date,
		start_time=start_time,
		duration_minutes=duration,
		exclude_appointment_id=appointment,
		exclude_group_activity_id=group_activity
	)

	try:
		conflicts = find_conflicts(candidate, store)
	except DayBoundaryError:
		errors.append(_("La cita no puede terminar después de medianoche"))
		return {
			"valid": False,
			"errors": errors,
			"warnings": warnings,
			"eligibility_ok": eligibility_ok,
			"conflict_status": CONFLICT_STATUS_NOT_CHECKED,
			"conflicts": []
		}
	except ConflictCheckFailed as e:
		frappe.log_error(f"Error in check_slot: {str(e)}", "Booking API")
		return _unverified(errors, warnings, eligibility_ok)

	if conflicts:
		warnings.append(_(CONFLICT_WARNING))

	return {
		"valid": not errors,
		"errors": errors,
		"warnings": warnings,
		"eligibility_ok": eligibility_ok,
		"conflict_status": CONFLICT_STATUS_CONFLICTS if conflicts else CONFLICT_STATUS_CLEAR,
		"conflicts": [conflict.as_dict() for conflict in conflicts]
	}


@frappe.whitelist(allow_guest=True, methods=['GET'])
def get_available_slots(organization: str, professional: str, date: str, duration: int) -> List[Dict[str, Any]]:
	"""
	Huecos libres de un día para una duración de servicio.

	Rate limited: 30 requests per minute per IP.

	Returns:
		list[dict]: [{"start_time": "09:00", "end_time": "09:30", "available": True}, ...]
	"""
	check_rate_limit("get_available_slots")

	organization = validate_link("Clinic Organization", organization, "organization")
	professional = validate_link("Clinic Professional", professional, "professional")
	date = validate_date(date, "date")
	duration = validate_duration(duration)

	store = get_store()

	try:
		settings = store.get_settings(organization)
		slots = generate_bookable_slots(
			organization,
			professional,
			date,
			duration,
			store,
			settings=settings,
			now=local_now(settings.timezone)
		)
	except (StoreError, ConflictCheckFailed) as e:
		frappe.log_error(f"Error in get_available_slots: {str(e)}", "Booking API")
		frappe.throw(_(CHECK_FAILED_ERROR))

	return [slot.as_dict() for slot in slots]


@frappe.whitelist(allow_guest=True, methods=['GET', 'POST'])
def lookup_client(organization: str, phone: str) -> Dict[str, Any]:
	"""
	Busca un cliente existente por teléfono (reserva pública).

	Rate limited: 10 requests per minute per IP.

	Returns:
		dict: {
			"found": bool,
			"client": {"id", "name"} | None,
			"normalized_phone": str,
			"display_phone": str
		}
	"""
	check_rate_limit("lookup_client")

	organization = validate_link("Clinic Organization", organization, "organization")
	phone = clean_phone_input(phone)

	try:
		client = find_client_by_phone(get_store(), organization, phone)
	except InvalidPhoneNumber:
		frappe.throw(_("Número de teléfono inválido"), frappe.ValidationError)
	except StoreError as e:
		frappe.log_error(f"Error in lookup_client: {str(e)}", "Booking API")
		frappe.throw(_("Error al buscar el cliente"))

	frappe.logger("clinic_scheduling").info(
		f"lookup_client: organization={organization} found={bool(client)}"
	)

	return {
		"found": bool(client),
		# Only id and name go back to a guest; email/phone stay private
		"client": {"id": client["id"], "name": client["name"]} if client else None,
		"normalized_phone": normalize_phone(phone),
		"display_phone": format_phone(phone)
	}


def _unverified(errors: List[str], warnings: List[str], eligibility_ok: bool = False) -> Dict[str, Any]:
	errors.append(_(CHECK_FAILED_ERROR))
	return {
		"valid": False,
		"errors": errors,
		"warnings": warnings,
		"eligibility_ok": eligibility_ok,
		"conflict_status": CONFLICT_STATUS_UNVERIFIED,
		"conflicts": []
	}
