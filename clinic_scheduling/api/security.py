"""
Security Utilities for Public APIs

Rate limiting and input validation for the guest booking endpoints.
Dates and times are validated with the same parsers the scheduling core
uses, so anything accepted here is understood downstream.
"""

import re
import frappe
from frappe import _
from frappe.utils import cint

from clinic_scheduling.clinic_scheduling.scheduling.time_utils import normalize_date, normalize_time


# ===================
# Rate Limiting
# ===================

# endpoint -> (requests, window in seconds), per IP
RATE_LIMITS = {
    "get_open_intervals": (30, 60),
    "get_available_slots": (30, 60),
    "check_slot": (20, 60),
    "lookup_client": (10, 60),
}

MAX_DURATION_MINUTES = 720
PHONE_MAX_LENGTH = 40


def check_rate_limit(endpoint: str) -> None:
    """
    Check the rate limit of a booking endpoint for the requesting IP.

    Limits come from RATE_LIMITS and can be overridden per site with
    `clinic_scheduling_rate_limits` in site_config.json, e.g.
    {"lookup_client": [5, 60]}.

    Raises:
        frappe.TooManyRequestsError: If rate limit exceeded
    """
    limit, seconds = _limits_for(endpoint)
    ip = frappe.local.request_ip or "unknown"
    cache_key = f"rate_limit:clinic_scheduling:{endpoint}:{ip}"

    current = cint(frappe.cache.get_value(cache_key) or 0)

    if current >= limit:
        frappe.log_error(
            title=_("Rate Limit Exceeded"),
            message=f"IP: {ip}, Endpoint: {endpoint}, Limit: {limit}/{seconds}s"
        )
        frappe.throw(
            _("Demasiadas solicitudes. Espere un momento e inténtelo de nuevo."),
            frappe.TooManyRequestsError
        )

    frappe.cache.set_value(cache_key, current + 1, expires_in_sec=seconds)


def _limits_for(endpoint: str):
    overrides = frappe.conf.get("clinic_scheduling_rate_limits") or {}
    limit, seconds = overrides.get(endpoint) or RATE_LIMITS[endpoint]
    return cint(limit), cint(seconds)


# ===================
# Input Validation
# ===================

def validate_link(doctype: str, name: str, field_name: str) -> str:
    """
    Validate that `name` is an existing `doctype` record
    (Clinic Organization, Clinic Professional, Clinic Appointment...).

    Raises:
        frappe.ValidationError: If missing or malformed
        frappe.DoesNotExistError: If no such record exists
    """
    if not name:
        frappe.throw(_(f"{field_name} es requerido"), frappe.ValidationError)

    name = str(name).strip()

    if len(name) > 140:
        frappe.throw(_(f"{field_name} es demasiado largo"), frappe.ValidationError)

    if not frappe.db.exists(doctype, name):
        frappe.throw(_(f"{doctype} {name} no existe"), frappe.DoesNotExistError)

    return name


def validate_date(value: str, field_name: str = "date") -> str:
    """
    Validate a calendar date (YYYY-MM-DD) and return it normalized.

    Raises:
        frappe.ValidationError: If the date is missing or not a real date
    """
    if not value:
        frappe.throw(_(f"{field_name} es requerido"), frappe.ValidationError)

    value = str(value).strip()

    if not re.match(r'^\d{4}-\d{2}-\d{2}$', value):
        frappe.throw(_(f"{field_name} inválido. Use YYYY-MM-DD"), frappe.ValidationError)

    try:
        return normalize_date(value)
    except ValueError:
        frappe.throw(_(f"{field_name} no es una fecha válida: {value}"), frappe.ValidationError)


def validate_time(value: str, field_name: str = "time") -> str:
    """
    Validate a time of day (HH:MM or HH:MM:SS) and return it as HH:MM.

    Raises:
        frappe.ValidationError: If the time is missing or invalid
    """
    if not value:
        frappe.throw(_(f"{field_name} es requerido"), frappe.ValidationError)

    try:
        value = normalize_time(str(value).strip())
    except ValueError:
        frappe.throw(_(f"{field_name} inválido. Use HH:MM"), frappe.ValidationError)

    # 24:00 may close a day but never start a booking
    if value == "24:00":
        frappe.throw(_(f"{field_name} inválido. Use HH:MM"), frappe.ValidationError)

    return value


def validate_duration(duration, field_name: str = "duration") -> int:
    """
    Validate a service duration in minutes (1 to MAX_DURATION_MINUTES).

    Raises:
        frappe.ValidationError: If duration is invalid
    """
    minutes = cint(duration)

    if minutes <= 0 or minutes > MAX_DURATION_MINUTES:
        frappe.throw(
            _(f"{field_name} debe estar entre 1 y {MAX_DURATION_MINUTES} minutos"),
            frappe.ValidationError
        )

    return minutes


def clean_phone_input(phone: str) -> str:
    """
    Trim a raw phone number, cap its length and drop control characters.
    Format checks are left to the phone normalizer.

    Raises:
        frappe.ValidationError: If the phone is missing
    """
    if not phone:
        frappe.throw(_("phone es requerido"), frappe.ValidationError)

    phone = str(phone).strip()[:PHONE_MAX_LENGTH]

    return re.sub(r'[\x00-\x1f\x7f]', '', phone)
