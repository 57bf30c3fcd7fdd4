"""
Phone Number Normalization

Clients are stored with phones in whatever format they were typed
("+34 612 34 56 78", "0034612345678", "612345678"...). These helpers reduce
them to the national digit string used for comparison and search.
"""

import re
from typing import List


SPAIN_PREFIX = "+34"
SPAIN_PREFIX_INTL = "0034"
SPAIN_CODE = "34"
NATIONAL_LENGTH = 9


def normalize_phone(phone: str) -> str:
	"""
	Normaliza un teléfono a formato nacional, solo dígitos.

	Pasos:
		1. Eliminar todo excepto dígitos y "+"
		2. Quitar "+34", o "0034", o "34" seguido de al menos 9 dígitos
		3. Quitar ceros iniciales

	Returns:
		str: número normalizado ("" si phone está vacío)
	"""
	if not phone:
		return ""

	normalized = _strip_prefixes(re.sub(r"[^\d+]", "", str(phone)))

	# "+3434..." style inputs expose a second prefix after the first pass
	while True:
		again = _strip_prefixes(normalized)
		if again == normalized:
			return normalized
		normalized = again


def _strip_prefixes(normalized: str) -> str:
	if normalized.startswith(SPAIN_PREFIX):
		normalized = normalized[len(SPAIN_PREFIX):]
	elif normalized.startswith(SPAIN_PREFIX_INTL):
		normalized = normalized[len(SPAIN_PREFIX_INTL):]
	elif normalized.startswith(SPAIN_CODE) and len(normalized) >= len(SPAIN_CODE) + NATIONAL_LENGTH:
		normalized = normalized[len(SPAIN_CODE):]

	return normalized.lstrip("0")


def phones_equal(phone1: str, phone2: str) -> bool:
	"""Compara dos teléfonos normalizados; los muy cortos nunca son iguales."""
	normalized1 = normalize_phone(phone1)
	normalized2 = normalize_phone(phone2)

	return normalized1 == normalized2 and len(normalized1) >= NATIONAL_LENGTH


def format_phone(phone: str) -> str:
	"""
	Formatea para mostrar: "612 345 678".

	Numbers that are not 9 national digits are returned untouched.
	"""
	normalized = normalize_phone(phone)

	if len(normalized) == NATIONAL_LENGTH:
		return f"{normalized[0:3]} {normalized[3:6]} {normalized[6:9]}"

	return phone


def is_valid_phone(phone: str) -> bool:
	"""Entre 9 y 15 dígitos (estándar internacional) tras normalizar."""
	normalized = normalize_phone(phone)

	return NATIONAL_LENGTH <= len(normalized) <= 15 and normalized.isdigit()


def phone_search_variations(phone: str) -> List[str]:
	"""
	Variaciones de un teléfono para buscar en la base de datos.

	Order is the lookup priority: national, +34, 0034, 34.
	"""
	normalized = normalize_phone(phone)

	if len(normalized) == NATIONAL_LENGTH:
		return [
			normalized,
			f"{SPAIN_PREFIX}{normalized}",
			f"{SPAIN_PREFIX_INTL}{normalized}",
			f"{SPAIN_CODE}{normalized}",
		]

	return [normalized]
