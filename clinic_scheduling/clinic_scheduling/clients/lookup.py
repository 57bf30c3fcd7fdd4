"""
Client Lookup

Finds an existing client of an organization from a phone typed on a public
booking form.
"""

from typing import Any, Dict, Optional

from clinic_scheduling.clinic_scheduling.scheduling.store import SchedulingStore

from .phone import is_valid_phone, phone_search_variations


class InvalidPhoneNumber(ValueError):
	pass


def find_client_by_phone(
	store: SchedulingStore,
	organization_id: Any,
	phone: str
) -> Optional[Dict[str, Any]]:
	"""
	Busca un cliente probando cada variación del teléfono en orden.

	Args:
		store: almacenamiento de lectura
		organization_id: organización
		phone: teléfono tal como lo escribió el usuario

	Returns:
		dict | None: primer cliente encontrado

	Raises:
		InvalidPhoneNumber: si el teléfono no es válido
		StoreError: si la consulta falla
	"""
	if not is_valid_phone(phone):
		raise InvalidPhoneNumber(f"Número de teléfono inválido: {phone!r}")

	for variation in phone_search_variations(phone):
		client = store.find_client_by_phone(organization_id, variation)
		if client:
			return client

	return None
