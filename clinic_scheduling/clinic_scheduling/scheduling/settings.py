"""
Scheduling Settings

Per-organization scheduling configuration. Organizations that configure
nothing get the clinic's standard hours (08:00-20:00).
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .time_utils import normalize_time, to_minutes


DEFAULT_OPENS = "08:00"
DEFAULT_CLOSES = "20:00"
DEFAULT_TIMEZONE = "Europe/Madrid"


@dataclass(frozen=True)
class SchedulingSettings:
	default_opens: str = DEFAULT_OPENS
	default_closes: str = DEFAULT_CLOSES
	timezone: str = DEFAULT_TIMEZONE

	def __post_init__(self) -> None:
		if to_minutes(self.default_opens) >= to_minutes(self.default_closes):
			raise ValueError(
				f"Opening time {self.default_opens} must be before closing time {self.default_closes}"
			)

	@classmethod
	def from_mapping(
		cls,
		values: Optional[Mapping[str, Any]],
		fallback: Optional["SchedulingSettings"] = None
	) -> "SchedulingSettings":
		"""
		Construye settings a partir de un dict (fila de organización o site config).

		Keys: opens_at, closes_at, timezone. Missing or empty keys take the value
		from fallback (or the built-in defaults).
		"""
		fallback = fallback or cls()
		values = values or {}

		opens = values.get("opens_at")
		closes = values.get("closes_at")

		return cls(
			default_opens=normalize_time(opens) if opens else fallback.default_opens,
			default_closes=normalize_time(closes) if closes else fallback.default_closes,
			timezone=values.get("timezone") or fallback.timezone,
		)
