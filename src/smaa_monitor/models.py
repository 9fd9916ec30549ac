"""Typed sensor records consumed by the classification and aggregation code."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


POLLUTANT_FIELDS = ("pm25", "pm10", "o3", "co")
ENVIRONMENT_FIELDS = ("temperature", "humidity", "noise")
MEASUREMENT_FIELDS = POLLUTANT_FIELDS + ENVIRONMENT_FIELDS + ("battery",)


@dataclass(frozen=True)
class Location:
	"""Fixed GPS position reported by the device."""

	latitude: float
	longitude: float

	def __str__(self) -> str:
		return f"{self.latitude:.5f}, {self.longitude:.5f}"


@dataclass(frozen=True)
class Reading:
	"""One timestamped sample from the sensor.

	Measurement fields are ``None`` when the device did not report them. A
	missing value is never the same thing as zero and aggregations skip it.
	"""

	timestamp: float
	pm25: Optional[float] = None
	pm10: Optional[float] = None
	o3: Optional[float] = None
	co: Optional[float] = None
	temperature: Optional[float] = None
	humidity: Optional[float] = None
	noise: Optional[float] = None
	battery: Optional[float] = None
	online: bool = False
	location: Optional[Location] = None
	device_id: Optional[str] = None
	last_seen: Optional[float] = None

	def value_of(self, field_name: str) -> Optional[float]:
		"""Return a measurement by name (``pm25``, ``humidity`` ...)."""

		if field_name not in MEASUREMENT_FIELDS:
			raise ValueError(f"Unknown measurement field '{field_name}'.")
		return getattr(self, field_name)


# Readings in ascending timestamp order.
Window = Sequence[Reading]
