"""HTTP client for the SMAA sensor service.

The service answers ``GET <base_url>?action=...`` with JSON. This module is the
ingestion boundary: every payload is turned into typed :class:`Reading` values
here so the rest of the package never touches loosely shaped JSON.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional

import pandas as pd
import requests

from .config import MonitorConfig
from .models import MEASUREMENT_FIELDS, POLLUTANT_FIELDS, Location, Reading


logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
	"""The sensor service returned an error status or an unusable payload."""

	def __init__(self, message: str, status_code: Optional[int] = None):
		super().__init__(message)
		self.status_code = status_code


def _to_float(value: Any) -> Optional[float]:
	if value is None or isinstance(value, bool):
		return None
	if isinstance(value, str):
		value = value.strip()
		if not value:
			return None
	try:
		number = float(value)
	except (TypeError, ValueError):
		return None
	return number if math.isfinite(number) else None


def _to_bool(value: Any) -> bool:
	if isinstance(value, str):
		return value.strip().lower() in {"true", "1", "yes", "online"}
	return bool(value)


def _to_epoch_seconds(value: Any) -> Optional[float]:
	number = _to_float(value)
	if number is not None:
		# Some firmware versions report milliseconds.
		return number / 1000.0 if number > 1e11 else number
	if isinstance(value, str):
		parsed = pd.to_datetime(value, utc=True, errors="coerce")
		if not pd.isna(parsed):
			return parsed.timestamp()
	return None


def parse_location(value: Any) -> Optional[Location]:
	"""Parse the ``fixed_gps`` field: a mapping, a ``[lat, lon]`` pair or ``"lat,lon"``."""

	if value is None:
		return None
	if isinstance(value, Mapping):
		lat = _to_float(value.get("lat", value.get("latitude")))
		lon = _to_float(value.get("lon", value.get("lng", value.get("longitude"))))
	elif isinstance(value, str):
		parts = value.split(",")
		if len(parts) != 2:
			return None
		lat, lon = _to_float(parts[0]), _to_float(parts[1])
	elif isinstance(value, (list, tuple)) and len(value) == 2:
		lat, lon = _to_float(value[0]), _to_float(value[1])
	else:
		return None

	if lat is None or lon is None:
		return None
	return Location(latitude=lat, longitude=lon)


def parse_reading(record: Mapping[str, Any], device_id: Optional[str] = None) -> Reading:
	"""Validate one JSON record and build a :class:`Reading`.

	Non-numeric or blank measurements become ``None``. Negative pollutant
	concentrations are physically impossible and are dropped the same way.
	"""

	if not isinstance(record, Mapping):
		raise ApiError(f"Expected a JSON object for a reading, got {type(record).__name__}.")

	timestamp = _to_epoch_seconds(record.get("timestamp"))
	if timestamp is None:
		raise ApiError(f"Reading has no usable timestamp: {record.get('timestamp')!r}")

	values = {name: _to_float(record.get(name)) for name in MEASUREMENT_FIELDS}
	for name in POLLUTANT_FIELDS:
		if values[name] is not None and values[name] < 0:
			logger.warning("Dropping negative %s value %s at %s", name, values[name], timestamp)
			values[name] = None

	return Reading(
		timestamp=timestamp,
		online=_to_bool(record.get("online", False)),
		location=parse_location(record.get("fixed_gps")),
		device_id=record.get("deviceID", device_id),
		last_seen=_to_float(record.get("last_seen_seconds")),
		**values,
	)


class SmaaClient:
	"""Thin wrapper around the sensor service's three actions."""

	def __init__(
		self,
		base_url: str,
		device_id: str,
		timeout: float = 10.0,
		session: Optional[requests.Session] = None,
	):
		self.base_url = base_url
		self.device_id = device_id
		self.timeout = timeout
		self.session = session or requests.Session()

	@classmethod
	def from_config(cls, config: MonitorConfig) -> "SmaaClient":
		return cls(
			base_url=config.api.base_url,
			device_id=config.api.device_id,
			timeout=config.api.timeout_seconds,
		)

	def _get(self, params: dict[str, Any]) -> Any:
		logger.debug("GET %s params=%s", self.base_url, params)
		response = self.session.get(self.base_url, params=params, timeout=self.timeout)
		if response.status_code != 200:
			raise ApiError(
				f"Error fetching '{params.get('action')}'. Status code: {response.status_code}",
				status_code=response.status_code,
			)
		try:
			return response.json()
		except ValueError as exc:
			raise ApiError(f"Response for '{params.get('action')}' is not valid JSON.") from exc

	def get_latest(self) -> Reading:
		"""Fetch the most recent reading of the device."""

		payload = self._get({"action": "latest", "deviceID": self.device_id})
		if not isinstance(payload, Mapping) or not isinstance(payload.get("data"), Mapping):
			raise ApiError("Latest reading response has no 'data' object.")
		device_id = payload.get("deviceID", self.device_id)
		return parse_reading(payload["data"], device_id=device_id)

	def get_history(self, hours: int = 24, limit: int = 100) -> list[Reading]:
		"""Fetch up to ``limit`` readings from the last ``hours`` hours, oldest first."""

		payload = self._get(
			{"action": "history", "deviceID": self.device_id, "hours": hours, "limit": limit}
		)
		records = payload.get("data") if isinstance(payload, Mapping) else None
		if not records:
			logger.warning("No historical data available for %s (last %s hours)", self.device_id, hours)
			return []
		if not isinstance(records, list):
			raise ApiError("History response 'data' must be a list of readings.")

		readings = [parse_reading(record, device_id=self.device_id) for record in records]
		readings.sort(key=lambda reading: reading.timestamp)
		logger.info("Retrieved %d readings for %s", len(readings), self.device_id)
		return readings

	def get_devices_status(self) -> list[dict[str, Any]]:
		"""Fetch the status records of every device on the network."""

		payload = self._get({"action": "devices"})
		if isinstance(payload, Mapping):
			devices = payload.get("devices", payload.get("data", []))
		else:
			devices = payload
		if not isinstance(devices, list):
			raise ApiError("Devices response must contain a list of devices.")
		return devices
