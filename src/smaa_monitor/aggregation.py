"""Summary statistics, KPIs and hourly aggregation over a window of readings.

All functions are pure: they read the readings they are given, in the order
they are given, and return new values. Missing measurements (``None`` on a
:class:`~smaa_monitor.models.Reading`) are skipped by every statistic; when a
field is missing on every reading the statistic is :data:`MISSING`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional, Union

import numpy as np
import pandas as pd

from .models import MEASUREMENT_FIELDS, Location, Reading, Window
from .standards import (
	DEFAULT_STANDARDS,
	PM25_MODERATE_UPPER_BOUND,
	PM25_SAFE_LEVEL,
	AirQualityStandards,
	Category,
	PollutantKind,
	classify,
)


# Fields that also get max/min in the summary, the rest only get a mean.
RANGE_FIELDS = ("pm25", "pm10", "o3", "co", "temperature", "noise")
CURRENT_FIELDS = ("pm25", "pm10", "o3", "co", "temperature", "humidity")
HOURLY_FIELDS = ("pm25", "pm10", "o3", "co", "temperature", "humidity")
TREND_SPAN = 6


class EmptyWindowError(ValueError):
	"""Raised when a statistic is requested over a window with no readings."""


class MissingFieldValue:
	"""Marker for a statistic that is undefined because no reading had the field."""

	_instance: Optional["MissingFieldValue"] = None

	def __new__(cls) -> "MissingFieldValue":
		if cls._instance is None:
			cls._instance = super().__new__(cls)
		return cls._instance

	def __bool__(self) -> bool:
		return False

	def __str__(self) -> str:
		return "n/a"

	def __repr__(self) -> str:
		return "MISSING"


MISSING = MissingFieldValue()
StatValue = Union[float, MissingFieldValue]


class Trend(str, Enum):
	INCREASING = "Increasing"
	DECREASING = "Decreasing"

	def __str__(self) -> str:
		return self.value


@dataclass(frozen=True)
class SummaryStats:
	"""Per-field statistics for one window."""

	readings_count: int
	means: Mapping[str, StatValue]
	maxima: Mapping[str, StatValue]
	minima: Mapping[str, StatValue]

	def mean(self, field_name: str) -> StatValue:
		return self.means[field_name]

	def max(self, field_name: str) -> StatValue:
		return self.maxima[field_name]

	def min(self, field_name: str) -> StatValue:
		return self.minima[field_name]

	def is_defined(self, key: str) -> bool:
		return self.as_dict().get(key, MISSING) is not MISSING

	def as_dict(self) -> dict[str, Union[StatValue, int]]:
		flat: dict[str, Union[StatValue, int]] = {}
		for field_name in MEASUREMENT_FIELDS:
			flat[f"{field_name}_mean"] = self.means[field_name]
			if field_name in RANGE_FIELDS:
				flat[f"{field_name}_max"] = self.maxima[field_name]
				flat[f"{field_name}_min"] = self.minima[field_name]
		flat["readings_count"] = self.readings_count
		return flat


@dataclass(frozen=True)
class WindowKPIs:
	"""KPIs that only exist when a historical window was supplied."""

	readings_count: int
	pm25_mean: StatValue
	pm25_max: StatValue
	exceedances_pm25: int
	pm25_trend: Optional[Trend] = None


@dataclass(frozen=True)
class KPISet:
	"""Current status of the device plus window KPIs when available."""

	timestamp: float
	current: Mapping[str, StatValue]
	statuses: Mapping[str, Category]
	battery_level: Optional[float]
	device_online: bool
	last_seen: Optional[float]
	location: Optional[Location]
	window: Optional[WindowKPIs] = None

	@property
	def has_window(self) -> bool:
		return self.window is not None

	def as_dict(self) -> dict[str, object]:
		"""Flatten to key/value pairs. Window keys are omitted without a window."""

		flat: dict[str, object] = {"timestamp": self.timestamp}
		for field_name, value in self.current.items():
			flat[f"current_{field_name}"] = value
		for pollutant, status in self.statuses.items():
			flat[f"{pollutant}_status"] = status.value
		flat["battery_level"] = self.battery_level
		flat["device_online"] = self.device_online
		flat["last_seen"] = self.last_seen
		flat["location"] = str(self.location) if self.location is not None else None

		if self.window is not None:
			flat["window_readings"] = self.window.readings_count
			flat["pm25_window_mean"] = self.window.pm25_mean
			flat["pm25_window_max"] = self.window.pm25_max
			flat["exceedances_pm25"] = self.window.exceedances_pm25
			if self.window.pm25_trend is not None:
				flat["pm25_trend"] = self.window.pm25_trend.value
		return flat


@dataclass(frozen=True)
class HourlyBucket:
	"""Averages of the readings that fall inside one clock hour."""

	hour: pd.Timestamp
	readings: int
	means: Mapping[str, StatValue]

	def mean(self, field_name: str) -> StatValue:
		return self.means[field_name]

	def as_dict(self) -> dict[str, object]:
		flat: dict[str, object] = {"hour": self.hour}
		for field_name, value in self.means.items():
			flat[f"{field_name}_avg"] = value
		flat["readings"] = self.readings
		return flat


def window_frame(window: Iterable[Reading]) -> pd.DataFrame:
	"""Return the numeric fields of ``window`` as a float frame, NaN for missing."""

	columns = ["timestamp", *MEASUREMENT_FIELDS]
	rows = [[reading.timestamp, *(reading.value_of(f) for f in MEASUREMENT_FIELDS)] for reading in window]
	return pd.DataFrame(rows, columns=columns).astype(float)


def _require_readings(window: Optional[Window]) -> list[Reading]:
	readings = list(window) if window is not None else []
	if not readings:
		raise EmptyWindowError("The window contains no readings; statistics are undefined.")
	return readings


def _stat(series: pd.Series, how: str) -> StatValue:
	present = series.dropna()
	if present.empty:
		return MISSING
	return float(getattr(present, how)())


def summarize(window: Window) -> SummaryStats:
	"""Compute means (and max/min where relevant) for every measurement field."""

	readings = _require_readings(window)
	df = window_frame(readings)

	means = {name: _stat(df[name], "mean") for name in MEASUREMENT_FIELDS}
	maxima = {name: _stat(df[name], "max") for name in RANGE_FIELDS}
	minima = {name: _stat(df[name], "min") for name in RANGE_FIELDS}

	return SummaryStats(
		readings_count=len(readings),
		means=means,
		maxima=maxima,
		minima=minima,
	)


def count_exceedances(window: Window, threshold: float = PM25_MODERATE_UPPER_BOUND) -> int:
	"""Number of readings whose PM2.5 is strictly above ``threshold``."""

	pm25 = pd.Series([reading.pm25 for reading in window], dtype=float)
	return int((pm25 > threshold).sum())


def count_above_safe_level(window: Window) -> int:
	return count_exceedances(window, threshold=PM25_SAFE_LEVEL)


def pm25_trend(window: Window) -> Optional[Trend]:
	"""Compare the mean PM2.5 of the last six readings with the first six.

	Windows shorter than twelve readings share readings between both halves,
	so a window of two to six readings always compares a mean with itself and
	reports Decreasing. Ties are Decreasing. ``None`` below two readings or when
	either half has no PM2.5 values.
	"""

	readings = list(window)
	if len(readings) < 2:
		return None

	pm25 = pd.Series([reading.pm25 for reading in readings], dtype=float)
	recent = pm25.tail(TREND_SPAN).mean()
	older = pm25.head(TREND_SPAN).mean()
	if pd.isna(recent) or pd.isna(older):
		return None
	return Trend.INCREASING if recent > older else Trend.DECREASING


def compute_kpis(
	latest: Reading,
	window: Optional[Window] = None,
	standards: AirQualityStandards = DEFAULT_STANDARDS,
) -> KPISet:
	"""Build the KPI set for a report.

	``window=None`` means no history was requested and the window KPIs are
	left out. An empty window raises :class:`EmptyWindowError`.
	"""

	current: dict[str, StatValue] = {}
	for name in CURRENT_FIELDS:
		value = latest.value_of(name)
		current[name] = value if value is not None else MISSING

	statuses = {}
	for kind in PollutantKind:
		value = latest.value_of(kind.value)
		statuses[kind.value] = classify(value, kind, standards) if value is not None else Category.UNKNOWN

	window_kpis = None
	if window is not None:
		readings = _require_readings(window)
		stats = summarize(readings)
		window_kpis = WindowKPIs(
			readings_count=stats.readings_count,
			pm25_mean=stats.mean("pm25"),
			pm25_max=stats.max("pm25"),
			exceedances_pm25=count_exceedances(readings),
			pm25_trend=pm25_trend(readings),
		)

	return KPISet(
		timestamp=latest.timestamp,
		current=current,
		statuses=statuses,
		battery_level=latest.battery,
		device_online=latest.online,
		last_seen=latest.last_seen,
		location=latest.location,
		window=window_kpis,
	)


def local_times(timestamps: pd.Series, timezone: str) -> pd.Series:
	"""Convert epoch seconds to tz-aware timestamps in ``timezone``."""

	return pd.to_datetime(timestamps, unit="s", utc=True).dt.tz_convert(timezone)


def _floor_to_hour(local: pd.Series) -> pd.Series:
	# Flooring re-localizes the wall time; keep each reading's own DST flag so
	# the repeated hour at a fall-back transition is not ambiguous.
	dst_flags = np.array([bool(ts.dst()) for ts in local], dtype=bool)
	return local.dt.floor("h", ambiguous=dst_flags, nonexistent="shift_backward")


def hourly_averages(window: Window, timezone: str = "UTC") -> list[HourlyBucket]:
	"""Group readings by the local clock hour they fall into.

	Only hours that contain at least one reading produce a bucket; buckets are
	returned in ascending time order.
	"""

	readings = _require_readings(window)
	df = window_frame(readings)
	df["hour"] = _floor_to_hour(local_times(df["timestamp"], timezone))

	buckets = []
	for hour, group in df.groupby("hour", sort=True):
		means = {name: _stat(group[name], "mean") for name in HOURLY_FIELDS}
		buckets.append(HourlyBucket(hour=hour, readings=len(group), means=means))
	return buckets
