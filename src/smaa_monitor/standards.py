"""Air quality standards (WHO & EPA) and the pollutant classifier.

Each pollutant has a table of inclusive upper concentration bounds. A value is
labelled with the first category whose bound it does not exceed; anything above
the last bound is Hazardous.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Union


# Summary displays and the "above safe level" count use the WHO safe level,
# exceedance counts use the upper edge of the EPA Moderate band.
PM25_SAFE_LEVEL = 12.0
PM25_MODERATE_UPPER_BOUND = 35.4


class Category(str, Enum):
	"""Health category of a pollutant concentration."""

	GOOD = "Good"
	MODERATE = "Moderate"
	UNHEALTHY_SENSITIVE = "Unhealthy for Sensitive Groups"
	UNHEALTHY = "Unhealthy"
	VERY_UNHEALTHY = "Very Unhealthy"
	HAZARDOUS = "Hazardous"
	UNKNOWN = "Unknown"

	def __str__(self) -> str:
		return self.value

	@property
	def severity(self) -> Optional[int]:
		"""Ordinal rank, 0 for Good. Unknown has no rank."""

		if self is Category.UNKNOWN:
			return None
		return _SEVERITY_ORDER.index(self)

	@property
	def color(self) -> str:
		return _CATEGORY_COLORS[self]


_SEVERITY_ORDER = (
	Category.GOOD,
	Category.MODERATE,
	Category.UNHEALTHY_SENSITIVE,
	Category.UNHEALTHY,
	Category.VERY_UNHEALTHY,
	Category.HAZARDOUS,
)

_CATEGORY_COLORS = {
	Category.GOOD: "#27ae60",
	Category.MODERATE: "#f39c12",
	Category.UNHEALTHY_SENSITIVE: "#e67e22",
	Category.UNHEALTHY: "#e74c3c",
	Category.VERY_UNHEALTHY: "#8e44ad",
	Category.HAZARDOUS: "#7f8c8d",
	Category.UNKNOWN: "#bdc3c7",
}


class PollutantKind(str, Enum):
	PM25 = "pm25"
	PM10 = "pm10"
	O3 = "o3"
	CO = "co"

	@property
	def unit(self) -> str:
		return _UNITS[self]

	@property
	def label(self) -> str:
		return _LABELS[self]


_UNITS = {
	PollutantKind.PM25: "µg/m³",
	PollutantKind.PM10: "µg/m³",
	PollutantKind.O3: "ppb",
	PollutantKind.CO: "ppm",
}

_LABELS = {
	PollutantKind.PM25: "PM2.5",
	PollutantKind.PM10: "PM10",
	PollutantKind.O3: "O3",
	PollutantKind.CO: "CO",
}


@dataclass(frozen=True)
class BreakpointTable:
	"""Ordered ``(upper_bound, category)`` pairs with an open-ended catch-all."""

	breakpoints: tuple[tuple[float, Category], ...]
	catch_all: Category = Category.HAZARDOUS

	def __post_init__(self) -> None:
		if not self.breakpoints:
			raise ValueError("A breakpoint table needs at least one bound.")
		bounds = [bound for bound, _ in self.breakpoints]
		for lower, upper in zip(bounds, bounds[1:]):
			if not upper > lower:
				raise ValueError(
					f"Breakpoints must be strictly increasing; got {lower} followed by {upper}."
				)

	@classmethod
	def from_upper_bounds(cls, bounds: Sequence[float]) -> "BreakpointTable":
		"""Build a table from the five bounds Good .. Very Unhealthy."""

		if len(bounds) != len(_SEVERITY_ORDER) - 1:
			raise ValueError(
				f"Expected {len(_SEVERITY_ORDER) - 1} upper bounds, received {len(bounds)}."
			)
		pairs = tuple((float(bound), category) for bound, category in zip(bounds, _SEVERITY_ORDER))
		return cls(breakpoints=pairs)

	@property
	def upper_bounds(self) -> tuple[float, ...]:
		return tuple(bound for bound, _ in self.breakpoints)

	def lookup(self, value: float) -> Category:
		for bound, category in self.breakpoints:
			if value <= bound:
				return category
		return self.catch_all


@dataclass(frozen=True)
class AirQualityStandards:
	"""Read-only set of breakpoint tables, one per pollutant kind."""

	tables: Mapping[PollutantKind, BreakpointTable]

	def __post_init__(self) -> None:
		object.__setattr__(self, "tables", MappingProxyType(dict(self.tables)))

	@classmethod
	def from_mapping(cls, bounds_by_pollutant: Mapping[str, Sequence[float]]) -> "AirQualityStandards":
		tables = {
			PollutantKind(name): BreakpointTable.from_upper_bounds(bounds)
			for name, bounds in bounds_by_pollutant.items()
		}
		return cls(tables=tables)

	def with_overrides(self, bounds_by_pollutant: Mapping[str, Sequence[float]]) -> "AirQualityStandards":
		tables = dict(self.tables)
		tables.update(AirQualityStandards.from_mapping(bounds_by_pollutant).tables)
		return AirQualityStandards(tables=tables)

	def table_for(self, pollutant: PollutantKind) -> Optional[BreakpointTable]:
		return self.tables.get(pollutant)


DEFAULT_BOUNDS = {
	"pm25": (12.0, 35.4, 55.4, 150.4, 250.4),
	"pm10": (54.0, 154.0, 254.0, 354.0, 424.0),
	"o3": (54.0, 70.0, 85.0, 105.0, 200.0),
	"co": (4.4, 9.4, 12.4, 15.4, 30.4),
}

DEFAULT_STANDARDS = AirQualityStandards.from_mapping(DEFAULT_BOUNDS)


def resolve_pollutant(pollutant: Union[PollutantKind, str]) -> Optional[PollutantKind]:
	"""Return the matching :class:`PollutantKind` or ``None`` for unknown names."""

	if isinstance(pollutant, PollutantKind):
		return pollutant
	try:
		return PollutantKind(str(pollutant).lower())
	except ValueError:
		return None


def classify(
	value: float,
	pollutant: Union[PollutantKind, str],
	standards: AirQualityStandards = DEFAULT_STANDARDS,
) -> Category:
	"""Classify a single concentration into a health category.

	Unknown pollutants, or pollutants without a table in ``standards``, give
	:attr:`Category.UNKNOWN`. The bound of each category is inclusive.
	"""

	kind = resolve_pollutant(pollutant)
	table = standards.table_for(kind) if kind is not None else None
	if table is None:
		return Category.UNKNOWN

	if value is None or isinstance(value, bool):
		raise ValueError(f"{kind.value} value must be a number, got {value!r}.")
	value = float(value)
	if not math.isfinite(value) or value < 0:
		raise ValueError(f"{kind.value} value must be a finite non-negative number, got {value}.")

	return table.lookup(value)


def classify_pm25_average(value: float) -> Category:
	"""Three-level status used for the 24h PM2.5 average in quick summaries."""

	if value < PM25_SAFE_LEVEL:
		return Category.GOOD
	if value < PM25_MODERATE_UPPER_BOUND:
		return Category.MODERATE
	return Category.UNHEALTHY
