"""SMAA air quality monitor.

This package classifies pollutant readings against WHO/EPA breakpoints,
aggregates historical windows into summary statistics and KPIs, and builds
the CSV exports and charts of the device report.
"""

from .aggregation import (
	MISSING,
	EmptyWindowError,
	KPISet,
	MissingFieldValue,
	SummaryStats,
	Trend,
	compute_kpis,
	count_exceedances,
	hourly_averages,
	pm25_trend,
	summarize,
)
from .config import MonitorConfig, load_config
from .models import Location, Reading
from .standards import (
	DEFAULT_STANDARDS,
	PM25_MODERATE_UPPER_BOUND,
	PM25_SAFE_LEVEL,
	AirQualityStandards,
	BreakpointTable,
	Category,
	PollutantKind,
	classify,
)

__all__ = [
	"MISSING",
	"EmptyWindowError",
	"KPISet",
	"MissingFieldValue",
	"SummaryStats",
	"Trend",
	"compute_kpis",
	"count_exceedances",
	"hourly_averages",
	"pm25_trend",
	"summarize",
	"MonitorConfig",
	"load_config",
	"Location",
	"Reading",
	"DEFAULT_STANDARDS",
	"PM25_MODERATE_UPPER_BOUND",
	"PM25_SAFE_LEVEL",
	"AirQualityStandards",
	"BreakpointTable",
	"Category",
	"PollutantKind",
	"classify",
]
