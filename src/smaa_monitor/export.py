"""CSV export of raw windows, summary tables and hourly averages."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from .aggregation import MISSING, HourlyBucket, StatValue, SummaryStats, local_times, window_frame
from .models import Reading, Window
from .standards import PM25_SAFE_LEVEL


logger = logging.getLogger(__name__)

PLACEHOLDER = "n/a"


def readings_to_frame(window: Window, timezone: str = "UTC") -> pd.DataFrame:
	"""Tabulate a window with a local ``datetime`` column first."""

	readings: Sequence[Reading] = list(window)
	df = window_frame(readings)
	df.insert(0, "datetime", local_times(df["timestamp"], timezone))
	df["online"] = [reading.online for reading in readings]
	return df


def format_stat(value: StatValue, template: str) -> str:
	"""Format a statistic with a %-template, or the placeholder when undefined."""

	if value is MISSING or value is None:
		return PLACEHOLDER
	return template % value


def _fmt_range(low: StatValue, high: StatValue, unit: str) -> str:
	if low is MISSING or high is MISSING:
		return PLACEHOLDER
	return f"{low:.1f} - {high:.1f} {unit}"


def format_summary_table(stats: SummaryStats) -> pd.DataFrame:
	"""Human-readable ``Metric``/``Value`` table; undefined values show ``n/a``."""

	rows = [
		("PM2.5 Average", format_stat(stats.mean("pm25"), "%.1f µg/m³")),
		("PM2.5 Maximum", format_stat(stats.max("pm25"), "%.1f µg/m³")),
		("PM2.5 Minimum", format_stat(stats.min("pm25"), "%.1f µg/m³")),
		("PM10 Average", format_stat(stats.mean("pm10"), "%.1f µg/m³")),
		("PM10 Maximum", format_stat(stats.max("pm10"), "%.1f µg/m³")),
		("PM10 Minimum", format_stat(stats.min("pm10"), "%.1f µg/m³")),
		("O3 Average", format_stat(stats.mean("o3"), "%.1f ppb")),
		("O3 Maximum", format_stat(stats.max("o3"), "%.1f ppb")),
		("CO Average", format_stat(stats.mean("co"), "%.1f ppm")),
		("CO Maximum", format_stat(stats.max("co"), "%.1f ppm")),
		("Temperature Average", format_stat(stats.mean("temperature"), "%.1f °C")),
		("Temperature Range", _fmt_range(stats.min("temperature"), stats.max("temperature"), "°C")),
		("Humidity Average", format_stat(stats.mean("humidity"), "%.1f %%")),
		("Noise Average", format_stat(stats.mean("noise"), "%.1f dB")),
		("Noise Maximum", format_stat(stats.max("noise"), "%.1f dB")),
		("Battery Level", format_stat(stats.mean("battery"), "%.0f %%")),
		("Total Readings", str(stats.readings_count)),
	]
	return pd.DataFrame(rows, columns=["Metric", "Value"])


def format_quick_summary(stats: SummaryStats, above_safe: int) -> pd.DataFrame:
	"""Short summary of the quick check, including the count above the safe level."""

	rows = [
		("Average PM2.5", format_stat(stats.mean("pm25"), "%.2f")),
		("Max PM2.5", format_stat(stats.max("pm25"), "%.1f")),
		("Min PM2.5", format_stat(stats.min("pm25"), "%.1f")),
		("Average Temperature", format_stat(stats.mean("temperature"), "%.1f")),
		("Average Humidity", format_stat(stats.mean("humidity"), "%.1f")),
		("Total Readings", str(stats.readings_count)),
		(f"Unsafe Readings (PM2.5 > {PM25_SAFE_LEVEL:g})", str(above_safe)),
	]
	return pd.DataFrame(rows, columns=["Metric", "Value"])


def hourly_frame(buckets: Sequence[HourlyBucket]) -> pd.DataFrame:
	# Undefined hourly means stay empty cells in the numeric export.
	rows = [
		{key: (None if value is MISSING else value) for key, value in bucket.as_dict().items()}
		for bucket in buckets
	]
	return pd.DataFrame(rows)


def _dated_path(output_dir: Path, prefix: str, today: Optional[date]) -> Path:
	today = today or date.today()
	output_dir = Path(output_dir)
	output_dir.mkdir(parents=True, exist_ok=True)
	return output_dir / f"{prefix}_{today.strftime('%Y%m%d')}.csv"


def export_window_csv(
	window: Window,
	output_dir: Path,
	timezone: str = "UTC",
	today: Optional[date] = None,
	prefix: str = "air_quality_data",
) -> Path:
	"""Write every reading of the window to ``<prefix>_YYYYMMDD.csv``."""

	path = _dated_path(output_dir, prefix, today)
	readings_to_frame(window, timezone).to_csv(path, index=False)
	logger.info("Data exported to %s", path)
	return path


def export_summary_csv(stats: SummaryStats, output_dir: Path, today: Optional[date] = None) -> Path:
	path = _dated_path(output_dir, "air_quality_summary", today)
	format_summary_table(stats).to_csv(path, index=False)
	logger.info("Summary exported to %s", path)
	return path


def export_quick_summary_csv(
	stats: SummaryStats,
	above_safe: int,
	output_dir: Path,
	today: Optional[date] = None,
) -> Path:
	path = _dated_path(output_dir, "summary", today)
	format_quick_summary(stats, above_safe).to_csv(path, index=False)
	logger.info("Summary saved to %s", path)
	return path


def export_hourly_csv(buckets: Sequence[HourlyBucket], output_dir: Path, today: Optional[date] = None) -> Path:
	path = _dated_path(output_dir, "air_quality_hourly", today)
	hourly_frame(buckets).to_csv(path, index=False)
	logger.info("Hourly averages exported to %s", path)
	return path
