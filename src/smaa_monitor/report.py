"""Report generation: fetch, aggregate, classify, chart and export."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

import pandas as pd
import plotly.graph_objects as go

from .aggregation import (
	EmptyWindowError,
	HourlyBucket,
	KPISet,
	SummaryStats,
	compute_kpis,
	hourly_averages,
	summarize,
)
from .charts import (
	plot_current_dashboard,
	plot_environmental_conditions,
	plot_hourly_pm25,
	plot_pm25_vs_guidelines,
	plot_pollutants_timeseries,
	save_figures,
)
from .client import SmaaClient
from .config import MonitorConfig
from .export import (
	PLACEHOLDER,
	export_hourly_csv,
	export_summary_csv,
	export_window_csv,
	format_stat,
	format_summary_table,
	readings_to_frame,
)
from .models import Reading


logger = logging.getLogger(__name__)


@dataclass
class Report:
	"""Everything produced for one report run."""

	device_id: str
	latest: Reading
	history: list[Reading]
	kpis: KPISet
	stats: Optional[SummaryStats] = None
	summary_table: Optional[pd.DataFrame] = None
	hourly: Optional[list[HourlyBucket]] = None
	figures: dict[str, Optional[go.Figure]] = field(default_factory=dict)

	@property
	def has_history(self) -> bool:
		return self.stats is not None


def generate_report(
	config: MonitorConfig,
	client: Optional[SmaaClient] = None,
	hours: Optional[int] = None,
) -> Report:
	"""Build a complete report for the configured device.

	An empty history does not fail the report: KPIs are computed from the latest
	reading alone and the statistics, hourly table and history charts are left
	out.
	"""

	client = client or SmaaClient.from_config(config)
	hours = hours or config.report.hours
	timezone = config.report.timezone

	logger.info("Fetching latest data for %s", client.device_id)
	latest = client.get_latest()

	logger.info("Fetching historical data (%s hours)", hours)
	history = client.get_history(hours=hours, limit=config.report.limit)

	logger.info("Calculating KPIs and summary statistics")
	try:
		kpis = compute_kpis(latest, history, config.standards)
		stats = summarize(history)
		hourly = hourly_averages(history, timezone)
	except EmptyWindowError:
		logger.warning("Insufficient historical data for %s; reporting current values only", client.device_id)
		kpis = compute_kpis(latest, None, config.standards)
		stats = None
		hourly = None

	report = Report(
		device_id=client.device_id,
		latest=latest,
		history=history,
		kpis=kpis,
		stats=stats,
		summary_table=format_summary_table(stats) if stats is not None else None,
		hourly=hourly,
	)

	logger.info("Generating visualizations")
	frame = readings_to_frame(history, timezone)
	report.figures = {
		"dashboard": plot_current_dashboard(kpis, client.device_id),
		"timeseries": plot_pollutants_timeseries(frame, client.device_id),
		"pm25_guidelines": plot_pm25_vs_guidelines(frame),
		"environmental": plot_environmental_conditions(frame),
		"hourly_pm25": plot_hourly_pm25(hourly or []),
	}
	return report


def format_kpi_lines(kpis: KPISet, device_id: str) -> list[str]:
	"""Text block of the key performance indicators."""

	lines = [
		f"Device: {device_id}",
		f"Status: {'ONLINE' if kpis.device_online else 'OFFLINE'}",
		f"Battery: {format_stat(kpis.battery_level, '%.0f%%')}",
		f"Location: {kpis.location if kpis.location is not None else PLACEHOLDER}",
		"",
		f"Current PM2.5: {format_stat(kpis.current['pm25'], '%.1f µg/m³')} [{kpis.statuses['pm25']}]",
		f"Current PM10: {format_stat(kpis.current['pm10'], '%.1f µg/m³')} [{kpis.statuses['pm10']}]",
		f"Current O3: {format_stat(kpis.current['o3'], '%.1f ppb')} [{kpis.statuses['o3']}]",
		f"Current CO: {format_stat(kpis.current['co'], '%.1f ppm')} [{kpis.statuses['co']}]",
		f"Current Temperature: {format_stat(kpis.current['temperature'], '%.1f °C')}",
		f"Current Humidity: {format_stat(kpis.current['humidity'], '%.1f %%')}",
		"",
	]

	window = kpis.window
	if window is None:
		lines.append("Insufficient historical data: window KPIs unavailable")
		return lines

	lines.extend(
		[
			f"Window PM2.5 Average: {format_stat(window.pm25_mean, '%.1f µg/m³')}",
			f"Window PM2.5 Maximum: {format_stat(window.pm25_max, '%.1f µg/m³')}",
			f"Exceedances (>35.4): {window.exceedances_pm25} times",
		]
	)
	if window.pm25_trend is not None:
		lines.append(f"Trend: {window.pm25_trend}")
	return lines


def write_report(report: Report, output_dir: Path, timezone: str = "UTC", today: Optional[date] = None) -> list[Path]:
	"""Export CSVs and chart files; returns every path written."""

	output_dir = Path(output_dir)
	written: list[Path] = []
	if report.has_history:
		written.append(export_window_csv(report.history, output_dir, timezone, today))
		written.append(export_summary_csv(report.stats, output_dir, today))
		written.append(export_hourly_csv(report.hourly, output_dir, today))
	else:
		logger.warning("No historical data to export for %s", report.device_id)

	written.extend(save_figures(report.figures, output_dir / "charts"))
	return written
