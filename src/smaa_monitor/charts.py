"""Plotly figures for the air quality report."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .aggregation import MISSING, HourlyBucket, KPISet
from .standards import PM25_MODERATE_UPPER_BOUND, PM25_SAFE_LEVEL, Category, PollutantKind


logger = logging.getLogger(__name__)

POLLUTANT_COLORS = {
	"pm25": "#e74c3c",
	"pm10": "#e67e22",
	"o3": "#3498db",
	"co": "#95a5a6",
}


def plot_pollutants_timeseries(df: pd.DataFrame, device_id: str = "") -> Optional[go.Figure]:
	"""One panel per pollutant, each with its own y axis."""

	if df is None or df.empty:
		return None

	long_df = df.melt(
		id_vars="datetime",
		value_vars=list(POLLUTANT_COLORS),
		var_name="pollutant",
		value_name="value",
	)
	fig = px.line(
		long_df,
		x="datetime",
		y="value",
		color="pollutant",
		facet_col="pollutant",
		facet_col_wrap=2,
		markers=True,
		color_discrete_map=POLLUTANT_COLORS,
		title="Air Quality Trends" + (f" - {device_id}" if device_id else ""),
		labels={"datetime": "Time", "value": "Concentration"},
	)
	fig.update_yaxes(matches=None)
	fig.update_layout(showlegend=False)
	fig.add_annotation(
		text=f"Period: {df['datetime'].min()} to {df['datetime'].max()}",
		xref="paper",
		yref="paper",
		x=0,
		y=1.08,
		showarrow=False,
	)
	return fig


def plot_current_dashboard(kpis: KPISet, device_id: str = "") -> go.Figure:
	"""Bar per pollutant with its current value, coloured by health category."""

	names, values, statuses = [], [], []
	for kind in PollutantKind:
		value = kpis.current.get(kind.value, MISSING)
		names.append(kind.label)
		values.append(None if value is MISSING else value)
		statuses.append(kpis.statuses.get(kind.value, Category.UNKNOWN))

	text = [
		f"{value:.1f}<br>{status.value}" if value is not None else f"n/a<br>{status.value}"
		for value, status in zip(values, statuses)
	]
	fig = go.Figure(
		go.Bar(
			x=names,
			y=values,
			text=text,
			textposition="outside",
			marker_color=[status.color for status in statuses],
		)
	)
	timestamp = pd.to_datetime(kpis.timestamp, unit="s", utc=True)
	fig.update_layout(
		title=f"Current Air Quality Status<br><sup>Device: {device_id} | Time: {timestamp}</sup>",
		xaxis_title="Pollutant",
		yaxis_title="Concentration",
	)
	return fig


def plot_environmental_conditions(df: pd.DataFrame) -> Optional[go.Figure]:
	"""Temperature, humidity and noise stacked on a shared time axis."""

	if df is None or df.empty:
		return None

	panels = (
		("temperature", "Temperature", "°C", "#e74c3c"),
		("humidity", "Humidity", "%", "#3498db"),
		("noise", "Noise Level", "dB", "#95a5a6"),
	)
	fig = make_subplots(
		rows=len(panels),
		cols=1,
		shared_xaxes=True,
		subplot_titles=[title for _, title, _, _ in panels],
	)
	for row, (column, title, unit, color) in enumerate(panels, start=1):
		fig.add_trace(
			go.Scatter(x=df["datetime"], y=df[column], mode="lines+markers", name=title, line_color=color),
			row=row,
			col=1,
		)
		fig.update_yaxes(title_text=unit, row=row, col=1)
	fig.update_layout(title="Environmental Conditions", showlegend=False)
	fig.update_xaxes(title_text="Time", row=len(panels), col=1)
	return fig


def plot_pm25_vs_guidelines(df: pd.DataFrame) -> Optional[go.Figure]:
	"""PM2.5 series against the safe level and the moderate upper bound."""

	if df is None or df.empty:
		return None

	fig = go.Figure(
		go.Scatter(x=df["datetime"], y=df["pm25"], mode="lines+markers", name="PM2.5", line_color="#e74c3c")
	)
	fig.add_hline(
		y=PM25_SAFE_LEVEL,
		line_dash="dash",
		line_color=Category.GOOD.color,
		annotation_text=f"Good ({PM25_SAFE_LEVEL:g} µg/m³)",
		annotation_position="top left",
	)
	fig.add_hline(
		y=PM25_MODERATE_UPPER_BOUND,
		line_dash="dash",
		line_color=Category.MODERATE.color,
		annotation_text=f"Moderate ({PM25_MODERATE_UPPER_BOUND:g} µg/m³)",
		annotation_position="top left",
	)
	fig.update_layout(
		title="PM2.5 Levels vs WHO/EPA Guidelines",
		xaxis_title="Time",
		yaxis_title="PM2.5 (µg/m³)",
	)
	return fig


def plot_hourly_pm25(buckets: Sequence[HourlyBucket]) -> Optional[go.Figure]:
	if not buckets:
		return None

	hours = [bucket.hour for bucket in buckets]
	values = [None if bucket.mean("pm25") is MISSING else bucket.mean("pm25") for bucket in buckets]
	fig = go.Figure()
	fig.add_trace(go.Bar(x=hours, y=values, name="Hourly average", marker_color="#3498db", opacity=0.7))
	fig.add_trace(go.Scatter(x=hours, y=values, mode="lines", name="Trend", line_color="#e74c3c"))
	fig.update_layout(title="Hourly PM2.5 Averages", xaxis_title="Hour", yaxis_title="PM2.5 (µg/m³)")
	return fig


def save_figures(figures: Mapping[str, Optional[go.Figure]], output_dir: Path) -> list[Path]:
	"""Write each figure to ``<name>.html``; ``None`` entries are skipped."""

	output_dir = Path(output_dir)
	output_dir.mkdir(parents=True, exist_ok=True)
	written = []
	for name, fig in figures.items():
		if fig is None:
			logger.info("Skipping chart '%s': no data", name)
			continue
		path = output_dir / f"{name}.html"
		fig.write_html(str(path), include_plotlyjs="cdn")
		written.append(path)
	return written
