"""
Tests for the plotly chart builders.

Tests cover:
- Figures built from a populated window
- Empty input returning no figure
- HTML output
"""

import pandas as pd
import pytest

from smaa_monitor.aggregation import compute_kpis, hourly_averages
from smaa_monitor.charts import (
    plot_current_dashboard,
    plot_environmental_conditions,
    plot_hourly_pm25,
    plot_pm25_vs_guidelines,
    plot_pollutants_timeseries,
    save_figures,
)
from smaa_monitor.export import readings_to_frame
from smaa_monitor.standards import Category


@pytest.fixture
def frame(make_window):
    return readings_to_frame(make_window([10, 20, 40]), "UTC")


@pytest.fixture
def empty_frame():
    return readings_to_frame([], "UTC")


class TestCharts:
    """Test suite for chart builders."""

    def test_dashboard_colours_follow_status(self, make_reading):
        kpis = compute_kpis(make_reading(pm25=40, pm10=None))
        fig = plot_current_dashboard(kpis, "SMAA_002")
        bar = fig.data[0]
        assert list(bar.x) == ["PM2.5", "PM10", "O3", "CO"]
        assert bar.marker.color[0] == Category.UNHEALTHY_SENSITIVE.color
        assert bar.marker.color[1] == Category.UNKNOWN.color
        assert bar.y[1] is None

    def test_timeseries_has_one_trace_per_pollutant(self, frame):
        fig = plot_pollutants_timeseries(frame, "SMAA_002")
        assert len(fig.data) == 4
        assert "SMAA_002" in fig.layout.title.text

    def test_environmental_has_three_panels(self, frame):
        fig = plot_environmental_conditions(frame)
        assert len(fig.data) == 3

    def test_guidelines_has_threshold_lines(self, frame):
        fig = plot_pm25_vs_guidelines(frame)
        line_levels = sorted(shape.y0 for shape in fig.layout.shapes)
        assert line_levels == [12.0, 35.4]

    def test_hourly_chart(self, make_window):
        fig = plot_hourly_pm25(hourly_averages(make_window([10, 20]), "UTC"))
        assert len(fig.data) == 2

    def test_empty_input_gives_no_figure(self, empty_frame):
        assert plot_pollutants_timeseries(empty_frame) is None
        assert plot_environmental_conditions(empty_frame) is None
        assert plot_pm25_vs_guidelines(empty_frame) is None
        assert plot_hourly_pm25([]) is None

    def test_save_figures_skips_missing(self, tmp_path, frame):
        written = save_figures({"guidelines": plot_pm25_vs_guidelines(frame), "none": None}, tmp_path)
        assert [p.name for p in written] == ["guidelines.html"]
        assert "<html" in written[0].read_text(encoding="utf-8")
