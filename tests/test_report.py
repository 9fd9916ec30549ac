"""
Tests for report orchestration.

Tests cover:
- Full report with history
- The no-data branch when the history window is empty
- KPI text rendering and file output
"""

from datetime import date

import pytest

from smaa_monitor.aggregation import compute_kpis
from smaa_monitor.config import MonitorConfig, ReportConfig
from smaa_monitor.report import format_kpi_lines, generate_report, write_report


class FakeClient:
    device_id = "SMAA_002"

    def __init__(self, latest, history):
        self.latest = latest
        self.history = history
        self.history_calls = []

    def get_latest(self):
        return self.latest

    def get_history(self, hours=24, limit=100):
        self.history_calls.append((hours, limit))
        return list(self.history)


@pytest.fixture
def config(tmp_path):
    return MonitorConfig(report=ReportConfig(hours=6, limit=20, timezone="UTC", output_dir=tmp_path))


class TestGenerateReport:
    """Test suite for generate_report()."""

    def test_report_with_history(self, config, make_reading, make_window):
        client = FakeClient(make_reading(pm25=40), make_window([10, 36, 40, 5, 35.4]))
        report = generate_report(config, client=client)

        assert client.history_calls == [(6, 20)]
        assert report.has_history
        assert report.kpis.window.exceedances_pm25 == 2
        assert report.stats.readings_count == 5
        assert len(report.summary_table) == 17
        assert report.hourly[0].readings == 5
        assert all(fig is not None for fig in report.figures.values())

    def test_hours_argument_overrides_config(self, config, make_reading, make_window):
        client = FakeClient(make_reading(), make_window([10]))
        generate_report(config, client=client, hours=48)
        assert client.history_calls == [(48, 20)]

    def test_empty_history_gives_no_data_report(self, config, make_reading):
        report = generate_report(config, client=FakeClient(make_reading(pm25=8), []))

        assert not report.has_history
        assert report.kpis.window is None
        assert report.kpis.statuses["pm25"] == "Good"
        assert report.summary_table is None
        assert report.hourly is None
        assert report.figures["dashboard"] is not None
        assert report.figures["timeseries"] is None


class TestKpiLines:
    """Test suite for format_kpi_lines()."""

    def test_window_lines(self, make_reading, make_window):
        kpis = compute_kpis(make_reading(pm25=40), make_window([20] * 6 + [40] * 6))
        text = "\n".join(format_kpi_lines(kpis, "SMAA_002"))
        assert "Device: SMAA_002" in text
        assert "Current PM2.5: 40.0 µg/m³ [Unhealthy for Sensitive Groups]" in text
        assert "Exceedances (>35.4): 6 times" in text
        assert "Trend: Increasing" in text

    def test_missing_values_render_placeholder(self, make_reading):
        kpis = compute_kpis(make_reading(humidity=None, battery=None, online=False))
        lines = format_kpi_lines(kpis, "SMAA_002")
        assert "Current Humidity: n/a" in lines
        assert "Battery: n/a" in lines
        assert "Status: OFFLINE" in lines
        assert lines[-1].startswith("Insufficient historical data")


class TestWriteReport:
    """Test suite for write_report()."""

    def test_writes_csvs_and_charts(self, tmp_path, config, make_reading, make_window):
        report = generate_report(config, client=FakeClient(make_reading(), make_window([10, 20])))
        written = write_report(report, tmp_path, timezone="UTC", today=date(2024, 3, 1))
        names = {path.name for path in written}
        assert "air_quality_data_20240301.csv" in names
        assert "air_quality_summary_20240301.csv" in names
        assert "air_quality_hourly_20240301.csv" in names
        assert "dashboard.html" in names
        assert all(path.exists() for path in written)

    def test_no_history_writes_only_dashboard(self, tmp_path, config, make_reading):
        report = generate_report(config, client=FakeClient(make_reading(), []))
        written = write_report(report, tmp_path)
        assert [path.name for path in written] == ["dashboard.html"]
