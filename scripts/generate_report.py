"""Generate the full air quality report: KPIs, summary table, charts and CSVs."""

import logging
import sys

import requests

from smaa_monitor.client import ApiError
from smaa_monitor.config import load_config
from smaa_monitor.export import format_stat
from smaa_monitor.report import format_kpi_lines, generate_report, write_report

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    config = load_config()
    logging.getLogger().setLevel(config.log_level)

    print("=" * 60)
    print(f"Air Quality Report - {config.api.device_id}")
    print("=" * 60)

    try:
        report = generate_report(config)
    except (ApiError, requests.RequestException) as e:
        logger.error(f"Error generating report: {e}")
        return 1

    print("\n=== KEY PERFORMANCE INDICATORS ===")
    for line in format_kpi_lines(report.kpis, report.device_id):
        print(line)

    if report.summary_table is not None:
        print("\n=== SUMMARY STATISTICS TABLE ===")
        print(report.summary_table.to_string(index=False))

    if report.hourly:
        print("\n=== HOURLY AVERAGES ===")
        for bucket in report.hourly:
            pm25 = format_stat(bucket.mean('pm25'), '%.1f')
            print(f"{bucket.hour:%Y-%m-%d %H:%M}  PM2.5 {pm25:>6}  readings {bucket.readings}")

    written = write_report(report, config.report.output_dir, timezone=config.report.timezone)
    print(f"\nWrote {len(written)} file(s) to {config.report.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
