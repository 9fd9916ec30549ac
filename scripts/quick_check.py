"""Quick look at the device: current reading, 24h PM2.5 statistics and CSV exports."""

import logging
import sys

import requests

from smaa_monitor.aggregation import EmptyWindowError, count_above_safe_level, summarize
from smaa_monitor.client import ApiError, SmaaClient
from smaa_monitor.config import load_config
from smaa_monitor.export import export_quick_summary_csv, export_window_csv, readings_to_frame
from smaa_monitor.standards import PM25_SAFE_LEVEL, classify_pm25_average

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _show(value, unit):
    return "n/a" if value is None else f"{value} {unit}"


def main():
    config = load_config()
    client = SmaaClient.from_config(config)

    try:
        latest = client.get_latest()
        history = client.get_history(hours=config.report.hours, limit=config.report.limit)
    except (ApiError, requests.RequestException) as e:
        logger.error(f"Error fetching data: {e}")
        return 1

    print(f"\nDevice: {client.device_id}")
    print(f"Online: {latest.online}")
    print(f"Battery: {_show(latest.battery, '%')}")
    print("\n--- Air Quality ---")
    print(f"PM2.5: {_show(latest.pm25, 'µg/m³')}")
    print(f"PM10: {_show(latest.pm10, 'µg/m³')}")
    print(f"O3: {_show(latest.o3, 'ppb')}")
    print(f"CO: {_show(latest.co, 'ppm')}")
    print("\n--- Environment ---")
    print(f"Temperature: {_show(latest.temperature, '°C')}")
    print(f"Humidity: {_show(latest.humidity, '%')}")
    print(f"Noise: {_show(latest.noise, 'dB')}")

    try:
        stats = summarize(history)
    except EmptyWindowError:
        print("\nNo historical data available: insufficient data for statistics.")
        return 0

    print(f"\nTotal readings retrieved: {stats.readings_count}")
    times = readings_to_frame(history, config.report.timezone)["datetime"]
    print(f"Time range: {times.min()} to {times.max()}")
    print(f"\nPM2.5 Statistics (Last {config.report.hours} hours):")
    if stats.is_defined("pm25_mean"):
        pm25_mean = stats.mean("pm25")
        print(f"Average: {pm25_mean:.2f} µg/m³")
        print(f"Maximum: {stats.max('pm25')} µg/m³")
        print(f"Minimum: {stats.min('pm25')} µg/m³")
        print(f"Status: {classify_pm25_average(pm25_mean)}")
    else:
        print("Average: n/a")

    above = count_above_safe_level(history)
    print(f"Readings above safe level ({PM25_SAFE_LEVEL:g} µg/m³): {above} out of {stats.readings_count}")

    print("\nTemperature Statistics:")
    if stats.is_defined("temperature_mean"):
        print(f"Average: {stats.mean('temperature'):.1f} °C")
        print(f"Range: {stats.min('temperature'):.1f} °C to {stats.max('temperature'):.1f} °C")
    else:
        print("Average: n/a")

    path = export_window_csv(history, config.report.output_dir, config.report.timezone, prefix="air_quality")
    print(f"\nData saved to: {path}")
    summary_path = export_quick_summary_csv(stats, above, config.report.output_dir)
    print(f"Summary saved to: {summary_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
