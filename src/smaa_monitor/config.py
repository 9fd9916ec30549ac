"""Configuration loading utilities for the SMAA air quality reports."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .standards import DEFAULT_STANDARDS, AirQualityStandards


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://jciiy1ok97.execute-api.us-east-1.amazonaws.com/default/getData"
DEFAULT_DEVICE_ID = "SMAA_002"


@dataclass
class ApiConfig:
	"""Where and how the sensor service is queried."""

	base_url: str = DEFAULT_BASE_URL
	device_id: str = DEFAULT_DEVICE_ID
	timeout_seconds: float = 10.0


@dataclass
class ReportConfig:
	"""History window and output settings for generated reports."""

	hours: int = 24
	limit: int = 100
	timezone: str = "America/Guatemala"
	output_dir: Path = Path("reports")


@dataclass
class MonitorConfig:
	"""Top-level configuration."""

	api: ApiConfig = field(default_factory=ApiConfig)
	report: ReportConfig = field(default_factory=ReportConfig)
	standards: AirQualityStandards = DEFAULT_STANDARDS
	log_level: str = "INFO"


DEFAULT_CONFIG_PATH = Path("config/config.yaml")


def _resolve_path(path_value: str, base_dir: Optional[Path] = None) -> Path:
	"""Resolve a path string relative to the project root."""

	path = Path(path_value)
	if not path.is_absolute() and base_dir is not None:
		path = base_dir / path
	return path


def _find_base_dir(config_path: Path) -> tuple[Path, Path]:
	if config_path.is_absolute():
		return config_path.parent.parent, config_path

	# Scripts may be started from the project root or from scripts/.
	current = Path.cwd()
	if (current / config_path).exists():
		base_dir = current
	elif (current.parent / config_path).exists():
		base_dir = current.parent
	else:
		base_dir = current
	return base_dir, base_dir / config_path


def load_config(config_path: Optional[Path] = None) -> MonitorConfig:
	"""Load configuration from YAML, then apply ``.env`` overrides.

	A missing file is not an error: the defaults describe the SMAA_002 device.
	"""

	load_dotenv()
	base_dir, config_path = _find_base_dir(Path(config_path or DEFAULT_CONFIG_PATH))

	payload: dict = {}
	if config_path.exists():
		with open(config_path, "r", encoding="utf-8") as fp:
			payload = yaml.safe_load(fp) or {}
	else:
		logger.warning("Config file %s not found, using defaults", config_path)

	if not isinstance(payload, dict):
		raise ValueError(f"Config file '{config_path}' must contain a mapping at the top level.")

	api_section = payload.get("api") or {}
	report_section = payload.get("report") or {}
	standards_section = payload.get("standards") or {}

	api_cfg = ApiConfig(
		base_url=os.getenv("SMAA_API_URL") or api_section.get("base_url", DEFAULT_BASE_URL),
		device_id=os.getenv("SMAA_DEVICE_ID") or api_section.get("device_id", DEFAULT_DEVICE_ID),
		timeout_seconds=float(api_section.get("timeout_seconds", 10)),
	)

	report_cfg = ReportConfig(
		hours=int(report_section.get("hours", 24)),
		limit=int(report_section.get("limit", 100)),
		timezone=str(report_section.get("timezone", "America/Guatemala")),
		output_dir=_resolve_path(report_section.get("output_dir", "reports"), base_dir),
	)
	if report_cfg.hours <= 0 or report_cfg.limit <= 0:
		raise ValueError("report.hours and report.limit must be positive integers.")

	standards = DEFAULT_STANDARDS.with_overrides(standards_section) if standards_section else DEFAULT_STANDARDS

	return MonitorConfig(
		api=api_cfg,
		report=report_cfg,
		standards=standards,
		log_level=str(payload.get("log_level", "INFO")).upper(),
	)
