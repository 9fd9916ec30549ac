"""Verification script to check if the project is set up correctly."""

import sys
from pathlib import Path

def check_imports():
    """Check if all required packages can be imported."""
    print("Checking imports...")
    try:
        import numpy
        import pandas
        import requests
        import plotly
        import yaml
        import dotenv
        import smaa_monitor
        print("[OK] All required packages are installed")
        return True
    except ImportError as e:
        print(f"[X] Missing package: {e}")
        return False

def check_config():
    """Check if config file exists and loads."""
    print("\nChecking configuration...")
    config_path = Path("config/config.yaml")
    if not config_path.exists():
        print("[X] Configuration file not found")
        return False
    print("[OK] Configuration file exists")
    try:
        from smaa_monitor.config import load_config
        config = load_config()
        print(f"[OK] Configuration loaded successfully (device {config.api.device_id})")
        return True
    except Exception as e:
        print(f"[X] Error loading configuration: {e}")
        return False

def check_module_structure():
    """Check if all required modules exist."""
    print("\nChecking module structure...")
    modules = [
        "src/smaa_monitor/__init__.py",
        "src/smaa_monitor/aggregation.py",
        "src/smaa_monitor/charts.py",
        "src/smaa_monitor/client.py",
        "src/smaa_monitor/config.py",
        "src/smaa_monitor/export.py",
        "src/smaa_monitor/models.py",
        "src/smaa_monitor/report.py",
        "src/smaa_monitor/standards.py",
        "scripts/generate_report.py",
        "scripts/quick_check.py",
    ]
    all_exist = True
    for module in modules:
        if Path(module).exists():
            print(f"[OK] {module}")
        else:
            print(f"[X] {module} not found")
            all_exist = False
    return all_exist

def main():
    """Run all checks."""
    print("=" * 60)
    print("SMAA Air Quality Monitor - Setup Verification")
    print("=" * 60)

    results = []
    results.append(("Imports", check_imports()))
    results.append(("Configuration", check_config()))
    results.append(("Module Structure", check_module_structure()))

    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)

    all_passed = True
    for name, passed in results:
        status = "PASS" if passed else "FAIL"
        print(f"{name}: {status}")
        if not passed:
            all_passed = False

    if all_passed:
        print("\n[OK] All checks passed! The project is ready to use.")
        print("\nNext steps:")
        print("1. Quick check of the device: python scripts/quick_check.py")
        print("2. Full report: python scripts/generate_report.py")
    else:
        print("\n[X] Some checks failed. Please fix the issues above.")
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
