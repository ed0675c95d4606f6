#!/usr/bin/env python3
# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""
Health Check Script for the blog front-end

Usage:
    python healthcheck.py                    # Check localhost:8000
    python healthcheck.py http://example.com # Check custom URL
"""

import sys
import requests
from datetime import datetime

STATUS_EMOJI = {
    "healthy": "✅",
    "degraded": "⚠️",
    "unhealthy": "❌",
}

def run_healthcheck(base_url="http://127.0.0.1:8000", timeout=10):
    """Query /api/health and print a summary. Returns True when the site is healthy."""

    print(f"🏥 Running blog health check")
    print(f"📍 Target: {base_url}")
    print(f"⏰ Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 60)

    health_url = f"{base_url.rstrip('/')}/api/health"
    try:
        response = requests.get(health_url, params={"reason": "DockerAutomatedHealthcheck"}, timeout=timeout)
    except requests.exceptions.RequestException as e:
        print(f"❌ Could not reach {health_url}: {e}")
        return False

    print(f"📡 HTTP Status: {response.status_code}")
    try:
        health_data = response.json()
    except ValueError:
        print("❌ Response is not JSON")
        return False

    status = health_data.get("status", "unknown")
    print(f"{STATUS_EMOJI.get(status, '❓')} Overall Status: {status.upper()}")
    print(f"🔢 Version: {health_data.get('version', 'unknown')}")
    print(f"🌍 Environment: {health_data.get('environment', 'unknown')}")

    checks = health_data.get("checks", {})
    if checks:
        print("\n📋 Individual Checks:")
        print("-" * 40)
        for check_name, check_data in checks.items():
            check_status = check_data.get("status", "unknown")
            print(f"{STATUS_EMOJI.get(check_status, '❓')} {check_name}: {check_data.get('message', '')}")
            for key, value in check_data.get("details", {}).items():
                print(f"     {key}: {value}")

    return response.status_code == 200 and status == "healthy"

if __name__ == "__main__":
    url = sys.argv[1] if len(sys.argv) > 1 else "http://127.0.0.1:8000"
    sys.exit(0 if run_healthcheck(url) else 1)
