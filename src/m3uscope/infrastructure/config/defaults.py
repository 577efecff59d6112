"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "m3uscope",
    "environment": "dev",
    "http": {
        "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        "fetch_timeout_seconds": 30.0,
        "validate_timeout_seconds": 10.0,
        "max_redirects": 5,
        "https_upgrade": True,
        "https_upgrade_timeout_seconds": 3.0,
    },
    "probing": {
        "concurrency": 5,
        "timeout_seconds": 8.0,
        "single_timeout_seconds": 15.0,
        "max_redirects": 3,
        "window_deadline_seconds": None,
    },
    "limits": {
        "max_url_length": 2048,
        "max_channels_to_check": 100,
        "default_channels_to_check": 50,
        "max_playlist_bytes": 10 * 1024 * 1024,
        "max_name_length": 200,
        "max_group_length": 100,
        "max_groups_in_result": 50,
        "max_channels_in_result": 200,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "api": {
        "rate_limit_rpm": 30,
        "analysis_rate_limit_rpm": 10,
        "allowed_origin": "*",
    },
}
