"""
Workpace - Settings
===================

Runtime configuration for the holiday source and the HTTP layer.

Values come from environment variables (a local ``.env`` file is honoured) or
fall back to the defaults below.

Usage:
    from workpace.settings import Settings

    config = Settings.get_config()
    if config.prefer_official_holidays:
        ...

Environment variables:
    WORKPACE_HOLIDAY_SOURCE_URL=https://www8.cao.go.jp/chosei/shukujitsu/syukujitsu.csv
    WORKPACE_HOLIDAY_CACHE_PATH=/var/cache/workpace/holidays.json
    WORKPACE_PREFER_OFFICIAL_HOLIDAYS=true
    WORKPACE_HTTP_TIMEOUT=10
    WORKPACE_LOG_LEVEL=INFO
    WORKPACE_CORS_ORIGIN_REGEX=http://(localhost|127\\.0\\.0\\.1):\\d+
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

CABINET_OFFICE_HOLIDAY_URL = "https://www8.cao.go.jp/chosei/shukujitsu/syukujitsu.csv"
DEFAULT_HOLIDAY_CACHE = Path.home() / ".cache" / "workpace" / "holidays.json"
LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


@dataclass
class WorkpaceSettings:
    """
    Workpace configuration.

    Defaults work offline: the calculated holiday calendar is always
    available, the official list is only an improvement on top of it.
    """
    holiday_source_url: str = CABINET_OFFICE_HOLIDAY_URL
    holiday_cache_path: Path = DEFAULT_HOLIDAY_CACHE
    prefer_official_holidays: bool = True
    http_timeout_s: float = 10.0
    log_level: str = "INFO"
    cors_origin_regex: str = r"http://(localhost|127\.0\.0\.1):\d+"


class Settings:
    """
    Lazily loaded settings singleton.

    Usage:
        config = Settings.get_config()
        Settings.reset()  # force reload from the environment (tests)
    """

    _instance: Optional[WorkpaceSettings] = None

    @classmethod
    def _load_from_env(cls) -> WorkpaceSettings:
        config = WorkpaceSettings()

        url = os.environ.get("WORKPACE_HOLIDAY_SOURCE_URL")
        if url:
            config.holiday_source_url = url

        cache_path = os.environ.get("WORKPACE_HOLIDAY_CACHE_PATH")
        if cache_path:
            config.holiday_cache_path = Path(cache_path).expanduser()

        prefer = os.environ.get("WORKPACE_PREFER_OFFICIAL_HOLIDAYS")
        if prefer:
            config.prefer_official_holidays = prefer.lower() in ("true", "1", "yes")

        timeout = os.environ.get("WORKPACE_HTTP_TIMEOUT")
        if timeout:
            try:
                value = float(timeout)
                if value <= 0:
                    raise ValueError(timeout)
                config.http_timeout_s = value
            except ValueError:
                logger.warning(f"Invalid value for WORKPACE_HTTP_TIMEOUT: {timeout}")

        level = os.environ.get("WORKPACE_LOG_LEVEL")
        if level:
            if isinstance(logging.getLevelName(level.upper()), int):
                config.log_level = level.upper()
            else:
                logger.warning(f"Invalid value for WORKPACE_LOG_LEVEL: {level}")

        cors = os.environ.get("WORKPACE_CORS_ORIGIN_REGEX")
        if cors:
            config.cors_origin_regex = cors

        return config

    @classmethod
    def get_config(cls) -> WorkpaceSettings:
        if cls._instance is None:
            cls._instance = cls._load_from_env()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        config = cls.get_config()
        return {
            "holiday_source_url": config.holiday_source_url,
            "holiday_cache_path": str(config.holiday_cache_path),
            "prefer_official_holidays": config.prefer_official_holidays,
            "http_timeout_s": config.http_timeout_s,
            "log_level": config.log_level,
            "cors_origin_regex": config.cors_origin_regex,
        }


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the process-wide logging format used by the entry points."""
    logging.basicConfig(
        level=level or Settings.get_config().log_level,
        format=LOG_FORMAT,
    )
