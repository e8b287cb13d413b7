"""
Workpace - Official Holiday Source
==================================

Authoritative holiday list published by the Cabinet Office as a CSV file
(``syukujitsu.csv``, CP932 encoded, ``YYYY/M/D,name`` rows after a header).

The list is fetched over HTTP, cached to a local JSON file and refreshed once
the calendar month changes. Lookups prefer the official data and degrade to
the calculated calendar when the source and the cache are both unavailable:

    official (fresh) → official (cached) → holiday_calendar.holidays_for_year

Usage:
    provider = OfficialHolidayProvider()
    holidays = provider.holidays_for_year(2026, today=date(2026, 10, 18))
"""

from __future__ import annotations

import io
import json
import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, List, Optional, Tuple

import pandas as pd
import requests

from ..settings import Settings, WorkpaceSettings
from .holiday_calendar import Holiday, holidays_for_year as calculated_holidays_for_year

logger = logging.getLogger(__name__)

CSV_ENCODING = "cp932"
MIN_OFFICIAL_YEAR = 1900

_JAPANESE_CHARS = re.compile(r"[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]")
_CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F-\x9F]")


class HolidaySourceError(RuntimeError):
    """The official holiday list could not be fetched or parsed."""


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# CSV PARSING
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def clean_holiday_name(name: Any) -> str:
    """
    Strip quotes, control characters and mojibake from a holiday name.

    Returns "" when what remains is too short or contains no Japanese
    character, which is how garbled rows are recognised.
    """
    if not isinstance(name, str):
        return ""
    cleaned = name.replace('"', "").strip()
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    cleaned = cleaned.replace("?", "").replace("\ufffd", "")
    if len(cleaned) < 2 or not _JAPANESE_CHARS.search(cleaned):
        return ""
    return cleaned


def decode_holiday_csv(content: bytes) -> str:
    try:
        return content.decode(CSV_ENCODING)
    except UnicodeDecodeError:
        logger.warning("Holiday CSV is not valid CP932, decoding as UTF-8")
        return content.decode("utf-8", errors="replace")


def parse_holiday_csv(text: str) -> List[Holiday]:
    """
    Parse the Cabinet Office CSV into holidays sorted by date.

    The header row and any row whose date does not parse (or whose name is
    garbled) are dropped. Both ``YYYY/M/D`` and ``YYYY-MM-DD`` dates are
    accepted.
    """
    if not text.strip():
        return []

    df = pd.read_csv(
        io.StringIO(text),
        header=None,
        names=["date", "name"],
        usecols=[0, 1],
        dtype=str,
        skip_blank_lines=True,
        on_bad_lines="skip",
    )

    dates = df["date"].fillna("").str.strip().str.replace("-", "/", regex=False)
    df["date"] = pd.to_datetime(dates, format="%Y/%m/%d", errors="coerce")
    df["name"] = df["name"].map(clean_holiday_name)

    df = df[df["date"].notna() & (df["name"] != "")]
    df = df[df["date"].dt.year > MIN_OFFICIAL_YEAR]
    df = df.drop_duplicates(subset="date").sort_values("date")

    return [Holiday(date=ts.date(), name=name) for ts, name in zip(df["date"], df["name"])]


def needs_refresh(last_updated: Optional[datetime], today: date) -> bool:
    """True when nothing was fetched yet or the calendar month has changed since."""
    if last_updated is None:
        return True
    return (today.year, today.month) > (last_updated.year, last_updated.month)


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# PROVIDER
# ════════════════════════════════════════════════════════════════════════════════════════════════════

class OfficialHolidayProvider:
    """
    Fetches, caches and serves the official holiday list.

    Args:
        config: Settings to use (defaults to ``Settings.get_config()``)
        session: Object with a ``requests``-compatible ``get`` method
    """

    def __init__(self, config: Optional[WorkpaceSettings] = None, session: Optional[Any] = None):
        self.config = config or Settings.get_config()
        self.session = session or requests.Session()

    @property
    def cache_path(self) -> Path:
        return Path(self.config.holiday_cache_path)

    def fetch(self) -> List[Holiday]:
        """Download and parse the official CSV. Raises HolidaySourceError."""
        url = self.config.holiday_source_url
        try:
            response = self.session.get(url, timeout=self.config.http_timeout_s)
            response.raise_for_status()
        except requests.RequestException as e:
            raise HolidaySourceError(f"Failed to fetch holidays from {url}: {e}") from e

        try:
            holidays = parse_holiday_csv(decode_holiday_csv(response.content))
        except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as e:
            raise HolidaySourceError(f"Unreadable holiday CSV from {url}: {e}") from e
        if not holidays:
            raise HolidaySourceError(f"No holidays found in {url}")

        logger.info(f"Fetched {len(holidays)} official holidays from {url}")
        return holidays

    def load_cache(self) -> Tuple[List[Holiday], Optional[datetime]]:
        """Cached holidays and their fetch time; empty when the cache is unusable."""
        if not self.cache_path.exists():
            return [], None
        try:
            with open(self.cache_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            holidays = [Holiday.from_dict(item) for item in data.get("holidays", [])]
            stamp = data.get("last_updated")
            last_updated = datetime.fromisoformat(stamp) if stamp else None
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable holiday cache {self.cache_path}: {e}")
            return [], None
        return holidays, last_updated

    def save_cache(self, holidays: List[Holiday], fetched_at: datetime) -> None:
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_path, "w", encoding="utf-8") as f:
                json.dump(
                    {
                        "last_updated": fetched_at.isoformat(),
                        "holidays": [h.to_dict() for h in holidays],
                    },
                    f,
                    indent=2,
                    ensure_ascii=False,
                )
        except OSError as e:
            logger.warning(f"Could not write holiday cache {self.cache_path}: {e}")

    def get_holidays(self, today: Optional[date] = None) -> List[Holiday]:
        """
        Official holidays, refreshed monthly.

        Never raises: a failed refresh falls back to whatever the cache holds
        (possibly nothing).
        """
        today = today or date.today()
        cached, last_updated = self.load_cache()
        if cached and not needs_refresh(last_updated, today):
            return cached

        try:
            fresh = self.fetch()
        except HolidaySourceError as e:
            logger.warning(f"{e}; using {len(cached)} cached holidays")
            return cached

        self.save_cache(fresh, datetime.combine(today, datetime.min.time()))
        return fresh

    def force_update(self, today: Optional[date] = None) -> List[Holiday]:
        """Refetch regardless of cache age. Raises HolidaySourceError."""
        fresh = self.fetch()
        self.save_cache(fresh, datetime.combine(today or date.today(), datetime.min.time()))
        return fresh

    def holidays_for_year(self, year: int, today: Optional[date] = None) -> List[Holiday]:
        """Official holidays of ``year`` when available, else the calculated calendar."""
        if self.config.prefer_official_holidays:
            official = [h for h in self.get_holidays(today) if h.date.year == year]
            if official:
                return official
            logger.info(f"No official holidays for {year}, using calculated calendar")
        return calculated_holidays_for_year(year)
