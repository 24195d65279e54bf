# data.py
import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple
from pathlib import Path

logger = logging.getLogger(__name__)

CACHE_TTL = timedelta(days=30)

_OUI_KEY = re.compile(r"^[0-9A-F]{6}$")

@dataclass
class CacheEntry:
    vendor: str
    timestamp: datetime

    def is_fresh(self, now: datetime, ttl: timedelta = CACHE_TTL) -> bool:
        """An entry is fresh while it is younger than the TTL."""
        return now - self.timestamp < ttl

def _parse_timestamp(value: str) -> datetime:
    timestamp = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp

def _write_json_atomic(data, json_file: Path) -> None:
    """Writes JSON to a temporary file next to json_file, then replaces json_file with it."""
    json_file.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{json_file.name}.", suffix=".tmp", dir=json_file.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as file:
            json.dump(data, file, indent=4)
        os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, json_file)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise

def _read_json(json_file: Path):
    """Reads a JSON file, returning None (and logging) when it is missing or unreadable."""
    try:
        with json_file.open("r", encoding="utf-8") as file:
            return json.load(file)
    except FileNotFoundError:
        logger.debug("JSON file not found: %s", json_file)
    except json.JSONDecodeError as err:
        logger.warning("Error decoding JSON data in %s: %s", json_file, err)
    except (OSError, UnicodeDecodeError) as err:
        logger.warning("Could not read %s: %s", json_file, err)
    return None

class VendorCacheStore:
    """Durable OUI -> CacheEntry mapping kept in a JSON file.

    Layout on disk::

        {"vendors": {"AABBCC": {"vendor": "Acme Corp", "timestamp": "2026-01-01T00:00:00+00:00"}}}
    """

    def __init__(self, json_file: Path):
        self.json_file = Path(json_file)

    def load(self) -> Dict[str, CacheEntry]:
        """Loads the whole cache. Missing or malformed files give an empty cache."""
        data = _read_json(self.json_file)
        if data is None:
            return {}
        vendors = data.get("vendors") if isinstance(data, dict) else None
        if not isinstance(vendors, dict):
            logger.warning("Unexpected vendor cache layout in %s. Starting with an empty cache.", self.json_file)
            return {}

        cache: Dict[str, CacheEntry] = {}
        for oui, entry in vendors.items():
            try:
                if not _OUI_KEY.match(oui):
                    raise ValueError(f"bad OUI key {oui!r}")
                cache[oui] = CacheEntry(vendor=str(entry["vendor"]),
                                        timestamp=_parse_timestamp(entry["timestamp"]))
            except (KeyError, TypeError, ValueError, AttributeError) as err:
                logger.debug("Skipping malformed vendor cache entry %r: %s", oui, err)
        return cache

    def save(self, cache: Dict[str, CacheEntry]) -> None:
        """Saves the whole cache. Raises OSError if the file cannot be written."""
        data = {
            "vendors": {
                oui: {"vendor": entry.vendor, "timestamp": entry.timestamp.isoformat()}
                for oui, entry in sorted(cache.items())
            }
        }
        _write_json_atomic(data, self.json_file)

def load_connection_defaults(json_file: Path) -> Tuple[Optional[str], Optional[str]]:
    """Loads the last used router host and username.

    Returns:
        Tuple[Optional[str], Optional[str]]: (host, username); either may be None.
    """
    data = _read_json(Path(json_file))
    if not isinstance(data, dict):
        return None, None
    return data.get("ip") or None, data.get("username") or None

def save_connection_defaults(json_file: Path, host: str, username: str) -> None:
    """Remembers the router host and username. The password is never stored."""
    try:
        _write_json_atomic({"ip": host, "username": username}, Path(json_file))
    except OSError as err:
        logger.error("File system error while saving connection defaults: %s", err)
