# vendor_resolver.py
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import requests

from data import CACHE_TTL, CacheEntry, VendorCacheStore
from utils import oui_from_mac

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
RATE_LIMITED = "Rate Limited"

DEFAULT_API_URL = "https://api.macvendors.com"

def _utc_now() -> datetime:
    return datetime.now(timezone.utc)

class MacVendorsClient:
    """Looks up OUIs on the macvendors.com API.

    Rate-limit (HTTP 429) responses are retried with exponential backoff;
    network errors and other failures return UNKNOWN straight away.
    """

    def __init__(self, api_url: str = DEFAULT_API_URL, timeout: float = 5,
                 max_attempts: int = 3, initial_backoff: float = 2, max_backoff: float = 60,
                 session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.initial_backoff = initial_backoff
        self.max_backoff = max_backoff
        self.session = session or requests.Session()
        self.sleep = sleep

    def query(self, oui: str) -> str:
        """Returns the vendor name for an OUI, UNKNOWN, or RATE_LIMITED."""
        backoff = self.initial_backoff
        url = f"{self.api_url}/{oui}"

        for attempt in range(self.max_attempts):
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.RequestException as e:
                logger.debug(f"Vendor lookup for {oui} failed: {e}")
                return UNKNOWN

            if response.status_code == 429:
                if attempt < self.max_attempts - 1:  # Don't sleep after the last attempt
                    logger.warning(f"Rate limit reached, waiting {backoff:g}s before retry...")
                    self.sleep(backoff)
                    backoff = min(backoff * 2, self.max_backoff)
                    continue
                return RATE_LIMITED

            if response.status_code != 200:
                logger.debug(f"Vendor lookup for {oui} returned HTTP {response.status_code}")
                return UNKNOWN

            return self._vendor_from_response(response)

        return RATE_LIMITED

    @staticmethod
    def _vendor_from_response(response: requests.Response) -> str:
        # The API answers with plain text by default, or JSON when asked for it
        try:
            vendor = response.json()["vendorDetails"]["company"]
        except (ValueError, KeyError, TypeError):
            vendor = response.text
        vendor = str(vendor).strip() if vendor is not None else ""
        return vendor or UNKNOWN

class VendorResolver:
    """Resolves MAC addresses to vendor names through a disk cache in front of a lookup client."""

    def __init__(self, cache_store: VendorCacheStore, client: MacVendorsClient,
                 ttl: timedelta = CACHE_TTL, clock: Callable[[], datetime] = _utc_now):
        self.cache_store = cache_store
        self.client = client
        self.ttl = ttl
        self.clock = clock

    def resolve(self, mac_address: str) -> str:
        try:
            oui = oui_from_mac(mac_address)
        except ValueError as e:
            logger.warning(f"Cannot resolve vendor: {e}")
            return UNKNOWN

        cache = self.cache_store.load()
        entry = cache.get(oui)
        if entry and entry.is_fresh(self.clock(), self.ttl):
            logger.debug(f"Vendor cache hit for {oui}: {entry.vendor}")
            return entry.vendor

        vendor = self.client.query(oui)

        # Failures are not cached so the next run asks again
        if vendor not in (UNKNOWN, RATE_LIMITED):
            cache[oui] = CacheEntry(vendor=vendor, timestamp=self.clock())
            try:
                self.cache_store.save(cache)
            except OSError as e:
                logger.warning(f"Failed to save vendor cache: {e}")

        return vendor
