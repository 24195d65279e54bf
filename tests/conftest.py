import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from data import VendorCacheStore
from lease import Lease
from vendor_resolver import MacVendorsClient

NOW = datetime(2026, 10, 16, 12, 0, 0, tzinfo=timezone.utc)


def make_response(status: int, text: str = "", json_body=None) -> requests.Response:
    """Builds a real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status
    body = json.dumps(json_body) if json_body is not None else text
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    return response


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def cache_store(tmp_path):
    """Vendor cache backed by a file in a temp directory."""
    return VendorCacheStore(tmp_path / "vendor_cache.json")


@pytest.fixture
def lookup_client():
    """Lookup client stub; tests set return values or assert it was not called."""
    return MagicMock(spec=MacVendorsClient)


@pytest.fixture
def sample_leases():
    return [
        Lease("10.0.0.5", "AA:BB:CC:11:22:33", "laptop", "Acme Corp"),
        Lease("10.0.0.12", "00:11:22:33:44:55", "printer", "Zeta Printers"),
        Lease("10.0.0.2", "F0:0D:BE:EF:00:01", "nas", "Beta Storage"),
    ]
