# lease_viewer.py
import argparse
import getpass
import logging
import sys
from dataclasses import replace
from datetime import timedelta
from typing import Callable, List, Optional, Tuple
from pathlib import Path

from dynaconf import Dynaconf, Validator

from lease import Lease
from routers import BaseRouter, RouterError, get_router
from data import VendorCacheStore, load_connection_defaults, save_connection_defaults
from vendor_resolver import DEFAULT_API_URL, MacVendorsClient, VendorResolver
from lease_table import LeaseTableApp

# Load settings
config = Dynaconf(
    settings_files=['config/settings.toml'],
    envvar_prefix="LEASEVIEW",
    validators=[
        Validator("general.router_type", default="mikrotik"),
        Validator("general.connection_file", default="credentials.json"),
        Validator("mikrotik_router.ssh_port", default=22),
        Validator("mikrotik_router.ssh_timeout", default=10),
        Validator("vendor_lookup.api_url", default=DEFAULT_API_URL),
        Validator("vendor_lookup.cache_file", default="vendor_cache.json"),
        Validator("vendor_lookup.cache_ttl_days", default=30),
        Validator("vendor_lookup.timeout", default=5),
        Validator("vendor_lookup.max_attempts", default=3),
        Validator("vendor_lookup.initial_backoff", default=2),
        Validator("vendor_lookup.max_backoff", default=60),
    ],
)

logger = logging.getLogger(__name__)

MENU = """
MikroTik Router Utilities
------------------------
1. DHCP Lease Viewer
2. Exit"""

def _prompt(label: str, default: Optional[str], input_func: Callable[[str], str] = input) -> str:
    """Prompts until a value is given; an empty answer takes the default when there is one."""
    while True:
        prompt = f"{label} [{default}]: " if default else f"{label}: "
        value = input_func(prompt).strip()
        if value:
            return value
        if default:
            return default

def resolve_connection(args: argparse.Namespace, settings: Dynaconf,
                       input_func: Callable[[str], str] = input) -> Tuple[str, str]:
    """Works out the router host and username from CLI args, settings, or prompts.

    Prompts offer the last used values as defaults, and the chosen values are remembered.
    """
    router_settings = settings.mikrotik_router
    connection_file = Path(settings.general.connection_file)
    saved_host, saved_user = load_connection_defaults(connection_file)

    host = args.host or router_settings.get("router_ip") or _prompt("Router IP", saved_host, input_func)
    username = args.user or router_settings.get("router_user") or _prompt("Username", saved_user, input_func)

    if (host, username) != (saved_host, saved_user):
        save_connection_defaults(connection_file, host, username)
    return host, username

def build_resolver(settings: Dynaconf) -> VendorResolver:
    """Creates the vendor resolver from the [vendor_lookup] settings."""
    lookup = settings.vendor_lookup
    client = MacVendorsClient(
        api_url=lookup.api_url,
        timeout=lookup.timeout,
        max_attempts=lookup.max_attempts,
        initial_backoff=lookup.initial_backoff,
        max_backoff=lookup.max_backoff,
    )
    return VendorResolver(
        VendorCacheStore(Path(lookup.cache_file)),
        client,
        ttl=timedelta(days=lookup.cache_ttl_days),
    )

def enrich_leases(leases: List[Lease], resolver: VendorResolver) -> List[Lease]:
    """Fills in the vendor of every lease, one lookup at a time."""
    enriched = []
    for lease in leases:
        vendor = resolver.resolve(lease.mac_address)
        logger.debug(f"{lease.mac_address} -> {vendor}")
        enriched.append(replace(lease, vendor=vendor))
    return enriched

def view_dhcp_leases(router: BaseRouter, resolver: VendorResolver,
                     app_factory: Callable[[List[Lease]], LeaseTableApp] = LeaseTableApp) -> bool:
    """Fetches, enriches and displays the router's leases.

    Returns False when the leases could not be fetched; nothing is displayed then.
    """
    try:
        leases = router.get_leases()
    except RouterError as err:
        logger.error(f"Error fetching DHCP leases: {err}")
        return False

    if not leases:
        logger.info("Router reported no DHCP leases.")
    leases = enrich_leases(leases, resolver)
    app_factory(leases).run()
    return True

def run_menu(router: BaseRouter, resolver: VendorResolver, input_func: Callable[[str], str] = input) -> None:
    while True:
        print(MENU)
        try:
            choice = input_func("\nSelect an option: ").strip()
        except EOFError:
            choice = "2"

        if choice == "1":
            view_dhcp_leases(router, resolver)
        elif choice == "2":
            print("Goodbye!")
            return
        else:
            print("Invalid option. Please try again.")

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="DHCP lease viewer with MAC vendor lookup")
    parser.add_argument("--host", help="Router IP or hostname (overrides settings)")
    parser.add_argument("--user", help="SSH username (overrides settings)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    host, username = resolve_connection(args, config)
    # Never saved; empty means SSH keys or agent
    password = getpass.getpass("Password: ") or None

    try:
        router = get_router(config, host=host, username=username, password=password)
    except ValueError as err:
        logger.error(str(err))
        return 1

    run_menu(router, build_resolver(config))
    return 0

if __name__ == "__main__":
    sys.exit(main())
