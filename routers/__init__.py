# routers/__init__.py
from typing import Optional

from dynaconf import Dynaconf

from .base import BaseRouter, RouterError
from .mikrotik import MikrotikRouter  # Import all concrete implementations

__all__ = ["BaseRouter", "RouterError", "MikrotikRouter", "get_router"]

def get_router(config: Dynaconf, host: Optional[str] = None, username: Optional[str] = None,
               password: Optional[str] = None) -> BaseRouter:
    """Router factory: returns an instance of the appropriate router class.

    host/username/password override the values from the router's settings section.
    """

    router_type = config.general.router_type  # Get router type from general

    if router_type == "mikrotik":
        return MikrotikRouter(config.mikrotik_router, host=host, username=username, password=password)
    # Add other router types here:
    # elif router_type == "other_router":
    #     return OtherRouter(config.other_router)
    else:
        raise ValueError(f"Unsupported router type: {router_type}")
