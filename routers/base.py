# routers/base.py
from abc import ABC, abstractmethod
from typing import List

from lease import Lease

class RouterError(Exception):
    """Raised when a router cannot be reached or its lease table cannot be read."""

class BaseRouter(ABC):
    """Abstract base class for interacting with routers."""

    @abstractmethod
    def get_leases(self) -> List[Lease]:
        """Retrieves the DHCP leases from the router.

        Returns:
            A list of Lease records with address, mac_address and hostname set.
            The vendor field is left empty.

        Raises:
            RouterError: The router is unreachable or the lease command failed.
        """
        pass
