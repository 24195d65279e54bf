# lease.py
from dataclasses import dataclass
from typing import List

@dataclass(frozen=True)
class Lease:
    address: str
    mac_address: str
    hostname: str = ""
    vendor: str = ""  # Filled in by the vendor resolver

    def cell(self, column: int) -> str:
        """Returns the display value of the given column index."""
        return getattr(self, COLUMNS[column].field)

    def cells(self) -> tuple:
        return tuple(self.cell(i) for i in range(len(COLUMNS)))

@dataclass(frozen=True)
class Column:
    title: str
    width: int
    field: str

COLUMNS: List[Column] = [
    Column("IP", 15, "address"),
    Column("MAC", 17, "mac_address"),
    Column("Hostname", 20, "hostname"),
    Column("Vendor", 30, "vendor"),
]
