# --- campusmap_lib/schema.py ---
from dataclasses import dataclass, field
from enum import IntFlag
from typing import List


class Service(IntFlag):
    """Campus services a building can offer, one bit each."""

    DINING = 0b001
    LIBRARY = 0b010
    PARKING = 0b100


ALL_SERVICES = Service.DINING | Service.LIBRARY | Service.PARKING

# Display order matches the bit order of the topology file.
SERVICE_NAMES = {
    Service.DINING: "Dining",
    Service.LIBRARY: "Library",
    Service.PARKING: "Parking",
}


@dataclass
class BuildingRecord:
    """Represents a campus building: its id, display name and services."""

    id: int
    name: str
    service_mask: int = 0
    services: List[str] = field(init=False, repr=False, default_factory=list)

    def __post_init__(self):
        self.set_services(self.service_mask)

    def set_services(self, service_mask: int):
        """Replaces the service bits and refreshes the derived service names."""
        self.service_mask = service_mask
        self.services = [
            name for flag, name in SERVICE_NAMES.items() if flag & service_mask
        ]

    def has_service(self, mask: int) -> bool:
        """True if the building offers any of the services in `mask`."""
        return (mask & self.service_mask) > 0

    def has_dining(self) -> bool:
        return self.has_service(Service.DINING)

    def has_library(self) -> bool:
        return self.has_service(Service.LIBRARY)

    def has_parking(self) -> bool:
        return self.has_service(Service.PARKING)

    @property
    def service_message(self) -> str:
        """Returns e.g. '(Dining | Parking)', or '' if no service is offered."""
        if not self.services:
            return ""
        return f"({' | '.join(self.services)})"

    def __str__(self) -> str:
        return f"{self.id:02d} - {self.name}"


@dataclass
class Cell:
    """A single character of the campus map plus its render-time decorations."""

    ch: str
    prefix: str = ""
    suffix: str = ""

    def set_style(self, style: str, reset: str):
        # Open brackets take the style before the glyph; anything else closes it.
        if self.ch == "[":
            self.prefix = style
        else:
            self.suffix = reset

    def clear(self):
        self.prefix = ""
        self.suffix = ""

    def render(self) -> str:
        return f"{self.prefix}{self.ch}{self.suffix}"
