# --- campusmap_lib/rendering/listing.py ---
from typing import Iterable, Mapping

from campusmap_lib.schema import BuildingRecord
from .constants import RESET

COLUMN_GAP = 6


def format_building_list(buildings: Mapping[int, BuildingRecord]) -> str:
    """Lays out every 'NN - Name' entry in two columns, ordered by id.

    The first column holds the first half of the buildings (rounded up), the
    second column the rest.
    """
    records = [buildings[bid] for bid in sorted(buildings)]
    if not records:
        return ""
    n_rows = (len(records) + 1) // 2
    name_width = max(len(b.name) for b in records)

    lines = []
    for i in range(n_rows):
        row = ""
        for record in records[i::n_rows]:
            row += str(record) + " " * (COLUMN_GAP + name_width - len(record.name))
        lines.append(row)
    return "\n".join(lines) + "\n"


def format_selection(
    ids: Iterable[int],
    buildings: Mapping[int, BuildingRecord],
    style: str = "",
    reset: str = RESET,
) -> str:
    """One indented line per selected building, wrapped in a style token."""
    lines = [f"  {buildings[bid]}" for bid in ids]
    if not lines:
        return ""
    return style + "\n".join(lines) + (reset if style else "")
