"""
Geometry settings shared by both layout modes.
"""

import math
from dataclasses import dataclass

# --- КОНСТАНТИ РОЗМІРІВ ---
NODE_WIDTH = 180
NODE_HEIGHT = 80
H_GAP = 40
V_GAP = 120
COUPLE_WIDTH = 40
COUPLE_HEIGHT = 40

# --- BANDS (ego mode, top to bottom) ---
BAND_GRANDPARENTS = 'grandparents'
BAND_PARENTS = 'parents'
BAND_EGO = 'ego'
BAND_CHILDREN = 'children'
BAND_GRANDCHILDREN = 'grandchildren'
BAND_ORDER = (BAND_GRANDPARENTS, BAND_PARENTS, BAND_EGO, BAND_CHILDREN, BAND_GRANDCHILDREN)
_BAND_LEVEL = {band: level for level, band in enumerate(BAND_ORDER, start=-2)}


@dataclass(frozen=True)
class Geometry:
    node_width: float = NODE_WIDTH
    node_height: float = NODE_HEIGHT
    horizontal_gap: float = H_GAP
    vertical_gap: float = V_GAP
    couple_width: float = COUPLE_WIDTH
    couple_height: float = COUPLE_HEIGHT

    @property
    def column_width(self) -> float:
        return self.node_width + self.horizontal_gap

    @property
    def row_height(self) -> float:
        return self.node_height + self.vertical_gap

    def column_x(self, column: int) -> float:
        return column * self.column_width

    def generation_y(self, generation: int) -> float:
        return generation * self.row_height

    def band_y(self, band: str) -> float:
        return _BAND_LEVEL.get(band, 0) * self.row_height

    def card_center(self, x: float, y: float):
        return x + self.node_width / 2, y + self.node_height / 2


DEFAULT_GEOMETRY = Geometry()


def round_half_up(value: float) -> int:
    """Rounds .5 towards +inf so that centred groups lean right consistently."""
    return int(math.floor(value + 0.5))
