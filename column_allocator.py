"""
Column bookkeeping for the ego-centric layout.
"""

from typing import Dict, List, Optional


class ColumnAllocator:
    """Hands out the next free column on either side of an anchor."""

    def __init__(self, left: int = -1, right: int = 1):
        self.left = left
        self.right = right

    def take_left(self) -> int:
        column = self.left
        self.left -= 1
        return column

    def take_right(self) -> int:
        column = self.right
        self.right += 1
        return column

    def __repr__(self):
        return f"ColumnAllocator(left={self.left}, right={self.right})"


class SlotTable:
    """Provisional column and band of every placed member, in placement order."""

    def __init__(self):
        self.columns: Dict[str, int] = {}
        self.bands: Dict[str, str] = {}

    def __contains__(self, member_id: str) -> bool:
        return member_id in self.columns

    def __len__(self):
        return len(self.columns)

    def place(self, member_id: str, column: int, band: str) -> bool:
        if member_id in self.columns:
            return False
        self.columns[member_id] = column
        self.bands[member_id] = band
        return True

    def move(self, member_id: str, column: int):
        self.columns[member_id] = column

    def column(self, member_id: str) -> Optional[int]:
        return self.columns.get(member_id)

    def band(self, member_id: str) -> Optional[str]:
        return self.bands.get(member_id)

    def members_in(self, band: str) -> List[str]:
        return [member_id for member_id, b in self.bands.items() if b == band]
