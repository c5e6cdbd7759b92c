"""
Ego-centric (point-of-view) family tree layout.

Band structure (top to bottom):

    grandparents   - ego's parents' parents
    parents        - ego's parents + aunts/uncles + parents-in-law
    ego            - ego + siblings (left) + spouses (right) + siblings-in-law (right of spouses)
    children       - ego's children + nieces/nephews + cousins
    grandchildren  - ego's grandchildren

Every member gets an integer column inside its band; spouses of all visible
members are pulled in afterwards, then clusters are repacked so no two cards
share a column.
"""

from typing import Dict, List, Optional

from cluster_resolver import resolve_conflicts
from column_allocator import ColumnAllocator, SlotTable
from geometry import (BAND_CHILDREN, BAND_EGO, BAND_GRANDCHILDREN, BAND_GRANDPARENTS,
                      BAND_PARENTS, DEFAULT_GEOMETRY, Geometry, round_half_up)
from graph_emitter import Layout, emit_graph
from relationship_graph import RelationshipGraph
from relatives import REL_RELATIVE_SPOUSE, RelativeSets, gather_relatives


class EgoLayout:
    """One layout pass around a single ego."""

    def __init__(self, graph: RelationshipGraph, relatives: RelativeSets):
        self.graph = graph
        self.rel = relatives
        self.ego_id = relatives.ego_id
        self.slots = SlotTable()
        self.categories = relatives.categories()

    def assign_columns(self) -> SlotTable:
        self._place_ego_band()
        self._place_parents_band()
        self._place_grandparents_band()
        self._place_descendant_bands()
        self._pull_in_spouses()
        resolve_conflicts(self.slots, self.graph.spouse_ids)
        return self.slots

    # ==================== PLACEMENT PRIMITIVES ====================

    def _place_rightward(self, member_id: str, cursor: ColumnAllocator, band: str):
        """Member at the next right column, its spouses further right."""
        if member_id in self.slots:
            return
        self.slots.place(member_id, cursor.take_right(), band)
        for rel in self.graph.spouse_relations(member_id):
            if rel.spouse_id not in self.slots:
                self.slots.place(rel.spouse_id, cursor.take_right(), band)

    def _place_leftward(self, member_id: str, cursor: ColumnAllocator, band: str):
        """Member at the next left column, its spouses further left."""
        if member_id in self.slots:
            return
        self.slots.place(member_id, cursor.take_left(), band)
        for rel in self.graph.spouse_relations(member_id):
            if rel.spouse_id not in self.slots:
                self.slots.place(rel.spouse_id, cursor.take_left(), band)

    def _place_other_spouses(self, member_id: str, skip: Optional[str], cursor: ColumnAllocator,
                             band: str, leftward: bool):
        for rel in self.graph.spouse_relations(member_id):
            if rel.spouse_id == skip or rel.spouse_id in self.slots:
                continue
            column = cursor.take_left() if leftward else cursor.take_right()
            self.slots.place(rel.spouse_id, column, band)

    # ==================== EGO ROW ====================

    def _place_ego_band(self):
        self.slots.place(self.ego_id, 0, BAND_EGO)

        # Spouses fan right; each spouse's siblings-in-law follow it
        right = ColumnAllocator(right=1)
        for spouse_id in self.rel.spouse_ids:
            if spouse_id not in self.slots:
                self.slots.place(spouse_id, right.take_right(), BAND_EGO)
            for sil_id in self.rel.siblings_in_law_by_spouse.get(spouse_id, []):
                self._place_rightward(sil_id, right, BAND_EGO)

        # Siblings fan left, each followed by its own spouses
        left = ColumnAllocator(left=-1)
        for sib_id in self.rel.siblings:
            self._place_leftward(sib_id, left, BAND_EGO)

    # ==================== PARENTS ROW ====================

    def _place_parents_band(self):
        parents = self.rel.parents
        if len(parents) == 2:
            right = self._place_two_parents(*parents)
        elif len(parents) == 1:
            right = self._place_single_parent(parents[0])
        else:
            right = ColumnAllocator(right=1)

        # Parents-in-law go to the far right of the band
        for spouse_id in self.rel.spouse_ids:
            for pil_id in self.rel.parents_in_law_by_spouse.get(spouse_id, []):
                self._place_rightward(pil_id, right, BAND_PARENTS)

    def _place_two_parents(self, parent1: str, parent2: str) -> ColumnAllocator:
        self.slots.place(parent1, -1, BAND_PARENTS)
        self.slots.place(parent2, 0, BAND_PARENTS)

        # Step-relations fan outward from each parent
        left = ColumnAllocator(left=-2)
        right = ColumnAllocator(right=1)
        self._place_other_spouses(parent1, parent2, left, BAND_PARENTS, leftward=True)
        self._place_other_spouses(parent2, parent1, right, BAND_PARENTS, leftward=False)

        # Aunts/uncles beyond them
        for au_id in reversed(self.rel.aunts_uncles_by_parent.get(parent1, [])):
            self._place_leftward(au_id, left, BAND_PARENTS)
        for au_id in self.rel.aunts_uncles_by_parent.get(parent2, []):
            self._place_rightward(au_id, right, BAND_PARENTS)
        return right

    def _place_single_parent(self, parent_id: str) -> ColumnAllocator:
        self.slots.place(parent_id, 0, BAND_PARENTS)

        cursor = ColumnAllocator(left=-1, right=1)
        self._place_other_spouses(parent_id, None, cursor, BAND_PARENTS, leftward=False)

        # Alternate sides so the parent stays roughly centred
        for index, au_id in enumerate(self.rel.aunts_uncles_by_parent.get(parent_id, [])):
            if index % 2 == 0:
                self._place_leftward(au_id, cursor, BAND_PARENTS)
            else:
                self._place_rightward(au_id, cursor, BAND_PARENTS)
        return cursor

    # ==================== GRANDPARENTS ROW ====================

    def _place_grandparents_band(self):
        for parent_id in self.rel.parents:
            parent_col = self.slots.column(parent_id)
            grandparents = self.graph.parents_of(parent_id)
            if len(grandparents) == 2:
                self.slots.place(grandparents[0], parent_col - 1, BAND_GRANDPARENTS)
                self.slots.place(grandparents[1], parent_col, BAND_GRANDPARENTS)
            elif grandparents:
                self.slots.place(grandparents[0], parent_col, BAND_GRANDPARENTS)

    # ==================== CHILDREN / GRANDCHILDREN ROWS ====================

    def _place_descendant_bands(self):
        self._place_offspring(self.ego_id, self.rel.children, BAND_CHILDREN)

        nieces = set(self.rel.nieces_nephews)
        for sib_id in self.rel.siblings:
            self._place_offspring(sib_id, [c for c in self.graph.children_of(sib_id) if c in nieces],
                                  BAND_CHILDREN)

        cousins = set(self.rel.cousins)
        for au_id in self.rel.aunts_uncles:
            self._place_offspring(au_id, [c for c in self.graph.children_of(au_id) if c in cousins],
                                  BAND_CHILDREN)

        grandchildren = set(self.rel.grandchildren)
        for child_id in self.rel.children:
            self._place_offspring(child_id, [c for c in self.graph.children_of(child_id) if c in grandchildren],
                                  BAND_GRANDCHILDREN)

    def _place_offspring(self, parent_id: str, child_ids: List[str], band: str):
        """Groups children by their other parent and centres each group under its anchor."""
        parent_col = self.slots.column(parent_id)
        if parent_col is None or not child_ids:
            return

        # anchor: None = the parent alone, otherwise the spouse forming the couple
        anchors = [None] + [s for s in self.graph.spouse_ids(parent_id) if s in self.slots]
        groups: Dict[Optional[str], List[str]] = {anchor: [] for anchor in anchors}
        for child_id in child_ids:
            other = next((p for p in self.graph.parents_of(child_id) if p != parent_id), None)
            groups[other if other in groups else None].append(child_id)

        for anchor in anchors:
            group = groups[anchor]
            if not group:
                continue
            if anchor is None:
                anchor_col = float(parent_col)
            else:
                anchor_col = (parent_col + self.slots.column(anchor)) / 2
            self._place_child_group(group, anchor_col, band)

    def _place_child_group(self, child_ids: List[str], anchor_col: float, band: str):
        half = (len(child_ids) - 1) / 2
        for index, child_id in enumerate(child_ids):
            if child_id in self.slots:
                continue
            column = round_half_up(anchor_col - half + index)
            self._place_rightward(child_id, ColumnAllocator(right=column), band)

    # ==================== SPOUSE CLOSURE ====================

    def _pull_in_spouses(self):
        """Adds every missing spouse of a placed member next to that member."""
        changed = True
        while changed:
            changed = False
            for member_id in list(self.slots.columns):
                for rel in self.graph.spouse_relations(member_id):
                    if rel.spouse_id in self.slots:
                        continue
                    self.slots.place(rel.spouse_id, self.slots.column(member_id) + 1,
                                     self.slots.band(member_id))
                    self.categories.setdefault(rel.spouse_id, REL_RELATIVE_SPOUSE)
                    changed = True

    # ==================== OUTPUT ====================

    def positions(self, geometry: Geometry = DEFAULT_GEOMETRY):
        return {
            member_id: (geometry.column_x(column), geometry.band_y(self.slots.band(member_id)))
            for member_id, column in self.slots.columns.items()
        }

    def annotations(self):
        return {
            member_id: {'relation': self.categories.get(member_id, REL_RELATIVE_SPOUSE),
                        'isEgo': member_id == self.ego_id,
                        'band': self.slots.band(member_id),
                        'column': self.slots.column(member_id)}
            for member_id in self.slots.columns
        }


def assign_ego_slots(graph: RelationshipGraph, ego_id: str) -> Optional[SlotTable]:
    relatives = gather_relatives(graph, ego_id)
    if relatives is None:
        return None
    return EgoLayout(graph, relatives).assign_columns()


def build_ego_layout(graph: RelationshipGraph, ego_id: Optional[str],
                     geometry: Geometry = DEFAULT_GEOMETRY) -> Layout:
    """Missing or unknown ego gives an empty layout."""
    relatives = gather_relatives(graph, ego_id) if ego_id else None
    if relatives is None:
        return Layout.empty()

    engine = EgoLayout(graph, relatives)
    engine.assign_columns()
    return emit_graph(graph, engine.positions(geometry), engine.annotations(), geometry)
