"""
Рушій компонування сімейного дерева.
Whole-tree generation layout plus the facade used by the viewer:
no ego -> generation layout, ego selected -> ego-centric layout.
"""

import traceback
from collections import deque
from typing import Dict, Iterable, List, Optional

from cluster_resolver import build_clusters
from ego_layout import build_ego_layout
from geometry import (COUPLE_HEIGHT, COUPLE_WIDTH, DEFAULT_GEOMETRY, H_GAP, NODE_HEIGHT,
                      NODE_WIDTH, V_GAP, Geometry)
from graph_emitter import Layout, emit_graph
from relationship_graph import RelationshipGraph

__all__ = [
    'LayoutEngine', 'compute_generations', 'order_generations', 'build_tree_layout',
    'NODE_WIDTH', 'NODE_HEIGHT', 'H_GAP', 'V_GAP', 'COUPLE_WIDTH', 'COUPLE_HEIGHT',
]


def _is_married_in(graph: RelationshipGraph, member_id: str) -> bool:
    """No visible parents, but married to someone who has them."""
    if graph.parents_of(member_id):
        return False
    return any(graph.parents_of(spouse_id) for spouse_id in graph.spouse_ids(member_id))


def _walk_generations(graph: RelationshipGraph, gens: Dict[str, int], queue: deque):
    while queue:
        current = queue.popleft()
        gen = gens[current]
        # married-in partners share the row of the member they married
        for spouse_id in graph.spouse_ids(current):
            if spouse_id not in gens and not graph.parents_of(spouse_id):
                gens[spouse_id] = gen
                queue.append(spouse_id)
        for child_id in graph.children_of(current):
            if child_id not in gens:
                gens[child_id] = gen + 1
                queue.append(child_id)


def compute_generations(graph: RelationshipGraph) -> Dict[str, int]:
    """
    BFS depth from every member without a visible first parent.
    A parent id missing from the snapshot counts as no parent.
    Married-in spouses are reached through their partner instead of being seeded.
    First visit wins; anything unreachable (cycles) falls back to generation 0.
    """
    gens = {}
    queue = deque()
    deferred = []
    for member in graph.members:
        if graph.has_member(member.parent1_id) and member.parent1_id != member.id:
            continue
        if _is_married_in(graph, member.id):
            deferred.append(member.id)
            continue
        gens[member.id] = 0
        queue.append(member.id)
    _walk_generations(graph, gens, queue)

    # partner never reached (its own line is cyclic)
    for member_id in deferred:
        if member_id not in gens:
            gens[member_id] = 0
            queue.append(member_id)
    _walk_generations(graph, gens, queue)

    for member in graph.members:
        if member.id not in gens:
            gens[member.id] = 0
    return gens


def order_generations(graph: RelationshipGraph, gens: Dict[str, int]) -> Dict[int, List[str]]:
    """Slot order per generation: spouse clusters in discovery order, kept contiguous."""
    by_gen: Dict[int, List[str]] = {}
    for member in graph.members:
        by_gen.setdefault(gens.get(member.id, 0), []).append(member.id)

    ordered = {}
    for gen in sorted(by_gen):
        clusters = build_clusters(by_gen[gen], graph.spouse_ids)
        ordered[gen] = [member_id for cluster in clusters for member_id in cluster]
    return ordered


def build_tree_layout(graph: RelationshipGraph, geometry: Geometry = DEFAULT_GEOMETRY) -> Layout:
    if not len(graph):
        return Layout.empty()

    gens = compute_generations(graph)
    rows = order_generations(graph, gens)

    positions = {}
    columns = {}
    for gen, member_ids in rows.items():
        count = len(member_ids)
        total_width = count * geometry.node_width + (count - 1) * geometry.horizontal_gap
        start_x = -total_width / 2
        for slot, member_id in enumerate(member_ids):
            positions[member_id] = (start_x + slot * geometry.column_width, geometry.generation_y(gen))
            # card centre = column * column_width; half columns for even rows
            columns[member_id] = slot - (count - 1) / 2

    annotations = {
        member_id: {'generation': gens[member_id], 'column': columns[member_id]}
        for member_id in positions
    }
    return emit_graph(graph, positions, annotations, geometry)


class LayoutEngine:
    def __init__(self, geometry: Optional[Geometry] = None):
        self.geometry = geometry or DEFAULT_GEOMETRY
        self.node_width = self.geometry.node_width
        self.node_height = self.geometry.node_height
        self.horizontal_gap = self.geometry.horizontal_gap
        self.vertical_gap = self.geometry.vertical_gap

    def calculate_layout(self, members: Iterable, ego_id: Optional[str] = None) -> Layout:
        """
        Recomputes the whole layout from one snapshot.
        Never raises: unexpected failures are printed and give an empty layout.
        """
        try:
            graph = members if isinstance(members, RelationshipGraph) else RelationshipGraph(members)
            if ego_id:
                return build_ego_layout(graph, ego_id, self.geometry)
            return build_tree_layout(graph, self.geometry)

        except Exception as e:
            print(f"Layout error: {e}")
            traceback.print_exc()
            return Layout.empty()

    def calculate_generations(self, members: Iterable) -> Dict[str, int]:
        graph = members if isinstance(members, RelationshipGraph) else RelationshipGraph(members)
        return compute_generations(graph)
