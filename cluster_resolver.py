"""
Spouse clusters and column conflict resolution.

A cluster is a maximal set of members in one band joined by spousal links.
Clusters are moved as atomic blocks so a couple is never split by an unrelated card.
"""

from collections import deque
from typing import Callable, Dict, Iterable, List, Optional

from geometry import BAND_ORDER


def build_clusters(member_ids: Iterable[str],
                   spouse_ids_of: Callable[[str], Iterable[str]],
                   columns: Optional[Dict[str, int]] = None) -> List[List[str]]:
    """
    BFS over spousal links restricted to member_ids.
    With columns given, members inside a cluster are sorted by provisional column,
    otherwise discovery order is kept.
    """
    ordered = list(member_ids)
    allowed = set(ordered)
    grouped = set()
    clusters = []

    for start_id in ordered:
        if start_id in grouped:
            continue
        cluster = []
        queue = deque([start_id])
        grouped.add(start_id)
        while queue:
            current = queue.popleft()
            cluster.append(current)
            for spouse_id in spouse_ids_of(current):
                if spouse_id in allowed and spouse_id not in grouped:
                    grouped.add(spouse_id)
                    queue.append(spouse_id)

        if columns is not None:
            cluster.sort(key=lambda m: columns.get(m, 0))
        clusters.append(cluster)

    return clusters


def pack_clusters(clusters: List[List[str]], columns: Dict[str, int]) -> Dict[str, int]:
    """
    Repacks clusters left to right into gap-free consecutive columns.
    A cluster keeps its natural start unless the previous one already covers it.
    """
    if not clusters:
        return {}

    ordered = sorted(clusters, key=lambda c: columns.get(c[0], 0))
    packed = {}
    next_col = columns.get(ordered[0][0], 0)
    for cluster in ordered:
        natural_start = columns.get(cluster[0], 0)
        if next_col < natural_start:
            next_col = natural_start
        for offset, member_id in enumerate(cluster):
            packed[member_id] = next_col + offset
        next_col += len(cluster)
    return packed


def resolve_conflicts(slots, spouse_ids_of: Callable[[str], Iterable[str]], bands=BAND_ORDER):
    """Applies build + pack per band on a SlotTable in place."""
    for band in bands:
        in_band = slots.members_in(band)
        if not in_band:
            continue
        clusters = build_clusters(in_band, spouse_ids_of, slots.columns)
        for member_id, column in pack_clusters(clusters, slots.columns).items():
            slots.move(member_id, column)
