"""
Relationship graph reader.
Normalizes a flat member snapshot into lookup structures shared by both layout modes:
members by id, parent -> child links, and one spousal relation per couple.
Dangling ids (parents or spouses missing from the snapshot) are ignored.
"""

import networkx as nx
from typing import Dict, Iterable, List, Optional, Set, Tuple

from members import Member, SpousalRelation, STATUS_CURRENT, STATUS_DIVORCED, parse_members

# Relationship type constants
REL_PARTNER = 'partner'
REL_CHILD = 'child'


def couple_key(a: str, b: str) -> Tuple[str, str]:
    """Unordered pair key for two member ids."""
    return (a, b) if a <= b else (b, a)


class RelationshipGraph:
    """
    Read-only view over one member snapshot.
    """

    def __init__(self, members: Iterable):
        self.by_id: Dict[str, Member] = {}
        self._order: Dict[str, int] = {}
        self._relations: Dict[str, Tuple[str, str]] = {}

        # parent -> child
        self.lineage = nx.DiGraph()
        # one undirected edge per married pair
        self.partners = nx.Graph()

        for member in parse_members(members):
            if member.id in self.by_id:
                continue
            self._order[member.id] = len(self._order)
            self.by_id[member.id] = member
            self.lineage.add_node(member.id)
            self.partners.add_node(member.id)

        for member in self.members:
            for parent_id in self.parents_of(member.id):
                self.lineage.add_edge(parent_id, member.id, type=REL_CHILD)

        for member in self.members:
            for rel in member.spouses:
                self._add_partner_edge(member.id, rel)

    def _add_partner_edge(self, member_id: str, rel: SpousalRelation):
        spouse_id = rel.spouse_id
        if spouse_id == member_id or spouse_id not in self.by_id:
            return
        if self.partners.has_edge(member_id, spouse_id):
            return
        if rel.id in self._relations:
            return
        self.partners.add_edge(member_id, spouse_id, type=REL_PARTNER,
                               relation_id=rel.id, status=rel.status)
        self._relations[rel.id] = (member_id, spouse_id)

    # ==================== MEMBERS ====================

    @property
    def members(self) -> List[Member]:
        return list(self.by_id.values())

    def __len__(self):
        return len(self.by_id)

    def member(self, member_id: Optional[str]) -> Optional[Member]:
        if member_id is None:
            return None
        return self.by_id.get(member_id)

    def has_member(self, member_id: Optional[str]) -> bool:
        return member_id is not None and member_id in self.by_id

    def index_of(self, member_id: str) -> int:
        return self._order.get(member_id, len(self._order))

    def in_snapshot_order(self, member_ids: Iterable[str]) -> List[str]:
        return sorted(set(member_ids), key=self.index_of)

    # ==================== PARENTS / CHILDREN ====================

    def parents_of(self, member_id: str) -> List[str]:
        """Visible parent ids in (parent1, parent2) order."""
        member = self.by_id.get(member_id)
        if member is None:
            return []
        parents = []
        for parent_id in (member.parent1_id, member.parent2_id):
            if parent_id and parent_id != member_id and parent_id in self.by_id and parent_id not in parents:
                parents.append(parent_id)
        return parents

    def children_of(self, parent_id: str) -> List[str]:
        if not self.lineage.has_node(parent_id):
            return []
        return list(self.lineage.successors(parent_id))

    def children_of_any(self, parent_ids: Iterable[str]) -> List[str]:
        children: Set[str] = set()
        for parent_id in parent_ids:
            children.update(self.children_of(parent_id))
        return self.in_snapshot_order(children)

    def siblings_of(self, member_id: str, exclude: Iterable[str] = ()) -> List[str]:
        """Members sharing at least one visible parent with member_id."""
        siblings = set(self.children_of_any(self.parents_of(member_id)))
        siblings.discard(member_id)
        siblings.difference_update(exclude)
        return self.in_snapshot_order(siblings)

    # ==================== SPOUSES ====================

    def spouse_relations(self, member_id: str) -> List[SpousalRelation]:
        """
        Relations as seen from member_id: its own declarations first,
        then relations declared only by the other side.
        """
        if not self.partners.has_node(member_id):
            return []

        result = []
        seen = set()
        member = self.by_id[member_id]
        for rel in member.spouses:
            if rel.spouse_id in seen or not self.partners.has_edge(member_id, rel.spouse_id):
                continue
            seen.add(rel.spouse_id)
            result.append(self._relation_towards(member_id, rel.spouse_id))

        for spouse_id in self.partners.neighbors(member_id):
            if spouse_id not in seen:
                seen.add(spouse_id)
                result.append(self._relation_towards(member_id, spouse_id))
        return result

    def _relation_towards(self, member_id: str, spouse_id: str) -> SpousalRelation:
        attrs = self.partners.edges[member_id, spouse_id]
        return SpousalRelation(id=attrs['relation_id'], spouse_id=spouse_id, status=attrs['status'])

    def spouse_ids(self, member_id: str) -> List[str]:
        return [rel.spouse_id for rel in self.spouse_relations(member_id)]

    def relation_between(self, a: Optional[str], b: Optional[str]) -> Optional[SpousalRelation]:
        if not a or not b or not self.partners.has_edge(a, b):
            return None
        return self._relation_towards(a, b)

    def spousal_relations(self) -> List[Tuple[str, str, SpousalRelation]]:
        """Every relation once, as (member1_id, member2_id, relation)."""
        return [(a, b, self._relation_towards(a, b)) for a, b in self._relations.values()]

    def can_reconcile(self, relation_id: str) -> bool:
        """A divorced couple may reconcile if neither partner has another current spouse."""
        pair = self._relations.get(relation_id)
        if pair is None:
            return False
        a, b = pair
        if self.partners.edges[a, b]['status'] != STATUS_DIVORCED:
            return False
        for member_id in pair:
            for rel in self.spouse_relations(member_id):
                if rel.id != relation_id and rel.status == STATUS_CURRENT:
                    return False
        return True
