"""
Relative-set gathering for the ego-centric layout.
Classifies the members around one ego: parents, siblings, children, nieces/nephews,
grandchildren, aunts/uncles, cousins, grandparents and in-laws.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from members import SpousalRelation
from relationship_graph import RelationshipGraph

# --- RELATION CATEGORIES ---
REL_EGO = 'ego'
REL_SPOUSE = 'spouse'
REL_PARENT = 'parent'
REL_SIBLING = 'sibling'
REL_CHILD = 'child'
REL_GRANDPARENT = 'grandparent'
REL_AUNT_UNCLE = 'aunt_uncle'
REL_PARENT_IN_LAW = 'parent_in_law'
REL_SIBLING_IN_LAW = 'sibling_in_law'
REL_NIECE_NEPHEW = 'niece_nephew'
REL_COUSIN = 'cousin'
REL_GRANDCHILD = 'grandchild'
REL_RELATIVE_SPOUSE = 'relative_spouse'


@dataclass
class RelativeSets:
    ego_id: str
    spouse_relations: List[SpousalRelation] = field(default_factory=list)
    parents: List[str] = field(default_factory=list)
    siblings: List[str] = field(default_factory=list)
    children: List[str] = field(default_factory=list)
    nieces_nephews: List[str] = field(default_factory=list)
    grandchildren: List[str] = field(default_factory=list)
    aunts_uncles_by_parent: Dict[str, List[str]] = field(default_factory=dict)
    cousins: List[str] = field(default_factory=list)
    grandparents: List[str] = field(default_factory=list)
    parents_in_law_by_spouse: Dict[str, List[str]] = field(default_factory=dict)
    siblings_in_law_by_spouse: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def spouse_ids(self) -> List[str]:
        return [rel.spouse_id for rel in self.spouse_relations]

    @property
    def aunts_uncles(self) -> List[str]:
        result = []
        for parent_id in self.parents:
            for au_id in self.aunts_uncles_by_parent.get(parent_id, []):
                if au_id not in result:
                    result.append(au_id)
        return result

    def categories(self) -> Dict[str, str]:
        """member id -> relation category; the closest relation wins."""
        labels = {self.ego_id: REL_EGO}
        groups = [
            (REL_SPOUSE, self.spouse_ids),
            (REL_PARENT, self.parents),
            (REL_SIBLING, self.siblings),
            (REL_CHILD, self.children),
            (REL_GRANDPARENT, self.grandparents),
            (REL_AUNT_UNCLE, self.aunts_uncles),
            (REL_PARENT_IN_LAW, _flatten(self.parents_in_law_by_spouse)),
            (REL_SIBLING_IN_LAW, _flatten(self.siblings_in_law_by_spouse)),
            (REL_NIECE_NEPHEW, self.nieces_nephews),
            (REL_COUSIN, self.cousins),
            (REL_GRANDCHILD, self.grandchildren),
        ]
        for category, member_ids in groups:
            for member_id in member_ids:
                labels.setdefault(member_id, category)
        return labels


def _flatten(groups: Dict[str, List[str]]) -> List[str]:
    return [member_id for member_ids in groups.values() for member_id in member_ids]


def gather_relatives(graph: RelationshipGraph, ego_id: str) -> Optional[RelativeSets]:
    """Returns None when the ego is not in the snapshot."""
    if not graph.has_member(ego_id):
        return None

    rel = RelativeSets(ego_id=ego_id)
    rel.spouse_relations = graph.spouse_relations(ego_id)
    spouse_ids = set(rel.spouse_ids)

    rel.parents = graph.parents_of(ego_id)
    rel.siblings = graph.siblings_of(ego_id, exclude=spouse_ids)
    rel.children = graph.children_of(ego_id)
    rel.nieces_nephews = graph.children_of_any(rel.siblings)
    rel.grandchildren = graph.children_of_any(rel.children)

    # Aunts/uncles: siblings of each parent
    excluded = {ego_id, *rel.siblings}
    for parent_id in rel.parents:
        rel.aunts_uncles_by_parent[parent_id] = graph.siblings_of(parent_id, exclude=excluded)
    rel.cousins = graph.children_of_any(rel.aunts_uncles)

    for parent_id in rel.parents:
        for gp_id in graph.parents_of(parent_id):
            if gp_id not in rel.grandparents:
                rel.grandparents.append(gp_id)

    # In-laws per ego spouse
    sil_excluded = {ego_id, *rel.siblings, *spouse_ids}
    for spouse_id in rel.spouse_ids:
        rel.parents_in_law_by_spouse[spouse_id] = [
            p for p in graph.parents_of(spouse_id) if p not in rel.parents
        ]
        rel.siblings_in_law_by_spouse[spouse_id] = graph.siblings_of(spouse_id, exclude=sil_excluded)

    return rel
