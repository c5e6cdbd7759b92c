"""
Visual graph emitter.
Turns final member positions into person nodes, couple connector nodes,
spouse edges and parent -> child edges for the rendering surface.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from geometry import DEFAULT_GEOMETRY, Geometry
from relationship_graph import RelationshipGraph, couple_key

NODE_PERSON = 'person'
NODE_COUPLE = 'couple'
EDGE_SPOUSE = 'spouse'
EDGE_PARENT = 'parent'

Point = Tuple[float, float]


@dataclass(frozen=True)
class VisualNode:
    id: str
    kind: str
    x: float
    y: float
    data: Dict[str, Any] = field(default_factory=dict)
    draggable: bool = True
    selectable: bool = False

    @property
    def position(self) -> Point:
        return self.x, self.y

    def moved(self, dx: float, dy: float) -> 'VisualNode':
        return replace(self, x=self.x + dx, y=self.y + dy)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.data)
        if 'member' in data:
            data['member'] = data['member'].to_dict()
        result = {
            'id': self.id,
            'type': self.kind,
            'position': {'x': self.x, 'y': self.y},
            'data': data,
            'draggable': self.draggable,
        }
        if self.selectable:
            result['selectable'] = True
        return result


@dataclass(frozen=True)
class VisualEdge:
    id: str
    kind: str
    source: str
    target: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'type': self.kind, 'source': self.source,
                'target': self.target, 'data': dict(self.data)}


class Layout(NamedTuple):
    nodes: List[VisualNode]
    edges: List[VisualEdge]

    @classmethod
    def empty(cls) -> 'Layout':
        return cls([], [])

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node(self, node_id: str) -> Optional[VisualNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def positions(self) -> Dict[str, Point]:
        return {node.id: node.position for node in self.nodes}

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {'nodes': [n.to_dict() for n in self.nodes],
                'edges': [e.to_dict() for e in self.edges]}


def couple_node_id(relation_id: str) -> str:
    return f"couple-{relation_id}"


def couple_anchor(pos1: Point, pos2: Point, geometry: Geometry = DEFAULT_GEOMETRY) -> Point:
    """Connector top-left so that its centre sits halfway between both card centres."""
    c1x, c1y = geometry.card_center(*pos1)
    c2x, c2y = geometry.card_center(*pos2)
    return ((c1x + c2x) / 2 - geometry.couple_width / 2,
            (c1y + c2y) / 2 - geometry.couple_height / 2)


def emit_graph(graph: RelationshipGraph,
               positions: Dict[str, Point],
               annotations: Optional[Dict[str, Dict[str, Any]]] = None,
               geometry: Geometry = DEFAULT_GEOMETRY) -> Layout:
    """
    positions holds the final top-left corner of every visible member.
    Couple positions are derived here and nowhere else.
    """
    annotations = annotations or {}
    visible = graph.in_snapshot_order(m for m in positions if graph.has_member(m))
    visible_set = set(visible)

    nodes = []
    edges = []

    # 1. Person nodes
    for member_id in visible:
        data = {'member': graph.member(member_id)}
        data.update(annotations.get(member_id, {}))
        x, y = positions[member_id]
        nodes.append(VisualNode(id=member_id, kind=NODE_PERSON, x=x, y=y, data=data))

    # 2. Couple nodes + spouse edges, one per visible pair
    couple_by_pair = {}
    couple_nodes = []
    for member_id in visible:
        for rel in graph.spouse_relations(member_id):
            if rel.spouse_id not in visible_set:
                continue
            key = couple_key(member_id, rel.spouse_id)
            if key in couple_by_pair:
                continue

            couple_id = couple_node_id(rel.id)
            couple_by_pair[key] = couple_id
            x, y = couple_anchor(positions[member_id], positions[rel.spouse_id], geometry)
            couple_nodes.append(VisualNode(
                id=couple_id, kind=NODE_COUPLE, x=x, y=y, selectable=True,
                data={
                    'member1Id': member_id,
                    'member2Id': rel.spouse_id,
                    'relationId': rel.id,
                    'status': rel.status,
                    'canReconcile': graph.can_reconcile(rel.id),
                },
            ))

            for role, side, source in (('member1', 'left', member_id), ('member2', 'right', rel.spouse_id)):
                edges.append(VisualEdge(
                    id=f"spouse-{side}-{rel.id}", kind=EDGE_SPOUSE, source=source, target=couple_id,
                    data={
                        'relationId': rel.id,
                        'status': rel.status,
                        'member1Id': member_id,
                        'member2Id': rel.spouse_id,
                        'coupleId': couple_id,
                        'role': role,
                    },
                ))

    nodes.extend(couple_nodes)

    # 3. Parent -> child edges
    for member_id in visible:
        member = graph.member(member_id)
        p1 = member.parent1_id if member.parent1_id in visible_set else None
        p2 = member.parent2_id if member.parent2_id in visible_set and member.parent2_id != p1 else None
        if p1 == member_id:
            p1 = None
        if p2 == member_id:
            p2 = None
        if not p1 and not p2:
            continue

        if p1 and p2:
            source = couple_by_pair.get(couple_key(p1, p2), p1)
        else:
            source = p1 or p2

        edges.append(VisualEdge(
            id=f"parent-{member_id}", kind=EDGE_PARENT, source=source, target=member_id,
            data={'childId': member_id, 'parent1Id': p1, 'parent2Id': p2},
        ))

    return Layout(nodes, edges)
