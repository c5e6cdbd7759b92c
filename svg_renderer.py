"""
Рендерер SVG для веб-версії сімейного дерева.
Draws an emitted Layout (person cards, couple connectors, spouse and parent edges)
as a clickable SVG string and keeps the pan/zoom state of the drawing surface.
"""

from html import escape
from typing import Dict, Optional, Tuple

from geometry import DEFAULT_GEOMETRY, Geometry
from graph_emitter import EDGE_PARENT, EDGE_SPOUSE, NODE_COUPLE, NODE_PERSON, Layout
from members import GENDER_FEMALE, GENDER_MALE, STATUS_DIVORCED

# Стилі для SVG
STYLE = """
<style>
    .node-rect { cursor: pointer; transition: all 0.2s; }
    .node-rect:hover { stroke-width: 3; filter: drop-shadow(0px 0px 5px rgba(245, 158, 11, 0.5)); }
    .node-text { pointer-events: none; font-family: sans-serif; font-size: 13px; }
    .sub-text { font-size: 10px; fill: #6b7280; }
</style>
"""

GENDER_FILL = {GENDER_MALE: ("#dbeafe", "#3b82f6"), GENDER_FEMALE: ("#fce7f3", "#ec4899")}
OTHER_FILL = ("#f3f4f6", "#6b7280")
EGO_BORDER = "#f59e0b"


class SvgViewport:
    """
    Drawing-surface state used by the transition controller:
    positions of the nodes currently drawn, pan and zoom.
    """

    def __init__(self, width: int = 1200, height: int = 700,
                 min_zoom: float = 0.1, max_zoom: float = 2.0,
                 geometry: Geometry = DEFAULT_GEOMETRY):
        self.width = width
        self.height = height
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.geometry = geometry
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.zoom = 1.0
        self.last_fit_duration = 0
        self._positions: Dict[str, Tuple[float, float]] = {}
        self._pending_fit: Optional[float] = None

    # --- surface protocol ---
    def node_position(self, node_id: str):
        return self._positions.get(node_id)

    def transform(self):
        return self.pan_x, self.pan_y, self.zoom

    def fit_view(self, padding: float, duration: int):
        """Fit is applied to the next layout shown."""
        self._pending_fit = padding
        self.last_fit_duration = duration

    # ---
    def show(self, layout: Layout):
        self._positions = layout.positions()
        if self._pending_fit is not None:
            self._fit(layout, self._pending_fit)
            self._pending_fit = None

    def bounds(self, layout: Layout):
        xs0, ys0, xs1, ys1 = [], [], [], []
        for node in layout.nodes:
            if node.kind == NODE_COUPLE:
                w, h = self.geometry.couple_width, self.geometry.couple_height
            else:
                w, h = self.geometry.node_width, self.geometry.node_height
            xs0.append(node.x)
            ys0.append(node.y)
            xs1.append(node.x + w)
            ys1.append(node.y + h)
        if not xs0:
            return 0.0, 0.0, 0.0, 0.0
        return min(xs0), min(ys0), max(xs1), max(ys1)

    def _fit(self, layout: Layout, padding: float):
        min_x, min_y, max_x, max_y = self.bounds(layout)
        box_w = max(max_x - min_x, 1.0) * (1 + 2 * padding)
        box_h = max(max_y - min_y, 1.0) * (1 + 2 * padding)
        zoom = min(self.width / box_w, self.height / box_h)
        self.zoom = max(self.min_zoom, min(self.max_zoom, zoom))
        center_x = (min_x + max_x) / 2
        center_y = (min_y + max_y) / 2
        self.pan_x = self.width / 2 - center_x * self.zoom
        self.pan_y = self.height / 2 - center_y * self.zoom

    def zoom_by(self, factor: float):
        """Zooms around the surface centre."""
        new_zoom = max(self.min_zoom, min(self.max_zoom, self.zoom * factor))
        cx, cy = self.width / 2, self.height / 2
        self.pan_x = cx - (cx - self.pan_x) * new_zoom / self.zoom
        self.pan_y = cy - (cy - self.pan_y) * new_zoom / self.zoom
        self.zoom = new_zoom


class SVGRenderer:
    def __init__(self, layout: Layout, viewport: SvgViewport, ego_id: Optional[str] = None):
        self.layout = layout
        self.viewport = viewport
        self.ego_id = ego_id
        self.geometry = viewport.geometry
        self.nodes = {node.id: node for node in layout.nodes}

    def generate_svg(self) -> str:
        elements = []

        # 1. Лінії зв'язків (Edges)
        elements.extend(self._draw_edges())

        # 2. Вузли (Nodes)
        elements.extend(self._draw_nodes())

        pan_x, pan_y, zoom = self.viewport.transform()
        return f"""
        <svg viewBox="0 0 {self.viewport.width} {self.viewport.height}"
             width="{self.viewport.width}px"
             height="{self.viewport.height}px"
             xmlns="http://www.w3.org/2000/svg">
            {STYLE}
            <defs>
                <marker id="arrow" markerWidth="12" markerHeight="12" refX="9" refY="3" orient="auto" markerUnits="strokeWidth">
                  <path d="M0,0 L0,6 L9,3 z" fill="#6b7280" />
                </marker>
            </defs>
            <g transform="translate({pan_x:.2f} {pan_y:.2f}) scale({zoom:.4f})">
                {''.join(elements)}
            </g>
        </svg>
        """

    def _draw_nodes(self) -> list:
        nodes_svg = []
        g = self.geometry
        for node in self.layout.nodes:
            if node.kind == NODE_COUPLE:
                cx, cy = node.x + g.couple_width / 2, node.y + g.couple_height / 2
                nodes_svg.append(f'<circle cx="{cx}" cy="{cy}" r="4" fill="#f9a8d4" />')
                continue

            member = node.data['member']
            fill, border = GENDER_FILL.get(member.gender, OTHER_FILL)
            stroke_w = 2
            if node.id == self.ego_id:
                border, stroke_w = EGO_BORDER, 3
            opacity = 0.75 if member.is_deceased else 1.0

            label = member.full_name or member.id
            display_label = label[:20] + "..." if len(label) > 22 else label
            if member.is_deceased:
                display_label += " †"
            dates = (member.birth_date or "?") + (f" – {member.death_date}" if member.death_date else "")
            text_x = node.x + g.node_width / 2

            # id у тезі <a> - це те, що поверне click-detector
            nodes_svg.append(f"""
            <a href='#' id='{escape(node.id, quote=True)}'>
                <g opacity="{opacity}">
                    <rect x="{node.x}" y="{node.y}" width="{g.node_width}" height="{g.node_height}"
                          rx="10" ry="10" fill="{fill}" stroke="{border}" stroke-width="{stroke_w}" class="node-rect" />
                    <text x="{text_x}" y="{node.y + g.node_height / 2 - 6}" text-anchor="middle" fill="#1f2937" class="node-text">
                        {escape(display_label)}
                    </text>
                    <text x="{text_x}" y="{node.y + g.node_height / 2 + 14}" text-anchor="middle" class="node-text sub-text">
                        {escape(dates)}
                    </text>
                </g>
            </a>
            """)
        return nodes_svg

    def _draw_edges(self) -> list:
        edges_svg = []
        g = self.geometry
        for edge in self.layout.edges:
            source = self.nodes.get(edge.source)
            target = self.nodes.get(edge.target)
            if source is None or target is None:
                continue

            if edge.kind == EDGE_SPOUSE:
                # from the card side facing the couple connector to its centre
                tx, ty = target.x + g.couple_width / 2, target.y + g.couple_height / 2
                sx = source.x + g.node_width if source.x + g.node_width / 2 <= tx else source.x
                sy = source.y + g.node_height / 2
                divorced = edge.data.get('status') == STATUS_DIVORCED
                color = "#ef4444" if divorced else "#ec4899"
                dash = ' stroke-dasharray="7 4"' if divorced else ''
                edges_svg.append(self._line(sx, sy, tx, ty, color, extra=dash))

            elif edge.kind == EDGE_PARENT:
                if source.kind == NODE_PERSON:
                    sx, sy = source.x + g.node_width / 2, source.y + g.node_height
                else:
                    sx, sy = source.x + g.couple_width / 2, source.y + g.couple_height / 2
                tx, ty = target.x + g.node_width / 2, target.y
                edges_svg.append(self._line(sx, sy, tx, ty, "#6b7280", extra=' marker-end="url(#arrow)"'))
        return edges_svg

    def _line(self, x1, y1, x2, y2, color, extra=''):
        return f'<line x1="{x1}" y1="{y1}" x2="{x2}" y2="{y2}" stroke="{color}" stroke-width="2"{extra} />'
