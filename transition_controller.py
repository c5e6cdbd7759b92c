"""
Transition controller.

On an ego change the outgoing ego keeps its screen position: the fresh layout is
translated so the member lands where it was drawn before. With no previous ego,
a cleared ego, or on the very first layout, the surface is asked to fit all nodes.
"""

from typing import Optional, Protocol, Tuple

from graph_emitter import Layout

STATE_STABLE = 'stable'
STATE_TRANSITIONING = 'transitioning'

FIT_PADDING = 0.2
FIT_DURATION_MS = 400

Point = Tuple[float, float]
Transform = Tuple[float, float, float]  # pan_x, pan_y, zoom


class ViewportSurface(Protocol):
    """What the rendering surface has to expose."""

    def node_position(self, node_id: str) -> Optional[Point]:
        ...

    def transform(self) -> Transform:
        ...

    def fit_view(self, padding: float, duration: int) -> None:
        ...


def toggle_ego(current: Optional[str], clicked: Optional[str]) -> Optional[str]:
    """Clicking the current ego switches back to the whole tree."""
    if clicked is None or clicked == current:
        return None
    return clicked


def screen_position(flow_pos: Point, transform: Transform) -> Point:
    pan_x, pan_y, zoom = transform
    return pan_x + flow_pos[0] * zoom, pan_y + flow_pos[1] * zoom


def anchor_offset(screen_pos: Point, transform: Transform, new_flow_pos: Point) -> Point:
    """Flow-space translation that puts new_flow_pos back under screen_pos."""
    pan_x, pan_y, zoom = transform
    zoom = zoom or 1.0
    target_x = (screen_pos[0] - pan_x) / zoom
    target_y = (screen_pos[1] - pan_y) / zoom
    return target_x - new_flow_pos[0], target_y - new_flow_pos[1]


def translate_layout(layout: Layout, dx: float, dy: float) -> Layout:
    if not dx and not dy:
        return layout
    return Layout([node.moved(dx, dy) for node in layout.nodes], list(layout.edges))


class TransitionController:
    def __init__(self, surface: ViewportSurface, padding: float = FIT_PADDING,
                 duration: int = FIT_DURATION_MS, logger=None):
        self.surface = surface
        self.padding = padding
        self.duration = duration
        self.logger = logger

        self.state = STATE_STABLE
        self.ego_id: Optional[str] = None
        self.offset: Point = (0.0, 0.0)
        self._first_layout = True
        # (member id, screen position) captured before the ego changed
        self._anchor: Optional[Tuple[str, Point]] = None

    def select(self, member_id: Optional[str]) -> Optional[str]:
        """Click on a member: toggles it as ego. Returns the new ego."""
        return self.change_ego(toggle_ego(self.ego_id, member_id))

    def clear(self) -> Optional[str]:
        return self.change_ego(None)

    def change_ego(self, new_ego: Optional[str]) -> Optional[str]:
        if new_ego == self.ego_id:
            return self.ego_id

        previous = self.ego_id
        self._anchor = None
        if previous is not None and new_ego is not None:
            flow_pos = self.surface.node_position(previous)
            if flow_pos is not None:
                self._anchor = (previous, screen_position(flow_pos, self.surface.transform()))

        self.ego_id = new_ego
        self.state = STATE_TRANSITIONING
        self._log("SELECT_EGO", f"{previous} -> {new_ego}")
        return new_ego

    def present(self, layout: Layout) -> Layout:
        """
        Called after every layout recomputation. Returns the layout to draw
        (possibly translated) and triggers fit-to-view when needed.
        """
        if self._first_layout:
            self._first_layout = False
            self.state = STATE_STABLE
            self._anchor = None
            return self._fit(layout)

        if self.state == STATE_STABLE:
            # data refresh with the same ego keeps the current translation
            return translate_layout(layout, *self.offset)

        self.state = STATE_STABLE
        anchor, self._anchor = self._anchor, None
        if anchor is not None:
            anchor_id, anchor_screen = anchor
            node = layout.node(anchor_id)
            if node is not None:
                self.offset = anchor_offset(anchor_screen, self.surface.transform(), node.position)
                self._log("ANCHOR_VIEW", f"{anchor_id} offset {self.offset[0]:.1f},{self.offset[1]:.1f}")
                return translate_layout(layout, *self.offset)

        return self._fit(layout)

    def _fit(self, layout: Layout) -> Layout:
        self.offset = (0.0, 0.0)
        self.surface.fit_view(self.padding, self.duration)
        self._log("FIT_VIEW", f"{len(layout.nodes)} nodes")
        return layout

    def _log(self, action: str, details: str):
        if self.logger is not None:
            self.logger.log(action, details)
