import unittest

from family_fixtures import build_family, person
from layout_engine import LayoutEngine
from members import STATUS_DIVORCED
from svg_renderer import SVGRenderer, SvgViewport
from transition_controller import TransitionController


def family(status='current'):
    people = [person('alice', gender='female'), person('bob', gender='male'), person('carol', 'alice', 'bob')]
    return build_family(people, [('r1', 'alice', 'bob', status)])


class TestSvgViewport(unittest.TestCase):

    def test_fit_is_applied_on_show(self):
        viewport = SvgViewport(width=1000, height=500)
        layout = LayoutEngine().calculate_layout(family())

        viewport.fit_view(0.2, 400)
        self.assertEqual(viewport.transform(), (0.0, 0.0, 1.0))
        viewport.show(layout)

        min_x, min_y, max_x, max_y = viewport.bounds(layout)
        pan_x, pan_y, zoom = viewport.transform()
        self.assertAlmostEqual(pan_x + (min_x + max_x) / 2 * zoom, 500)
        self.assertAlmostEqual(pan_y + (min_y + max_y) / 2 * zoom, 250)
        self.assertEqual(viewport.last_fit_duration, 400)
        self.assertEqual(viewport.node_position('carol'), layout.node('carol').position)

    def test_show_without_fit_keeps_transform(self):
        viewport = SvgViewport()
        viewport.zoom_by(0.5)
        before = viewport.transform()
        viewport.show(LayoutEngine().calculate_layout(family()))
        self.assertEqual(viewport.transform(), before)

    def test_zoom_is_clamped(self):
        viewport = SvgViewport(min_zoom=0.5, max_zoom=2.0)
        for _ in range(10):
            viewport.zoom_by(1.5)
        self.assertEqual(viewport.zoom, 2.0)
        for _ in range(10):
            viewport.zoom_by(0.5)
        self.assertEqual(viewport.zoom, 0.5)

    def test_empty_bounds(self):
        self.assertEqual(SvgViewport().bounds(LayoutEngine().calculate_layout([])), (0.0, 0.0, 0.0, 0.0))


class TestSvgRenderer(unittest.TestCase):

    def render(self, members, ego_id=None):
        viewport = SvgViewport()
        controller = TransitionController(viewport)
        controller.change_ego(ego_id)
        layout = controller.present(LayoutEngine().calculate_layout(members, ego_id))
        viewport.show(layout)
        return SVGRenderer(layout, viewport, ego_id).generate_svg()

    def test_cards_are_clickable(self):
        svg = self.render(family())
        for member_id in ('alice', 'bob', 'carol'):
            self.assertIn(f"<a href='#' id='{member_id}'>", svg)
        self.assertIn('marker-end="url(#arrow)"', svg)

    def test_divorced_relation_is_dashed(self):
        self.assertNotIn('stroke-dasharray', self.render(family()))
        self.assertIn('stroke-dasharray', self.render(family(STATUS_DIVORCED)))

    def test_ego_is_highlighted(self):
        self.assertIn('#f59e0b', self.render(family(), 'carol'))
        self.assertNotIn('#f59e0b', self.render(family()))

    def test_names_are_escaped(self):
        members = [person('x<y')]
        svg = self.render(members)
        self.assertIn('X&lt;Y', svg)
        self.assertNotIn('X<Y', svg)


if __name__ == '__main__':
    unittest.main()
