import unittest

from family_fixtures import big_family, build_family, person
from geometry import (BAND_CHILDREN, BAND_EGO, BAND_GRANDCHILDREN, BAND_GRANDPARENTS,
                      BAND_PARENTS, DEFAULT_GEOMETRY)
from graph_emitter import NODE_COUPLE, NODE_PERSON
from members import STATUS_DIVORCED
from ego_layout import assign_ego_slots, build_ego_layout
from relationship_graph import RelationshipGraph
from relatives import (REL_AUNT_UNCLE, REL_COUSIN, REL_EGO, REL_PARENT_IN_LAW,
                       REL_RELATIVE_SPOUSE, REL_SIBLING, REL_SPOUSE, gather_relatives)


def scenario_c():
    people = [person('eve', gender='female'), person('frank', gender='male'),
              person('dave', 'eve', 'frank'), person('gail', 'eve', 'frank')]
    return RelationshipGraph(build_family(people, [('r1', 'eve', 'frank')]))


class TestRelatives(unittest.TestCase):

    def test_missing_ego(self):
        self.assertIsNone(gather_relatives(RelationshipGraph(big_family()), 'nobody'))

    def test_big_family_sets(self):
        rel = gather_relatives(RelationshipGraph(big_family()), 'ego')
        self.assertEqual(rel.spouse_ids, ['wife'])
        self.assertEqual(rel.parents, ['mom', 'dad'])
        self.assertEqual(rel.siblings, ['sis', 'bro'])
        self.assertEqual(rel.children, ['k1', 'k2'])
        self.assertEqual(rel.nieces_nephews, ['n1', 'n2'])
        self.assertEqual(rel.grandchildren, ['gc1'])
        self.assertEqual(rel.aunts_uncles_by_parent, {'mom': ['aunt1'], 'dad': ['uncle2']})
        self.assertEqual(rel.cousins, ['c1', 'c2'])
        self.assertEqual(rel.grandparents, ['gpa1', 'gma1', 'gpa2', 'gma2'])
        self.assertEqual(rel.parents_in_law_by_spouse, {'wife': ['wf', 'wm']})
        self.assertEqual(rel.siblings_in_law_by_spouse, {'wife': ['wsib']})

    def test_categories(self):
        labels = gather_relatives(RelationshipGraph(big_family()), 'ego').categories()
        self.assertEqual(labels['ego'], REL_EGO)
        self.assertEqual(labels['wife'], REL_SPOUSE)
        self.assertEqual(labels['bro'], REL_SIBLING)
        self.assertEqual(labels['uncle2'], REL_AUNT_UNCLE)
        self.assertEqual(labels['wm'], REL_PARENT_IN_LAW)
        self.assertEqual(labels['c2'], REL_COUSIN)
        self.assertNotIn('ua', labels)


class TestEgoColumns(unittest.TestCase):

    def test_scenario_c(self):
        slots = assign_ego_slots(scenario_c(), 'dave')
        self.assertEqual(slots.band('eve'), BAND_PARENTS)
        self.assertEqual(slots.band('frank'), BAND_PARENTS)
        self.assertEqual(abs(slots.column('eve') - slots.column('frank')), 1)
        self.assertEqual((slots.column('eve'), slots.column('frank')), (-1, 0))
        self.assertEqual((slots.band('dave'), slots.column('dave')), (BAND_EGO, 0))
        self.assertEqual(slots.band('gail'), BAND_EGO)
        self.assertLess(slots.column('gail'), 0)

    def test_scenario_c_connector(self):
        layout = build_ego_layout(scenario_c(), 'dave')
        couples = [n for n in layout.nodes if n.kind == NODE_COUPLE]
        self.assertEqual([c.id for c in couples], ['couple-r1'])
        self.assertEqual(couples[0].position, (-40.0, -180.0))
        parent_edges = {e.target: e.source for e in layout.edges if e.kind == 'parent'}
        self.assertEqual(parent_edges, {'dave': 'couple-r1', 'gail': 'couple-r1'})

    def test_big_family_columns(self):
        slots = assign_ego_slots(RelationshipGraph(big_family()), 'ego')
        expected = {
            'ego': (BAND_EGO, 0), 'wife': (BAND_EGO, 1), 'wsib': (BAND_EGO, 2), 'wsib_s': (BAND_EGO, 3),
            'sis': (BAND_EGO, -1), 'sis_h': (BAND_EGO, -2), 'bro': (BAND_EGO, -3),
            'mom': (BAND_PARENTS, -1), 'dad': (BAND_PARENTS, 0), 'aunt1': (BAND_PARENTS, -2),
            'ua': (BAND_PARENTS, -3), 'uncle2': (BAND_PARENTS, 1), 'wf': (BAND_PARENTS, 2),
            'wm': (BAND_PARENTS, 3),
            'gpa1': (BAND_GRANDPARENTS, -2), 'gma1': (BAND_GRANDPARENTS, -1),
            'gpa2': (BAND_GRANDPARENTS, 0), 'gma2': (BAND_GRANDPARENTS, 1),
            'n2': (BAND_CHILDREN, -3), 'c1': (BAND_CHILDREN, -2), 'n1': (BAND_CHILDREN, -1),
            'k1': (BAND_CHILDREN, 0), 'k1s': (BAND_CHILDREN, 1), 'k2': (BAND_CHILDREN, 2),
            'c2': (BAND_CHILDREN, 3),
            'gc1': (BAND_GRANDCHILDREN, 1),
        }
        actual = {m: (slots.band(m), slots.column(m)) for m in slots.columns}
        self.assertEqual(actual, expected)

    def test_no_two_cards_share_a_slot(self):
        slots = assign_ego_slots(RelationshipGraph(big_family()), 'ego')
        taken = [(slots.band(m), slots.column(m)) for m in slots.columns]
        self.assertEqual(len(taken), len(set(taken)))

    def test_married_pairs_are_adjacent(self):
        graph = RelationshipGraph(big_family())
        slots = assign_ego_slots(graph, 'ego')
        for a, b, _ in graph.spousal_relations():
            self.assertEqual(slots.band(a), slots.band(b), (a, b))
            self.assertEqual(abs(slots.column(a) - slots.column(b)), 1, (a, b))

    def test_single_parent_alternates_aunts(self):
        people = [person('gp'), person('mom', 'gp'), person('step'),
                  person('a1', 'gp'), person('a2', 'gp'), person('a3', 'gp'),
                  person('ego', 'mom')]
        graph = RelationshipGraph(build_family(people, [('rs', 'mom', 'step')]))
        slots = assign_ego_slots(graph, 'ego')
        columns = {m: slots.column(m) for m in ('mom', 'step', 'a1', 'a2', 'a3')}
        self.assertEqual(columns, {'mom': 0, 'step': 1, 'a1': -1, 'a2': 2, 'a3': -2})
        self.assertEqual((slots.band('gp'), slots.column('gp')), (BAND_GRANDPARENTS, 0))

    def test_two_parents_step_spouses_fan_outward(self):
        people = [person('gm'), person('gd'),
                  person('mom', 'gm'), person('dad', 'gd'), person('stepd'), person('stepm'),
                  person('am', 'gm'), person('ad', 'gd'), person('ego', 'mom', 'dad')]
        graph = RelationshipGraph(build_family(people, [
            ('rp', 'mom', 'dad'), ('rd', 'mom', 'stepd', STATUS_DIVORCED), ('rm', 'dad', 'stepm'),
        ]))
        slots = assign_ego_slots(graph, 'ego')
        columns = {m: slots.column(m) for m in ('am', 'stepd', 'mom', 'dad', 'stepm', 'ad')}
        self.assertEqual(columns, {'am': -3, 'stepd': -2, 'mom': -1, 'dad': 0, 'stepm': 1, 'ad': 2})
        self.assertEqual({slots.band(m) for m in columns}, {BAND_PARENTS})

    def test_parents_in_law_without_own_parents(self):
        people = [person('wf'), person('wm'), person('wife', 'wf', 'wm'), person('ego')]
        graph = RelationshipGraph(build_family(people, [('rw', 'ego', 'wife'), ('rp', 'wf', 'wm')]))
        slots = assign_ego_slots(graph, 'ego')
        self.assertEqual((slots.band('wf'), slots.column('wf')), (BAND_PARENTS, 1))
        self.assertEqual((slots.band('wm'), slots.column('wm')), (BAND_PARENTS, 2))
        self.assertEqual(slots.column('wife'), 1)

    def test_missing_spouses_are_pulled_in(self):
        people = [person('ego'), person('wife'), person('wex')]
        graph = RelationshipGraph(build_family(
            people, [('rw', 'ego', 'wife'), ('rx', 'wife', 'wex', STATUS_DIVORCED)]))
        layout = build_ego_layout(graph, 'ego')

        wex = layout.node('wex')
        self.assertIsNotNone(wex)
        self.assertEqual(wex.data['band'], BAND_EGO)
        self.assertEqual(wex.data['column'], 2)
        self.assertEqual(wex.data['relation'], REL_RELATIVE_SPOUSE)
        self.assertIsNotNone(layout.node('couple-rx'))

    def test_missing_ego(self):
        self.assertTrue(build_ego_layout(RelationshipGraph(big_family()), 'nobody').is_empty)
        self.assertTrue(build_ego_layout(RelationshipGraph(big_family()), None).is_empty)
        self.assertIsNone(assign_ego_slots(RelationshipGraph(big_family()), 'nobody'))


class TestBandGeometry(unittest.TestCase):

    def test_band_rows(self):
        g = DEFAULT_GEOMETRY
        rows = [g.band_y(band) for band in (BAND_GRANDPARENTS, BAND_PARENTS, BAND_EGO,
                                            BAND_CHILDREN, BAND_GRANDCHILDREN)]
        self.assertEqual(rows, [-2 * g.row_height, -g.row_height, 0, g.row_height, 2 * g.row_height])


class TestEgoLayoutNodes(unittest.TestCase):

    def setUp(self):
        self.layout = build_ego_layout(RelationshipGraph(big_family()), 'ego')

    def test_positions_follow_bands_and_columns(self):
        g = DEFAULT_GEOMETRY
        self.assertEqual(self.layout.node('ego').position, (0, 0))
        self.assertEqual(self.layout.node('mom').position, (-g.column_width, -g.row_height))
        self.assertEqual(self.layout.node('gc1').position, (g.column_width, 2 * g.row_height))

    def test_annotations(self):
        ego = self.layout.node('ego')
        self.assertTrue(ego.data['isEgo'])
        self.assertEqual(ego.data['relation'], REL_EGO)
        self.assertFalse(self.layout.node('wife').data['isEgo'])
        # ua is only there as aunt1's husband
        self.assertEqual(self.layout.node('ua').data['relation'], REL_RELATIVE_SPOUSE)

    def test_connector_sits_between_partners(self):
        g = DEFAULT_GEOMETRY
        for couple in (n for n in self.layout.nodes if n.kind == NODE_COUPLE):
            p1 = self.layout.node(couple.data['member1Id'])
            p2 = self.layout.node(couple.data['member2Id'])
            mid_x = (p1.x + p2.x) / 2 + g.node_width / 2
            mid_y = (p1.y + p2.y) / 2 + g.node_height / 2
            self.assertAlmostEqual(couple.x + g.couple_width / 2, mid_x)
            self.assertAlmostEqual(couple.y + g.couple_height / 2, mid_y)

    def test_every_visible_member_once(self):
        ids = [n.id for n in self.layout.nodes if n.kind == NODE_PERSON]
        self.assertEqual(len(ids), len(set(ids)))
        self.assertEqual(len(ids), 26)


if __name__ == '__main__':
    unittest.main()
