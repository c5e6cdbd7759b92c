"""Small builders for test snapshots."""

from dataclasses import replace
from typing import Iterable, List, Sequence

from members import Member, SpousalRelation, STATUS_CURRENT


def person(pid: str, p1: str = None, p2: str = None, gender: str = 'other') -> Member:
    return Member(id=pid, first_name=pid.title(), last_name='Test', gender=gender,
                  parent1_id=p1, parent2_id=p2)


def build_family(people: Iterable[Member], marriages: Sequence[tuple] = (),
                 one_sided: bool = False) -> List[Member]:
    """
    marriages: (relation_id, member_a, member_b[, status]).
    The relation is recorded on both members unless one_sided.
    """
    by_id = {m.id: m for m in people}
    for marriage in marriages:
        rel_id, a, b = marriage[:3]
        status = marriage[3] if len(marriage) > 3 else STATUS_CURRENT
        if a in by_id:
            by_id[a] = replace(by_id[a], spouses=by_id[a].spouses + (SpousalRelation(rel_id, b, status),))
        if b in by_id and not one_sided:
            by_id[b] = replace(by_id[b], spouses=by_id[b].spouses + (SpousalRelation(rel_id, a, status),))
    return list(by_id.values())


def big_family() -> List[Member]:
    """Three generations around 'ego' with in-laws, step-free."""
    people = [
        person('gpa1'), person('gma1'), person('gpa2'), person('gma2'),
        person('mom', 'gpa1', 'gma1', 'female'), person('dad', 'gpa2', 'gma2', 'male'),
        person('aunt1', 'gpa1', 'gma1', 'female'), person('ua', gender='male'),
        person('uncle2', 'gpa2', 'gma2', 'male'),
        person('ego', 'mom', 'dad'), person('sis', 'mom', 'dad', 'female'), person('sis_h'),
        person('bro', 'mom', 'dad', 'male'),
        person('wf'), person('wm'), person('wife', 'wf', 'wm', 'female'),
        person('wsib', 'wf', 'wm'), person('wsib_s'),
        person('k1', 'ego', 'wife'), person('k2', 'ego', 'wife'), person('k1s'),
        person('n1', 'sis', 'sis_h'), person('n2', 'bro'),
        person('c1', 'aunt1', 'ua'), person('c2', 'uncle2'),
        person('gc1', 'k1', 'k1s'),
    ]
    marriages = [
        ('g1', 'gpa1', 'gma1'), ('g2', 'gpa2', 'gma2'), ('rp', 'mom', 'dad'),
        ('ra', 'aunt1', 'ua'), ('rs', 'sis', 'sis_h'), ('rw', 'ego', 'wife'),
        ('rwp', 'wf', 'wm'), ('rws', 'wsib', 'wsib_s'), ('rk', 'k1', 'k1s'),
    ]
    return build_family(people, marriages)
