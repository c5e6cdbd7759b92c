"""
Data Manager for the Family Tree viewer.
Read-only snapshot source: loads the member list exported by the family tree API
(JSON) and hands it to the layout engine. Writes go through the API, never here.
"""

import json
import os
from typing import Any, List, Optional, Tuple

from members import Member, SpousalRelation, STATUS_CURRENT, STATUS_DIVORCED, parse_members
from utils.logger_service import LoggerService

DEFAULT_SNAPSHOT = os.path.join("family_tree_data", "members.json")


def parse_snapshot(data: Any) -> Tuple[List[Member], Optional[str]]:
    """
    Accepts the API envelope ({"success": ..., "data": {...}}), the list payload
    ({"members": [...], "rootMemberId": ...}) or a bare list of members.
    """
    if isinstance(data, dict) and 'data' in data and 'members' not in data:
        data = data['data']
    if isinstance(data, list):
        return parse_members(data), None
    if not isinstance(data, dict):
        raise ValueError(f"Unsupported snapshot format: {type(data).__name__}")
    root = data.get('rootMemberId')
    return parse_members(data.get('members') or []), (str(root) if root else None)


class DataManager:
    def __init__(self, snapshot_path: str = DEFAULT_SNAPSHOT, logger: Optional[LoggerService] = None):
        self.snapshot_path = snapshot_path
        self.members: List[Member] = []
        self.root_member_id: Optional[str] = None
        self.logger = logger or LoggerService()

    def load_snapshot(self) -> bool:
        """Replaces the snapshot wholesale. Missing file = empty tree."""
        if not os.path.exists(self.snapshot_path):
            self.members, self.root_member_id = [], None
            return True
        try:
            with open(self.snapshot_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            self.members, self.root_member_id = parse_snapshot(data)
            self.logger.log("LOAD_SNAPSHOT", f"{len(self.members)} members from {self.snapshot_path}")
            return True
        except (OSError, ValueError, KeyError, TypeError) as e:
            print(f"Error loading snapshot: {e}")
            self.logger.log("LOAD_ERROR", f"{self.snapshot_path}: {e}")
            self.members, self.root_member_id = [], None
            return False

    def get_member(self, member_id: str) -> Optional[Member]:
        for member in self.members:
            if member.id == member_id:
                return member
        return None

    def get_all_people(self) -> list:
        return [(m.id, m.full_name or m.id) for m in self.members]

    def create_test_data(self):
        """In-memory demo family: three generations, a divorce and a remarriage."""
        def person(pid, first, last, gender, p1=None, p2=None, spouses=()):
            return Member(id=pid, first_name=first, last_name=last, gender=gender,
                          parent1_id=p1, parent2_id=p2, spouses=tuple(spouses))

        self.members = [
            person("1", "Adam", "Stone", "male", spouses=[SpousalRelation("r1", "2", STATUS_CURRENT)]),
            person("2", "Eve", "Stone", "female", spouses=[SpousalRelation("r1", "1", STATUS_CURRENT)]),
            person("3", "Cain", "Stone", "male", "1", "2",
                   spouses=[SpousalRelation("r2", "6", STATUS_DIVORCED)]),
            person("4", "Abel", "Stone", "male", "1", "2"),
            person("5", "Seth", "Stone", "male", "1", "2",
                   spouses=[SpousalRelation("r3", "7", STATUS_CURRENT)]),
            person("6", "Awan", "Stone", "female", spouses=[SpousalRelation("r2", "3", STATUS_DIVORCED)]),
            person("7", "Azura", "Stone", "female", spouses=[SpousalRelation("r3", "5", STATUS_CURRENT)]),
            person("8", "Enosh", "Stone", "male", "5", "7"),
            person("9", "Enoch", "Stone", "male", "3", "6"),
        ]
        self.root_member_id = "1"
        self.logger.log("LOAD_SNAPSHOT", "demo family")
