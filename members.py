"""Data classes for family members and spousal relations."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

GENDER_MALE = 'male'
GENDER_FEMALE = 'female'
GENDER_OTHER = 'other'
GENDERS = (GENDER_MALE, GENDER_FEMALE, GENDER_OTHER)

STATUS_CURRENT = 'current'
STATUS_DIVORCED = 'divorced'


@dataclass(frozen=True)
class SpousalRelation:
    id: str
    spouse_id: str
    status: str = STATUS_CURRENT

    @property
    def is_current(self) -> bool:
        return self.status == STATUS_CURRENT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SpousalRelation':
        return cls(
            id=str(data['id']),
            spouse_id=str(data['spouseId']),
            status=data.get('status') or STATUS_CURRENT,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'spouseId': self.spouse_id, 'status': self.status}


@dataclass(frozen=True)
class Member:
    id: str
    first_name: str = ''
    last_name: str = ''
    gender: str = GENDER_OTHER
    birth_date: Optional[str] = None
    death_date: Optional[str] = None  # presence means deceased
    notes: Optional[str] = None
    parent1_id: Optional[str] = None
    parent2_id: Optional[str] = None
    spouses: Tuple[SpousalRelation, ...] = field(default_factory=tuple)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_deceased(self) -> bool:
        return bool(self.death_date)

    @property
    def has_current_spouse(self) -> bool:
        return any(rel.is_current for rel in self.spouses)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Member':
        """Builds a member from the REST payload (camelCase keys)."""
        if data.get('id') in (None, ''):
            raise ValueError(f"Member record without id: {data!r}")

        gender = data.get('gender') or GENDER_OTHER
        if gender not in GENDERS:
            gender = GENDER_OTHER

        return cls(
            id=str(data['id']),
            first_name=data.get('firstName') or '',
            last_name=data.get('lastName') or '',
            gender=gender,
            birth_date=data.get('birthDate') or None,
            death_date=data.get('deathDate') or None,
            notes=data.get('notes') or None,
            parent1_id=_optional_id(data.get('parent1Id')),
            parent2_id=_optional_id(data.get('parent2Id')),
            spouses=tuple(SpousalRelation.from_dict(s) for s in data.get('spouses') or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'gender': self.gender,
            'birthDate': self.birth_date,
            'deathDate': self.death_date,
            'notes': self.notes,
            'parent1Id': self.parent1_id,
            'parent2Id': self.parent2_id,
            'spouses': [rel.to_dict() for rel in self.spouses],
        }


def _optional_id(value) -> Optional[str]:
    if value in (None, ''):
        return None
    return str(value)


def parse_members(records: Iterable[Any]) -> List[Member]:
    """Accepts Member objects or REST dicts, keeps their order."""
    members = []
    for record in records or []:
        if isinstance(record, Member):
            members.append(record)
        else:
            members.append(Member.from_dict(record))
    return members
