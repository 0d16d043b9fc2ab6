"""Rosters of people affiliated with a subject."""

from collections.abc import Mapping, Sequence
from typing import Protocol

from relation_radar.data import AffiliatedPerson
from relation_radar.store import subject_key


class PeopleDirectory(Protocol):
    """Interface for looking up executives, board members and the like."""

    async def people_for(self, subject: str) -> list[AffiliatedPerson]:
        """Return the people affiliated with ``subject``, possibly none."""
        ...


class StaticPeopleDirectory:
    """Roster held in memory, usually loaded from the config file.

    Args:
        roster: Mapping of subject name to affiliated people. Subject names
            match case-insensitively.
    """

    def __init__(self, roster: Mapping[str, Sequence[AffiliatedPerson]] | None = None) -> None:
        self._roster = {subject_key(name): list(people) for name, people in (roster or {}).items()}

    async def people_for(self, subject: str) -> list[AffiliatedPerson]:
        return list(self._roster.get(subject_key(subject), []))
