"""GraphQL query constants for the owning services."""

from __future__ import annotations

from dataclasses import dataclass

from attendance_sync.core.contracts.entity import EntityType

FETCH_ALL_MEMBERS = """
query GetAllMembers {
  membersGraph {
    all { id name }
  }
}
"""

FETCH_MEMBER = """
query GetMember($id: Int!) {
  membersGraph {
    member(id: $id) { id name }
  }
}
"""

FETCH_ALL_CONCERTS = """
query GetAllConcerts {
  concertGraph {
    all { id title }
  }
}
"""

FETCH_CONCERT = """
query GetConcert($id: Int!) {
  concertGraph {
    concert(id: $id) { id title }
  }
}
"""

FETCH_ALL_REHEARSALS = """
query GetAllRehearsals {
  rehearsalGraph {
    all { id title }
  }
}
"""

FETCH_REHEARSAL = """
query GetRehearsal($id: Int!) {
  rehearsalGraph {
    rehearsal(id: $id) { id title }
  }
}
"""


@dataclass(frozen=True)
class EntityQueries:
    """Query documents and response paths for one entity type."""

    root: str
    single: str
    fetch_all: str
    fetch_one: str
    fetch_all_operation: str
    fetch_one_operation: str


QUERIES: dict[EntityType, EntityQueries] = {
    EntityType.MEMBER: EntityQueries(
        root="membersGraph",
        single="member",
        fetch_all=FETCH_ALL_MEMBERS,
        fetch_one=FETCH_MEMBER,
        fetch_all_operation="GetAllMembers",
        fetch_one_operation="GetMember",
    ),
    EntityType.CONCERT: EntityQueries(
        root="concertGraph",
        single="concert",
        fetch_all=FETCH_ALL_CONCERTS,
        fetch_one=FETCH_CONCERT,
        fetch_all_operation="GetAllConcerts",
        fetch_one_operation="GetConcert",
    ),
    EntityType.REHEARSAL: EntityQueries(
        root="rehearsalGraph",
        single="rehearsal",
        fetch_all=FETCH_ALL_REHEARSALS,
        fetch_one=FETCH_REHEARSAL,
        fetch_all_operation="GetAllRehearsals",
        fetch_one_operation="GetRehearsal",
    ),
}
