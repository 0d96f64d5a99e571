"""Membership manager for the member roster."""

from typing import Optional

from ..db.schemas import AddError, AddResult, LibraryState, Member


class MembershipManager:
    """Manages registered members."""

    def __init__(self, state: LibraryState):
        self.state = state

    def add_member(self, member_id: int, name: str) -> AddResult:
        """Register a new member.

        Returns:
            AddResult, with DUPLICATE_ID if the ID is already taken
        """
        if member_id in self.state.members:
            return AddResult(success=False, error=AddError.DUPLICATE_ID)

        self.state.members[member_id] = Member(id=member_id, name=name)
        return AddResult(success=True)

    def find_member(self, member_id: int) -> Optional[Member]:
        return self.state.members.get(member_id)

    def list_members(self) -> list[Member]:
        """List all members in the order they were registered.

        The list is new, but the members in it are the live records.
        """
        return list(self.state.members.values())
