"""Member roster module."""

from .manager import MembershipManager

__all__ = ["MembershipManager"]
