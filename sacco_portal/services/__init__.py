"""Member-facing data services."""

from sacco_portal.services.member_data import MemberDashboard, MemberDataService

__all__ = ["MemberDashboard", "MemberDataService"]
