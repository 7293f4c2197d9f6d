"""Synthetic data generators."""

from sacco_portal.generators.member import MemberDatasetGenerator

__all__ = ["MemberDatasetGenerator"]
