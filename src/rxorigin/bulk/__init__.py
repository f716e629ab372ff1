"""Bulk origin list building."""

from .builder import BuildSummary, build_foreign_origin_list, collect_origin_records

__all__ = ["BuildSummary", "build_foreign_origin_list", "collect_origin_records"]
