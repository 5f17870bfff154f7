# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-expansion fresh identifier allocation.

Every expansion owns one `FreshNames`; nothing here is process-wide, so two
expansions running side by side (or in any order) produce the same names for
the same input.
"""

from __future__ import annotations

from typing import Dict


class FreshNames:
	"""Deterministic counter-backed name source, scoped to one expansion."""

	def __init__(self) -> None:
		self._counters: Dict[str, int] = {}

	def fresh(self, prefix: str) -> str:
		"""Return `prefix` followed by the next number for that prefix (0-based)."""
		n = self._counters.get(prefix, 0)
		self._counters[prefix] = n + 1
		return f"{prefix}{n}"

	def peek(self, prefix: str) -> int:
		"""Number of names handed out so far for `prefix`."""
		return self._counters.get(prefix, 0)


__all__ = ["FreshNames"]
