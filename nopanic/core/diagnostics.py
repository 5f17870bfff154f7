# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the front door and the CLI.

A diagnostic is a message plus an optional span/metadata. Rejected input never
raises out of the front door; it is reported as one of these, next to the
original, unmodified item.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from .span import Span


@dataclass
class Diagnostic:
	"""Represents an expansion diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Optional phase label ("parser", "validate", "oracle").
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes unknown.
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def to_json(self) -> Dict[str, Any]:
		"""Flatten into the `phase/message/severity/file/line/column` JSON shape."""
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}

	def render(self) -> str:
		"""Human-readable one-liner, `file:line:col: severity: message`."""
		return f"{self.span.describe()}: {self.severity}: {self.message}"


__all__ = ["Diagnostic"]
