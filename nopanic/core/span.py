# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span representation used by diagnostics.

A Span carries best-effort file/line/column info for a token of the annotated
item. Lexer tokens are lark `Token`s, so `from_token` reads their positional
attributes directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw lexer token)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_token(cls, tok: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a lexer token (or anything with line/column).

		If `tok` is already a Span, it is returned unchanged.
		"""
		if tok is None:
			return cls(file=file)
		if isinstance(tok, cls):
			return tok
		return cls(
			file=file,
			line=getattr(tok, "line", None),
			column=getattr(tok, "column", None),
			end_line=getattr(tok, "end_line", None),
			end_column=getattr(tok, "end_column", None),
			raw=tok,
		)

	def with_file(self, file: Optional[str]) -> "Span":
		if file is None or self.file == file:
			return self
		return Span(
			file=file,
			line=self.line,
			column=self.column,
			end_line=self.end_line,
			end_column=self.end_column,
			raw=self.raw,
		)

	def describe(self) -> str:
		"""Render as `file:line:column`, using `?` for unknown parts."""
		file = self.file or "<input>"
		line = "?" if self.line is None else str(self.line)
		column = "?" if self.column is None else str(self.column)
		return f"{file}:{line}:{column}"


__all__ = ["Span"]
