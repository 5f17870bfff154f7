# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Token-level recognition of nested items and macro invocations.

Used by the `self` rebinding walk (which must not enter nested items) and by
the source preprocessor (which finds attributed items in a whole file). The
recognizer only looks at statement-start positions: the start of a token
list, after `;`, and after a `{..}` group.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .parser import KEYWORDS, _closes_angle
from .tokens import Group, Ident, Literal, TokenTree, is_group, is_ident, is_punct

_QUALIFIERS = frozenset({"const", "async", "unsafe", "extern", "default", "safe"})
_BLOCK_ITEMS = frozenset({"fn", "struct", "enum", "union", "trait", "impl", "mod"})
_SEMI_ITEMS = frozenset({"use", "static", "type"})


def skip_attrs(tokens: Sequence[TokenTree], i: int) -> int:
	"""Return the index after any outer `#[..]` attributes starting at `i`."""
	while i + 1 < len(tokens) and is_punct(tokens[i], "#") and is_group(tokens[i + 1], "["):
		i += 2
	return i


def skip_visibility(tokens: Sequence[TokenTree], i: int) -> int:
	if i < len(tokens) and is_ident(tokens[i], "pub"):
		i += 1
		if i < len(tokens) and is_group(tokens[i], "("):
			i += 1
	return i


def _end_at_semi(tokens: Sequence[TokenTree], i: int) -> int:
	while i < len(tokens):
		if is_punct(tokens[i], ";"):
			return i + 1
		i += 1
	return len(tokens)


def _end_at_block_or_semi(tokens: Sequence[TokenTree], i: int) -> int:
	# `{ N }` const arguments inside `<..>` are not the body.
	depth = 0
	while i < len(tokens):
		tok = tokens[i]
		if is_punct(tok, "<"):
			depth += 1
		elif _closes_angle(tokens, i):
			depth = max(depth - 1, 0)
		elif depth == 0 and (is_group(tok, "{") or is_punct(tok, ";")):
			return i + 1
		i += 1
	return len(tokens)


def item_keyword(tokens: Sequence[TokenTree], i: int) -> Optional[str]:
	"""
	Classify the item starting at `i` (attributes already skipped).

	Returns the introducing keyword (`"fn"`, `"impl"`, `"macro_rules"`, ...) or
	None when the tokens start an expression or `let` statement instead.
	"""
	i = skip_visibility(tokens, i)
	n = len(tokens)
	while i < n and isinstance(tokens[i], Ident) and tokens[i].name in _QUALIFIERS:
		name = tokens[i].name
		nxt = tokens[i + 1] if i + 1 < n else None
		if name == "const":
			if is_group(nxt, "{"):
				return None  # const block
			if isinstance(nxt, Ident) and nxt.name not in _QUALIFIERS and nxt.name != "fn":
				return "const"
		if name in ("unsafe", "async") and (is_group(nxt) or is_ident(nxt, "move") or is_punct(nxt, "|")):
			return None  # unsafe/async block or closure
		if name == "extern":
			if isinstance(nxt, Literal):
				i += 1
				nxt = tokens[i + 1] if i + 1 < n else None
			if is_ident(nxt, "crate"):
				return "extern crate"
			if is_group(nxt, "{"):
				return "extern"
		if name in ("default", "safe") and not (isinstance(nxt, Ident) and (nxt.name in _QUALIFIERS or nxt.name in _BLOCK_ITEMS or nxt.name in _SEMI_ITEMS)):
			return None
		i += 1
	if i >= n or not isinstance(tokens[i], Ident):
		return None
	name = tokens[i].name
	nxt = tokens[i + 1] if i + 1 < n else None
	if name == "fn":
		return "fn" if isinstance(nxt, Ident) else None
	if name == "union":
		return "union" if isinstance(nxt, Ident) and nxt.name not in KEYWORDS else None
	if name == "macro_rules":
		return "macro_rules" if is_punct(nxt, "!") else None
	if name in ("static", "type"):
		return name if isinstance(nxt, Ident) else None
	if name in _BLOCK_ITEMS or name in _SEMI_ITEMS:
		return name
	return None


def item_end(tokens: Sequence[TokenTree], i: int) -> Optional[int]:
	"""
	If an item starts at statement position `i`, return the index just past it.

	Outer attributes, visibility and qualifiers are part of the item. Items end
	at their body `{..}` group, or at `;` for declarations without one.
	"""
	start = skip_attrs(tokens, i)
	kind = item_keyword(tokens, start)
	if kind is None:
		return None
	if kind in ("const", "extern crate") or kind in _SEMI_ITEMS:
		return _end_at_semi(tokens, start)
	if kind == "macro_rules":
		# macro_rules! name { .. } | macro_rules! name ( .. );
		j = start
		while j < len(tokens) and not is_group(tokens[j]):
			j += 1
		if j >= len(tokens):
			return len(tokens)
		if is_group(tokens[j], "{"):
			return j + 1
		return _end_at_semi(tokens, j)
	return _end_at_block_or_semi(tokens, start)


def macro_invocation_at(tokens: Sequence[TokenTree], i: int) -> Optional[Group]:
	"""
	Return the argument group if `tokens[i]` starts `name!(..)` / `name![..]` / `name!{..}`.

	Keywords are excluded so `if !(x)` and `return !(y)` are not macros.
	"""
	if i + 2 >= len(tokens):
		return None
	name, bang, args = tokens[i], tokens[i + 1], tokens[i + 2]
	if not isinstance(name, Ident) or name.name in KEYWORDS:
		return None
	if not is_punct(bang, "!") or bang.joint:
		return None
	if not isinstance(args, Group):
		return None
	return args


__all__ = ["item_end", "item_keyword", "macro_invocation_at", "skip_attrs", "skip_visibility"]
