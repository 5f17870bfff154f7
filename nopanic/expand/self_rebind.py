# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Receiver rebinding: rename `self` inside a method body.

Pipeline placement:
  parse → signature normalization → [this pass] → emitter

The body of a method moves into a `move` closure. A closure cannot hand out
borrows of its captured `self`, so the emitter binds `let __self = self;` at
the top of the closure and this pass renames every bare `self` in the body to
match.

Rules:
  * `self::path` is a module path, not the receiver, and is left alone.
  * `Self` is a different identifier.
  * Nested items (`fn`, `impl`, `struct`, `mod`, `use`, `macro_rules!`, ...)
    are copied verbatim; any `self` inside them means something else.
  * Macro arguments are walked too, because the macro may expand to code that
    uses the outer receiver, unless the arguments mention `fn` anywhere. A
    macro that defines a function most likely brings its own receiver.

Known limitation: the macro rule is a heuristic, not macro-expansion-aware
name resolution. A macro that rebinds `self` without a `fn` token gets
rewritten anyway, and a macro that mixes a nested `fn` with the outer
receiver is skipped entirely.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence

from nopanic.syntax.items import item_end, macro_invocation_at
from nopanic.syntax.tokens import Group, Ident, TokenTree, contains_ident, is_group, is_punct, is_punct_seq

SELF_REPLACEMENT = "__self"


class SelfRebinder:
	"""
	Rewrite bare `self` identifiers to `replacement` in a body's token trees.

	The walk threads an explicit `in_item` flag: once inside a nested item,
	tokens are copied without inspection.
	"""

	def __init__(self, replacement: str = SELF_REPLACEMENT) -> None:
		self.replacement = replacement
		self.renamed = 0

	# Public entry point -------------------------------------------------

	def rewrite(self, tokens: Sequence[TokenTree]) -> List[TokenTree]:
		return self._walk(tokens, in_item=False)

	def rewrite_block(self, block: Group) -> Group:
		return replace(block, tokens=tuple(self.rewrite(block.tokens)))

	# Walk ---------------------------------------------------------------

	def _walk(self, tokens: Sequence[TokenTree], *, in_item: bool) -> List[TokenTree]:
		if in_item:
			return list(tokens)
		out: List[TokenTree] = []
		at_stmt_start = True
		i = 0
		n = len(tokens)
		while i < n:
			if at_stmt_start:
				end = item_end(tokens, i)
				if end is not None:
					out.extend(self._walk(tokens[i:end], in_item=True))
					i = end
					continue
			tok = tokens[i]
			args = macro_invocation_at(tokens, i)
			if args is not None:
				out.append(tok)
				out.append(tokens[i + 1])
				out.append(self._walk_macro_args(args))
				i += 3
				at_stmt_start = args.delimiter == "{"
				continue
			if isinstance(tok, Ident) and tok.name == "self" and not is_punct_seq(tokens, i + 1, "::"):
				out.append(replace(tok, name=self.replacement))
				self.renamed += 1
			elif isinstance(tok, Group):
				out.append(replace(tok, tokens=tuple(self._walk(tok.tokens, in_item=False))))
			else:
				out.append(tok)
			at_stmt_start = is_punct(tok, ";") or is_group(tok, "{")
			i += 1
		return out

	def _walk_macro_args(self, args: Group) -> Group:
		if contains_ident(args.tokens, "fn"):
			return args
		return replace(args, tokens=tuple(self._walk(args.tokens, in_item=False)))


def rebind_self(tokens: Sequence[TokenTree], replacement: str = SELF_REPLACEMENT) -> List[TokenTree]:
	"""Functional wrapper around `SelfRebinder.rewrite`."""
	return SelfRebinder(replacement).rewrite(tokens)


__all__ = ["SELF_REPLACEMENT", "SelfRebinder", "rebind_self"]
