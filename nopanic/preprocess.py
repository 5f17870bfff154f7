# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Whole-file expansion of `#[no_panic]` / `#[abort_on_panic]`.

This plays the role the compiler's macro expander plays for the real
attributes: it finds attributed items anywhere in a source file (free
functions, methods inside `impl` blocks, functions nested in bodies or
modules), hands each one to the front door, and splices the result back.

`#[abort_on_panic]` may also sit on an `impl` block or inline `mod`; every
function inside is then instrumented, except those marked `#[allow_panic]`,
which are normalized the same way but get no guard.

Inner items are expanded before the item that contains them. The output is
rendered token trees, so comments are dropped and doc comments become
`#[doc]` attributes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from nopanic.config import ExpandConfig, Variant
from nopanic.core.diagnostics import Diagnostic
from nopanic.expand.emitter import ExpandedFn
from nopanic.frontdoor import expand_attribute
from nopanic.syntax.items import item_end, item_keyword, skip_attrs
from nopanic.syntax.lexer import ParseError, lex
from nopanic.syntax.tokens import Group, TokenTree, is_group, is_ident, is_punct, is_punct_seq, render_tokens

logger = logging.getLogger(__name__)

_MARKERS = {variant.attr_name: variant for variant in Variant}
_CONTAINERS = frozenset({"impl", "mod"})


@dataclass(frozen=True)
class AttributeMarker:
	"""A recognized `#[no_panic]` / `#[abort_on_panic(..)]` attribute."""

	variant: Variant
	args: Tuple[TokenTree, ...] = ()


def attribute_marker(attr: Sequence[TokenTree]) -> Optional[AttributeMarker]:
	"""Recognize `#[name]`, `#[path::name]` and `#[name(args)]` for our attribute names."""
	if len(attr) != 2 or not is_group(attr[1], "["):
		return None
	body = attr[1].tokens  # type: ignore[union-attr]
	i = 2 if is_punct_seq(body, 0, "::") else 0
	last: Optional[str] = None
	while i < len(body):
		if not is_ident(body[i]):
			return None
		last = body[i].name  # type: ignore[union-attr]
		i += 1
		if is_punct_seq(body, i, "::"):
			i += 2
			continue
		break
	if last not in _MARKERS:
		return None
	if i == len(body):
		return AttributeMarker(variant=_MARKERS[last])
	if i == len(body) - 1 and is_group(body[i], "("):
		return AttributeMarker(variant=_MARKERS[last], args=body[i].tokens)  # type: ignore[union-attr]
	return None


@dataclass
class PreprocessResult:
	tokens: List[TokenTree]
	diagnostics: List[Diagnostic] = field(default_factory=list)
	functions: List[ExpandedFn] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return not any(d.severity == "error" for d in self.diagnostics)

	@property
	def text(self) -> str:
		return render_tokens(self.tokens)

	@property
	def symbols(self) -> List[str]:
		return [fn.symbol for fn in self.functions if fn.symbol is not None]


class Preprocessor:
	"""Walk a file's token trees and expand every attributed function."""

	def __init__(self, config: Optional[ExpandConfig] = None, *, file: Optional[str] = None) -> None:
		self.config = config if config is not None else ExpandConfig()
		self.file = file
		self.diagnostics: List[Diagnostic] = []
		self.functions: List[ExpandedFn] = []

	def run(self, tokens: Sequence[TokenTree]) -> PreprocessResult:
		out = self._walk(tokens, inherited=None)
		return PreprocessResult(tokens=out, diagnostics=list(self.diagnostics), functions=list(self.functions))

	def _walk(self, tokens: Sequence[TokenTree], *, inherited: Optional[Variant]) -> List[TokenTree]:
		out: List[TokenTree] = []
		at_stmt_start = True
		i = 0
		while i < len(tokens):
			if at_stmt_start:
				end = item_end(tokens, i)
				if end is not None:
					out.extend(self._item(tokens[i:end], inherited))
					i = end
					continue
			tok = tokens[i]
			if isinstance(tok, Group):
				out.append(replace(tok, tokens=tuple(self._walk(tok.tokens, inherited=None))))
			else:
				out.append(tok)
			at_stmt_start = is_punct(tok, ";") or is_group(tok, "{")
			i += 1
		return out

	def _item(self, tokens: Sequence[TokenTree], inherited: Optional[Variant]) -> List[TokenTree]:
		attrs_end = skip_attrs(tokens, 0)
		marker: Optional[AttributeMarker] = None
		rest: List[TokenTree] = []
		for j in range(0, attrs_end, 2):
			attr = tokens[j:j + 2]
			found = attribute_marker(attr)
			if found is not None and marker is None:
				marker = found
				continue
			rest.extend(attr)
		rest.extend(tokens[attrs_end:])
		kind = item_keyword(tokens, attrs_end)

		child_inherited: Optional[Variant] = None
		variant: Optional[Variant] = marker.variant if marker is not None else None
		if kind in _CONTAINERS:
			if marker is not None and marker.variant is Variant.ABORT_ON_PANIC and not marker.args:
				child_inherited = Variant.ABORT_ON_PANIC
				variant = None
			else:
				child_inherited = inherited
		elif kind == "fn" and variant is None:
			variant = inherited

		rest = self._walk_body(rest, child_inherited)
		if variant is None:
			return rest
		expansion = expand_attribute(
			variant,
			list(marker.args) if marker is not None else [],
			rest,
			config=self.config,
			file=self.file,
		)
		self.diagnostics.extend(expansion.diagnostics)
		if expansion.expanded is not None:
			self.functions.append(expansion.expanded)
		return expansion.tokens

	def _walk_body(self, tokens: List[TokenTree], inherited: Optional[Variant]) -> List[TokenTree]:
		"""Recurse into the item's last `{..}` group (its body)."""
		for idx in range(len(tokens) - 1, -1, -1):
			tok = tokens[idx]
			if is_group(tok, "{"):
				walked = replace(tok, tokens=tuple(self._walk(tok.tokens, inherited=inherited)))  # type: ignore[arg-type]
				return tokens[:idx] + [walked] + tokens[idx + 1:]
		return tokens


def expand_source(source: str, config: Optional[ExpandConfig] = None, *, file: Optional[str] = None) -> PreprocessResult:
	"""Expand every attributed item in `source`; lexing errors become a diagnostic."""
	try:
		tokens = lex(source, file=file)
	except ParseError as exc:
		diag = Diagnostic(message=str(exc), phase="parser", span=exc.span.with_file(file))
		return PreprocessResult(tokens=[], diagnostics=[diag])
	result = Preprocessor(config, file=file).run(tokens)
	logger.debug("expanded %d functions in %s", len(result.functions), file or "<input>")
	return result


__all__ = ["AttributeMarker", "PreprocessResult", "Preprocessor", "attribute_marker", "expand_source"]
