# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Attribute entry points: `no_panic` and `abort_on_panic`.

Each takes the attribute's argument tokens and the annotated item (source text
or token trees) and returns an `Expansion`. Rejected input never raises: the
output is a `compile_error!` followed by the original, unmodified item, so
anything else consuming the same source still sees a valid function, and the
structured diagnostic rides along in `Expansion.diagnostics`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from nopanic.config import ExpandConfig, Variant
from nopanic.core.diagnostics import Diagnostic
from nopanic.core.fresh import FreshNames
from nopanic.core.span import Span
from nopanic.expand.emitter import ExpandedFn, SentinelEmitter
from nopanic.syntax.ast import ItemFn
from nopanic.syntax.lexer import ParseError, lex, quote
from nopanic.syntax.parser import parse_item_fn
from nopanic.syntax.tokens import TokenTree, group, render_tokens, string_literal

logger = logging.getLogger(__name__)

Source = Union[str, Sequence[TokenTree]]


@dataclass
class Expansion:
	"""Result of one attribute invocation."""

	tokens: List[TokenTree]
	diagnostics: List[Diagnostic] = field(default_factory=list)
	expanded: Optional[ExpandedFn] = None
	# Original text when the item could not even be lexed.
	raw_tail: str = ""

	@property
	def ok(self) -> bool:
		return not any(d.severity == "error" for d in self.diagnostics)

	@property
	def text(self) -> str:
		rendered = render_tokens(self.tokens)
		if self.raw_tail:
			return f"{rendered} {self.raw_tail}" if rendered else self.raw_tail
		return rendered


def compile_error_tokens(message: str) -> List[TokenTree]:
	"""`::core::compile_error! { "message" }`"""
	return quote("::core::compile_error!") + [group("{", [string_literal(message)])]


def _to_tokens(source: Source, file: Optional[str]) -> List[TokenTree]:
	if isinstance(source, str):
		return lex(source, file=file)
	return list(source)


def _first_span(tokens: Sequence[TokenTree], file: Optional[str]) -> Span:
	if tokens:
		return tokens[0].span
	return Span(file=file)


def parse_attribute_input(
	variant: Variant,
	args: Sequence[TokenTree],
	item: Sequence[TokenTree],
	*,
	file: Optional[str] = None,
) -> ItemFn:
	"""
	Validate one attribute invocation and return the parsed function.

	Order matches the attribute's contract: the item must be a function, the
	argument list must be empty, and the function must not be `async`.
	"""
	function = parse_item_fn(item, end_span=Span(file=file))
	if args:
		raise ParseError("unexpected token", span=_first_span(args, file))
	if function.sig.asyncness is not None:
		raise ParseError(
			f"{variant.attr_name} attribute on async fn is not supported",
			span=function.sig.asyncness.span,
		)
	return function


def expand_attribute(
	variant: Variant,
	args: Source,
	item: Source,
	*,
	config: Optional[ExpandConfig] = None,
	file: Optional[str] = None,
) -> Expansion:
	cfg = (config or ExpandConfig()).with_variant(variant)
	try:
		item_tokens = _to_tokens(item, file)
	except ParseError as exc:
		diag = _diagnostic(exc, file)
		raw = item if isinstance(item, str) else ""
		return Expansion(tokens=compile_error_tokens(str(exc)), diagnostics=[diag], raw_tail=raw)
	try:
		arg_tokens = _to_tokens(args, file)
		function = parse_attribute_input(variant, arg_tokens, item_tokens, file=file)
	except ParseError as exc:
		logger.debug("%s rejected input: %s", variant.attr_name, exc)
		return Expansion(
			tokens=compile_error_tokens(str(exc)) + item_tokens,
			diagnostics=[_diagnostic(exc, file)],
		)
	expanded = SentinelEmitter(cfg, FreshNames()).expand(function)
	logger.debug("%s expanded %s", variant.attr_name, function.sig.ident.name)
	return Expansion(tokens=expanded.to_tokens(), expanded=expanded)


def _diagnostic(exc: ParseError, file: Optional[str]) -> Diagnostic:
	return Diagnostic(message=str(exc), phase="parser", span=exc.span.with_file(file))


def no_panic(args: Source, item: Source, *, config: Optional[ExpandConfig] = None, file: Optional[str] = None) -> Expansion:
	"""Expand `#[no_panic]`: require the optimizer to prove the function never unwinds."""
	return expand_attribute(Variant.NO_PANIC, args, item, config=config, file=file)


def abort_on_panic(args: Source, item: Source, *, config: Optional[ExpandConfig] = None, file: Optional[str] = None) -> Expansion:
	"""Expand `#[abort_on_panic]`: terminate the process if the function unwinds."""
	return expand_attribute(Variant.ABORT_ON_PANIC, args, item, config=config, file=file)


__all__ = [
	"Expansion",
	"abort_on_panic",
	"compile_error_tokens",
	"expand_attribute",
	"no_panic",
	"parse_attribute_input",
]
