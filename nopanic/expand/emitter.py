# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Sentinel injection: build the instrumented function.

Canonical expansion (no_panic, link-name encoding):

    #[inline]
    fn demo(mut __arg0: &str) -> &str {
        struct __NoPanic;
        unsafe extern "C" {
            #[link_name = "\n\nERROR[no-panic]: detected panic in function `demo`\n"]
            fn trigger() -> !;
        }
        impl ::core::ops::Drop for __NoPanic {
            fn drop(&mut self) {
                unsafe {
                    trigger();
                }
            }
        }
        let __guard = __NoPanic;
        let __result = (move || -> &str {
            let s = __arg0;
            &s[1..]
        })();
        ::core::mem::forget(__guard);
        __result
    }

If the closure returns normally the guard is forgotten and `trigger` is dead
code. If it unwinds, the guard's Drop runs and calls `trigger`, which nothing
defines, so the reference only disappears when the optimizer proves the unwind
edge unreachable.

The mangled encoding declares `fn _Z22RUST_PANIC_IN_FUNCTIONI4demoE() -> !;`
instead of the `link_name` pair. The abort variant swaps the whole extern
declaration for a guard whose Drop calls `abort`, and functions carrying the
opt-out marker get the closure without any guard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from nopanic.config import ExpandConfig, SymbolEncoding, Variant
from nopanic.core.fresh import FreshNames
from nopanic.oracle import link_message, mangled_symbol
from nopanic.syntax.ast import ItemFn, TypeTuple
from nopanic.syntax.lexer import quote
from nopanic.syntax.tokens import Group, Ident, Punct, TokenTree, group, is_ident, is_punct, puncts, string_literal
from .self_rebind import SELF_REPLACEMENT, SelfRebinder
from .signature import normalize_signature, receiver_rebinding
from .types import erase_impl_trait

logger = logging.getLogger(__name__)

GUARD_STRUCT = "__NoPanic"
ABORT_GUARD_STRUCT = "__AbortOnPanic"
TRIGGER_FN = "trigger"


@dataclass(frozen=True)
class ExpandedFn:
	"""An instrumented function plus the symbol a surviving panic path leaves behind."""

	function: ItemFn
	symbol: Optional[str]  # None for the abort variant

	def to_tokens(self) -> List[TokenTree]:
		return self.function.to_tokens()


def attr_path_is(attr: Tuple[TokenTree, ...], name: str) -> bool:
	"""True for `#[name]`, `#[name(..)]` and `#[name = ..]`."""
	if len(attr) != 2 or not isinstance(attr[1], Group):
		return False
	body = attr[1].tokens
	if not body or not is_ident(body[0], name):
		return False
	return len(body) == 1 or isinstance(body[1], Group) or is_punct(body[1], "=")


def has_attr(function: ItemFn, name: str) -> bool:
	return any(attr_path_is(attr, name) for attr in function.attrs)


def _inline_attr() -> Tuple[TokenTree, ...]:
	return tuple(quote("#[inline]"))


def _extern_block(symbol_ident: str, message: Optional[str], config: ExpandConfig) -> List[TokenTree]:
	decl: List[TokenTree] = []
	if message is not None:
		decl.append(Punct("#"))
		decl.append(group("[", [Ident("link_name"), Punct("="), string_literal(message)]))
	decl.extend([Ident("fn"), Ident(symbol_ident), group("(")])
	decl.extend(puncts("->"))
	decl.extend([Punct("!"), Punct(";")])
	out: List[TokenTree] = []
	if config.unsafe_extern_blocks:
		out.append(Ident("unsafe"))
	out.extend(quote('extern "C"'))
	out.append(group("{", decl))
	return out


def _drop_impl(guard: str, call: List[TokenTree], *, unsafe_call: bool) -> List[TokenTree]:
	stmt = call + [group("("), Punct(";")]
	if unsafe_call:
		stmt = [Ident("unsafe"), group("{", stmt)]
	drop_fn = quote("fn drop") + [group("(", quote("&mut self")), group("{", stmt)]
	return quote("impl ::core::ops::Drop for") + [Ident(guard), group("{", drop_fn)]


def _path_tokens(path: str) -> List[TokenTree]:
	return quote(path)


class SentinelEmitter:
	"""Assemble the replacement body for one function."""

	def __init__(self, config: ExpandConfig, names: Optional[FreshNames] = None) -> None:
		self.config = config
		self.names = names if names is not None else FreshNames()

	def expand(self, function: ItemFn) -> ExpandedFn:
		cfg = self.config
		guarded = True
		attrs = function.attrs
		if cfg.variant is Variant.ABORT_ON_PANIC and has_attr(function, cfg.allow_panic_attr):
			guarded = False
			attrs = tuple(attr for attr in attrs if not attr_path_is(attr, cfg.allow_panic_attr))
		if cfg.add_inline and not any(attr_path_is(attr, "inline") for attr in attrs):
			attrs = attrs + (_inline_attr(),)

		normalized = normalize_signature(function.sig, self.names)
		stmts: List[TokenTree] = []
		if normalized.receiver is not None:
			stmts.extend(receiver_rebinding(normalized.receiver, SELF_REPLACEMENT).to_tokens())
		for rebinding in normalized.rebindings:
			stmts.extend(rebinding.to_tokens())
		body = list(function.block.tokens)
		if normalized.has_receiver:
			rebinder = SelfRebinder(SELF_REPLACEMENT)
			body = rebinder.rewrite(body)
			logger.debug("renamed %d uses of self in %s", rebinder.renamed, function.sig.ident.name)
		stmts.extend(body)

		ret_ty = function.sig.output if function.sig.output is not None else TypeTuple(())
		closure: List[TokenTree] = [Ident("move"), Punct("|", joint=True), Punct("|")]
		closure.extend(puncts("->"))
		closure.extend(erase_impl_trait(ret_ty).to_tokens())
		closure.append(group("{", stmts))
		call = [group("(", closure), group("(")]

		symbol: Optional[str] = None
		block: List[TokenTree] = []
		if guarded:
			guard, prelude, symbol = self._guard_prelude(function.sig.ident.name)
			block.extend(prelude)
			block.extend(quote("let __guard ="))
			block.extend([Ident(guard), Punct(";")])
		block.extend(quote("let __result ="))
		block.extend(call)
		block.append(Punct(";"))
		if guarded:
			block.extend(quote("::core::mem::forget(__guard);"))
		block.append(Ident("__result"))

		out = replace(
			function,
			attrs=attrs,
			sig=normalized.sig,
			block=replace(function.block, tokens=tuple(block)),
		)
		return ExpandedFn(function=out, symbol=symbol)

	def _guard_prelude(self, name: str) -> Tuple[str, List[TokenTree], Optional[str]]:
		cfg = self.config
		if cfg.variant is Variant.ABORT_ON_PANIC:
			prelude = [Ident("struct"), Ident(ABORT_GUARD_STRUCT), Punct(";")]
			prelude.extend(_drop_impl(ABORT_GUARD_STRUCT, _path_tokens(cfg.abort_path), unsafe_call=False))
			return ABORT_GUARD_STRUCT, prelude, None
		if cfg.encoding is SymbolEncoding.MANGLED:
			symbol = mangled_symbol(name)
			trigger, message = symbol, None
		else:
			symbol = link_message(name)
			trigger, message = TRIGGER_FN, symbol
		prelude = [Ident("struct"), Ident(GUARD_STRUCT), Punct(";")]
		prelude.extend(_extern_block(trigger, message, cfg))
		prelude.extend(_drop_impl(GUARD_STRUCT, [Ident(trigger)], unsafe_call=True))
		return GUARD_STRUCT, prelude, symbol


def expand_function(function: ItemFn, config: Optional[ExpandConfig] = None) -> ExpandedFn:
	"""Instrument one parsed function with a fresh per-call name source."""
	return SentinelEmitter(config if config is not None else ExpandConfig(), FreshNames()).expand(function)


__all__ = [
	"ABORT_GUARD_STRUCT",
	"ExpandedFn",
	"GUARD_STRUCT",
	"SentinelEmitter",
	"TRIGGER_FN",
	"attr_path_is",
	"expand_function",
	"has_attr",
]
