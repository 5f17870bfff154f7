# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parameter-list normalization.

Every typed parameter is renamed to a numbered placeholder in the outer
signature and bound back to its original pattern as the first statement of
the inner closure:

    fn f(ref mut i: i32, (a, b): (u8, u8))
    =>
    fn f(mut __arg0: i32, mut __arg1: (u8, u8)) { ... let ref mut i = __arg0; let (a, b) = __arg1; ... }

The placeholder is always `mut` so a `ref mut` rebinding may borrow the
captured value mutably; the user's own `mut`/`ref mut` lives only in the
rebinding. Placeholders are numbered by position over all inputs, receiver
included, from the expansion's own `FreshNames`.

The receiver is not renumbered. It is reported back in `receiver` and the
receiver's binding-level `mut` is dropped from the outer signature; the
emitter reintroduces it on the `__self` rebinding.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from nopanic.core.fresh import FreshNames
from nopanic.syntax.ast import FnArg, PatIdent, Receiver, Signature, TypedArg
from nopanic.syntax.tokens import Ident, Punct, TokenTree

logger = logging.getLogger(__name__)

ARG_PREFIX = "__arg"


@dataclass(frozen=True)
class Rebinding:
	"""One `let <pattern> = <placeholder>;` statement."""

	pattern: Tuple[TokenTree, ...]
	value: Ident

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = [Ident("let")]
		out.extend(self.pattern)
		out.append(Punct("="))
		out.append(self.value)
		out.append(Punct(";"))
		return out


@dataclass(frozen=True)
class NormalizedSignature:
	sig: Signature
	rebindings: Tuple[Rebinding, ...]
	receiver: Optional[Receiver] = None  # as written, before `mut` was dropped

	@property
	def has_receiver(self) -> bool:
		return self.receiver is not None


def normalize_signature(sig: Signature, names: FreshNames) -> NormalizedSignature:
	inputs: List[FnArg] = []
	rebindings: List[Rebinding] = []
	receiver: Optional[Receiver] = None
	for arg in sig.inputs:
		numbered = names.fresh(ARG_PREFIX)
		if isinstance(arg, Receiver):
			receiver = arg
			inputs.append(replace(arg, mutable=False))
			continue
		if _is_self_pattern(arg):
			# Older tree shape: `mut self: T` as a typed argument.
			pat = arg.pat
			receiver = Receiver(attrs=arg.attrs, mutable=pat.mutable, ty=arg.ty, self_token=pat.ident)  # type: ignore[union-attr]
			inputs.append(replace(receiver, mutable=False))
			continue
		placeholder = Ident(numbered, span=arg.pat.to_tokens()[0].span)
		rebindings.append(Rebinding(pattern=tuple(arg.pat.to_tokens()), value=placeholder))
		inputs.append(replace(arg, pat=PatIdent(ident=placeholder, mutable=True)))
	logger.debug(
		"normalized %s: %d rebindings, receiver=%s",
		sig.ident.name,
		len(rebindings),
		receiver is not None,
	)
	return NormalizedSignature(
		sig=replace(sig, inputs=tuple(inputs)),
		rebindings=tuple(rebindings),
		receiver=receiver,
	)


def _is_self_pattern(arg: TypedArg) -> bool:
	pat = arg.pat
	return isinstance(pat, PatIdent) and pat.ident.name == "self" and not pat.by_ref and not pat.subpat


def receiver_rebinding(receiver: Receiver, replacement: str) -> Rebinding:
	"""`let __self = self;`, or `let mut __self = self;` for a `mut` by-value receiver."""
	pattern: List[TokenTree] = []
	if receiver.mutable:
		pattern.append(Ident("mut"))
	pattern.append(Ident(replacement, span=receiver.self_token.span))
	return Rebinding(pattern=tuple(pattern), value=Ident("self", span=receiver.self_token.span))


__all__ = [
	"ARG_PREFIX",
	"NormalizedSignature",
	"Rebinding",
	"normalize_signature",
	"receiver_rebinding",
]
