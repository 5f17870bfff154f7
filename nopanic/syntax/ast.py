# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Syntax tree for one annotated Rust function.

Only the parts the expansion reasons about are structured: the parameter list,
the receiver, patterns that are plain bindings, and types. Everything else
(attributes, visibility, generics, where clauses, bodies) stays as token trees
and is re-emitted verbatim.

Each syntactic category is a closed set of frozen dataclasses. Shapes the
parser does not model land in a `*Verbatim` arm so they pass through unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .tokens import Group, Ident, Lifetime, Punct, TokenTree, detach, group, puncts


def _ident(name: str) -> Ident:
	return Ident(name)


def _comma_join(parts: List[List[TokenTree]]) -> List[TokenTree]:
	out: List[TokenTree] = []
	for idx, part in enumerate(parts):
		if idx:
			out.append(Punct(","))
		out.extend(part)
	return out


# Types ---------------------------------------------------------------------


@dataclass(frozen=True)
class TypeArg:
	"""Generic argument that is a type: `Vec<T>`."""

	ty: "Type"

	def to_tokens(self) -> List[TokenTree]:
		return self.ty.to_tokens()


@dataclass(frozen=True)
class LifetimeArg:
	lifetime: Lifetime

	def to_tokens(self) -> List[TokenTree]:
		return [self.lifetime]


@dataclass(frozen=True)
class ConstArg:
	"""Const generic argument: a literal, `-1`, or a `{ expr }` block."""

	tokens: Tuple[TokenTree, ...]

	def to_tokens(self) -> List[TokenTree]:
		return detach(self.tokens)


@dataclass(frozen=True)
class AssocArg:
	"""Associated type binding or constraint: `Item = T`, `Item: Bound`."""

	tokens: Tuple[TokenTree, ...]

	def to_tokens(self) -> List[TokenTree]:
		return detach(self.tokens)


GenericArgument = Union[TypeArg, LifetimeArg, ConstArg, AssocArg]


@dataclass(frozen=True)
class AngleBracketed:
	args: Tuple[GenericArgument, ...]
	turbofish: bool = False

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = puncts("::") if self.turbofish else []
		out.append(Punct("<"))
		out.extend(_comma_join([arg.to_tokens() for arg in self.args]))
		out.append(Punct(">"))
		return out


@dataclass(frozen=True)
class Parenthesized:
	"""`Fn(A, B) -> C` style arguments; kept as tokens."""

	inputs: Group
	output: Tuple[TokenTree, ...] = ()

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = [self.inputs]
		if self.output:
			out.extend(puncts("->"))
			out.extend(detach(self.output))
		return out


PathArguments = Union[AngleBracketed, Parenthesized]


@dataclass(frozen=True)
class PathSegment:
	ident: Ident
	arguments: Optional[PathArguments] = None

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = [self.ident]
		if self.arguments is not None:
			out.extend(self.arguments.to_tokens())
		return out


@dataclass(frozen=True)
class Path:
	segments: Tuple[PathSegment, ...]
	leading_colon: bool = False

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = puncts("::") if self.leading_colon else []
		for idx, seg in enumerate(self.segments):
			if idx:
				out.extend(puncts("::"))
			out.extend(seg.to_tokens())
		return out


@dataclass(frozen=True)
class TraitBound:
	"""`Trait`, `?Sized`, `for<'a> Fn(&'a T)`; modifiers kept as tokens."""

	path: Path
	modifiers: Tuple[TokenTree, ...] = ()
	paren: bool = False

	def to_tokens(self) -> List[TokenTree]:
		inner = list(self.modifiers) + self.path.to_tokens()
		if self.paren:
			return [group("(", inner)]
		return inner


@dataclass(frozen=True)
class VerbatimBound:
	"""Lifetime bounds, `use<..>` capture lists and anything unmodelled."""

	tokens: Tuple[TokenTree, ...]

	def to_tokens(self) -> List[TokenTree]:
		return detach(self.tokens)


TypeParamBound = Union[TraitBound, VerbatimBound]


def _bounds_tokens(bounds: Tuple[TypeParamBound, ...]) -> List[TokenTree]:
	out: List[TokenTree] = []
	for idx, bound in enumerate(bounds):
		if idx:
			out.append(Punct("+"))
		out.extend(bound.to_tokens())
	return out


@dataclass(frozen=True)
class TypePath:
	path: Path
	qself: Tuple[TokenTree, ...] = ()  # `<T as Trait>` prefix, verbatim

	def to_tokens(self) -> List[TokenTree]:
		if not self.qself:
			return self.path.to_tokens()
		out = detach(self.qself)
		out.extend(puncts("::"))
		out.extend(self.path.to_tokens())
		return out


@dataclass(frozen=True)
class TypeReference:
	elem: "Type"
	lifetime: Optional[Lifetime] = None
	mutable: bool = False

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = [Punct("&")]
		if self.lifetime is not None:
			out.append(self.lifetime)
		if self.mutable:
			out.append(_ident("mut"))
		out.extend(self.elem.to_tokens())
		return out


@dataclass(frozen=True)
class TypePtr:
	elem: "Type"
	mutable: bool = False

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = [Punct("*"), _ident("mut" if self.mutable else "const")]
		out.extend(self.elem.to_tokens())
		return out


@dataclass(frozen=True)
class TypeArray:
	elem: "Type"
	len_tokens: Tuple[TokenTree, ...]

	def to_tokens(self) -> List[TokenTree]:
		inner = self.elem.to_tokens() + [Punct(";")] + detach(self.len_tokens)
		return [group("[", inner)]


@dataclass(frozen=True)
class TypeSlice:
	elem: "Type"

	def to_tokens(self) -> List[TokenTree]:
		return [group("[", self.elem.to_tokens())]


@dataclass(frozen=True)
class TypeTuple:
	elems: Tuple["Type", ...] = ()

	def to_tokens(self) -> List[TokenTree]:
		inner = _comma_join([elem.to_tokens() for elem in self.elems])
		if len(self.elems) == 1:
			inner.append(Punct(","))
		return [group("(", inner)]


@dataclass(frozen=True)
class TypeParen:
	elem: "Type"

	def to_tokens(self) -> List[TokenTree]:
		return [group("(", self.elem.to_tokens())]


@dataclass(frozen=True)
class TypeGroup:
	"""Invisible-delimiter group; only produced by macro-built input."""

	elem: "Type"

	def to_tokens(self) -> List[TokenTree]:
		return self.elem.to_tokens()


@dataclass(frozen=True)
class TypeTraitObject:
	bounds: Tuple[TypeParamBound, ...]
	dyn: bool = True

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = [_ident("dyn")] if self.dyn else []
		out.extend(_bounds_tokens(self.bounds))
		return out


@dataclass(frozen=True)
class TypeImplTrait:
	bounds: Tuple[TypeParamBound, ...]

	def to_tokens(self) -> List[TokenTree]:
		return [_ident("impl")] + _bounds_tokens(self.bounds)


@dataclass(frozen=True)
class TypeBareFn:
	tokens: Tuple[TokenTree, ...]

	def to_tokens(self) -> List[TokenTree]:
		return detach(self.tokens)


@dataclass(frozen=True)
class TypeInfer:
	def to_tokens(self) -> List[TokenTree]:
		return [_ident("_")]


@dataclass(frozen=True)
class TypeMacro:
	tokens: Tuple[TokenTree, ...]

	def to_tokens(self) -> List[TokenTree]:
		return detach(self.tokens)


@dataclass(frozen=True)
class TypeNever:
	def to_tokens(self) -> List[TokenTree]:
		return [Punct("!")]


@dataclass(frozen=True)
class TypeVerbatim:
	tokens: Tuple[TokenTree, ...]

	def to_tokens(self) -> List[TokenTree]:
		return detach(self.tokens)


Type = Union[
	TypePath,
	TypeReference,
	TypePtr,
	TypeArray,
	TypeSlice,
	TypeTuple,
	TypeParen,
	TypeGroup,
	TypeTraitObject,
	TypeImplTrait,
	TypeBareFn,
	TypeInfer,
	TypeMacro,
	TypeNever,
	TypeVerbatim,
]


# Patterns ------------------------------------------------------------------


@dataclass(frozen=True)
class PatIdent:
	"""`x`, `mut x`, `ref x`, `ref mut x`, optionally `x @ subpattern`."""

	ident: Ident
	by_ref: bool = False
	mutable: bool = False
	subpat: Tuple[TokenTree, ...] = ()

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = []
		if self.by_ref:
			out.append(_ident("ref"))
		if self.mutable:
			out.append(_ident("mut"))
		out.append(self.ident)
		if self.subpat:
			out.append(Punct("@"))
			out.extend(detach(self.subpat))
		return out


@dataclass(frozen=True)
class PatVerbatim:
	"""Destructuring, wildcards and every other pattern shape."""

	tokens: Tuple[TokenTree, ...]

	def to_tokens(self) -> List[TokenTree]:
		return detach(self.tokens)


Pat = Union[PatIdent, PatVerbatim]


# Parameters ----------------------------------------------------------------


@dataclass(frozen=True)
class Receiver:
	"""
	Method receiver.

	`reference` covers `&self` / `&'a mut self`; `ty` is set for the explicit
	form `self: Pin<&mut Self>`. `mutable` is the binding mutability of
	`mut self` / `mut self: T`; `ref_mutable` the `&mut` of a reference receiver.
	"""

	attrs: Tuple[Tuple[TokenTree, ...], ...] = ()
	reference: bool = False
	lifetime: Optional[Lifetime] = None
	ref_mutable: bool = False
	mutable: bool = False
	ty: Optional[Type] = None
	self_token: Ident = field(default=Ident("self"))

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = []
		for attr in self.attrs:
			out.extend(attr)
		if self.reference:
			out.append(Punct("&"))
			if self.lifetime is not None:
				out.append(self.lifetime)
			if self.ref_mutable:
				out.append(_ident("mut"))
		if self.mutable:
			out.append(_ident("mut"))
		out.append(self.self_token)
		if self.ty is not None:
			out.append(Punct(":"))
			out.extend(self.ty.to_tokens())
		return out


@dataclass(frozen=True)
class TypedArg:
	pat: Pat
	ty: Type
	attrs: Tuple[Tuple[TokenTree, ...], ...] = ()

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = []
		for attr in self.attrs:
			out.extend(attr)
		out.extend(self.pat.to_tokens())
		out.append(Punct(":"))
		out.extend(self.ty.to_tokens())
		return out


FnArg = Union[Receiver, TypedArg]


# Items ---------------------------------------------------------------------


@dataclass(frozen=True)
class Signature:
	ident: Ident
	inputs: Tuple[FnArg, ...] = ()
	output: Optional[Type] = None
	generics: Tuple[TokenTree, ...] = ()
	where_clause: Tuple[TokenTree, ...] = ()
	constness: bool = False
	asyncness: Optional[Ident] = None
	unsafety: bool = False
	abi: Tuple[TokenTree, ...] = ()  # `extern` or `extern "C"`

	@property
	def receiver(self) -> Optional[Receiver]:
		for arg in self.inputs:
			if isinstance(arg, Receiver):
				return arg
		return None

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = []
		if self.constness:
			out.append(_ident("const"))
		if self.asyncness is not None:
			out.append(self.asyncness)
		if self.unsafety:
			out.append(_ident("unsafe"))
		out.extend(self.abi)
		out.append(_ident("fn"))
		out.append(self.ident)
		out.extend(detach(self.generics))
		out.append(group("(", _comma_join([arg.to_tokens() for arg in self.inputs])))
		if self.output is not None:
			out.extend(puncts("->"))
			out.extend(self.output.to_tokens())
		out.extend(detach(self.where_clause))
		return out


@dataclass(frozen=True)
class ItemFn:
	"""A free function or method, as handed to the attribute."""

	sig: Signature
	block: Group
	attrs: Tuple[Tuple[TokenTree, ...], ...] = ()
	vis: Tuple[TokenTree, ...] = ()

	def to_tokens(self) -> List[TokenTree]:
		out: List[TokenTree] = []
		for attr in self.attrs:
			out.extend(attr)
		out.extend(self.vis)
		out.extend(self.sig.to_tokens())
		out.append(self.block)
		return out


__all__ = [
	"AngleBracketed",
	"AssocArg",
	"ConstArg",
	"FnArg",
	"GenericArgument",
	"ItemFn",
	"LifetimeArg",
	"Parenthesized",
	"Pat",
	"PatIdent",
	"PatVerbatim",
	"Path",
	"PathSegment",
	"Receiver",
	"Signature",
	"TraitBound",
	"Type",
	"TypeArg",
	"TypeArray",
	"TypeBareFn",
	"TypeGroup",
	"TypeImplTrait",
	"TypeInfer",
	"TypeMacro",
	"TypeNever",
	"TypeParamBound",
	"TypeParen",
	"TypePath",
	"TypePtr",
	"TypeReference",
	"TypeSlice",
	"TypeTraitObject",
	"TypeTuple",
	"TypeVerbatim",
	"TypedArg",
	"VerbatimBound",
]
