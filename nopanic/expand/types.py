# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Return-type normalization: erase `impl Trait` to `_`.

The inner closure restates the function's return type. An `impl Trait` type
cannot be named outside the signature that declares it, so every occurrence,
at any depth, becomes an inferred `_`. The outward signature keeps the
original type.

Reached through references, pointers, arrays, slices, tuples, parens,
invisible groups, the angle-bracketed type arguments of each path segment, and
the paths of `dyn` trait bounds. Bare fn types, `_`, macro types, `!` and
verbatim types are returned unchanged, as are lifetime/const/associated
arguments, `Fn(..)`-style arguments and `<T as Trait>` qualifiers.
"""

from __future__ import annotations

from dataclasses import replace

from nopanic.syntax.ast import (
	AngleBracketed,
	GenericArgument,
	Path,
	PathSegment,
	TraitBound,
	Type,
	TypeArg,
	TypeArray,
	TypeBareFn,
	TypeGroup,
	TypeImplTrait,
	TypeInfer,
	TypeMacro,
	TypeNever,
	TypeParamBound,
	TypeParen,
	TypePath,
	TypePtr,
	TypeReference,
	TypeSlice,
	TypeTraitObject,
	TypeTuple,
	TypeVerbatim,
)


def erase_impl_trait(ty: Type) -> Type:
	"""Return `ty` with every `impl Trait` replaced by `_`."""
	if isinstance(ty, TypeImplTrait):
		return TypeInfer()
	if isinstance(ty, (TypeArray, TypeGroup, TypeParen, TypePtr, TypeReference, TypeSlice)):
		return replace(ty, elem=erase_impl_trait(ty.elem))
	if isinstance(ty, TypePath):
		return replace(ty, path=erase_impl_trait_in_path(ty.path))
	if isinstance(ty, TypeTraitObject):
		return replace(ty, bounds=tuple(_erase_in_bound(bound) for bound in ty.bounds))
	if isinstance(ty, TypeTuple):
		return replace(ty, elems=tuple(erase_impl_trait(elem) for elem in ty.elems))
	if isinstance(ty, (TypeBareFn, TypeInfer, TypeMacro, TypeNever, TypeVerbatim)):
		return ty
	# Unknown shape: pass through rather than drop it.
	return ty


def erase_impl_trait_in_path(path: Path) -> Path:
	return replace(path, segments=tuple(_erase_in_segment(seg) for seg in path.segments))


def _erase_in_segment(seg: PathSegment) -> PathSegment:
	if not isinstance(seg.arguments, AngleBracketed):
		return seg
	args = tuple(_erase_in_arg(arg) for arg in seg.arguments.args)
	return replace(seg, arguments=replace(seg.arguments, args=args))


def _erase_in_arg(arg: GenericArgument) -> GenericArgument:
	if isinstance(arg, TypeArg):
		return TypeArg(erase_impl_trait(arg.ty))
	return arg


def _erase_in_bound(bound: TypeParamBound) -> TypeParamBound:
	if isinstance(bound, TraitBound):
		return replace(bound, path=erase_impl_trait_in_path(bound.path))
	return bound


def contains_impl_trait(ty: Type) -> bool:
	"""True if erasing would change `ty`."""
	return erase_impl_trait(ty) != ty


__all__ = ["contains_impl_trait", "erase_impl_trait", "erase_impl_trait_in_path"]
