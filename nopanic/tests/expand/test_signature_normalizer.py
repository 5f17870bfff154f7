# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from nopanic.core.fresh import FreshNames
from nopanic.expand.signature import normalize_signature, receiver_rebinding
from nopanic.syntax.ast import PatIdent, Receiver, Signature, TypedArg
from nopanic.syntax.parser import parse_item_fn_source, parse_type_source
from nopanic.syntax.tokens import Ident, render_tokens


def _normalize(source: str):
	fn = parse_item_fn_source(source)
	return fn, normalize_signature(fn.sig, FreshNames())


def test_every_pattern_shape_is_rebound_in_order() -> None:
	fn, norm = _normalize("fn f(x: u8, mut m: u8, ref r: u8, ref mut rm: i32, (a, b): (u8, u8)) {}")
	assert [render_tokens(r.to_tokens()) for r in norm.rebindings] == [
		"let x = __arg0 ;",
		"let mut m = __arg1 ;",
		"let ref r = __arg2 ;",
		"let ref mut rm = __arg3 ;",
		"let (a , b) = __arg4 ;",
	]
	assert render_tokens(norm.sig.to_tokens()) == (
		"fn f (mut __arg0 : u8 , mut __arg1 : u8 , mut __arg2 : u8 , mut __arg3 : i32 , mut __arg4 : (u8 , u8))"
	)
	assert norm.receiver is None
	assert not norm.has_receiver


def test_types_and_attributes_are_kept() -> None:
	fn, norm = _normalize("fn f(#[allow(unused)] v: Vec<u8>) {}")
	(arg,) = norm.sig.inputs
	assert isinstance(arg, TypedArg)
	assert arg.ty == fn.sig.inputs[0].ty
	assert arg.attrs == fn.sig.inputs[0].attrs
	assert arg.pat == PatIdent(ident=Ident("__arg0"), mutable=True)


def test_receiver_is_reported_and_not_renamed() -> None:
	fn, norm = _normalize("fn f(&mut self, x: u8) {}")
	assert norm.has_receiver
	assert norm.receiver == Receiver(reference=True, ref_mutable=True)
	assert norm.sig.inputs[0] == fn.sig.inputs[0]
	# numbering counts the receiver slot
	assert render_tokens(norm.rebindings[0].to_tokens()) == "let x = __arg1 ;"
	assert render_tokens(receiver_rebinding(norm.receiver, "__self").to_tokens()) == "let __self = self ;"


def test_mut_receiver_moves_its_mutability_into_the_rebinding() -> None:
	_fn, norm = _normalize("fn f(mut self) {}")
	assert norm.sig.inputs == (Receiver(),)
	assert norm.receiver == Receiver(mutable=True)
	assert render_tokens(receiver_rebinding(norm.receiver, "__self").to_tokens()) == "let mut __self = self ;"


def test_typed_receiver_keeps_its_type() -> None:
	_fn, norm = _normalize("fn f(mut self: Box<Self>) {}")
	(recv,) = norm.sig.inputs
	assert isinstance(recv, Receiver)
	assert not recv.mutable
	assert render_tokens(recv.to_tokens()) == "self : Box < Self >"
	assert norm.receiver is not None and norm.receiver.mutable


def test_names_come_from_the_supplied_counter() -> None:
	names = FreshNames()
	fn = parse_item_fn_source("fn f(a: u8) {}")
	first = normalize_signature(fn.sig, names)
	second = normalize_signature(fn.sig, names)
	assert render_tokens(first.rebindings[0].to_tokens()) == "let a = __arg0 ;"
	assert render_tokens(second.rebindings[0].to_tokens()) == "let a = __arg1 ;"
	assert normalize_signature(fn.sig, FreshNames()) == first


def test_hand_built_self_pattern_is_treated_as_a_receiver() -> None:
	# Trees built by callers may spell `mut self: Box<Self>` as a typed argument.
	ty = parse_type_source("Box<Self>")
	arg = TypedArg(pat=PatIdent(ident=Ident("self"), mutable=True), ty=ty)
	norm = normalize_signature(Signature(ident=Ident("f"), inputs=(arg,)), FreshNames())
	assert norm.rebindings == ()
	assert norm.receiver == Receiver(mutable=True, ty=ty)
	assert render_tokens(norm.sig.to_tokens()) == "fn f (self : Box < Self >)"
	assert render_tokens(receiver_rebinding(norm.receiver, "__self").to_tokens()) == "let mut __self = self ;"


def test_self_pattern_with_by_ref_stays_a_typed_argument() -> None:
	arg = TypedArg(pat=PatIdent(ident=Ident("self"), by_ref=True), ty=parse_type_source("u8"))
	norm = normalize_signature(Signature(ident=Ident("f"), inputs=(arg,)), FreshNames())
	assert norm.receiver is None
	assert render_tokens(norm.rebindings[0].to_tokens()) == "let ref self = __arg0 ;"
