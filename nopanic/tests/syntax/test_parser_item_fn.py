# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from nopanic.syntax.ast import (
	AngleBracketed,
	AssocArg,
	LifetimeArg,
	PatIdent,
	PatVerbatim,
	Path,
	PathSegment,
	Receiver,
	TraitBound,
	TypeArg,
	TypeArray,
	TypeBareFn,
	TypeImplTrait,
	TypeInfer,
	TypeNever,
	TypeParen,
	TypePath,
	TypePtr,
	TypeReference,
	TypeSlice,
	TypeTraitObject,
	TypeTuple,
	TypedArg,
)
from nopanic.syntax.lexer import ParseError, lex
from nopanic.syntax.parser import parse_item_fn_source, parse_type_source, split_top_level
from nopanic.syntax.tokens import Ident, Lifetime, render_tokens


def _path(*names: str) -> TypePath:
	return TypePath(path=Path(segments=tuple(PathSegment(ident=Ident(n)) for n in names)))


def test_parse_simple_function() -> None:
	fn = parse_item_fn_source("pub fn demo(s: &str) -> &str { &s[1..] }")
	assert fn.sig.ident == Ident("demo")
	assert fn.vis == (Ident("pub"),)
	assert fn.attrs == ()
	assert fn.sig.inputs == (TypedArg(pat=PatIdent(ident=Ident("s")), ty=TypeReference(elem=_path("str"))),)
	assert fn.sig.output == TypeReference(elem=_path("str"))
	assert render_tokens(fn.block.tokens) == "& s [1 ..]"


def test_parse_qualifiers_attrs_and_restricted_visibility() -> None:
	fn = parse_item_fn_source('#[inline(always)] #[must_use] pub(crate) const unsafe extern "C" fn f() {}')
	assert len(fn.attrs) == 2
	assert render_tokens(fn.vis) == "pub (crate)"
	assert fn.sig.constness and fn.sig.unsafety
	assert render_tokens(fn.sig.abi) == 'extern "C"'
	assert fn.sig.asyncness is None
	assert fn.sig.output is None


def test_async_is_recorded_with_its_token() -> None:
	fn = parse_item_fn_source("async fn f() {}")
	assert fn.sig.asyncness == Ident("async")
	assert fn.sig.asyncness.span.column == 1


def test_generics_and_where_clause_are_kept_as_tokens() -> None:
	fn = parse_item_fn_source("fn f<T: Into<u8>>(t: T) -> u8 where T: Copy { t.into() }")
	assert render_tokens(fn.sig.generics) == "< T : Into < u8 >>"
	assert render_tokens(fn.sig.where_clause) == "where T : Copy"
	assert fn.sig.output == _path("u8")


@pytest.mark.parametrize(
	"param, expected",
	[
		("&self", Receiver(reference=True)),
		("&mut self", Receiver(reference=True, ref_mutable=True)),
		("&'a mut self", Receiver(reference=True, lifetime=Lifetime("a"), ref_mutable=True)),
		("self", Receiver()),
		("mut self", Receiver(mutable=True)),
	],
)
def test_receiver_forms(param: str, expected: Receiver) -> None:
	fn = parse_item_fn_source(f"fn f({param}, x: u8) {{}}")
	assert fn.sig.inputs[0] == expected
	assert fn.sig.receiver == expected
	assert isinstance(fn.sig.inputs[1], TypedArg)


def test_explicit_receiver_type() -> None:
	fn = parse_item_fn_source("fn poll(self: Pin<&mut Self>) {}")
	recv = fn.sig.receiver
	assert recv is not None
	assert recv.ty is not None
	assert render_tokens(recv.ty.to_tokens()) == "Pin < & mut Self >"


@pytest.mark.parametrize(
	"source",
	[
		"fn f(x: u8, self) {}",
		"fn f(&self, &self) {}",
	],
)
def test_misplaced_receiver_is_rejected(source: str) -> None:
	with pytest.raises(ParseError, match="unexpected `self` parameter in function"):
		parse_item_fn_source(source)


def test_parameter_patterns() -> None:
	fn = parse_item_fn_source("fn f(ref mut i: i32, (a, b): (u8, u8), _: u8, mut v: Vec<u8>, n @ 1..=9: u8) {}")
	pats = [arg.pat for arg in fn.sig.inputs]
	assert pats[0] == PatIdent(ident=Ident("i"), by_ref=True, mutable=True)
	assert isinstance(pats[1], PatVerbatim)
	assert render_tokens(pats[1].to_tokens()) == "(a , b)"
	assert isinstance(pats[2], PatVerbatim)
	assert pats[3] == PatIdent(ident=Ident("v"), mutable=True)
	assert isinstance(pats[4], PatIdent) and pats[4].ident == Ident("n")
	assert render_tokens(pats[4].to_tokens()) == "n @ 1 ..= 9"
	assert fn.sig.inputs[1].ty == TypeTuple((_path("u8"), _path("u8")))


def test_parameter_attributes_and_struct_patterns() -> None:
	fn = parse_item_fn_source("fn f(#[allow(unused)] Point { x, y }: Point) {}")
	arg = fn.sig.inputs[0]
	assert len(arg.attrs) == 1
	assert render_tokens(arg.pat.to_tokens()) == "Point { x , y }"


def test_split_top_level_ignores_commas_inside_angles() -> None:
	chunks = split_top_level(lex("a: HashMap<K, V>, b: u8,"))
	assert [render_tokens(c) for c in chunks] == ["a : HashMap < K , V >", "b : u8"]


@pytest.mark.parametrize(
	"source, message",
	[
		("struct S;", "expected `fn`"),
		("fn (x: u8) {}", "expected identifier"),
		("fn f {}", "expected parentheses"),
		("fn f();", "expected curly braces"),
		("fn f() {} x", "unexpected token"),
		("fn f(x) {}", "expected `:`"),
		('unsafe extern "C" fn f(x: u8, ...) {}', "variadic parameters are not supported"),
		("#![no_std] fn f() {}", "inner attribute is not permitted here"),
	],
)
def test_item_errors(source: str, message: str) -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_item_fn_source(source)
	assert str(excinfo.value) == message


def test_error_at_end_of_input_uses_the_end_span() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_item_fn_source("fn f()", file="lib.rs")
	assert str(excinfo.value) == "expected curly braces"
	assert excinfo.value.span.file == "lib.rs"


# Types ---------------------------------------------------------------------


def test_parse_opaque_type_nested_in_generic() -> None:
	ty = parse_type_source("io::Result<impl io::Write>")
	assert isinstance(ty, TypePath)
	last = ty.path.segments[-1]
	assert last.ident == Ident("Result")
	assert isinstance(last.arguments, AngleBracketed)
	(arg,) = last.arguments.args
	assert arg == TypeArg(TypeImplTrait(bounds=(TraitBound(path=Path(segments=(
		PathSegment(ident=Ident("io")),
		PathSegment(ident=Ident("Write")),
	))),)))


@pytest.mark.parametrize(
	"source, kind",
	[
		("[u8; 4]", TypeArray),
		("[u8]", TypeSlice),
		("*const u8", TypePtr),
		("*mut u8", TypePtr),
		("!", TypeNever),
		("_", TypeInfer),
		("(u8)", TypeParen),
		("(u8,)", TypeTuple),
		("()", TypeTuple),
		("fn(u8) -> u8", TypeBareFn),
		("unsafe extern \"C\" fn()", TypeBareFn),
		("for<'a> fn(&'a u8)", TypeBareFn),
		("dyn Fn(u8) -> u8 + Send", TypeTraitObject),
		("Box<dyn Error + Send + Sync + 'static>", TypePath),
		("impl Iterator<Item = u8> + '_", TypeImplTrait),
		("&'a mut Vec<u8>", TypeReference),
	],
)
def test_type_shapes(source: str, kind: type) -> None:
	ty = parse_type_source(source)
	assert isinstance(ty, kind)
	assert render_tokens(ty.to_tokens()) == render_tokens(lex(source))


def test_angle_arguments_are_classified() -> None:
	ty = parse_type_source("Foo<'a, u8, 3, Item = T>")
	args = ty.path.segments[0].arguments.args
	assert isinstance(args[0], LifetimeArg)
	assert isinstance(args[1], TypeArg)
	assert render_tokens(args[2].to_tokens()) == "3"
	assert isinstance(args[3], AssocArg)


def test_qualified_and_absolute_paths() -> None:
	ty = parse_type_source("<T as Iterator>::Item")
	assert render_tokens(ty.qself) == "< T as Iterator >"
	assert ty.path.segments[0].ident == Ident("Item")
	ty = parse_type_source("::std::string::String")
	assert ty.path.leading_colon
	assert [seg.ident.name for seg in ty.path.segments] == ["std", "string", "String"]


def test_unmodelled_return_type_is_kept_verbatim() -> None:
	fn = parse_item_fn_source("fn f() -> m!(u8) + Send {}")
	assert render_tokens(fn.sig.output.to_tokens()) == "m ! (u8) + Send"


def test_parse_type_rejects_empty_input() -> None:
	with pytest.raises(ParseError, match="expected type"):
		parse_type_source("")
