# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from nopanic.syntax.items import item_end, item_keyword, macro_invocation_at
from nopanic.syntax.lexer import lex
from nopanic.syntax.tokens import Group


@pytest.mark.parametrize(
	"source, end",
	[
		("fn inner() {} x", 4),
		("#[inline] pub(crate) const fn f() {}", 9),
		("use a::b; x", 6),
		("const N: usize = 3; x", 7),
		("static X: u8 = 0; x", 7),
		("type A = u8; x", 5),
		("extern crate alloc; x", 4),
		('extern "C" { fn f(); } x', 3),
		("struct S; x", 3),
		("struct S { a: u8 } x", 3),
		("impl<T> Tr for S<T> {} x", 11),
		("fn f<const N: usize>() -> Arr<{ N }> { Arr } x", 16),
		("impl Tr for S<{ 1 }> {} x", 8),
		("fn g<T>() where T: Fn() -> u8; x", 15),
		("mod m {} x", 3),
		("macro_rules! m { () => {} } x", 4),
		("macro_rules! m ( () => {} ); x", 5),
	],
)
def test_item_end(source: str, end: int) -> None:
	assert item_end(lex(source), 0) == end


@pytest.mark.parametrize(
	"source",
	[
		"let x = 1;",
		"unsafe { x }",
		"async move { x }",
		"const { 3 }",
		"union(1)",
		"x.fn_like()",
		"self.x",
	],
)
def test_expressions_are_not_items(source: str) -> None:
	assert item_end(lex(source), 0) is None


def test_item_keyword_skips_visibility_and_qualifiers() -> None:
	assert item_keyword(lex("pub unsafe fn f() {}"), 0) == "fn"
	assert item_keyword(lex('pub(super) extern "C" fn f() {}'), 0) == "fn"
	assert item_keyword(lex("const unsafe fn f() {}"), 0) == "fn"
	assert item_keyword(lex("union U { a: u8 }"), 0) == "union"
	assert item_keyword(lex("default fn f() {}"), 0) == "fn"


def test_macro_invocation_at() -> None:
	args = macro_invocation_at(lex('println!("{}", x)'), 0)
	assert isinstance(args, Group) and args.delimiter == "("
	assert macro_invocation_at(lex("vec![1, 2]"), 0).delimiter == "["
	assert macro_invocation_at(lex("a != b"), 0) is None
	assert macro_invocation_at(lex("if !(x) {}"), 0) is None
	assert macro_invocation_at(lex("x!"), 0) is None
