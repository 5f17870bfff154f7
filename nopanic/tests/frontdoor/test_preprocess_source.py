# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from nopanic.config import ExpandConfig, SymbolEncoding, Variant
from nopanic.oracle import link_message
from nopanic.preprocess import AttributeMarker, attribute_marker, expand_source
from nopanic.syntax.lexer import lex
from nopanic.syntax.tokens import Ident

DEMO_PROGRAM = """
use std::io;

#[no_panic]
pub fn demo(s: &str) -> &str {
    &s[1..]
}

fn main() {
    println!("{}", demo("input string"));
}
"""


@pytest.mark.parametrize(
	"attr, variant",
	[
		("#[no_panic]", Variant.NO_PANIC),
		("#[no_panic::no_panic]", Variant.NO_PANIC),
		("#[::no_panic::no_panic]", Variant.NO_PANIC),
		("#[abort_on_panic]", Variant.ABORT_ON_PANIC),
		("#[noexcept::abort_on_panic]", Variant.ABORT_ON_PANIC),
	],
)
def test_attribute_marker_recognizes_paths(attr: str, variant: Variant) -> None:
	assert attribute_marker(lex(attr)) == AttributeMarker(variant=variant)


def test_attribute_marker_keeps_arguments_and_ignores_others() -> None:
	marker = attribute_marker(lex("#[no_panic(x)]"))
	assert marker is not None and marker.args == (Ident("x"),)
	assert attribute_marker(lex("#[inline]")) is None
	assert attribute_marker(lex('#[doc = "no_panic"]')) is None
	assert attribute_marker(lex("#[no_panic = 1]")) is None


def test_attributed_function_is_expanded_and_the_rest_is_kept() -> None:
	result = expand_source(DEMO_PROGRAM)
	assert result.ok
	assert result.symbols == [link_message("demo")]
	assert "no_panic" not in result.text
	assert result.text.startswith("use std :: io ; # [inline] pub fn demo (mut __arg0 : & str) -> & str {")
	assert 'fn main () { println ! ("{}" , demo ("input string")) ; }' in result.text


def test_methods_inside_impl_blocks() -> None:
	source = """
struct C { n: u32 }
impl C {
    #[no_panic]
    fn get(&self) -> u32 { self.n }
    fn other(&self) -> u32 { self.n }
}
"""
	result = expand_source(source, ExpandConfig(encoding=SymbolEncoding.MANGLED))
	assert result.symbols == ["_Z22RUST_PANIC_IN_FUNCTIONI3getE"]
	assert "let __self = self ; __self . n" in result.text
	assert "fn other (& self) -> u32 { self . n }" in result.text


def test_nested_functions_are_found() -> None:
	source = """
fn outer() -> u8 {
    #[no_panic]
    fn inner(x: u8) -> u8 { x }
    inner(1)
}
"""
	result = expand_source(source)
	assert result.symbols == [link_message("inner")]
	assert result.text.startswith("fn outer () -> u8 { # [inline] fn inner (mut __arg0 : u8) -> u8 {")
	assert result.text.endswith("inner (1) }")


def test_abort_on_impl_applies_to_every_method_except_allowed_ones() -> None:
	source = """
#[abort_on_panic]
impl C {
    fn a(&self) {}
    #[allow_panic]
    fn b(&self) {}
    const K: u8 = 1;
}
"""
	result = expand_source(source)
	assert result.ok
	assert len(result.functions) == 2
	assert result.symbols == []
	assert result.text.count("struct __AbortOnPanic ;") == 1
	assert "abort_on_panic" not in result.text
	assert "allow_panic" not in result.text
	assert "const K : u8 = 1 ;" in result.text


def test_abort_on_mod_reaches_nested_functions() -> None:
	source = "#[abort_on_panic] mod m { pub fn a() {} fn b() { fn c() {} } }"
	result = expand_source(source)
	assert [fn.function.sig.ident.name for fn in result.functions] == ["a", "b"]


def test_inner_items_expand_before_outer_ones() -> None:
	source = "#[no_panic] fn outer() { #[no_panic] fn inner() {} inner() }"
	result = expand_source(source)
	assert [fn.function.sig.ident.name for fn in result.functions] == ["inner", "outer"]
	assert result.text.count("struct __NoPanic ;") == 2


def test_rejected_items_stay_in_place_with_a_compile_error() -> None:
	source = "#[no_panic]\nasync fn f() {}\n\nfn g() {}"
	result = expand_source(source, file="src/lib.rs")
	assert not result.ok
	(diag,) = result.diagnostics
	assert diag.message == "no_panic attribute on async fn is not supported"
	assert (diag.span.file, diag.span.line) == ("src/lib.rs", 2)
	assert result.text == ':: core :: compile_error ! { "no_panic attribute on async fn is not supported" } async fn f () { } fn g () { }'


def test_marker_arguments_are_rejected() -> None:
	result = expand_source("#[no_panic(x)] fn f() {}")
	assert result.diagnostics[0].message == "unexpected token"


def test_lex_errors_become_a_diagnostic() -> None:
	result = expand_source("fn f() {", file="a.rs")
	assert not result.ok
	assert result.tokens == []
	assert result.diagnostics[0].span.file == "a.rs"


def test_const_generic_block_argument_is_part_of_the_signature() -> None:
	source = "#[no_panic] fn f<const N: usize>() -> Arr<{ N }> { Arr }\nfn g() {}"
	result = expand_source(source)
	assert result.ok, result.diagnostics
	assert [fn.function.sig.ident.name for fn in result.functions] == ["f"]
	assert "(move || -> Arr < { N } > { Arr }) ()" in result.text
	assert result.text.endswith("fn g () { }")


def test_concurrent_expansions_match_serial_ones() -> None:
	sources = [
		DEMO_PROGRAM,
		"struct C { n: u32 }\nimpl C { #[no_panic] fn get(&self, a: u32, (b, c): (u32, u32)) -> u32 { self.n + a + b + c } }",
		"#[abort_on_panic] mod m { pub fn a(x: u8) -> u8 { x } }",
		"#[no_panic] fn f(ref mut i: i32) -> impl Copy { *i += 1; *i }",
	]
	serial = [expand_source(source).text for source in sources]
	with ThreadPoolExecutor(max_workers=8) as pool:
		parallel = list(pool.map(lambda source: expand_source(source).text, sources * 25))
	assert parallel == serial * 25
