# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

from nopanic.cli import main

DEMO = "fn demo(s: &str) -> &str { &s[1..] }\n"


def _write(tmp_path: Path, name: str, text: str) -> Path:
	path = tmp_path / name
	path.write_text(text)
	return path


def test_expand_prints_the_instrumented_function(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "demo.rs", DEMO)
	assert main(["expand", str(src)]) == 0
	out = capsys.readouterr().out
	assert out.startswith("# [inline] fn demo (mut __arg0 : & str) -> & str {")
	assert "unsafe extern" in out


def test_expand_flags_map_onto_the_config(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "demo.rs", DEMO)
	assert main(["expand", str(src), "--encoding", "mangled", "--no-inline", "--legacy-extern"]) == 0
	out = capsys.readouterr().out
	assert out.startswith("fn demo")
	assert "_Z22RUST_PANIC_IN_FUNCTIONI4demoE" in out
	assert "unsafe extern" not in out


def test_expand_abort_variant(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "demo.rs", DEMO)
	assert main(["expand", str(src), "--attr", "abort_on_panic"]) == 0
	assert "__AbortOnPanic" in capsys.readouterr().out


def test_expand_json_reports_rejected_arguments(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "demo.rs", DEMO)
	assert main(["expand", str(src), "--args", "x", "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	assert payload["output"].startswith(':: core :: compile_error ! { "unexpected token" }')
	(diag,) = payload["diagnostics"]
	assert diag["message"] == "unexpected token"
	assert diag["phase"] == "parser"
	assert diag["file"] == str(src)


def test_expand_errors_go_to_stderr(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "bad.rs", "async fn f() {}")
	assert main(["expand", str(src)]) == 1
	captured = capsys.readouterr()
	assert f"{src}:1:1: error: no_panic attribute on async fn is not supported" in captured.err


def test_preprocess_json_lists_symbols(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "lib.rs", "#[no_panic] fn demo(s: &str) -> &str { &s[1..] }\nfn other() {}\n")
	assert main(["preprocess", str(src), "--encoding", "mangled", "--json"]) == 0
	payload = json.loads(capsys.readouterr().out)
	assert payload["symbols"] == ["_Z22RUST_PANIC_IN_FUNCTIONI4demoE"]
	assert payload["output"].endswith("fn other () { }")
	assert payload["diagnostics"] == []


def test_scan_reports_panicking_functions(tmp_path: Path, capsys) -> None:
	asm = _write(tmp_path, "out.s", "\tcall\t_Z22RUST_PANIC_IN_FUNCTIONI4demoE@PLT\n")
	assert main(["scan", str(asm)]) == 1
	assert capsys.readouterr().out.strip() == "demo"


def test_scan_clean_output(tmp_path: Path, capsys) -> None:
	asm = _write(tmp_path, "out.s", "main:\n\tret\n")
	assert main(["scan", str(asm), "--json"]) == 0
	assert json.loads(capsys.readouterr().out) == {"exit_code": 0, "functions": [], "diagnostics": []}


def test_check_without_a_compiler(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "prog.rs", "#[no_panic] fn demo() {}\nfn main() { demo() }\n")
	code = main(["check", str(src), "--rustc", str(tmp_path / "no-such-rustc"), "--json"])
	assert code == 2
	payload = json.loads(capsys.readouterr().out)
	assert payload["diagnostics"][0]["phase"] == "oracle"
	assert "rustc not available" in payload["diagnostics"][0]["message"]


def test_missing_input_file(tmp_path: Path, capsys) -> None:
	assert main(["scan", str(tmp_path / "missing.s")]) == 2
	assert "error:" in capsys.readouterr().err
