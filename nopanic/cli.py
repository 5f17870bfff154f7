# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`nopanic` command line.

  nopanic expand FILE        expand one attributed function (the whole file is the item)
  nopanic preprocess FILE    expand every attributed item in a source file
  nopanic scan FILE          list functions named by diagnostic symbols in linker/asm output
  nopanic check FILE --name  preprocess, compile with rustc, report panicking functions

`-` reads from stdin. With --json, each command prints one object with
`exit_code`, its output and structured diagnostics; otherwise output goes to
stdout and diagnostics to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from nopanic.config import ExpandConfig, SymbolEncoding, Variant, config_for_rustc
from nopanic.core.diagnostics import Diagnostic
from nopanic.frontdoor import expand_attribute
from nopanic.oracle import OracleError, check_program, panicking_functions
from nopanic.preprocess import expand_source

logger = logging.getLogger(__name__)


def _read(path: str) -> str:
	if path == "-":
		return sys.stdin.read()
	return Path(path).read_text(encoding="utf-8")


def _file_label(path: str) -> Optional[str]:
	return None if path == "-" else path


def _diag_to_json(diag: Diagnostic, file: Optional[str]) -> dict:
	out = diag.to_json()
	if out.get("file") is None:
		out["file"] = file
	return out


def _emit(args: argparse.Namespace, exit_code: int, payload: dict, diagnostics: List[Diagnostic], text: str) -> int:
	file = _file_label(args.source)
	if args.json:
		body = {"exit_code": exit_code, **payload, "diagnostics": [_diag_to_json(d, file) for d in diagnostics]}
		print(json.dumps(body))
		return exit_code
	for diag in diagnostics:
		span = diag.span.with_file(file)
		print(f"{span.describe()}: {diag.severity}: {diag.message}", file=sys.stderr)
		for note in diag.notes:
			print(f"  note: {note}", file=sys.stderr)
	if text:
		print(text)
	return exit_code


def _config(args: argparse.Namespace) -> ExpandConfig:
	cfg = ExpandConfig(
		encoding=SymbolEncoding(args.encoding),
		add_inline=not args.no_inline,
		unsafe_extern_blocks=not args.legacy_extern,
	)
	if args.rustc:
		cfg = config_for_rustc(args.rustc, cfg)
	return cfg


def _cmd_expand(args: argparse.Namespace) -> int:
	source = _read(args.source)
	expansion = expand_attribute(
		Variant(args.attr),
		args.args or "",
		source,
		config=_config(args),
		file=_file_label(args.source),
	)
	exit_code = 0 if expansion.ok else 1
	payload = {"output": expansion.text}
	if expansion.expanded is not None:
		payload["symbol"] = expansion.expanded.symbol
	return _emit(args, exit_code, payload, expansion.diagnostics, expansion.text)


def _cmd_preprocess(args: argparse.Namespace) -> int:
	source = _read(args.source)
	result = expand_source(source, _config(args), file=_file_label(args.source))
	exit_code = 0 if result.ok else 1
	payload = {"output": result.text, "symbols": result.symbols}
	return _emit(args, exit_code, payload, result.diagnostics, result.text)


def _cmd_scan(args: argparse.Namespace) -> int:
	names = panicking_functions(_read(args.source))
	exit_code = 1 if names else 0
	return _emit(args, exit_code, {"functions": names}, [], "\n".join(names))


def _cmd_check(args: argparse.Namespace) -> int:
	path = _file_label(args.source)
	result = expand_source(_read(args.source), _config(args), file=path)
	if not result.ok:
		return _emit(args, 1, {"functions": []}, result.diagnostics, "")
	name = args.name or (Path(args.source).stem if path else "main")
	try:
		checked = check_program(name, result.text, rustc=args.rustc, opt_level=args.opt_level)
	except OracleError as exc:
		diag = Diagnostic(message=str(exc), phase="oracle", notes=[exc.stderr] if exc.stderr else [])
		return _emit(args, 2, {"functions": []}, [diag], "")
	diags = [
		Diagnostic(message=f"function `{fn}` may panic", phase="oracle")
		for fn in checked.functions
	]
	exit_code = 1 if checked.functions else 0
	return _emit(args, exit_code, {"functions": checked.functions}, diags, "")


def _add_json(parser: argparse.ArgumentParser) -> None:
	parser.add_argument("--json", action="store_true", help="Emit a JSON object with exit_code and diagnostics")


def _add_expand_options(parser: argparse.ArgumentParser) -> None:
	parser.add_argument(
		"--encoding",
		choices=[e.value for e in SymbolEncoding],
		default=SymbolEncoding.LINK_NAME.value,
		help="How the diagnostic symbol names the function (default: link-name)",
	)
	parser.add_argument("--no-inline", action="store_true", help="Do not add #[inline]")
	parser.add_argument(
		"--legacy-extern",
		action="store_true",
		help="Emit `extern \"C\"` instead of `unsafe extern \"C\"` (rustc < 1.82)",
	)


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="nopanic", description="Prove Rust functions cannot panic, at link time")
	parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
	sub = parser.add_subparsers(dest="command", required=True)

	p = sub.add_parser("expand", help="Expand one attributed function")
	p.add_argument("source", help="File holding the function item, or - for stdin")
	p.add_argument(
		"--attr",
		choices=[v.value for v in Variant],
		default=Variant.NO_PANIC.value,
		help="Which attribute to expand (default: no_panic)",
	)
	p.add_argument("--args", default="", help="Attribute argument tokens (must be empty)")
	p.add_argument("--rustc", help="Detect toolchain-dependent options from this rustc")
	_add_expand_options(p)
	_add_json(p)
	p.set_defaults(func=_cmd_expand)

	p = sub.add_parser("preprocess", help="Expand every attributed item in a source file")
	p.add_argument("source", help="Rust source file, or - for stdin")
	p.add_argument("--rustc", help="Detect toolchain-dependent options from this rustc")
	_add_expand_options(p)
	_add_json(p)
	p.set_defaults(func=_cmd_preprocess)

	p = sub.add_parser("scan", help="List functions named in linker or assembly output")
	p.add_argument("source", help="Linker/asm output file, or - for stdin")
	_add_json(p)
	p.set_defaults(func=_cmd_scan)

	p = sub.add_parser("check", help="Preprocess, compile with optimizations and report panicking functions")
	p.add_argument("source", help="Rust source file with a `main`, or - for stdin")
	p.add_argument("--name", help="Crate name (default: file stem)")
	p.add_argument("--rustc", default="rustc", help="rustc to run (default: rustc)")
	p.add_argument("--opt-level", type=int, default=3, help="Optimization level (default: 3)")
	_add_expand_options(p)
	_add_json(p)
	p.set_defaults(func=_cmd_check)

	return parser


def main(argv: Optional[List[str]] = None) -> int:
	"""
	Run one subcommand. Exit codes: 0 clean, 1 rejected input or panicking
	functions found, 2 the compiler could not be run.
	"""
	parser = build_parser()
	args = parser.parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(name)s: %(levelname)s: %(message)s",
	)
	logger.debug("command %s", args.command)
	try:
		return args.func(args)
	except OSError as exc:
		diag = Diagnostic(message=str(exc), phase="io")
		return _emit(args, 2, {}, [diag], "")


__all__ = ["build_parser", "main"]
