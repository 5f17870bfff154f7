# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
The link-time oracle contract.

An instrumented function references one external symbol that nothing defines.
If the optimizer proves the function cannot unwind, the reference is deleted
and the build links. If not, the reference survives and the linker (or the
emitted assembly) names the symbol, and the symbol names the function.

This module owns both directions of that mapping plus a thin `rustc` driver
for harnesses that want to ask the question directly:

  link_message / mangled_symbol    function name -> symbol
  panicking_functions              linker/asm text -> function names
  check_program                    source -> compile with optimizations -> names
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from nopanic.config import SymbolEncoding

logger = logging.getLogger(__name__)

MARKER = "detected panic in function"
MANGLED_MARKER = "RUST_PANIC_IN_FUNCTION"
_MANGLED_PREFIX = "_Z22RUST_PANIC_IN_FUNCTIONI"

_LINK_NAME_RE = re.compile(r"detected panic in function `([^`]+)`")
_MANGLED_RE = re.compile(r"_Z22RUST_PANIC_IN_FUNCTIONI(\d+)")


class OracleError(RuntimeError):
	"""The compiler could not be run, or failed for a reason other than the marker."""

	def __init__(self, message: str, *, stderr: str = "") -> None:
		super().__init__(message)
		self.stderr = stderr


def link_message(name: str) -> str:
	"""The `link_name` string that identifies `name` in a link failure."""
	return f"\n\nERROR[no-panic]: {MARKER} `{name}`\n"


def mangled_symbol(name: str) -> str:
	"""Itanium-style symbol `_Z22RUST_PANIC_IN_FUNCTIONI<len><name>E` (len in UTF-8 bytes)."""
	return f"{_MANGLED_PREFIX}{len(name.encode('utf-8'))}{name}E"


def marker_symbol(name: str, encoding: SymbolEncoding) -> str:
	if encoding is SymbolEncoding.MANGLED:
		return mangled_symbol(name)
	return link_message(name)


def contains_panic(text: str) -> bool:
	"""True if linker output or assembly still references a diagnostic symbol."""
	return MARKER in text or MANGLED_MARKER in text


def panicking_functions(text: str) -> List[str]:
	"""Function names recovered from diagnostic symbols in `text`, first-seen order."""
	found: List[tuple[int, str]] = []
	for match in _LINK_NAME_RE.finditer(text):
		found.append((match.start(), match.group(1)))
	for match in _MANGLED_RE.finditer(text):
		length = int(match.group(1))
		start = match.end()
		raw = text[start:].encode("utf-8")[:length]
		try:
			name = raw.decode("utf-8")
		except UnicodeDecodeError:
			continue
		if text[start + len(name):start + len(name) + 1] == "E":
			found.append((match.start(), name))
	names: List[str] = []
	for _, name in sorted(found):
		if name not in names:
			names.append(name)
	return names


def function_from_marker(text: str) -> Optional[str]:
	"""The first function named in `text`, if any."""
	names = panicking_functions(text)
	return names[0] if names else None


@dataclass
class CheckResult:
	"""Outcome of compiling one program and scanning its output."""

	name: str
	functions: List[str] = field(default_factory=list)
	output: str = ""

	@property
	def contains_panic(self) -> bool:
		return bool(self.functions) or contains_panic(self.output)


def find_rustc(rustc: Optional[str] = None) -> str:
	path = shutil.which(rustc or "rustc")
	if path is None:
		raise OracleError(f"rustc not available: {rustc or 'rustc'}")
	return path


def _rustc(compiler: str, name: str, rs: Path, out_dir: Path, opt_level: int, emit: str, extra_args: Sequence[str]) -> None:
	cmd = [
		compiler,
		"--crate-name",
		name,
		"--crate-type",
		"bin",
		"--edition",
		"2021",
		"-C",
		f"opt-level={opt_level}",
		f"--emit={emit}",
		"--out-dir",
		str(out_dir),
		*extra_args,
		str(rs),
	]
	logger.debug("running %s", " ".join(cmd))
	res = subprocess.run(cmd, capture_output=True, text=True)
	if res.returncode != 0:
		raise OracleError(f"rustc failed for {name}", stderr=res.stderr)


def compile_to_asm(
	name: str,
	source: str,
	*,
	rustc: Optional[str] = None,
	opt_level: int = 3,
	extra_args: Sequence[str] = (),
) -> str:
	"""
	Compile `source` as crate `name` with `--emit=asm` and return the assembly.

	The source must already be expanded; see `nopanic.preprocess`.
	"""
	compiler = find_rustc(rustc)
	with tempfile.TemporaryDirectory(prefix="nopanic-") as tmp:
		tmpdir = Path(tmp)
		rs = tmpdir / f"{name}.rs"
		rs.write_text(source)
		_rustc(compiler, name, rs, tmpdir, opt_level, "asm", extra_args)
		return (tmpdir / f"{name}.s").read_text()


@dataclass
class RunResult:
	"""Exit status and output of one built program."""

	name: str
	returncode: int
	stdout: str = ""
	stderr: str = ""


def run_program(
	name: str,
	source: str,
	*,
	rustc: Optional[str] = None,
	opt_level: int = 3,
	extra_args: Sequence[str] = (),
	timeout: float = 60.0,
) -> RunResult:
	"""
	Build `source` into an executable, run it and capture its output.

	A `#[no_panic]` function whose marker survives fails to link, which raises
	`OracleError` like any other compiler failure. A non-zero exit of the
	program itself is reported in `returncode`.
	"""
	compiler = find_rustc(rustc)
	with tempfile.TemporaryDirectory(prefix="nopanic-") as tmp:
		tmpdir = Path(tmp)
		rs = tmpdir / f"{name}.rs"
		rs.write_text(source)
		_rustc(compiler, name, rs, tmpdir, opt_level, "link", extra_args)
		exe = tmpdir / name
		if not exe.exists():
			exe = tmpdir / f"{name}.exe"
		logger.debug("running %s", exe)
		res = subprocess.run([str(exe)], capture_output=True, text=True, timeout=timeout)
		return RunResult(name=name, returncode=res.returncode, stdout=res.stdout, stderr=res.stderr)


def check_program(
	name: str,
	source: str,
	*,
	rustc: Optional[str] = None,
	opt_level: int = 3,
	extra_args: Sequence[str] = (),
) -> CheckResult:
	"""Compile an expanded program and report which functions kept their marker."""
	asm = compile_to_asm(name, source, rustc=rustc, opt_level=opt_level, extra_args=extra_args)
	result = CheckResult(name=name, functions=panicking_functions(asm), output=asm)
	logger.debug("%s: panicking functions %s", name, result.functions)
	return result


__all__ = [
	"CheckResult",
	"MANGLED_MARKER",
	"MARKER",
	"OracleError",
	"RunResult",
	"check_program",
	"compile_to_asm",
	"contains_panic",
	"find_rustc",
	"function_from_marker",
	"link_message",
	"mangled_symbol",
	"marker_symbol",
	"panicking_functions",
	"run_program",
]
