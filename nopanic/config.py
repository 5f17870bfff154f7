# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Expansion configuration.

`ExpandConfig` selects between the two attribute variants and the two symbol
encodings, and carries the toolchain-dependent switches. Library callers build
one directly; the CLI maps its flags onto it; `config_for_rustc` derives the
toolchain switches from `rustc --version`.
"""

from __future__ import annotations

import enum
import logging
import subprocess
from dataclasses import dataclass, replace
from typing import Optional

logger = logging.getLogger(__name__)

# `unsafe extern { .. }` blocks are accepted from this rustc minor version on.
UNSAFE_EXTERN_MIN_MINOR = 82


class Variant(enum.Enum):
	"""Which attribute is being expanded."""

	NO_PANIC = "no_panic"  # link-time proof obligation
	ABORT_ON_PANIC = "abort_on_panic"  # terminate the process on unwind

	@property
	def attr_name(self) -> str:
		return self.value


class SymbolEncoding(enum.Enum):
	"""How the diagnostic symbol names the function."""

	LINK_NAME = "link-name"  # #[link_name = "\n\nERROR[no-panic]: ..."]
	MANGLED = "mangled"  # _Z22RUST_PANIC_IN_FUNCTIONI<len><name>E


@dataclass(frozen=True)
class ExpandConfig:
	variant: Variant = Variant.NO_PANIC
	encoding: SymbolEncoding = SymbolEncoding.LINK_NAME
	# Add `#[inline]` unless the function already has an `inline` attribute.
	add_inline: bool = True
	# Emit `unsafe extern "C" { .. }` (rustc >= 1.82) instead of `extern "C" { .. }`.
	unsafe_extern_blocks: bool = True
	# Called from the guard's Drop in the abort variant.
	abort_path: str = "::std::process::abort"
	# Marker attribute that opts a function out of the abort guard.
	allow_panic_attr: str = "allow_panic"

	def with_variant(self, variant: Variant) -> "ExpandConfig":
		return replace(self, variant=variant)


def rustc_minor_version(rustc: str = "rustc") -> Optional[int]:
	"""
	Return the minor version of `rustc` (e.g. 82 for 1.82.0), or None.

	None means the compiler could not be run or printed something other than
	`rustc 1.<minor>...`.
	"""
	try:
		res = subprocess.run([rustc, "--version"], capture_output=True, text=True)
	except OSError as exc:
		logger.debug("could not run %s: %s", rustc, exc)
		return None
	if res.returncode != 0:
		return None
	pieces = res.stdout.strip().split(".")
	if len(pieces) < 2 or pieces[0] != "rustc 1":
		return None
	try:
		return int(pieces[1])
	except ValueError:
		return None


def config_for_rustc(rustc: str = "rustc", base: Optional[ExpandConfig] = None) -> ExpandConfig:
	"""Adjust `base` for the installed toolchain; unknown toolchains keep the defaults."""
	cfg = base if base is not None else ExpandConfig()
	minor = rustc_minor_version(rustc)
	if minor is None:
		return cfg
	logger.debug("rustc minor version %d", minor)
	return replace(cfg, unsafe_extern_blocks=minor >= UNSAFE_EXTERN_MIN_MINOR)


__all__ = [
	"ExpandConfig",
	"SymbolEncoding",
	"UNSAFE_EXTERN_MIN_MINOR",
	"Variant",
	"config_for_rustc",
	"rustc_minor_version",
]
