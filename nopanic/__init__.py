# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
nopanic: make "this function cannot panic" a link-time proof obligation.

`no_panic` and `abort_on_panic` expand one annotated Rust function item;
`nopanic.preprocess.expand_source` expands every attributed item in a file.
The CLI entrypoint is `nopanic.cli:main`.
"""

from nopanic.config import ExpandConfig, SymbolEncoding, Variant
from nopanic.frontdoor import Expansion, abort_on_panic, no_panic

__all__ = ["Expansion", "ExpandConfig", "SymbolEncoding", "Variant", "abort_on_panic", "no_panic"]
