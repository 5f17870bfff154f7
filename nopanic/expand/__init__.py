# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Expansion passes: signature normalization, `self` rebinding, `impl Trait`
erasure and sentinel injection.
"""

from .emitter import ExpandedFn, SentinelEmitter, expand_function

__all__ = ["ExpandedFn", "SentinelEmitter", "expand_function"]
