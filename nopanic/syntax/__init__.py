# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rust surface syntax: lark-based token-tree lexer, function-item parser and
the closed AST the expander rewrites.
"""

__all__ = []
