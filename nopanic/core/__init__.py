# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared core types: spans, diagnostics, fresh names."""

from .diagnostics import Diagnostic
from .fresh import FreshNames
from .span import Span

__all__ = ["Diagnostic", "FreshNames", "Span"]
