# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rust lexer: lark terminals folded into token trees.

`grammar.lark` only declares terminals; the LALR parser is never run. The flat
lark token stream goes through `TokenTreeBuilder`, which balances delimiters,
records punct glue (`joint`) from source adjacency, and rewrites doc comments
into `#[doc = "..."]` attributes the way rustc hands them to attribute macros.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from lark import Lark, Token
from lark.exceptions import UnexpectedCharacters

from nopanic.core.span import Span
from .tokens import Group, Ident, Lifetime, Literal, Punct, TokenTree, string_literal

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_LEXER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

_OPEN = {"LPAR": "(", "LSQB": "[", "LBRACE": "{"}
_CLOSE = {"RPAR": "(", "RSQB": "[", "RBRACE": "{"}
_LITERALS = {"CHAR", "STRING", "RAW_STRING", "NUMBER"}

_STRING_RE = re.compile(_LEXER.get_terminal("STRING").pattern.to_regexp())
_RAW_STRING_RE = re.compile(_LEXER.get_terminal("RAW_STRING").pattern.to_regexp())
_CHAR_RE = re.compile(_LEXER.get_terminal("CHAR").pattern.to_regexp())
_NON_NEWLINE_RE = re.compile(r"[^\n]")


class ParseError(ValueError):
	"""
	Error raised while lexing or parsing an annotated item.

	A `ValueError` subclass carrying a best-effort `span`, so the front door can
	convert it into a structured diagnostic instead of crashing.
	"""

	def __init__(self, message: str, *, span: Optional[Span] = None) -> None:
		super().__init__(message)
		self.span = span if span is not None else Span()


class TokenTreeBuilder:
	"""
	Fold a flat lark token stream into nested `Group`s.

	Keeps one open-delimiter stack per call; instances carry no state between
	calls to `build`.
	"""

	def __init__(self, *, file: Optional[str] = None) -> None:
		self.file = file

	def build(self, stream: Iterable[Token]) -> List[TokenTree]:
		raw = list(stream)
		root: List[TokenTree] = []
		stack: List[Tuple[str, Token, List[TokenTree]]] = []
		current = root
		for idx, tok in enumerate(raw):
			ttype = tok.type
			if ttype in _OPEN:
				stack.append((_OPEN[ttype], tok, current))
				current = []
				continue
			if ttype in _CLOSE:
				if not stack:
					raise ParseError(f"unexpected closing delimiter `{tok.value}`", span=self._span(tok))
				delimiter, open_tok, parent = stack.pop()
				if delimiter != _CLOSE[ttype]:
					raise ParseError(f"mismatched closing delimiter `{tok.value}`", span=self._span(tok))
				parent.append(Group(delimiter=delimiter, tokens=tuple(current), span=self._span(open_tok)))
				current = parent
				continue
			current.extend(self._leaf(tok, raw[idx + 1] if idx + 1 < len(raw) else None))
		if stack:
			_, open_tok, _ = stack[-1]
			raise ParseError(f"unclosed delimiter `{open_tok.value}`", span=self._span(open_tok))
		return root

	def _leaf(self, tok: Token, nxt: Optional[Token]) -> List[TokenTree]:
		span = self._span(tok)
		ttype = tok.type
		if ttype == "IDENT":
			return [Ident(tok.value, span=span)]
		if ttype == "LIFETIME":
			return [Lifetime(tok.value[1:], span=span)]
		if ttype in _LITERALS:
			return [Literal(tok.value, span=span)]
		if ttype == "PUNCT":
			joint = nxt is not None and nxt.type == "PUNCT" and nxt.start_pos == tok.end_pos
			return [Punct(tok.value, joint=joint, span=span)]
		if ttype == "OUTER_DOC":
			return self._doc_attr(tok.value[3:], inner=False, span=span)
		if ttype == "INNER_DOC":
			return self._doc_attr(tok.value[3:], inner=True, span=span)
		raise ParseError(f"unexpected token `{tok.value}`", span=span)

	@staticmethod
	def _doc_attr(text: str, *, inner: bool, span: Span) -> List[TokenTree]:
		body = Group(
			delimiter="[",
			tokens=(Ident("doc", span=span), Punct("=", span=span), string_literal(text)),
			span=span,
		)
		if inner:
			return [Punct("#", span=span), Punct("!", span=span), body]
		return [Punct("#", span=span), body]

	def _span(self, tok: Token) -> Span:
		return Span.from_token(tok, file=self.file)


def blank_block_comments(source: str, *, file: Optional[str] = None) -> str:
	"""
	Replace every `/* .. */` comment, nested ones included, with spaces.

	Newlines inside a comment are kept so lark still reports source lines and
	columns. Strings, raw strings, chars and line comments are skipped over so
	a `/*` inside them is left alone.
	"""
	if "/*" not in source:
		return source
	pieces: List[str] = []
	last = 0
	i = 0
	n = len(source)
	while i < n:
		if source.startswith("//", i):
			end = source.find("\n", i)
			i = n if end < 0 else end
			continue
		if source.startswith("/*", i):
			start = i
			depth = 0
			while i < n:
				if source.startswith("/*", i):
					depth += 1
					i += 2
				elif source.startswith("*/", i):
					depth -= 1
					i += 2
					if depth == 0:
						break
				else:
					i += 1
			if depth:
				line = source.count("\n", 0, start) + 1
				column = start - source.rfind("\n", 0, start)
				raise ParseError("unterminated block comment", span=Span(file=file, line=line, column=column))
			pieces.append(source[last:start])
			pieces.append(_NON_NEWLINE_RE.sub(" ", source[start:i]))
			last = i
			continue
		match = _skip_literal(source, i)
		i = match if match is not None else i + 1
	pieces.append(source[last:])
	return "".join(pieces)


def _skip_literal(source: str, i: int) -> Optional[int]:
	ch = source[i]
	if ch == '"':
		m = _STRING_RE.match(source, i)
	elif ch == "'":
		m = _CHAR_RE.match(source, i)
	elif ch in "bcr" and (i == 0 or not (source[i - 1].isalnum() or source[i - 1] == "_")):
		m = _RAW_STRING_RE.match(source, i)
	else:
		return None
	return m.end() if m is not None else None


def lex(source: str, *, file: Optional[str] = None) -> List[TokenTree]:
	"""Lex Rust source into token trees."""
	try:
		stream = list(_LEXER.lex(blank_block_comments(source, file=file)))
	except UnexpectedCharacters as exc:
		ch = source[exc.pos_in_stream] if 0 <= exc.pos_in_stream < len(source) else "?"
		raise ParseError(
			f"unexpected character {ch!r}",
			span=Span(file=file, line=exc.line, column=exc.column),
		) from exc
	trees = TokenTreeBuilder(file=file).build(stream)
	logger.debug("lexed %d top-level token trees from %d tokens", len(trees), len(stream))
	return trees


@lru_cache(maxsize=None)
def _quote_cached(source: str) -> Tuple[TokenTree, ...]:
	return tuple(lex(source))


def quote(source: str) -> List[TokenTree]:
	"""
	Lex a fixed code template into fresh token trees.

	Templates are constants, so the lexed form is cached; callers get a new list
	each time and splice their own trees around it.
	"""
	return list(_quote_cached(source))


__all__ = ["ParseError", "TokenTreeBuilder", "blank_block_comments", "lex", "quote"]
