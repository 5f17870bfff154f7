# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Token trees for Rust source fragments.

The shapes mirror a procedural-macro token stream:

  Ident     identifiers and keywords (`fn`, `self`, `r#type`)
  Lifetime  `'a` (kept as one token so it never splits from its quote)
  Literal   numbers, strings, chars (verbatim source text)
  Punct     one punctuation character; `joint` marks "the next token is a
            punct glued to this one" (`->`, `::`, `>>=`)
  Group     a delimited subtree: `(..)`, `[..]` or `{..}`

Rendering follows the proc-macro convention: one space between tokens, no
space after a joint punct, groups printed as `open + inner + close` with
braces padded (`{ x }`, `{ }`). The output is deterministic and re-lexes to
the same trees.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, List, Sequence, Tuple, Union

from nopanic.core.span import Span

_CLOSE = {"(": ")", "[": "]", "{": "}"}


@dataclass(frozen=True)
class Ident:
	name: str
	span: Span = field(default=Span(), compare=False)


@dataclass(frozen=True)
class Lifetime:
	name: str  # without the leading quote
	span: Span = field(default=Span(), compare=False)


@dataclass(frozen=True)
class Literal:
	text: str
	span: Span = field(default=Span(), compare=False)


@dataclass(frozen=True)
class Punct:
	ch: str
	joint: bool = False
	span: Span = field(default=Span(), compare=False)


@dataclass(frozen=True)
class Group:
	delimiter: str  # one of "(", "[", "{"
	tokens: Tuple["TokenTree", ...] = ()
	span: Span = field(default=Span(), compare=False)


TokenTree = Union[Ident, Lifetime, Literal, Punct, Group]


def group(delimiter: str, tokens: Iterable[TokenTree] = ()) -> Group:
	if delimiter not in _CLOSE:
		raise ValueError(f"unknown delimiter {delimiter!r}")
	return Group(delimiter=delimiter, tokens=tuple(tokens))


def puncts(text: str) -> List[Punct]:
	"""Build a glued punctuation sequence, e.g. `puncts("::")`."""
	out = [Punct(ch, joint=True) for ch in text]
	out[-1] = Punct(text[-1], joint=False)
	return out


def detach(tokens: Sequence[TokenTree]) -> List[TokenTree]:
	"""
	Copy a token slice cut out of a longer stream.

	A trailing punct may have been glued to whatever followed it in the source;
	once the slice moves, that glue must go.
	"""
	out = list(tokens)
	if out and isinstance(out[-1], Punct) and out[-1].joint:
		out[-1] = replace(out[-1], joint=False)
	return out


def string_literal(value: str) -> Literal:
	"""Build a Rust string literal with proc-macro style escapes."""
	parts: List[str] = ['"']
	for ch in value:
		if ch == "\\":
			parts.append("\\\\")
		elif ch == '"':
			parts.append('\\"')
		elif ch == "\n":
			parts.append("\\n")
		elif ch == "\r":
			parts.append("\\r")
		elif ch == "\t":
			parts.append("\\t")
		elif ch == "\0":
			parts.append("\\0")
		elif ord(ch) < 0x20 or ord(ch) == 0x7F:
			parts.append(f"\\u{{{ord(ch):x}}}")
		else:
			parts.append(ch)
	parts.append('"')
	return Literal("".join(parts))


def is_ident(tok: object, name: str | None = None) -> bool:
	return isinstance(tok, Ident) and (name is None or tok.name == name)


def is_punct(tok: object, ch: str | None = None) -> bool:
	return isinstance(tok, Punct) and (ch is None or tok.ch == ch)


def is_group(tok: object, delimiter: str | None = None) -> bool:
	return isinstance(tok, Group) and (delimiter is None or tok.delimiter == delimiter)


def is_punct_seq(tokens: Sequence[TokenTree], pos: int, text: str) -> bool:
	"""True if `tokens[pos:]` starts with the glued punct sequence `text`."""
	for offset, ch in enumerate(text):
		idx = pos + offset
		if idx >= len(tokens):
			return False
		tok = tokens[idx]
		if not isinstance(tok, Punct) or tok.ch != ch:
			return False
		if offset < len(text) - 1 and not tok.joint:
			return False
	return True


def render_token(tok: TokenTree) -> str:
	if isinstance(tok, Ident):
		return tok.name
	if isinstance(tok, Lifetime):
		return "'" + tok.name
	if isinstance(tok, Literal):
		return tok.text
	if isinstance(tok, Punct):
		return tok.ch
	if isinstance(tok, Group):
		inner = render_tokens(tok.tokens)
		if tok.delimiter == "{":
			return "{ " + inner + " }" if inner else "{ }"
		return tok.delimiter + inner + _CLOSE[tok.delimiter]
	raise TypeError(f"not a token tree: {tok!r}")


def render_tokens(tokens: Iterable[TokenTree]) -> str:
	"""Render token trees with proc-macro spacing."""
	out: List[str] = []
	prev: TokenTree | None = None
	for tok in tokens:
		if prev is not None and not (isinstance(prev, Punct) and prev.joint):
			out.append(" ")
		out.append(render_token(tok))
		prev = tok
	return "".join(out)


def contains_ident(tokens: Iterable[TokenTree], name: str) -> bool:
	"""Search `tokens` (and every nested group) for the identifier `name`."""
	for tok in tokens:
		if isinstance(tok, Ident) and tok.name == name:
			return True
		if isinstance(tok, Group) and contains_ident(tok.tokens, name):
			return True
	return False


__all__ = [
	"Group",
	"Ident",
	"Lifetime",
	"Literal",
	"Punct",
	"TokenTree",
	"contains_ident",
	"detach",
	"group",
	"is_group",
	"is_ident",
	"is_punct",
	"is_punct_seq",
	"puncts",
	"render_token",
	"render_tokens",
	"string_literal",
]
