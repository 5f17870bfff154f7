# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Recursive-descent parser from token trees to `ast.ItemFn`.

The grammar covered is a Rust function item:

  attrs* vis? `const`? `async`? `unsafe`? (`extern` abi?)? `fn` ident generics?
  `(` params `)` (`->` type)? where_clause? block

Generics and where clauses are delimited but not interpreted. Parameter and
return types are parsed into the `Type` variants; a type the parser does not
model is kept as `TypeVerbatim` instead of failing the whole item.

Angle brackets are not token-tree groups, so every scan that walks across a
type tracks `<`/`>` depth by hand and ignores the `>` of a glued `->`.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from nopanic.core.span import Span
from .ast import (
	AngleBracketed,
	AssocArg,
	ConstArg,
	FnArg,
	GenericArgument,
	ItemFn,
	LifetimeArg,
	Parenthesized,
	Pat,
	PatIdent,
	PatVerbatim,
	Path,
	PathSegment,
	Receiver,
	Signature,
	TraitBound,
	Type,
	TypeArg,
	TypeArray,
	TypeBareFn,
	TypeImplTrait,
	TypeInfer,
	TypeMacro,
	TypeNever,
	TypeParamBound,
	TypeParen,
	TypePath,
	TypePtr,
	TypeReference,
	TypeSlice,
	TypeTraitObject,
	TypeTuple,
	TypeVerbatim,
	TypedArg,
	VerbatimBound,
)
from .lexer import ParseError, lex
from .tokens import (
	Group,
	Ident,
	Lifetime,
	Literal,
	Punct,
	TokenTree,
	is_group,
	is_ident,
	is_punct,
	is_punct_seq,
)

KEYWORDS = frozenset(
	{
		"as", "async", "await", "break", "const", "continue", "crate", "dyn",
		"else", "enum", "extern", "false", "fn", "for", "if", "impl", "in",
		"let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
		"self", "Self", "static", "struct", "super", "trait", "true", "type",
		"unsafe", "use", "where", "while",
		# reserved
		"abstract", "become", "box", "do", "final", "gen", "macro", "override",
		"priv", "try", "typeof", "unsized", "virtual", "yield",
	}
)

# Keywords that may still start or continue a path.
_PATH_KEYWORDS = frozenset({"self", "Self", "super", "crate"})


class _Cursor:
	"""Position within one token-tree level."""

	def __init__(self, tokens: Sequence[TokenTree], *, end_span: Optional[Span] = None) -> None:
		self.tokens = list(tokens)
		self.pos = 0
		self.end_span = end_span if end_span is not None else Span()

	def peek(self, k: int = 0) -> Optional[TokenTree]:
		idx = self.pos + k
		if idx < len(self.tokens):
			return self.tokens[idx]
		return None

	def bump(self) -> TokenTree:
		tok = self.peek()
		if tok is None:
			raise self.error("unexpected end of input")
		self.pos += 1
		return tok

	def at_end(self) -> bool:
		return self.pos >= len(self.tokens)

	def at_ident(self, name: str | None = None, k: int = 0) -> bool:
		return is_ident(self.peek(k), name)

	def at_punct(self, ch: str, k: int = 0) -> bool:
		return is_punct(self.peek(k), ch)

	def at_seq(self, text: str) -> bool:
		return is_punct_seq(self.tokens, self.pos, text)

	def at_colon(self) -> bool:
		"""A lone `:` (not the start of `::`)."""
		return self.at_punct(":") and not self.at_seq("::")

	def eat_ident(self, name: str) -> bool:
		if self.at_ident(name):
			self.pos += 1
			return True
		return False

	def eat_seq(self, text: str) -> bool:
		if self.at_seq(text):
			self.pos += len(text)
			return True
		return False

	def expect_seq(self, text: str) -> None:
		if not self.eat_seq(text):
			raise self.error(f"expected `{text}`")

	def slice(self, start: int) -> Tuple[TokenTree, ...]:
		return tuple(self.tokens[start:self.pos])

	def rest(self) -> Tuple[TokenTree, ...]:
		return tuple(self.tokens[self.pos:])

	def span(self) -> Span:
		tok = self.peek()
		if tok is None:
			return self.end_span
		return tok.span

	def error(self, message: str) -> ParseError:
		return ParseError(message, span=self.span())


def _closes_angle(tokens: Sequence[TokenTree], idx: int) -> bool:
	"""`tokens[idx]` is a `>` that is not the tail of a glued `->`."""
	if idx >= len(tokens) or not is_punct(tokens[idx], ">"):
		return False
	if idx > 0:
		prev = tokens[idx - 1]
		if isinstance(prev, Punct) and prev.joint and prev.ch in "-=":
			return False
	return True


def split_top_level(tokens: Sequence[TokenTree], sep: str = ",") -> List[Tuple[TokenTree, ...]]:
	"""
	Split a token list on `sep` puncts outside angle brackets.

	Empty trailing chunks (from a trailing separator) are dropped.
	"""
	chunks: List[Tuple[TokenTree, ...]] = []
	depth = 0
	start = 0
	for idx, tok in enumerate(tokens):
		if is_punct(tok, "<"):
			depth += 1
		elif _closes_angle(tokens, idx) and depth:
			depth -= 1
		elif depth == 0 and is_punct(tok, sep):
			chunks.append(tuple(tokens[start:idx]))
			start = idx + 1
	tail = tuple(tokens[start:])
	if tail:
		chunks.append(tail)
	return chunks


def _skip_angle(cur: _Cursor) -> None:
	"""Advance past a balanced `<...>` starting at the cursor."""
	if not cur.at_punct("<"):
		raise cur.error("expected `<`")
	depth = 0
	while True:
		if cur.at_end():
			raise cur.error("unclosed `<`")
		if cur.at_punct("<"):
			depth += 1
		elif _closes_angle(cur.tokens, cur.pos):
			depth -= 1
			if depth == 0:
				cur.pos += 1
				return
		cur.pos += 1


# Items ---------------------------------------------------------------------


def parse_outer_attrs(cur: _Cursor) -> Tuple[Tuple[TokenTree, ...], ...]:
	attrs: List[Tuple[TokenTree, ...]] = []
	while cur.at_punct("#"):
		if cur.at_punct("!", 1):
			raise cur.error("inner attribute is not permitted here")
		body = cur.peek(1)
		if not is_group(body, "["):
			raise cur.error("expected `[` after `#`")
		attrs.append((cur.bump(), cur.bump()))
	return tuple(attrs)


def _parse_visibility(cur: _Cursor) -> Tuple[TokenTree, ...]:
	if not cur.at_ident("pub"):
		return ()
	start = cur.pos
	cur.bump()
	restriction = cur.peek()
	if is_group(restriction, "(") and restriction.tokens:
		head = restriction.tokens[0]
		if is_ident(head) and head.name in ("crate", "self", "super", "in"):
			cur.bump()
	return cur.slice(start)


def parse_item_fn(tokens: Sequence[TokenTree], *, end_span: Optional[Span] = None) -> ItemFn:
	"""Parse a complete function item; the whole token list must be consumed."""
	cur = _Cursor(tokens, end_span=end_span)
	attrs = parse_outer_attrs(cur)
	vis = _parse_visibility(cur)
	constness = cur.eat_ident("const")
	asyncness = cur.bump() if cur.at_ident("async") else None
	unsafety = cur.eat_ident("unsafe")
	abi: Tuple[TokenTree, ...] = ()
	if cur.at_ident("extern"):
		start = cur.pos
		cur.bump()
		if isinstance(cur.peek(), Literal):
			cur.bump()
		abi = cur.slice(start)
	if not cur.eat_ident("fn"):
		raise cur.error("expected `fn`")
	ident = cur.peek()
	if not isinstance(ident, Ident) or ident.name in KEYWORDS:
		raise cur.error("expected identifier")
	cur.bump()

	generics: Tuple[TokenTree, ...] = ()
	if cur.at_punct("<"):
		start = cur.pos
		_skip_angle(cur)
		generics = cur.slice(start)

	params = cur.peek()
	if not is_group(params, "("):
		raise cur.error("expected parentheses")
	cur.bump()
	inputs = parse_fn_args(params)

	output: Optional[Type] = None
	if cur.eat_seq("->"):
		output = _parse_return_type(cur)

	where_clause: Tuple[TokenTree, ...] = ()
	if cur.at_ident("where"):
		start = cur.pos
		_skip_to_body(cur)
		where_clause = cur.slice(start)

	block = cur.peek()
	if not is_group(block, "{"):
		raise cur.error("expected curly braces")
	cur.bump()
	if not cur.at_end():
		raise cur.error("unexpected token")

	sig = Signature(
		ident=ident,
		inputs=inputs,
		output=output,
		generics=generics,
		where_clause=where_clause,
		constness=constness,
		asyncness=asyncness,  # type: ignore[arg-type]
		unsafety=unsafety,
		abi=abi,
	)
	return ItemFn(sig=sig, block=block, attrs=attrs, vis=vis)  # type: ignore[arg-type]


def _skip_to_body(cur: _Cursor) -> None:
	"""Advance to the `{` group that ends the signature (outside angle brackets)."""
	depth = 0
	while not cur.at_end():
		tok = cur.peek()
		if depth == 0 and is_group(tok, "{"):
			return
		if is_punct(tok, "<"):
			depth += 1
		elif _closes_angle(cur.tokens, cur.pos) and depth:
			depth -= 1
		cur.pos += 1


def _parse_return_type(cur: _Cursor) -> Type:
	start = cur.pos
	try:
		ty: Optional[Type] = parse_type(cur, allow_plus=True)
	except ParseError:
		ty = None
	if ty is not None and (cur.at_end() or cur.at_ident("where") or is_group(cur.peek(), "{")):
		return ty
	cur.pos = start
	depth = 0
	while not cur.at_end():
		tok = cur.peek()
		if depth == 0 and (is_group(tok, "{") or is_ident(tok, "where")):
			break
		if is_punct(tok, "<"):
			depth += 1
		elif _closes_angle(cur.tokens, cur.pos) and depth:
			depth -= 1
		cur.pos += 1
	if cur.pos == start:
		raise cur.error("expected type")
	return TypeVerbatim(cur.slice(start))


# Parameters ----------------------------------------------------------------


def parse_fn_args(params: Group) -> Tuple[FnArg, ...]:
	args: List[FnArg] = []
	for chunk in split_top_level(params.tokens):
		if not chunk:
			raise ParseError("expected parameter", span=params.span)
		args.append(_parse_fn_arg(chunk, params.span))
	receivers = [arg for arg in args if isinstance(arg, Receiver)]
	if receivers and not isinstance(args[0], Receiver):
		raise ParseError("unexpected `self` parameter in function", span=receivers[0].self_token.span)
	if len(receivers) > 1:
		raise ParseError("unexpected `self` parameter in function", span=receivers[1].self_token.span)
	return tuple(args)


def _parse_fn_arg(chunk: Sequence[TokenTree], end_span: Span) -> FnArg:
	cur = _Cursor(chunk, end_span=end_span)
	attrs = parse_outer_attrs(cur)
	after_attrs = cur.pos
	receiver = _try_receiver(cur, attrs)
	if receiver is not None:
		return receiver
	cur.pos = after_attrs
	if cur.at_seq("..."):
		raise cur.error("variadic parameters are not supported")
	start = cur.pos
	while not cur.at_end() and not cur.at_colon():
		if cur.at_seq("::"):
			cur.pos += 2
			continue
		cur.pos += 1
	if cur.at_end():
		raise cur.error("expected `:`")
	pat_tokens = cur.slice(start)
	if not pat_tokens:
		raise cur.error("expected pattern")
	cur.bump()
	ty = _parse_full_type(cur.rest(), end_span)
	return TypedArg(pat=classify_pattern(pat_tokens), ty=ty, attrs=attrs)


def _try_receiver(cur: _Cursor, attrs: Tuple[Tuple[TokenTree, ...], ...]) -> Optional[Receiver]:
	if cur.at_punct("&"):
		cur.bump()
		lifetime = cur.bump() if isinstance(cur.peek(), Lifetime) else None
		ref_mutable = cur.eat_ident("mut")
		if cur.at_ident("self") and cur.peek(1) is None:
			return Receiver(
				attrs=attrs,
				reference=True,
				lifetime=lifetime,  # type: ignore[arg-type]
				ref_mutable=ref_mutable,
				self_token=cur.bump(),  # type: ignore[arg-type]
			)
		return None
	mutable = cur.eat_ident("mut")
	if not cur.at_ident("self"):
		return None
	self_token = cur.bump()
	if cur.at_end():
		return Receiver(attrs=attrs, mutable=mutable, self_token=self_token)  # type: ignore[arg-type]
	if cur.at_colon():
		cur.bump()
		ty = _parse_full_type(cur.rest(), cur.end_span)
		return Receiver(attrs=attrs, mutable=mutable, ty=ty, self_token=self_token)  # type: ignore[arg-type]
	return None


def classify_pattern(tokens: Sequence[TokenTree]) -> Pat:
	"""Recognize plain binding patterns; everything else is `PatVerbatim`."""
	cur = _Cursor(tokens)
	by_ref = cur.eat_ident("ref")
	mutable = cur.eat_ident("mut")
	tok = cur.peek()
	if isinstance(tok, Ident) and tok.name != "_" and (tok.name not in KEYWORDS or tok.name == "self"):
		cur.bump()
		if cur.at_end():
			return PatIdent(ident=tok, by_ref=by_ref, mutable=mutable)
		if cur.at_punct("@") and cur.peek(1) is not None:
			cur.bump()
			return PatIdent(ident=tok, by_ref=by_ref, mutable=mutable, subpat=cur.rest())
	return PatVerbatim(tuple(tokens))


# Types ---------------------------------------------------------------------


def _parse_full_type(tokens: Sequence[TokenTree], end_span: Span) -> Type:
	"""Parse `tokens` as exactly one type, falling back to `TypeVerbatim`."""
	if not tokens:
		raise ParseError("expected type", span=end_span)
	cur = _Cursor(tokens, end_span=end_span)
	try:
		ty = parse_type(cur, allow_plus=True)
	except ParseError:
		return TypeVerbatim(tuple(tokens))
	if not cur.at_end():
		return TypeVerbatim(tuple(tokens))
	return ty


def _type_ident(tok: object) -> bool:
	return isinstance(tok, Ident) and (tok.name not in KEYWORDS or tok.name in _PATH_KEYWORDS)


def parse_type(cur: _Cursor, *, allow_plus: bool = True) -> Type:
	tok = cur.peek()
	if tok is None:
		raise cur.error("expected type")
	if is_group(tok, "("):
		cur.bump()
		return _paren_or_tuple(tok)  # type: ignore[arg-type]
	if is_group(tok, "["):
		cur.bump()
		return _array_or_slice(tok)  # type: ignore[arg-type]
	if is_punct(tok, "&"):
		cur.bump()
		lifetime = cur.bump() if isinstance(cur.peek(), Lifetime) else None
		mutable = cur.eat_ident("mut")
		elem = parse_type(cur, allow_plus=False)
		return TypeReference(elem=elem, lifetime=lifetime, mutable=mutable)  # type: ignore[arg-type]
	if is_punct(tok, "*"):
		cur.bump()
		if cur.eat_ident("mut"):
			mutable = True
		elif cur.eat_ident("const"):
			mutable = False
		else:
			raise cur.error("expected `mut` or `const` keyword in raw pointer type")
		return TypePtr(elem=parse_type(cur, allow_plus=False), mutable=mutable)
	if is_punct(tok, "!"):
		cur.bump()
		return TypeNever()
	if is_punct(tok, "<"):
		return _qualified_path(cur)
	if is_ident(tok, "_"):
		cur.bump()
		return TypeInfer()
	if is_ident(tok, "impl"):
		cur.bump()
		return TypeImplTrait(bounds=_parse_bounds(cur, allow_plus))
	if is_ident(tok, "dyn"):
		cur.bump()
		return TypeTraitObject(bounds=_parse_bounds(cur, allow_plus), dyn=True)
	if _starts_bare_fn(cur):
		return _bare_fn(cur)
	if is_ident(tok, "for"):
		return TypeTraitObject(bounds=_parse_bounds(cur, allow_plus), dyn=False)
	if _type_ident(tok) or cur.at_seq("::"):
		start = cur.pos
		path = _parse_path(cur)
		if cur.at_punct("!") and is_group(cur.peek(1)):
			cur.pos += 2
			return TypeMacro(cur.slice(start))
		if allow_plus and cur.at_punct("+"):
			cur.bump()
			rest = _parse_bounds(cur, allow_plus) if _bound_can_start(cur) else ()
			return TypeTraitObject(bounds=(TraitBound(path=path),) + rest, dyn=False)
		return TypePath(path=path)
	raise cur.error("expected type")


def _paren_or_tuple(paren: Group) -> Type:
	cur = _Cursor(paren.tokens, end_span=paren.span)
	if cur.at_end():
		return TypeTuple(())
	first = parse_type(cur, allow_plus=True)
	if cur.at_end():
		return TypeParen(first)
	elems = [first]
	while not cur.at_end():
		if not cur.at_punct(","):
			raise cur.error("expected `,`")
		cur.bump()
		if cur.at_end():
			break
		elems.append(parse_type(cur, allow_plus=True))
	return TypeTuple(tuple(elems))


def _array_or_slice(bracket: Group) -> Type:
	cur = _Cursor(bracket.tokens, end_span=bracket.span)
	elem = parse_type(cur, allow_plus=True)
	if cur.at_end():
		return TypeSlice(elem)
	if not cur.at_punct(";"):
		raise cur.error("expected `;`")
	cur.bump()
	if cur.at_end():
		raise cur.error("expected array length")
	return TypeArray(elem=elem, len_tokens=cur.rest())


def _qualified_path(cur: _Cursor) -> Type:
	start = cur.pos
	_skip_angle(cur)
	qself = cur.slice(start)
	cur.expect_seq("::")
	return TypePath(path=_parse_path(cur, allow_leading=False), qself=qself)


def _starts_bare_fn(cur: _Cursor) -> bool:
	k = 0
	if cur.at_ident("for"):
		# for<'a> fn(..) vs for<'a> Trait
		ahead = _Cursor(cur.tokens[cur.pos:])
		ahead.bump()
		try:
			_skip_angle(ahead)
		except ParseError:
			return False
		k = ahead.pos
	if cur.at_ident("unsafe", k):
		k += 1
	if cur.at_ident("extern", k):
		k += 1
		if isinstance(cur.peek(k), Literal):
			k += 1
	return cur.at_ident("fn", k) and is_group(cur.peek(k + 1), "(")


def _bare_fn(cur: _Cursor) -> Type:
	start = cur.pos
	if cur.eat_ident("for"):
		_skip_angle(cur)
	cur.eat_ident("unsafe")
	if cur.eat_ident("extern") and isinstance(cur.peek(), Literal):
		cur.bump()
	if not cur.eat_ident("fn"):
		raise cur.error("expected `fn`")
	cur.bump()  # parameter group
	if cur.eat_seq("->"):
		parse_type(cur, allow_plus=False)
	return TypeBareFn(cur.slice(start))


def _parse_path(cur: _Cursor, *, allow_leading: bool = True) -> Path:
	leading = allow_leading and cur.eat_seq("::")
	segments: List[PathSegment] = []
	while True:
		tok = cur.peek()
		if not _type_ident(tok):
			raise cur.error("expected identifier")
		cur.bump()
		arguments = None
		if cur.at_seq("::") and cur.at_punct("<", 2):
			cur.pos += 2
			arguments = _parse_angle_args(cur, turbofish=True)
		elif cur.at_punct("<"):
			arguments = _parse_angle_args(cur, turbofish=False)
		elif is_group(cur.peek(), "("):
			inputs = cur.bump()
			output: Tuple[TokenTree, ...] = ()
			if cur.eat_seq("->"):
				out_start = cur.pos
				parse_type(cur, allow_plus=False)
				output = cur.slice(out_start)
			arguments = Parenthesized(inputs=inputs, output=output)  # type: ignore[arg-type]
		segments.append(PathSegment(ident=tok, arguments=arguments))  # type: ignore[arg-type]
		if cur.at_seq("::") and _type_ident(cur.peek(2)):
			cur.pos += 2
			continue
		return Path(segments=tuple(segments), leading_colon=leading)


def _parse_angle_args(cur: _Cursor, *, turbofish: bool) -> AngleBracketed:
	if not cur.at_punct("<"):
		raise cur.error("expected `<`")
	cur.bump()
	args: List[GenericArgument] = []
	while True:
		if cur.at_end():
			raise cur.error("expected `>`")
		if _closes_angle(cur.tokens, cur.pos):
			cur.bump()
			return AngleBracketed(args=tuple(args), turbofish=turbofish)
		args.append(_parse_generic_arg(cur))
		if cur.at_punct(","):
			cur.bump()
		elif not _closes_angle(cur.tokens, cur.pos):
			raise cur.error("expected `,` or `>`")


def _parse_generic_arg(cur: _Cursor) -> GenericArgument:
	tok = cur.peek()
	if isinstance(tok, Lifetime):
		cur.bump()
		return LifetimeArg(tok)
	if isinstance(tok, Literal) or is_group(tok, "{"):
		cur.bump()
		return ConstArg((tok,))  # type: ignore[arg-type]
	if is_punct(tok, "-") and isinstance(cur.peek(1), Literal):
		cur.pos += 2
		return ConstArg(cur.slice(cur.pos - 2))
	if isinstance(tok, Ident) and (
		(cur.at_punct("=", 1) and not is_punct_seq(cur.tokens, cur.pos + 1, "=="))
		or (cur.at_punct(":", 1) and not is_punct_seq(cur.tokens, cur.pos + 1, "::"))
	):
		start = cur.pos
		depth = 0
		while not cur.at_end():
			if cur.at_punct("<"):
				depth += 1
			elif _closes_angle(cur.tokens, cur.pos):
				if depth == 0:
					break
				depth -= 1
			elif depth == 0 and cur.at_punct(","):
				break
			cur.pos += 1
		return AssocArg(cur.slice(start))
	return TypeArg(parse_type(cur, allow_plus=True))


def _bound_can_start(cur: _Cursor) -> bool:
	tok = cur.peek()
	if tok is None:
		return False
	if isinstance(tok, Lifetime) or is_group(tok, "("):
		return True
	if is_punct(tok, "?") or is_punct(tok, "~") or cur.at_seq("::"):
		return True
	return _type_ident(tok) or is_ident(tok, "for") or is_ident(tok, "use") or is_ident(tok, "const") or is_ident(tok, "async")


def _parse_bounds(cur: _Cursor, allow_plus: bool) -> Tuple[TypeParamBound, ...]:
	bounds: List[TypeParamBound] = [_parse_bound(cur)]
	while allow_plus and cur.at_punct("+"):
		cur.bump()
		if not _bound_can_start(cur):
			break
		bounds.append(_parse_bound(cur))
	return tuple(bounds)


def _parse_bound(cur: _Cursor) -> TypeParamBound:
	tok = cur.peek()
	if isinstance(tok, Lifetime):
		cur.bump()
		return VerbatimBound((tok,))
	if is_ident(tok, "use") and cur.at_punct("<", 1):
		start = cur.pos
		cur.bump()
		_skip_angle(cur)
		return VerbatimBound(cur.slice(start))
	if is_group(tok, "("):
		cur.bump()
		inner = _Cursor(tok.tokens, end_span=tok.span)  # type: ignore[union-attr]
		bound = _parse_trait_bound(inner)
		if not inner.at_end():
			raise inner.error("unexpected token")
		return TraitBound(path=bound.path, modifiers=bound.modifiers, paren=True)
	return _parse_trait_bound(cur)


def _parse_trait_bound(cur: _Cursor) -> TraitBound:
	start = cur.pos
	if cur.at_ident("for") and cur.at_punct("<", 1):
		cur.bump()
		_skip_angle(cur)
	if cur.at_punct("~") and cur.at_ident("const", 1):
		cur.pos += 2
	elif cur.at_ident("const") or cur.at_ident("async"):
		cur.bump()
	if cur.at_punct("?"):
		cur.bump()
	modifiers = cur.slice(start)
	return TraitBound(path=_parse_path(cur), modifiers=modifiers)


# Entry points --------------------------------------------------------------


def parse_item_fn_source(source: str, *, file: Optional[str] = None) -> ItemFn:
	"""Lex and parse one function item from source text."""
	return parse_item_fn(lex(source, file=file), end_span=Span(file=file))


def parse_type_source(source: str) -> Type:
	"""Parse exactly one type from source text (no verbatim fallback)."""
	cur = _Cursor(lex(source))
	ty = parse_type(cur, allow_plus=True)
	if not cur.at_end():
		raise cur.error("unexpected token")
	return ty


__all__ = [
	"KEYWORDS",
	"classify_pattern",
	"parse_fn_args",
	"parse_item_fn",
	"parse_item_fn_source",
	"parse_outer_attrs",
	"parse_type",
	"parse_type_source",
	"split_top_level",
]
