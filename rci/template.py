"""Message templates with embedded JSONPath expressions.

A template is free text with ``{...}``-enclosed actions, following the
Kubernetes jsonpath template syntax::

    "{.error.code}: {.error.message}"
    "failed jobs: {.jobs[*].name}"
    "{.status}{\"\\n\"}"
    "{range .items[*]}{.name}={.state} {end}"

Expressions are evaluated against the decoded JSON response body as the
root document. A leading ``$`` is optional. A double-quoted string inside
braces is emitted literally (JSON escapes are honoured).

``{range PATH}...{end}`` renders its body once per match of PATH, with
the matched value as the document for expressions inside the body. A range
whose path matches nothing renders nothing.
"""

import json
from dataclasses import dataclass
from typing import Any

from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.ext import parse as parse_jsonpath

RANGE_KEYWORD = "range"
END_KEYWORD = "end"


class TemplateSyntaxError(ValueError):
    """The template text does not follow the template grammar."""


class TemplateRenderError(LookupError):
    """An expression could not be resolved against the document."""


@dataclass(frozen=True)
class Literal:
    text: str

    def render(self, document: Any) -> str:
        return self.text


@dataclass(frozen=True)
class Expression:
    source: str
    path: Any

    def find(self, document: Any) -> list:
        try:
            return [match.value for match in self.path.find(document)]
        except (TypeError, KeyError, AttributeError, ValueError) as e:
            raise TemplateRenderError(f"{self.source}: {e}")

    def render(self, document: Any) -> str:
        values = self.find(document)
        if not values:
            raise TemplateRenderError(f"{self.source} is not found")
        return " ".join(format_value(value) for value in values)


@dataclass(frozen=True)
class Range:
    """A ``{range PATH}...{end}`` block."""

    over: Expression
    body: tuple

    def render(self, document: Any) -> str:
        return "".join(
            _render_segments(self.body, item) for item in self.over.find(document)
        )


def format_value(value: Any) -> str:
    """Render a matched JSON value as text.

    Strings are emitted as-is, everything else as compact JSON.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _render_segments(segments, document: Any) -> str:
    return "".join(segment.render(document) for segment in segments)


def _has_top_level_space(expr: str) -> bool:
    """True if expr has whitespace outside brackets and quoted strings."""
    depth = 0
    quote = None
    i = 0
    while i < len(expr):
        ch = expr[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch in "[(":
            depth += 1
        elif ch in "])":
            depth -= 1
        elif ch.isspace() and depth == 0:
            return True
        i += 1
    return False


def _compile_path(source: str, expr: str) -> Expression:
    if _has_top_level_space(expr):
        raise TemplateSyntaxError(f"unexpected whitespace in expression {{{source}}}")

    if expr.startswith("$"):
        path_text = expr
    elif expr.startswith((".", "[")):
        path_text = "$" + expr
    else:
        path_text = "$." + expr

    try:
        path = parse_jsonpath(path_text)
    except (JsonPathLexerError, JsonPathParserError) as e:
        raise TemplateSyntaxError(f"invalid expression {{{source}}}: {e}")
    return Expression(source, path)


def _compile_string(expr: str) -> Literal:
    try:
        text = json.loads(expr)
    except json.JSONDecodeError as e:
        raise TemplateSyntaxError(f"invalid string literal {expr}: {e}")
    if not isinstance(text, str):
        raise TemplateSyntaxError(f"invalid string literal {expr}")
    return Literal(text)


def _find_closing_brace(text: str, start: int) -> int:
    """Return the index of the brace closing the action opened before start.

    Braces inside quoted strings do not count. Returns -1 if unclosed.
    """
    quote = None
    i = start
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == "}":
            return i
        i += 1
    return -1


def _split_actions(text: str):
    """Yield ("text", literal) and ("action", source) pieces of text."""
    literal = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "{":
            literal.append(ch)
            i += 1
            continue

        end = _find_closing_brace(text, i + 1)
        if end == -1:
            raise TemplateSyntaxError(f"unclosed action at position {i}")
        if literal:
            yield "text", "".join(literal)
            literal = []
        yield "action", text[i + 1 : end]
        i = end + 1

    if literal:
        yield "text", "".join(literal)


class PathTemplate:
    """A compiled message template."""

    def __init__(self, source: str, segments: list):
        self.source = source
        self.segments = tuple(segments)

    def __repr__(self) -> str:
        return f"PathTemplate({self.source!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathTemplate):
            return NotImplemented
        return self.source == other.source

    def __hash__(self) -> int:
        return hash(self.source)

    def render(self, document: Any) -> str:
        """Evaluate the template with document as the root.

        Raises:
            TemplateRenderError: If any expression has no match.
        """
        return _render_segments(self.segments, document)


def compile_template(text: str) -> PathTemplate:
    """Split text into literal, expression and range segments and compile them.

    Raises:
        TemplateSyntaxError: On an unclosed ``{``, an empty ``{}``, an
            unbalanced ``range``/``end``, whitespace inside a path, or an
            expression jsonpath-ng cannot parse.
    """
    # Open ranges: (action source, compiled path, enclosing segments)
    stack = []
    segments = []

    for kind, piece in _split_actions(text):
        if kind == "text":
            segments.append(Literal(piece))
            continue

        expr = piece.strip()
        keyword, _, argument = expr.replace("\t", " ").partition(" ")
        if not expr:
            raise TemplateSyntaxError("empty expression {}")
        elif expr.startswith('"'):
            segments.append(_compile_string(expr))
        elif keyword == RANGE_KEYWORD:
            argument = argument.strip()
            if not argument:
                raise TemplateSyntaxError("range requires a path: {range PATH}")
            stack.append((piece, _compile_path(piece, argument), segments))
            segments = []
        elif expr == END_KEYWORD:
            if not stack:
                raise TemplateSyntaxError("{end} without a matching {range}")
            _, over, outer = stack.pop()
            outer.append(Range(over, tuple(segments)))
            segments = outer
        else:
            segments.append(_compile_path(piece, expr))

    if stack:
        raise TemplateSyntaxError(f"{{{stack[-1][0]}}} is not closed by {{end}}")
    return PathTemplate(text, segments)
