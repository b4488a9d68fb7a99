"""Response mapping rules: status code selectors to exit codes and messages.

A mapping specification is a semicolon-separated list of entries::

    CODE=EXIT_CODE[:TEMPLATE];CODE=EXIT_CODE[:TEMPLATE];...

CODE is a numeric HTTP status code or one of the class wildcards 2XX, 4XX
and 5XX. TEMPLATE is a message template (see rci.template).
"""

import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from rci.template import PathTemplate, TemplateSyntaxError, compile_template
from rci.utils.error import MappingSpecError
from rci.utils.exit_codes import is_valid_exit_code

logger = logging.getLogger(__name__)

ENTRY_SEPARATOR = ";"
INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class SelectorKind(Enum):
    EXACT = "exact"
    CLASS_2XX = "2XX"
    CLASS_4XX = "4XX"
    CLASS_5XX = "5XX"


# Status range covered by each class wildcard
CLASS_RANGES = {
    SelectorKind.CLASS_2XX: range(200, 300),
    SelectorKind.CLASS_4XX: range(400, 500),
    SelectorKind.CLASS_5XX: range(500, 600),
}


@dataclass(frozen=True)
class Selector:
    """Which status codes a rule applies to.

    Exact selectors keep the literal text they were written with: the status
    code is compared as a decimal string, so ``0404`` or ``+404`` never match
    a 404 response.
    """

    kind: SelectorKind
    text: str

    @classmethod
    def exact(cls, code: int) -> "Selector":
        return cls(SelectorKind.EXACT, str(code))

    @classmethod
    def parse(cls, text: str) -> "Selector":
        """Parse ``2XX``, ``4XX``, ``5XX`` or a decimal integer.

        Integers are not checked against real status ranges.

        Raises:
            ValueError: For anything else.
        """
        for kind in CLASS_RANGES:
            if text == kind.value:
                return cls(kind, text)
        if INTEGER_RE.fullmatch(text):
            return cls(SelectorKind.EXACT, text)
        raise ValueError(f"Invalid HTTP code: {text}")

    @classmethod
    def for_class(cls, status_code: int) -> "Selector | None":
        """Return the class wildcard covering status_code, if any."""
        for kind, codes in CLASS_RANGES.items():
            if status_code in codes:
                return cls(kind, kind.value)
        return None

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class MappingRule:
    """Exit code and optional message template for one selector."""

    exit_code: int
    template: PathTemplate | None = None


class MappingTable(Mapping):
    """Immutable selector -> rule table with priority lookup."""

    def __init__(self, rules: dict[Selector, MappingRule] | None = None):
        self._rules = MappingProxyType(dict(rules or {}))

    def __getitem__(self, key: Selector | str) -> MappingRule:
        if isinstance(key, str):
            key = Selector.parse(key)
        return self._rules[key]

    def __contains__(self, key: object) -> bool:
        try:
            self[key]
        except (KeyError, ValueError, TypeError):
            return False
        return True

    def __iter__(self) -> Iterator[Selector]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        rules = {str(s): r for s, r in self._rules.items()}
        return f"MappingTable({rules!r})"

    def candidates(self, status_code: int) -> list[Selector]:
        """Selectors that could apply to status_code, highest priority first."""
        selectors = [Selector.exact(status_code)]
        wildcard = Selector.for_class(status_code)
        if wildcard is not None:
            selectors.append(wildcard)
        return selectors

    def lookup(self, status_code: int) -> tuple[Selector, MappingRule] | None:
        """Find the rule for status_code: exact match first, then class wildcard."""
        for selector in self.candidates(status_code):
            rule = self._rules.get(selector)
            if rule is not None:
                return selector, rule
        return None


def _parse_exit_code(entry: str, text: str) -> int:
    if not INTEGER_RE.fullmatch(text) or not is_valid_exit_code(int(text)):
        raise MappingSpecError(entry, f"Invalid exit code: {text}")
    return int(text)


def parse_entry(entry: str) -> tuple[Selector, MappingRule]:
    """Parse one ``CODE=EXIT_CODE[:TEMPLATE]`` entry.

    Raises:
        MappingSpecError: If any part of the entry is invalid.
    """
    code_text, sep, rest = entry.partition("=")
    if not sep:
        raise MappingSpecError(entry, "missing '='")

    try:
        selector = Selector.parse(code_text)
    except ValueError as e:
        raise MappingSpecError(entry, str(e))

    exit_code_text, sep, template_text = rest.partition(":")
    exit_code = _parse_exit_code(entry, exit_code_text)
    if not sep:
        return selector, MappingRule(exit_code)

    try:
        template = compile_template(template_text)
    except TemplateSyntaxError as e:
        raise MappingSpecError(
            entry, f"Cannot parse json path: {template_text}. Error: {e}"
        )
    return selector, MappingRule(exit_code, template)


def parse_mapping(spec: str) -> MappingTable:
    """Parse a full mapping specification into a MappingTable.

    An empty specification gives an empty table. A selector written twice
    with the same text keeps the last definition.

    Raises:
        MappingSpecError: On the first invalid entry; no partial table.
    """
    if spec == "":
        return MappingTable()

    rules = {}
    for entry in spec.split(ENTRY_SEPARATOR):
        selector, rule = parse_entry(entry)
        if selector in rules:
            logger.debug("Selector %s defined twice, keeping the last definition", selector)
        rules[selector] = rule
    return MappingTable(rules)
