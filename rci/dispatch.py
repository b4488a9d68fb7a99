"""Response classification: pick the mapping rule for a status code."""

import logging
from dataclasses import dataclass
from enum import Enum

from rci.mapping import MappingRule, MappingTable, Selector

logger = logging.getLogger(__name__)


class DispatchKind(Enum):
    RULE = "rule"
    NO_ACTION = "no_action"
    UNMAPPED = "unmapped"


@dataclass(frozen=True)
class DispatchResult:
    kind: DispatchKind
    selector: Selector | None = None
    rule: MappingRule | None = None


NO_ACTION = DispatchResult(DispatchKind.NO_ACTION)
UNMAPPED = DispatchResult(DispatchKind.UNMAPPED)


def dispatch(status_code: int, table: MappingTable) -> DispatchResult:
    """Select the rule that applies to status_code.

    An exact rule always wins over a class wildcard. Without a rule, 2xx
    codes are plain success (NO_ACTION) and every other code is UNMAPPED;
    1xx and 3xx codes have no wildcard.
    """
    found = table.lookup(status_code)
    if found is not None:
        selector, rule = found
        logger.debug("Status %d matched rule %s -> %d", status_code, selector, rule.exit_code)
        return DispatchResult(DispatchKind.RULE, selector, rule)

    if 200 <= status_code < 300:
        return NO_ACTION
    logger.debug("No rule for status %d", status_code)
    return UNMAPPED
