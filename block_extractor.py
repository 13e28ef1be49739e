"""
Block extraction: groups the lines of a C function body into basic blocks.

This is a line-oriented heuristic, not a C parser. Every non-blank line is
trimmed and run through an ordered list of rules; the first rule whose
predicate matches decides what happens to the line. The scan is a fold over
the lines carrying a ScanState, so nothing outlives a single call.
"""

import logging
import re
from functools import reduce
from typing import Callable, List, NamedTuple, Optional, Tuple

from config import Settings, get_settings
from models import BlockKind, CFGNode, ENTRY_LABEL, EXIT_LABEL

logger = logging.getLogger(__name__)

IF_CONDITION = re.compile(r"if\s*\((.*?)\)")
ELSE_IF_CONDITION = re.compile(r"else if\s*\((.*?)\)")


class ScanState(NamedTuple):
    blocks: Tuple[CFGNode, ...]
    current: CFGNode
    next_id: int


class LineRule(NamedTuple):
    name: str
    matches: Callable[[str], bool]
    apply: Callable[[ScanState, str], ScanState]


# ========== State transitions ==========

def _open_block(state: ScanState) -> ScanState:
    """Replace the current block with a fresh, empty statement block"""
    fresh = CFGNode(id=state.next_id, lines=[], type=BlockKind.STATEMENT)
    return state._replace(current=fresh, next_id=state.next_id + 1)


def _append_line(state: ScanState, line: str) -> ScanState:
    current = state.current.model_copy(update={"lines": state.current.lines + [line]})
    return state._replace(current=current)


def _push_current(state: ScanState) -> ScanState:
    return state._replace(blocks=state.blocks + (state.current,))


def _push_current_if_nonempty(state: ScanState) -> ScanState:
    return _push_current(state) if state.current.lines else state


def _emit(state: ScanState, kind: BlockKind, lines: List[str], label: Optional[str]) -> ScanState:
    block = CFGNode(id=state.next_id, lines=lines, type=kind, label=label)
    return state._replace(blocks=state.blocks + (block,), next_id=state.next_id + 1)


def _emit_decision(state: ScanState, condition: str) -> ScanState:
    return _emit(state, BlockKind.DECISION, [condition], condition)


def _emit_exit(state: ScanState) -> ScanState:
    return _emit(state, BlockKind.EXIT, [], EXIT_LABEL)


def extract_condition(line: str, pattern: re.Pattern) -> str:
    """First parenthesized group after the keyword, or the whole line"""
    match = pattern.search(line)
    if match and match.group(1):
        return match.group(1)
    return line


# ========== Rule actions ==========

def _keep_line(state: ScanState, line: str) -> ScanState:
    return _append_line(state, line)


def _start_if(state: ScanState, line: str) -> ScanState:
    # The current block is closed even when empty; it then serves as the
    # True target of a directly preceding decision.
    state = _open_block(_push_current(state))
    state = _emit_decision(state, extract_condition(line, IF_CONDITION))
    return _open_block(state)


def _start_else_if(state: ScanState, line: str) -> ScanState:
    state = _push_current_if_nonempty(state)
    state = _emit_decision(state, extract_condition(line, ELSE_IF_CONDITION))
    return _open_block(state)


def _start_else(state: ScanState, line: str) -> ScanState:
    return _open_block(_push_current_if_nonempty(state))


def _close_with_return(state: ScanState, line: str) -> ScanState:
    state = _push_current(_append_line(state, line))
    return _open_block(_emit_exit(state))


def build_rules(settings: Settings) -> List[LineRule]:
    """Line rules in priority order"""
    markers = list(settings.signature_markers)
    declaration = re.compile(
        r"^(?:%s)\s" % "|".join(re.escape(kw) for kw in settings.type_keywords)
    ) if settings.type_keywords else None

    def is_signature(line: str) -> bool:
        return any(marker in line for marker in markers)

    def is_declaration(line: str) -> bool:
        return declaration is not None and bool(declaration.match(line)) and "if" not in line

    return [
        LineRule("signature", is_signature, _keep_line),
        LineRule("declaration", is_declaration, _keep_line),
        LineRule("if", lambda line: line.startswith("if"), _start_if),
        LineRule("else_if", lambda line: line.startswith("} else if"), _start_else_if),
        LineRule("else", lambda line: line.startswith("} else"), _start_else),
        LineRule("return", lambda line: "return" in line, _close_with_return),
        LineRule("statement", lambda line: line.endswith(";"), _keep_line),
    ]


# ========== Scan ==========

def is_skipped(line: str) -> bool:
    """Blank lines, // comment lines and lone braces carry no blocks"""
    return not line or line.startswith("//") or line in ("{", "}")


def classify_line(rules: List[LineRule], line: str) -> Optional[LineRule]:
    for rule in rules:
        if rule.matches(line):
            return rule
    return None


def _step(rules: List[LineRule], state: ScanState, line: str) -> ScanState:
    rule = classify_line(rules, line)
    if rule is None:
        logger.debug("Dropping unsupported line: %r", line)
        return state
    return rule.apply(state, line)


def initial_state() -> ScanState:
    entry = CFGNode(id=0, lines=[], type=BlockKind.ENTRY, label=ENTRY_LABEL)
    return _open_block(ScanState(blocks=(entry,), current=entry, next_id=1))


def _finish(state: ScanState) -> List[CFGNode]:
    state = _push_current_if_nonempty(state)
    if state.blocks[-1].type != BlockKind.EXIT:
        state = _emit_exit(state)
    return list(state.blocks)


def extract_blocks(code: str, settings: Optional[Settings] = None) -> List[CFGNode]:
    """
    Split source text into an ordered list of basic blocks.

    The list always starts with the START entry block and ends with an
    EXIT block. Lines no rule recognizes are dropped; this never raises.
    """
    rules = build_rules(settings or get_settings())
    lines = [line.strip() for line in code.split("\n")]
    state = reduce(
        lambda acc, line: _step(rules, acc, line),
        (line for line in lines if not is_skipped(line)),
        initial_state(),
    )
    blocks = _finish(state)
    logger.debug("Extracted %d blocks from %d source lines", len(blocks), len(lines))
    return blocks
