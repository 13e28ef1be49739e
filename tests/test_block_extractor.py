"""
Unit tests for block extraction (line classification and block grouping)
"""

import pytest

from block_extractor import (
    ELSE_IF_CONDITION,
    IF_CONDITION,
    build_rules,
    classify_line,
    extract_blocks,
    extract_condition,
    is_skipped,
)
from config import Settings
from models import BlockKind
from samples import BACK_TO_BACK_IF_CODE, SAMPLE_C_CODE


def kinds(blocks):
    return [block.type for block in blocks]


# ========== Line filtering and classification ==========

class TestClassification:
    """Rule priority per trimmed line"""

    @pytest.fixture
    def rules(self):
        return build_rules(Settings())

    @pytest.mark.parametrize("line", ["", "// comment", "{", "}"])
    def test_skipped_lines(self, line):
        assert is_skipped(line)

    @pytest.mark.parametrize("line", ["} else {", "x = 1;", "{ x = 1; }"])
    def test_kept_lines(self, line):
        assert not is_skipped(line)

    @pytest.mark.parametrize("line,expected", [
        ("int checkTemperature(int temp, int threshold) {", "signature"),
        ("int status = 0;", "declaration"),
        ("int returned = compute();", "declaration"),
        ("if (x > 0) {", "if"),
        ("} else if (x > 1) {", "else_if"),
        ("} else {", "else"),
        ("return x;", "return"),
        ("x = 1;", "statement"),
        ("int x = iffy();", "statement"),
    ])
    def test_first_matching_rule_wins(self, rules, line, expected):
        assert classify_line(rules, line).name == expected

    def test_unknown_line_has_no_rule(self, rules):
        assert classify_line(rules, 'printf("no semicolon")') is None
        assert classify_line(rules, "x = 1;  // trailing comment") is None


class TestConditionExtraction:
    """Condition text for decision blocks"""

    def test_if_condition(self):
        assert extract_condition("if (temp < 0) {", IF_CONDITION) == "temp < 0"

    def test_else_if_condition(self):
        line = "} else if (temp > threshold - 10) {"
        assert extract_condition(line, ELSE_IF_CONDITION) == "temp > threshold - 10"

    def test_first_closing_paren_ends_condition(self):
        assert extract_condition("if (f(x) > 0) {", IF_CONDITION) == "f(x"

    def test_fallback_to_whole_line(self):
        assert extract_condition("if x > 0", IF_CONDITION) == "if x > 0"


# ========== Block extraction ==========

class TestExtractBlocks:
    """Block sequences produced for whole snippets"""

    def test_empty_input(self):
        blocks = extract_blocks("")
        assert kinds(blocks) == [BlockKind.ENTRY, BlockKind.EXIT]
        assert blocks[0].label == "START"
        assert blocks[1].label == "EXIT"
        assert blocks[1].lines == []

    def test_only_braces_and_comments(self):
        blocks = extract_blocks("{\n\n   // nothing here\n}\n")
        assert kinds(blocks) == [BlockKind.ENTRY, BlockKind.EXIT]

    def test_sample_function(self):
        blocks = extract_blocks(SAMPLE_C_CODE)

        assert [block.id for block in blocks] == [0, 1, 3, 4, 5, 6, 8, 10, 12, 13]
        assert kinds(blocks) == [
            BlockKind.ENTRY,
            BlockKind.STATEMENT,
            BlockKind.DECISION,
            BlockKind.STATEMENT,
            BlockKind.EXIT,
            BlockKind.STATEMENT,
            BlockKind.DECISION,
            BlockKind.DECISION,
            BlockKind.STATEMENT,
            BlockKind.EXIT,
        ]
        assert blocks[1].lines == [
            "int checkTemperature(int temp, int threshold) {",
            "int status = 0;",
        ]
        decisions = [block for block in blocks if block.type == BlockKind.DECISION]
        assert [d.label for d in decisions] == ["temp < 0", "temp > threshold", "temp > threshold - 10"]
        assert all(d.lines == [d.label] for d in decisions)
        assert blocks[3].lines == ["return status;"]
        assert blocks[5].lines == []
        assert blocks[8].lines == ["return status;"]

    def test_back_to_back_if_keeps_placeholder(self):
        blocks = extract_blocks(BACK_TO_BACK_IF_CODE)
        assert kinds(blocks) == [
            BlockKind.ENTRY,
            BlockKind.STATEMENT,
            BlockKind.DECISION,
            BlockKind.STATEMENT,
            BlockKind.DECISION,
            BlockKind.STATEMENT,
            BlockKind.EXIT,
        ]
        assert blocks[3].lines == []
        assert blocks[5].lines == ["x = 1;"]

    def test_else_closes_true_branch(self):
        code = "if (a) {\n  x = 1;\n} else {\n  x = 2;\n}\n"
        blocks = extract_blocks(code)
        assert kinds(blocks)[2:] == [
            BlockKind.DECISION,
            BlockKind.STATEMENT,
            BlockKind.STATEMENT,
            BlockKind.EXIT,
        ]
        assert blocks[3].lines == ["x = 1;"]
        assert blocks[4].lines == ["x = 2;"]

    def test_return_emits_exit_and_reopens(self):
        blocks = extract_blocks("x = 1;\nreturn x;\ny = 2;\n")
        assert kinds(blocks) == [
            BlockKind.ENTRY,
            BlockKind.STATEMENT,
            BlockKind.EXIT,
            BlockKind.STATEMENT,
            BlockKind.EXIT,
        ]
        assert blocks[1].lines == ["x = 1;", "return x;"]
        assert blocks[3].lines == ["y = 2;"]

    def test_no_duplicate_trailing_exit(self):
        blocks = extract_blocks("return 0;")
        assert kinds(blocks) == [BlockKind.ENTRY, BlockKind.STATEMENT, BlockKind.EXIT]

    def test_lines_are_trimmed(self):
        blocks = extract_blocks("      x = 1;   \n\ty = 2;")
        assert blocks[1].lines == ["x = 1;", "y = 2;"]

    def test_signature_markers_from_settings(self):
        code = "void main() {\n  x = 1;\n}"
        plain = extract_blocks(code, Settings(type_keywords=[], signature_markers=[]))
        marked = extract_blocks(code, Settings(type_keywords=[], signature_markers=["void main"]))
        assert plain[1].lines == ["x = 1;"]
        assert marked[1].lines == ["void main() {", "x = 1;"]


# ========== Invariants ==========

class TestBlockInvariants:
    """Properties that hold for any input"""

    @pytest.mark.parametrize("code", [
        "",
        SAMPLE_C_CODE,
        BACK_TO_BACK_IF_CODE,
        "if (a) {",
        "} else {\n} else if (x) {\nreturn;\nreturn;",
        "garbage\n{{\n}}\n;;;",
    ])
    def test_entry_first_exit_last_ids_increasing(self, code):
        blocks = extract_blocks(code)
        ids = [block.id for block in blocks]

        assert blocks[0].type == BlockKind.ENTRY
        assert blocks[-1].type == BlockKind.EXIT
        assert sum(1 for b in blocks if b.type == BlockKind.ENTRY) == 1
        assert ids == sorted(set(ids))

    def test_deterministic(self):
        assert extract_blocks(SAMPLE_C_CODE) == extract_blocks(SAMPLE_C_CODE)
