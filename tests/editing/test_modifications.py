"""Tests for the mutation engine."""

import itertools

import pytest

from shellcraft.editing.modifications import (
    AppendLine, DeleteLine, InsertAfter, UpdateLine,
    ModificationConflictError, ModificationRangeError,
    apply_modifications, validate_modifications,
)


def _lines(n=5):
    return [f"line{i}" for i in range(n)]


class TestSingleOperations:
    def test_update_replaces_one_line_in_place(self):
        lines = _lines()
        apply_modifications(lines, [UpdateLine(2, "LINE_TWO")])
        assert lines == ["line0", "line1", "LINE_TWO", "line3", "line4"]

    def test_update_leaves_every_other_line_untouched(self):
        original = ["a  ", "\tb", "# c", "", "e\r"]
        for i in range(len(original)):
            lines = list(original)
            apply_modifications(lines, [UpdateLine(i, "NEW")])
            for j, line in enumerate(lines):
                if j != i:
                    assert line == original[j]
            assert lines[i] == "NEW"

    def test_insert_after_adds_lines_below_index(self):
        lines = _lines(3)
        apply_modifications(lines, [InsertAfter(0, ["x", "y"])])
        assert lines == ["line0", "x", "y", "line1", "line2"]

    def test_insert_after_accepts_single_string(self):
        lines = _lines(2)
        apply_modifications(lines, [InsertAfter(1, "tail")])
        assert lines == ["line0", "line1", "tail"]

    def test_insert_after_minus_one_inserts_at_top(self):
        lines = _lines(2)
        apply_modifications(lines, [InsertAfter(-1, "#!/bin/zsh")])
        assert lines == ["#!/bin/zsh", "line0", "line1"]

    def test_delete_removes_exactly_one_line(self):
        lines = _lines()
        apply_modifications(lines, [DeleteLine(1)])
        assert lines == ["line0", "line2", "line3", "line4"]

    def test_append_goes_last(self):
        lines = _lines(2)
        apply_modifications(lines, [AppendLine("end")])
        assert lines == ["line0", "line1", "end"]


class TestBatchOrdering:
    def test_indices_refer_to_original_buffer(self):
        lines = _lines()
        apply_modifications(lines, [
            DeleteLine(0),
            InsertAfter(1, ["after1"]),
            UpdateLine(3, "THREE"),
            DeleteLine(4),
        ])
        assert lines == ["line1", "after1", "line2", "THREE"]

    def test_appends_run_after_indexed_ops_in_given_order(self):
        lines = _lines(3)
        apply_modifications(lines, [
            AppendLine("first"),
            DeleteLine(2),
            AppendLine("second"),
            InsertAfter(0, ["x"]),
        ])
        assert lines == ["line0", "x", "line1", "first", "second"]

    def test_update_and_insert_after_same_index(self):
        lines = _lines(3)
        apply_modifications(lines, [
            InsertAfter(1, ["new"]),
            UpdateLine(1, "ONE"),
        ])
        assert lines == ["line0", "ONE", "new", "line2"]

    def test_result_independent_of_construction_order(self):
        batch = [
            UpdateLine(0, "zero"),
            InsertAfter(1, ["a", "b"]),
            DeleteLine(3),
            UpdateLine(5, "five"),
            InsertAfter(5, ["tail"]),
            DeleteLine(6),
        ]
        expected = None
        for perm in itertools.permutations(batch):
            lines = _lines(8)
            apply_modifications(lines, list(perm))
            if expected is None:
                expected = lines
            assert lines == expected
        assert expected == [
            "zero", "line1", "a", "b", "line2", "line4",
            "five", "tail", "line7",
        ]

    def test_empty_batch_returns_lines_unchanged(self):
        lines = _lines()
        assert apply_modifications(lines, []) == _lines()


class TestContractViolations:
    @pytest.mark.parametrize("batch", [
        [UpdateLine(1, "a"), UpdateLine(1, "b")],
        [DeleteLine(1), DeleteLine(1)],
        [UpdateLine(1, "a"), DeleteLine(1)],
        [DeleteLine(1), InsertAfter(1, ["x"])],
        [InsertAfter(1, ["x"]), InsertAfter(1, ["y"])],
    ])
    def test_conflicting_batch_rejected(self, batch):
        lines = _lines()
        with pytest.raises(ModificationConflictError):
            apply_modifications(lines, batch)
        assert lines == _lines()

    @pytest.mark.parametrize("mod", [
        UpdateLine(5, "x"),
        UpdateLine(-1, "x"),
        DeleteLine(7),
        InsertAfter(5, ["x"]),
        InsertAfter(-2, ["x"]),
    ])
    def test_out_of_range_rejected(self, mod):
        lines = _lines()
        with pytest.raises(ModificationRangeError):
            apply_modifications(lines, [UpdateLine(0, "ok"), mod])
        assert lines == _lines()

    def test_appends_never_conflict(self):
        batch = validate_modifications([AppendLine("a"), AppendLine("a")], 0)
        assert len(batch) == 2

    def test_update_on_empty_buffer_is_out_of_range(self):
        with pytest.raises(ModificationRangeError):
            validate_modifications([UpdateLine(0, "x")], 0)
