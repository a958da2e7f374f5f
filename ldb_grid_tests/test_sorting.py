from ldb_grid.formatting import compare_values
from ldb_grid.sorting import SortDirection, SortSpec, sort_rows, toggle_sort


def _pairs(values, column="age"):
    return list(enumerate({column: v} for v in values))


def _values(pairs, column="age"):
    return [row.get(column) for _, row in pairs]


def test_toggle_cycle_returns_to_no_sort():
    spec = toggle_sort(None, "age")
    assert spec == SortSpec("age", SortDirection.ASCENDING)
    spec = toggle_sort(spec, "age")
    assert spec == SortSpec("age", SortDirection.DESCENDING)
    assert toggle_sort(spec, "age") is None


def test_toggle_other_column_starts_ascending():
    spec = SortSpec("age", SortDirection.DESCENDING)
    assert toggle_sort(spec, "name") == SortSpec(
        "name", SortDirection.ASCENDING
    )


def test_no_sort_keeps_order():
    pairs = _pairs([3, 1, 2])
    assert sort_rows(pairs, None) == pairs


def test_ascending_puts_nulls_last():
    pairs = _pairs([30, None, 5])
    result = sort_rows(pairs, SortSpec("age", SortDirection.ASCENDING))
    assert _values(result) == [5, 30, None]


def test_descending_puts_nulls_first():
    # The direction sign also flips the null branch of the comparison.
    pairs = _pairs([30, None, 5])
    result = sort_rows(pairs, SortSpec("age", SortDirection.DESCENDING))
    assert _values(result) == [None, 30, 5]


def test_absent_field_sorts_like_null():
    pairs = [(0, {"age": 2}), (1, {}), (2, {"age": 1})]
    result = sort_rows(pairs, SortSpec("age"))
    assert [i for i, _ in result] == [2, 0, 1]


def test_text_sort_is_natural_and_case_insensitive():
    pairs = _pairs(["row10", "Row9", "alpha"], "name")
    result = sort_rows(pairs, SortSpec("name"))
    assert _values(result, "name") == ["alpha", "Row9", "row10"]


def test_sort_is_stable():
    pairs = _pairs(["b", "A", "a", "B"], "name")
    result = sort_rows(pairs, SortSpec("name"))
    assert [i for i, _ in result] == [1, 2, 0, 3]
    result = sort_rows(pairs, SortSpec("name", SortDirection.DESCENDING))
    assert [i for i, _ in result] == [0, 3, 1, 2]


def test_sorted_output_is_ordered():
    values = [3, "x", None, 1.5, "row2", {"a": 1}, None, 0]
    for direction in SortDirection:
        result = sort_rows(_pairs(values), SortSpec("age", direction))
        ordered = _values(result)
        for a, b in zip(ordered, ordered[1:]):
            assert direction.sign * compare_values(a, b) <= 0


def test_accented_values_sort_alphabetically():
    pairs = _pairs(["zebra", "Éclair", "apple"], "w")
    result = sort_rows(pairs, SortSpec("w", SortDirection.ASCENDING))
    assert _values(result, "w") == ["apple", "Éclair", "zebra"]


def test_huge_numbers_do_not_break_sorting():
    result = sort_rows(
        _pairs([1.5, 10**400, -3]), SortSpec("age", SortDirection.ASCENDING)
    )
    assert _values(result) == [-3, 1.5, 10**400]
