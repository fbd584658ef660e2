import pytest

from app.table.columns import attachment_columns, loadout_columns, model_columns
from app.table.filtering import FilterState
from app.table.projection import EXACT, ColumnDescriptor, FilterMatcher, key_accessor, project
from app.table.sorting import SortState

ROWS = [
    {"id": 1, "name": "B"},
    {"id": 2, "name": "A"},
    {"id": 3, "name": "A"},
]

NAME_COLUMNS = [ColumnDescriptor("name", "Name", key_accessor("name"))]


def name_filter(value: str) -> FilterState:
    return FilterState().toggle("name").update("name", value)


class TestSorting:
    def test_no_sort_keeps_store_order(self):
        result = project(ROWS, NAME_COLUMNS, SortState(), FilterState())
        assert result.ids() == [1, 2, 3]

    def test_ascending_is_stable(self):
        result = project(ROWS, NAME_COLUMNS, SortState().add("name"), FilterState())
        assert result.ids() == [2, 3, 1]

    def test_descending_is_stable(self):
        sort = SortState().add("name").toggle_direction("name")
        result = project(ROWS, NAME_COLUMNS, sort, FilterState())
        assert result.ids() == [1, 2, 3]

    def test_numbers_compare_numerically(self):
        rows = [{"id": 1, "rating": 10}, {"id": 2, "rating": 9}, {"id": 3, "rating": -2}]
        columns = [ColumnDescriptor("rating", "Rating", key_accessor("rating"))]
        result = project(rows, columns, SortState().add("rating"), FilterState())
        assert result.ids() == [3, 2, 1]

    def test_missing_values_sort_last(self):
        rows = [{"id": 1, "name": None}, {"id": 2, "name": "Z"}, {"id": 3, "name": "A"}]
        result = project(rows, NAME_COLUMNS, SortState().add("name"), FilterState())
        assert result.ids() == [3, 2, 1]

    def test_unsortable_column_is_ignored(self):
        columns = [ColumnDescriptor("name", "Name", key_accessor("name"), sortable=False)]
        result = project(ROWS, columns, SortState().add("name"), FilterState())
        assert result.ids() == [1, 2, 3]

    def test_input_rows_are_not_reordered(self):
        rows = list(ROWS)
        project(rows, NAME_COLUMNS, SortState().add("name"), FilterState())
        assert [r["id"] for r in rows] == [1, 2, 3]


class TestFiltering:
    def test_case_insensitive_substring(self):
        result = project(ROWS, NAME_COLUMNS, SortState(), name_filter("a"))
        assert result.ids() == [2, 3]

    def test_empty_value_matches_everything(self):
        result = project(ROWS, NAME_COLUMNS, SortState(), FilterState().toggle("name"))
        assert result.ids() == [1, 2, 3]

    def test_no_match_is_explicitly_empty(self):
        result = project(ROWS, NAME_COLUMNS, SortState(), name_filter("zzz"))
        assert result.empty is True
        assert len(result) == 0

    def test_exact_mode(self):
        rows = [{"id": 1, "name": "AK-47"}, {"id": 2, "name": "ak"}]
        matcher = FilterMatcher(mode=EXACT)
        result = project(rows, NAME_COLUMNS, SortState(), name_filter("AK"), matcher)
        assert result.ids() == [2]

    def test_case_sensitive_substring(self):
        matcher = FilterMatcher(case_sensitive=True)
        result = project(ROWS, NAME_COLUMNS, SortState(), name_filter("a"), matcher)
        assert result.empty

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            FilterMatcher(mode="regex")

    def test_filter_then_sort(self):
        rows = [
            {"id": 1, "name": "Bravo"},
            {"id": 2, "name": "Alpha"},
            {"id": 3, "name": "Charlie"},
        ]
        result = project(rows, NAME_COLUMNS, SortState().add("name"), name_filter("a"))
        assert result.ids() == [2, 1, 3]


class TestCatalogColumns:
    def test_model_columns_render_label_and_count(self):
        rows = [{"id": 7, "name": "M4", "type": "lmg", "attachments": [{"id": 1}, {"id": 2}]}]
        result = project(rows, model_columns(), SortState(), FilterState())
        assert result.rows[0].cells == {"name": "M4", "type": "LMG", "attachments": 2}
        assert result.rows[0].edit_id == 7

    def test_attachment_columns_read_nested_relations(self):
        rows = [
            {
                "id": 3,
                "characteristics": {"pros": ["Range"], "cons": ["Recoil"]},
                "models": {"id": 1, "name": "M4"},
                "attachment_types": {"name": "Long Barrel", "type": "barrel"},
            },
            {
                "id": 4,
                "characteristics": {"pros": [], "cons": []},
                "models": {"id": 2, "name": "AK"},
                "attachment_types": {"name": "Red Dot", "type": "optic"},
            },
        ]
        filters = FilterState().toggle("model").update("model", "m4")
        result = project(rows, attachment_columns(), SortState(), filters)
        assert result.ids() == [3]
        assert result.rows[0].cells["name"] == "Long Barrel"
        assert result.rows[0].cells["type"] == "Barrel"

    def test_characteristics_filter_matches_pros_and_cons(self):
        rows = [
            {"id": 1, "characteristics": {"pros": ["Range"], "cons": []}},
            {"id": 2, "characteristics": {"pros": [], "cons": ["Heavy recoil"]}},
        ]
        filters = FilterState().toggle("characteristics").update("characteristics", "recoil")
        result = project(rows, attachment_columns(), SortState(), filters)
        assert result.ids() == [2]

    def test_loadout_columns_sort_by_rating(self):
        rows = [
            {"id": 1, "rating": 3, "loadouts": {"name": "A", "username": "x", "tags": "fast,close"}},
            {"id": 2, "rating": 5, "loadouts": {"name": "B", "username": "y", "tags": None}},
        ]
        sort = SortState().toggle_direction("rating")
        result = project(rows, loadout_columns(), sort, FilterState())
        assert result.ids() == [2, 1]
        assert result.rows[1].cells["tags"] == ["fast", "close"]
        assert result.rows[0].cells["tags"] == []

    def test_cells_do_not_mutate_rows(self):
        row = {"id": 1, "name": "M4", "type": "smg", "attachments": []}
        project([row], model_columns(), SortState(), FilterState())
        assert row == {"id": 1, "name": "M4", "type": "smg", "attachments": []}
