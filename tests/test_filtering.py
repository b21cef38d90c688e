"""Search and dropdown filter tests."""

from app.core.filtering import (
    CategoricalFilter,
    filter_options,
    filter_records,
    matches_search,
    static_options,
)

RECORDS = [
    {"_id": "1", "name": "Stapler", "category": "Office Supplies", "quantity": 5},
    {"_id": "2", "name": "Projector", "category": "Electronics", "quantity": None},
    {"_id": "3", "name": "Desk", "category": "Furniture"},
    {"_id": "4", "name": "Laptop stand", "category": "Electronics"},
]
CATEGORY = CategoricalFilter("category", "category", "All Categories")


class TestMatchesSearch:

    def test_case_insensitive_substring(self):
        assert matches_search(RECORDS[1], "JECT", ("name",))

    def test_any_field_matches(self):
        assert matches_search(RECORDS[2], "furn", ("name", "category"))

    def test_missing_and_numeric_fields(self):
        assert not matches_search(RECORDS[2], "5", ("quantity",))
        assert matches_search(RECORDS[0], "5", ("quantity",))


class TestFilterRecords:

    def test_no_criteria_returns_everything(self):
        assert len(filter_records(RECORDS)) == len(RECORDS)

    def test_sentinel_disables_filter(self):
        result = filter_records(RECORDS, filters=(CATEGORY,), selections={"category": "All Categories"})
        assert len(result) == 4

    def test_exact_category_match(self):
        result = filter_records(RECORDS, filters=(CATEGORY,), selections={"category": "Electronics"})
        assert [r["_id"] for r in result] == ["2", "4"]

    def test_search_and_filter_are_combined(self):
        result = filter_records(
            RECORDS,
            search_text="laptop",
            search_fields=("name",),
            filters=(CATEGORY,),
            selections={"category": "Electronics"},
        )
        assert [r["_id"] for r in result] == ["4"]

    def test_search_and_filter_commute(self):
        searched = filter_records(RECORDS, search_text="o", search_fields=("name",))
        then_filtered = filter_records(searched, filters=(CATEGORY,), selections={"category": "Electronics"})
        filtered = filter_records(RECORDS, filters=(CATEGORY,), selections={"category": "Electronics"})
        then_searched = filter_records(filtered, search_text="o", search_fields=("name",))
        assert then_filtered == then_searched

    def test_filter_is_exact_not_substring(self):
        result = filter_records(RECORDS, filters=(CATEGORY,), selections={"category": "Electr"})
        assert result == []

    def test_returns_copies(self):
        result = filter_records(RECORDS)
        result[0]["name"] = "changed"
        assert RECORDS[0]["name"] == "Stapler"


class TestOptions:

    def test_distinct_values_first_seen_order(self):
        assert filter_options(RECORDS, "category", "All Categories") == [
            "All Categories", "Office Supplies", "Electronics", "Furniture",
        ]

    def test_blank_values_skipped(self):
        assert filter_options([{"category": ""}, {}], "category", "All") == ["All"]

    def test_static_options(self):
        assert static_options(["Damaged", "Lost"], "All Reasons") == ["All Reasons", "Damaged", "Lost"]
