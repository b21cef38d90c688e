"""Dashboard reporting tests."""

from datetime import datetime, timezone

from app.core.enrichment import build_index
from app.core.reporting import (
    count_in_month,
    dashboard_stats,
    most_recent,
    parse_timestamp,
    recent_stock_in,
    recent_stock_out,
)

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)


class TestParseTimestamp:

    def test_iso_with_z(self):
        assert parse_timestamp("2024-05-01T10:00:00.000Z") == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)

    def test_plain_date(self):
        assert parse_timestamp("2024-05-01").day == 1

    def test_epoch_millis(self):
        assert parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_garbage(self):
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None
        assert parse_timestamp(True) is None


class TestMonthCounts:

    def test_only_current_month(self):
        records = [
            {"received_at": "2024-05-02"},
            {"received_at": "2024-04-30"},
            {"received_at": "2023-05-02"},
            {},
        ]
        assert count_in_month(records, "received_at", NOW) == 1


class TestRecent:

    def test_newest_first_limited_to_three(self):
        records = [{"_id": str(day), "issued_at": f"2024-05-{day:02d}"} for day in (3, 9, 1, 7)]
        assert [r["_id"] for r in most_recent(records, "issued_at")] == ["9", "7", "3"]

    def test_undated_sorts_last(self):
        records = [{"_id": "undated"}, {"_id": "dated", "issued_at": "2020-01-01"}]
        assert [r["_id"] for r in most_recent(records, "issued_at")] == ["dated", "undated"]

    def test_stock_in_item_name(self):
        indices = {"items": build_index([{"_id": "i1", "name": "Stapler"}])}
        entries = recent_stock_in(
            [
                {"_id": "a", "item_id": "i1", "quantity": 2, "received_at": "2024-05-02"},
                {"_id": "b", "item_id": "i404", "quantity": 1, "received_at": "2024-05-01"},
                {"_id": "c", "quantity": 1, "received_at": "2024-04-01"},
            ],
            indices,
        )
        assert [e.item_name for e in entries] == ["Stapler", "i404", "Unknown Item"]

    def test_stock_out_names(self):
        indices = {
            "items": {},
            "users": build_index([{"_id": "u1", "name": "Rahim", "role": "teacher"}]),
        }
        entries = recent_stock_out(
            [
                {"_id": "a", "user_id": "u1", "issued_at": "2024-05-03"},
                {"_id": "b", "user_name": "Karim", "user_role": "staff", "issued_at": "2024-05-02"},
                {"_id": "c", "user_id": "ghost", "issued_at": "2024-05-01"},
            ],
            indices,
        )
        assert [(e.user_name, e.user_role) for e in entries] == [
            ("Rahim", "teacher"),
            ("Karim", "staff"),
            ("Unknown User", "Unknown"),
        ]


class TestStats:

    def test_counts(self):
        stats = dashboard_stats(
            {
                "items": [{}, {}],
                "stock_in": [{"received_at": "2024-05-10"}],
                "stock_out": [{"issued_at": "2024-01-10"}],
                "deadstock": [{}],
                "users": [{}, {}, {}],
                "departments": [],
            },
            NOW,
        )
        assert stats.total_items == 2
        assert stats.stock_in_count == 1
        assert stats.stock_out_count == 0
        assert stats.dead_stock_count == 1
        assert stats.users_count == 3
        assert stats.departments_count == 0
