"""
Tests for pivoting aggregated rows into per-timestamp records (STORY-004).

CHANGELOG:
- 2026-10-16: Cover reserved register name and non-finite values (STORY-006)
- 2026-10-13: Initial creation (STORY-004)

TODO:
- None
"""

from datetime import UTC, datetime, timedelta, timezone

from meter_reads.services.interval_query import IntervalReadRow
from meter_reads.services.transform import format_timestamp, pivot_interval_reads


def _row(ts: datetime | str, suffix: str, value: float) -> IntervalReadRow:
    return IntervalReadRow(ts=ts, register_suffix=suffix, value=value)


class TestPivot:
    """Grouping, pivoting and ordering."""

    def test_reference_example(self) -> None:
        """Two registers at one hour, one at the next."""
        rows = [
            _row("2024-11-20T00:00:00Z", "E1", 0.5),
            _row("2024-11-20T00:00:00Z", "B1", -0.2),
            _row("2024-11-20T01:00:00Z", "E1", 0.4),
        ]

        assert pivot_interval_reads(rows) == [
            {"timestamp": "2024-11-20T00:00:00", "E1": 0.5, "B1": -0.2},
            {"timestamp": "2024-11-20T01:00:00", "E1": 0.4},
        ]

    def test_empty_input(self) -> None:
        """No rows, no records."""
        assert pivot_interval_reads([]) == []

    def test_sparse_records_have_no_zero_fill(self) -> None:
        """A register missing at an hour is absent, not zero."""
        rows = [
            _row(datetime(2024, 11, 20, 0, tzinfo=UTC), "E1", 1.0),
            _row(datetime(2024, 11, 20, 1, tzinfo=UTC), "B1", 2.0),
        ]

        records = pivot_interval_reads(rows)

        assert "B1" not in records[0]
        assert "E1" not in records[1]

    def test_sorted_ascending_regardless_of_input_order(self) -> None:
        """Output is ascending by timestamp."""
        base = datetime(2024, 11, 20, tzinfo=UTC)
        rows = [_row(base + timedelta(hours=h), "E1", float(h)) for h in (5, 1, 3, 0)]

        timestamps = [r["timestamp"] for r in pivot_interval_reads(rows)]

        assert timestamps == [
            "2024-11-20T00:00:00",
            "2024-11-20T01:00:00",
            "2024-11-20T03:00:00",
            "2024-11-20T05:00:00",
        ]

    def test_one_record_per_timestamp(self) -> None:
        """Rows at the same instant in different offsets share one record."""
        cet = timezone(timedelta(hours=1))
        rows = [
            _row(datetime(2024, 11, 20, 1, tzinfo=cet), "E1", 0.5),
            _row(datetime(2024, 11, 20, 0, tzinfo=UTC), "B1", 0.1),
        ]

        assert pivot_interval_reads(rows) == [
            {"timestamp": "2024-11-20T00:00:00", "E1": 0.5, "B1": 0.1},
        ]

    def test_duplicate_hour_and_register_are_summed(self) -> None:
        """Duplicate (timestamp, register) pairs are summed before rounding."""
        ts = datetime(2024, 11, 20, tzinfo=UTC)
        rows = [_row(ts, "E1", 0.1004), _row(ts, "E1", 0.2004)]

        assert pivot_interval_reads(rows) == [
            {"timestamp": "2024-11-20T00:00:00", "E1": 0.301},
        ]


class TestRounding:
    """Each value is rounded to 3 decimals on its own."""

    def test_rounds_to_three_decimals(self) -> None:
        """0.123456 becomes 0.123."""
        rows = [_row("2024-11-20T00:00:00Z", "E1", 0.123456)]
        assert pivot_interval_reads(rows)[0]["E1"] == 0.123

    def test_rounding_is_per_value(self) -> None:
        """Neighbouring values do not affect each other."""
        rows = [
            _row("2024-11-20T00:00:00Z", "E1", 1.23456),
            _row("2024-11-20T00:00:00Z", "B1", -7.0001),
        ]
        record = pivot_interval_reads(rows)[0]
        assert record["E1"] == 1.235
        assert record["B1"] == -7.0

    def test_decimal_values_from_store(self) -> None:
        """Numeric values from the store are coerced to float."""
        from decimal import Decimal

        rows = [_row("2024-11-20T00:00:00Z", "E1", Decimal("2.71828"))]  # type: ignore[arg-type]
        assert pivot_interval_reads(rows)[0]["E1"] == 2.718


class TestFormatTimestamp:
    """Timestamps are ISO-8601 UTC seconds without offset suffix."""

    def test_no_offset_suffix(self) -> None:
        """No 'Z' and no '+00:00'."""
        assert format_timestamp(datetime(2024, 11, 20, 13, tzinfo=UTC)) == "2024-11-20T13:00:00"

    def test_drops_subseconds(self) -> None:
        """Sub-second precision is dropped."""
        ts = datetime(2024, 11, 20, 13, 0, 0, 500000, tzinfo=UTC)
        assert format_timestamp(ts) == "2024-11-20T13:00:00"

    def test_converts_to_utc(self) -> None:
        """Offset timestamps are rendered in UTC."""
        ts = datetime(2024, 11, 20, 14, tzinfo=timezone(timedelta(hours=1)))
        assert format_timestamp(ts) == "2024-11-20T13:00:00"


class TestUnrepresentableRows:
    """Rows that cannot appear in a JSON record are skipped."""

    def test_register_named_timestamp_is_skipped(self) -> None:
        """A 'timestamp' register never overwrites the record timestamp."""
        rows = [
            _row("2024-11-20T00:00:00Z", "timestamp", 9.9),
            _row("2024-11-20T00:00:00Z", "E1", 0.5),
        ]

        assert pivot_interval_reads(rows) == [
            {"timestamp": "2024-11-20T00:00:00", "E1": 0.5},
        ]

    def test_register_named_timestamp_is_logged(self, caplog) -> None:
        """Skipped rows leave a warning."""
        with caplog.at_level("WARNING", logger="meter_reads.services.transform"):
            pivot_interval_reads([_row("2024-11-20T00:00:00Z", "timestamp", 1.0)])

        assert "reserved register name" in caplog.text

    def test_non_finite_values_are_dropped(self) -> None:
        """NaN and infinite sums are left out of the record."""
        rows = [
            _row("2024-11-20T00:00:00Z", "E1", float("nan")),
            _row("2024-11-20T00:00:00Z", "B1", float("inf")),
            _row("2024-11-20T00:00:00Z", "E2", float("-inf")),
            _row("2024-11-20T00:00:00Z", "B2", 0.25),
        ]

        assert pivot_interval_reads(rows) == [
            {"timestamp": "2024-11-20T00:00:00", "B2": 0.25},
        ]

    def test_nan_poisons_duplicate_sum(self) -> None:
        """A NaN duplicate makes the summed value non-finite, so it is dropped."""
        ts = datetime(2024, 11, 20, tzinfo=UTC)
        rows = [_row(ts, "E1", 0.5), _row(ts, "E1", float("nan"))]

        assert pivot_interval_reads(rows) == [{"timestamp": "2024-11-20T00:00:00"}]

    def test_output_is_strict_json(self) -> None:
        """Records serialize with allow_nan=False, as the HTTP response does."""
        import json

        rows = [
            _row("2024-11-20T00:00:00Z", "E1", float("nan")),
            _row("2024-11-20T01:00:00Z", "E1", 1.0),
        ]

        json.dumps(pivot_interval_reads(rows), allow_nan=False)
