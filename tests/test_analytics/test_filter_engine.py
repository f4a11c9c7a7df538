"""Tests for work-order filtering."""

from __future__ import annotations

import pytest

from maintlytics.analytics.filter_engine import (
    FilterOptions,
    apply_filters,
    filter_options,
    matches,
    toggle_asset,
)
from maintlytics.analytics.work_orders import FilterSpec, WorkOrder


def _wo(order_id: str, asset: str = "M1", status: str = "Aberto", inclusion="2024-01-10", **kw) -> WorkOrder:
    return WorkOrder(order_id=order_id, asset_code=asset, status=status, inclusion_date=inclusion, **kw)


@pytest.fixture()
def records() -> list[WorkOrder]:
    return [
        _wo("1", "M1", "Aberto", "2024-01-10", asset_description="PRENSA 1"),
        _wo("2", "M2", "Fechado", "2024-02-03", asset_description="ESTEIRA A"),
        _wo("3", "M1", "Fechado", "2024-02-20", asset_description="PRENSA 1"),
        _wo("4", "M3", "Aberto", "not-a-date", asset_description="caldeira"),
    ]


class TestApplyFilters:
    def test_unrestricted_spec_returns_all(self, records):
        assert apply_filters(records, FilterSpec()) == records

    def test_unrestricted_returns_copy(self, records):
        assert apply_filters(records, FilterSpec()) is not records

    def test_asset_filter(self, records):
        result = apply_filters(records, FilterSpec(asset_codes=frozenset({"M1"})))
        assert [r.order_id for r in result] == ["1", "3"]

    def test_status_filter(self, records):
        result = apply_filters(records, FilterSpec(status="Fechado"))
        assert [r.order_id for r in result] == ["2", "3"]

    def test_period_filter(self, records):
        result = apply_filters(records, FilterSpec(period="2024-02"))
        assert [r.order_id for r in result] == ["2", "3"]

    def test_combined_filters(self, records):
        spec = FilterSpec(asset_codes=frozenset({"M1", "M2"}), period="2024-02", status="Fechado")
        assert [r.order_id for r in apply_filters(records, spec)] == ["2", "3"]

    def test_unparseable_date_excluded_from_specific_period(self):
        record = _wo("9", inclusion="not-a-date")
        assert apply_filters([record], FilterSpec(period="2024-01")) == []

    def test_unparseable_date_kept_for_all_periods_with_status(self, records):
        result = apply_filters(records, FilterSpec(status="Aberto"))
        assert [r.order_id for r in result] == ["1", "4"]

    def test_unparseable_date_still_honours_asset(self, records):
        result = apply_filters(records, FilterSpec(asset_codes=frozenset({"M2"})))
        assert [r.order_id for r in result] == ["2"]

    def test_no_match(self, records):
        assert apply_filters(records, FilterSpec(status="Pendente")) == []

    def test_empty_records(self):
        assert apply_filters([], FilterSpec(period="2024-01")) == []

    def test_none_records_rejected(self):
        with pytest.raises(TypeError):
            apply_filters(None, FilterSpec())


class TestMatches:
    def test_datetime_inclusion(self):
        from datetime import datetime

        record = _wo("1", inclusion=datetime(2024, 5, 1, 8, 0))
        assert matches(record, FilterSpec(period="2024-05"))
        assert not matches(record, FilterSpec(period="2024-04"))

    def test_missing_inclusion_date(self):
        record = _wo("1", inclusion=None)
        assert matches(record, FilterSpec())
        assert not matches(record, FilterSpec(period="2024-05"))


class TestFilterOptions:
    def test_options(self, records):
        options = filter_options(records)
        assert isinstance(options, FilterOptions)
        assert options.assets == [("M3", "caldeira"), ("M2", "ESTEIRA A"), ("M1", "PRENSA 1")]
        assert options.statuses == ["Aberto", "Fechado"]
        assert options.periods == ["2024-02", "2024-01"]

    def test_first_description_wins(self):
        records = [
            _wo("1", "M1", asset_description="PRENSA"),
            _wo("2", "M1", asset_description="OUTRA"),
        ]
        assert filter_options(records).assets == [("M1", "PRENSA")]

    def test_empty(self):
        options = filter_options([])
        assert options.assets == []
        assert options.statuses == []
        assert options.periods == []


class TestToggleAsset:
    def test_add_and_remove(self):
        spec = FilterSpec(period="2024-01")
        added = toggle_asset(spec, "M1")
        assert added.asset_codes == frozenset({"M1"})
        assert added.period == "2024-01"
        removed = toggle_asset(added, "M1")
        assert removed.asset_codes == frozenset()

    def test_original_untouched(self):
        spec = FilterSpec(asset_codes=frozenset({"M1"}))
        toggle_asset(spec, "M2")
        assert spec.asset_codes == frozenset({"M1"})
