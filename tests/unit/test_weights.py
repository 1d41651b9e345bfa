"""Tests for target weight sources."""

from decimal import Decimal

from conftest import hours, make_kline
from pvdot.models import IntervalWindow
from pvdot.weights.static import StaticWeightSet


def make_set(window=3) -> StaticWeightSet:
    return StaticWeightSet(
        IntervalWindow(interval="1h", window=window),
        {"BTC": Decimal("0.5"), "USDT": Decimal("0.5")},
    )


class TestStaticWeightSet:
    def test_returns_configured_targets(self):
        assert make_set().target_weights() == {"BTC": Decimal("0.5"), "USDT": Decimal("0.5")}

    def test_returned_map_is_a_copy(self):
        ws = make_set()
        ws.target_weights()["BTC"] = Decimal(1)
        assert ws.target_weights()["BTC"] == Decimal("0.5")

    def test_history_bounded_by_window(self):
        ws = make_set(window=3)
        first = make_kline()
        for i in range(5):
            ws.update(make_kline(start=first.start_time + hours(i), close=str(100 + i)))

        history = ws.history("BTCUSDT")
        assert len(history) == 3
        assert [k.close for k in history] == [Decimal(102), Decimal(103), Decimal(104)]

    def test_stale_bars_ignored(self):
        ws = make_set()
        bar = make_kline()
        ws.update(make_kline(start=bar.start_time + hours(1)))
        ws.update(bar)
        assert len(ws.history("BTCUSDT")) == 1
        assert ws.last_bar_time("BTCUSDT") == bar.start_time + hours(1)

    def test_unknown_symbol_has_no_history(self):
        ws = make_set()
        assert ws.history("ETHUSDT") == []
        assert ws.last_bar_time("ETHUSDT") is None
