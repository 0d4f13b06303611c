from datetime import datetime, timedelta, timezone

import pandas as pd
import pytest

from leverguard.performance import LedgerStats, summarize_trades
from leverguard.performance.ledger_stats import trades_frame

pytestmark = pytest.mark.unit

NOW = datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def ledger(closed_trade, long_position):
    return [
        closed_trade(22.0, NOW - timedelta(hours=2), reason="swing-profit", position_id="a"),
        closed_trade(-28.0, NOW - timedelta(hours=1), reason="circuit-breaker-loss", position_id="b"),
        closed_trade(10.0, NOW - timedelta(hours=30), reason="swing-profit", position_id="c"),
        closed_trade(0.0, NOW - timedelta(hours=40), reason="timeout-green", position_id="d"),
        long_position,
    ]


class TestSummarizeTrades:
    def test_empty_ledger(self):
        assert summarize_trades([], now=NOW) == LedgerStats()

    def test_open_positions_ignored(self, long_position):
        assert summarize_trades([long_position], now=NOW).total_trades == 0

    def test_counts_and_totals(self, ledger):
        stats = summarize_trades(ledger, now=NOW)

        assert stats.total_trades == 4
        assert stats.daily_trades == 2
        assert stats.wins == 2
        assert stats.losses == 1
        assert stats.win_rate == pytest.approx(50.0)
        assert stats.daily_pnl == pytest.approx(-6.0)
        assert stats.total_pnl == pytest.approx(4.0)
        assert stats.total_fees == pytest.approx(12.0)
        assert stats.avg_hold_seconds == pytest.approx(600.0)

    def test_reason_breakdown(self, ledger):
        by_reason = summarize_trades(ledger, now=NOW).by_reason

        assert set(by_reason) == {"swing-profit", "circuit-breaker-loss", "timeout-green"}
        assert by_reason["swing-profit"].count == 2
        assert by_reason["swing-profit"].pnl == pytest.approx(32.0)
        assert by_reason["circuit-breaker-loss"].pnl == pytest.approx(-28.0)


class TestTradesFrame:
    def test_columns_and_rows(self, ledger):
        df = trades_frame(ledger, now=NOW)
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["reason", "pnl", "fees", "hold_seconds", "daily"]
        assert len(df) == 4
        assert df["daily"].tolist() == [True, True, False, False]

    def test_empty_frame_keeps_columns(self):
        df = trades_frame([], now=NOW)
        assert df.empty
        assert "pnl" in df.columns
