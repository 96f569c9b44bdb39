import datetime
import math

import pytest

from finmate.forecast import ewma, predict_runout

TODAY = datetime.date(2026, 10, 18)


def test_ewma_empty_is_zero():
    assert ewma([]) == 0


def test_ewma_single_element():
    assert ewma([120]) == 120
    assert ewma([0]) == 0


def test_ewma_all_zero():
    assert ewma([0, 0, 0, 0]) == 0


def test_ewma_smoothing():
    # 100 -> 0.4*0 + 0.6*100 = 60 -> 0.4*50 + 0.6*60 = 56
    assert ewma([100, 0, 50]) == pytest.approx(56)
    assert ewma([100, 0, 50], alpha=1.0) == pytest.approx(50)


def test_balance_identity():
    f = predict_runout(8000, 500, 1234.5, [100, 200], TODAY)
    assert f.balance == pytest.approx(8000 + 500 - 1234.5)


def test_no_burn_means_unbounded_runway():
    f = predict_runout(8000, 0, 0, [0, 0, 0], TODAY)
    assert f.burn == 0
    assert f.days_left == math.inf
    assert f.runout_date is None
    assert not f.has_runout


def test_empty_series_means_unbounded_runway():
    f = predict_runout(100, 0, 5000, [], TODAY)
    assert f.days_left == math.inf
    assert f.balance == -4900


def test_negative_entries_are_ignored():
    f = predict_runout(1000, 0, 0, [-50, 100], TODAY)
    assert f.burn == 100
    assert f.days_left == 10


def test_days_left_truncates():
    f = predict_runout(1000, 0, 0, [300], TODAY)
    assert f.days_left == 3
    assert f.runout_date == datetime.date(2026, 10, 21)


def test_negative_balance_gives_zero_days():
    f = predict_runout(100, 0, 500, [500], TODAY)
    assert f.balance == -400
    assert f.days_left == 0
    assert f.runout_date == TODAY


def test_scenario_single_mess_spend_on_first_day():
    day_one = datetime.date(2026, 10, 1)
    f = predict_runout(8000, 0, 120, [120], day_one)
    assert f.burn == 120
    assert f.balance == 7880
    assert f.days_left == 65
    assert f.runout_date == datetime.date(2026, 12, 5)
