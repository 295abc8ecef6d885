"""Behaviour shared by every registered estimator."""
import math

import numpy as np
import pytest

from dominant_cycle import DiagnosticKind, EstimatorConfigError, RecordingSink, build_estimator

ESTIMATOR_PARAMS = {
    "tasc": None,
    "combined": None,
    "acp": {"avg_length": 24},
    "mesa": {"length": 32, "num_coefficients": 8},
    "griffiths": {"length": 30},
    "homodyne": None,
}

INVALID_PARAMS = [
    ("tasc", {"lower_bound": 50, "upper_bound": 8}),
    ("tasc", {"median_length": 0}),
    ("combined", {"bandwidth": 0.0}),
    ("acp", {"avg_length": 1}),
    ("mesa", {"length": 40, "num_coefficients": 40}),
    ("mesa", {"lower_bound": 10.5}),
    ("griffiths", {"length": 1}),
    ("homodyne", {"alpha": 1.5}),
    ("homodyne", {"lower_bound": 10}),
]


def _market(n_samples: int = 300, seed: int = 11) -> np.ndarray:
    rng = np.random.default_rng(seed)
    x = np.arange(n_samples)
    walk = np.cumsum(rng.normal(0.0, 0.5, n_samples))
    return 100.0 + walk + 3.0 * np.sin(2 * np.pi * x / 22.0)


def _run(estimator, prices):
    return [estimator.update(p, i) for i, p in enumerate(prices)]


@pytest.fixture(params=sorted(ESTIMATOR_PARAMS))
def name(request):
    return request.param


def test_output_is_finite_and_within_bounds(name):
    estimator = build_estimator(name, ESTIMATOR_PARAMS[name])
    outputs = np.array(_run(estimator, _market()))
    assert np.all(np.isfinite(outputs))
    assert np.all(outputs >= estimator.lower_bound)
    assert np.all(outputs <= estimator.upper_bound)
    assert estimator.samples_seen == outputs.size
    assert estimator.last_estimate == outputs[-1]


def test_default_returned_before_min_history(name):
    estimator = build_estimator(name, ESTIMATOR_PARAMS[name])
    outputs = _run(estimator, _market(estimator.min_history))
    assert outputs == [estimator.default_period] * estimator.min_history


def test_deterministic(name):
    prices = _market()
    first = _run(build_estimator(name, ESTIMATOR_PARAMS[name]), prices)
    second = _run(build_estimator(name, ESTIMATOR_PARAMS[name]), prices)
    assert first == second


def test_reset_restores_fresh_state(name):
    prices = _market()
    estimator = build_estimator(name, ESTIMATOR_PARAMS[name])
    first = _run(estimator, prices)
    estimator.reset()
    estimator.reset()
    assert estimator.samples_seen == 0
    assert estimator.last_estimate == estimator.default_period
    assert _run(estimator, prices) == first


def test_non_finite_sample_is_replaced_by_previous(name):
    prices = _market()
    corrupted = prices.copy()
    corrupted[100] = np.nan
    corrupted[101] = np.inf
    repaired = prices.copy()
    repaired[100] = repaired[101] = prices[99]

    sink = RecordingSink()
    estimator = build_estimator(name, ESTIMATOR_PARAMS[name], sink=sink)
    outputs = _run(estimator, corrupted)
    assert outputs == _run(build_estimator(name, ESTIMATOR_PARAMS[name]), repaired)
    invalid = [e for e in sink.events if e.kind is DiagnosticKind.INVALID_SAMPLE]
    assert [e.step_index for e in invalid] == [100, 101]


def test_recovers_after_out_of_range_sample(name):
    prices = _market(1200)
    spiked = prices.copy()
    spiked[300] = 1e300

    sink = RecordingSink()
    estimator = build_estimator(name, ESTIMATOR_PARAMS[name], sink=sink)
    outputs = np.array(_run(estimator, spiked))
    clean = np.array(_run(build_estimator(name, ESTIMATOR_PARAMS[name]), prices))

    assert np.all(np.isfinite(outputs))
    assert np.all(outputs[:300] == clean[:300])
    flagged = {DiagnosticKind.DEGENERATE, DiagnosticKind.STEP_ABORTED}
    assert any(e.step_index == 300 and e.kind in flagged for e in sink.events)
    assert DiagnosticKind.INVALID_SAMPLE not in sink.kinds()
    assert np.abs(outputs[-100:] - clean[-100:]).max() <= 2.0


@pytest.mark.parametrize("step_index", [None, "later", float("nan"), float("inf")])
def test_unusable_step_index_falls_back_to_sample_count(name, step_index):
    sink = RecordingSink()
    estimator = build_estimator(name, ESTIMATOR_PARAMS[name], sink=sink)
    value = estimator.update(100.0, step_index)
    assert estimator.lower_bound <= value <= estimator.upper_bound
    assert estimator.samples_seen == 1
    event = sink.events[0]
    assert event.kind is DiagnosticKind.DEGENERATE
    assert event.step_index == 0
    assert "step index" in event.detail


def test_constant_input_settles_on_default(name):
    estimator = build_estimator(name, ESTIMATOR_PARAMS[name])
    outputs = _run(estimator, np.full(200, 75.0))
    assert outputs == pytest.approx([estimator.default_period] * 200)


def test_explicit_default_period(name):
    estimator = build_estimator(name, ESTIMATOR_PARAMS[name])
    custom = math.floor(estimator.lower_bound) + 2.0
    params = dict(ESTIMATOR_PARAMS[name] or {}, default_period=custom)
    estimator = build_estimator(name, params)
    assert estimator.default_period == custom
    assert estimator.update(100.0, 0) == custom


@pytest.mark.parametrize("estimator_name, params", INVALID_PARAMS)
def test_invalid_configuration_raises(estimator_name, params):
    with pytest.raises(EstimatorConfigError):
        build_estimator(estimator_name, params)


def test_unknown_field_raises(name):
    with pytest.raises(EstimatorConfigError, match="Unknown"):
        build_estimator(name, {"not_a_field": 1})


def test_failed_configure_keeps_state(name):
    prices = _market()
    estimator = build_estimator(name, ESTIMATOR_PARAMS[name])
    twin = build_estimator(name, ESTIMATOR_PARAMS[name])
    _run(estimator, prices[:150])
    _run(twin, prices[:150])
    config = estimator.config
    with pytest.raises(EstimatorConfigError):
        estimator.configure({"not_a_field": 1})
    assert estimator.config is config
    assert estimator.samples_seen == 150
    tail = [estimator.update(p, 150 + i) for i, p in enumerate(prices[150:])]
    assert tail == [twin.update(p, 150 + i) for i, p in enumerate(prices[150:])]


def test_configure_rebuilds_and_resets():
    estimator = build_estimator("mesa")
    _run(estimator, _market(100))
    estimator.configure(length=24, num_coefficients=6)
    assert estimator.config.length == 24
    assert estimator.samples_seen == 0
    assert estimator.min_history == 23
