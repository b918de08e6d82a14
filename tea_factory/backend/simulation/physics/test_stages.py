"""
Stage Law Validation

Validates:
1. Steaming heats toward 95°C without overshoot
2. Rolling cools and removes moisture
3. Drying decays moisture exponentially
4. Overheat damages aroma during drying
5. Handler factory and stage ordering
"""

import math

import pytest

from tea_factory.backend.simulation.physics import (
    TeaLeaf,
    ModelParams,
    ProcessState,
    make_process,
)
from tea_factory.backend.simulation.physics.stages import steam, roll, dry


def test_steam_one_second():
    leaf = TeaLeaf()
    steam(leaf, ModelParams().steaming, 1)

    assert leaf.temperature_c == pytest.approx(30.6)
    assert leaf.moisture == pytest.approx(0.7508)
    assert leaf.aroma == pytest.approx(10.9)
    assert leaf.color == pytest.approx(10.18)


def test_steam_no_overshoot():
    leaf = TeaLeaf()
    p = ModelParams().steaming
    previous = leaf.temperature_c
    for _ in range(300):
        steam(leaf, p, 1)
        assert leaf.temperature_c >= previous
        assert leaf.temperature_c <= p.target_temp_c
        previous = leaf.temperature_c


def test_roll_cools_and_dries():
    leaf = TeaLeaf(moisture=0.8, temperature_c=95.0)
    roll(leaf, ModelParams().rolling, 1)

    assert leaf.temperature_c == pytest.approx(95.0 - 25.0 * 0.05)
    assert leaf.moisture == pytest.approx(0.8 - 0.0015 * (0.4 + 0.6 * 0.8))


def test_roll_keeps_removing_moisture_near_zero():
    leaf = TeaLeaf(moisture=0.0001)
    roll(leaf, ModelParams().rolling, 1)
    assert leaf.moisture == 0.0


def test_dry_exponential_decay():
    leaf = TeaLeaf(moisture=0.6, temperature_c=60.0)
    dry(leaf, ModelParams().drying, 10)

    assert leaf.moisture == pytest.approx(0.6 * math.exp(-0.5))


def test_dry_overheat_damages_aroma():
    p = ModelParams().drying
    leaf = TeaLeaf(temperature_c=95.0, aroma=50.0)
    dry(leaf, p, 1)

    # 95 -> 92.55, which is 22.55 over the threshold
    assert leaf.temperature_c == pytest.approx(92.55)
    assert leaf.aroma == pytest.approx(50.0 - 0.02 * 22.55)


def test_dry_recovers_aroma_below_threshold():
    leaf = TeaLeaf(temperature_c=60.0, aroma=50.0)
    dry(leaf, ModelParams().drying, 1)
    assert leaf.aroma == pytest.approx(50.0 + 0.2 * 0.5)


def test_make_process():
    model = ModelParams()

    assert make_process(ProcessState.STEAMING, model).params is model.steaming
    assert make_process(ProcessState.ROLLING, model).params is model.rolling
    assert make_process(ProcessState.DRYING, model).params is model.drying
    assert make_process(ProcessState.FINISHED, model) is None


def test_apply_step_dispatches_on_state():
    model = ModelParams()
    a, b = TeaLeaf(), TeaLeaf()

    make_process(ProcessState.ROLLING, model).apply_step(a, 3)
    roll(b, model.rolling, 3)

    assert a == b


def test_stage_order():
    assert ProcessState.STEAMING.next() is ProcessState.ROLLING
    assert ProcessState.ROLLING.next() is ProcessState.DRYING
    assert ProcessState.DRYING.next() is ProcessState.FINISHED
    assert ProcessState.FINISHED.next() is ProcessState.FINISHED
