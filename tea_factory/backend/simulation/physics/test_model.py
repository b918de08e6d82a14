"""
Coefficient Model Validation

Validates:
1. DEFAULT params are the documented constants
2. GENTLE / AGGRESSIVE scale every rate coefficient
3. Targets and thresholds are never scaled
"""

import pytest

from tea_factory.backend.simulation.physics import (
    ModelVariant,
    ModelParams,
    make_model,
)


def test_default_coefficients():
    params = make_model(ModelVariant.DEFAULT)

    assert params == ModelParams()
    assert params.steaming.target_temp_c == 95.0
    assert params.steaming.heat_k == 0.08
    assert params.rolling.moisture_loss_k == 0.0015
    assert params.drying.dry_k == 0.05
    assert params.drying.overheat_c == 70.0


@pytest.mark.parametrize("variant, k", [
    (ModelVariant.GENTLE, 0.75),
    (ModelVariant.AGGRESSIVE, 1.25),
])
def test_variant_scales_every_rate(variant, k):
    base = make_model(ModelVariant.DEFAULT)
    params = make_model(variant)

    for stage_name in ('steaming', 'rolling', 'drying'):
        stage = getattr(params, stage_name)
        ref = getattr(base, stage_name)
        for name in stage.RATE_FIELDS:
            assert getattr(stage, name) == pytest.approx(getattr(ref, name) * k)
        assert stage.target_temp_c == ref.target_temp_c

    assert params.drying.overheat_c == base.drying.overheat_c


def test_from_name():
    assert ModelVariant.from_name("gentle") is ModelVariant.GENTLE
    assert ModelVariant.from_name(" AGGRESSIVE ") is ModelVariant.AGGRESSIVE
    assert str(ModelVariant.DEFAULT) == "default"

    with pytest.raises(ValueError):
        ModelVariant.from_name("turbo")


def test_get_state_is_flat():
    state = make_model(ModelVariant.GENTLE).get_state()

    assert state['steaming.heat_k'] == pytest.approx(0.06)
    assert state['drying.overheat_c'] == 70.0
    assert 'rolling.cool_k' in state


def test_rate_ordering():
    gentle, default, aggressive = (make_model(v) for v in
                                   (ModelVariant.GENTLE, ModelVariant.DEFAULT, ModelVariant.AGGRESSIVE))

    for get in (lambda p: p.steaming.heat_k,
                lambda p: p.steaming.aroma_gain_per_s,
                lambda p: p.rolling.moisture_loss_k,
                lambda p: p.drying.dry_k,
                lambda p: p.drying.aroma_damage_k):
        assert get(gentle) < get(default) < get(aggressive)
