"""
Tea Leaf Validation

Validates:
1. Default leaf values
2. normalize() clamps moisture/aroma/color but not temperature
3. copy() does not share state with its source
"""

from tea_factory.backend.simulation.physics import TeaLeaf, clamp


def test_defaults():
    leaf = TeaLeaf()
    assert leaf.moisture == 0.75
    assert leaf.temperature_c == 25.0
    assert leaf.aroma == 10.0
    assert leaf.color == 10.0


def test_clamp():
    assert clamp(-1.0, 0.0, 1.0) == 0.0
    assert clamp(2.0, 0.0, 1.0) == 1.0
    assert clamp(0.3, 0.0, 1.0) == 0.3


def test_normalize_clamps_domains():
    leaf = TeaLeaf(moisture=1.7, temperature_c=250.0, aroma=-5.0, color=140.0)
    result = leaf.normalize()

    assert result is leaf
    assert leaf.moisture == 1.0
    assert leaf.aroma == 0.0
    assert leaf.color == 100.0
    # Temperature is never clamped
    assert leaf.temperature_c == 250.0


def test_copy_is_independent():
    leaf = TeaLeaf()
    other = leaf.copy()
    other.moisture = 0.1

    assert leaf.moisture == 0.75
    assert other == TeaLeaf(moisture=0.1)
