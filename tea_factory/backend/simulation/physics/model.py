"""
Stage Coefficient Model

Coefficient sets for the three stage laws, selected by model variant.

Derivation:
    params(variant) = DEFAULT params with every RATE coefficient * k

    where:
        k = 1.00 (default)
        k = 0.75 (gentle)      slower heating/drying/aroma change
        k = 1.25 (aggressive)  faster heating/drying/aroma change

Targets and thresholds (target_temp_c, overheat_c) are never scaled.
Scaling all rates through one multiplier keeps a variant from ending up
with some coefficients still at their DEFAULT values.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Dict, Any


class ModelVariant(Enum):
    """Named coefficient presets (value = display name)."""
    DEFAULT = "default"
    GENTLE = "gentle"
    AGGRESSIVE = "aggressive"

    @property
    def multiplier(self) -> float:
        return _MULTIPLIERS[self]

    @classmethod
    def from_name(cls, name: str) -> "ModelVariant":
        """Parse 'default' / 'gentle' / 'aggressive' (case-insensitive)."""
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown model: {name}") from None

    def __str__(self) -> str:
        return self.value


_MULTIPLIERS = {
    ModelVariant.DEFAULT: 1.0,
    ModelVariant.GENTLE: 0.75,
    ModelVariant.AGGRESSIVE: 1.25,
}


@dataclass(frozen=True)
class SteamingParams:
    """Steaming: heat toward target, absorb steam, build aroma/color."""
    target_temp_c: float = 95.0  # °C
    heat_k: float = 0.08  # 1/s (relaxation rate toward target)
    moisture_gain_per_s: float = 0.0008  # fraction/s
    aroma_gain_per_s: float = 1.0
    color_gain_per_s: float = 0.2

    RATE_FIELDS = ('heat_k', 'moisture_gain_per_s', 'aroma_gain_per_s', 'color_gain_per_s')


@dataclass(frozen=True)
class RollingParams:
    """Rolling: cool toward target, press out moisture."""
    target_temp_c: float = 70.0  # °C
    cool_k: float = 0.05  # 1/s
    moisture_loss_k: float = 0.0015  # fraction/s
    aroma_gain_per_s: float = 0.6
    color_gain_per_s: float = 0.3

    RATE_FIELDS = ('cool_k', 'moisture_loss_k', 'aroma_gain_per_s', 'color_gain_per_s')


@dataclass(frozen=True)
class DryingParams:
    """Drying: exponential moisture decay, aroma damage above overheat_c."""
    target_temp_c: float = 60.0  # °C
    temp_k: float = 0.07  # 1/s
    dry_k: float = 0.05  # 1/s (exponential decay constant)
    aroma_recover_per_s: float = 0.2
    overheat_c: float = 70.0  # °C (threshold, not scaled)
    aroma_damage_k: float = 0.02  # aroma per (°C over threshold * s)
    color_gain_per_s: float = 0.15

    RATE_FIELDS = ('temp_k', 'dry_k', 'aroma_recover_per_s', 'aroma_damage_k', 'color_gain_per_s')


@dataclass(frozen=True)
class ModelParams:
    """Per-stage coefficient bundle. Immutable once built."""
    steaming: SteamingParams = field(default_factory=SteamingParams)
    rolling: RollingParams = field(default_factory=RollingParams)
    drying: DryingParams = field(default_factory=DryingParams)

    def get_state(self) -> Dict[str, Any]:
        """Flatten for debugging, e.g. {'steaming.heat_k': 0.08, ...}."""
        state = {}
        for stage_name in ('steaming', 'rolling', 'drying'):
            stage = getattr(self, stage_name)
            for f in fields(stage):
                state[f"{stage_name}.{f.name}"] = getattr(stage, f.name)
        return state


def _scaled(params, k: float):
    changes = {name: getattr(params, name) * k for name in params.RATE_FIELDS}
    return replace(params, **changes)


def make_model(variant: ModelVariant = ModelVariant.DEFAULT) -> ModelParams:
    """
    Build the coefficient set for a model variant.

    DEFAULT is returned unmodified; GENTLE / AGGRESSIVE scale every
    rate coefficient of every stage by the variant multiplier.
    """
    params = ModelParams()
    if variant == ModelVariant.DEFAULT:
        return params

    k = variant.multiplier
    return ModelParams(
        steaming=_scaled(params.steaming, k),
        rolling=_scaled(params.rolling, k),
        drying=_scaled(params.drying, k),
    )
