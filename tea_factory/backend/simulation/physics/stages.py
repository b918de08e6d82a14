"""
Stage Process Laws

One deterministic update law per manufacturing stage.

Physics (per dt seconds):
    STEAMING:
        dT = (T_target - T) * heat_k * dt        (first-order relaxation)
        dM = moisture_gain_per_s * dt            (steam uptake)
        dA = aroma_gain_per_s * dt * (1 - A/100) (saturating growth)
        dC = color_gain_per_s * dt * (1 - C/100)

    ROLLING:
        dT = (T_target - T) * cool_k * dt        (cooling relaxation)
        dM = -moisture_loss_k * dt * (0.4 + 0.6*M)
        dA, dC saturating growth

    DRYING:
        dT = (T_target - T) * temp_k * dt
        M  = M * exp(-dry_k * dt)                (exponential decay)
        A  -= aroma_damage_k * (T - overheat_c) * dt   if T > overheat_c
        A  += aroma_recover_per_s * dt * (1 - A/100)   otherwise
        dC saturating growth

Key Principles:
1. Deterministic: same leaf + params + dt -> same leaf
2. dt is always a whole number of seconds >= 0 (enforced by TeaBatch)
3. normalize() after every step; temperature is never clamped

A stage handler is a (state, params) value. apply_step() dispatches on
the state through the _LAWS table; make_process() builds the handler for
a state.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Union

from .model import ModelParams, SteamingParams, RollingParams, DryingParams
from .tea_leaf import TeaLeaf


class ProcessState(Enum):
    """Ordered manufacturing stages. FINISHED is terminal."""
    STEAMING = "STEAMING"
    ROLLING = "ROLLING"
    DRYING = "DRYING"
    FINISHED = "FINISHED"

    def next(self) -> "ProcessState":
        """Following stage; FINISHED maps to itself."""
        return _NEXT_STATE[self]

    def __str__(self) -> str:
        return self.value


_NEXT_STATE = {
    ProcessState.STEAMING: ProcessState.ROLLING,
    ProcessState.ROLLING: ProcessState.DRYING,
    ProcessState.DRYING: ProcessState.FINISHED,
    ProcessState.FINISHED: ProcessState.FINISHED,
}

StageParams = Union[SteamingParams, RollingParams, DryingParams]


def _saturate(value: float, rate: float, dt: float) -> float:
    return value + rate * dt * (1.0 - value / 100.0)


def steam(leaf: TeaLeaf, p: SteamingParams, dt_seconds: int) -> None:
    dt = float(dt_seconds)
    leaf.temperature_c += (p.target_temp_c - leaf.temperature_c) * p.heat_k * dt
    leaf.moisture += p.moisture_gain_per_s * dt
    leaf.aroma = _saturate(leaf.aroma, p.aroma_gain_per_s, dt)
    leaf.color = _saturate(leaf.color, p.color_gain_per_s, dt)
    leaf.normalize()


def roll(leaf: TeaLeaf, p: RollingParams, dt_seconds: int) -> None:
    dt = float(dt_seconds)
    leaf.temperature_c += (p.target_temp_c - leaf.temperature_c) * p.cool_k * dt
    # Wetter leaves lose water faster; the 0.4 floor keeps loss going near zero
    leaf.moisture -= p.moisture_loss_k * dt * (0.4 + 0.6 * leaf.moisture)
    leaf.aroma = _saturate(leaf.aroma, p.aroma_gain_per_s, dt)
    leaf.color = _saturate(leaf.color, p.color_gain_per_s, dt)
    leaf.normalize()


def dry(leaf: TeaLeaf, p: DryingParams, dt_seconds: int) -> None:
    dt = float(dt_seconds)
    leaf.temperature_c += (p.target_temp_c - leaf.temperature_c) * p.temp_k * dt
    leaf.moisture *= math.exp(-p.dry_k * dt)

    if leaf.temperature_c > p.overheat_c:
        leaf.aroma -= p.aroma_damage_k * (leaf.temperature_c - p.overheat_c) * dt
    else:
        leaf.aroma = _saturate(leaf.aroma, p.aroma_recover_per_s, dt)

    leaf.color = _saturate(leaf.color, p.color_gain_per_s, dt)
    leaf.normalize()


_LAWS: Dict[ProcessState, Callable[[TeaLeaf, StageParams, int], None]] = {
    ProcessState.STEAMING: steam,
    ProcessState.ROLLING: roll,
    ProcessState.DRYING: dry,
}


@dataclass(frozen=True)
class StageProcess:
    """Active stage handler: which law to run and with which coefficients."""
    state: ProcessState
    params: StageParams

    def apply_step(self, leaf: TeaLeaf, dt_seconds: int) -> None:
        """
        Advance the leaf by dt_seconds under this stage's law.

        Args:
            leaf: Leaf to mutate in place
            dt_seconds: Whole seconds (>= 0)
        """
        _LAWS[self.state](leaf, self.params, dt_seconds)


def make_process(state: ProcessState, model: ModelParams) -> Optional[StageProcess]:
    """
    Build the handler for a stage.

    Returns None for FINISHED (no handler is active once the batch is done).
    """
    if state == ProcessState.STEAMING:
        return StageProcess(state, model.steaming)
    if state == ProcessState.ROLLING:
        return StageProcess(state, model.rolling)
    if state == ProcessState.DRYING:
        return StageProcess(state, model.drying)
    return None
