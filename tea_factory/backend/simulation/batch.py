"""
Tea Batch Engine

Stage-transition and time-stepping engine for one batch of leaves.

CRITICAL RULES:
- STEAMING -> ROLLING -> DRYING -> FINISHED, no skips, no going back (except reset)
- Stage laws only ever see whole seconds
- Time splits exactly at stage boundaries (carryover into the next stage)
- Quality score is frozen the moment FINISHED is reached
- No exceptions: invalid calls are rejected and return False
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Any, Optional

from .physics import (
    TeaLeaf,
    ModelVariant,
    ModelParams,
    ProcessState,
    StageProcess,
    QualityStatus,
    make_model,
    make_process,
    compute_quality_score,
    classify_quality,
)

logger = logging.getLogger("TeaBatch")

# Absorbs repeated-addition error (0.1 * 10 = 0.9999999999999999)
ACCUMULATION_EPSILON = 1e-9


@dataclass(frozen=True)
class StageDurations:
    """Whole-second duration of each stage."""
    steaming: int = 30
    rolling: int = 30
    drying: int = 60

    def for_state(self, state: ProcessState) -> int:
        if state == ProcessState.STEAMING:
            return self.steaming
        if state == ProcessState.ROLLING:
            return self.rolling
        if state == ProcessState.DRYING:
            return self.drying
        return 0

    @property
    def total(self) -> int:
        return self.steaming + self.rolling + self.drying


class TeaBatch:
    """
    One batch moving through steaming, rolling and drying.

    Drivers feed time with update() (fractional frame time) or step()
    (whole seconds) and read the leaf through the accessors. Splitting the
    same total time across any number of calls gives the same result.
    """

    def __init__(self, durations: Optional[StageDurations] = None,
                 model: ModelVariant = ModelVariant.DEFAULT,
                 batch_id: str = "batch01"):
        self.id = batch_id
        self.durations = durations or StageDurations()
        self._model = model
        self._params: ModelParams = make_model(model)

        self._leaf = TeaLeaf()
        self._state = ProcessState.STEAMING
        self._process: Optional[StageProcess] = None
        self._pending_seconds = 0.0
        self._elapsed_seconds = 0
        self._stage_remaining_seconds = 0

        self._quality_score_final = 0.0
        self._quality_finalized = False

        self.reset()

    # ============================================================
    # COMMANDS
    # ============================================================

    def reset(self) -> None:
        """Back to STEAMING with default leaf, cleared timers and score."""
        self._leaf = TeaLeaf().normalize()
        self._state = ProcessState.STEAMING
        self._process = make_process(self._state, self._params)
        self._stage_remaining_seconds = self.durations.for_state(self._state)
        self._pending_seconds = 0.0
        self._elapsed_seconds = 0
        self._quality_score_final = 0.0
        self._quality_finalized = False

    def set_model(self, model: ModelVariant) -> bool:
        """
        Switch coefficient set mid-run.

        Only the active stage handler is rebuilt: stage, elapsed time and
        leaf are kept. Gating on the running flag is the driver's job.
        """
        self._model = model
        self._params = make_model(model)
        self._process = make_process(self._state, self._params)
        logger.debug(f"{self.id}: model -> {model} at t={self._elapsed_seconds}s ({self._state})")
        return True

    def set_initial_leaf(self, leaf: TeaLeaf) -> None:
        """Seed the leaf state (normalized copy). Timers are untouched."""
        self._leaf = leaf.copy().normalize()

    def update(self, delta_seconds: float) -> bool:
        """
        Advance by a possibly fractional delta (e.g. frame time).

        Fractions accumulate until at least one whole second is pending;
        only whole seconds reach the stage laws.

        Returns:
            False if already FINISHED or delta is not a positive finite number
        """
        if self._process is None:
            return False
        if not math.isfinite(delta_seconds) or delta_seconds <= 0.0:
            return False

        self._pending_seconds += delta_seconds
        if self._pending_seconds + ACCUMULATION_EPSILON >= 1.0:
            whole = int(math.floor(self._pending_seconds + ACCUMULATION_EPSILON))
            self._pending_seconds = max(0.0, self._pending_seconds - whole)
            self._advance(whole)
        return True

    def step(self, delta_seconds: int) -> bool:
        """
        Advance by whole seconds (CLI / batch mode).

        Returns:
            False if already FINISHED or delta < 1 (state unchanged)
        """
        if self._process is None:
            return False
        seconds = int(delta_seconds)
        if seconds <= 0:
            return False
        self._advance(seconds)
        return True

    # ============================================================
    # TIME STEPPING
    # ============================================================

    def _advance(self, seconds: int) -> None:
        """Feed whole seconds through the stages, carrying over boundaries."""
        while seconds > 0 and self._process is not None:
            if self._stage_remaining_seconds <= 0:
                self._advance_stage()
                continue

            chunk = min(seconds, self._stage_remaining_seconds)
            for _ in range(chunk):
                self._process.apply_step(self._leaf, 1)
            self._elapsed_seconds += chunk
            self._stage_remaining_seconds -= chunk
            seconds -= chunk

            if self._stage_remaining_seconds <= 0:
                self._advance_stage()

    def _advance_stage(self) -> None:
        previous = self._state
        self._state = previous.next()
        self._process = make_process(self._state, self._params)
        self._stage_remaining_seconds = self.durations.for_state(self._state)
        logger.info(f"{self.id}: {previous} -> {self._state} at t={self._elapsed_seconds}s")

        if self._process is None:
            self._pending_seconds = 0.0
            self._finalize_quality()

    def _finalize_quality(self) -> None:
        if self._quality_finalized:
            return
        self._quality_score_final = compute_quality_score(
            self._leaf.moisture, self._leaf.aroma, self._leaf.color)
        self._quality_finalized = True
        logger.info(f"{self.id}: quality finalized {self._quality_score_final:.2f} "
                    f"({classify_quality(self._quality_score_final)})")

    # ============================================================
    # READ ACCESSORS
    # ============================================================

    @property
    def process_state(self) -> ProcessState:
        return self._state

    @property
    def is_finished(self) -> bool:
        return self._state == ProcessState.FINISHED

    @property
    def model(self) -> ModelVariant:
        return self._model

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed_seconds

    @property
    def stage_remaining_seconds(self) -> int:
        return self._stage_remaining_seconds

    @property
    def pending_seconds(self) -> float:
        return self._pending_seconds

    @property
    def moisture(self) -> float:
        return self._leaf.moisture

    @property
    def temperature_c(self) -> float:
        return self._leaf.temperature_c

    @property
    def aroma(self) -> float:
        return self._leaf.aroma

    @property
    def color(self) -> float:
        return self._leaf.color

    @property
    def leaf(self) -> TeaLeaf:
        """Copy of the current leaf (the batch keeps exclusive ownership)."""
        return self._leaf.copy()

    @property
    def has_quality_score_final(self) -> bool:
        return self._quality_finalized

    def quality_score(self) -> float:
        """Frozen score once FINISHED, otherwise computed from the live leaf."""
        if self._quality_finalized:
            return self._quality_score_final
        return compute_quality_score(self._leaf.moisture, self._leaf.aroma, self._leaf.color)

    def quality_status(self) -> QualityStatus:
        return classify_quality(self.quality_score())

    def get_state(self) -> Dict[str, Any]:
        """Snapshot for the dashboard / debugging (rounded for display)."""
        score = self.quality_score()
        return {
            'id': self.id,
            'process': self._state.value,
            'model': self._model.value,
            'elapsed_seconds': self._elapsed_seconds,
            'stage_remaining_seconds': self._stage_remaining_seconds,
            'moisture': round(self._leaf.moisture, 4),
            'temperature_c': round(self._leaf.temperature_c, 2),
            'aroma': round(self._leaf.aroma, 2),
            'color': round(self._leaf.color, 2),
            'quality_score': round(score, 2),
            'quality_status': classify_quality(score).value,
            'quality_final': self._quality_finalized,
        }

    def get_tags(self) -> Dict[str, Any]:
        """Flat tag snapshot, e.g. {'batch01.process': 'ROLLING', ...}."""
        state = self.get_state()
        del state['id']
        return {f"{self.id}.{key}": value for key, value in state.items()}
