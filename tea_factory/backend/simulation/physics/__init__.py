"""
Physics Module for Tea Factory Simulation

Deterministic stage models for green tea manufacturing.
Coefficients are illustrative, chosen so model variants behave visibly
differently, not fitted to real tea chemistry.

Architecture:
- TeaBatch owns the leaf and the active StageProcess
- StageProcess applies one stage law per whole-second step
- Quality scoring reads the leaf, never mutates it
"""

from .tea_leaf import TeaLeaf, clamp
from .model import (
    ModelVariant,
    ModelParams,
    SteamingParams,
    RollingParams,
    DryingParams,
    make_model,
)
from .stages import ProcessState, StageProcess, make_process
from .quality import QualityStatus, compute_quality_score, classify_quality

__all__ = [
    'TeaLeaf',
    'clamp',
    'ModelVariant',
    'ModelParams',
    'SteamingParams',
    'RollingParams',
    'DryingParams',
    'make_model',
    'ProcessState',
    'StageProcess',
    'make_process',
    'QualityStatus',
    'compute_quality_score',
    'classify_quality',
]
