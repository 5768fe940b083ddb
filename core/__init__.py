"""Ordered fallback cascades shared by the text and visual acquisition paths."""

from .cascade import CascadeResult, Stage, StageOutcome, run_cascade

__all__ = [
    "CascadeResult",
    "Stage",
    "StageOutcome",
    "run_cascade",
]
