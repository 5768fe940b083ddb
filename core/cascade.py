"""Ordered fallback stages evaluated until one produces an acceptable result."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

from utils.exceptions import BotProtectionError


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _not_none(result: object) -> bool:
    return result is not None


@dataclass(frozen=True)
class Stage(Generic[T]):
    """One acquisition strategy and its acceptance check."""

    name: str
    attempt: Callable[[], Awaitable[Optional[T]]]
    is_acceptable: Callable[[T], bool] = _not_none


@dataclass
class StageOutcome:
    """What happened when a stage ran."""

    name: str
    accepted: bool
    error: Optional[str] = None
    blocked: bool = False


@dataclass
class CascadeResult(Generic[T]):
    value: Optional[T] = None
    stage: Optional[str] = None
    outcomes: List[StageOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.stage is not None

    @property
    def blocked(self) -> bool:
        """True when some stage confirmed a bot-protection wall."""
        return any(outcome.blocked for outcome in self.outcomes)


async def run_cascade(stages: Sequence[Stage[T]], *, label: str) -> CascadeResult[T]:
    """
    Run stages in order and stop at the first acceptable result.

    Every stage is isolated: an exception is logged and the next stage runs.
    Escalations are logged with the stage name and reason so a run can be
    audited afterwards.
    """
    result: CascadeResult[T] = CascadeResult()

    for stage in stages:
        try:
            value = await stage.attempt()
        except BotProtectionError as e:
            logger.warning(f"[Cascade] {label}: stage '{stage.name}' blocked by bot protection ({e.message})")
            result.outcomes.append(StageOutcome(stage.name, accepted=False, error=e.message, blocked=True))
            continue
        except Exception as e:
            logger.warning(f"[Cascade] {label}: stage '{stage.name}' failed: {e}")
            logger.debug(f"[Cascade] {label}: stage '{stage.name}' error detail", exc_info=True)
            result.outcomes.append(StageOutcome(stage.name, accepted=False, error=str(e) or type(e).__name__))
            continue

        if value is not None and stage.is_acceptable(value):
            logger.info(f"[Cascade] {label}: accepted result from stage '{stage.name}'")
            result.outcomes.append(StageOutcome(stage.name, accepted=True))
            result.value = value
            result.stage = stage.name
            return result

        logger.info(f"[Cascade] {label}: stage '{stage.name}' result not acceptable, escalating")
        result.outcomes.append(StageOutcome(stage.name, accepted=False))

    logger.warning(f"[Cascade] {label}: every stage exhausted ({', '.join(s.name for s in stages)})")
    return result
