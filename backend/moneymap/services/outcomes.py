"""Convert operation outcomes into ``ActionResult`` values at the API boundary."""

from __future__ import annotations

import logging
from typing import Awaitable, TypeVar

from moneymap.core.errors import MoneyMapError
from moneymap.core.telemetry import action_span, record_action_outcome
from moneymap.schemas.common import ActionResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNKNOWN_KIND = "unknown"


def failure_message(label: str, exc: BaseException) -> str:
    cause = str(exc) or type(exc).__name__
    return f"Failed to {label}: {cause}"


async def run_action(label: str, awaitable: Awaitable[T]) -> ActionResult[T]:
    """Await ``awaitable`` once; any exception becomes a failed result, nothing is retried."""

    with action_span(label) as span:
        try:
            data = await awaitable
        except MoneyMapError as exc:
            logger.warning("Action '%s' failed (%s): %s", label, exc.kind, exc)
            record_action_outcome(exc.kind, span)
            return ActionResult.fail(failure_message(label, exc), kind=exc.kind)
        except Exception as exc:
            logger.exception("Action '%s' failed unexpectedly", label)
            record_action_outcome(UNKNOWN_KIND, span)
            return ActionResult.fail(failure_message(label, exc), kind=UNKNOWN_KIND)
        record_action_outcome("ok", span)
    return ActionResult.ok(data)


__all__ = ["UNKNOWN_KIND", "failure_message", "run_action"]
