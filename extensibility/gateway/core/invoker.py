"""
Hook Invoker

Calls a callback-style hook ``handler(user, context, done)`` and captures
exactly one outcome.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, Set

from ..models.outcome import ErrorOutcome, NoResult, Outcome, SuccessResult
from .settle import SettleOnce

logger = logging.getLogger("gateway.invoker")

Hook = Callable[[Dict[str, Any], Dict[str, Any], Callable[..., None]], Any]


class HookInvoker:
    """
    Runs one hook invocation per ``invoke`` call.

    The first of a ``done`` call or an exception raised by the hook wins.
    There is no timeout: a hook that never calls ``done`` never completes.
    Arguments passed to ``done`` after ``error`` and ``result`` are ignored.
    """

    def __init__(self, hook: Hook):
        self.hook = hook
        self._tasks: Set["asyncio.Future[Any]"] = set()

    async def invoke(self, user: Dict[str, Any], context: Dict[str, Any]) -> Outcome:
        slot: SettleOnce[Outcome] = SettleOnce()

        def done(error: Any = None, result: Any = None, *_: Any) -> None:
            if error:
                slot.settle(ErrorOutcome(error))
            elif result is None:
                slot.settle(NoResult())
            else:
                slot.settle(SuccessResult(result))

        try:
            returned = self.hook(user, context, done)
        except Exception as e:
            logger.info(
                "Hook raised synchronously",
                extra={"error_type": type(e).__name__, "settled": slot.settled},
            )
            slot.settle(ErrorOutcome(e))
        else:
            if inspect.isawaitable(returned):
                task = asyncio.ensure_future(returned)
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
                task.add_done_callback(lambda t: self._on_task_done(t, slot))

        outcome = await slot.wait()
        if slot.discarded:
            logger.warning(
                "Hook completed more than once; extra completions were ignored",
                extra={"discarded": slot.discarded},
            )
        return outcome

    @staticmethod
    def _on_task_done(task: "asyncio.Future[Any]", slot: SettleOnce) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.info(
                "Async hook raised",
                extra={"error_type": type(exc).__name__, "settled": slot.settled},
            )
            slot.settle(ErrorOutcome(exc))


async def invoke(hook: Hook, user: Dict[str, Any], context: Dict[str, Any]) -> Outcome:
    """Invoke ``hook`` once and return its outcome."""
    return await HookInvoker(hook).invoke(user, context)
