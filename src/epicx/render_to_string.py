"""Render a component to text once its epics have settled.

The first pass exists only to trigger whatever actions the component
dispatches while rendering. After that the action stream is ended, we
wait for every epic to finish, restart the middleware for the next
request, and render again against the settled state.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import reactivex as rx
from reactivex import Observable
from reactivex import operators as ops
from rich.console import Console

from epicx.runtime import EpicMiddleware

logger = logging.getLogger("epicx.render_to_string")


def _render(component: Any, width: int) -> str:
    renderable = component() if callable(component) else component
    console = Console(width=width, color_system=None, force_terminal=False)
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


def render_to_string(
    component: Any | Callable[[], Any],
    middleware: EpicMiddleware,
    *,
    width: int = 80,
) -> Observable:
    """Observable emitting {"markup": text} once the epics have drained.

    component is a Rich renderable, or a zero-argument callable that
    builds one from current state.
    """
    try:
        logger.debug("Initial render pass started")
        _render(component, width)
        logger.debug("Initial render pass completed")
    except Exception as error:
        return rx.throw(error)

    logger.debug("Ending action stream")
    middleware.end()

    def _final_pass(_: Any) -> dict:
        middleware.restart()
        return {"markup": _render(component, width)}

    return middleware.pipe(
        ops.last_or_default(),
        ops.map(_final_pass),
    )
