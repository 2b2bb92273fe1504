"""Textual integration for epicx. Opt-in — requires textual.

contain() wraps a Widget class so mounting it fires a fetch action taken
from its props. render() mounts a widget into a container as an Observable.
Textual coupling lives here only; the middleware stays view-agnostic.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

import reactivex as rx
from reactivex import Observable
from reactivex.disposable import Disposable
from textual.widget import Widget

from epicx.errors import ContractViolation

logger = logging.getLogger("epicx.textual")

Props = Mapping[str, Any]


def contain(
    fetch_action: str | None = None,
    get_action_args: Callable[[Props], Any] | None = None,
    is_primed: Callable[[Props], bool] | None = None,
    should_refetch: Callable[[Props, Props], bool] | None = None,
):
    """Class decorator: fetch data for a widget when it mounts.

    fetch_action names a callable in the widget's props. On mount it is
    called with get_action_args(props), unless is_primed(props) says the
    data is already there. update_props() calls it again whenever
    should_refetch(props, next_props) is true.

    Usage:
        @contain(fetch_action="fetch_user", get_action_args=lambda p: [p["user_id"]])
        class UserCard(Static):
            ...

        UserCard(props={"user_id": 7, "fetch_user": fetch_user})
    """
    args_for = get_action_args or (lambda props: [])
    primed = is_primed or (lambda props: False)

    def decorator(widget_cls: type[Widget]) -> type[Widget]:
        name = widget_cls.__name__

        def _run_action(props: Props, action: Callable) -> Any:
            args = args_for(props)
            if not isinstance(args, (list, tuple)):
                raise ContractViolation(
                    f"{name} get_action_args should always return a list "
                    f"but got {args!r}. Check the fetch options for {name}."
                )
            return action(*args)

        class Contained(widget_cls):
            def __init__(self, *args: Any, props: Props | None = None, **kwargs: Any) -> None:
                super().__init__(*args, **kwargs)
                self.props: Props = dict(props or {})
                self._fetch: Callable | None = None

            def on_mount(self) -> None:
                if fetch_action is None:
                    logger.debug("Contain(%s) has no fetch action defined", name)
                    return
                if primed(self.props):
                    logger.debug("Contain(%s) is primed", name)
                    return
                action = self.props.get(fetch_action)
                if not callable(action):
                    raise ContractViolation(
                        f"{fetch_action} should be a function on Contain({name})'s "
                        f"props but found {action!r}. Check the fetch options for {name}."
                    )
                self._fetch = action
                _run_action(self.props, action)

            def update_props(self, next_props: Props) -> None:
                """Replace props, refetching if should_refetch asks for it."""
                props, self.props = self.props, dict(next_props)
                if (
                    self._fetch is not None
                    and should_refetch is not None
                    and should_refetch(props, self.props)
                ):
                    _run_action(self.props, self._fetch)
                if self.is_mounted:
                    self.refresh()

        Contained.__name__ = Contained.__qualname__ = f"Contained{name}"
        return Contained

    return decorator


def render(widget: Widget, container: Widget) -> Observable:
    """Mount widget into container on subscribe. Disposing removes it again."""

    def _subscribe(observer, scheduler=None):
        try:
            container.mount(widget)
        except Exception as error:
            observer.on_error(error)
            return Disposable()
        observer.on_next(widget)
        return Disposable(widget.remove)

    return rx.create(_subscribe)
