"""Epic middleware — runs epics against the store's action stream.

Every action the store dispatches is reduced first, then pushed onto a
shared Subject that all epics observe. Whatever actions the epics emit
are dispatched back into the store, which closes the loop.

One start cycle owns three things: the action Subject, the lifecycle
Subject, and a CompositeDisposable holding the epic subscription. They
are created together and swapped out together on restart(), so a cycle
is never half-reset.

Usage:
    def ping_epic(actions, get_state, deps):
        return actions.pipe(of_type("PING"), ops.map(lambda _: {"type": "PONG"}))

    middleware = create_epic(ping_epic)
    store = Store(reducer, middleware=[middleware])
    store.dispatch({"type": "PING"})  # reducer sees PING, then PONG
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable

import reactivex as rx
from reactivex import Observable
from reactivex import operators as ops
from reactivex.abc import DisposableBase, ObserverBase, SchedulerBase
from reactivex.disposable import CompositeDisposable
from reactivex.subject import Subject

from epicx.actions import is_action
from epicx.combine import Epic, epic_name
from epicx.errors import ContractViolation, NotStartedError

logger = logging.getLogger("epicx.runtime")

Dispatch = Callable[[Any], Any]


@dataclass(frozen=True)
class _Cycle:
    """Everything owned by one start cycle."""

    actions: Subject
    lifecycle: Subject
    disposable: CompositeDisposable


def _rethrow(error: Exception) -> None:
    # Fail fast: a broken epic takes the whole pipeline down with it.
    raise error


def _warn_on_non_actions(output: Observable, name: str) -> Observable:
    """Log the first non-action an epic emits. Later ones pass silently."""
    warned = False

    def _check(value: object) -> None:
        nonlocal warned
        if warned or is_action(value):
            return
        warned = True
        logger.warning(
            "Epic %s emitted %r, which is not an action and will not be "
            "dispatched. Filter out non-action elements inside the epic.",
            name,
            value,
        )

    return output.pipe(ops.do_action(on_next=_check))


class EpicMiddleware(Observable):
    """Store middleware that runs epics. Also an Observable of the lifecycle.

    Subscribing observes the current cycle's lifecycle Subject, which
    completes once every epic output has completed. restart() replaces
    that Subject, so a subscription only ever sees the cycle it was made in.
    """

    def __init__(
        self,
        dependencies: Mapping[str, Any] | None = None,
        epics: tuple[Epic, ...] = (),
        *,
        scheduler: SchedulerBase | None = None,
    ) -> None:
        super().__init__()
        self._dependencies = MappingProxyType(dict(dependencies or {}))
        self._epics = tuple(epics)
        self._scheduler = scheduler
        self._store = None
        self._cycle: _Cycle | None = None

    @property
    def dependencies(self) -> Mapping[str, Any]:
        return self._dependencies

    @property
    def epics(self) -> tuple[Epic, ...]:
        return self._epics

    @property
    def started(self) -> bool:
        return self._cycle is not None

    # --- Middleware protocol ---

    def __call__(self, store) -> Callable[[Dispatch], Dispatch]:
        """Bind to a store (anything with dispatch/get_state) and start the epics."""
        self._store = store
        self._start()

        def wrap(next_dispatch: Dispatch) -> Dispatch:
            def dispatch(action: Any) -> Any:
                # Reduce first: epics must never see an action before the store does.
                result = next_dispatch(action)
                self._current.actions.on_next(action)
                return result

            return dispatch

        return wrap

    # --- Lifecycle ---

    def end(self) -> None:
        """Complete the action stream. Epics should wind down in response."""
        logger.debug("Ending action stream")
        self._current.actions.on_completed()

    def dispose(self) -> None:
        """Unsubscribe every epic of the current cycle. Does not complete actions."""
        logger.debug("Disposing epic subscriptions")
        self._current.disposable.dispose()

    def restart(self) -> None:
        """Tear down the current cycle and re-run every epic from scratch."""
        logger.debug("Restarting %d epics", len(self._epics))
        cycle = self._current
        cycle.disposable.dispose()
        cycle.actions.dispose()
        # A failed start leaves the middleware unbound rather than on a dead cycle.
        self._cycle = None
        self._start()

    def subscribe_on_completed(self, callback: Callable[[], None]) -> DisposableBase:
        """Call ``callback`` once the current cycle's epics have all completed."""
        return self._current.lifecycle.subscribe(on_completed=callback)

    def subscribe(self, *args: Any, **kwargs: Any) -> DisposableBase:
        """Observe the current cycle's lifecycle. Raises NotStartedError before binding."""
        self._current
        return super().subscribe(*args, **kwargs)

    def _subscribe_core(
        self, observer: ObserverBase, scheduler: SchedulerBase | None = None
    ) -> DisposableBase:
        return self._current.lifecycle.subscribe(observer, scheduler=scheduler)

    # --- Internals ---

    @property
    def _current(self) -> _Cycle:
        if self._cycle is None:
            raise NotStartedError(
                "Epic middleware has not been applied to a store yet"
            )
        return self._cycle

    def _invoke(self, epic: Epic, actions: Subject) -> Observable:
        name = epic_name(epic)
        output = epic(actions, self._store.get_state, self._dependencies)
        if not isinstance(output, Observable):
            raise ContractViolation(
                f"Epics should return an Observable but got {output!r}. "
                f"Check the {name} epic."
            )
        if output is actions:
            raise ContractViolation(
                f"Epics should not be identity functions. Check the {name} epic."
            )
        return _warn_on_non_actions(output, name)

    def _start(self) -> None:
        cycle = _Cycle(
            actions=Subject(),
            lifecycle=Subject(),
            disposable=CompositeDisposable(),
        )
        # Every epic runs and is checked before anything subscribes.
        outputs = [self._invoke(epic, cycle.actions) for epic in self._epics]
        forwarded = rx.merge(*outputs).pipe(ops.filter(is_action))
        if self._scheduler is not None:
            forwarded = forwarded.pipe(ops.observe_on(self._scheduler))

        # Installed before subscribing: epics may emit synchronously on subscribe.
        self._cycle = cycle
        store = self._store
        subscription = forwarded.subscribe(
            on_next=lambda action: store.dispatch(action),
            on_error=_rethrow,
            on_completed=cycle.lifecycle.on_completed,
        )
        cycle.disposable.add(subscription)
        logger.debug("Started %d epics", len(self._epics))

    def __repr__(self) -> str:
        state = "started" if self._cycle is not None else "unbound"
        return f"EpicMiddleware({len(self._epics)} epics, {state})"


def create_epic(
    dependencies: Mapping[str, Any] | Epic | None = None,
    *epics: Epic,
    scheduler: SchedulerBase | None = None,
) -> EpicMiddleware:
    """Build epic middleware from a dependency mapping and any number of epics.

    If the first argument is itself callable it is treated as an epic and
    the dependencies default to an empty mapping.

    Usage:
        middleware = create_epic({"api": client}, fetch_user_epic, autosave_epic)
        middleware = create_epic(fetch_user_epic)  # no dependencies
    """
    if callable(dependencies):
        epics = (dependencies, *epics)
        dependencies = None
    return EpicMiddleware(dependencies, epics, scheduler=scheduler)
