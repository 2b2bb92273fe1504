"""Store — a minimal Redux-style host for epic middleware.

Holds the state, runs the reducer on every dispatch, and notifies
listeners. Middleware wrap dispatch in the usual Redux shape:
middleware(api) -> next_dispatch -> action -> result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

INIT = "@@epicx/INIT"

Reducer = Callable[[Any, Any], Any]
Listener = Callable[[], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class MiddlewareAPI:
    """What middleware get to see of the store."""

    get_state: Callable[[], Any]
    dispatch: Callable[[Any], Any]


class Store:
    """Reducer-driven state container with a middleware chain."""

    def __init__(
        self,
        reducer: Reducer,
        state: Any = None,
        middleware: Iterable[Callable] = (),
    ) -> None:
        self._reducer = reducer
        self._listeners: list[Listener] = []
        self._reducing = False
        self._state = reducer(state, {"type": INIT})

        # Dispatches made while the chain is being built skip middleware.
        self._dispatch: Callable[[Any], Any] = self._reduce
        api = MiddlewareAPI(get_state=self.get_state, dispatch=self.dispatch)
        chain = [m(api) for m in middleware]
        dispatch = self._reduce
        for link in reversed(chain):
            dispatch = link(dispatch)
        self._dispatch = dispatch

    def get_state(self) -> Any:
        return self._state

    def dispatch(self, action: Any) -> Any:
        """Send an action through the middleware chain into the reducer."""
        return self._dispatch(action)

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Call listener after every reduced action. Returns a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def _reduce(self, action: Any) -> Any:
        if self._reducing:
            raise RuntimeError("Reducers may not dispatch actions.")
        self._reducing = True
        try:
            self._state = self._reducer(self._state, action)
        finally:
            self._reducing = False
        for listener in list(self._listeners):
            listener()
        return action
