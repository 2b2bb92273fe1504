"""Action helpers — what counts as an action, and filtering by type.

An action is any Mapping with a string "type" key, or any object with a
string ``type`` attribute. Everything else may travel through epic streams
but is dropped before it reaches the store.
"""

from __future__ import annotations

from collections.abc import Mapping

from reactivex import operators as ops


def action_type(value: object) -> object | None:
    """Return the ``type`` of an action-like value, or None."""
    if isinstance(value, Mapping):
        return value.get("type")
    return getattr(value, "type", None)


def is_action(value: object) -> bool:
    return isinstance(action_type(value), str)


def of_type(*types: str):
    """Operator: keep only actions whose type is one of ``types``.

    Usage:
        def ping_epic(actions, get_state, deps):
            return actions.pipe(
                of_type("PING"),
                ops.map(lambda _: {"type": "PONG"}),
            )
    """
    wanted = frozenset(types)

    def _matches(value: object) -> bool:
        kind = action_type(value)
        return isinstance(kind, str) and kind in wanted

    return ops.filter(_matches)
