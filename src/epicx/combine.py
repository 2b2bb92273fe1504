"""combine_epics() — fold many epics into one root epic.

Every epic is called eagerly with the same arguments before anything
subscribes, so a broken epic fails the whole call instead of leaving
the others half-started.
"""

from __future__ import annotations

from typing import Any, Callable

import reactivex as rx
from reactivex import Observable

from epicx.errors import ContractViolation

Epic = Callable[..., Observable]


def epic_name(epic: Callable) -> str:
    """Best-effort display name for an epic in error and log messages."""
    name = getattr(epic, "__name__", None)
    if not name or name == "<lambda>":
        return "anonymous"
    return name


def combine_epics(*epics: Epic) -> Epic:
    """Return an epic that calls every epic with its arguments and merges the results.

    Usage:
        root_epic = combine_epics(fetch_user_epic, autosave_epic)
        middleware = create_epic({"api": client}, root_epic)
    """

    def combined(*args: Any) -> Observable:
        outputs = []
        for epic in epics:
            output = epic(*args)
            if not output:
                raise ContractViolation(
                    f'combine_epics: the epic "{epic_name(epic)}" does not return '
                    "a stream. Double check you're not missing a return statement!"
                )
            outputs.append(output)
        return rx.merge(*outputs)

    return combined
