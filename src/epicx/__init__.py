"""epicx: epic middleware — reactive side effects for Redux-style stores."""

from importlib.metadata import version as _version

__version__ = _version("epicx")

from epicx.errors import EpicError, ContractViolation, NotStartedError
from epicx.actions import action_type, is_action, of_type
from epicx.combine import combine_epics
from epicx.runtime import EpicMiddleware, create_epic
from epicx.store import INIT, MiddlewareAPI, Store
from epicx.render_to_string import render_to_string
# textual NOT auto-imported — opt-in only

__all__ = [
    "EpicError",
    "ContractViolation",
    "NotStartedError",
    "action_type",
    "is_action",
    "of_type",
    "combine_epics",
    "EpicMiddleware",
    "create_epic",
    "INIT",
    "MiddlewareAPI",
    "Store",
    "render_to_string",
]
