"""Errors raised by epicx."""


class EpicError(Exception):
    """Base class for all epicx errors."""


class ContractViolation(EpicError, TypeError):
    """An epic or container broke its calling contract during setup.

    Raised synchronously, before any subscription exists, so the
    middleware never starts in a half-wired state.
    """


class NotStartedError(EpicError, RuntimeError):
    """A lifecycle method was called before the middleware was bound to a store."""
