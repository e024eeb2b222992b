"""Exception types raised by the ui-extras runtime."""

from __future__ import annotations


class UiExtrasError(Exception):
    """Base class for errors raised by ui-extras itself."""


class EntityNotFoundError(UiExtrasError, KeyError):
    """Raised when a mutating world call targets a missing entity."""


class ResourceNotFoundError(UiExtrasError, KeyError):
    """Raised when a required world resource has not been inserted."""


class SystemParamError(UiExtrasError, TypeError):
    """Raised when a system callable asks for a parameter that cannot be provided."""


class SystemNotInitializedError(UiExtrasError, RuntimeError):
    """Raised when a system is run before ``initialize`` succeeded."""


class ScheduleBuildError(UiExtrasError, ValueError):
    """Raised when system ordering constraints cannot be satisfied."""


class UnknownCommandError(UiExtrasError, LookupError):
    """Raised by a strict console when a command name is not registered."""
