"""System contract and the function-backed system used for click behaviors."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Protocol, runtime_checkable

from ui_extras.ecs.commands import Commands
from ui_extras.ecs.world import World
from ui_extras.errors import SystemNotInitializedError, SystemParamError

logger = logging.getLogger("ui_extras.system")

_BUILTIN_PARAMS = ("world", "commands")


@runtime_checkable
class System(Protocol):
    """Unit of work that is initialized once and may run many times."""

    def initialize(self, world: World) -> None:
        """Prepare internal state against ``world``."""

    def run(self, input: Any, world: World) -> None:
        """Execute once with the given input."""

    def apply_deferred(self, world: World) -> None:
        """Flush writes staged during :meth:`run`."""


class FunctionSystem:
    """Adapts a plain callable to :class:`System`.

    Parameters are matched by name when the system is initialized:
    ``world`` receives the world, ``commands`` a private :class:`Commands`
    buffer flushed by :meth:`apply_deferred`, and ``input_param`` (for
    example ``entity``) the value passed to :meth:`run`.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        *,
        input_param: str | None = None,
        setup: Callable[[World], None] | None = None,
    ) -> None:
        self._func = func
        self._input_param = input_param
        self._setup = setup
        self._param_names: tuple[str, ...] | None = None
        self._commands: Commands | None = None

    @property
    def name(self) -> str:
        return getattr(self._func, "__qualname__", repr(self._func))

    @property
    def initialized(self) -> bool:
        return self._param_names is not None

    def __repr__(self) -> str:
        return f"FunctionSystem({self.name})"

    def initialize(self, world: World) -> None:
        param_names = self._resolve_params()
        if self._setup is not None:
            self._setup(world)
        self._commands = Commands(world)
        self._param_names = param_names
        logger.debug("system_initialized", extra={"system": self.name, "params": param_names})

    def run(self, input: Any, world: World) -> None:
        if self._param_names is None or self._commands is None:
            raise SystemNotInitializedError(f"System {self.name} must be initialized before running")

        provided = {"world": world, "commands": self._commands}
        if self._input_param is not None:
            provided[self._input_param] = input
        try:
            self._func(**{name: provided[name] for name in self._param_names})
        except BaseException:
            # a failed run must not leak its staged writes into the next one
            self._commands.clear()
            raise

    def apply_deferred(self, world: World) -> None:
        if self._commands is not None:
            self._commands.apply(world)

    def _resolve_params(self) -> tuple[str, ...]:
        available = set(_BUILTIN_PARAMS)
        if self._input_param is not None:
            available.add(self._input_param)

        names: list[str] = []
        for parameter in inspect.signature(self._func).parameters.values():
            if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue
            if parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
                raise SystemParamError(f"System {self.name}: positional-only parameter {parameter.name!r}")
            if parameter.name in available:
                names.append(parameter.name)
            elif parameter.default is inspect.Parameter.empty:
                raise SystemParamError(
                    f"System {self.name}: cannot provide parameter {parameter.name!r} "
                    f"(expected one of {sorted(available)})"
                )
        return tuple(names)


def into_system(obj: Any, *, input_param: str | None = None) -> System:
    """Return ``obj`` if it already is a system, otherwise wrap a callable."""
    if isinstance(obj, System):
        return obj
    if callable(obj):
        return FunctionSystem(obj, input_param=input_param)
    raise TypeError(f"Expected a callable or System, got {type(obj).__name__}")
