"""Explicit registration table for root query operations.

Each operation is declared once with its argument specs, the strawberry
resolver exposing it and the pure handler doing the work. The table is built
at import time and frozen; nothing mutates it afterwards.
"""

import inspect
import logging
import typing
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from app.core.exceptions import InputValidationError, RegistrationError

logger = logging.getLogger(__name__)

_MISSING = object()


class ValueKind(Enum):
    STRING = "String"
    INT = "Int"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    NULL = "Null"
    LIST = "List"
    OBJECT = "Object"


@dataclass(frozen=True)
class ArgumentValue:
    """A raw argument value tagged with the kind it carries."""

    kind: ValueKind
    value: Any

    @classmethod
    def of(cls, raw: Any) -> "ArgumentValue":
        # bool is a subclass of int, check it first
        if raw is None:
            return cls(ValueKind.NULL, None)
        if isinstance(raw, bool):
            return cls(ValueKind.BOOLEAN, raw)
        if isinstance(raw, int):
            return cls(ValueKind.INT, raw)
        if isinstance(raw, float):
            return cls(ValueKind.FLOAT, raw)
        if isinstance(raw, str):
            return cls(ValueKind.STRING, raw)
        if isinstance(raw, Mapping):
            return cls(ValueKind.OBJECT, dict(raw))
        if isinstance(raw, list | tuple):
            return cls(ValueKind.LIST, list(raw))
        raise TypeError(f"Unsupported argument value type: {type(raw).__name__}")


# Kinds each declared kind accepts, and how the accepted value is converted.
_COERCIONS: dict[ValueKind, dict[ValueKind, Callable[[Any], Any]]] = {
    ValueKind.STRING: {ValueKind.STRING: str},
    ValueKind.INT: {ValueKind.INT: int},
    ValueKind.FLOAT: {ValueKind.FLOAT: float, ValueKind.INT: float},
    ValueKind.BOOLEAN: {ValueKind.BOOLEAN: bool},
    ValueKind.LIST: {ValueKind.LIST: list},
    ValueKind.OBJECT: {ValueKind.OBJECT: dict},
}


@dataclass(frozen=True)
class ArgumentSpec:
    name: str
    kind: ValueKind
    required: bool = True

    @property
    def type_name(self) -> str:
        return f"{self.kind.value}!" if self.required else self.kind.value

    def coerce(self, raw: Any = _MISSING) -> Any:
        """Coerce a raw value to this argument's declared kind.

        Raises InputValidationError naming the argument on failure.
        """
        if raw is _MISSING or raw is None:
            if self.required:
                detail = "was not provided" if raw is _MISSING else "must not be null"
                raise InputValidationError(
                    f"Argument '{self.name}' of type '{self.type_name}' {detail}.",
                    field=self.name,
                )
            return None

        try:
            tagged = ArgumentValue.of(raw)
        except TypeError as e:
            raise InputValidationError(
                f"Argument '{self.name}': {e}", field=self.name
            ) from e

        convert = _COERCIONS.get(self.kind, {}).get(tagged.kind)
        if convert is None:
            raise InputValidationError(
                f"Argument '{self.name}' of type '{self.type_name}' cannot represent "
                f"a {tagged.kind.value} value: {raw!r}",
                field=self.name,
            )
        return convert(tagged.value)


def bind_arguments(
    specs: tuple[ArgumentSpec, ...], raw: Mapping[str, Any]
) -> dict[str, Any]:
    """Coerce raw arguments against their specs.

    Every failing argument contributes one entry to the raised
    InputValidationError; nothing is bound unless all arguments coerce.
    """
    bound: dict[str, Any] = {}
    errors: dict[str, str] = {}
    declared = {spec.name for spec in specs}

    for spec in specs:
        try:
            bound[spec.name] = spec.coerce(raw.get(spec.name, _MISSING))
        except InputValidationError as e:
            errors[spec.name] = e.message

    for name in raw:
        if name not in declared:
            errors[name] = f"Unknown argument '{name}'."

    if errors:
        first = next(iter(errors))
        raise InputValidationError("; ".join(errors.values()), field=first, errors=errors)
    return bound


@dataclass(frozen=True)
class Operation:
    """A named root query.

    ``resolver`` is the strawberry-facing function (its signature declares the
    GraphQL arguments). ``handler`` does the work; it receives the bound
    arguments plus the context attributes listed in ``context_params``.
    The resolver must be annotated to return ``result_type | None``.
    """

    name: str
    resolver: Callable[..., Any]
    handler: Callable[..., Any]
    result_type: type
    arguments: tuple[ArgumentSpec, ...] = ()
    context_params: tuple[str, ...] = ()
    description: str | None = None

    def invoke(self, context: Any, raw_arguments: Mapping[str, Any]) -> Any:
        kwargs = bind_arguments(self.arguments, raw_arguments)
        for param in self.context_params:
            kwargs[param] = getattr(context, param)
        return self.handler(**kwargs)


class OperationRegistry:
    def __init__(self) -> None:
        self._operations: dict[str, Operation] = {}
        self._frozen = False

    def register(self, operation: Operation) -> Operation:
        if self._frozen:
            raise RegistrationError(
                f"Registry is frozen; cannot register '{operation.name}'."
            )
        if operation.name in self._operations:
            raise RegistrationError(f"Operation '{operation.name}' already registered.")

        argument_names = [spec.name for spec in operation.arguments]
        resolver_params = [
            name
            for name in inspect.signature(operation.resolver).parameters
            if name not in ("self", "info")
        ]
        if sorted(resolver_params) != sorted(argument_names):
            raise RegistrationError(
                f"Resolver for '{operation.name}' takes {resolver_params}, "
                f"declared arguments are {argument_names}."
            )
        handler_params = list(inspect.signature(operation.handler).parameters)
        if sorted(handler_params) != sorted(argument_names + list(operation.context_params)):
            raise RegistrationError(
                f"Handler for '{operation.name}' takes {handler_params}, expected "
                f"{argument_names + list(operation.context_params)}."
            )
        returns = typing.get_type_hints(operation.resolver).get("return")
        if set(typing.get_args(returns)) != {operation.result_type, type(None)}:
            raise RegistrationError(
                f"Resolver for '{operation.name}' must return "
                f"{operation.result_type.__name__} | None, got {returns!r}."
            )

        self._operations[operation.name] = operation
        logger.debug(
            "Registered operation",
            extra={"props": {"operation": operation.name, "arguments": argument_names}},
        )
        return operation

    def freeze(self) -> Mapping[str, Operation]:
        self._frozen = True
        return self.operations

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def operations(self) -> Mapping[str, Operation]:
        return MappingProxyType(self._operations)

    def get(self, name: str) -> Operation:
        try:
            return self._operations[name]
        except KeyError:
            raise KeyError(f"Unknown operation '{name}'") from None

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._operations.values())

    def __len__(self) -> int:
        return len(self._operations)
