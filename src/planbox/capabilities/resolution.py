from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

Capabilities = Mapping[str, Any]

# A strategy inspects (parameter, capabilities) and returns the capability
# key it resolves to plus the value found there, or None to pass.
ResolveFn = Callable[[str, Capabilities], "Resolution | None"]


@dataclass(frozen=True, slots=True)
class Resolution:
    key: str
    value: Any
    strategy: str


@dataclass(frozen=True, slots=True)
class ResolutionStrategy:
    name: str
    resolve: ResolveFn


def _lookup(key: str, capabilities: Capabilities, strategy: str) -> Resolution | None:
    if key in capabilities and capabilities[key] is not None:
        return Resolution(key, capabilities[key], strategy)
    return None


def _template(name: str, pattern: str) -> ResolutionStrategy:
    def resolve(parameter: str, capabilities: Capabilities) -> Resolution | None:
        return _lookup(pattern.format(p=parameter), capabilities, name)

    return ResolutionStrategy(name, resolve)


def _min_max_pair(parameter: str, capabilities: Capabilities) -> Resolution | None:
    # min_<p> / max_<p> stored side by side describe one range.
    bounds: dict[str, Any] = {}
    for side in ("min", "max"):
        value = capabilities.get(f"{side}_{parameter}")
        if value is not None:
            bounds[side] = value
    if not bounds:
        return None
    return Resolution(f"{parameter}_range", bounds, "min_max_pair")


def _without_underscores(parameter: str, capabilities: Capabilities) -> Resolution | None:
    return _lookup(parameter.replace("_", ""), capabilities, "without_underscores")


def snake_to_camel(name: str) -> str:
    return re.sub(r"_([a-z0-9])", lambda m: m.group(1).upper(), name)


def camel_to_snake(name: str) -> str:
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name).lower()


def _camel_case(parameter: str, capabilities: Capabilities) -> Resolution | None:
    return _lookup(snake_to_camel(parameter), capabilities, "camel_case")


def _snake_case(parameter: str, capabilities: Capabilities) -> Resolution | None:
    return _lookup(camel_to_snake(parameter), capabilities, "snake_case")


DEFAULT_STRATEGIES: tuple[ResolutionStrategy, ...] = (
    _template("literal", "{p}"),
    _template("supported", "supported_{p}"),
    _template("supported_plural", "supported_{p}s"),
    _template("range_suffix", "{p}_range"),
    ResolutionStrategy("min_max_pair", _min_max_pair),
    _template("capable_suffix", "{p}_capable"),
    ResolutionStrategy("without_underscores", _without_underscores),
    ResolutionStrategy("camel_case", _camel_case),
    ResolutionStrategy("snake_case", _snake_case),
)


class KeyResolver:
    """
    Ordered chain of naming-convention strategies for finding the machine
    capability that answers a job parameter.

    The first strategy that finds a key wins, so the order of the chain is
    the precedence order. Callers can append or insert their own strategies
    for site-specific naming conventions.
    """

    def __init__(self, strategies: Sequence[ResolutionStrategy] = DEFAULT_STRATEGIES) -> None:
        self._strategies: list[ResolutionStrategy] = list(strategies)

    def register(self, strategy: ResolutionStrategy, *, before: str | None = None) -> None:
        if before is None:
            self._strategies.append(strategy)
            return
        names = self.names
        if before not in names:
            raise KeyError(f"Unknown resolution strategy {before!r}.")
        self._strategies.insert(names.index(before), strategy)

    def resolve(self, parameter: str, capabilities: Capabilities | None) -> Resolution | None:
        if not capabilities:
            return None
        for strategy in self._strategies:
            found = strategy.resolve(parameter, capabilities)
            if found is not None:
                return found
        return None

    @property
    def names(self) -> list[str]:
        return [s.name for s in self._strategies]

    def __repr__(self) -> str:
        return f"KeyResolver(strategies={self.names})"


default_resolver = KeyResolver()
