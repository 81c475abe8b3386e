"""Per-invocation search configuration.

``SearchConfig`` is an immutable value object built once per call. Option maps
use the camelCase keys of the public ``search`` contract (``maxDepth``,
``dFactor``, ...) and are parsed by ``SearchConfig.from_options``.
"""

import logging
import numbers
import sys
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from .data_models import Direction, HeuristicFormula
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
UNBOUNDED_DEPTH = sys.maxsize

# Option key -> dataclass field
OPTION_FIELDS: Dict[str, str] = {
    'direction': 'direction',
    'edgeTypeNames': 'edge_type_names',
    'vertexAxisNames': 'vertex_axis_names',
    'parallel': 'parallel',
    'tieBreaker': 'tie_breaker',
    'maxDepth': 'max_depth',
    'emptyIfMaxDepth': 'empty_if_max_depth',
    'dFactor': 'd_factor',
    'heuristicFormula': 'heuristic_formula',
    'customHeuristicFormula': 'custom_heuristic_formula',
    'haversineRadius': 'haversine_radius',
    'timeout': 'timeout',
}

# Older spellings still found in stored queries
_FORMULA_ALIASES = {'MANHATAN': HeuristicFormula.MANHATTAN}


@dataclass(frozen=True)
class SearchConfig:
    """Options for one search invocation."""
    direction: Direction = Direction.OUT
    edge_type_names: Tuple[str, ...] = ()
    vertex_axis_names: Tuple[str, ...] = ()
    parallel: bool = False  # reserved, not used by the algorithms
    tie_breaker: bool = False
    max_depth: int = UNBOUNDED_DEPTH
    empty_if_max_depth: bool = False
    d_factor: float = 1.0
    heuristic_formula: HeuristicFormula = HeuristicFormula.MANHATTAN
    custom_heuristic_formula: str = ""
    haversine_radius: float = EARTH_RADIUS_KM
    timeout: Optional[float] = None  # milliseconds, LRTA* only; None is unbounded

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None,
                     base: Optional['SearchConfig'] = None) -> 'SearchConfig':
        """Build a configuration from an option map.

        Args:
            options: Mapping using the public option keys. ``None`` values keep
                the default.
            base: Configuration whose values are used for keys not present.

        Returns:
            New SearchConfig

        Raises:
            ConfigurationError: If an option has the wrong type or range
        """
        config = base or cls()
        if not options:
            return config
        if not isinstance(options, Mapping):
            raise ConfigurationError(
                f"Search options must be a mapping, got {type(options).__name__}"
            )

        changes: Dict[str, Any] = {}
        for key, value in options.items():
            field_name = OPTION_FIELDS.get(key)
            if field_name is None:
                logger.warning(f"Ignoring unknown search option '{key}'")
                continue
            if value is None:
                continue
            changes[field_name] = _PARSERS[field_name](key, value)

        return replace(config, **changes)

    def to_options(self) -> Dict[str, Any]:
        """Inverse of ``from_options``: plain option map with camelCase keys."""
        by_field = {v: k for k, v in OPTION_FIELDS.items()}
        options: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (Direction, HeuristicFormula)):
                value = value.value
            elif isinstance(value, tuple):
                value = list(value)
            elif f.name == 'max_depth' and value == UNBOUNDED_DEPTH:
                value = None
            options[by_field[f.name]] = value
        return options


def _parse_direction(key: str, value: Any) -> Direction:
    if isinstance(value, Direction):
        return value
    if isinstance(value, str):
        try:
            return Direction[value.strip().upper()]
        except KeyError:
            pass
    raise ConfigurationError(
        f"{key} must be one of {[d.value for d in Direction]}, got {value!r}"
    )


def _parse_formula(key: str, value: Any) -> HeuristicFormula:
    if isinstance(value, HeuristicFormula):
        return value
    if isinstance(value, str):
        name = value.strip().upper()
        if name in _FORMULA_ALIASES:
            return _FORMULA_ALIASES[name]
        try:
            return HeuristicFormula[name]
        except KeyError:
            pass
    raise ConfigurationError(
        f"Unknown heuristic formula {value!r}; expected one of "
        f"{[f.value for f in HeuristicFormula]}"
    )


def _parse_names(key: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value else ()
    try:
        names = tuple(value)
    except TypeError:
        raise ConfigurationError(f"{key} must be a string or a list of strings, got {value!r}")
    for name in names:
        if not isinstance(name, str):
            raise ConfigurationError(f"{key} must contain only strings, got {name!r}")
    return names


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ('true', 'false'):
        return value.strip().lower() == 'true'
    raise ConfigurationError(f"{key} must be a boolean, got {value!r}")


def _parse_number(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be a number, got {value!r}")
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            pass
    raise ConfigurationError(f"{key} must be a number, got {value!r}")


def _parse_max_depth(key: str, value: Any) -> int:
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        if value < 0:
            raise ConfigurationError(f"{key} must be a non-negative integer, got {value!r}")
        return int(value)
    number = _parse_number(key, value)
    if number != int(number) or number < 0:
        raise ConfigurationError(f"{key} must be a non-negative integer, got {value!r}")
    return int(number)


def _parse_d_factor(key: str, value: Any) -> float:
    number = _parse_number(key, value)
    if number < 0:
        raise ConfigurationError(f"{key} must be non-negative, got {value!r}")
    return number


def _parse_radius(key: str, value: Any) -> float:
    number = _parse_number(key, value)
    if number <= 0:
        raise ConfigurationError(f"{key} must be positive, got {value!r}")
    return number


def _parse_timeout(key: str, value: Any) -> float:
    number = _parse_number(key, value)
    if number < 0:
        raise ConfigurationError(f"{key} must be a non-negative number of milliseconds, got {value!r}")
    return number


def _parse_str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{key} must be a string, got {value!r}")
    return value


_PARSERS = {
    'direction': _parse_direction,
    'edge_type_names': _parse_names,
    'vertex_axis_names': _parse_names,
    'parallel': _parse_bool,
    'tie_breaker': _parse_bool,
    'max_depth': _parse_max_depth,
    'empty_if_max_depth': _parse_bool,
    'd_factor': _parse_d_factor,
    'heuristic_formula': _parse_formula,
    'custom_heuristic_formula': _parse_str,
    'haversine_radius': _parse_radius,
    'timeout': _parse_timeout,
}
