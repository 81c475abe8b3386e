"""Configuration validation for graph_pathfinder."""

import logging
from typing import Any, List

from omegaconf import DictConfig, OmegaConf

from graph_pathfinder.core.exceptions import ConfigurationError
from graph_pathfinder.core.search_config import OPTION_FIELDS, SearchConfig

logger = logging.getLogger(__name__)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigValidationError(ConfigurationError):
    """Exception raised when configuration validation fails."""
    pass


def validate_config(config: DictConfig) -> None:
    """Validate the complete configuration.

    Args:
        config: Configuration to validate

    Raises:
        ConfigValidationError: If validation fails
    """
    try:
        validate_search_config(config.get('search', {}))
        validate_logging_config(config.get('logging', {}))

        logger.info("Configuration validation passed")

    except ConfigValidationError:
        raise
    except Exception as e:
        raise ConfigValidationError(f"Configuration validation failed: {e}")


def validate_search_config(search_config: Any) -> None:
    """Validate the ``search`` section.

    The ``defaults`` block is parsed exactly like per-call options, so every
    error a caller could hit at search time is reported at load time instead.
    """
    if not search_config:
        return

    from graph_pathfinder.search.pathfinder import available_algorithms

    algorithm = search_config.get('algorithm', 'astar')
    if not isinstance(algorithm, str) or algorithm.lower() not in available_algorithms():
        raise ConfigValidationError(
            f"search.algorithm must be one of {available_algorithms()}, got {algorithm!r}"
        )

    weight_field = search_config.get('weight_field', 'weight')
    if not isinstance(weight_field, str) or not weight_field:
        raise ConfigValidationError(
            f"search.weight_field must be a non-empty string, got {weight_field!r}"
        )

    defaults = search_config.get('defaults', {})
    if defaults:
        options = OmegaConf.to_container(defaults, resolve=True) if isinstance(defaults, DictConfig) else dict(defaults)
        unknown = [key for key in options if key not in OPTION_FIELDS]
        if unknown:
            raise ConfigValidationError(f"Unknown search.defaults keys: {unknown}")
        try:
            SearchConfig.from_options(options)
        except ConfigurationError as e:
            raise ConfigValidationError(f"Invalid search.defaults: {e}")


def validate_logging_config(logging_config: Any) -> None:
    if not logging_config:
        return

    level = logging_config.get('level', 'WARNING')
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigValidationError(
            f"logging.level must be one of {list(LOG_LEVELS)}, got {level!r}"
        )


def check_config_consistency(config: DictConfig) -> List[str]:
    """Check configuration consistency and return issues.

    These are combinations that are valid but probably not what was meant.

    Args:
        config: Configuration to check

    Returns:
        List of consistency issues
    """
    issues = []
    defaults = OmegaConf.select(config, 'search.defaults', default=None) or {}
    algorithm = str(OmegaConf.select(config, 'search.algorithm', default='astar')).lower()

    formula = str(defaults.get('heuristicFormula') or 'MANHATTAN').upper()
    axes = defaults.get('vertexAxisNames') or []

    if formula == 'CUSTOM' and not defaults.get('customHeuristicFormula'):
        issues.append("heuristicFormula is CUSTOM but customHeuristicFormula is empty")

    if formula == 'HAVERSINE' and len(axes) < 2:
        issues.append("heuristicFormula is HAVERSINE but fewer than two vertexAxisNames are set")

    if formula == 'EUCLIDEANNOSQR' and algorithm in ('astar', 'idastar'):
        issues.append("EUCLIDEANNOSQR is not admissible; A*/IDA* results may not be optimal")

    if defaults.get('timeout') is not None and algorithm != 'lrtastar':
        issues.append(f"timeout only applies to lrtastar, search.algorithm is {algorithm}")

    if defaults.get('emptyIfMaxDepth') and defaults.get('maxDepth') is None:
        issues.append("emptyIfMaxDepth is set but maxDepth is unbounded")

    return issues
