"""Exception hierarchy for the path search core.

"No path" is never an exception: searches report it as an empty ``PathResult``.
Only caller mistakes (bad options, unknown node references) and missing
extension points are raised, and always before any search state is allocated.
"""


class PathfinderError(Exception):
    """Base class for all errors raised by graph_pathfinder."""
    pass


class ConfigurationError(PathfinderError, ValueError):
    """Raised when search options or node arguments are malformed."""
    pass


class MissingCapabilityError(PathfinderError, LookupError):
    """Raised when a custom heuristic formula is selected but not registered."""

    def __init__(self, formula_name: str):
        self.formula_name = formula_name
        super().__init__(
            f"No custom heuristic formula registered under '{formula_name}'"
        )
