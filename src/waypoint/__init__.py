"""waypoint — per-route request matching.

Compiles path templates into anchored RE2 patterns and runs an ordered
check chain (routable, secure, path, method, accept, server fields, custom
predicate) against request metadata. All public types are exported from
this module for flat imports:

    from waypoint import Route, RouteBuilder, MatchAttempt, Failure
"""

__version__ = "0.1.0"

# Compilation
from waypoint._compiler import (
    DEFAULT_SUBPATTERN,
    CompiledPath,
    InvalidPatternError,
    RouteError,
    compile_path,
)

# Config parsing, see waypoint._config
from waypoint._config import (
    MAX_PATTERN_LENGTH,
    MAX_TEMPLATE_LENGTH,
    ConfigParseError,
    parse_route_builder,
    parse_route_config,
)

# Evaluation
from waypoint._evaluator import CHECKS, MatchAttempt, Rejection, evaluate

# Inputs
from waypoint._inputs import (
    HTTPS_PORT,
    AcceptInput,
    EnvironInput,
    MethodInput,
    SecureInput,
)
from waypoint._matchers import RegexMatcher
from waypoint._negotiation import MediaRange, negotiate, parse_accept
from waypoint._params import extract_params

# Route specification
from waypoint._route import Route, RouteBuilder
from waypoint._types import (
    DataInput,
    Environ,
    Failure,
    Generate,
    IsMatch,
    Matches,
    MatchingData,
)

__all__ = [
    # Protocols and aliases
    "DataInput",
    "Environ",
    "Generate",
    "IsMatch",
    "Matches",
    "MatchingData",
    # Route
    "Route",
    "RouteBuilder",
    # Compilation
    "CompiledPath",
    "compile_path",
    "DEFAULT_SUBPATTERN",
    # Evaluation
    "CHECKS",
    "Failure",
    "MatchAttempt",
    "Rejection",
    "evaluate",
    "extract_params",
    # Negotiation
    "MediaRange",
    "negotiate",
    "parse_accept",
    # Inputs and matchers
    "AcceptInput",
    "EnvironInput",
    "MethodInput",
    "SecureInput",
    "HTTPS_PORT",
    "RegexMatcher",
    # Config
    "ConfigParseError",
    "parse_route_config",
    "parse_route_builder",
    "MAX_TEMPLATE_LENGTH",
    "MAX_PATTERN_LENGTH",
    # Errors
    "RouteError",
    "InvalidPatternError",
]
