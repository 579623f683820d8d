class PlanboxError(Exception):
    """Base class for all planbox errors."""


class InvalidInputError(PlanboxError, ValueError):
    """
    Raised when a caller hands the engine data that breaks its contract:
    malformed rule conditions, an out-of-range period index, a period
    count below one, an unknown granularity.

    Business mismatches (an unsupported paper size, a rule that does not
    apply) are never reported through this exception; they come back as
    negative result values instead.
    """
