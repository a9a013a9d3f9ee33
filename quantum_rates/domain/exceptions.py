"""Domain-specific exceptions"""

from enum import Enum


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class TierValidationKind(str, Enum):
    MISSING_FIELD = "missing_field"
    NEGATIVE_VALUE = "negative_value"
    ZERO_RATE = "zero_rate"
    INVERTED_RANGE = "inverted_range"
    DUPLICATE_UNBOUNDED_AMOUNT = "duplicate_unbounded_amount"
    OVERLAPPING_TIER = "overlapping_tier"
    DUPLICATE_RANGE_SAME_TERM_BAND = "duplicate_range_same_term_band"


class ResolutionKind(str, Enum):
    MISSING_INPUT = "missing_input"
    OUT_OF_CONFIGURED_RANGE = "out_of_configured_range"
    TERM_CONVERSION_OUT_OF_BOUNDS = "term_conversion_out_of_bounds"
    TERM_MINIMUM_UNKNOWN = "term_minimum_unknown"
    NO_MATCHING_TIER = "no_matching_tier"


class TierValidationError(DomainException):
    """Proposed rate tier is malformed or conflicts with the configured set"""

    def __init__(
        self,
        kind: TierValidationKind,
        message: str,
        field: str | None = None,
        conflicting_id: int | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.field = field
        self.conflicting_id = conflicting_id


class ResolutionError(DomainException):
    """Simulation query cannot be resolved to a rate tier"""

    def __init__(self, kind: ResolutionKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class RepositoryError(DomainException):
    """Rate Tier Repository returned an error or is unavailable"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TierNotFoundError(DomainException):
    """No configured tier has the requested id"""

    pass
