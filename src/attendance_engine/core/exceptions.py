class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class LineParseError(DomainError):
    """Raised when one import line cannot be turned into a record."""


class IdentityResolutionError(DomainError):
    """Raised when a display name does not map to exactly one employee."""


class AmbiguousEventError(DomainError):
    """Raised when a day's events do not resolve to one check-in/check-out pair."""


class ConfigurationMissingError(DomainError):
    """Raised when no rule configuration is effective for a date."""


class SettlementConflictError(DomainError):
    """Raised when a settlement period has already been settled."""
