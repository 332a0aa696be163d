class WizardError(Exception):
    """Base exception for wizard errors."""


class InvalidRequest(WizardError):
    """Raised when a config request is missing required fields."""


class ParseError(WizardError):
    """Raised when an inventory snapshot cannot be parsed."""


class PricingError(WizardError):
    """Raised when the static price table cannot be loaded."""
