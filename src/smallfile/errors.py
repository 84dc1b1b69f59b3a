"""
Error taxonomy for the small-file conversion.

- `FatalInputError`: the row is too malformed to produce any canonical record.
- `RecoverableValidationError`: a single field could not be validated; the row
  is reported but a batch keeps going regardless of its halt policy.

Both carry the offending legacy column and value so that the batch driver can
tie the failure to a line of the input.
"""

from typing import Optional


class ConversionError(ValueError):
    """Base class for per-row conversion failures."""

    fatal = True

    def __init__(self, message: str, column: Optional[str] = None, value: Optional[str] = None):
        super().__init__(message)
        self.column = column
        self.value = value

    def __str__(self) -> str:
        message = super().__str__()
        if self.column:
            return f"{self.column}: {message}"
        return message


class FatalInputError(ConversionError):
    """Raised for data that cannot be converted (bad prefix, unknown term, unmapped vocabulary, ...)."""


class RecoverableValidationError(ConversionError):
    """Raised when an optional field carries an unrecognized code (e.g. sex or negation)."""

    fatal = False
