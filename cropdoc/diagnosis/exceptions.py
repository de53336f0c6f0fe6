class DiagnosisError(Exception):
    """Raised when a vendor response cannot be turned into a diagnosis."""


class InvalidInputError(DiagnosisError):
    """Raised when the raw vendor response is not a JSON object."""
