class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class InvalidRequestError(ProcessorError):
    """Raised when a diagnosis job is missing its image, crop log or plant."""


class DiagnosisNotFoundError(ProcessorError):
    """Raised when a diagnosis cannot be found in the database."""
