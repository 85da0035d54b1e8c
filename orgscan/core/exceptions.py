"""
Custom exceptions for the organization summary engine.

Provides a hierarchy of exceptions for the engine stages and its
boundaries, enabling precise error handling and clear failure reporting.
"""


class PipelineError(Exception):
    """Base exception for all engine-related errors."""

    def __init__(self, message: str, stage: str = None, details: dict = None):
        super().__init__(message)
        self.stage = stage
        self.details = details or {}

    def __str__(self):
        base_msg = super().__str__()
        if self.stage:
            return f"[{self.stage}] {base_msg}"
        return base_msg


class InputContractViolation(PipelineError):
    """Raised when a record batch is malformed and must be rejected."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Validation", details=details)


class DuplicateRepositoryError(InputContractViolation):
    """Raised when two records in one batch share a name."""

    def __init__(self, name: str, positions: list):
        super().__init__(
            f"Duplicate repository name in batch: {name}",
            details={"name": name, "positions": list(positions)},
        )


class RecordLoadError(PipelineError):
    """Raised when repository records cannot be read from their source."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Loading", details=details)


class ReportError(PipelineError):
    """Raised when a summary cannot be rendered or written."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Reporting", details=details)
