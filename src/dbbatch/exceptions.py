"""
Batching-specific exception classes.
"""


class BatchError(Exception):
    """Base class for all dbbatch errors.
    """


class InvalidArgument(BatchError, ValueError):
    """Argument contract violation (missing sequence, non-positive size).
    """


class ConfigurationError(BatchError, ValueError):
    """Invalid batch configuration, detected before any invocation.
    """


class ParameterNotFound(BatchError, LookupError):
    """Target parameter does not resolve against an operation signature.
    """

    def __init__(self, parameter: str, operation: str | None = None):
        self.parameter = parameter
        self.operation = operation
        if operation:
            message = f"Parameter '{parameter}' not found in {operation}()"
        else:
            message = f"Parameter '{parameter}' not found"
        super().__init__(message)
