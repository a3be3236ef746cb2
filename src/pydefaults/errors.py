class DefaultsError(Exception):
    """Base class for pydefaults errors."""


class RegistryFrozenError(DefaultsError):
    """Raised when registering a codec after the registry was sealed."""


class ReconcileError(DefaultsError):
    """Base class for failures that abort a reconciliation.

    The offending ``domain``, ``key`` and ``type_tag`` are kept on the
    exception so callers can log them.
    """

    def __init__(
        self,
        message: str,
        *,
        domain: str | None = None,
        key: str | None = None,
        type_tag: str | None = None,
    ) -> None:
        super().__init__(message)
        self.domain = domain
        self.key = key
        self.type_tag = type_tag


class UnknownTypeError(ReconcileError):
    """Raised when a type tag has no registered codec."""


class UnrepresentableValueError(ReconcileError):
    """Raised when a value cannot be encoded under the requested type."""


class TypeInferenceError(ReconcileError):
    """Raised when no registered codec accepts a value."""


class WriteFailedError(ReconcileError):
    """Raised when the external write command fails."""

    def __init__(self, message: str, *, status: int | None = None, **context) -> None:
        super().__init__(message, **context)
        self.status = status
