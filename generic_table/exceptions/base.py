from typing import Any, Dict, Optional


class GenericTableError(Exception):
    """Root of every error raised by generic_table.

    Attributes:
        message: Text reported to the caller, also used as the response body
        original_error: Lower-level exception this error wraps, if any
        context: Extra key/value details appended by ``str()``
        http_status: Response status applied under the strict error status policy
    """

    http_status: int = 500

    def __init__(self, message: str, original_error: Optional[Exception] = None,
                 context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.original_error = original_error
        self.context = dict(context) if context else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} (Context: {details})"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"original_error={self.original_error!r}, context={self.context!r})"
        )
