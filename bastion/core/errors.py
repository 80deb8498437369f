# bastion/core/errors.py
from typing import Literal

FunctionsErrorCode = Literal["unauthenticated", "invalid-argument", "internal"]

# code -> (HTTP status, canonical status name used in the callable error body)
_ERROR_CODE_MAP: dict[str, tuple[int, str]] = {
    "unauthenticated": (401, "UNAUTHENTICATED"),
    "invalid-argument": (400, "INVALID_ARGUMENT"),
    "internal": (500, "INTERNAL"),
}

class InferenceError(Exception):
    """Raised by the inference flow when the model client fails or returns an unusable result.

    The original cause is kept on ``__cause__`` for diagnostic logging.
    """

class HttpsError(Exception):
    """Client-visible error of a callable function.

    Only the code and message ever reach the caller.
    """

    def __init__(self, code: FunctionsErrorCode, message: str):
        if code not in _ERROR_CODE_MAP:
            raise ValueError(f"Unsupported callable error code: {code!r}")
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def http_status(self) -> int:
        return _ERROR_CODE_MAP[self.code][0]

    @property
    def status(self) -> str:
        return _ERROR_CODE_MAP[self.code][1]

    def to_dict(self) -> dict:
        return {"error": {"status": self.status, "message": self.message}}
