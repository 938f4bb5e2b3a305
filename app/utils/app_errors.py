"""Application error type raised by domain services and mapped to API failures."""

import inspect
from enum import Enum, IntEnum
from typing import Any
from uuid import uuid4


class HttpStatusCode(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502


class AppErrorCode(str, Enum):
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_VALIDATION_FAILED = "E_VALIDATION_FAILED"
    E_BAD_TOKEN = "E_BAD_TOKEN"
    E_FORBIDDEN = "E_FORBIDDEN"

    E_ADMIN_NOT_FOUND = "E_ADMIN_NOT_FOUND"
    E_EVENT_NOT_FOUND = "E_EVENT_NOT_FOUND"
    E_EVENT_SLUG_CONFLICT = "E_EVENT_SLUG_CONFLICT"
    E_ARCHIVE_NOT_STARTED = "E_ARCHIVE_NOT_STARTED"
    E_SESSION_CREATION_FAILED = "E_SESSION_CREATION_FAILED"
    E_IDENTITY_PROVIDER = "E_IDENTITY_PROVIDER"

    E_LIVEKIT_CANCELED = "E_LIVEKIT_CANCELED"
    E_LIVEKIT_UNKNOWN = "E_LIVEKIT_UNKNOWN"
    E_LIVEKIT_INVALID_ARGUMENT = "E_LIVEKIT_INVALID_ARGUMENT"
    E_LIVEKIT_MALFORMED = "E_LIVEKIT_MALFORMED"
    E_LIVEKIT_DEADLINE_EXCEEDED = "E_LIVEKIT_DEADLINE_EXCEEDED"
    E_LIVEKIT_NOT_FOUND = "E_LIVEKIT_NOT_FOUND"
    E_LIVEKIT_BAD_ROUTE = "E_LIVEKIT_BAD_ROUTE"
    E_LIVEKIT_ALREADY_EXISTS = "E_LIVEKIT_ALREADY_EXISTS"
    E_LIVEKIT_PERMISSION_DENIED = "E_LIVEKIT_PERMISSION_DENIED"
    E_LIVEKIT_UNAUTHENTICATED = "E_LIVEKIT_UNAUTHENTICATED"
    E_LIVEKIT_RESOURCE_EXHAUSTED = "E_LIVEKIT_RESOURCE_EXHAUSTED"
    E_LIVEKIT_FAILED_PRECONDITION = "E_LIVEKIT_FAILED_PRECONDITION"
    E_LIVEKIT_ABORTED = "E_LIVEKIT_ABORTED"
    E_LIVEKIT_OUT_OF_RANGE = "E_LIVEKIT_OUT_OF_RANGE"
    E_LIVEKIT_UNIMPLEMENTED = "E_LIVEKIT_UNIMPLEMENTED"
    E_LIVEKIT_INTERNAL = "E_LIVEKIT_INTERNAL"
    E_LIVEKIT_UNAVAILABLE = "E_LIVEKIT_UNAVAILABLE"
    E_LIVEKIT_DATA_LOSS = "E_LIVEKIT_DATA_LOSS"

    def __str__(self) -> str:
        return self.value


class AppError(Exception):
    """Typed failure carrying an error code, a message and an HTTP status.

    The call site that raised the error is captured so handlers can log it
    without walking the traceback.
    """

    def __init__(
        self,
        errcode: AppErrorCode | str,
        errmesg: str,
        status_code: HttpStatusCode | int = HttpStatusCode.BAD_REQUEST,
        details: list[dict[str, Any]] | None = None,
    ):
        super().__init__(errmesg)
        self.errcode = errcode.value if isinstance(errcode, AppErrorCode) else str(errcode)
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.details = details
        self.erresid = uuid4().hex[:10]

        caller_frame = inspect.stack()[1]
        module = inspect.getmodule(caller_frame.frame)
        module_name = (
            module.__name__ if module and getattr(module, "__name__", None) else caller_frame.filename
        )
        self.caller_info = f"{module_name}:{caller_frame.function}:{caller_frame.lineno}"

    def __repr__(self) -> str:
        return f"AppError(errcode={self.errcode!r}, errmesg={self.errmesg!r}, status_code={self.status_code})"


__all__ = ["AppError", "AppErrorCode", "HttpStatusCode"]
