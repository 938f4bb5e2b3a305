from typing import Generic, TypeVar

from app.shared.api.utils import ApiSuccess

T = TypeVar("T")


class ApiOut(ApiSuccess, Generic[T]):
    """Success envelope of the v1 routers: {"success": true, "results": ..., "version": ...}.

    Failures use ApiFailure from the exception handlers.
    """

    results: T  # type: ignore[valid-type]
