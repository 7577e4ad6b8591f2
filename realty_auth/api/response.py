"""
JSON envelope shared by every route: {success, message?, data?}.

Routes declare response_model=ApiResponse[...] together with
response_model_exclude_none so absent message/data keys are omitted.
"""

from typing import Generic, Optional, TypeVar

from realty_auth.app.use_cases.auth.dtos import CamelModel

T = TypeVar("T")


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
