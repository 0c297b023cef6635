"""Rating service transport and response models."""

from .async_client import AsyncRMPClient, RMPRequestError, RMPResponseError, encode_school_id
from .models import CandidateRecord, TeacherSearchResponse

__all__ = [
    "AsyncRMPClient",
    "CandidateRecord",
    "RMPRequestError",
    "RMPResponseError",
    "TeacherSearchResponse",
    "encode_school_id",
]
