"""Error response schema for 404, 500 and 502. 422 uses the FastAPI default."""

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Single top-level field detail (string). No extra keys."""

    detail: str
