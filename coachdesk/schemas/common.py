"""Common/shared schemas for responses."""
from pydantic import BaseModel


class ErrorBody(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Envelope rendered by the global error handlers."""
    success: bool = False
    error: ErrorBody
