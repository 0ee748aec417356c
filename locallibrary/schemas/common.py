"""Common Pydantic schemas."""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(from_attributes=True, frozen=True)


class FieldError(BaseSchema):
    """One failed validation rule on a submitted form field."""

    param: str
    msg: str
    value: Optional[Any] = None

    @classmethod
    def from_pydantic(cls, error: dict[str, Any]) -> "FieldError":
        """Build from an entry of ``pydantic.ValidationError.errors()``."""
        loc = error.get("loc") or ("",)
        param = str(loc[0])
        return cls(param=param, msg=error["msg"], value=error.get("input"))


class StatusResponse(BaseModel):
    """Health check response."""

    status: str
    message: Optional[str] = None
