"""Common schema types."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ViewerTierEnum(str, Enum):
    """Access level claimed for the caller by the auth layer."""

    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    VIP = "vip"


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(from_attributes=True)
