from typing import List

from pydantic import BaseModel, Field


class PermissionCheckRequest(BaseModel):
    """POST /access/check"""

    permissions: List[str] = Field(..., min_length=1)
    require_all: bool = Field(default=False, description="AND instead of OR")
