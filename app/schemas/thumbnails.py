from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ThumbnailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_url: Optional[str] = Field(default=None, alias="videoUrl")


class ThumbnailResponse(BaseModel):
    success: bool = True
    filename: str
    base64: str
    message: str


class ThumbnailErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[str] = None
