"""
Audio File Request/Response Schemas
API schemas for the audio catalog endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AudioFileResponse(BaseModel):
    """Listed audio object."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(description="Object name")
    size: Optional[int] = Field(default=None, description="Size in bytes")
    content_type: Optional[str] = Field(default=None, alias="contentType", description="MIME type")
    updated: Optional[datetime] = Field(default=None, description="Last modification time")
    url: str = Field(description="Public URL")


class AudioFileListResponse(BaseModel):
    """Audio objects in the bucket."""

    files: List[AudioFileResponse]


class CategoryResponse(BaseModel):
    """History category."""

    id: str
    name: str


class SignedUrlRequest(BaseModel):
    """Request for a direct-upload URL."""

    folder: Optional[str] = Field(default=None, description="'boringhistory' for History uploads")
    title: Optional[str] = Field(default=None, description="Display title")
    gender: Optional[str] = Field(default=None, description="Narrator gender")
    topic: Optional[str] = Field(default=None, description="Topic slug")


class SignedUrlResponse(BaseModel):
    """Direct-upload URL and the location it writes to."""

    model_config = ConfigDict(populate_by_name=True)

    signed_url: str = Field(alias="signedUrl")
    upload_path: str = Field(alias="uploadPath")
    file_name: str = Field(alias="fileName")
    id: str
    public_url: str = Field(alias="publicUrl")


class UpdateJsonRequest(BaseModel):
    """Catalog registration after a direct upload."""

    model_config = ConfigDict(populate_by_name=True)

    folder: Optional[str] = None
    title: Optional[str] = None
    gender: Optional[str] = None
    topic: Optional[str] = None
    id: Optional[str] = Field(default=None, description="Id returned with the signed URL")
    upload_path: Optional[str] = Field(default=None, alias="uploadPath")
    voice_name: Optional[str] = Field(default=None, alias="voiceName")
    is_new: Optional[bool] = Field(default=None, alias="isNew")


class ToggleNewRequest(BaseModel):
    """Mark a History entry as new or not."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: Optional[str] = Field(default=None, alias="fileName")
    is_new: bool = Field(default=False, alias="isNew")


class UpdateCategoryRequest(BaseModel):
    """Assign a category to a History entry."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: Optional[str] = Field(default=None, alias="fileName")
    category: str = Field(description="One of the History category ids")


class UpdateImageRequest(BaseModel):
    """Set or clear the image of a History entry."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: Optional[str] = Field(default=None, alias="fileName")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
