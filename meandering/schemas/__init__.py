"""Request and response schemas."""

from meandering.schemas.file_schema import (
    AudioFileListResponse,
    AudioFileResponse,
    CategoryResponse,
    SignedUrlRequest,
    SignedUrlResponse,
    ToggleNewRequest,
    UpdateCategoryRequest,
    UpdateImageRequest,
    UpdateJsonRequest,
)
from meandering.schemas.story_schema import (
    ChunkResponse,
    FocusAreasResponse,
    GenerateStoryRequest,
    GenerationResultResponse,
    TopicsResponse,
)

__all__ = [
    "AudioFileListResponse",
    "AudioFileResponse",
    "CategoryResponse",
    "SignedUrlRequest",
    "SignedUrlResponse",
    "ToggleNewRequest",
    "UpdateCategoryRequest",
    "UpdateImageRequest",
    "UpdateJsonRequest",
    "ChunkResponse",
    "FocusAreasResponse",
    "GenerateStoryRequest",
    "GenerationResultResponse",
    "TopicsResponse",
]
