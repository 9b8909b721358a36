"""
Story Request/Response Schemas
API schemas for lecture generation and topic proposals.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerateStoryRequest(BaseModel):
    """Request body for lecture generation."""

    model_config = ConfigDict(populate_by_name=True)

    topic: Optional[str] = Field(default=None, description="Lecture topic")
    generate_full: bool = Field(
        default=False,
        alias="generateFull",
        description="Run the full chunked pipeline instead of returning focus areas",
    )


class ChunkResponse(BaseModel):
    """One generated part of a lecture."""

    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(description="Post-processed lecture text")
    word_count: int = Field(alias="wordCount", ge=1, description="Words in content")
    part_number: int = Field(alias="partNumber", ge=1, description="1-based position in the lecture")
    focus_area: str = Field(alias="focusArea", description="Outline section or overflow label")


class GenerationResultResponse(BaseModel):
    """Complete lecture."""

    model_config = ConfigDict(populate_by_name=True)

    parts: List[ChunkResponse] = Field(description="Lecture parts in order")
    total_words: int = Field(alias="totalWords", ge=0, description="Sum of part word counts")
    focus_areas: List[str] = Field(alias="focusAreas", description="Focus areas used, in order")


class FocusAreasResponse(BaseModel):
    """Outline section titles for a topic."""

    model_config = ConfigDict(populate_by_name=True)

    focus_areas: List[str] = Field(alias="focusAreas", description="Up to three section titles")


class TopicsResponse(BaseModel):
    """Proposed lecture topics."""

    topics: List[str] = Field(description="One topic per entry")
