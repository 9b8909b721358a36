"""Sleep lecture generation endpoints."""

from fastapi import APIRouter, Depends, Query, status

from meandering.dependencies import get_lecture_generator, get_topic_proposer
from meandering.schemas.story_schema import (
    FocusAreasResponse,
    GenerateStoryRequest,
    GenerationResultResponse,
    TopicsResponse,
)
from meandering.services.ai.lecture_generator import LectureGenerator
from meandering.services.ai.topic_proposer import DEFAULT_TOPIC_COUNT, TopicProposer
from meandering.utils.exceptions import ValidationError
from meandering.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


# Plain ``def`` routes run in the threadpool; the generation chain blocks.
@router.post(
    "/generate",
    responses={
        200: {
            "model": GenerationResultResponse,
            "description": "Full lecture, or only focusAreas when generateFull is false",
        }
    },
    status_code=status.HTTP_200_OK,
    summary="Generate a sleep lecture or its focus areas",
)
def generate_story(
    request: GenerateStoryRequest,
    generator: LectureGenerator = Depends(get_lecture_generator),
) -> dict:
    """
    Generate a sleep lecture.

    With ``generateFull`` false only the outline's focus areas are
    returned; otherwise the full chunked lecture is written.
    """
    if not request.topic or not request.topic.strip():
        raise ValidationError("Topic is required")

    if not request.generate_full:
        focus_areas = generator.plan_focus_areas(request.topic)
        return FocusAreasResponse(focus_areas=focus_areas).model_dump(by_alias=True)

    logger.info(f"Full lecture requested for '{request.topic}'")
    result = generator.generate(request.topic)
    return result.to_dict()


@router.get(
    "/topics",
    response_model=TopicsResponse,
    status_code=status.HTTP_200_OK,
    summary="Propose sleep lecture topics",
)
def propose_topics(
    count: int = Query(DEFAULT_TOPIC_COUNT, ge=1, le=50, description="Number of topics"),
    proposer: TopicProposer = Depends(get_topic_proposer),
) -> dict:
    """Propose a batch of boring history topics."""
    return {"topics": proposer.propose(count)}
