"""Text generation services: Groq client, lecture pipeline and topic proposals."""

from meandering.services.ai.continuity import ChunkSummary, ContinuityState, ContinuityTracker
from meandering.services.ai.groq_service import GroqService
from meandering.services.ai.lecture_generator import (
    Chunk,
    GenerationResult,
    LectureConfig,
    LectureGenerator,
    apply_chunk,
)
from meandering.services.ai.outline_planner import Outline, OutlinePlanner
from meandering.services.ai.post_processor import count_words, post_process
from meandering.services.ai.topic_proposer import TopicProposer

__all__ = [
    "ChunkSummary",
    "ContinuityState",
    "ContinuityTracker",
    "GroqService",
    "Chunk",
    "GenerationResult",
    "LectureConfig",
    "LectureGenerator",
    "apply_chunk",
    "Outline",
    "OutlinePlanner",
    "count_words",
    "post_process",
    "TopicProposer",
]
