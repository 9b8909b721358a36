"""Chunked long-form lecture generation pipeline."""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from meandering.services.ai.continuity import ContinuityState, ContinuityTracker
from meandering.services.ai.outline_planner import Outline, OutlinePlanner
from meandering.services.ai.post_processor import count_words, post_process
from meandering.services.ai.prompts import (
    LECTURE_SYSTEM_PROMPT,
    build_overflow_prompt,
    build_section_prompt,
)
from meandering.utils.exceptions import GenerationDidNotConvergeError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LectureConfig:
    """Constants of a lecture run."""

    target_words: int = 7500
    chunk_word_targets: Tuple[int, ...] = (2500, 2500, 2500)
    overflow_chunk_words: int = 2500
    max_paragraph_words: int = 150
    max_chunks: int = 20
    content_temperature: float = 0.7
    content_max_tokens: int = 4000
    content_model: Optional[str] = None
    outline_temperature: float = 0.7
    outline_max_tokens: int = 1200
    summary_temperature: float = 0.3
    summary_max_tokens: int = 400
    summary_model: Optional[str] = None

    @classmethod
    def from_settings(cls, settings) -> "LectureConfig":
        """Build the run constants from application settings."""
        return cls(
            target_words=settings.lecture_target_words,
            chunk_word_targets=tuple(settings.lecture_chunk_targets),
            overflow_chunk_words=settings.lecture_overflow_chunk_words,
            max_paragraph_words=settings.lecture_max_paragraph_words,
            max_chunks=settings.lecture_max_chunks,
            content_temperature=settings.content_temperature,
            content_max_tokens=settings.content_max_tokens,
            content_model=settings.groq_model,
            outline_temperature=settings.outline_temperature,
            outline_max_tokens=settings.outline_max_tokens,
            summary_temperature=settings.utility_temperature,
            summary_max_tokens=settings.summary_max_tokens,
            summary_model=settings.groq_utility_model,
        )


@dataclass(frozen=True)
class Chunk:
    """One post-processed generation call."""

    content: str
    word_count: int
    part_number: int
    focus_area: str

    def to_dict(self) -> dict:
        """Convert to the API's camelCase shape."""
        return {
            "content": self.content,
            "wordCount": self.word_count,
            "partNumber": self.part_number,
            "focusArea": self.focus_area,
        }


@dataclass(frozen=True)
class GenerationResult:
    """Terminal output of a lecture run."""

    parts: Tuple[Chunk, ...] = ()
    total_words: int = 0
    focus_areas: Tuple[str, ...] = ()

    @property
    def next_part_number(self) -> int:
        return len(self.parts) + 1

    def to_dict(self) -> dict:
        """Convert to the API's camelCase shape."""
        return {
            "parts": [part.to_dict() for part in self.parts],
            "totalWords": self.total_words,
            "focusAreas": list(self.focus_areas),
        }


def apply_chunk(result: GenerationResult, chunk: Chunk, focus_area: Optional[str] = None) -> GenerationResult:
    """
    Append a chunk to a partial result.

    ``focus_area`` is recorded in ``focus_areas`` when given; planned
    section titles are recorded up front instead.
    """
    if chunk.part_number != result.next_part_number:
        raise ValueError(
            f"Chunk part number {chunk.part_number} does not follow {len(result.parts)}"
        )
    focus_areas = result.focus_areas + (focus_area,) if focus_area else result.focus_areas
    return replace(
        result,
        parts=result.parts + (chunk,),
        total_words=result.total_words + chunk.word_count,
        focus_areas=focus_areas,
    )


@dataclass
class _RunBudget:
    """Counts content-generation calls against the safety cap."""

    limit: int
    used: int = field(default=0)

    def spend(self, result: GenerationResult, target_words: int) -> None:
        if self.used >= self.limit:
            raise GenerationDidNotConvergeError(
                details=(
                    f"Reached {result.total_words} of {target_words} words after "
                    f"{self.used} content calls"
                )
            )
        self.used += 1


class LectureGenerator:
    """
    Pipeline for generating long sleep lectures.

    Plans an outline, writes one chunk per planned word target, then keeps
    adding overflow chunks on fresh angles until the cumulative word count
    reaches the target. Each chunk after the first is prompted with the
    continuity state of the chunk before it.
    """

    def __init__(
        self,
        groq_service,
        config: Optional[LectureConfig] = None,
        planner: Optional[OutlinePlanner] = None,
        tracker: Optional[ContinuityTracker] = None,
    ):
        """
        Initialize lecture generator.

        Args:
            groq_service: Text generation capability exposing ``generate_text``
            config: Run constants, defaults to ``LectureConfig()``
            planner: Outline planner, built from ``groq_service`` if omitted
            tracker: Continuity tracker, built from ``groq_service`` if omitted
        """
        self.groq = groq_service
        self.config = config or LectureConfig()
        self.planner = planner or OutlinePlanner(
            groq_service,
            max_tokens=self.config.outline_max_tokens,
            temperature=self.config.outline_temperature,
            model=self.config.content_model,
        )
        self.tracker = tracker or ContinuityTracker(
            groq_service,
            max_tokens=self.config.summary_max_tokens,
            temperature=self.config.summary_temperature,
            model=self.config.summary_model,
        )

    def plan_focus_areas(self, topic: str) -> List[str]:
        """Return the outline's section titles without writing the lecture."""
        topic = self._validate_topic(topic)
        return list(self.planner.plan(topic).section_titles)

    def generate(
        self,
        topic: str,
        target_words: Optional[int] = None,
        chunk_word_targets: Optional[Sequence[int]] = None,
    ) -> GenerationResult:
        """
        Generate a full lecture.

        Args:
            topic: Lecture topic
            target_words: Total word target, defaults to the configured one
            chunk_word_targets: Planned per-chunk targets, defaults to the configured ones

        Returns:
            GenerationResult whose total_words is at least target_words

        Raises:
            ValidationError: If topic is blank
            GenerationServiceError: If any generation call fails
            GenerationDidNotConvergeError: If the chunk budget runs out below target
        """
        topic = self._validate_topic(topic)
        target = self.config.target_words if target_words is None else target_words
        planned = tuple(self.config.chunk_word_targets if chunk_word_targets is None else chunk_word_targets)

        logger.info("Generating lecture on '%s': target=%d words, planned chunks=%d",
                    topic, target, len(planned))

        outline = self.planner.plan(topic)
        result = GenerationResult(focus_areas=outline.section_titles)
        continuity = ContinuityState()
        budget = _RunBudget(limit=self.config.max_chunks)

        for index, chunk_target in enumerate(planned):
            focus_area = self._planned_focus_area(outline, index)
            prompt = build_section_prompt(
                topic=topic,
                outline=outline.text,
                section_number=index + 1,
                focus_area=focus_area,
                target_words=chunk_target,
                continuity=None if index == 0 or continuity.is_empty else continuity.render(),
            )
            budget.spend(result, target)
            chunk = self._write_chunk(prompt, result.next_part_number, focus_area, chunk_target)
            if chunk is None:
                continue
            result = apply_chunk(result, chunk)
            logger.info("Part %d written (%d words, %d/%d total)",
                        chunk.part_number, chunk.word_count, result.total_words, target)

            more_planned = index < len(planned) - 1
            if more_planned or result.total_words < target:
                continuity = self.tracker.track(continuity, chunk.content)

        overflow_count = 0
        while result.total_words < target:
            remaining = target - result.total_words
            chunk_target = min(self.config.overflow_chunk_words, remaining)
            focus_area = f"Additional section {overflow_count + 1}"
            logger.info("Overflow: %d words remaining, requesting %s (%d words)",
                        remaining, focus_area, chunk_target)

            prompt = build_overflow_prompt(
                topic=topic,
                outline=outline.text,
                target_words=chunk_target,
                continuity=None if continuity.is_empty else continuity.render(),
            )
            budget.spend(result, target)
            chunk = self._write_chunk(prompt, result.next_part_number, focus_area, chunk_target)
            if chunk is None:
                continue
            overflow_count += 1
            result = apply_chunk(result, chunk, focus_area=focus_area)
            logger.info("Part %d written (%d words, %d/%d total)",
                        chunk.part_number, chunk.word_count, result.total_words, target)

            if result.total_words < target:
                continuity = self.tracker.track(continuity, chunk.content)

        logger.info("Lecture on '%s' complete: %d parts, %d words",
                    topic, len(result.parts), result.total_words)
        return result

    # Private methods

    @staticmethod
    def _validate_topic(topic: Optional[str]) -> str:
        if not topic or not topic.strip():
            raise ValidationError("Topic is required")
        return topic.strip()

    @staticmethod
    def _planned_focus_area(outline: Outline, index: int) -> str:
        if index < len(outline.section_titles):
            return outline.section_titles[index]
        return f"Section {index + 1}"

    def _write_chunk(
        self,
        prompt: str,
        part_number: int,
        focus_area: str,
        target_words: int,
    ) -> Optional[Chunk]:
        """Generate and post-process one chunk; None when nothing usable remains."""
        raw = self.groq.generate_text(
            prompt=prompt,
            max_tokens=self.config.content_max_tokens,
            temperature=self.config.content_temperature,
            model=self.config.content_model,
            system_prompt=LECTURE_SYSTEM_PROMPT,
        )
        content = post_process(raw, self.config.max_paragraph_words)
        if not content:
            logger.warning("Chunk for '%s' (target %d words) was empty after cleanup",
                           focus_area, target_words)
            return None

        return Chunk(
            content=content,
            word_count=count_words(content),
            part_number=part_number,
            focus_area=focus_area,
        )
