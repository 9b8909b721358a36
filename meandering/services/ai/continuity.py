"""Rolling continuity state carried between lecture chunks."""

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple

from meandering.services.ai.post_processor import SENTENCE_PATTERN
from meandering.services.ai.prompts import build_continuity_block, build_summary_prompt

logger = logging.getLogger(__name__)

USED_MARKER = "USED:"
TRAILING_SENTENCE_COUNT = 3
TRAILING_FALLBACK_CHARS = 300


@dataclass(frozen=True)
class ChunkSummary:
    """Parsed reply of a continuity-summary call."""

    summary: str
    new_used_elements: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ContinuityState:
    """
    What the next chunk needs to know about the previous one.

    ``used_elements`` only ever grows. Instances are immutable; ``advance``
    returns the state for the next chunk.
    """

    previous_summary: str = ""
    used_elements: Tuple[str, ...] = field(default_factory=tuple)
    previous_last_sentences: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.previous_summary or self.used_elements or self.previous_last_sentences)

    def advance(self, summary: ChunkSummary, chunk_text: str) -> "ContinuityState":
        """Fold a finished chunk and its summary into a new state."""
        return replace(
            self,
            previous_summary=summary.summary,
            used_elements=merge_used_elements(self.used_elements, summary.new_used_elements),
            previous_last_sentences=last_sentences(chunk_text),
        )

    def render(self) -> str:
        """Render the state as a prompt block."""
        return build_continuity_block(
            summary=self.previous_summary,
            used_elements=self.used_elements,
            last_sentences=self.previous_last_sentences,
        )


def merge_used_elements(existing: Iterable[str], new: Iterable[str]) -> Tuple[str, ...]:
    """Append new elements in order, skipping exact repeats."""
    merged = list(existing)
    for element in new:
        if element not in merged:
            merged.append(element)
    return tuple(merged)


def parse_summary(text: str) -> ChunkSummary:
    """
    Split a summary reply into prose and the ``USED:`` element list.

    A reply without the marker is treated entirely as summary with no
    elements.
    """
    marker_index = text.find(USED_MARKER)
    if marker_index == -1:
        logger.warning("Continuity summary has no %s line; keeping prose only", USED_MARKER)
        return ChunkSummary(summary=text.strip())

    summary = text[:marker_index].strip()
    elements = tuple(
        element.strip()
        for element in text[marker_index + len(USED_MARKER):].split(",")
        if element.strip()
    )
    return ChunkSummary(summary=summary, new_used_elements=elements)


def last_sentences(
    text: str,
    count: int = TRAILING_SENTENCE_COUNT,
    fallback_chars: int = TRAILING_FALLBACK_CHARS,
) -> str:
    """
    Return the literal last ``count`` sentences of ``text``.

    Falls back to the final ``fallback_chars`` characters when fewer than
    ``count`` punctuated sentences are found.
    """
    sentences = [m.group(0).strip() for m in SENTENCE_PATTERN.finditer(text) if m.group(0).strip()]
    if len(sentences) < count:
        return text[-fallback_chars:].strip()
    return " ".join(sentences[-count:])


class ContinuityTracker:
    """Summarizes finished chunks so the next one can continue coherently."""

    def __init__(
        self,
        groq_service,
        max_tokens: int = 400,
        temperature: float = 0.3,
        model: Optional[str] = None,
    ):
        """
        Initialize continuity tracker.

        Args:
            groq_service: Text generation capability exposing ``generate_text``
            max_tokens: Output budget of a summary call
            temperature: Sampling temperature of a summary call
            model: Optional model override for summary calls
        """
        self.groq = groq_service
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.model = model

    def summarize(self, chunk_text: str) -> ChunkSummary:
        """Issue one summary call for a chunk and parse the reply."""
        reply = self.groq.generate_text(
            prompt=build_summary_prompt(chunk_text),
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            model=self.model,
        )
        return parse_summary(reply)

    def track(self, state: ContinuityState, chunk_text: str) -> ContinuityState:
        """Summarize ``chunk_text`` and return the advanced state."""
        summary = self.summarize(chunk_text)
        new_state = state.advance(summary, chunk_text)
        logger.info(
            "Continuity updated: %d used elements (+%d)",
            len(new_state.used_elements),
            len(new_state.used_elements) - len(state.used_elements),
        )
        return new_state
