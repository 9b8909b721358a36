"""Outline planning for long-form lectures."""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from meandering.services.ai.prompts import build_outline_prompt

logger = logging.getLogger(__name__)

MAX_SECTIONS = 3

# "1. Title", "2) Title", "## 3. Title", "**1. Title**", "Section 2: Title"
# Indented or dotted ("1.2") lines are subsections and never match.
SECTION_LINE_PATTERN = re.compile(
    r"^(?:#{1,6}\s*)?(?:\*\*)?(?:section\s+)?\d+[.):](?:\*\*)?\s+(?P<title>.+)$",
    re.IGNORECASE | re.MULTILINE,
)


@dataclass(frozen=True)
class Outline:
    """Generated outline text and the top-level section titles parsed from it."""

    text: str
    section_titles: Tuple[str, ...]
    fell_back: bool = False


def _clean_title(raw: str) -> str:
    return raw.strip().strip("*#").strip().rstrip(":").strip()


def parse_section_titles(text: str) -> Tuple[str, ...]:
    """Extract up to three top-level section titles from outline text."""
    titles = []
    for match in SECTION_LINE_PATTERN.finditer(text):
        title = _clean_title(match.group("title"))
        if title:
            titles.append(title)
        if len(titles) == MAX_SECTIONS:
            break
    return tuple(titles)


class OutlinePlanner:
    """Produces a three-section outline with one generation call."""

    def __init__(
        self,
        groq_service,
        max_tokens: int = 1200,
        temperature: float = 0.7,
        model: Optional[str] = None,
    ):
        self.groq = groq_service
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.model = model

    def plan(self, topic: str) -> Outline:
        """
        Plan an outline for ``topic``.

        When no numbered top-level section can be found the topic itself
        becomes the only section title. This is a degradation, not an error.

        Args:
            topic: Lecture topic

        Returns:
            Outline with one to three section titles
        """
        text = self.groq.generate_text(
            prompt=build_outline_prompt(topic),
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            model=self.model,
        )

        titles = parse_section_titles(text)
        fell_back = not titles
        if fell_back:
            logger.warning("Outline for '%s' has no numbered sections; using topic as sole section", topic)
            titles = (topic,)
        else:
            logger.info("Outline planned for '%s' with %d sections", topic, len(titles))

        return Outline(text=text, section_titles=titles, fell_back=fell_back)
