"""Candidate topic proposals for the lecture topic picker."""

import logging
from typing import List, Optional

from meandering.services.ai.prompts import build_topics_prompt

logger = logging.getLogger(__name__)

DEFAULT_TOPIC_COUNT = 20


def parse_topics(text: str, count: int) -> List[str]:
    """Split a reply into trimmed, non-empty lines, keeping at most ``count``."""
    lines = [line.strip() for line in text.splitlines()]
    return [line for line in lines if line][:count]


class TopicProposer:
    """Proposes a diverse batch of sleep-lecture topics with one call."""

    def __init__(
        self,
        groq_service,
        max_tokens: int = 1000,
        temperature: float = 0.8,
        model: Optional[str] = None,
    ):
        self.groq = groq_service
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.model = model

    def propose(self, count: int = DEFAULT_TOPIC_COUNT) -> List[str]:
        """
        Propose up to ``count`` topics.

        Category balance and era diversity are requested in the prompt
        only; the reply is not checked against them.
        """
        if count < 1:
            raise ValueError("count must be at least 1")

        reply = self.groq.generate_text(
            prompt=build_topics_prompt(count),
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            model=self.model,
        )
        topics = parse_topics(reply, count)
        logger.info("Proposed %d topics (requested %d)", len(topics), count)
        return topics
