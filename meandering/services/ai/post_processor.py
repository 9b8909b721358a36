"""Cleanup of raw generated lecture text into speech-synthesis-ready prose."""

import re
from typing import List

DEFAULT_MAX_PARAGRAPH_WORDS = 150

# Spans newlines so an unmatched opener never pairs up after re-wrapping
BRACKETED_PATTERN = re.compile(r"\[[^\]]*\]")
ASTERISK_PATTERN = re.compile(r"\*[^*]*\*")
PARAGRAPH_BREAK_PATTERN = re.compile(r"\n\s*\n")
SENTENCE_PATTERN = re.compile(r"[^.!?]*[.!?]+")


def count_words(text: str) -> int:
    """Count whitespace-delimited non-empty tokens."""
    return len(text.split())


def split_sentences(text: str) -> List[str]:
    """
    Split text into sentences on terminal punctuation.

    Trailing text without terminal punctuation is kept as a final
    sentence so nothing is lost.
    """
    sentences = []
    consumed = 0
    for match in SENTENCE_PATTERN.finditer(text):
        sentence = match.group(0).strip()
        if sentence:
            sentences.append(sentence)
        consumed = match.end()
    tail = text[consumed:].strip()
    if tail:
        sentences.append(tail)
    return sentences


def wrap_paragraph(paragraph: str, max_words: int) -> List[str]:
    """
    Split an oversized paragraph at sentence boundaries.

    Sentences are packed greedily, in order, into paragraphs of at most
    ``max_words`` words. A single sentence longer than the cap becomes a
    paragraph of its own and is never split.
    """
    if count_words(paragraph) <= max_words:
        return [paragraph]

    wrapped: List[str] = []
    current: List[str] = []
    current_words = 0
    for sentence in split_sentences(paragraph):
        words = count_words(sentence)
        if current and current_words + words > max_words:
            wrapped.append(" ".join(current))
            current = []
            current_words = 0
        current.append(sentence)
        current_words += words

    if current:
        wrapped.append(" ".join(current))
    return wrapped


def post_process(raw: str, max_paragraph_words: int = DEFAULT_MAX_PARAGRAPH_WORDS) -> str:
    """
    Clean raw generated text for narration.

    Removes bracketed meta-text and asterisk stage directions, replaces
    exclamation marks with full stops and re-wraps paragraphs longer than
    ``max_paragraph_words``. The result is stable under repeated application.

    Args:
        raw: Text as returned by the generation service
        max_paragraph_words: Advisory paragraph cap

    Returns:
        Cleaned text, trimmed of surrounding whitespace
    """
    text = BRACKETED_PATTERN.sub("", raw)
    text = ASTERISK_PATTERN.sub("", text)
    text = text.replace("!", ".")

    paragraphs: List[str] = []
    for block in PARAGRAPH_BREAK_PATTERN.split(text):
        block = block.strip()
        if block:
            paragraphs.extend(wrap_paragraph(block, max_paragraph_words))

    return "\n\n".join(paragraphs).strip()
