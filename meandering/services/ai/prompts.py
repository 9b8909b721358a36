"""Prompt templates for lecture, outline, continuity and topic generation."""

from typing import Iterable, Optional

# Adjectives that read as excited when spoken in a flat voice
BANNED_ADJECTIVES = [
    "amazing", "incredible", "fascinating", "astonishing", "breathtaking",
    "thrilling", "stunning", "remarkable", "extraordinary", "mind-blowing",
    "epic", "spectacular",
]

HEDGING_TRANSITIONS = [
    "it is thought that",
    "as far as anyone can tell",
    "or so the records suggest",
    "in all likelihood",
    "one imagines",
    "more or less",
    "by most accounts",
]

LECTURE_SYSTEM_PROMPT = f"""You are a drowsy history professor giving a long bedtime lecture.
Your listener is trying to fall asleep. Your voice never rises and never hurries.

DELIVERY:
- Speak in a calm, even monotone. Everything is mildly interesting and nothing is exciting.
- Mention dramatic events only in passing, then drift back to routines and procedures.
- Prefer hedging transitions such as: {"; ".join(HEDGING_TRANSITIONS)}.
- Take the scenic route. Wander into small tangents and drift back eventually.

SPEECH SYNTHESIS FORMATTING (CRITICAL):
- Never use exclamation marks.
- Write every number and date as words, for example "fourteen twenty-three" or "around two in the afternoon".
- Write short paragraphs of three to six sentences separated by a blank line.
- No lists, bullet points, headings, markdown or bracketed notes.
- No stage directions or asterisk actions, such as clearing your throat or adjusting glasses.
- No meta-text about parts, sections or continuation, such as "[Continued]" or "End of Part One".
- Never use these adjectives: {", ".join(BANNED_ADJECTIVES)}.

Start directly with lecture content. Do not describe your tone or manner of speaking."""

OUTLINE_PROMPT_TEMPLATE = """Plan a meandering, sleep-inducing history lecture on "{topic}".

Produce an outline with exactly 3 top-level sections. Number the top-level sections "1.", "2.", "3." at the start of the line, followed by the section title.
Under each section, give exactly 3 subsections, and under each subsection 2-3 supporting details (routines, minor historical figures, dates, everyday processes).

The structure should meander rather than march in a straight line: let sections revisit earlier ideas from a different angle and include gentle tangents.
Output only the outline."""

SECTION_PROMPT_TEMPLATE = """You are writing one part of a long sleep-inducing history lecture on "{topic}".

FULL LECTURE OUTLINE:
{outline}

Write the lecture text for section {section_number} of the outline specifically ("{focus_area}").
This part should be approximately {target_words} words.
{continuity}
Write flowing lecture prose only."""

OVERFLOW_PROMPT_TEMPLATE = """You are writing an additional part of a long sleep-inducing history lecture on "{topic}".

FULL LECTURE OUTLINE (already covered):
{outline}

The planned sections are finished but the lecture needs to continue.
Explore an angle of "{topic}" that is NOT already present in the outline above: a neighbouring trade, an overlooked routine, a minor figure, or a place nearby.
This part should be approximately {target_words} words.
{continuity}
Write flowing lecture prose only."""

CONTINUITY_BLOCK_TEMPLATE = """
WHERE THE LECTURE LEFT OFF:
Summary of the previous part: {summary}
People, places and dates already introduced (do not introduce them again as if new, and do not repeat their anecdotes): {used_elements}
The previous part ended with these exact sentences:
"{last_sentences}"

Continue naturally from those sentences, as if there had been no break. Do not greet the listener again or restart the topic.
"""

SUMMARY_PROMPT_TEMPLATE = """Summarize the following lecture passage in exactly 3 sentences:
1. The topic and arc the passage covered.
2. The key proper nouns and dates it mentioned.
3. Where the narrative left off.

Then, on a new line, write "USED:" followed by a comma-separated list of every proper noun and date the passage mentioned.

PASSAGE:
{chunk_text}"""

TOPIC_CATEGORIES = [
    "trades and crafts",
    "infrastructure",
    "slow processes",
    "forgotten institutions",
    "everyday domestic life",
]

TOPICS_PROMPT_TEMPLATE = """Generate {count} boring history lecture topics that would make good sleep content.
Each topic should describe what specific ordinary people did during their ordinary days.

Spread the topics across these categories, roughly evenly:
{categories}

Requirements:
- Cover at least 8 different civilizations or eras.
- Never repeat an occupation or institution.
- Prefer mundane routines, repetitive tasks and upkeep over battles and kings.

Examples of the style:
- Daily routines of a Roman bath house attendant
- Maintaining a lighthouse in the 1800s
- Sweeping chimneys in Georgian London
- Mending nets in a Norse fishing village

Provide exactly {count} topics, one per line, with no numbering, bullets or category headings."""


def build_outline_prompt(topic: str) -> str:
    """Build the single outline-planning prompt for a topic."""
    return OUTLINE_PROMPT_TEMPLATE.format(topic=topic)


def build_continuity_block(
    summary: str,
    used_elements: Iterable[str],
    last_sentences: str,
) -> str:
    """Render the carried-forward state of the previous chunk."""
    used = ", ".join(used_elements) or "none yet"
    return CONTINUITY_BLOCK_TEMPLATE.format(
        summary=summary or "(no summary available)",
        used_elements=used,
        last_sentences=last_sentences,
    )


def build_section_prompt(
    topic: str,
    outline: str,
    section_number: int,
    focus_area: str,
    target_words: int,
    continuity: Optional[str] = None,
) -> str:
    """
    Build the prompt for one planned section of the lecture.

    Args:
        topic: Lecture topic
        outline: Full outline text
        section_number: 1-based outline section to cover
        focus_area: Title of that section
        target_words: Advisory word count for this chunk
        continuity: Rendered continuity block, omitted for the first chunk

    Returns:
        Prompt text
    """
    return SECTION_PROMPT_TEMPLATE.format(
        topic=topic,
        outline=outline,
        section_number=section_number,
        focus_area=focus_area,
        target_words=target_words,
        continuity=continuity or "",
    )


def build_overflow_prompt(
    topic: str,
    outline: str,
    target_words: int,
    continuity: Optional[str] = None,
) -> str:
    """Build the prompt for an additional chunk beyond the planned sections."""
    return OVERFLOW_PROMPT_TEMPLATE.format(
        topic=topic,
        outline=outline,
        target_words=target_words,
        continuity=continuity or "",
    )


def build_summary_prompt(chunk_text: str) -> str:
    """Build the continuity-summary prompt for a finished chunk."""
    return SUMMARY_PROMPT_TEMPLATE.format(chunk_text=chunk_text)


def build_topics_prompt(count: int) -> str:
    """Build the topic-proposal prompt."""
    categories = "\n".join(f"- {category}" for category in TOPIC_CATEGORIES)
    return TOPICS_PROMPT_TEMPLATE.format(count=count, categories=categories)
