"""Draft fill-in-the-blank MCQs from pasted syllabus text."""
import logging
import random
import re
import time
from typing import Iterator, Optional

from syllabus_sprint.models import DEFAULT_TOPIC, ID_ALPHABET, Difficulty, Question, new_id

logger = logging.getLogger(__name__)

MAX_DRAFTS = 40
MIN_SENTENCE_LENGTH = 40
BLANK = "____"
DISTRACTOR_TAIL_LENGTH = 2
DISTRACTOR_RETRIES = 10

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
_HAS_LETTER = re.compile(r"[a-zA-Z]")
_NOT_KEYWORD = re.compile(r"[^a-zA-Z0-9%]")


def split_sentences(raw: str) -> list[str]:
    """Collapse whitespace and keep sentences long enough to draft from."""
    text = re.sub(r"\s+", " ", raw).strip()
    if not text:
        return []
    sentences = [
        s for s in _SENTENCE_SPLIT.split(text)
        if len(s) > MIN_SENTENCE_LENGTH and _HAS_LETTER.search(s)
    ]
    return sentences[:MAX_DRAFTS]


def blank_index(word_count: int) -> int:
    """Word near the middle, kept five words away from either end when possible."""
    mid = max(5, min(word_count - 5, word_count // 2))
    return min(max(mid, 0), max(word_count - 1, 0))


def _distractor(seed: str, length: int, rng: random.Random) -> str:
    """Seed prefix with a random base-36 tail, `length` characters long."""
    keep = max(1, length - DISTRACTOR_TAIL_LENGTH)
    head = seed[:keep]
    tail = "".join(rng.choice(ID_ALPHABET) for _ in range(length - len(head)))
    return head + tail


def make_distractors(answer: str, rng: random.Random) -> list[str]:
    """Three perturbations of the answer, redrawn when they collide."""
    length = max(3, len(answer))
    taken = {answer}
    distractors = []
    for seed in (answer, answer.upper(), answer + "X"):
        candidate = _distractor(seed, length, rng)
        for _ in range(DISTRACTOR_RETRIES):
            if candidate not in taken:
                break
            candidate = _distractor(seed, length, rng)
        taken.add(candidate)
        distractors.append(candidate)
    return distractors


def draft_question(
    sentence: str,
    position: int,
    default_topic: str = DEFAULT_TOPIC,
    rng: Optional[random.Random] = None,
) -> Question:
    rng = rng or random.Random()
    words = sentence.split(" ")
    token = words[blank_index(len(words))]
    answer = _NOT_KEYWORD.sub("", token)
    prompt = sentence.replace(token, BLANK, 1)
    options = [answer] + make_distractors(answer, rng)
    rng.shuffle(options)
    return Question(
        id=f"draft_{int(time.time() * 1000)}_{position}_{new_id(rng)}",
        prompt=prompt,
        options=options,
        answer_index=options.index(answer),
        explanation=f"The blank was the keyword: {answer}. Refine this draft in Admin > Edit.",
        topic=default_topic or DEFAULT_TOPIC,
        difficulty=Difficulty.ladder()[position % 3],
    )


def draft_questions(
    raw: str,
    default_topic: str = DEFAULT_TOPIC,
    rng: Optional[random.Random] = None,
) -> Iterator[Question]:
    """Yield one draft question per usable sentence, up to MAX_DRAFTS.

    Only the first occurrence of the chosen word is blanked, so sentences
    that repeat it produce odd-looking drafts that still need a human edit.
    """
    rng = rng or random.Random()
    sentences = split_sentences(raw)
    logger.debug("Drafting from %d sentences", len(sentences))
    for position, sentence in enumerate(sentences):
        yield draft_question(sentence, position, default_topic, rng)
