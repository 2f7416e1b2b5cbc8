"""Syllabus file import and CSV bulk question import."""
import json
import logging
import re
from pathlib import Path

from syllabus_sprint.drafting import draft_questions
from syllabus_sprint.models import DEFAULT_TOPIC, Difficulty, Question, clamp_answer_index, new_id
from syllabus_sprint.store import add_questions

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 20
CSV_MIN_FIELDS = 7


def read_file_content(file_path: str) -> str:
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix in (".txt", ".md"):
        return path.read_text()
    elif suffix == ".json":
        data = json.loads(path.read_text())
        return json.dumps(data, indent=2) if isinstance(data, dict) else str(data)
    elif suffix in (".yaml", ".yml"):
        import yaml
        data = yaml.safe_load(path.read_text())
        return str(data)
    elif suffix == ".pdf":
        from PyPDF2 import PdfReader
        reader = PdfReader(file_path)
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    elif suffix == ".docx":
        from docx import Document
        doc = Document(file_path)
        return "\n".join(p.text for p in doc.paragraphs)
    elif suffix in (".html", ".htm"):
        from bs4 import BeautifulSoup
        html = path.read_text()
        return BeautifulSoup(html, "html.parser").get_text()
    else:
        # Try reading as plain text
        return path.read_text()


def is_readable(text: str | None) -> bool:
    """Extraction counts as failed when fewer than MIN_TEXT_LENGTH characters survive."""
    return bool(text) and len(text.strip()) >= MIN_TEXT_LENGTH


def parse_csv(text: str) -> list[Question]:
    """Parse `question,a,b,c,d,answerIndex,explanation[,topic[,difficulty]]` rows.

    Rows with fewer than seven fields are skipped; the answer index is clamped.
    """
    questions = []
    for row in re.split(r"\r?\n", text or ""):
        row = row.strip()
        if not row:
            continue
        cols = [c.strip() for c in row.split(",")]
        if len(cols) < CSV_MIN_FIELDS:
            logger.debug("Skipping short CSV row: %r", row)
            continue
        prompt, a, b, c, d, answer, explanation = cols[:7]
        topic = cols[7] if len(cols) > 7 and cols[7] else DEFAULT_TOPIC
        difficulty = Difficulty.parse(cols[8]) if len(cols) > 8 else Difficulty.EASY
        questions.append(Question(
            id=new_id(),
            prompt=prompt,
            options=[a, b, c, d],
            answer_index=clamp_answer_index(answer),
            explanation=explanation,
            topic=topic,
            difficulty=difficulty,
        ))
    return questions


def import_csv(db_path: str, text: str) -> int:
    questions = parse_csv(text)
    if questions:
        add_questions(db_path, questions)
    return len(questions)


def draft_from_text(db_path: str, text: str, topic: str = DEFAULT_TOPIC, rng=None) -> int:
    """Draft questions from text and append them to the bank. Returns the count."""
    if not is_readable(text):
        return 0
    drafts = list(draft_questions(text, topic, rng))
    if drafts:
        add_questions(db_path, drafts)
    return len(drafts)


def draft_from_file(db_path: str, file_path: str, topic: str = DEFAULT_TOPIC, rng=None) -> dict:
    """Extract a syllabus file and draft questions from it.

    `readable` is False when extraction produced too little text; nothing is
    drafted in that case.
    """
    content = read_file_content(file_path) or ""
    readable = is_readable(content)
    if not readable:
        logger.warning("Extracted only %d characters from %s", len(content.strip()), file_path)
    drafted = draft_from_text(db_path, content, topic, rng) if readable else 0
    return {
        "filename": Path(file_path).name,
        "length": len(content),
        "readable": readable,
        "drafted": drafted,
    }
