"""
Text helpers for generated content: markup stripping, word counts,
title extraction, slugs and reading time.
"""

import math
import re
import unicodedata

import markdown
from bs4 import BeautifulSoup

WORDS_PER_MINUTE = 225
MAX_TITLE_LENGTH = 255
MAX_SLUG_LENGTH = 200
FALLBACK_TITLE_CHARS = 50
FALLBACK_SLUG = "content"

_HEADING_RE = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)


def strip_markup(text: str) -> str:
    """Render markdown to HTML, then drop every tag and keep the text."""
    if not text:
        return ""
    html = markdown.markdown(text)
    return BeautifulSoup(html, "html.parser").get_text()


def count_words(text: str) -> int:
    """Whitespace-delimited tokens in the markup-stripped text."""
    return len(strip_markup(text).split())


def reading_time(word_count: int) -> int:
    """Minutes to read at 225 words per minute, never less than 1."""
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def extract_title(content: str) -> str:
    """
    Derive a title from generated content.

    Precedence:
        1. The first `# Heading` line anywhere in the body
        2. The first non-empty stripped line, if 5 < length < 100
        3. The first 50 stripped characters followed by "..."
    """
    match = _HEADING_RE.search(content)
    if match:
        heading = match.group(1).strip()
        if heading:
            return heading[:MAX_TITLE_LENGTH]

    stripped = strip_markup(content)
    first_line = next((line.strip() for line in stripped.splitlines() if line.strip()), "")
    if 5 < len(first_line) < 100:
        return first_line

    return stripped.strip()[:FALLBACK_TITLE_CHARS] + "..."


def slugify(text: str) -> str:
    """Convert text to a URL-safe slug (ASCII, lowercase, hyphen separated)."""
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-z0-9]+", "-", text.lower())
    text = text.strip("-")[:MAX_SLUG_LENGTH].rstrip("-")
    return text or FALLBACK_SLUG
