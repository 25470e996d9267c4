"""Text cleanup helpers shared by the story generator and fallbacks."""

import re
import textwrap
from typing import List

CAPTION_LINE_WIDTH = 32
CAPTION_MAX_LINES = 4

STOPWORDS = frozenset(
    """
    a about after again all also am an and any are as at be because been before being
    but by can could did do does doing for from had has have having he her here hers him
    his how i if in into is it its just me more most my no nor not now of off on once
    only or other our out over own same she should so some such than that the their them
    then there these they this those through to too under until up very was we were what
    when where which while who whom why will with would you your yours im ive dont didnt
    cant wont got get like one really people thing things tifu aita wibta til eli5 update
    """.split()
)


def clean_generated_text(text: str) -> str:
    """Strip HTML tags/entities, markdown fences and wrapping quotes; collapse whitespace."""
    if not text:
        return ""
    text = re.sub(r"<[^>]+>", "", str(text))
    text = text.replace("&nbsp;", " ").replace("&amp;", "&")
    text = text.replace("&lt;", "<").replace("&gt;", ">")
    text = text.replace("&quot;", '"').replace("&#39;", "'")
    if "```" in text:
        parts = [p for p in text.split("```") if p.strip()]
        text = parts[0] if parts else ""
        # drop a language tag left on the first line of a fenced block
        first, _, rest = text.partition("\n")
        if rest and len(first.split()) == 1 and first.strip().isalpha():
            text = rest
    text = " ".join(text.split())
    return text.strip().strip('"').strip("'").strip()


def clean_lines(text: str) -> List[str]:
    """Split a list-shaped response into clean lines (bullets and numbering removed)."""
    if not text:
        return []
    text = re.sub(r"<[^>]+>", "", str(text)).replace("```", "\n")
    lines = []
    for raw in re.split(r"[\n|]", text):
        line = re.sub(r"^\s*(?:[-*•]+|\d+[.)])\s*", "", raw)
        line = " ".join(line.split()).strip().strip('"').strip("'").strip()
        if line:
            lines.append(line)
    return lines


def collapse_whitespace(text: str) -> str:
    return " ".join((text or "").split())


def truncate_words(text: str, max_chars: int) -> str:
    """Cut at a word boundary so the result fits in max_chars."""
    text = collapse_whitespace(text)
    if len(text) <= max_chars:
        return text
    cut = text[:max_chars + 1].rsplit(" ", 1)[0].rstrip(" ,;:-")
    if not cut:
        cut = text[:max_chars]
    return cut + "…"


def first_sentence(text: str) -> str:
    text = collapse_whitespace(text)
    match = re.match(r"(.+?[.!?])(\s|$)", text)
    return match.group(1) if match else text


def wrap_captions(text: str, width: int = CAPTION_LINE_WIDTH, max_lines: int = CAPTION_MAX_LINES) -> List[str]:
    """Word-wrap narration into on-screen caption lines."""
    return textwrap.wrap(collapse_whitespace(text), width=width)[:max_lines]


def extract_keywords(text: str, limit: int = 6) -> List[str]:
    """Non-stopword words from text, first-seen order, deduplicated."""
    keywords: List[str] = []
    for word in re.findall(r"[A-Za-z][A-Za-z0-9']+", text or ""):
        word = word.lower().replace("'", "")
        if len(word) < 3 or word in STOPWORDS or word in keywords:
            continue
        keywords.append(word)
        if len(keywords) >= limit:
            break
    return keywords


def parse_keywords(text: str, limit: int = 8) -> List[str]:
    """Parse a comma/newline separated keyword response into normalized phrases."""
    keywords: List[str] = []
    for line in clean_lines(text):
        for part in line.split(","):
            word = collapse_whitespace(part.strip().lstrip("#")).lower()
            if word and word not in keywords:
                keywords.append(word)
    return keywords[:limit]
