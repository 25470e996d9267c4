"""Post selection – pick the top-N usable candidates, keeping the source's ranking."""

import re
from typing import List, Sequence

from shorts_workflow.domain.errors import NoUsableContent
from shorts_workflow.domain.models import REMOVED_MARKERS, SourcePost


def normalize_title(text: str) -> str:
    """Lowercase, strip punctuation and collapse whitespace (for duplicate checks)."""
    text = " ".join((text or "").split())
    text = re.sub(r"[^\w\s]", "", text.lower())
    return text.strip()


def is_usable(post: SourcePost) -> bool:
    """A post is usable if it has a title or body and is not a removed/deleted marker."""
    if post.get("removed"):
        return False
    title = (post.get("title") or "").strip()
    body = (post.get("body_text") or "").strip()
    if title.lower() in REMOVED_MARKERS:
        title = ""
    if body.lower() in REMOVED_MARKERS:
        if not title:
            return False
        body = ""
    return bool(title or body)


def select_posts(candidates: Sequence[SourcePost], story_count: int) -> List[SourcePost]:
    """
    Return the first `story_count` usable, non-duplicate candidates in input order.

    Raises NoUsableContent if nothing usable is left. Fewer than `story_count`
    posts is accepted as a partial result.
    """
    selected: List[SourcePost] = []
    seen_ids = set()
    seen_urls = set()
    seen_titles = set()

    for post in candidates:
        if len(selected) >= story_count:
            break
        if not is_usable(post):
            continue

        post_id = str(post.get("id") or "").strip()
        url = (post.get("url") or "").strip().rstrip("/").lower()
        title_key = normalize_title(post.get("title", ""))

        if (post_id and post_id in seen_ids) or (url and url in seen_urls) or (title_key and title_key in seen_titles):
            continue

        if post_id:
            seen_ids.add(post_id)
        if url:
            seen_urls.add(url)
        if title_key:
            seen_titles.add(title_key)
        selected.append(post)

    if not selected:
        raise NoUsableContent()
    return selected
