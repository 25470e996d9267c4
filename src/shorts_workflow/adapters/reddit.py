"""IPostSource adapters: Reddit's public listing API and saved JSON files."""

import html
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

from shorts_workflow import config
from shorts_workflow.domain.models import REMOVED_MARKERS, SourcePost
from shorts_workflow.ports.interfaces import IPostSource


def post_from_listing(data: Dict[str, Any], base_url: str = config.REDDIT_BASE_URL) -> SourcePost:
    """Map one listing child's `data` to a SourcePost."""
    permalink = data.get("permalink") or ""
    url = f"{base_url.rstrip('/')}{permalink}" if permalink else (data.get("url") or "")
    body = html.unescape(data.get("selftext") or "")
    removed = bool(data.get("removed_by_category")) or body.strip() in REMOVED_MARKERS
    return SourcePost(
        id=str(data.get("id") or data.get("name") or ""),
        title=html.unescape(data.get("title") or "").strip(),
        url=url,
        body_text=body.strip(),
        score=int(data.get("score") or 0),
        author=data.get("author") or "",
        num_comments=int(data.get("num_comments") or 0),
        removed=removed,
    )


class RedditPostSource(IPostSource):
    """Top posts via https://www.reddit.com/r/<subreddit>/top.json (no auth needed)."""

    def __init__(
        self,
        base_url: str = config.REDDIT_BASE_URL,
        user_agent: str = config.REDDIT_USER_AGENT,
        timeout: float = config.REDDIT_TIMEOUT_SECONDS,
    ):
        self._base_url = base_url.rstrip("/")
        self._headers = {"User-Agent": user_agent}
        self._timeout = timeout

    def fetch_top_posts(self, subreddit: str, timeframe: str, limit: int = 10) -> List[SourcePost]:
        url = f"{self._base_url}/r/{subreddit}/top.json"
        params = {"t": timeframe, "limit": limit, "raw_json": 1}
        print(f"  📡 Fetching r/{subreddit} top posts ({timeframe}, limit {limit})...")
        try:
            response = requests.get(url, params=params, headers=self._headers, timeout=self._timeout)
        except requests.RequestException as e:
            print(f"  ⚠️  Reddit request failed: {e}")
            return []

        if response.status_code != 200:
            print(f"  ⚠️  Reddit returned HTTP {response.status_code} for r/{subreddit}")
            return []

        try:
            payload = response.json()
        except ValueError:
            print("  ⚠️  Reddit returned a non-JSON response")
            return []

        children = (payload.get("data") or {}).get("children") or []
        posts = [
            post_from_listing(child.get("data") or {}, self._base_url)
            for child in children
            if child.get("kind", "t3") == "t3"
        ]
        print(f"  ✅ Fetched {len(posts)} posts from r/{subreddit}")
        return posts[:limit]


class JsonFilePostSource(IPostSource):
    """
    Candidate posts from a saved JSON file, for offline runs.
    Accepts either a list of posts or a raw Reddit listing; subreddit/timeframe are ignored.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    def fetch_top_posts(self, subreddit: str, timeframe: str, limit: int = 10) -> List[SourcePost]:
        with self._path.open("r", encoding="utf-8") as f:
            payload = json.load(f)

        if isinstance(payload, dict):
            items = [child.get("data") or {} for child in (payload.get("data") or {}).get("children") or []]
            posts = [post_from_listing(item) for item in items]
        else:
            posts = [self._coerce(item) for item in payload if isinstance(item, dict)]
        return posts[:limit]

    @staticmethod
    def _coerce(item: Dict[str, Any]) -> SourcePost:
        if "selftext" in item or "permalink" in item:
            return post_from_listing(item)
        post = SourcePost(
            id=str(item.get("id") or ""),
            title=item.get("title") or "",
            url=item.get("url") or "",
            body_text=item.get("body_text") or item.get("bodyText") or "",
            score=int(item.get("score") or 0),
        )
        if item.get("removed"):
            post["removed"] = True
        return post
