"""HackerNews Firebase API fetcher."""

import concurrent.futures

import requests

from .base import SourceFetcher, from_timestamp

ITEM_URL = "https://hacker-news.firebaseio.com/v0/item/{id}.json"
MAX_STORIES = 15
MIN_SCORE = 50


class HackerNewsFetcher(SourceFetcher):
    protocol = "hackernews"

    def _fetch(self, limit: int):
        story_ids = self._get(self.source.endpoint).json()
        top_ids = story_ids[:min(limit, MAX_STORIES)]

        with concurrent.futures.ThreadPoolExecutor(max_workers=5) as pool:
            stories = list(pool.map(self._fetch_item, top_ids))

        headlines = []
        for story_id, story in zip(top_ids, stories):
            if not story or story.get("score", 0) < MIN_SCORE:
                continue
            h = self._headline(
                story.get("title", ""),
                url=story.get("url") or f"https://news.ycombinator.com/item?id={story_id}",
                published_at=from_timestamp(story.get("time")),
                engagement=story.get("score"),
                source_name="HackerNews",
            )
            if h:
                headlines.append(h)
        return headlines

    def _fetch_item(self, story_id) -> dict | None:
        try:
            return self._get(ITEM_URL.format(id=story_id)).json()
        except (requests.RequestException, ValueError):
            return None
