"""Reddit .json listing fetcher (top/hot)."""

from .base import SourceFetcher, from_timestamp

MAX_POSTS = 20
MIN_SCORE = 100


class RedditFetcher(SourceFetcher):
    protocol = "reddit"

    def _fetch(self, limit: int):
        data = self._get(
            self.source.endpoint,
            headers={"User-Agent": "Mozilla/5.0 (compatible; deeptopics/1.0)"},
        ).json()

        headlines = []
        for post in data.get("data", {}).get("children", []):
            d = post.get("data", {})
            if d.get("stickied") or d.get("over_18") or d.get("score", 0) < MIN_SCORE:
                continue

            h = self._headline(
                d.get("title", ""),
                url=d.get("url") or f"https://reddit.com{d.get('permalink', '')}",
                published_at=from_timestamp(d.get("created_utc")),
                description=d.get("selftext") or None,
                engagement=d.get("score"),
                source_name=f"Reddit r/{d.get('subreddit', 'unknown')}",
            )
            if h:
                headlines.append(h)
            if len(headlines) >= min(limit, MAX_POSTS):
                break
        return headlines
