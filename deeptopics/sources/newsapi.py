"""NewsAPI-style REST JSON fetcher (``{"articles": [...]}``)."""

from .base import SourceFetcher, from_iso


class NewsAPIFetcher(SourceFetcher):
    protocol = "api"

    def _fetch(self, limit: int):
        data = self._get(self.source.endpoint).json()

        headlines = []
        for article in data.get("articles", [])[:limit]:
            h = self._headline(
                article.get("title") or "",
                url=article.get("url") or "",
                published_at=from_iso(article.get("publishedAt")),
                description=article.get("description"),
                source_name=(article.get("source") or {}).get("name"),
            )
            if h:
                headlines.append(h)
        return headlines
