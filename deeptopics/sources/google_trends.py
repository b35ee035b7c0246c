"""Google Trends daily trending searches via pytrends."""

from .base import SourceFetcher

# Endpoint is a pytrends "pn" region name, e.g. "united_states"
GEO_TO_PN = {
    "US": "united_states",
    "GB": "united_kingdom",
    "IN": "india",
    "AU": "australia",
}

# Search queries are short by nature ("Lakers", "Bitcoin")
MIN_QUERY_LENGTH = 3


class GoogleTrendsFetcher(SourceFetcher):
    """Maps trending search queries to headline records.

    A query has no publication time, so ``published_at`` is the fetch time;
    rank becomes engagement (first place ~1000, decreasing by 50 per rank).
    """

    protocol = "google_trends"

    @property
    def is_available(self) -> bool:
        try:
            from pytrends.request import TrendReq  # noqa: F401
            return True
        except ImportError:
            return False

    def _fetch(self, limit: int):
        from pytrends.exceptions import ResponseError
        from pytrends.request import TrendReq

        pytrends = TrendReq(hl="en-US", tz=0, timeout=(self.timeout, self.timeout))
        try:
            trending = pytrends.trending_searches(pn=self._pn())
        except ResponseError as e:
            raise ValueError(f"trends request rejected: {e}") from e

        headlines = []
        for rank, row in enumerate(trending.head(limit).itertuples(index=False)):
            query = str(row[0])
            headlines.append(self._trend(query, rank))
        return [h for h in headlines if h]

    def _trend(self, query: str, rank: int):
        score = max(100.0, 1000.0 - rank * 50.0)
        # The bare query is the title; a shared suffix would make every trend look alike
        return self._headline(
            query,
            url=f"https://trends.google.com/trends/explore?q={query.replace(' ', '+')}",
            engagement=score,
            min_length=MIN_QUERY_LENGTH,
        )

    def _pn(self) -> str:
        endpoint = self.source.endpoint or "US"
        return GEO_TO_PN.get(endpoint.upper(), endpoint)
