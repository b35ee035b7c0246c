"""Quality-tiered sources per category, and protocol -> fetcher lookup."""

from ..config import load_config
from ..models import SourceDescriptor
from .base import SourceFetcher
from .google_trends import GoogleTrendsFetcher
from .hackernews import HackerNewsFetcher
from .newsapi import NewsAPIFetcher
from .reddit import RedditFetcher
from .rss import RSSFetcher


def _src(name, tier, protocol, endpoint, *categories) -> SourceDescriptor:
    return SourceDescriptor(name, tier, protocol, endpoint, tuple(categories))


CATEGORY_SOURCES = {
    "Geopolitics": [
        _src("Foreign Affairs", 0, "rss", "https://www.foreignaffairs.com/rss.xml", "Geopolitics"),
        _src("Foreign Policy", 0, "rss", "https://foreignpolicy.com/feed/", "Geopolitics"),
        _src("The Diplomat", 0, "rss", "https://thediplomat.com/feed/", "Geopolitics"),
        _src("Reuters World", 1, "rss", "https://rsshub.app/reuters/world", "Geopolitics"),
        _src("AP News", 1, "rss", "https://rsshub.app/apnews/topics/world-news", "Geopolitics"),
        _src("BBC World", 1, "rss", "https://feeds.bbci.co.uk/news/world/rss.xml", "Geopolitics"),
        _src("DW News", 2, "rss", "https://rss.dw.com/xml/rss-en-world", "Geopolitics"),
        _src("Guardian World", 2, "rss", "https://www.theguardian.com/world/rss", "Geopolitics"),
        _src("NPR World", 3, "rss", "https://feeds.npr.org/1004/rss.xml", "Geopolitics"),
    ],
    "Economics": [
        _src("The Economist", 0, "rss", "https://www.economist.com/finance-and-economics/rss.xml", "Economics"),
        _src("Project Syndicate", 0, "rss", "https://www.project-syndicate.org/rss", "Economics"),
        _src("Brookings", 0, "rss", "https://www.brookings.edu/feed/", "Economics"),
        _src("Reuters Business", 1, "rss", "https://rsshub.app/reuters/business", "Economics"),
        _src("NewsAPI Business", 2, "api",
             "https://saurav.tech/NewsAPI/top-headlines/category/business/us.json", "Economics"),
        _src("BBC Business", 2, "rss", "https://feeds.bbci.co.uk/news/business/rss.xml", "Economics"),
        _src("NPR Economy", 3, "rss", "https://feeds.npr.org/1006/rss.xml", "Economics"),
    ],
    "Technology": [
        _src("MIT Technology Review", 0, "rss", "https://www.technologyreview.com/feed/", "Technology"),
        _src("Stratechery", 0, "rss", "https://stratechery.com/feed/", "Technology"),
        _src("HackerNews", 1, "hackernews", "https://hacker-news.firebaseio.com/v0/topstories.json", "Technology"),
        _src("Ars Technica", 1, "rss", "https://feeds.arstechnica.com/arstechnica/index", "Technology"),
        _src("Wired", 1, "rss", "https://www.wired.com/feed/rss", "Technology"),
        _src("TechCrunch", 2, "rss", "https://techcrunch.com/feed/", "Technology"),
        _src("The Verge", 2, "rss", "https://www.theverge.com/rss/index.xml", "Technology"),
        _src("Reddit Tech", 3, "reddit", "https://www.reddit.com/r/technology/top.json?t=day&limit=25", "Technology"),
    ],
    "Climate": [
        _src("Yale Climate Connections", 0, "rss", "https://yaleclimateconnections.org/feed/", "Climate"),
        _src("Nature Climate", 1, "rss", "https://www.nature.com/nclimate.rss", "Climate", "Science"),
        _src("Carbon Brief", 1, "rss", "https://www.carbonbrief.org/feed/", "Climate"),
        _src("Guardian Environment", 2, "rss", "https://www.theguardian.com/environment/rss", "Climate"),
        _src("Guardian Climate", 2, "rss", "https://www.theguardian.com/environment/climate-crisis/rss", "Climate"),
        _src("BBC Environment", 2, "rss",
             "https://feeds.bbci.co.uk/news/science_and_environment/rss.xml", "Climate", "Science"),
        _src("NPR Climate", 2, "rss", "https://feeds.npr.org/1025/rss.xml", "Climate"),
        _src("Phys.org Climate", 3, "rss", "https://phys.org/rss-feed/earth-news/environment/", "Climate"),
    ],
    "Society": [
        _src("The Atlantic", 0, "rss", "https://www.theatlantic.com/feed/all/", "Society"),
        _src("The New Yorker", 0, "rss", "https://www.newyorker.com/feed/news", "Society"),
        _src("Guardian Society", 1, "rss", "https://www.theguardian.com/society/rss", "Society"),
        _src("NewsAPI General", 1, "api",
             "https://saurav.tech/NewsAPI/top-headlines/category/general/us.json", "Society"),
        _src("BBC", 2, "rss", "https://feeds.bbci.co.uk/news/rss.xml", "Society"),
        _src("NPR", 2, "rss", "https://feeds.npr.org/1001/rss.xml", "Society"),
        _src("Reddit News", 3, "reddit",
             "https://www.reddit.com/r/worldnews/top.json?t=day&limit=25", "Society", "Geopolitics"),
        _src("Google Trends US", 3, "google_trends", "US", "Society"),
    ],
    "Science": [
        _src("Quanta Magazine", 0, "rss", "https://api.quantamagazine.org/feed/", "Science"),
        _src("Nautilus", 0, "rss", "https://nautil.us/feed/", "Science"),
        _src("Nature", 1, "rss", "https://www.nature.com/nature.rss", "Science"),
        _src("Science Mag", 1, "rss", "https://www.science.org/rss/news_current.xml", "Science"),
        _src("Phys.org", 1, "rss", "https://phys.org/rss-feed/", "Science"),
        _src("Scientific American", 2, "rss", "https://rss.sciam.com/ScientificAmerican-Global", "Science"),
        _src("New Scientist", 2, "rss", "https://www.newscientist.com/feed/home/", "Science"),
        _src("Guardian Science", 2, "rss", "https://www.theguardian.com/science/rss", "Science"),
        _src("NPR Science", 2, "rss", "https://feeds.npr.org/1007/rss.xml", "Science"),
        _src("Reddit Science", 3, "reddit", "https://www.reddit.com/r/science/top.json?t=day&limit=25", "Science"),
    ],
    "Conflict": [
        _src("International Crisis Group", 0, "rss", "https://www.crisisgroup.org/rss.xml", "Conflict", "Geopolitics"),
        _src("War on the Rocks", 0, "rss", "https://warontherocks.com/feed/", "Conflict", "Geopolitics"),
        _src("Reuters", 1, "rss", "https://rsshub.app/reuters/world", "Conflict", "Geopolitics"),
        _src("AP News", 1, "rss", "https://rsshub.app/apnews/topics/world-news", "Conflict", "Geopolitics"),
        _src("BBC World", 1, "rss", "https://feeds.bbci.co.uk/news/world/rss.xml", "Conflict"),
        _src("DW News", 2, "rss", "https://rss.dw.com/xml/rss-en-world", "Conflict"),
        _src("France24", 2, "rss", "https://www.france24.com/en/rss", "Conflict"),
        _src("Reddit WorldNews", 3, "reddit",
             "https://www.reddit.com/r/worldnews/top.json?t=day&limit=25", "Conflict", "Geopolitics"),
    ],
}

# Used for any category without its own list
FALLBACK_SOURCES = [
    _src("NewsAPI General", 2, "api", "https://saurav.tech/NewsAPI/top-headlines/category/general/us.json", "*"),
    _src("BBC Top", 2, "rss", "https://feeds.bbci.co.uk/news/rss.xml", "*"),
    _src("Reuters Top", 1, "rss", "https://rsshub.app/reuters/world", "*"),
]

FETCHERS = {
    cls.protocol: cls
    for cls in (RSSFetcher, NewsAPIFetcher, HackerNewsFetcher, RedditFetcher, GoogleTrendsFetcher)
}


def get_sources_for_category(category: str) -> list[SourceDescriptor]:
    """Configured sources for a category plus any extra_sources from config.json."""
    sources = list(CATEGORY_SOURCES.get(category) or FALLBACK_SOURCES)
    for extra in load_config().get("extra_sources", []):
        cats = tuple(extra.get("categories", ["*"]))
        if category in cats or "*" in cats:
            sources.append(SourceDescriptor(
                name=extra["name"],
                tier=int(extra.get("tier", 3)),
                protocol=extra["protocol"],
                endpoint=extra.get("endpoint", ""),
                categories=cats,
            ))
    return sources


def get_fetcher(source: SourceDescriptor, timeout: float = 10.0) -> SourceFetcher:
    """Fetch strategy for a descriptor's protocol."""
    cls = FETCHERS.get(source.protocol)
    if cls is None:
        raise ValueError(f"Unknown source protocol: {source.protocol!r} ({source.name})")
    return cls(source, timeout=timeout)
