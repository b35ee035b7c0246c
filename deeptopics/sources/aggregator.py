"""Concurrent fan-out over all sources of a category."""

import concurrent.futures

from ..log import get_logger, log
from ..models import HeadlineRecord, SourceDescriptor
from .base import MAX_ITEMS
from .registry import get_fetcher


def fetch_all_sources(sources: list[SourceDescriptor], timeout: float = 10.0,
                      max_workers: int = 8, limit: int = MAX_ITEMS) -> list[HeadlineRecord]:
    """Fetch every source in parallel; one failing source never aborts the rest.

    Waits for every outcome before returning. Results are concatenated in
    source order so the same inputs always give the same headline order.
    """
    logger = get_logger()
    fetchers = []
    for src in sources:
        try:
            fetcher = get_fetcher(src, timeout=timeout)
        except ValueError as e:
            logger.warning("%s: skipped — %s", src.name, e)
            continue
        if fetcher.is_available:
            fetchers.append(fetcher)
        else:
            logger.debug("%s: fetcher unavailable, skipping", src.name)

    if not fetchers:
        return []

    results = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {pool.submit(f.fetch, limit): f for f in fetchers}
        for future in concurrent.futures.as_completed(futures):
            fetcher = futures[future]
            try:
                headlines = future.result()
            except Exception as e:
                logger.warning("%s: failed — %s", fetcher.name, e)
                continue
            results[id(fetcher)] = headlines
            log(f"{fetcher.name}: {len(headlines)} headlines")

    all_headlines = []
    for fetcher in fetchers:
        all_headlines.extend(results.get(id(fetcher), []))
    return all_headlines
