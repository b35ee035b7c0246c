"""CLI entry point — python -m deeptopics."""

import argparse
import json

from .config import CATEGORIES, HISTORY_FILE
from .log import set_verbose


def _history(args):
    from .history import JsonHistory
    return JsonHistory(args.history)


def cmd_select(args):
    from .selector import TopicSelector

    topic = TopicSelector().select_topic(args.category, _history(args))
    if args.json:
        print(json.dumps(topic.to_dict(), indent=2, default=str))
        return topic

    marker = "fallback" if topic.is_fallback else f"final {topic.final_score}"
    print(f"\n  {args.category}: {topic.topic}  [{marker}]")
    if not topic.is_fallback:
        print(f"  Sources ({topic.source_count}): {', '.join(topic.sources)}")
        print(f"  Meat {topic.meat_score}  Depth {topic.depth_score}  Hotness {topic.hotness_score}")
        for h in topic.sample_headlines:
            print(f"    - {h}")
    if topic.deep_research:
        print(f"\n  Deep research queries:")
        for q in topic.deep_research.factual_queries + topic.deep_research.analytical_queries:
            print(f"    - {q}")
    return topic


def cmd_topics(args):
    from .depth import depth_label
    from .meat import meat_score_label
    from .selector import TopicSelector

    topics = TopicSelector().list_trending_topics(args.category, _history(args), limit=args.limit)
    if not topics:
        print(f"  No trending topics for {args.category}.")
        return topics

    print(f"\n  Trending in {args.category} ({len(topics)}):\n")
    for i, t in enumerate(topics, 1):
        meat = meat_score_label(t.meat_score or 0)
        depth = "Shallow Update" if t.is_shallow else depth_label(t.depth_score or 0, 0.0)
        print(f"  {i:2d}. [{t.final_score}] {t.topic}  ({t.source_count} sources, {meat}, {depth})")
    return topics


def cmd_sources(args):
    from .sources import get_sources_for_category

    sources = get_sources_for_category(args.category)
    print(f"\n  Sources for {args.category} ({len(sources)}):\n")
    for s in sorted(sources, key=lambda s: s.tier):
        print(f"  T{s.tier} {s.protocol:<13} {s.name:<28} {s.endpoint}")
    return sources


def cmd_record(args):
    history = _history(args)
    history.record(args.topic)
    print(f"  Recorded: {args.topic} -> {history.path}")


def cmd_config(args):
    from .config import CONFIG_FILE, load_config, set_config_value

    if args.key is None:
        print(json.dumps(load_config(), indent=2))
        return
    if args.value is None:
        print("  config needs both KEY and VALUE to set a value")
        return
    set_config_value(args.key, args.value)
    print(f"  Saved {args.key} -> {CONFIG_FILE}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="DeepTopics — trending topic discovery and ranking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--history", default=str(HISTORY_FILE), help="History file (JSON)")
    sub = parser.add_subparsers(dest="cmd")

    # select
    p_select = sub.add_parser("select", help="Pick the best topic for a category")
    p_select.add_argument("--category", default="Geopolitics", choices=CATEGORIES)
    p_select.add_argument("--json", action="store_true", help="Print the full record as JSON")

    # topics
    p_topics = sub.add_parser("topics", help="List ranked trending topics")
    p_topics.add_argument("--category", default="Geopolitics", choices=CATEGORIES)
    p_topics.add_argument("--limit", type=int, default=10, help="Max topics to show")

    # sources
    p_sources = sub.add_parser("sources", help="Show the sources for a category")
    p_sources.add_argument("--category", default="Geopolitics", choices=CATEGORIES)

    # record
    p_record = sub.add_parser("record", help="Mark a topic as used")
    p_record.add_argument("topic")

    # config
    p_config = sub.add_parser("config", help="Show config.json, or set KEY VALUE")
    p_config.add_argument("key", nargs="?", help="Dotted key, e.g. virtual_seed.enabled")
    p_config.add_argument("value", nargs="?", help="JSON value, e.g. false or 0.2")

    args = parser.parse_args(argv)

    if args.verbose:
        set_verbose(True)

    if not args.cmd:
        parser.print_help()
        return

    if args.cmd == "select":
        cmd_select(args)
    elif args.cmd == "topics":
        cmd_topics(args)
    elif args.cmd == "sources":
        cmd_sources(args)
    elif args.cmd == "record":
        cmd_record(args)
    elif args.cmd == "config":
        cmd_config(args)


if __name__ == "__main__":
    main()
