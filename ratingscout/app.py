import argparse
import json
from pathlib import Path

from . import __version__
from .config import Settings, load_settings
from .env import load_env
from .logger import get_logger
from .matcher import score_candidates, select_best_match
from .normalize import normalize_query
from .providers import PROVIDERS, get_provider, get_providers
from .ratings import format_report, gather_ratings
from .schema import Candidate
from .storage import WatchContext, clear_context, load_context, save_context
from .streaming import detect_title


def _store_path(args: argparse.Namespace, settings: Settings) -> Path:
    return Path(args.store) if getattr(args, "store", None) else settings.store_path


def _print_match(scored) -> None:
    print(f"Title: {scored.title}")
    print(f"  URL: {scored.reference_url or '-'}")
    print(f"  Image: {scored.image or '-'}")
    print(f"  Score: {scored.raw_score or '-'}")
    s = scored.similarity
    print(
        f"  Similarity: {s.similarity_score:.3f} "
        f"(levenshtein={s.levenshtein_score:.3f} jaro={s.jaro_score:.3f} cosine={s.cosine_score:.3f})"
    )


def cmd_detect(args: argparse.Namespace, settings: Settings) -> None:
    html = None
    if args.html:
        html_path = Path(args.html)
        if not html_path.exists():
            raise SystemExit(f"HTML file not found: {html_path}")
        html = html_path.read_text(encoding="utf-8")

    detected = detect_title(args.url, html)
    if detected is None:
        raise SystemExit(f"Not a supported streaming site: {args.url}")
    print(f"Site: {detected.site}")
    if not detected.title:
        print("Title: unknown")
        return
    print(f"Title: {detected.title}")
    store_path = _store_path(args, settings)
    save_context(store_path, WatchContext(title=detected.title, site=detected.site, url=detected.url))
    print(f"Saved to {store_path}")


def cmd_current(args: argparse.Namespace, settings: Settings) -> None:
    store_path = _store_path(args, settings)
    if args.clear:
        print("Cleared." if clear_context(store_path) else "Nothing to clear.")
        return
    context = load_context(store_path)
    if context is None:
        print("No current title.")
        return
    print(f"Title: {context.title}")
    print(f"  Site: {context.site or '-'}")
    print(f"  URL: {context.url or '-'}")


def cmd_search(args: argparse.Namespace, settings: Settings) -> None:
    query = normalize_query(args.query)
    if not query:
        raise SystemExit("Empty query.")
    provider = get_provider(args.provider, settings)
    try:
        candidates = provider.search(query)
    except ValueError as e:
        raise SystemExit(str(e))

    if args.verbose:
        for scored in score_candidates(query, candidates):
            print(f"{scored.similarity_score:.3f}  {scored.title}")
        print()

    best = select_best_match(query, candidates)
    if best is None:
        print("No match found.")
        return
    _print_match(best)


def cmd_rate(args: argparse.Namespace, settings: Settings) -> None:
    query = normalize_query(args.query or "")
    if not query:
        context = load_context(_store_path(args, settings))
        if context is None:
            raise SystemExit("No --query given and no current title stored. Run 'detect' first.")
        query = context.title

    names = [n.strip() for n in args.providers.split(",") if n.strip()] if args.providers else None
    try:
        providers = get_providers(names, settings)
    except ValueError as e:
        raise SystemExit(str(e))

    reports = gather_ratings(query, providers)
    if args.json:
        print(json.dumps([r.to_dict() for r in reports], indent=2, ensure_ascii=False))
    else:
        print(f"Ratings for: {query}")
        print(format_report(reports))
    if args.metrics:
        get_logger().log_metrics_summary()


def cmd_match(args: argparse.Namespace, settings: Settings) -> None:
    query = normalize_query(args.query)
    candidates = [Candidate(title=t.strip()) for t in args.titles.split(",")]
    best = select_best_match(query, candidates)
    if best is None:
        print("No match found.")
        raise SystemExit(1)
    _print_match(best)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ratingscout", description="RatingScout - ratings for what you are watching")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    det = subparsers.add_parser("detect", help="Detect the streaming site and title of a page URL")
    det.add_argument("--url", required=True, help="URL of the page being watched")
    det.add_argument("--html", help="Saved page HTML (needed for Crunchyroll /watch pages)")
    det.add_argument("--store", help="Path to current-title file (default: data/current.json)")
    det.set_defaults(func=cmd_detect)

    cur = subparsers.add_parser("current", help="Show the current title")
    cur.add_argument("--clear", action="store_true", help="Forget the current title")
    cur.add_argument("--store", help="Path to current-title file (default: data/current.json)")
    cur.set_defaults(func=cmd_current)

    sea = subparsers.add_parser("search", help="Find the best match for a title on one provider")
    sea.add_argument("--provider", required=True, choices=list(PROVIDERS), help="Rating provider")
    sea.add_argument("--query", required=True, help="Title to search for")
    sea.add_argument("--verbose", action="store_true", help="Print every scored candidate")
    sea.set_defaults(func=cmd_search)

    rat = subparsers.add_parser("rate", help="Collect ratings for a title from all providers")
    rat.add_argument("--query", help="Title to look up (default: the current title)")
    rat.add_argument("--providers", help=f"Comma-separated providers. Default: {','.join(PROVIDERS)}")
    rat.add_argument("--store", help="Path to current-title file (default: data/current.json)")
    rat.add_argument("--json", action="store_true", help="Print reports as JSON")
    rat.add_argument("--metrics", action="store_true", help="Log a lookup metrics summary")
    rat.set_defaults(func=cmd_rate)

    mat = subparsers.add_parser("match", help="Pick the best match for a title from a list of titles")
    mat.add_argument("--query", required=True, help="Title to match")
    mat.add_argument("--titles", required=True, help="Comma-separated candidate titles")
    mat.set_defaults(func=cmd_match)

    return parser


def main(argv=None):
    # Load .env if present (RATINGSCOUT_* settings)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    try:
        settings = load_settings()
    except ValueError as e:
        raise SystemExit(str(e))
    get_logger().configure(level=settings.log_level, log_dir=settings.log_dir)

    if hasattr(args, "func"):
        args.func(args, settings)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
