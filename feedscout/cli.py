"""CLI entry point for feedscout."""
import argparse
import logging
import sys

from feedscout import __version__
from feedscout.formatters import FORMATTERS


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feedscout",
        description="🔍 feedscout — find the RSS/Atom feeds a web page publishes",
    )
    parser.add_argument("url", nargs="?", default=None,
                        help="Page to inspect (http or https)")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-f", "--format", choices=sorted(FORMATTERS), default="console",
                        help="Output format (default: console)")
    parser.add_argument("-o", "--output", type=str, default=None,
                        help="Write output to file instead of stdout")
    parser.add_argument("--html", type=str, default=None, metavar="FILE",
                        help="Scan a saved HTML file instead of fetching (needs --base-url)")
    parser.add_argument("--base-url", type=str, default=None, dest="base_url",
                        help="Base URL for resolving relative links")
    parser.add_argument("--timeout", type=float, default=10.0,
                        help="HTTP request timeout in seconds (default: 10)")
    parser.add_argument("--no-follow-redirects", action="store_true", dest="no_follow_redirects",
                        help="Don't follow HTTP redirects when fetching the page")
    parser.add_argument("--user-agent", type=str, default=None, dest="user_agent",
                        help="User-Agent header for all requests")
    parser.add_argument("--verify", action="store_true",
                        help="Fetch every candidate and keep only real feeds")
    parser.add_argument("--list-services", action="store_true",
                        help="List the known services and exit")
    parser.add_argument("--init-config", action="store_true",
                        help="Write a starter ~/.feedscout.yaml and exit")
    parser.add_argument("--no-config", action="store_true",
                        help="Ignore config files (~/.feedscout.yaml, ./feedscout.yaml) and FEEDSCOUT_* vars")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress status messages on stderr")
    return parser


def _options(args):
    from feedscout.models import DiscoveryOptions
    kwargs = {
        "base_url": args.base_url,
        "timeout": args.timeout,
        "follow_redirects": not args.no_follow_redirects,
        "verify": args.verify,
    }
    if args.user_agent:
        kwargs["user_agent"] = args.user_agent
    return DiscoveryOptions(**kwargs)


def _list_services():
    from feedscout.services import get_all_keys, get_service
    keys = get_all_keys()
    print(f"📡 Known services ({len(keys)}):\n")
    for key in keys:
        print(f"   {key:12s} {get_service(key).display_name}")


def _scan_file(path: str, base_url: str):
    from feedscout.discover import discover_feeds_from_document
    from feedscout.document import SoupDocument
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            markup = f.read()
    except OSError as e:
        print(f"Error reading {path}: {e}", file=sys.stderr)
        sys.exit(1)
    return discover_feeds_from_document(SoupDocument(markup, url=base_url))


def main(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Apply config file defaults (CLI args always win)
    if not args.no_config:
        from feedscout.config import apply_config_defaults
        args = apply_config_defaults(parser, args)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    if args.format not in FORMATTERS:
        parser.error(f"unknown format {args.format!r}")

    if args.init_config:
        from feedscout.config import generate_starter_config
        path = generate_starter_config()
        print(f"📝 Wrote starter config to {path}")
        return

    if args.list_services:
        _list_services()
        return

    if args.html:
        if not args.base_url:
            parser.error("--html requires --base-url")
        page_url = args.base_url
        feeds = _scan_file(args.html, args.base_url)
    elif args.url:
        from feedscout.discover import discover_feeds
        page_url = args.url
        if not args.quiet:
            print(f"🔍 Scanning {page_url}...", file=sys.stderr)
        feeds = discover_feeds(page_url, options=_options(args))
    else:
        parser.error("a URL (or --html FILE --base-url URL) is required")

    if not feeds:
        if not args.quiet:
            print(f"No feeds found on {page_url}", file=sys.stderr)
        sys.exit(1)

    formatter_cls = FORMATTERS[args.format]
    formatter = formatter_cls() if args.format == "json" else formatter_cls(page_url=page_url)
    output = formatter.format(feeds)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        if not args.quiet:
            print(f"✅ Wrote {len(feeds)} feed(s) to {args.output}", file=sys.stderr)
    else:
        print(output)


if __name__ == "__main__":
    main()
