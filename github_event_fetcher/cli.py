"""CLI commands for fetching GitHub events."""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Fetch GitHub activity events",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log retries and request details to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # fetch subcommand
    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Fetch one event and print it as JSON",
    )
    fetch_parser.add_argument(
        "url",
        help="Event URL (e.g., https://api.github.com/repos/owner/repo/events/123)",
    )
    fetch_parser.add_argument(
        "--token",
        default=None,
        help="GitHub token (default: GITHUB_TOKEN from env or .env)",
    )
    fetch_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: 10)",
    )
    fetch_parser.add_argument(
        "--max-elapsed",
        type=float,
        default=None,
        help="Give up retrying after this many seconds (default: 900)",
    )
    fetch_parser.add_argument(
        "--retry-server-errors",
        action="store_true",
        help="Treat 5xx responses as transient instead of fatal",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    if args.command == "fetch":
        from .client import GitHubEventClient
        from .errors import FetchError
        from .settings import get_settings

        overrides = {}
        if args.token:
            overrides["github_token"] = args.token
        if args.timeout is not None:
            overrides["http_timeout"] = args.timeout
        if args.max_elapsed is not None:
            overrides["backoff_max_elapsed_time"] = args.max_elapsed
        if args.retry_server_errors:
            overrides["retry_server_errors"] = True
        settings = get_settings().model_copy(update=overrides)

        try:
            client = GitHubEventClient.from_settings(settings)
        except RuntimeError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1

        with client:
            try:
                event = client.fetch(args.url)
            except FetchError as e:
                print(f"error: {e}", file=sys.stderr)
                return 1

        sys.stdout.write(event.to_json(indent=2))
        sys.stdout.write("\n")
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
