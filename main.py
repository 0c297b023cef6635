"""Command line entry point for the instructor rating annotator.

Loads environment variables, reads instructor names (from the command line
or a saved schedule page), resolves each against the rating service and
prints one annotation per instructor.
"""
from dotenv import load_dotenv
import argparse
import asyncio
import json
import os
import sys

# Load environment variables first, before any other imports
load_dotenv()

from profrate.annotator import PageAnnotator
from profrate.config import get_config, reload_config
from profrate.messaging import InProcessChannel
from profrate.resolver import InstructorResolver
from profrate.rmp.async_client import AsyncRMPClient
from profrate.session import RatingSession
from profrate.utils.logger import configure_logging, log_error, log_info


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Annotate instructor names with rating service data.")
    parser.add_argument('names', nargs='*', help='Instructor names as shown on the schedule (e.g. "Smith, J.").')
    parser.add_argument('--html', type=str, help='Path to a saved schedule results page to scan.')
    parser.add_argument('--json', dest='as_json', action='store_true', help='Print annotations as JSON.')
    parser.add_argument('--school-id', type=int, help='Institution identifier on the rating service.')
    parser.add_argument('--log-level', type=str, help='Logging level (DEBUG, INFO, ...).')
    return parser


async def run(names, html=None):
    config = get_config()
    async with AsyncRMPClient(config) as client:
        channel = InProcessChannel(InstructorResolver(client, config), config.school_name)
        async with RatingSession(channel) as session:
            annotator = PageAnnotator(session, config)
            annotations = []
            if html is not None:
                annotations.extend(await annotator.annotate_html(html))
            if names:
                annotations.extend(await annotator.annotate_names(names))
            log_info("Session statistics", **session.get_stats())
            return annotations


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # Apply parsed arguments to environment variables
    if args.school_id is not None:
        os.environ['SCHOOL_LEGACY_ID'] = str(args.school_id)
    if args.log_level is not None:
        os.environ['LOG_LEVEL'] = args.log_level

    config = reload_config()
    configure_logging(config.log_level, config.log_format)
    config.log_configuration()

    issues = config.validate_configuration()
    if issues:
        log_error("Configuration validation failed", issues=issues)
        print("❌ Configuration issues found:")
        for issue in issues:
            print(f"  - {issue}")
        return 1

    html = None
    if args.html:
        with open(args.html, encoding="utf-8") as fh:
            html = fh.read()

    if html is None and not args.names:
        print("Nothing to annotate: pass instructor names or --html FILE.")
        return 2

    annotations = asyncio.run(run(args.names, html))

    if args.as_json:
        print(json.dumps([a.to_dict() for a in annotations], indent=2, ensure_ascii=False))
        return 0

    for a in annotations:
        details = ", ".join(f"{label}: {value}" for label, value in a.rows)
        print(f"{a.display:<30} [{a.badge_text:>4}] {a.title} ({details})")
        if a.link:
            print(f"{'':<30} {a.link}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
