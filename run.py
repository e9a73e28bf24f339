#!/usr/bin/env python3
"""
Live Catalog - command line entry point
Reloads the channel catalog and prints groups and channels
"""

import argparse
import logging
import os
import sys


def build_parser():
    parser = argparse.ArgumentParser(description="Load the live channel catalog and list channels")
    parser.add_argument("query", nargs="?", default="", help="Case-insensitive search in channel name or group")
    parser.add_argument("--group", default="All", help="Only list channels of this group")
    parser.add_argument("--server", default=None, help="Id of a configured server to load instead of the default")
    parser.add_argument("--settings", default=None, help="Path to a settings JSON file")
    parser.add_argument("--groups", action="store_true", help="List groups only")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None):
    """Main application entry point"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Add src directory to path
    src_path = os.path.join(os.path.dirname(__file__), 'src')
    sys.path.insert(0, src_path)

    from livecatalog.catalog_service import CatalogService
    from livecatalog.errors import NoConfigAvailable, NoPlaylistAvailable
    from livecatalog.m3u.filters import search_filter

    service = CatalogService(config_path=args.settings)
    try:
        snapshot = service.reload(server_id=args.server)
    except (NoConfigAvailable, NoPlaylistAvailable) as e:
        print(f"Catalog unavailable: {e}", file=sys.stderr)
        print("Check your connection and try again.", file=sys.stderr)
        return 1

    config = snapshot.config
    if config.notice_enabled:
        print(f"Notice: {config.notice}")
    print(f"Source: {snapshot.source_state.value} ({len(snapshot.channels)} channels)")

    if args.groups:
        for group in snapshot.groups:
            print(group)
        return 0

    for channel in search_filter(snapshot, args.query, args.group):
        print(f"[{channel.group}] {channel.name}\t{channel.stream_url}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
