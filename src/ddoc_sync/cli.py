import argparse
import json
import sys
from typing import List, Optional

import requests

from ddoc_sync import config
from ddoc_sync.couchdb import CouchDbClient
from ddoc_sync.desk import DeskResources
from ddoc_sync.errors import DdocSyncError
from ddoc_sync.logger import LogLevel, logger
from ddoc_sync.sync import DesignManager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ddoc-sync",
        description="Build CouchDB design documents from local sources and sync them",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog="""
Examples:
  1. List the design documents found on the search path:
     ddoc-sync list --search-path ./resources

  2. Print one assembled design document:
     ddoc-sync show example

  3. Synchronize everything to a database:
     ddoc-sync --url http://127.0.0.1:5984 --db mydb sync

  4. Print the database copy:
     ddoc-sync --db mydb pull _design/example
"""
    )
    parser.add_argument("--url", help=f"CouchDB server URL (default: {config.COUCHDB_URL})")
    parser.add_argument("--db", help="CouchDB database name")
    parser.add_argument("--search-path", action="append", metavar="PATH",
                        help="Directory or zip archive holding the design docs root (repeatable)")
    parser.add_argument("--root-name", help=f"Design docs root directory name (default: {config.ROOT_NAME})")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="action", help="Action")

    subparsers.add_parser("list", help="List design documents on the desk")

    show_parser = subparsers.add_parser("show", help="Print a design document built from the desk")
    show_parser.add_argument("name", help="Design document name (without _design/)")

    sync_parser = subparsers.add_parser("sync", help="Synchronize design documents to the database")
    sync_parser.add_argument("names", nargs="*", help="Design document names (default: all)")

    pull_parser = subparsers.add_parser("pull", help="Print a design document from the database")
    pull_parser.add_argument("id", help="Document id, e.g. _design/example")
    pull_parser.add_argument("--rev", help="Document revision")

    return parser


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, sort_keys=True))


def _make_manager(args) -> DesignManager:
    resources = DeskResources(args.search_path, args.root_name)
    client = None
    if args.action in ("sync", "pull"):
        client = CouchDbClient(base_url=args.url, database=args.db)
    return DesignManager(client, resources)


def run_list(manager: DesignManager) -> None:
    catalog = manager.catalog
    for name in sorted(catalog.names):
        print(name)
    for event in catalog.events:
        logger.warning(f"[{event.kind}] {event.message}")


def run_sync(manager: DesignManager, names: List[str]) -> None:
    logger.header("Design document sync", icon="🚀")
    if names:
        report = manager.synchronize_names_with_db(names)
    else:
        report = manager.synchronize_all_with_db()

    logger.summary_table("📊 Sync summary", {
        "✅ Created": len(report.created),
        "🔄 Updated": len(report.updated),
        "⏭️ Unchanged": len(report.unchanged),
    })


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logger.set_level(LogLevel.DEBUG)

    if not args.action:
        parser.print_help()
        return 0

    try:
        manager = _make_manager(args)
        if args.action == "list":
            run_list(manager)
        elif args.action == "show":
            _print_json(manager.get_from_desk(args.name).to_dict())
        elif args.action == "sync":
            run_sync(manager, args.names)
        elif args.action == "pull":
            document = manager.get_from_db(args.id, args.rev)
            _print_json({**document.to_dict(), **document.extra})
    except (DdocSyncError, ValueError, requests.RequestException) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
