#!/usr/bin/env python3
"""
MongoFlow Studio CLI

Runs playground operations against the configured collection without the
web server, printing each flow stage as it changes.

Usage:
    python manage.py run insert '{"name": "Ada"}'    # Run one operation
    python manage.py run find @query.json             # Payload from a file
    python manage.py stats                            # Collection statistics
    python manage.py create-index '{"key": {"name": 1}}'
    python manage.py reset                            # Delete every document
    python manage.py analyze https://github.com/owner/repo
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add api directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))


def read_payload(value: str) -> str:
    """Inline JSON, or @path to read it from a file"""
    if value.startswith('@'):
        return Path(value[1:]).read_text()
    return value


def print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def open_gateway():
    """Connected sync gateway plus its async adapter"""
    from config import default_config
    from store.gateway import MongoGateway
    from store.async_adapter import AsyncGatewayAdapter

    gateway = MongoGateway(default_config.database)
    gateway.connect()
    return gateway, AsyncGatewayAdapter(gateway)


def print_stages(snapshot) -> None:
    """Tracker listener: show the stage that just moved"""
    for stage in snapshot:
        if stage['status'] in ('active', 'error'):
            detail = f" - {stage['detail']}" if stage['detail'] else ""
            print(f"  [{stage['status']:>6}] {stage['label']}{detail}")
            return


def cmd_run(args):
    """Run one playground operation"""
    from config import default_config
    from operations.kinds import OperationKind
    from operations.operation_executor import OperationExecutor
    from telemetry.progress_tracker import ProgressTracker

    try:
        kind = OperationKind.parse(args.kind)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    gateway, adapter = open_gateway()
    try:
        tracker = ProgressTracker()
        if not args.quiet:
            tracker.subscribe(print_stages)
        executor = OperationExecutor(adapter, limits=default_config.limits)
        result = asyncio.run(executor.execute(kind, read_payload(args.payload), tracker))
    finally:
        gateway.close()

    response = result.to_response()
    response.pop('flow', None)
    print_json(response)
    return 0 if result.success else 1


def cmd_stats(args):
    """Show collection statistics"""
    from operations.collection_admin import CollectionAdmin

    gateway, adapter = open_gateway()
    try:
        result = asyncio.run(CollectionAdmin(adapter).stats())
    finally:
        gateway.close()

    if not result.success:
        print(f"Error: {result.error}")
        return 1

    data = result.data
    print(f"Documents:        {data['documentCount']}")
    print(f"Storage size:     {data['storageSize']} bytes")
    print(f"Avg object size:  {data['avgObjSize']} bytes")
    print(f"Total index size: {data['totalIndexSize']} bytes")
    print(f"Indexes ({data['indexCount']}):")
    for index in data['indexes']:
        unique = " unique" if index.get('unique') else ""
        print(f"  {index['name']}: {json.dumps(index['key'])}{unique}")
    return 0


def cmd_create_index(args):
    """Create an index from a {key, name?, options?} request"""
    from operations.collection_admin import CollectionAdmin

    gateway, adapter = open_gateway()
    try:
        result = asyncio.run(CollectionAdmin(adapter).create_index(read_payload(args.request)))
    finally:
        gateway.close()

    if not result.success:
        print(f"Error: {result.error}")
        return 1
    print(f"Created index {result.data['indexName']}")
    return 0


def cmd_reset(args):
    """Delete every document in the playground collection"""
    from config import default_config
    from operations.collection_admin import CollectionAdmin

    target = f"{default_config.database.name}.{default_config.database.collection}"
    if not args.yes:
        confirm = input(f"Delete ALL documents in {target}? [y/N] ")
        if confirm.lower() != 'y':
            print("Cancelled.")
            return 0

    gateway, adapter = open_gateway()
    try:
        result = asyncio.run(CollectionAdmin(adapter).reset())
    finally:
        gateway.close()

    if not result.success:
        print(f"Error: {result.error}")
        return 1
    print(f"Deleted {result.data['deletedCount']} documents from {target}")
    return 0


def cmd_analyze(args):
    """Scan a GitHub repository for MongoDB usage"""
    from config import default_config
    from analysis.errors import AnalysisError
    from analysis.repository_analyzer import analyze_repository

    try:
        result = analyze_repository(args.url, default_config.analyzer)
    except AnalysisError as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        print_json(result.to_dict())
        return 0

    print(f"Files in repository: {result.total_files}")
    print(f"Files using MongoDB: {result.mongo_files}")
    print("\nOperations:")
    for name, count in result.operations.items():
        print(f"  {name}: {count}")
    print(f"\nCollections: {', '.join(result.collections) or '(none)'}")
    if result.files:
        print("\nFiles:")
        for entry in result.files:
            print(f"  {entry['path']}: {', '.join(entry['mongoOperations'])}")
    return 0


def main():
    from config import default_config
    from logging_config import configure_logging

    configure_logging(default_config.logging.level)

    parser = argparse.ArgumentParser(
        description='MongoFlow Studio CLI',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    # run
    p = subparsers.add_parser('run', help='Run a playground operation')
    p.add_argument('kind', help='insert, bulk-insert, find, update, delete or aggregate')
    p.add_argument('payload', nargs='?', default='', help='JSON payload, or @file to read it')
    p.add_argument('-q', '--quiet', action='store_true', help='Do not print flow stages')
    p.set_defaults(func=cmd_run)

    # stats
    p = subparsers.add_parser('stats', help='Show collection statistics')
    p.set_defaults(func=cmd_stats)

    # create-index
    p = subparsers.add_parser('create-index', help='Create an index')
    p.add_argument('request', help='{"key": {...}, "name": ..., "options": {...}} or @file')
    p.set_defaults(func=cmd_create_index)

    # reset
    p = subparsers.add_parser('reset', help='Delete every document in the collection')
    p.add_argument('-y', '--yes', action='store_true', help='Skip confirmation')
    p.set_defaults(func=cmd_reset)

    # analyze
    p = subparsers.add_parser('analyze', help='Scan a GitHub repository for MongoDB usage')
    p.add_argument('url', help='https://github.com/owner/repo')
    p.add_argument('--json', action='store_true', help='Print the raw analysis result')
    p.set_defaults(func=cmd_analyze)

    args = parser.parse_args()
    sys.exit(args.func(args))


if __name__ == '__main__':
    main()
