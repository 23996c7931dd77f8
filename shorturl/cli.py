#!/usr/bin/env python3
"""
Command-line interface for creating and resolving short URLs.

CLI usage:
    # Shorten a URL (random code; repeated calls return the same short URL)
    $ shorturl create https://example.com/a
    {"code": 0, "shortUrl": "http://localhost:3000/q3ZbT0xA"}

    # Shorten a URL with a caller-chosen code
    $ shorturl create https://example.com/b --code promo24

    # Resolve a short code
    $ shorturl read promo24
    {"code": 0, "longUrl": "https://example.com/b"}

    # Manage the mapping table of the configured data store
    $ shorturl init-table
    $ shorturl drop-table

    # Use an explicit configuration file instead of <CONFIG_DIR>/<APP_ENV>.yaml
    $ shorturl --config config/dev.yaml read promo24

Behavior:
    - create/read print the result as JSON on stdout.
    - Logs go to stderr as JSON lines (see shorturl.utils.logging).
    - drop-table also clears the resolution cache, which would otherwise
      keep serving mappings the store no longer has.
    - Exit status is 0 on success and 1 on any error.
"""

import sys
import json
import logging
import argparse

from shorturl.dao.exceptions import DataStoreError
from shorturl.exceptions import ConfigurationError
from shorturl.factory import create_allocator, create_resolution_cache, create_short_url_dao
from shorturl.utils import initialize_logging, load_config


logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='shorturl',
        description='Create and resolve short URLs',
    )
    parser.add_argument('--config', default=None, help='Configuration file (default: <CONFIG_DIR>/<APP_ENV>.yaml)')

    subparsers = parser.add_subparsers(dest='command', required=True)

    create = subparsers.add_parser('create', help='Shorten a long URL')
    create.add_argument('long_url', help='Absolute URL to shorten, e.g. https://example.com/a')
    create.add_argument('--code', default=None, help='Caller-chosen short code (letters and digits)')

    read = subparsers.add_parser('read', help='Resolve a short code to its long URL')
    read.add_argument('shortcode', help='Short code to resolve')

    subparsers.add_parser('init-table', help='Create the mapping table in the configured data store')
    subparsers.add_parser('drop-table', help='Delete the mapping table, all mappings and the resolution cache')

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Steps:
        - Parse CLI arguments
        - Initialize logging and load configuration
        - Run the requested command against the configured backends

    Returns:
        int: process exit status
    """
    args = _build_parser().parse_args(argv)
    initialize_logging()

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ConfigurationError):
        logger.exception('Failed to load configuration.')
        return EXIT_FAILURE

    try:
        if args.command in ('init-table', 'drop-table'):
            dao = create_short_url_dao(config)
            if args.command == 'init-table':
                dao.create_table()
            else:
                dao.drop_table()
                create_resolution_cache(config).clear()
            logger.info('Finished %s.', args.command, extra={'backend': config['active_backend']})
            return EXIT_SUCCESS

        allocator = create_allocator(config)
    except DataStoreError:
        logger.exception('Data store is unavailable.', extra={'backend': config['active_backend']})
        return EXIT_FAILURE

    if args.command == 'create':
        result = allocator.create_short_url(args.long_url, shortcode=args.code)
    else:
        result = allocator.read_short_url(args.shortcode)

    print(json.dumps(result.to_dict(), ensure_ascii=False))
    return EXIT_SUCCESS if result.ok else EXIT_FAILURE


if __name__ == '__main__':
    sys.exit(main())
