#!/usr/bin/env python3
"""Seed the bank directory with the banks the search analyzer knows about."""

import argparse
import asyncio
import asyncpg
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from bridgeyou.config import get_app_settings
from bridgeyou.services.search.vocabulary import KNOWN_BANKS


async def seed_banks(dry_run: bool = False):
    database_url = get_app_settings().database.url

    if dry_run:
        for name in KNOWN_BANKS:
            print(f'Would insert: {name}')
        return

    try:
        conn = await asyncpg.connect(database_url)

        inserted = 0
        for name in KNOWN_BANKS:
            result = await conn.execute(
                'INSERT INTO banks (name) VALUES ($1) ON CONFLICT (name) DO NOTHING',
                name
            )
            if result.endswith(' 1'):
                inserted += 1
                print(f'Inserted {name}')

        await conn.close()
        print(f'Bank directory seeded: {inserted} new, {len(KNOWN_BANKS) - inserted} already present')

    except (asyncpg.PostgresError, OSError) as e:
        print(f'Error: {e}')
        sys.exit(1)


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--dry-run', action='store_true', help='List banks without writing')
    args = parser.parse_args()
    asyncio.run(seed_banks(dry_run=args.dry_run))
