"""
Seed the DynamoDB badge catalog with the default streak badges.

Badges that already exist (matched by name) are left untouched so
user badges keep pointing at the same ids.
"""

import argparse
import asyncio

from litera.application.config import settings
from litera.domain.services.badges import DEFAULT_BADGES
from litera.infrastructure.dynamodb_badge_repository import DynamoDBBadgeRepository


async def seed(repository: DynamoDBBadgeRepository) -> int:
    """Add missing default badges. Returns how many were added."""
    added = 0
    for badge in DEFAULT_BADGES:
        if await repository.get_badge_by_name(badge.name) is not None:
            print(f"- {badge.name}: already present")
            continue
        await repository.save_badge(badge)
        print(f"+ {badge.name}: added as {badge.id}")
        added += 1
    return added


def main():
    parser = argparse.ArgumentParser(description='Seed the default badge catalog')
    parser.add_argument('--table', default=settings.badges_table_name, help='Badge catalog table')
    parser.add_argument('--user-badges-table', default=settings.user_badges_table_name, help='User badge table')
    parser.add_argument('--region', default=settings.aws_region, help='AWS region')

    args = parser.parse_args()

    repository = DynamoDBBadgeRepository(
        table_name=args.table,
        user_badges_table_name=args.user_badges_table,
        region_name=args.region,
    )
    added = asyncio.run(seed(repository))
    print(f"Done, {added} badge(s) added")


if __name__ == "__main__":
    main()
