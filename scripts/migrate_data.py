#!/usr/bin/env python3
"""Migrate member data into the configured SACCO portal backend.

Copies the reference member dataset (or a synthetic one) into the remote
store, step by step:

1. User Profile       - creates the member account and profile row
2. Savings Accounts
3. Loan Records
4. Transaction History
5. Savings Goals

A failed profile step stops the run; later steps are always attempted.
Backend settings come from SUPABASE_URL, SUPABASE_ANON_KEY and, for a
direct database connection, DATABASE_URL.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sacco_portal.backend import build_portal
from sacco_portal.config import PortalConfig
from sacco_portal.generators import MemberDatasetGenerator
from sacco_portal.logging import setup_logging
from sacco_portal.migration import MigrationDriver, StepStatus, get_mock_data
from sacco_portal.models import MemberDataset

logger = logging.getLogger(__name__)

STATUS_MARKS = {
    StepStatus.PENDING: "[ ]",
    StepStatus.RUNNING: "[~]",
    StepStatus.COMPLETED: "[x]",
    StepStatus.FAILED: "[!]",
}


def print_steps(driver: MigrationDriver) -> None:
    """Render step status and progress."""
    print(f"\nProgress: {driver.progress}%")
    for step in driver.steps:
        print(f"  {STATUS_MARKS[step.status]} {step.name:22} {step.description}")


def build_dataset(args: argparse.Namespace) -> MemberDataset:
    """Reference dataset, or a seeded synthetic one."""
    if not args.synthetic:
        return get_mock_data()
    generator = MemberDatasetGenerator(seed=args.seed)
    return generator.generate(
        savings_accounts=args.savings_accounts,
        loans=args.loans,
        transactions=args.transactions,
        savings_goals=args.goals,
    )


def main() -> int:
    """Run the migration and print the outcome."""
    parser = argparse.ArgumentParser(description="Migrate member data to the SACCO portal backend")
    parser.add_argument("--synthetic", action="store_true", help="Migrate a generated dataset instead of the reference one")
    parser.add_argument("--seed", type=int, default=42, help="Seed for --synthetic (default: 42)")
    parser.add_argument("--savings-accounts", type=int, default=3)
    parser.add_argument("--loans", type=int, default=2)
    parser.add_argument("--transactions", type=int, default=2)
    parser.add_argument("--goals", type=int, default=3)
    parser.add_argument("--dry-run", action="store_true", help="Print the dataset summary and exit")
    parser.add_argument("--quiet", action="store_true", help="Do not print step progress")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    parser.add_argument("--log-format", choices=["standard", "json"], default=None)
    args = parser.parse_args()

    config = PortalConfig.from_env()
    setup_logging(args.log_level or config.log_level, args.log_format or config.log_format)

    dataset = build_dataset(args)
    logger.info("=" * 60)
    logger.info("SACCO Portal - Member Data Migration")
    logger.info("=" * 60)
    for group, count in dataset.summary().items():
        logger.info("  %-18s %d", group + ":", count)

    if args.dry_run:
        return 0

    portal = build_portal(config)
    try:
        driver = MigrationDriver(
            portal.migration,
            on_update=None if args.quiet or args.json else print_steps,
        )
        result = driver.run(dataset)
    finally:
        portal.close()

    if args.json:
        print(json.dumps({"success": result.success, "errors": result.errors}))
    elif result.success:
        print("\nMigration completed successfully!")
    else:
        print(f"\nMigration completed with {len(result.errors)} errors:")
        for error in result.errors:
            print(f"  - {error}")

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
