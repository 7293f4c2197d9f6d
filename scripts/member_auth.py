#!/usr/bin/env python3
"""Sign members up, in and out of the SACCO portal from the command line.

Without SUPABASE_URL/SUPABASE_ANON_KEY the local fallback store is used and
state is kept in SACCO_STATE_PATH between runs.
"""

import argparse
import getpass
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sacco_portal.backend import build_portal
from sacco_portal.config import PortalConfig
from sacco_portal.logging import setup_logging
from sacco_portal.models import Identity, ProfileFields

logger = logging.getLogger(__name__)


def describe(identity: Identity) -> str:
    """One-line member summary."""
    return f"{identity.first_name} {identity.last_name} <{identity.email}> member {identity.member_id or '-'}"


def main() -> int:
    """Dispatch the requested session command."""
    parser = argparse.ArgumentParser(description="SACCO portal session commands")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    signup = subparsers.add_parser("signup", help="Register a member")
    signup.add_argument("email")
    signup.add_argument("--first-name", required=True)
    signup.add_argument("--last-name", required=True)
    signup.add_argument("--phone", default="")
    signup.add_argument("--national-id", default="")
    signup.add_argument("--occupation", default="")

    signin = subparsers.add_parser("signin", help="Sign a member in")
    signin.add_argument("email")

    subparsers.add_parser("signout", help="Sign the current member out")
    subparsers.add_parser("whoami", help="Show the current member")

    args = parser.parse_args()

    config = PortalConfig.from_env()
    setup_logging(args.log_level or config.log_level, config.log_format)
    portal = build_portal(config)
    session = portal.session

    try:
        if args.command == "signup":
            profile = ProfileFields(
                first_name=args.first_name,
                last_name=args.last_name,
                phone=args.phone,
                national_id=args.national_id,
                occupation=args.occupation,
            )
            result = session.sign_up(args.email, getpass.getpass("Password: "), profile)
        elif args.command == "signin":
            result = session.sign_in(args.email, getpass.getpass("Password: "))
        elif args.command == "signout":
            error = session.sign_out()
            if error:
                print(f"Sign out failed: {error}")
                return 1
            print("Signed out")
            return 0
        else:
            identity = session.get_current_identity()
            print(describe(identity) if identity else "Not signed in")
            return 0
    finally:
        portal.close()

    if result.error:
        print(f"Failed: {result.error}")
        return 1
    print(f"Signed in as {describe(result.identity)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
