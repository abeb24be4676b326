#!/usr/bin/env python3
"""
Out-of-band administration for the church registry database.

Commands:
    init-db     create missing tables and seed the ministry/department rows
    recount     recompute every ministry/department member count now
    set-role    grant or revoke the admin role for an existing account

Usage:
    python manage.py init-db
    python manage.py recount
    python manage.py set-role --username pastor --role admin

The database is taken from DATABASE_URL unless --database-url is given.
"""

import argparse
import sys
from typing import List, Optional

from church_registry.core.database import build_engine, init_schema
from church_registry.core.errors import StorageError
from church_registry.repositories import CategoryRepository, MemberRepository, UserRepository
from church_registry.schemas import VALID_ROLES
from church_registry.services.count_aggregator import CountAggregator


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Church registry administration.")
    ap.add_argument("--database-url", help="SQLAlchemy URL; defaults to DATABASE_URL")
    sub = ap.add_subparsers(dest="command", required=True)
    sub.add_parser("init-db", help="Create tables and seed categories")
    sub.add_parser("recount", help="Recompute category member counts")
    role = sub.add_parser("set-role", help="Assign a role to a user")
    role.add_argument("--username", required=True)
    role.add_argument("--role", required=True, choices=VALID_ROLES)
    return ap


def main(argv: Optional[List[str]] = None, engine=None) -> int:
    args = build_parser().parse_args(argv)
    engine = engine or build_engine(args.database_url)

    try:
        if args.command == "init-db":
            init_schema(engine, seed=True)
            print("[+] Schema ready")
        elif args.command == "recount":
            counts = CountAggregator(MemberRepository(engine), CategoryRepository(engine)).recompute()
            for kind, by_name in counts.items():
                for name, count in by_name.items():
                    print(f"{kind:<12} {name:<20} {count}")
        elif args.command == "set-role":
            if not UserRepository(engine).set_role(args.username, args.role):
                print(f"[!] No user found with username: {args.username}", file=sys.stderr)
                return 2
            print(f"[+] {args.username} is now {args.role}")
    except StorageError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
