"""
Operator commands.

Usage:
  python -m proposal_gateway.cli init-db
  python -m proposal_gateway.cli create-user --username alice --email alice@example.com --password ... [--role admin]
  python -m proposal_gateway.cli render proposal.json proposal.html [--print-on-load]
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from proposal_gateway.config import settings
from proposal_gateway.domain.exceptions import DomainException, ProposalValidationError
from proposal_gateway.domain.models import CompanyInfo
from proposal_gateway.domain.serialization import proposal_from_dict
from proposal_gateway.infrastructure.clients.logo import LogoClient
from proposal_gateway.infrastructure.database.models import Base
from proposal_gateway.infrastructure.database.repositories import SettingsRepository
from proposal_gateway.infrastructure.database.session import SessionLocal, engine
from proposal_gateway.infrastructure.observability.logging import setup_logging
from proposal_gateway.services.auth import AuthService
from proposal_gateway.services.documents import render_proposal


def _default_company() -> CompanyInfo:
    return CompanyInfo(
        name=settings.default_company_name,
        address=settings.default_company_address,
        phone=settings.default_company_phone,
        email=settings.default_company_email,
        logo=settings.default_company_logo or None,
    )


def init_db(args: argparse.Namespace) -> int:
    """Create tables and seed the system settings row"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        SettingsRepository(db, _default_company()).initialize()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        print(f"Database initialisation failed: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()

    print("Database initialised")
    return 0


def create_user(args: argparse.Namespace) -> int:
    db = SessionLocal()
    try:
        user = AuthService(db).create_user(args.username, args.email, args.password, args.role)
        db.commit()
    except IntegrityError:
        db.rollback()
        print("Username or email already exists", file=sys.stderr)
        return 1
    except ValueError as e:
        db.rollback()
        print(str(e), file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Created {user.role} {user.username} ({user.id})")
    return 0


def render(args: argparse.Namespace) -> int:
    """Render a proposal JSON file (current or legacy shape) to HTML"""
    try:
        raw = json.loads(Path(args.input).read_text(encoding="utf-8"))
        proposal = proposal_from_dict(raw)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Cannot read {args.input}: {e}", file=sys.stderr)
        return 1
    except (KeyError, ValueError, TypeError) as e:
        print(f"Malformed proposal data: {e}", file=sys.stderr)
        return 1

    try:
        html = asyncio.run(render_proposal(proposal, args.print_on_load, LogoClient()))
    except ProposalValidationError as e:
        for issue in e.issues:
            print(f"{issue['field']}: {issue['message']}", file=sys.stderr)
        return 1
    except DomainException as e:
        print(str(e), file=sys.stderr)
        return 1

    try:
        Path(args.output).write_text(html, encoding="utf-8")
    except OSError as e:
        print(f"Cannot write {args.output}: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {args.output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="proposal-gateway", description="Pricing proposal operator commands")
    commands = parser.add_subparsers(dest="command", required=True)

    init_cmd = commands.add_parser("init-db", help="Create tables and seed default settings")
    init_cmd.set_defaults(func=init_db)

    user_cmd = commands.add_parser("create-user", help="Provision a login account")
    user_cmd.add_argument("--username", required=True)
    user_cmd.add_argument("--email", required=True)
    user_cmd.add_argument("--password", required=True)
    user_cmd.add_argument("--role", choices=("admin", "user"), default="user")
    user_cmd.set_defaults(func=create_user)

    render_cmd = commands.add_parser("render", help="Render a proposal JSON file to HTML")
    render_cmd.add_argument("input")
    render_cmd.add_argument("output")
    render_cmd.add_argument("--print-on-load", action="store_true")
    render_cmd.set_defaults(func=render)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging(settings.log_level)
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
