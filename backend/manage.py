"""Management commands for the Kiliniks backend."""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable

import click
from dotenv import load_dotenv

from kiliniks.db.session import SessionLocal, create_tables
from kiliniks.verification import CheckResults, verify_appointment, verify_flow

if not os.getenv("DATABASE_URL"):
    load_dotenv()

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@click.group()
def cli() -> None:
    """Entry point for management commands."""


@cli.command("create-tables")
def create_tables_command() -> None:
    """Create every table the application needs."""
    create_tables()
    logging.info("Database tables created.")


def _run_checks(name: str, check: Callable[..., CheckResults]) -> None:
    session = SessionLocal()
    try:
        results = check(session)
    except Exception as e:
        logging.exception("%s failed with an error", name)
        raise click.ClickException(f"{name} failed: {e}")
    finally:
        session.close()

    failed = 0
    for label, passed in results:
        click.echo(f"{label}: {'OK' if passed else 'FAIL'}")
        if not passed:
            failed += 1
    if failed:
        click.echo(f"{name}: {failed} check(s) failed", err=True)
        sys.exit(1)
    click.echo(f"{name}: all checks passed")


@cli.command("verify-flow")
def verify_flow_command() -> None:
    """Smoke-test flows, locations and stages against the configured store."""
    _run_checks("verify-flow", verify_flow)


@cli.command("verify-appointment")
def verify_appointment_command() -> None:
    """Smoke-test the appointment use cases against the configured store."""
    _run_checks("verify-appointment", verify_appointment)


if __name__ == "__main__":
    cli()
