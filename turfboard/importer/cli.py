"""
CLI commands for loading logins and granting organization access.
"""

from __future__ import annotations

import json
from pathlib import Path

import click
from flask import current_app
from flask.cli import with_appcontext

from turfboard.models import Membership, MembershipRole, Organization
from turfboard.services.login_store import LoginStore
from turfboard.services.response_cache import get_response_cache
from turfboard.utils.error_handler import TurfError

from .service import import_logins


def _load_items(file_path: Path) -> list:
    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{file_path} is not valid JSON: {exc}") from exc
    if isinstance(payload, dict):
        payload = payload.get("plans") or payload.get("logins") or payload.get("data")
    if not isinstance(payload, list) or not payload:
        raise click.ClickException("Expected a non-empty JSON list, or an object with a 'plans' list.")
    return payload


def _require_organization(name: str) -> Organization:
    organization = Organization.find_by_name(name)
    if organization is None:
        raise click.ClickException(f"Organization '{name}' does not exist.")
    return organization


@click.group(name="turf")
def turf_cli():
    """Login import and access management commands."""


@turf_cli.command("import")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--organization", "organization_name", default=None, help="Default organization for items naming none.")
@with_appcontext
def import_command(file_path: Path, organization_name: str | None):
    """Import logins from a JSON file. Safe to re-run."""
    items = _load_items(file_path)
    organization_id = _require_organization(organization_name).id if organization_name else None
    try:
        summary = import_logins(items, organization_id=organization_id, cache=get_response_cache(current_app))
    except TurfError as exc:
        raise click.ClickException(f"Import failed: {exc.message}") from exc
    click.echo(json.dumps(summary.to_dict(), indent=2, sort_keys=True))


@turf_cli.command("grant")
@click.argument("user_email")
@click.argument("organization_name")
@click.argument("role", type=click.Choice([role.value for role in MembershipRole], case_sensitive=False))
@with_appcontext
def grant_command(user_email: str, organization_name: str, role: str):
    """Grant ROLE in ORGANIZATION_NAME to USER_EMAIL, replacing any existing role."""
    organization = _require_organization(organization_name)
    membership = Membership.upsert(user_email.strip(), organization.id, role)
    click.echo(f"{membership.user_email} is {membership.role.value} in {organization.name}")


@turf_cli.command("assign-orphans")
@click.argument("organization_name")
@with_appcontext
def assign_orphans_command(organization_name: str):
    """Attach every login without an organization to ORGANIZATION_NAME."""
    organization = _require_organization(organization_name)
    try:
        count = LoginStore.assign_orphans(organization.id)
    except TurfError as exc:
        raise click.ClickException(f"Assignment failed: {exc.message}") from exc
    get_response_cache(current_app).invalidate_all()
    click.echo(f"{count} logins assigned to {organization.name}")


@turf_cli.command("add-organization")
@click.argument("name")
@click.option("--company", "company_name", default=None, help="Company name; defaults to NAME.")
@with_appcontext
def add_organization_command(name: str, company_name: str | None):
    """Create organization NAME unless it already exists."""
    organization = Organization.find_by_name(name)
    if organization is not None:
        click.echo(f"Organization '{name}' already exists (id={organization.id})")
        return
    organization, error = Organization.safe_create(name=name, company_name=company_name or name)
    if error:
        raise click.ClickException(f"Could not create organization: {error}")
    click.echo(f"Created organization '{organization.name}' (id={organization.id})")
