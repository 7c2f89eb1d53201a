"""Operator CLI for the Tutordesk record store.

Why:
    A fresh Supabase project has no students, so nobody can log in. These
    commands create the first admin (or a demo data set) against the same
    tables the web app reads.

Usage:
    python -m tools.seed create-admin --code ADMIN001 --name "Head Tutor"
    python -m tools.seed seed-demo

Connection settings come from SUPABASE_URL and SUPABASE_KEY (or the matching
options). Both commands are idempotent for student codes: an existing code is
never inserted twice.
"""

from __future__ import annotations

from typing import Optional

import click

from records import STUDENTS, Filter, RecordStoreError, RecordStoreProtocol
from records.demo import seed_demo


def _store(ctx: click.Context, url: Optional[str], key: Optional[str]) -> RecordStoreProtocol:
    # Tests hand in a ready store via `obj`.
    if isinstance(ctx.obj, dict) and ctx.obj.get("store") is not None:
        return ctx.obj["store"]
    if not url or not key:
        raise click.ClickException("SUPABASE_URL and SUPABASE_KEY are required")
    from records.supabase_store import create_supabase_record_store

    return create_supabase_record_store(url, key)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--url", envvar="SUPABASE_URL", help="Supabase project URL (env: SUPABASE_URL).")
@click.option("--key", envvar="SUPABASE_KEY", help="Supabase API key (env: SUPABASE_KEY).")
@click.pass_context
def cli(ctx: click.Context, url: Optional[str], key: Optional[str]) -> None:
    ctx.ensure_object(dict)
    ctx.obj["url"] = url
    ctx.obj["key"] = key


@cli.command("seed-demo")
@click.pass_context
def seed_demo_command(ctx: click.Context) -> None:
    """Insert demo students, sessions and progress rows."""
    store = _store(ctx, ctx.obj.get("url"), ctx.obj.get("key"))
    try:
        counts = seed_demo(store)
    except RecordStoreError as exc:
        raise click.ClickException(f"Seeding failed during {exc.operation} on {exc.table}") from exc
    click.echo("Seeded students={students}, sessions={sessions}, progress={progress}".format(**counts))


@cli.command("create-admin")
@click.option("--code", required=True, help="Student code used to log in.")
@click.option("--name", required=True, help="Full name shown in the header.")
@click.option("--grade", default="Staff", show_default=True)
@click.option("--age", type=click.IntRange(1, 100), default=30, show_default=True)
@click.option("--email", default=None)
@click.pass_context
def create_admin(ctx: click.Context, code: str, name: str, grade: str, age: int, email: Optional[str]) -> None:
    """Create an admin student, or grant admin rights to an existing code."""
    code = code.strip()
    if not code:
        raise click.ClickException("--code must not be empty")
    store = _store(ctx, ctx.obj.get("url"), ctx.obj.get("key"))
    try:
        existing = store.select(STUDENTS, filters=[Filter.eq("student_code", code)])
        if len(existing) > 1:
            raise click.ClickException(f"Student code {code} is not unique; fix the data first")
        if existing:
            store.update(STUDENTS, str(existing[0]["id"]), {"is_admin": True})
            click.echo(f"Granted admin rights to existing student {code}")
            return
        row = store.insert(
            STUDENTS,
            {
                "student_code": code,
                "full_name": name.strip(),
                "grade": grade,
                "age": age,
                "email": email,
                "is_admin": True,
            },
        )
    except RecordStoreError as exc:
        raise click.ClickException(f"Creating admin failed during {exc.operation} on {exc.table}") from exc
    click.echo(f"Created admin {code} (id={row['id']})")


if __name__ == "__main__":  # pragma: no cover - manual entry
    cli()
