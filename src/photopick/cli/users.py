"""photopick user — manage client profiles.

Subcommands:
  photopick user add ID --name NAME [--email E] [--folder F] [--limit N] [--admin]
  photopick user list
  photopick user set-limit ID N
  photopick user set-folder ID FOLDER
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from photopick.cli.common import console, load_cfg, open_db, resolve_db
from photopick.cli.errors import err_user_exists, err_user_not_found
from photopick.db.models import UserProfile
from photopick.db.repository import Repository

users_app = typer.Typer(
    name="user",
    help="Manage client profiles (add, list, set-limit, set-folder).",
    add_completion=False,
    no_args_is_help=True,
)

_DbOpt = Annotated[Path | None, typer.Option("--db", help="Path to the catalog database.")]


@users_app.command("add")
def add_cmd(
    user_id: Annotated[str, typer.Argument(help="Stable user id.")],
    name: Annotated[str, typer.Option("--name", help="Display name.")],
    email: Annotated[str, typer.Option("--email")] = "",
    contact: Annotated[str, typer.Option("--contact")] = "",
    folder: Annotated[str, typer.Option("--folder", help="Drive folder id to sync.")] = "",
    limit: Annotated[
        int | None, typer.Option("--limit", min=0, help="Selection cap (default from config).")
    ] = None,
    admin: Annotated[bool, typer.Option("--admin", help="Create as admin.")] = False,
    db: _DbOpt = None,
) -> None:
    """Create a client profile."""
    cfg = load_cfg()
    conn = open_db(resolve_db(db, cfg))
    repo = Repository(conn)
    try:
        user = UserProfile(
            id=user_id,
            name=name,
            email=email,
            contact=contact,
            role="admin" if admin else "user",
            drive_folder_id=folder,
            selection_limit=limit if limit is not None else cfg.selection.default_limit,
        )
        try:
            repo.add_user(user)
        except sqlite3.IntegrityError:
            console.print(err_user_exists(user_id))
            raise typer.Exit(1)
        console.print(
            f"[green]✓[/] Added {user.role} [bold]{user_id}[/] "
            f"(limit {user.selection_limit}, folder {folder or '—'})"
        )
    finally:
        conn.close()


@users_app.command("list")
def list_cmd(db: _DbOpt = None) -> None:
    """List all client profiles."""
    cfg = load_cfg()
    conn = open_db(resolve_db(db, cfg))
    repo = Repository(conn)
    try:
        users = repo.list_users()
        if not users:
            console.print("[dim]No users yet.[/]  Run:  photopick user add <USER_ID> --name <NAME>")
            return

        table = Table(title="Users")
        table.add_column("ID")
        table.add_column("Name")
        table.add_column("Role")
        table.add_column("Folder")
        table.add_column("Selected", justify="right")
        table.add_column("Photos", justify="right")
        table.add_column("Finalized")
        for u in users:
            table.add_row(
                u.id,
                u.name,
                u.role,
                u.drive_folder_id or "—",
                f"{repo.count_selected(u.id)}/{u.selection_limit}",
                str(repo.count_photos(u.id)),
                "[green]yes[/]" if u.is_finalized else "no",
            )
        console.print(table)
    finally:
        conn.close()


@users_app.command("set-limit")
def set_limit_cmd(
    user_id: Annotated[str, typer.Argument()],
    limit: Annotated[int, typer.Argument(min=0, help="New selection cap.")],
    db: _DbOpt = None,
) -> None:
    """Change a client's selection cap."""
    cfg = load_cfg()
    conn = open_db(resolve_db(db, cfg))
    try:
        if not Repository(conn).set_selection_limit(user_id, limit):
            console.print(err_user_not_found(user_id))
            raise typer.Exit(1)
        console.print(f"[green]✓[/] {user_id}: selection limit {limit}")
    finally:
        conn.close()


@users_app.command("set-folder")
def set_folder_cmd(
    user_id: Annotated[str, typer.Argument()],
    folder: Annotated[str, typer.Argument(help="Drive folder id.")],
    db: _DbOpt = None,
) -> None:
    """Change the Drive folder synced for a client."""
    cfg = load_cfg()
    conn = open_db(resolve_db(db, cfg))
    try:
        if not Repository(conn).set_drive_folder(user_id, folder):
            console.print(err_user_not_found(user_id))
            raise typer.Exit(1)
        console.print(f"[green]✓[/] {user_id}: Drive folder {folder}")
    finally:
        conn.close()
