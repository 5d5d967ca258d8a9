"""photopick activity — show the operator activity log (syncs, finalizations)."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from photopick.cli.common import console, load_cfg, open_db, resolve_db
from photopick.db.repository import Repository


def activity_cmd(
    user: Annotated[str | None, typer.Option("--user", "-u", help="Only this user.")] = None,
    limit: Annotated[int, typer.Option("--limit", "-n", min=1, help="Max entries.")] = 20,
    db: Annotated[Path | None, typer.Option("--db", help="Path to the catalog database.")] = None,
) -> None:
    """Show recent activity, newest first."""
    cfg = load_cfg()
    conn = open_db(resolve_db(db, cfg))
    try:
        entries = Repository(conn).list_activity(user_id=user, limit=limit)
        if not entries:
            console.print("[dim]No activity recorded yet.[/]")
            return
        table = Table(title="Activity")
        table.add_column("When", style="dim")
        table.add_column("User")
        table.add_column("Action", style="bold", no_wrap=True)
        table.add_column("Details")
        for e in entries:
            table.add_row(e.timestamp[:19].replace("T", " "), e.user_id, e.action, e.details)
        console.print(table)
    finally:
        conn.close()
