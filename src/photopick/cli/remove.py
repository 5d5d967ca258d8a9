"""photopick remove — delete a photo from the catalog.

The only path that deletes catalog records. A later sync that still finds
the asset in Drive will recreate it unclassified.

Usage:
  photopick remove --photo 1AbC
  photopick remove --photo 1AbC --yes
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from photopick.cli.common import console, load_cfg, open_db, resolve_db
from photopick.db.repository import Repository


def remove_cmd(
    photo: Annotated[str, typer.Option("--photo", "-p", help="Photo (Drive asset) id to remove.")],
    db: Annotated[Path | None, typer.Option("--db", help="Path to the catalog database.")] = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt.")] = False,
) -> None:
    """Remove a photo record from the catalog."""
    cfg = load_cfg()
    conn = open_db(resolve_db(db, cfg))
    repo = Repository(conn)

    try:
        existing = repo.get_photo(photo)
        if existing is None:
            console.print(
                f"[yellow]Photo not found:[/] '{photo}' is not in the catalog.\n"
                "  Run:  photopick gallery --user <USER_ID>  to see a user's photos."
            )
            raise typer.Exit(0)

        status = existing.classification.value if existing.classification else "unmarked"
        console.print(f"\nRemove photo: [bold]{existing.name}[/]")
        console.print(f"  Owner: {existing.owner_id}  |  Status: {status}")

        if not yes:
            if not typer.confirm("Confirm removal?", default=False):
                console.print("[dim]Cancelled.[/]")
                raise typer.Exit(0)

        repo.delete_photo(photo)
        console.print(f"\n[green]✓[/] Removed: {photo}")
    finally:
        conn.close()
