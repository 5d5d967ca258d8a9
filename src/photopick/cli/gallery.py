"""Client gallery commands.

  photopick gallery  --user U [--only selected|later]   list photos + selected/limit
  photopick view     --user U INDEX                      open a photo, saving the resume cursor
  photopick resume   --user U                            show where the user left off
  photopick select   --user U PHOTO_ID [--read-only]
  photopick later    --user U PHOTO_ID [--read-only]
  photopick finalize --user U
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from photopick.cli.common import console, load_cfg, open_db, resolve_db
from photopick.cli.errors import (
    err_limit_reached,
    err_nothing_selected,
    err_photo_not_found,
    err_read_only,
    err_user_not_found,
)
from photopick.db.models import Classification
from photopick.db.repository import Repository
from photopick.errors import AssetNotFound, NothingSelected, UserNotFound
from photopick.selection.machine import RejectReason
from photopick.selection.resume import ResumeCursor
from photopick.selection.service import SelectionEvent, SelectionService

_UserOpt = Annotated[str, typer.Option("--user", "-u", help="Client user id.")]
_DbOpt = Annotated[Path | None, typer.Option("--db", help="Path to the catalog database.")]
_ReadOnlyOpt = Annotated[
    bool, typer.Option("--read-only", help="Preview as the user without changing anything.")
]

_BADGES = {
    Classification.SELECTED: "[green]✓ selected[/]",
    Classification.LATER: "[cyan]⏱ later[/]",
    None: "",
}


class OnlyFilter(str, Enum):
    selected = "selected"
    later = "later"


def gallery_cmd(
    user: _UserOpt,
    only: Annotated[
        OnlyFilter | None, typer.Option("--only", help="Show only one classification.")
    ] = None,
    db: _DbOpt = None,
) -> None:
    """List a user's photos with their selection status."""
    cfg = load_cfg()
    conn = open_db(resolve_db(db, cfg))
    try:
        service = SelectionService(Repository(conn), default_limit=cfg.selection.default_limit)
        snapshot = service.gallery(user)
        if not snapshot.records:
            console.print(
                "[yellow]No photos yet.[/] Photos appear once they are synced from Google Drive.\n"
                f"  Run:  photopick sync --user {user}"
            )
            return

        count_style = "red bold" if snapshot.at_limit else "green"
        table = Table(
            title=f"{user}'s gallery — selected "
            f"[{count_style}]{snapshot.selected_count}/{snapshot.selection_limit}[/]"
            f", later {snapshot.later_count}",
        )
        table.add_column("#", justify="right")
        table.add_column("Photo ID")
        table.add_column("Folder")
        table.add_column("Status")
        for index, record in enumerate(snapshot.records):
            if only is not None and (
                record.classification is None or record.classification.value != only.value
            ):
                continue
            table.add_row(str(index), record.id, record.path, _BADGES[record.classification])
        console.print(table)
    finally:
        conn.close()


def view_cmd(
    user: _UserOpt,
    index: Annotated[int, typer.Argument(min=0, help="Position in the gallery.")],
    db: _DbOpt = None,
) -> None:
    """Open the photo at INDEX and remember it as the resume position."""
    cfg = load_cfg()
    conn = open_db(resolve_db(db, cfg))
    try:
        repo = Repository(conn)
        records = repo.list_photos(user)
        if index >= len(records):
            console.print(f"[red]Error:[/] {user}'s gallery has {len(records)} photos; no #{index}.")
            raise typer.Exit(1)
        record = records[index]
        ResumeCursor(repo).save(user, index=index, asset_id=record.id, folder=record.path)
        console.print(
            Panel(
                f"{record.name}\n"
                f"View:      {record.display_locator}\n"
                f"Thumbnail: {record.thumbnail_locator}\n"
                f"Status:    {_BADGES[record.classification] or '[dim]unmarked[/]'}",
                title=f"[bold]#{index} of {len(records)}[/]",
                expand=False,
            )
        )
    finally:
        conn.close()


def resume_cmd(user: _UserOpt, db: _DbOpt = None) -> None:
    """Show the last photo the user was viewing."""
    cfg = load_cfg()
    conn = open_db(resolve_db(db, cfg))
    try:
        repo = Repository(conn)
        cursor = ResumeCursor(repo)
        index = cursor.resume_index(user, repo.count_photos(user))
        if index is None:
            console.print("[dim]No saved position found.[/]")
            return
        state = cursor.load(user)
        console.print(
            f"[green]Resume from #{index}[/] (photo {state.last_asset_id or '?'}"
            f", folder {state.last_folder or '?'}) — saved {state.updated_at}"
        )
        console.print(f"  Run:  photopick view --user {user} {index}")
    finally:
        conn.close()


def select_cmd(
    user: _UserOpt,
    photo_id: Annotated[str, typer.Argument(help="Photo (Drive asset) id.")],
    read_only: _ReadOnlyOpt = False,
    db: _DbOpt = None,
) -> None:
    """Mark a photo as selected (subject to the user's limit)."""
    _classify(user, photo_id, Classification.SELECTED, read_only, db)


def later_cmd(
    user: _UserOpt,
    photo_id: Annotated[str, typer.Argument(help="Photo (Drive asset) id.")],
    read_only: _ReadOnlyOpt = False,
    db: _DbOpt = None,
) -> None:
    """Save a photo for later."""
    _classify(user, photo_id, Classification.LATER, read_only, db)


def finalize_cmd(user: _UserOpt, db: _DbOpt = None) -> None:
    """Finalize a user's selection."""
    cfg = load_cfg()
    conn = open_db(resolve_db(db, cfg))
    try:
        service = SelectionService(Repository(conn), default_limit=cfg.selection.default_limit)
        try:
            count = service.finalize(user)
        except UserNotFound:
            console.print(err_user_not_found(user))
            raise typer.Exit(1)
        except NothingSelected:
            console.print(err_nothing_selected())
            raise typer.Exit(1)
        console.print(f"[green]✓[/] Selection finalized with {count} photos.")
    finally:
        conn.close()


def _classify(
    user: str, photo_id: str, target: Classification, read_only: bool, db: Path | None
) -> None:
    cfg = load_cfg()
    conn = open_db(resolve_db(db, cfg))
    try:
        service = SelectionService(
            Repository(conn), read_only=read_only, default_limit=cfg.selection.default_limit
        )
        service.subscribe(_print_event)
        try:
            decision = service.classify(user, photo_id, target)
        except AssetNotFound:
            console.print(err_photo_not_found(photo_id, user))
            raise typer.Exit(1)

        if decision.reason is RejectReason.LIMIT_REACHED:
            console.print(err_limit_reached(decision.limit))
            raise typer.Exit(1)
        if decision.reason is RejectReason.READ_ONLY:
            console.print(err_read_only())
    finally:
        conn.close()


def _print_event(event: SelectionEvent) -> None:
    console.print(f"[green]✓[/] {event.message}  ({event.asset_id})")
