"""photopick sync — discover a Drive folder tree and reconcile it into the catalog.

  photopick sync --user alice                 (uses the folder on alice's profile)
  photopick sync --user alice --folder 1AbC   (explicit root folder)

Discovery failures abort the run before any record is written; re-running is
always safe because reconciliation never touches classifications.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from photopick.cli.common import console, load_cfg, open_db, resolve_db
from photopick.cli.errors import (
    err_no_api_key,
    err_no_folder,
    err_provider_unavailable,
    err_user_not_found,
)
from photopick.db.repository import Repository
from photopick.drive.client import DriveClient
from photopick.drive.walker import TreeWalker
from photopick.errors import ProviderUnavailable, SyncConfigError, UserNotFound
from photopick.sync.reconciler import CatalogReconciler, SyncResult


def sync_cmd(
    user: Annotated[str, typer.Option("--user", "-u", help="Owner of the synced photos.")],
    folder: Annotated[
        str | None,
        typer.Option("--folder", "-f", help="Root Drive folder id (default: user's folder)."),
    ] = None,
    root_name: Annotated[
        str, typer.Option("--root-name", help="Label for the root folder in photo paths.")
    ] = "Root",
    db: Annotated[Path | None, typer.Option("--db", help="Path to the catalog database.")] = None,
) -> None:
    """Sync photos from Google Drive into a user's gallery."""
    cfg = load_cfg()
    conn = open_db(resolve_db(db, cfg))
    repo = Repository(conn)

    if not cfg.drive.api_key:
        console.print(err_no_api_key())

    client = DriveClient(cfg.drive.api_key, api_base=cfg.drive.api_base, timeout=cfg.drive.timeout)
    reconciler = CatalogReconciler(
        repo,
        TreeWalker(client, max_concurrency=cfg.drive.max_concurrency),
        thumbnail_size=cfg.drive.thumbnail_size,
        default_root_folder=cfg.drive.root_folder_id,
    )

    try:
        if repo.get_user(user) is None:
            console.print(err_user_not_found(user))
            raise typer.Exit(1)

        console.print(f"\n[bold]→ Syncing Drive for {user}[/]")
        try:
            if folder:
                result = asyncio.run(reconciler.sync_folder(folder, user, root_name))
            else:
                result = asyncio.run(reconciler.sync_user(user, root_name))
        except ProviderUnavailable as exc:
            console.print(err_provider_unavailable(str(exc)))
            raise typer.Exit(1)
        except UserNotFound:
            console.print(err_user_not_found(user))
            raise typer.Exit(1)
        except SyncConfigError:
            console.print(err_no_folder(user))
            raise typer.Exit(1)

        _print_result(result)
        if result.errors:
            raise typer.Exit(1)
    finally:
        conn.close()


def _print_result(result: SyncResult) -> None:
    if result.errors:
        console.print(
            f"[yellow]⚠[/] Synced {result.synced} photos. {result.errors} errors "
            "(see log output; re-run sync to retry)."
        )
    else:
        console.print(f"[green]✓[/] Synced {result.synced} photos. 0 errors.")
