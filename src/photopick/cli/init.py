"""photopick init — create the catalog database and a starter config.

Creates:
  .photopick.db     — empty catalog with schema
  photopick.yaml    — project config (drive/selection/catalog/logging sections)
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from photopick.cli.common import console
from photopick.config import API_KEY_ENV, write_project_config
from photopick.db.connection import Database
from photopick.db.schema import initialize


def init_cmd(
    directory: Annotated[
        Path,
        typer.Option("--dir", help="Directory to initialise (default: current)."),
    ] = Path("."),
    root_folder: Annotated[
        str,
        typer.Option("--root-folder", help="Default Drive folder id to sync."),
    ] = "",
) -> None:
    """Create the photo catalog and a photopick.yaml in DIRECTORY."""
    directory.mkdir(parents=True, exist_ok=True)
    db_path = directory / ".photopick.db"
    existed = db_path.exists()

    conn = Database(db_path).connect()
    try:
        initialize(conn)
    finally:
        conn.close()

    cfg_path = write_project_config(directory, root_folder_id=root_folder)

    state = "exists" if existed else "created"
    console.print(f"[green]✓[/] Catalog {state}: {db_path}")
    console.print(f"[green]✓[/] Config: {cfg_path}")
    console.print(f"\nNext:  export {API_KEY_ENV}=<key>")
    console.print("       photopick user add <USER_ID> --name <NAME> --folder <DRIVE_FOLDER_ID>")
