"""Photopick rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from photopick.cli.errors import err_no_db
    console.print(err_no_db(".photopick.db"))
    raise typer.Exit(1)
"""

from __future__ import annotations

from photopick.config import API_KEY_ENV


def err_no_db(db_path: str = ".photopick.db") -> str:
    """No catalog database found."""
    return (
        f"[red]Error:[/] No catalog found at '{db_path}'.\n"
        "  Run:  photopick init"
    )


def err_no_api_key() -> str:
    """Drive API key missing — discovery will find nothing."""
    return (
        "[yellow]Warning:[/] No Drive API key configured; no photos can be discovered.\n"
        f"  Set:  export {API_KEY_ENV}=<key>"
    )


def err_user_not_found(user_id: str) -> str:
    return (
        f"[red]Error:[/] No user with id '{user_id}'.\n"
        "  Run:  photopick user list  to see all users."
    )


def err_user_exists(user_id: str) -> str:
    return (
        f"[red]Error:[/] A user with id '{user_id}' already exists.\n"
        f"  Use:  photopick user set-limit / set-folder {user_id} ..."
    )


def err_no_folder(user_id: str) -> str:
    """Sync requested for a user with no Drive folder and no default."""
    return (
        f"[red]Error:[/] User '{user_id}' has no Drive folder configured.\n"
        f"  Run:  photopick user set-folder {user_id} <FOLDER_ID>\n"
        "  Or pass:  --folder <FOLDER_ID>"
    )


def err_provider_unavailable(detail: str) -> str:
    """Discovery aborted — nothing was written."""
    return (
        f"[red]Error:[/] Drive discovery failed: {detail}\n"
        "  No catalog records were changed. Check the API key and network, then re-run:\n"
        "    photopick sync --user <USER_ID>"
    )


def err_photo_not_found(asset_id: str, user_id: str) -> str:
    return (
        f"[red]Error:[/] Photo '{asset_id}' is not in {user_id}'s gallery.\n"
        f"  Run:  photopick gallery --user {user_id}"
    )


def err_limit_reached(limit: int | None) -> str:
    """Selection cap hit — the photo was left unchanged."""
    return (
        f"[red]Selection limit reached[/] — You can only select up to {limit} photos.\n"
        "  Move a selected photo to 'later' first:  photopick later --user <USER_ID> <PHOTO_ID>"
    )


def err_read_only() -> str:
    return (
        "[yellow]Gallery is in read-only mode[/] — nothing was changed.\n"
        "  Drop --read-only to classify as the user."
    )


def err_nothing_selected() -> str:
    return (
        "[red]Error:[/] Please select at least one photo before finalizing.\n"
        "  Run:  photopick select --user <USER_ID> <PHOTO_ID>"
    )


def err_config(detail: str) -> str:
    return (
        f"[red]Error:[/] Invalid configuration.\n  {detail}\n"
        "  Fix photopick.yaml or ~/.photopick/config.yaml and retry."
    )
