"""CLI entry point for Rolegate."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from rolegate_core.authority import PermissionAuthority
from rolegate_core.config import RolegateConfig, load_config
from rolegate_core.config.loader import DEFAULT_CONFIG_TEMPLATE
from rolegate_core.errors import AuthorityError
from rolegate_core.interfaces import Permission, Role
from rolegate_core.plugins import PluginError, PluginLoader

app = typer.Typer(
    name="rolegate",
    help="Role-based permission authority: manage grants and check access.",
)

permission_app = typer.Typer(help="Create, delete, grant and revoke permissions.")
app.add_typer(permission_app, name="permission")

config_app = typer.Typer(help="Manage Rolegate configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: RolegateConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class _JsonFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def _configure_logging(cfg: RolegateConfig) -> None:
    if cfg.log_format == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(show_path=False)
    for name in ("rolegate_core", "rolegate_lite", "rolegate_enterprise"):
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.setLevel(_LOG_LEVELS[cfg.log_level])


def _get_config() -> RolegateConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to rolegate.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)
    _configure_logging(_config)


@contextmanager
def _authority() -> Iterator[PermissionAuthority]:
    """Build an authority from config, reporting failures and exiting with code 2."""
    try:
        with PermissionAuthority.from_config(_get_config()) as authority:
            yield authority
    except (AuthorityError, PluginError, ValueError) as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)


def _permission(resource: str, action: str) -> Permission:
    try:
        return Permission(resource=resource, action=action)
    except ValueError as e:
        rprint(f"[red]Invalid permission:[/red] {escape(str(e))}")
        raise typer.Exit(2)


def _role(role_id: str, name: str = "") -> Role:
    try:
        return Role(id=role_id, display_name=name)
    except ValueError as e:
        rprint(f"[red]Invalid role:[/red] {escape(str(e))}")
        raise typer.Exit(2)


# ---------------------------------------------------------------------------
# Permission lifecycle
# ---------------------------------------------------------------------------


@permission_app.command("add")
def permission_add(
    resource: str = typer.Argument(..., help="Protected resource identifier"),
    action: str = typer.Argument(..., help="Action on the resource"),
) -> None:
    """Create a permission."""
    perm = _permission(resource, action)
    with _authority() as authority:
        authority.add_permission(perm)
    rprint(f"[green]Added[/green] {perm}")


@permission_app.command("delete")
def permission_delete(
    resource: str = typer.Argument(..., help="Protected resource identifier"),
    action: str = typer.Argument(..., help="Action on the resource"),
) -> None:
    """Revoke a permission from every role and delete it."""
    perm = _permission(resource, action)
    with _authority() as authority:
        authority.delete_permission(perm)
    rprint(f"[green]Deleted[/green] {perm}")


@permission_app.command("grant")
def permission_grant(
    resource: str = typer.Argument(..., help="Protected resource identifier"),
    action: str = typer.Argument(..., help="Action on the resource"),
    role_id: str = typer.Argument(..., help="Role (group) id"),
    name: str = typer.Option("", "--name", help="Role display name"),
) -> None:
    """Grant an existing permission to a role."""
    perm = _permission(resource, action)
    role = _role(role_id, name)
    with _authority() as authority:
        authority.grant_permission(perm, role)
    rprint(f"[green]Granted[/green] {perm} to {role}")


@permission_app.command("revoke")
def permission_revoke(
    resource: str = typer.Argument(..., help="Protected resource identifier"),
    action: str = typer.Argument(..., help="Action on the resource"),
    role_id: str | None = typer.Argument(None, help="Role id (omit to revoke from all roles)"),
) -> None:
    """Revoke a permission from one role, or from all roles."""
    perm = _permission(resource, action)
    role = _role(role_id) if role_id else None
    with _authority() as authority:
        authority.revoke_permission(perm, role)
    target = str(role) if role else "all roles"
    rprint(f"[green]Revoked[/green] {perm} from {target}")


# ---------------------------------------------------------------------------
# Decisions and inspection
# ---------------------------------------------------------------------------


@app.command()
def check(
    username: str = typer.Argument(..., help="User to check"),
    resource: str = typer.Argument(..., help="Protected resource identifier"),
    action: str = typer.Argument(..., help="Action on the resource"),
) -> None:
    """Check whether a user holds a permission. Exit code 0 = allowed, 1 = denied."""
    perm = _permission(resource, action)
    with _authority() as authority:
        allowed = authority.has_permission(username, perm)
    if allowed:
        rprint(f"[green]allowed[/green] {username} -> {perm}")
        return
    rprint(f"[red]denied[/red] {username} -> {perm}")
    raise typer.Exit(1)


@app.command()
def grants(
    resource: str = typer.Argument(..., help="Protected resource identifier"),
    action: str = typer.Argument(..., help="Action on the resource"),
) -> None:
    """List the roles a permission is granted to."""
    perm = _permission(resource, action)
    cfg = _get_config()
    try:
        store = PluginLoader(cfg).load_store()(cfg.permissions)
    except (AuthorityError, PluginError) as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)

    roles_for = getattr(store, "roles_for", None)
    if roles_for is None:
        rprint("[yellow]The configured store cannot list grants.[/yellow]")
        raise typer.Exit(1)

    try:
        roles = roles_for(perm)
    except AuthorityError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)
    finally:
        close = getattr(store, "close", None)
        if callable(close):
            close()

    table = Table(title=f"Grants for {perm} ({len(roles)})")
    table.add_column("role", style="cyan")
    table.add_column("name", style="green")
    for role in roles:
        table.add_row(role.id, role.display_name or "-")
    rprint(table)


@app.command()
def plugins() -> None:
    """List registered store and resolver plugins."""
    discovered = PluginLoader(_get_config()).discover()

    table = Table(title="Plugins")
    table.add_column("type", style="cyan")
    table.add_column("registered", style="green")
    for plugin_type, names in discovered.items():
        table.add_row(plugin_type, ", ".join(names) if names else "-")
    rprint(table)


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default rolegate.yaml in current directory."""
    target = Path("rolegate.yaml")
    if target.exists() and not force:
        rprint("[yellow]rolegate.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
