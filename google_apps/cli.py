#!/usr/bin/env python3
"""
google-apps command line

    google-apps auth --config config/google-creds.yaml \
        --scope https://www.googleapis.com/auth/drive --save
    google-apps info --config config/google-creds.yaml
"""
import click
from rich.console import Console
from rich.table import Table

from .auth.credentials import build_credential, get_auth_map
from .utils.config import ConfigDefaults, load_config, save_auth_map

console = Console()


@click.group()
def main():
    """Google OAuth2 credential helpers"""


@main.command()
@click.option('--config', 'config_path', default=ConfigDefaults.CONFIG_PATH_DEFAULT,
              show_default=True, help='YAML google-ctx file')
@click.option('--scope', 'scopes', multiple=True, required=True,
              help='OAuth scope to request (repeatable)')
@click.option('--save', is_flag=True, help='Write the auth map back into the config file')
def auth(config_path: str, scopes, save: bool):
    """Run the interactive authorization flow and print the auth map"""
    ctx = load_config(config_path)

    auth_map = get_auth_map(
        ctx,
        scopes,
        input_func=lambda: console.input("[bold]Authorization code:[/bold] "),
        echo=console.print,
    )

    table = Table(title="Authorization map")
    table.add_column("Field")
    table.add_column("Value", overflow="fold")
    for field in ('access_token', 'refresh_token', 'token_type', 'expires_in', 'scope'):
        value = auth_map.get(field, '')
        if isinstance(value, (list, tuple)):
            value = ' '.join(value)
        table.add_row(field, str(value))
    console.print(table)

    if not auth_map.get('refresh_token'):
        console.print("[bold yellow]WARNING: No refresh token received. "
                      "Revoke the app's access and authorize again.[/bold yellow]")

    if save:
        path = save_auth_map(config_path, auth_map)
        console.print(f"[green]Auth map saved to {path}[/green]")
    else:
        console.print("[dim]Store this map securely, or re-run with --save[/dim]")


@main.command()
@click.option('--config', 'config_path', default=ConfigDefaults.CONFIG_PATH_DEFAULT,
              show_default=True, help='YAML google-ctx file')
def info(config_path: str):
    """Build a credential from the config and show its state"""
    credentials = build_credential(load_config(config_path))

    console.print(f"Valid: {'[green]yes[/green]' if credentials.valid else '[yellow]no[/yellow]'}")
    console.print(f"Expiry: {credentials.expiry or 'unknown'}")
    console.print(f"Refresh token: {'present' if getattr(credentials, 'refresh_token', None) else 'missing'}")
    scopes = getattr(credentials, 'scopes', None) or []
    console.print(f"Scopes: {', '.join(scopes) if scopes else 'unknown'}")


if __name__ == '__main__':
    main()
