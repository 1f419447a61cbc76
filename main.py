"""
main.py – Command-line entry point.

This file only wires the command line to the modules that do the work:

  config.py       – AppConfig      : constants, file paths, logging
  keystore.py     – load_or_create_key : the persistent symmetric key
  crypto.py       – encrypt_url / decrypt_url
  storage.py      – save_encrypted_url / load_decrypted_url
  credentials.py  – push id and password generation, password policy
  links.py        – the generate / set / load operations used below

To run:
    vdolink generate
    vdolink set myroom --audience 'Valid1Pass!'
    vdolink show
"""

import sys
from typing import Optional

import click
import pyperclip

from config import APP_VERSION, DEFAULT_HOST, AppConfig
from credentials import PolicyViolation, validate_password
from errors import StorageError
from links import (
    PushIdRequired, generate_and_persist_random_link, load_persisted_link,
    set_and_persist_manual_link,
)


def _url_updated(config: AppConfig, url: str) -> None:
    """Report a newly saved link."""
    config.logger.info("url-updated")
    click.echo(url)


@click.group()
@click.version_option(APP_VERSION)
@click.option("--data-dir", type=click.Path(file_okay=False), default=None,
              help="Directory holding the key and config files.")
@click.option("--portable", is_flag=True,
              help="Keep the key and config files next to the executable.")
@click.pass_context
def cli(ctx: click.Context, data_dir: Optional[str], portable: bool) -> None:
    """Manage the saved, encrypted VDO.Ninja link."""
    ctx.obj = AppConfig(data_dir=data_dir, portable=portable)


@cli.command()
@click.option("--host", default=DEFAULT_HOST, show_default=True)
@click.option("--copy", "copy_to_clipboard", is_flag=True,
              help="Also copy the new link to the clipboard.")
@click.pass_obj
def generate(config: AppConfig, host: str, copy_to_clipboard: bool) -> None:
    """Generate a random secure link and save it."""
    try:
        url = generate_and_persist_random_link(config.config_path, config.key_path, host)
    except StorageError as exc:
        raise click.ClickException(str(exc))
    _url_updated(config, url)

    if copy_to_clipboard:
        try:
            pyperclip.copy(url)
        except pyperclip.PyperclipException as exc:
            config.logger.warning("Clipboard copy failed: %s", exc)
            click.echo(f"Could not copy to clipboard: {exc}", err=True)
        else:
            click.echo("Copied to clipboard.", err=True)


@cli.command("set")
@click.argument("push_id")
@click.option("--audience", default="", help="Audience password (optional).")
@click.option("--host", default=DEFAULT_HOST, show_default=True)
@click.pass_obj
def set_link(config: AppConfig, push_id: str, audience: str, host: str) -> None:
    """Save a link built from PUSH_ID and an optional audience password."""
    try:
        url = set_and_persist_manual_link(
            config.config_path, config.key_path, push_id, audience, host
        )
    except (PolicyViolation, PushIdRequired) as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)
    except StorageError as exc:
        raise click.ClickException(str(exc))
    _url_updated(config, url)


@cli.command()
@click.pass_obj
def show(config: AppConfig) -> None:
    """Print the saved link."""
    try:
        url = load_persisted_link(config.config_path, config.key_path)
    except StorageError as exc:
        raise click.ClickException(str(exc))
    if url is None:
        click.echo("No saved link.", err=True)
        sys.exit(1)
    click.echo(url)


@cli.command("check-password")
@click.argument("password")
def check_password(password: str) -> None:
    """Check PASSWORD against the audience password policy."""
    try:
        validate_password(password)
    except PolicyViolation as exc:
        click.echo(str(exc))
        sys.exit(1)
    click.echo("OK")


if __name__ == "__main__":
    cli()
