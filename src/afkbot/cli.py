# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path

import click

from afkbot.client.loader import load_client_factory
from afkbot.config import BotConfig
from afkbot.errors import ClientFactoryError, ConfigError
from afkbot.logging import configure_logging, get_logger
from afkbot.settings import Settings

logger = get_logger(__name__)


def _load(config_path: Path | None, settings: Settings) -> tuple[Path, BotConfig]:
    path = config_path or settings.config_path
    try:
        return path, BotConfig.from_yaml(path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def cli() -> None:
    """afkbot command line interface."""


@cli.command("run")
@click.option("-c", "--config", "config_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--client-factory",
    type=str,
    default=None,
    help="Import path of the game client factory, e.g. 'mypkg.adapter:create_client'. Overrides the config file.",
)
@click.option("--log-level", type=str, default=None, help="Overrides AFKBOT_LOG_LEVEL.")
def run(config_path: Path | None, client_factory: str | None, log_level: str | None) -> None:
    """Connect and keep the bot online, reconnecting forever."""
    settings = Settings()
    if log_level:
        settings.log_level = log_level
    configure_logging(settings)

    _, config = _load(config_path, settings)
    factory_path = client_factory or config.client_factory
    if not factory_path:
        raise click.UsageError("No client factory: set client_factory in the config or pass --client-factory")
    try:
        factory = load_client_factory(factory_path)
    except ClientFactoryError as e:
        raise click.ClickException(str(e)) from e

    from afkbot.core.driver import SessionDriver

    async def _run() -> None:
        driver = SessionDriver(config, factory)
        await driver.run_forever()

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run())
    logger.info("stopped")


@cli.command("init-config")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--host", required=True)
@click.option("--port", type=int, default=25565, show_default=True)
@click.option("--username", required=True)
@click.option("--version", "server_version", required=True, help="Server version, e.g. 1.20.4")
@click.option("--client-factory", type=str, default=None)
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
def init_config(
    path: Path,
    host: str,
    port: int,
    username: str,
    server_version: str,
    client_factory: str | None,
    force: bool,
) -> None:
    """Write a new configuration file."""
    configure_logging()
    if path.exists() and not force:
        raise click.ClickException(f"{path} already exists (use --force to overwrite)")
    config = BotConfig(
        server_host=host,
        server_port=port,
        bot_username=username,
        server_version=server_version,
        client_factory=client_factory,
    )
    config.to_yaml(path)
    click.echo(f"Wrote {path}")


@cli.command("check-config")
@click.option("-c", "--config", "config_path", type=click.Path(dir_okay=False, path_type=Path))
def check_config(config_path: Path | None) -> None:
    """Validate a configuration file and print the effective settings."""
    settings = Settings()
    configure_logging(settings)
    path, config = _load(config_path, settings)
    click.echo(f"# {path}")
    for key, value in config.client_options().items():
        click.echo(f"{key}: {value}")
    for key, value in config.timing.model_dump().items():
        click.echo(f"timing.{key}: {value}")
    click.echo(f"client_factory: {config.client_factory or '(not set)'}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
