from pathlib import Path

import click
import toml

from cinescope.config import (
    ALLOWED_THEMES,
    CONFIG_FILE_PATH,
    CineScopeConfig,
    load_config,
    merge_config_with_cli_args,
    save_config,
)
from cinescope.log import setup_logging
from cinescope.ui.app import CineScope


@click.group(invoke_without_command=True)
@click.pass_context
@click.option(
    "--api-token",
    type=str,
    help="TMDB API read access token (v4 bearer token)",
    default=None,
    envvar="TMDB_API_TOKEN",
)
@click.option(
    "--api-base-url",
    type=str,
    help="Base URL of the TMDB-compatible catalog API",
    default=None,
)
@click.option(
    "--trending-url",
    type=str,
    help="Base URL of the trending searches counter service",
    default=None,
    envvar="CINESCOPE_TRENDING_URL",
)
@click.option(
    "--trending-api-key",
    type=str,
    help="API key for the trending searches counter service",
    default=None,
    envvar="CINESCOPE_TRENDING_API_KEY",
)
@click.option(
    "--theme",
    type=click.Choice(ALLOWED_THEMES, case_sensitive=False),
    help="Theme to use for the UI",
    default=None,
)
@click.option(
    "--log-file",
    type=str,
    help="File to write logs to (default: ~/.cinescope.log)",
    default=None,
)
@click.option(
    "--config",
    type=click.Path(exists=True, readable=True, path_type=str),
    help="Path to configuration file (default: ~/.cinescope.config)",
    default=None,
)
def cli(
    ctx,
    api_token: str | None = None,
    api_base_url: str | None = None,
    trending_url: str | None = None,
    trending_api_key: str | None = None,
    theme: str | None = None,
    log_file: str | None = None,
    config: str | None = None,
):
    """CineScope - Search and browse movies from the terminal."""
    if ctx.invoked_subcommand is None:
        main(api_token, api_base_url, trending_url, trending_api_key, theme, log_file, config)


@cli.command()
@click.option(
    "--config",
    type=click.Path(path_type=str),
    help="Path to configuration file (default: ~/.cinescope.config)",
    default=None,
)
def configure(config: str | None = None):
    """Interactive configuration setup for CineScope"""
    config_path = Path(config) if config else CONFIG_FILE_PATH

    click.echo("CineScope Configuration Setup")
    click.echo("=" * 30)
    click.echo("Leave fields empty to use defaults or skip optional settings.")
    click.echo()

    existing_config = {}
    if config_path.exists():
        try:
            with open(config_path, "r") as f:
                existing_config = toml.load(f)
            click.echo(f"Found existing configuration at {config_path}")
            click.echo()
        except (OSError, toml.TomlDecodeError) as e:
            click.echo(f"Ignoring unreadable configuration at {config_path}: {e}")

    new_config = {}

    # Catalog API
    click.echo("Catalog API:")
    click.echo("-" * 12)

    current = existing_config.get("api_token", "")
    api_token = click.prompt(
        "TMDB API read access token", default=current, show_default=False, hide_input=True, type=str
    ).strip()
    if api_token:
        new_config["api_token"] = api_token

    current = existing_config.get("api_base_url", "")
    api_base_url = click.prompt(
        "API base URL (empty for api.themoviedb.org)", default=current, show_default=bool(current), type=str
    ).strip()
    if api_base_url:
        new_config["api_base_url"] = api_base_url

    # Trending counter
    click.echo()
    click.echo("Trending Searches (optional):")
    click.echo("-" * 29)

    current = existing_config.get("trending_url", "")
    trending_url = click.prompt("Trending service URL", default=current, show_default=bool(current), type=str).strip()
    if trending_url:
        new_config["trending_url"] = trending_url

        current = existing_config.get("trending_api_key", "")
        trending_api_key = click.prompt(
            "Trending service API key", default=current, show_default=False, hide_input=True, type=str
        ).strip()
        if trending_api_key:
            new_config["trending_api_key"] = trending_api_key

    # Theme
    click.echo()
    click.echo("Theme Configuration:")
    click.echo("-" * 20)

    current_theme = existing_config.get("theme", "textual-dark")
    click.echo("Available themes:")
    for i, theme in enumerate(ALLOWED_THEMES, 1):
        marker = " (current)" if theme == current_theme else ""
        click.echo(f"  {i}. {theme}{marker}")

    theme_choice = click.prompt(
        f"Select theme (1-{len(ALLOWED_THEMES)})",
        default=ALLOWED_THEMES.index(current_theme) + 1 if current_theme in ALLOWED_THEMES else 1,
        type=click.IntRange(1, len(ALLOWED_THEMES)),
    )
    new_config["theme"] = ALLOWED_THEMES[theme_choice - 1]

    click.echo()
    try:
        CineScopeConfig(**new_config)
        click.echo("✓ Configuration validated successfully!")
    except ValueError as e:
        click.echo(f"✗ Configuration validation failed: {e}")
        click.echo("Configuration cancelled.")
        return

    click.echo()
    try:
        saved_path = save_config(new_config, str(config_path))
        click.echo(f"✓ Configuration saved to {saved_path}")
    except OSError as e:
        click.echo(f"✗ Failed to save configuration: {e}")


def main(
    api_token: str | None = None,
    api_base_url: str | None = None,
    trending_url: str | None = None,
    trending_api_key: str | None = None,
    theme: str | None = None,
    log_file: str | None = None,
    config: str | None = None,
):
    """CineScope - Search and browse movies from the terminal."""
    try:
        config_obj = load_config(config)

        # CLI takes priority over the config file
        config_obj = merge_config_with_cli_args(
            config_obj,
            api_token=api_token,
            api_base_url=api_base_url,
            trending_url=trending_url,
            trending_api_key=trending_api_key,
            theme=theme.lower() if theme else None,
            log_file=log_file,
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    if not config_obj.api_token:
        raise click.ClickException(
            "A TMDB API token is required. Pass --api-token, set TMDB_API_TOKEN or run 'configure'."
        )

    setup_logging(config_obj.log_file, config_obj.log_level)

    app = CineScope(
        api_base_url=config_obj.api_base_url,
        api_token=config_obj.api_token,
        image_base_url=config_obj.image_base_url,
        trending_url=config_obj.trending_url,
        trending_api_key=config_obj.trending_api_key,
        request_timeout=config_obj.request_timeout,
        theme_name=config_obj.theme,
    )
    app.run()


if __name__ == "__main__":
    cli()
