"""
Command-line interface for FeedHarvest.
"""

import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Tuple

import click

from . import __version__
from .config.constants import DEFAULT_CONFIG_DIR, DEFAULT_DATA_DIR, DEFAULT_LOG_DIR, VALID_EXPORT_FORMATS
from .config.settings import Config
from .engine.schema import DateRange, ScrapeConfig, ScrapeMode
from .export import default_export_path, export_items
from .main import run_harvest
from .utils.helpers import validate_url
from .views import StaticHTMLView

logger = logging.getLogger(__name__)

_MODE_CHOICES = {"all": ScrapeMode.ALL, "count": ScrapeMode.COUNT, "date": ScrapeMode.DATE_RANGE}


def _setup_logging(config: Optional[Config] = None, verbose: bool = False) -> None:
    """
    Setup logging configuration based on config or CLI options.

    Args:
        config: Optional Config object with log_level setting
        verbose: If True, override log level to DEBUG
    """
    if verbose:
        log_level = logging.DEBUG
    elif config and config.log_level:
        log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    else:
        log_level = logging.INFO

    log_file = "logs/feedharvest.log"
    if config and config.log_file:
        log_file = config.log_file

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file),
        ],
    )


def _load_config(config_path: Optional[str]) -> Config:
    try:
        return Config.from_file(config_path) if config_path else Config()
    except (TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")


def _build_scrape_config(mode: str, max_items: Optional[int],
                         start: Optional[str], end: Optional[str]) -> ScrapeConfig:
    """Translate CLI options into a ScrapeConfig."""
    scrape_mode = _MODE_CHOICES[mode]
    try:
        if scrape_mode is ScrapeMode.COUNT:
            if max_items is None:
                raise click.BadParameter("--max-items is required with --mode count", param_hint="--max-items")
            return ScrapeConfig(mode=scrape_mode, max_items=max_items)
        if scrape_mode is ScrapeMode.DATE_RANGE:
            if not start or not end:
                raise click.BadParameter("--start and --end are required with --mode date", param_hint="--start/--end")
            return ScrapeConfig(mode=scrape_mode, date_range=DateRange(start, end))
        return ScrapeConfig(mode=scrape_mode)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _mode_options(func):
    """Options shared by every command that runs the engine."""
    options = [
        click.option("--mode", "-m", type=click.Choice(list(_MODE_CHOICES)), default="all",
                     help="all = until stopped, count = first N posts, date = posts within --start/--end"),
        click.option("--max-items", "-n", type=click.IntRange(min=1), help="Number of posts for --mode count"),
        click.option("--start", type=str, help="First day (YYYY-MM-DD) for --mode date"),
        click.option("--end", type=str, help="Last day (YYYY-MM-DD) for --mode date"),
        click.option("--output", "-o", type=click.Path(), help="Export file (default: <output_dir>/tweets_<date>.<format>)"),
        click.option("--format", "-f", "export_format", type=click.Choice(VALID_EXPORT_FORMATS),
                     help="Export format (default from config)"),
        click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Path to configuration file"),
        click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _export(cfg: Config, items, output: Optional[str], export_format: Optional[str]) -> None:
    fmt = export_format or cfg.export_format
    path = Path(output) if output else default_export_path(cfg.output_dir, fmt, date.today())
    if not items:
        click.echo("No posts collected, nothing exported.")
        return
    written = export_items(items, path, fmt)
    click.echo(f"✅ Exported {len(items)} posts to {written}")


@click.group()
@click.version_option(version=__version__, prog_name="feedharvest")
def main():
    """FeedHarvest - incremental collector for infinitely scrolling feeds.

    Collection Modes:
      all        Keep scrolling until stopped (Ctrl-C or --max-duration)
      count      Stop after the first N unique posts
      date       Seek to a date window, collect it, stop once past it

    Commands:
      harvest    Collect from a live page in a browser
      parse      Collect from saved HTML renderings of a page
      init       Initialize configuration and directories
      info       Display current configuration
    """
    pass


@main.command()
@click.option("--target", "-t", type=str, help="Feed URL to collect from")
@click.option("--headless/--headed", default=None, help="Run the browser without a window")
@click.option("--profile-dir", type=click.Path(file_okay=False), help="Browser profile directory (keeps the login)")
@click.option("--max-duration", type=click.FloatRange(min=0), help="Stop automatically after this many seconds")
@_mode_options
def harvest(target: Optional[str], headless: Optional[bool], profile_dir: Optional[str],
            max_duration: Optional[float], mode: str, max_items: Optional[int], start: Optional[str],
            end: Optional[str], output: Optional[str], export_format: Optional[str],
            config_path: Optional[str], verbose: bool):
    """Collect posts from a live feed page."""
    cfg = _load_config(config_path)
    _setup_logging(cfg, verbose)

    # Override with CLI options
    if target:
        if not validate_url(target):
            raise click.BadParameter(f"Not a URL: {target}", param_hint="--target")
        cfg.target_url = target
    if headless is not None:
        cfg.headless = headless
    if profile_dir:
        cfg.user_data_dir = profile_dir
    if max_duration is not None:
        cfg.max_duration = max_duration

    scrape_config = _build_scrape_config(mode, max_items, start, end)
    logger.info(f"Starting harvest in {scrape_config.mode.value} mode")
    logger.info(f"Target: {cfg.target_url}")

    try:
        items = asyncio.run(run_harvest(cfg, scrape_config, handle_interrupt=True))
    except Exception as e:
        logger.error(f"Harvest failed: {e}")
        raise click.ClickException(str(e))

    _export(cfg, items, output, export_format)


@main.command()
@click.argument("html_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--base-url", type=str, default=None, help="URL the pages were saved from")
@_mode_options
def parse(html_files: Tuple[str, ...], base_url: Optional[str], mode: str, max_items: Optional[int],
          start: Optional[str], end: Optional[str], output: Optional[str], export_format: Optional[str],
          config_path: Optional[str], verbose: bool):
    """Collect posts from saved HTML files (one file per scroll position, in order)."""
    cfg = _load_config(config_path)
    _setup_logging(cfg, verbose)

    # Saved pages do not need time to settle
    cfg.settle_delay = 0
    cfg.expand_delay = 0

    scrape_config = _build_scrape_config(mode, max_items, start, end)
    view = StaticHTMLView.from_files(html_files, base_url=base_url or cfg.target_url)
    click.echo(f"📄 Parsing {len(html_files)} saved page(s) in {scrape_config.mode.value} mode")

    try:
        items = asyncio.run(run_harvest(cfg, scrape_config, view=view))
    except Exception as e:
        logger.error(f"Parse failed: {e}")
        raise click.ClickException(str(e))

    _export(cfg, items, output, export_format)


@main.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(),
    help="Where to write the configuration file",
)
def init(config: Optional[str]):
    """Initialize FeedHarvest configuration and directories."""
    cfg = Config()

    # Create directories
    Path(DEFAULT_DATA_DIR).mkdir(exist_ok=True)
    Path(DEFAULT_LOG_DIR).mkdir(exist_ok=True)
    Path(DEFAULT_CONFIG_DIR).mkdir(exist_ok=True)

    # Save default config
    config_path = Path(config) if config else Path(DEFAULT_CONFIG_DIR) / "default.yaml"
    cfg.save_to_file(config_path)

    click.echo(f"Configuration initialized at: {config_path}")
    click.echo(f"Directories created: {DEFAULT_DATA_DIR}/, {DEFAULT_LOG_DIR}/, {DEFAULT_CONFIG_DIR}/")


@main.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
def info(config: Optional[str]):
    """Display current configuration."""
    cfg = _load_config(config)

    click.echo("FeedHarvest Configuration:")
    click.echo(f"  Target URL: {cfg.target_url}")
    click.echo(f"  Headless: {cfg.headless}")
    click.echo(f"  Profile Dir: {cfg.user_data_dir or '(temporary)'}")
    click.echo(f"  Settle Delay: {cfg.settle_delay}s")
    click.echo(f"  Expand Delay: {cfg.expand_delay}s")
    click.echo(f"  Seek Attempts: {cfg.seek_max_attempts} (grace {cfg.seek_grace_attempts})")
    click.echo(f"  Export: {cfg.export_format} -> {cfg.output_dir}/")


if __name__ == "__main__":
    main()
