"""Main entry point for the Blog URL Crawler."""

import asyncio
import sys
from pathlib import Path

import click

from .config import ConfigManager, CrawlerConfig
from .connectivity import ConnectivityChecker
from .errors import CrawlError
from .logger import setup_logging, get_default_log_file
from .orchestrator import BlogCrawler
from .result_store import save_result


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--log-level', '-l', default='INFO',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
              help='Logging level')
@click.option('--log-file', type=click.Path(), help='Log file path')
@click.option('--no-console', is_flag=True, help='Disable console output')
@click.pass_context
def cli(ctx, config, log_level, log_file, no_console):
    """Blog URL Crawler - find every post published under a blog URL."""

    ctx.ensure_object(dict)

    config_path = Path(config) if config else None
    ctx.obj['config'] = ConfigManager.load_config(config_path)

    log_file_path = Path(log_file) if log_file else get_default_log_file()
    ctx.obj['logger'] = setup_logging(
        log_level=log_level,
        log_file=log_file_path,
        console_output=not no_console
    )


@cli.command()
@click.argument('base_url')
@click.argument('output_file', required=False, type=click.Path())
@click.option('--timeout', '-t', type=float, default=None,
              help='Seconds allowed for each page navigation (default from config, 30)')
@click.pass_context
def crawl(ctx, base_url, output_file, timeout):
    """Crawl BASE_URL and write the post URLs to OUTPUT_FILE."""
    config: CrawlerConfig = ctx.obj['config']
    logger = ctx.obj['logger']

    if timeout is None:
        timeout = config.crawl.navigation_timeout
    output_path = Path(output_file or config.output.output_file)

    logger.info(f"Starting blog crawler for: {base_url}")
    logger.info(f"Timeout set to: {timeout:.0f}s")

    crawler = BlogCrawler(config)
    try:
        result = asyncio.run(crawler.crawl(base_url, timeout))
    except CrawlError as e:
        logger.error(f"Error during crawling: {e}")
        click.echo(f"Error during crawling: {e}", err=True)
        sys.exit(1)

    try:
        save_result(
            result,
            output_path,
            pretty=config.output.pretty_print_json,
            backup_existing=config.output.backup_existing,
        )
    except OSError as e:
        logger.error(f"Error saving to JSON: {e}")
        click.echo(f"Error saving to JSON: {e}", err=True)
        sys.exit(1)

    click.echo(f"Total blog URLs found: {result.total_count}")
    click.echo(f"Results saved to: {output_path}")


@cli.command()
@click.argument('base_url')
@click.pass_context
def check(ctx, base_url):
    """Check that BASE_URL is reachable over plain HTTP."""
    config: CrawlerConfig = ctx.obj['config']

    checker = ConnectivityChecker(config)
    try:
        result = checker.check_basic_connectivity(base_url)
    finally:
        checker.close()

    if result['success']:
        click.echo("Basic connectivity: PASSED")
        click.echo(f"  Status Code: {result['status_code']}")
        click.echo(f"  Response Time: {result['response_time']:.2f}s")
        click.echo(f"  Content Type: {result['content_type']}")
    else:
        click.echo("Basic connectivity: FAILED")
        click.echo(f"  Error: {result.get('error', result.get('status_code'))}")
        sys.exit(1)


@cli.command()
@click.pass_context
def create_config(ctx):
    """Create a default configuration file."""
    config = CrawlerConfig()
    config_path = Path(ConfigManager.DEFAULT_CONFIG_FILE)

    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            click.echo("Configuration creation cancelled.")
            return

    ConfigManager.save_config(config, config_path)
    click.echo(f"Configuration file created: {config_path}")
    click.echo("You can edit this file to customize the crawler settings.")


if __name__ == '__main__':
    cli()
