"""CLI entry point for hn-notifier."""

import asyncio
import logging
from pathlib import Path

import typer

from hn_notifier.adapters.formatting import OpenGraphPreviewer
from hn_notifier.adapters.notifications import SlackNotifier, TelegramNotifier, WebhookAlerter
from hn_notifier.adapters.sources import HackerNewsSource
from hn_notifier.config import Settings, get_settings
from hn_notifier.core import ConfigError, FetchError, Notifier, StorageError, YamlStoryStore
from hn_notifier.use_cases import ReconciliationService

logger = logging.getLogger("hn_notifier")

app = typer.Typer(help="Post Hacker News top stories to a chat channel.", no_args_is_help=True)

ConfigOption = typer.Option(Path("config.yaml"), "--config", "-c", help="Path to config.yaml")
LogLevelOption = typer.Option("INFO", "--log-level", help="Logging level")


def configure_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def build_notifier(settings: Settings) -> Notifier:
    settings.validate()
    if settings.platform == "slack":
        return SlackNotifier(
            settings.slack_token,
            timeout=settings.chat.timeout,
            unfurl_links=settings.chat.unfurl,
        )
    return TelegramNotifier(settings.telegram_bot_token, timeout=settings.chat.timeout)


def build_store(settings: Settings) -> YamlStoryStore:
    return YamlStoryStore(settings.storage_dir, root=settings.paths.store_root)


def build_service(settings: Settings) -> ReconciliationService:
    """Wire adapters from explicit settings."""
    notifier = build_notifier(settings)
    # Telegram unfurls links on its own.
    previewer = None
    if settings.chat.unfurl and notifier.platform == "slack":
        previewer = OpenGraphPreviewer(timeout=settings.chat.timeout)

    return ReconciliationService(
        source=HackerNewsSource(
            api_base=settings.hacker_news.api_base,
            timeout=settings.hacker_news.timeout,
        ),
        store=build_store(settings),
        notifier=notifier,
        channel=settings.channel,
        previewer=previewer,
        alerter=WebhookAlerter(settings.webhook_url) if settings.webhook_url else None,
        batch_size=settings.hacker_news.batch_size,
        retention=settings.retention,
        max_concurrency=settings.monitoring.max_concurrency,
        in_flight_guard=settings.monitoring.in_flight_guard,
    )


def _load_service(config: Path, log_level: str) -> ReconciliationService:
    configure_logging(log_level)
    try:
        return build_service(get_settings(config))
    except (ConfigError, StorageError) as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=2)


@app.command()
def poll(config: Path = ConfigOption, log_level: str = LogLevelOption) -> None:
    """Send new top stories and edit already posted ones."""
    service = _load_service(config, log_level)
    try:
        report = asyncio.run(service.poll())
    except FetchError as e:
        logger.error("could not fetch top stories: %s", e)
        raise typer.Exit(code=1)
    typer.echo(report.summary())


@app.command()
def refresh(config: Path = ConfigOption, log_level: str = LogLevelOption) -> None:
    """Edit already posted top stories without sending new ones."""
    service = _load_service(config, log_level)
    try:
        report = asyncio.run(service.refresh())
    except FetchError as e:
        logger.error("could not fetch top stories: %s", e)
        raise typer.Exit(code=1)
    typer.echo(report.summary())


@app.command()
def cleanup(config: Path = ConfigOption, log_level: str = LogLevelOption) -> None:
    """Delete messages of stories that left the top list."""
    service = _load_service(config, log_level)
    report = asyncio.run(service.cleanup())
    typer.echo(report.summary())


@app.command()
def watch(config: Path = ConfigOption, log_level: str = LogLevelOption) -> None:
    """Run poll and cleanup on their intervals until interrupted."""
    configure_logging(log_level)
    try:
        settings = get_settings(config)
        service = build_service(settings)
    except (ConfigError, StorageError) as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=2)

    try:
        asyncio.run(_watch(service, settings))
    except KeyboardInterrupt:
        logger.info("stopped")


async def _watch(service: ReconciliationService, settings: Settings) -> None:
    loop = asyncio.get_running_loop()
    next_cleanup = loop.time()
    while True:
        try:
            await service.poll()
        except FetchError as e:
            logger.error("could not fetch top stories: %s", e)

        if loop.time() >= next_cleanup:
            await service.cleanup()
            next_cleanup = loop.time() + settings.monitoring.cleanup_interval

        await asyncio.sleep(settings.monitoring.poll_interval)


@app.command()
def stats(
    config: Path = ConfigOption,
    limit: int = typer.Option(10, help="Number of recent records to list"),
    log_level: str = LogLevelOption,
) -> None:
    """Show what the store holds."""
    configure_logging(log_level)
    try:
        store = build_store(get_settings(config))
        summary = store.get_stats()
        records = store.list_records(limit=limit)
    except (ConfigError, StorageError) as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=2)

    typer.echo(f"📦 Stored stories: {summary['total_stored']}")
    if summary["total_stored"]:
        typer.echo(f"  • oldest save: {summary['oldest_save']}")
        typer.echo(f"  • newest save: {summary['newest_save']}")

    for record in records:
        saved = record.last_save.isoformat() if record.last_save else "never"
        typer.echo(f"  {record.id}  message={record.message_id}  saved={saved}")


if __name__ == "__main__":
    app()
