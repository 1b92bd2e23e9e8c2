"""CLI commands for the Inbox API."""

import asyncio
import sys

import structlog
import typer
from rich.console import Console
from rich.table import Table

from .core.config import settings
from .core.exceptions import InboxAPIError

app = typer.Typer(
    name="inbox-api",
    help="Shared mailbox inbox API CLI",
    add_completion=False,
)

console = Console()
logger = structlog.get_logger(__name__)


def _mask(value) -> str:
    if not value:
        return "(unset)"
    return "***"


@app.command()
def version():
    """Show application version."""
    console.print(f"Inbox API v{settings.app_version}")


@app.command()
def serve(
    host: str = typer.Option(settings.api_host, "--host", "-h", help="Host to bind"),
    port: int = typer.Option(settings.api_port, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(settings.reload, "--reload", "-r", help="Enable auto-reload"),
):
    """Start the web server."""
    import uvicorn

    from .core.logging import configure_uvicorn_logging

    console.print(f"🚀 Starting Inbox API on {host}:{port}")

    uvicorn.run(
        "inbox_api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
        log_config=configure_uvicorn_logging(),
        access_log=False,
    )


@app.command()
def config():
    """Show current configuration."""
    table = Table(title="Inbox API Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug", str(settings.debug))
    table.add_row("API Host", settings.api_host)
    table.add_row("API Port", str(settings.api_port))
    table.add_row("Domain List File", settings.domain_list_file)

    table.add_row("IMAP Host", settings.host or "(unset)")
    table.add_row("IMAP Port", str(settings.port))
    table.add_row("IMAP TLS", str(settings.tls))
    table.add_row("IMAP Folder", settings.imap_folder)
    table.add_row("Mailbox User", settings.email or "(unset)")
    table.add_row("Mailbox Password", _mask(settings.password))
    table.add_row("Key", _mask(settings.key))

    table.add_row("Log Level", settings.log_level)
    table.add_row("Log Format", settings.log_format)

    console.print(table)


@app.command()
def domains():
    """Print the domain allow-list."""
    from .services.domains import DomainAllowList

    try:
        entries = DomainAllowList(settings.domain_list_file).list_domains()
    except InboxAPIError as e:
        console.print(f"❌ Could not read {settings.domain_list_file}: {e}")
        sys.exit(1)

    if not entries:
        console.print(f"📄 {settings.domain_list_file} is empty")
        return

    for entry in entries:
        console.print(entry)


@app.command()
def fetch(
    email: str = typer.Argument(..., help="Recipient address to look up"),
    show_content: bool = typer.Option(False, "--content", "-c", help="Print mailContent of each message"),
):
    """Query the mailbox for a recipient, bypassing the HTTP layer."""
    from .services.email import InboxService

    console.print(f"🔍 Fetching messages for {email} from {settings.host}...")

    try:
        result = asyncio.run(InboxService(settings).get_inbox(email))
    except InboxAPIError as e:
        logger.error("CLI fetch failed", email=email, error=str(e), error_code=e.error_code)
        console.print(f"❌ Fetch failed: {e}")
        sys.exit(1)

    if not result.messages:
        console.print("📭 No messages")
        return

    table = Table(title=f"Messages for {email}")
    table.add_column("Date", style="cyan")
    table.add_column("From", style="green")
    table.add_column("Subject")
    for message in result.messages:
        table.add_row(message.date, message.from_, message.subject)
    console.print(table)

    if show_content:
        for i, message in enumerate(result.messages, 1):
            console.rule(f"{i}. {message.subject}")
            console.print(message.mail_content, markup=False, highlight=False)


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
