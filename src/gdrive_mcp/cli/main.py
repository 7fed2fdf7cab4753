"""Command-line interface for gdrive-mcp."""

import asyncio
import sys

import click

from gdrive_mcp.__version__ import __version__
from gdrive_mcp.config import load_client_secrets


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Google Drive / Sheets MCP Server.

    Lets an MCP client search Drive, read files as resources, and read,
    update, append, and delete spreadsheet data.
    """
    pass


@main.command()
@click.option("--client-id", envvar="GOOGLE_OAUTH_CLIENT_ID", help="Google OAuth client ID")
@click.option(
    "--client-secret", envvar="GOOGLE_OAUTH_CLIENT_SECRET", help="Google OAuth client secret"
)
def setup(client_id: str | None, client_secret: str | None) -> None:
    """Set up Google OAuth authentication.

    This will:
    1. Open browser for OAuth2 consent flow
    2. Store tokens at ./.gdrive-mcp/tokens.json (or GDRIVE_CREDENTIALS_PATH)

    Client credentials come from the options, the GOOGLE_OAUTH_CLIENT_ID /
    GOOGLE_OAUTH_CLIENT_SECRET environment variables, or the keys file
    named by GDRIVE_OAUTH_PATH.
    """
    if not client_id or not client_secret:
        file_id, file_secret = load_client_secrets()
        client_id = client_id or file_id
        client_secret = client_secret or file_secret

    if not client_id or not client_secret:
        click.echo("❌ Error: OAuth client credentials required")
        click.echo("")
        click.echo("Set environment variables:")
        click.echo("  export GOOGLE_OAUTH_CLIENT_ID='your-client-id'")
        click.echo("  export GOOGLE_OAUTH_CLIENT_SECRET='your-client-secret'")
        click.echo("")
        click.echo("Or point GDRIVE_OAUTH_PATH at your OAuth keys JSON file,")
        click.echo("or pass as options:")
        click.echo("  gdrive-mcp setup --client-id=... --client-secret=...")
        sys.exit(1)

    from gdrive_mcp.auth import OAuthManager

    manager = OAuthManager(client_id=client_id, client_secret=client_secret)

    if manager.has_valid_tokens():
        click.echo("✓ Already authenticated!")
        click.echo(f"Token stored at: {manager.token_path}")
        click.echo("")

        if not click.confirm("Re-authenticate?"):
            return

    click.echo("Starting OAuth authentication flow...")
    click.echo("Browser will open for Google consent...")
    click.echo("")

    try:
        asyncio.run(manager.authenticate(client_id=client_id, client_secret=client_secret))
        click.echo("✓ Authentication successful!")
        click.echo(f"Token stored at: {manager.token_path}")
        click.echo("")
        click.echo("Run 'gdrive-mcp doctor' to verify setup.")
    except Exception as e:
        click.echo(f"❌ Authentication failed: {e}")
        sys.exit(1)


@main.command()
def mcp() -> None:
    """Start the MCP server on stdio.

    Authentication is required before starting the server.
    Run 'gdrive-mcp setup' if not already authenticated.
    """
    from gdrive_mcp.auth import OAuthManager, TokenStatus
    from gdrive_mcp.server import main as server_main

    manager = OAuthManager()
    status, _ = manager.get_status()

    if status == TokenStatus.MISSING:
        click.echo("❌ Not authenticated. Run 'gdrive-mcp setup' first.", err=True)
        sys.exit(1)

    if status == TokenStatus.INVALID:
        click.echo("❌ Token file corrupted. Run 'gdrive-mcp setup' to re-authenticate.", err=True)
        sys.exit(1)

    try:
        click.echo("Starting Google Drive MCP server...", err=True)
        server_main()
    except KeyboardInterrupt:
        click.echo("\nServer stopped.", err=True)
    except Exception as e:
        click.echo(f"❌ Server error: {e}", err=True)
        sys.exit(1)


@main.command()
def doctor() -> None:
    """Check installation and authentication status."""
    from gdrive_mcp.auth import OAuthManager, TokenStatus

    click.echo("Google Drive MCP Status:")
    click.echo("")

    click.echo("Dependencies:")
    try:
        import google.auth  # noqa: F401
        import google_auth_oauthlib  # noqa: F401
        import httpx  # noqa: F401
        import mcp  # noqa: F401

        click.echo("  ✓ google-auth installed")
        click.echo("  ✓ google-auth-oauthlib installed")
        click.echo("  ✓ httpx installed")
        click.echo("  ✓ mcp installed")
    except ImportError as e:
        click.echo(f"  ❌ Missing dependency: {e}")
        sys.exit(1)

    click.echo("")

    manager = OAuthManager()
    status, stored = manager.get_status()

    click.echo("Authentication:")
    click.echo(f"  Token file: {manager.token_path}")
    click.echo(
        "  Client credentials: "
        + ("configured" if manager.client_id and manager.client_secret else "not configured")
    )

    if status == TokenStatus.MISSING:
        click.echo("  ❌ Not authenticated")
        click.echo("")
        click.echo("Run 'gdrive-mcp setup' to authenticate.")
        sys.exit(1)
    elif status == TokenStatus.INVALID:
        click.echo("  ❌ Token file corrupted")
        click.echo("")
        click.echo("Run 'gdrive-mcp setup' to re-authenticate.")
        sys.exit(1)
    elif status == TokenStatus.EXPIRED:
        click.echo("  ⚠️  Token expired (can be refreshed)")
    elif status == TokenStatus.VALID:
        click.echo("  ✓ Authenticated")
        if stored:
            click.echo(
                f"  Token expires: {stored.token.expires_at.strftime('%Y-%m-%d %H:%M:%S UTC')}"
            )
            click.echo(f"  Scopes: {len(stored.token.scopes)} configured")

    click.echo("")
    click.echo("✓ Ready to use!")


if __name__ == "__main__":
    main()
