import click

from soshi.services import auth_service


def register_commands(app):
    @app.cli.command("purge-sessions")
    def purge_sessions():
        """Delete every expired session row."""
        count = auth_service.purge_expired_sessions()
        click.echo(f"Purged {count} expired sessions")
