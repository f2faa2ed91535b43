"""Command-line front end (requires the cli extra: typer, rich)."""
