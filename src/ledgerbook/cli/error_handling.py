"""CLI error handling helpers."""

import click

from ledgerbook.domain.errors import DomainError, LifecycleMoveError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, LifecycleMoveError):
        click.echo(f"Record {error.record_id} state: {error.outcome.value}", err=True)
    ctx.exit(1)
