"""Category taxonomy commands."""

import click
from ledgerbook.domain.taxonomy import list_taxonomy


@click.group()
def category_group():
    """Inspect the category taxonomy."""
    pass


@category_group.command("list")
def list_categories():
    """List main categories with their normal side and sub-categories."""
    click.echo("\nCategories:")
    for definition in list_taxonomy():
        click.echo(f"{definition.main_category.value} ({definition.normal_side.value}-normal)")
        for sub in definition.sub_categories:
            click.echo(f"  {sub}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
