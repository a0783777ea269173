"""
Flask CLI commands for store maintenance.

Commands:
- flask init-db: Create (or recreate with --drop) every table
- flask create-category: Add a catalog category
- flask restock: Add units to a product's stock
"""

import click
from app.database import db_session, create_tables, drop_tables
from app.exceptions import GroceryError


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop existing tables first')
    def init_db_command(drop):
        """Create the database schema."""
        if drop:
            click.confirm('This deletes every row in the database. Continue?', abort=True)
            drop_tables()
            click.echo(click.style('Tables dropped.', fg='yellow'))

        create_tables()
        click.echo(click.style('Database tables created.', fg='green', bold=True))

    @app.cli.command('create-category')
    @click.option('--name', prompt=True, help='Category name (unique)')
    @click.option('--description', default=None, help='Optional description')
    @click.option('--display-order', type=int, default=None, help='Position in category listings')
    def create_category_command(name, description, display_order):
        """Create a new catalog category."""
        from app.services.catalog_service import create_category

        try:
            category = create_category(db_session, name, description=description, display_order=display_order)
        except GroceryError as e:
            db_session.rollback()
            raise click.ClickException(e.message)

        click.echo(click.style('Category created.', fg='green', bold=True))
        click.echo(f'   Name: {category.name}')
        click.echo(f'   ID: {category.id}')

    @app.cli.command('restock')
    @click.argument('product_id', type=int)
    @click.argument('quantity', type=int)
    def restock_command(product_id, quantity):
        """Add QUANTITY units to PRODUCT_ID."""
        from app.services.stock_service import increase_stock

        try:
            stock = increase_stock(db_session, product_id, quantity)
            db_session.commit()
        except GroceryError as e:
            db_session.rollback()
            raise click.ClickException(e.message)

        click.echo(click.style(f'Product {product_id} now has {stock} units in stock.', fg='green'))
