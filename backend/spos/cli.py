# Overview: Flask CLI command groups for bootstrap and inspection.

# backend/spos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to spos (PowerShell: $env:FLASK_APP="spos").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create the storage table if it does not exist (idempotent).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate the storage table (deletes all data).
#
# Users:
# - python -m flask users list
# - python -m flask users create --name "Ana" --email ana@shop.local --password secret
#   Create an account without logging it in on the terminal.
#
# Inventory:
# - python -m flask products list
# - python -m flask products add --barcode 111 --name Pen --price 1.50 --quantity 5
# - python -m flask sales list [--since 2026-01-01T00:00:00Z]

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .context import get_ledger, get_session_manager
from .services.auth_service import DuplicateEmailError
from .services.page_service import AddProductController, home_stats
from .validation import ValidationError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create the storage table. Existing data is left alone."""
    click.echo("START Initializing SPOS storage...")
    db.create_all()
    click.echo(f"PASS Storage ready (key prefix: {current_app.config['STORAGE_KEY_PREFIX']!r})")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm destructive reset')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate all tables."""
    if not yes:
        click.echo("FAIL Refusing to reset without --yes")
        return
    db.drop_all()
    db.create_all()
    click.echo("PASS Database reset")


@click.group('users')
def users_group():
    """User inspection and bootstrap."""


@users_group.command('list')
@with_appcontext
def list_users():
    users = get_session_manager().list_users()
    if not users:
        click.echo("No users found.")
        return

    current = get_session_manager().current_user()
    click.echo("\n" + "="*70)
    click.echo(f"{'ID':<15} {'Name':<20} {'Email':<28} {'Session'}")
    click.echo("="*70)
    for u in users:
        marker = "*" if current is not None and current.id == u.id else ""
        click.echo(f"{u.id:<15} {u.name:<20} {u.email:<28} {marker}")
    click.echo("="*70 + "\n")


@users_group.command('create')
@click.option('--name', prompt=True, help='Display name')
@click.option('--email', prompt=True, help='Email address (login key)')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_user_cli(name, email, password):
    try:
        user = get_session_manager().create_user(name, email, password)
    except DuplicateEmailError as e:
        click.echo(f"FAIL {e}")
        return
    except ValidationError as e:
        click.echo(f"FAIL {e}")
        return
    click.echo(f"PASS Created user: {user.name} ({user.email}) id={user.id}")


@click.group('products')
def products_group():
    """Inventory inspection."""


@products_group.command('list')
@with_appcontext
def list_products():
    ledger = get_ledger()
    products = ledger.list_products()
    if not products:
        click.echo("No products yet")
        return

    click.echo("\n" + "="*72)
    click.echo(f"{'Name':<24} {'Qty':>6} {'Price':>10} {'Barcode':<16} {'Weight'}")
    click.echo("="*72)
    for p in products:
        click.echo(f"{p.name[:24]:<24} {p.quantity:>6} {p.price:>10.2f} {p.barcode or '-':<16} {p.weight or '-'}")
    click.echo("="*72)

    stats = home_stats(ledger, low_stock_threshold=current_app.config["LOW_STOCK_THRESHOLD"])
    click.echo(
        f"{stats['products']} products, value {stats['total_value']:.2f}, "
        f"{stats['low_stock']} low stock, {stats['sales']} sales\n"
    )


@products_group.command('add')
@click.option('--barcode', required=True, help='Barcode (digits)')
@click.option('--name', required=True, help='Product name')
@click.option('--price', required=True, help='Unit price')
@click.option('--quantity', default='1', show_default=True, help='Initial quantity')
@click.option('--weight', default='', help='Weight label')
@with_appcontext
def add_product_cli(barcode, name, price, quantity, weight):
    form = {"barcode": barcode, "name": name, "price": price, "quantity": quantity, "weight": weight}
    try:
        outcome = AddProductController(get_ledger()).submit(form)
    except ValidationError as e:
        click.echo(f"FAIL {e}")
        return

    if outcome.status == "exists":
        click.echo(f"WARN  {outcome.message} Current quantity: {outcome.product.quantity}")
        return
    click.echo(f"PASS {outcome.message} (id={outcome.product.id})")


@click.group('sales')
def sales_group():
    """Sales inspection."""


@sales_group.command('list')
@click.option('--since', default=None, help='Only sales at or after this ISO-8601 time')
@with_appcontext
def list_sales(since):
    try:
        sales = get_ledger().list_sales(since=since)
    except ValidationError as e:
        click.echo(f"FAIL {e}")
        return
    if not sales:
        click.echo("No sales found.")
        return

    for s in sales:
        click.echo(f"{s.sold_at}  {s.product_name[:24]:<24} {s.quantity:>4} x {s.price:>8.2f} = {s.total:>9.2f}")
    click.echo(f"TOTAL {sum(s.total for s in sales):.2f} over {len(sales)} sales")


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(products_group)
    app.cli.add_command(sales_group)
