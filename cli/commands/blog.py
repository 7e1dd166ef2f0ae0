"""
Blog management commands for the Mente Tech CLI.

This module provides command-line utilities for setting up the database,
creating administrators and running the scheduled publication trigger by
hand. Commands run inside the application context provided by ``flask``.

Examples:
    $ flask blog init-db --seed
    $ flask blog create-admin owner@mentetech.com.br --password '...'
    $ flask blog auto-publish
    $ flask blog list-scheduled
"""

import logging

import click
from flask.cli import AppGroup
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from core.errors import PublicationError
from core.seeder import seed_database
from extensions import db
from models import User
from services import publication_service
from services.auth_service import AuthContext

# Initialize CLI group and logger
blog_cli = AppGroup('blog', help='Blog administration commands.')
logger = logging.getLogger(__name__)


@blog_cli.command('init-db')
@click.option('--seed/--no-seed', default=False, help='Seed initial data')
def init_db(seed: bool) -> None:
    """
    Create database tables and optionally seed data.

    For incremental schema changes, use ``flask db upgrade`` instead.
    """
    try:
        db.create_all()
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError as e:
        logger.error("Database initialization failed: %s", e)
        raise click.ClickException(f'Database initialization failed: {e}')

    click.echo('Database initialized successfully')

    if seed and not seed_database(verbose=True):
        raise click.ClickException('Database seeding failed')


@blog_cli.command('seed')
@click.option('--force/--no-force', default=False, help='Create sample posts even if posts exist')
def seed(force: bool) -> None:
    """Seed the admin user, default categories and sample posts."""
    if not seed_database(force=force, verbose=True):
        raise click.ClickException('Database seeding failed')


@blog_cli.command('create-admin')
@click.argument('email')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True,
              help='Password for the new administrator')
@click.option('--name', default=None, help='Display name')
def create_admin(email: str, password: str, name: str) -> None:
    """Create an administrator, or promote an existing user."""
    user = User.get_by_email(email)
    try:
        if user is not None:
            user.role = User.ROLE_ADMIN
            user.status = User.STATUS_ACTIVE
            user.set_password(password)
            db.session.commit()
            click.echo(f'Existing user {user.email} promoted to admin')
            return

        user = User(email=email, password=password, name=name, role=User.ROLE_ADMIN)
        db.session.add(user)
        db.session.commit()
    except ValueError as e:
        db.session.rollback()
        raise click.BadParameter(str(e))
    except SQLAlchemyError as e:
        db.session.rollback()
        raise click.ClickException(f'Could not create admin: {e}')

    logger.info("Admin user %s created from the CLI", user.email)
    click.echo(f'Admin user {user.email} created')


@blog_cli.command('auto-publish')
def auto_publish() -> None:
    """Publish every scheduled post whose time has passed."""
    try:
        result = publication_service.auto_publish_scheduled_posts(AuthContext.system(), trigger='manual')
    except PublicationError as e:
        raise click.ClickException(e.message)

    click.echo(result.message)
    for post in result.posts:
        click.echo(f"  {post['id']}  {post['title']}")


@blog_cli.command('list-scheduled')
def list_scheduled() -> None:
    """List scheduled posts and whether they are overdue."""
    posts = publication_service.list_scheduled_posts()
    if not posts:
        click.echo('No scheduled posts')
        return

    for post in posts:
        flag = ' (overdue)' if post['overdue'] else ''
        click.echo(f"{post['scheduled_for']}  {post['title']}{flag}")
