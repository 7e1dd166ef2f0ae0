"""
Test fixtures for the Mente Tech blog.

This module provides the pytest fixtures used across the test suite:

- Application configuration and initialization
- Database setup and teardown
- Users with and without the admin role
- JWT bearer headers for API testing
- Factories for categories and posts in any lifecycle state

The fixtures are composable: tests request only the dependencies they need,
and every test runs against a fresh database.
"""

from datetime import timedelta
from typing import Any, Callable, Dict

import pytest
from flask import Flask

from core.factory import create_app
from core.utils.date_time import utcnow
from extensions import db
from models import Category, Post, User

ADMIN_PASSWORD = 'AdminPass123!'
USER_PASSWORD = 'UserPass123!'

VALID_BODY_HTML = (
    '<p>Chatbots respondem clientes a qualquer hora e reduzem a fila do atendimento.</p>'
)


@pytest.fixture
def app() -> Flask:
    """
    Create an application instance configured for testing.

    Yields:
        Flask: Application with an in-memory SQLite database, rate limiting
        disabled and the scheduler key set to ``test-scheduler-key``
    """
    test_app = create_app('testing')

    with test_app.app_context():
        db.create_all()
        yield test_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app) -> Any:
    """Flask test client for making requests without a server."""
    return app.test_client()


@pytest.fixture
def runner(app) -> Any:
    """CLI runner for invoking ``flask blog`` commands."""
    return app.test_cli_runner()


# User Fixtures
@pytest.fixture
def admin_user(app) -> User:
    """
    Create an administrator.

    Returns:
        User: Active user holding the admin role
    """
    user = User(email='admin@mentetech.com.br', password=ADMIN_PASSWORD, name='Admin',
                role=User.ROLE_ADMIN)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def regular_user(app) -> User:
    """Active user without the admin role."""
    user = User(email='leitor@example.com', password=USER_PASSWORD, name='Leitor')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_headers(admin_user) -> Dict[str, str]:
    """
    Bearer token headers for the administrator.

    Returns:
        Dict[str, str]: HTTP headers with Authorization and Content-Type
    """
    return {
        'Authorization': f'Bearer {admin_user.generate_token()}',
        'Content-Type': 'application/json'
    }


@pytest.fixture
def user_headers(regular_user) -> Dict[str, str]:
    """Bearer token headers for a user without the admin role."""
    return {
        'Authorization': f'Bearer {regular_user.generate_token()}',
        'Content-Type': 'application/json'
    }


# Content Fixtures
@pytest.fixture
def category(app) -> Category:
    """A category posts can be filed under."""
    item = Category(name='Automação de Processos', slug='automacao-processos',
                    description='Como usar IA para automatizar tarefas repetitivas',
                    color='#3d5afe')
    db.session.add(item)
    db.session.commit()
    return item


@pytest.fixture
def make_post(app, category) -> Callable[..., Post]:
    """
    Factory for posts stored directly, bypassing the lifecycle rules.

    Defaults produce a complete PUBLISHED post in ``category``; override any
    column with keyword arguments.

    Example:
        def test_overdue(make_post):
            post = make_post(status=Post.STATUS_SCHEDULED,
                             scheduled_for=utcnow() - timedelta(minutes=5))
    """
    counter = {'value': 0}

    def _make_post(**overrides) -> Post:
        counter['value'] += 1
        status = overrides.pop('status', Post.STATUS_PUBLISHED)
        values = {
            'title': f'Post de teste {counter["value"]}',
            'summary': 'Um resumo com tamanho suficiente.',
            'body_html': VALID_BODY_HTML,
            'tags': ['ia', 'pme'],
            'category_id': category.id,
            'status': status,
        }
        if status == Post.STATUS_PUBLISHED:
            values['publish_at'] = utcnow() - timedelta(days=counter['value'])
        elif status == Post.STATUS_SCHEDULED:
            values['scheduled_for'] = utcnow() + timedelta(days=1)
        values.update(overrides)
        values.setdefault('slug', Post.generate_unique_slug(values['title']))

        post = Post(**values)
        db.session.add(post)
        db.session.commit()
        return post

    return _make_post


@pytest.fixture
def post_payload(category) -> Dict[str, Any]:
    """A complete create request for the admin API."""
    return {
        'title': 'Como Implementar Chatbots em Pequenas Empresas',
        'summary': 'Descubra como chatbots podem melhorar o atendimento da sua PME.',
        'body': '## Por que um chatbot?\n\nDisponibilidade 24/7 e redução de custos para a sua equipe.',
        'category_id': category.id,
        'tags': ['chatbot', 'pme'],
    }
