"""
Database seeding module for the Mente Tech blog.

This module populates a database with the data a fresh installation needs
for development: an administrator account, the default categories and a few
sample posts covering each lifecycle state.

The seeding operations are idempotent and can be safely run multiple times
without creating duplicate data.
"""

import logging
from datetime import timedelta
from typing import Dict, List, Optional

import click
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from core.rendering import prepare_body
from core.utils.date_time import utcnow
from core.utils.string import slugify
from extensions import db
from models import Category, Post, User

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {
        'name': 'Automação de Processos',
        'slug': 'automacao-processos',
        'description': 'Como usar IA para automatizar tarefas repetitivas',
        'color': '#3d5afe',
    },
    {
        'name': 'Atendimento ao Cliente',
        'slug': 'atendimento-cliente',
        'description': 'Chatbots e IA conversacional para PMEs',
        'color': '#7c4dff',
    },
    {
        'name': 'Análise de Dados',
        'slug': 'analise-dados',
        'description': 'Business Intelligence e analytics com IA',
        'color': '#00e5ff',
    },
    {
        'name': 'Marketing Digital',
        'slug': 'marketing-digital',
        'description': 'IA aplicada ao marketing e vendas',
        'color': '#ff6b35',
    },
]

SAMPLE_POSTS = [
    {
        'title': 'Como Implementar Chatbots em Pequenas Empresas',
        'summary': 'Descubra como chatbots podem melhorar o atendimento da sua PME e reduzir custos.',
        'body': (
            "## Por que sua PME precisa de um chatbot?\n\n"
            "Para pequenas empresas com equipes enxutas, atender bem sem estourar o orçamento "
            "é fundamental.\n\n"
            "- **Disponibilidade 24/7**\n"
            "- **Redução de custos** com respostas automáticas\n"
            "- **Qualificação de leads** antes do atendimento humano\n"
        ),
        'tags': ['chatbot', 'atendimento', 'automação', 'pme'],
        'category': 'atendimento-cliente',
        'status': Post.STATUS_PUBLISHED,
        'published_days_ago': 10,
    },
    {
        'title': 'Automação de Vendas com IA',
        'summary': 'Um roteiro prático para automatizar o funil de vendas com inteligência artificial.',
        'body': (
            "## Do lead ao fechamento\n\n"
            "Ferramentas de IA conseguem classificar leads, sugerir o próximo contato e "
            "gerar propostas.\n\n"
            "| Etapa | Ferramenta |\n"
            "| --- | --- |\n"
            "| Captação | Formulários inteligentes |\n"
            "| Qualificação | Lead scoring |\n"
        ),
        'tags': ['vendas', 'automação', 'ia'],
        'category': 'automacao-processos',
        'status': Post.STATUS_PUBLISHED,
        'published_days_ago': 3,
    },
    {
        'title': 'Dashboards que Respondem Perguntas',
        'summary': 'Como combinar BI e modelos de linguagem para explorar os dados da empresa.',
        'body': (
            "## Perguntas em linguagem natural\n\n"
            "Em vez de montar filtros, o gestor pergunta e o painel responde com o gráfico certo.\n"
        ),
        'tags': ['bi', 'dados'],
        'category': 'analise-dados',
        'status': Post.STATUS_SCHEDULED,
        'scheduled_in_days': 2,
    },
    {
        'title': 'Rascunho: IA no Marketing de Conteúdo',
        'summary': '',
        'body': '',
        'tags': ['marketing'],
        'category': 'marketing-digital',
        'status': Post.STATUS_DRAFT,
    },
]


def _echo(message: str, verbose: bool) -> None:
    if verbose:
        click.echo(message)


def seed_database(force: bool = False, verbose: bool = False) -> bool:
    """
    Seed the database with initial data.

    Args:
        force: If True, sample posts are created even if posts already exist
        verbose: If True, will output detailed progress information

    Returns:
        bool: True if seeding was successful, False if a database error occurred

    Example:
        with app.app_context():
            success = seed_database(verbose=True)
    """
    try:
        _echo("Starting database seeding process...", verbose)
        seed_admin_user(verbose=verbose)
        categories = seed_categories(verbose=verbose)
        seed_sample_posts(categories, force=force, verbose=verbose)
        _echo("Database seeding completed successfully", verbose)
        return True
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Database seeding error: %s", e)
        click.echo(f"Database seeding error: {e}", err=True)
        return False


def seed_admin_user(email: Optional[str] = None, password: Optional[str] = None,
                    verbose: bool = False) -> User:
    """
    Create the default administrator if it doesn't exist.

    The credentials come from ``SEED_ADMIN_EMAIL`` / ``SEED_ADMIN_PASSWORD``
    unless given explicitly.

    Returns:
        User: The existing or new administrator
    """
    email = email or current_app.config.get('SEED_ADMIN_EMAIL', 'admin@mentetech.com.br')
    password = password or current_app.config.get('SEED_ADMIN_PASSWORD', 'change-me-now')

    admin_user = User.get_by_email(email)
    if admin_user is not None:
        _echo(f"Admin user {email} already exists", verbose)
        return admin_user

    admin_user = User(email=email, password=password, name='Mente Tech', role=User.ROLE_ADMIN)
    db.session.add(admin_user)
    db.session.commit()
    logger.info("Created admin user %s", email)
    _echo(f"Created admin user {email}", verbose)
    return admin_user


def seed_categories(verbose: bool = False) -> Dict[str, Category]:
    """
    Create the default categories that don't exist yet.

    Returns:
        Dict mapping category slug to Category
    """
    categories = {}
    for data in DEFAULT_CATEGORIES:
        category = Category.get_by_slug(data['slug'])
        if category is None:
            category = Category(**data)
            db.session.add(category)
            _echo(f"Created category {data['name']}", verbose)
        categories[data['slug']] = category
    db.session.commit()
    return categories


def seed_sample_posts(categories: Dict[str, Category], force: bool = False,
                      verbose: bool = False) -> List[Post]:
    """
    Create sample posts in each lifecycle state.

    Skipped when posts already exist, unless ``force`` is set. Posts whose
    slug is already taken are never duplicated.
    """
    if not force and db.session.query(Post.id).first() is not None:
        _echo("Posts already exist, skipping sample posts", verbose)
        return []

    now = utcnow()
    created = []
    for data in SAMPLE_POSTS:
        slug = slugify(data['title'])
        if Post.slug_exists(slug):
            continue

        post = Post(
            title=data['title'],
            slug=slug,
            summary=data['summary'],
            body_html=prepare_body(data['body']) if data['body'] else '',
            tags=data['tags'],
            category_id=categories[data['category']].id,
            status=data['status'],
        )
        if data['status'] == Post.STATUS_PUBLISHED:
            post.publish_at = now - timedelta(days=data['published_days_ago'])
        elif data['status'] == Post.STATUS_SCHEDULED:
            post.scheduled_for = now + timedelta(days=data['scheduled_in_days'])

        db.session.add(post)
        created.append(post)
        _echo(f"Created {data['status'].lower()} post '{data['title']}'", verbose)

    db.session.commit()
    return created
