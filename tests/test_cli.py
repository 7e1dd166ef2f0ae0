"""
Tests for the ``flask blog`` command group.
"""

from datetime import timedelta

from core.utils.date_time import utcnow
from extensions import db
from models import Category, Post, User


class TestBlogCommands:
    """Database setup, seeding and administration commands."""

    def test_init_db(self, runner) -> None:
        result = runner.invoke(args=['blog', 'init-db'])
        assert result.exit_code == 0
        assert 'Database initialized successfully' in result.output

    def test_seed(self, runner) -> None:
        result = runner.invoke(args=['blog', 'seed'])
        assert result.exit_code == 0, result.output
        assert 'Database seeding completed successfully' in result.output

        assert Category.query.count() == 4
        assert Post.query.filter_by(status=Post.STATUS_PUBLISHED).count() == 2
        assert Post.query.filter_by(status=Post.STATUS_SCHEDULED).count() == 1
        assert User.get_by_email('admin@mentetech.com.br').is_admin

    def test_seed_is_idempotent(self, runner) -> None:
        runner.invoke(args=['blog', 'seed'])
        result = runner.invoke(args=['blog', 'seed'])
        assert result.exit_code == 0
        assert Category.query.count() == 4
        assert Post.query.count() == 4

    def test_create_admin(self, runner) -> None:
        result = runner.invoke(args=['blog', 'create-admin', 'editor@mentetech.com.br',
                                     '--password', 'Editor123!'])
        assert result.exit_code == 0, result.output
        user = User.get_by_email('editor@mentetech.com.br')
        assert user.is_admin
        assert user.check_password('Editor123!')

    def test_create_admin_promotes_existing_user(self, runner, regular_user) -> None:
        result = runner.invoke(args=['blog', 'create-admin', regular_user.email,
                                     '--password', 'NovaSenha123!'])
        assert result.exit_code == 0
        assert 'promoted' in result.output
        db.session.expire_all()
        assert User.get_by_email(regular_user.email).is_admin

    def test_create_admin_rejects_short_password(self, runner) -> None:
        result = runner.invoke(args=['blog', 'create-admin', 'editor@mentetech.com.br',
                                     '--password', 'curta'])
        assert result.exit_code != 0
        assert User.get_by_email('editor@mentetech.com.br') is None

    def test_auto_publish(self, runner, make_post) -> None:
        post = make_post(title='Pronto para sair', status=Post.STATUS_SCHEDULED,
                         scheduled_for=utcnow() - timedelta(minutes=1))

        result = runner.invoke(args=['blog', 'auto-publish'])

        assert result.exit_code == 0
        assert 'Published 1 scheduled post(s)' in result.output
        assert 'Pronto para sair' in result.output
        db.session.expire_all()
        assert db.session.get(Post, post.id).status == Post.STATUS_PUBLISHED

    def test_list_scheduled(self, runner, make_post) -> None:
        make_post(title='Atrasado', status=Post.STATUS_SCHEDULED,
                  scheduled_for=utcnow() - timedelta(minutes=1))

        result = runner.invoke(args=['blog', 'list-scheduled'])

        assert result.exit_code == 0
        assert 'Atrasado (overdue)' in result.output

    def test_list_scheduled_empty(self, runner) -> None:
        result = runner.invoke(args=['blog', 'list-scheduled'])
        assert 'No scheduled posts' in result.output
