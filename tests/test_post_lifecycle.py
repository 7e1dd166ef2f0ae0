"""
Tests for the post lifecycle rules and the post service.

The lifecycle functions take the reference time as an argument, so these
tests pin ``NOW`` instead of depending on the clock.
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.errors import NotFoundError, ValidationFailed
from extensions import db
from models import Post
from services.post_lifecycle import DRAFT, PUBLISHED, SCHEDULED, apply_status, validate_transition
from services.post_service import PostService

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)

COMPLETE_FIELDS = {
    'summary': 'Resumo completo do artigo.',
    'body': '<p>Um corpo com mais de vinte caracteres.</p>',
    'category_id': 1,
}


def _post(**overrides) -> Post:
    values = {
        'title': 'Rascunho',
        'slug': 'rascunho',
        'summary': COMPLETE_FIELDS['summary'],
        'body_html': COMPLETE_FIELDS['body'],
        'category_id': 1,
        'status': DRAFT,
    }
    values.update(overrides)
    return Post(**values)


class TestValidateTransition:
    """Transition rules without persistence."""

    def test_draft_needs_nothing(self) -> None:
        assert not validate_transition(None, DRAFT, {})

    def test_publish_requires_content(self) -> None:
        errors = validate_transition(DRAFT, PUBLISHED, {})
        assert errors.codes == {
            'summary': ['required'],
            'body': ['required'],
            'category_id': ['required'],
        }

    def test_short_fields_are_reported(self) -> None:
        errors = validate_transition(DRAFT, PUBLISHED, {
            'summary': 'curto',
            'body': '<p>pouco</p>',
            'category_id': 1,
        })
        assert errors.codes['summary'] == ['too_short']
        assert errors.codes['body'] == ['too_short']

    def test_body_length_ignores_markup(self) -> None:
        errors = validate_transition(DRAFT, PUBLISHED, {
            'summary': COMPLETE_FIELDS['summary'],
            'body': '<p><strong><em>curto</em></strong></p>',
            'category_id': 1,
        })
        assert 'body' in errors

    def test_unknown_status(self) -> None:
        errors = validate_transition(DRAFT, 'ARCHIVED', COMPLETE_FIELDS)
        assert errors.codes == {'status': ['invalid_status']}

    def test_schedule_requires_future_time(self) -> None:
        past = dict(COMPLETE_FIELDS, scheduled_for=NOW - timedelta(minutes=1))
        assert validate_transition(DRAFT, SCHEDULED, past, NOW).codes == {'scheduled_for': ['must_be_future']}

        missing = validate_transition(DRAFT, SCHEDULED, COMPLETE_FIELDS, NOW)
        assert missing.codes == {'scheduled_for': ['required']}

        future = dict(COMPLETE_FIELDS, scheduled_for=NOW + timedelta(hours=1))
        assert not validate_transition(DRAFT, SCHEDULED, future, NOW)

    def test_scheduled_time_equal_to_now_is_rejected(self) -> None:
        fields = dict(COMPLETE_FIELDS, scheduled_for=NOW)
        assert 'scheduled_for' in validate_transition(DRAFT, SCHEDULED, fields, NOW)

    def test_staying_published_skips_required_fields(self) -> None:
        assert not validate_transition(PUBLISHED, PUBLISHED, {'summary': ''})

    def test_naive_schedule_is_treated_as_utc(self) -> None:
        naive = (NOW + timedelta(hours=1)).replace(tzinfo=None)
        assert not validate_transition(DRAFT, SCHEDULED, dict(COMPLETE_FIELDS, scheduled_for=naive), NOW)


class TestApplyStatus:
    """Lifecycle field updates."""

    def test_first_publication_stamps_publish_at(self) -> None:
        post = apply_status(_post(), PUBLISHED, NOW)
        assert post.status == PUBLISHED
        assert post.publish_at == NOW
        assert post.is_published

    def test_republishing_keeps_original_date(self) -> None:
        original = NOW - timedelta(days=30)
        post = _post(status=PUBLISHED, publish_at=original)

        apply_status(post, DRAFT, NOW)
        assert post.status == DRAFT
        assert post.publish_at == original
        assert not post.is_published

        apply_status(post, PUBLISHED, NOW)
        assert post.publish_at == original

    def test_scheduling_sets_target_time(self) -> None:
        target = NOW + timedelta(days=2)
        post = apply_status(_post(), SCHEDULED, NOW, scheduled_for=target)
        assert post.status == SCHEDULED
        assert post.scheduled_for == target
        assert post.publish_at is None

    def test_leaving_scheduled_clears_target_time(self) -> None:
        post = _post(status=SCHEDULED, scheduled_for=NOW + timedelta(days=1))
        apply_status(post, DRAFT, NOW)
        assert post.scheduled_for is None

    def test_rejected_transition_changes_nothing(self) -> None:
        post = _post(summary='')
        with pytest.raises(ValidationFailed) as exc_info:
            apply_status(post, PUBLISHED, NOW)
        assert exc_info.value.codes == {'summary': ['required']}
        assert post.status == DRAFT
        assert post.publish_at is None

    def test_overdue_flag(self) -> None:
        post = _post(status=SCHEDULED, scheduled_for=NOW - timedelta(minutes=1))
        assert post.is_overdue(NOW)
        assert not _post(status=DRAFT).is_overdue(NOW)


class TestPostService:
    """Post writes through the service."""

    def test_create_defaults_to_draft(self, app) -> None:
        post = PostService.create_post({'title': 'Só um título'})
        assert post.status == DRAFT
        assert post.slug == 'so-um-titulo'
        assert post.publish_at is None

    def test_create_collects_every_error(self, app) -> None:
        with pytest.raises(ValidationFailed) as exc_info:
            PostService.create_post({'title': '', 'slug': 'Slug Inválido', 'status': PUBLISHED,
                                     'tags': [f'tag{i}' for i in range(11)]})
        codes = exc_info.value.codes
        assert codes['title'] == ['required']
        assert codes['slug'] == ['malformed_slug']
        assert codes['tags'] == ['too_many_tags']
        assert codes['summary'] == ['required']
        assert Post.query.count() == 0

    def test_create_published_converts_markdown(self, app, post_payload) -> None:
        post = PostService.create_post(dict(post_payload, status=PUBLISHED), now=NOW)
        assert post.status == PUBLISHED
        assert post.publish_at == NOW
        assert '<h2>Por que um chatbot?</h2>' in post.body_html

    def test_generated_slugs_get_a_suffix(self, app) -> None:
        first = PostService.create_post({'title': 'Automação de Vendas'})
        second = PostService.create_post({'title': 'Automação de Vendas'})
        assert first.slug == 'automacao-de-vendas'
        assert second.slug == 'automacao-de-vendas-2'

    def test_explicit_slug_collision(self, app, make_post) -> None:
        make_post(slug='ocupado')
        with pytest.raises(ValidationFailed) as exc_info:
            PostService.create_post({'title': 'Outro', 'slug': 'ocupado'})
        assert exc_info.value.codes == {'slug': ['slug_taken']}

    def test_unknown_category(self, app) -> None:
        with pytest.raises(ValidationFailed) as exc_info:
            PostService.create_post({'title': 'Título', 'category_id': 999})
        assert exc_info.value.codes['category_id'] == ['not_found']

    def test_update_keeps_slug_when_title_changes(self, app, make_post) -> None:
        post = make_post(title='Título original')
        updated = PostService.update_post(post.id, {'title': 'Título novo'})
        assert updated.title == 'Título novo'
        assert updated.slug == 'titulo-original'

    def test_content_edit_of_published_post_is_not_revalidated(self, app, make_post) -> None:
        post = make_post()
        updated = PostService.update_post(post.id, {'summary': ''})
        assert updated.summary == ''
        assert updated.status == PUBLISHED

    def test_schedule_through_update(self, app, make_post) -> None:
        post = make_post(status=DRAFT)
        target = NOW + timedelta(days=1)
        updated = PostService.update_post(post.id, {'status': SCHEDULED, 'scheduled_for': target}, now=NOW)
        assert updated.status == SCHEDULED
        assert updated.scheduled_for == target

    def test_overdue_scheduled_post_accepts_resent_form(self, app, make_post) -> None:
        post = make_post(status=SCHEDULED, scheduled_for=NOW - timedelta(hours=1))
        resent = {
            'body': 'Corpo editado com texto suficiente para salvar.',
            'status': SCHEDULED,
            'scheduled_for': post.scheduled_for,
        }

        updated = PostService.update_post(post.id, resent, now=NOW)

        assert updated.status == SCHEDULED
        assert updated.scheduled_for == NOW - timedelta(hours=1)
        assert 'Corpo editado' in updated.body_html

    def test_moving_schedule_into_the_past_is_rejected(self, app, make_post) -> None:
        post = make_post(status=SCHEDULED, scheduled_for=NOW + timedelta(days=1))

        with pytest.raises(ValidationFailed) as exc_info:
            PostService.update_post(post.id, {'scheduled_for': NOW - timedelta(minutes=5)}, now=NOW)

        assert exc_info.value.codes == {'scheduled_for': ['must_be_future']}
        db.session.expire_all()
        assert db.session.get(Post, post.id).scheduled_for == NOW + timedelta(days=1)

    def test_change_status_with_unchanged_schedule(self, app, make_post) -> None:
        post = make_post(status=SCHEDULED, scheduled_for=NOW - timedelta(hours=1))
        updated = PostService.change_status(post.id, SCHEDULED, scheduled_for=post.scheduled_for, now=NOW)
        assert updated.scheduled_for == NOW - timedelta(hours=1)

    def test_change_status_unpublish_and_republish(self, app, make_post) -> None:
        post = make_post()
        original = post.publish_at

        PostService.change_status(post.id, DRAFT)
        republished = PostService.change_status(post.id, PUBLISHED)
        assert republished.publish_at == original

    def test_failed_update_leaves_row_untouched(self, app, make_post) -> None:
        post = make_post(status=DRAFT, summary='')
        with pytest.raises(ValidationFailed):
            PostService.update_post(post.id, {'title': 'Mudou', 'status': PUBLISHED})

        db.session.expire_all()
        stored = db.session.get(Post, post.id)
        assert stored.title != 'Mudou'
        assert stored.status == DRAFT

    def test_missing_post(self, app) -> None:
        with pytest.raises(NotFoundError):
            PostService.get_post('nao-existe')

    def test_delete(self, app, make_post) -> None:
        post = make_post()
        PostService.delete_post(post.id)
        assert Post.get_by_id(post.id) is None

    def test_public_reads_only_see_published_posts(self, app, make_post) -> None:
        published = make_post()
        make_post(status=DRAFT)
        make_post(status=SCHEDULED)

        result = PostService.list_published()
        assert [post.id for post in result['items']] == [published.id]
        assert result['meta']['total_items'] == 1

    def test_published_post_counts_views(self, app, make_post) -> None:
        post = make_post()
        PostService.get_published_post(post.slug)
        PostService.get_published_post(post.slug)
        assert Post.get_by_id(post.id).views == 2

    def test_draft_is_not_publicly_readable(self, app, make_post) -> None:
        post = make_post(status=DRAFT)
        with pytest.raises(NotFoundError):
            PostService.get_published_post(post.slug)
