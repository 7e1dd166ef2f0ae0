"""
Tests for the authentication and administration API.

Covers sign-in, the admin capability checks, post editing with field-level
errors, previews, categories, the publication trigger endpoint and the
inbox.
"""

from datetime import timedelta

from core.utils.date_time import utcnow
from extensions import db
from models import Category, ContactMessage, Post
from tests.conftest import ADMIN_PASSWORD


class TestAuthRoutes:
    """Sign-in and token checks."""

    def test_login(self, client, admin_user) -> None:
        response = client.post('/api/auth/login', json={
            'email': 'ADMIN@mentetech.com.br',
            'password': ADMIN_PASSWORD
        })
        assert response.status_code == 200
        data = response.get_json()
        assert data['token']
        assert data['user']['is_admin'] is True
        assert response.headers['Cache-Control'].startswith('no-store')

    def test_login_invalid_credentials(self, client, admin_user) -> None:
        response = client.post('/api/auth/login', json={
            'email': 'admin@mentetech.com.br',
            'password': 'wrongpass'
        })
        assert response.status_code == 401
        assert response.get_json()['code'] == 'INVALID_CREDENTIALS'

    def test_login_missing_fields(self, client) -> None:
        response = client.post('/api/auth/login', json={'email': 'admin@mentetech.com.br'})
        assert response.status_code == 400
        assert 'password' in response.get_json()['fields']

    def test_me(self, client, admin_headers) -> None:
        response = client.get('/api/auth/me', headers=admin_headers)
        assert response.status_code == 200
        assert response.get_json()['is_admin'] is True

    def test_missing_token(self, client) -> None:
        response = client.get('/api/admin/posts')
        assert response.status_code == 401
        assert response.get_json()['code'] == 'AUTH_REQUIRED'

    def test_invalid_token(self, client) -> None:
        response = client.get('/api/admin/posts', headers={'Authorization': 'Bearer not-a-token'})
        assert response.status_code == 401
        assert response.get_json()['code'] == 'INVALID_TOKEN'

    def test_non_admin_is_forbidden(self, client, user_headers) -> None:
        response = client.get('/api/admin/posts', headers=user_headers)
        assert response.status_code == 403
        assert response.get_json()['code'] == 'ADMIN_REQUIRED'

    def test_demoted_admin_loses_access(self, client, admin_user, admin_headers) -> None:
        admin_user.role = 'user'
        db.session.commit()
        response = client.get('/api/admin/posts', headers=admin_headers)
        assert response.status_code == 403


class TestAdminPosts:
    """Post editing endpoints."""

    def test_create_draft(self, client, admin_headers) -> None:
        response = client.post('/api/admin/posts', json={'title': 'Ideia para depois'},
                               headers=admin_headers)
        assert response.status_code == 201
        data = response.get_json()
        assert data['status'] == 'DRAFT'
        assert data['slug'] == 'ideia-para-depois'
        assert data['is_published'] is False

    def test_create_published(self, client, admin_headers, post_payload) -> None:
        response = client.post('/api/admin/posts', json=dict(post_payload, status='PUBLISHED'),
                               headers=admin_headers)
        assert response.status_code == 201
        data = response.get_json()
        assert data['status'] == 'PUBLISHED'
        assert data['publish_at'] is not None
        assert '<h2>' in data['body_html']

    def test_create_with_missing_content_reports_fields(self, client, admin_headers) -> None:
        response = client.post('/api/admin/posts', json={'title': 'Incompleto', 'status': 'PUBLISHED'},
                               headers=admin_headers)
        assert response.status_code == 400
        data = response.get_json()
        assert data['code'] == 'VALIDATION_ERROR'
        assert set(data['fields']) == {'summary', 'body', 'category_id'}
        assert data['field_codes']['summary'] == ['required']
        assert Post.query.count() == 0

    def test_schedule_in_the_past(self, client, admin_headers, post_payload) -> None:
        payload = dict(post_payload, status='SCHEDULED',
                       scheduled_for=(utcnow() - timedelta(hours=1)).isoformat())
        response = client.post('/api/admin/posts', json=payload, headers=admin_headers)
        assert response.status_code == 400
        assert response.get_json()['field_codes']['scheduled_for'] == ['must_be_future']

    def test_schedule(self, client, admin_headers, post_payload) -> None:
        payload = dict(post_payload, status='SCHEDULED', scheduled_for='2999-01-01T09:00:00-03:00')
        response = client.post('/api/admin/posts', json=payload, headers=admin_headers)
        assert response.status_code == 201
        assert response.get_json()['scheduled_for'] == '2999-01-01T12:00:00+00:00'

    def test_malformed_datetime(self, client, admin_headers) -> None:
        response = client.post('/api/admin/posts', json={'title': 'X', 'scheduled_for': 'amanhã'},
                               headers=admin_headers)
        assert response.status_code == 400
        assert 'scheduled_for' in response.get_json()['fields']

    def test_body_must_be_json_object(self, client, admin_headers) -> None:
        response = client.post('/api/admin/posts', data='[]', headers=admin_headers)
        assert response.status_code == 400
        assert '_schema' in response.get_json()['fields']

    def test_list_filters_by_status(self, client, admin_headers, make_post) -> None:
        make_post()
        draft = make_post(status=Post.STATUS_DRAFT)

        response = client.get('/api/admin/posts?status=DRAFT', headers=admin_headers)
        assert response.status_code == 200
        data = response.get_json()
        assert [item['id'] for item in data['items']] == [draft.id]
        assert data['meta']['total_items'] == 1

    def test_list_rejects_unknown_status(self, client, admin_headers) -> None:
        response = client.get('/api/admin/posts?status=ARCHIVED', headers=admin_headers)
        assert response.status_code == 400

    def test_list_shows_overdue_flag(self, client, admin_headers, make_post) -> None:
        make_post(status=Post.STATUS_SCHEDULED, scheduled_for=utcnow() - timedelta(minutes=1))
        response = client.get('/api/admin/posts', headers=admin_headers)
        assert response.get_json()['items'][0]['overdue'] is True

    def test_get_missing_post(self, client, admin_headers) -> None:
        response = client.get('/api/admin/posts/nao-existe', headers=admin_headers)
        assert response.status_code == 404
        assert response.get_json()['code'] == 'NOT_FOUND'

    def test_update_partial(self, client, admin_headers, make_post) -> None:
        post = make_post()
        response = client.patch(f'/api/admin/posts/{post.id}', json={'tags': ['novo']},
                                headers=admin_headers)
        assert response.status_code == 200
        data = response.get_json()
        assert data['tags'] == ['novo']
        assert data['title'] == post.title

    def test_status_endpoint(self, client, admin_headers, make_post) -> None:
        post = make_post()
        response = client.post(f'/api/admin/posts/{post.id}/status', json={'status': 'DRAFT'},
                               headers=admin_headers)
        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'DRAFT'
        assert data['publish_at'] is not None

    def test_status_endpoint_requires_status(self, client, admin_headers, make_post) -> None:
        post = make_post()
        response = client.post(f'/api/admin/posts/{post.id}/status', json={}, headers=admin_headers)
        assert response.status_code == 400
        assert response.get_json()['field_codes'] == {'status': ['required']}

    def test_delete(self, client, admin_headers, make_post) -> None:
        post = make_post()
        response = client.delete(f'/api/admin/posts/{post.id}', headers=admin_headers)
        assert response.status_code == 204
        assert Post.get_by_id(post.id) is None

    def test_preview_is_not_stored(self, client, admin_headers) -> None:
        response = client.post('/api/admin/posts/preview', json={
            'body': '**forte** <script>alert(1)</script>'
        }, headers=admin_headers)
        assert response.status_code == 200
        html = response.get_json()['html']
        assert '<strong>forte</strong>' in html
        assert '<script' not in html
        assert Post.query.count() == 0

    def test_preview_unknown_mode(self, client, admin_headers) -> None:
        response = client.post('/api/admin/posts/preview', json={'body': 'x', 'content_mode': 'rst'},
                               headers=admin_headers)
        assert response.status_code == 400


class TestAdminCategories:
    """Category endpoints."""

    def test_create(self, client, admin_headers) -> None:
        response = client.post('/api/admin/categories', json={
            'name': 'Atendimento ao Cliente',
            'color': '#7C4DFF'
        }, headers=admin_headers)
        assert response.status_code == 201
        data = response.get_json()
        assert data['slug'] == 'atendimento-ao-cliente'
        assert data['color'] == '#7c4dff'

    def test_duplicate_name(self, client, admin_headers, category) -> None:
        response = client.post('/api/admin/categories', json={'name': category.name.upper()},
                               headers=admin_headers)
        assert response.status_code == 400
        assert 'name' in response.get_json()['fields']

    def test_invalid_color(self, client, admin_headers) -> None:
        response = client.post('/api/admin/categories', json={'name': 'Dados', 'color': 'azul'},
                               headers=admin_headers)
        assert response.status_code == 400
        assert 'color' in response.get_json()['fields']

    def test_list_counts_published_posts(self, client, admin_headers, category, make_post) -> None:
        make_post()
        make_post(status=Post.STATUS_DRAFT)
        response = client.get('/api/admin/categories', headers=admin_headers)
        assert response.get_json()['items'][0]['post_count'] == 1

    def test_delete_detaches_posts(self, client, admin_headers, category, make_post) -> None:
        post = make_post()
        response = client.delete(f'/api/admin/categories/{category.id}', headers=admin_headers)
        assert response.status_code == 204

        db.session.expire_all()
        assert db.session.get(Category, category.id) is None
        assert db.session.get(Post, post.id).category_id is None


class TestAutoPublishEndpoint:
    """The publication trigger over HTTP."""

    def test_admin_trigger(self, client, admin_headers, make_post) -> None:
        make_post(status=Post.STATUS_SCHEDULED, scheduled_for=utcnow() - timedelta(minutes=1))
        response = client.post('/api/admin/auto-publish', headers=admin_headers)
        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['published_count'] == 1

    def test_scheduler_key(self, client, make_post) -> None:
        make_post(status=Post.STATUS_SCHEDULED, scheduled_for=utcnow() - timedelta(minutes=1))
        response = client.post('/api/admin/auto-publish',
                               headers={'X-Scheduler-Key': 'test-scheduler-key'})
        assert response.status_code == 200
        assert response.get_json()['published_count'] == 1

    def test_wrong_scheduler_key(self, client) -> None:
        response = client.post('/api/admin/auto-publish', headers={'X-Scheduler-Key': 'errada'})
        assert response.status_code == 401

    def test_regular_user_refused(self, client, user_headers) -> None:
        response = client.post('/api/admin/auto-publish', headers=user_headers)
        assert response.status_code == 403

    def test_anonymous_refused(self, client) -> None:
        response = client.post('/api/admin/auto-publish')
        assert response.status_code == 401


class TestInbox:
    """Contact messages and newsletter statistics."""

    def test_contact_messages(self, client, admin_headers) -> None:
        db.session.add(ContactMessage(name='Maria', email='maria@example.com', subject='Orçamento',
                                      message='Gostaria de um orçamento.', status='pending'))
        db.session.commit()

        response = client.get('/api/admin/contact-messages?status=pending', headers=admin_headers)
        assert response.status_code == 200
        items = response.get_json()['items']
        assert len(items) == 1
        assert items[0]['email'] == 'maria@example.com'

    def test_newsletter_stats(self, client, admin_headers) -> None:
        response = client.get('/api/admin/newsletter/stats', headers=admin_headers)
        assert response.status_code == 200
        assert response.get_json()['total'] == 0
