"""
Tests for the public read API and the HTML pages.

Only published posts may ever be visible to visitors, whichever surface
they use.
"""

from datetime import timedelta

from core.utils.date_time import utcnow
from models import Post


class TestPublicPostsApi:
    """JSON endpoints under /api/posts."""

    def test_only_published_posts_are_listed(self, client, make_post) -> None:
        published = make_post()
        make_post(status=Post.STATUS_DRAFT)
        make_post(status=Post.STATUS_SCHEDULED)
        make_post(status=Post.STATUS_SCHEDULED, scheduled_for=utcnow() - timedelta(minutes=1))

        response = client.get('/api/posts')
        assert response.status_code == 200
        data = response.get_json()
        assert [item['id'] for item in data['items']] == [published.id]
        assert data['meta']['total_items'] == 1

    def test_newest_publication_first(self, client, make_post) -> None:
        older = make_post(publish_at=utcnow() - timedelta(days=10))
        newer = make_post(publish_at=utcnow() - timedelta(days=1))

        items = client.get('/api/posts').get_json()['items']
        assert [item['id'] for item in items] == [newer.id, older.id]

    def test_editor_fields_are_hidden(self, client, make_post) -> None:
        make_post()
        item = client.get('/api/posts').get_json()['items'][0]
        assert 'scheduled_for' not in item
        assert 'overdue' not in item
        assert 'body_html' not in item

    def test_search(self, client, make_post) -> None:
        match = make_post(title='Chatbots para PMEs')
        make_post(title='Dashboards com IA', tags=['bi'])

        items = client.get('/api/posts?q=chatbot').get_json()['items']
        assert [item['id'] for item in items] == [match.id]

    def test_pagination(self, client, make_post) -> None:
        for _ in range(3):
            make_post()
        data = client.get('/api/posts?per_page=2&page=2').get_json()
        assert len(data['items']) == 1
        assert data['meta']['has_prev'] is True
        assert data['meta']['has_next'] is False

    def test_invalid_page(self, client) -> None:
        response = client.get('/api/posts?page=0')
        assert response.status_code == 400

    def test_get_published_post(self, client, make_post) -> None:
        post = make_post(body_html='<p>Conteúdo publicado com segurança.</p><script>x()</script>')
        response = client.get(f'/api/posts/{post.slug}')
        assert response.status_code == 200
        data = response.get_json()
        assert data['body_html'] == '<p>Conteúdo publicado com segurança.</p>'
        assert data['views'] == 1
        assert 'related_posts' in data

    def test_related_posts_share_the_category(self, client, make_post) -> None:
        post = make_post()
        sibling = make_post()
        make_post(status=Post.STATUS_DRAFT)

        related = client.get(f'/api/posts/{post.slug}').get_json()['related_posts']
        assert [item['id'] for item in related] == [sibling.id]

    def test_unpublished_post_is_not_found(self, client, make_post) -> None:
        draft = make_post(status=Post.STATUS_DRAFT)
        scheduled = make_post(status=Post.STATUS_SCHEDULED)
        assert client.get(f'/api/posts/{draft.slug}').status_code == 404
        assert client.get(f'/api/posts/{scheduled.slug}').status_code == 404
        assert client.get('/api/posts/nao-existe').get_json()['code'] == 'NOT_FOUND'

    def test_popular_posts(self, client, make_post) -> None:
        make_post(views=5)
        top = make_post(views=50)
        make_post(status=Post.STATUS_DRAFT, views=500)

        items = client.get('/api/posts/popular').get_json()['items']
        assert items[0]['id'] == top.id
        assert len(items) == 2

    def test_categories(self, client, category, make_post) -> None:
        make_post()
        make_post(status=Post.STATUS_DRAFT)
        items = client.get('/api/categories').get_json()['items']
        assert items == [dict(items[0], slug='automacao-processos', post_count=1)]

    def test_category_posts(self, client, category, make_post) -> None:
        post = make_post()
        data = client.get(f'/api/categories/{category.slug}/posts').get_json()
        assert data['category']['slug'] == category.slug
        assert [item['id'] for item in data['items']] == [post.id]

    def test_unknown_category(self, client) -> None:
        response = client.get('/api/categories/nada/posts')
        assert response.status_code == 404

    def test_unknown_api_route(self, client) -> None:
        response = client.get('/api/nada')
        assert response.status_code == 404
        assert response.get_json()['code'] == 'NOT_FOUND'

    def test_security_headers(self, client) -> None:
        response = client.get('/api/posts')
        assert response.headers['X-Content-Type-Options'] == 'nosniff'
        assert response.headers['X-Frame-Options'] == 'DENY'

    def test_request_id_is_echoed(self, client) -> None:
        response = client.get('/api/posts', headers={'X-Request-ID': 'abc123'})
        assert response.headers['X-Request-ID'] == 'abc123'


class TestPublicPages:
    """Server-rendered pages."""

    def test_home_lists_published_posts(self, client, make_post) -> None:
        make_post(title='Artigo visível')
        make_post(title='Rascunho secreto', status=Post.STATUS_DRAFT)

        response = client.get('/')
        assert response.status_code == 200
        page = response.get_data(as_text=True)
        assert 'Artigo visível' in page
        assert 'Rascunho secreto' not in page

    def test_home_search(self, app, client, make_post) -> None:
        app.config['POPULAR_POSTS_LIMIT'] = 0
        make_post(title='Chatbots para PMEs')
        make_post(title='Dashboards com IA')

        page = client.get('/?q=chatbots').get_data(as_text=True)
        assert 'Chatbots para PMEs' in page
        assert 'Dashboards com IA' not in page

    def test_post_page_renders_sanitized_body(self, client, make_post) -> None:
        post = make_post(body_html='<p>Texto <strong>seguro</strong></p><script>alert(1)</script>')

        response = client.get(f'/post/{post.slug}')
        assert response.status_code == 200
        page = response.get_data(as_text=True)
        assert '<strong>seguro</strong>' in page
        assert 'alert(1)' not in page

    def test_draft_page_is_not_found(self, client, make_post) -> None:
        post = make_post(status=Post.STATUS_DRAFT)
        response = client.get(f'/post/{post.slug}')
        assert response.status_code == 404
        assert 'Página não encontrada' in response.get_data(as_text=True)

    def test_category_page(self, client, category, make_post) -> None:
        make_post(title='Automatizando o financeiro')
        response = client.get(f'/category/{category.slug}')
        assert response.status_code == 200
        assert 'Automatizando o financeiro' in response.get_data(as_text=True)

    def test_unknown_category_page(self, client) -> None:
        assert client.get('/category/nada').status_code == 404

    def test_unknown_page_renders_html(self, client) -> None:
        response = client.get('/nada/aqui')
        assert response.status_code == 404
        assert response.content_type.startswith('text/html')
