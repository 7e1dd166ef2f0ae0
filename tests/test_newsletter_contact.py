"""
Tests for newsletter subscriptions and the contact form.

Outgoing email goes through ``requests.post`` to the email API, which is
patched in every test that enables notifications.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from core.errors import ValidationFailed
from models import ContactMessage, Subscriber
from services.contact_service import ContactService
from services.newsletter_service import REASON_DUPLICATE, REASON_INVALID, NewsletterService

CONTACT_FORM = {
    'name': 'Maria Silva',
    'email': 'Maria@Example.com',
    'phone': '(11) 99999-0000',
    'subject': 'Orçamento de chatbot',
    'message': 'Olá! Gostaria de um orçamento para um chatbot de atendimento.',
}


@pytest.fixture
def email_api(app):
    """Enable contact notifications and capture the email API calls."""
    app.config['CONTACT_EMAIL_API_KEY'] = 'test-email-key'
    response = MagicMock()
    response.raise_for_status.return_value = None
    with patch('services.contact_service.requests.post', return_value=response) as mock_post:
        yield mock_post


class TestNewsletterService:
    """Subscriptions through the service."""

    def test_subscribe(self, app) -> None:
        result = NewsletterService.subscribe_email(' Leitor@Example.com ', name='Leitor')
        assert result['success'] is True
        assert result['subscriber']['email'] == 'leitor@example.com'
        assert result['subscriber']['confirmed'] is True

    def test_invalid_email(self, app) -> None:
        result = NewsletterService.subscribe_email('sem-arroba')
        assert result['success'] is False
        assert result['reason'] == REASON_INVALID

    def test_duplicate(self, app) -> None:
        NewsletterService.subscribe_email('leitor@example.com')
        result = NewsletterService.subscribe_email('LEITOR@example.com')
        assert result['success'] is False
        assert result['reason'] == REASON_DUPLICATE

    def test_contact_opt_in_is_confirmed_by_subscribing(self, app) -> None:
        ContactService.submit(dict(CONTACT_FORM, wants_newsletter=True))
        assert Subscriber.get_by_email('maria@example.com').confirmed is False

        result = NewsletterService.subscribe_email('maria@example.com')
        assert result['success'] is True
        assert Subscriber.query.count() == 1
        assert Subscriber.get_by_email('maria@example.com').confirmed is True

    def test_stats(self, app) -> None:
        NewsletterService.subscribe_email('um@example.com')
        ContactService.submit(dict(CONTACT_FORM, wants_newsletter=True))

        stats = NewsletterService.get_stats()
        assert stats['total'] == 2
        assert stats['confirmed'] == 1
        assert stats['unconfirmed'] == 1
        assert stats['by_source'] == {'newsletter': 1, 'contact': 1}


class TestNewsletterRoutes:
    """POST /api/newsletter/subscribe."""

    def test_subscribe(self, client) -> None:
        response = client.post('/api/newsletter/subscribe', json={'email': 'leitor@example.com'})
        assert response.status_code == 201
        assert response.get_json()['subscriber']['source'] == 'newsletter'

    def test_invalid_email(self, client) -> None:
        response = client.post('/api/newsletter/subscribe', json={'email': 'invalido'})
        assert response.status_code == 400

    def test_missing_email(self, client) -> None:
        response = client.post('/api/newsletter/subscribe', json={})
        assert response.status_code == 400
        assert 'email' in response.get_json()['fields']

    def test_duplicate(self, client) -> None:
        client.post('/api/newsletter/subscribe', json={'email': 'leitor@example.com'})
        response = client.post('/api/newsletter/subscribe', json={'email': 'leitor@example.com'})
        assert response.status_code == 409


class TestContactService:
    """Contact messages and owner notification."""

    def test_validation_collects_every_field(self, app) -> None:
        with pytest.raises(ValidationFailed) as exc_info:
            ContactService.submit({'name': 'Jo', 'email': 'invalido', 'subject': '', 'message': 'curta'})
        codes = exc_info.value.codes
        assert codes['name'] == ['too_short']
        assert codes['email'] == ['invalid']
        assert codes['subject'] == ['required']
        assert codes['message'] == ['too_short']
        assert 'phone' not in codes
        assert ContactMessage.query.count() == 0

    def test_message_stays_pending_without_email_api(self, app) -> None:
        with patch('services.contact_service.requests.post') as mock_post:
            contact = ContactService.submit(CONTACT_FORM)
        mock_post.assert_not_called()
        assert contact.status == ContactMessage.STATUS_PENDING
        assert contact.email_sent is False
        assert contact.email == 'maria@example.com'

    def test_owner_and_sender_are_emailed(self, app, email_api) -> None:
        contact = ContactService.submit(CONTACT_FORM)

        assert contact.status == ContactMessage.STATUS_NOTIFIED
        assert contact.email_sent is True
        assert email_api.call_count == 2

        owner_call, sender_call = email_api.call_args_list
        assert owner_call.kwargs['json']['to'] == ['contato@mentetech.com.br']
        assert owner_call.kwargs['headers']['Authorization'] == 'Bearer test-email-key'
        assert sender_call.kwargs['json']['to'] == ['maria@example.com']

    def test_email_content_is_escaped(self, app, email_api) -> None:
        ContactService.submit(dict(CONTACT_FORM, name='<b>Maria</b>'))
        html = email_api.call_args_list[0].kwargs['json']['html']
        assert '<b>Maria</b>' not in html
        assert '&lt;b&gt;Maria&lt;/b&gt;' in html

    def test_email_failure_is_recorded(self, app, email_api) -> None:
        email_api.side_effect = requests.ConnectionError('unreachable')

        contact = ContactService.submit(CONTACT_FORM)

        assert contact.status == ContactMessage.STATUS_FAILED
        assert contact.email_sent is False
        assert email_api.call_count == 1
        assert ContactMessage.query.count() == 1

    def test_opt_in_does_not_duplicate_subscribers(self, app) -> None:
        NewsletterService.subscribe_email('maria@example.com')
        ContactService.submit(dict(CONTACT_FORM, wants_newsletter=True))
        subscriber = Subscriber.get_by_email('maria@example.com')
        assert Subscriber.query.count() == 1
        assert subscriber.source == 'newsletter'


class TestContactRoutes:
    """POST /api/contact."""

    def test_send(self, client, email_api) -> None:
        response = client.post('/api/contact', json=CONTACT_FORM)
        assert response.status_code == 201
        data = response.get_json()
        assert data['success'] is True
        assert data['email_sent'] is True

    def test_invalid(self, client) -> None:
        response = client.post('/api/contact', json={'name': 'Maria'})
        assert response.status_code == 400
        assert set(response.get_json()['fields']) == {'email', 'subject', 'message'}
