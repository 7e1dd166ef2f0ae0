"""
Tests for configuration loading.

Settings are layered: defaults, environment overrides, class attributes,
an optional YAML file and finally environment variables.
"""

import pytest
from flask import Flask

from config import DevelopmentConfig, ProductionConfig, TestingConfig, get_config
from config.config_constants import REQUIRED_ENV_VARS
from core.factory import create_app


class TestConfigSelection:
    """Choosing a configuration class."""

    def test_named_environments(self) -> None:
        assert get_config('testing') is TestingConfig
        assert get_config('Production') is ProductionConfig

    def test_unknown_environment_falls_back_to_development(self) -> None:
        assert get_config('staging-eu') is DevelopmentConfig


class TestConfigLoading:
    """Settings applied to the application."""

    def test_testing_defaults(self, app) -> None:
        assert app.config['TESTING'] is True
        assert app.config['RATELIMIT_ENABLED'] is False
        assert app.config['ENVIRONMENT'] == 'testing'
        assert 'script' not in app.config['SANITIZER_ALLOWED_TAGS']

    def test_yaml_file_overrides(self, tmp_path, monkeypatch) -> None:
        config_file = tmp_path / 'blog.yaml'
        config_file.write_text('POSTS_PER_PAGE: 5\nSANITIZER_ALLOWED_TAGS: [p, a]\nignored: 1\n',
                               encoding='utf-8')
        monkeypatch.setenv('BLOG_CONFIG_FILE', str(config_file))

        test_app = create_app('testing')

        assert test_app.config['POSTS_PER_PAGE'] == 5
        assert test_app.config['SANITIZER_ALLOWED_TAGS'] == frozenset(['p', 'a'])
        assert 'ignored' not in test_app.config

    def test_environment_variables_win(self, tmp_path, monkeypatch) -> None:
        config_file = tmp_path / 'blog.yaml'
        config_file.write_text('POSTS_PER_PAGE: 5\n', encoding='utf-8')
        monkeypatch.setenv('BLOG_CONFIG_FILE', str(config_file))
        monkeypatch.setenv('FLASK_POSTS_PER_PAGE', '7')
        monkeypatch.setenv('FLASK_SANITIZER_ALLOWED_TAGS', 'p,em')

        test_app = create_app('testing')

        assert test_app.config['POSTS_PER_PAGE'] == 7
        assert test_app.config['SANITIZER_ALLOWED_TAGS'] == frozenset(['p', 'em'])

    def test_production_requires_secrets(self, monkeypatch) -> None:
        for var in REQUIRED_ENV_VARS:
            monkeypatch.delenv(var, raising=False)

        with pytest.raises(ValueError) as exc_info:
            ProductionConfig.init_app(Flask(__name__))
        assert 'SECRET_KEY' in str(exc_info.value)

    def test_production_rejects_placeholder_secret(self, monkeypatch) -> None:
        monkeypatch.setenv('SECRET_KEY', 'changeme')
        monkeypatch.setenv('JWT_SECRET_KEY', 'a-real-and-long-jwt-secret')
        monkeypatch.setenv('DATABASE_URL', 'postgresql://blog@localhost/blog')

        with pytest.raises(ValueError):
            ProductionConfig.init_app(Flask(__name__))
