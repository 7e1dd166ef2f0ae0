"""
Test package for the Mente Tech blog.

Fixtures live in ``conftest.py``: an application configured for testing with
an in-memory SQLite database, a test client and CLI runner, users with and
without the admin role, bearer token headers and factories for categories
and posts in any lifecycle state.
"""
