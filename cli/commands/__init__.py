from .blog import blog_cli

__all__ = ['blog_cli']
