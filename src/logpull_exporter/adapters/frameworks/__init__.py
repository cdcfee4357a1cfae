"""HTTP exposition adapters."""

from logpull_exporter.adapters.frameworks.asgi import create_asgi_app

__all__ = ["create_asgi_app"]
