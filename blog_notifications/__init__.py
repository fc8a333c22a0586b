"""Notification delivery and digest core of the blog backend.

The package is laid out in layers: ``domain`` holds entities and pure
policy helpers, ``application`` the use cases, ``infrastructure`` the
SQLAlchemy, SendGrid and websocket adapters and ``interfaces`` the FastAPI
routers.
"""
