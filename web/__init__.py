"""Web application package for the countdown image server.

Provides the Flask app factory and routes in web_server.py.
This file ensures the 'web' directory is treated as a standard package so you can run:
    python -m web.web_server
"""

__all__ = ["web_server"]
