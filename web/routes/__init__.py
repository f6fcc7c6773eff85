"""Web server route blueprints.

This package contains Flask blueprints for organizing routes by feature area.
"""

from .utilities import utilities_bp
from .countdown import countdown_bp

__all__ = [
    'utilities_bp',
    'countdown_bp',
]


def register_all_blueprints(app):
    """Register all route blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(utilities_bp)
    app.register_blueprint(countdown_bp)
