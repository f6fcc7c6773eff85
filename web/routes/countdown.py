"""Countdown image routes: static PNG and cached looping GIF."""

import logging

from flask import Blueprint, Response, current_app, request

from src.components.web import countdown_timer_handler
from src.utils.logging_utils import log_web_activity
from web.config import EXTENSION_KEY

logger = logging.getLogger(__name__)
countdown_bp = Blueprint('countdown', __name__)


def _image_response(payload: bytes, mimetype: str, status: int = 200) -> Response:
    response = Response(payload, status=status, mimetype=mimetype)
    response.headers.update(countdown_timer_handler.NO_CACHE_HEADERS)
    return response


@countdown_bp.route('/countdown.png')
@log_web_activity
def countdown_png():
    """Render the countdown as a still image. Example: /countdown.png?w=640&h=200"""
    resources = current_app.extensions[EXTENSION_KEY]
    render_request = countdown_timer_handler.image_request_from_args(request.args)

    try:
        payload = countdown_timer_handler.generate_countdown_image(resources.generator, render_request)
    except Exception as exc:
        logger.error(f"Error generating countdown image: {exc}", exc_info=True)
        return _image_response(b'', 'image/png', status=500)

    return _image_response(payload, 'image/png')


@countdown_bp.route('/countdown.gif')
@log_web_activity
def countdown_gif():
    """Render the countdown as a looping animation. Example: /countdown.gif?w=640&h=200&s=60"""
    resources = current_app.extensions[EXTENSION_KEY]
    render_request = countdown_timer_handler.animation_request_from_args(request.args)

    try:
        payload = countdown_timer_handler.generate_countdown_animation(resources.coordinator, render_request)
    except Exception as exc:
        # The coordinator already logged the traceback for the failed build
        logger.error(f"Error generating countdown animation {render_request.cache_key}: {exc}")
        return _image_response(b'', 'image/gif', status=500)

    return _image_response(payload, 'image/gif')
