# /tests/test_web_routes.py
"""
Tests for the Flask routes

Uses the app factory with injected generator / coordinator so builds can
be counted and made to fail.
"""

from datetime import timedelta
from io import BytesIO

import pytest
from PIL import Image

from src.components.countdown_time_source import CountdownClock
from src.components.countdown_timer_generator import CountdownImageGenerator
from src.components.render_coordinator import RenderCoordinator
from src.components.web.countdown_timer_handler import NO_CACHE_HEADERS, parse_int_arg
from web.web_server import create_app


class RecordingBuilder:
    """Animation builder stub that records requests"""

    def __init__(self, fail=False):
        self.requests = []
        self.fail = fail

    def __call__(self, request):
        self.requests.append(request)
        if self.fail:
            raise RuntimeError("render failed")
        return b'GIF89a-fake'


@pytest.fixture
def generator(target, one_second_before):
    return CountdownImageGenerator(CountdownClock(target), "TIME TO NEXT AUCTION", now_func=lambda: one_second_before)


@pytest.fixture
def builder():
    return RecordingBuilder()


@pytest.fixture
def app(test_config, generator, builder):
    coordinator = RenderCoordinator(builder, ttl_seconds=30)
    app = create_app(test_config, generator=generator, coordinator=coordinator)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def _assert_no_cache_headers(response):
    for header, value in NO_CACHE_HEADERS.items():
        assert response.headers[header] == value


class TestLiveness:
    """Test cases for / and /healthz"""

    def test_root_is_plain_text(self, client):
        response = client.get('/')
        assert response.status_code == 200
        assert response.mimetype == 'text/plain'
        assert response.get_data(as_text=True) == "OK - countdown image server running"

    def test_healthz_reports_cache_and_target(self, client):
        client.get('/countdown.gif')
        response = client.get('/healthz')

        assert response.status_code == 200
        payload = response.get_json()
        assert payload['status'] == 'ok'
        assert payload['target'] == '2026-01-31T10:30:00+02:00'
        assert payload['render_cache']['builds'] == 1
        assert payload['server']['port'] in (80, 3000)


class TestCountdownPng:
    """Test cases for the static image route"""

    def test_defaults(self, client):
        response = client.get('/countdown.png')

        assert response.status_code == 200
        assert response.mimetype == 'image/png'
        assert Image.open(BytesIO(response.data)).size == (640, 200)
        _assert_no_cache_headers(response)

    @pytest.mark.parametrize("query, size", [
        ('w=50&h=10', (320, 140)),
        ('w=9999&h=9999', (1200, 600)),
        ('w=abc&h=', (640, 200)),
        ('w=700&h=300', (700, 300)),
        ('w=%C2%B2&h=%E2%91%A0', (640, 200)),
        ('w=' + '9' * 5000 + '&h=-' + '9' * 5000, (1200, 140)),
    ])
    def test_dimensions_clamped(self, client, query, size):
        response = client.get(f'/countdown.png?{query}')
        assert response.status_code == 200
        assert Image.open(BytesIO(response.data)).size == size

    def test_render_failure_returns_empty_500(self, client, generator, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(generator, 'build_image', explode)
        response = client.get('/countdown.png')

        assert response.status_code == 500
        assert response.data == b''
        _assert_no_cache_headers(response)


class TestCountdownGif:
    """Test cases for the animation route"""

    def test_served_through_cache(self, client, builder):
        first = client.get('/countdown.gif?w=320&h=140&s=10')
        second = client.get('/countdown.gif?w=320&h=140&s=10')

        assert first.status_code == second.status_code == 200
        assert first.mimetype == 'image/gif'
        assert first.data == second.data == b'GIF89a-fake'
        assert len(builder.requests) == 1
        # The server-side cache never changes what clients are told
        _assert_no_cache_headers(first)
        _assert_no_cache_headers(second)

    @pytest.mark.parametrize("query, key", [
        ('', (640, 200, 60)),
        ('w=50&h=9999&s=5', (320, 600, 10)),
        ('w=9999&s=500', (1200, 200, 120)),
        ('s=junk', (640, 200, 60)),
    ])
    def test_parameters_clamped(self, client, builder, query, key):
        client.get(f'/countdown.gif?{query}')
        assert builder.requests[-1].cache_key == key

    def test_unusable_digits_fall_back_or_clamp(self, client, builder):
        response = client.get('/countdown.gif?w=%C2%B2&s=' + '9' * 5000)

        assert response.status_code == 200
        assert builder.requests[-1].cache_key == (640, 200, 120)

    def test_build_failure_returns_empty_500(self, test_config, generator):
        failing = RecordingBuilder(fail=True)
        app = create_app(test_config, generator=generator, coordinator=RenderCoordinator(failing, ttl_seconds=30))
        client = app.test_client()

        response = client.get('/countdown.gif')
        assert response.status_code == 500
        assert response.data == b''
        _assert_no_cache_headers(response)

        client.get('/countdown.gif')
        assert len(failing.requests) == 2

    def test_real_animation_end_to_end(self, test_config, target):
        """The default stack renders a decodable 10-frame looping GIF"""
        generator = CountdownImageGenerator(
            CountdownClock(target), "TIME TO NEXT AUCTION",
            now_func=lambda: target - timedelta(minutes=10),
        )
        app = create_app(test_config, generator=generator)
        response = app.test_client().get('/countdown.gif?w=320&h=140&s=10')

        assert response.status_code == 200
        image = Image.open(BytesIO(response.data))
        assert image.n_frames == 10
        assert image.info.get('loop') == 0


class TestParseIntArg:
    """Test cases for lenient integer parsing"""

    @pytest.mark.parametrize("raw, expected", [
        ('640', 640),
        (' 320 ', 320),
        ('640px', 640),
        ('-5', -5),
        ('+7', 7),
        ('abc', 99),
        ('', 99),
        ('\u00b2', 99),
        ('\u2460', 99),
        ('\u0663\u0662\u0660', 99),
        ('9' * 5000, 999999),
        ('-' + '9' * 5000, -999999),
    ])
    def test_values(self, raw, expected):
        assert parse_int_arg({'w': raw}, 'w', 99) == expected

    def test_missing(self):
        assert parse_int_arg({}, 'w', 99) == 99
