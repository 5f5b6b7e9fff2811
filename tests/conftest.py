import pytest

import area_invariance
from main import create_app


@pytest.fixture
def app():
    app = create_app()
    app.config.update(TESTING=True)
    yield app
    area_invariance._CANVASES.clear()


@pytest.fixture
def client(app):
    return app.test_client()
