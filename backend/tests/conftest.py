import os, sys, pytest
# Ensure the backend directory is on path so 'hrms' and 'tests' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from hrms import get_db
from tests.test_utils_seed import build_app


@pytest.fixture()
def app_instance():
    app = build_app()
    yield app
    get_db().close()


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()
