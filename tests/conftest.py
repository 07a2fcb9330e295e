"""
Pytest fixtures for the payroll engine.
"""

import pytest

from ph_payroll import create_app


@pytest.fixture
def app():
    app = create_app('testing')
    yield app


@pytest.fixture
def runner(app):
    return app.test_cli_runner()
