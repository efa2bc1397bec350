from sqlalchemy import inspect

from app.core import database
from app.core.config import Environment, settings


def test_create_db_uses_shared_engine():
    database.create_db()

    tables = inspect(database.engine).get_table_names()
    assert {'profiles', 'event_staff', 'tickets', 'ticket_checkins'} <= set(tables)
    assert database.get_session_factory().kw['bind'] is database.engine


def test_statement_timeout_follows_request_timeout(monkeypatch):
    assert database._connect_args() == {}

    monkeypatch.setattr(settings, 'ENVIRONMENT', Environment.PRODUCTION)
    monkeypatch.setattr(settings, 'CHECK_IN_TIMEOUT_SECONDS', 2.5)

    assert database._connect_args() == {'options': '-c statement_timeout=2500'}
