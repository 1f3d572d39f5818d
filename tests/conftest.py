"""Pytest configuration and fixtures."""

import dataclasses

import pytest
from fastapi.testclient import TestClient

from shortlinks import config, crud, database
from shortlinks.codes import CodeGenerator
from shortlinks.main import create_app
from shortlinks.registry import Registry
from shortlinks.resolver import Resolver


@pytest.fixture
def settings(tmp_path):
    """Dev settings pointed at a throwaway SQLite file, no demo links."""
    return dataclasses.replace(
        config.load_settings(),
        environment="dev",
        database_url=f"sqlite:///{tmp_path / 'links.db'}",
        port=3000,
        preview_timeout=2.0,
        code_attempts=3,
        seed_links=False,
    )


@pytest.fixture
def store(settings):
    engine = database.make_engine(settings.database_url)
    database.init_db(engine)
    yield crud.LinkStore(database.make_session_factory(engine))
    engine.dispose()


@pytest.fixture
def registry(store):
    return Registry(store, CodeGenerator())


@pytest.fixture
def resolver(store):
    return Resolver(store)


@pytest.fixture
def client(settings, store):
    with TestClient(create_app(settings, store)) as c:
        yield c


class FixedCodes(CodeGenerator):
    """Hands out a scripted sequence of codes."""

    def __init__(self, *codes):
        super().__init__()
        self.codes = list(codes)

    def generate(self) -> str:
        return self.codes.pop(0)


@pytest.fixture
def fixed_codes():
    return FixedCodes
