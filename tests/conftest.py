"""Shared fixtures: in-memory SQLite store, fake lookup client, test app."""

from datetime import date
from typing import List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from songlib.core.config import Settings
from songlib.core.database import Database
from songlib.core.lookup import ExternalSongData
from songlib.core.models import Group, Song
from songlib.main import create_app


class FakeLookup:
    """Lookup client stand-in returning a fixed result and recording calls."""

    def __init__(self, data: Optional[ExternalSongData] = None):
        self.data = data
        self.calls: List[Tuple[str, str]] = []

    @property
    def enabled(self) -> bool:
        return True

    def fetch(self, group: str, song: str) -> Optional[ExternalSongData]:
        self.calls.append((group, song))
        return self.data


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_schema()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    session = database.session_factory()
    yield session
    session.close()


@pytest.fixture
def lookup():
    return FakeLookup()


@pytest.fixture
def app(lookup):
    settings = Settings(DATABASE_URL="sqlite://", API_BASE_URL="", LOG_LEVEL="INFO")
    return create_app(settings, lookup_client=lookup)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def app_session(app, client):
    """Session bound to the running test app's database."""
    session = app.state.db.session_factory()
    yield session
    session.close()


def add_song(
    session,
    group_name: str,
    title: str,
    text: str = "",
    link: str = "",
    release_date: Optional[date] = None,
) -> Song:
    group = session.query(Group).filter_by(name=group_name).first()
    if group is None:
        group = Group(name=group_name)
        session.add(group)
        session.flush()
    song = Song(group_id=group.id, song=title, text=text, link=link, release_date=release_date)
    session.add(song)
    session.commit()
    return song
