"""Unit tests for the song service (create, text, partial update, delete)."""

from datetime import date

import pytest

from songlib.core.errors import (
    EnrichmentError,
    InvalidDateError,
    InvalidVerseError,
    SongNotFoundError,
    SongTextNotFoundError,
)
from songlib.core.lookup import ExternalSongData
from songlib.core.models import Group, Song
from songlib.core.songs import SongService, split_verses

from conftest import FakeLookup, add_song

LYRICS = "First verse line\nsecond line\n\nSecond verse\n\nThird verse"


def test_split_verses() -> None:
    assert split_verses(LYRICS) == ["First verse line\nsecond line", "Second verse", "Third verse"]
    assert split_verses("a\r\n\r\nb") == ["a", "b"]
    assert split_verses("single") == ["single"]


def test_create_without_enrichment(session) -> None:
    service = SongService(session, FakeLookup(None))

    record = service.create("Muse", "Starlight")

    assert record.id is not None
    assert record.group == "Muse"
    assert record.song == "Starlight"
    assert record.text == ""
    assert record.link == ""
    assert record.release_date is None


def test_create_with_enrichment(session) -> None:
    lookup = FakeLookup(ExternalSongData(release_date="2006-09-04", text=LYRICS, link="https://youtu.be/x"))
    service = SongService(session, lookup)

    record = service.create("Muse", "Starlight")

    assert lookup.calls == [("Muse", "Starlight")]
    assert record.release_date == date(2006, 9, 4)
    assert record.text == LYRICS
    assert record.link == "https://youtu.be/x"
    stored = session.get(Song, record.id)
    assert stored.release_date == date(2006, 9, 4)


def test_create_with_empty_external_date(session) -> None:
    service = SongService(session, FakeLookup(ExternalSongData(release_date="", text="la", link="")))

    record = service.create("Muse", "Starlight")

    assert record.release_date is None
    assert record.text == "la"


def test_create_with_bad_external_date(session) -> None:
    service = SongService(session, FakeLookup(ExternalSongData(release_date="04.09.2006")))

    with pytest.raises(EnrichmentError):
        service.create("Muse", "Starlight")

    assert session.query(Song).count() == 0


def test_create_without_lookup_client(session) -> None:
    record = SongService(session).create("Muse", "Starlight")
    assert record.group == "Muse"


def test_create_reuses_existing_group(session) -> None:
    service = SongService(session, FakeLookup(None))

    first = service.create("Muse", "Starlight")
    second = service.create("Muse", "Uprising")
    service.create("Queen", "Bohemian Rhapsody")

    groups = session.query(Group).filter_by(name="Muse").all()
    assert len(groups) == 1
    first_song = session.get(Song, first.id)
    second_song = session.get(Song, second.id)
    assert first_song.group_id == second_song.group_id == groups[0].id
    assert session.query(Group).count() == 2


def test_read_text_full_and_verse(session) -> None:
    song = add_song(session, "Muse", "Starlight", text=LYRICS)
    service = SongService(session)

    assert service.read_text(song.id) == LYRICS
    assert service.read_text(song.id, "") == LYRICS
    assert service.read_text(song.id, "1") == "First verse line\nsecond line"
    assert service.read_text(song.id, "3") == "Third verse"


@pytest.mark.parametrize("verse", ["0", "4", "-1", "two", "1_0", " 2 ", "\u0662", "99999999999999999999999"])
def test_read_text_invalid_verse(session, verse) -> None:
    song = add_song(session, "Muse", "Starlight", text=LYRICS)

    with pytest.raises(InvalidVerseError):
        SongService(session).read_text(song.id, verse)


def test_read_text_not_found(session) -> None:
    with pytest.raises(SongNotFoundError):
        SongService(session).read_text(999)


def test_read_text_empty_text(session) -> None:
    song = add_song(session, "Muse", "Starlight")

    with pytest.raises(SongTextNotFoundError):
        SongService(session).read_text(song.id)


def test_update_partial_leaves_other_fields(session) -> None:
    song = add_song(
        session, "Muse", "Starlight",
        text=LYRICS, link="https://a", release_date=date(2006, 9, 4)
    )
    service = SongService(session)

    record = service.update(song.id, song="Starlight (Live)", text="", link=None)

    assert record.song == "Starlight (Live)"
    assert record.group == "Muse"
    assert record.text == LYRICS
    assert record.link == "https://a"
    assert record.release_date == date(2006, 9, 4)


def test_update_all_fields(session) -> None:
    song = add_song(session, "Muse", "Starlight")
    service = SongService(session)

    record = service.update(
        song.id,
        group="Queen",
        song="Bohemian Rhapsody",
        release_date="1975-10-31",
        text="Is this the real life?",
        link="https://b"
    )

    assert record.group == "Queen"
    assert record.song == "Bohemian Rhapsody"
    assert record.release_date == date(1975, 10, 31)
    assert record.text == "Is this the real life?"
    assert record.link == "https://b"
    stored = session.get(Song, song.id)
    assert stored.group.name == "Queen"


def test_update_invalid_date_aborts(session) -> None:
    song = add_song(session, "Muse", "Starlight", text=LYRICS)
    song_id = song.id
    service = SongService(session)

    with pytest.raises(InvalidDateError):
        service.update(song_id, group="Queen", song="Changed", release_date="31-10-1975")

    session.expire_all()
    stored = session.get(Song, song_id)
    assert stored.song == "Starlight"
    assert stored.group.name == "Muse"
    assert session.query(Group).filter_by(name="Queen").count() == 0


def test_update_not_found(session) -> None:
    with pytest.raises(SongNotFoundError):
        SongService(session).update(42, song="x")


def test_delete(session) -> None:
    song = add_song(session, "Muse", "Starlight", text=LYRICS)
    song_id = song.id
    service = SongService(session)

    service.delete(song_id)

    with pytest.raises(SongNotFoundError):
        service.read_text(song_id)
    with pytest.raises(SongNotFoundError):
        service.delete(song_id)
    assert session.query(Group).filter_by(name="Muse").count() == 1


def test_read_text_accepts_signed_verse(session) -> None:
    song = add_song(session, "Muse", "Starlight", text=LYRICS)
    assert SongService(session).read_text(song.id, "+2") == "Second verse"


def test_out_of_range_id_is_not_found(session) -> None:
    service = SongService(session)

    with pytest.raises(SongNotFoundError):
        service.read_text(2 ** 70)
    with pytest.raises(SongNotFoundError):
        service.delete(2 ** 31)


class _NoRow:
    def first(self):
        return None


def test_find_or_create_group_concurrent_insert(database, session, monkeypatch) -> None:
    real_scalars = session.scalars
    winner = {}

    def scalars_with_concurrent_insert(stmt, *args, **kwargs):
        # the first lookup misses while another session creates the same group
        monkeypatch.setattr(session, "scalars", real_scalars)
        other = database.session_factory()
        group = Group(name="Muse")
        other.add(group)
        other.commit()
        winner["id"] = group.id
        other.close()
        return _NoRow()

    monkeypatch.setattr(session, "scalars", scalars_with_concurrent_insert)

    group = SongService(session).find_or_create_group("Muse")

    assert group.id == winner["id"]
    assert group.name == "Muse"
    assert session.query(Group).filter_by(name="Muse").count() == 1
