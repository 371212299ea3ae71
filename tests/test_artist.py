import pytest

from canzone.metadata.artist import (
    ActivityPeriod,
    AlbumGroups,
    Artist,
    ArtistWithRole,
    Biography,
    CountryTopTracks,
    TopTracks,
)

GID_A = bytes([1]) * 16
GID_B = bytes([2]) * 16
GID_C = bytes([3]) * 16


def test_top_tracks_from_message():
    top = TopTracks.from_message({"country": "SE", "track": [{"gid": GID_A}, {"gid": GID_B}]})
    assert top.country == "SE"
    assert top.tracks == [GID_A.hex(), GID_B.hex()]


def test_for_country_prefers_exact_match():
    tracks = CountryTopTracks(
        [TopTracks("", ["global"]), TopTracks("SE", ["swedish"])]
    )
    assert tracks.for_country("SE") == ["swedish"]


def test_for_country_falls_back_to_global():
    tracks = CountryTopTracks([TopTracks("SE", ["swedish"]), TopTracks("", ["global"])])
    assert tracks.for_country("DE") == ["global"]


def test_for_country_none_found():
    tracks = CountryTopTracks([TopTracks("SE", ["swedish"])])
    assert tracks.for_country("DE") == []


def test_current_releases_skip_empty_groups():
    groups = AlbumGroups([["new", "old"], [], ["only"]])
    assert list(groups.current_releases()) == ["new", "only"]


def test_artist_with_role():
    credit = ArtistWithRole.from_message(
        {"artist_gid": GID_A, "artist_name": "Band", "role": "ARTIST_ROLE_MAIN_ARTIST"}
    )
    assert credit.id == GID_A.hex()
    assert credit.name == "Band"
    assert credit.role == "ARTIST_ROLE_MAIN_ARTIST"


def test_biography_portrait_groups():
    bio = Biography.from_message(
        {
            "text": "story",
            "portrait": [{"file_id": GID_A, "width": 10, "height": 20}],
            "portrait_group": [{"image": [{"file_id": GID_B}]}, {"image": []}],
        }
    )
    assert bio.text == "story"
    assert bio.portraits[0].id == GID_A.hex()
    assert [len(group) for group in bio.portrait_group] == [1, 0]
    assert bio.portrait_group[0][0].id == GID_B.hex()


def test_activity_period_decade():
    period = ActivityPeriod.from_message({"decade": 1990})
    assert period.is_decade
    assert period.decade == 1990
    assert period.start_year is None


def test_activity_period_open_timespan():
    period = ActivityPeriod.from_message({"start_year": 2001})
    assert not period.is_decade
    assert (period.start_year, period.end_year) == (2001, None)


def test_activity_period_closed_timespan():
    period = ActivityPeriod.from_message({"start_year": 2001, "end_year": 2010})
    assert (period.start_year, period.end_year) == (2001, 2010)


@pytest.mark.parametrize(
    "msg",
    [{}, {"decade": 1990, "start_year": 1991}, {"end_year": 2000}, {"decade": 1990, "end_year": 1999}],
)
def test_activity_period_rejects_mixed(msg):
    with pytest.raises(ValueError, match="decade or timespan"):
        ActivityPeriod.from_message(msg)


def test_activity_period_rejects_out_of_range_year():
    with pytest.raises(ValueError):
        ActivityPeriod.from_message({"start_year": -1})


def test_artist_from_message():
    artist = Artist.from_message(
        {
            "gid": GID_A,
            "name": "Band",
            "popularity": 42,
            "album_group": [{"album": [{"gid": GID_B}, {"gid": GID_C}]}, {"album": []}],
            "single_group": [{"album": [{"gid": GID_C}]}],
            "genre": ["rock"],
            "related": [{"gid": GID_B, "name": "Other"}],
            "portrait_group": {"image": [{"file_id": GID_C}]},
            "activity_period": [{"decade": 1980}],
        }
    )
    assert artist.id == GID_A.hex()
    assert artist.name == "Band"
    assert artist.popularity == 42
    assert list(artist.albums_current()) == [GID_B.hex()]
    assert list(artist.singles_current()) == [GID_C.hex()]
    assert list(artist.compilations_current()) == []
    assert list(artist.appears_on_albums_current()) == []
    assert artist.genre == ["rock"]
    assert [r.name for r in artist.related] == ["Other"]
    assert [img.id for img in artist.portrait_group] == [GID_C.hex()]
    assert artist.activity_periods[0].decade == 1980


def test_artist_defaults_for_empty_message():
    artist = Artist.from_message({})
    assert artist.name == ""
    assert artist.top_tracks.for_country("SE") == []
    assert artist.portrait_group == []
    assert artist.is_portrait_album_cover is False