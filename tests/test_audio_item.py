from datetime import datetime, timezone

import pytest

from canzone.metadata.audio_item import (
    AudioItem,
    EpisodeFields,
    TrackFields,
    UserData,
    allowed_for_user,
    available,
    available_for_user,
    get_covers,
)
from canzone.metadata.availability import (
    Availability,
    ItemUnavailable,
    Restriction,
    UnavailabilityReason,
)
from canzone.metadata.catalog import Episode, Track
from canzone.metadata.common import Image
from canzone.metadata.errors import ExplicitContentFiltered, InvalidDuration

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)
PAST = datetime(2000, 1, 1, tzinfo=timezone.utc)
FUTURE = datetime(2100, 1, 1, tzinfo=timezone.utc)
SWEDEN = UserData(country="SE")


def _track_message(**extra):
    msg = {
        "gid": bytes(16),
        "name": "Song",
        "duration": 1000,
        "popularity": 50,
        "number": 3,
        "disc_number": 1,
        "album": {
            "name": "Record",
            "artist": [{"name": "Band"}],
            "cover_group": {
                "image": [
                    {"file_id": b"\xaa", "width": 64, "height": 64, "size": "SMALL"},
                    {"file_id": b"\xbb", "width": 640, "height": 640, "size": "LARGE"},
                ]
            },
        },
        "file": [{"file_id": b"\x01", "format": "OGG_VORBIS_160"}],
        "language_of_performance": ["sv"],
    }
    msg.update(extra)
    return msg


def test_get_covers_sorted_filtered_and_substituted():
    covers = [
        Image(id="aa", size="SMALL", width=64, height=64),
        Image(id="", size="DEFAULT", width=300, height=300),
        Image(id="bb", size="LARGE", width=640, height=640),
    ]
    result = get_covers(covers, "img/{file_id}")
    assert [c.url for c in result] == ["img/bb", "img/aa"]
    assert [c.width for c in result] == [640, 64]


def test_whitelist_allows_listed_country():
    restriction = Restriction(catalogue_strs=["premium"], countries_allowed=["SE", "DE"])
    assert allowed_for_user(SWEDEN, [restriction]) is None


def test_whitelist_rejects_other_country():
    restriction = Restriction(catalogue_strs=["premium"], countries_allowed=["DE"])
    with pytest.raises(ItemUnavailable) as info:
        allowed_for_user(SWEDEN, [restriction])
    assert info.value.reason is UnavailabilityReason.NOT_WHITELISTED


def test_blacklist_rejects_listed_country():
    restriction = Restriction(catalogue_strs=["premium"], countries_forbidden=["SE"])
    with pytest.raises(ItemUnavailable) as info:
        allowed_for_user(SWEDEN, [restriction])
    assert info.value.reason is UnavailabilityReason.BLACKLISTED


def test_restriction_for_other_catalogue_is_ignored():
    restriction = Restriction(catalogue_strs=["free"], countries_allowed=["DE"])
    assert allowed_for_user(SWEDEN, [restriction]) is None
    free_user = UserData(country="SE", attributes={"catalogue": "free"})
    with pytest.raises(ItemUnavailable):
        allowed_for_user(free_user, [restriction])


def test_available_rules():
    assert available([], NOW) is None
    assert available([Availability([], FUTURE), Availability([], PAST)], NOW) is None
    with pytest.raises(ItemUnavailable) as info:
        available([Availability([], FUTURE)], NOW)
    assert info.value.reason is UnavailabilityReason.EMBARGO


def test_available_for_user_checks_embargo_first():
    restriction = Restriction(catalogue_strs=["premium"], countries_forbidden=["SE"])
    with pytest.raises(ItemUnavailable) as info:
        available_for_user(SWEDEN, [Availability([], FUTURE)], [restriction], NOW)
    assert info.value.reason is UnavailabilityReason.EMBARGO


def test_from_track_fields():
    track = Track.from_message(_track_message())
    item = AudioItem.from_track(track, SWEDEN, image_url="img/{file_id}", now=NOW)
    assert item.uri == "spotify:track:0000000000000000000000"
    assert item.name == "Song"
    assert item.duration_ms == 1000
    assert item.language == ["sv"]
    assert item.files == {"OGG_VORBIS_160": "01"}
    assert item.availability is None
    assert item.alternatives is None
    assert [c.url for c in item.covers] == ["img/bb", "img/aa"]
    assert isinstance(item.unique_fields, TrackFields)
    assert item.unique_fields.album == "Record"
    assert item.unique_fields.album_artists == ["Band"]
    assert item.unique_fields.number == 3


def test_from_track_clamps_numbers():
    track = Track.from_message(_track_message(popularity=150, number=-2, disc_number=-1))
    fields = AudioItem.from_track(track, SWEDEN, now=NOW).unique_fields
    assert fields.popularity == 100
    assert fields.number == 0
    assert fields.disc_number == 0


def test_from_track_uri_shape_and_alternatives():
    track = Track.from_message(
        _track_message(gid=bytes(range(16)), alternative=[{"gid": b"\x01"}])
    )
    item = AudioItem.from_track(track, SWEDEN, now=NOW)
    assert item.uri.startswith("spotify:track:")
    assert len(item.uri.rsplit(":", 1)[1]) == 22
    assert item.alternatives == ["01"]


def test_from_track_image_url_from_user_attributes():
    user = UserData(country="SE", attributes={"image-url": "cdn/{file_id}"})
    item = AudioItem.from_track(Track.from_message(_track_message()), user, now=NOW)
    assert item.covers[0].url == "cdn/bb"


def test_from_track_invalid_duration():
    track = Track.from_message(_track_message(duration=0))
    with pytest.raises(InvalidDuration) as info:
        AudioItem.from_track(track, SWEDEN, now=NOW)
    assert info.value.duration == 0


def test_from_track_explicit_filtered():
    track = Track.from_message(_track_message(explicit=True))
    with pytest.raises(ExplicitContentFiltered):
        AudioItem.from_track(track, SWEDEN, filter_explicit=True, now=NOW)
    assert AudioItem.from_track(track, SWEDEN, now=NOW).is_explicit is True


def test_from_track_embargo_by_earliest_live_timestamp():
    future_ms = int(FUTURE.timestamp() * 1000)
    track = Track.from_message(_track_message(earliest_live_timestamp=future_ms))
    item = AudioItem.from_track(track, SWEDEN, now=NOW)
    assert item.availability is UnavailabilityReason.EMBARGO


def test_from_track_restricted():
    track = Track.from_message(
        _track_message(
            restriction=[{"catalogue_str": ["premium"], "countries_forbidden": "SEDE"}]
        )
    )
    item = AudioItem.from_track(track, SWEDEN, now=NOW)
    assert item.availability is UnavailabilityReason.BLACKLISTED


def test_from_episode():
    episode = Episode.from_message(
        {
            "gid": bytes(16),
            "name": "Episode one",
            "duration": 2000,
            "description": "About things",
            "language": "en",
            "show": {"name": "The Show"},
            "cover_image": {"image": [{"file_id": b"\xcc", "width": 100}]},
            "publish_time": {"year": 2020, "month": 5, "day": 4},
        }
    )
    item = AudioItem.from_episode(episode, SWEDEN, image_url="img/{file_id}", now=NOW)
    assert item.uri.startswith("spotify:episode:")
    assert item.language == ["en"]
    assert item.duration_ms == 2000
    assert item.alternatives is None
    assert item.availability is None
    assert [c.url for c in item.covers] == ["img/cc"]
    assert isinstance(item.unique_fields, EpisodeFields)
    assert item.unique_fields.show_name == "The Show"
    assert item.unique_fields.publish_time == datetime(2020, 5, 4, tzinfo=timezone.utc)


def test_from_episode_invalid_duration():
    episode = Episode.from_message({"gid": bytes(16), "duration": -5})
    with pytest.raises(InvalidDuration):
        AudioItem.from_episode(episode, SWEDEN, now=NOW)