import copy
import json

import pytest

from canzone.metadata.lyrics import Line, Lyrics, SyncType

DOCUMENT = {
    "colors": {"background": -9079435, "highlightText": -1, "text": -16777216},
    "hasVocalRemoval": False,
    "lyrics": {
        "fullscreenAction": "FULLSCREEN_LYRICS",
        "isDenseTypeface": False,
        "isRtlLanguage": False,
        "language": "en",
        "lines": [
            {"startTimeMs": "1000", "endTimeMs": "0", "words": "first", "syllables": []},
            {"startTimeMs": "2500", "endTimeMs": "0", "words": "second", "syllables": []},
        ],
        "provider": "Provider",
        "providerDisplayName": "Provider Name",
        "providerLyricsId": "12345",
        "syncLyricsUri": "",
        "syncType": "LINE_SYNCED",
        "alternatives": [],
    },
}


def test_parse_full_document():
    lyrics = Lyrics.from_json(json.dumps(DOCUMENT))
    assert lyrics.colors.background == -9079435
    assert lyrics.colors.highlight_text == -1
    assert lyrics.has_vocal_removal is False
    assert lyrics.lyrics.sync_type is SyncType.LINE_SYNCED
    assert lyrics.lyrics.lines[1] == Line("2500", "0", "second")
    assert lyrics.lyrics.provider_display_name == "Provider Name"


def test_parse_bytes_equals_text():
    text = json.dumps(DOCUMENT)
    assert Lyrics.from_json(text.encode()) == Lyrics.from_json(text)


def test_unsynced():
    doc = copy.deepcopy(DOCUMENT)
    doc["lyrics"]["syncType"] = "UNSYNCED"
    assert Lyrics.from_json(json.dumps(doc)).lyrics.sync_type is SyncType.UNSYNCED


def test_missing_field():
    doc = copy.deepcopy(DOCUMENT)
    del doc["lyrics"]["language"]
    with pytest.raises(ValueError):
        Lyrics.from_json(json.dumps(doc))


def test_unknown_sync_type():
    doc = copy.deepcopy(DOCUMENT)
    doc["lyrics"]["syncType"] = "SYLLABLE"
    with pytest.raises(ValueError):
        Lyrics.from_json(json.dumps(doc))


def test_wrong_type_rejected():
    doc = copy.deepcopy(DOCUMENT)
    doc["hasVocalRemoval"] = 1
    with pytest.raises(ValueError):
        Lyrics.from_json(json.dumps(doc))


def test_colour_out_of_range():
    doc = copy.deepcopy(DOCUMENT)
    doc["colors"]["text"] = 2**31
    with pytest.raises(ValueError):
        Lyrics.from_json(json.dumps(doc))


def test_invalid_json():
    with pytest.raises(ValueError):
        Lyrics.from_json("{not json")