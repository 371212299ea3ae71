import pytest

from canzone.playback.config import (
    AudioFormat,
    Bitrate,
    NormalisationMethod,
    NormalisationType,
    PlayerConfig,
    VolumeCtrl,
    VolumeCtrlKind,
)


@pytest.mark.parametrize(
    "text, expected",
    [("96", Bitrate.BITRATE_96), ("160", Bitrate.BITRATE_160), ("320", Bitrate.BITRATE_320)],
)
def test_bitrate_parse(text, expected):
    assert Bitrate.parse(text) is expected


@pytest.mark.parametrize("text", ["", "128", "96k", " 160"])
def test_bitrate_parse_rejects(text):
    with pytest.raises(ValueError):
        Bitrate.parse(text)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("F64", AudioFormat.F64),
        ("f32", AudioFormat.F32),
        ("S32", AudioFormat.S32),
        ("s24", AudioFormat.S24),
        ("s24_3", AudioFormat.S24_3),
        ("S16", AudioFormat.S16),
    ],
)
def test_audio_format_parse_ignores_case(text, expected):
    assert AudioFormat.parse(text) is expected


def test_audio_format_parse_rejects_unknown():
    with pytest.raises(ValueError):
        AudioFormat.parse("S8")


@pytest.mark.parametrize(
    "fmt, size",
    [
        (AudioFormat.F64, 8),
        (AudioFormat.F32, 4),
        (AudioFormat.S32, 4),
        (AudioFormat.S24, 4),
        (AudioFormat.S24_3, 3),
        (AudioFormat.S16, 2),
    ],
)
def test_audio_format_size(fmt, size):
    assert fmt.size() == size


def test_s24_shares_storage_with_s32():
    assert AudioFormat.S24.size() == AudioFormat.S32.size()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("album", NormalisationType.ALBUM),
        ("TRACK", NormalisationType.TRACK),
        ("Auto", NormalisationType.AUTO),
    ],
)
def test_normalisation_type_parse(text, expected):
    assert NormalisationType.parse(text) is expected


def test_normalisation_type_parse_rejects():
    with pytest.raises(ValueError):
        NormalisationType.parse("playlist")


@pytest.mark.parametrize(
    "text, expected",
    [("basic", NormalisationMethod.BASIC), ("DYNAMIC", NormalisationMethod.DYNAMIC)],
)
def test_normalisation_method_parse(text, expected):
    assert NormalisationMethod.parse(text) is expected


def test_normalisation_method_parse_rejects():
    with pytest.raises(ValueError):
        NormalisationMethod.parse("static")


def test_player_config_defaults():
    config = PlayerConfig()
    assert config.bitrate is Bitrate.BITRATE_160
    assert config.gapless is True
    assert config.passthrough is False
    assert config.normalisation is False
    assert config.normalisation_type is NormalisationType.AUTO
    assert config.normalisation_method is NormalisationMethod.DYNAMIC
    assert config.normalisation_pregain_db == 0.0
    assert config.normalisation_threshold_dbfs == -2.0
    assert config.normalisation_knee_db == 5.0
    assert config.normalisation_attack < config.normalisation_release


def test_volume_ctrl_default_is_log_with_default_range():
    ctrl = VolumeCtrl()
    assert ctrl.kind is VolumeCtrlKind.LOG
    assert ctrl.db_range == VolumeCtrl.DEFAULT_DB_RANGE


@pytest.mark.parametrize("text", ["cubic", "CUBIC", "log", "Log"])
def test_volume_ctrl_parse_ranged(text):
    ctrl = VolumeCtrl.parse(text, 42.5)
    assert ctrl.kind.value == text.lower()
    assert ctrl.db_range == 42.5


def test_volume_ctrl_parse_uses_default_range():
    assert VolumeCtrl.parse("cubic") == VolumeCtrl(VolumeCtrlKind.CUBIC, VolumeCtrl.DEFAULT_DB_RANGE)


@pytest.mark.parametrize(
    "text, kind", [("fixed", VolumeCtrlKind.FIXED), ("LINEAR", VolumeCtrlKind.LINEAR)]
)
def test_volume_ctrl_parse_unranged_drops_range(text, kind):
    ctrl = VolumeCtrl.parse(text, 30.0)
    assert ctrl.kind is kind
    assert ctrl.db_range is None


def test_volume_ctrl_parse_rejects():
    with pytest.raises(ValueError):
        VolumeCtrl.parse("exponential")