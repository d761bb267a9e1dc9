import pytest
import pytz

from bucketsum.config import Settings, LoadSettings
from bucketsum.errors import InvalidResolution
from bucketsum.resolution import Resolution

def test_defaults():
    settings = Settings()
    assert settings.FetchLimit == 0
    assert settings.TimeZone == "UTC"
    assert settings.DefaultResolution is None
    assert settings.Zone() is pytz.utc

def test_validation():
    with pytest.raises(ValueError):
        Settings(FetchLimit=-1)
    with pytest.raises(ValueError):
        Settings(FanoutWorkers=0)
    with pytest.raises(ValueError):
        Settings(MaxDecompositionDepth=0)
    with pytest.raises(InvalidResolution):
        Settings(DefaultResolution="fortnight")
    with pytest.raises(pytz.UnknownTimeZoneError):
        Settings(TimeZone="Mars/Olympus_Mons")

def test_load_from_environment():
    settings = LoadSettings({
        "BUCKETSUM_FETCH_LIMIT": "500",
        "BUCKETSUM_TIME_ZONE": "America/Los_Angeles",
        "BUCKETSUM_DEFAULT_RESOLUTION": "minute",
        "BUCKETSUM_MAX_DEPTH": "16",
        "BUCKETSUM_FANOUT_WORKERS": " 2 ",
        "UNRELATED": "x",
    })
    assert settings == Settings(
        FetchLimit=500,
        TimeZone="America/Los_Angeles",
        DefaultResolution=Resolution.MINUTE,
        MaxDecompositionDepth=16,
        FanoutWorkers=2,
    )

def test_overrides_win_and_blanks_are_ignored():
    settings = LoadSettings({"BUCKETSUM_FETCH_LIMIT": "500", "BUCKETSUM_TIME_ZONE": ""}, FetchLimit=10)
    assert settings.FetchLimit == 10
    assert settings.TimeZone == "UTC"

def test_bad_number():
    with pytest.raises(ValueError):
        LoadSettings({"BUCKETSUM_FETCH_LIMIT": "lots"})
