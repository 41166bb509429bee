"""Test configuration and fixtures"""

import pytest

from ssdl.core.config import Config, ConfigStore
from ssdl.spotify.models import Collection, ResourceKind

from fakes import RecordingRenderer, make_track


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep real overrides and debug flags out of the tests"""
    for name in ("SSDL_SPOTIFY_CLIENT_ID", "SSDL_SPOTIFY_CLIENT_SECRET", "SSDL_DOWNLOAD_DIR", "DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def renderer():
    """Renderer that records frames"""
    return RecordingRenderer()


@pytest.fixture
def config_store(tmp_path):
    """Config store writing to a temporary directory"""
    return ConfigStore(tmp_path / ".ssdl" / "config.json")


@pytest.fixture
def configured(tmp_path):
    """Config with credentials and a temporary download directory"""
    return Config(
        spotify_client_id="client-id-1234",
        spotify_client_secret="client-secret",
        download_dir=str(tmp_path / "music"),
    )


@pytest.fixture
def sample_tracks():
    """The two-track example: A by X and B by Y"""
    return [
        make_track("A", "X", 200000),
        make_track("B", "Y", 180000),
    ]


@pytest.fixture
def sample_playlist():
    """A playlist collection with five tracks"""
    tracks = tuple(make_track(f"Song {n}", f"Artist {n}", 180000 + n * 1000) for n in range(1, 6))
    return Collection(
        kind=ResourceKind.PLAYLIST,
        name="Road Trip",
        tracks=tracks,
        owner="alice",
    )


@pytest.fixture
def sample_track_data():
    """Sample Spotify track object"""
    return {
        'id': 'test_track_123',
        'name': 'Test Song',
        'artists': [
            {'id': 'artist_123', 'name': 'Test Artist'},
            {'id': 'artist_456', 'name': 'Guest'},
        ],
        'album': {
            'id': 'album_123',
            'name': 'Test Album',
            'release_date': '2023-01-01',
            'images': [
                {'url': 'https://i.scdn.co/image/large', 'width': 640, 'height': 640},
                {'url': 'https://i.scdn.co/image/small', 'width': 64, 'height': 64},
            ],
            'artists': [{'id': 'artist_123', 'name': 'Test Artist'}],
        },
        'duration_ms': 210000,  # 3:30
        'track_number': 3,
        'external_urls': {'spotify': 'https://open.spotify.com/track/test_track_123'},
        'type': 'track',
    }
