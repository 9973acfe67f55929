# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Client.Settings import ClientSettings
import Settings


def test_server_settings_from_ayar():
    assert Settings.PROJE == "SyncWatch"
    assert Settings.WS_MAX_PAYLOAD    == 65536
    assert Settings.WS_GENERAL_RATE   == 20
    assert Settings.WS_HIGH_FREQ_RATE == 60


def test_client_defaults(monkeypatch):
    monkeypatch.delenv("SYNCWATCH_SERVER_URL", raising=False)
    ayar = ClientSettings(_env_file=None)

    assert ayar.server_url         == "ws://127.0.0.1:3310/sync"
    assert ayar.sync_tolerance     == 1.0
    assert ayar.debounce_delay     == 0.3
    assert ayar.ready_timeout      == 3.0
    assert ayar.reconnect_attempts == 5


def test_client_env_override(monkeypatch):
    monkeypatch.setenv("SYNCWATCH_SERVER_URL", "ws://relay:9000/sync")
    monkeypatch.setenv("SYNCWATCH_SYNC_TOLERANCE", "0.5")

    ayar = ClientSettings(_env_file=None)
    assert ayar.server_url     == "ws://relay:9000/sync"
    assert ayar.sync_tolerance == 0.5
