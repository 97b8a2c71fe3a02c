# test_sync_worker.py
# tests/test_sync_worker.py

from conftest import BASE_URL, FakeResponse, run

from gutasync.core.config import Settings
from gutasync.core.guta_sync import SyncClient
from gutasync.core.mode_resolver import ModeResolver, ModeStore
from gutasync.modes.live import HttpBackend
from gutasync.modes.simulation import SimulatedBackend

import sync_worker


def test_cmd_mode_sets_and_prints(tmp_path, capsys):
    resolver = sync_worker.build_resolver(Settings(demo_mode_default=False), tmp_path / "s.json")

    assert sync_worker.cmd_mode(resolver, "demo") == 0
    assert "DEMO" in capsys.readouterr().out

    sync_worker.cmd_mode(resolver, "default")
    assert "LIVE" in capsys.readouterr().out


def test_cmd_root_demo(capsys):
    assert run(sync_worker.cmd_root(SyncClient(SimulatedBackend()))) == 0
    assert "Total users: 1000" in capsys.readouterr().out


def test_cmd_root_failure_exit_code(transport, capsys):
    transport.add("GET", f"{BASE_URL}/guta/latest", FakeResponse(500, None, ""))
    client = SyncClient(HttpBackend(BASE_URL, session_factory=transport.session))

    assert run(sync_worker.cmd_root(client)) == 1
    assert "Failed to fetch root" in capsys.readouterr().out


def test_cmd_synced_unavailable(transport, capsys):
    client = SyncClient(HttpBackend(BASE_URL, session_factory=transport.session))

    # Маршрута нет -> 404 -> Unavailable
    assert run(sync_worker.cmd_synced(client, "alice")) == 0
    assert "Unknown" in capsys.readouterr().out


def test_parse_args_prices():
    args = sync_worker.parse_args(["prices", "ETH", "BTC"])

    assert args.command == "prices"
    assert args.symbols == ["ETH", "BTC"]


def test_resolver_default_from_settings(tmp_path):
    resolver = sync_worker.build_resolver(Settings(demo_mode_default=True), tmp_path / "s.json")

    assert isinstance(resolver, ModeResolver)
    assert isinstance(resolver.store, ModeStore)
    assert resolver.is_demo_mode() is True
