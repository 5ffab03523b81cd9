"""
Unit tests for configuration persistence and connection testing.
"""

import json

import httpx

from iptv_viewer.models.config import StreamSourceConfig
from iptv_viewer.services.config_service import ConfigService
from iptv_viewer.services.config_store import JsonFileConfigStore, MemoryConfigStore
from tests.conftest import make_fetcher, playlist_handler


def credentialed(**overrides) -> StreamSourceConfig:
    values = dict(host_dns="provider.test", username="u", password="secret", port="8080")
    values.update(overrides)
    return StreamSourceConfig(**values)


class TestLoad:

    def test_missing_blob_keeps_defaults(self, config_service):
        config = config_service.load()

        assert config.host_dns == ""
        assert config.port == "80"
        assert config.playlist_format == "ts"

    def test_unreadable_blob_keeps_defaults(self):
        service = ConfigService(MemoryConfigStore({"IPTVConfig": "{not json"}))

        assert service.load().host_dns == ""

    def test_non_object_blob_keeps_defaults(self):
        service = ConfigService(MemoryConfigStore({"IPTVConfig": "[1, 2]"}))

        assert service.load().host_dns == ""

    def test_loads_saved_values(self, store):
        ConfigService(store).save(credentialed())

        config = ConfigService(store).load()

        assert config.host_dns == "provider.test"
        assert config.port == "8080"
        assert config.playlist_url.startswith("http://provider.test:8080/get.php")


class TestSave:

    def test_save_resolves_and_persists(self, config_service, store):
        event = config_service.save(credentialed())

        assert event is not None
        assert event.revision == 1
        assert event.config.config_changed is True
        assert event.config.is_direct_m3u is False
        saved = json.loads(store.get("IPTVConfig"))
        assert saved["configChanged"] is True
        assert saved["playlistUrl"] == event.config.playlist_url

    def test_each_save_bumps_revision(self, config_service):
        config_service.save(credentialed())
        event = config_service.save(credentialed(port="81"))

        assert event.revision == 2
        assert config_service.revision == 2

    def test_subscribers_receive_event(self, config_service):
        received = []
        config_service.on_configuration_changed(received.append)

        event = config_service.save(credentialed())

        assert received == [event]

    def test_event_carries_a_snapshot(self, config_service):
        event = config_service.save(credentialed())

        config_service.save(credentialed(host_dns="other.test"))

        assert event.config.host_dns == "provider.test"

    def test_reentrant_save_is_ignored(self, config_service):
        nested = []
        config_service.on_configuration_changed(
            lambda event: nested.append(config_service.save(credentialed(port="99")))
        )

        config_service.save(credentialed())

        assert nested == [None]
        assert config_service.revision == 1

    def test_write_failure_emits_nothing(self):
        class BrokenStore(MemoryConfigStore):
            def set(self, key, value):
                raise OSError("disk full")

        service = ConfigService(BrokenStore())
        received = []
        service.on_configuration_changed(received.append)

        assert service.save(credentialed()) is None
        assert received == []
        assert "disk full" in service.last_error


class TestConsume:

    def test_mark_consumed_clears_flag(self, config_service, store):
        event = config_service.save(credentialed())

        assert config_service.mark_consumed(event) is True
        assert config_service.config.config_changed is False
        assert json.loads(store.get("IPTVConfig"))["configChanged"] is False

    def test_event_is_consumed_at_most_once(self, config_service):
        event = config_service.save(credentialed())
        config_service.mark_consumed(event)

        assert config_service.mark_consumed(event) is False

    def test_stale_event_keeps_newer_flag(self, config_service):
        first = config_service.save(credentialed())
        config_service.save(credentialed(port="81"))

        assert config_service.mark_consumed(first) is False
        assert config_service.config.config_changed is True

    def test_pending_change_survives_restart(self, store):
        ConfigService(store).save(credentialed())

        service = ConfigService(store)
        service.load()

        assert service.pending_change() is not None
        assert service.pending_change().config.host_dns == "provider.test"

    def test_no_pending_change_after_consume(self, store):
        first = ConfigService(store)
        first.mark_consumed(first.save(credentialed()))

        service = ConfigService(store)
        service.load()

        assert service.pending_change() is None


class TestClearAndExport:

    def test_clear_resets_to_defaults(self, config_service, store):
        config_service.save(credentialed())

        config_service.clear()

        assert config_service.config.host_dns == ""
        assert store.get("IPTVConfig") is None

    def test_export_never_contains_password(self, config_service):
        config_service.save(credentialed())

        summary = config_service.export_summary()

        assert "secret" not in summary
        assert "Host/DNS: provider.test" in summary
        assert "password=***" in summary


class TestConnection:

    async def test_empty_host(self, config_service):
        assert await config_service.test_connection(StreamSourceConfig()) is False
        assert config_service.last_error == "Host/DNS not configured"

    async def test_credentialed_probes_player_api(self, store):
        handler = playlist_handler(body="{}")
        service = ConfigService(store, make_fetcher(handler))

        assert await service.test_connection(credentialed()) is True
        url = str(handler.requests[0].url)
        assert url.startswith("http://provider.test:8080/player_api.php")
        assert "action=get_info" in url

    async def test_rejected_credentials(self, store):
        service = ConfigService(store, make_fetcher(playlist_handler(status=401)))

        assert await service.test_connection(credentialed()) is False
        assert service.last_error == "Invalid credentials (HTTP 401)"

    async def test_unreachable_server(self, store):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        service = ConfigService(store, make_fetcher(handler))

        assert await service.test_connection(credentialed()) is False
        assert "Cannot connect" in service.last_error

    async def test_direct_link_probes_playlist(self, store):
        handler = playlist_handler()
        service = ConfigService(store, make_fetcher(handler))

        ok = await service.test_connection(StreamSourceConfig(host_dns="http://cdn.test/list.m3u"))

        assert ok is True
        assert str(handler.requests[0].url) == "http://cdn.test/list.m3u"

    async def test_local_file_needs_no_request(self, store, tmp_path):
        path = tmp_path / "list.m3u"
        path.write_text("#EXTM3U\n", encoding="utf-8")
        handler = playlist_handler()
        service = ConfigService(store, make_fetcher(handler))

        assert await service.test_connection(StreamSourceConfig(host_dns=str(path))) is True
        assert handler.requests == []


class TestJsonFileConfigStore:

    def test_values_survive_reopen(self, tmp_path):
        JsonFileConfigStore(str(tmp_path)).set("IPTVConfig", "{}")

        assert JsonFileConfigStore(str(tmp_path)).get("IPTVConfig") == "{}"

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        (tmp_path / "settings.json").write_text("{oops", encoding="utf-8")

        assert JsonFileConfigStore(str(tmp_path)).get("IPTVConfig") is None

    def test_delete(self, tmp_path):
        store = JsonFileConfigStore(str(tmp_path))
        store.set("IPTVConfig", "{}")
        store.delete("IPTVConfig")

        assert JsonFileConfigStore(str(tmp_path)).get("IPTVConfig") is None

    def test_data_dir_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("IPTV_VIEWER_DATA_DIR", str(tmp_path / "data"))

        store = JsonFileConfigStore()

        assert store.data_dir == tmp_path / "data"
        assert store.data_dir.is_dir()
