"""Tests for the directory fetch service."""

from server_browser.models import ServerListing
from server_browser.services.fetch_service import DirectoryFetchService


def _listing(address: str, **kwargs) -> ServerListing:
    kwargs.setdefault("name", address)
    kwargs.setdefault("version", "v1")
    return ServerListing(address=address, **kwargs)


class TestRefresh:
    """Tests for starting fetch cycles."""

    def test_purges_non_favourites_and_starts_fetch(self, store, settings, fake_helper, populate) -> None:
        populate(store, ("fav", True), ("stale1", False), ("stale2", False))
        service = DirectoryFetchService(store, settings, fake_helper)

        assert service.refresh() is True

        assert [e.address for e in store.entries()] == ["fav"]
        assert fake_helper.requests == [("http://master.test/servers", 11753, 10.0)]
        assert service.is_fetching is True

    def test_url_argument_overrides_settings(self, store, settings, fake_helper) -> None:
        service = DirectoryFetchService(store, settings, fake_helper)
        service.refresh("http://other.test/")
        assert fake_helper.requests[0][0] == "http://other.test/"

    def test_default_url_without_override(self, store, fake_helper) -> None:
        from server_browser.config_loader import DEFAULT_MASTER_SERVER_URL, NetworkSettings

        service = DirectoryFetchService(store, NetworkSettings(), fake_helper)
        service.refresh()
        assert fake_helper.requests[0][0] == DEFAULT_MASTER_SERVER_URL

    def test_overlapping_refresh_is_dropped(self, store, settings, fake_helper) -> None:
        service = DirectoryFetchService(store, settings, fake_helper)
        service.refresh()
        fake_helper.finished.emit([_listing("a:1")])
        service.refresh()
        store.add_or_get("manual")

        assert service.refresh() is False

        assert len(fake_helper.requests) == 2
        assert store.find("manual") is not None

    def test_refresh_after_close_is_ignored(self, store, settings, fake_helper) -> None:
        service = DirectoryFetchService(store, settings, fake_helper)
        service.close()

        assert service.refresh() is False
        assert fake_helper.requests == []
        assert fake_helper.stopped is True


class TestCompletion:
    """Tests for handling fetch results."""

    def test_merges_results_and_signals(self, store, settings, fake_helper) -> None:
        service = DirectoryFetchService(store, settings, fake_helper)
        changed = []
        completed = []
        service.directory_changed.connect(lambda players: changed.append(players))
        service.fetch_completed.connect(lambda merged: completed.append(merged))
        service.refresh()

        fake_helper.finished.emit([
            _listing("1.2.3.4:11753", name="Foo", players=2, max_players=8),
            _listing("5.6.7.8:11753", name="Bar", players=3, max_players=8),
        ])

        assert store.count() == 2
        entry = store.find("1.2.3.4:11753")
        assert (entry.name, entry.players, entry.max_players) == ("Foo", 2, 8)
        assert service.players_online == 5
        assert changed[-1] == 5
        assert completed == [True]
        assert service.is_fetching is False

    def test_failed_fetch_keeps_favourites(self, store, settings, fake_helper, populate) -> None:
        populate(store, ("fav", True))
        service = DirectoryFetchService(store, settings, fake_helper)
        completed = []
        service.fetch_completed.connect(lambda merged: completed.append(merged))
        service.refresh()

        fake_helper.finished.emit(None)

        assert [e.address for e in store.entries()] == ["fav"]
        assert completed == [False]
        assert service.is_fetching is False

    def test_worker_error_clears_in_flight(self, store, settings, fake_helper) -> None:
        service = DirectoryFetchService(store, settings, fake_helper)
        service.refresh()

        fake_helper.error.emit("boom")

        assert service.is_fetching is False
        assert service.refresh() is True

    def test_stale_result_after_close_is_discarded(self, store, settings, fake_helper) -> None:
        service = DirectoryFetchService(store, settings, fake_helper)
        completed = []
        service.fetch_completed.connect(lambda merged: completed.append(merged))
        service.refresh()
        service.close()

        fake_helper.finished.emit([_listing("a:1")])

        assert store.count() == 0
        assert completed == []

    def test_refetch_replaces_stale_servers(self, store, settings, fake_helper) -> None:
        service = DirectoryFetchService(store, settings, fake_helper)
        service.refresh()
        fake_helper.finished.emit([_listing("old:1", players=4)])

        service.refresh()
        fake_helper.finished.emit([_listing("new:1", players=1)])

        assert [e.address for e in store.entries()] == ["new:1"]
        assert service.players_online == 1


class TestBackgroundDelivery:
    """The real helper delivers results on the thread that owns it."""

    def test_result_arrives_on_owner_thread(self, qapp, store, settings, monkeypatch) -> None:
        import threading
        import time

        from server_browser.utils import qt_directory_worker
        from server_browser.utils.qt_directory_worker import DirectoryFetchHelper

        worker_threads = []

        def fake_fetch(url, default_port, timeout):
            worker_threads.append(threading.current_thread())
            return [_listing("1.2.3.4:11753", players=2, max_players=8)]

        monkeypatch.setattr(qt_directory_worker, "_fetch_directory", fake_fetch)
        service = DirectoryFetchService(store, settings, DirectoryFetchHelper())
        delivered = []
        service.fetch_completed.connect(lambda merged: delivered.append(threading.current_thread()))

        assert service.refresh() is True
        deadline = time.monotonic() + 5
        while not delivered and time.monotonic() < deadline:
            qapp.processEvents()
            time.sleep(0.01)
        service.close()

        assert delivered == [threading.main_thread()]
        assert worker_threads and worker_threads[0] is not threading.main_thread()
        assert store.find("1.2.3.4:11753").players == 2
