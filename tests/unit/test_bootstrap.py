from __future__ import annotations

import threading
from pathlib import Path

from app.bootstrap import build_launcher, shutdown
from app.config import AppConfig, LaunchSettings, OperationSettings
from domain.instances import Delete, Update
from services.instances import InstanceStore
from services.update import InstanceUpdateService, ReleaseInfo
from tests.helpers import RecordingInstaller, StaticReleaseProvider, make_instance


def test_build_launcher_uses_default_registry_location(_launcher_data_env: Path) -> None:
    viewmodel = build_launcher(configure_logging=False)

    assert viewmodel.load() == []
    assert viewmodel.config.launch == LaunchSettings()

    instance = make_instance(_launcher_data_env / "instances" / "es-dev")
    InstanceStore().save([instance])
    assert [snapshot.path for snapshot in viewmodel.load()] == [instance.path]


def test_shutdown_waits_for_running_delete(tmp_path: Path) -> None:
    store = InstanceStore(tmp_path / "instances.json")
    target = tmp_path / "es-dev"
    (target / "logs").mkdir(parents=True)
    store.save([make_instance(target), make_instance(tmp_path / "keep", name="keep")])

    viewmodel = build_launcher(store=store, configure_logging=False)
    viewmodel.load()
    viewmodel.submit(target, Delete())
    viewmodel.process_pending()

    assert shutdown(viewmodel, timeout=5)
    assert not target.exists()
    assert [instance.name for instance in store.load()] == ["keep"]


def test_shutdown_reports_operations_still_running(tmp_path: Path) -> None:
    release = threading.Event()

    class SlowInstaller(RecordingInstaller):
        def install(self, destination, name, instance_type, source):
            release.wait(timeout=5)
            return super().install(destination, name, instance_type, source)

    service = InstanceUpdateService(
        StaticReleaseProvider(ReleaseInfo(version="0.10.0", asset_name="es.tar.gz")),
        SlowInstaller(version="0.10.0"),
    )
    config = AppConfig(LaunchSettings(), OperationSettings(shutdown_timeout_s=0.05))
    store = InstanceStore(tmp_path / "instances.json")
    instance = make_instance(tmp_path / "es-dev")
    store.save([instance])

    viewmodel = build_launcher(store=store, update_service=service, config=config, configure_logging=False)
    viewmodel.load()
    viewmodel.submit(instance.path, Update())
    viewmodel.process_pending()

    try:
        assert shutdown(viewmodel) is False
    finally:
        release.set()
    assert viewmodel.dispatcher.wait_idle(timeout=5)
    viewmodel.process_pending()
    assert [stored.version for stored in store.load()] == ["0.10.0"]


def test_shutdown_drops_queued_commands_instead_of_starting_them(tmp_path: Path) -> None:
    installer = RecordingInstaller(version="0.10.0")
    service = InstanceUpdateService(
        StaticReleaseProvider(ReleaseInfo(version="0.10.0", asset_name="es.tar.gz")),
        installer,
    )
    store = InstanceStore(tmp_path / "instances.json")
    instance = make_instance(tmp_path / "es-dev", version="0.9.16")
    store.save([instance])

    viewmodel = build_launcher(store=store, update_service=service, configure_logging=False)
    viewmodel.load()
    viewmodel.submit(instance.path, Update())

    assert shutdown(viewmodel, timeout=1) is True
    assert viewmodel.dispatcher.in_flight() == 0
    assert installer.installed == []
    assert viewmodel.snapshot(instance.path).state.is_ready
    assert viewmodel.start_installation("late", instance.instance_type, instance.source) is None
    assert [stored.version for stored in store.load()] == ["0.9.16"]


def test_shutdown_applies_results_of_work_started_before_it(tmp_path: Path) -> None:
    service = InstanceUpdateService(
        StaticReleaseProvider(ReleaseInfo(version="0.10.0", asset_name="es.tar.gz")),
        RecordingInstaller(version="0.10.0"),
    )
    store = InstanceStore(tmp_path / "instances.json")
    instance = make_instance(tmp_path / "es-dev", version="0.9.16")
    store.save([instance])

    viewmodel = build_launcher(store=store, update_service=service, configure_logging=False)
    viewmodel.load()
    viewmodel.submit(instance.path, Update())
    viewmodel.process_pending()

    assert shutdown(viewmodel, timeout=5) is True
    snapshot = viewmodel.snapshot(instance.path)
    assert snapshot.state.is_ready
    assert snapshot.version == "0.10.0"
    assert [stored.version for stored in store.load()] == ["0.10.0"]
