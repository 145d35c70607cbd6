from __future__ import annotations

import pytest

from socialsync.domain.gate import RunMode
from socialsync.domain.migration import MigrationResult
from socialsync.domain.reconciliation import SyncResult, VerificationReport
from socialsync.ui import cli as cli_module


def test_migrate_defaults_to_dry_run(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_migrate(**kwargs: object) -> MigrationResult:
        captured.update(kwargs)
        return MigrationResult(mode=RunMode.DRY_RUN)

    monkeypatch.setattr(cli_module, "migrate_legacy_socials", fake_migrate)

    cli_module.main(["migrate"])

    assert captured["mode"] is RunMode.DRY_RUN


def test_sync_execute_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_sync(**kwargs: object) -> SyncResult:
        captured.update(kwargs)
        return SyncResult(mode=RunMode.EXECUTE)

    monkeypatch.setattr(cli_module, "sync_socials", fake_sync)

    cli_module.main(["sync", "--execute"])

    assert captured["mode"] is RunMode.EXECUTE


def test_verify_exits_zero_even_when_inconsistent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        cli_module,
        "verify_onchain_socials",
        lambda: VerificationReport(mismatched=3, errors=1),
    )

    cli_module.main(["verify"])


def test_missing_configuration_exits_with_status_one() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync"])

    assert excinfo.value.code == 1


def test_unexpected_failure_exits_with_status_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(**_kwargs: object) -> MigrationResult:
        raise RuntimeError("database unreachable")

    monkeypatch.setattr(cli_module, "migrate_legacy_socials", boom)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["migrate", "--execute"])

    assert excinfo.value.code == 1


def test_verify_rejects_execute_flag() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["verify", "--execute"])

    assert excinfo.value.code == 2
