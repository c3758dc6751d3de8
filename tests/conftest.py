"""
Shared pytest fixtures for the passman test suite.

Autouse fixtures below isolate tests from the real user environment:
  - Audit logger  -> temp directory  (prevents test events in ~/.passman)
  - PASSMAN_* env -> reset           (prevents a developer's settings leaking in)
"""

import pytest


@pytest.fixture(autouse=True)
def _isolate_audit_logs(tmp_path, monkeypatch):
    """Redirect the global AuditLogger to a temp directory for every test.

    Without this, any test that (directly or indirectly) calls
    ``get_audit_logger().log_event(...)`` writes into the real
    ``~/.passman/audit_logs/`` directory.
    """
    import passman.core.audit_log as audit_mod

    old_logger = audit_mod._audit_logger
    audit_mod._audit_logger = None

    monkeypatch.setattr(audit_mod, "DEFAULT_AUDIT_DIR", tmp_path / "audit_logs")

    yield

    audit_mod._audit_logger = old_logger


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path, monkeypatch):
    """Run every test from an empty working directory with clean PASSMAN_* vars."""
    for name in ("PASSMAN_DATA_FILE", "PASSMAN_AUDIT_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PASSMAN_AUDIT_DIR", str(tmp_path / "audit_logs"))
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    yield


@pytest.fixture
def vault_path(tmp_path):
    return tmp_path / "vault" / ".passman_data.json"


@pytest.fixture
def audit_logger(tmp_path):
    from passman.core import AuditLogger

    return AuditLogger(log_dir=tmp_path / "audit")


@pytest.fixture
def repo(vault_path, audit_logger):
    from passman.vault import AccountRepository, EnvelopeFile

    return AccountRepository(EnvelopeFile(vault_path), audit_logger=audit_logger)


@pytest.fixture
def key():
    from passman.vault import derive_key

    return derive_key("correct horse battery staple")
