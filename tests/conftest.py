import pytest


@pytest.fixture(autouse=True)
def _isolate_ridicule_env(monkeypatch):
    # Binary overrides and log level are read from the process environment.
    for name in ("RIDICULE_GO", "RIDICULE_GOFMT", "RIDICULE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield
