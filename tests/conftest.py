import pytest

from aicr.utils import config as config_module


@pytest.fixture(autouse=True)
def fresh_config():
    """Every test starts without a cached configuration."""
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def no_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's .env file out of configuration tests."""
    monkeypatch.setattr(config_module, "load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture
def api_env(monkeypatch: pytest.MonkeyPatch, no_dotenv: None) -> None:
    monkeypatch.setenv("DEEPSEEK_API_KEY", "test-key")
    for name in (
        "AICR_BASE_URL",
        "AICR_MODEL",
        "AICR_REQUEST_TIMEOUT_SECONDS",
        "AICR_MAX_ROUNDS",
        "AICR_REVIEW_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """
    A small project tree; the working directory is set to its root.

        project/
            main.go
            README
            pkg/util.go
            pkg/util_test.go
            web/app.js
    """
    root = tmp_path / "project"
    (root / "pkg").mkdir(parents=True)
    (root / "web").mkdir()
    (root / "main.go").write_text('package main\n\nfunc main() {\n\t// TODO: flags\n}\n')
    (root / "README").write_text("demo project\n")
    (root / "pkg" / "util.go").write_text("package pkg\n\n// TODO: remove\nfunc Util() {}\n")
    (root / "pkg" / "util_test.go").write_text("package pkg\n")
    (root / "web" / "app.js").write_text("console.log('TODO');\n")
    monkeypatch.chdir(root)
    return root
