import pytest

from fakes import make_config


@pytest.fixture
def config():
	return make_config()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
	"""Keep host settings and preferences out of the tests."""
	for name in ("COPILOT_MODEL", "JUDGE_MODE", "DEFAULT_JUDGE",
	             "COUNCIL_TIMEOUT_SECONDS", "JUDGE_TIMEOUT_SECONDS",
	             "JUDGE_PROMPT_FILE", "GITHUB_TOKEN",
	             "COPILOT_CLI_URL", "LOG_LEVEL"):
		monkeypatch.delenv(name, raising=False)
	monkeypatch.setenv("PREFERENCES_FILE", str(tmp_path / "prefs.yaml"))
