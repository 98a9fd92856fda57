from types import SimpleNamespace

import pytest
import typer

from llm_council.loaders.preferences import Preferences, save_preferences
from llm_council.main import ask_impl, entrypoint
from llm_council.models.judge_result import JudgeResult
from llm_council.models.run_outcome import RunOutcome


def _fake_ask_impl():
	seen = {}

	def fake(prompt, council, judge, judge_mode, include_judge, timeout,
	         judge_timeout, plain, reauth_judge, output):
		seen.update(prompt=prompt,
		            council=council,
		            judge=judge,
		            judge_mode=judge_mode,
		            include_judge=include_judge,
		            timeout=timeout,
		            judge_timeout=judge_timeout,
		            plain=plain,
		            reauth_judge=reauth_judge,
		            output=output)
		return SimpleNamespace(error=None)

	return fake, seen


def test_cli_entrypoint_defaults_to_ask(monkeypatch):
	fake, seen = _fake_ask_impl()
	monkeypatch.setattr("llm_council.main.ask_impl", fake)
	entrypoint(
	    [
	        "What is 2+2?",
	        "-c",
	        "chatgpt",
	        "-c",
	        "gemini",
	        "--judge",
	        "grok",
	        "--judge-mode",
	        "separate-window",
	        "--timeout",
	        "30",
	        "--judge-timeout",
	        "60",
	        "--plain",
	    ],
	    standalone_mode=False,
	)
	assert seen["prompt"] == "What is 2+2?"
	assert seen["council"] == ["chatgpt", "gemini"]
	assert seen["judge"] == "grok"
	assert seen["judge_mode"].value == "separate-window"
	assert seen["timeout"] == 30
	assert seen["judge_timeout"] == 60
	assert seen["plain"] is True
	assert seen["include_judge"] is False
	assert seen["reauth_judge"] is False


def test_cli_explicit_ask(monkeypatch, tmp_path):
	fake, seen = _fake_ask_impl()
	monkeypatch.setattr("llm_council.main.ask_impl", fake)
	out = tmp_path / "result.txt"
	entrypoint(["ask", "hello", "--reauth-judge", "-o",
	            str(out)],
	           standalone_mode=False)
	assert seen["prompt"] == "hello"
	assert not seen["council"]
	assert seen["reauth_judge"] is True
	assert str(seen["output"]) == str(out)


def test_cli_help_does_not_crash():
	with pytest.raises(SystemExit) as exc_info:
		entrypoint(["--help"], standalone_mode=True)
	assert exc_info.value.code == 0


def test_cli_agents_lists_builtin_agents(capsys):
	entrypoint(["agents"], standalone_mode=False)
	out = capsys.readouterr().out
	for agent_id in ("chatgpt", "gemini", "perplexity", "grok"):
		assert agent_id in out


def _fake_run_council(seen, outcome=None):

	async def fake(config, params, event_cb=None, *, reauth_judge=False):
		seen["config"] = config
		seen["params"] = params
		return outcome or RunOutcome(
		    run_id="r1", judge_result=JudgeResult(raw_text="raw answers"))

	return fake


def test_ask_impl_uses_defaults_and_remembers(monkeypatch, capsys):
	seen = {}
	monkeypatch.setattr("llm_council.main.run_council",
	                    _fake_run_council(seen))
	outcome = ask_impl("What is 2+2?", plain=True)

	params = seen["params"]
	# the default judge sits out of the default council
	assert params.judge == "gemini"
	assert params.council == ["chatgpt", "perplexity", "grok"]
	assert outcome.judge_result.raw_text == "raw answers"
	assert "raw answers" in capsys.readouterr().out

	from llm_council.loaders.preferences import load_preferences
	prefs = load_preferences(seen["config"].preferences_path)
	assert prefs.selected_council == ["chatgpt", "perplexity", "grok"]
	assert prefs.selected_judge == "gemini"
	assert prefs.last_prompt == "What is 2+2?"


def test_ask_impl_prefers_remembered_selection(monkeypatch, tmp_path):
	save_preferences(
	    tmp_path / "prefs.yaml",
	    Preferences(selected_council=["gemini", "grok"],
	                selected_judge="chatgpt"))
	seen = {}
	monkeypatch.setattr("llm_council.main.run_council",
	                    _fake_run_council(seen))
	ask_impl("q", plain=True)
	assert seen["params"].council == ["gemini", "grok"]
	assert seen["params"].judge == "chatgpt"


def test_ask_impl_applies_overrides(monkeypatch):
	seen = {}
	monkeypatch.setattr("llm_council.main.run_council",
	                    _fake_run_council(seen))
	ask_impl("q",
	         council=["chatgpt,gemini"],
	         judge="grok",
	         timeout=10,
	         judge_timeout=20,
	         plain=True)
	config = seen["config"]
	assert config.council_timeout_seconds == 10
	assert config.judge_timeout_seconds == 20
	assert seen["params"].council == ["chatgpt", "gemini"]


def test_ask_impl_rejects_bad_selection(monkeypatch, capsys):
	seen = {}
	monkeypatch.setattr("llm_council.main.run_council",
	                    _fake_run_council(seen))
	with pytest.raises(typer.Exit) as exc_info:
		ask_impl("q", council=["chatgpt"], judge="grok", plain=True)
	assert exc_info.value.exit_code == 2
	assert "params" not in seen
	assert "error:" in capsys.readouterr().err


def test_ask_impl_judge_timeout_must_exceed_council(monkeypatch):
	monkeypatch.setattr("llm_council.main.run_council",
	                    _fake_run_council({}))
	with pytest.raises(typer.Exit):
		ask_impl("q", timeout=300, judge_timeout=200, plain=True)


def test_ask_impl_saves_output(monkeypatch, tmp_path):
	monkeypatch.setattr("llm_council.main.run_council",
	                    _fake_run_council({}))
	out = tmp_path / "reports" / "result.txt"
	ask_impl("q", plain=True, output=out)
	assert "raw answers" in out.read_text()
