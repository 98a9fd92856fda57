import pytest

from llm_council.models.judge_result import JudgeResult, ModelScore
from llm_council.models.run_state import (
    AgentResult,
    AgentStatus,
    RunState,
    SessionRole,
)
from llm_council.models.session_handle import SessionHandle

NAMES = {"chatgpt": "ChatGPT", "gemini": "Gemini", "grok": "Grok"}


def test_happy_path_transitions():
	r = AgentResult(agent_id="chatgpt", name="ChatGPT")
	for status in (AgentStatus.READY, AgentStatus.INJECTING,
	               AgentStatus.INJECTING, AgentStatus.WAITING):
		r.transition(status)
	r.transition(AgentStatus.COMPLETE, response="hi")
	assert r.is_terminal
	assert r.response == "hi"
	assert r.attempts == 2


@pytest.mark.parametrize("terminal", [
    AgentStatus.COMPLETE,
    AgentStatus.TIMEOUT,
])
def test_terminal_states_are_final(terminal):
	r = AgentResult(agent_id="grok", name="Grok")
	r.transition(AgentStatus.READY)
	r.transition(AgentStatus.INJECTING)
	r.transition(AgentStatus.WAITING)
	r.transition(terminal)
	with pytest.raises(ValueError, match="illegal transition"):
		r.transition(AgentStatus.WAITING)


def test_cannot_skip_delivery():
	r = AgentResult(agent_id="grok", name="Grok")
	r.transition(AgentStatus.READY)
	with pytest.raises(ValueError):
		r.transition(AgentStatus.COMPLETE)


def test_failure_records_error():
	r = AgentResult(agent_id="grok", name="Grok")
	r.transition(AgentStatus.FAILED, error="no channel")
	assert r.error == "no channel"
	assert r.status == AgentStatus.FAILED


def test_run_state_start_is_clean():
	state = RunState.start("q", ["chatgpt", "gemini"], "gemini", NAMES)
	assert [r.agent_id for r in state.ordered_results()] == [
	    "chatgpt", "gemini"
	]
	assert all(r.status == AgentStatus.PENDING for r in state.results.values())
	# the judge record is independent of the council record for gemini
	assert state.judge.key == "judge:gemini"
	assert state.results["gemini"].key == "council:gemini"
	assert state.judge_result is None
	assert len(state.unfinished()) == 3


def test_completed_requires_response():
	state = RunState.start("q", ["chatgpt", "grok"], "gemini", NAMES)
	for r in state.ordered_results():
		r.transition(AgentStatus.READY)
		r.transition(AgentStatus.INJECTING)
		r.transition(AgentStatus.WAITING)
	state.results["chatgpt"].transition(AgentStatus.COMPLETE, response="a")
	state.results["grok"].transition(AgentStatus.TIMEOUT)
	assert [r.agent_id for r in state.completed()] == ["chatgpt"]


def test_session_handle_bind_is_idempotent():
	handle = SessionHandle(agent_id="grok", role=SessionRole.COUNCIL)
	first, second = object(), object()
	assert handle.bind(first) is first
	assert handle.bind(second) is first
	assert handle.channel is first
	assert handle.bound


def test_session_handle_mark_failed():
	handle = SessionHandle(agent_id="grok", role=SessionRole.JUDGE)
	handle.mark_failed("gone")
	assert handle.failed and handle.failure_reason == "gone"
	assert not handle.bound
	assert handle.key == "judge:grok"


def test_parsed_result_requires_scores():
	with pytest.raises(ValueError):
		JudgeResult(parsed=True)


def test_sorted_scores_descending():
	result = JudgeResult(parsed=True,
	                     scores=[
	                         ModelScore(model_name="A", total=20),
	                         ModelScore(model_name="B", total=45),
	                         ModelScore(model_name="C", total=30),
	                     ])
	assert [s.model_name for s in result.sorted_scores()] == ["B", "C", "A"]
	assert result.score_for("C").total == 30
	assert result.score_for("D") is None


def test_fallback_concatenates_responses():
	result = JudgeResult.fallback([("ChatGPT", "one"), ("Gemini", "two")])
	assert not result.parsed
	assert result.scores == []
	assert result.raw_text == "ChatGPT:\none\n\n---\n\nGemini:\ntwo"
