from llm_council.core.evaluation import (
    anonymized_label,
    build_evaluation_prompt,
    render_output_template,
)
from llm_council.models.run_state import AgentResult, AgentStatus


def _record(agent_id, name, status=AgentStatus.COMPLETE, response=None):
	return AgentResult(agent_id=agent_id,
	                   name=name,
	                   status=status,
	                   response=response)


def test_anonymized_labels():
	assert anonymized_label(0) == "Response A"
	assert anonymized_label(25) == "Response Z"
	assert anonymized_label(26) == "Response AA"


def test_responses_are_labelled_in_order():
	evaluation = build_evaluation_prompt("What is 2+2?", [
	    _record("chatgpt", "ChatGPT", response="four"),
	    _record("gemini", "Gemini", response="4"),
	])
	assert evaluation.labels == {
	    "Response A": "ChatGPT",
	    "Response B": "Gemini"
	}
	assert evaluation.deanonymize("Response B") == "Gemini"
	assert "Original Question: What is 2+2?" in evaluation.text
	assert "Response A:\nfour\n\nResponse B:\n4\n" in evaluation.text
	assert evaluation.responded == ["ChatGPT", "Gemini"]
	assert evaluation.failed == []
	assert "did not provide a response" not in evaluation.text


def test_failed_agents_are_named_and_not_scored():
	evaluation = build_evaluation_prompt("q", [
	    _record("chatgpt", "ChatGPT", response="a"),
	    _record("perplexity", "Perplexity", status=AgentStatus.FAILED),
	    _record("gemini", "Gemini", response="b"),
	    _record("grok", "Grok", status=AgentStatus.TIMEOUT),
	])
	assert evaluation.failed == ["Perplexity", "Grok"]
	assert ("Note: The following models did not provide a response: "
	        "Perplexity, Grok. Exclude them from evaluation.") in evaluation.text
	assert "### Perplexity" not in evaluation.text
	assert "### Grok" not in evaluation.text
	assert "### ChatGPT" in evaluation.text
	assert "### Gemini" in evaluation.text


def test_complete_without_text_counts_as_failed():
	evaluation = build_evaluation_prompt("q", [
	    _record("chatgpt", "ChatGPT", response=""),
	    _record("gemini", "Gemini", response="b"),
	])
	assert evaluation.labels == {"Response A": "Gemini"}
	assert evaluation.failed == ["ChatGPT"]


def test_output_template_lists_each_responder():
	block = render_output_template(["ChatGPT", "Gemini"])
	assert block.startswith("IMPORTANT: Return the evaluation in this EXACT "
	                        "format:")
	assert block.count("| **Total** | **XX/50** |") == 2
	assert "1. [Model Name] — XX/50" in block
	assert "2. [Model Name] — XX/50" in block
	assert "3. [Model Name]" not in block
	assert "### Winner: [Model Name]" in block


def test_custom_template_keeps_output_format():
	evaluation = build_evaluation_prompt(
	    "q", [_record("chatgpt", "ChatGPT", response="a")],
	    template="Judge these for ${original_prompt}:\n${responses}")
	assert evaluation.text.startswith("Judge these for q:\nResponse A:\na")
	assert "IMPORTANT: Return the evaluation in this EXACT format:" in (
	    evaluation.text)
	assert "You are the Chairman" not in evaluation.text


def test_custom_template_without_responses_falls_back(caplog):
	evaluation = build_evaluation_prompt(
	    "q", [_record("chatgpt", "ChatGPT", response="a")],
	    template="Just pick one.")
	assert evaluation.text.startswith("You are the Chairman of an LLM Council")
	assert "Response A:\na" in evaluation.text
	assert "placeholder" in caplog.text
