"""Core council pipeline.

This subpackage contains the orchestration and execution logic for
broadcasting a prompt to a council of agents and judging the answers.

Key modules:
	- runner: Entry point via run_council()
	- orchestrator: Run state machine and RunHandle
	- discovery: Channel discovery for session handles
	- injection: Prompt delivery with retries
	- polling: Completion polling against deadlines
	- evaluation: Judge prompt synthesis
	- judge_parser: Judge response parsing
	- registry: Agent and adapter registries
"""

from llm_council.core.registry import (
    AGENTS,
    MAX_COUNCIL,
    MIN_COUNCIL,
    AdapterRegistry,
    get_agent,
    match_agent,
)
from llm_council.core.discovery import discover, find_channel
from llm_council.core.injection import deliver
from llm_council.core.polling import (
    PollResult,
    await_completion,
    await_council,
    poll,
)
from llm_council.core.evaluation import (
    build_evaluation_prompt,
    render_output_template,
)
from llm_council.core.judge_parser import parse_judge_response
from llm_council.core.orchestrator import Orchestrator, RunHandle
from llm_council.core.runner import run_council, run_with_provider

__all__ = [
    # registry
    "AGENTS",
    "MAX_COUNCIL",
    "MIN_COUNCIL",
    "AdapterRegistry",
    "get_agent",
    "match_agent",
    # discovery
    "discover",
    "find_channel",
    # injection
    "deliver",
    # polling
    "PollResult",
    "await_completion",
    "await_council",
    "poll",
    # evaluation
    "build_evaluation_prompt",
    "render_output_template",
    # judge_parser
    "parse_judge_response",
    # orchestrator
    "Orchestrator",
    "RunHandle",
    # runner
    "run_council",
    "run_with_provider",
]
