"""
LLM Council - ask several models the same question and let a judge rank them.

This package broadcasts one prompt to a council of agents, collects their
answers, and asks a judge agent to score, rank and pick a winner, using
the Copilot SDK for the agent sessions.

Main entry points:
	- llm_council.main: CLI entrypoint
	- llm_council.core.runner: run_council() for a single run
	- llm_council.core.orchestrator: Orchestrator and RunHandle
	- llm_council.models.config: Config and load_env()
"""
