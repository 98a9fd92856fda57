"""
Entry point for running a council round.

Sets up the channel provider, submits the run to the orchestrator and
waits for its outcome, ensuring the client lifecycle is handled safely.
"""

from __future__ import annotations

from llm_council.core.errors import DiscoveryFailure
from llm_council.core.orchestrator import Orchestrator
from llm_council.loaders.prompts import load_judge_template
from llm_council.models.config import Config
from llm_council.models.run_outcome import EventCallback, RunOutcome
from llm_council.models.run_params import RunParams
from llm_council.utils.logging import get_logger
from llm_council.utils.protocols import ChannelProviderProtocol

logger = get_logger(__name__)


async def run_with_provider(
    config: Config,
    run_params: RunParams,
    provider: ChannelProviderProtocol,
    event_cb: EventCallback | None = None,
    *,
    reauth_judge: bool = False,
) -> RunOutcome:
	"""
	Run one council round on an existing channel provider.

	Parameters:
		config: Application configuration (overrides already applied).
		run_params: Validated run parameters.
		provider: Channel provider.
		event_cb: Optional event callback.
		reauth_judge: Open a fresh judge channel before the run.

	Returns:
		RunOutcome of the run.
	"""
	template = None
	if config.judge_prompt_file:
		template = load_judge_template(config.judge_prompt_file)
	orchestrator = Orchestrator(config,
	                            provider,
	                            event_cb=event_cb,
	                            judge_template=template)
	try:
		if reauth_judge:
			try:
				await orchestrator.reauthenticate_judge(
				    run_params.judge, run_params.judge_mode)
			except DiscoveryFailure as exc:
				logger.warning("judge re-authentication failed: %s", exc)
		handle = orchestrator.submit(run_params)
		return await handle.wait()
	finally:
		await orchestrator.aclose()


async def run_council(
    config: Config,
    run_params: RunParams,
    event_cb: EventCallback | None = None,
    *,
    reauth_judge: bool = False,
) -> RunOutcome:
	"""
	Run one council round against Copilot-backed channels.

	Parameters:
		config: Application configuration.
		run_params: Validated run parameters.
		event_cb: Optional event callback.
		reauth_judge: Open a fresh judge channel before the run.

	Returns:
		RunOutcome with per-agent results and the judge result or error.
	"""
	from llm_council.integrations.copilot_client import open_provider

	logger.info("run_council start council=%s judge=%s",
	            ",".join(run_params.council), run_params.judge)
	async with open_provider(config) as provider:
		outcome = await run_with_provider(config,
		                                  run_params,
		                                  provider,
		                                  event_cb,
		                                  reauth_judge=reauth_judge)
	logger.info("run_council done ok=%s", outcome.ok)
	return outcome


__all__ = ["run_council", "run_with_provider"]
