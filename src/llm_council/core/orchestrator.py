"""
Council run orchestration.

Drives one run end to end: discover council channels, deliver the prompt
in request order with an inter-agent delay, poll every waiting agent
against a shared deadline, then hand the completed answers to the judge
and parse its verdict. Per-agent failures are recorded on the agent's
result record; only a council with no usable answer ends the run with an
error. Judge failures degrade to an unparsed result carrying the raw
council answers.
"""

from __future__ import annotations

import asyncio
from contextlib import aclosing
from typing import Any

from llm_council.core.discovery import discover
from llm_council.core.errors import (
    AgentTimeout,
    AllCouncilFailed,
    DeliveryError,
    DiscoveryFailure,
    JudgeTimeout,
    JudgeUnreachable,
)
from llm_council.core.evaluation import build_evaluation_prompt
from llm_council.core.injection import deliver
from llm_council.core.judge_parser import parse_judge_response
from llm_council.core.polling import await_completion, await_council
from llm_council.core.registry import AdapterRegistry, display_names, get_agent
from llm_council.core.session import close_channel_safe
from llm_council.models.config import Config, JudgeMode
from llm_council.models.judge_result import JudgeResult
from llm_council.models.run_outcome import (
    EventCallback,
    EventKind,
    RunError,
    RunEvent,
    RunOutcome,
)
from llm_council.models.run_params import RunParams
from llm_council.models.run_state import (
    AgentResult,
    AgentStatus,
    RunStage,
    RunState,
    SessionRole,
)
from llm_council.models.session_handle import SessionHandle
from llm_council.utils.logging import get_logger
from llm_council.utils.protocols import AdapterProtocol, ChannelProviderProtocol

logger = get_logger(__name__)


class RunHandle:
	"""Caller-side handle for a submitted run."""

	def __init__(self, state: RunState,
	             task: asyncio.Task[RunOutcome]) -> None:
		self._state = state
		self._task = task

	@property
	def run_id(self) -> str:
		return self._state.run_id

	@property
	def state(self) -> RunState:
		"""Point-in-time copy of the run state."""
		return self._state.model_copy(deep=True)

	@property
	def done(self) -> bool:
		return self._task.done()

	def cancel(self) -> bool:
		"""Abort the run; in-flight channels are torn down."""
		return self._task.cancel()

	async def wait(self) -> RunOutcome:
		"""
		Wait for the run to finish.

		Cancelling the waiter does not cancel the run.

		Returns:
			RunOutcome of the run, flagged cancelled if it was aborted.
		"""
		try:
			return await asyncio.shield(self._task)
		except asyncio.CancelledError:
			if not self._task.cancelled():
				raise
			# cancelled before the pipeline started
			return RunOutcome(
			    run_id=self.run_id,
			    results=self._state.ordered_results(),
			    judge=self._state.judge,
			    error=RunError(stage=self._state.stage.value,
			                   kind="Cancelled",
			                   message="run cancelled"),
			    cancelled=True,
			)


class Orchestrator:
	"""
	Owns run state and session handles for council runs.

	Parameters:
		config: Application configuration.
		provider: Channel provider used for discovery and automation.
		adapters: Adapter registry; defaults to the provider's factory.
		event_cb: Receives every status, progress and terminal event.
		judge_template: Optional chairman preamble template text.
	"""

	def __init__(
	    self,
	    config: Config,
	    provider: ChannelProviderProtocol,
	    *,
	    adapters: AdapterRegistry | None = None,
	    event_cb: EventCallback | None = None,
	    judge_template: str | None = None,
	) -> None:
		self.config = config
		self.provider = provider
		self.adapters = adapters or AdapterRegistry(provider.adapter_for)
		self.event_cb = event_cb
		self.judge_template = judge_template
		self._current: RunHandle | None = None
		self._judge_handle: SessionHandle | None = None
		self._tasks: set[asyncio.Task[RunOutcome]] = set()

	@property
	def current(self) -> RunHandle | None:
		return self._current

	def submit_run(
	    self,
	    prompt: str,
	    council_ids: list[str] | str,
	    judge_id: str,
	    *,
	    judge_mode: JudgeMode | None = None,
	    exclude_judge: bool = False,
	) -> RunHandle:
		"""
		Validate and start a run.

		Must be called from a running event loop. Any run still in flight
		is cancelled first; the new run starts from a clean state with new
		session handles.

		Raises:
			ValueError: If the submission is invalid (council size,
				unknown agents, empty prompt).
		"""
		params = RunParams(
		    prompt=prompt,
		    council=council_ids,
		    judge=judge_id,
		    exclude_judge=exclude_judge,
		    judge_mode=judge_mode,
		)
		return self.submit(params)

	def submit(self, params: RunParams) -> RunHandle:
		"""Start a run from already validated parameters."""
		loop = asyncio.get_running_loop()
		if self._current is not None and not self._current.done:
			logger.info("cancelling run %s for a new submission",
			            self._current.run_id)
			self._current.cancel()
		# runs still tearing down must release their channels first
		previous = {t for t in self._tasks if not t.done()}
		state = RunState.start(
		    params.prompt,
		    params.council,
		    params.judge,
		    display_names(),
		    judge_mode=params.judge_mode or self.config.judge_mode,
		)
		task = loop.create_task(self._run(state, previous),
		                        name=f"council-run:{state.run_id}")
		self._tasks.add(task)
		task.add_done_callback(self._tasks.discard)
		self._current = RunHandle(state, task)
		return self._current

	async def reauthenticate_judge(
	    self,
	    judge_id: str | None = None,
	    judge_mode: JudgeMode | None = None,
	) -> SessionHandle:
		"""
		Replace the judge channel with a freshly opened one.

		Independent of any in-flight council round; the new handle is
		picked up by the next run that uses the same judge.

		Parameters:
			judge_id: Judge agent id; defaults to the configured judge.
			judge_mode: Isolation mode; defaults to the configured mode.

		Returns:
			The new judge handle.

		Raises:
			DiscoveryFailure: If no channel could be opened.
		"""
		agent = get_agent(judge_id or self.config.default_judge)
		mode = judge_mode or self.config.judge_mode
		previous, self._judge_handle = self._judge_handle, None
		await close_channel_safe(self.provider, previous,
		                         self.config.load_timeout_seconds)
		handle = SessionHandle(agent_id=agent.id, role=SessionRole.JUDGE)
		await discover(handle,
		               self.provider,
		               self.config,
		               fresh=True,
		               isolated=mode == JudgeMode.INCOGNITO)
		self._judge_handle = handle
		logger.info("judge %s re-authenticated (%s)", agent.id, mode.value)
		return handle

	async def aclose(self) -> None:
		"""Cancel any in-flight run and close the spare judge channel."""
		if self._current is not None and not self._current.done:
			self._current.cancel()
			await self._current.wait()
		handle, self._judge_handle = self._judge_handle, None
		await close_channel_safe(self.provider, handle,
		                         self.config.load_timeout_seconds)

	# events

	def _emit(self, state: RunState, kind: EventKind, **fields: Any) -> None:
		if not self.event_cb:
			return
		try:
			self.event_cb(RunEvent(run_id=state.run_id, kind=kind, **fields))
		except Exception:
			logger.warning("event callback failed", exc_info=True)

	def _progress(self, state: RunState, message: str) -> None:
		logger.info("run %s: %s", state.run_id, message)
		self._emit(state, EventKind.PROGRESS, message=message)

	def _set_status(
	    self,
	    state: RunState,
	    record: AgentResult,
	    status: AgentStatus,
	    *,
	    response: str | None = None,
	    error: str | None = None,
	    message: str = "",
	) -> None:
		record.transition(status, response=response, error=error)
		self._emit(state,
		           EventKind.STATUS,
		           agent_key=record.key,
		           status=status,
		           message=message or error or "")

	# pipeline

	async def _run(
	    self,
	    state: RunState,
	    previous: set[asyncio.Task[RunOutcome]] | None = None,
	) -> RunOutcome:
		handles: dict[str, SessionHandle] = {}
		error: RunError | None = None
		cancelled = False
		logger.info("run %s start council=%s judge=%s mode=%s",
		            state.run_id, ",".join(state.council), state.judge_id,
		            state.judge_mode.value)
		try:
			if previous:
				await asyncio.wait(previous)
			await self._council_round(state, handles)
			if not state.completed():
				raise AllCouncilFailed(
				    "no council agent produced a usable response")
			state.stage = RunStage.JUDGE
			state.evaluation = build_evaluation_prompt(
			    state.prompt, state.ordered_results(), self.judge_template)
			try:
				state.judge_result = await self._judge_round(state, handles)
			except (JudgeUnreachable, JudgeTimeout) as exc:
				logger.warning("run %s: %s, returning raw responses",
				               state.run_id, exc)
				self._progress(state, f"Judge unavailable: {exc}")
				state.judge_result = JudgeResult.fallback(
				    (r.name, r.response) for r in state.completed())
			state.stage = RunStage.DONE
		except asyncio.CancelledError:
			cancelled = True
			# the run absorbs its own cancellation
			current = asyncio.current_task()
			if current is not None:
				current.uncancel()
			logger.info("run %s cancelled during %s", state.run_id,
			            state.stage.value)
			for record in state.unfinished():
				self._set_status(state, record, AgentStatus.FAILED,
				                 error="cancelled")
			error = RunError(stage=state.stage.value,
			                 kind="Cancelled",
			                 message="run cancelled")
		except AllCouncilFailed as exc:
			logger.warning("run %s failed: %s", state.run_id, exc)
			error = RunError(stage=RunStage.COUNCIL.value,
			                 kind=type(exc).__name__,
			                 message=str(exc))
		except Exception as exc:
			logger.exception("run %s aborted in %s", state.run_id,
			                 state.stage.value)
			error = RunError(stage=state.stage.value,
			                 kind=type(exc).__name__,
			                 message=str(exc) or type(exc).__name__)
		finally:
			await self._teardown(handles)

		outcome = RunOutcome(
		    run_id=state.run_id,
		    results=[r.model_copy() for r in state.ordered_results()],
		    judge=state.judge.model_copy(),
		    judge_result=None if error else state.judge_result,
		    error=error,
		    cancelled=cancelled,
		)
		if error:
			self._emit(state,
			           EventKind.ERROR,
			           message=error.message,
			           error=error)
		else:
			self._emit(state,
			           EventKind.RESULT,
			           message="evaluation complete",
			           result=outcome.judge_result)
		logger.info("run %s done ok=%s", state.run_id, outcome.ok)
		return outcome

	async def _council_round(self, state: RunState,
	                         handles: dict[str, SessionHandle]) -> None:
		self._progress(state, "Locating council sessions...")
		for record in state.ordered_results():
			handle = SessionHandle(agent_id=record.agent_id,
			                       role=SessionRole.COUNCIL)
			handles[handle.key] = handle
			try:
				await discover(handle, self.provider, self.config)
			except DiscoveryFailure as exc:
				logger.warning("run %s: %s", state.run_id, exc)
				self._set_status(state, record, AgentStatus.FAILED,
				                 error=str(exc))
				continue
			self._set_status(state, record, AgentStatus.READY)

		state.stage = RunStage.DELIVERY
		ready = state.with_status(AgentStatus.READY)
		self._progress(state, f"Sending prompt to {len(ready)} agent(s)...")
		adapters: dict[str, AdapterProtocol] = {}
		records: dict[str, AgentResult] = {}
		for i, record in enumerate(ready):
			if i:
				await asyncio.sleep(self.config.injection_delay_seconds)
			adapter = await self._deliver(state, record,
			                              handles[record.key], state.prompt)
			if adapter is not None:
				adapters[record.key] = adapter
				records[record.key] = record

		state.stage = RunStage.COUNCIL
		if not adapters:
			return
		timeout = self.config.council_timeout_seconds
		self._progress(state,
		               f"Waiting for {len(adapters)} response(s)...")
		remaining = len(adapters)
		responded = 0
		async with aclosing(
		        await_council(
		            adapters,
		            timeout,
		            interval=self.config.poll_interval_seconds,
		            call_timeout=self.config.poll_call_timeout_seconds,
		        )) as finished:
			async for key, text in finished:
				record = records[key]
				remaining -= 1
				if text is None:
					logger.warning("run %s: %s timed out after %gs",
					               state.run_id, key, timeout)
					self._set_status(
					    state,
					    record,
					    AgentStatus.TIMEOUT,
					    error=f"no response within {timeout:g}s",
					)
					continue
				responded += 1
				self._set_status(state, record, AgentStatus.COMPLETE,
				                 response=text)
				self._progress(
				    state, f"{record.name} responded! ({responded} "
				    f"responded, {remaining} remaining)")

	async def _deliver(self, state: RunState, record: AgentResult,
	                   handle: SessionHandle,
	                   text: str) -> AdapterProtocol | None:
		"""Deliver text to one agent, recording the outcome on its record.

		Returns:
			The agent's adapter when delivery succeeded, else None.
		"""
		try:
			adapter = self.adapters.resolve(handle.agent_id, handle.channel)
		except Exception as exc:
			handle.mark_failed(str(exc))
			self._set_status(state, record, AgentStatus.FAILED,
			                 error=str(exc))
			return None

		def on_attempt(attempt: int) -> None:
			self._set_status(state,
			                 record,
			                 AgentStatus.INJECTING,
			                 message=f"attempt {attempt}")

		try:
			await deliver(handle,
			              adapter,
			              self.provider,
			              text,
			              self.config,
			              on_attempt=on_attempt)
		except DeliveryError as exc:
			logger.warning("run %s: %s", state.run_id, exc)
			handle.mark_failed(exc.reason)
			self._set_status(state, record, AgentStatus.FAILED,
			                 error=str(exc))
			return None
		self._set_status(state, record, AgentStatus.WAITING)
		return adapter

	async def _take_judge_handle(self, judge_id: str) -> SessionHandle | None:
		"""Hand over a re-authenticated judge handle, if it fits."""
		handle, self._judge_handle = self._judge_handle, None
		if handle is None:
			return None
		if handle.agent_id == judge_id and handle.bound:
			return handle
		await close_channel_safe(self.provider, handle,
		                         self.config.load_timeout_seconds)
		return None

	async def _judge_round(self, state: RunState,
	                       handles: dict[str, SessionHandle]) -> JudgeResult:
		"""
		Discover, deliver to and poll the judge, then parse its answer.

		Raises:
			JudgeUnreachable: If discovery or delivery failed.
			JudgeTimeout: If the judge did not finish in time.
		"""
		record = state.judge
		evaluation = state.evaluation
		mode = state.judge_mode
		self._progress(state, f"Asking {record.name} to judge...")

		handle = await self._take_judge_handle(state.judge_id)
		if handle is None:
			handle = SessionHandle(agent_id=state.judge_id,
			                       role=SessionRole.JUDGE)
		handles[handle.key] = handle
		try:
			await discover(handle,
			               self.provider,
			               self.config,
			               fresh=mode != JudgeMode.SAME_SESSION,
			               isolated=mode == JudgeMode.INCOGNITO)
		except DiscoveryFailure as exc:
			self._set_status(state, record, AgentStatus.FAILED,
			                 error=str(exc))
			raise JudgeUnreachable(str(exc)) from exc
		self._set_status(state, record, AgentStatus.READY)

		adapter = await self._deliver(state, record, handle, evaluation.text)
		if adapter is None:
			raise JudgeUnreachable(record.error or "delivery failed")

		timeout = self.config.judge_timeout_seconds
		try:
			text = await await_completion(
			    adapter,
			    timeout,
			    interval=self.config.poll_interval_seconds,
			    call_timeout=self.config.poll_call_timeout_seconds,
			    label=record.key,
			)
		except AgentTimeout as exc:
			self._set_status(state, record, AgentStatus.TIMEOUT,
			                 error=str(exc))
			raise JudgeTimeout(str(exc)) from exc
		self._set_status(state, record, AgentStatus.COMPLETE, response=text)

		result = parse_judge_response(text, evaluation.responded)
		if not result.parsed:
			logger.warning("run %s: judge response could not be parsed, "
			               "keeping raw text", state.run_id)
		return result

	async def _teardown(self, handles: dict[str, SessionHandle]) -> None:
		for handle in handles.values():
			await close_channel_safe(self.provider, handle,
			                         self.config.load_timeout_seconds)


__all__ = ["Orchestrator", "RunHandle"]
