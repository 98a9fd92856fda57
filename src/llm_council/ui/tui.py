"""
Terminal UI for council run progress.

Provides a Rich-based TUI that shows one cell per council agent plus the
judge, updated in real time from run events, and a final summary of the
judge's verdict.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from rich import box
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from llm_council.core.registry import display_names
from llm_council.models.judge_result import JudgeResult, MAX_TOTAL_SCORE
from llm_council.models.run_outcome import EventKind, RunEvent, RunOutcome

_MAX_MESSAGES = 6

_STATUS_STYLES = {
    "pending": "dim",
    "ready": "cyan",
    "injecting": "yellow",
    "waiting": "blue",
    "complete": "green",
    "failed": "red",
    "timeout": "red",
}


@dataclass
class AgentDisplayState:
	"""State for a single agent cell in the TUI."""

	key: str
	name: str
	status: str = "pending"
	messages: deque[str] = field(
	    default_factory=lambda: deque(maxlen=_MAX_MESSAGES))

	def add_message(self, msg: str) -> None:
		"""Add a message to the scrolling log."""
		self.messages.append(msg)

	def render_cell(self) -> Text:
		"""Render cell content for display."""
		text = Text()
		text.append(f"status: {self.status}\n",
		            style=f"bold {_STATUS_STYLES.get(self.status, '')}")
		for msg in self.messages:
			clean = msg.strip()
			if not clean:
				continue
			style = "red" if self.status in ("failed", "timeout") else "dim"
			text.append(f"• {clean}\n", style=style)
		return text


class TUI:
	"""
	Rich-based TUI for streaming run progress.

	Uses Rich's Live display with auto-refresh to update in place.
	"""

	def __init__(self, council: list[str], judge: str,
	             console: Console | None = None):
		self.console = console or Console()
		names = display_names()
		self.council_keys = [f"council:{agent_id}" for agent_id in council]
		self.judge_key = f"judge:{judge}"
		self.states: dict[str, AgentDisplayState] = {
		    f"council:{agent_id}":
		    AgentDisplayState(key=f"council:{agent_id}",
		                      name=names.get(agent_id, agent_id))
		    for agent_id in council
		}
		self.states[self.judge_key] = AgentDisplayState(
		    key=self.judge_key, name=names.get(judge, judge))
		self.progress: deque[str] = deque(maxlen=_MAX_MESSAGES)
		self.live: Live | None = None

	def _build_table(self) -> Group:
		"""Build the display tables."""
		council_table = Table(box=box.ROUNDED, expand=True, show_header=True)
		for key in self.council_keys:
			council_table.add_column(self.states[key].name, min_width=20)
		council_table.add_row(
		    *[self.states[key].render_cell() for key in self.council_keys])

		judge_state = self.states[self.judge_key]
		judge_table = Table(box=box.ROUNDED, expand=True, show_header=True)
		judge_table.add_column(f"Judge: {judge_state.name}", min_width=30)
		judge_table.add_row(judge_state.render_cell())

		progress = Text("\n".join(self.progress), style="dim")
		return Group(council_table, judge_table, progress)

	def __enter__(self):
		"""Start the Live display."""
		self.live = Live(
		    self._build_table(),
		    console=self.console,
		    refresh_per_second=4,
		)
		self.live.start()
		return self

	def __exit__(self, exc_type, exc, tb):
		"""Stop the Live display."""
		if self.live:
			self.live.stop()

	def update(self, event: RunEvent) -> None:
		"""Apply a run event and refresh the display."""
		if event.kind == EventKind.STATUS and event.agent_key:
			state = self.states.get(event.agent_key)
			if state is None:
				return
			if event.status is not None:
				state.status = event.status.value
			if event.message:
				state.add_message(event.message)
		elif event.message:
			self.progress.append(event.message)
		self.refresh()

	def refresh(self):
		"""Force a display refresh."""
		if self.live:
			self.live.update(self._build_table())

	def finalize(self):
		"""Stop the live display."""
		if self.live:
			self.live.stop()

	def _render_scores(self, result: JudgeResult) -> Table:
		table = Table(title="Scores",
		              box=box.ROUNDED,
		              expand=True,
		              title_style="bold cyan")
		table.add_column("Model", style="bold")
		for label in ("Accuracy", "Depth", "Clarity", "Reasoning",
		              "Relevance"):
			table.add_column(label, justify="right")
		table.add_column("Total", justify="right", style="bold")
		for s in result.sorted_scores():
			style = "green" if s.model_name == result.winner else None
			table.add_row(
			    s.model_name,
			    str(s.accuracy),
			    str(s.depth),
			    str(s.clarity),
			    str(s.reasoning),
			    str(s.relevance),
			    f"{s.total}/{MAX_TOTAL_SCORE}",
			    style=style,
			)
		return table

	def _render_agents(self, outcome: RunOutcome) -> Table:
		table = Table(title="Council",
		              box=box.ROUNDED,
		              expand=True,
		              show_header=True)
		table.add_column("Agent", style="bold")
		table.add_column("Status")
		table.add_column("Attempts", justify="right")
		table.add_column("Error")
		records = list(outcome.results)
		if outcome.judge is not None:
			records.append(outcome.judge)
		for r in records:
			label = r.name if r.role.value == "council" else f"{r.name} (judge)"
			table.add_row(
			    label,
			    Text(r.status.value,
			         style=_STATUS_STYLES.get(r.status.value, "")),
			    str(r.attempts),
			    r.error or "",
			)
		return table

	def print_summary(self, outcome: RunOutcome) -> None:
		"""Print final summary after the run completes."""
		self.finalize()
		self.console.print()
		self.console.print(self._render_agents(outcome))

		if outcome.error:
			err = outcome.error
			self.console.print(
			    Panel(f"{err.kind}: {err.message}",
			          title=f"Run failed during {err.stage}",
			          border_style="red"))
			return

		result = outcome.judge_result
		if result is None:
			return
		if not result.parsed:
			self.console.print(
			    Panel(result.raw_text or "No results.",
			          title="Raw responses (judge output not parsed)",
			          border_style="yellow"))
			return

		if result.winner:
			self.console.print(
			    Panel(Text(result.winner, style="bold green"),
			          title="Winner",
			          border_style="green"))
		self.console.print(self._render_scores(result))
		if result.ranking:
			self.console.print("\n[bold]Final Ranking[/bold]")
			for i, name in enumerate(result.ranking, start=1):
				self.console.print(f"  {i}. {name}")
		if result.summary:
			self.console.print(
			    Panel(result.summary, title="Summary", border_style="cyan"))
		for s in result.sorted_scores():
			if s.justification:
				self.console.print(f"\n[bold]{s.model_name}[/bold]: "
				                   f"[dim]{s.justification}[/dim]")


__all__ = ["AgentDisplayState", "TUI"]
