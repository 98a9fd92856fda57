from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import typer
from typer.main import get_command

from llm_council.core.registry import AGENTS
from llm_council.core.runner import run_council
from llm_council.loaders.preferences import load_preferences, save_preferences
from llm_council.models.config import Config, JudgeMode, load_env
from llm_council.models.run_outcome import RunEvent, RunOutcome
from llm_council.models.run_params import RunParams
from llm_council.ui.reporting import format_result_text, save_result_text
from llm_council.ui.tui import TUI
from llm_council.utils.logging import configure_logging

cli = typer.Typer(add_completion=False, no_args_is_help=True)


@cli.callback()
def root() -> None:
	"""
	Root callback for the llm-council CLI.

	Sets up the Typer application with no-args-is-help behavior.
	"""
	return None


def _echo_event(event: RunEvent) -> None:
	if event.agent_key:
		status = event.status.value if event.status else ""
		typer.echo(f"[{event.agent_key}] {status} {event.message}".rstrip())
	elif event.message:
		typer.echo(event.message)


def ask_impl(
    prompt: str,
    council: Optional[List[str]] = None,
    judge: Optional[str] = None,
    judge_mode: Optional[JudgeMode] = None,
    include_judge: bool = False,
    timeout: Optional[float] = None,
    judge_timeout: Optional[float] = None,
    plain: bool = False,
    reauth_judge: bool = False,
    output: Optional[Path] = None,
) -> RunOutcome:
	"""
	Broadcast a prompt to the council and have the judge score the answers.

	Omitted selections fall back to the remembered preferences, then to
	the configured defaults. The chosen selections are remembered for the
	next run.

	Parameters:
		prompt: Prompt to broadcast.
		council: Council agent ids (repeatable or comma-separated).
		judge: Judge agent id.
		judge_mode: Judge isolation mode.
		include_judge: Keep the judge in the council.
		timeout: Override for the council timeout in seconds.
		judge_timeout: Override for the judge timeout in seconds.
		plain: Print plain text instead of the live TUI.
		reauth_judge: Open a fresh judge channel before the run.
		output: Optional path to save the plain-text result.

	Returns:
		RunOutcome of the run.
	"""
	load_env()
	config = Config()
	configure_logging(config.log_level)
	prefs = load_preferences(config.preferences_path)

	selected = ",".join(council) if council else None
	try:
		params = RunParams(
		    prompt=prompt,
		    council=selected or prefs.selected_council or list(AGENTS),
		    judge=judge or prefs.selected_judge or config.default_judge,
		    exclude_judge=not include_judge,
		    judge_mode=judge_mode or prefs.judge_isolation_mode,
		    timeout=timeout,
		    judge_timeout=judge_timeout,
		)
		config.apply_overrides(params)
	except ValueError as exc:
		typer.echo(f"error: {exc}", err=True)
		raise typer.Exit(code=2)

	prefs.selected_council = params.council
	prefs.selected_judge = params.judge
	prefs.judge_isolation_mode = config.judge_mode
	prefs.last_prompt = params.prompt
	save_preferences(config.preferences_path, prefs)

	typer.echo(f"Asking {', '.join(params.council)}; judge={params.judge} "
	           f"({config.judge_mode.value}), "
	           f"council_timeout={config.council_timeout_seconds:g}s, "
	           f"judge_timeout={config.judge_timeout_seconds:g}s")

	if plain:
		outcome = asyncio.run(
		    run_council(config,
		                params,
		                event_cb=_echo_event,
		                reauth_judge=reauth_judge))
		if outcome.error:
			typer.echo(
			    f"error ({outcome.error.stage}): {outcome.error.message}",
			    err=True)
		else:
			typer.echo(format_result_text(outcome.judge_result))
	else:
		with TUI(params.council, params.judge) as ui:
			outcome = asyncio.run(
			    run_council(config,
			                params,
			                event_cb=ui.update,
			                reauth_judge=reauth_judge))
			ui.print_summary(outcome)

	if output and outcome.judge_result is not None:
		save_result_text(output, format_result_text(outcome.judge_result))
	return outcome


@cli.command()
def ask(
    prompt: str,
    council: List[str] = typer.Option(
        None,
        "--council",
        "-c",
        help="Council agent id (repeatable or comma-separated)",
    ),
    judge: str = typer.Option(None, "--judge", "-j", help="Judge agent id"),
    judge_mode: JudgeMode = typer.Option(None,
                                         "--judge-mode",
                                         help="Judge isolation mode"),
    include_judge: bool = typer.Option(
        False,
        "--include-judge",
        help="Let the judge also answer as a council member",
    ),
    timeout: float = typer.Option(None,
                                  "--timeout",
                                  help="Override council timeout seconds"),
    judge_timeout: float = typer.Option(None,
                                        "--judge-timeout",
                                        help="Override judge timeout seconds"),
    plain: bool = typer.Option(False,
                               "--plain",
                               help="Print plain text instead of the TUI"),
    reauth_judge: bool = typer.Option(
        False,
        "--reauth-judge",
        help="Open a fresh judge session before the run",
    ),
    output: Path = typer.Option(None,
                                "--output",
                                "-o",
                                help="Save the plain-text result to a file"),
) -> None:
	"""
	Ask the council a question and print the judge's verdict.

	This is the main CLI command.
	"""
	outcome = ask_impl(prompt, council, judge, judge_mode, include_judge,
	                   timeout, judge_timeout, plain, reauth_judge, output)
	if outcome.error:
		raise typer.Exit(code=1)


@cli.command()
def agents() -> None:
	"""List the agents that can sit on the council or judge."""
	for agent in AGENTS.values():
		model = agent.model or "default model"
		typer.echo(f"{agent.id:<12} {agent.name:<12} {agent.url}  ({model})")


def entrypoint(argv=None, *, standalone_mode: bool = True):
	"""
	Typer entrypoint that defaults to `ask` when appropriate.

	Allows calling 'llm-council "question"' without explicitly specifying
	the 'ask' subcommand.

	Parameters:
		argv: Command-line arguments. Defaults to sys.argv[1:].
		standalone_mode: If True, Click handles exit codes.

	Returns:
		Result of the Click application main invocation.
	"""
	args = sys.argv[1:] if argv is None else list(argv)

	_click_app = get_command(cli)
	commands = getattr(_click_app, "commands", {}).keys()
	if args and not args[0].startswith("-") and args[0] not in commands:
		args = ["ask"] + args
	return _click_app.main(
	    args=args,
	    prog_name="llm-council",
	    standalone_mode=standalone_mode,
	)


if __name__ == "__main__":
	entrypoint()
