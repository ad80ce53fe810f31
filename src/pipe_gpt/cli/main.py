"""CLI entry point for pipe-gpt.

Pipe your content to a chat model directly from the command line:

    tail -30 /var/httpd.log | pipe-gpt -p "Is there anything in this log I should fix?"
    git diff --staged | pipe-gpt --code-review --markdown
    cat file.json | pipe-gpt -p "Convert this JSON to YAML" > file.yaml
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from pipe_gpt import __version__
from pipe_gpt.cli.pipeline import run_pipeline
from pipe_gpt.core.config import load_config, resolve_settings
from pipe_gpt.core.errors import BudgetExceededError, PipeGPTError
from pipe_gpt.core.models import AssistantPurpose
from pipe_gpt.llm.chat_client import ChatClient, api_key_from_env

log = logging.getLogger(__name__)


def _read_piped_input() -> str | None:
    """Return stdin content when it is piped, None when it is a terminal.

    Checking first keeps the command from blocking on an interactive stdin.
    """
    stdin = click.get_text_stream("stdin")
    if stdin.isatty():
        return None
    try:
        return stdin.read()
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: failed to read from stdin: {e}", err=True)
        raise SystemExit(1) from e


@click.command("pipe-gpt")
@click.version_option(version=__version__, prog_name="pipe-gpt")
@click.option(
    "-p", "--prepend",
    default="",
    help='Text to prepend to the piped content e.g. "find the pattern: "',
)
@click.option(
    "-t", "--temperature",
    type=click.FloatRange(0.0, 2.0),
    default=None,
    help="Response temperature. Higher values give more diverse text, "
    "with a risk of grammar errors and nonsense.  [default: 0.6]",
)
@click.option(
    "-m", "--max_tokens", "max_tokens",
    type=int,
    default=None,
    help="Token limit for the request; larger prompts are refused.  [default: 4096]",
)
@click.option(
    "-s", "--top_p", "top_p",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Nucleus sampling parameter between 0.0 and 1.0.  [default: 0.95]",
)
@click.option("--markdown", is_flag=True, help="Render markdown instead of plain text.")
@click.option(
    "--code-review", "code_review",
    is_flag=True,
    help="Use a default prompt that will review your piped code.",
)
@click.option(
    "--config", "config_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Override config.yaml path.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def cli(
    prepend: str,
    temperature: float | None,
    max_tokens: int | None,
    top_p: float | None,
    markdown: bool,
    code_review: bool,
    config_file: Path | None,
    verbose: bool,
) -> None:
    """Send piped content to a chat model and print the reply."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )

    piped_input = _read_piped_input()

    config = load_config(config_file)
    settings = resolve_settings(
        config,
        max_tokens=max_tokens,
        temperature=temperature,
        top_p=top_p,
        render_markdown=markdown,
    )
    purpose = AssistantPurpose.CODE_REVIEWER if code_review else AssistantPurpose.DEFAULT
    log.debug("Resolved settings: %s", settings)

    try:
        client = ChatClient(api_key_from_env(), api_url=settings.api_url)
        exit_code = run_pipeline(prepend, piped_input, purpose, settings, client)
    except BudgetExceededError as e:
        click.echo(f"Maximum tokens set to: {e.limit}", err=True)
        click.echo(f"Estimated tokens in request: {e.estimated}", err=True)
        click.echo(
            "Exiting early due to exceeding max input tokens. "
            "Reduce input length or increase max tokens.",
            err=True,
        )
        raise SystemExit(1) from e
    except PipeGPTError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from e

    if exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    cli()
