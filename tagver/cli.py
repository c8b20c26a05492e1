# tagver/cli.py
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from .config import DescribeOptions, repo_path
from .errors import TagverError
from .gitgraph import open_repo
from .render import build_version_json, render_version
from .version import get_version
from .versioninfo import collect_version_info

app = typer.Typer(
    help=(
        "Print a version string for a git repository, very close to "
        "`git describe --tags`.\n\n"
        "If HEAD is not tagged: <tag>-<commits since tag>-<HEAD SHA> (e.g. v1.0.4-1-5227b593). "
        "If HEAD is tagged: <tag> (e.g. v1.0.5). "
        "With no tags at all: <branch>-<HEAD SHA>.\n\n"
        "If -b or -c are given together with -t, only the tag name is printed, "
        "clean or not. Print order is <tag>-<branch>-<SHA>."
    ),
    add_completion=False,
)
console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def _badparam(e: Exception | str) -> typer.BadParameter:
    return typer.BadParameter(str(e))


def _fail(e: Exception) -> typer.Exit:
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
    return typer.Exit(code=1)


@app.command()
def main(
    path: Optional[Path] = typer.Argument(
        None, help="Path inside the git repository (default: current directory)."
    ),
    tag: bool = typer.Option(
        False, "-t", "--tag", help="Return the latest semver tag (annotated or lightweight)."
    ),
    branch: bool = typer.Option(False, "-b", "--branch", help="Return the current branch."),
    commit: bool = typer.Option(False, "-c", "--commit", help="Return the current commit."),
    ignore_unclean_tag: bool = typer.Option(
        False,
        "--ignore-unclean-tag",
        help='Return only the tag name even if it does not point at HEAD ("v1.0.4" instead of "v1.0.4-1-89c22b28").',
    ),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
    ci: bool = typer.Option(
        True, "--ci/--no-ci", help="Take refs from CI environment variables when running in CI."
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Explain where values came from (with --version: version details)."
    ),
    version: bool = typer.Option(False, "--version", help="Print tagver's own version and exit."),
) -> None:
    """Print <tag>-<branch>-<commit> for the repository at PATH."""
    if version:
        console.print(get_version(verbose=verbose), markup=False)
        raise typer.Exit()

    fmt = format.lower()
    if fmt not in ("text", "json"):
        raise _badparam("format must be 'text' or 'json'")

    options = DescribeOptions(
        tag=tag,
        branch=branch,
        commit=commit,
        ignore_unclean_tag=ignore_unclean_tag,
        use_ci=ci,
    )
    try:
        repo = open_repo(repo_path(path))
        info = collect_version_info(repo, options, env=os.environ)
    except TagverError as e:
        raise _fail(e)

    if verbose:
        err_console.print(
            f"[dim]source={info.source} commit={info.commit or '-'} "
            f"branch={info.branch or '-'} tag={info.tag or '-'} distance={info.distance}[/dim]"
        )

    text = render_version(info, options)

    if fmt == "json":
        console.print_json(json.dumps(build_version_json(info, text)))
        return

    if not text:
        err_console.print("[yellow]no version information found[/yellow]")
        return
    console.print(text, markup=False)


if __name__ == "__main__":
    app()
