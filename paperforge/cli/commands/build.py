"""``paperforge build`` — build the HEAD commit into a document and an archive.

By default the result is composed into ``build-<cid>-<MM-DD>.eml``;
``--stdout`` writes the message to standard output instead, and
``--no-email`` writes the document and archive as separate files.
"""

from __future__ import annotations

import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from paperforge.config import Settings
from paperforge.core.pipeline import BuildPipeline
from paperforge.delivery import BaseSink
from paperforge.delivery.eml import EmlFileSink, StreamSink
from paperforge.delivery.local_file import LocalFileSink
from paperforge.errors import PaperforgeError
from paperforge.mail.composer import MessageComposer, parse_address
from paperforge.models.config import BuildConfig, FilterPolicy, MessageConfig, default_subject
from paperforge.sources.git_snapshot import head_snapshot, open_repository, user_identity

# stdout may carry the message itself, so status output goes to stderr.
console = Console(stderr=True)


def build_cmd(
    subject: str = typer.Option(
        "",
        "--subject",
        help="Message subject. Defaults to the repository directory name.",
    ),
    release: bool = typer.Option(
        False,
        "--release",
        help="Build an arXiv release: no visible stamp, archive only the files the compiler used.",
    ),
    stdout: bool = typer.Option(
        False,
        "--stdout",
        help="Write the message to standard output instead of an .eml file.",
    ),
    no_email: bool = typer.Option(
        False,
        "--no-email",
        help="Write the document and archive as separate files instead of a message.",
    ),
    exclude: list[str] | None = typer.Option(
        None,
        "-x",
        "--exclude",
        help="Skip paths starting with this prefix (repeatable).",
    ),
    to: list[str] | None = typer.Option(
        None,
        "--to",
        help="Recipient address (repeatable). Defaults to the sender.",
    ),
    sender: str | None = typer.Option(
        None,
        "--from",
        help="Sender address. Defaults to the global git user identity.",
    ),
    allow_list: bool = typer.Option(
        False,
        "--allow-list",
        help="Only take the primary source and the bibliography database.",
    ),
    repo_path: Path = typer.Option(
        Path("."),
        "--repo",
        help="Path to the git repository.",
    ),
    output_dir: Path = typer.Option(
        Path("."),
        "--output-dir",
        "-o",
        help="Directory receiving the output files.",
    ),
    keep_workspace: bool = typer.Option(
        False,
        "--keep-workspace",
        help="Keep the transient workspace after a successful build.",
    ),
) -> None:
    """Build the commit HEAD points to and deliver the result."""
    settings = Settings()
    try:
        repo = open_repository(repo_path)
        snapshot = head_snapshot(repo)

        build_config = BuildConfig.from_settings(
            settings,
            release=release,
            filter_policy=FilterPolicy.ALLOW_LIST if allow_list else FilterPolicy.EXCLUDE_PREFIX,
            exclusions=tuple(exclude or ()),
            keep_workspace=keep_workspace or settings.keep_workspace,
        )

        if no_email:
            sink: BaseSink = LocalFileSink(output_dir)
        else:
            message_config = MessageConfig(
                sender=parse_address(sender or user_identity(repo)),
                recipients=tuple(parse_address(r) for r in to or ()),
                subject=default_subject(
                    subject or repo_path.resolve().name, release=release
                ),
                message_id_domain=settings.message_id_domain,
            )
            composer = MessageComposer(message_config)
            if stdout:
                sink = StreamSink(composer, sys.stdout.buffer)
            else:
                sink = EmlFileSink(composer, output_dir)

        result = BuildPipeline(build_config).run(snapshot)
        written = sink.deliver(result, snapshot)
    except (PaperforgeError, OSError) as exc:
        console.print(f"[bold red]Build failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    lines = [
        f"[bold]Commit:[/bold]   {snapshot.short_id}",
        f"[bold]Mode:[/bold]     {'release' if release else 'build'}",
        f"[bold]Archived:[/bold] {len(result.included)} file(s)",
    ]
    lines.extend(f"[bold]Wrote:[/bold]    {path}" for path in written)
    if not written:
        lines.append(f"[bold]Sent:[/bold]     message via {sink.sink_name}")
    console.print(
        Panel(
            "\n".join(lines),
            title="[bold]paperforge[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
