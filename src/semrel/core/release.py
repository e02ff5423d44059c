"""Release orchestration.

The pipeline moves through these states::

    INIT -> ANALYZING -> NOOP | PREVIEWING | RELEASING -> DONE

and drops to FAILED from any non-terminal state. In RELEASING the
side-effecting steps run strictly in order and the first failure halts
the run. Steps that already completed are reported but not undone: the
manifest and changelog are only committed and tagged once the lockfile
refresh and package build have succeeded, so an early failure leaves a
working tree that can be inspected and fixed by hand.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from semrel.config import load_config
from semrel.core.bump import apply_bump, decide
from semrel.core.changelog import render_changelog, write_changelog
from semrel.core.commits import Severity, filter_skip_release_commits, parse_commits
from semrel.core.version import Version
from semrel.exceptions import SemrelError, StepFailedError
from semrel.project.build import build_package, update_lockfile
from semrel.project.pyproject import get_pyproject_version, update_pyproject_version
from semrel.vcs.git import GitRepository

if TYPE_CHECKING:
    from collections.abc import Callable

    from semrel.config.models import SemrelConfig
    from semrel.core.commits import ParsedCommit
    from semrel.vcs.git import Signature

logger = logging.getLogger(__name__)

MANIFEST = Path("pyproject.toml")


class PipelineState(StrEnum):
    INIT = "init"
    ANALYZING = "analyzing"
    NOOP = "noop"
    PREVIEWING = "previewing"
    RELEASING = "releasing"
    DONE = "done"
    FAILED = "failed"


_OUTCOMES = frozenset({PipelineState.NOOP, PipelineState.PREVIEWING, PipelineState.RELEASING})


class ReleaseStep(StrEnum):
    """Side-effecting steps of a release, in execution order."""

    MANIFEST = "manifest"
    CHANGELOG = "changelog"
    LOCKFILE = "lockfile"
    PACKAGE = "package"
    COMMIT = "commit"
    TAG = "tag"


@dataclass
class ReleaseContext:
    """State threaded through a single pipeline run."""

    repository_path: Path
    repository: GitRepository
    config: SemrelConfig
    write_mode: bool
    current_version: Version
    signature: Signature
    last_tag: str | None = None
    new_version: Version | None = None
    parsed_commits: list[ParsedCommit] = field(default_factory=list)
    changelog: str = ""

    @property
    def tag_name(self) -> str:
        return self.config.tag_name(self.new_version)


@dataclass
class ReleaseResult:
    """Outcome of a pipeline run.

    ``outcome`` is the branch taken after analysis (NOOP, PREVIEWING or
    RELEASING); it stays None when the run failed before deciding.
    """

    state: PipelineState
    outcome: PipelineState | None = None
    bump: Severity = Severity.UNKNOWN
    new_version: Version | None = None
    completed_steps: list[ReleaseStep] = field(default_factory=list)
    error: SemrelError | None = None

    @property
    def ok(self) -> bool:
        return self.state is PipelineState.DONE


class ReleasePipeline:
    """Analyze a repository and, in write mode, cut a release.

    Args:
        path: Repository root
        write_requested: Whether ``--write`` was given
        ci: Whether a CI environment was detected; forces a dry run
        console: Console for progress output
        err_console: Console for error output
    """

    def __init__(
        self,
        path: Path,
        *,
        write_requested: bool = False,
        ci: bool = False,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self.path = Path(path)
        self.write_requested = write_requested
        self.ci = ci
        self.write_mode = write_requested and not ci
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.state = PipelineState.INIT
        self.completed_steps: list[ReleaseStep] = []

    def _transition(self, state: PipelineState) -> None:
        logger.debug("Pipeline state %s -> %s", self.state, state)
        self.state = state

    def run(self) -> ReleaseResult:
        """Run the pipeline to DONE or FAILED. Never raises SemrelError."""
        if self.write_requested and self.ci:
            self.console.print(
                "[yellow]CI environment detected: ignoring --write and running as a dry run.[/]"
            )

        bump = Severity.UNKNOWN
        new_version = None
        try:
            context = self._initialize()

            self._transition(PipelineState.ANALYZING)
            bump = self._analyze(context)
            new_version = apply_bump(context.current_version, bump)

            if new_version is None:
                self._transition(PipelineState.NOOP)
                self.console.print("No version bump. Nothing to do.")
            else:
                context.new_version = new_version
                context.changelog = render_changelog(
                    new_version,
                    context.parsed_commits,
                    include_scope=context.config.changelog.include_scope,
                    include_sha=context.config.changelog.include_sha,
                )
                if context.write_mode:
                    self._transition(PipelineState.RELEASING)
                    self._release(context)
                else:
                    self._transition(PipelineState.PREVIEWING)
                    self._preview(context)
        except SemrelError as e:
            return self._fail(e, bump, new_version)

        outcome = self.state
        self._transition(PipelineState.DONE)
        return ReleaseResult(
            state=self.state,
            outcome=outcome,
            bump=bump,
            new_version=new_version,
            completed_steps=list(self.completed_steps),
        )

    def _fail(
        self, error: SemrelError, bump: Severity, new_version: Version | None
    ) -> ReleaseResult:
        outcome = self.state if self.state in _OUTCOMES else None
        self._transition(PipelineState.FAILED)

        self.err_console.print(f"[red]Error:[/] {escape(error.message)}")
        if error.stderr:
            self.err_console.print(Text(error.stderr.strip(), style="dim"))
        if self.completed_steps:
            done = ", ".join(step.value for step in self.completed_steps)
            self.err_console.print(
                f"[yellow]Steps completed before the failure (not rolled back):[/] {done}"
            )

        return ReleaseResult(
            state=self.state,
            outcome=outcome,
            bump=bump,
            new_version=new_version,
            completed_steps=list(self.completed_steps),
            error=error,
        )

    def _initialize(self) -> ReleaseContext:
        self.console.print("Analyzing your repository")

        repository = GitRepository(self.path)
        config = load_config(self.path)
        current_version = Version.parse(get_pyproject_version(self.path))
        signature = repository.resolve_signature()
        last_tag = repository.get_latest_tag(config.tag_prefix)

        self.console.print(f"Current version: [cyan]{current_version}[/]")
        logger.debug("Last release tag: %s; committer: %s", last_tag, signature)

        return ReleaseContext(
            repository_path=self.path,
            repository=repository,
            config=config,
            write_mode=self.write_mode,
            current_version=current_version,
            signature=signature,
            last_tag=last_tag,
        )

    def _analyze(self, context: ReleaseContext) -> Severity:
        self.console.print("Analyzing commits")

        commits = context.repository.get_commits_since_tag(context.last_tag)
        commits = filter_skip_release_commits(
            commits, context.config.commits.skip_release_patterns
        )
        context.parsed_commits = parse_commits(commits, context.config.commits)
        bump = decide(pc.severity for pc in context.parsed_commits)

        verb = "will" if context.write_mode else "would"
        self.console.print(f"Commits analyzed. Bump {verb} be [cyan]{bump.name.lower()}[/]")
        return bump

    def _preview(self, context: ReleaseContext) -> None:
        self.console.print(f"New version would be: [green]{context.new_version}[/]")
        self.console.print("Would write the following changelog:")
        self.console.print(
            Panel(Text(context.changelog), title="Changelog preview", border_style="yellow")
        )
        self.console.print(f"Would create annotated git tag [cyan]{context.tag_name}[/]")

    def _release(self, context: ReleaseContext) -> None:
        self.console.print(f"New version: [green]{context.new_version}[/]")

        steps: list[tuple[ReleaseStep, str, Callable[[ReleaseContext], object]]] = [
            (ReleaseStep.MANIFEST, f"Writing new version to {MANIFEST}", self._write_manifest),
            (ReleaseStep.CHANGELOG, "Writing changelog", self._write_changelog),
            (ReleaseStep.LOCKFILE, "Updating lockfile", self._update_lockfile),
            (ReleaseStep.PACKAGE, "Packaging", self._build_package),
            (ReleaseStep.COMMIT, "Committing files", self._commit),
            (ReleaseStep.TAG, f"Creating annotated git tag {context.tag_name}", self._tag),
        ]

        for step, description, action in steps:
            self.console.print(f"  {escape(description)}")
            try:
                action(context)
            except (SemrelError, OSError) as e:
                raise StepFailedError(step.value, e) from e
            self.completed_steps.append(step)
            logger.debug("Completed release step %s", step)

        self.console.print(f"[green]Released {context.tag_name}[/]")

    def _write_manifest(self, context: ReleaseContext) -> None:
        update_pyproject_version(context.repository_path, str(context.new_version))

    def _write_changelog(self, context: ReleaseContext) -> None:
        write_changelog(context.repository_path / context.config.changelog.path, context.changelog)

    def _update_lockfile(self, context: ReleaseContext) -> None:
        update_lockfile(context.repository_path, context.config.build)

    def _build_package(self, context: ReleaseContext) -> None:
        build_package(context.repository_path, context.config.build)

    def _commit(self, context: ReleaseContext) -> None:
        files = [MANIFEST, context.config.changelog.path]
        lockfile = context.config.build.lockfile
        if (context.repository_path / lockfile).exists():
            files.append(lockfile)

        message = context.config.commit_message.format(version=context.new_version)
        context.repository.commit_files(files, message, context.signature)

    def _tag(self, context: ReleaseContext) -> None:
        context.repository.create_tag(context.tag_name, context.changelog, context.signature)


def run_release(
    path: Path,
    *,
    write: bool = False,
    ci: bool = False,
    console: Console | None = None,
    err_console: Console | None = None,
) -> ReleaseResult:
    """Run one release pipeline for the repository at ``path``."""
    pipeline = ReleasePipeline(
        path,
        write_requested=write,
        ci=ci,
        console=console,
        err_console=err_console,
    )
    return pipeline.run()
