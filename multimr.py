#!/usr/bin/env -S uv run --quiet
# /// script
# requires-python = ">=3.11"
# dependencies = ["textual>=0.50.0", "rich>=13.0"]
# ///
import argparse
import logging
import shlex
import shutil
import subprocess
import sys
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import Header, Label, Static

__version__ = "0.1.0"

LOG = logging.getLogger("multimr")


# =============================================================================
# Configuration
# =============================================================================

CONFIG_FILE = "multimr.toml"
HOSTING_CLI = "glab"
DEFAULT_BRANCHES = ("main", "master")


def resolve_working_dir(raw: str, base: Path) -> Path:
    """Canonicalise a configured working dir, relative paths are taken from base."""
    candidate = Path(raw).expanduser()
    if not candidate.is_absolute():
        candidate = base / candidate
    resolved = candidate.resolve()
    if not resolved.is_dir():
        fallback = Path.cwd().resolve()
        LOG.info("Working directory %s does not exist, using %s", resolved, fallback)
        return fallback
    return resolved


@dataclass(frozen=True)
class Config:
    """Settings from multimr.toml, overridden by command line flags."""
    working_dir: Path
    reviewers: tuple[str, ...] = ()
    labels: dict[str, str] = field(default_factory=dict)
    assignee: str | None = None
    dry_run: bool = False

    @classmethod
    def load(
        cls,
        path: Path | None = None,
        working_dir: str | None = None,
        dry_run: bool = False,
    ) -> "Config":
        """Load config from disk or return defaults."""
        path = path or Path(CONFIG_FILE)
        data: dict = {}
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError:
            LOG.debug("No config file at %s", path)
        except (tomllib.TOMLDecodeError, OSError) as e:
            LOG.info("Ignoring unreadable config %s: %s", path, e)
        return cls.from_dict(
            data,
            base=path.resolve().parent,
            working_dir=working_dir,
            dry_run=dry_run,
        )

    @classmethod
    def from_dict(
        cls,
        data: dict,
        base: Path | None = None,
        working_dir: str | None = None,
        dry_run: bool = False,
    ) -> "Config":
        # A field with the wrong type falls back to its default, the rest still count
        reviewers = data.get("reviewers")
        if not isinstance(reviewers, list):
            reviewers = []
        labels = data.get("labels")
        if not isinstance(labels, dict):
            labels = {}
        assignee = data.get("assignee")
        if not isinstance(assignee, str) or not assignee.strip():
            assignee = None

        if working_dir is not None:
            raw_dir, dir_base = working_dir, Path.cwd()
        else:
            raw_dir = data.get("working_dir")
            if not isinstance(raw_dir, str) or not raw_dir:
                raw_dir = "."
            dir_base = base or Path.cwd()

        return cls(
            working_dir=resolve_working_dir(raw_dir, dir_base),
            reviewers=tuple(dict.fromkeys(r for r in reviewers if isinstance(r, str) and r)),
            labels={str(k): str(v) for k, v in labels.items()},
            assignee=assignee.strip() if assignee else None,
            dry_run=dry_run,
        )


# =============================================================================
# Logging
# =============================================================================

def configure_logging(verbosity: int) -> None:
    """
    Configure the root logger based on a verbosity count.

    verbosity == 0 -> WARNING
    verbosity == 1 -> INFO
    verbosity >= 2 -> DEBUG
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Git Helpers
# =============================================================================

def run_git(args: list[str], cwd: Path) -> tuple[bool, str]:
    cmd = ["git"] + args
    LOG.debug("Running in %s: %s", cwd, shlex.join(cmd))
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            # hooks may print in any locale
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        return False, str(e)

    if result.returncode == 0:
        return True, (result.stdout or "").strip()

    # On failure, prefer stderr (where git errors go), fall back to stdout
    error = (result.stderr or "").strip() or (result.stdout or "").strip()
    for line in error.split("\n"):
        if line.startswith(("fatal:", "error:")):
            return False, line
    lines = [l for l in error.split("\n") if l.strip()]
    return False, lines[-1] if lines else f"git {args[0]} exited with status {result.returncode}"


def current_branch(repo_path: Path) -> str | None:
    ok, branch = run_git(["branch", "--show-current"], repo_path)
    if not ok:
        return None
    return branch or "DETACHED"


def is_repository_root(path: Path) -> bool:
    """True if path is the top level of its own git work tree."""
    ok, toplevel = run_git(["rev-parse", "--show-toplevel"], path)
    if not ok or not toplevel:
        return False
    return Path(toplevel).resolve() == path.resolve()


# =============================================================================
# Repository Discovery
# =============================================================================

@dataclass(frozen=True)
class RepositoryEntry:
    name: str
    path: Path
    branch: str


def discover_repositories(working_dir: Path) -> list[RepositoryEntry]:
    """Find the git repositories directly below working_dir, ordered by name."""
    try:
        candidates = sorted(p for p in working_dir.iterdir() if p.is_dir())
    except OSError as e:
        LOG.warning("Cannot list %s: %s", working_dir, e)
        return []

    repositories: list[RepositoryEntry] = []
    for path in candidates:
        if not is_repository_root(path):
            LOG.debug("Skipping %s: not a git repository", path.name)
            continue
        branch = current_branch(path)
        if branch is None:
            LOG.debug("Skipping %s: cannot read current branch", path.name)
            continue
        repositories.append(RepositoryEntry(name=path.name, path=path, branch=branch))
    LOG.info("Found %d repositories in %s", len(repositories), working_dir)
    return repositories


# =============================================================================
# Wizard State Machine
# =============================================================================

class Stage(Enum):
    REPO_SELECTION = "Select Repos"
    DESCRIBE = "Describe"
    REVIEWER_SELECTION = "Add Reviewers"
    FINALIZE = "Finalize"


class InputFocus(Enum):
    TITLE = "Title"
    DESCRIPTION = "Description"
    LABEL = "Label"

    def next(self) -> "InputFocus":
        order = list(InputFocus)
        return order[(order.index(self) + 1) % len(order)]


class KeyKind(Enum):
    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    ESCAPE = "escape"
    TAB = "tab"
    BACKSPACE = "backspace"
    CANCEL = "cancel"
    CHAR = "char"


@dataclass(frozen=True)
class Keypress:
    kind: KeyKind
    char: str = ""

    @classmethod
    def of(cls, char: str) -> "Keypress":
        return cls(KeyKind.CHAR, char)

    def is_down(self) -> bool:
        return self.kind is KeyKind.DOWN or self.char == "j"

    def is_up(self) -> bool:
        return self.kind is KeyKind.UP or self.char == "k"


@dataclass
class MultiSelect:
    """Highlight cursor plus a set of checked indices over a fixed list."""
    items: Sequence
    highlighted: int = 0
    selected: set[int] = field(default_factory=set)

    def move(self, step: int) -> None:
        if self.items:
            self.highlighted = (self.highlighted + step) % len(self.items)

    def toggle(self) -> None:
        if not self.items:
            return
        if self.highlighted in self.selected:
            self.selected.discard(self.highlighted)
        else:
            self.selected.add(self.highlighted)

    def chosen(self) -> list:
        return [self.items[i] for i in sorted(self.selected)]


@dataclass
class SingleSelect:
    items: Sequence[str]
    index: int = 0

    def move(self, step: int) -> None:
        if self.items:
            self.index = (self.index + step) % len(self.items)

    def current(self) -> str | None:
        return self.items[self.index] if self.items else None


@dataclass
class DescribeForm:
    """Title, description and label inputs of the Describe stage."""
    labels: SingleSelect
    title: str = ""
    description: str = ""
    focus: InputFocus = InputFocus.TITLE

    def type(self, char: str) -> None:
        if self.focus is InputFocus.TITLE:
            self.title += char
        elif self.focus is InputFocus.DESCRIPTION:
            self.description += char
        elif char == "j":
            self.labels.move(1)
        elif char == "k":
            self.labels.move(-1)

    def backspace(self) -> None:
        if self.focus is InputFocus.TITLE:
            self.title = self.title[:-1]
        elif self.focus is InputFocus.DESCRIPTION:
            self.description = self.description[:-1]


@dataclass(frozen=True)
class MergeRequestSpec:
    """What to open, independent of the repository it is opened in."""
    title: str
    description: str = ""
    reviewers: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()
    assignee: str | None = None

    @property
    def branch_name(self) -> str:
        return self.title.strip().replace(" ", "-")

    def command(self, push: bool) -> list[str]:
        """Build the glab invocation; push for a freshly created branch, --yes otherwise."""
        cmd = [HOSTING_CLI, "mr", "create", "--title", self.title, "--description", self.description]
        for reviewer in self.reviewers:
            cmd += ["--reviewer", reviewer]
        for label in self.labels:
            cmd += ["--label", label]
        if self.assignee:
            cmd += ["--assignee", self.assignee]
        cmd.append("--push" if push else "--yes")
        return cmd


class Wizard:
    """
    The four-stage flow from repository selection to confirmation.

    Each stage owns its own state object (repos, form, reviewers); config and
    repositories are shared and never modified. handle() applies one key at a time.
    """

    def __init__(self, config: Config, repositories: Sequence[RepositoryEntry]) -> None:
        self.config = config
        self.repositories = tuple(repositories)
        self.stage = Stage.REPO_SELECTION
        self.repos = MultiSelect(self.repositories)
        self.form = DescribeForm(SingleSelect(tuple(config.labels)))
        self.reviewers = MultiSelect(config.reviewers)
        self.running = True
        self.completed = False
        self.result: MergeRequestSpec | None = None
        self.targets: list[RepositoryEntry] = []

    def handle(self, key: Keypress) -> None:
        if key.kind is KeyKind.CANCEL:
            self.quit()
            return
        if not self.running:
            return
        handlers = {
            Stage.REPO_SELECTION: self._on_repo_selection,
            Stage.DESCRIBE: self._on_describe,
            Stage.REVIEWER_SELECTION: self._on_reviewer_selection,
            Stage.FINALIZE: self._on_finalize,
        }
        handlers[self.stage](key)

    def _on_repo_selection(self, key: Keypress) -> None:
        if key.kind is KeyKind.ESCAPE or key.char == "q":
            self.quit()
        elif key.is_down():
            self.repos.move(1)
        elif key.is_up():
            self.repos.move(-1)
        elif key.char == " ":
            self.repos.toggle()
        elif key.kind is KeyKind.ENTER and self.repos.selected:
            self.stage = Stage.DESCRIBE

    def _on_describe(self, key: Keypress) -> None:
        if key.kind is KeyKind.TAB:
            self.form.focus = self.form.focus.next()
        elif key.kind is KeyKind.BACKSPACE:
            self.form.backspace()
        elif key.kind is KeyKind.CHAR:
            self.form.type(key.char)
        elif key.kind is KeyKind.DOWN:
            self.form.labels.move(1)
        elif key.kind is KeyKind.UP:
            self.form.labels.move(-1)
        elif key.kind is KeyKind.ENTER:
            self.stage = Stage.REVIEWER_SELECTION
        elif key.kind is KeyKind.ESCAPE:
            self.stage = Stage.REPO_SELECTION

    def _on_reviewer_selection(self, key: Keypress) -> None:
        if key.is_down():
            self.reviewers.move(1)
        elif key.is_up():
            self.reviewers.move(-1)
        elif key.char == " ":
            self.reviewers.toggle()
        elif key.kind is KeyKind.ENTER:
            self.stage = Stage.FINALIZE
        elif key.kind is KeyKind.ESCAPE:
            self.stage = Stage.DESCRIBE

    def _on_finalize(self, key: Keypress) -> None:
        if key.kind is KeyKind.ENTER or key.char == "y":
            self.confirm()
        elif key.kind is KeyKind.ESCAPE or key.char == "n":
            self.stage = Stage.REVIEWER_SELECTION

    def build_spec(self) -> MergeRequestSpec:
        label = self.form.labels.current()
        return MergeRequestSpec(
            title=self.form.title,
            description=self.form.description,
            reviewers=tuple(self.reviewers.chosen()),
            labels=(label,) if label is not None else (),
            assignee=self.config.assignee,
        )

    def confirm(self) -> None:
        self.result = self.build_spec()
        self.targets = self.repos.chosen()
        self.completed = True
        self.running = False

    def quit(self) -> None:
        self.running = False


# =============================================================================
# Merge Request Execution
# =============================================================================

@dataclass(frozen=True)
class CommitRetryPolicy:
    """
    How many times staging and committing is repeated after a failure.

    A pre-commit hook that reformats files fails the first commit and leaves its
    fixes unstaged, so re-running `git add` and `git commit` usually succeeds.
    """
    retries: int = 1

    @property
    def attempts(self) -> int:
        return 1 + max(self.retries, 0)


COMMIT_RETRY = CommitRetryPolicy()
NO_RETRY = CommitRetryPolicy(retries=0)


@dataclass
class ExecutionResult:
    name: str
    ok: bool
    message: str
    command: list[str] = field(default_factory=list)
    branch: str | None = None
    path: Path | None = None


def commit_changes(repo_path: Path, message: str, policy: CommitRetryPolicy = COMMIT_RETRY) -> tuple[bool, str]:
    output = ""
    for attempt in range(1, policy.attempts + 1):
        ok, output = run_git(["add", "."], repo_path)
        if ok:
            ok, output = run_git(["commit", "-am", message], repo_path)
        if ok:
            return True, output
        LOG.warning("Commit attempt %d/%d in %s failed: %s", attempt, policy.attempts, repo_path.name, output)
    return False, output


def run_hosting_cli(cmd: list[str], cwd: Path) -> tuple[bool, str]:
    LOG.debug("Running in %s: %s", cwd, shlex.join(cmd))
    try:
        # glab talks to the user directly, so stdio is inherited
        result = subprocess.run(cmd, cwd=cwd)
    except OSError as e:
        return False, str(e)
    if result.returncode != 0:
        return False, f"{cmd[0]} exited with status {result.returncode}"
    return True, "Merge request created"


def create_merge_request(
    spec: MergeRequestSpec,
    repo: RepositoryEntry,
    config: Config,
    policy: CommitRetryPolicy = COMMIT_RETRY,
) -> ExecutionResult:
    """Open a merge request for one repository, branching off main/master first."""
    branch = current_branch(repo.path)
    if branch is None:
        LOG.warning("Could not re-read the branch of %s, using %s", repo.name, repo.branch)
        branch = repo.branch

    needs_branch = branch in DEFAULT_BRANCHES
    cmd = spec.command(push=needs_branch)
    new_branch = spec.branch_name if needs_branch else None

    def finish(ok: bool, message: str) -> ExecutionResult:
        return ExecutionResult(repo.name, ok, message, cmd, new_branch, repo.path)

    if needs_branch:
        # read-only, so a dry run fails where the real run would
        ok, output = run_git(["check-ref-format", "--branch", new_branch], repo.path)
        if not ok:
            return finish(False, f"Invalid branch name {new_branch!r}: {output}")

    if config.dry_run:
        if needs_branch:
            return finish(True, f"Would branch {new_branch} off {branch}, commit and push")
        return finish(True, f"Would open from {branch}")

    if needs_branch:
        ok, output = run_git(["switch", "-c", new_branch], repo.path)
        if not ok:
            return finish(False, f"Branch creation failed: {output}")
        ok, output = commit_changes(repo.path, spec.title, policy)
        if not ok:
            return finish(False, f"Commit failed: {output}")

    return finish(*run_hosting_cli(cmd, repo.path))


def execute_all(
    spec: MergeRequestSpec,
    targets: Sequence[RepositoryEntry],
    config: Config,
    policy: CommitRetryPolicy = COMMIT_RETRY,
) -> list[ExecutionResult]:
    results = []
    for repo in targets:
        LOG.info("Creating merge request in %s", repo.name)
        results.append(create_merge_request(spec, repo, config, policy))
    return results


def report_results(results: list[ExecutionResult], dry_run: bool, console: Console | None = None) -> None:
    console = console or Console()
    title = "Dry Run" if dry_run else "Merge Request Results"
    console.print(f"\n[bold]{title}[/bold]\n")
    for result in results:
        icon = "[green]✓[/green]" if result.ok else "[red]✗[/red]"
        console.print(f"{icon} {escape(result.name)}: {escape(result.message)}")
        if dry_run:
            if result.path is not None:
                console.print(f"    [dim]in {escape(str(result.path))}[/dim]")
            console.print(f"    [dim]{escape(shlex.join(result.command))}[/dim]")
    success = sum(1 for r in results if r.ok)
    failed = len(results) - success
    console.print(f"\n[bold]Summary:[/bold] [green]{success} succeeded[/green], [red]{failed} failed[/red]")


# =============================================================================
# Presentation
# =============================================================================

HELP = {
    Stage.REPO_SELECTION: "↑/↓/j/k: Move  Space: Select  Enter: Next  q/Esc: Quit",
    Stage.DESCRIBE: "Tab: Switch field  ↑/↓ (j/k on Label): Select Label  Enter: Next  Esc: Back",
    Stage.REVIEWER_SELECTION: "↑/↓/j/k: Move  Space: Select  Enter: Next  Esc: Back",
    Stage.FINALIZE: "y/Enter: Confirm  n/Esc: Back",
}

HIGHLIGHT = "yellow on blue"


def _checklist(items: Sequence[str], cursor: MultiSelect) -> list[str]:
    lines = []
    for i, text in enumerate(items):
        mark = "☑" if i in cursor.selected else "☐"
        line = f"{mark} {escape(text)}"
        if i == cursor.highlighted:
            line = f"[{HIGHLIGHT}]{line}[/]"
        lines.append(line)
    return lines


def render_repo_selection(wizard: Wizard) -> str:
    if wizard.repositories:
        rows = [f"{repo.name} ({repo.branch})" for repo in wizard.repositories]
        lines = _checklist(rows, wizard.repos)
    else:
        lines = ["[dim]No git repositories found[/dim]"]
    lines.append("")
    lines.append(
        f"Current directory: {escape(str(wizard.config.working_dir))} "
        f"(Selected: {len(wizard.repos.selected)})"
    )
    return "\n".join(lines)


def _field(name: str, value: str, focused: bool) -> str:
    style = "bold white on blue" if focused else "bold"
    return f"[{style}]{name}:[/] {escape(value)}"


def render_describe(wizard: Wizard) -> str:
    form = wizard.form
    lines = ["[bold]Repositories:[/bold]"]
    lines += [f"  {escape(repo.name)}" for repo in wizard.repos.chosen()]
    lines.append("")
    lines.append(_field("Title", form.title, form.focus is InputFocus.TITLE))
    lines.append(_field("Description", form.description, form.focus is InputFocus.DESCRIPTION))
    lines.append("")
    label_focused = form.focus is InputFocus.LABEL
    lines.append("[bold white on blue]GitLab Label:[/]" if label_focused else "[bold]GitLab Label:[/bold]")
    if not wizard.config.labels:
        lines.append("  [dim]No labels configured[/dim]")
    for i, (key, description) in enumerate(wizard.config.labels.items()):
        if i == form.labels.index:
            style = HIGHLIGHT if label_focused else "yellow"
            lines.append(f"  [{style}](x) {escape(key)}: {escape(description)}[/]")
        else:
            lines.append(f"  ( ) {escape(key)}: {escape(description)}")
    return "\n".join(lines)


def render_reviewer_selection(wizard: Wizard) -> str:
    if wizard.config.reviewers:
        lines = _checklist(wizard.config.reviewers, wizard.reviewers)
    else:
        lines = ["[dim]No reviewers configured[/dim]"]
    lines.append("")
    if wizard.config.assignee:
        lines.append(f"[green]Assignee: {escape(wizard.config.assignee)}[/green]")
    else:
        lines.append("[red]No assignee set[/red]")
    return "\n".join(lines)


def render_overview(wizard: Wizard) -> str:
    spec = wizard.build_spec()
    repos = ", ".join(repo.name for repo in wizard.repos.chosen()) or "No repositories selected"
    reviewers = ", ".join(spec.reviewers) or "No reviewers selected"
    label = ", ".join(spec.labels) or "No label"
    lines = [
        "[bold]Overview[/bold]",
        "",
        f"Repositories: {escape(repos)}",
        f"Title: {escape(spec.title)}",
        f"Description: {escape(spec.description)}",
        f"Label: {escape(label)}",
        f"Reviewers: {escape(reviewers)}",
        f"Assignee: {escape(spec.assignee or 'None')}",
        "",
    ]
    if wizard.config.dry_run:
        lines.append("[yellow]Dry run: commands are printed, nothing is executed.[/yellow]")
    lines.append("[dim]Press 'y' to confirm, 'n' to go back.[/dim]")
    return "\n".join(lines)


RENDERERS = {
    Stage.REPO_SELECTION: render_repo_selection,
    Stage.DESCRIBE: render_describe,
    Stage.REVIEWER_SELECTION: render_reviewer_selection,
    Stage.FINALIZE: render_overview,
}


def render_stage(wizard: Wizard) -> str:
    return RENDERERS[wizard.stage](wizard)


class MultiMRApp(App):
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        background: $surface;
    }

    #wizard-body {
        height: 1fr;
        border: round $primary;
        padding: 1 2;
    }

    #wizard-content {
        width: 100%;
        height: auto;
    }

    #status-bar {
        dock: bottom;
        height: 1;
        background: $primary-background;
        padding: 0 1;
    }

    #help-label {
        width: 100%;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("up", "nav_up", show=False, priority=True),
        Binding("down", "nav_down", show=False, priority=True),
        Binding("enter", "advance", "Next", show=False, priority=True),
        Binding("escape", "back", "Back", show=False, priority=True),
        Binding("tab", "cycle_focus", "Switch field", show=False, priority=True),
        Binding("backspace", "delete_char", show=False, priority=True),
        Binding("ctrl+c", "cancel", "Cancel", show=False, priority=True),
        Binding("ctrl+q", "cancel", "Cancel", show=False, priority=True),
    ]

    def __init__(self, config: Config, repositories: Sequence[RepositoryEntry]) -> None:
        super().__init__()
        self.config = config
        self.wizard = Wizard(config, repositories)

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="wizard-body"):
            yield Static("", id="wizard-content")
        with Horizontal(id="status-bar"):
            yield Label("", id="help-label")

    def on_mount(self) -> None:
        self.sub_title = str(self.config.working_dir)
        self.refresh_view()

    def refresh_view(self) -> None:
        self.title = f"Multi MR - {self.wizard.stage.value}"
        self.query_one("#wizard-content", Static).update(render_stage(self.wizard))
        self.query_one("#help-label", Label).update(HELP[self.wizard.stage])

    def send(self, key: Keypress) -> None:
        self.wizard.handle(key)
        if not self.wizard.running:
            self.exit(self.wizard.result)
            return
        self.refresh_view()

    def action_nav_up(self) -> None:
        self.send(Keypress(KeyKind.UP))

    def action_nav_down(self) -> None:
        self.send(Keypress(KeyKind.DOWN))

    def action_advance(self) -> None:
        self.send(Keypress(KeyKind.ENTER))

    def action_back(self) -> None:
        self.send(Keypress(KeyKind.ESCAPE))

    def action_cycle_focus(self) -> None:
        self.send(Keypress(KeyKind.TAB))

    def action_delete_char(self) -> None:
        self.send(Keypress(KeyKind.BACKSPACE))

    def on_key(self, event: events.Key) -> None:
        if event.is_printable and event.character:
            event.stop()
            self.send(Keypress.of(event.character))

    def action_cancel(self) -> None:
        self.send(Keypress(KeyKind.CANCEL))

    def action_help_quit(self) -> None:
        """Textual's own quit actions cancel the wizard too."""
        self.action_cancel()

    async def action_quit(self) -> None:
        self.action_cancel()


# =============================================================================
# Entry Point
# =============================================================================

def hosting_cli_installed() -> bool:
    return shutil.which(HOSTING_CLI) is not None


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="multimr",
        description="Create identical merge requests on multiple repositories.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the glab commands instead of running them; no branches or commits are made.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to the config file (default: ./{CONFIG_FILE}).",
    )
    parser.add_argument(
        "-C",
        "--working-dir",
        default=None,
        help="Directory containing the repositories (overrides working_dir from the config).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be specified multiple times).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.verbose)

    if not hosting_cli_installed():
        print(
            f"[Error] GitLab CLI '{HOSTING_CLI}' is not installed. "
            "Please install it to use this application.",
            file=sys.stderr,
        )
        return 1

    config = Config.load(args.config, working_dir=args.working_dir, dry_run=args.dry_run)
    repositories = discover_repositories(config.working_dir)

    app = MultiMRApp(config, repositories)
    try:
        app.run()
    except KeyboardInterrupt:
        return 130

    wizard = app.wizard
    if not wizard.completed or wizard.result is None:
        return 0

    results = execute_all(wizard.result, wizard.targets, config)
    report_results(results, dry_run=config.dry_run)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
