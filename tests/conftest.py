import subprocess

import pytest

from multimr import Config, RepositoryEntry


class FakeProcesses:
    """
    Stand-in for subprocess.run that records every command.

    branches maps a cwd to what `git branch --show-current` prints there.
    failures maps a command prefix such as ("git", "commit") to how many
    calls should still fail before it starts succeeding.
    """

    def __init__(self, branches=None, failures=None):
        self.calls = []
        self.branches = dict(branches or {})
        self.failures = dict(failures or {})

    def __call__(self, cmd, cwd=None, **kwargs):
        cmd = list(cmd)
        self.calls.append((cmd, cwd))
        if cmd[:3] == ["git", "branch", "--show-current"]:
            if cwd not in self.branches:
                return subprocess.CompletedProcess(cmd, 128, "", "fatal: not a git repository")
            return subprocess.CompletedProcess(cmd, 0, self.branches[cwd] + "\n", "")
        for prefix, remaining in self.failures.items():
            if tuple(cmd[: len(prefix)]) == prefix and remaining > 0:
                self.failures[prefix] = remaining - 1
                return subprocess.CompletedProcess(cmd, 1, "", "error: pre-commit hook failed")
        return subprocess.CompletedProcess(cmd, 0, "", "")

    def commands(self, cwd=None):
        return [cmd for cmd, where in self.calls if cwd is None or where == cwd]

    def git_mutations(self):
        return [
            cmd for cmd, _ in self.calls
            if cmd[0] == "git" and cmd[1] in ("switch", "add", "commit")
        ]

    def glab_calls(self):
        return [cmd for cmd, _ in self.calls if cmd[0] == "glab"]


@pytest.fixture
def fake_processes(monkeypatch):
    fake = FakeProcesses()
    monkeypatch.setattr("multimr.subprocess.run", fake)
    return fake


@pytest.fixture
def config(tmp_path):
    return Config(
        working_dir=tmp_path,
        reviewers=("alice", "bob", "carol"),
        labels={"bug": "Something is broken", "feature": "New functionality"},
        assignee=None,
    )


@pytest.fixture
def repositories(tmp_path):
    return [
        RepositoryEntry(name="svc-a", path=tmp_path / "svc-a", branch="main"),
        RepositoryEntry(name="svc-b", path=tmp_path / "svc-b", branch="feature-x"),
    ]


def _run_git(args, cwd):
    return subprocess.run(["git"] + args, cwd=cwd, check=True, capture_output=True, text=True)


@pytest.fixture
def git():
    return _run_git


@pytest.fixture
def make_repo():
    def make(path, branch):
        path.mkdir(parents=True)
        _run_git(["init", "-q"], cwd=path)
        _run_git(["config", "user.name", "Test"], cwd=path)
        _run_git(["config", "user.email", "test@example.com"], cwd=path)
        _run_git(["symbolic-ref", "HEAD", f"refs/heads/{branch}"], cwd=path)
        (path / "README.md").write_text("hello\n")
        _run_git(["add", "."], cwd=path)
        _run_git(["commit", "-q", "-m", "init"], cwd=path)
        return path

    return make
