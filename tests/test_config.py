from pathlib import Path

from multimr import Config


def write_config(directory: Path, text: str) -> Path:
    path = directory / "multimr.toml"
    path.write_text(text)
    return path


def test_missing_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    config = Config.load()

    assert config.working_dir == tmp_path.resolve()
    assert config.reviewers == ()
    assert config.labels == {}
    assert config.assignee is None
    assert config.dry_run is False


def test_malformed_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    write_config(tmp_path, "reviewers = [unterminated\n")

    config = Config.load()

    assert config.reviewers == ()
    assert config.labels == {}
    assert config.working_dir == tmp_path.resolve()


def test_full_config(tmp_path):
    (tmp_path / "repos").mkdir()
    path = write_config(
        tmp_path,
        'working_dir = "repos"\n'
        'reviewers = ["alice", "bob", "alice"]\n'
        'assignee = "dave"\n'
        "[labels]\n"
        'bug = "Something is broken"\n'
        'feature = "New functionality"\n',
    )

    config = Config.load(path, dry_run=True)

    assert config.working_dir == (tmp_path / "repos").resolve()
    assert config.reviewers == ("alice", "bob")
    assert list(config.labels) == ["bug", "feature"]
    assert config.labels["bug"] == "Something is broken"
    assert config.assignee == "dave"
    assert config.dry_run is True


def test_absolute_working_dir(tmp_path):
    target = tmp_path / "elsewhere"
    target.mkdir()
    path = write_config(tmp_path, f'working_dir = "{target.as_posix()}"\n')

    assert Config.load(path).working_dir == target.resolve()


def test_missing_working_dir_falls_back_to_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    write_config(tmp_path, 'working_dir = "does-not-exist"\n')

    assert Config.load().working_dir == tmp_path.resolve()


def test_working_dir_override_is_relative_to_cwd(tmp_path, monkeypatch):
    (tmp_path / "override").mkdir()
    monkeypatch.chdir(tmp_path)
    write_config(tmp_path, 'working_dir = "/nonexistent"\n')

    assert Config.load(working_dir="override").working_dir == (tmp_path / "override").resolve()


def test_wrong_types_fall_back_per_field(tmp_path):
    config = Config.from_dict(
        {"reviewers": "alice", "labels": ["bug"], "assignee": 3, "working_dir": 7},
        base=tmp_path,
    )

    assert config.reviewers == ()
    assert config.labels == {}
    assert config.assignee is None
    assert config.working_dir == tmp_path.resolve()


def test_blank_assignee_is_none(tmp_path):
    assert Config.from_dict({"assignee": "  "}, base=tmp_path).assignee is None
