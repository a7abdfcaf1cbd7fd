"""Tests for the gitsnap command line."""

import json
import os
import subprocess
import tempfile

import pytest

from gitsnap import __version__
from gitsnap.cli import main


def _git(*args):
    subprocess.run(["git", *args], capture_output=True, check=True)


def test_no_mode_prints_help():
    assert main([]) == 2


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_backup_writes_snapshot():
    with tempfile.TemporaryDirectory() as tmp:
        proj = os.path.join(tmp, "code", "proj")
        _git("init", proj)
        _git("-C", proj, "remote", "add", "origin", "https://example/a.git")
        config = os.path.join(tmp, "repos_config.json")

        assert main(["--backup", "--dir", os.path.join(tmp, "code"), "--config", config]) == 0

        with open(config) as f:
            data = json.load(f)
        assert data == [{
            "path": os.path.join(proj, ".git"),
            "remotes": ["https://example/a.git", "https://example/a.git"],
            "is_bare": False,
        }]


def test_backup_empty_tree():
    with tempfile.TemporaryDirectory() as tmp:
        base = os.path.join(tmp, "code")
        os.makedirs(base)
        config = os.path.join(tmp, "repos_config.json")
        assert main(["--backup", "--dir", base, "--config", config, "--workers", "4"]) == 0
        with open(config) as f:
            assert json.load(f) == []


def test_backup_missing_dir_fails():
    with tempfile.TemporaryDirectory() as tmp:
        config = os.path.join(tmp, "repos_config.json")
        assert main(["--backup", "--dir", os.path.join(tmp, "nope"), "--config", config]) == 1
        assert not os.path.exists(config)


def test_restore_missing_config_fails():
    with tempfile.TemporaryDirectory() as tmp:
        assert main(["--restore", "--config", os.path.join(tmp, "nope.json")]) == 1


def test_restore_record_without_remote_fails():
    with tempfile.TemporaryDirectory() as tmp:
        config = os.path.join(tmp, "repos_config.json")
        with open(config, "w") as f:
            json.dump([{"path": os.path.join(tmp, "p", ".git"), "remotes": [], "is_bare": False}], f)
        assert main(["--restore", "--config", config]) == 1
        assert not os.path.exists(os.path.join(tmp, "p"))


def test_restore_from_snapshot(monkeypatch):
    with tempfile.TemporaryDirectory() as tmp:
        origin = os.path.join(tmp, "origin.git")
        _git("init", "--bare", origin)
        config = os.path.join(tmp, "repos_config.json")
        with open(config, "w") as f:
            json.dump([{"path": "proj/.git", "remotes": [origin], "is_bare": False}], f)

        target = os.path.join(tmp, "target")
        os.makedirs(target)
        monkeypatch.chdir(target)

        assert main(["--restore", "--config", config]) == 0
        assert os.path.isdir(os.path.join(target, "proj", ".git"))


def test_list_snapshot(capsys):
    with tempfile.TemporaryDirectory() as tmp:
        config = os.path.join(tmp, "repos_config.json")
        with open(config, "w") as f:
            json.dump([
                {"path": "proj/.git", "remotes": ["https://example/a.git"], "is_bare": False},
                {"path": "mirror.git/.git", "remotes": ["https://example/m.git"], "is_bare": True},
            ], f)
        assert main(["--list", "--config", config]) == 0
        out = capsys.readouterr().out
        assert "proj/.git" in out
        assert "bare" in out
        assert "2 repos" in out


def test_list_empty_snapshot(capsys):
    with tempfile.TemporaryDirectory() as tmp:
        config = os.path.join(tmp, "repos_config.json")
        with open(config, "w") as f:
            f.write("[]\n")
        assert main(["--list", "--config", config]) == 0
        assert "empty" in capsys.readouterr().out


# --- Restore policy flags ---

def _bare_then_plain(tmp):
    """Two origins and a snapshot: a bare record with two remotes, then a plain one."""
    first = os.path.join(tmp, "first.git")
    second = os.path.join(tmp, "second.git")
    _git("init", "--bare", first)
    _git("init", "--bare", second)
    config = os.path.join(tmp, "repos_config.json")
    with open(config, "w") as f:
        json.dump([
            {"path": "mirror.git/.git", "remotes": [first, second], "is_bare": True},
            {"path": "proj/.git", "remotes": [second], "is_bare": False},
        ], f)
    target = os.path.join(tmp, "target")
    os.makedirs(target)
    return config, target


def _remote_names(repo):
    out = subprocess.run(["git", "-C", repo, "remote"], capture_output=True, text=True, check=True).stdout
    return out.split()


def test_restore_stops_after_bare_with_secondaries(monkeypatch, capsys):
    with tempfile.TemporaryDirectory() as tmp:
        config, target = _bare_then_plain(tmp)
        monkeypatch.chdir(target)

        assert main(["--restore", "--config", config]) == 0

        assert os.path.isdir(os.path.join(target, "mirror.git"))
        assert not os.path.exists(os.path.join(target, "proj"))
        captured = capsys.readouterr()
        assert "Stopped after a bare repo" in captured.err
        assert "restored successfully" not in captured.out


def test_restore_continue_after_bare_flag(monkeypatch, capsys):
    with tempfile.TemporaryDirectory() as tmp:
        config, target = _bare_then_plain(tmp)
        monkeypatch.chdir(target)

        assert main(["--restore", "--config", config, "--continue-after-bare"]) == 0

        assert os.path.isdir(os.path.join(target, "mirror.git"))
        assert os.path.isdir(os.path.join(target, "proj", ".git"))
        assert "restored successfully" in capsys.readouterr().out


def _three_remote_snapshot(tmp, remotes):
    config = os.path.join(tmp, "repos_config.json")
    with open(config, "w") as f:
        json.dump([{"path": "proj/.git", "remotes": remotes, "is_bare": False}], f)
    target = os.path.join(tmp, "target")
    os.makedirs(target)
    return config, target


def test_restore_numbered_upstreams_flag(monkeypatch):
    with tempfile.TemporaryDirectory() as tmp:
        origin = os.path.join(tmp, "origin.git")
        _git("init", "--bare", origin)
        config, target = _three_remote_snapshot(
            tmp, [origin, "https://example/b.git", "https://example/c.git"],
        )
        monkeypatch.chdir(target)

        assert main(["--restore", "--config", config, "--numbered-upstreams"]) == 0
        assert sorted(_remote_names(os.path.join(target, "proj"))) == ["origin", "upstream", "upstream-2"]


def test_restore_reused_upstream_name_fails(monkeypatch):
    with tempfile.TemporaryDirectory() as tmp:
        origin = os.path.join(tmp, "origin.git")
        _git("init", "--bare", origin)
        config, target = _three_remote_snapshot(
            tmp, [origin, "https://example/b.git", "https://example/c.git"],
        )
        monkeypatch.chdir(target)

        assert main(["--restore", "--config", config]) == 1
        # The clone stays on disk with the first upstream attached
        assert sorted(_remote_names(os.path.join(target, "proj"))) == ["origin", "upstream"]


def test_restore_skip_duplicate_urls_flag(monkeypatch):
    with tempfile.TemporaryDirectory() as tmp:
        origin = os.path.join(tmp, "origin.git")
        _git("init", "--bare", origin)
        config, target = _three_remote_snapshot(tmp, [origin, origin])
        monkeypatch.chdir(target)

        assert main(["--restore", "--config", config, "--skip-duplicate-urls"]) == 0
        assert _remote_names(os.path.join(target, "proj")) == ["origin"]


# --- Git executable flags ---

def test_backup_with_slow_git_and_timeout_skips_candidates():
    with tempfile.TemporaryDirectory() as tmp:
        proj = os.path.join(tmp, "code", "proj")
        _git("init", proj)
        slow = os.path.join(tmp, "slow-git")
        with open(slow, "w") as f:
            f.write("#!/bin/sh\nexec sleep 30\n")
        os.chmod(slow, 0o755)
        config = os.path.join(tmp, "repos_config.json")

        rc = main([
            "--backup", "--dir", os.path.join(tmp, "code"), "--config", config,
            "--git", slow, "--timeout", "0.2",
        ])

        assert rc == 0
        with open(config) as f:
            assert json.load(f) == []


def test_restore_with_missing_git_executable_fails():
    with tempfile.TemporaryDirectory() as tmp:
        config = os.path.join(tmp, "repos_config.json")
        with open(config, "w") as f:
            json.dump([{"path": os.path.join(tmp, "p", ".git"), "remotes": ["u"], "is_bare": False}], f)
        assert main(["--restore", "--config", config, "--git", os.path.join(tmp, "no-such-git")]) == 1


# --- Combined modes ---

def test_backup_runs_before_restore():
    with tempfile.TemporaryDirectory() as tmp:
        base = os.path.join(tmp, "code")
        os.makedirs(base)
        config = os.path.join(tmp, "repos_config.json")
        # A stale snapshot that would fail to restore
        with open(config, "w") as f:
            json.dump([{"path": os.path.join(tmp, "p", ".git"), "remotes": [], "is_bare": False}], f)

        assert main(["--backup", "--restore", "--dir", base, "--config", config]) == 0
        with open(config) as f:
            assert json.load(f) == []
