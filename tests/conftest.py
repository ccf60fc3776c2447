import os
import shutil
import subprocess

from pathlib import Path

import pytest

from vaultmanager.config import ConfigStore, VaultConfig
from vaultmanager.runner import CommandResult


class FakeRunner:
    """
    Records commands instead of running them.

    `responses` maps a command tuple to (returncode, stdout). Commands not in
    the map succeed with empty output. A successful pipeline writes a dummy
    file at the path following --output, the way gpg would.
    """

    def __init__(self, responses=None, pipeline_returncodes=None):
        self.responses = responses or {}
        self.pipeline_returncodes = pipeline_returncodes
        self.calls = []
        self.pipelines = []

    def run(self, args, cwd=None, capture=True):
        self.calls.append(list(args))
        returncode, stdout = self.responses.get(tuple(args), (0, ""))
        return CommandResult(list(args), returncode, stdout, "")

    def pipeline(self, commands, cwd=None, pass_fds=()):
        self.pipelines.append([list(cmd) for cmd in commands])
        returncodes = self.pipeline_returncodes or [0] * len(commands)

        if all(code == 0 for code in returncodes):
            last = commands[-1]
            if "--output" in last:
                Path(last[last.index("--output") + 1]).write_bytes(b"ciphertext")

        return [CommandResult(list(cmd), code, "", "boom" if code else "") for cmd, code in zip(commands, returncodes)]

    def called(self, *args):
        return list(args) in self.calls


class ScriptedPrompter:
    """Replays answers in order. Running out of answers raises IndexError."""

    def __init__(self, answers=(), secrets=()):
        self.answers = list(answers)
        self.secrets = list(secrets)
        self.questions = []

    def ask(self, prompt):
        self.questions.append(prompt)
        return self.answers.pop(0)

    def ask_secret(self, prompt):
        self.questions.append(prompt)
        return self.secrets.pop(0)


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path / "config")


@pytest.fixture
def vault(tmp_path):
    path = tmp_path / "vault"
    path.mkdir()
    (path / "note.md").write_text("hello")
    return path


@pytest.fixture
def repo_dir(tmp_path):
    path = tmp_path / "repo"
    path.mkdir()
    return path


@pytest.fixture
def config(store, vault, repo_dir, tmp_path):
    return VaultConfig(store=store, vault_path=vault, repo_path=repo_dir, default_repo_dir=tmp_path / "new_git_repo")


@pytest.fixture
def git_env(monkeypatch, tmp_path):
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Vault Tester")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "tester@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Vault Tester")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "tester@example.com")
    return home


@pytest.fixture
def gpg_env(monkeypatch, tmp_path, config):
    for program in ("gpg", "tar"):
        if shutil.which(program) is None:
            pytest.skip(f"{program} is not installed")

    # gzip reads and writes the same format when pigz is not around
    if shutil.which(config.compress_program) is None:
        if shutil.which("gzip") is None:
            pytest.skip("neither pigz nor gzip is installed")
        config.compress_program = "gzip"

    gnupg_home = tmp_path / "gnupg"
    gnupg_home.mkdir(mode=0o700)
    monkeypatch.setenv("GNUPGHOME", str(gnupg_home))

    yield gnupg_home

    if shutil.which("gpgconf"):
        subprocess.run(["gpgconf", "--kill", "gpg-agent"], env=dict(os.environ), check=False)
