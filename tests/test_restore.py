import logging

from conftest import FakeRunner, ScriptedPrompter
from vaultmanager.restore import pull_and_decrypt

SECRETS = ["secret123", "secret123"]
BRANCH = {("git", "rev-parse", "--abbrev-ref", "HEAD"): (0, "main\n")}


def test_pull_then_decrypt(config, repo_dir, vault):
    (repo_dir / "vault.tar.gz.gpg").write_bytes(b"ciphertext")
    runner = FakeRunner(BRANCH)

    assert pull_and_decrypt(config, runner, ScriptedPrompter(secrets=["x", "y"] + SECRETS))
    assert runner.called("git", "pull", "origin", "main")

    gpg_cmd, decompress_cmd, tar_cmd = runner.pipelines[0]
    assert gpg_cmd[0] == "gpg"
    assert gpg_cmd[-2:] == ["--decrypt", str(repo_dir / "vault.tar.gz.gpg")]
    assert decompress_cmd == ["pigz", "-dc"]
    assert tar_cmd == ["tar", "-xf", "-", "-C", str(vault)]


def test_failed_pull_uses_local_archive(config, repo_dir):
    (repo_dir / "vault.tar.gz.gpg").write_bytes(b"ciphertext")
    runner = FakeRunner({**BRANCH, ("git", "pull", "origin", "main"): (1, "")})

    assert pull_and_decrypt(config, runner, ScriptedPrompter(secrets=SECRETS))
    assert len(runner.pipelines) == 1


def test_missing_archive(config):
    runner = FakeRunner(BRANCH)
    assert not pull_and_decrypt(config, runner, ScriptedPrompter(secrets=SECRETS))
    assert runner.pipelines == []


def test_decryption_failure(config, repo_dir):
    (repo_dir / "vault.tar.gz.gpg").write_bytes(b"ciphertext")
    runner = FakeRunner(BRANCH, pipeline_returncodes=[2, 1, 2])
    assert not pull_and_decrypt(config, runner, ScriptedPrompter(secrets=SECRETS))


def test_restore_creates_missing_vault(config, repo_dir, tmp_path):
    (repo_dir / "vault.tar.gz.gpg").write_bytes(b"ciphertext")
    config.vault_path = tmp_path / "restored"

    assert pull_and_decrypt(config, FakeRunner(BRANCH), ScriptedPrompter(secrets=SECRETS))
    assert config.vault_path.is_dir()


def test_decryption_failure_shows_tool_error(config, repo_dir, caplog):
    (repo_dir / "vault.tar.gz.gpg").write_bytes(b"ciphertext")
    runner = FakeRunner(BRANCH, pipeline_returncodes=[2, 0, 0])

    with caplog.at_level(logging.ERROR, logger="VaultManager"):
        assert not pull_and_decrypt(config, runner, ScriptedPrompter(secrets=SECRETS))

    assert any("gpg exited with status 2: boom" in record.getMessage() for record in caplog.records)
