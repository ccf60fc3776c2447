from pathlib import Path

from vaultmanager.log import logger
from vaultmanager.runner import CommandRunner, pipeline_ok
from vaultmanager.security import gpg_base_cmd, passphrase_fd

PARTIAL_SUFFIX = ".partial"


def assemble_encrypt_pipeline(vault_path: Path, out_file: Path, fd: int, compress_program: str, cipher_algo: str):
    """
    Build the three stages archive -> compress -> encrypt.

    The archive holds the vault's contents relative to its root, so it can be
    extracted into any directory.
    """
    tar_cmd = ["tar", "-C", str(vault_path), "-cf", "-", "."]
    compress_cmd = [compress_program, "-c"]
    gpg_cmd = gpg_base_cmd(fd) + [
        "--symmetric",
        "--cipher-algo", cipher_algo,
        "--output", str(out_file),
    ]
    return [tar_cmd, compress_cmd, gpg_cmd]


def encrypt_vault(runner: CommandRunner, config, passphrase: str):
    """
    Stream the vault through tar, the compressor and gpg into the repository.

    gpg writes to a ``.partial`` file next to the archive which only replaces
    the archive once every stage succeeded, so a failed run never leaves a
    broken archive to be committed.

    Parameters:
        runner (CommandRunner): Executes the pipeline.
        config (VaultConfig): Provides vault_path, archive_path and the tunables.
        passphrase (str): Symmetric passphrase.

    Returns:
        Path | None: Path to the encrypted archive on success, None otherwise.
    """
    vault_path = config.vault_path
    archive_path = config.archive_path
    logger.debug(f"Encrypting vault {vault_path} into {archive_path}")

    if vault_path is None or not vault_path.is_dir():
        logger.error(f"Vault directory does not exist: {vault_path}")
        return None

    partial_path = archive_path.with_name(archive_path.name + PARTIAL_SUFFIX)

    with passphrase_fd(passphrase) as fd:
        commands = assemble_encrypt_pipeline(vault_path, partial_path, fd, config.compress_program, config.cipher_algo)
        results = runner.pipeline(commands, pass_fds=(fd,))

    if not pipeline_ok(results) or not partial_path.is_file():
        for result in results:
            if not result.ok:
                logger.error(f"{result.args[0]} exited with status {result.returncode}: {result.stderr.strip()}")
        partial_path.unlink(missing_ok=True)
        return None

    partial_path.replace(archive_path)
    return archive_path
