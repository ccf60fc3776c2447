from pathlib import Path

from vaultmanager.log import logger
from vaultmanager.runner import CommandRunner, pipeline_ok
from vaultmanager.security import gpg_base_cmd, passphrase_fd


def assemble_decrypt_pipeline(archive_path: Path, vault_path: Path, fd: int, compress_program: str):
    gpg_cmd = gpg_base_cmd(fd) + ["--decrypt", str(archive_path)]
    decompress_cmd = [compress_program, "-dc"]
    tar_cmd = ["tar", "-xf", "-", "-C", str(vault_path)]
    return [gpg_cmd, decompress_cmd, tar_cmd]


def decrypt_archive(runner: CommandRunner, config, passphrase: str) -> bool:
    """
    Decrypt the archive in the repository and extract it into the vault.

    Nothing is rolled back if a stage fails half way: whatever tar already
    extracted stays in the vault.

    Returns:
        bool: True if every stage of the pipeline succeeded.
    """
    archive_path = config.archive_path
    vault_path = config.vault_path

    if not archive_path.is_file():
        logger.error(f"Encrypted archive does not exist at {archive_path}")
        return False

    vault_path.mkdir(parents=True, exist_ok=True)

    with passphrase_fd(passphrase) as fd:
        commands = assemble_decrypt_pipeline(archive_path, vault_path, fd, config.compress_program)
        results = runner.pipeline(commands, pass_fds=(fd,))

    if not pipeline_ok(results):
        for result in results:
            if not result.ok:
                logger.error(f"{result.args[0]} exited with status {result.returncode}: {result.stderr.strip()}")
        return False

    logger.debug(f"Successfully decrypted {archive_path} into {vault_path}")
    return True
