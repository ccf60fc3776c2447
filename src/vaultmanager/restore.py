from vaultmanager.config import VaultConfig
from vaultmanager.log import logger
from vaultmanager.repository import GitRepository
from vaultmanager.runner import CommandRunner
from vaultmanager.security.decryption import decrypt_archive
from vaultmanager.utils import Prompter, ask_passphrase


def pull_and_decrypt(config: VaultConfig, runner: CommandRunner, prompter: Prompter) -> bool:
    """
    Pull the current branch and extract the decrypted archive into the vault.

    A failed pull is only a warning: the archive already in the working
    directory is decrypted instead.

    Returns:
        bool: True if the archive was decrypted and extracted.
    """
    passphrase = ask_passphrase(prompter, "decryption")

    repo = GitRepository(config.repo_path, runner)
    branch = repo.current_branch()

    if branch is None:
        logger.warning("Could not determine the current branch. Skipping pull.")
    elif not repo.pull(config.remote_name, branch):
        logger.warning(f"Failed to pull \"{branch}\" from \"{config.remote_name}\". Using the local archive.")

    if not decrypt_archive(runner, config, passphrase):
        logger.error("Failed to decrypt the archive. Please check your decryption key and try again.")
        return False

    print(f"Vault restored to {config.vault_path}.")
    return True
