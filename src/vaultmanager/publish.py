from vaultmanager.config import VaultConfig
from vaultmanager.log import logger
from vaultmanager.repository import GitRepository, commit_message
from vaultmanager.runner import CommandRunner
from vaultmanager.security.encryption import encrypt_vault
from vaultmanager.utils import Prompter, ask_passphrase


def ensure_remote(repo: GitRepository, remote: str, prompter: Prompter) -> bool:
    """
    Make sure `remote` exists, asking for its URL if it does not.

    Returns:
        bool: False if the user left the URL empty or the remote could not be added.
    """
    if repo.has_remote(remote):
        print("Remote repository already set.")
        return True

    url = prompter.ask("Enter the URL of the remote repository to push to (or press Enter to skip): ").strip()
    if not url:
        print("No remote repository set. You will need to set this manually before pushing.")
        return False

    return repo.add_remote(remote, url)


def encrypt_and_push(config: VaultConfig, runner: CommandRunner, prompter: Prompter) -> bool:
    """
    Encrypt the vault into the repository, commit it if it changed and push.

    Steps:
    1. Ask for the passphrase until both entries match.
    2. Archive, compress and encrypt the vault in one streaming pipeline.
    3. Commit, but only if the archive actually changed.
    4. Make sure a remote exists, switch it to SSH if it uses HTTPS, and push.

    Returns:
        bool: True if the flow ended normally. Skipping the push because no
        remote was given counts as a normal end.
    """
    passphrase = ask_passphrase(prompter, "encryption")

    if encrypt_vault(runner, config, passphrase) is None:
        logger.error("Failed to create encrypted archive. Please check your inputs and try again.")
        return False

    repo = GitRepository(config.repo_path, runner)

    committed = repo.commit_if_changed(commit_message())
    if committed is None:
        return False
    if not committed:
        print("No changes to commit.")

    if not ensure_remote(repo, config.remote_name, prompter):
        return True

    ssh_url = repo.use_ssh_remote(config.remote_name)
    if ssh_url is not None:
        print(f"Converted remote URL to SSH: {ssh_url}")

    branch = repo.current_branch()
    if branch is None:
        logger.error("Could not determine the current branch.")
        return False

    if not repo.push(config.remote_name, branch):
        logger.error(f"Failed to push \"{branch}\" to \"{config.remote_name}\".")
        return False

    print("Encrypted vault pushed.")
    return True
