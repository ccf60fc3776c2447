from vaultmanager.config import VaultConfig
from vaultmanager.log import logger
from vaultmanager.repository import GitRepository, create_hosted_repository, read_identity, write_identity
from vaultmanager.runner import CommandRunner
from vaultmanager.utils import Prompter, ask_directory, ask_yes_no


def get_or_set_vault_path(config: VaultConfig, prompter: Prompter):
    """
    Reuse the saved vault path or ask for a new one and persist it.
    """
    if config.vault_path is not None:
        print(f"Previous vault path found: {config.vault_path}")
        if ask_yes_no(prompter, "Would you like to use this path? (y/n): "):
            print("Using previously saved vault path.")
            return

    vault_path = ask_directory(prompter, "Enter the path to your Obsidian vault: ")
    config.set_vault_path(vault_path)
    print("Vault path saved.")


def provision_repository(config: VaultConfig, runner: CommandRunner, prompter: Prompter) -> bool:
    """
    Create the default repository directory, initialise it, save it and
    offer to create a private GitHub repository as its remote.

    Returns:
        bool: False only if the local repository could not be initialised.
        Failing to create the remote is reported but not treated as an error.
    """
    repo = GitRepository(config.default_repo_dir, runner)
    if not repo.init():
        return False

    print(f"Initialized new Git repository at {repo.path}.")
    config.set_repo_path(repo.path)
    print("Git repository path saved.")

    repo_name = prompter.ask("Enter the name for the GitHub repository: ").strip()
    if not repo_name:
        logger.warning("No repository name given. No remote was configured.")
        return True

    if create_hosted_repository(runner, repo_name, repo.path, config.remote_name):
        print(f"Created new private repository on GitHub: {repo_name}")
    return True


def get_or_set_repo_path(config: VaultConfig, runner: CommandRunner, prompter: Prompter) -> bool:
    if config.repo_path is not None:
        print(f"Previous Git repository path found: {config.repo_path}")
        if ask_yes_no(prompter, "Would you like to use this path? (y/n): "):
            return True

    return provision_repository(config, runner, prompter)


def configure(config: VaultConfig, runner: CommandRunner, prompter: Prompter) -> bool:
    """
    Interactive setup of the vault path and the backup repository.

    Returns:
        bool: True if both paths are configured afterwards.
    """
    get_or_set_vault_path(config, prompter)
    return get_or_set_repo_path(config, runner, prompter)


def ensure_repository(config: VaultConfig, runner: CommandRunner) -> bool:
    """
    Re-initialise the configured repository if its git metadata is gone.
    """
    if config.repo_path is None:
        logger.error("No Git repository configured. Please reconfigure the settings.")
        return False

    repo = GitRepository(config.repo_path, runner)
    if repo.exists():
        return True

    print("The specified directory is not a Git repository.")
    if not repo.init():
        return False

    print(f"Git repository initialized at {repo.path}.")
    config.set_repo_path(repo.path)
    print("Git repository path updated in configuration.")
    return True


def check_git_identity(runner: CommandRunner, prompter: Prompter) -> bool:
    """
    Make sure git has a global user name and email so commits can be created.
    """
    name, email = read_identity(runner)

    if name and email:
        print("Git is already configured with the following details:")
        print(f"Username: {name}")
        print(f"Email: {email}")
        return True

    print("Git is not fully configured. Please login to Git.")
    name = prompter.ask("Enter your Git username: ").strip()
    email = prompter.ask("Enter your Git email: ").strip()

    if not write_identity(runner, name, email):
        return False

    print("Git configuration complete.")
    return True
