from vaultmanager.config import VaultConfig
from vaultmanager.configure import check_git_identity, configure, ensure_repository
from vaultmanager.log import logger
from vaultmanager.publish import encrypt_and_push
from vaultmanager.restore import pull_and_decrypt
from vaultmanager.runner import CommandRunner
from vaultmanager.utils import Prompter

MENU = """----------------------------------------
|         Obsidian Vault Manager       |
----------------------------------------
Select an option:
1) Encrypt and push to Git
2) Pull from Git and decrypt
3) Reconfigure settings
4) Exit
----------------------------------------"""


def run_transfer(flow, config, runner, prompter):
	"""
	Run a publish or restore flow after the git checks.

	A filesystem error aborts only the flow; the menu is shown again.
	"""
	if not (check_git_identity(runner, prompter) and ensure_repository(config, runner)):
		return False

	try:
		return flow(config, runner, prompter)
	except OSError as e:
		logger.error(f"Operation aborted: {e}")
		return False


def display_menu(config: VaultConfig, runner: CommandRunner, prompter: Prompter) -> int:
	"""
	Show the main menu and dispatch choices until the user exits.

	Returns:
		int: Exit status of the program, always 0.
	"""
	while True:
		print(MENU)
		choice = prompter.ask("Enter choice [1-4]: ").strip()

		if choice == "1":
			run_transfer(encrypt_and_push, config, runner, prompter)
		elif choice == "2":
			run_transfer(pull_and_decrypt, config, runner, prompter)
		elif choice == "3":
			configure(config, runner, prompter)
		elif choice == "4":
			print("Exiting.")
			return 0
		else:
			print("Invalid option. Please enter 1, 2, 3, or 4.")
