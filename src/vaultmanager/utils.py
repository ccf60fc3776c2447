import getpass
import os
import shutil
import sys

from pathlib import Path

from vaultmanager import __version__
from vaultmanager.log import logger

# Package names that differ from the program name
PACKAGE_NAMES = {"gpg": "gnupg"}


def is_windows_shell():
	"""True for Git Bash / MSYS and Cygwin, the Unix-like shells available on Windows."""
	return sys.platform in ("cygwin", "msys") or (sys.platform == "win32" and "MSYSTEM" in os.environ)


def check_environment():
	"""
	Checks that we run in a Unix-like environment.

	Linux, macOS, Cygwin and Git Bash / MSYS are supported. A native Windows
	console (cmd.exe or PowerShell) is not.

	Returns:
		bool: True if the environment is supported.
	"""
	if sys.platform.startswith("linux") or sys.platform == "darwin" or is_windows_shell():
		return True

	logger.error("This program must be run in Git Bash, WSL, or a Unix-like shell.")
	return False


def check_system_dependencies(programs):
	"""
	Checks whether the given programs are available in the system's PATH.

	Parameters:
		programs (list[str]): Program names to look up with `shutil.which`.

	Returns:
		list[str]: The programs that could not be found, in the given order.
	"""
	missing = []
	for current_bin in programs:
		if shutil.which(current_bin) is None:
			logger.error(f"{current_bin} is not installed. Please install it manually.")
			missing.append(current_bin)
	return missing


def install_hints(missing):
	"""
	Platform-specific commands that install the missing programs.

	Returns:
		list[str]: Human-readable hint lines.
	"""
	packages = " ".join(PACKAGE_NAMES.get(name, name) for name in missing)

	if is_windows_shell() or sys.platform == "win32":
		return [
			"On Windows, you can use Chocolatey (https://chocolatey.org/) or Scoop (https://scoop.sh/) to install missing tools.",
			f"Example: choco install {packages}   or   scoop install {packages}",
		]
	if sys.platform == "darwin":
		return [f"Example: brew install {packages}"]
	return [f"Example: sudo apt install {packages}   (or your distribution's package manager)"]


class Prompter:
	"""
	Source of interactive input.

	Flows ask questions through a Prompter so tests can replace it with one
	that replays scripted answers.
	"""

	def ask(self, prompt):
		return input(prompt)

	def ask_secret(self, prompt):
		return getpass.getpass(prompt)


def ask_yes_no(prompter, prompt):
	"""
	Prompt the user with a yes/no question and return their response as a boolean

	Parameters:
	prompter (Prompter): Input source
	prompt (str): The question to display to the user

	Returns:
		bool: True if the user answers 'y' or 'yes', False if the 'n' or 'no'

	The function will repeatedly prompt until a valid response is given.
	"""
	while True:
		answer = prompter.ask(prompt).strip().lower()
		if answer == "y" or answer == "yes":
			return True
		elif answer == "n" or answer == "no":
			return False
		else:
			print("Please answer 'y', 'yes', 'n', or 'no'.")


def ask_directory(prompter, prompt):
	"""
	Prompt until the answer names an existing directory.

	Returns:
		Path: The absolute path of the directory.
	"""
	while True:
		answer = os.path.expanduser(prompter.ask(prompt).strip())
		if answer and os.path.isdir(answer):
			return Path(answer).resolve()
		print("Invalid path. Please enter a valid directory.")


def ask_passphrase(prompter, purpose):
	"""
	Ask for a passphrase twice until both entries match.

	Parameters:
		prompter (Prompter): Input source
		purpose (str): "encryption" or "decryption", used in the prompts

	Returns:
		str: The confirmed passphrase.
	"""
	while True:
		passphrase = prompter.ask_secret(f"Enter {purpose} key: ")
		confirmation = prompter.ask_secret(f"Confirm {purpose} key: ")

		if passphrase == confirmation:
			return passphrase

		print(f"{purpose.capitalize()} keys do not match. Please try again.")


def print_welcome_banner():
	banner = fr"""
 __   __         _ _     __  __
 \ \ / /_ _ _  _| | |_  |  \/  |__ _ _ _  __ _ __ _ ___ _ _
  \ V / _` | || | |  _| | |\/| / _` | ' \/ _` / _` / -_) '_|
   \_/\__,_|\_,_|_|\__| |_|  |_\__,_|_||_\__,_\__, \___|_|
                                              |___/
Version: {__version__}
"""
	print(banner)
