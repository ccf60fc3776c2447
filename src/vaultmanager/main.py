import logging
import yaml

from vaultmanager.config import ConfigStore, load_config
from vaultmanager.configure import configure
from vaultmanager.globals import Globals
from vaultmanager.log import logger
from vaultmanager.menu import display_menu
from vaultmanager.parser import get_arguments, parse_settings
from vaultmanager.runner import CommandRunner
from vaultmanager.utils import Prompter, check_environment, check_system_dependencies, install_hints, print_welcome_banner


def init(argv=None):
	"""
	Performs the environment and dependency checks and loads the settings.

	Returns:
		tuple: (args, settings) if successful, otherwise (None, None)
	"""
	args = get_arguments(argv)
	if args["debug"]:
		logger.setLevel(logging.DEBUG)

	# Check the shell environment
	if not check_environment():
		return None, None

	# Parse settings
	try:
		settings = parse_settings(args["settings_file"])
	except yaml.YAMLError as e:
		logger.error(f"Invalid settings file \"{args['settings_file']}\": {e}")
		return None, None

	# Check system dependencies
	missing = check_system_dependencies(Globals.REQUIRED_SYSTEM_BINS + [settings["compress_program"]])
	if missing:
		for hint in install_hints(missing):
			print(hint)
		logger.error("One or more required programs are missing. Exiting.")
		return None, None

	return args, settings


def main(argv=None, runner=None, prompter=None):

	# 1. Init
	args, settings = init(argv)
	if args is None:
		return 1

	runner = runner or CommandRunner()
	prompter = prompter or Prompter()
	print_welcome_banner()

	try:
		# 2. Load saved paths and run the setup once
		config = load_config(ConfigStore(args["config_dir"]), settings)
		if not configure(config, runner, prompter):
			logger.warning("Setup did not complete. Use \"Reconfigure settings\" to try again.")

		# 3. Menu
		return display_menu(config, runner, prompter)

	except OSError as e:
		logger.error(f"Could not access the configuration: {e}")
		return 1
	except KeyboardInterrupt:
		print()
		return 130
	except EOFError:
		# stdin closed (Ctrl-D) while waiting for an answer
		print()
		logger.error("No more input. Exiting.")
		return 1


if __name__ == "__main__":
	raise SystemExit(main())
