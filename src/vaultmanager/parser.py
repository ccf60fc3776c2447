import argparse
import os
import yaml

from vaultmanager import __version__
from vaultmanager.log import logger
from vaultmanager.globals import Globals

DEFAULT_SETTINGS = {
	"archive_name": Globals.ENCRYPTED_ARCHIVE,
	"cipher_algo": Globals.CIPHER_ALGO,
	"compress_program": Globals.COMPRESS_PROGRAM,
	"remote_name": Globals.REMOTE_NAME,
	"default_repo_dir": Globals.DEFAULT_REPO_DIR,
}

def parse_settings(path_to_settings):
	"""
	Parses the optional YAML settings file and merges it over the defaults.

	Returns:
		dict: The effective settings. Defaults are returned unchanged if the
		file does not exist or does not contain a mapping.

	Raises:
		yaml.YAMLError: If the file contains invalid YAML.
	"""
	settings = dict(DEFAULT_SETTINGS)

	try:
		with open(path_to_settings) as f:
			loaded = yaml.safe_load(f)
	except FileNotFoundError:
		logger.debug(f"No settings file at \"{path_to_settings}\", using defaults.")
		return settings

	if loaded is None:
		return settings

	if not isinstance(loaded, dict):
		logger.error(f"Settings file \"{path_to_settings}\" must contain a mapping. Using defaults.")
		return settings

	for key, value in loaded.items():
		if key not in DEFAULT_SETTINGS:
			logger.warning(f"Ignoring unknown setting \"{key}\".")
			continue
		settings[key] = str(value)

	logger.debug(f"Settings loaded from \"{path_to_settings}\": {settings}")
	return settings

def get_arguments(argv=None):
	"""
	Parses command-line arguments for the vault manager.

	Returns:
		dict: A dictionary of parsed arguments with the config directory and
		settings file resolved to absolute paths.
	"""
	parser = argparse.ArgumentParser(description="Encrypts an Obsidian vault and keeps it in a git repository.")
	parser.add_argument("--config-dir", type=str, default=Globals.CONFIG_DIR, help="Directory holding the saved vault and repository paths")
	parser.add_argument("--settings", type=str, help="Path to the settings YAML file")
	parser.add_argument("--debug", action="store_true", help="Print debug output.")
	parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
	args = parser.parse_args(argv)

	config_dir = os.path.abspath(os.path.expanduser(args.config_dir))

	# Settings live next to the saved paths unless given explicitly
	settings_file = args.settings if args.settings is not None else os.path.join(config_dir, Globals.SETTINGS_FILE)

	return {
		"config_dir": config_dir,
		"settings_file": os.path.abspath(os.path.expanduser(settings_file)),
		"debug": args.debug}
