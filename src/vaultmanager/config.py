import os

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from vaultmanager.globals import Globals
from vaultmanager.log import logger


class ConfigStore:
    """
    Persists single values as one-line text files inside a config directory.

    Each key maps to ``<config_dir>/<key>.txt``. The files are plain text so
    they can be inspected and edited by hand between runs.
    """

    def __init__(self, config_dir):
        self.config_dir = Path(config_dir)

    def path_for(self, key: str) -> Path:
        return self.config_dir / f"{key}.txt"

    def load(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.is_file():
            return None

        value = path.read_text().strip()
        return value or None

    def save(self, key: str, value: str):
        # OSError propagates: a config directory we cannot write is fatal
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.path_for(key).write_text(f"{value}\n")
        logger.debug(f"Saved {key} to {self.path_for(key)}")


@dataclass
class VaultConfig:
    """
    Everything a flow needs to know about the vault and its repository.

    Attributes:
        store (ConfigStore): Where vault_path and repo_path are persisted.
        vault_path (Optional[Path]): Directory that gets archived.
        repo_path (Optional[Path]): Git working directory holding the archive.
        archive_name (str): File name of the encrypted archive inside repo_path.
        cipher_algo (str): Cipher passed to gpg --cipher-algo.
        compress_program (str): Compressor placed between tar and gpg.
        remote_name (str): Git remote to pull from and push to.
        default_repo_dir (Path): Repository created when none is configured.
    """
    store: ConfigStore
    vault_path: Optional[Path] = None
    repo_path: Optional[Path] = None
    archive_name: str = Globals.ENCRYPTED_ARCHIVE
    cipher_algo: str = Globals.CIPHER_ALGO
    compress_program: str = Globals.COMPRESS_PROGRAM
    remote_name: str = Globals.REMOTE_NAME
    default_repo_dir: Path = Path(os.path.expanduser(Globals.DEFAULT_REPO_DIR))

    @property
    def archive_path(self) -> Path:
        return self.repo_path / self.archive_name

    def set_vault_path(self, path):
        self.vault_path = Path(path)
        self.store.save(Globals.VAULT_PATH_KEY, str(self.vault_path))

    def set_repo_path(self, path):
        self.repo_path = Path(path)
        self.store.save(Globals.REPO_PATH_KEY, str(self.repo_path))


def load_config(store: ConfigStore, settings: dict) -> VaultConfig:
    """
    Builds the VaultConfig from the stored paths and the effective settings.
    """
    vault_path = store.load(Globals.VAULT_PATH_KEY)
    repo_path = store.load(Globals.REPO_PATH_KEY)

    return VaultConfig(
        store=store,
        vault_path=Path(vault_path) if vault_path else None,
        repo_path=Path(repo_path) if repo_path else None,
        archive_name=settings["archive_name"],
        cipher_algo=settings["cipher_algo"],
        compress_program=settings["compress_program"],
        remote_name=settings["remote_name"],
        default_repo_dir=Path(os.path.expanduser(settings["default_repo_dir"])),
    )
