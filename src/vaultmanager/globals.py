class Globals:
    CONFIG_DIR = "~/.obsidian_vault_manager"
    VAULT_PATH_KEY = "vault_path"
    REPO_PATH_KEY = "git_repo_path"
    SETTINGS_FILE = "settings.yaml"
    ENCRYPTED_ARCHIVE = "vault.tar.gz.gpg"
    CIPHER_ALGO = "AES256"
    COMPRESS_PROGRAM = "pigz"
    REMOTE_NAME = "origin"
    DEFAULT_REPO_DIR = "~/new_git_repo"
    REQUIRED_SYSTEM_BINS = ["git", "gpg", "tar", "gh"]
