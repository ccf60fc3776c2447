import re

from datetime import datetime
from pathlib import Path
from typing import Optional

from vaultmanager.log import logger
from vaultmanager.runner import CommandRunner

HTTP_REMOTE = re.compile(r"^https?://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?/(?P<path>.+)$")


def to_ssh_url(url: str) -> Optional[str]:
    """
    Convert an HTTP(S) remote URL to the scp-like SSH form.

    ``https://github.com/owner/repo.git`` becomes ``git@github.com:owner/repo.git``.
    Credentials and ports in the HTTPS URL are dropped.

    Returns:
        str | None: The SSH URL, or None if `url` is not an HTTP(S) URL.
    """
    match = HTTP_REMOTE.match(url.strip())
    if match is None:
        return None
    return f"git@{match.group('host')}:{match.group('path').rstrip('/')}"


def commit_message(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"Update encrypted vault {now.strftime('%a %b %d %H:%M:%S %Y')}"


class GitRepository:
    """
    A local git working directory driven through the git command-line client.

    Parameters:
        path (Path): Root of the working directory.
        runner (CommandRunner): Executes the git commands.
    """

    def __init__(self, path, runner: CommandRunner):
        self.path = Path(path)
        self.runner = runner

    def git(self, *args, capture=True):
        return self.runner.run(["git", *args], cwd=self.path, capture=capture)

    def exists(self) -> bool:
        return (self.path / ".git").is_dir()

    def init(self) -> bool:
        self.path.mkdir(parents=True, exist_ok=True)
        result = self.runner.run(["git", "init", str(self.path)])
        if not result.ok:
            logger.error(f"git init failed in \"{self.path}\": {result.stderr.strip()}")
            return False
        return True

    def stage_all(self) -> bool:
        result = self.git("add", "-A")
        if not result.ok:
            logger.error(f"git add failed: {result.stderr.strip()}")
        return result.ok

    def has_staged_changes(self) -> bool:
        # Exit status 1 means the index differs from HEAD (or there is no HEAD yet)
        return self.git("diff", "--cached", "--quiet").returncode != 0

    def commit(self, message: str) -> bool:
        result = self.git("commit", "-m", message)
        if not result.ok:
            logger.error(f"git commit failed: {result.stderr.strip() or result.stdout.strip()}")
        return result.ok

    def commit_if_changed(self, message: str) -> Optional[bool]:
        """
        Stage everything and commit only if the index differs from HEAD.

        gpg picks a fresh salt and session key for every archive, so a
        re-encrypted vault always differs from HEAD even when no note
        changed. Only a publish that leaves the archive untouched (or a
        repeated call without re-encrypting) skips the commit.

        Returns:
            bool | None: True if a commit was created, False if there was
            nothing to commit, None on failure.
        """
        if not self.stage_all():
            return None

        if not self.has_staged_changes():
            return False

        return True if self.commit(message) else None

    def remotes(self):
        result = self.git("remote")
        return result.stdout.split() if result.ok else []

    def has_remote(self, name: str) -> bool:
        return name in self.remotes()

    def add_remote(self, name: str, url: str) -> bool:
        result = self.git("remote", "add", name, url)
        if not result.ok:
            logger.error(f"Failed to add remote \"{name}\": {result.stderr.strip()}")
        return result.ok

    def get_remote_url(self, name: str) -> Optional[str]:
        result = self.git("remote", "get-url", name)
        return result.stdout.strip() if result.ok else None

    def set_remote_url(self, name: str, url: str) -> bool:
        result = self.git("remote", "set-url", name, url)
        if not result.ok:
            logger.error(f"Failed to set URL of remote \"{name}\": {result.stderr.strip()}")
        return result.ok

    def use_ssh_remote(self, name: str) -> Optional[str]:
        """
        Rewrite an HTTP(S) remote to its SSH form in place.

        Returns:
            str | None: The SSH URL if the remote was rewritten, otherwise None.
        """
        current = self.get_remote_url(name)
        if current is None:
            return None

        ssh_url = to_ssh_url(current)
        if ssh_url is None or ssh_url == current:
            return None

        if not self.set_remote_url(name, ssh_url):
            return None
        return ssh_url

    def current_branch(self) -> Optional[str]:
        result = self.git("rev-parse", "--abbrev-ref", "HEAD")
        if result.ok and result.stdout.strip() != "HEAD":
            return result.stdout.strip()

        # No commit yet: rev-parse cannot resolve HEAD, but the symbolic ref still names the branch
        result = self.git("symbolic-ref", "--short", "HEAD")
        return result.stdout.strip() if result.ok else None

    def pull(self, remote: str, branch: str) -> bool:
        return self.git("pull", remote, branch, capture=False).ok

    def push(self, remote: str, branch: str) -> bool:
        return self.git("push", "-u", remote, branch, capture=False).ok


def create_hosted_repository(runner: CommandRunner, name: str, source, remote: str) -> bool:
    """
    Create a private repository with the GitHub CLI and link it as `remote` of `source`.

    Returns:
        bool: True if gh reported success.
    """
    result = runner.run(
        ["gh", "repo", "create", name, "--private", f"--source={source}", f"--remote={remote}"],
        capture=False,
    )
    if not result.ok:
        logger.warning(f"Could not create the GitHub repository \"{name}\". No remote was configured.")
        return False
    return True


def read_identity(runner: CommandRunner):
    """
    Returns:
        tuple[str | None, str | None]: Global git user.name and user.email.
    """
    name = runner.run(["git", "config", "--global", "user.name"])
    email = runner.run(["git", "config", "--global", "user.email"])
    return (name.stdout.strip() if name.ok else None) or None, (email.stdout.strip() if email.ok else None) or None


def write_identity(runner: CommandRunner, name: str, email: str) -> bool:
    ok = runner.run(["git", "config", "--global", "user.name", name]).ok
    ok = runner.run(["git", "config", "--global", "user.email", email]).ok and ok
    if not ok:
        logger.error("Failed to store the git identity.")
    return ok
