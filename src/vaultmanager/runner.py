import subprocess
import tempfile

from dataclasses import dataclass
from typing import List, Optional, Sequence

from vaultmanager.log import logger

# Exit status a shell reports for a command it cannot find
COMMAND_NOT_FOUND = 127


@dataclass
class CommandResult:
    """
    Outcome of a single external command.

    Attributes:
        args (List[str]): The command that was executed.
        returncode (int): Exit status, COMMAND_NOT_FOUND if it could not be started.
        stdout (str): Captured standard output.
        stderr (str): Captured standard error.
    """
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def pipeline_ok(results: Sequence[CommandResult]) -> bool:
    """True only if every stage of a pipeline exited successfully."""
    return bool(results) and all(result.ok for result in results)


class CommandRunner:
    """
    Runs external programs synchronously.

    Flows receive a runner instead of calling subprocess directly so tests can
    substitute a fake that records commands and returns canned results.
    """

    def run(self, args: List[str], cwd=None, capture: bool = True) -> CommandResult:
        """
        Run a command and wait for it to finish.

        Parameters:
            args (list[str]): Command and arguments.
            cwd (Path | str | None): Working directory.
            capture (bool): Capture stdout/stderr. If False, the command
                writes straight to the terminal (used for git pull/push so
                the user sees progress and can answer ssh prompts).

        Returns:
            CommandResult
        """
        logger.debug(f"Running {args}")

        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.PIPE if capture else None,
                text=True,
            )
        except FileNotFoundError:
            logger.error(f"Command not found: {args[0]}")
            return CommandResult(list(args), COMMAND_NOT_FOUND, "", f"{args[0]}: command not found")

        return CommandResult(list(args), completed.returncode, completed.stdout or "", completed.stderr or "")

    def pipeline(self, commands: List[List[str]], cwd=None, pass_fds: Sequence[int] = ()) -> List[CommandResult]:
        """
        Connect commands stdout-to-stdin like a shell pipe and wait for all of them.

        The data between stages only ever flows through OS pipes. Each stage's
        stderr is spooled to an anonymous temporary file so a chatty stage can
        never block on a full pipe.

        Parameters:
            commands (list[list[str]]): The stages, first to last.
            cwd (Path | str | None): Working directory for every stage.
            pass_fds (Sequence[int]): File descriptors inherited by every stage.

        Returns:
            list[CommandResult]: One result per stage, in order. A stage that
            could not be started is reported with COMMAND_NOT_FOUND and the
            stages after it are not started.
        """
        logger.debug(f"Running pipeline {' | '.join(' '.join(cmd) for cmd in commands)}")

        procs = []
        err_files = []
        results: List[CommandResult] = []
        previous_stdout: Optional[object] = None

        try:
            for index, cmd in enumerate(commands):
                is_last = index == len(commands) - 1
                err_file = tempfile.TemporaryFile()
                err_files.append(err_file)

                try:
                    proc = subprocess.Popen(
                        cmd,
                        cwd=cwd,
                        stdin=previous_stdout if previous_stdout is not None else subprocess.DEVNULL,
                        stdout=subprocess.PIPE,
                        stderr=err_file,
                        pass_fds=tuple(pass_fds),
                    )
                except FileNotFoundError:
                    logger.error(f"Command not found: {cmd[0]}")
                    results.append(CommandResult(list(cmd), COMMAND_NOT_FOUND, "", f"{cmd[0]}: command not found"))
                    break

                # Only the child may hold the read end, so an early exit downstream
                # reaches the writer as SIGPIPE
                if previous_stdout is not None:
                    previous_stdout.close()
                previous_stdout = proc.stdout if not is_last else None
                procs.append(proc)

            if previous_stdout is not None:
                # A later stage failed to start; nothing will read this pipe
                previous_stdout.close()

            last_stdout = b""
            if procs and len(procs) == len(commands):
                last_stdout, _ = procs[-1].communicate()

            finished = []
            for proc, cmd, err_file in zip(procs, commands, err_files):
                proc.wait()
                err_file.seek(0)
                stderr = err_file.read().decode(errors="replace")
                stdout = last_stdout.decode(errors="replace") if proc is procs[-1] else ""
                finished.append(CommandResult(list(cmd), proc.returncode, stdout, stderr))

            return finished + results

        finally:
            for err_file in err_files:
                err_file.close()
