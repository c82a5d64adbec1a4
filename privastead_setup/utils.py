"""Utility functions for the setup tool."""
import logging
import os
import pwd
import shutil
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

import sh
import typer

logger = logging.getLogger("privastead_setup")

# Exit status a shell reports for a command it cannot find
COMMAND_NOT_FOUND = 127


def command_exists(command: str) -> bool:
    """Check if a command exists in the system PATH."""
    return shutil.which(command) is not None


def which(command: str) -> Optional[str]:
    """Resolve a command to its absolute path, or None."""
    return shutil.which(command)


def get_current_user() -> str:
    """Get the name of the effective user (what `whoami` prints)."""
    try:
        return pwd.getpwuid(os.geteuid()).pw_name
    except KeyError:
        return os.environ.get('USER', '')


def _tag(label: str, color: str) -> str:
    return typer.style(f"[{label}]", fg=color)


def log_info(message: str) -> None:
    """Log an informational message."""
    typer.echo(f"{_tag('INFO', typer.colors.BLUE)} {message}")


def log_success(message: str) -> None:
    """Log a completed operation."""
    typer.echo(f"{_tag('SUCCESS', typer.colors.GREEN)} {message}")


def log_warning(message: str) -> None:
    """Log a warning."""
    typer.echo(f"{_tag('WARNING', typer.colors.YELLOW)} {message}")


def log_error(message: str) -> None:
    """Log an error."""
    typer.echo(f"{_tag('ERROR', typer.colors.RED)} {message}")


def log_action(message: str) -> None:
    """Log an action being performed."""
    typer.echo(f"  -> {message}")


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )


@contextmanager
def working_directory(path: Union[str, Path]) -> Iterator[Path]:
    """Change into `path` for the duration of the block.

    The previous directory is restored on every exit path.
    """
    previous = Path.cwd()
    os.chdir(path)
    logger.debug("Entered %s", path)
    try:
        yield Path.cwd()
    finally:
        os.chdir(previous)
        logger.debug("Returned to %s", previous)


@dataclass
class CommandResult:
    """Exit status and combined output of an external command."""
    exit_code: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def run_command(program: str, *args: str) -> CommandResult:
    """Run an external command in the current directory.

    Output is streamed to the terminal while it is captured. A nonzero
    exit is reported through the result rather than raised.
    """
    lines = []

    def _tee(line: str) -> None:
        typer.echo(line, nl=False)
        lines.append(line)

    logger.debug("Running %s %s", program, " ".join(args))
    try:
        sh.Command(program)(*args, _err_to_out=True, _out=_tee)
        exit_code = 0
    except sh.CommandNotFound:
        logger.debug("%s not found on PATH", program)
        exit_code = COMMAND_NOT_FOUND
    except sh.ErrorReturnCode as e:  # sh raises ErrorReturnCode_X subclasses
        exit_code = e.exit_code

    logger.debug("%s exited with status %d", program, exit_code)
    return CommandResult(exit_code=exit_code, output="".join(lines))
