import logging
import subprocess
from typing import NamedTuple

logger = logging.getLogger(__name__)


class CommandResult(NamedTuple):
    exit_code: int
    output: str


class CommandError(Exception):
    """The command could not be started or did not finish in time."""


def run_command(argv, timeout):
    """Run argv with stderr folded into stdout and wait for it to exit.

    The child is killed if it is still running after ``timeout`` seconds.
    """
    logger.debug("running %s (timeout %ss)", argv, timeout)
    try:
        result = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning("%s timed out after %ss", argv[0], timeout)
        raise CommandError("timeout")
    except (OSError, ValueError) as e:
        # ValueError: argv the OS cannot take, e.g. an embedded NUL
        logger.warning("could not start %s: %s", argv[0], e)
        raise CommandError(str(e)) from e
    return CommandResult(result.returncode, result.stdout or "")
