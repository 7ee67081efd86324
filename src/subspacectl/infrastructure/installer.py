"""External installer invocation.

The package manager is a black box: it is run once, synchronously, with
the isolated workspace as its working directory. There is no timeout and
no retry.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from subspacectl.domain.errors import InstallFailure

logger = logging.getLogger(__name__)

_OUTPUT_TAIL_LINES = 20


@dataclass(frozen=True)
class InstallOutcome:
    """Result of a successful installer run."""

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


def _tail(text: str) -> str:
    return "\n".join(text.strip().splitlines()[-_OUTPUT_TAIL_LINES:])


def run_installer(subspace: str, command: Sequence[str], cwd: Path) -> InstallOutcome:
    """Run *command* in *cwd* and block until it exits.

    Raises:
        InstallFailure: the command could not be started or exited nonzero.
    """
    logger.debug("Running %s in %s", " ".join(command), cwd)
    try:
        proc = subprocess.run(
            list(command),
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as exc:
        output = _tail(exc.stderr or exc.stdout or "")
        msg = f"{' '.join(command)} exited with status {exc.returncode} for subspace {subspace!r}"
        if output:
            msg = f"{msg}: {output}"
        raise InstallFailure(subspace, msg, returncode=exc.returncode) from exc
    except OSError as exc:
        msg = f"Could not run {' '.join(command)} for subspace {subspace!r}: {exc}"
        raise InstallFailure(subspace, msg) from exc

    return InstallOutcome(
        command=tuple(command),
        returncode=proc.returncode,
        stdout=proc.stdout,
        stderr=proc.stderr,
    )
