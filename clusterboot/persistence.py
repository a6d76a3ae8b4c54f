"""Config file persistence and service activation."""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger

from clusterboot.errors import ActivationError, PersistenceError

log = logger.bind(component="persistence")

DEFAULT_MODE = 0o644

type Runner = Callable[..., subprocess.CompletedProcess[Any]]


def write_config(
    text: str,
    path: str | Path,
    *,
    owner: str | None,
    group: str | None,
) -> Path:
    """Write ``text`` to ``path`` atomically with the given ownership.

    The content goes to a temporary file in the same directory, is chowned,
    then renamed over the target, so readers never see a partial file.

    Raises:
        PersistenceError: On any filesystem or ownership failure.
    """
    target = Path(path)
    tmp_path: str | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.chmod(tmp_path, DEFAULT_MODE)
        if owner is not None or group is not None:
            shutil.chown(tmp_path, user=owner, group=group)
        os.replace(tmp_path, target)
    except (OSError, LookupError) as e:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise PersistenceError(f"Cannot write config to {target}: {e}") from e

    log.info("Wrote {path} (owner={owner}:{group})", path=target, owner=owner, group=group)
    return target


def restart_service(name: str, *, runner: Runner = subprocess.run) -> None:
    """Ask systemd to (re)start the membership service.

    Raises:
        ActivationError: If systemctl is missing or exits non-zero.
    """
    try:
        runner(
            ["systemctl", "restart", name],
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        raise ActivationError("systemctl not found; cannot start the service") from None
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise ActivationError(f"systemctl restart {name} failed: {stderr or e}") from e

    log.info("Restarted service {name}", name=name)
