"""
Run a child process with collected secrets in its environment.

Without ``carry_env`` the child sees only the collected entries plus USER,
HOME and PATH from the parent. With redaction enabled, the child's stdout
and stderr are piped through RedactingWriters before reaching ours.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import threading
from typing import BinaryIO

from keyward.config import DEFAULT_MAX_LINE_BYTES
from keyward.errors import KeywardError
from keyward.models import EnvEntry
from keyward.redactor import READ_CHUNK, RedactingWriter, Redactor

logger = logging.getLogger(__name__)

PASSTHROUGH_VARS = ("USER", "HOME", "PATH")


def build_child_env(entries: list[EnvEntry], carry_env: bool = False) -> dict[str, str]:
    if carry_env:
        env = dict(os.environ)
        env.update({e.key: e.value for e in entries})
        return env
    env = {e.key: e.value for e in entries}
    for name in PASSTHROUGH_VARS:
        env[name] = os.environ.get(name, "")
    return env


def _pump(src: BinaryIO, writer: RedactingWriter, errors: list[BaseException]) -> None:
    try:
        while chunk := src.read1(READ_CHUNK):
            writer.write(chunk)
    except (KeywardError, OSError) as e:
        errors.append(e)
        # keep draining so the child never blocks on a full pipe
        while src.read1(READ_CHUNK):
            pass
    finally:
        writer.close()
        src.close()


def run_command(
    cmd: list[str],
    entries: list[EnvEntry],
    carry_env: bool = False,
    redact: bool = False,
    stdout: BinaryIO | None = None,
    stderr: BinaryIO | None = None,
    max_line_bytes: int = DEFAULT_MAX_LINE_BYTES,
) -> int:
    """Run ``cmd`` and return its exit code."""
    if not cmd:
        raise KeywardError("no command given")
    env = build_child_env(entries, carry_env)
    logger.debug("Running %s with %d injected variables (redact=%s)", cmd[0], len(entries), redact)

    try:
        if not redact:
            return subprocess.run(cmd, env=env).returncode

        proc = subprocess.Popen(cmd, env=env, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    except FileNotFoundError as e:
        raise KeywardError(f"command not found: {cmd[0]}") from e

    redactor = Redactor(entries)
    out = RedactingWriter(stdout or sys.stdout.buffer, redactor, max_line_bytes)
    err = RedactingWriter(stderr or sys.stderr.buffer, redactor, max_line_bytes)
    errors: list[BaseException] = []
    pumps = [
        threading.Thread(target=_pump, args=(proc.stdout, out, errors), daemon=True),
        threading.Thread(target=_pump, args=(proc.stderr, err, errors), daemon=True),
    ]
    for t in pumps:
        t.start()
    returncode = proc.wait()
    for t in pumps:
        t.join()
    if errors:
        raise errors[0]
    return returncode
