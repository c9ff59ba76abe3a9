# src/hybridocr/runner.py
from __future__ import annotations

import logging
import os
import platform
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Union

from .exceptions import ExtractionFailed

logger = logging.getLogger("hybridocr")

Arg = Union[str, Path]

# Per-OS install locations checked after PATH
_FALLBACK_DIRS: Dict[str, List[str]] = {
    "Windows": [
        r"C:\Program Files\Tesseract-OCR",
        r"C:\Program Files (x86)\Tesseract-OCR",
        r"C:\Program Files\GraphicsMagick",
        r"C:\Program Files\poppler\Library\bin",
    ],
    "Darwin": [
        "/opt/homebrew/bin",   # Apple Silicon Homebrew
        "/usr/local/bin",      # Intel Homebrew/MacPorts
    ],
    "Linux": [
        "/usr/bin",
        "/usr/local/bin",
        "/snap/bin",
    ],
}


def resolve_binary(name: str, env_var: Optional[str] = None) -> Optional[str]:
    """
    Locate an external tool.
    Order: explicit env override, PATH, common per-OS install locations.
    Returns None when nothing is found.
    """
    # 1) explicit env override
    if env_var:
        cmd = os.getenv(env_var)
        if cmd and Path(cmd).exists():
            return cmd

    # 2) look on PATH
    cmd = shutil.which(name)
    if cmd:
        return cmd

    # 3) common fallbacks by OS
    system = platform.system()
    exe = f"{name}.exe" if system == "Windows" else name
    for d in _FALLBACK_DIRS.get(system, _FALLBACK_DIRS["Linux"]):
        p = Path(d) / exe
        if p.exists():
            return str(p)
    return None


def cli_path(path: Arg) -> str:
    """
    Render a path as a command argument the tools always read as a file.
    Relative paths get a ./ prefix, so "-x.pdf" is not an option and a bare
    "stdout" or "-" is not tesseract's or pdftotext's stream name.
    """
    s = str(path)
    if os.path.isabs(s) or s.startswith("." + os.sep):
        return s
    return os.path.join(".", s)


def _decode(raw: Optional[bytes]) -> str:
    if not raw:
        return ""
    if isinstance(raw, str):
        return raw
    return raw.decode("utf-8", errors="replace")


class ProcessRunner:
    """
    Runs external tools synchronously.

    Commands are argument lists, never shell strings, so file names with
    spaces or quotes need no escaping. stdout and stderr are captured
    together; a non-zero exit raises ExtractionFailed with that output.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def run(self, args: Sequence[Arg], env: Optional[Mapping[str, str]] = None) -> str:
        cmd = [str(a) for a in args]
        logger.debug("Running: %s", " ".join(shlex.quote(c) for c in cmd))

        full_env = None
        if env:
            full_env = os.environ.copy()
            full_env.update(env)

        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=full_env,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ExtractionFailed(f"{cmd[0]}: command not found") from e
        except subprocess.TimeoutExpired as e:
            raise ExtractionFailed(
                f"{cmd[0]} timed out after {self.timeout} seconds\n{_decode(e.output)}"
            ) from e

        output = _decode(proc.stdout)
        if proc.returncode != 0:
            logger.debug("%s exited with status %s", cmd[0], proc.returncode)
            raise ExtractionFailed(output)
        return output
