"""Leftover browser/driver process cleanup (psutil)."""

from __future__ import annotations

import os
from typing import Iterable, List, Optional

import psutil

from score_watch.logging_utils import _dbg

DRIVERS = ("chromium", "firefox")

# Substrings of process names started by Playwright for each engine.
_ENGINE_NAMES = {
    "chromium": ("chrome", "chromium", "headless_shell"),
    "firefox": ("firefox",),
}

# Every Playwright-managed browser binary lives under this cache directory.
_PLAYWRIGHT_PATH_MARK = "ms-playwright"
_DRIVER_CMD_MARK = "run-driver"


def _cmdline(proc: psutil.Process) -> List[str]:
    try:
        return list(proc.cmdline() or [])
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return []


def is_leftover_browser(name: str, cmdline: Iterable[str], driver: str) -> bool:
    joined = " ".join(cmdline)
    if _DRIVER_CMD_MARK in joined and "playwright" in joined:
        return True
    lname = (name or "").lower()
    if not any(n in lname for n in _ENGINE_NAMES.get(driver, ())):
        return False
    return _PLAYWRIGHT_PATH_MARK in joined


def kill_previous_browsers(driver: str, *, own_pid: Optional[int] = None) -> int:
    """
    Kill browser and driver processes left behind by an earlier run.
    Only Playwright-managed binaries of the given engine are touched.
    """
    me = own_pid if own_pid is not None else os.getpid()
    victims: List[psutil.Process] = []
    for proc in psutil.process_iter(["pid", "name"]):
        pid = proc.info.get("pid")
        if pid == me:
            continue
        if not is_leftover_browser(proc.info.get("name") or "", _cmdline(proc), driver):
            continue
        victims.append(proc)

    for proc in victims:
        try:
            proc.kill()
            _dbg(f"Killing PID {proc.pid}")
        except psutil.NoSuchProcess:
            pass
        except psutil.AccessDenied:
            _dbg(f"no permission to kill PID {proc.pid}")
    if victims:
        psutil.wait_procs(victims, timeout=3)
    return len(victims)
