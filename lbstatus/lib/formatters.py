"""Output formatting helpers."""

from datetime import datetime
from typing import Dict, List, Optional

from .commit_lookup import CommitInfo
from .status_checker import ProbeError, ProbeResult, ProbeSuccess

SEPARATOR = '-' * 132


def human_time_of(sec: int) -> str:
    """Format an uptime in seconds: 45s, 2m 5s, 1h 1m or 1d."""
    if sec < 60:
        return f"{sec}s"
    if sec < 60 * 60:
        return f"{sec // 60}m {sec % 60}s"
    if sec < 60 * 60 * 24:
        return f"{sec // 3600}h {(sec // 60) % 60}m"
    return f"{sec // 86400}d"


def truncate(s: str, max_len: int) -> str:
    return s[:max_len - 1] + '…' if len(s) > max_len else s


def initials(name: str) -> str:
    return ''.join(part[0] for part in name.split(' ') if part)


def format_commit(commit: CommitInfo) -> str:
    """``ab: First line of the commit message``"""
    lines = commit.message.split('\n')
    msg = truncate(lines[0], 60)
    author = initials(commit.author_name).lower()
    return f"{author}: {msg}"


def format_result(result: ProbeResult, environment: str, now: Optional[datetime] = None) -> str:
    """Format one probe result as a single line."""
    prefix = f"[{(now or datetime.now()).strftime('%H:%M:%S')}] "

    if isinstance(result, ProbeSuccess):
        line = prefix + f"{result.service:<30} {environment}"
        if result.git_hash:
            line += f" {result.git_hash[:8]}"
        line += ' '
        if result.commit:
            line += f"{format_commit(result.commit):<65}"
        uptime = human_time_of(result.uptime) if result.uptime else '-'
        return line + f"uptime: {uptime}"

    if isinstance(result, ProbeError):
        return prefix + f"{result.service:<10}\t{result.message}"

    raise TypeError(f"Not a probe result: {result!r}")


def format_batch(results: List[ProbeResult], environment: str, now: Optional[datetime] = None) -> str:
    """Format a batch of results, one line each."""
    now = now or datetime.now()
    return '\n'.join(format_result(result, environment, now) for result in results)


def format_service_list(services: Dict[str, str], config_compatible: bool = False) -> str:
    """List the registry; ``config_compatible`` output can be saved as ~/.lbstatus."""
    if config_compatible:
        return '\n'.join(f"{name}={url}" for name, url in services.items())
    return '\n'.join(f"{name:<30} {url}" for name, url in services.items())
