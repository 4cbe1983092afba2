"""Statistics — status and method counts, busiest hosts, bytes served."""

import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from accesslog.models import AccessLogEntry

TOP_HOSTS = 10


@dataclass
class AccessStats:
    total_entries: int = 0
    malformed_lines: int = 0
    total_bytes: int = 0
    status_counts: dict[str, int] = field(default_factory=dict)
    method_counts: dict[str, int] = field(default_factory=dict)
    top_hosts: dict[str, int] = field(default_factory=dict)


def compute_stats(entries: Iterable[AccessLogEntry], top_hosts: int = TOP_HOSTS) -> AccessStats:
    """Consume an entry stream and produce aggregated statistics."""
    status_counter = Counter()
    method_counter = Counter()
    host_counter = Counter()
    total = 0
    total_bytes = 0

    for entry in entries:
        total += 1
        total_bytes += entry.response_size
        if entry.status:
            status_counter[entry.status] += 1
        method = entry.request_method or entry.request_first_line.method
        if method:
            method_counter[method] += 1
        if entry.remote_host:
            host_counter[entry.remote_host] += 1

    return AccessStats(
        total_entries=total,
        total_bytes=total_bytes,
        status_counts=dict(sorted(status_counter.items())),
        method_counts=dict(method_counter.most_common()),
        top_hosts=dict(host_counter.most_common(top_hosts)),
    )


def format_stats_text(stats: AccessStats) -> str:
    """Human-readable stats summary."""
    lines = []
    lines.append(f"Total entries: {stats.total_entries}")
    lines.append(f"Malformed lines: {stats.malformed_lines}")
    lines.append(f"Bytes served: {stats.total_bytes}")
    lines.append("")

    lines.append("Status codes:")
    for status, count in stats.status_counts.items():
        lines.append(f"  {status:5s} {count}")
    lines.append("")

    lines.append("Methods:")
    for method, count in stats.method_counts.items():
        lines.append(f"  {method:8s} {count}")
    lines.append("")

    if stats.top_hosts:
        lines.append(f"Top hosts ({len(stats.top_hosts)}):")
        for host, count in stats.top_hosts.items():
            lines.append(f"  {host:15s} {count}")
    else:
        lines.append("No remote hosts.")

    return "\n".join(lines)


def format_stats_json(stats: AccessStats) -> str:
    """JSON stats output."""
    return json.dumps({
        "total_entries": stats.total_entries,
        "malformed_lines": stats.malformed_lines,
        "total_bytes": stats.total_bytes,
        "status_counts": stats.status_counts,
        "method_counts": stats.method_counts,
        "top_hosts": stats.top_hosts,
    }, indent=2)
