"""Rendering of the headroom and evictable-container tables, plus the JSON report."""
import json
import math
import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from tabulate import tabulate

from config import TABLE_FORMAT
from normalize.quantity import format_bytes, format_efficiency


EVICTABLE_HEADERS = ["Node", "Namespace", "Pod", "Container", "Requested", "Used", "Limit"]


def node_headers(additional_label: str) -> List[str]:
    return [
        "Name",
        "Allocatable",
        "Used",
        "Free",
        "Requests",
        "Efficiency",
        "Schedulable",
        f"Free - {additional_label}",
        f"Schedulable - {additional_label}",
        "Ok?",
    ]


def render_nodes(summaries: List[Dict[str, Any]], additional_label: str,
                 table_format: Optional[str] = None) -> str:
    rows = []
    for s in summaries:
        rows.append([
            s['name'],
            format_bytes(s['allocatable']),
            format_bytes(s['used']),
            format_bytes(s['free']),
            format_bytes(s['requests']),
            format_efficiency(s['efficiency']),
            format_bytes(s['schedulable']),
            format_bytes(s['free_with_additional']),
            format_bytes(s['schedulable_with_additional']),
            'true' if s['sufficient'] else 'false',
        ])
    # disable_numparse keeps the preformatted strings as they are
    return tabulate(rows, headers=node_headers(additional_label),
                    tablefmt=table_format or TABLE_FORMAT, disable_numparse=True)


def render_evictable(candidates: List[Dict[str, Any]], table_format: Optional[str] = None) -> str:
    rows = [
        [
            c['node'],
            c['namespace'],
            c['pod'],
            c['container'],
            format_bytes(c['requested']),
            format_bytes(c['used']),
            format_bytes(c['limit']),
        ]
        for c in candidates
    ]
    return tabulate(rows, headers=EVICTABLE_HEADERS,
                    tablefmt=table_format or TABLE_FORMAT, disable_numparse=True)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def build_report(summaries: List[Dict[str, Any]], candidates: List[Dict[str, Any]],
                 additional: int) -> Dict[str, Any]:
    nodes = []
    for s in summaries:
        entry = dict(s)
        entry['efficiency'] = _finite_or_none(s['efficiency'])
        nodes.append(entry)
    return {
        'generated_at': _now_iso(),
        'additional_bytes': additional,
        'nodes': nodes,
        'evictable': [dict(c) for c in candidates],
    }


def _atomic_write(path: str, data: str) -> None:
    dirp = os.path.dirname(path) or '.'
    fd, tmp = tempfile.mkstemp(prefix='.tmp_headroom_', dir=dirp)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(data)
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)


def write_report(path: str, report: Dict[str, Any]) -> None:
    _atomic_write(path, json.dumps(report, indent=2))
