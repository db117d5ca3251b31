#!/usr/bin/env python3
"""Changelog run metrics written as JSONL.

One ``changelog.run`` record per run (outcome, failing step, issue and
section counts) plus latency timers around GitHub calls. Off unless
METRICS_ENABLED=1.
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from release_changelog.configs.config import Config


def _path() -> Path:
    root = Path(Config.observability()["metrics_root"])
    root.mkdir(parents=True, exist_ok=True)
    return root / "metrics.log"


def incr(name: str, value: Any = 1, **kw) -> None:
    if not Config.observability()["metrics_enabled"]:
        return
    rec: Dict[str, Any] = {"ts": int(time.time()), "metric": name, "value": value}
    for k, v in kw.items():
        if isinstance(v, str) and len(v) > 200:
            rec[k] = v[:200] + "..."
        else:
            rec[k] = v
    line = json.dumps(rec, separators=(",", ":")) + "\n"
    with open(_path(), "a", encoding="utf-8") as f:
        f.write(line)


def record_run(
    repo: str,
    *,
    step: str,
    code: Optional[str] = None,
    labels: Iterable[str] = (),
    current_release: str = "",
    previous_release: str = "",
) -> None:
    """Record the outcome of one changelog run.

    ``step`` is ``written`` on success, else the step that failed
    (``output``, ``window``, ``search``). ``value`` is the number of PRs in
    the report and ``sections`` the number of distinct non-empty labels.
    """
    label_list = list(labels)
    incr(
        "changelog.run",
        value=len(label_list),
        repo=repo,
        ok=step == "written",
        step=step,
        code=code,
        sections=len({label for label in label_list if label}),
        current=current_release,
        previous=previous_release,
    )


def record_publish(repo: str, tag: str, *, code: Optional[str] = None) -> None:
    incr("changelog.publish", repo=repo, tag=tag, ok=code is None, code=code)


class Timer:
    def __init__(self, name: str, **kw):
        self.name = name
        self.kw = kw
        self._t0 = 0.0

    def __enter__(self):
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        dt = time.perf_counter() - self._t0
        incr(f"{self.name}.latency_s", value=dt, ok=exc_type is None, **self.kw)
