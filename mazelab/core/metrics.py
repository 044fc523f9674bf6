# mazelab/core/metrics.py
#!/usr/bin/env python3
from typing import Any, Dict, Mapping, Optional

from mazelab.core.types import AlgorithmResult


def result_metrics(result: AlgorithmResult) -> Dict[str, Any]:
    """Shape a finished run like the viewer's live metric card."""
    return {
        "algo": result.algo,
        "popped": result.nodes_explored,
        "closed_count": len(result.visited_nodes),
        "path_len": result.path_length,
        "time_ms": result.execution_time * 1000.0,
        "success": result.success,
    }


def summarize(results: Mapping[str, Optional[AlgorithmResult]]) -> Dict[str, Any]:
    """
    Best time over all runs and shortest path over the successful ones, plus
    per-algorithm ``fastest`` / ``optimal`` flags.
    """
    valid = {k: r for k, r in results.items() if r is not None}
    if not valid:
        return {"best_time": None, "shortest_path": None, "per_algo": {}}

    best_time = min(r.execution_time for r in valid.values())
    lengths = [r.path_length for r in valid.values() if r.success]
    shortest = min(lengths) if lengths else None

    per_algo = {}
    for k, r in valid.items():
        per_algo[k] = {
            "fastest": r.execution_time == best_time,
            "optimal": r.success and r.path_length == shortest,
        }
    return {"best_time": best_time, "shortest_path": shortest, "per_algo": per_algo}


def format_table(results: Mapping[str, Optional[AlgorithmResult]]) -> str:
    summary = summarize(results)
    header = f"{'algorithm':<14}{'status':<9}{'time(ms)':>10}{'path':>7}{'explored':>10}{'visited':>9}  notes"
    lines = [header, "-" * len(header)]
    for k, r in results.items():
        if r is None:
            continue
        flags = summary["per_algo"][k]
        notes = []
        if flags["fastest"]:
            notes.append("fastest")
        if flags["optimal"]:
            notes.append("shortest")
        if r.error:
            notes.append(f"error: {r.error}")
        status = "ok" if r.success else "failed"
        lines.append(f"{k:<14}{status:<9}{r.execution_time * 1000.0:>10.2f}{r.path_length:>7}"
                     f"{r.nodes_explored:>10}{len(r.visited_nodes):>9}  {', '.join(notes)}")
    return "\n".join(lines)
