"""
Debug logger for tracking completion calls and run timing.

Writes per-collaboration JSON Lines log files under the logs directory.
"""

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


# Collaboration-based logger registry to ensure same instance is reused
_logger_registry: Dict[str, "DebugLogger"] = {}
_registry_lock = threading.Lock()


def get_or_create_logger(collaboration_id: str, logs_dir: str = "logs") -> "DebugLogger":
    """
    Get an existing logger for the collaboration or create a new one.

    The same DebugLogger instance is used by every pipeline node during a
    run, so call counts and durations accumulate correctly.

    Args:
        collaboration_id: Collaboration identifier
        logs_dir: Directory to store log files (default: "logs")

    Returns:
        DebugLogger instance for this collaboration
    """
    with _registry_lock:
        if collaboration_id not in _logger_registry:
            _logger_registry[collaboration_id] = DebugLogger(collaboration_id, logs_dir)
        return _logger_registry[collaboration_id]


def remove_logger(collaboration_id: str) -> None:
    """Remove a logger from the registry (e.g., after the run ends)."""
    with _registry_lock:
        _logger_registry.pop(collaboration_id, None)


class DebugLogger:
    """
    Debug logger that writes per-collaboration JSON log files.

    Tracks every completion call made during a pipeline run with its
    prompt blocks, response and timing. Entries are appended in JSON Lines
    format (one JSON object per line). Execution-phase calls run on worker
    threads, so writes are serialized with a lock.
    """

    def __init__(self, collaboration_id: str, logs_dir: str = "logs"):
        self.collaboration_id = collaboration_id
        self.base_logs_dir = Path(logs_dir)
        self.run_dir = self.base_logs_dir / collaboration_id
        self.log_file = self.run_dir / "run_logs.json"

        self.run_dir.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self._total_llm_duration_ms = 0.0
        self._llm_call_count = 0
        self._failed_call_count = 0

    def _get_timestamp(self) -> str:
        """Get current UTC timestamp in ISO format."""
        return datetime.now(timezone.utc).isoformat()

    def _append_to_log(self, entry: Dict[str, Any]) -> None:
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")

    def log_llm_call(
        self,
        phase: str,
        agent_name: str,
        messages: List[Dict[str, str]],
        response: str,
        duration_ms: float,
        error: Optional[str] = None,
    ) -> None:
        """
        Log a completion call with prompt blocks, response and timing.

        Args:
            phase: Pipeline phase the call belongs to ("decomposition", "planning", ...)
            agent_name: Display name of the agent whose persona was used
            messages: Role-tagged prompt blocks sent to the service
            response: Text returned (empty string on failure)
            duration_ms: Time taken for the call in milliseconds
            error: Error message if the call failed
        """
        entry = {
            "type": "llm_call",
            "timestamp": self._get_timestamp(),
            "collaboration_id": self.collaboration_id,
            "phase": phase,
            "agent": agent_name,
            "messages": messages,
            "response": response,
            "duration_ms": round(duration_ms, 2),
            "success": error is None,
        }
        if error:
            entry["error"] = error

        with self._lock:
            self._total_llm_duration_ms += duration_ms
            self._llm_call_count += 1
            if error:
                self._failed_call_count += 1
            self._append_to_log(entry)

    def log_run_summary(self, outcome: str) -> Dict[str, Any]:
        """
        Log and return a run summary with totals.

        Args:
            outcome: How the run ended ("completed", "cancelled", "failed")

        Returns:
            Summary dictionary with all totals
        """
        with self._lock:
            summary = {
                "type": "run_summary",
                "timestamp": self._get_timestamp(),
                "collaboration_id": self.collaboration_id,
                "outcome": outcome,
                "total_llm_calls": self._llm_call_count,
                "failed_llm_calls": self._failed_call_count,
                "total_llm_duration_ms": round(self._total_llm_duration_ms, 2),
            }
            self._append_to_log(summary)
        return summary

    def get_accumulated_stats(self) -> Dict[str, Any]:
        """Current accumulated statistics, without logging."""
        with self._lock:
            return {
                "llm_call_count": self._llm_call_count,
                "failed_llm_calls": self._failed_call_count,
                "total_llm_duration_ms": round(self._total_llm_duration_ms, 2),
            }

    def export_calls_to_markdown(self) -> str:
        """
        Write every logged completion call to a readable markdown file.

        Returns:
            Path to the generated markdown file
        """
        calls_file = self.run_dir / "calls.md"
        calls = []

        if self.log_file.exists():
            with open(self.log_file, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entry = json.loads(line)
                    except json.JSONDecodeError:
                        continue
                    if entry.get("type") == "llm_call":
                        calls.append(entry)

        with open(calls_file, "w", encoding="utf-8") as f:
            f.write(f"# Completion Calls - Collaboration {self.collaboration_id}\n\n")
            f.write(f"*Generated at: {self._get_timestamp()}*\n\n")
            f.write("---\n\n")

            for number, call in enumerate(calls, 1):
                f.write(f"## {number}. {call.get('phase', 'N/A')} / {call.get('agent', 'N/A')}\n\n")
                f.write(f"- **Duration:** {call.get('duration_ms', 0)} ms\n")
                f.write(f"- **Success:** {call.get('success', False)}\n")
                if call.get("error"):
                    f.write(f"- **Error:** {call['error']}\n")
                f.write("\n")
                f.write(f"{call.get('response', '')}\n\n")

            f.write("---\n")
            f.write(f"\n*Total calls: {len(calls)}*\n")

        return str(calls_file)
