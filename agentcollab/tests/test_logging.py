"""
Tests for structured logging and the per-run debug trace.
"""

import json
import logging

from agentcollab.shared.logging.config import (
    StructuredFormatter,
    log_phase_transition,
    setup_logging,
)
from agentcollab.shared.logging.debug_logger import (
    DebugLogger,
    get_or_create_logger,
    remove_logger,
)
from agentcollab.tests.fakes import ScriptedCompletion, build_service, make_agent


def _read_entries(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


class TestStructuredLogging:
    """Tests for the JSON formatter and phase transition helper."""

    def test_formatter_outputs_json(self):
        """Records are formatted as one JSON object."""
        record = logging.LogRecord("agentcollab", logging.INFO, "", 0, "hello %s", ("world",), None)
        record.extra = {"event": "planning_done"}

        data = json.loads(StructuredFormatter().format(record))

        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["extra"] == {"event": "planning_done"}

    def test_phase_transition_summarizes_state(self):
        """The transition record carries the key state fields."""
        agent = make_agent("Lead")
        service = build_service([agent], ScriptedCompletion())
        collaboration = service.create_collaboration("Launch", "Plan", [agent.id])
        logger = logging.getLogger("agentcollab.tests.transitions")
        handler = _ListHandler()
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

        try:
            log_phase_transition(
                "planning_done",
                {"collaboration": collaboration, "coordinator": agent, "agents": [agent]},
                extra={"plan_chars": 10},
                logger=logger,
            )
        finally:
            logger.removeHandler(handler)

        summary = handler.records[0].extra
        assert summary["event"] == "planning_done"
        assert summary["state_summary"]["collaboration_id"] == collaboration.id
        assert summary["state_summary"]["coordinator"] == "Lead"
        assert summary["extra"] == {"plan_chars": 10}


class TestDebugLogger:
    """Tests for the per-collaboration debug trace."""

    def test_registry_reuses_instances(self, tmp_path):
        """The same collaboration gets the same logger until removed."""
        first = get_or_create_logger("collab-1", str(tmp_path))
        assert get_or_create_logger("collab-1", str(tmp_path)) is first

        remove_logger("collab-1")
        assert get_or_create_logger("collab-1", str(tmp_path)) is not first
        remove_logger("collab-1")

    def test_calls_and_summary(self, tmp_path):
        """Calls accumulate into stats and the summary."""
        debug_logger = DebugLogger("collab-2", str(tmp_path))
        debug_logger.log_llm_call("planning", "Lead", [], "plan", 12.5)
        debug_logger.log_llm_call("execution", "Helper", [], "", 3.0, error="boom")

        stats = debug_logger.get_accumulated_stats()
        summary = debug_logger.log_run_summary("completed")

        assert stats == {
            "llm_call_count": 2,
            "failed_llm_calls": 1,
            "total_llm_duration_ms": 15.5,
        }
        assert summary["outcome"] == "completed"
        entries = _read_entries(debug_logger.log_file)
        assert [e["type"] for e in entries] == ["llm_call", "llm_call", "run_summary"]
        assert entries[1]["success"] is False

    def test_markdown_export(self, tmp_path):
        """Logged calls are exported as readable markdown."""
        debug_logger = DebugLogger("collab-3", str(tmp_path))
        debug_logger.log_llm_call("integration", "Lead", [], "final answer", 1.0)

        path = debug_logger.export_calls_to_markdown()

        with open(path, encoding="utf-8") as f:
            content = f.read()
        assert "## 1. integration / Lead" in content
        assert "final answer" in content

    def test_pipeline_run_writes_trace(self, tmp_path):
        """A run with debug logs enabled traces every completion call."""
        agents = [make_agent("Lead"), make_agent("A"), make_agent("B")]
        service = build_service(agents, ScriptedCompletion(), debug_logs_dir=str(tmp_path))
        collaboration = service.create_collaboration("Launch", "Plan", [a.id for a in agents])

        service.send_message(collaboration.id, "Draft a tagline")

        entries = _read_entries(tmp_path / collaboration.id / "run_logs.json")
        calls = [e for e in entries if e["type"] == "llm_call"]
        assert [c["phase"] for c in calls][:2] == ["decomposition", "planning"]
        assert sorted(c["agent"] for c in calls if c["phase"] == "execution") == ["A", "B"]
        assert calls[-1]["phase"] == "integration"
        assert entries[-1]["type"] == "run_summary"
        assert entries[-1]["outcome"] == "completed"
        assert entries[-1]["total_llm_calls"] == 5
        assert (tmp_path / collaboration.id / "calls.md").exists()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_writes_json_lines_to_file(self, tmp_path):
        """Configured loggers write structured JSON to the log file."""
        log_file = tmp_path / "app.log"
        logger = setup_logging(log_file=str(log_file), logger_name="agentcollab.tests.setup")

        logger.info("pipeline started")
        for handler in logger.handlers:
            handler.flush()
            handler.close()
        logger.handlers = []

        entry = json.loads(log_file.read_text(encoding="utf-8").strip())
        assert entry["message"] == "pipeline started"
        assert entry["logger"] == "agentcollab.tests.setup"
