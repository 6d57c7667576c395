"""JSON run report: per-phase tallies and the references each phase touched."""

import json
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from retagpush.models import CleanupResult, PhaseResult, RunConfig


@dataclass
class PhaseRecord:
    name: str
    started_at: datetime
    status: str = "running"
    finished_at: Optional[datetime] = None
    succeeded: Optional[int] = None
    failed: Optional[int] = None
    removed: Optional[int] = None
    skipped: Optional[int] = None
    completed: List[str] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def apply(self, result):
        """Copy the tally of a finished phase onto the record."""
        if isinstance(result, PhaseResult):
            self.succeeded = result.succeeded
            self.failed = result.failed
            self.completed = list(result.completed)
            self.failures = list(result.failures)
            self.status = "success" if result.ok else "partial"
        elif isinstance(result, CleanupResult):
            self.removed = result.removed
            self.skipped = result.skipped
            self.status = "success"
        else:
            self.status = "success"

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "status": self.status}
        if self.finished_at is not None:
            data["duration_seconds"] = (self.finished_at - self.started_at).total_seconds()
        for key in ("succeeded", "failed", "removed", "skipped", "error"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


class ReportService:
    """Tracks one run and rewrites ``report_file`` as phases finish.

    Without a ``report_file`` the report is only kept in memory.
    """

    def __init__(self, report_file: Optional[str], logger):
        self.report_file = report_file
        self.logger = logger
        self.run_id: Optional[str] = None
        self.config: Optional[RunConfig] = None
        self.services: List[str] = []
        self.phases: List[PhaseRecord] = []
        self.status = "running"
        self.error: Optional[str] = None
        self.started_at: Optional[datetime] = None
        self.finished_at: Optional[datetime] = None

    def begin(self, run_id: str, config: RunConfig, services: Sequence[str]):
        self.run_id = run_id
        self.config = config
        self.services = list(services)
        self.started_at = self._now()
        self.write()

    def open_phase(self, name: str) -> PhaseRecord:
        record = PhaseRecord(name=name, started_at=self._now())
        self.phases.append(record)
        return record

    def close_phase(self, record: PhaseRecord, result=None, status: Optional[str] = None, error=None):
        record.apply(result)
        if status:
            record.status = status
        record.error = error
        record.finished_at = self._now()
        self.write()

    def finish(self, status: str, error: Optional[str] = None):
        self.status = status
        self.error = error
        self.finished_at = self._now()
        self.write()

    def phase(self, name: str) -> Optional[PhaseRecord]:
        return next((record for record in self.phases if record.name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        retag = self.phase("retag_images")
        push = self.phase("push_images")
        document: Dict[str, Any] = {
            "run_id": self.run_id,
            "status": self.status,
            "error": self.error,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "phases": [record.as_dict() for record in self.phases],
            "images": {
                "retagged": retag.completed if retag else [],
                "retag_failed": retag.failures if retag else [],
                "pushed": push.completed if push else [],
                "push_failed": push.failures if push else [],
            },
        }
        if self.config is not None:
            document["config"] = {
                "version": self.config.version,
                "registry_prefix": self.config.registry_prefix,
                "source_prefix": self.config.source_prefix,
                "runtime": self.config.runtime,
                "services": self.services,
                "max_attempts": self.config.retry.max_attempts,
                "retry_delay_seconds": self.config.retry.delay_seconds,
                "cleanup": self.config.cleanup,
                "cleanup_source": self.config.cleanup_source,
                "dry_run": self.config.dry_run,
            }
        return document

    def write(self):
        if not self.report_file:
            return

        path = Path(self.report_file)
        staging = path.with_name(f".{path.name}.partial")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            staging.write_text(json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8")
            os.replace(staging, path)
        except OSError as exc:
            self.logger.warning("Could not write report file '%s': %s", self.report_file, exc)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)
