"""Shared domain models for retagpush."""

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from .constants import (
    DEFAULT_REPOSITORY_PREFIX,
    DEFAULT_RUNTIME,
    DEFAULT_VERSION,
    LOG_FILE,
    MAX_PUSH_ATTEMPTS,
    RETRY_DELAY_SECONDS,
    SOURCE_CLEANUP_TAG,
    SOURCE_PREFIX,
)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with a fixed delay between attempts."""

    max_attempts: int = MAX_PUSH_ATTEMPTS
    delay_seconds: float = RETRY_DELAY_SECONDS

    def delay_for(self, attempt: int) -> float:
        return self.delay_seconds


@dataclass(frozen=True)
class RunConfig:
    """Settings for one run, fixed at startup."""

    version: str = DEFAULT_VERSION
    registry_prefix: str = DEFAULT_REPOSITORY_PREFIX
    source_prefix: str = SOURCE_PREFIX
    log_path: str = LOG_FILE
    runtime: str = DEFAULT_RUNTIME
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    tls_verify: bool = False
    cleanup: bool = True
    cleanup_source: bool = True
    abort_on_retag_failure: bool = False
    dry_run: bool = False
    report_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "RunConfig":
        """Build a config from ``VERSION`` and ``REPOSITORY_PREFIX``.

        A variable that is present but empty keeps its empty value, so an
        explicitly blanked ``REPOSITORY_PREFIX`` fails validation instead of
        silently falling back to the default registry.
        """
        env = os.environ if environ is None else environ
        values = {
            "version": env.get("VERSION", DEFAULT_VERSION),
            "registry_prefix": env.get("REPOSITORY_PREFIX", DEFAULT_REPOSITORY_PREFIX),
        }
        values.update(overrides)
        return cls(**values)

    def source_ref(self, service: str) -> str:
        return f"{self.source_prefix}/{service}"

    def source_cleanup_ref(self, service: str) -> str:
        return f"{self.source_prefix}/{service}:{SOURCE_CLEANUP_TAG}"

    def destination_ref(self, service: str) -> str:
        return f"{self.registry_prefix}/{service}:{self.version}"


@dataclass
class PhaseResult:
    """Per-phase tally of succeeded and failed items."""

    succeeded: int = 0
    failed: int = 0
    completed: List[str] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0


@dataclass
class CleanupResult:
    removed: int = 0
    skipped: int = 0
