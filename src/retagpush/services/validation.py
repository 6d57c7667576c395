"""Run configuration validation for retagpush."""

import re
from collections import Counter
from typing import Sequence

from retagpush.errors import TransferError
from retagpush.errors_catalog import actionable_error
from retagpush.models import RetryPolicy, RunConfig


class ValidationService:
    """Rejects configurations that cannot produce a meaningful run."""

    TAG_PATTERN = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.-]{0,127}")

    def validate_environment(self, config: RunConfig, services: Sequence[str]):
        self.ensure_registry_prefix(config.registry_prefix)
        self.ensure_valid_tag(config.version)
        self.ensure_services(services)
        self.ensure_retry_policy(config.retry)

    def ensure_registry_prefix(self, registry_prefix: str):
        if not registry_prefix or not registry_prefix.strip():
            raise TransferError(actionable_error("missing_registry_prefix"))

    def ensure_valid_tag(self, version: str):
        if not self.TAG_PATTERN.fullmatch(version or ""):
            raise TransferError(actionable_error("invalid_version", version=version or ""))

    def ensure_services(self, services: Sequence[str]):
        if not services:
            raise TransferError(actionable_error("no_services"))

        duplicates = sorted(name for name, count in Counter(services).items() if count > 1)
        if duplicates:
            raise TransferError(actionable_error("duplicate_services", names=", ".join(duplicates)))

    def ensure_retry_policy(self, retry: RetryPolicy):
        if retry.max_attempts < 1:
            raise TransferError("Retry policy needs at least one push attempt.")
        if retry.delay_seconds < 0:
            raise TransferError("Retry delay cannot be negative.")
