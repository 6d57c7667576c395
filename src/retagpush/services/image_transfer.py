"""Per-image transfer phases: source check, retag, push and cleanup."""

import logging
import time
from typing import Callable, Sequence

from retagpush.errors import TransferError
from retagpush.errors_catalog import actionable_error
from retagpush.models import CleanupResult, PhaseResult, RunConfig


class ImageTransferService:
    """Runs each phase over the whole service list and reports a tally.

    Per-image failures never stop a loop; only the source check raises.
    """

    def __init__(self, runtime, log, sleep: Callable[[float], None] = time.sleep):
        self.runtime = runtime
        self.log = log
        self.sleep = sleep

    def check_source_images(self, config: RunConfig, services: Sequence[str]) -> PhaseResult:
        self.log.record("Checking source images...")
        result = PhaseResult()

        for service in services:
            source_image = config.source_ref(service)
            if self.runtime.image_exists(source_image):
                self.log.record(f"OK: Found source image {source_image}")
                result.succeeded += 1
                result.completed.append(source_image)
            else:
                self.log.record(f"ERROR: Source image {source_image} not found locally", logging.ERROR)
                result.failed += 1
                result.failures.append(source_image)

        if not result.ok:
            raise TransferError(
                actionable_error(
                    "source_images_missing",
                    count=str(result.failed),
                    source_prefix=config.source_prefix,
                )
            )
        return result

    def retag_images(self, config: RunConfig, services: Sequence[str]) -> PhaseResult:
        self.log.record("=== Retagging Images ===")
        result = PhaseResult()

        for service in services:
            source_image = config.source_ref(service)
            target_image = config.destination_ref(service)
            self.log.record(f"Retagging {source_image} to {target_image}...")

            if self.runtime.tag(source_image, target_image):
                self.log.record(f"SUCCESS: Retagged {service}")
                result.succeeded += 1
                result.completed.append(target_image)
            else:
                self.log.record(f"ERROR: Failed to retag {service}", logging.ERROR)
                result.failed += 1
                result.failures.append(target_image)

        self.log.record(
            f"Retagging completed: {result.succeeded} successful, {result.failed} failed"
        )
        return result

    def push_images(self, config: RunConfig, services: Sequence[str]) -> PhaseResult:
        self.log.record("=== Pushing Images ===")
        result = PhaseResult()

        for service in services:
            image = config.destination_ref(service)
            if self._push_with_retry(image, config):
                result.succeeded += 1
                result.completed.append(image)
            else:
                result.failed += 1
                result.failures.append(image)

        self.log.record(
            f"Push process completed: {result.succeeded} successful, {result.failed} failed"
        )
        return result

    def _push_with_retry(self, image: str, config: RunConfig) -> bool:
        max_attempts = config.retry.max_attempts

        for attempt in range(1, max_attempts + 1):
            self.log.record(f"Attempt {attempt}: Pushing {image}...")
            if self.runtime.push(image):
                self.log.record(f"SUCCESS: Pushed {image}")
                return True

            if attempt == max_attempts:
                self.log.record(
                    f"ERROR: Failed to push {image} after {max_attempts} attempts",
                    logging.ERROR,
                )
                return False

            delay = config.retry.delay_for(attempt)
            self.log.record(
                f"WARNING: Push attempt {attempt} failed, retrying in {delay:g}s...",
                logging.WARNING,
            )
            self.sleep(delay)

        return False

    def cleanup_images(
        self,
        config: RunConfig,
        services: Sequence[str],
        cleanup_source: bool = True,
    ) -> CleanupResult:
        self.log.record("=== Cleaning Up Images ===")
        self.log.record(f"Cleanup source images: {'true' if cleanup_source else 'false'}")
        result = CleanupResult()

        for service in services:
            destination_image = config.destination_ref(service)
            if self.runtime.image_exists(destination_image):
                self.log.record(f"Removing destination image: {destination_image}...")
                self._remove(destination_image, result)

            if not cleanup_source:
                continue

            source_image = config.source_cleanup_ref(service)
            if self.runtime.image_exists(source_image):
                self.log.record(f"Removing source image: {source_image}...")
                self._remove(source_image, result, hint=" (might be base for other images)")

        self.log.record(
            f"Cleanup completed: {result.removed} images removed, {result.skipped} skipped"
        )
        return result

    def _remove(self, image: str, result: CleanupResult, hint: str = ""):
        if self.runtime.remove_image(image):
            self.log.record(f"SUCCESS: Removed {image}")
            result.removed += 1
        else:
            self.log.record(f"WARNING: Could not remove {image}{hint}", logging.WARNING)
            result.skipped += 1
