import logging
import shutil
import time
import uuid
from typing import Optional, Sequence

from .constants import DEFAULT_SERVICES
from .errors import TransferError
from .errors_catalog import actionable_error
from .models import PhaseResult, RunConfig
from .services.command_runner import CommandRunner
from .services.container_runtime import ContainerRuntimeService
from .services.image_transfer import ImageTransferService
from .services.report import ReportService
from .services.transfer_log import TransferLog, build_transfer_log
from .services.validation import ValidationService


class ImageTransferOrchestrator:
    """Retags local images under the destination registry and pushes them."""

    def __init__(
        self,
        config: RunConfig,
        services: Sequence[str] = DEFAULT_SERVICES,
        log: Optional[TransferLog] = None,
        runtime=None,
        sleep=time.sleep,
        which=shutil.which,
    ):
        self.config = config
        self.services = list(services)
        self.log = log or build_transfer_log(log_file=config.log_path)
        self.run_id = uuid.uuid4().hex[:10]
        self.current_phase_name: Optional[str] = None

        self.command_runner = CommandRunner(logger=self.log.logger)
        self.runtime = runtime or ContainerRuntimeService(
            run_cmd=self.command_runner.run,
            runtime=config.runtime,
            tls_verify=config.tls_verify,
            which=which,
        )
        self.validation_service = ValidationService()
        self.transfer_service = ImageTransferService(runtime=self.runtime, log=self.log, sleep=sleep)
        self.report_service = ReportService(report_file=config.report_file, logger=self.log.logger)

    def _run_phase(self, name: str, callback, *args, **kwargs):
        record = self.report_service.open_phase(name)
        self.current_phase_name = name

        try:
            result = callback(*args, **kwargs)
        except KeyboardInterrupt:
            self.report_service.close_phase(record, status="aborted")
            raise
        except Exception as exc:
            self.report_service.close_phase(record, status="failed", error=str(exc))
            raise

        self.report_service.close_phase(record, result)
        self.current_phase_name = None
        return result

    def validate_environment(self):
        self.validation_service.validate_environment(self.config, self.services)

    def check_runtime(self):
        path = self.runtime.ensure_available()
        self.log.debug("Using container runtime at %s", path)

    def check_source_images(self) -> PhaseResult:
        return self.transfer_service.check_source_images(self.config, self.services)

    def retag_images(self) -> PhaseResult:
        return self.transfer_service.retag_images(self.config, self.services)

    def push_images(self) -> PhaseResult:
        return self.transfer_service.push_images(self.config, self.services)

    def cleanup_images(self):
        return self.transfer_service.cleanup_images(
            self.config,
            self.services,
            cleanup_source=self.config.cleanup_source,
        )

    def log_plan(self):
        for service in self.services:
            self.log.record(
                f"PLAN: {self.config.source_ref(service)} -> {self.config.destination_ref(service)}"
            )
        self.log.record(f"Dry run: {len(self.services)} images would be retagged and pushed.")

    def run(self) -> int:
        exit_code = 1
        report_status = "failed"
        report_error: Optional[str] = None

        try:
            self.log.debug("Starting image transfer run %s", self.run_id)
            self.report_service.begin(self.run_id, self.config, self.services)

            self._run_phase("validate_environment", self.validate_environment)

            if self.config.dry_run:
                self._run_phase("plan", self.log_plan)
                report_status = "success"
                exit_code = 0
                return exit_code

            self._run_phase("check_runtime", self.check_runtime)
            self._run_phase("check_source_images", self.check_source_images)

            retag_result = self._run_phase("retag_images", self.retag_images)
            if not retag_result.ok and self.config.abort_on_retag_failure:
                raise TransferError(actionable_error("retag_failed", count=str(retag_result.failed)))

            push_result = self._run_phase("push_images", self.push_images)

            if self.config.cleanup:
                self._run_phase("cleanup_images", self.cleanup_images)

            if push_result.ok:
                report_status = "success"
                exit_code = 0
            else:
                report_error = f"{push_result.failed} images failed to push."
                exit_code = 1
            return exit_code

        except KeyboardInterrupt:
            self.log.record("ERROR: Operation cancelled by user.", logging.ERROR)
            report_status = "aborted"
            report_error = "Operation cancelled by user."
            exit_code = 1
            return exit_code
        except TransferError as exc:
            self.log.record(f"ERROR: {exc}", logging.ERROR)
            report_status = "failed"
            report_error = str(exc)
            exit_code = 1
            return exit_code
        except Exception as exc:
            self.log.exception(f"ERROR: Unexpected error in {self.current_phase_name or 'run'}: {exc}")
            report_status = "failed"
            report_error = str(exc)
            exit_code = 1
            return exit_code
        finally:
            self.report_service.finish(report_status, error=report_error)


def run(config: RunConfig, services: Sequence[str] = DEFAULT_SERVICES, **kwargs) -> int:
    """Run the full retag/push/cleanup workflow and return the process exit code."""
    return ImageTransferOrchestrator(config, services, **kwargs).run()
