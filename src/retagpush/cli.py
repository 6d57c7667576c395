import os

import click

from .constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_REPOSITORY_PREFIX,
    DEFAULT_RUNTIME,
    DEFAULT_SERVICES,
    DEFAULT_VERSION,
    LOG_FILE,
    MAX_PUSH_ATTEMPTS,
    RETRY_DELAY_SECONDS,
    SOURCE_PREFIX,
)
from .core import ImageTransferOrchestrator
from .errors import TransferError
from .models import RetryPolicy, RunConfig
from .services.config_loader import ConfigLoader
from .services.transfer_log import build_transfer_log


def _resolve_option(cli_value, config, key, default=None, env_var=None):
    if cli_value is not None:
        return cli_value
    # An exported but empty variable still wins over config and defaults.
    if env_var and env_var in os.environ:
        return os.environ[env_var]
    if key in config:
        return config[key]
    return default


@click.command()
@click.option("--version", required=False, help=f"Tag for destination images [env: VERSION, default: {DEFAULT_VERSION}]")
@click.option(
    "--repository-prefix",
    required=False,
    help=f"Destination registry host:port [env: REPOSITORY_PREFIX, default: {DEFAULT_REPOSITORY_PREFIX}]",
)
@click.option("--source-prefix", required=False, help=f"Local namespace of source images (default: {SOURCE_PREFIX})")
@click.option(
    "--service",
    "services",
    multiple=True,
    help="Service to transfer. Repeat to build the list; defaults to the built-in service list.",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--runtime", required=False, help=f"Container runtime executable (default: {DEFAULT_RUNTIME})")
@click.option("--log-file", type=click.Path(), help=f"Append-only log file (default: {LOG_FILE})")
@click.option(
    "--max-attempts",
    required=False,
    type=int,
    default=None,
    help=f"Push attempts per image (default: {MAX_PUSH_ATTEMPTS}).",
)
@click.option(
    "--retry-delay",
    required=False,
    type=float,
    default=None,
    help=f"Seconds to wait between push attempts (default: {RETRY_DELAY_SECONDS:g}).",
)
@click.option(
    "--tls-verify/--no-tls-verify",
    default=None,
    help="Verify registry TLS certificates when pushing (default: off).",
)
@click.option(
    "--cleanup/--no-cleanup",
    default=None,
    help="Remove local image references after pushing (default: on).",
)
@click.option(
    "--cleanup-source/--keep-source",
    default=None,
    help="Also remove the source images during cleanup (default: on).",
)
@click.option(
    "--abort-on-retag-failure",
    is_flag=True,
    default=None,
    help="Stop before pushing when any image fails to retag.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="Validate settings and print the transfer plan without touching the runtime.",
)
@click.option("--report-file", type=click.Path(), help="Write a JSON run report to this path.")
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
def main(
    version,
    repository_prefix,
    source_prefix,
    services,
    config,
    runtime,
    log_file,
    max_attempts,
    retry_delay,
    tls_verify,
    cleanup,
    cleanup_source,
    abort_on_retag_failure,
    dry_run,
    report_file,
    verbose,
):
    """Retag locally built images and push them to a registry."""
    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except TransferError as exc:
        raise click.ClickException(str(exc)) from exc

    version = str(
        _resolve_option(version, config_values, "version", default=DEFAULT_VERSION, env_var="VERSION")
    )
    repository_prefix = str(
        _resolve_option(
            repository_prefix,
            config_values,
            "repository_prefix",
            default=DEFAULT_REPOSITORY_PREFIX,
            env_var="REPOSITORY_PREFIX",
        )
    )
    source_prefix = _resolve_option(source_prefix, config_values, "source_prefix", default=SOURCE_PREFIX)
    services = _resolve_option(services or None, config_values, "services", default=DEFAULT_SERVICES)
    runtime = _resolve_option(runtime, config_values, "runtime", default=DEFAULT_RUNTIME)
    log_file = _resolve_option(log_file, config_values, "log_file", default=LOG_FILE)
    max_attempts = int(
        _resolve_option(max_attempts, config_values, "max_attempts", default=MAX_PUSH_ATTEMPTS)
    )
    retry_delay = float(
        _resolve_option(
            retry_delay,
            config_values,
            "retry_delay_seconds",
            default=RETRY_DELAY_SECONDS,
        )
    )
    tls_verify = bool(_resolve_option(tls_verify, config_values, "tls_verify", default=False))
    cleanup = bool(_resolve_option(cleanup, config_values, "cleanup", default=True))
    cleanup_source = bool(
        _resolve_option(cleanup_source, config_values, "cleanup_source", default=True)
    )
    abort_on_retag_failure = bool(
        _resolve_option(
            abort_on_retag_failure,
            config_values,
            "abort_on_retag_failure",
            default=False,
        )
    )
    dry_run = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))
    report_file = _resolve_option(report_file, config_values, "report_file")
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))

    run_config = RunConfig(
        version=version,
        registry_prefix=repository_prefix,
        source_prefix=source_prefix,
        log_path=log_file,
        runtime=runtime,
        retry=RetryPolicy(max_attempts=max_attempts, delay_seconds=retry_delay),
        tls_verify=tls_verify,
        cleanup=cleanup,
        cleanup_source=cleanup_source,
        abort_on_retag_failure=abort_on_retag_failure,
        dry_run=dry_run,
        report_file=report_file,
    )

    try:
        log = build_transfer_log(log_file=log_file, verbose=verbose)
    except OSError as exc:
        raise click.ClickException(f"Could not open log file '{log_file}': {exc}") from exc

    orchestrator = ImageTransferOrchestrator(config=run_config, services=list(services), log=log)
    raise SystemExit(orchestrator.run())


if __name__ == "__main__":
    main()
