"""Actionable error catalog for retagpush."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "missing_registry_prefix": {
        "what": "REPOSITORY_PREFIX is not set",
        "next": "Export REPOSITORY_PREFIX=<host:port> or pass `--repository-prefix`.",
    },
    "invalid_version": {
        "what": "Invalid image tag '{version}'.",
        "next": "Use up to 128 letters, digits, `_`, `.` or `-`, not starting with `.` or `-`.",
    },
    "no_services": {
        "what": "No services configured.",
        "next": "Pass at least one `--service` or list them under `services` in the config file.",
    },
    "duplicate_services": {
        "what": "Duplicate service names: {names}",
        "next": "Each service may appear only once in the service list.",
    },
    "runtime_not_found": {
        "what": "{runtime} is not installed or not in PATH",
        "next": "Install {runtime} or point `--runtime` at an installed executable.",
    },
    "source_images_missing": {
        "what": "{count} source images missing. Please build the images first.",
        "next": "Build the images under {source_prefix} and retry.",
    },
    "retag_failed": {
        "what": "{count} images could not be retagged.",
        "next": "Inspect the log for the failing services or rerun without `--abort-on-retag-failure`.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
