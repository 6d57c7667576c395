"""Container runtime CLI wrapper for retagpush."""

import shutil
from typing import Callable, Optional

from retagpush.errors import TransferError
from retagpush.errors_catalog import actionable_error


class ContainerRuntimeService:
    """Image store operations on top of a podman-compatible CLI."""

    def __init__(
        self,
        run_cmd: Callable,
        runtime: str = "podman",
        tls_verify: bool = False,
        which: Callable[[str], Optional[str]] = shutil.which,
    ):
        self.run_cmd = run_cmd
        self.runtime = runtime
        self.tls_verify = tls_verify
        self.which = which

    def ensure_available(self) -> str:
        path = self.which(self.runtime)
        if not path:
            raise TransferError(actionable_error("runtime_not_found", runtime=self.runtime))
        return path

    def image_exists(self, ref: str) -> bool:
        result = self.run_cmd(
            [self.runtime, "image", "inspect", ref],
            check=False,
            capture_output=True,
        )
        return result.returncode == 0

    def tag(self, source: str, destination: str) -> bool:
        result = self.run_cmd([self.runtime, "tag", source, destination], check=False)
        return result.returncode == 0

    def push(self, ref: str) -> bool:
        tls_flag = "--tls-verify=true" if self.tls_verify else "--tls-verify=false"
        result = self.run_cmd([self.runtime, "push", tls_flag, ref], check=False)
        return result.returncode == 0

    def remove_image(self, ref: str) -> bool:
        result = self.run_cmd([self.runtime, "rmi", ref], check=False, capture_output=True)
        return result.returncode == 0
