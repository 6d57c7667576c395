import subprocess

import pytest

from retagpush.errors import TransferError
from retagpush.services.container_runtime import ContainerRuntimeService


class RecordingRunCmd:
    def __init__(self, returncode=0):
        self.returncode = returncode
        self.calls = []

    def __call__(self, cmd, check=True, capture_output=False):
        self.calls.append((cmd, check, capture_output))
        return subprocess.CompletedProcess(cmd, self.returncode, stdout="", stderr="")


def test_image_exists_uses_inspect_and_exit_status():
    run_cmd = RecordingRunCmd(returncode=0)
    service = ContainerRuntimeService(run_cmd=run_cmd)

    assert service.image_exists("localhost/springcommunity/api") is True
    assert run_cmd.calls == [
        (["podman", "image", "inspect", "localhost/springcommunity/api"], False, True)
    ]


def test_image_exists_is_false_on_non_zero_exit():
    service = ContainerRuntimeService(run_cmd=RecordingRunCmd(returncode=125))

    assert service.image_exists("missing") is False


def test_tag_and_remove_build_expected_commands():
    run_cmd = RecordingRunCmd()
    service = ContainerRuntimeService(run_cmd=run_cmd, runtime="/opt/bin/podman")

    assert service.tag("src/api", "registry:5000/api:1.0") is True
    assert service.remove_image("registry:5000/api:1.0") is True

    assert run_cmd.calls[0][0] == ["/opt/bin/podman", "tag", "src/api", "registry:5000/api:1.0"]
    assert run_cmd.calls[1] == (["/opt/bin/podman", "rmi", "registry:5000/api:1.0"], False, True)


@pytest.mark.parametrize(
    "tls_verify, flag",
    [(False, "--tls-verify=false"), (True, "--tls-verify=true")],
)
def test_push_passes_tls_flag(tls_verify, flag):
    run_cmd = RecordingRunCmd(returncode=1)
    service = ContainerRuntimeService(run_cmd=run_cmd, tls_verify=tls_verify)

    assert service.push("registry:5000/api:1.0") is False
    assert run_cmd.calls[0][0] == ["podman", "push", flag, "registry:5000/api:1.0"]


def test_ensure_available_returns_resolved_path():
    service = ContainerRuntimeService(run_cmd=RecordingRunCmd(), which=lambda name: f"/usr/bin/{name}")

    assert service.ensure_available() == "/usr/bin/podman"


def test_ensure_available_raises_when_runtime_missing():
    service = ContainerRuntimeService(run_cmd=RecordingRunCmd(), runtime="podman", which=lambda _name: None)

    with pytest.raises(TransferError, match="podman is not installed or not in PATH"):
        service.ensure_available()
