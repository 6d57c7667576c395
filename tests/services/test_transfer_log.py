import io
import logging

from rich.console import Console

from retagpush.services.transfer_log import build_transfer_log


def test_console_and_file_receive_identical_lines(tmp_path):
    log_file = tmp_path / "run.log"
    buffer = io.StringIO()
    console = Console(file=buffer)
    long_line = (
        "Retagging localhost/springcommunity/spring-petclinic-customers-service to "
        "localhost:5001/spring-petclinic-customers-service:3.2.7..."
    )

    log = build_transfer_log(log_file=str(log_file), console=console, name="retagpush.tests.log")
    log.record(long_line)
    log.record("WARNING: Push attempt 1 failed, retrying in 5s...", logging.WARNING)

    file_lines = log_file.read_text(encoding="utf-8").splitlines()
    console_lines = buffer.getvalue().splitlines()

    assert [line.split(" - ", 1)[1] for line in file_lines] == [
        long_line,
        "WARNING: Push attempt 1 failed, retrying in 5s...",
    ]
    assert console_lines == file_lines


def test_log_file_is_appended_across_runs(tmp_path):
    log_file = tmp_path / "run.log"

    build_transfer_log(log_file=str(log_file), to_console=False, name="retagpush.tests.append").record("first")
    build_transfer_log(log_file=str(log_file), to_console=False, name="retagpush.tests.append").record("second")

    messages = [line.split(" - ", 1)[1] for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert messages == ["first", "second"]


def test_debug_lines_only_in_verbose_mode(tmp_path):
    log_file = tmp_path / "run.log"

    quiet = build_transfer_log(log_file=str(log_file), to_console=False, name="retagpush.tests.debug")
    quiet.debug("Executing: %s", "podman tag a b")
    verbose = build_transfer_log(
        log_file=str(log_file), to_console=False, verbose=True, name="retagpush.tests.debug"
    )
    verbose.debug("Executing: %s", "podman push b")

    content = log_file.read_text(encoding="utf-8")
    assert "podman tag a b" not in content
    assert "podman push b" in content


def test_default_console_does_not_wrap_piped_output(capsys):
    log = build_transfer_log(name="retagpush.tests.stdout")
    log.record("x" * 120)

    lines = capsys.readouterr().out.splitlines()

    assert len(lines) == 1
    assert lines[0].endswith(" - " + "x" * 120)
