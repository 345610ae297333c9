import asyncio

import pytest

from nissy_web.config import Settings
from nissy_web.errors import ProcessError, ProcessTimeoutError
from nissy_web.nissy import NissyRunner, ProcessResult, filter_warnings, parse_steps, resolve_output

WARNING = "--- Warning ---"
END = "---------------"


def test_text_without_warnings_is_only_trimmed():
    assert filter_warnings("\n  R U R'\nF2  \n\n") == "R U R'\nF2"


def test_warning_block_is_removed():
    assert filter_warnings(f"A\n{WARNING}\nW\n{END}\nB") == "A\nB"


def test_unterminated_warning_block_swallows_the_rest():
    assert filter_warnings(f"A\n{WARNING}\nW") == "A"


def test_multiple_warning_blocks_and_crlf():
    text = f"A\r\n{WARNING}\r\nW1\r\n{END}\r\nB\r\n{WARNING}\r\nW2\r\nW3\r\n{END}\r\nC"

    assert filter_warnings(text) == "A\nB\nC"


def test_markers_must_match_whole_lines():
    text = f"{WARNING} table missing\n{END}-\nB"

    assert filter_warnings(text) == text


def test_end_marker_outside_a_block_is_kept():
    assert filter_warnings(f"A\n{END}\nB") == f"A\n{END}\nB"


def test_stdout_wins_over_failing_exit_status():
    result = ProcessResult(stdout=f"{WARNING}\nno table\n{END}\nR U\n", returncode=1)

    assert resolve_output(result) == "R U"


def test_partial_stdout_wins_over_timeout():
    assert resolve_output(ProcessResult(stdout="R U", returncode=-9, timed_out=True)) == "R U"


def test_timeout_without_output():
    with pytest.raises(ProcessTimeoutError) as excinfo:
        resolve_output(ProcessResult(returncode=-9, timed_out=True))

    assert excinfo.value.message == "Process timed out"


def test_failure_reports_filtered_stderr():
    result = ProcessResult(stderr=f"{WARNING}\nW\n{END}\nunknown step\n", returncode=2)

    with pytest.raises(ProcessError) as excinfo:
        resolve_output(result)

    assert excinfo.value.message == "unknown step"


def test_failure_with_only_warnings_reports_no_solution():
    result = ProcessResult(stdout=f"{WARNING}\nW\n{END}", stderr=f"{WARNING}\nW", returncode=1)

    with pytest.raises(ProcessError) as excinfo:
        resolve_output(result)

    assert excinfo.value.message == "No solution found"


def test_silent_failure_reports_no_solution():
    with pytest.raises(ProcessError) as excinfo:
        resolve_output(ProcessResult(returncode=1))

    assert excinfo.value.message == "No solution found"


def test_launch_error_is_reported():
    with pytest.raises(ProcessError) as excinfo:
        resolve_output(ProcessResult(error="[Errno 2] No such file or directory: 'nissy'"))

    assert "No such file" in excinfo.value.message


def test_silent_success_is_empty():
    assert resolve_output(ProcessResult(returncode=0)) == ""


def test_parse_steps_skips_denied_ids_and_odd_lines():
    output = "optimal   Optimal solve\nlight Light solve\neo  Edge orientation  \ngarbage\n\ndr Domino reduction"

    steps = parse_steps(output, skip=("optimal", "light"))

    assert [(s.id, s.description) for s in steps] == [
        ("eo", "Edge orientation"),
        ("dr", "Domino reduction"),
    ]


def test_runner_passes_arguments_without_a_shell(make_nissy):
    runner = NissyRunner(make_nissy('printf "%s\\n" "$@"'), timeout=10)

    output = asyncio.run(runner.run(["solve", "eo", "R U $(id)"]))

    assert output == "solve\neo\nR U $(id)"


def test_runner_keeps_stdout_of_failing_process(make_nissy):
    runner = NissyRunner(make_nissy("echo 'R U'; echo 'missing table' >&2; exit 1"), timeout=10)

    result = asyncio.run(runner.execute(["solve", "eo", "R"]))

    assert result.returncode == 1
    assert result.stderr.strip() == "missing table"
    assert asyncio.run(runner.run(["solve", "eo", "R"])) == "R U"


def test_runner_reports_stderr_of_failing_process(make_nissy):
    runner = NissyRunner(make_nissy("echo 'bad scramble' >&2; exit 3"), timeout=10)

    with pytest.raises(ProcessError) as excinfo:
        asyncio.run(runner.run(["invert", "X"]))

    assert excinfo.value.message == "bad scramble"


def test_runner_silent_failure(make_nissy):
    runner = NissyRunner(make_nissy("exit 1"), timeout=10)

    with pytest.raises(ProcessError) as excinfo:
        asyncio.run(runner.run(["solve", "eo", "R"]))

    assert excinfo.value.message == "No solution found"


def test_runner_kills_process_on_timeout(make_nissy):
    runner = NissyRunner(make_nissy("sleep 30"), timeout=0.5)

    result = asyncio.run(runner.execute(["solve", "eo", "R"]))

    assert result.timed_out
    with pytest.raises(ProcessTimeoutError):
        resolve_output(result)


def test_runner_keeps_output_written_before_timeout(make_nissy):
    runner = NissyRunner(make_nissy("echo 'R U'; sleep 30"), timeout=0.5)

    assert asyncio.run(runner.run(["solve", "eo", "R"])) == "R U"


def test_default_executable_is_found_in_working_directory(monkeypatch, tmp_path):
    monkeypatch.delenv("NISSY_PATH", raising=False)
    monkeypatch.chdir(tmp_path)
    script = tmp_path / "nissy"
    script.write_text("#!/bin/sh\necho 'eo Edge orientation'\n")
    script.chmod(0o755)

    runner = NissyRunner(Settings().nissy_path, timeout=10)

    assert runner.executable == str(script.resolve())
    assert asyncio.run(runner.run(["steps"])) == "eo Edge orientation"


def test_runner_missing_executable(tmp_path):
    runner = NissyRunner(tmp_path / "does-not-exist", timeout=10)

    result = asyncio.run(runner.execute(["steps"]))

    assert result.error is not None
    assert result.failed
    with pytest.raises(ProcessError):
        resolve_output(result)
