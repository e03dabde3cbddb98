import io
import signal
import threading

import pytest
from rich.console import Console

import cli.transcribe
from cli import create_parser, main
from cli.transcribe import EXIT_FAILURE, cancel_on_signals, print_summary
from pipeline.transcribe import RunSummary


class TestParser:

    def test_defaults(self):
        args = create_parser().parse_args([])

        assert args.input_dir == "."
        assert args.output == "output.txt"
        assert args.concurrency is None
        assert args.start_date == ""
        assert args.max_dimension is None
        assert args.func is cli.transcribe.cmd_transcribe

    def test_flags(self):
        args = create_parser().parse_args([
            "scans", "-o", "out.txt", "--concurrency", "3",
            "--start-date", "May 1, 1943", "--max-dimension", "2000",
            "--model", "gpt-4o-mini", "--verbose",
        ])

        assert args.input_dir == "scans"
        assert args.output == "out.txt"
        assert args.concurrency == 3
        assert args.start_date == "May 1, 1943"
        assert args.max_dimension == 2000
        assert args.model == "gpt-4o-mini"
        assert args.verbose


class TestCommand:

    def test_missing_api_key_exits_1(self, monkeypatch, image_dir):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(SystemExit) as exc_info:
            main([str(image_dir)])

        assert exc_info.value.code == EXIT_FAILURE

    def test_missing_directory_exits_1(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "missing")])

        assert exc_info.value.code == EXIT_FAILURE


class TestSignals:

    def test_handler_sets_event_and_is_restored(self):
        before = signal.getsignal(signal.SIGTERM)
        cancel = threading.Event()

        with cancel_on_signals(cancel):
            handler = signal.getsignal(signal.SIGTERM)
            handler(signal.SIGTERM, None)

        assert cancel.is_set()
        assert signal.getsignal(signal.SIGTERM) == before


def test_print_summary(monkeypatch):
    buffer = io.StringIO()
    monkeypatch.setattr(cli.transcribe, "console", Console(file=buffer, width=120))
    summary = RunSummary(
        images_processed=2,
        total_cost_usd=0.5,
        cost_per_image=0.25,
        total_attempts=3,
        attempts_per_image=1.5,
        total_time_seconds=10.0,
        time_per_image=5.0,
        failed_images=["page_002.jpg"],
        output_path="/tmp/output.txt",
    )

    print_summary(summary)

    output = buffer.getvalue()
    assert "$0.5000" in output
    assert "1.50" in output
    assert "page_002.jpg" in output
