import signal
import sys
import threading
from contextlib import contextmanager
from datetime import datetime

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from infra.config import load_config
from infra.errors import Cancelled, PageScribeError
from infra.images import Resizer
from infra.llm import RecognitionClient
from infra.logger import create_logger
from infra.progress import RichProgressSink, format_seconds
from infra.storage import ImageRepository
from pipeline.transcribe import RunConfig, RunSummary, TranscriptionPipeline

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130

console = Console()


@contextmanager
def cancel_on_signals(cancel_event: threading.Event):
    """Set cancel_event on SIGINT/SIGTERM for the duration of the block."""
    def handler(signum, frame):
        console.print(f"\n⚠️  [yellow]Interrupted ({signal.Signals(signum).name}), stopping...[/yellow]")
        cancel_event.set()

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, handler)
    try:
        yield cancel_event
    finally:
        for sig, old_handler in previous.items():
            signal.signal(sig, old_handler)


def print_summary(summary: RunSummary):
    table = Table(title="Transcription summary", show_header=False)
    table.add_column("metric", style="cyan")
    table.add_column("value")

    table.add_row("Images processed", str(summary.images_processed))
    table.add_row("Total cost", f"${summary.total_cost_usd:.4f}")
    table.add_row("Cost per image", f"${summary.cost_per_image:.4f}")
    table.add_row("Attempts per image", f"{summary.attempts_per_image:.2f}")
    table.add_row("Total time", format_seconds(summary.total_time_seconds))
    table.add_row("Time per image", f"{summary.time_per_image:.2f}s")
    table.add_row("Output file", summary.output_path or "-")

    console.print(table)

    if summary.failed_images:
        console.print(f"⚠️  [yellow]{len(summary.failed_images)} image(s) failed:[/yellow]")
        for name in summary.failed_images:
            console.print(f"   [dim]{name}[/dim]")


def cmd_transcribe(args) -> int:
    try:
        config = load_config(
            vision_model=args.model,
            max_dimension=args.max_dimension,
            concurrency=args.concurrency,
            log_dir=args.log_dir,
        )
    except ValidationError as e:
        console.print(f"❌ [red]Invalid configuration:[/red] {e}")
        return EXIT_FAILURE

    run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    logger = create_logger(
        run_id,
        "transcribe",
        log_dir=config.log_dir,
        console_output=args.verbose,
        level="DEBUG" if args.verbose else "INFO",
    )

    try:
        repository = ImageRepository(args.input_dir, output_path=args.output)
        client = RecognitionClient.from_config(config, logger=logger.child("recognize"))
        run_config = RunConfig(
            concurrency=config.concurrency,
            start_date=args.start_date,
            max_dimension=config.max_dimension,
        )

        with RichProgressSink(console=console) as progress:
            pipeline = TranscriptionPipeline(
                client=client,
                repository=repository,
                resizer=Resizer(config.max_dimension),
                config=run_config,
                logger=logger,
                progress_callback=progress.update,
            )

            with cancel_on_signals(threading.Event()) as cancel_event:
                summary = pipeline.run_once(cancel_event=cancel_event)

    except Cancelled:
        console.print("⚠️  [yellow]Cancelled, no transcript written[/yellow]")
        return EXIT_CANCELLED
    except PageScribeError as e:
        logger.error("Run failed", error=str(e))
        console.print(f"❌ [red]Error:[/red] {e}")
        return EXIT_FAILURE
    finally:
        logger.close()

    print_summary(summary)
    return EXIT_OK


def setup_parser(parser):
    parser.add_argument('input_dir', nargs='?', default='.', help='Directory of page images (default: current directory)')
    parser.add_argument('-o', '--output', default='output.txt', help='Transcript path, relative to the input directory unless absolute')
    parser.add_argument('--concurrency', type=int, default=None, help='Images processed at once (default: 10)')
    parser.add_argument('--start-date', default='', help='Date used for pages before the first dated page')
    parser.add_argument('--max-dimension', type=int, default=None, help='Longest image side sent to the model (default: 1500)')
    parser.add_argument('--model', default=None, help='Vision model (default: gpt-4o)')
    parser.add_argument('--log-dir', default=None, help='Write JSONL run logs to this directory')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log to the console')
    parser.set_defaults(func=cmd_transcribe)
