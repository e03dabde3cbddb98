#!/usr/bin/env python3
"""
Transcription pipeline: load -> resize -> recognize -> format.

One run:
1. Validate the recognition credential (run-level failure, no output)
2. List images (empty listing -> NoImagesFound)
3. Process every image on a thread pool bounded by RunConfig.concurrency
4. Format results in ordinal order and save the transcript
5. Summarize

Per-image failures are captured into that image's PageResult and show up
inline in the transcript. Cancellation stops new work, lets in-flight
workers finish their current step, joins the pool and raises Cancelled
without writing a transcript.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional

from infra.errors import (
    Cancelled,
    NoImagesFound,
    PageScribeError,
    ProcessingFailed,
    SaveFailed,
)
from infra.images import Resizer
from infra.llm import RecognitionClient
from infra.logger import PipelineLogger, create_logger
from infra.storage import ImageRepository

from .dates import extract_date
from .formatter import format_transcript
from .schemas import ImageTask, PageResult, RunConfig, RunSummary

ProgressCallback = Callable[[int, int], None]


class TranscriptionPipeline:
    def __init__(
        self,
        client: RecognitionClient,
        repository: ImageRepository,
        resizer: Optional[Resizer] = None,
        config: Optional[RunConfig] = None,
        logger: Optional[PipelineLogger] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.client = client
        self.repository = repository
        self.config = config or RunConfig()
        self.resizer = resizer or Resizer(self.config.max_dimension)
        self.logger = logger or create_logger("pagescribe", "transcribe")
        self.progress_callback = progress_callback

    def run_once(self, cancel_event: Optional[threading.Event] = None) -> RunSummary:
        """
        Transcribe every image in the repository into one output file.

        Raises:
            InvalidCredential / RemoteAPIError: Credential validation failed
            NoImagesFound: Listing failed or found nothing
            ProcessingFailed: Transcript could not be saved
            Cancelled: cancel_event was set during the run
        """
        cancel_event = cancel_event or threading.Event()
        start_time = time.time()

        if cancel_event.is_set():
            raise Cancelled()

        self.client.validate_credential()

        tasks = self._build_tasks()
        self.logger.info(
            f"Transcribing {len(tasks)} images with {self.config.concurrency} workers"
        )

        results = self._dispatch(tasks, cancel_event)

        if cancel_event.is_set():
            finished = sum(1 for r in results if not isinstance(r.error, Cancelled))
            self.logger.warning(
                f"Run cancelled after {finished}/{len(tasks)} images",
                cost_usd=sum(r.cost_usd for r in results)
            )
            raise Cancelled()

        text = format_transcript(results, self.config.start_date)

        try:
            output_path = self.repository.save_output(text)
        except SaveFailed as e:
            self.logger.error("Failed to save transcript", error=str(e))
            raise ProcessingFailed(f"processing failed: {e}") from e

        summary = RunSummary.from_results(
            results,
            total_time_seconds=time.time() - start_time,
            output_path=str(output_path),
        )

        self.logger.info(
            f"Transcription complete: {summary.images_processed} images, "
            f"{len(summary.failed_images)} failed, cost: ${summary.total_cost_usd:.4f}",
            cost_usd=summary.total_cost_usd,
            attempts=summary.total_attempts,
            duration_seconds=summary.total_time_seconds
        )

        return summary

    def _build_tasks(self) -> List[ImageTask]:
        try:
            names = self.repository.list_images()
        except PageScribeError as e:
            raise NoImagesFound(f"no images found in directory: {e}") from e

        if not names:
            raise NoImagesFound()

        return [ImageTask(name=name, ordinal=i) for i, name in enumerate(names)]

    def _dispatch(self, tasks: List[ImageTask], cancel_event: threading.Event) -> List[PageResult]:
        total = len(tasks)
        results: List[Optional[PageResult]] = [None] * total
        completed = 0

        with ThreadPoolExecutor(max_workers=self.config.concurrency) as executor:
            futures = {
                executor.submit(self.process_task, task, cancel_event): task
                for task in tasks
            }

            for future in as_completed(futures):
                task = futures[future]
                try:
                    result = future.result()
                except Exception as e:
                    self.logger.error(
                        "Unexpected worker failure",
                        image=task.name,
                        error=str(e)
                    )
                    result = self._failure(task, e, "Error processing image", time.time())

                results[task.ordinal] = result
                completed += 1

                if self.progress_callback:
                    self.progress_callback(completed, total)

        return results

    def process_task(self, task: ImageTask, cancel_event: threading.Event) -> PageResult:
        """Load, resize and recognize one image. Never raises for per-image failures."""
        start_time = time.time()

        if cancel_event.is_set():
            return self._failure(task, Cancelled(), "Error processing image", start_time)

        try:
            image_bytes = self.repository.load_image(task.name)
        except PageScribeError as e:
            self.logger.error("Failed to load image", image=task.name, error=str(e))
            return self._failure(task, e, "Error loading image", start_time)

        try:
            image_bytes = self.resizer.resize(image_bytes, self.config.max_dimension)
        except PageScribeError as e:
            self.logger.error("Failed to resize image", image=task.name, error=str(e))
            return self._failure(task, e, "Error resizing image", start_time)

        recognition = self.client.recognize(image_bytes, cancel_event=cancel_event)
        duration = time.time() - start_time

        if not recognition.success:
            if not isinstance(recognition.error, Cancelled):
                self.logger.error(
                    "Failed to transcribe image",
                    image=task.name,
                    attempts=recognition.attempts,
                    cost_usd=recognition.cost_usd,
                    error=str(recognition.error)
                )
            return PageResult(
                name=task.name,
                ordinal=task.ordinal,
                cost_usd=recognition.cost_usd,
                attempts=recognition.attempts,
                duration_seconds=duration,
                error=recognition.error,
                error_message=f"Error processing image: {recognition.error}",
            )

        self.logger.debug(
            "Transcribed image",
            image=task.name,
            attempts=recognition.attempts,
            cost_usd=recognition.cost_usd,
            duration_seconds=duration
        )

        return PageResult(
            name=task.name,
            ordinal=task.ordinal,
            date=extract_date(recognition.text),
            text=recognition.text,
            cost_usd=recognition.cost_usd,
            attempts=recognition.attempts,
            duration_seconds=duration,
        )

    @staticmethod
    def _failure(task: ImageTask, error: BaseException, prefix: str, start_time: float) -> PageResult:
        return PageResult(
            name=task.name,
            ordinal=task.ordinal,
            duration_seconds=time.time() - start_time,
            error=error,
            error_message=f"{prefix}: {error}",
        )
