"""Document workflow: upload a document and poll until its prediction is ready.

Flow:  external_id → Upload (file or URL) → Poll business document → Result
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable

from loguru import logger

from gemina.core.config import Settings
from gemina.core.errors import PollingTimeoutError
from gemina.models.schemas import ApiResult, PollPolicy, PredictionStatus, WorkflowResult
from gemina.services.gemina_client import GeminaClient
from gemina.utils.file_handler import get_file_type, is_remote_source, validate_local_source
from gemina.utils.ids import generate_external_id


class DocumentWorkflow:
    """Runs one document through the Gemina API, one request at a time."""

    def __init__(
        self,
        client: GeminaClient,
        settings: Settings,
        policy: PollPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.policy = policy or settings.poll_policy
        self._max_file_size_mb = settings.max_file_size_mb
        self._sleep = sleep
        self._clock = clock

    def run(self, source: str | Path) -> WorkflowResult:
        """
        Upload ``source`` (a local path or an http(s) URL) and wait for its prediction.

        Raises the error carried by a rejected upload or poll, TransportError on
        network failure and PollingTimeoutError when a bounded policy runs out.
        """
        external_id = generate_external_id()
        logger.info(f"Starting document {external_id}")
        if self.policy.is_bounded:
            logger.info(
                f"Polling limited to max_attempts={self.policy.max_attempts}, timeout={self.policy.timeout}"
            )

        upload = self.submit(external_id, source)
        upload.unwrap()

        prediction, attempts = self.wait_for_prediction(external_id)
        return WorkflowResult(
            external_id=external_id,
            upload=upload,
            prediction=prediction,
            attempts=attempts,
        )

    def submit(self, external_id: str, source: str | Path) -> ApiResult:
        if isinstance(source, str) and is_remote_source(source):
            logger.info(f"Uploading from URL: {source}")
            return self.client.upload_url(external_id, source)

        path = validate_local_source(Path(source), self._max_file_size_mb)
        logger.info(f"Uploading {get_file_type(path)}: {path.name}")
        return self.client.upload_file(external_id, path)

    def wait_for_prediction(self, external_id: str) -> tuple[ApiResult, int]:
        """
        Poll the business document until it is ready.

        202 (processing) and 404 (not visible yet) wait ``policy.interval`` and
        retry; 200 ends the loop. Returns the final result and the number of
        requests made.
        """
        started = self._clock()
        attempts = 0

        while True:
            result = self.client.get_prediction(external_id)
            attempts += 1
            result.unwrap()

            status = PredictionStatus(result.status_code)
            if status.is_terminal:
                logger.info(f"Prediction for {external_id} retrieved after {attempts} attempt(s)")
                return result, attempts

            self._check_budget(external_id, attempts, started)
            if status is PredictionStatus.PROCESSING:
                logger.info(
                    f"Document is still being processed. "
                    f"Sleeping {self.policy.interval:g}s before the next attempt..."
                )
            else:
                logger.info(
                    f"Can't find document yet. "
                    f"Waiting {self.policy.interval:g}s before trying again..."
                )
            self._sleep(self.policy.interval)

    def _check_budget(self, external_id: str, attempts: int, started: float) -> None:
        if not self.policy.is_bounded:
            return
        elapsed = self._clock() - started
        out_of_attempts = (
            self.policy.max_attempts is not None and attempts >= self.policy.max_attempts
        )
        out_of_time = self.policy.timeout is not None and elapsed >= self.policy.timeout
        if out_of_attempts or out_of_time:
            logger.error(f"Giving up on {external_id} after {attempts} attempts")
            raise PollingTimeoutError(external_id, attempts, elapsed)
