"""HTTP client for the Gemina document extraction API.

Wraps a synchronous ``httpx.Client`` and turns every response into an
``ApiResult`` so callers dispatch on the outcome instead of on exceptions.
Only failures below the HTTP layer are raised (as ``TransportError``).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
from loguru import logger

from gemina.core.config import Settings
from gemina.core.errors import PollingError, SubmissionError, TransportError
from gemina.models.schemas import ApiResult, PredictionStatus, SubmissionRequest, UploadStatus
from gemina.utils.file_handler import encode_bytes, encode_file

ACCEPTED_PREDICTION_CODES = {status.value for status in PredictionStatus}


class GeminaClient:
    """Upload documents and fetch their predictions. Use as a context manager."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_url = settings.api_url.rstrip("/")
        self._api_key = settings.api_key
        self._client_id = settings.client_id
        self._use_llm = settings.use_llm
        self._upload_path = settings.upload_path
        self._web_upload_path = settings.web_upload_path
        self._documents_path = settings.business_documents_path.rstrip("/")
        self._timeout = settings.request_timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> GeminaClient:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        """Create the underlying HTTP client."""
        self._client = httpx.Client(
            base_url=self._api_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={
                "Accept": "application/json",
                "Authorization": f"Basic {self._api_key}",
            },
        )
        logger.debug(f"Gemina client opened: base={self._api_url}")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    # ── Submission ─────────────────────────────────────────────
    def build_request(
        self,
        external_id: str,
        *,
        file: str | None = None,
        url: str | None = None,
    ) -> SubmissionRequest:
        return SubmissionRequest(
            external_id=external_id,
            client_id=self._client_id,
            use_llm=self._use_llm,
            file=file,
            url=url,
        )

    def upload_file(self, external_id: str, path: Path) -> ApiResult:
        """Upload a local file as base64."""
        return self.submit(self.build_request(external_id, file=encode_file(path)))

    def upload_bytes(self, external_id: str, data: bytes) -> ApiResult:
        """Upload raw document bytes as base64."""
        return self.submit(self.build_request(external_id, file=encode_bytes(data)))

    def upload_url(self, external_id: str, url: str) -> ApiResult:
        """Ask Gemina to fetch the document from a remote URL."""
        return self.submit(self.build_request(external_id, url=url))

    def submit(self, request: SubmissionRequest) -> ApiResult:
        """
        POST the request to the upload (or web upload) endpoint.

        Any 2xx answer is a success; anything else yields a SubmissionError result.
        """
        path = self._web_upload_path if request.is_web else self._upload_path
        response = self._request("POST", path, json=request.to_payload())
        payload = _parse_body(response)

        if not 200 <= response.status_code < 300:
            logger.error(f"Upload rejected: status={response.status_code}")
            return ApiResult(
                status_code=response.status_code,
                payload=payload,
                text=response.text,
                error=SubmissionError(response.status_code, response.text),
            )

        if response.status_code == UploadStatus.CREATED:
            logger.info(f"Uploaded successfully: {request.external_id}")
        elif response.status_code == UploadStatus.ALREADY_PROCESSING:
            logger.info(f"Document {request.external_id} is already being processed. No need to upload again.")
        logger.debug(f"Upload result:\n{_pretty(payload)}")
        return ApiResult(status_code=response.status_code, payload=payload, text=response.text)

    # ── Prediction ─────────────────────────────────────────────
    def get_prediction(self, external_id: str) -> ApiResult:
        """
        GET the business document for ``external_id``.

        200, 202 and 404 are expected answers; anything else yields a PollingError result.
        """
        response = self._request("GET", f"{self._documents_path}/{external_id}")
        payload = _parse_body(response)

        if response.status_code not in ACCEPTED_PREDICTION_CODES:
            logger.error(f"Prediction request failed: status={response.status_code}")
            return ApiResult(
                status_code=response.status_code,
                payload=payload,
                text=response.text,
                error=PollingError(response.status_code, response.text),
            )

        logger.debug(f"Prediction result ({response.status_code}):\n{_pretty(payload)}")
        return ApiResult(status_code=response.status_code, payload=payload, text=response.text)

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        if self._client is None:
            raise RuntimeError("Client is not started. Use 'with GeminaClient(settings)'.")
        logger.debug(f"{method} {self._api_url}{path}")
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            logger.error(f"Request Error: {exc}")
            raise TransportError(f"Request Error: {exc}") from exc


def _parse_body(response: httpx.Response) -> Any:
    """Decoded JSON body, or None when the body is empty or not JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _pretty(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)
