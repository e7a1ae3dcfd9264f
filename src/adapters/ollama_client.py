"""Ollama completion adapter.

Implements the core CompletionPort over the streaming ``/api/generate``
endpoint. The response body is NDJSON: one JSON object per line, each
carrying a text fragment and a ``done`` flag.
"""

from __future__ import annotations

import http.client
import json
import logging
import time
import urllib.error
import urllib.request
from typing import Callable, Iterable

from core.config import CompletionConfig
from core.errors import DecodeError, EmptyResponseError, TransportError
from core.models import ClassificationRequest, StreamedChunk

LOGGER = logging.getLogger(__name__)


def decode_frame(line: bytes) -> StreamedChunk:
    """Decode one NDJSON frame into a StreamedChunk."""

    try:
        frame = json.loads(line)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"stream frame is not valid JSON: {exc}") from exc

    if not isinstance(frame, dict):
        raise DecodeError(f"stream frame is not an object: {frame!r}")
    if "error" in frame:
        raise TransportError(f"completion service error: {frame['error']}")

    response = frame.get("response", "")
    done = frame.get("done", False)
    if not isinstance(response, str):
        raise DecodeError(f"'response' must be a string, got {type(response).__name__}")
    if not isinstance(done, bool):
        raise DecodeError(f"'done' must be a boolean, got {type(done).__name__}")

    return StreamedChunk(
        response=response,
        done=done,
        model=frame.get("model"),
        created_at=frame.get("created_at"),
    )


def assemble_stream(lines: Iterable[bytes]) -> str:
    """Concatenate fragments in arrival order until ``done`` or stream end."""

    parts: list[str] = []
    for line in lines:
        if not line.strip():
            continue
        chunk = decode_frame(line)
        parts.append(chunk.response)
        if chunk.done:
            break

    text = "".join(parts)
    if not text.strip():
        raise EmptyResponseError("received an empty response from the model")
    return text


class OllamaCompletionClient:
    """Blocking streaming client with a bounded deadline and one retry."""

    def __init__(
        self,
        config: CompletionConfig,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._sleep = sleep
        self._clock = clock

    def _build_http_request(self, request: ClassificationRequest) -> urllib.request.Request:
        payload = {"model": request.model, "prompt": request.prompt}
        data = json.dumps(payload).encode("utf-8")
        http_request = urllib.request.Request(self._config.url, data=data, method="POST")
        http_request.add_header("Content-Type", "application/json")
        return http_request

    def _lines_until(self, response, deadline: float) -> Iterable[bytes]:
        for line in response:
            if self._clock() > deadline:
                raise TransportError(
                    f"completion stream exceeded {self._config.timeout:g}s deadline"
                )
            yield line

    def _attempt(self, request: ClassificationRequest) -> str:
        http_request = self._build_http_request(request)
        deadline = self._clock() + self._config.timeout
        try:
            with urllib.request.urlopen(http_request, timeout=self._config.timeout) as response:
                return assemble_stream(self._lines_until(response, deadline))
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise TransportError(f"Completion API error {e.code}: {body}") from e
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            raise TransportError(f"completion request failed: {e}") from e

    def complete(self, request: ClassificationRequest) -> str:
        """Return the assembled completion text for one request.

        Only TransportError is retried; decode and empty-response failures
        come from a stream that was delivered and would repeat.
        """

        attempts = max(1, self._config.max_attempts)
        for attempt in range(1, attempts + 1):
            try:
                return self._attempt(request)
            except TransportError as exc:
                if attempt >= attempts:
                    raise
                delay = self._config.retry_backoff * attempt
                LOGGER.warning(
                    "Completion attempt %s/%s failed (%s); retrying in %.1fs",
                    attempt,
                    attempts,
                    exc,
                    delay,
                )
                self._sleep(delay)
        raise TransportError("completion request was not attempted")
