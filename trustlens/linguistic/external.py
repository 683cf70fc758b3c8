"""Client for a hosted text-classification service.

Calls sentiment, toxicity and synthetic-text detector models on a
HuggingFace-style inference endpoint (``POST {base_url}/{model}`` with
``{"inputs": text}``). Every call is bounded by ``asyncio.wait_for`` and
routed through a circuit breaker.

``classify`` never raises for service problems: it returns a
``ClassificationResult`` carrying either the parsed outcome or a
``ServiceError``. Cancellation of the awaiting task still propagates.
"""

import asyncio
import logging
from typing import Any

import httpx

from trustlens.errors import ExternalServiceUnavailable
from trustlens.linguistic.circuit_breaker import CircuitBreaker, CircuitOpenError
from trustlens.linguistic.config import TextClassifierConfig
from trustlens.linguistic.schemas import (
    ClassificationOutcome,
    ClassificationResult,
    ServiceError,
)
from trustlens.observability.metrics import get_metrics

logger = logging.getLogger(__name__)


def _flatten_labels(payload: Any) -> list[dict[str, Any]]:
    """Normalize ``[[{label, score}...]]`` and ``[{label, score}...]`` payloads."""
    if isinstance(payload, list) and payload and isinstance(payload[0], list):
        payload = payload[0]
    if not isinstance(payload, list) or not payload:
        raise ExternalServiceUnavailable(
            f"Unexpected classifier payload: {payload!r}", reason="invalid_response"
        )
    labels = []
    for item in payload:
        if not isinstance(item, dict) or "label" not in item or "score" not in item:
            raise ExternalServiceUnavailable(
                f"Malformed label entry: {item!r}", reason="invalid_response"
            )
        try:
            score = float(item["score"])
        except (TypeError, ValueError) as e:
            raise ExternalServiceUnavailable(
                f"Non-numeric score in label entry: {item!r}", reason="invalid_response"
            ) from e
        if not 0.0 <= score <= 1.0:
            raise ExternalServiceUnavailable(
                f"Score outside [0, 1] in label entry: {item!r}", reason="invalid_response"
            )
        labels.append({"label": str(item["label"]), "score": score})
    return labels


def _score_for(labels: list[dict[str, Any]], label: str) -> float:
    wanted = label.lower()
    for item in labels:
        if item["label"].lower() == wanted:
            return item["score"]
    return 0.0


class TextClassificationClient:
    """Best-effort hosted classifier.

    Usage:
        async with TextClassificationClient(TextClassifierConfig()) as client:
            result = await client.classify(text)
            if result.ok:
                ...
    """

    def __init__(
        self,
        config: TextClassifierConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self._config = config or TextClassifierConfig()
        self._client = http_client
        self._owns_client = http_client is None
        self._breaker = breaker or CircuitBreaker(
            failure_threshold=self._config.circuit_failure_threshold,
            recovery_timeout=self._config.circuit_recovery_timeout,
            name="text_classifier",
        )

    @property
    def breaker(self) -> CircuitBreaker:
        return self._breaker

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {}
            if self._config.api_key is not None:
                headers["Authorization"] = f"Bearer {self._config.api_key.get_secret_value()}"
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                headers=headers,
                timeout=self._config.timeout,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "TextClassificationClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def classify(self, text: str) -> ClassificationResult:
        """Classify ``text``; failures come back as ``ServiceError``."""
        if not self._config.enabled:
            return ClassificationResult(error=ServiceError(reason="disabled"))

        try:
            outcome = await self._breaker.call(self._bounded_request, text)
        except CircuitOpenError as e:
            return self._failure("circuit_open", str(e))
        except asyncio.TimeoutError:
            return self._failure(
                "timeout", f"No response within {self._config.timeout:.1f}s"
            )
        except httpx.HTTPError as e:
            return self._failure("http_error", str(e) or type(e).__name__)
        except ExternalServiceUnavailable as e:
            return self._failure(e.reason, str(e))
        return ClassificationResult(outcome=outcome)

    def _failure(self, reason: str, message: str) -> ClassificationResult:
        logger.warning("Text classifier unavailable (%s): %s", reason, message)
        get_metrics().record_external_failure(reason)
        return ClassificationResult(error=ServiceError(reason=reason, message=message))

    async def _bounded_request(self, text: str) -> ClassificationOutcome:
        return await asyncio.wait_for(self._request_all(text), timeout=self._config.timeout)

    async def _request_all(self, text: str) -> ClassificationOutcome:
        cfg = self._config
        calls = [self._post(cfg.sentiment_model, text), self._post(cfg.toxicity_model, text)]
        if cfg.detector_model:
            calls.append(self._post(cfg.detector_model, text))
        responses = await asyncio.gather(*calls)

        sentiment = max(responses[0], key=lambda item: item["score"])
        detector_score = None
        if cfg.detector_model:
            detector_score = _score_for(responses[2], cfg.detector_positive_label)

        return ClassificationOutcome(
            detector_score=detector_score,
            sentiment_label=sentiment["label"],
            sentiment_confidence=sentiment["score"],
            toxicity_score=_score_for(responses[1], cfg.toxicity_label),
        )

    async def _post(self, model: str, text: str) -> list[dict[str, Any]]:
        response = await self._get_client().post(f"/{model}", json={"inputs": text})
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as e:
            raise ExternalServiceUnavailable(
                f"Invalid JSON from {model}", reason="invalid_response"
            ) from e
        return _flatten_labels(payload)
