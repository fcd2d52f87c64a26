"""HTTP client for the scores gateway."""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Tuple

import requests

from .config import Config
from .errors import ApiError, ConfigurationError, DataValidationError
from .models import Agent, AggregatedReport, Category, ReportKind
from .wire import decode_report


class ScoresApiClient:
    """Small, typed client for the scores gateway REST endpoints."""

    _MAX_RETRIES = 5
    _MAX_BACKOFF_SECONDS = 30

    def __init__(self, config: Config) -> None:
        """Initialize a client for the gateway at ``config.api_url``.

        Raises:
            ConfigurationError: If no gateway URL is configured.
        """
        if not config.api_url:
            raise ConfigurationError("A scores API URL is required to use the gateway client.")

        self._base_url = config.api_url.rstrip("/")
        self._timeout_seconds = config.timeout_seconds

        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    def _build_url(self, path: str) -> str:
        """Build a fully qualified URL from a path below ``/api``."""
        return f"{self._base_url}/api/{path.lstrip('/')}"

    def _extract_backoff_seconds(self, response: requests.Response, attempt: int) -> int:
        """Compute exponential backoff seconds, honoring Retry-After when available."""
        retry_after_header = response.headers.get("Retry-After")
        if retry_after_header:
            try:
                retry_after_seconds = int(retry_after_header)
                return min(self._MAX_BACKOFF_SECONDS, max(1, retry_after_seconds))
            except ValueError:
                pass

        return min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1))

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Execute a GET request with retry logic for 429/5xx responses.

        Raises:
            ApiError: If the request repeatedly fails, returns HTTP >= 400,
                or does not return valid JSON.
        """
        url = self._build_url(path)
        last_error: Optional[Exception] = None

        for attempt in range(1, self._MAX_RETRIES + 1):
            try:
                response = self._session.get(url, params=params, timeout=self._timeout_seconds)
            except requests.RequestException as exc:
                last_error = exc
                if attempt == self._MAX_RETRIES:
                    raise ApiError(f"Scores gateway request failed after retries: GET {url}") from exc
                time.sleep(min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1)))
                continue

            status_code = response.status_code
            is_retryable = status_code == 429 or 500 <= status_code <= 599

            if is_retryable and attempt < self._MAX_RETRIES:
                time.sleep(self._extract_backoff_seconds(response, attempt))
                continue

            if status_code >= 400:
                raise ApiError(
                    "Scores gateway request failed: "
                    f"GET {url} returned {status_code} - {response.text}"
                )

            try:
                return response.json()
            except ValueError as exc:
                raise ApiError(f"Scores gateway returned invalid JSON: GET {url}") from exc

        raise ApiError(f"Scores gateway request failed after retries: GET {url}") from last_error

    def _get_report(self, path: str, params: Dict[str, Any], expected: ReportKind) -> AggregatedReport:
        payload = self._get_json(path, params=params)
        try:
            report = decode_report(payload)
        except DataValidationError as exc:
            raise ApiError(f"Scores gateway returned an unexpected report shape: GET {path}") from exc

        if report.kind is not expected:
            raise ApiError(
                f"Scores gateway returned a {report.kind.value} report where a "
                f"{expected.value} report was expected: GET {path}"
            )
        return report

    def get_scores(self, start_date: str, end_date: str) -> Tuple[AggregatedReport, int]:
        """Fetch the category report and overall score for a date range."""
        params = {"start_date": start_date, "end_date": end_date}
        payload = self._get_json("scores", params=params)
        if not isinstance(payload, dict) or "overall_score" not in payload:
            raise ApiError("Scores gateway response is missing 'overall_score': GET scores")

        try:
            report = decode_report(payload)
            overall_score = int(payload["overall_score"])
        except (DataValidationError, TypeError, ValueError) as exc:
            raise ApiError("Scores gateway returned an unexpected report shape: GET scores") from exc

        return report, overall_score

    def get_agent_scores(self, start_date: str, end_date: str, agent_id: int) -> AggregatedReport:
        """Fetch the per-category report for one agent."""
        return self._get_report(
            "scores/agent",
            {"start_date": start_date, "end_date": end_date, "agent_id": agent_id},
            ReportKind.BY_CATEGORY,
        )

    def get_category_scores(self, start_date: str, end_date: str, category_id: int) -> AggregatedReport:
        """Fetch the per-agent report for one category."""
        return self._get_report(
            "scores/category",
            {"start_date": start_date, "end_date": end_date, "category_id": category_id},
            ReportKind.BY_AGENT,
        )

    def list_agents(self) -> List[Agent]:
        """List agents known to the gateway."""
        return [Agent(id=int(item["id"]), name=str(item["name"])) for item in self._get_list("agents")]

    def list_categories(self) -> List[Category]:
        """List rating categories known to the gateway."""
        return [
            Category(id=int(item["id"]), name=str(item["name"])) for item in self._get_list("categories")
        ]

    def _get_list(self, path: str) -> List[Dict[str, Any]]:
        payload = self._get_json(path)
        if not isinstance(payload, list):
            raise ApiError(f"Scores gateway returned unexpected payload shape: GET {path}")
        return [item for item in payload if isinstance(item, dict) and "id" in item and "name" in item]
