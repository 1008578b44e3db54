"""Client for the external structural comparison service."""

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import BaseModel, ValidationError

from ..core.config import ExternalToolsConfig
from ..core.exceptions import ExternalComparisonError
from ..core.models import CounterpartSummary, ExternalSignals, ToolComparison, ToolMatch


logger = logging.getLogger(__name__)

DEFAULT_MAIN_ID = "current_check"


class CodeSample(BaseModel):
    """One student's code sent for comparison."""

    id: str
    code: str


def parse_external_result(raw: Dict[str, Any]) -> ExternalSignals:
    """
    Map a raw service response onto ExternalSignals.

    Raises:
        ExternalComparisonError: if the payload does not have the expected shape
    """
    if not isinstance(raw, dict):
        raise ExternalComparisonError(f"Expected a JSON object, got {type(raw).__name__}")

    try:
        summary = [
            CounterpartSummary(
                counterpart_id=item.get("other_student_id"),
                avg_similarity=item.get("avg_similarity"),
                tool_count=item.get("tool_count") or 0,
            )
            for item in raw.get("summary") or []
        ]

        comparisons = [
            ToolComparison(
                tool=comp["tool"],
                available=bool(comp.get("available")),
                results=[
                    ToolMatch(
                        counterpart_id=result.get("other_student_id"),
                        similarity=result.get("similarity"),
                        details=result,
                    )
                    for result in comp.get("results") or []
                ],
                error=comp.get("error"),
            )
            for comp in raw.get("comparisons") or []
        ]
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise ExternalComparisonError(f"Malformed comparison response: {e}", {"raw": raw})

    return ExternalSignals(
        available=True,
        main_student_id=raw.get("main_student_id"),
        summary=summary,
        comparisons=comparisons,
    )


def format_external_result(raw: Optional[Dict[str, Any]]) -> ExternalSignals:
    """Like parse_external_result, but any problem yields unavailable signals."""
    if raw is None:
        return ExternalSignals.unavailable()

    try:
        return parse_external_result(raw)
    except ExternalComparisonError as e:
        logger.error(f"Failed to format comparison result: {e}")
        return ExternalSignals.unavailable(error=str(e))


class ExternalComparisonClient:
    """Posts code samples to the comparison API and normalizes the reply."""

    def __init__(self,
                 config: Optional[ExternalToolsConfig] = None,
                 http_client: Optional[httpx.Client] = None):
        self.config = config or ExternalToolsConfig()
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(timeout=self.config.timeout_seconds)

    @property
    def is_enabled(self) -> bool:
        return self.config.enabled and bool(self.config.api_url)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "ExternalComparisonClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def build_payload(self,
                      main: CodeSample,
                      others: Sequence[CodeSample],
                      language: str,
                      tools: Optional[List[str]] = None) -> Dict[str, Any]:
        return {
            "main_student": {"id": main.id or DEFAULT_MAIN_ID, "code": main.code},
            "other_students": [{"id": other.id, "code": other.code} for other in others],
            "language": language,
            "tools": tools if tools is not None else self.config.tools_for(language),
        }

    def compare(self,
                main: CodeSample,
                others: Sequence[CodeSample],
                language: str = "python",
                tools: Optional[List[str]] = None) -> ExternalSignals:
        """
        Compare one sample against others with the configured tools.

        Never raises for service problems: transport errors, HTTP errors and
        malformed replies are logged and reported as unavailable signals.
        """
        if not self.is_enabled:
            logger.debug("External comparison disabled or not configured")
            return ExternalSignals.unavailable(error="disabled")

        if not others:
            return ExternalSignals.unavailable(error="no counterparts")

        payload = self.build_payload(main, others, language, tools)
        logger.info(
            f"Comparing against {len(others)} submissions "
            f"(language: {language}, tools: {', '.join(payload['tools'])})"
        )

        try:
            response = self._http.post(self.config.api_url, json=payload)
            response.raise_for_status()
            raw = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Comparison service returned HTTP {e.response.status_code}")
            return ExternalSignals.unavailable(error=f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"Comparison service request failed: {e}")
            return ExternalSignals.unavailable(error=str(e))
        except ValueError as e:
            logger.error(f"Comparison service returned invalid JSON: {e}")
            return ExternalSignals.unavailable(error="invalid JSON")

        signals = format_external_result(raw)
        logger.info(f"Comparison tools run: {len(signals.comparisons)}")
        return signals
