"""
LLM document analysis.

Sends extracted text to an OpenAI-compatible chat completions API
(OpenRouter by default) and parses the structured summary it returns.
"""

import json
import logging
import re

from pydantic import ValidationError

from ..config import get_settings
from ..models import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHARS = 4000

_FENCE_OPEN = re.compile(r"^```[^\n]*\n")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")


class AnalysisServiceError(Exception):
    """Raised when document analysis fails."""

    pass


# =============================================================================
# Prompt
# =============================================================================

ANALYSIS_PROMPT = """Analyze the following document and provide a structured response in JSON format only.

Document text:
{text}

Respond ONLY with a valid JSON object (no markdown, no code blocks) with the following structure:
{{
  "summary": "A concise 2-3 sentence summary of the document",
  "document_type": "The type of document (invoice, cv, resume, report, letter, contract, memo, email, etc.)",
  "metadata": {{
    "date": "Extracted date if found (format: YYYY-MM-DD) or null",
    "sender": "Sender name if found or null",
    "recipient": "Recipient name if found or null",
    "amount": "Total amount if invoice/financial document or null",
    "currency": "Currency code if amount found or null",
    "company": "Company name if found or null"
  }}
}}"""


def truncate_text(text: str, limit: int = DEFAULT_MAX_CHARS) -> str:
    """Keep the first `limit` characters, marking the cut with '...'."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def build_prompt(text: str, limit: int = DEFAULT_MAX_CHARS) -> str:
    return ANALYSIS_PROMPT.format(text=truncate_text(text, limit))


# =============================================================================
# Response Parsing
# =============================================================================


def strip_code_fence(content: str) -> str:
    """
    Remove a surrounding markdown code fence.

    Handles an optional language tag on the opening fence (```json).
    Content without a leading fence is returned unchanged.
    """
    stripped = content.strip()
    if not stripped.startswith("```"):
        return content

    body = _FENCE_OPEN.sub("", stripped, count=1)
    if body == stripped:
        # Opening fence with no newline, e.g. ```{...}```
        body = stripped[3:]
    return _FENCE_CLOSE.sub("", body).strip()


def parse_analysis(content: str) -> AnalysisResult:
    """
    Parse an LLM response into an AnalysisResult.

    Tries the raw content first, then the content with a code fence removed.

    Raises:
        AnalysisServiceError: If no valid JSON object can be parsed.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        unfenced = strip_code_fence(content)
        try:
            data = json.loads(unfenced)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse LLM response: %s", content[:500])
            raise AnalysisServiceError(
                f"Failed to parse LLM response as JSON: {e}"
            ) from e

    if not isinstance(data, dict):
        raise AnalysisServiceError("LLM response is not a JSON object")

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        logger.error("LLM response does not match analysis schema: %s", e)
        raise AnalysisServiceError(f"Invalid analysis response: {e}") from e


# =============================================================================
# AnalysisService
# =============================================================================


class AnalysisService:
    """
    Service for LLM-powered document analysis.

    Uses the OpenAI SDK against OpenRouter's OpenAI-compatible endpoint.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_chars: int | None = None,
        use_mock: bool = False,
    ):
        """
        Initialize the analysis service.

        Args:
            api_key: OpenRouter API key. If None, reads from settings.
            model: Model identifier, e.g. "openai/gpt-4o-mini".
            base_url: API base URL.
            timeout: Request timeout in seconds.
            max_chars: Number of text characters sent to the model.
            use_mock: If True, return a local summary instead of calling the API.
        """
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.openrouter_api_key
        self.model = model or settings.openrouter_model
        self.base_url = base_url or settings.openrouter_base_url
        self.timeout = timeout or settings.analysis_timeout_seconds
        self.max_chars = max_chars or settings.analysis_max_chars
        self.use_mock = use_mock or not self.api_key
        self._client = None

        if self.use_mock:
            logger.warning(
                "Analysis service running in MOCK MODE. Set OPENROUTER_API_KEY for real analysis."
            )

    @property
    def client(self):
        """Lazy-load the OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise AnalysisServiceError(
                    "OpenRouter API key not provided. Set OPENROUTER_API_KEY environment variable."
                )
            from openai import OpenAI

            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
            )
        return self._client

    async def analyze(self, text: str) -> AnalysisResult:
        """
        Produce a structured summary of document text.

        Args:
            text: Previously extracted document text.

        Returns:
            Parsed AnalysisResult.

        Raises:
            AnalysisServiceError: If the API call fails or the response is invalid.
        """
        if self.use_mock:
            logger.info("Analyzing document (MOCK MODE)")
            return self._get_mock_analysis(text)

        prompt = build_prompt(text, self.max_chars)
        logger.info(
            "Calling analysis model %s (%d chars of %d)",
            self.model,
            min(len(text), self.max_chars),
            len(text),
        )

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except AnalysisServiceError:
            raise
        except Exception as e:
            logger.exception("Analysis API call failed")
            raise AnalysisServiceError(f"Analysis API call failed: {e}") from e

        if not response.choices:
            raise AnalysisServiceError("No choices in analysis response")

        content = response.choices[0].message.content
        if not content:
            raise AnalysisServiceError("Empty response from analysis model")

        result = parse_analysis(content)
        logger.info(
            "Analysis completed: type=%s, summary_length=%d",
            result.document_type,
            len(result.summary),
        )
        return result

    def _get_mock_analysis(self, text: str) -> AnalysisResult:
        """Return a deterministic local analysis for development."""
        first_line = text.strip().split("\n", 1)[0]
        summary = truncate_text(first_line, 200) if first_line else "Empty document."
        return AnalysisResult(summary=summary, document_type="unknown")


# Singleton instance for convenience
_analysis_service: AnalysisService | None = None


def get_analysis_service() -> AnalysisService:
    """Get or create the analysis service singleton."""
    global _analysis_service
    if _analysis_service is None:
        _analysis_service = AnalysisService()
    return _analysis_service
