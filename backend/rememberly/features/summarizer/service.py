"""
Summarizer feature: AI summarization of captured content and URL fetching.

The LLM is an external capability; when it is not configured or fails,
the heuristic summarizer keeps note capture working.
"""

import logging
import re
from functools import lru_cache

import httpx
from bs4 import BeautifulSoup, Comment

from rememberly.config import get_settings
from rememberly.core.exceptions import UrlFetchError
from rememberly.features.summarizer.heuristic import summarize_heuristic
from rememberly.features.summarizer.schemas import SummaryResult

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = """\
You organise a personal note-taking app. Read the {note_type} content below and
return a short title (max 50 characters), a one or two sentence summary and up
to 5 lowercase single-word topic tags.

Content:
{content}
"""

NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]
_SPACES = re.compile(r"[ \t\r\f\v]+")


def html_to_text(markup: str) -> str:
    """Readable page text: one line per text node, scripts, styles and comments dropped."""
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    text = _SPACES.sub(" ", soup.get_text("\n"))
    lines = (line.strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)


class Summarizer:
    """Heuristic summarizer; base for AI-backed implementations."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self._transport = transport

    async def summarize(self, content: str, note_type: str = "text") -> SummaryResult:
        return summarize_heuristic(content)

    async def fetch_url_content(self, url: str) -> str:
        """Download a page and return its readable text.

        Raises:
            UrlFetchError: On transport errors or non-2xx responses.
        """
        settings = get_settings()
        try:
            async with httpx.AsyncClient(
                timeout=float(settings.URL_FETCH_TIMEOUT),
                follow_redirects=True,
                transport=self._transport,
                headers={"User-Agent": f"{settings.APP_NAME}/{settings.APP_VERSION}"},
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"❌ URL fetch failed for {url}: {e}")
            raise UrlFetchError(url, str(e)) from e

        if "html" in response.headers.get("content-type", "html"):
            body = html_to_text(response.text)
        else:
            body = response.text.strip()
        return f"Content from: {url}\n\n{body[:settings.URL_CONTENT_MAX_CHARS]}"


class LLMSummarizer(Summarizer):
    """Summaries from the configured chat model (structured output)."""

    def __init__(self, llm=None, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(transport)
        self._llm = llm

    def _structured_llm(self):
        if self._llm is None:
            from rememberly.core.llm_provider import create_llm
            self._llm = create_llm()
        return self._llm.with_structured_output(SummaryResult)

    async def summarize(self, content: str, note_type: str = "text") -> SummaryResult:
        try:
            result = await self._structured_llm().ainvoke(
                SUMMARY_PROMPT.format(note_type=note_type, content=content)
            )
            tags = [t.strip().lower() for t in result.tags if t.strip()][:5]
            return SummaryResult(title=result.title[:50], summary=result.summary, tags=tags)
        except Exception:
            logger.exception("AI summarization failed, falling back to heuristic summary")
            return summarize_heuristic(content)


@lru_cache
def get_summarizer() -> Summarizer:
    """LLM-backed summarizer when an API key is configured, else heuristic."""
    if get_settings().LLM_API_KEY:
        return LLMSummarizer()
    logger.info("LLM_API_KEY not set, using heuristic summarizer")
    return Summarizer()
