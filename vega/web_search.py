"""Web search tool backed by the DuckDuckGo instant answer API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import requests

from vega.base import InvalidInputError, ToolDefinition, ToolHTTPError

DEFAULT_MAX_RESULTS = 5
API_URL = "https://api.duckduckgo.com/"
USER_AGENT = "vega-agent/0.1.0"


@dataclass
class WebSearchArgs:
    """Arguments for a web search."""

    query: str
    max_results: int = DEFAULT_MAX_RESULTS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WebSearchArgs:
        """Build arguments from a JSON-like mapping."""
        query = data.get("query")
        if not isinstance(query, str):
            raise InvalidInputError("missing or invalid field `query`")
        max_results = data.get("max_results", DEFAULT_MAX_RESULTS)
        if max_results is None:
            max_results = DEFAULT_MAX_RESULTS
        if (
            isinstance(max_results, bool)
            or not isinstance(max_results, int)
            or max_results < 0
        ):
            raise InvalidInputError("invalid field `max_results`")
        return cls(query=query, max_results=max_results)


@dataclass
class WebSearchResult:
    """One search hit."""

    title: str
    url: str
    snippet: str


@dataclass
class WebSearchOutput:
    """All hits returned for a query."""

    results: list[WebSearchResult] = field(default_factory=list)
    query: str = ""


def _encode(query: str) -> str:
    return quote(query, safe="")


def _text(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    return value if isinstance(value, str) else None


def parse_instant_answer(
    data: Any, query: str, max_results: int
) -> list[WebSearchResult]:
    """Turn an instant answer response into a list of results."""
    if not isinstance(data, Mapping):
        data = {}

    results: list[WebSearchResult] = []

    abstract = _text(data, "Abstract")
    abstract_url = _text(data, "AbstractURL")
    if abstract and abstract_url is not None:
        results.append(
            WebSearchResult(
                title=_text(data, "AbstractSource") or "DuckDuckGo",
                url=abstract_url,
                snippet=abstract,
            )
        )

    topics = data.get("RelatedTopics")
    if isinstance(topics, list):
        budget = max(max_results - len(results), 0)
        for topic in topics[:budget]:
            if not isinstance(topic, Mapping):
                continue
            text = _text(topic, "Text")
            url = _text(topic, "FirstURL")
            if text is not None and url is not None:
                results.append(
                    WebSearchResult(title="Related Topic", url=url, snippet=text)
                )

    if not results:
        results.append(
            WebSearchResult(
                title="Search Query",
                url=f"https://duckduckgo.com/?q={_encode(query)}",
                snippet=(
                    f"No instant results found for '{query}'. "
                    "You can search manually at the provided URL."
                ),
            )
        )

    return results


class WebSearchTool:
    """Performs web searches and returns titles, URLs and snippets."""

    NAME = "web_search"

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session if session is not None else requests.Session()

    def definition(self, prompt: str) -> ToolDefinition:
        """Describe the tool and its parameters."""
        return ToolDefinition(
            name=self.NAME,
            description=(
                "Performs a web search and returns relevant results with titles, "
                "URLs, and snippets."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "The search query string",
                    },
                    "max_results": {
                        "type": "number",
                        "description": "Maximum number of results to return (default: 5)",
                        "default": DEFAULT_MAX_RESULTS,
                    },
                },
                "required": ["query"],
            },
        )

    def call(self, args: WebSearchArgs | Mapping[str, Any]) -> WebSearchOutput:
        """Query the instant answer API and collect results."""
        if isinstance(args, Mapping):
            args = WebSearchArgs.from_dict(args)

        url = (
            f"{API_URL}?q={_encode(args.query)}"
            "&format=json&no_html=1&skip_disambig=1"
        )
        try:
            response = self.session.get(url, headers={"User-Agent": USER_AGENT})
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise ToolHTTPError(exc) from exc

        return WebSearchOutput(
            results=parse_instant_answer(data, args.query, args.max_results),
            query=args.query,
        )