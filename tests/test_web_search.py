import pytest
import requests
import responses

from vega.base import InvalidInputError, ToolHTTPError
from vega.web_search import (
    WebSearchArgs,
    WebSearchResult,
    WebSearchTool,
    parse_instant_answer,
)

API = "https://api.duckduckgo.com/"


def test_web_search_tool_name():
    assert WebSearchTool.NAME == "web_search"
    assert WebSearchTool().definition("x").name == "web_search"


def test_default_max_results():
    assert WebSearchArgs.from_dict({"query": "q"}).max_results == 5
    assert WebSearchArgs("q").max_results == 5


def test_web_search_definition():
    definition = WebSearchTool().definition("test prompt")
    assert definition.name == "web_search"
    assert len(definition.description) > 0
    assert definition.parameters["required"] == ["query"]


def test_from_dict_requires_query():
    with pytest.raises(InvalidInputError):
        WebSearchArgs.from_dict({"max_results": 3})


def test_parse_abstract_and_topics():
    data = {
        "Abstract": "A language.",
        "AbstractURL": "https://example.com/rust",
        "AbstractSource": "Wiki",
        "RelatedTopics": [
            {"Text": "one", "FirstURL": "https://example.com/1"},
            {"Text": "two", "FirstURL": "https://example.com/2"},
            {"Text": "three", "FirstURL": "https://example.com/3"},
        ],
    }
    results = parse_instant_answer(data, "rust", 3)
    assert results == [
        WebSearchResult("Wiki", "https://example.com/rust", "A language."),
        WebSearchResult("Related Topic", "https://example.com/1", "one"),
        WebSearchResult("Related Topic", "https://example.com/2", "two"),
    ]


def test_parse_missing_source_defaults_to_duckduckgo():
    data = {"Abstract": "text", "AbstractURL": "https://example.com/a"}
    results = parse_instant_answer(data, "q", 5)
    assert results[0].title == "DuckDuckGo"


def test_parse_incomplete_topic_uses_a_slot():
    data = {
        "RelatedTopics": [
            {"Text": "no url"},
            {"Text": "ok", "FirstURL": "https://example.com/ok"},
            {"Text": "late", "FirstURL": "https://example.com/late"},
        ]
    }
    results = parse_instant_answer(data, "q", 2)
    assert [r.snippet for r in results] == ["ok"]


def test_parse_empty_gives_fallback():
    results = parse_instant_answer({"Abstract": ""}, "rust lang", 5)
    assert len(results) == 1
    assert results[0].title == "Search Query"
    assert results[0].url == "https://duckduckgo.com/?q=rust%20lang"
    assert "No instant results found for 'rust lang'" in results[0].snippet


def test_call_returns_results():
    with responses.RequestsMock() as mock:
        mock.add(
            responses.GET,
            API,
            json={
                "Abstract": "Systems language",
                "AbstractURL": "https://example.com/rust",
                "AbstractSource": "Encyclopedia",
                "RelatedTopics": [],
            },
        )
        output = WebSearchTool().call(WebSearchArgs("rust lang"))
        request = mock.calls[0].request
    assert output.query == "rust lang"
    assert output.results == [
        WebSearchResult("Encyclopedia", "https://example.com/rust", "Systems language")
    ]
    assert "q=rust%20lang" in request.url
    assert "format=json" in request.url
    assert request.headers["User-Agent"] == "vega-agent/0.1.0"


def test_call_accepts_mapping_and_falls_back():
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, API, json={})
        output = WebSearchTool().call({"query": "nothing"})
    assert output.results[0].title == "Search Query"


def test_call_invalid_json_raises_http_error():
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, API, body="not json")
        with pytest.raises(ToolHTTPError):
            WebSearchTool().call(WebSearchArgs("q"))


def test_call_connection_error_raises_http_error():
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, API, body=requests.ConnectionError("down"))
        with pytest.raises(ToolHTTPError) as info:
            WebSearchTool().call(WebSearchArgs("q"))
    assert str(info.value).startswith("HTTP error: ")