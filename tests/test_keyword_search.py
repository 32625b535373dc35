import httpx
import pytest
from automation_coverage.core.exceptions import ExternalServiceError
from automation_coverage.repositories.implementations.jira_service import AtlassianJiraService
from automation_coverage.services.keyword_search import GlobalKeywordSearchEngine, count_keyword_occurrences

SEARCH_RESPONSE = {
    "total": 2,
    "issues": [
        {
            "key": "QA-1",
            "fields": {
                "summary": "Refund flow",
                "issuetype": {"name": "Story"},
                "status": {"name": "Done"},
                "priority": {"name": "High"},
            },
        },
        {"key": "QA-2", "fields": {"summary": "Refund emails", "issuetype": {"name": "Bug"}, "status": {"name": "Open"}}},
        "not an issue",
    ],
}

COMMENTS_RESPONSE = {
    "comments": [
        {"body": "Refund verified. REFUND amount matches."},
        {
            "body": {
                "type": "doc",
                "content": [{"type": "paragraph", "content": [{"type": "text", "text": "partial refund pending"}]}],
            }
        },
    ]
}


def _jira(handler):
    return AtlassianJiraService(
        base_url="https://jira.example.com",
        username="qa-bot",
        api_token="token",
        transport=httpx.MockTransport(handler),
    )


def test_count_is_case_insensitive_and_non_overlapping():
    assert count_keyword_occurrences("aaaa", "aa") == 2
    assert count_keyword_occurrences("Login, LOGIN, login", "login") == 3
    assert count_keyword_occurrences("", "login") == 0


@pytest.mark.asyncio
async def test_search_tallies_matching_issues():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=SEARCH_RESPONSE)

    response = await GlobalKeywordSearchEngine(_jira(handler)).search("refund", "QA")

    assert response.totalCount == 2
    assert [issue.key for issue in response.matchingIssues] == ["QA-1", "QA-2"]
    assert response.matchingIssues[0].priority == "High"
    assert response.matchingIssues[1].priority is None
    assert requests[0].url.path == "/rest/api/2/search"
    assert 'comment ~ "refund"' in requests[0].url.params["jql"]


@pytest.mark.asyncio
async def test_empty_keyword_short_circuits():
    def handler(request):
        raise AssertionError("no request expected")

    response = await GlobalKeywordSearchEngine(_jira(handler)).search("   ")

    assert response.totalCount == 0
    assert response.matchingIssues == []


@pytest.mark.asyncio
async def test_unconfigured_tracker_gives_zero_result():
    response = await GlobalKeywordSearchEngine(AtlassianJiraService(base_url="", username="", api_token="")).search("refund")

    assert response.totalCount == 0


@pytest.mark.asyncio
async def test_search_failure_gives_zero_result():
    response = await GlobalKeywordSearchEngine(_jira(lambda request: httpx.Response(500))).search("refund")

    assert response.totalCount == 0


@pytest.mark.asyncio
async def test_comment_occurrences_are_counted():
    def handler(request):
        assert request.url.path == "/rest/api/2/issue/QA-1/comment"
        return httpx.Response(200, json=COMMENTS_RESPONSE)

    assert await GlobalKeywordSearchEngine(_jira(handler)).count_in_comments("QA-1", "refund") == 3


@pytest.mark.asyncio
async def test_comment_fetch_failure_is_raised():
    engine = GlobalKeywordSearchEngine(_jira(lambda request: httpx.Response(503)))

    with pytest.raises(ExternalServiceError):
        await engine.count_in_comments("QA-1", "refund")
