import httpx
import pytest
from automation_coverage.repositories.implementations.jira_service import AtlassianJiraService
from automation_coverage.repositories.implementations.jenkins_service import JenkinsService
from automation_coverage.services.pagination import collect_board_sprints


def _jira(handler):
    return AtlassianJiraService(
        base_url="https://jira.example.com/",
        username="qa-bot",
        api_token="token",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_sprint_pages_are_walked_through_the_agile_api():
    def handler(request):
        assert request.url.path == "/rest/agile/1.0/board/42/sprint"
        assert request.headers["Authorization"].startswith("Basic ")
        start_at = int(request.url.params["startAt"])
        values = [{"id": start_at + n, "name": f"Sprint {start_at + n}"} for n in range(2)]
        return httpx.Response(200, json={"startAt": start_at, "maxResults": 2, "isLast": start_at >= 2, "values": values})

    jira = _jira(handler)
    sprints = await collect_board_sprints(jira.get_sprint_page, "42", page_size=2)

    assert [sprint["id"] for sprint in sprints] == [0, 1, 2, 3]


@pytest.mark.asyncio
async def test_sprint_page_failure_is_none():
    jira = _jira(lambda request: httpx.Response(401, text="unauthorized"))

    assert await jira.get_sprint_page("42", 0, 50) is None


@pytest.mark.asyncio
async def test_connection_test_uses_myself_endpoint():
    paths = []

    def handler(request):
        paths.append(request.url.path)
        return httpx.Response(200, json={"name": "qa-bot"})

    assert await _jira(handler).test_connection() is True
    assert paths == ["/rest/api/2/myself"]


@pytest.mark.asyncio
async def test_unconfigured_clients_report_not_connected():
    assert await AtlassianJiraService(base_url="", username="", api_token="").test_connection() is False
    assert await JenkinsService(base_url="", username="", api_token="").list_jobs() == []


@pytest.mark.asyncio
async def test_jenkins_build_and_artifact_urls():
    paths = []

    def handler(request):
        paths.append(request.url.path)
        if request.url.path.endswith("/api/json"):
            return httpx.Response(200, json={"number": 12, "result": "SUCCESS", "url": "https://ci.example.com/job/nightly%20orders/12/"})
        return httpx.Response(200, text="<testng-results/>")

    jenkins = JenkinsService(
        base_url="https://ci.example.com",
        username="qa-bot",
        api_token="token",
        transport=httpx.MockTransport(handler),
    )

    build = await jenkins.get_build("nightly orders", "12")
    report = await jenkins.get_artifact(build["url"], "reports/testng-results.xml")

    assert build["number"] == 12
    assert report == "<testng-results/>"
    assert paths[0] == "/job/nightly orders/12/api/json"
    assert paths[1] == "/job/nightly orders/12/artifact/reports/testng-results.xml"
