import pytest
from automation_coverage.core.exceptions import NotFoundError
from automation_coverage.models.schemas import BuildStatus
from automation_coverage.repositories.implementations.sql_build_result_repository import SQLBuildResultRepository
from automation_coverage.services.build_result_service import (
    BuildResultSyncCoordinator,
    map_build_status,
    summarize_build,
)

REPORT = """<testng-results>
  <suite name="Nightly">
    <test name="Orders">
      <class name="com.shop.OrderTest">
        <test-method status="PASS" name="placeOrder" duration-ms="900"/>
        <test-method status="FAIL" name="cancelOrder" duration-ms="100"/>
      </class>
    </test>
  </suite>
</testng-results>
"""


def _build(number, result="UNSTABLE", total=2, failed=1, skipped=0, timestamp=1700000000000, artifacts=None):
    return {
        "number": number,
        "result": result,
        "timestamp": timestamp,
        "url": f"https://ci.example.com/job/orders/{number}/",
        "actions": [{"_class": "hudson.model.CauseAction"}, {"totalCount": total, "failCount": failed, "skipCount": skipped}],
        "artifacts": artifacts or [],
    }


@pytest.fixture
def repository(db_session):
    return SQLBuildResultRepository(db_session)


@pytest.fixture
def coordinator(fake_jenkins, repository):
    return BuildResultSyncCoordinator(fake_jenkins, repository)


@pytest.mark.parametrize(
    "result, expected",
    [
        ("SUCCESS", BuildStatus.SUCCESS),
        ("failure", BuildStatus.FAILURE),
        ("UNSTABLE", BuildStatus.UNSTABLE),
        ("ABORTED", BuildStatus.ABORTED),
        ("NOT_BUILT", BuildStatus.ABORTED),
        (None, None),
    ],
)
def test_map_build_status(result, expected):
    assert map_build_status(result) == expected


def test_summary_derives_passed_count_and_timestamp():
    summary = summarize_build("orders", _build(12, total=10, failed=2, skipped=1))

    assert summary.build_number == "12"
    assert summary.passed_tests == 7
    assert summary.build_timestamp.year == 2023


def test_running_build_has_no_summary():
    assert summarize_build("orders", _build(13, result=None)) is None


@pytest.mark.asyncio
async def test_sync_all_jobs_stores_latest_builds(coordinator, fake_jenkins):
    fake_jenkins.jobs = [{"name": "orders"}, {"name": "payments"}, {"name": "building"}]
    fake_jenkins.last_builds = {
        "orders": _build(12),
        "payments": _build(4, result="SUCCESS", total=5, failed=0),
        "building": _build(1, result=None),
    }

    synced = await coordinator.sync_all_jobs()

    assert sorted(r.job_name for r in synced) == ["orders", "payments"]
    stats = await coordinator.get_statistics()
    assert stats["totalJobs"] == 2
    assert stats["statusCounts"]["SUCCESS"] == 1
    assert stats["statusCounts"]["UNSTABLE"] == 1
    assert stats["totalTests"] == 7
    assert stats["passRate"] == round(6 * 100.0 / 7, 2)


@pytest.mark.asyncio
async def test_resync_keeps_notes(coordinator, fake_jenkins):
    fake_jenkins.last_builds = {"orders": _build(12)}
    result = await coordinator.sync_job("orders")
    await coordinator.update_notes(result.id, "flaky cancel test")

    again = await coordinator.sync_job("orders")

    assert again.id == result.id
    assert again.notes == "flaky cancel test"


@pytest.mark.asyncio
async def test_detail_is_parsed_once_then_served_from_storage(coordinator, fake_jenkins):
    artifacts = [
        {"fileName": "testng-results.xml", "relativePath": "target/surefire-reports/testng-results.xml"},
        {"fileName": "emailable-report.html", "relativePath": "target/surefire-reports/emailable-report.html"},
    ]
    fake_jenkins.builds[("orders", "12")] = _build(12, artifacts=artifacts)
    fake_jenkins.artifacts["target/surefire-reports/testng-results.xml"] = REPORT

    first = await coordinator.get_detailed_test_cases("orders", "12")
    second = await coordinator.get_detailed_test_cases("orders", "12")

    assert first.source == "report"
    assert second.source == "stored"
    assert first.totalCount == second.totalCount == 2
    assert second.failedCount == 1
    assert second.countsMatchSummary is True
    assert fake_jenkins.artifact_requests == ["target/surefire-reports/testng-results.xml"]


@pytest.mark.asyncio
async def test_detail_flags_count_disagreement(coordinator, fake_jenkins):
    artifacts = [{"fileName": "testng-results.xml", "relativePath": "testng-results.xml"}]
    fake_jenkins.builds[("orders", "20")] = _build(20, total=3, failed=1, artifacts=artifacts)
    fake_jenkins.artifacts["testng-results.xml"] = REPORT

    detail = await coordinator.get_detailed_test_cases("orders", "20")

    assert detail.totalCount == 2
    assert detail.summaryCounts.total == 3
    assert detail.countsMatchSummary is False


@pytest.mark.asyncio
async def test_detail_for_unknown_build_is_not_found(coordinator):
    with pytest.raises(NotFoundError):
        await coordinator.get_detailed_test_cases("orders", "999")


@pytest.mark.asyncio
async def test_latest_result_per_job(coordinator, fake_jenkins, repository):
    fake_jenkins.last_builds = {"orders": _build(11, timestamp=1700000000000)}
    await coordinator.sync_job("orders")
    fake_jenkins.last_builds = {"orders": _build(12, timestamp=1700000900000)}
    await coordinator.sync_job("orders")

    latest = await coordinator.get_latest_result("orders")
    assert latest.build_number == "12"
    assert [r.build_number for r in await coordinator.get_all_latest_results()] == ["12"]

    with pytest.raises(NotFoundError):
        await coordinator.get_latest_result("unknown")
