from automation_coverage.models import schemas
from automation_coverage.services.testng_parser import count_by_status, parse_report, parse_reports

REPORT_A = """<?xml version="1.0" encoding="UTF-8"?>
<testng-results skipped="1" failed="1" total="3" passed="1">
  <suite name="Regression">
    <test name="Checkout">
      <class name="com.shop.CheckoutTest">
        <test-method status="PASS" signature="setUp()" name="setUp" is-config="true" duration-ms="12"/>
        <test-method status="PASS" signature="payByCard()" name="payByCard" duration-ms="1500"/>
        <test-method status="FAIL" signature="payByVoucher()" name="payByVoucher" duration-ms="250"/>
        <test-method status="SKIP" signature="payLater()" name="payLater" duration-ms="0"/>
      </class>
    </test>
  </suite>
</testng-results>
"""

REPORT_B = """<testng-results>
  <suite name="Smoke">
    <test name="Account">
      <class name="com.shop.AccountTest">
        <test-method status="PASS" name="login" duration-ms="800"/>
      </class>
      <class name="com.shop.ProfileTest">
        <test-method status="PASS" name="editProfile" duration-ms="300"/>
      </class>
    </test>
  </suite>
</testng-results>
"""


def test_report_records_skip_config_methods():
    records = parse_report(REPORT_A)

    assert [(r.class_name, r.test_name, r.status) for r in records] == [
        ("com.shop.CheckoutTest", "payByCard", schemas.TestRecordStatus.PASSED),
        ("com.shop.CheckoutTest", "payByVoucher", schemas.TestRecordStatus.FAILED),
        ("com.shop.CheckoutTest", "payLater", schemas.TestRecordStatus.SKIPPED),
    ]
    assert records[0].duration == 1.5


def test_records_from_all_reports_are_concatenated():
    records = parse_reports([REPORT_A, REPORT_B])

    assert len(records) == 5
    assert [r.test_name for r in records][-2:] == ["login", "editProfile"]


def test_unreadable_reports_are_skipped():
    unknown_encoding = b'<?xml version="1.0" encoding="bogus-enc"?><testng-results/>'

    records = parse_reports(["<testng-results><suite>", None, "", unknown_encoding, REPORT_B])

    assert [r.test_name for r in records] == ["login", "editProfile"]


def test_counts_by_status():
    counts = count_by_status(parse_reports([REPORT_A, REPORT_B]))

    assert counts == schemas.StatusCounts(total=5, passed=3, failed=1, skipped=1)
