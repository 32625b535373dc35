from automation_coverage.services.linked_artifacts import MAX_TITLE_LENGTH, extract_linked_test_cases


def test_empty_text_has_no_links():
    assert extract_linked_test_cases(None) == []
    assert extract_linked_test_cases("   ") == []


def test_marker_references_are_extracted():
    text = "Covers QTest: Verify login with SSO\nSee also Test case: Reset password (web)"

    assert extract_linked_test_cases(text) == ["Verify login with SSO", "Reset password (web)"]


def test_marker_match_is_case_insensitive():
    assert extract_linked_test_cases("QTEST:Guest checkout") == ["Guest checkout"]


def test_list_lines_within_length_bounds_are_extracted():
    text = "\n".join(
        [
            "Acceptance:",
            "* Verify the cart total updates",
            "- short",
            "2. Apply discount code at checkout",
            "• " + "x" * 250,
        ]
    )

    assert extract_linked_test_cases(text) == [
        "Verify the cart total updates",
        "Apply discount code at checkout",
    ]


def test_titles_are_deduplicated_in_first_seen_order():
    text = "* Verify the cart total updates\n- Verify the cart total updates\n1. Remove item from the cart"

    assert extract_linked_test_cases(text) == ["Verify the cart total updates", "Remove item from the cart"]


def test_marker_and_bullet_references_to_one_title_collapse():
    text = "QTest: Verify login flow works\n* Verify login flow works"

    assert extract_linked_test_cases(text) == ["Verify login flow works"]


def test_runaway_marker_capture_is_capped_at_column_width():
    text = "QTest: Verify login " + "and more words " * 60

    titles = extract_linked_test_cases(text)

    assert len(titles) == 1
    assert len(titles[0]) <= MAX_TITLE_LENGTH
    assert titles[0].startswith("Verify login and more words")
