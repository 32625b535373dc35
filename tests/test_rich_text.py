from automation_coverage.services.rich_text import flatten_rich_text


def test_none_flattens_to_empty_string():
    assert flatten_rich_text(None) == ""


def test_plain_string_is_trimmed_only():
    assert flatten_rich_text("  line one\nline two  ") == "line one\nline two"


def test_document_text_is_collected_depth_first():
    document = {
        "type": "doc",
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": "Checkout"}, {"type": "text", "text": "flow"}]},
            {
                "type": "bulletList",
                "content": [
                    {"type": "listItem", "content": [{"type": "paragraph", "content": [{"type": "text", "text": "QTest: Pay by card"}]}]},
                ],
            },
        ],
    }

    assert flatten_rich_text(document) == "Checkout flow QTest: Pay by card"


def test_nodes_without_text_are_ignored():
    document = {"type": "doc", "content": [{"type": "hardBreak"}, {"type": "text", "text": "only"}, "stray", 42]}

    assert flatten_rich_text(document) == "only"
