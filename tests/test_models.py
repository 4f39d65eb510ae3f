import pytest

from crawlbot.models import CrawlJob, Document, is_terminal_status


def test_document_links_keep_strings_and_render_other_entries_as_json() -> None:
    document = Document.from_dict(
        {
            "markdown": "# Page",
            "links": ["https://example.com/a", {"url": "https://example.com/b"}, None, 7, True],
        }
    )

    assert document.links == ["https://example.com/a", '{"url":"https://example.com/b"}', "7", "true"]


def test_document_rejects_non_object_payload() -> None:
    with pytest.raises(ValueError):
        Document.from_dict(["not", "a", "page"])  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("status", "terminal"),
    [("running", False), ("RUNNING", False), ("Running", False), (" running ", True), ("completed", True), (None, True)],
)
def test_only_exact_running_keeps_polling(status, terminal) -> None:
    assert is_terminal_status(status) is terminal
    assert CrawlJob(id="job", status=status).is_terminal is terminal
