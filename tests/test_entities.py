"""Tests for core entities."""

import pytest

from hn_notifier.core import CycleReport, Outcome, Story, StoryRecord


def _story(**overrides) -> Story:
    fields = dict(
        id=1,
        url="https://example.com/post",
        title="Show HN: Something",
        descendants=10,
        score=80,
        type="story",
    )
    fields.update(overrides)
    return Story(**fields)


def test_eligible_story() -> None:
    """Test a story passing every threshold."""
    assert not _story().should_ignore()


def test_eligibility_boundaries_are_inclusive() -> None:
    """Test score 50 and 5 comments are enough."""
    assert not _story(score=50, descendants=5).should_ignore()


@pytest.mark.parametrize(
    "overrides",
    [
        {"type": "job"},
        {"type": "comment"},
        {"score": 49},
        {"descendants": 4},
        {"url": ""},
    ],
)
def test_ineligible_stories(overrides) -> None:
    """Test each condition of the eligibility filter on its own."""
    assert _story(**overrides).should_ignore()


def test_news_url() -> None:
    """Test discussion link."""
    assert _story(id=17999686).news_url == "https://news.ycombinator.com/item?id=17999686"


def test_record_mapping() -> None:
    """Test mapping between story and store record keeps the message id."""
    story = _story(message_id="1234.5678")
    record = story.to_record()

    assert record == StoryRecord(id=1, message_id="1234.5678", last_save=None)

    restored = record.to_story()
    assert restored.id == 1
    assert restored.message_id == "1234.5678"
    assert not restored.details_loaded


def test_cycle_report_counts() -> None:
    """Test report counters."""
    report = CycleReport()
    report.record(Outcome.SENT)
    report.record(Outcome.SENT)
    report.record(Outcome.IGNORED)

    assert report.sent == 2
    assert report.ignored == 1
    assert report.total == 3
    assert "sent=2" in report.summary()
