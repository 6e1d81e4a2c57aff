from content_insights.models import TopicInsight
from content_insights.ranking import rank_insights


def _insights(*confidences):
    return [TopicInsight(title=f"t{i}", confidence=c) for i, c in enumerate(confidences)]


def test_sorted_descending():
    ranked = rank_insights(_insights(70, 90, 80))
    assert [i.confidence for i in ranked] == [90, 80, 70]


def test_ties_keep_model_order():
    ranked = rank_insights(_insights(80, 95, 70, 95, 80))
    assert [i.title for i in ranked] == ["t1", "t3", "t0", "t4", "t2"]


def test_caps_at_ten_keeping_highest():
    insights = _insights(*range(70, 85))  # 15 insights, ascending
    ranked = rank_insights(insights)
    assert len(ranked) == 10
    assert [i.confidence for i in ranked] == list(range(84, 74, -1))
    assert all(a.confidence >= b.confidence for a, b in zip(ranked, ranked[1:]))


def test_idempotent_on_sorted_input():
    once = rank_insights(_insights(95, 90, 90, 72))
    assert rank_insights(once) == once


def test_empty_returns_empty_and_logs(caplog):
    with caplog.at_level("WARNING", logger="content_insights.ranking"):
        assert rank_insights([]) == []
    assert "no insights" in caplog.text


def test_out_of_range_confidence_left_as_is():
    ranked = rank_insights(_insights(80, 120))
    assert [i.confidence for i in ranked] == [120, 80]
