from content_insights.models import ArticleSummary
from content_insights.wordcloud import build_word_cloud, word_size


def _summaries(*keyword_lists):
    return [ArticleSummary(keywords=list(k)) for k in keyword_lists]


def test_counts_keywords():
    cloud = build_word_cloud(_summaries(["a", "b"], ["a"]))
    counts = {e.word: e.count for e in cloud}
    assert counts == {"a": 2, "b": 1}
    assert [e.word for e in cloud] == ["a", "b"]


def test_case_sensitive():
    cloud = build_word_cloud(_summaries(["AI", "ai"], ["AI"]))
    assert [(e.word, e.count) for e in cloud] == [("AI", 2), ("ai", 1)]


def test_ties_keep_first_seen_order():
    cloud = build_word_cloud(_summaries(["x", "y", "z"], ["z", "y"]))
    assert [e.word for e in cloud] == ["y", "z", "x"]


def test_capped_at_twenty():
    cloud = build_word_cloud(_summaries([f"w{i}" for i in range(30)]))
    assert len(cloud) == 20
    assert cloud[0].word == "w0"


def test_sizes_decay_and_floor():
    assert [word_size(r) for r in (0, 1, 13, 14, 19)] == [48, 46, 22, 20, 20]
    cloud = build_word_cloud(_summaries([f"w{i}" for i in range(20)]))
    assert cloud[0].size == 48
    assert cloud[-1].size == 20


def test_empty():
    assert build_word_cloud([]) == []
