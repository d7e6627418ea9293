import logging
from collections import Counter

from tag_autocomplete import TagAutocomplete


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class CountingLoader:
    def __init__(self, tags):
        self.tags = tags
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return list(self.tags)


TAGS = ["Python", "PyTorch", "AWS", "Docker", "Kubernetes", "React", "Redux", "SQL",
        "PostgreSQL", "Leadership", "Mentorship", "Agile"]


def test_short_query_returns_first_ten():
    autocomplete = TagAutocomplete(CountingLoader(TAGS))
    assert autocomplete.suggestions("") == TAGS[:10]
    assert autocomplete.suggestions("p") == TAGS[:10]


def test_query_matches_substrings_case_insensitively():
    autocomplete = TagAutocomplete(CountingLoader(TAGS))
    assert autocomplete.suggestions("py") == ["Python", "PyTorch"]
    assert autocomplete.suggestions("SHIP") == ["Leadership", "Mentorship"]


def test_at_most_fifteen_matches():
    tags = [f"Tag {i}" for i in range(40)]
    autocomplete = TagAutocomplete(CountingLoader(tags))
    assert autocomplete.suggestions("tag") == tags[:15]


def test_cache_expires_after_ttl():
    clock = FakeClock()
    loader = CountingLoader(TAGS)
    autocomplete = TagAutocomplete(loader, ttl=300, clock=clock)

    autocomplete.suggestions("py")
    clock.now += 299
    autocomplete.suggestions("py")
    assert loader.calls == 1

    clock.now += 1
    autocomplete.suggestions("py")
    assert loader.calls == 2


def test_invalidate_forces_reload():
    loader = CountingLoader(TAGS)
    autocomplete = TagAutocomplete(loader)

    autocomplete.suggestions()
    autocomplete.invalidate()
    autocomplete.suggestions()
    assert loader.calls == 2


def test_loader_failure_yields_empty_cache(caplog):
    def broken_loader():
        raise RuntimeError("database unavailable")

    autocomplete = TagAutocomplete(broken_loader)
    with caplog.at_level(logging.ERROR, logger="tag_autocomplete"):
        assert autocomplete.suggestions("py") == []
    assert "database unavailable" in caplog.text


def test_add_tag_prepends_and_caps_cache():
    tags = [f"Tag {i}" for i in range(50)]
    autocomplete = TagAutocomplete(CountingLoader(tags))
    autocomplete.suggestions()

    autocomplete.add_tag("Rust")
    autocomplete.add_tag("Tag 3")

    suggestions = autocomplete.suggestions()
    assert suggestions[:3] == ["Tag 3", "Rust", "Tag 0"]
    assert len(autocomplete._tags) == 50
    assert "Tag 49" not in autocomplete._tags


def test_suggestions_with_counts_rank_by_usage():
    autocomplete = TagAutocomplete(CountingLoader(TAGS))
    counts = Counter({"PyTorch": 3, "Python": 1, "Docker": 5})

    assert autocomplete.suggestions_with_counts("py", counts) == ["PyTorch", "Python"]
    assert autocomplete.suggestions_with_counts("", counts)[0] == "Docker"


def test_loader_failure_is_retried_on_next_call():
    calls = []

    def flaky_loader():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("database unavailable")
        return TAGS

    autocomplete = TagAutocomplete(flaky_loader, clock=FakeClock())

    assert autocomplete.suggestions("py") == []
    assert autocomplete.suggestions("py") == ["Python", "PyTorch"]
    assert len(calls) == 2


def test_suggestions_with_counts_rank_before_truncating():
    tags = [f"Tag {i}" for i in range(20)]
    autocomplete = TagAutocomplete(CountingLoader(tags))
    counts = Counter({"Tag 19": 50, "Tag 18": 10})

    for query in ("", "tag"):
        ranked = autocomplete.suggestions_with_counts(query, counts)
        assert ranked[:2] == ["Tag 19", "Tag 18"]
        assert len(ranked) == 15


def test_suggestions_with_counts_filters_single_character_query():
    autocomplete = TagAutocomplete(CountingLoader(["Python", "Docker", "AWS"]))
    counts = Counter({"Docker": 9, "Python": 1})

    assert autocomplete.suggestions_with_counts("y", counts) == ["Python"]
