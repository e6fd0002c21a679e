import pytest

from sprint_spillover.core.models import EpicTitle, SearchFilter, coerce_recency_days


def test_search_filter_jql_quotes_values():
    jql = SearchFilter('AB"C', excluded_issue_types=("Epic",), recency_days=3).to_jql()
    assert jql == 'project = "AB\\"C" AND issuetype not in ("Epic") AND updated >= -3d'


def test_search_filter_without_exclusions():
    assert SearchFilter("ABC", excluded_issue_types=()).to_jql() == 'project = "ABC" AND updated >= -10d'


@pytest.mark.parametrize("days", [0, -4])
def test_search_filter_rejects_non_positive_window(days):
    with pytest.raises(ValueError):
        SearchFilter("ABC", recency_days=days)


def test_search_filter_requires_project():
    with pytest.raises(ValueError):
        SearchFilter("  ")


@pytest.mark.parametrize(
    "raw,expected",
    [(None, 10), ("", 10), ("abc", 10), ("0", 10), ("-3", 10), ("14", 14), (" 7 ", 7), (30, 30)],
)
def test_coerce_recency_days(raw, expected):
    assert coerce_recency_days(raw) == expected


def test_epic_title_display():
    assert EpicTitle.resolved("Payments").display() == "Payments"
    assert EpicTitle.no_title().display() == "no title"
    assert EpicTitle.lookup_failed().display() == "lookup failed"
    assert EpicTitle.no_parent().display() == "no parent"
