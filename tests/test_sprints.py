from sprint_spillover.analytics.sprints import count_sprint_changes, parse_sprint, parse_sprint_field
from sprint_spillover.core.models import HistoryItemModel, SprintRef

from factories import legacy_sprint


def test_parse_legacy_sprint_string():
    ref = parse_sprint(legacy_sprint(42, "Team Rocket 2024.18"))
    assert ref == SprintRef(42, "Team Rocket 2024.18")


def test_parse_legacy_name_with_comma():
    value = "com.atlassian.greenhopper.service.sprint.Sprint@1[id=3,state=ACTIVE,name=Sprint 3, hotfix,startDate=<null>]"
    assert parse_sprint(value) == SprintRef(3, "Sprint 3, hotfix")


def test_parse_cloud_sprint_object():
    assert parse_sprint({"id": 7, "name": "Sprint 7", "state": "closed"}) == SprintRef(7, "Sprint 7")


def test_parse_malformed_values_return_none():
    assert parse_sprint("not a sprint") is None
    assert parse_sprint({"id": 1}) is None
    assert parse_sprint(12) is None
    assert parse_sprint("Sprint@1[id=1,name=<null>]") is None


def test_parse_field_dedupes_preserving_order():
    refs = parse_sprint_field(
        [legacy_sprint(2, "Sprint 2"), legacy_sprint(1, "Sprint 1"), {"id": 2, "name": "Sprint 2"}, "garbage"]
    )
    assert [r.name for r in refs] == ["Sprint 2", "Sprint 1"]
    assert parse_sprint_field(None) == ()


def test_count_sprint_changes_counts_every_item():
    histories = [
        HistoryItemModel(items=[{"field": "Sprint"}, {"field": "status"}]),
        HistoryItemModel(items=[{"field": "sprint"}, {"field": "Sprint"}]),
        HistoryItemModel(items=[]),
    ]
    assert count_sprint_changes(histories) == 3
