"""Tests for short key registry construction."""

import random
from datetime import datetime, timezone

import pytest

from linear_mcp.registry import (
    EntityType,
    ProjectMetadata,
    RegistryBuildData,
    TeamRef,
    build_registry,
    create_empty_registry,
    get_team_prefix,
    parse_label_key,
    parse_short_key,
    register_new_project,
    resolve_short_key,
)
from linear_mcp.registry.models import TransportType

from tests.test_utils import (
    DEFAULT_TEAM_ID,
    OTHER_TEAM_ID,
    create_multi_team_data,
    create_test_project,
    create_test_state,
    create_test_user,
)


def _data(**kwargs):
    defaults = {"users": [], "states": [], "projects": [], "workspace_id": "ws-1"}
    defaults.update(kwargs)
    return RegistryBuildData(**defaults)


class TestKeyParsing:
    def test_parse_plain_keys(self):
        parsed = parse_short_key("pr10")
        assert parsed.entity_type is EntityType.PROJECT
        assert parsed.index == 10
        assert parsed.team_prefix is None

    def test_parse_prefixed_key_lowercases_prefix(self):
        parsed = parse_short_key("SQM:s0")
        assert parsed.team_prefix == "sqm"
        assert parsed.entity_type is EntityType.STATE
        assert parsed.bare == "s0"

    def test_parse_rejects_non_keys(self):
        assert parse_short_key("x0") is None
        assert parse_short_key("u") is None
        assert parse_short_key("sqm:") is None
        assert parse_short_key("U0") is None

    def test_leading_colon_is_not_a_prefix(self):
        assert parse_short_key(":s0") is None

    def test_parse_label_key(self):
        assert parse_label_key("Bug").team_prefix is None
        parsed = parse_label_key("sqt:Priority:High")
        assert parsed.team_prefix == "sqt"
        assert parsed.label_name == "Priority:High"
        special = parse_label_key(":Special:Label")
        assert special.team_prefix is None
        assert special.label_name == ":Special:Label"

    def test_team_prefix(self):
        team_keys = {"t1": "sqt", "t2": "SQM"}
        assert get_team_prefix("t1", "t1", team_keys) == ""
        assert get_team_prefix("t2", "t1", team_keys) == "sqm:"
        assert get_team_prefix("t2", None, team_keys) == ""
        assert get_team_prefix("t3", "t1", team_keys) == ""


class TestBuildRegistry:
    def test_users_sorted_by_created_at(self):
        users = [
            create_test_user("b", "2024-01-02T00:00:00Z"),
            create_test_user("a", "2024-01-01T00:00:00Z"),
        ]
        for ordering in (users, list(reversed(users))):
            registry = build_registry(_data(users=ordering))
            assert registry.uuids[EntityType.USER] == {"a": "u0", "b": "u1"}
            assert registry.keys[EntityType.USER] == {"u0": "a", "u1": "b"}

    def test_mixed_timestamp_forms(self):
        users = [
            create_test_user("late", "2024-03-01T10:00:00.000Z"),
            create_test_user("early", datetime(2024, 1, 1, tzinfo=timezone.utc)),
            create_test_user("naive", datetime(2024, 2, 1)),
        ]
        registry = build_registry(_data(users=users))
        assert registry.uuids[EntityType.USER] == {"early": "u0", "naive": "u1", "late": "u2"}

    def test_ties_keep_input_order(self):
        users = [
            create_test_user("first", "2024-01-01T00:00:00Z"),
            create_test_user("second", "2024-01-01T00:00:00Z"),
        ]
        registry = build_registry(_data(users=users))
        assert registry.uuids[EntityType.USER] == {"first": "u0", "second": "u1"}

    def test_inactive_users_get_metadata_but_no_key(self, multi_team_registry):
        assert "u-3" not in multi_team_registry.uuids[EntityType.USER]
        assert list(multi_team_registry.keys[EntityType.USER]) == ["u0", "u1"]
        assert multi_team_registry.user_metadata["u-3"].active is False

    def test_multi_team_state_keys(self, multi_team_registry):
        assert multi_team_registry.uuids[EntityType.STATE] == {
            "st-a": "s0",
            "st-b": "s1",
            "st-m1": "sqm:s0",
            "st-m2": "sqm:s1",
        }

    def test_without_default_team_states_are_flat(self, multi_team_data):
        multi_team_data.default_team_id = None
        registry = build_registry(multi_team_data)
        assert registry.uuids[EntityType.STATE] == {
            "st-a": "s0",
            "st-b": "s1",
            "st-m1": "s2",
            "st-m2": "s3",
        }

    def test_without_teams_states_are_flat(self, multi_team_data):
        multi_team_data.teams = []
        registry = build_registry(multi_team_data)
        assert sorted(registry.keys[EntityType.STATE]) == ["s0", "s1", "s2", "s3"]

    def test_legacy_team_filter(self, multi_team_data):
        multi_team_data.team_id = OTHER_TEAM_ID
        multi_team_data.default_team_id = None
        registry = build_registry(multi_team_data)

        assert registry.uuids[EntityType.STATE] == {"st-m1": "s0", "st-m2": "s1"}
        assert set(registry.state_metadata) == {"st-m1", "st-m2"}

    def test_state_metadata_keeps_team(self, multi_team_registry):
        meta = multi_team_registry.state_metadata["st-m1"]
        assert meta.team_id == OTHER_TEAM_ID
        assert meta.name == "Todo"

    def test_team_keys_are_lowercased(self, multi_team_registry):
        assert multi_team_registry.team_keys == {DEFAULT_TEAM_ID: "sqt", OTHER_TEAM_ID: "sqm"}
        assert multi_team_registry.default_team_key == "sqt"

    def test_maps_are_inverse(self, multi_team_registry):
        for entity_type in EntityType:
            keys = multi_team_registry.keys[entity_type]
            uuids = multi_team_registry.uuids[entity_type]
            assert {uuid: key for key, uuid in keys.items()} == uuids

    def test_carries_workspace_details(self):
        registry = build_registry(
            _data(url_key="acme", organization_name="Acme", teams=[TeamRef("t1", "SQT")])
        )
        assert registry.workspace_id == "ws-1"
        assert registry.url_key == "acme"
        assert registry.organization_name == "Acme"
        assert registry.transport is None

    def test_empty_registry(self):
        registry = create_empty_registry("ws-9", TransportType.HTTP)
        assert registry.workspace_id == "ws-9"
        assert registry.transport is TransportType.HTTP
        assert all(not keys for keys in registry.keys.values())


class TestProjectSlugIndex:
    def test_slug_hash_and_name_entries(self, multi_team_registry):
        assert multi_team_registry.projects_by_slug_id == {
            "launch-878d2a8b5972": "pr0",
            "878d2a8b5972": "pr0",
            "launch": "pr0",
            "platform": "pr1",
        }

    def test_non_hex_suffix_is_not_indexed(self):
        registry = build_registry(
            _data(projects=[create_test_project("p", "2024-01-01T00:00:00Z", slug_id="alpha-beta")])
        )
        assert "beta" not in registry.projects_by_slug_id
        assert registry.projects_by_slug_id["alpha-beta"] == "pr0"

    def test_name_collision_removes_name_entry(self):
        projects = [
            create_test_project("p1", "2024-01-01T00:00:00Z", name="Roadmap"),
            create_test_project("p2", "2024-01-02T00:00:00Z", name="roadmap"),
            create_test_project("p3", "2024-01-03T00:00:00Z", name="ROADMAP"),
        ]
        registry = build_registry(_data(projects=projects))

        assert "roadmap" not in registry.projects_by_slug_id
        assert "roadmap" in registry.ambiguous_project_names


class TestRegisterNewProject:
    def test_next_key_after_gap(self):
        projects = [
            create_test_project(f"p{i}", f"2024-01-0{i + 1}T00:00:00Z") for i in range(3)
        ]
        registry = build_registry(_data(projects=projects))
        project_keys = registry.keys[EntityType.PROJECT]
        # pr0, pr1, pr5
        project_keys["pr5"] = project_keys.pop("pr2")
        registry.uuids[EntityType.PROJECT]["p2"] = "pr5"

        key = register_new_project(registry, "p-new", ProjectMetadata(name="New", state="planned"))

        assert key == "pr6"
        assert registry.keys[EntityType.PROJECT]["pr6"] == "p-new"
        assert registry.uuids[EntityType.PROJECT]["p-new"] == "pr6"
        assert registry.project_metadata["p-new"].state == "planned"

    def test_first_project(self):
        registry = create_empty_registry()
        assert register_new_project(registry, "p", ProjectMetadata(name="A", state="planned")) == "pr0"

    def test_slug_entries_overwrite_and_name_does_not(self, multi_team_registry):
        metadata = ProjectMetadata(name="Launch", state="planned", slug_id="launch-878d2a8b5972")

        key = register_new_project(multi_team_registry, "p-3", metadata)

        assert key == "pr2"
        index = multi_team_registry.projects_by_slug_id
        assert index["launch-878d2a8b5972"] == "pr2"
        assert index["878d2a8b5972"] == "pr2"
        assert index["launch"] == "pr0"

    def test_new_name_is_indexed(self, multi_team_registry):
        register_new_project(multi_team_registry, "p-3", ProjectMetadata(name="Billing", state="planned"))
        assert multi_team_registry.projects_by_slug_id["billing"] == "pr2"

    def test_ambiguous_name_stays_unresolved(self):
        projects = [
            create_test_project("p1", "2024-01-01T00:00:00Z", name="Roadmap"),
            create_test_project("p2", "2024-01-02T00:00:00Z", name="Roadmap"),
        ]
        registry = build_registry(_data(projects=projects))

        register_new_project(registry, "p3", ProjectMetadata(name="Roadmap", state="planned"))

        assert "roadmap" not in registry.projects_by_slug_id


def test_teamless_states_join_default_sequence():
    states = [
        create_test_state("x", "2024-01-01T00:00:00Z", team_id=None),
        create_test_state("y", "2024-01-02T00:00:00Z", team_id=DEFAULT_TEAM_ID),
    ]
    registry = build_registry(
        _data(
            states=states,
            teams=[TeamRef(DEFAULT_TEAM_ID, "SQT")],
            default_team_id=DEFAULT_TEAM_ID,
        )
    )

    assert registry.uuids[EntityType.STATE] == {"x": "s0", "y": "s1"}
    assert registry.state_metadata["x"].team_id == ""


def test_unknown_team_states_round_trip(multi_team_data):
    multi_team_data.states.append(
        create_test_state("st-x", "2023-12-01T00:00:00Z", team_id="team-archived", name="Old")
    )
    registry = build_registry(multi_team_data)

    state_keys = registry.uuids[EntityType.STATE]
    assert len(set(state_keys.values())) == len(state_keys) == 5
    for uuid, short_key in state_keys.items():
        assert resolve_short_key(registry, EntityType.STATE, short_key) == uuid
    assert state_keys["st-x"] == "s0"
    assert state_keys["st-a"] == "s1"
    assert state_keys["st-m1"] == "sqm:s0"


def _reordered(items, ordering):
    if ordering == "reversed":
        return list(reversed(items))
    if ordering == "rotated":
        return items[1:] + items[:1]
    shuffled = list(items)
    random.Random(7).shuffle(shuffled)
    return shuffled


@pytest.mark.parametrize("ordering", ["reversed", "rotated", "shuffled"])
def test_input_order_does_not_change_keys(ordering):
    baseline = build_registry(create_multi_team_data())

    data = create_multi_team_data()
    data.users = _reordered(data.users, ordering)
    data.states = _reordered(data.states, ordering)
    data.projects = _reordered(data.projects, ordering)
    registry = build_registry(data)

    assert registry.keys == baseline.keys
    assert registry.uuids == baseline.uuids
    assert registry.projects_by_slug_id == baseline.projects_by_slug_id
