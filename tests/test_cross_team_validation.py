"""Tests for cross-team state and label validation."""

from linear_mcp.registry import build_registry
from linear_mcp.validation import (
    validate_label_belongs_to_team,
    validate_label_key_prefix,
    validate_state_belongs_to_team,
    validate_state_key_prefix,
)

from tests.test_utils import DEFAULT_TEAM_ID, OTHER_TEAM_ID


class TestStateKeyPrefix:
    def test_default_team_key_for_default_team(self, multi_team_registry):
        assert validate_state_key_prefix("s0", DEFAULT_TEAM_ID, multi_team_registry).valid

    def test_default_team_key_for_other_team(self, multi_team_registry):
        result = validate_state_key_prefix("s0", OTHER_TEAM_ID, multi_team_registry)

        assert not result.valid
        assert result.error == "State 's0' is a SQT state key, but the issue is in team SQM"
        assert result.suggestion == (
            "Use 'sqm:s0', 'sqm:s1', etc. for team SQM states, "
            "or check workspace_metadata for available states"
        )

    def test_matching_prefix(self, multi_team_registry):
        assert validate_state_key_prefix("sqm:s1", OTHER_TEAM_ID, multi_team_registry).valid
        assert validate_state_key_prefix("SQM:s1", OTHER_TEAM_ID, multi_team_registry).valid

    def test_wrong_prefix(self, multi_team_registry):
        result = validate_state_key_prefix("sqm:s0", DEFAULT_TEAM_ID, multi_team_registry)

        assert not result.valid
        assert result.error == "State 'sqm:s0' belongs to team SQM, but the issue is in team SQT"
        assert result.suggestion.startswith("Use 'sqt:s0', 'sqt:s1', etc. for team SQT")

    def test_non_state_input_passes(self, multi_team_registry):
        for value in ("u0", "pr1", "Todo", "In Progress"):
            assert validate_state_key_prefix(value, OTHER_TEAM_ID, multi_team_registry).valid

    def test_unknown_target_team(self, multi_team_registry):
        result = validate_state_key_prefix("s0", "team-unknown", multi_team_registry)

        assert not result.valid
        assert result.error.endswith("but the issue is in team the target team")
        assert result.suggestion.startswith("Check workspace_metadata to see state keys")

    def test_without_default_team_everything_passes(self, multi_team_data):
        multi_team_data.default_team_id = None
        registry = build_registry(multi_team_data)
        assert validate_state_key_prefix("s0", OTHER_TEAM_ID, registry).valid


class TestStateBelongsToTeam:
    def test_same_team(self, multi_team_registry):
        result = validate_state_belongs_to_team(
            "sqm:s0", "st-m1", OTHER_TEAM_ID, multi_team_registry
        )
        assert result.valid

    def test_other_team(self, multi_team_registry):
        result = validate_state_belongs_to_team(
            "sqm:s0", "st-m1", DEFAULT_TEAM_ID, multi_team_registry
        )

        assert not result.valid
        assert result.error == "State 'sqm:s0' belongs to team SQM, but the issue is in team SQT"
        assert result.suggestion == "Use workspace_metadata to see available states for team SQT"

    def test_state_name_input_has_no_suggestion(self, multi_team_registry):
        result = validate_state_belongs_to_team(
            "Todo", "st-m1", DEFAULT_TEAM_ID, multi_team_registry
        )

        assert not result.valid
        assert result.suggestion is None

    def test_unknown_state_passes(self, multi_team_registry):
        assert validate_state_belongs_to_team(
            "s9", "st-404", DEFAULT_TEAM_ID, multi_team_registry
        ).valid


class TestLabelKeyPrefix:
    def test_unprefixed_label_passes(self, multi_team_registry):
        assert validate_label_key_prefix("Bug", OTHER_TEAM_ID, multi_team_registry).valid

    def test_matching_prefix(self, multi_team_registry):
        assert validate_label_key_prefix("SQT:Bug", DEFAULT_TEAM_ID, multi_team_registry).valid

    def test_wrong_prefix(self, multi_team_registry):
        result = validate_label_key_prefix("sqm:Bug", DEFAULT_TEAM_ID, multi_team_registry)

        assert not result.valid
        assert result.error == "Label 'sqm:Bug' has team prefix SQM, but the issue is in team SQT"
        assert result.suggestion == (
            "Use 'sqt:Bug' for team SQT, or use the label name without a prefix "
            "if it's a workspace label"
        )

    def test_colon_in_label_name(self, multi_team_registry):
        result = validate_label_key_prefix(
            "sqm:Priority:High", DEFAULT_TEAM_ID, multi_team_registry
        )
        assert result.suggestion.startswith("Use 'sqt:Priority:High'")


class TestLabelBelongsToTeam:
    def test_workspace_label_passes(self, multi_team_registry):
        assert validate_label_belongs_to_team(
            "Bug", "lbl-1", DEFAULT_TEAM_ID, multi_team_registry, label_team_id=None
        ).valid

    def test_same_team(self, multi_team_registry):
        assert validate_label_belongs_to_team(
            "Bug", "lbl-1", DEFAULT_TEAM_ID, multi_team_registry, label_team_id=DEFAULT_TEAM_ID
        ).valid

    def test_other_team(self, multi_team_registry):
        result = validate_label_belongs_to_team(
            "Bug", "lbl-1", DEFAULT_TEAM_ID, multi_team_registry, label_team_id=OTHER_TEAM_ID
        )

        assert not result.valid
        assert result.error == "Label 'Bug' belongs to team SQM, but the issue is in team SQT"
        assert result.suggestion == (
            "Use workspace_metadata to see available labels for team SQT, "
            "or use a workspace-level label"
        )

    def test_unknown_label_team(self, multi_team_registry):
        result = validate_label_belongs_to_team(
            "Bug", "lbl-1", DEFAULT_TEAM_ID, multi_team_registry, label_team_id="team-x"
        )
        assert result.error == "Label 'Bug' belongs to team another team, but the issue is in team SQT"
