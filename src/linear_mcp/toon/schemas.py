"""
Predefined TOON schemas.

Lookup tables (``_users``, ``_states``...) map short keys to display data so
data rows can reference entities by key. Data, full-entity and write-result
schemas describe the sections tools emit.
"""

from .models import ToonSchema

# Lookup tables

USER_LOOKUP_SCHEMA = ToonSchema("_users", ["key", "name", "displayName", "email", "role"])
STATE_LOOKUP_SCHEMA = ToonSchema("_states", ["key", "name", "type"])
PROJECT_LOOKUP_SCHEMA = ToonSchema("_projects", ["key", "name", "state"])
TEAM_LOOKUP_SCHEMA = ToonSchema(
    "_teams", ["key", "name", "cyclesEnabled", "cycleDuration", "estimationType"]
)
CYCLE_LOOKUP_SCHEMA = ToonSchema("_cycles", ["num", "name", "start", "end", "active", "progress"])
LABEL_LOOKUP_SCHEMA = ToonSchema("_labels", ["name", "color"])

# Data tables

ISSUE_SCHEMA = ToonSchema(
    "issues",
    [
        "identifier",
        "title",
        "state",
        "assignee",
        "priority",
        "estimate",
        "project",
        "cycle",
        "dueDate",
        "labels",
        "parent",
        "team",
        "url",
        "desc",
        "createdAt",
        "creator",
    ],
)
COMMENT_SCHEMA = ToonSchema("comments", ["issue", "user", "body", "createdAt"])
COMMENT_SCHEMA_WITH_ID = ToonSchema("comments", ["id", "issue", "user", "body", "createdAt"])
RELATION_SCHEMA = ToonSchema("relations", ["from", "type", "to"])
RELATION_SCHEMA_WITH_ID = ToonSchema("relations", ["id", "from", "type", "to"])
ATTACHMENT_SCHEMA = ToonSchema("attachments", ["issue", "title", "subtitle", "url", "sourceType"])

# Full entities (dedicated list tools)

TEAM_SCHEMA = ToonSchema(
    "teams",
    [
        "key",
        "name",
        "description",
        "cyclesEnabled",
        "cycleDuration",
        "estimationType",
        "activeCycle",
    ],
)
USER_SCHEMA = ToonSchema("users", ["key", "name", "displayName", "email", "active"])
CYCLE_SCHEMA = ToonSchema("cycles", ["num", "name", "start", "end", "active", "progress"])
PROJECT_SCHEMA = ToonSchema(
    "projects",
    [
        "key",
        "name",
        "description",
        "state",
        "priority",
        "progress",
        "lead",
        "teams",
        "startDate",
        "targetDate",
        "health",
    ],
)
MILESTONE_SCHEMA = ToonSchema(
    "milestones", ["key", "name", "status", "targetDate", "progress", "project"]
)

PAGINATION_SCHEMA = ToonSchema("_pagination", ["hasMore", "cursor", "fetched", "total"])

# Write results

WRITE_RESULT_META_SCHEMA = ToonSchema("_meta", ["action", "succeeded", "failed", "total"])
WRITE_RESULT_SCHEMA = ToonSchema("results", ["index", "status", "identifier", "error"])
CHANGES_SCHEMA = ToonSchema("changes", ["identifier", "field", "before", "after"])
COMMENT_WRITE_RESULT_SCHEMA = ToonSchema("results", ["index", "status", "issue", "error"])
CREATED_COMMENT_SCHEMA = ToonSchema("comments", ["issue", "body", "createdAt"])
PROJECT_WRITE_RESULT_SCHEMA = ToonSchema("results", ["index", "status", "key", "error"])
CREATED_PROJECT_SCHEMA = ToonSchema("created", ["key", "name", "state"])
PROJECT_CHANGES_SCHEMA = ToonSchema("changes", ["key", "field", "before", "after"])

# Sprint gap analysis: no_estimate, no_assignee, stale, blocked, priority_mismatch
GAP_SCHEMA = ToonSchema("_gaps", ["type", "count", "issues"])


LOOKUP_SCHEMAS = {
    "USER": USER_LOOKUP_SCHEMA,
    "STATE": STATE_LOOKUP_SCHEMA,
    "PROJECT": PROJECT_LOOKUP_SCHEMA,
    "TEAM": TEAM_LOOKUP_SCHEMA,
    "CYCLE": CYCLE_LOOKUP_SCHEMA,
    "LABEL": LABEL_LOOKUP_SCHEMA,
}

DATA_SCHEMAS = {
    "ISSUE": ISSUE_SCHEMA,
    "COMMENT": COMMENT_SCHEMA,
    "COMMENT_WITH_ID": COMMENT_SCHEMA_WITH_ID,
    "RELATION": RELATION_SCHEMA,
    "RELATION_WITH_ID": RELATION_SCHEMA_WITH_ID,
    "ATTACHMENT": ATTACHMENT_SCHEMA,
}

FULL_ENTITY_SCHEMAS = {
    "TEAM": TEAM_SCHEMA,
    "USER": USER_SCHEMA,
    "CYCLE": CYCLE_SCHEMA,
    "PROJECT": PROJECT_SCHEMA,
    "MILESTONE": MILESTONE_SCHEMA,
}

WRITE_SCHEMAS = {
    "META": WRITE_RESULT_META_SCHEMA,
    "RESULT": WRITE_RESULT_SCHEMA,
    "CHANGES": CHANGES_SCHEMA,
    "COMMENT_RESULT": COMMENT_WRITE_RESULT_SCHEMA,
    "CREATED_COMMENT": CREATED_COMMENT_SCHEMA,
    "PROJECT_RESULT": PROJECT_WRITE_RESULT_SCHEMA,
    "CREATED_PROJECT": CREATED_PROJECT_SCHEMA,
    "PROJECT_CHANGES": PROJECT_CHANGES_SCHEMA,
}

ALL_SCHEMAS = {
    **LOOKUP_SCHEMAS,
    **DATA_SCHEMAS,
    "TEAM_FULL": TEAM_SCHEMA,
    "USER_FULL": USER_SCHEMA,
    "CYCLE_FULL": CYCLE_SCHEMA,
    "PROJECT_FULL": PROJECT_SCHEMA,
    "MILESTONE_FULL": MILESTONE_SCHEMA,
    "PAGINATION": PAGINATION_SCHEMA,
    "WRITE_META": WRITE_RESULT_META_SCHEMA,
    "WRITE_RESULT": WRITE_RESULT_SCHEMA,
    "WRITE_CHANGES": CHANGES_SCHEMA,
    "COMMENT_WRITE_RESULT": COMMENT_WRITE_RESULT_SCHEMA,
    "CREATED_COMMENT": CREATED_COMMENT_SCHEMA,
    "PROJECT_WRITE_RESULT": PROJECT_WRITE_RESULT_SCHEMA,
    "CREATED_PROJECT": CREATED_PROJECT_SCHEMA,
    "PROJECT_CHANGES": PROJECT_CHANGES_SCHEMA,
    "GAP": GAP_SCHEMA,
}
