"""Node type schema catalog.

The catalog maps a node's ``nodeType`` to the field descriptors its
configuration form declares. Validators receive a catalog explicitly;
nothing in the engine looks one up from global state. An unknown node
type simply has no field constraints.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from flowguard.core.config import settings
from flowguard.core.logging import get_logger
from flowguard.schemas.node_schema import NodeTypeSchema
from flowguard.services.workflow.exceptions import SchemaCatalogError

logger = get_logger(__name__)

_SCHEMA_LIST = TypeAdapter(list[NodeTypeSchema])


class NodeSchemaCatalog:
    """Read-only lookup of NodeTypeSchema by node type.

    Example:
        >>> catalog = NodeSchemaCatalog.from_schemas([
        ...     {"type": "http", "label": "HTTP", "category": "action", "fields": []},
        ... ])
        >>> "http" in catalog
        True
    """

    __slots__ = ("_schemas",)

    def __init__(self, schemas: Iterable[NodeTypeSchema] = ()) -> None:
        self._schemas: dict[str, NodeTypeSchema] = {}
        for schema in schemas:
            if schema.type in self._schemas:
                raise SchemaCatalogError(
                    "<in-memory>", f"duplicate node type '{schema.type}'"
                )
            self._schemas[schema.type] = schema

    @classmethod
    def from_schemas(
        cls,
        schemas: Iterable[NodeTypeSchema | Mapping[str, Any]],
    ) -> NodeSchemaCatalog:
        """Build a catalog from models or plain dicts (camelCase keys allowed)."""
        try:
            return cls(
                s if isinstance(s, NodeTypeSchema) else NodeTypeSchema.model_validate(s)
                for s in schemas
            )
        except ValidationError as exc:
            raise SchemaCatalogError("<in-memory>", str(exc)) from exc

    @classmethod
    def from_json_file(cls, path: str | Path) -> NodeSchemaCatalog:
        """Load a catalog from a JSON file holding a list of node type schemas.

        Raises:
            SchemaCatalogError: If the file cannot be read or its content is
                not a valid list of node type schemas.
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SchemaCatalogError(str(path), f"cannot read file: {exc}") from exc

        try:
            schemas = _SCHEMA_LIST.validate_json(raw)
        except ValidationError as exc:
            raise SchemaCatalogError(str(path), str(exc)) from exc

        catalog = cls(schemas)
        logger.debug(f"Loaded {len(catalog)} node type schemas from {path}")
        return catalog

    def get(self, node_type: str) -> NodeTypeSchema | None:
        return self._schemas.get(node_type)

    def by_category(self, category: str) -> list[NodeTypeSchema]:
        return [s for s in self._schemas.values() if s.category == category]

    @property
    def node_types(self) -> list[str]:
        return list(self._schemas)

    def __contains__(self, node_type: object) -> bool:
        return node_type in self._schemas

    def __iter__(self) -> Iterator[NodeTypeSchema]:
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)

    def __repr__(self) -> str:
        return f"NodeSchemaCatalog(types={len(self._schemas)})"


# =============================================================================
# Built-in catalog of the editor's node types
# =============================================================================

_LABEL_FIELD: dict[str, Any] = {
    "name": "label",
    "label": "Name",
    "type": "text",
    "required": True,
    "description": "A descriptive name for this node",
}

_DESCRIPTION_FIELD: dict[str, Any] = {
    "name": "description",
    "label": "Description",
    "type": "textarea",
}

_CREDENTIAL_FIELD: dict[str, Any] = {
    "name": "credentialId",
    "label": "Credential",
    "type": "credential",
}

_PROVIDER_FIELD: dict[str, Any] = {
    "name": "provider",
    "label": "Provider",
    "type": "select",
    "required": True,
    "defaultValue": "openai",
}

_DEFAULT_SCHEMAS: list[dict[str, Any]] = [
    # Triggers
    {
        "type": "webhook",
        "label": "Webhook",
        "category": "trigger",
        "description": "Trigger workflow via HTTP request",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "path", "label": "Path", "type": "text"},
            {"name": "method", "label": "HTTP Method", "type": "select", "defaultValue": "POST"},
            {"name": "authType", "label": "Authentication", "type": "select", "defaultValue": "none"},
            {"name": "secret", "label": "Secret", "type": "text"},
            {
                "name": "priority",
                "label": "Priority",
                "type": "number",
                "defaultValue": 1,
                "validation": {"min": 1, "max": 10},
            },
        ],
    },
    {
        "type": "schedule",
        "label": "Schedule",
        "category": "trigger",
        "description": "Trigger workflow on a schedule",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "cron", "label": "Cron Expression", "type": "text", "required": True},
            {"name": "timezone", "label": "Timezone", "type": "text", "defaultValue": "UTC"},
        ],
    },
    {
        "type": "manual",
        "label": "Manual",
        "category": "trigger",
        "description": "Trigger workflow manually",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "inputSchema", "label": "Input Schema", "type": "json"},
        ],
    },
    # Actions
    {
        "type": "http",
        "label": "HTTP Request",
        "category": "action",
        "description": "Make HTTP requests to external APIs",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {
                "name": "url",
                "label": "URL",
                "type": "expression",
                "required": True,
                "validation": {"pattern": r"^(https?://|\{\{)"},
            },
            {"name": "method", "label": "Method", "type": "select", "defaultValue": "GET"},
            {"name": "headers", "label": "Headers", "type": "json"},
            {"name": "body", "label": "Body", "type": "expression"},
            {
                "name": "timeout",
                "label": "Timeout (seconds)",
                "type": "number",
                "defaultValue": 30,
                "validation": {"min": 1, "max": 300},
            },
            _CREDENTIAL_FIELD,
        ],
    },
    {
        "type": "transform",
        "label": "Transform",
        "category": "action",
        "description": "Transform and manipulate data",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "expression", "label": "Expression", "type": "expression", "required": True},
            {"name": "mapping", "label": "Field Mapping", "type": "json"},
        ],
    },
    {
        "type": "script",
        "label": "Run Script",
        "category": "action",
        "description": "Execute custom code",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "language", "label": "Language", "type": "select", "defaultValue": "javascript"},
            {"name": "code", "label": "Code", "type": "textarea", "required": True},
        ],
    },
    {
        "type": "email",
        "label": "Send Email",
        "category": "action",
        "description": "Send email notifications",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "to", "label": "To", "type": "expression", "required": True},
            {"name": "subject", "label": "Subject", "type": "expression", "required": True},
            {"name": "bodyTemplate", "label": "Body", "type": "textarea", "required": True},
            _CREDENTIAL_FIELD,
        ],
    },
    {
        "type": "slack_send_message",
        "label": "Slack: Send Message",
        "category": "action",
        "description": "Send a message to a Slack channel",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "channel", "label": "Channel ID", "type": "expression", "required": True},
            {"name": "text", "label": "Message Text", "type": "expression"},
            {"name": "blocks", "label": "Block Kit Blocks", "type": "json"},
            _CREDENTIAL_FIELD,
        ],
    },
    {
        "type": "slack_send_dm",
        "label": "Slack: Send DM",
        "category": "action",
        "description": "Send a direct message to a Slack user",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "user", "label": "User", "type": "expression", "required": True},
            {"name": "text", "label": "Message Text", "type": "expression"},
            {"name": "blocks", "label": "Block Kit Blocks", "type": "json"},
            _CREDENTIAL_FIELD,
        ],
    },
    {
        "type": "slack_update_message",
        "label": "Slack: Update Message",
        "category": "action",
        "description": "Update an existing Slack message",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "channel", "label": "Channel ID", "type": "expression", "required": True},
            {"name": "ts", "label": "Message Timestamp", "type": "expression", "required": True},
            {"name": "text", "label": "New Text", "type": "expression"},
            {"name": "blocks", "label": "Block Kit Blocks", "type": "json"},
            _CREDENTIAL_FIELD,
        ],
    },
    {
        "type": "slack_add_reaction",
        "label": "Slack: Add Reaction",
        "category": "action",
        "description": "Add an emoji reaction to a message",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "channel", "label": "Channel ID", "type": "expression", "required": True},
            {"name": "timestamp", "label": "Message Timestamp", "type": "expression", "required": True},
            {"name": "emoji", "label": "Emoji", "type": "text", "required": True},
            _CREDENTIAL_FIELD,
        ],
    },
    # AI
    {
        "type": "ai_chat",
        "label": "AI: Chat Completion",
        "category": "ai",
        "description": "Generate AI responses with LLM",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {
                "name": "provider",
                "label": "Provider",
                "type": "select",
                "required": True,
                "defaultValue": "openai",
            },
            {"name": "model", "label": "Model", "type": "select", "required": True},
            {"name": "systemPrompt", "label": "System Prompt", "type": "textarea"},
            {"name": "prompt", "label": "User Prompt", "type": "expression", "required": True},
            {
                "name": "temperature",
                "label": "Temperature",
                "type": "number",
                "defaultValue": 0.7,
                "validation": {"min": 0, "max": 2},
            },
            {
                "name": "maxTokens",
                "label": "Max Tokens",
                "type": "number",
                "defaultValue": 1024,
                "validation": {"min": 1, "max": 128000},
            },
            _CREDENTIAL_FIELD,
        ],
    },
    {
        "type": "ai_summarize",
        "label": "AI: Summarize",
        "category": "ai",
        "description": "Summarize text using AI",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            _PROVIDER_FIELD,
            {"name": "text", "label": "Text to Summarize", "type": "expression", "required": True},
            {"name": "maxLength", "label": "Max Summary Length", "type": "number", "defaultValue": 200},
            {"name": "style", "label": "Summary Style", "type": "select", "defaultValue": "concise"},
            _CREDENTIAL_FIELD,
        ],
    },
    {
        "type": "ai_classify",
        "label": "AI: Classify",
        "category": "ai",
        "description": "Classify text into categories",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            _PROVIDER_FIELD,
            {"name": "text", "label": "Text to Classify", "type": "expression", "required": True},
            {"name": "categories", "label": "Categories", "type": "multiselect", "required": True},
            {"name": "multiLabel", "label": "Allow Multiple Labels", "type": "boolean", "defaultValue": False},
            _CREDENTIAL_FIELD,
        ],
    },
    {
        "type": "ai_extract",
        "label": "AI: Extract Entities",
        "category": "ai",
        "description": "Extract named entities from text",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            _PROVIDER_FIELD,
            {"name": "text", "label": "Text to Analyze", "type": "expression", "required": True},
            {"name": "entityTypes", "label": "Entity Types", "type": "multiselect"},
            _CREDENTIAL_FIELD,
        ],
    },
    {
        "type": "ai_embed",
        "label": "AI: Generate Embeddings",
        "category": "ai",
        "description": "Create vector embeddings for text",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            _PROVIDER_FIELD,
            {
                "name": "model",
                "label": "Model",
                "type": "select",
                "required": True,
                "defaultValue": "text-embedding-3-small",
            },
            {"name": "text", "label": "Text to Embed", "type": "expression", "required": True},
            _CREDENTIAL_FIELD,
        ],
    },
    # Control
    {
        "type": "conditional",
        "label": "Conditional",
        "category": "control",
        "description": "Branch based on conditions",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "condition", "label": "Condition", "type": "expression", "required": True},
            {"name": "trueLabel", "label": "True Branch Label", "type": "text", "defaultValue": "Yes"},
            {"name": "falseLabel", "label": "False Branch Label", "type": "text", "defaultValue": "No"},
        ],
    },
    {
        "type": "loop",
        "label": "Loop",
        "category": "control",
        "description": "Iterate over arrays",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "source", "label": "Source Array", "type": "expression", "required": True},
            {
                "name": "itemVariable",
                "label": "Item Variable",
                "type": "text",
                "required": True,
                "defaultValue": "item",
                "validation": {"pattern": r"^[A-Za-z_][A-Za-z0-9_]*$", "maxLength": 64},
            },
            {"name": "indexVariable", "label": "Index Variable", "type": "text", "defaultValue": "index"},
            {
                "name": "maxIterations",
                "label": "Max Iterations",
                "type": "number",
                "defaultValue": 1000,
                "validation": {"min": 1, "max": 10000},
            },
            {"name": "onError", "label": "On Error", "type": "select", "defaultValue": "stop"},
        ],
    },
    {
        "type": "parallel",
        "label": "Parallel",
        "category": "control",
        "description": "Execute branches concurrently",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {"name": "errorStrategy", "label": "Error Strategy", "type": "select", "defaultValue": "fail_fast"},
            {
                "name": "maxConcurrency",
                "label": "Max Concurrency",
                "type": "number",
                "defaultValue": 0,
                "validation": {"min": 0, "max": 100},
            },
        ],
    },
    {
        "type": "delay",
        "label": "Delay",
        "category": "control",
        "description": "Wait for a specified time",
        "fields": [
            _LABEL_FIELD,
            _DESCRIPTION_FIELD,
            {
                "name": "duration",
                "label": "Duration (seconds)",
                "type": "number",
                "required": True,
                "defaultValue": 5,
                "validation": {"min": 1, "max": 86400},
            },
        ],
    },
]


def builtin_catalog() -> NodeSchemaCatalog:
    """Catalog of the node types shipped with the editor."""
    return NodeSchemaCatalog.from_schemas(_DEFAULT_SCHEMAS)


def default_catalog() -> NodeSchemaCatalog:
    """Catalog from settings.SCHEMA_CATALOG_PATH, or the built-in one."""
    if settings.SCHEMA_CATALOG_PATH is not None:
        return NodeSchemaCatalog.from_json_file(settings.SCHEMA_CATALOG_PATH)
    return builtin_catalog()


def dump_catalog(catalog: NodeSchemaCatalog) -> str:
    """Serialize a catalog to the JSON format read by from_json_file."""
    return json.dumps(
        [s.model_dump(by_alias=True, exclude_unset=True) for s in catalog],
        indent=2,
    )


__all__ = [
    "NodeSchemaCatalog",
    "builtin_catalog",
    "default_catalog",
    "dump_catalog",
]
