"""Tests for the tool registry."""
import pytest

from dooray_mcp import handlers, schemas
from dooray_mcp.tools import TOOL_SPECS, ToolRegistry, ToolSpec, build_registry, get_tools

EXPECTED_TOOLS = {
    "get-my-member-info",
    "get-project-list", "get-project", "get-task-list", "get-task", "create-task", "update-task",
    "create-task-comment", "get-task-comment-list", "update-task-comment", "get-milestone-list",
    "get-tag-list", "get-tag", "create-tag", "update-tag-group",
    "get-project-template-list", "get-project-template", "create-project-template",
    "update-project-template", "delete-project-template",
    "get-project-member-list", "get-project-member-group-list", "get-project-workflow-list",
    "upload-attachment", "get-attachment-list", "get-attachment-metadata",
    "download-attachment", "delete-attachment",
    "get-drive-list", "get-drive-file-list", "get-drive-file-meta", "create-drive-folder",
    "rename-drive-file", "move-drive-file", "copy-drive-file", "delete-drive-file",
    "upload-drive-file", "download-drive-file", "update-drive-file",
    "get-wiki-list", "get-wiki-page-list", "get-wiki-page", "create-wiki-page", "update-wiki-page",
    "get-wiki-page-comment-list", "get-wiki-page-comment", "create-wiki-page-comment",
    "update-wiki-page-comment", "delete-wiki-page-comment",
}


class TestToolRegistry:
    """Test registry construction and lookup."""

    def test_full_tool_surface(self):
        registry = build_registry()
        assert {spec.name for spec in registry.list_all()} == EXPECTED_TOOLS
        assert len(registry) == len(EXPECTED_TOOLS)

    def test_lookup(self):
        registry = build_registry()
        spec = registry.lookup("create-task")
        assert spec.input_model is schemas.CreateTaskInput
        assert spec.handler is handlers.handle_create_task
        assert registry.lookup("no-such-tool") is None
        assert "get-task" in registry

    def test_duplicate_names_rejected(self):
        spec = TOOL_SPECS[0]
        with pytest.raises(ValueError, match="Duplicate tool name"):
            ToolRegistry([spec, spec])

    def test_specs_are_immutable(self):
        with pytest.raises(Exception):
            TOOL_SPECS[0].name = "renamed"

    def test_list_all_preserves_definition_order(self):
        names = [spec.name for spec in build_registry().list_all()]
        assert names == [spec.name for spec in TOOL_SPECS]


class TestToolSchemas:
    """Test the MCP tool definitions generated from input models."""

    def test_every_tool_has_object_schema_and_description(self):
        for tool in get_tools():
            assert tool.description
            assert tool.inputSchema["type"] == "object"
            assert "properties" in tool.inputSchema

    def test_schema_uses_camel_case_and_required(self):
        tool = next(t for t in get_tools() if t.name == "create-task")
        properties = tool.inputSchema["properties"]
        assert "projectId" in properties
        assert "parentPostId" in properties
        assert "project_id" not in properties
        assert set(tool.inputSchema["required"]) == {"projectId", "subject"}

    def test_empty_input_schema(self):
        tool = ToolSpec(
            name="x", description="x", input_model=schemas.GetMyMemberInfoInput,
            handler=handlers.handle_get_my_member_info,
        ).to_tool()
        assert tool.inputSchema["properties"] == {}
