"""Shared MCP tool definitions for Dooray.

This module provides the definitive list of MCP tools. Each tool is one
``ToolSpec`` record tying a name to its input model and handler; the input
schema advertised to clients is generated from the pydantic model so the
schema and the validation can never drift apart.
"""
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional

from mcp.types import CallToolResult, Tool
from pydantic import BaseModel

from . import handlers
from . import schemas
from .client import DoorayClient

Handler = Callable[[BaseModel, DoorayClient], Awaitable[CallToolResult]]


@dataclass(frozen=True)
class ToolSpec:
    """A named, schema-validated remote operation."""

    name: str
    description: str
    input_model: type[BaseModel]
    handler: Handler

    def to_tool(self) -> Tool:
        schema = self.input_model.model_json_schema(by_alias=True)
        schema.setdefault("properties", {})
        return Tool(name=self.name, description=self.description, inputSchema=schema)


class ToolRegistry:
    """Static name -> ToolSpec mapping, fixed once constructed."""

    def __init__(self, specs: Iterable[ToolSpec]):
        self._specs: dict[str, ToolSpec] = {}
        for spec in specs:
            if spec.name in self._specs:
                raise ValueError(f"Duplicate tool name: {spec.name}")
            self._specs[spec.name] = spec

    def lookup(self, name: str) -> Optional[ToolSpec]:
        return self._specs.get(name)

    def list_all(self) -> list[ToolSpec]:
        return list(self._specs.values())

    def __contains__(self, name: str) -> bool:
        return name in self._specs

    def __len__(self) -> int:
        return len(self._specs)


TOOL_SPECS: tuple[ToolSpec, ...] = (
    # ============================================================================
    # Common Tools
    # ============================================================================
    ToolSpec(
        name="get-my-member-info",
        description="Get information about the current authenticated Dooray user, "
                    "including the organizationMemberId used by member filters.",
        input_model=schemas.GetMyMemberInfoInput,
        handler=handlers.handle_get_my_member_info,
    ),

    # ============================================================================
    # Project Tools
    # ============================================================================
    ToolSpec(
        name="get-project-list",
        description="List active Dooray projects you are a member of (paginated). "
                    "Use the returned project id with the task, tag and template tools.",
        input_model=schemas.GetProjectListInput,
        handler=handlers.handle_get_project_list,
    ),
    ToolSpec(
        name="get-project",
        description="Get detailed information about a specific project.",
        input_model=schemas.GetProjectInput,
        handler=handlers.handle_get_project,
    ),
    ToolSpec(
        name="get-task-list",
        description="List tasks in a project with filters (assignee, creator, workflow, tags, "
                    "milestone, dates). Use get-my-member-info to filter by your own member id. "
                    "Returns compact items; call get-task for full details.",
        input_model=schemas.GetTaskListInput,
        handler=handlers.handle_get_task_list,
    ),
    ToolSpec(
        name="get-task",
        description="Get full details of a task, including body, users, workflow, tags and files.",
        input_model=schemas.GetTaskInput,
        handler=handlers.handle_get_task,
    ),
    ToolSpec(
        name="create-task",
        description="Create a task (post) in a project. Check get-tag-list first: mandatory tag groups "
                    "must be satisfied. Set parentPostId to create a subtask. "
                    "Members are given as {id, type: member|group|email}.",
        input_model=schemas.CreateTaskInput,
        handler=handlers.handle_create_task,
    ),
    ToolSpec(
        name="update-task",
        description="Update a task's fields (subject, body, assignees, cc, due date, milestone, tags, "
                    "priority) and/or change its workflow (status) via workflowId. "
                    "Only provided fields are changed.",
        input_model=schemas.UpdateTaskInput,
        handler=handlers.handle_update_task,
    ),
    ToolSpec(
        name="create-task-comment",
        description="Add a comment to a task. Use upload-attachment first to attach files by id.",
        input_model=schemas.CreateTaskCommentInput,
        handler=handlers.handle_create_task_comment,
    ),
    ToolSpec(
        name="get-task-comment-list",
        description="List comments on a task (paginated, oldest first by default).",
        input_model=schemas.GetTaskCommentListInput,
        handler=handlers.handle_get_task_comment_list,
    ),
    ToolSpec(
        name="update-task-comment",
        description="Update an existing task comment's content or attachments.",
        input_model=schemas.UpdateTaskCommentInput,
        handler=handlers.handle_update_task_comment,
    ),
    ToolSpec(
        name="get-milestone-list",
        description="List milestones of a project, optionally filtered by status (open, closed).",
        input_model=schemas.GetMilestoneListInput,
        handler=handlers.handle_get_milestone_list,
    ),
    ToolSpec(
        name="get-tag-list",
        description="List project tags grouped by tag group. Each group shows mandatory "
                    "(a tag from it is required on new tasks) and selectOne (exactly one tag allowed).",
        input_model=schemas.GetTagListInput,
        handler=handlers.handle_get_tag_list,
    ),
    ToolSpec(
        name="get-tag",
        description="Get details of a single tag.",
        input_model=schemas.GetTagInput,
        handler=handlers.handle_get_tag,
    ),
    ToolSpec(
        name="create-tag",
        description='Create a tag. Use "groupName:tagName" to create it inside a tag group.',
        input_model=schemas.CreateTagInput,
        handler=handlers.handle_create_tag,
    ),
    ToolSpec(
        name="update-tag-group",
        description="Change a tag group's mandatory and selectOne settings.",
        input_model=schemas.UpdateTagGroupInput,
        handler=handlers.handle_update_tag_group,
    ),
    ToolSpec(
        name="get-project-template-list",
        description="List task templates of a project (paginated).",
        input_model=schemas.GetProjectTemplateListInput,
        handler=handlers.handle_get_project_template_list,
    ),
    ToolSpec(
        name="get-project-template",
        description="Get a task template with all default values; use them as create-task input.",
        input_model=schemas.GetProjectTemplateInput,
        handler=handlers.handle_get_project_template,
    ),
    ToolSpec(
        name="create-project-template",
        description="Create a task template with default subject, body, users, tags and priority.",
        input_model=schemas.CreateProjectTemplateInput,
        handler=handlers.handle_create_project_template,
    ),
    ToolSpec(
        name="update-project-template",
        description="Update an existing task template.",
        input_model=schemas.UpdateProjectTemplateInput,
        handler=handlers.handle_update_project_template,
    ),
    ToolSpec(
        name="delete-project-template",
        description="Delete a task template. This cannot be undone.",
        input_model=schemas.DeleteProjectTemplateInput,
        handler=handlers.handle_delete_project_template,
    ),
    ToolSpec(
        name="get-project-member-list",
        description="List project members with name, email and role.",
        input_model=schemas.GetProjectMemberListInput,
        handler=handlers.handle_get_project_member_list,
    ),
    ToolSpec(
        name="get-project-member-group-list",
        description="List member groups of a project. Group ids can be used as {type: group} members.",
        input_model=schemas.GetProjectMemberGroupListInput,
        handler=handlers.handle_get_project_member_group_list,
    ),
    ToolSpec(
        name="get-project-workflow-list",
        description="List workflows (task statuses) of a project. "
                    "Use a workflow id with update-task to change a task's status.",
        input_model=schemas.GetProjectWorkflowListInput,
        handler=handlers.handle_get_project_workflow_list,
    ),
    ToolSpec(
        name="upload-attachment",
        description="Upload a local file as an attachment to a task.",
        input_model=schemas.UploadAttachmentInput,
        handler=handlers.handle_upload_attachment,
    ),
    ToolSpec(
        name="get-attachment-list",
        description="List files attached to a task.",
        input_model=schemas.GetAttachmentListInput,
        handler=handlers.handle_get_attachment_list,
    ),
    ToolSpec(
        name="get-attachment-metadata",
        description="Get metadata (name, size, mime type) of a task attachment.",
        input_model=schemas.GetAttachmentMetadataInput,
        handler=handlers.handle_get_attachment_metadata,
    ),
    ToolSpec(
        name="download-attachment",
        description="Download a task attachment. With savePath the file is written to disk, "
                    "otherwise its content is returned base64-encoded.",
        input_model=schemas.DownloadAttachmentInput,
        handler=handlers.handle_download_attachment,
    ),
    ToolSpec(
        name="delete-attachment",
        description="Delete an attachment from a task.",
        input_model=schemas.DeleteAttachmentInput,
        handler=handlers.handle_delete_attachment,
    ),

    # ============================================================================
    # Drive Tools
    # ============================================================================
    ToolSpec(
        name="get-drive-list",
        description="List drives accessible to you (personal and project drives).",
        input_model=schemas.GetDriveListInput,
        handler=handlers.handle_get_drive_list,
    ),
    ToolSpec(
        name="get-drive-file-list",
        description='List files and folders in a drive. Use parentId "root" for the top level.',
        input_model=schemas.GetDriveFileListInput,
        handler=handlers.handle_get_drive_file_list,
    ),
    ToolSpec(
        name="get-drive-file-meta",
        description="Get metadata of a drive file or folder.",
        input_model=schemas.GetDriveFileMetaInput,
        handler=handlers.handle_get_drive_file_meta,
    ),
    ToolSpec(
        name="create-drive-folder",
        description="Create a folder inside a drive folder.",
        input_model=schemas.CreateDriveFolderInput,
        handler=handlers.handle_create_drive_folder,
    ),
    ToolSpec(
        name="rename-drive-file",
        description="Rename a drive file or folder.",
        input_model=schemas.RenameDriveFileInput,
        handler=handlers.handle_rename_drive_file,
    ),
    ToolSpec(
        name="move-drive-file",
        description='Move a drive file or folder to another folder (use "trash" to trash it).',
        input_model=schemas.MoveDriveFileInput,
        handler=handlers.handle_move_drive_file,
    ),
    ToolSpec(
        name="copy-drive-file",
        description="Copy a drive file to another folder, possibly in another drive.",
        input_model=schemas.CopyDriveFileInput,
        handler=handlers.handle_copy_drive_file,
    ),
    ToolSpec(
        name="delete-drive-file",
        description="Permanently delete a drive file. The file must already be in the trash.",
        input_model=schemas.DeleteDriveFileInput,
        handler=handlers.handle_delete_drive_file,
    ),
    ToolSpec(
        name="upload-drive-file",
        description="Upload a local file into a drive folder.",
        input_model=schemas.UploadDriveFileInput,
        handler=handlers.handle_upload_drive_file,
    ),
    ToolSpec(
        name="download-drive-file",
        description="Download a drive file. With savePath (directory or file path) it is written to disk, "
                    "otherwise its content is returned base64-encoded.",
        input_model=schemas.DownloadDriveFileInput,
        handler=handlers.handle_download_drive_file,
    ),
    ToolSpec(
        name="update-drive-file",
        description="Upload a new version of an existing drive file from a local file.",
        input_model=schemas.UpdateDriveFileInput,
        handler=handlers.handle_update_drive_file,
    ),

    # ============================================================================
    # Wiki Tools
    # ============================================================================
    ToolSpec(
        name="get-wiki-list",
        description="List wikis accessible to you (one per project).",
        input_model=schemas.GetWikiListInput,
        handler=handlers.handle_get_wiki_list,
    ),
    ToolSpec(
        name="get-wiki-page-list",
        description="List pages of a wiki; give parentPageId to list child pages.",
        input_model=schemas.GetWikiPageListInput,
        handler=handlers.handle_get_wiki_page_list,
    ),
    ToolSpec(
        name="get-wiki-page",
        description="Get a wiki page with its content.",
        input_model=schemas.GetWikiPageInput,
        handler=handlers.handle_get_wiki_page,
    ),
    ToolSpec(
        name="create-wiki-page",
        description="Create a markdown wiki page under a parent page.",
        input_model=schemas.CreateWikiPageInput,
        handler=handlers.handle_create_wiki_page,
    ),
    ToolSpec(
        name="update-wiki-page",
        description="Update a wiki page's title and/or content.",
        input_model=schemas.UpdateWikiPageInput,
        handler=handlers.handle_update_wiki_page,
    ),
    ToolSpec(
        name="get-wiki-page-comment-list",
        description="List comments on a wiki page.",
        input_model=schemas.GetWikiPageCommentListInput,
        handler=handlers.handle_get_wiki_page_comment_list,
    ),
    ToolSpec(
        name="get-wiki-page-comment",
        description="Get a single wiki page comment.",
        input_model=schemas.GetWikiPageCommentInput,
        handler=handlers.handle_get_wiki_page_comment,
    ),
    ToolSpec(
        name="create-wiki-page-comment",
        description="Add a comment to a wiki page.",
        input_model=schemas.CreateWikiPageCommentInput,
        handler=handlers.handle_create_wiki_page_comment,
    ),
    ToolSpec(
        name="update-wiki-page-comment",
        description="Update a wiki page comment.",
        input_model=schemas.UpdateWikiPageCommentInput,
        handler=handlers.handle_update_wiki_page_comment,
    ),
    ToolSpec(
        name="delete-wiki-page-comment",
        description="Delete a wiki page comment.",
        input_model=schemas.DeleteWikiPageCommentInput,
        handler=handlers.handle_delete_wiki_page_comment,
    ),
)


def build_registry() -> ToolRegistry:
    """Build the registry of every Dooray tool."""
    return ToolRegistry(TOOL_SPECS)


def get_tools() -> list[Tool]:
    """Get the list of all MCP tools for Dooray."""
    return [spec.to_tool() for spec in TOOL_SPECS]
