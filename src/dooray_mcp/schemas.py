"""Pydantic input schemas for MCP tool arguments.

Field names are snake_case in Python and camelCase on the wire (the MCP
input schema and the Dooray API both use camelCase). Each tool has exactly
one input model; the registry exports its JSON schema as the tool's
``inputSchema``.
"""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


Priority = Literal["highest", "high", "normal", "low", "lowest", "none"]
MimeType = Literal["text/x-markdown", "text/html"]


class ToolInput(BaseModel):
    """Base for all tool inputs: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_api(self, *exclude: str) -> dict:
        """Dump explicitly provided fields in wire (camelCase) form."""
        return self.model_dump(by_alias=True, exclude_unset=True, exclude=set(exclude))


class PageInput(ToolInput):
    page: Optional[int] = Field(None, ge=0, description="Page number (default: 0)")
    size: Optional[int] = Field(None, ge=1, le=100, description="Items per page (default: 20, max: 100)")


# Shared sub-objects

class MemberRef(ToolInput):
    id: str = Field(..., description="organizationMemberId, group id or email address")
    type: Literal["member", "group", "email"]


class Body(ToolInput):
    mime_type: MimeType = Field(..., description="Content format")
    content: str


class TemplateUser(ToolInput):
    """Template users are either organization members or external email users."""

    type: Literal["member", "emailUser"]
    organization_member_id: Optional[str] = Field(None, description="Organization member ID (for type: member)")
    email_address: Optional[str] = Field(None, description="Email address (for type: emailUser)")
    name: Optional[str] = Field(None, description="Name (for type: emailUser)")

    @model_validator(mode="after")
    def check_identifier(self) -> "TemplateUser":
        if self.type == "member" and not self.organization_member_id:
            raise ValueError("organizationMemberId is required for type member")
        if self.type == "emailUser" and not self.email_address:
            raise ValueError("emailAddress is required for type emailUser")
        return self


class TemplateUsers(ToolInput):
    to: Optional[list[TemplateUser]] = Field(None, description="Default assignees")
    cc: Optional[list[TemplateUser]] = Field(None, description="Default CC recipients")


# Common

class GetMyMemberInfoInput(ToolInput):
    pass


# Projects

class GetProjectListInput(PageInput):
    pass


class ProjectInput(ToolInput):
    project_id: str = Field(..., description="Project ID")


class GetProjectInput(ProjectInput):
    pass


class GetTaskListInput(PageInput):
    project_id: str = Field(..., description="Project ID (required)")
    from_email_address: Optional[str] = Field(None, description="Filter by creator email address")
    from_member_ids: Optional[list[str]] = Field(None, description="Filter by creator member IDs (organizationMemberId)")
    to_member_ids: Optional[list[str]] = Field(None, description="Filter by assignee member IDs (organizationMemberId)")
    cc_member_ids: Optional[list[str]] = Field(None, description="Filter by CC member IDs (organizationMemberId)")
    tag_ids: Optional[list[str]] = Field(None, description="Filter by tag IDs")
    parent_post_id: Optional[str] = Field(None, description="Filter by parent post ID (get subtasks)")
    post_number: Optional[int] = Field(None, description="Filter by specific task number")
    post_workflow_classes: Optional[list[str]] = Field(
        None, description="Filter by workflow classes: backlog, registered, working, closed")
    post_workflow_ids: Optional[list[str]] = Field(None, description="Filter by workflow IDs defined in the project")
    milestone_ids: Optional[list[str]] = Field(None, description="Filter by milestone IDs")
    subjects: Optional[str] = Field(None, description="Filter by task subject (title)")
    created_at: Optional[str] = Field(
        None, description="Filter by creation date (today, thisweek, prev-7d, next-7d, or ISO8601 range)")
    updated_at: Optional[str] = Field(
        None, description="Filter by update date (today, thisweek, prev-7d, next-7d, or ISO8601 range)")
    due_at: Optional[str] = Field(
        None, description="Filter by due date (today, thisweek, prev-7d, next-7d, or ISO8601 range)")
    order: str = Field(
        "-postUpdatedAt",
        description="Sort order: postDueAt, postUpdatedAt, createdAt (prefix with - for descending)")


class GetTaskInput(ToolInput):
    task_id: str = Field(..., description="Task ID (unique identifier)")
    project_id: Optional[str] = Field(None, description="Project ID (optional)")


class CreateTaskInput(ProjectInput):
    parent_post_id: Optional[str] = Field(None, description="Parent task ID to create this as a subtask")
    subject: str = Field(..., description="Task subject/title")
    body: Optional[Body] = Field(None, description="Task body content")
    assignees: Optional[list[MemberRef]] = Field(None, description="List of assignees")
    cc: Optional[list[MemberRef]] = Field(None, description="List of CC recipients")
    due_date: Optional[str] = Field(None, description="Due date (ISO 8601 format: YYYY-MM-DDTHH:mm:ssZ)")
    milestone_id: Optional[str] = Field(None, description="Milestone ID")
    tag_ids: Optional[list[str]] = Field(None, description="Array of tag IDs")
    priority: Optional[Priority] = Field(None, description="Task priority level")


class UpdateTaskInput(ProjectInput):
    task_id: str = Field(..., description="Task ID to update")
    subject: Optional[str] = Field(None, description="New task subject/title")
    body: Optional[Body] = Field(None, description="New task body content")
    assignees: Optional[list[MemberRef]] = Field(None, description="New list of assignees")
    cc: Optional[list[MemberRef]] = Field(None, description="New list of CC recipients")
    due_date: Optional[str] = Field(None, description="New due date (ISO 8601 format)")
    milestone_id: Optional[str] = Field(None, description="New milestone ID (null to remove)")
    tag_ids: Optional[list[str]] = Field(None, description="New array of tag IDs")
    priority: Optional[Priority] = Field(None, description="Task priority level")
    workflow_id: Optional[str] = Field(None, description="New workflow ID (status)")


class CreateTaskCommentInput(ProjectInput):
    task_id: str = Field(..., description="Task ID to add comment to")
    body: Body = Field(..., description="Comment content")
    attach_file_ids: Optional[list[str]] = Field(None, description="Array of file IDs to attach")


class GetTaskCommentListInput(PageInput):
    project_id: str = Field(..., description="Project ID where the task belongs")
    task_id: str = Field(..., description="Task ID to get comments from")
    order: Optional[Literal["createdAt", "-createdAt"]] = Field(
        None, description="Sort order: createdAt (oldest first, default), -createdAt (newest first)")


class UpdateTaskCommentInput(ProjectInput):
    task_id: str = Field(..., description="Task ID where the comment exists")
    comment_id: str = Field(..., description="Comment ID to update")
    body: Optional[Body] = Field(None, description="New comment content")
    attach_file_ids: Optional[list[str]] = Field(None, description="Array of file IDs to attach")


class GetMilestoneListInput(ProjectInput):
    status: Optional[Literal["open", "closed"]] = Field(None, description="Filter by milestone status")


class GetTagListInput(ProjectInput):
    page: Optional[int] = Field(None, ge=0, description="Page number (default: 0)")
    size: Optional[int] = Field(None, ge=1, le=100, description="Items per page (default: 100, max: 100)")


class GetTagInput(ProjectInput):
    tag_id: str = Field(..., description="Tag ID")


class CreateTagInput(ProjectInput):
    name: str = Field(..., description='Tag name. For individual tag: "myTag". For group tag: "groupName:tagName"')
    color: Optional[str] = Field(None, description='Tag color in hex format without # (e.g., "ffffff")')


class UpdateTagGroupInput(ProjectInput):
    tag_group_id: str = Field(..., description="Tag group ID")
    mandatory: Optional[bool] = Field(
        None, description="If true, at least one tag from this group is required when creating tasks")
    select_one: Optional[bool] = Field(
        None, description="If true, exactly one tag must be selected. If false, multiple tags can be selected")


class GetProjectTemplateListInput(PageInput):
    project_id: str = Field(..., description="Project ID to get templates from")


class GetProjectTemplateInput(ProjectInput):
    template_id: str = Field(..., description="Template ID to retrieve")


class TemplateFields(ProjectInput):
    template_name: str = Field(..., description="Template name (required)")
    users: Optional[TemplateUsers] = Field(None, description="Default users for tasks created from this template")
    body: Optional[Body] = Field(None, description="Default task body content")
    guide: Optional[Body] = Field(None, description="Guide content shown to users when writing tasks")
    subject: Optional[str] = Field(None, description="Default task subject")
    due_date: Optional[str] = Field(None, description="Default due date (ISO 8601 format)")
    due_date_flag: Optional[bool] = Field(None, description="Enable due date")
    milestone_id: Optional[str] = Field(None, description="Default milestone ID")
    tag_ids: Optional[list[str]] = Field(None, description="Default tag IDs")
    priority: Optional[Priority] = Field(None, description="Default priority")
    is_default: Optional[bool] = Field(None, description="Set as default template for this project")


class CreateProjectTemplateInput(TemplateFields):
    pass


class UpdateProjectTemplateInput(TemplateFields):
    template_id: str = Field(..., description="Template ID to update")


class DeleteProjectTemplateInput(ProjectInput):
    template_id: str = Field(..., description="Template ID to delete")


class GetProjectMemberListInput(PageInput):
    project_id: str = Field(..., description="Project ID to get members from")
    roles: Optional[list[Literal["admin", "member"]]] = Field(None, description="Filter by roles (admin, member)")


class GetProjectMemberGroupListInput(PageInput):
    project_id: str = Field(..., description="Project ID to get member groups from")


class GetProjectWorkflowListInput(ProjectInput):
    pass


class AttachmentInput(ProjectInput):
    task_id: str = Field(..., description="Task ID (post ID)")


class UploadAttachmentInput(AttachmentInput):
    file_path: str = Field(..., description="Absolute path to the file to upload")


class GetAttachmentListInput(AttachmentInput):
    pass


class GetAttachmentMetadataInput(AttachmentInput):
    file_id: str = Field(..., description="File ID")


class DownloadAttachmentInput(AttachmentInput):
    file_id: str = Field(..., description="File ID")
    save_path: Optional[str] = Field(
        None, description="Local path to save (directory or full path). If omitted, returns base64 data")


class DeleteAttachmentInput(AttachmentInput):
    file_id: str = Field(..., description="File ID to delete")


# Drive

class GetDriveListInput(ToolInput):
    type: Optional[Literal["private", "project"]] = Field(
        None, description="Drive type: private (personal) or project")
    scope: Optional[Literal["private", "public"]] = Field(
        None, description="Project scope (only when type=project): private or public")
    state: Optional[str] = Field(None, description='Project state filter (e.g. "active", "archived")')
    project_id: Optional[str] = Field(None, description="Filter by project ID")


class DriveInput(ToolInput):
    drive_id: str = Field(..., description="Drive ID")


class GetDriveFileListInput(DriveInput, PageInput):
    parent_id: Optional[str] = Field(None, description='Parent folder ID. Use "root" for top-level items')
    type: Optional[Literal["folder", "file"]] = Field(None, description="Filter by type: folder or file")
    sub_types: Optional[str] = Field(None, description='Filter by subTypes (e.g. "root,trash")')


class GetDriveFileMetaInput(ToolInput):
    file_id: str = Field(..., description="File ID")


class CreateDriveFolderInput(DriveInput):
    folder_id: str = Field(..., description="Parent folder ID where the new folder will be created")
    name: str = Field(..., description="Name for the new folder")


class RenameDriveFileInput(DriveInput):
    file_id: str = Field(..., description="File or folder ID to rename")
    name: str = Field(..., description="New name")


class MoveDriveFileInput(DriveInput):
    file_id: str = Field(..., description="File or folder ID to move")
    destination_file_id: str = Field(..., description='Destination folder ID (use "trash" to move to trash)')


class CopyDriveFileInput(DriveInput):
    file_id: str = Field(..., description="File ID to copy")
    destination_drive_id: str = Field(..., description="Destination drive ID")
    destination_file_id: str = Field(..., description="Destination folder ID")


class DeleteDriveFileInput(DriveInput):
    file_id: str = Field(..., description="File ID to permanently delete (must be in trash)")


class UploadDriveFileInput(DriveInput):
    parent_id: str = Field(..., description="Parent folder ID to upload into")
    file_path: str = Field(..., description="Absolute path to the file to upload")


class DownloadDriveFileInput(DriveInput):
    file_id: str = Field(..., description="File ID to download")
    save_path: Optional[str] = Field(
        None, description="Local path to save (directory or full path). Recommended for large files.")


class UpdateDriveFileInput(DriveInput):
    file_id: str = Field(..., description="File ID to update")
    file_path: str = Field(..., description="Absolute path to the new version of the file")


# Wiki

class GetWikiListInput(PageInput):
    pass


class WikiInput(ToolInput):
    wiki_id: str = Field(..., description="Wiki ID")


class GetWikiPageListInput(WikiInput):
    parent_page_id: Optional[str] = Field(None, description="Parent page ID (omit for top-level pages)")


class WikiPageInput(WikiInput):
    page_id: str = Field(..., description="Page ID")


class GetWikiPageInput(WikiPageInput):
    pass


class CreateWikiPageInput(WikiInput):
    parent_page_id: str = Field(..., description="Parent page ID")
    subject: str = Field(..., description="Page title")
    content: str = Field(..., description="Page content (markdown)")
    referrers: Optional[list[str]] = Field(None, description="organizationMemberIds to notify")


class UpdateWikiPageInput(WikiPageInput):
    subject: Optional[str] = Field(None, description="New page title")
    content: Optional[str] = Field(None, description="New page content (markdown)")


class GetWikiPageCommentListInput(WikiPageInput):
    page: Optional[int] = Field(None, ge=0, description="Page number (0-based)")
    size: Optional[int] = Field(None, ge=1, le=100, description="Page size (default: 20, max: 100)")


class WikiCommentInput(WikiPageInput):
    comment_id: str = Field(..., description="Comment ID")


class GetWikiPageCommentInput(WikiCommentInput):
    pass


class CreateWikiPageCommentInput(WikiPageInput):
    content: str = Field(..., description="Comment content (markdown)")


class UpdateWikiPageCommentInput(WikiCommentInput):
    content: str = Field(..., description="New comment content (markdown)")


class DeleteWikiPageCommentInput(WikiCommentInput):
    pass
