"""MCP tool handlers for the Dooray API.

All handlers follow a consistent pattern:
- Accept: validated input model (see schemas) and a DoorayClient
- Return: CallToolResult with a single text content block
- Use formatters for consistent output
- Log all operations for debugging

Handlers let unexpected faults propagate; the dispatcher turns them into
error results. Expected faults (missing local file, partial update) are
returned as ``isError=True`` results directly.
"""
import asyncio
import base64
import logging
import os
from pathlib import Path
from typing import Optional

from mcp.types import CallToolResult

from . import formatters
from . import schemas
from .client import DoorayClient, DownloadedFile
from .errors import DoorayAPIError, TransportError, format_error

logger = logging.getLogger("dooray-mcp.handlers")

COMMON_BASE = "/common/v1"
PROJECTS_BASE = "/project/v1"
DRIVE_BASE = "/drive/v1"
WIKI_BASE = "/wiki/v1"

DEFAULT_PAGE_SIZE = 20
TAG_PAGE_SIZE = 100


def _join(values: Optional[list]) -> Optional[str]:
    """Dooray expects list filters as comma-separated strings."""
    if not values:
        return None
    return ",".join(str(v) for v in values)


def _paging(arguments, default_size: int = DEFAULT_PAGE_SIZE) -> dict:
    return {
        "page": arguments.page if arguments.page is not None else 0,
        "size": arguments.size if arguments.size is not None else default_size,
    }


def _users(arguments) -> Optional[dict]:
    """Build the API ``users`` object from assignees/cc, only for fields given."""
    users = {}
    if "assignees" in arguments.model_fields_set:
        users["to"] = formatters.transform_members(
            [m.model_dump() for m in arguments.assignees] if arguments.assignees is not None else None)
    if "cc" in arguments.model_fields_set:
        users["cc"] = formatters.transform_members(
            [m.model_dump() for m in arguments.cc] if arguments.cc is not None else None)
    return users or None


def _read_upload_source(file_path: str) -> tuple[Optional[Path], Optional[CallToolResult]]:
    path = Path(file_path).expanduser()
    if not path.is_file():
        logger.warning(f"Upload source not found: {path}")
        return None, formatters.error_result(f"Error: File not found: {file_path}")
    return path, None


async def _read_file(path: Path) -> bytes:
    """Read an upload source off the event loop."""
    return await asyncio.to_thread(path.read_bytes)


def _write_download(save_path: str, filename: str, content: bytes) -> Path:
    target = Path(save_path).expanduser()
    if save_path.endswith(("/", os.sep)) or target.is_dir():
        target.mkdir(parents=True, exist_ok=True)
        # Never let a server-supplied name escape the target directory.
        target = target / Path(filename).name
    else:
        target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    return target


async def _download_payload(file_id: str, download: DownloadedFile, save_path: Optional[str],
                            fallback_name: str) -> dict:
    """Either write the download to disk or inline it as base64."""
    filename = formatters.extract_filename(download.content_disposition)
    payload = {
        "success": True,
        "fileId": file_id,
        "filename": filename,
        "contentType": download.content_type,
        "contentLength": download.content_length,
    }

    if not save_path:
        payload["base64Data"] = base64.b64encode(download.content).decode("ascii")
        return payload

    target = await asyncio.to_thread(_write_download, save_path, filename or fallback_name, download.content)
    size = download.content_length if download.content_length is not None else len(download.content)
    payload["savedTo"] = str(target)
    payload["message"] = f'File saved to "{target}" ({size} bytes)'
    logger.info(f"Saved file {file_id} to {target}")
    return payload


# ============================================================================
# Common Handlers
# ============================================================================

async def handle_get_my_member_info(
    arguments: schemas.GetMyMemberInfoInput,
    client: DoorayClient,
) -> CallToolResult:
    """Get the member profile of the token owner (incl. member ID)."""
    result = await client.get(f"{COMMON_BASE}/members/me")
    logger.info(f"Retrieved member info for {result.get('id') if isinstance(result, dict) else result}")
    return formatters.json_result(result)


# ============================================================================
# Project Handlers
# ============================================================================

async def handle_get_project_list(
    arguments: schemas.GetProjectListInput,
    client: DoorayClient,
) -> CallToolResult:
    """List active projects the user is a member of."""
    params = {"member": "me", "state": "active", **_paging(arguments)}
    page = await client.get_paginated(f"{PROJECTS_BASE}/projects", params)
    logger.info(f"Listed {len(page.data)} of {page.total_count} projects")
    return formatters.json_result(formatters.format_page(page, formatters.filter_project_for_list))


async def handle_get_project(
    arguments: schemas.GetProjectInput,
    client: DoorayClient,
) -> CallToolResult:
    result = await client.get(f"{PROJECTS_BASE}/projects/{arguments.project_id}")
    logger.info(f"Retrieved project {arguments.project_id}")
    return formatters.json_result(result)


async def handle_get_task_list(
    arguments: schemas.GetTaskListInput,
    client: DoorayClient,
) -> CallToolResult:
    """List tasks in a project with member, workflow, tag and date filters."""
    params = {
        **_paging(arguments),
        "fromEmailAddress": arguments.from_email_address,
        "fromMemberIds": _join(arguments.from_member_ids),
        "toMemberIds": _join(arguments.to_member_ids),
        "ccMemberIds": _join(arguments.cc_member_ids),
        "tagIds": _join(arguments.tag_ids),
        "parentPostId": arguments.parent_post_id,
        "postNumber": arguments.post_number,
        "postWorkflowClasses": _join(arguments.post_workflow_classes),
        "postWorkflowIds": _join(arguments.post_workflow_ids),
        "milestoneIds": _join(arguments.milestone_ids),
        "subjects": arguments.subjects,
        "createdAt": arguments.created_at,
        "updatedAt": arguments.updated_at,
        "dueAt": arguments.due_at,
        "order": arguments.order,
    }
    page = await client.get_paginated(f"{PROJECTS_BASE}/projects/{arguments.project_id}/posts", params)
    logger.info(f"Listed {len(page.data)} of {page.total_count} tasks in project {arguments.project_id}")
    return formatters.json_result(formatters.format_page(page, formatters.filter_task_for_list))


async def handle_get_task(
    arguments: schemas.GetTaskInput,
    client: DoorayClient,
) -> CallToolResult:
    """Get task details; the project-scoped endpoint is used when projectId is given."""
    if arguments.project_id:
        path = f"{PROJECTS_BASE}/projects/{arguments.project_id}/posts/{arguments.task_id}"
    else:
        path = f"{PROJECTS_BASE}/posts/{arguments.task_id}"
    result = await client.get(path)
    logger.info(f"Retrieved task {arguments.task_id}")
    return formatters.json_result(result)


async def handle_create_task(
    arguments: schemas.CreateTaskInput,
    client: DoorayClient,
) -> CallToolResult:
    body = arguments.to_api("project_id", "assignees", "cc")
    users = _users(arguments)
    if users:
        body["users"] = users
    if arguments.due_date:
        body["dueDateFlag"] = True

    result = await client.post(f"{PROJECTS_BASE}/projects/{arguments.project_id}/posts", body)
    logger.info(f"Created task in project {arguments.project_id}: {arguments.subject}")
    return formatters.json_result(result)


async def handle_update_task(
    arguments: schemas.UpdateTaskInput,
    client: DoorayClient,
) -> CallToolResult:
    """Update task fields and/or move it to another workflow (status).

    Field changes go through PUT; the workflow change is a separate
    set-workflow call made afterwards.
    """
    task_path = f"{PROJECTS_BASE}/projects/{arguments.project_id}/posts/{arguments.task_id}"
    body = arguments.to_api("project_id", "task_id", "workflow_id", "assignees", "cc")
    users = _users(arguments)
    if users:
        body["users"] = users
    if arguments.due_date:
        body["dueDateFlag"] = True

    if not body and not arguments.workflow_id:
        return formatters.error_result("Validation Error: provide at least one field to update")

    result = None
    if body:
        result = await client.put(task_path, body)
        logger.info(f"Updated task {arguments.task_id} fields: {sorted(body)}")

    if arguments.workflow_id:
        try:
            await client.post(f"{task_path}/set-workflow", {"workflowId": arguments.workflow_id})
        except DoorayAPIError as e:
            if not body or isinstance(e, TransportError):
                raise
            logger.warning(f"Task {arguments.task_id} updated but workflow change failed: {e!r}")
            return formatters.error_result(
                f"Dooray API Error: task fields were updated but the workflow change failed: {format_error(e)}"
            )
        logger.info(f"Moved task {arguments.task_id} to workflow {arguments.workflow_id}")

    if result is None:
        result = {"success": True, "taskId": arguments.task_id, "message": "Task updated successfully"}
        if arguments.workflow_id:
            result["workflowId"] = arguments.workflow_id
    return formatters.json_result(result)


async def handle_create_task_comment(
    arguments: schemas.CreateTaskCommentInput,
    client: DoorayClient,
) -> CallToolResult:
    body = {"body": arguments.body.to_api()}
    if arguments.attach_file_ids:
        body["attachFileIds"] = arguments.attach_file_ids
    result = await client.post(
        f"{PROJECTS_BASE}/projects/{arguments.project_id}/posts/{arguments.task_id}/logs", body)
    logger.info(f"Created comment on task {arguments.task_id}")
    return formatters.json_result(result)


async def handle_get_task_comment_list(
    arguments: schemas.GetTaskCommentListInput,
    client: DoorayClient,
) -> CallToolResult:
    params = {**_paging(arguments), "order": arguments.order}
    page = await client.get_paginated(
        f"{PROJECTS_BASE}/projects/{arguments.project_id}/posts/{arguments.task_id}/logs", params)
    logger.info(f"Listed {len(page.data)} of {page.total_count} comments on task {arguments.task_id}")
    return formatters.json_result(formatters.format_page(page, formatters.filter_task_comment_for_list))


async def handle_update_task_comment(
    arguments: schemas.UpdateTaskCommentInput,
    client: DoorayClient,
) -> CallToolResult:
    body = {}
    if arguments.body is not None:
        body["body"] = arguments.body.to_api()
    if arguments.attach_file_ids:
        body["attachFileIds"] = arguments.attach_file_ids
    await client.put(
        f"{PROJECTS_BASE}/projects/{arguments.project_id}/posts/{arguments.task_id}"
        f"/logs/{arguments.comment_id}",
        body,
    )
    logger.info(f"Updated comment {arguments.comment_id} on task {arguments.task_id}")
    return formatters.text_result(f"Successfully updated comment {arguments.comment_id}")


async def handle_get_milestone_list(
    arguments: schemas.GetMilestoneListInput,
    client: DoorayClient,
) -> CallToolResult:
    result = await client.get(
        f"{PROJECTS_BASE}/projects/{arguments.project_id}/milestones", {"status": arguments.status})
    milestones = result or []
    logger.info(f"Listed {len(milestones)} milestones in project {arguments.project_id}")
    return formatters.json_result([formatters.filter_milestone_for_list(m) for m in milestones])


async def handle_get_tag_list(
    arguments: schemas.GetTagListInput,
    client: DoorayClient,
) -> CallToolResult:
    """List project tags grouped by tag group (mandatory/selectOne shown per group)."""
    page = await client.get_paginated(
        f"{PROJECTS_BASE}/projects/{arguments.project_id}/tags", _paging(arguments, TAG_PAGE_SIZE))
    logger.info(f"Listed {len(page.data)} of {page.total_count} tags in project {arguments.project_id}")
    return formatters.json_result(formatters.group_tags_by_tag_group(page.data, page.total_count))


async def handle_get_tag(
    arguments: schemas.GetTagInput,
    client: DoorayClient,
) -> CallToolResult:
    result = await client.get(f"{PROJECTS_BASE}/projects/{arguments.project_id}/tags/{arguments.tag_id}")
    return formatters.json_result(result)


async def handle_create_tag(
    arguments: schemas.CreateTagInput,
    client: DoorayClient,
) -> CallToolResult:
    result = await client.post(
        f"{PROJECTS_BASE}/projects/{arguments.project_id}/tags", arguments.to_api("project_id"))
    logger.info(f"Created tag {arguments.name} in project {arguments.project_id}")
    return formatters.json_result(result)


async def handle_update_tag_group(
    arguments: schemas.UpdateTagGroupInput,
    client: DoorayClient,
) -> CallToolResult:
    updates = arguments.to_api("project_id", "tag_group_id")
    await client.put(
        f"{PROJECTS_BASE}/projects/{arguments.project_id}/tag-groups/{arguments.tag_group_id}", updates)
    logger.info(f"Updated tag group {arguments.tag_group_id}: {updates}")
    return formatters.json_result({
        "success": True,
        "message": "Tag group updated successfully",
        "tagGroupId": arguments.tag_group_id,
        "updates": updates,
    })


async def handle_get_project_template_list(
    arguments: schemas.GetProjectTemplateListInput,
    client: DoorayClient,
) -> CallToolResult:
    page = await client.get_paginated(
        f"{PROJECTS_BASE}/projects/{arguments.project_id}/templates", _paging(arguments))
    return formatters.json_result(formatters.format_page(page, formatters.filter_template_for_list))


async def handle_get_project_template(
    arguments: schemas.GetProjectTemplateInput,
    client: DoorayClient,
) -> CallToolResult:
    """Full template (unfiltered): its fields are reused as create-task defaults."""
    result = await client.get(
        f"{PROJECTS_BASE}/projects/{arguments.project_id}/templates/{arguments.template_id}")
    return formatters.json_result(result)


def _template_body(arguments: schemas.TemplateFields) -> dict:
    body = arguments.to_api("project_id", "template_id", "users")
    if arguments.users is not None:
        # Only the sides that were given; an omitted side keeps its current value.
        body["users"] = {
            side: [formatters.transform_template_user(u.to_api()) for u in getattr(arguments.users, side) or []]
            for side in ("to", "cc")
            if side in arguments.users.model_fields_set
        }
    return body


async def handle_create_project_template(
    arguments: schemas.CreateProjectTemplateInput,
    client: DoorayClient,
) -> CallToolResult:
    result = await client.post(
        f"{PROJECTS_BASE}/projects/{arguments.project_id}/templates", _template_body(arguments))
    logger.info(f"Created template {arguments.template_name} in project {arguments.project_id}")
    return formatters.json_result(result)


async def handle_update_project_template(
    arguments: schemas.UpdateProjectTemplateInput,
    client: DoorayClient,
) -> CallToolResult:
    await client.put(
        f"{PROJECTS_BASE}/projects/{arguments.project_id}/templates/{arguments.template_id}",
        _template_body(arguments),
    )
    logger.info(f"Updated template {arguments.template_id}")
    return formatters.json_result({"success": True, "message": "Template updated successfully"})


async def handle_delete_project_template(
    arguments: schemas.DeleteProjectTemplateInput,
    client: DoorayClient,
) -> CallToolResult:
    await client.delete(f"{PROJECTS_BASE}/projects/{arguments.project_id}/templates/{arguments.template_id}")
    logger.info(f"Deleted template {arguments.template_id}")
    return formatters.json_result({"success": True, "message": "Template deleted successfully"})


async def _member_details(client: DoorayClient, member: dict) -> dict:
    member_id = member.get("organizationMemberId")
    try:
        details = await client.get(f"{COMMON_BASE}/members/{member_id}")
    except DoorayAPIError as e:
        logger.warning(f"Member details unavailable for {member_id}: {e!r}")
        return {"id": member_id, "name": "Unknown", "externalEmailAddress": "Unknown", "role": member.get("role")}
    details = details or {}
    return {
        "id": details.get("id", member_id),
        "name": details.get("name"),
        "externalEmailAddress": details.get("externalEmailAddress"),
        "role": member.get("role"),
    }


async def handle_get_project_member_list(
    arguments: schemas.GetProjectMemberListInput,
    client: DoorayClient,
) -> CallToolResult:
    """List project members enriched with name and email.

    The members endpoint only returns IDs and roles; details are fetched
    concurrently per member.
    """
    params = {**_paging(arguments), "roles": _join(arguments.roles)}
    page = await client.get_paginated(f"{PROJECTS_BASE}/projects/{arguments.project_id}/members", params)
    # Let every lookup finish before surfacing a fault (e.g. 401) from any of them.
    members = await asyncio.gather(*(_member_details(client, m) for m in page.data), return_exceptions=True)
    for outcome in members:
        if isinstance(outcome, BaseException):
            raise outcome
    logger.info(f"Listed {len(members)} of {page.total_count} members in project {arguments.project_id}")
    return formatters.json_result({"totalCount": page.total_count, "data": list(members)})


async def handle_get_project_member_group_list(
    arguments: schemas.GetProjectMemberGroupListInput,
    client: DoorayClient,
) -> CallToolResult:
    page = await client.get_paginated(
        f"{PROJECTS_BASE}/projects/{arguments.project_id}/member-groups", _paging(arguments))
    # The API nests the group list one level deeper than other list endpoints.
    if page.data and isinstance(page.data[0], list):
        page.data = page.data[0]
    return formatters.json_result(formatters.format_page(page, formatters.filter_member_group_for_list))


async def handle_get_project_workflow_list(
    arguments: schemas.GetProjectWorkflowListInput,
    client: DoorayClient,
) -> CallToolResult:
    result = await client.get(f"{PROJECTS_BASE}/projects/{arguments.project_id}/workflows")
    return formatters.json_result([formatters.filter_workflow_for_list(w) for w in result or []])


def _attachment_path(arguments: schemas.AttachmentInput) -> str:
    return f"{PROJECTS_BASE}/projects/{arguments.project_id}/posts/{arguments.task_id}/files"


async def handle_upload_attachment(
    arguments: schemas.UploadAttachmentInput,
    client: DoorayClient,
) -> CallToolResult:
    path, error = _read_upload_source(arguments.file_path)
    if error:
        return error

    result = await client.upload_file(_attachment_path(arguments), await _read_file(path), path.name)
    logger.info(f"Uploaded {path.name} to task {arguments.task_id}")
    return formatters.json_result({
        "success": True,
        "fileId": (result or {}).get("id"),
        "fileName": path.name,
        "message": f'File "{path.name}" successfully uploaded to task.',
    })


async def handle_get_attachment_list(
    arguments: schemas.GetAttachmentListInput,
    client: DoorayClient,
) -> CallToolResult:
    page = await client.get_paginated(_attachment_path(arguments))
    return formatters.json_result(formatters.format_page(page))


async def handle_get_attachment_metadata(
    arguments: schemas.GetAttachmentMetadataInput,
    client: DoorayClient,
) -> CallToolResult:
    result = await client.get(f"{_attachment_path(arguments)}/{arguments.file_id}", {"media": "meta"})
    return formatters.json_result(result)


async def handle_download_attachment(
    arguments: schemas.DownloadAttachmentInput,
    client: DoorayClient,
) -> CallToolResult:
    download = await client.download_file(f"{_attachment_path(arguments)}/{arguments.file_id}", {"media": "raw"})
    logger.info(f"Downloaded attachment {arguments.file_id} ({len(download.content)} bytes)")
    return formatters.json_result(
        await _download_payload(arguments.file_id, download, arguments.save_path, f"attachment-{arguments.file_id}"))


async def handle_delete_attachment(
    arguments: schemas.DeleteAttachmentInput,
    client: DoorayClient,
) -> CallToolResult:
    await client.delete(f"{_attachment_path(arguments)}/{arguments.file_id}")
    logger.info(f"Deleted attachment {arguments.file_id} from task {arguments.task_id}")
    return formatters.json_result({
        "success": True,
        "message": f"File {arguments.file_id} successfully deleted from task.",
    })


# ============================================================================
# Drive Handlers
# ============================================================================

async def handle_get_drive_list(
    arguments: schemas.GetDriveListInput,
    client: DoorayClient,
) -> CallToolResult:
    page = await client.get_paginated(f"{DRIVE_BASE}/drives", arguments.to_api())
    return formatters.json_result(formatters.format_page(page))


async def handle_get_drive_file_list(
    arguments: schemas.GetDriveFileListInput,
    client: DoorayClient,
) -> CallToolResult:
    page = await client.get_paginated(
        f"{DRIVE_BASE}/drives/{arguments.drive_id}/files", arguments.to_api("drive_id"))
    return formatters.json_result(formatters.format_page(page))


async def handle_get_drive_file_meta(
    arguments: schemas.GetDriveFileMetaInput,
    client: DoorayClient,
) -> CallToolResult:
    result = await client.get(f"{DRIVE_BASE}/files/{arguments.file_id}", {"media": "meta"})
    return formatters.json_result(result)


async def handle_create_drive_folder(
    arguments: schemas.CreateDriveFolderInput,
    client: DoorayClient,
) -> CallToolResult:
    result = await client.post(
        f"{DRIVE_BASE}/drives/{arguments.drive_id}/files/{arguments.folder_id}/create-folder",
        {"name": arguments.name},
    )
    logger.info(f"Created folder {arguments.name} in drive {arguments.drive_id}")
    return formatters.json_result({
        "success": True,
        "folderId": (result or {}).get("id"),
        "message": f'Folder "{arguments.name}" created successfully.',
    })


async def handle_rename_drive_file(
    arguments: schemas.RenameDriveFileInput,
    client: DoorayClient,
) -> CallToolResult:
    await client.put(
        f"{DRIVE_BASE}/drives/{arguments.drive_id}/files/{arguments.file_id}",
        {"name": arguments.name},
        params={"media": "meta"},
    )
    return formatters.json_result({"success": True, "message": f'Renamed to "{arguments.name}".'})


async def handle_move_drive_file(
    arguments: schemas.MoveDriveFileInput,
    client: DoorayClient,
) -> CallToolResult:
    await client.post(
        f"{DRIVE_BASE}/drives/{arguments.drive_id}/files/{arguments.file_id}/move",
        {"destinationFileId": arguments.destination_file_id},
    )
    return formatters.json_result({"success": True, "message": "File moved successfully."})


async def handle_copy_drive_file(
    arguments: schemas.CopyDriveFileInput,
    client: DoorayClient,
) -> CallToolResult:
    await client.post(
        f"{DRIVE_BASE}/drives/{arguments.drive_id}/files/{arguments.file_id}/copy",
        {
            "destinationDriveId": arguments.destination_drive_id,
            "destinationFileId": arguments.destination_file_id,
        },
    )
    return formatters.json_result({"success": True, "message": "File copied successfully."})


async def handle_delete_drive_file(
    arguments: schemas.DeleteDriveFileInput,
    client: DoorayClient,
) -> CallToolResult:
    await client.delete(f"{DRIVE_BASE}/drives/{arguments.drive_id}/files/{arguments.file_id}")
    logger.info(f"Deleted drive file {arguments.file_id}")
    return formatters.json_result({"success": True, "message": "File permanently deleted."})


async def handle_upload_drive_file(
    arguments: schemas.UploadDriveFileInput,
    client: DoorayClient,
) -> CallToolResult:
    path, error = _read_upload_source(arguments.file_path)
    if error:
        return error

    result = await client.upload_file(
        f"{DRIVE_BASE}/drives/{arguments.drive_id}/files",
        await _read_file(path),
        path.name,
        params={"parentId": arguments.parent_id},
    )
    logger.info(f"Uploaded {path.name} to drive {arguments.drive_id}")
    return formatters.json_result({
        "success": True,
        "fileId": (result or {}).get("id"),
        "fileName": path.name,
        "message": f'File "{path.name}" uploaded successfully to drive.',
    })


async def handle_download_drive_file(
    arguments: schemas.DownloadDriveFileInput,
    client: DoorayClient,
) -> CallToolResult:
    download = await client.download_file(
        f"{DRIVE_BASE}/drives/{arguments.drive_id}/files/{arguments.file_id}", {"media": "raw"})
    logger.info(f"Downloaded drive file {arguments.file_id} ({len(download.content)} bytes)")
    return formatters.json_result(
        await _download_payload(arguments.file_id, download, arguments.save_path, f"drive-file-{arguments.file_id}"))


async def handle_update_drive_file(
    arguments: schemas.UpdateDriveFileInput,
    client: DoorayClient,
) -> CallToolResult:
    """Upload a new version of an existing drive file (PUT, media=raw)."""
    path, error = _read_upload_source(arguments.file_path)
    if error:
        return error

    result = await client.upload_file(
        f"{DRIVE_BASE}/drives/{arguments.drive_id}/files/{arguments.file_id}",
        await _read_file(path),
        path.name,
        method="PUT",
        params={"media": "raw"},
    )
    result = result or {}
    logger.info(f"Uploaded new version of drive file {arguments.file_id}")
    return formatters.json_result({
        "success": True,
        "fileId": result.get("id", arguments.file_id),
        "version": result.get("version"),
        "fileName": path.name,
        "message": f'File "{path.name}" updated successfully (new version uploaded).',
    })


# ============================================================================
# Wiki Handlers
# ============================================================================

def _wiki_page_path(arguments: schemas.WikiPageInput) -> str:
    return f"{WIKI_BASE}/wikis/{arguments.wiki_id}/pages/{arguments.page_id}"


async def handle_get_wiki_list(
    arguments: schemas.GetWikiListInput,
    client: DoorayClient,
) -> CallToolResult:
    page = await client.get_paginated(f"{WIKI_BASE}/wikis", _paging(arguments))
    return formatters.json_result(formatters.format_page(page))


async def handle_get_wiki_page_list(
    arguments: schemas.GetWikiPageListInput,
    client: DoorayClient,
) -> CallToolResult:
    page = await client.get_paginated(
        f"{WIKI_BASE}/wikis/{arguments.wiki_id}/pages", {"parentPageId": arguments.parent_page_id})
    return formatters.json_result(formatters.format_page(page))


async def handle_get_wiki_page(
    arguments: schemas.GetWikiPageInput,
    client: DoorayClient,
) -> CallToolResult:
    result = await client.get(_wiki_page_path(arguments))
    return formatters.json_result(result)


async def handle_create_wiki_page(
    arguments: schemas.CreateWikiPageInput,
    client: DoorayClient,
) -> CallToolResult:
    body = {
        "parentPageId": arguments.parent_page_id,
        "subject": arguments.subject,
        "body": {"mimeType": "text/x-markdown", "content": arguments.content},
    }
    if arguments.referrers:
        body["referrers"] = [formatters.transform_member({"id": r, "type": "member"}) for r in arguments.referrers]
    result = await client.post(f"{WIKI_BASE}/wikis/{arguments.wiki_id}/pages", body)
    logger.info(f"Created wiki page {arguments.subject} in wiki {arguments.wiki_id}")
    return formatters.json_result(result)


async def handle_update_wiki_page(
    arguments: schemas.UpdateWikiPageInput,
    client: DoorayClient,
) -> CallToolResult:
    body = {}
    if arguments.subject is not None:
        body["subject"] = arguments.subject
    if arguments.content is not None:
        body["body"] = {"mimeType": "text/x-markdown", "content": arguments.content}
    if not body:
        return formatters.error_result("Validation Error: provide subject and/or content to update")

    await client.put(_wiki_page_path(arguments), body)
    logger.info(f"Updated wiki page {arguments.page_id}")
    return formatters.json_result({"success": True, "message": "Wiki page updated successfully"})


async def handle_get_wiki_page_comment_list(
    arguments: schemas.GetWikiPageCommentListInput,
    client: DoorayClient,
) -> CallToolResult:
    page = await client.get_paginated(f"{_wiki_page_path(arguments)}/comments", _paging(arguments))
    return formatters.json_result(formatters.format_page(page))


async def handle_get_wiki_page_comment(
    arguments: schemas.GetWikiPageCommentInput,
    client: DoorayClient,
) -> CallToolResult:
    result = await client.get(f"{_wiki_page_path(arguments)}/comments/{arguments.comment_id}")
    return formatters.json_result(result)


async def handle_create_wiki_page_comment(
    arguments: schemas.CreateWikiPageCommentInput,
    client: DoorayClient,
) -> CallToolResult:
    result = await client.post(f"{_wiki_page_path(arguments)}/comments", {"body": {"content": arguments.content}})
    logger.info(f"Created comment on wiki page {arguments.page_id}")
    return formatters.json_result(result)


async def handle_update_wiki_page_comment(
    arguments: schemas.UpdateWikiPageCommentInput,
    client: DoorayClient,
) -> CallToolResult:
    await client.put(
        f"{_wiki_page_path(arguments)}/comments/{arguments.comment_id}", {"body": {"content": arguments.content}})
    return formatters.json_result({"success": True, "message": "Comment updated successfully"})


async def handle_delete_wiki_page_comment(
    arguments: schemas.DeleteWikiPageCommentInput,
    client: DoorayClient,
) -> CallToolResult:
    await client.delete(f"{_wiki_page_path(arguments)}/comments/{arguments.comment_id}")
    logger.info(f"Deleted comment {arguments.comment_id} on wiki page {arguments.page_id}")
    return formatters.json_result({"success": True, "message": "Comment deleted successfully"})
