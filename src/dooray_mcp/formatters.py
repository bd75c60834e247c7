"""Shared formatting functions for MCP responses.

List endpoints are projected to compact dicts to keep responses small;
detail endpoints are returned in full.
"""
import json
import re
from typing import Any, Callable, Iterable, Optional
from urllib.parse import unquote

from mcp.types import CallToolResult, TextContent

from .envelope import Page


def to_json(value: Any) -> str:
    """Serialise a payload as compact JSON text."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def format_page(page: Page, item_filter: Optional[Callable[[dict], dict]] = None) -> dict:
    """Render a Page as ``{"totalCount": ..., "data": [...]}``."""
    data = page.data if item_filter is None else [item_filter(item) for item in page.data]
    return {"totalCount": page.total_count, "data": data}


def _member_label(member: dict) -> Optional[str]:
    """Display name for a Dooray member reference (member, emailUser or group)."""
    if not member:
        return None
    if member.get("member"):
        inner = member["member"]
        return inner.get("name") or inner.get("organizationMemberId")
    if member.get("emailUser"):
        inner = member["emailUser"]
        return inner.get("name") or inner.get("emailAddress")
    if member.get("group"):
        inner = member["group"]
        return inner.get("name") or inner.get("projectMemberGroupId")
    return member.get("name") or member.get("id")


def _compact(item: dict) -> dict:
    return {k: v for k, v in item.items() if v is not None}


def filter_project_for_list(project: dict) -> dict:
    return _compact({
        "id": project.get("id"),
        "code": project.get("code"),
        "name": project.get("name"),
        "description": project.get("description"),
        "state": project.get("state"),
        "scope": project.get("scope"),
    })


def filter_task_for_list(task: dict) -> dict:
    """Format a task as a compact dict for list views."""
    users = task.get("users") or {}
    workflow = task.get("workflow") or {}
    return _compact({
        "id": task.get("id"),
        "number": task.get("number"),
        "subject": task.get("subject"),
        "taskNumber": task.get("taskNumber"),
        "workflowClass": task.get("workflowClass"),
        "workflow": workflow.get("name"),
        "priority": task.get("priority"),
        "dueDate": task.get("dueDate"),
        "milestone": (task.get("milestone") or {}).get("name"),
        "tags": [t.get("id") for t in task.get("tags") or []] or None,
        "from": _member_label(users.get("from") or {}),
        "to": [_member_label(m) for m in users.get("to") or []] or None,
        "createdAt": task.get("createdAt"),
        "updatedAt": task.get("updatedAt"),
    })


def filter_task_comment_for_list(comment: dict) -> dict:
    creator = comment.get("creator") or {}
    body = comment.get("body") or {}
    return _compact({
        "id": comment.get("id"),
        "creator": _member_label(creator),
        "createdAt": comment.get("createdAt"),
        "content": body.get("content"),
    })


def filter_milestone_for_list(milestone: dict) -> dict:
    return _compact({
        "id": milestone.get("id"),
        "name": milestone.get("name"),
        "status": milestone.get("status"),
        "startedAt": milestone.get("startedAt"),
        "endedAt": milestone.get("endedAt"),
    })


def filter_workflow_for_list(workflow: dict) -> dict:
    return _compact({
        "id": workflow.get("id"),
        "name": workflow.get("name"),
        "class": workflow.get("class"),
        "order": workflow.get("order"),
    })


def filter_template_for_list(template: dict) -> dict:
    return _compact({
        "id": template.get("id"),
        "templateName": template.get("templateName"),
        "isDefault": template.get("isDefault"),
    })


def filter_member_group_for_list(group: dict) -> dict:
    return _compact({
        "id": group.get("id"),
        "code": group.get("code"),
        "members": [_member_label(m) for m in group.get("members") or []] or None,
    })


def group_tags_by_tag_group(tags: Iterable[dict], total_count: Optional[int] = None) -> dict:
    """Group tags under their tag group, keeping group constraints visible.

    Tags without a ``tagGroup`` are listed under ``ungroupedTags``.
    """
    groups: dict[str, dict] = {}
    ungrouped = []
    for tag in tags:
        entry = _compact({"id": tag.get("id"), "name": tag.get("name"), "color": tag.get("color")})
        group = tag.get("tagGroup")
        if not group or not group.get("id"):
            ungrouped.append(entry)
            continue
        bucket = groups.setdefault(group["id"], {
            "id": group["id"],
            "name": group.get("name"),
            "mandatory": bool(group.get("mandatory")),
            "selectOne": bool(group.get("selectOne")),
            "tags": [],
        })
        bucket["tags"].append(entry)

    return {
        "totalCount": total_count,
        "tagGroups": list(groups.values()),
        "ungroupedTags": ungrouped,
    }


def transform_member(member: dict) -> dict:
    """Convert a tool-level ``{id, type}`` into the Dooray API member shape."""
    member_id, member_type = member["id"], member["type"]
    if member_type == "member":
        return {"type": "member", "member": {"organizationMemberId": member_id}}
    if member_type == "email":
        return {"type": "email", "member": {"emailAddress": member_id}}
    if member_type == "group":
        return {"type": "group", "organizationGroup": {"id": member_id}}
    raise ValueError(f"Unsupported member type: {member_type}")


def transform_members(members: Optional[Iterable[dict]]) -> Optional[list[dict]]:
    if members is None:
        return None
    return [transform_member(m) for m in members]


def transform_template_user(user: dict) -> dict:
    """Convert a template user (``member`` or ``emailUser``) into the API shape."""
    if user["type"] == "member":
        return {"type": "member", "member": {"organizationMemberId": user["organizationMemberId"]}}
    return {
        "type": "emailUser",
        "emailUser": {"emailAddress": user["emailAddress"], "name": user.get("name") or ""},
    }


_FILENAME_EXT =re.compile(r"filename\*\s*=\s*(?:[\w!#$%&+^`{}~-]+)?'[^']*'([^;]+)", re.IGNORECASE)
_FILENAME = re.compile(r"""filename\s*=\s*(?:"((?:[^"\\]|\\.)*)"|([^;]+))""", re.IGNORECASE)


def extract_filename(content_disposition: Optional[str]) -> Optional[str]:
    """Extract the filename from a Content-Disposition header.

    Handles ``filename="a.pdf"``, ``filename=a.pdf`` and the RFC 5987
    ``filename*=UTF-8''a%20b.pdf`` form (preferred when both are present).
    Percent-encoded names are decoded; undecodable sequences are kept as-is.
    """
    if not content_disposition:
        return None

    match = _FILENAME_EXT.search(content_disposition)
    if match:
        raw = match.group(1).strip().strip('"')
    else:
        match = _FILENAME.search(content_disposition)
        if not match:
            return None
        raw = match.group(1) if match.group(1) is not None else match.group(2).strip()

    if "%" in raw:
        try:
            raw = unquote(raw, errors="strict")
        except UnicodeDecodeError:
            pass
    return raw or None


def text_result(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=False)


def json_result(payload: Any) -> CallToolResult:
    return text_result(to_json(payload))


def error_result(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=True)
