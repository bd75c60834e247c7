"""Tests for representative tool handlers."""
import asyncio
import base64
import json
import time
from pathlib import Path

import httpx
import pytest
from pydantic import ValidationError

from dooray_mcp import handlers, schemas
from dooray_mcp.errors import AuthenticationError

from fakes import envelope, make_client, ok, request_json


def payload_of(result):
    return json.loads(result.content[0].text)


class TestTaskHandlers:
    """Test task list, create and update handlers."""

    @pytest.mark.asyncio
    async def test_task_list_params(self):
        """List filters are comma-joined; unset filters are not sent."""
        client, recorder = make_client(lambda request: ok(
            [{"id": "t1", "subject": "Fix login", "workflowClass": "working", "body": {"content": "long"}}],
            total_count=12))
        arguments = schemas.GetTaskListInput.model_validate({
            "projectId": "p1",
            "toMemberIds": ["m1", "m2"],
            "postWorkflowClasses": ["working", "registered"],
            "size": 5,
        })

        async with client:
            result = await handlers.handle_get_task_list(arguments, client)

        request = recorder.requests[0]
        assert request.url.path == "/project/v1/projects/p1/posts"
        assert dict(request.url.params) == {
            "page": "0",
            "size": "5",
            "toMemberIds": "m1,m2",
            "postWorkflowClasses": "working,registered",
            "order": "-postUpdatedAt",
        }
        assert payload_of(result) == {
            "totalCount": 12,
            "data": [{"id": "t1", "subject": "Fix login", "workflowClass": "working"}],
        }

    @pytest.mark.asyncio
    async def test_get_task_without_project_uses_global_endpoint(self):
        client, recorder = make_client(lambda request: ok({"id": "t1"}))
        async with client:
            await handlers.handle_get_task(schemas.GetTaskInput(task_id="t1"), client)
            await handlers.handle_get_task(schemas.GetTaskInput(task_id="t1", project_id="p1"), client)

        assert recorder.requests[0].url.path == "/project/v1/posts/t1"
        assert recorder.requests[1].url.path == "/project/v1/projects/p1/posts/t1"

    @pytest.mark.asyncio
    async def test_create_task_body(self):
        client, recorder = make_client(lambda request: ok({"id": "new-task"}))
        arguments = schemas.CreateTaskInput.model_validate({
            "projectId": "p1",
            "subject": "Write docs",
            "body": {"mimeType": "text/x-markdown", "content": "# Docs"},
            "assignees": [{"id": "m1", "type": "member"}],
            "cc": [{"id": "a@b.com", "type": "email"}, {"id": "g1", "type": "group"}],
            "dueDate": "2026-10-31T18:00:00+09:00",
            "priority": "high",
        })

        async with client:
            result = await handlers.handle_create_task(arguments, client)

        assert payload_of(result) == {"id": "new-task"}
        body = request_json(recorder.requests[0])
        assert body == {
            "subject": "Write docs",
            "body": {"mimeType": "text/x-markdown", "content": "# Docs"},
            "dueDate": "2026-10-31T18:00:00+09:00",
            "dueDateFlag": True,
            "priority": "high",
            "users": {
                "to": [{"type": "member", "member": {"organizationMemberId": "m1"}}],
                "cc": [
                    {"type": "email", "member": {"emailAddress": "a@b.com"}},
                    {"type": "group", "organizationGroup": {"id": "g1"}},
                ],
            },
        }

    @pytest.mark.asyncio
    async def test_update_task_fields_and_workflow(self):
        client, recorder = make_client(lambda request: ok(None))
        arguments = schemas.UpdateTaskInput.model_validate({
            "projectId": "p1", "taskId": "t1", "subject": "Renamed", "workflowId": "w-done",
        })

        async with client:
            result = await handlers.handle_update_task(arguments, client)

        assert result.isError is False
        put, set_workflow = recorder.requests
        assert put.method == "PUT"
        assert request_json(put) == {"subject": "Renamed"}
        assert set_workflow.method == "POST"
        assert set_workflow.url.path == "/project/v1/projects/p1/posts/t1/set-workflow"
        assert request_json(set_workflow) == {"workflowId": "w-done"}

    @pytest.mark.asyncio
    async def test_update_task_workflow_only(self):
        client, recorder = make_client(lambda request: ok(None))
        arguments = schemas.UpdateTaskInput(project_id="p1", task_id="t1", workflow_id="w1")

        async with client:
            result = await handlers.handle_update_task(arguments, client)

        assert [r.method for r in recorder.requests] == ["POST"]
        assert payload_of(result)["workflowId"] == "w1"

    @pytest.mark.asyncio
    async def test_update_task_partial_failure(self):
        """Fields updated but workflow change rejected: reported as an error result."""
        def responder(request):
            if request.url.path.endswith("/set-workflow"):
                return httpx.Response(400, json=envelope(None, success=False, message="Invalid workflow"))
            return ok(None)

        client, _ = make_client(responder)
        arguments = schemas.UpdateTaskInput(project_id="p1", task_id="t1", priority="low", workflow_id="bad")

        async with client:
            result = await handlers.handle_update_task(arguments, client)

        assert result.isError is True
        assert "fields were updated" in result.content[0].text
        assert "Invalid workflow (HTTP 400)" in result.content[0].text

    @pytest.mark.asyncio
    async def test_update_task_without_changes(self):
        client, recorder = make_client(lambda request: ok(None))

        async with client:
            result = await handlers.handle_update_task(schemas.UpdateTaskInput(project_id="p1", task_id="t1"), client)

        assert result.isError is True
        assert result.content[0].text.startswith("Validation Error:")
        assert recorder.requests == []


class TestProjectHandlers:
    """Test tag, member and member-group handlers."""

    @pytest.mark.asyncio
    async def test_tag_list_grouped(self):
        tags = [
            {"id": "t1", "name": "bug", "tagGroup": {"id": "g1", "name": "type", "mandatory": True, "selectOne": True}},
            {"id": "t2", "name": "feature", "tagGroup": {"id": "g1", "name": "type", "mandatory": True,
                                                         "selectOne": True}},
            {"id": "t3", "name": "misc"},
        ]
        client, recorder = make_client(lambda request: ok(tags, total_count=3))

        async with client:
            result = await handlers.handle_get_tag_list(schemas.GetTagListInput(project_id="p1"), client)

        assert recorder.requests[0].url.params["size"] == "100"
        payload = payload_of(result)
        assert payload["totalCount"] == 3
        assert payload["tagGroups"] == [{
            "id": "g1", "name": "type", "mandatory": True, "selectOne": True,
            "tags": [{"id": "t1", "name": "bug"}, {"id": "t2", "name": "feature"}],
        }]
        assert payload["ungroupedTags"] == [{"id": "t3", "name": "misc"}]

    @pytest.mark.asyncio
    async def test_member_list_enriched_with_details(self):
        """Member details are fetched per member; failed lookups degrade to Unknown."""
        def responder(request):
            path = request.url.path
            if path == "/project/v1/projects/p1/members":
                return ok([
                    {"organizationMemberId": "m1", "role": "admin"},
                    {"organizationMemberId": "m2", "role": "member"},
                ], total_count=2)
            if path == "/common/v1/members/m1":
                return ok({"id": "m1", "name": "Kim", "externalEmailAddress": "kim@example.com"})
            return httpx.Response(404, json=envelope(None, success=False, message="Not found"))

        client, recorder = make_client(responder)
        arguments = schemas.GetProjectMemberListInput.model_validate({"projectId": "p1", "roles": ["admin", "member"]})

        async with client:
            result = await handlers.handle_get_project_member_list(arguments, client)

        assert recorder.requests[0].url.params["roles"] == "admin,member"
        assert payload_of(result) == {
            "totalCount": 2,
            "data": [
                {"id": "m1", "name": "Kim", "externalEmailAddress": "kim@example.com", "role": "admin"},
                {"id": "m2", "name": "Unknown", "externalEmailAddress": "Unknown", "role": "member"},
            ],
        }

    @pytest.mark.asyncio
    async def test_member_group_list_is_flattened(self):
        groups = [[{"id": "g1", "code": "backend", "members": []}]]
        client, _ = make_client(lambda request: ok(groups, total_count=1))

        async with client:
            result = await handlers.handle_get_project_member_group_list(
                schemas.GetProjectMemberGroupListInput(project_id="p1"), client)

        assert payload_of(result) == {"totalCount": 1, "data": [{"id": "g1", "code": "backend"}]}


class TestFileHandlers:
    """Test upload and download handlers against the two-step protocol."""

    @pytest.mark.asyncio
    async def test_upload_attachment_from_disk(self, tmp_path):
        source = tmp_path / "notes.txt"
        source.write_bytes(b"meeting notes")

        def responder(request):
            if request.url.host == "api.dooray.test":
                return httpx.Response(307, headers={"Location": "https://file.dooray.test/upload/abc"})
            return ok({"id": "file-9"})

        client, recorder = make_client(responder)
        arguments = schemas.UploadAttachmentInput(project_id="p1", task_id="t1", file_path=str(source))

        async with client:
            result = await handlers.handle_upload_attachment(arguments, client)

        assert payload_of(result) == {
            "success": True,
            "fileId": "file-9",
            "fileName": "notes.txt",
            "message": 'File "notes.txt" successfully uploaded to task.',
        }
        assert recorder.requests[0].url.path == "/project/v1/projects/p1/posts/t1/files"
        assert b"meeting notes" in recorder.requests[1].content

    @pytest.mark.asyncio
    async def test_update_drive_file_uses_put_raw(self, tmp_path):
        source = tmp_path / "spec.md"
        source.write_text("v2")
        client, recorder = make_client(lambda request: ok({"id": "f1", "version": 2}))
        arguments = schemas.UpdateDriveFileInput(drive_id="d1", file_id="f1", file_path=str(source))

        async with client:
            result = await handlers.handle_update_drive_file(arguments, client)

        request = recorder.requests[0]
        assert request.method == "PUT"
        assert request.url.path == "/drive/v1/drives/d1/files/f1"
        assert request.url.params["media"] == "raw"
        assert payload_of(result)["version"] == 2

    @pytest.mark.asyncio
    async def test_download_inline_base64(self):
        client, _ = make_client(lambda request: httpx.Response(
            200, content=b"\x00\x01binary",
            headers={"Content-Type": "image/png", "Content-Disposition": 'attachment; filename="a.png"'}))
        arguments = schemas.DownloadAttachmentInput(project_id="p1", task_id="t1", file_id="f1")

        async with client:
            result = await handlers.handle_download_attachment(arguments, client)

        payload = payload_of(result)
        assert payload["filename"] == "a.png"
        assert payload["contentType"] == "image/png"
        assert base64.b64decode(payload["base64Data"]) == b"\x00\x01binary"
        assert "savedTo" not in payload

    @pytest.mark.asyncio
    async def test_download_into_directory_keeps_name_inside(self, tmp_path):
        """The server-supplied name cannot escape the target directory."""
        client, _ = make_client(lambda request: httpx.Response(
            200, content=b"pdf", headers={"Content-Disposition": 'attachment; filename="../../escape.pdf"'}))
        arguments = schemas.DownloadDriveFileInput(drive_id="d1", file_id="f1", save_path=str(tmp_path))

        async with client:
            result = await handlers.handle_download_drive_file(arguments, client)

        saved = tmp_path / "escape.pdf"
        assert saved.read_bytes() == b"pdf"
        assert payload_of(result)["savedTo"] == str(saved)
        assert "base64Data" not in payload_of(result)

    @pytest.mark.asyncio
    async def test_download_to_file_path_creates_parents(self, tmp_path):
        target = tmp_path / "nested" / "dir" / "out.bin"
        client, _ = make_client(lambda request: httpx.Response(200, content=b"abc"))
        arguments = schemas.DownloadDriveFileInput(drive_id="d1", file_id="f1", save_path=str(target))

        async with client:
            result = await handlers.handle_download_drive_file(arguments, client)

        assert target.read_bytes() == b"abc"
        assert "(3 bytes)" in payload_of(result)["message"]

    @pytest.mark.asyncio
    async def test_upload_missing_file(self, tmp_path):
        client, recorder = make_client(lambda request: ok(None))
        missing = str(tmp_path / "nope.bin")
        arguments = schemas.UploadDriveFileInput(drive_id="d1", parent_id="root", file_path=missing)

        async with client:
            result = await handlers.handle_upload_drive_file(arguments, client)

        assert result.isError is True
        assert result.content[0].text == f"Error: File not found: {missing}"
        assert recorder.requests == []


class TestDriveAndWikiHandlers:
    """Test request shapes of drive and wiki handlers."""

    @pytest.mark.asyncio
    async def test_rename_drive_file(self):
        client, recorder = make_client(lambda request: ok(None))

        async with client:
            await handlers.handle_rename_drive_file(
                schemas.RenameDriveFileInput(drive_id="d1", file_id="f1", name="new.txt"), client)

        request = recorder.requests[0]
        assert request.method == "PUT"
        assert request.url.params["media"] == "meta"
        assert request_json(request) == {"name": "new.txt"}

    @pytest.mark.asyncio
    async def test_drive_file_list_params(self):
        client, recorder = make_client(lambda request: ok([], total_count=0))
        arguments = schemas.GetDriveFileListInput.model_validate({"driveId": "d1", "parentId": "root", "type": "file"})

        async with client:
            await handlers.handle_get_drive_file_list(arguments, client)

        request = recorder.requests[0]
        assert request.url.path == "/drive/v1/drives/d1/files"
        assert dict(request.url.params) == {"parentId": "root", "type": "file"}

    @pytest.mark.asyncio
    async def test_create_wiki_page(self):
        client, recorder = make_client(lambda request: ok({"id": "page-1"}))
        arguments = schemas.CreateWikiPageInput.model_validate({
            "wikiId": "w1", "parentPageId": "root-page", "subject": "Runbook", "content": "# Steps",
            "referrers": ["m1"],
        })

        async with client:
            await handlers.handle_create_wiki_page(arguments, client)

        assert recorder.requests[0].url.path == "/wiki/v1/wikis/w1/pages"
        assert request_json(recorder.requests[0]) == {
            "parentPageId": "root-page",
            "subject": "Runbook",
            "body": {"mimeType": "text/x-markdown", "content": "# Steps"},
            "referrers": [{"type": "member", "member": {"organizationMemberId": "m1"}}],
        }

    @pytest.mark.asyncio
    async def test_wiki_comment_update(self):
        client, recorder = make_client(lambda request: ok(None))
        arguments = schemas.UpdateWikiPageCommentInput(wiki_id="w1", page_id="p1", comment_id="c1", content="edited")

        async with client:
            result = await handlers.handle_update_wiki_page_comment(arguments, client)

        assert recorder.requests[0].url.path == "/wiki/v1/wikis/w1/pages/p1/comments/c1"
        assert request_json(recorder.requests[0]) == {"body": {"content": "edited"}}
        assert payload_of(result)["success"] is True


class TestTemplateHandlers:
    """Test the template request body."""

    @pytest.mark.asyncio
    async def test_email_user_shape_and_omitted_side(self):
        """External users use the emailUser shape; an omitted cc is not sent."""
        client, recorder = make_client(lambda request: ok({"id": "tpl-1"}))
        arguments = schemas.CreateProjectTemplateInput.model_validate({
            "projectId": "p1",
            "templateName": "Bug",
            "users": {"to": [
                {"type": "emailUser", "emailAddress": "a@b.c", "name": "Partner"},
                {"type": "member", "organizationMemberId": "m1"},
            ]},
        })

        async with client:
            await handlers.handle_create_project_template(arguments, client)

        assert request_json(recorder.requests[0]) == {
            "templateName": "Bug",
            "users": {"to": [
                {"type": "emailUser", "emailUser": {"emailAddress": "a@b.c", "name": "Partner"}},
                {"type": "member", "member": {"organizationMemberId": "m1"}},
            ]},
        }

    @pytest.mark.asyncio
    async def test_update_with_cc_only_leaves_assignees_alone(self):
        client, recorder = make_client(lambda request: ok(None))
        arguments = schemas.UpdateProjectTemplateInput.model_validate({
            "projectId": "p1",
            "templateId": "tpl-1",
            "templateName": "Bug",
            "users": {"cc": [{"type": "emailUser", "emailAddress": "qa@b.c"}]},
        })

        async with client:
            await handlers.handle_update_project_template(arguments, client)

        request = recorder.requests[0]
        assert request.url.path == "/project/v1/projects/p1/templates/tpl-1"
        assert request_json(request)["users"] == {
            "cc": [{"type": "emailUser", "emailUser": {"emailAddress": "qa@b.c", "name": ""}}],
        }

    @pytest.mark.parametrize("user", [
        {"type": "email", "emailAddress": "a@b.c"},
        {"type": "group", "organizationMemberId": "g1"},
        {"type": "member"},
        {"type": "emailUser", "name": "No address"},
    ])
    def test_invalid_template_users_rejected(self, user):
        with pytest.raises(ValidationError):
            schemas.CreateProjectTemplateInput.model_validate(
                {"projectId": "p1", "templateName": "x", "users": {"to": [user]}})


class TestMemberEnrichment:
    """Test failure handling of concurrent member lookups."""

    @pytest.mark.asyncio
    async def test_empty_member_details(self):
        def responder(request):
            if request.url.path.endswith("/members"):
                return ok([{"organizationMemberId": "m1", "role": "member"}], total_count=1)
            return ok(None)

        client, _ = make_client(responder)

        async with client:
            result = await handlers.handle_get_project_member_list(
                schemas.GetProjectMemberListInput(project_id="p1"), client)

        assert payload_of(result)["data"] == [
            {"id": "m1", "name": None, "externalEmailAddress": None, "role": "member"},
        ]

    @pytest.mark.asyncio
    async def test_authentication_failure_after_all_lookups(self):
        """A 401 from one lookup surfaces only once every sibling lookup has finished."""
        def responder(request):
            path = request.url.path
            if path.endswith("/members"):
                return ok([{"organizationMemberId": f"m{i}"} for i in range(3)], total_count=3)
            if path.endswith("/m1"):
                return httpx.Response(401)
            return ok({"id": path.rsplit("/", 1)[-1], "name": "Someone"})

        client, recorder = make_client(responder)

        async with client:
            with pytest.raises(AuthenticationError):
                await handlers.handle_get_project_member_list(
                    schemas.GetProjectMemberListInput(project_id="p1"), client)

        assert len(recorder.requests) == 4


async def _max_tick_gap(work) -> float:
    """Run ``work`` next to a 10 ms ticker; return the longest gap between ticks."""
    done = asyncio.Event()
    ticks = []

    async def ticker():
        while not done.is_set():
            ticks.append(time.monotonic())
            await asyncio.sleep(0.01)

    async def run_work():
        try:
            return await work
        finally:
            done.set()

    _, result = await asyncio.gather(ticker(), run_work())
    assert result.isError is False
    return max(b - a for a, b in zip(ticks, ticks[1:]))


class TestFileIOConcurrency:
    """Test that local file I/O does not stall other tool calls."""

    @pytest.mark.asyncio
    async def test_slow_upload_read_keeps_loop_responsive(self, tmp_path, monkeypatch):
        source = tmp_path / "big.bin"
        source.write_bytes(b"x" * 1024)
        read_bytes = Path.read_bytes

        def slow_read(self):
            time.sleep(0.3)
            return read_bytes(self)

        monkeypatch.setattr(Path, "read_bytes", slow_read)
        client, _ = make_client(lambda request: ok({"id": "f1"}))
        arguments = schemas.UploadAttachmentInput(project_id="p1", task_id="t1", file_path=str(source))

        async with client:
            gap = await _max_tick_gap(handlers.handle_upload_attachment(arguments, client))

        assert gap < 0.2

    @pytest.mark.asyncio
    async def test_slow_download_write_keeps_loop_responsive(self, tmp_path, monkeypatch):
        write_bytes = Path.write_bytes

        def slow_write(self, data):
            time.sleep(0.3)
            return write_bytes(self, data)

        monkeypatch.setattr(Path, "write_bytes", slow_write)
        client, _ = make_client(lambda request: httpx.Response(200, content=b"abc"))
        arguments = schemas.DownloadDriveFileInput(
            drive_id="d1", file_id="f1", save_path=str(tmp_path / "out.bin"))

        async with client:
            gap = await _max_tick_gap(handlers.handle_download_drive_file(arguments, client))

        assert gap < 0.2
        assert (tmp_path / "out.bin").read_bytes() == b"abc"
