"""Static reference documents served as MCP resources."""
import json
import logging

from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.types import Resource

from . import tools
from .config import DEFAULT_BASE_URL

logger = logging.getLogger("dooray-mcp.resources")

API_INFO_URI = "dooray://api/info"
WORKFLOWS_URI = "dooray://workflows/reference"
PRIORITY_URI = "dooray://priority/reference"

DOCUMENTATION_URL = "https://helpdesk.dooray.com/share/pages/9wWo-xwiR66BO5LGshgVTg"

RESOURCES: tuple[Resource, ...] = (
    Resource(
        uri=API_INFO_URI,
        name="Dooray API Information",
        description="Information about the Dooray API and available endpoints",
        mimeType="application/json",
    ),
    Resource(
        uri=WORKFLOWS_URI,
        name="Workflow Status Reference",
        description="Reference guide for Dooray workflow statuses (backlog, registered, working, closed)",
        mimeType="text/markdown",
    ),
    Resource(
        uri=PRIORITY_URI,
        name="Priority Reference",
        description="Reference guide for Dooray task priorities",
        mimeType="text/markdown",
    ),
)

WORKFLOWS_REFERENCE = """# Dooray Workflow Status Reference

## Workflow Classes

Dooray tasks follow a workflow with 4 main classes:

| Class | Description |
|-------|-------------|
| `backlog` | Tasks waiting to be started |
| `registered` | Newly registered/acknowledged tasks |
| `working` | Tasks currently in progress |
| `closed` | Completed tasks |

## Using Workflows

### Filtering Tasks by Status
```json
{
  "projectId": "your-project-id",
  "postWorkflowClasses": ["working", "registered"]
}
```

### Getting All Workflow Statuses
Use `get-project-workflow-list` to get all custom workflow statuses for a project.

### Updating Task Status
Use `update-task` with `workflowId` to change a task's status:
```json
{
  "projectId": "your-project-id",
  "taskId": "task-id",
  "workflowId": "workflow-status-id"
}
```
"""

PRIORITY_REFERENCE = """# Dooray Task Priority Reference

## Priority Levels

| Priority | Value | Use Case |
|----------|-------|----------|
| Highest | `highest` | Critical issues requiring immediate attention |
| High | `high` | Important tasks that should be prioritized |
| Normal | `normal` | Standard priority (default) |
| Low | `low` | Can be addressed when time permits |
| Lowest | `lowest` | Nice to have, lowest priority |

## Setting Priority

When creating or updating a task:
```json
{
  "projectId": "your-project-id",
  "subject": "Task title",
  "priority": "high"
}
```
"""


def list_resources() -> list[Resource]:
    return list(RESOURCES)


def _api_info(base_url: str) -> str:
    return json.dumps({
        "name": "Dooray API",
        "version": "1.0",
        "baseUrl": base_url,
        "documentation": DOCUMENTATION_URL,
        "availableTools": [{"name": t.name, "description": t.description} for t in tools.get_tools()],
    }, ensure_ascii=False, indent=2)


def read_resource(uri: str, base_url: str = DEFAULT_BASE_URL) -> list[ReadResourceContents]:
    """Return the contents of a static resource; raises ValueError for unknown URIs."""
    uri = str(uri)
    logger.info(f"Resource requested: {uri}")
    if uri == API_INFO_URI:
        return [ReadResourceContents(content=_api_info(base_url), mime_type="application/json")]
    if uri == WORKFLOWS_URI:
        return [ReadResourceContents(content=WORKFLOWS_REFERENCE, mime_type="text/markdown")]
    if uri == PRIORITY_URI:
        return [ReadResourceContents(content=PRIORITY_REFERENCE, mime_type="text/markdown")]
    raise ValueError(f"Unknown resource: {uri}")
