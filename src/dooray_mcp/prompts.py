"""Static MCP prompts for common Dooray workflows."""
import logging
from typing import Optional

from mcp.types import GetPromptResult, Prompt, PromptArgument, PromptMessage, TextContent

logger = logging.getLogger("dooray-mcp.prompts")

PROMPTS: tuple[Prompt, ...] = (
    Prompt(
        name="create-task-with-template",
        description="Create a new task using a structured template with all necessary fields",
        arguments=[
            PromptArgument(name="projectId", description="The project ID where the task will be created",
                           required=True),
            PromptArgument(name="taskType", description="Type of task: bug, feature, improvement, or general",
                           required=False),
        ],
    ),
    Prompt(
        name="weekly-task-summary",
        description="Generate a summary of tasks assigned to you for the current week",
        arguments=[
            PromptArgument(name="projectId", description="The project ID to summarize tasks from", required=True),
        ],
    ),
    Prompt(
        name="project-status-report",
        description="Generate a project status report including task counts by workflow status",
        arguments=[
            PromptArgument(name="projectId", description="The project ID to generate report for", required=True),
        ],
    ),
    Prompt(
        name="task-review-checklist",
        description="Create a review checklist for a specific task",
        arguments=[
            PromptArgument(name="projectId", description="The project ID", required=True),
            PromptArgument(name="taskId", description="The task ID to create a review checklist for",
                           required=True),
        ],
    ),
)

TASK_TEMPLATES = {
    "bug": """## Bug Report

**Project ID**: {project_id}

### Description
[Describe the bug clearly]

### Steps to Reproduce
1.
2.
3.

### Expected Behavior
[What should happen]

### Actual Behavior
[What actually happens]

### Environment
- Browser/OS:
- Version:

### Priority
- [ ] High (service outage)
- [ ] Normal (broken feature)
- [ ] Low (needs improvement)""",
    "feature": """## Feature Request

**Project ID**: {project_id}

### Summary
[Brief description of the feature]

### User Story
As a [type of user], I want [goal] so that [benefit].

### Acceptance Criteria
- [ ]
- [ ]
- [ ]

### Technical Notes
[Any technical considerations]""",
    "improvement": """## Improvement

**Project ID**: {project_id}

### Current State
[Describe current behavior]

### Proposed Improvement
[Describe the improvement]

### Benefits
-
-

### Implementation Notes
[Technical details if any]""",
    "general": """## Task

**Project ID**: {project_id}

### Subject
[Task title]

### Description
[Detailed description]

### Checklist
- [ ]
- [ ]

### Due Date
[If applicable]""",
}


def _create_task_with_template(args: dict) -> str:
    task_type = args.get("taskType") or "general"
    template = TASK_TEMPLATES.get(task_type, TASK_TEMPLATES["general"])
    return (f"Use this template to create a new {task_type} task in Dooray:\n\n"
            + template.format(project_id=args["projectId"]))


def _weekly_task_summary(args: dict) -> str:
    project_id = args["projectId"]
    return f"""Generate a weekly task summary for project {project_id}.

Please:
1. First call get-my-member-info to get my member ID
2. Then call get-task-list with:
   - projectId: {project_id}
   - toMemberIds: [my member ID]
   - postWorkflowClasses: ["working", "registered"]
3. Summarize the tasks grouped by status
4. Highlight any overdue tasks"""


def _project_status_report(args: dict) -> str:
    return f"""Generate a project status report for project {args["projectId"]}.

Please:
1. Call get-project to get project details
2. Call get-project-workflow-list to get all workflow statuses
3. For each workflow class (backlog, registered, working, closed), call get-task-list to count tasks
4. Call get-milestone-list to show milestone progress
5. Generate a summary report with:
   - Project overview
   - Task counts by status
   - Milestone progress
   - Any blocked or overdue items"""


def _task_review_checklist(args: dict) -> str:
    return f"""Create a review checklist for task {args["taskId"]} in project {args["projectId"]}.

Please:
1. Call get-task to get the task details
2. Call get-task-comment-list to see existing comments
3. Generate a review checklist including:
   - [ ] Task description is clear
   - [ ] Acceptance criteria defined
   - [ ] Assignee is set
   - [ ] Due date is appropriate
   - [ ] Tags/labels are correct
   - [ ] Related tasks are linked
4. Suggest any improvements to the task"""


_RENDERERS = {
    "create-task-with-template": _create_task_with_template,
    "weekly-task-summary": _weekly_task_summary,
    "project-status-report": _project_status_report,
    "task-review-checklist": _task_review_checklist,
}


def list_prompts() -> list[Prompt]:
    return list(PROMPTS)


def get_prompt(name: str, arguments: Optional[dict[str, str]] = None) -> GetPromptResult:
    """Render a prompt; raises ValueError for unknown names or missing arguments."""
    prompt = next((p for p in PROMPTS if p.name == name), None)
    if prompt is None:
        raise ValueError(f"Unknown prompt: {name}")

    args = arguments or {}
    missing = [a.name for a in prompt.arguments or [] if a.required and not args.get(a.name)]
    if missing:
        raise ValueError(f"Missing required argument(s) for prompt {name}: {', '.join(missing)}")

    logger.info(f"Prompt requested: {name}")
    text = _RENDERERS[name](args)
    return GetPromptResult(
        description=prompt.description,
        messages=[PromptMessage(role="user", content=TextContent(type="text", text=text))],
    )
