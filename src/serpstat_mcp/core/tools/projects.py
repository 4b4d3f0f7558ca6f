"""Project management tools."""

from __future__ import annotations

from .base import Tool, Toolkit, paged_result_schema
from .constants import (
    DEFAULT_PROJECT_PAGE_SIZE,
    MAX_PROJECT_GROUP_NAME_LENGTH,
    MAX_PROJECT_NAME_LENGTH,
    MIN_PAGE,
    MIN_PROJECT_ID,
    MIN_PROJECT_NAME_LENGTH,
    PROJECT_ALLOWED_PAGE_SIZES,
    domain_field,
)


def projects_toolkit() -> Toolkit:
    create_project = Tool(
        name="create_project",
        description="Create a new project in Serpstat for tracking SEO metrics and site audits",
        input_schema={
            "type": "object",
            "properties": {
                "domain": domain_field("The domain associated with the project (e.g., example.com)"),
                "name": {
                    "type": "string",
                    "minLength": MIN_PROJECT_NAME_LENGTH,
                    "maxLength": MAX_PROJECT_NAME_LENGTH,
                    "description": "The name of the project. Can be the same as the domain or a custom name",
                },
                "groups": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "name": {
                                "type": "string",
                                "minLength": MIN_PROJECT_NAME_LENGTH,
                                "maxLength": MAX_PROJECT_GROUP_NAME_LENGTH,
                                "description": "The name of the group",
                            }
                        },
                        "required": ["name"],
                        "additionalProperties": False,
                    },
                    "description": (
                        "Optional list of groups to associate with the project. "
                        "Groups will be created if they don't exist"
                    ),
                },
            },
            "required": ["domain", "name"],
            "additionalProperties": False,
        },
        method="ProjectProcedure.createProject",
        output_schema={
            "type": "object",
            "properties": {"project_id": {"type": ["integer", "string"]}},
            "required": ["project_id"],
        },
        log_metrics=lambda result: {"project_id": result.get("project_id")},
    )

    delete_project = Tool(
        name="delete_project",
        description=(
            "Permanently delete your project from Serpstat by project ID. **CRITICAL: ALWAYS request "
            "explicit user confirmation before executing. This action cannot be undone.**"
        ),
        input_schema={
            "type": "object",
            "properties": {
                "project_id": {
                    "type": "integer",
                    "minimum": MIN_PROJECT_ID,
                    "description": "The unique ID of the project to delete",
                }
            },
            "required": ["project_id"],
            "additionalProperties": False,
        },
        method="ProjectProcedure.deleteProject",
        output_schema={"type": "boolean"},
        unwrap=lambda result: {"success": result},
        log_metrics=lambda result: {"success": result},
    )

    list_projects = Tool(
        name="list_projects",
        description="Retrieve a list of projects associated with the account, with pagination support",
        input_schema={
            "type": "object",
            "properties": {
                "page": {
                    "type": "integer",
                    "minimum": MIN_PAGE,
                    "default": 1,
                    "description": "The page number in the projects list",
                },
                "size": {
                    "type": "integer",
                    "enum": list(PROJECT_ALLOWED_PAGE_SIZES),
                    "default": DEFAULT_PROJECT_PAGE_SIZE,
                    "description": (
                        "Number of results per page. Allowed values: "
                        + ", ".join(str(size) for size in PROJECT_ALLOWED_PAGE_SIZES)
                    ),
                },
            },
            "additionalProperties": False,
        },
        method="ProjectProcedure.getProjects",
        output_schema=paged_result_schema(),
        request_prefix="get_projects",
    )

    return Toolkit(
        name="serpstat.projects",
        version="1.0.0",
        description="Create, delete and list Serpstat projects.",
        tools=[create_project, delete_project, list_projects],
    )


__all__ = ["projects_toolkit"]
