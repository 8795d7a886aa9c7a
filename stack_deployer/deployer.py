"""
Stack Deployer - entry points.

Each function builds a StackOperation and runs it through a
StackOperationController assembled from the DeploymentContext.

Usage:
    context = create_context("/projects/my-app")
    outputs = create_stack(context, "my-app", "https://s3.amazonaws.com/bucket/root-stack.json")
    outputs = update_stack(context, "templates/root-stack.json")
    delete_stack(context)
"""

from pathlib import Path
from typing import Mapping, Optional

from stack_deployer.core.context import DeploymentContext
from stack_deployer.core.models import OperationKind, OutputMap, StackOperation
from stack_deployer.deployers.stack_controller import StackOperationController
from stack_deployer.logger import logger


def _controller(context: DeploymentContext) -> StackOperationController:
    return StackOperationController(
        context.provider.stack_client(),
        context.metadata,
        uploader_factory=context.provider.artifact_uploader,
        config=context.config,
    )


def create_stack(
    context: DeploymentContext,
    stack_name: str,
    template_url: str,
    parameters: Optional[Mapping[str, str]] = None
) -> OutputMap:
    """
    Create the project stack from an uploaded template.

    Args:
        context: Deployment context
        stack_name: Name of the new stack
        template_url: URL of the root template
        parameters: Template parameters

    Returns:
        Outputs propagated into project metadata
    """
    logger.info(f"Creating stack {stack_name} for project {context.project_path}")
    op = StackOperation(
        kind=OperationKind.CREATE,
        stack_name=stack_name,
        remote_parameters=dict(parameters or {}),
        template_location=template_url,
    )
    return _controller(context).execute(op)


def update_stack(
    context: DeploymentContext,
    template_path: str,
    parameters: Optional[Mapping[str, str]] = None
) -> OutputMap:
    """
    Upload a local template and update the project stack with it.

    Args:
        context: Deployment context
        template_path: Template file, absolute or relative to the project path
        parameters: Extra template parameters

    Returns:
        Outputs propagated into project metadata
    """
    path = Path(template_path)
    if not path.is_absolute():
        path = context.get_project_file(template_path)

    logger.info(f"Updating project stack with template {path}")
    op = StackOperation(
        kind=OperationKind.UPDATE,
        remote_parameters=dict(parameters or {}),
        template_location=str(path),
    )
    return _controller(context).execute(op)


def delete_stack(context: DeploymentContext) -> None:
    """Delete the project stack recorded in project metadata."""
    logger.info(f"Deleting project stack for {context.project_path}")
    _controller(context).execute(StackOperation(kind=OperationKind.DELETE))
