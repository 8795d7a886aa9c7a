"""
stack_deployer - CloudFormation stack deployment with live progress events.

Usage:
    from stack_deployer.core.factory import create_context
    from stack_deployer import deployer

    context = create_context("/projects/my-app")
    deployer.update_stack(context, "templates/root-stack.json")
"""

__version__ = "0.1.0"
