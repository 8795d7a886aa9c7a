"""
Output propagation into project metadata.

After a successful create/update every project resource known to the
metadata store is matched against the root stack's resources by logical id
(``category + resourceName``). The outputs of the matching nested stack are
written back under that resource.
"""

from typing import Dict

from botocore.exceptions import BotoCoreError, ClientError

import stack_deployer.constants as CONSTANTS
from stack_deployer.core.exceptions import RemoteRequestError
from stack_deployer.core.models import OutputMap, ResourceKind, StackResource
from stack_deployer.core.protocols import MetadataStore, StackClient
from stack_deployer.logger import logger


class OutputPropagator:
    def __init__(self, stack_client: StackClient, metadata: MetadataStore):
        self.stack_client = stack_client
        self.metadata = metadata

    def _root_resources(self, stack_name: str) -> Dict[str, StackResource]:
        try:
            resources = self.stack_client.describe_stack_resources(stack_name)
        except (ClientError, BotoCoreError) as e:
            raise RemoteRequestError("describe_resources", e, stack_name=stack_name)

        return {
            resource.logical_resource_id: resource
            for resource in resources
            if resource.logical_resource_id != CONSTANTS.DEPLOYMENT_BUCKET_LOGICAL_ID
        }

    def propagate(self, stack_name: str) -> OutputMap:
        """
        Write the outputs of every matching nested stack into project metadata.

        Existing outputs are overwritten, so running this twice against
        unchanged stacks leaves the metadata unchanged.

        Returns:
            The outputs written, as category -> resource -> {key: value}.

        Raises:
            RemoteRequestError: If listing resources or reading outputs fails
        """
        resources = self._root_resources(stack_name)
        output_map: OutputMap = {}

        for category, resource_name in self.metadata.resource_keys():
            resource = resources.get(category + resource_name)
            if resource is None:
                continue
            if resource.resource_kind is not ResourceKind.NESTED_STACK:
                logger.debug(f"Resource {resource.logical_resource_id} is not a stack, no outputs to read")
                continue

            try:
                outputs = self.stack_client.describe_stack_outputs(resource.physical_resource_id)
            except (ClientError, BotoCoreError) as e:
                raise RemoteRequestError("describe_outputs", e, stack_name=resource.physical_resource_id)

            self.metadata.write_resource_outputs(category, resource_name, outputs)
            output_map.setdefault(category, {})[resource_name] = outputs
            logger.info(f"Updated outputs of {category}/{resource_name} ({len(outputs)} keys)")

        return output_map
