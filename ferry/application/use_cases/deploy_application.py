"""
Deploy Application Use Case

Architectural Intent:
- Orchestrates the create command end to end
- Parameter resolution always completes before substitution starts
- Template mode is on when a template context exists or parameters were
  supplied; otherwise the descriptor is submitted verbatim
- Dry-run stops after resolution and returns the descriptor for display
"""

import logging
from typing import Optional

from ferry.application.dtos.deployment_dtos import (
    CreateApplicationRequest,
    CreateApplicationResponse,
)
from ferry.application.orchestration.deployment_submitter import DeploymentSubmitter
from ferry.application.orchestration.deployment_waiter import DeploymentWaiter
from ferry.domain.ports.descriptor_port import DescriptorPort
from ferry.domain.services.parameter_resolver import ParameterResolver
from ferry.domain.services.template_transformer import TemplateTransformer

logger = logging.getLogger(__name__)


class DeployApplication:
    def __init__(
        self,
        descriptors: DescriptorPort,
        submitter: DeploymentSubmitter,
        waiter: DeploymentWaiter,
        resolver: Optional[ParameterResolver] = None,
        transformer: Optional[TemplateTransformer] = None,
    ):
        self.descriptors = descriptors
        self.submitter = submitter
        self.waiter = waiter
        self.resolver = resolver or ParameterResolver()
        self.transformer = transformer or TemplateTransformer()

    async def execute(self, request: CreateApplicationRequest) -> CreateApplicationResponse:
        options = request.options
        has_context = self.descriptors.context_exists(request.template_context_path)
        context = (
            self.descriptors.load_context(request.template_context_path)
            if has_context
            else {}
        )

        parameters = self.resolver.resolve(
            request.params_file, request.params, base=context
        )

        unresolved: tuple[str, ...] = ()
        if has_context or request.params_file or request.params:
            resolved = self.transformer.transform(
                request.descriptor_path, parameters, options.error_on_missing_params
            )
            text = resolved.text
            unresolved = resolved.unresolved
            if unresolved:
                logger.warning(
                    "Leaving unresolved parameter(s) in place: %s",
                    ", ".join(unresolved),
                )
        else:
            text = self.descriptors.read_text(request.descriptor_path)

        payload = self.descriptors.parse(text, request.descriptor_path)

        if options.dry_run:
            logger.info("Dry run: %s will not be submitted", request.descriptor_path)
            return CreateApplicationResponse(
                descriptor_text=text, dry_run=True, unresolved_params=unresolved
            )

        application = await self.submitter.submit(payload, options)

        wait = None
        if options.wait:
            wait = await self.waiter.wait_for_all(
                application.deployments, options.timeout
            )

        return CreateApplicationResponse(
            application=application,
            descriptor_text=text,
            unresolved_params=unresolved,
            wait=wait,
        )
