"""Templated pipeline configuration documents.

A configuration document (``schema: "1"``) binds an application pipeline to a
pipeline template. ``PipelineConfiguration.to_client`` turns it into the
pipeline config payload gate stores.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, ValidationError

from roer.spinnaker.errors import DecodeError
from roer.spinnaker.models import PipelineConfig, SpinnakerModel

TEMPLATED_PIPELINE_TYPE = "templatedPipeline"


class TemplateSource(SpinnakerModel):
    source: str = ""


class PipelineConfigurationDefinition(SpinnakerModel):
    application: str = ""
    name: str = ""
    template: TemplateSource = Field(default_factory=TemplateSource)
    pipeline_config_id: str = Field("", alias="pipelineConfigId")
    variables: dict[str, Any] = Field(default_factory=dict)


class PipelineConfigurationSettings(SpinnakerModel):
    inherit: list[str] = Field(default_factory=list)
    concurrent_executions: dict[str, bool] = Field(default_factory=dict, alias="concurrentExecutions")
    triggers: list[Any] = Field(default_factory=list)
    expected_artifacts: list[Any] = Field(default_factory=list, alias="expectedArtifacts")
    parameters: list[Any] = Field(default_factory=list)
    notifications: list[Any] = Field(default_factory=list)
    description: str = ""


class PipelineConfiguration(SpinnakerModel):
    schema_version: str = Field("", alias="schema")
    id: str = ""
    pipeline: PipelineConfigurationDefinition = Field(default_factory=PipelineConfigurationDefinition)
    configuration: PipelineConfigurationSettings = Field(default_factory=PipelineConfigurationSettings)
    stages: list[dict[str, Any]] = Field(default_factory=list)
    modules: Optional[list[dict[str, Any]]] = None
    partials: Optional[list[dict[str, Any]]] = None

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "PipelineConfiguration":
        try:
            return cls.model_validate(document)
        except ValidationError as exc:
            raise DecodeError(f"converting configuration document: {exc}") from exc

    def to_client(self) -> PipelineConfig:
        """Build the gate pipeline config for this configuration."""
        concurrent = self.configuration.concurrent_executions
        return PipelineConfig(
            id=self.pipeline.pipeline_config_id or None,
            type=TEMPLATED_PIPELINE_TYPE,
            name=self.pipeline.name,
            application=self.pipeline.application,
            description=self.configuration.description or None,
            parallel=concurrent.get("parallel", True),
            limit_concurrent=concurrent.get("limitConcurrent", True),
            keep_waiting_pipelines=concurrent.get("keepWaitingPipelines", False),
            config=self.to_json_dict(),
        )


__all__ = [
    "TEMPLATED_PIPELINE_TYPE",
    "PipelineConfiguration",
    "PipelineConfigurationDefinition",
    "PipelineConfigurationSettings",
    "TemplateSource",
]
