from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer


class _Descriptor(BaseModel):
    """Base for manifest models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True)

    def to_manifest(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Metadata(_Descriptor):
    name: str
    namespace: str
    labels: Optional[Dict[str, str]] = None


class ProviderRef(_Descriptor):
    api_version: str = Field(alias="apiVersion")
    kind: str
    name: str


class Requirement(_Descriptor):
    key: str
    operator: Literal["In"] = "In"
    values: List[str] = Field(min_length=1)


class ResourceLimits(_Descriptor):
    cpu: str
    memory: str


class Taint(_Descriptor):
    key: str
    value: str
    effect: str


class Consolidation(_Descriptor):
    enabled: bool = False


class MetadataOptions(_Descriptor):
    http_endpoint: Optional[str] = Field(default=None, alias="httpEndpoint")
    http_protocol_ipv6: Optional[str] = Field(default=None, alias="httpProtocolIPv6")
    http_put_response_hop_limit: Optional[int] = Field(
        default=None, alias="httpPutResponseHopLimit"
    )


class ProvisionerSpec(_Descriptor):
    provider_ref: ProviderRef = Field(alias="providerRef")
    requirements: List[Requirement]
    resource_limits: ResourceLimits = Field(alias="resourceLimits")
    taints: Optional[List[Taint]] = None
    labels: Optional[Dict[str, str]] = None
    weight: int = 50
    consolidation: Consolidation = Field(default_factory=Consolidation)
    ttl_seconds_after_empty: Optional[int] = Field(default=None, alias="ttlSecondsAfterEmpty")
    ttl_seconds_until_expired: Optional[int] = Field(
        default=None, alias="ttlSecondsUntilExpired"
    )

    @model_serializer(mode="wrap")
    def _omit_disabled_consolidation(self, handler):
        data = handler(self)
        # an all-zero consolidation block is left out of the manifest
        if not self.consolidation.enabled:
            data.pop("consolidation", None)
        return data


class ProvisioningPolicy(_Descriptor):
    api_version: str = Field(alias="apiVersion")
    kind: str
    metadata: Metadata
    spec: ProvisionerSpec


class NodeTemplateSpec(_Descriptor):
    requirements: List[Requirement]
    ami: Optional[str] = None
    instance_profile: Optional[str] = Field(default=None, alias="instanceProfile")
    launch_template_name: Optional[str] = Field(default=None, alias="launchTemplateName")
    security_group_ids: Optional[List[str]] = Field(default=None, alias="securityGroupIds")
    subnet_selector: Optional[Dict[str, str]] = Field(default=None, alias="subnetSelector")
    metadata_options: Optional[MetadataOptions] = Field(default=None, alias="metadataOptions")


class NodeTemplateDescriptor(_Descriptor):
    api_version: str = Field(alias="apiVersion")
    kind: str
    metadata: Metadata
    spec: NodeTemplateSpec
