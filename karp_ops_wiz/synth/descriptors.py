from __future__ import annotations

import logging
from typing import Tuple

from karp_ops_wiz.core.exceptions import InvalidRequest
from karp_ops_wiz.models.descriptors import (
    Consolidation,
    Metadata,
    NodeTemplateDescriptor,
    NodeTemplateSpec,
    ProviderRef,
    ProvisionerSpec,
    ProvisioningPolicy,
    ResourceLimits,
)
from karp_ops_wiz.models.resources import ConfigRequest
from karp_ops_wiz.models.results import ConfigSummary, SynthesisResult
from karp_ops_wiz.presets.catalog import lookup
from karp_ops_wiz.synth.requirements import (
    compose_node_template_requirements,
    compose_provisioning_requirements,
)


logger = logging.getLogger(__name__)

KARPENTER_API_VERSION = "karpenter.sh/v1beta1"
AWS_API_VERSION = "karpenter.k8s.aws/v1beta1"
POLICY_KIND = "NodePool"
NODE_CLASS_KIND = "EC2NodeClass"

POLICY_NAMESPACE = "karpenter"
NODE_CLASS_NAMESPACE = "default"
CLUSTER_LABELS = {"karpenter.io/cluster": "default"}
DEFAULT_WEIGHT = 50

INSTANCE_PROFILE = "KarpenterNodeInstanceProfile"

APPLY_INSTRUCTIONS = (
    "1. Apply the provisioner configuration: kubectl apply -f provisioner.yaml",
    "2. Apply the node template: kubectl apply -f node-template.yaml",
    "3. Monitor node provisioning: kubectl get nodes -w",
)


def provisioner_name(preset: str) -> str:
    return f"{preset}-provisioner"


def node_template_name(preset: str) -> str:
    return f"{preset}-nodepool"


def launch_template_name(preset: str) -> str:
    return f"KarpenterLaunchTemplate-{preset}"


def _validate(req: ConfigRequest) -> Tuple[str, str]:
    preset = (req.preset or "").strip()
    region = (req.region or "").strip()
    missing = [name for name, value in (("preset", preset), ("region", region)) if not value]
    if missing:
        raise InvalidRequest(f"Missing required field(s): {', '.join(missing)}")
    return preset, region


def build_provisioning_policy(req: ConfigRequest) -> ProvisioningPolicy:
    preset, region = _validate(req)
    definition = lookup(preset)

    spec = ProvisionerSpec(
        provider_ref=ProviderRef(
            api_version=AWS_API_VERSION,
            kind=NODE_CLASS_KIND,
            name=node_template_name(preset),
        ),
        requirements=compose_provisioning_requirements(definition.preset, region, req.zone),
        resource_limits=ResourceLimits(
            cpu=definition.cpu_limit,
            memory=definition.memory_limit,
        ),
        weight=DEFAULT_WEIGHT,
    )

    if req.feature("consolidation"):
        spec.consolidation = Consolidation(enabled=True)

    ttl = req.customizations.ttl_seconds_after_empty
    if ttl is not None:
        spec.ttl_seconds_after_empty = ttl

    return ProvisioningPolicy(
        api_version=KARPENTER_API_VERSION,
        kind=POLICY_KIND,
        metadata=Metadata(
            name=provisioner_name(preset),
            namespace=POLICY_NAMESPACE,
            labels=dict(CLUSTER_LABELS),
        ),
        spec=spec,
    )


def build_node_template(req: ConfigRequest) -> NodeTemplateDescriptor:
    preset, _ = _validate(req)
    return NodeTemplateDescriptor(
        api_version=AWS_API_VERSION,
        kind=NODE_CLASS_KIND,
        metadata=Metadata(
            name=node_template_name(preset),
            namespace=NODE_CLASS_NAMESPACE,
            labels=dict(CLUSTER_LABELS),
        ),
        spec=NodeTemplateSpec(
            requirements=compose_node_template_requirements(),
            instance_profile=INSTANCE_PROFILE,
            launch_template_name=launch_template_name(preset),
        ),
    )


def synthesize(req: ConfigRequest) -> Tuple[ProvisioningPolicy, NodeTemplateDescriptor]:
    """Expand a config request into a provisioning policy and its node template.

    Names derive from the preset string as given, so an unrecognized preset
    keeps its own names while taking ``balanced`` instance types and limits.
    Repeated calls with the same request give identical descriptors.
    """
    policy = build_provisioning_policy(req)
    template = build_node_template(req)
    logger.info(
        "Synthesized %s and %s for region %s",
        policy.metadata.name,
        template.metadata.name,
        req.region,
    )
    return policy, template


def generate_config(req: ConfigRequest) -> SynthesisResult:
    policy, template = synthesize(req)
    return SynthesisResult(
        provisioner=policy,
        node_template=template,
        summary=ConfigSummary(
            preset=req.preset,
            region=req.region,
            features=dict(req.features),
            instructions=list(APPLY_INSTRUCTIONS),
        ),
    )
