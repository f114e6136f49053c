import logging

import pytest

from kube_descriptor.builder import DescriptorBuilder
from kube_descriptor.errors import ConfigurationError
from kube_descriptor.resources.base import ResourceDefinition


def _service(name: str) -> ResourceDefinition:
    return ResourceDefinition(api_version="v1", kind="Service", metadata={"name": name}, spec={})


def test_fragments_precede_synthesized_resources():
    resources = DescriptorBuilder().build([_service("frag-b"), _service("frag-a")], [_service("synth")])
    assert [r.name for r in resources] == ["frag-b", "frag-a", "synth"]


def test_empty_inputs_yield_empty_list():
    assert len(DescriptorBuilder().build()) == 0
    assert len(DescriptorBuilder().build([], [])) == 0


def test_duplicates_are_kept_and_reported(caplog):
    with caplog.at_level(logging.WARNING):
        resources = DescriptorBuilder("warn").build([_service("web")], [_service("web")])
    assert len(resources) == 2
    assert "Service named 'web'" in caplog.text


def test_keep_policy_is_silent(caplog):
    with caplog.at_level(logging.WARNING):
        resources = DescriptorBuilder("keep").build([_service("web")], [_service("web")])
    assert len(resources) == 2
    assert caplog.text == ""


def test_reject_policy_raises():
    with pytest.raises(ConfigurationError) as excinfo:
        DescriptorBuilder("reject").build([_service("web")], [_service("web")])
    assert "Service/web" in str(excinfo.value)


def test_unknown_policy_is_rejected():
    with pytest.raises(ConfigurationError):
        DescriptorBuilder("merge")
