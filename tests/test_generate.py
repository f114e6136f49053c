import json
from pathlib import Path

import pytest
import yaml

from kube_descriptor.config import DescriptorConfig, ResourceFileType, ResourceMode
from kube_descriptor.errors import ConfigurationError, DescriptorIOError, ParseError
from kube_descriptor.operations.generate import ResourceGenerator

PROJECT = {"name": "demo", "version": "1.0-SNAPSHOT", "group": "io.example"}


def _write_config(tmp_path: Path, **overrides) -> Path:
    data = {"project": dict(PROJECT)}
    data.update(overrides)
    path = tmp_path / "descriptor.yaml"
    path.write_text(yaml.safe_dump(data, sort_keys=False))
    return path


def _fragment(tmp_path: Path, name: str, text: str) -> Path:
    resource_dir = tmp_path / "src" / "main" / "fabric8"
    resource_dir.mkdir(parents=True, exist_ok=True)
    path = resource_dir / name
    path.write_text(text)
    return path


def _load_output(path: Path):
    return yaml.safe_load(path.read_text())


def test_config_defaults_resolve_against_config_dir(tmp_path: Path) -> None:
    config = DescriptorConfig.from_file(_write_config(tmp_path))
    assert config.resource_dir == tmp_path.resolve() / "src" / "main" / "fabric8"
    assert config.target_file == tmp_path.resolve() / "target" / "classes" / "kubernetes.yml"
    assert config.primary_api_version == "v1"
    assert config.extensions_version == "extensions/v1beta1"


def test_openshift_mode_selects_dialect_and_file_name(tmp_path: Path) -> None:
    config = DescriptorConfig.from_file(_write_config(tmp_path, mode="openshift", resource_type="json"))
    assert config.mode is ResourceMode.openshift
    assert config.resource_type is ResourceFileType.json
    assert config.extensions_version == "apps/v1"
    assert config.target_file.name == "openshift.json"


def test_invalid_config_is_a_configuration_error(tmp_path: Path) -> None:
    path = tmp_path / "descriptor.yaml"
    path.write_text("project:\n  name: demo\n")
    with pytest.raises(ConfigurationError):
        DescriptorConfig.from_file(path)

    path.write_text("- not a mapping\n")
    with pytest.raises(ConfigurationError):
        DescriptorConfig.from_file(path)


def test_service_and_controller_from_configuration(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        resources={"services": [{"ports": [{"port": 8080}]}]},
        images=[{"name": "example/demo:latest"}],
    )
    target = ResourceGenerator(DescriptorConfig.from_file(config_path)).run()

    document = _load_output(target)
    assert document["kind"] == "List"
    service, controller = document["items"]
    expected_labels = {"project": "demo", "group": "io.example", "version": "latest"}

    assert service["kind"] == "Service"
    assert service["spec"]["selector"] == {"project": "demo", "group": "io.example"}
    assert service["spec"]["ports"][0]["port"] == 8080
    assert service["metadata"]["labels"] == expected_labels

    assert controller["kind"] == "ReplicationController"
    assert controller["spec"]["replicas"] == 1
    assert controller["spec"]["selector"] == {"project": "demo", "group": "io.example"}
    pod_spec = controller["spec"]["template"]["spec"]
    assert len(pod_spec["containers"]) == 1
    assert pod_spec["restartPolicy"] == "Always"
    assert controller["metadata"]["labels"] == expected_labels
    assert controller["spec"]["template"]["metadata"]["labels"] == expected_labels


def test_fragment_service_keeps_its_selector(tmp_path: Path) -> None:
    _fragment(
        tmp_path,
        "backend-svc.yml",
        "kind: Service\nmetadata:\n  name: backend\n  labels:\n    project: legacy\nspec:\n  selector:\n    tier: backend\n",
    )
    target = ResourceGenerator(DescriptorConfig.from_file(_write_config(tmp_path))).run()

    [service] = _load_output(target)["items"]
    assert service["apiVersion"] == "v1"
    assert service["spec"]["selector"] == {"tier": "backend"}
    assert service["metadata"]["labels"] == {"project": "legacy", "group": "io.example", "version": "latest"}


def test_fragment_without_kind_writes_nothing(tmp_path: Path) -> None:
    _fragment(tmp_path, "broken.yml", "metadata:\n  name: broken\n")
    config = DescriptorConfig.from_file(_write_config(tmp_path, images=[{"name": "example/demo"}]))

    with pytest.raises(ParseError) as excinfo:
        ResourceGenerator(config).run()
    assert "broken.yml" in str(excinfo.value)
    assert not config.target_file.exists()


def test_fragments_precede_synthesized_resources(tmp_path: Path) -> None:
    _fragment(tmp_path, "b-config.yml", "kind: ConfigMap\nmetadata:\n  name: b\ndata:\n  key: value\n")
    _fragment(tmp_path, "a-route.yml", "kind: Service\nmetadata:\n  name: a\n")
    config = DescriptorConfig.from_file(_write_config(tmp_path, images=[{"name": "example/demo"}]))

    resources = ResourceGenerator(config).generate()
    assert [r.describe() for r in resources] == ["Service/a", "ConfigMap/b", "ReplicationController/demo"]
    assert resources[1].extra == {"data": {"key": "value"}}


def test_fragment_properties_are_substituted(tmp_path: Path) -> None:
    _fragment(tmp_path, "cm.yml", "kind: ConfigMap\nmetadata:\n  name: ${project.name}-config\ndata:\n  tag: ${fabric8.docker.label}\n")
    config = DescriptorConfig.from_file(_write_config(tmp_path))

    [config_map] = ResourceGenerator(config).generate()
    assert config_map.name == "demo-config"
    assert config_map.extra["data"]["tag"] == "latest"
    assert (config.work_dir / "cm.yml").exists()


def test_empty_project_produces_empty_list(tmp_path: Path) -> None:
    target = ResourceGenerator(DescriptorConfig.from_file(_write_config(tmp_path))).run()
    assert _load_output(target)["items"] == []


def test_skip_flag_and_pom_packaging_write_nothing(tmp_path: Path) -> None:
    config = DescriptorConfig.from_file(_write_config(tmp_path, skip=True))
    assert ResourceGenerator(config).run() is None
    assert not config.target_file.exists()

    pom_project = dict(PROJECT, packaging="pom")
    config = DescriptorConfig.from_file(_write_config(tmp_path, project=pom_project))
    assert ResourceGenerator(config).run() is None
    assert not config.target_file.exists()


def test_json_output_and_enriched_resources_dir(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        resource_type="json",
        enriched_resources_dir="target/enriched",
        images=[{"name": "example/demo"}],
    )
    config = DescriptorConfig.from_file(config_path)
    target = ResourceGenerator(config).run()

    assert target.name == "kubernetes.json"
    document = json.loads(target.read_text())
    assert document["items"][0]["kind"] == "ReplicationController"
    assert (config.enriched_resources_dir / "demo-replicationcontroller.json").exists()


def test_replica_set_uses_extensions_version(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        resources={"controller": {"useReplicaSet": True, "replicas": 2}},
        images=[{"name": "example/demo"}],
    )
    [replica_set] = ResourceGenerator(DescriptorConfig.from_file(config_path)).generate()
    assert replica_set.kind == "ReplicaSet"
    assert replica_set.api_version == "extensions/v1beta1"
    assert replica_set.spec["selector"] == {"matchLabels": {"project": "demo", "group": "io.example"}}


def test_image_without_name_fails(tmp_path: Path) -> None:
    config = DescriptorConfig.from_file(_write_config(tmp_path, images=[{"alias": "web"}]))
    with pytest.raises(ConfigurationError) as excinfo:
        ResourceGenerator(config).run()
    assert "web" in str(excinfo.value)
    assert not config.target_file.exists()


def test_json_output_renders_yaml_dates(tmp_path: Path) -> None:
    _fragment(
        tmp_path,
        "svc.yml",
        "kind: Service\nmetadata:\n  name: web\n  annotations:\n    released: 2016-01-01\n",
    )
    config = DescriptorConfig.from_file(_write_config(tmp_path, resource_type="json"))
    target = ResourceGenerator(config).run()

    [service] = json.loads(target.read_text())["items"]
    assert service["metadata"]["annotations"]["released"] == "2016-01-01"


def test_duplicate_resources_get_separate_enriched_files(tmp_path: Path) -> None:
    _fragment(tmp_path, "web-svc.yml", "kind: Service\nmetadata:\n  name: demo\n")
    config = DescriptorConfig.from_file(
        _write_config(
            tmp_path,
            enriched_resources_dir="target/enriched",
            resources={"services": [{"ports": [{"port": 8080}]}]},
        )
    )
    ResourceGenerator(config).run()

    enriched = sorted(path.name for path in config.enriched_resources_dir.iterdir())
    assert enriched == ["demo-service-2.yml", "demo-service.yml"]
    second = _load_output(config.enriched_resources_dir / "demo-service-2.yml")
    assert second["spec"]["ports"][0]["port"] == 8080


def test_failed_enriched_write_leaves_no_descriptor(tmp_path: Path) -> None:
    (tmp_path / "blocked").write_text("not a directory")
    config = DescriptorConfig.from_file(
        _write_config(tmp_path, enriched_resources_dir="blocked/enriched", images=[{"name": "example/demo"}])
    )

    with pytest.raises(DescriptorIOError):
        ResourceGenerator(config).run()
    assert not config.target_file.exists()


def test_unknown_configuration_keys_are_rejected(tmp_path: Path) -> None:
    path = _write_config(tmp_path, **{"resource-dir": "fragments"})
    with pytest.raises(ConfigurationError) as excinfo:
        DescriptorConfig.from_file(path)
    assert "resource-dir" in str(excinfo.value)

    path = _write_config(tmp_path, resources={"service": [{"ports": [{"port": 80}]}]})
    with pytest.raises(ConfigurationError):
        DescriptorConfig.from_file(path)
