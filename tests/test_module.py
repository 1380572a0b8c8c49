"""
Helper tests: ids, app identity, provider extensions and wrapping.
"""
import pytest
from kubernetes import client

from kusionkit.errors import (
    ConversionError,
    EmptyProviderVersionError,
    EmptyResourceTypeError,
    EmptySourceError,
    InvalidProviderSourceError,
    InvalidRegionError,
)
from kusionkit.models.provider import ProviderConfig
from kusionkit.models.resource import RESOURCE_EXTENSION_GVK, ResourceType
from kusionkit.module import app, kubernetes, terraform


# --------------------------------------------------------- Kubernetes ids
class TestKubernetesResourceID:
    def test_namespaced(self):
        rid = kubernetes.kubernetes_resource_id(
            {"apiVersion": "apps/v1", "kind": "Deployment"},
            {"namespace": "nginx", "name": "nginx-deployment"},
        )
        assert rid == "apps/v1:Deployment:nginx:nginx-deployment"
        assert len(rid.split(":")) == 4

    def test_cluster_scoped_omits_namespace(self):
        rid = kubernetes.kubernetes_resource_id(
            {"apiVersion": "v1", "kind": "Namespace"},
            {"namespace": "", "name": "nginx"},
        )
        assert rid == "v1:Namespace:nginx"
        assert len(rid.split(":")) == 3

    def test_missing_namespace_key(self):
        rid = kubernetes.kubernetes_resource_id(
            {"apiVersion": "rbac.authorization.k8s.io/v1", "kind": "ClusterRole"},
            {"name": "reader"},
        )
        assert rid == "rbac.authorization.k8s.io/v1:ClusterRole:reader"

    def test_inputs_pass_through_unchanged(self):
        rid = kubernetes.kubernetes_resource_id(
            {"apiVersion": " V1 ", "kind": "ConfigMap"},
            {"namespace": "Ns", "name": "a:b"},
        )
        assert rid == " V1 :ConfigMap:Ns:a:b"

    def test_client_models(self):
        dep = client.V1Deployment(
            api_version="apps/v1",
            kind="Deployment",
            metadata=client.V1ObjectMeta(name="nginx-deployment", namespace="nginx"),
        )
        rid = kubernetes.kubernetes_resource_id(dep, dep.metadata)
        assert rid == "apps/v1:Deployment:nginx:nginx-deployment"

    def test_deterministic(self):
        tm = {"apiVersion": "apps/v1", "kind": "Deployment"}
        om = {"namespace": "nginx", "name": "web"}
        assert kubernetes.kubernetes_resource_id(tm, om) == kubernetes.kubernetes_resource_id(tm, om)


# --------------------------------------------------------- Kubernetes wrapping
class TestWrapK8sResource:
    def _deployment(self):
        return {
            "apiVersion": "apps/v1",
            "kind": "Deployment",
            "metadata": {"name": "nginx-deployment", "namespace": "nginx"},
            "spec": {"replicas": 2, "paused": False},
        }

    def test_record_shape(self):
        obj = self._deployment()
        r = kubernetes.wrap_k8s_resource_to_kusion_resource("id-1", obj)
        assert r.id == "id-1"
        assert r.type == ResourceType.KUBERNETES
        assert r.depends_on is None
        assert r.extensions == {RESOURCE_EXTENSION_GVK: "apps/v1, Kind=Deployment"}
        assert r.attributes == obj

    def test_attributes_are_copied(self):
        obj = self._deployment()
        r = kubernetes.wrap_k8s_resource_to_kusion_resource("id-1", obj)
        obj["spec"]["replicas"] = 5
        assert r.attributes["spec"]["replicas"] == 2

    def test_core_group_gvk(self):
        r = kubernetes.wrap_k8s_resource_to_kusion_resource(
            "v1:Namespace:nginx",
            {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": "nginx"}},
        )
        assert r.extensions[RESOURCE_EXTENSION_GVK] == "/v1, Kind=Namespace"

    def test_unparsable_api_version_keeps_kind(self):
        assert kubernetes.group_version_kind({"apiVersion": "a/b/c", "kind": "X"}) == "/, Kind=X"

    def test_client_model_uses_serialized_field_names(self):
        dep = client.V1Deployment(
            api_version="apps/v1",
            kind="Deployment",
            metadata=client.V1ObjectMeta(name="nginx-deployment", namespace="nginx"),
            spec=client.V1DeploymentSpec(
                replicas=2,
                selector=client.V1LabelSelector(match_labels={"app": "web"}),
                template=client.V1PodTemplateSpec(
                    spec=client.V1PodSpec(
                        containers=[client.V1Container(name="nginx", image="nginx:1.25")],
                    ),
                ),
            ),
        )
        r = kubernetes.wrap_k8s_resource_to_kusion_resource("id", dep)
        assert r.extensions[RESOURCE_EXTENSION_GVK] == "apps/v1, Kind=Deployment"
        assert r.attributes["apiVersion"] == "apps/v1"
        assert r.attributes["metadata"] == {"name": "nginx-deployment", "namespace": "nginx"}
        assert r.attributes["spec"]["selector"]["matchLabels"] == {"app": "web"}
        assert r.attributes["spec"]["replicas"] == 2

    def test_timestamps_become_strings(self):
        import datetime
        obj = self._deployment()
        obj["metadata"]["creationTimestamp"] = datetime.datetime(2024, 1, 2, 3, 4, 5)
        r = kubernetes.wrap_k8s_resource_to_kusion_resource("id", obj)
        assert r.attributes["metadata"]["creationTimestamp"] == "2024-01-02T03:04:05"

    def test_unsupported_object_fails(self):
        with pytest.raises(ConversionError):
            kubernetes.wrap_k8s_resource_to_kusion_resource("id", "not an object")

    def test_unsupported_value_fails(self):
        obj = self._deployment()
        obj["spec"]["weird"] = {1, 2}
        with pytest.raises(ConversionError):
            kubernetes.wrap_k8s_resource_to_kusion_resource("id", obj)

    def test_non_string_key_fails(self):
        obj = self._deployment()
        obj["spec"][1] = "one"
        with pytest.raises(ConversionError):
            kubernetes.wrap_k8s_resource_to_kusion_resource("id", obj)


# --------------------------------------------------------- App identity
class TestAppIdentity:
    def test_unique_app_name(self):
        assert app.unique_app_name("proj", "dev", "web") == "proj-dev-web"

    def test_unique_app_name_no_escaping(self):
        assert app.unique_app_name("a-b", "", "c") == "a-b--c"

    def test_unique_app_labels(self):
        assert app.unique_app_labels("proj", "web") == {
            "app.kubernetes.io/part-of": "proj",
            "app.kubernetes.io/name": "web",
        }


# --------------------------------------------------------- Provider source
class TestProviderSource:
    def test_two_segments_use_default_host(self):
        src = terraform.parse_provider_source("hashicorp/aws")
        assert src == ("registry.terraform.io", "hashicorp", "aws", True)

    def test_three_segments_keep_host(self):
        src = terraform.parse_provider_source("registry.customized.io/hashicorp/aws")
        assert src.host == "registry.customized.io"
        assert src.namespace == "hashicorp"
        assert src.name == "aws"
        assert not src.is_default_host

    @pytest.mark.parametrize("source", ["aws", "a/b/c/d", "", "hashicorp/", "/aws", "h//aws"])
    def test_invalid(self, source):
        with pytest.raises(InvalidProviderSourceError):
            terraform.parse_provider_source(source)


# --------------------------------------------------------- Terraform ids
class TestTerraformResourceID:
    def test_two_segment_source(self):
        cfg = ProviderConfig(source="hashicorp/aws", version="5.0.0")
        assert terraform.terraform_resource_id(cfg, "aws_s3_bucket", "b") == "hashicorp:aws:aws_s3_bucket:b"

    def test_host_is_omitted(self):
        cfg = ProviderConfig(source="registry.customized.io/hashicorp/aws", version="5.0.0")
        assert terraform.terraform_resource_id(cfg, "aws_s3_bucket", "b") == "hashicorp:aws:aws_s3_bucket:b"

    def test_empty_version(self):
        cfg = ProviderConfig(source="hashicorp/aws", version="")
        with pytest.raises(EmptyProviderVersionError):
            terraform.terraform_resource_id(cfg, "t", "n")

    def test_empty_version_checked_before_source(self):
        cfg = ProviderConfig(source="a/b/c/d", version="")
        with pytest.raises(EmptyProviderVersionError):
            terraform.terraform_resource_id(cfg, "t", "n")

    @pytest.mark.parametrize("source", ["hashicorp/aws", "h/hashicorp/aws", "registry.customized.io/hashicorp/aws"])
    def test_valid_sources_give_four_segments(self, source):
        cfg = ProviderConfig(source=source, version="1.0.0")
        rid = terraform.terraform_resource_id(cfg, "t", "n")
        assert rid == "hashicorp:aws:t:n"
        assert len(rid.split(":")) == 4

    @pytest.mark.parametrize("source", ["aws", "a/b/c/d", "", "hashicorp/", "/aws", "h//aws"])
    def test_invalid_sources_rejected(self, source):
        cfg = ProviderConfig(source=source, version="1.0.0")
        with pytest.raises(InvalidProviderSourceError):
            terraform.terraform_resource_id(cfg, "t", "n")


# --------------------------------------------------------- Extensions
class TestTerraformProviderExtensions:
    def test_default_registry(self):
        meta = {"region": "us-east-1"}
        cfg = ProviderConfig(source="hashicorp/aws", version="5.0.0", provider_meta=meta)
        ext = terraform.terraform_provider_extensions(cfg, "aws_s3_bucket")
        assert ext == {
            "provider": "registry.terraform.io/hashicorp/aws/5.0.0",
            "providerMeta": {"region": "us-east-1"},
            "resourceType": "aws_s3_bucket",
        }
        assert ext["providerMeta"] is meta

    def test_customized_registry(self):
        cfg = ProviderConfig(source="registry.customized.io/hashicorp/aws", version="5.0.0", provider_meta={})
        ext = terraform.terraform_provider_extensions(cfg, "aws_s3_bucket")
        assert ext["provider"] == "registry.customized.io/hashicorp/aws/5.0.0"
        assert set(ext) == {"provider", "providerMeta", "resourceType"}

    def test_invalid_source(self):
        cfg = ProviderConfig(source="a/b/c/d", version="1")
        with pytest.raises(InvalidProviderSourceError):
            terraform.terraform_provider_extensions(cfg, "t")

    def test_empty_version(self):
        with pytest.raises(EmptyProviderVersionError):
            terraform.terraform_provider_extensions(ProviderConfig(source="", version=""), "")

    def test_empty_source(self):
        with pytest.raises(EmptySourceError):
            terraform.terraform_provider_extensions(ProviderConfig(source="", version="1"), "")

    def test_empty_resource_type(self):
        with pytest.raises(EmptyResourceTypeError):
            terraform.terraform_provider_extensions(ProviderConfig(source="a/b/c/d", version="1"), "")

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            terraform.terraform_provider_extensions(ProviderConfig(source="x", version="1"), "t")


# --------------------------------------------------------- Region
class TestTerraformProviderRegion:
    def test_region(self):
        cfg = ProviderConfig(source="hashicorp/aws", version="5.0.0", provider_meta={"region": "eu-west-1"})
        assert terraform.terraform_provider_region(cfg) == "eu-west-1"

    def test_missing_region(self):
        assert terraform.terraform_provider_region(ProviderConfig()) == ""

    def test_non_string_region(self):
        cfg = ProviderConfig(provider_meta={"region": 42})
        with pytest.raises(InvalidRegionError):
            terraform.terraform_provider_region(cfg)


# --------------------------------------------------------- Terraform wrapping
class TestWrapTFResource:
    def test_record_shape(self):
        cfg = ProviderConfig(source="hashicorp/aws", version="5.0.0", provider_meta={"region": "us-east-1"})
        attrs = {"bucket": "b"}
        r = terraform.wrap_tf_resource_to_kusion_resource(
            cfg, "aws_s3_bucket", "hashicorp:aws:aws_s3_bucket:b", attrs, ["x"],
        )
        assert r.type == ResourceType.TERRAFORM
        assert r.id == "hashicorp:aws:aws_s3_bucket:b"
        assert r.attributes is attrs
        assert r.depends_on == ["x"]
        assert r.extensions["provider"] == "registry.terraform.io/hashicorp/aws/5.0.0"
        assert r.extensions["providerMeta"] is cfg.provider_meta
        assert r.extensions["resourceType"] == "aws_s3_bucket"

    def test_error_propagates(self):
        cfg = ProviderConfig(source="hashicorp/aws", version="")
        with pytest.raises(EmptyProviderVersionError):
            terraform.wrap_tf_resource_to_kusion_resource(cfg, "aws_s3_bucket", "id", {}, None)
