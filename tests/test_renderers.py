# ============================================================================
# DEFINITION RENDERER TESTS
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Tests - Workload and trait rendering
# PURPOSE: Verify base/auxiliary registration, patches and error tagging
# CREATED: 19 OCT 2026
# ============================================================================
"""
Definition Renderer Tests

Covers:
1. Workload render: parameters, context injection, base replacement
2. Workload outputs: flag filtering, declaration order, all-or-nothing
3. Trait render: output/outputs auxiliaries, processing stage
4. Trait patch: unify into base, conflicts, missing base
5. Error tagging with renderer identity and stage
6. Immutable renderers and render requests

Run with:
    pytest tests/test_renderers.py -v
"""

import pytest
from pydantic import ValidationError

from core.contracts import AUXILIARY_WORKLOAD
from core.errors import BuildError, EvalError, PatchError, PreProcessError, WrapError
from core.models import RenderRequest
from definition import TraitRenderer, WorkloadRenderer
from process import PreProcessor


WEBSERVICE_TEMPLATE = """
parameter:
  image: nginx
  port: 80
output:
  apiVersion: apps/v1
  kind: Deployment
  metadata:
    labels:
      app.oam.dev/component: "{{ context.name }}"
  spec:
    template:
      spec:
        containers:
          - name: "{{ context.name }}"
            image: "{{ parameter.image }}"
            ports:
              - containerPort: "{{ parameter.port }}"
outputs:
  service:
    apiVersion: v1
    kind: Service
    spec:
      selector:
        app: "{{ context.name }}"
      ports:
        - port: "{{ parameter.port }}"
"""

FILTERED_OUTPUTS_TEMPLATE = """
output:
  apiVersion: v1
  kind: Pod
outputs:
  first:
    apiVersion: v1
    kind: Service
  _hidden:
    apiVersion: v1
    kind: Secret
  second:
    apiVersion: v1
    kind: ConfigMap
  "extra?":
    apiVersion: batch/v1
    kind: Job
  third:
    apiVersion: networking.k8s.io/v1
    kind: Ingress
"""

INGRESS_TRAIT = """
parameter:
  domain: example.com
output:
  apiVersion: networking.k8s.io/v1
  kind: Ingress
  spec:
    rules:
      - host: "{{ parameter.domain }}"
outputs:
  tls:
    apiVersion: v1
    kind: Secret
    metadata:
      name: "{{ context.name }}-tls"
"""

SCALER_TRAIT = """
parameter:
  replicas: 1
patch:
  spec:
    replicas: "{{ parameter.replicas }}"
"""


class StaticPreProcessor(PreProcessor):
    """Fills canned data into processing.output."""

    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error
        self.calls = 0

    def transform(self, instance):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return instance.fill("processing.output", self.data)


# ============================================================================
# WORKLOAD RENDERER
# ============================================================================

class TestWorkloadRenderer:
    """Test rendering a workload into the base."""

    def test_render_sets_base(self, ctx):
        WorkloadRenderer("webservice").with_params({"image": "redis"}).complete(ctx, WEBSERVICE_TEMPLATE)

        base, _ = ctx.output()
        assert base is not None
        assert base.is_base
        obj = base.to_dict()
        assert obj["kind"] == "Deployment"
        assert obj["metadata"]["labels"]["app.oam.dev/component"] == "frontend"
        container = obj["spec"]["template"]["spec"]["containers"][0]
        assert container == {
            "name": "frontend",
            "image": "redis",
            "ports": [{"containerPort": 80}],
        }

    def test_render_without_params_uses_defaults(self, ctx):
        WorkloadRenderer("webservice").complete(ctx, WEBSERVICE_TEMPLATE)

        base, _ = ctx.output()
        container = base.to_dict()["spec"]["template"]["spec"]["containers"][0]
        assert container["image"] == "nginx"

    def test_outputs_become_workload_auxiliaries(self, ctx):
        WorkloadRenderer("webservice").complete(ctx, WEBSERVICE_TEMPLATE)

        _, auxiliaries = ctx.output()
        assert len(auxiliaries) == 1
        aux = auxiliaries[0]
        assert aux.type == AUXILIARY_WORKLOAD
        assert aux.name == "service"
        assert aux.is_outputs is True
        assert aux.ins.to_dict()["spec"]["ports"] == [{"port": 80}]

    def test_outputs_filtering_keeps_declaration_order(self, ctx):
        """Three plain fields, two flagged: exactly three auxiliaries."""
        WorkloadRenderer("pod").complete(ctx, FILTERED_OUTPUTS_TEMPLATE)

        _, auxiliaries = ctx.output()
        assert [a.name for a in auxiliaries] == ["first", "second", "third"]
        assert [a.ins.to_dict()["kind"] for a in auxiliaries] == ["Service", "ConfigMap", "Ingress"]

    def test_render_replaces_base(self, ctx):
        WorkloadRenderer("webservice").complete(ctx, WEBSERVICE_TEMPLATE)
        WorkloadRenderer("pod").complete(ctx, "output:\n  apiVersion: v1\n  kind: Pod\n")

        base, _ = ctx.output()
        assert base.to_dict() == {"apiVersion": "v1", "kind": "Pod"}

    def test_missing_output_is_wrap_error(self, ctx):
        with pytest.raises(WrapError) as exc_info:
            WorkloadRenderer("empty").complete(ctx, "parameter: {}\n")

        error = exc_info.value
        assert error.renderer == "workload definition empty"
        assert error.stage == "output"
        assert error.field == "output"

    def test_outputs_wrap_failure_registers_nothing(self, ctx):
        template = (
            "output:\n  apiVersion: v1\n  kind: Pod\n"
            "outputs:\n  good:\n    kind: Service\n  bad: not-an-object\n"
        )
        with pytest.raises(WrapError) as exc_info:
            WorkloadRenderer("pod").complete(ctx, template)

        assert exc_info.value.field == "bad"
        assert exc_info.value.stage == "outputs"
        _, auxiliaries = ctx.output()
        assert auxiliaries == []

    def test_eval_error_is_tagged(self, ctx):
        with pytest.raises(EvalError) as exc_info:
            WorkloadRenderer("broken").complete(ctx, 'output:\n  kind: "{{ 1 + }}"\n')

        assert exc_info.value.renderer == "workload definition broken"
        assert exc_info.value.stage == "eval"
        assert "workload definition broken eval" in str(exc_info.value)

    def test_conflicting_context_is_eval_error(self, ctx):
        template = "output:\n  apiVersion: v1\n  kind: Pod\ncontext:\n  name: other\n"
        with pytest.raises(EvalError) as exc_info:
            WorkloadRenderer("pod").complete(ctx, template)
        assert exc_info.value.stage == "eval"

    def test_build_error_is_tagged(self, ctx):
        with pytest.raises(BuildError) as exc_info:
            WorkloadRenderer("broken").complete(ctx, "output: [1, 2\n")

        assert exc_info.value.renderer == "workload definition broken"
        assert exc_info.value.stage == "build"

    def test_unserializable_params_is_build_error(self, ctx):
        renderer = WorkloadRenderer("pod").with_params({"bad": object()})
        with pytest.raises(BuildError) as exc_info:
            renderer.complete(ctx, "output:\n  kind: Pod\n")
        assert exc_info.value.stage == "build"


# ============================================================================
# LITERAL DATA
# ============================================================================

ENV_CONFIGMAP_TEMPLATE = """
output:
  apiVersion: v1
  kind: ConfigMap
  data: "{{ parameter.env }}"
"""


class TestLiteralData:
    """Test that parameter data reaches the rendered object unchanged."""

    def test_parameter_keys_keep_their_spelling(self, ctx):
        env = {"_JAVA_OPTIONS": "-Xmx1g", "#tag": "v1", "debug?": "on", "A": "b"}
        WorkloadRenderer("config").with_params({"env": env}).complete(ctx, ENV_CONFIGMAP_TEMPLATE)

        base, _ = ctx.output()
        assert base.to_dict()["data"] == env

    def test_non_ascii_parameters(self, ctx):
        env = {
            "greeting": "hi \U0001F600",
            "city": "København",
            "separator": "a\u2028b",
            "control": "x\x7f",
        }
        WorkloadRenderer("config").with_params({"env": env}).complete(ctx, ENV_CONFIGMAP_TEMPLATE)

        base, _ = ctx.output()
        assert base.to_dict()["data"] == env

    def test_parameter_file_keeps_non_ascii_text(self):
        request = RenderRequest(template="output: {}", params={"v": "\U0001F600"})
        assert request.parameter_file() == 'parameter: {"v": "\U0001F600"}'


# ============================================================================
# TRAIT RENDERER
# ============================================================================

class TestTraitRenderer:
    """Test rendering traits on top of a workload."""

    @pytest.fixture
    def rendered_ctx(self, ctx):
        WorkloadRenderer("webservice").complete(ctx, WEBSERVICE_TEMPLATE)
        return ctx

    def test_output_becomes_unnamed_auxiliary(self, rendered_ctx):
        base_before = rendered_ctx.output()[0].to_dict()

        TraitRenderer("ingress").with_params({"domain": "shop.local"}).complete(rendered_ctx, INGRESS_TRAIT)

        base, auxiliaries = rendered_ctx.output()
        assert base.to_dict() == base_before
        trait_aux = [a for a in auxiliaries if a.type == "ingress"]
        assert len(trait_aux) == 2

        output_aux = trait_aux[0]
        assert output_aux.name == ""
        assert output_aux.is_outputs is False
        assert output_aux.ins.to_dict()["spec"]["rules"] == [{"host": "shop.local"}]

        tls_aux = trait_aux[1]
        assert tls_aux.name == "tls"
        assert tls_aux.is_outputs is True
        assert tls_aux.ins.to_dict()["metadata"]["name"] == "frontend-tls"

    def test_patch_unifies_into_base(self, rendered_ctx):
        TraitRenderer("scaler").with_params({"replicas": 3}).complete(rendered_ctx, SCALER_TRAIT)

        base, _ = rendered_ctx.output()
        obj = base.to_dict()
        assert obj["spec"]["replicas"] == 3
        assert obj["spec"]["template"]["spec"]["containers"][0]["name"] == "frontend"

    def test_patch_conflict_is_patch_error(self, rendered_ctx):
        template = (
            "patch:\n  metadata:\n    labels:\n"
            "      app.oam.dev/component: somebody-else\n"
        )
        with pytest.raises(PatchError) as exc_info:
            TraitRenderer("relabel").complete(rendered_ctx, template)

        assert exc_info.value.renderer == "trait definition relabel"
        assert exc_info.value.stage == "patch"
        assert exc_info.value.field == "metadata.labels.app.oam.dev/component"

    def test_patch_without_base_is_skipped(self, ctx, caplog):
        with caplog.at_level("WARNING"):
            TraitRenderer("scaler").complete(ctx, SCALER_TRAIT)

        base, auxiliaries = ctx.output()
        assert base is None
        assert auxiliaries == []
        assert "patch skipped" in caplog.text

    def test_processing_fills_output(self, rendered_ctx):
        template = """
processing:
  output: {}
  http:
    url: "http://ip-service/ip"
output:
  apiVersion: v1
  kind: ConfigMap
  data:
    ip: "{{ processing.output.myIP }}"
"""
        preprocessor = StaticPreProcessor({"myIP": "10.1.2.3"})
        TraitRenderer("expose", preprocessor=preprocessor).complete(rendered_ctx, template)

        assert preprocessor.calls == 1
        _, auxiliaries = rendered_ctx.output()
        assert auxiliaries[-1].ins.to_dict()["data"] == {"ip": "10.1.2.3"}

    def test_no_processing_field_skips_preprocessor(self, rendered_ctx):
        preprocessor = StaticPreProcessor({})
        TraitRenderer("scaler", preprocessor=preprocessor).complete(rendered_ctx, SCALER_TRAIT)
        assert preprocessor.calls == 0

    def test_processing_failure_is_tagged(self, rendered_ctx):
        preprocessor = StaticPreProcessor(error=PreProcessError("remote down"))
        renderer = TraitRenderer("expose", preprocessor=preprocessor)

        with pytest.raises(PreProcessError) as exc_info:
            renderer.complete(rendered_ctx, "processing:\n  output: {}\n")

        assert exc_info.value.renderer == "trait definition expose"
        assert exc_info.value.stage == "preprocess"

    def test_trait_sees_workload_base_in_context(self, rendered_ctx):
        template = (
            "output:\n  apiVersion: v1\n  kind: ConfigMap\n"
            "  data:\n    workload: \"{{ context.output.kind }}\"\n"
            "    service: \"{{ context.outputs.service.kind }}\"\n"
        )
        TraitRenderer("echo").complete(rendered_ctx, template)

        _, auxiliaries = rendered_ctx.output()
        assert auxiliaries[-1].ins.to_dict()["data"] == {
            "workload": "Deployment",
            "service": "Service",
        }


# ============================================================================
# IMMUTABILITY
# ============================================================================

class TestImmutability:
    """Test that renderers and requests never share mutable state."""

    def test_with_params_returns_new_renderer(self):
        original = WorkloadRenderer("webservice")
        configured = original.with_params({"image": "redis"})

        assert configured is not original
        assert original.params is None
        assert configured.params == {"image": "redis"}
        assert configured.name == "webservice"

    def test_trait_with_params_keeps_preprocessor(self):
        preprocessor = StaticPreProcessor({})
        configured = TraitRenderer("expose", preprocessor=preprocessor).with_params({"a": 1})
        assert configured.preprocessor is preprocessor

    def test_render_request_is_frozen(self, ctx):
        request = WorkloadRenderer("pod").with_params({"a": 1}).request(ctx, "output: {}")
        assert request.parameter_file() == 'parameter: {"a": 1}'
        with pytest.raises(ValidationError):
            request.template = "other"

    def test_request_without_params_has_no_parameter_file(self):
        assert RenderRequest(template="output: {}").parameter_file() is None
