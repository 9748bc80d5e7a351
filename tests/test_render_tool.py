# ============================================================================
# RENDER TOOL TESTS
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Tests - CLI render helper
# PURPOSE: Verify file based rendering and YAML output
# CREATED: 19 OCT 2026
# ============================================================================
"""
Render Tool Tests

Run with:
    pytest tests/test_render_tool.py -v
"""

import pytest
import yaml

from tools.render_definition import _parse_pairs, dump_objects, render_component


WORKLOAD = """
parameter:
  image: nginx
output:
  apiVersion: apps/v1
  kind: Deployment
  metadata:
    name: "{{ context.name }}"
  spec:
    template:
      spec:
        containers:
          - image: "{{ parameter.image }}"
"""

SCALER = """
parameter:
  replicas: 1
patch:
  spec:
    replicas: "{{ parameter.replicas }}"
"""


def test_render_component(tmp_path):
    workload = tmp_path / "webservice.yaml"
    workload.write_text(WORKLOAD)
    scaler = tmp_path / "scaler.yaml"
    scaler.write_text(SCALER)

    ctx, renderer, traits = render_component(
        str(workload),
        app_name="shop",
        component="frontend",
        params={"image": "redis"},
        traits=[("scaler", str(scaler))],
        trait_params={"scaler": {"replicas": 4}},
    )

    assert renderer.name == "webservice"
    assert [t.name for t in traits] == ["scaler"]
    docs = list(yaml.safe_load_all(dump_objects(ctx)))
    assert len(docs) == 1
    assert docs[0]["metadata"]["name"] == "frontend"
    assert docs[0]["spec"]["replicas"] == 4
    assert docs[0]["spec"]["template"]["spec"]["containers"][0]["image"] == "redis"


def test_parse_pairs():
    assert _parse_pairs(["a=1", "b=x=y"], "--trait") == [("a", "1"), ("b", "x=y")]
    with pytest.raises(ValueError):
        _parse_pairs(["missing-separator"], "--trait")


def test_render_component_logs_as_tool(tmp_path, caplog):
    workload = tmp_path / "webservice.yaml"
    workload.write_text(WORKLOAD)

    with caplog.at_level("INFO", logger="render_definition"):
        render_component(str(workload), app_name="shop", component="frontend")

    records = [r for r in caplog.records if r.name == "render_definition"]
    assert len(records) == 1
    assert records[0].component_type == "tool"
    assert records[0].render_context == {}
