from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from subhub.config import MissingConfigurationError
from subhub.domain.errors import ConflictOrTransportError
from subhub.domain.model import ObjectKey
from subhub.domain.model.annotations import CHANNEL_GENERATION
from subhub.domain.propagation import ReconcileResult
from subhub.ui import cli

if TYPE_CHECKING:
    from pathlib import Path

SUBSCRIPTION_YAML = """\
apiVersion: app.ibm.com/v1alpha1
kind: Subscription
metadata:
  name: demo
  namespace: default
  uid: sub-uid
spec:
  channel: ch-ns/ch
  packageFilter:
    labelSelector:
      matchLabels:
        app: web
  placement:
    clusters:
      - name: clusterA
"""

CATALOG_YAML = """\
apiVersion: app.ibm.com/v1alpha1
kind: Deployable
metadata:
  name: web
  namespace: ch-ns
  labels:
    app: web
spec:
  template:
    apiVersion: v1
    kind: ConfigMap
    metadata:
      name: web
---
apiVersion: app.ibm.com/v1alpha1
kind: Deployable
metadata:
  name: db
  namespace: ch-ns
  labels:
    app: db
spec:
  template:
    apiVersion: v1
    kind: ConfigMap
    metadata:
      name: db
---
apiVersion: app.ibm.com/v1alpha1
kind: Deployable
metadata:
  name: web
  namespace: elsewhere
  labels:
    app: web
spec:
  template:
    apiVersion: v1
    kind: ConfigMap
    metadata:
      name: web
"""


@pytest.fixture
def subscription_file(tmp_path: Path) -> Path:
    path = tmp_path / "subscription.yaml"
    path.write_text(SUBSCRIPTION_YAML, encoding="utf-8")
    return path


def test_reconcile_passes_parsed_key(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[ObjectKey] = []

    def fake_reconcile(key: ObjectKey) -> ReconcileResult:
        captured.append(key)
        return ReconcileResult(subscription=key)

    monkeypatch.setattr(cli, "reconcile_subscription", fake_reconcile)

    cli.main(["reconcile", "default/demo"])

    assert captured == [ObjectKey(namespace="default", name="demo")]


@pytest.mark.parametrize("value", ["demo", "/demo", "default/", "a/b/c"])
def test_reconcile_rejects_malformed_key(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setattr(cli, "reconcile_subscription", lambda key: pytest.fail("not reached"))

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["reconcile", value])

    assert excinfo.value.code == 2


def test_missing_configuration_exits_with_usage_code(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_reconcile(key: ObjectKey) -> ReconcileResult:
        raise MissingConfigurationError("Missing configuration for: SUBHUB_API_SERVER")

    monkeypatch.setattr(cli, "reconcile_subscription", fake_reconcile)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["reconcile", "default/demo"])

    assert excinfo.value.code == 2


def test_store_failure_exits_with_error_code(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_reconcile(key: ObjectKey) -> ReconcileResult:
        raise ConflictOrTransportError("connection refused")

    monkeypatch.setattr(cli, "reconcile_subscription", fake_reconcile)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["reconcile", "default/demo"])

    assert excinfo.value.code == 1


def test_render_prints_deployable(
    subscription_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.main(["render", "-f", str(subscription_file), "--channel-generation", "5"])

    document = json.loads(capsys.readouterr().out)
    assert document["kind"] == "Deployable"
    assert document["metadata"]["name"] == "demo-deployable"
    assert document["metadata"]["namespace"] == "default"
    template = document["spec"]["template"]
    assert template["kind"] == "Subscription"
    assert template["metadata"]["annotations"][CHANNEL_GENERATION] == "5"
    assert template["spec"]["placement"]["local"] is True
    assert document["spec"]["placement"]["clusters"] == [{"name": "clusterA"}]


def test_render_missing_file_exits_with_usage_code(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["render", "-f", str(tmp_path / "absent.yaml")])

    assert excinfo.value.code == 2


def test_match_lists_selected_catalog_keys(
    subscription_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    catalog = tmp_path / "catalog.yaml"
    catalog.write_text(CATALOG_YAML, encoding="utf-8")

    cli.main(["match", "-f", str(subscription_file), "-c", str(catalog)])

    assert capsys.readouterr().out.splitlines() == ["ch-ns/web"]
