"""Tests for the kubeconfig and auth payload models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from skectl.models import (
    AuthResult,
    ClusterConfigFile,
    ClusterRecord,
    ContextRecord,
    CredentialRecord,
    KubeconfigDocument,
)


class TestClusterRecord:
    def test_alias_and_field_name(self):
        by_alias = ClusterRecord.model_validate({"server": "s", "insecure-skip-tls-verify": True})
        by_name = ClusterRecord(server="s", insecure_skip_tls_verify=True)
        assert by_alias == by_name

    def test_defaults_omitted_from_dump(self):
        dumped = ClusterRecord(server="s").model_dump(by_alias=True, exclude_defaults=True)
        assert dumped == {"server": "s"}


class TestDocumentConversion:
    def test_from_document_keys_by_name(self):
        doc = KubeconfigDocument.model_validate({
            "clusters": [{"name": "c", "cluster": {"server": "https://c"}}],
            "users": [{"name": "u", "user": {"token": "t"}}],
            "contexts": [{"name": "x", "context": {"cluster": "c", "user": "u"}}],
            "current-context": "x",
            "extensions": [{"name": "e", "extension": {}}],
        })
        config = ClusterConfigFile.from_document(doc)
        assert config.clusters == {"c": ClusterRecord(server="https://c")}
        assert config.credentials == {"u": CredentialRecord(token="t")}
        assert config.contexts == {"x": ContextRecord(cluster="c", user="u")}
        assert config.current_context == "x"
        assert config.extra_fields == {"extensions": [{"name": "e", "extension": {}}]}

    def test_to_document_keeps_extra_top_level_fields(self):
        config = ClusterConfigFile(extra_fields={"extensions": []})
        data = config.to_document()
        assert data["extensions"] == []
        assert data["apiVersion"] == "v1"
        assert data["current-context"] == ""

    def test_context_requires_cluster_and_user(self):
        with pytest.raises(ValidationError):
            KubeconfigDocument.model_validate({"contexts": [{"name": "x", "context": {}}]})


class TestDanglingReferences:
    def test_clean(self):
        config = ClusterConfigFile(
            clusters={"c": ClusterRecord(server="s")},
            credentials={"u": CredentialRecord(token="t")},
            contexts={"x": ContextRecord(cluster="c", user="u")},
            current_context="x",
        )
        assert config.dangling_references() == []

    def test_reports_each_problem(self):
        config = ClusterConfigFile(
            contexts={"x": ContextRecord(cluster="c", user="u")},
            current_context="y",
        )
        problems = config.dangling_references()
        assert len(problems) == 3
        assert any("current-context" in p for p in problems)


class TestAuthResult:
    def test_ignores_unknown_fields(self):
        result = AuthResult.model_validate({"token": "t", "expires_in": 3600})
        assert result.token == "t"
        assert result.error is None

    def test_null_token(self):
        assert AuthResult.model_validate({"token": None}).token is None
