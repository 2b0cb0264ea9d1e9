"""
Tests for the plugin manifest provider.
"""

import json
import pytest
from fastapi.testclient import TestClient

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_treats.app.main import TreatGatewayService
from service_treats.app.manifest import PluginManifestProvider, build_manifest, validate_manifest
from shared.test_helpers import create_test_config


class TestPluginManifestProvider:
    """Test cases for PluginManifestProvider."""

    def test_account_and_url_from_environment(self):
        provider = PluginManifestProvider(create_test_config())
        manifest = provider.get_manifest()

        assert manifest["x-mb"]["account-id"] == "sharddog.near"
        assert manifest["servers"] == [{"url": "https://treats.example.com"}]
        assert manifest["x-mb"]["assistant"]["image"] == "https://treats.example.com/sharddog.png"

    @pytest.mark.parametrize("bitte_key", [None, "", "not json", "[1, 2]", json.dumps({"other": 1})])
    def test_missing_or_malformed_identity_degrades(self, bitte_key):
        provider = PluginManifestProvider(create_test_config(bitte_key=bitte_key))

        assert provider.get_manifest()["x-mb"]["account-id"] == ""

    def test_config_blob_without_url_uses_service_url(self):
        config = create_test_config(bitte_config="{oops", service_url="https://fallback.example.com/")
        manifest = PluginManifestProvider(config).get_manifest()

        assert manifest["servers"] == [{"url": "https://fallback.example.com"}]

    def test_returned_copy_cannot_alter_snapshot(self):
        provider = PluginManifestProvider(create_test_config())
        provider.get_manifest()["paths"].clear()

        assert "/api/tools/mint-treat" in provider.get_manifest()["paths"]

    def test_documents_both_tools(self):
        paths = PluginManifestProvider(create_test_config()).get_manifest()["paths"]

        assert paths["/api/tools/create-channel"]["post"]["operationId"] == "createChannel"
        mint = paths["/api/tools/mint-treat"]["post"]
        assert mint["operationId"] == "mintTreat"
        assert mint["requestBody"]["content"]["application/json"]["schema"]["required"] == ["channelId", "apiKey"]

    def test_create_channel_documents_wallet_prompt(self):
        """Wallet stays optional in the schema; a missing one is answered with a documented 400."""
        paths = PluginManifestProvider(create_test_config()).get_manifest()["paths"]
        create = paths["/api/tools/create-channel"]["post"]

        schema = create["requestBody"]["content"]["application/json"]["schema"]
        assert schema["required"] == ["title", "description", "mediaUrl", "reference"]
        assert "(optional)" in schema["properties"]["wallet"]["description"]
        wallet_error = create["responses"]["400"]["content"]["application/json"]["schema"]["properties"]
        assert wallet_error["code"]["example"] == "WALLET_INPUT_REQUIRED"


class TestManifestValidation:
    """Test cases for validate_manifest."""

    def test_built_manifest_is_valid(self):
        assert validate_manifest(build_manifest("sharddog.near", "https://treats.example.com")) == []

    def test_empty_account_reported(self):
        problems = validate_manifest(build_manifest("", "https://treats.example.com"))
        assert problems == ["x-mb.account-id is empty"]

    def test_missing_sections(self):
        problems = validate_manifest({"openapi": "3.0.0"})
        assert "Missing required field 'paths'" in problems

    def test_operation_problems(self):
        manifest = build_manifest("sharddog.near", "https://treats.example.com")
        del manifest["paths"]["/api/tools/mint-treat"]
        manifest["paths"]["/api/tools/other"] = {"post": {"responses": {"400": {}}}}

        problems = validate_manifest(manifest)

        assert "Missing path '/api/tools/mint-treat'" in problems
        assert "POST /api/tools/other missing 'operationId'" in problems
        assert "POST /api/tools/other has no 2xx responses" in problems
        assert "POST /api/tools/other missing 'requestBody'" in problems


class TestManifestEndpoint:
    """Manifest routes on the gateway."""

    @pytest.fixture
    def client(self):
        return TestClient(TreatGatewayService(create_test_config(bitte_key=None)).app)

    def test_repeated_calls_are_identical(self, client):
        first = client.get("/api/ai-plugin")
        second = client.get("/api/ai-plugin", params={"ignored": "1"})

        assert first.status_code == 200
        assert first.json() == second.json()
        assert first.json()["x-mb"]["account-id"] == ""

    def test_well_known_location(self, client):
        assert client.get("/.well-known/ai-plugin.json").json() == client.get("/api/ai-plugin").json()
