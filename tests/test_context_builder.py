"""Tests for the context_builder module."""

import pytest

from discogen.context_builder import build_context


class TestBuildContext:
    """Test the full context builder pipeline with the sample document."""

    @pytest.fixture(autouse=True)
    def _context(self, buzz_doc):
        self.ctx = build_context(buzz_doc)
        self.resources_by_name = {cls.name: cls for cls in self.ctx["resources"]}

    def test_identity(self):
        assert self.ctx["name"] == "buzz"
        assert self.ctx["version"] == "v1"
        assert self.ctx["module"] == "buzz_v1"

    def test_method_count(self):
        """Should produce 8 methods from the sample document."""
        assert self.ctx["method_count"] == 8

    def test_service_class(self):
        service = self.ctx["service"]
        assert service.name == "BuzzService"
        assert service.bases == ["Service"]
        assert [f.name for f in service.fields] == ["NAME", "VERSION", "BASE_URI", "DISCOVERY"]
        assert {p.name for p in service.properties} == {"activities", "people"}
        assert service.doc.startswith("Buzz API\n\n")

    def test_resource_classes(self):
        assert list(self.resources_by_name) == [
            "ActivitiesResource",
            "ActivitiesCommentsResource",
            "PeopleResource",
        ]

    def test_every_resource_has_name_const(self):
        for cls in self.ctx["resources"]:
            assert cls.fields[0].name == "RESOURCE"

    def test_all_method_names_unique(self):
        for cls in self.ctx["resources"]:
            names = [m.name for m in cls.methods]
            assert len(names) == len(set(names)), cls.name

    def test_all_names_valid_identifiers(self):
        for cls in self.ctx["resources"]:
            assert cls.name.isidentifier()
            for method in cls.methods:
                assert method.name.isidentifier(), method.name
                for param in method.params:
                    assert param["arg"].isidentifier(), param["arg"]

    def test_shared_parameters_not_in_signatures(self):
        """Top-level parameters are passed through **kwargs, not named."""
        for cls in self.ctx["resources"]:
            for method in cls.methods:
                names = {p["name"] for p in method.params}
                assert not names & {"alt", "key", "prettyPrint"}, method.name

    def test_nested_accessor(self):
        activities = self.resources_by_name["ActivitiesResource"]
        assert "comments" in {p.name for p in activities.properties}

    def test_custom_decorators(self, buzz_doc):
        """Decorator chains can be replaced entirely."""
        ctx = build_context(buzz_doc, service_decorators=[], resource_decorators=[])
        assert ctx["service"].fields == []
        assert ctx["method_count"] == 0

    def test_duplicate_class_names(self, buzz_doc):
        buzz_doc["resources"]["activities_comments"] = {"methods": {}}
        with pytest.raises(ValueError, match="ActivitiesCommentsResource"):
            build_context(buzz_doc)

    def test_legacy_document(self):
        doc = {
            "data": {
                "buzz": {
                    "v1": {
                        "baseUrl": "https://www.googleapis.com/buzz/v1/",
                        "resources": {
                            "people": {
                                "methods": {
                                    "get": {
                                        "restPath": "people/{userId}/@self",
                                        "rpcName": "chili.people.get",
                                        "httpMethod": "GET",
                                        "parameters": {
                                            "userId": {"parameterType": "path", "required": True},
                                        },
                                    },
                                },
                            },
                        },
                    },
                },
            },
        }
        ctx = build_context(doc)
        method = ctx["resources"][0].methods[0]
        assert method.rpc_name == "chili.people.get"
        assert method.params[0]["location"] == "path"
