from xsd_to_code.pipeline.analyzer.namespace_resolver import NamespaceResolver


class TestNamespaceResolver:
    def test_prefixes(self):
        resolver = NamespaceResolver()
        resolver.register_prefixes({None: "urn:default", "xs": "http://www.w3.org/2001/XMLSchema", "c": "urn:common"})

        assert resolver.resolve_namespace_prefix("c:Thing") == "urn:common"
        # Unprefixed names never map to the default namespace
        assert resolver.resolve_namespace_prefix("Thing") == ""
        assert resolver.resolve_namespace_prefix("unknown:Thing") == ""

    def test_first_import_wins(self):
        resolver = NamespaceResolver()
        resolver.register_import("urn:common", "common.xsd")
        resolver.register_import("urn:common", "other.xsd")

        assert resolver.resolve_schema_location("urn:common") == "common.xsd"

    def test_remote_locations_are_skipped(self):
        resolver = NamespaceResolver()
        resolver.register_import("urn:remote", "https://example.com/remote.xsd")
        resolver.register_include("http://example.com/part.xsd")

        assert resolver.resolve_schema_location("urn:remote") == ""
        assert resolver.includes == []

    def test_import_without_location(self):
        resolver = NamespaceResolver()
        resolver.register_import("urn:common", None)

        assert resolver.schema_locations == {}

    def test_includes_keep_order_without_duplicates(self):
        resolver = NamespaceResolver()
        for location in ["b.xsd", "a.xsd", "b.xsd"]:
            resolver.register_include(location)

        assert resolver.includes == ["b.xsd", "a.xsd"]
