import pytest

from mdcontext.aggregator import AggregationRecipe, Section
from mdcontext.errors import ConfigurationError, DuplicateCapability, UnknownCapability
from mdcontext.mcp.schema import MCPPrompt, MCPResource, MCPTool
from mdcontext.registry import (
    Aggregate,
    CapabilityKind,
    CapabilityRegistry,
    StaticText,
)


def _tool(name):
    return MCPTool(name=name, description=f"{name} tool")


def test_register_and_resolve():
    registry = CapabilityRegistry()
    action = StaticText("hello")
    registry.register(CapabilityKind.TOOL, "greet", action, _tool("greet"))

    entry = registry.resolve(CapabilityKind.TOOL, "greet")
    assert entry.action is action
    assert entry.descriptor.name == "greet"


def test_duplicate_registration_fails_fast():
    registry = CapabilityRegistry()
    registry.register(CapabilityKind.TOOL, "greet", StaticText("a"), _tool("greet"))
    with pytest.raises(DuplicateCapability):
        registry.register(CapabilityKind.TOOL, "greet", StaticText("b"), _tool("greet"))
    # The original entry is untouched
    assert registry.resolve(CapabilityKind.TOOL, "greet").action.text == "a"


def test_same_id_in_different_kinds_is_allowed():
    registry = CapabilityRegistry()
    registry.register(CapabilityKind.TOOL, "docs", StaticText("t"), _tool("docs"))
    registry.register(CapabilityKind.PROMPT, "docs", StaticText("p"), MCPPrompt(name="docs"))
    assert len(registry) == 2


def test_descriptor_must_match_kind():
    registry = CapabilityRegistry()
    with pytest.raises(ConfigurationError):
        registry.register(CapabilityKind.PROMPT, "greet", StaticText("x"), _tool("greet"))


def test_sealed_registry_rejects_registration():
    registry = CapabilityRegistry().seal()
    with pytest.raises(ConfigurationError):
        registry.register(CapabilityKind.TOOL, "greet", StaticText("x"), _tool("greet"))


@pytest.mark.parametrize("kind", list(CapabilityKind))
@pytest.mark.parametrize("unknown", ["missing", "", None, 42, ["list"]])
def test_unknown_ids_yield_unknown_capability(kind, unknown):
    registry = CapabilityRegistry()
    with pytest.raises(UnknownCapability) as exc:
        registry.resolve(kind, unknown)
    assert exc.value.kind == kind.value


def test_unknown_kind_yields_unknown_capability():
    with pytest.raises(UnknownCapability):
        CapabilityRegistry().resolve("widget", "x")


def test_list_preserves_declaration_order_and_is_idempotent():
    registry = CapabilityRegistry()
    for uri in ["doc://c", "doc://a", "doc://b"]:
        registry.register(
            CapabilityKind.RESOURCE, uri, StaticText(uri), MCPResource(uri=uri, name=uri)
        )
    first = registry.list(CapabilityKind.RESOURCE)
    assert [r.uri for r in first] == ["doc://c", "doc://a", "doc://b"]
    assert registry.list(CapabilityKind.RESOURCE) == first


def test_document_keys_follow_first_use():
    registry = CapabilityRegistry()
    registry.register(
        CapabilityKind.TOOL,
        "combo",
        Aggregate(AggregationRecipe(sections=[Section("B", "b"), Section("A", "a")])),
        _tool("combo"),
    )
    registry.register(
        CapabilityKind.PROMPT,
        "single",
        Aggregate(AggregationRecipe.single("a")),
        MCPPrompt(name="single"),
    )
    assert registry.document_keys() == ["b", "a"]
