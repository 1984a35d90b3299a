"""
Unit Tests: Node Builder

Test Coverage:
- Skipped symbols (implicit, namespace, excluded assemblies)
- Node fields (modifiers order, assembly fallback, location mapping)
- Metrics per kind (type members, inheritance depth, parameters)
- First-writer-wins registration
"""

import pytest

from tests.fakes.shop_workspace import build_shop_service
from unigraph_engine.semantic_graph.application import AnalysisContext
from unigraph_engine.semantic_graph.domain import Modifier, SymbolKind, TypeCategory
from unigraph_engine.semantic_graph.infrastructure import NodeBuilder
from unigraph_engine.semantic_graph.ports import ProjectHandle, SourceSpan, SymbolHandle


@pytest.fixture
def context(settings):
    service, _ = build_shop_service()
    return AnalysisContext(service, settings)


@pytest.fixture
def builder(settings):
    return NodeBuilder(settings.analysis)


@pytest.fixture
def project():
    return ProjectHandle(project_id="core", name="Shop.Core", assembly_name="Shop.Core")


def make_type(name: str, assembly: str = "Shop.Core", **kwargs) -> SymbolHandle:
    return SymbolHandle(
        name=name,
        display_name=f"Shop.{name}",
        kind=SymbolKind.TYPE,
        containing_assembly=assembly,
        type_category=kwargs.pop("type_category", TypeCategory.CLASS),
        **kwargs,
    )


class TestShouldSkip:
    def test_implicitly_declared(self, builder):
        assert builder.should_skip(make_type("Generated", is_implicitly_declared=True))

    def test_namespace(self, builder):
        namespace = SymbolHandle(name="Shop", display_name="Shop", kind=SymbolKind.NAMESPACE)
        assert builder.should_skip(namespace)

    @pytest.mark.parametrize("assembly", ["System.Runtime", "Microsoft.Extensions.Logging", "System"])
    def test_excluded_assembly_prefix(self, builder, assembly):
        assert builder.should_skip(make_type("Anything", assembly=assembly))

    def test_user_symbol_kept(self, builder):
        assert not builder.should_skip(make_type("OrderService"))
        assert not builder.should_skip(make_type("Orphan", assembly=None))


class TestBuildNode:
    def test_skipped_symbol_counts(self, builder, project, context):
        assert builder.build_node(make_type("Gen", is_implicitly_declared=True), project, context) is None
        assert context.skipped_symbols == 1
        assert context.nodes == {}

    def test_node_fields(self, builder, project, context):
        interface = make_type("IOrderService", type_category=TypeCategory.INTERFACE)
        symbol = make_type(
            "OrderService",
            containing_namespace="Shop",
            modifiers=frozenset({Modifier.SEALED, Modifier.STATIC, Modifier.ABSTRACT}),
            interfaces=(interface,),
            generic_parameters=("TKey", "TValue"),
            location=SourceSpan(file_path="src/Core/OrderService.cs", line=3, column=4),
        )

        node = builder.build_node(symbol, project, context)

        assert node.id == "Shop.Core::Shop.OrderService"
        assert node.fully_qualified_name == "Shop.OrderService"
        assert node.declared_type_category == TypeCategory.CLASS
        assert node.modifiers == [Modifier.STATIC, Modifier.ABSTRACT, Modifier.SEALED]
        assert node.interfaces == ["Shop.IOrderService"]
        assert node.generic_parameters == ["TKey", "TValue"]
        assert node.project_id == "core"
        assert node.assembly_name == "Shop.Core"
        assert node.location.start_line == 3
        assert node.location.end_line == 3
        assert node.location.end_column == 4
        assert context.nodes[node.id] is node

    def test_missing_project_assembly_is_unknown(self, builder, context):
        node = builder.build_node(make_type("Loose"), ProjectHandle(project_id="p", name="p"), context)
        assert node.assembly_name == "Unknown"

    def test_member_has_no_type_category(self, builder, project, context):
        method = SymbolHandle(
            name="Run",
            display_name="Shop.Job.Run()",
            kind=SymbolKind.METHOD,
            containing_assembly="Shop.Core",
            type_category=TypeCategory.CLASS,
        )
        node = builder.build_node(method, project, context)
        assert node.declared_type_category is None

    def test_duplicate_build_returns_first_node(self, builder, project, context):
        first = builder.build_node(make_type("OrderService"), project, context)
        other_project = ProjectHandle(project_id="web", name="Shop.Web", assembly_name="Shop.Web")

        second = builder.build_node(make_type("OrderService"), other_project, context)

        assert second is first
        assert second.project_id == "core"
        assert len(context.nodes) == 1


class TestMetrics:
    def test_type_member_counts(self, builder):
        members = (
            SymbolHandle(name="A", display_name="T.A()", kind=SymbolKind.METHOD),
            SymbolHandle(name="B", display_name="T.B()", kind=SymbolKind.METHOD),
            SymbolHandle(name="P", display_name="T.P", kind=SymbolKind.PROPERTY),
            SymbolHandle(name="_f", display_name="T._f", kind=SymbolKind.FIELD),
            SymbolHandle(name="E", display_name="T.E", kind=SymbolKind.EVENT),
        )
        metrics = builder.calculate_metrics(make_type("T", members=members))

        assert metrics.method_count == 2
        assert metrics.property_count == 1
        assert metrics.field_count == 1
        assert metrics.inheritance_depth == 0
        assert metrics.parameter_count is None

    def test_inheritance_depth_excludes_root_object(self, builder):
        root = SymbolHandle(name="Object", display_name="System.Object", kind=SymbolKind.TYPE)
        grandparent = make_type("EntityBase", base_type=root)
        parent = make_type("AggregateRoot", base_type=grandparent)
        child = make_type("Order", base_type=parent)

        assert builder.inheritance_depth(child) == 2
        assert builder.inheritance_depth(grandparent) == 0

    def test_inheritance_depth_stops_on_cycle(self, builder):
        a = make_type("A")
        b = make_type("B", base_type=a)
        a.base_type = b

        assert builder.inheritance_depth(a) == 1

    def test_method_metrics(self, builder):
        parameters = tuple(
            SymbolHandle(name=p, display_name=p, kind=SymbolKind.PARAMETER) for p in ("order", "token")
        )
        method = SymbolHandle(
            name="PlaceOrder",
            display_name="Shop.OrderService.PlaceOrder(Order, CancellationToken)",
            kind=SymbolKind.METHOD,
            parameters=parameters,
            cyclomatic_complexity=4,
        )
        metrics = builder.calculate_metrics(method)

        assert metrics.parameter_count == 2
        assert metrics.cyclomatic_complexity == 4
        assert metrics.method_count is None

    def test_field_has_empty_metrics(self, builder):
        field = SymbolHandle(name="_x", display_name="T._x", kind=SymbolKind.FIELD)
        assert builder.calculate_metrics(field).model_dump(exclude_none=True) == {}
