"""
Unit Tests: Relationship Collector

Test Coverage:
- Reference edges (call context, unresolved referencing symbol)
- Implementation edges (interface, abstract member)
- Derived type edges
- Structural edges (base, interfaces, members, parameters, fields)
- Deduplication, self edges, dropped external targets
- Failure isolation and cancellation
"""

import pytest

from tests.fakes.fake_resolvers import FailingResolver
from tests.fakes.shop_workspace import build_shop_service, type_symbol
from unigraph_engine.semantic_graph.adapters import InMemorySymbolResolutionService
from unigraph_engine.semantic_graph.application import AnalysisContext
from unigraph_engine.semantic_graph.domain import Modifier, RelationshipType, SymbolKind, TypeCategory
from unigraph_engine.semantic_graph.infrastructure import NodeBuilder, RelationshipCollector
from unigraph_engine.semantic_graph.ports import ProjectHandle, SymbolHandle
from unigraph_shared.common.exceptions import AnalysisCancelledError

CORE = ProjectHandle(project_id="core", name="Core", assembly_name="Core")


async def build_context(service, settings) -> AnalysisContext:
    """Run discovery only."""
    context = AnalysisContext(service, settings)
    builder = NodeBuilder(settings.analysis)
    for project in await service.enumerate_projects(None):
        for symbol in await service.enumerate_declared_symbols(project):
            builder.build_node(symbol, project, context)
    return context


async def collect_all(context) -> None:
    collector = RelationshipCollector()
    for node in list(context.nodes.values()):
        await collector.collect_relationships(node, context)


def edge_keys(context) -> set[tuple[str, str, RelationshipType]]:
    return {r.key for r in context.relationships}


class TestShopRelationships:
    @pytest.mark.asyncio
    async def test_expected_edges(self, settings):
        service, shop = build_shop_service(workspace_path=None)
        context = await build_context(service, settings)

        await collect_all(context)

        ids = shop.id_of
        assert edge_keys(context) == {
            (ids(shop.order_repository), ids(shop.order_repository_interface), RelationshipType.IMPLEMENTATION),
            (ids(shop.repository_field), ids(shop.order_repository_interface), RelationshipType.COMPOSITION),
            (ids(shop.order_service), ids(shop.order_repository_interface), RelationshipType.COMPOSITION),
            (ids(shop.place_order), ids(shop.order), RelationshipType.ASSOCIATION),
            (ids(shop.service_field), ids(shop.order_service), RelationshipType.COMPOSITION),
            (ids(shop.orders_controller), ids(shop.order_service), RelationshipType.COMPOSITION),
            (ids(shop.get), ids(shop.place_order), RelationshipType.METHOD_CALL),
            (ids(shop.get), ids(shop.order), RelationshipType.ASSOCIATION),
        }

    @pytest.mark.asyncio
    async def test_interface_implementation_emitted_once(self, settings):
        """Reported by both the class' interface list and the interface's implementations."""
        service, shop = build_shop_service(workspace_path=None)
        context = await build_context(service, settings)

        await collect_all(context)

        implementations = [r for r in context.relationships if r.type == RelationshipType.IMPLEMENTATION]
        assert len(implementations) == 1
        assert implementations[0].source_id == shop.id_of(shop.order_repository)

    @pytest.mark.asyncio
    async def test_reference_location_and_cross_project_flag(self, settings):
        service, shop = build_shop_service(workspace_path=None)
        context = await build_context(service, settings)

        node = context.nodes[shop.id_of(shop.place_order)]
        edges = await RelationshipCollector().collect_relationships(node, context)

        calls = [r for r in edges if r.type == RelationshipType.METHOD_CALL]
        assert len(calls) == 1
        assert calls[0].location.file == "src/Web/Controllers/OrdersController.cs"
        assert calls[0].location.start_line == 15
        assert calls[0].is_cross_project is True
        assert calls[0].is_cross_language is False

    @pytest.mark.asyncio
    async def test_external_base_type_dropped(self, settings):
        service, shop = build_shop_service(workspace_path=None)
        context = await build_context(service, settings)

        node = context.nodes[shop.id_of(shop.orders_controller)]
        edges = await RelationshipCollector().collect_relationships(node, context)

        assert all(r.type != RelationshipType.INHERITANCE for r in edges)
        assert all(r.target_id in context.nodes for r in edges)

    @pytest.mark.asyncio
    async def test_unknown_symbol_has_no_edges(self, settings):
        service, _ = build_shop_service(workspace_path=None)
        context = await build_context(service, settings)
        stray = context.nodes[next(iter(context.nodes))].model_copy(update={"id": "Nope::Missing"})

        assert await RelationshipCollector().collect_relationships(stray, context) == []


class TestInheritanceAndOverrides:
    @pytest.mark.asyncio
    async def test_derived_types_and_overrides(self, settings):
        abstract = frozenset({Modifier.ABSTRACT})
        base = type_symbol("Shape", "Geometry", "Core", "src/Geometry/Shape.cs", modifiers=abstract)
        area = SymbolHandle(
            name="Area",
            display_name="Geometry.Shape.Area()",
            kind=SymbolKind.METHOD,
            containing_assembly="Core",
            modifiers=abstract,
        )
        circle = type_symbol("Circle", "Geometry", "Core", "src/Geometry/Circle.cs", base_type=base)
        circle_area = SymbolHandle(
            name="Area",
            display_name="Geometry.Circle.Area()",
            kind=SymbolKind.METHOD,
            containing_assembly="Core",
            modifiers=frozenset({Modifier.OVERRIDE}),
            overridden=area,
        )
        service = InMemorySymbolResolutionService(
            projects=[CORE], symbols={"core": [base, area, circle, circle_area]}
        )
        context = await build_context(service, settings)

        await collect_all(context)

        assert edge_keys(context) == {
            ("Core::Geometry.Circle", "Core::Geometry.Shape", RelationshipType.INHERITANCE),
            ("Core::Geometry.Circle.Area()", "Core::Geometry.Shape.Area()", RelationshipType.METHOD_IMPLEMENTATION),
            ("Core::Geometry.Circle.Area()", "Core::Geometry.Shape.Area()", RelationshipType.METHOD_OVERRIDE),
        }

    @pytest.mark.asyncio
    async def test_field_aggregation_and_property_association(self, settings):
        point = type_symbol("Point", "Geometry", "Core", "src/Geometry/Point.cs")
        shape = type_symbol("Polygon", "Geometry", "Core", "src/Geometry/Polygon.cs")
        mutable_field = SymbolHandle(
            name="_origin",
            display_name="Geometry.Polygon._origin",
            kind=SymbolKind.FIELD,
            containing_assembly="Core",
            declared_type=point,
        )
        center = SymbolHandle(
            name="Center",
            display_name="Geometry.Polygon.Center",
            kind=SymbolKind.PROPERTY,
            containing_assembly="Core",
            declared_type=point,
        )
        self_typed = SymbolHandle(
            name="Empty",
            display_name="Geometry.Polygon.Empty",
            kind=SymbolKind.PROPERTY,
            containing_assembly="Core",
            declared_type=shape,
        )
        service = InMemorySymbolResolutionService(
            projects=[CORE], symbols={"core": [point, shape, mutable_field, center, self_typed]}
        )
        context = await build_context(service, settings)

        await collect_all(context)

        assert edge_keys(context) == {
            ("Core::Geometry.Polygon._origin", "Core::Geometry.Point", RelationshipType.AGGREGATION),
            ("Core::Geometry.Polygon.Center", "Core::Geometry.Point", RelationshipType.ASSOCIATION),
            ("Core::Geometry.Polygon.Empty", "Core::Geometry.Polygon", RelationshipType.ASSOCIATION),
        }

    @pytest.mark.asyncio
    async def test_no_self_edges(self, settings):
        node_type = type_symbol("Node", "Graph", "Core", "src/Graph/Node.cs")
        node_type.members = (
            SymbolHandle(
                name="Next", display_name="Graph.Node.Next", kind=SymbolKind.PROPERTY, declared_type=node_type
            ),
        )
        service = InMemorySymbolResolutionService(projects=[CORE], symbols={"core": [node_type]})
        context = await build_context(service, settings)

        await collect_all(context)

        assert len(context.relationships) == 0


class TestFailures:
    @pytest.mark.asyncio
    async def test_lookup_failure_is_recorded_and_absorbed(self, settings):
        inner, shop = build_shop_service(workspace_path=None)
        service = FailingResolver(inner, failing_references={shop.order_service.display_name})
        context = await build_context(service, settings)

        node = context.nodes[shop.id_of(shop.order_service)]
        edges = await RelationshipCollector().collect_relationships(node, context)

        assert edges == []
        assert len(context.errors) == 1
        assert shop.id_of(shop.order_service) in context.errors[0]

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, settings):
        service, shop = build_shop_service(workspace_path=None)
        context = await build_context(service, settings)
        context.cancellation.cancel("stop")

        node = context.nodes[shop.id_of(shop.order)]
        with pytest.raises(AnalysisCancelledError):
            await RelationshipCollector().collect_relationships(node, context)
        assert context.errors == []


class TestCrossLanguage:
    @pytest.mark.asyncio
    async def test_extension_mismatch_sets_flag(self, settings):
        view = type_symbol("MainWindow", "App", "App", "src/App/MainWindow.xaml")
        code_behind = type_symbol(
            "MainWindowLogic",
            "App",
            "App",
            "src/App/MainWindow.xaml.cs",
            category=TypeCategory.CLASS,
            base_type=view,
        )
        app = ProjectHandle(project_id="app", name="App", assembly_name="App")
        service = InMemorySymbolResolutionService(projects=[app], symbols={"app": [view, code_behind]})
        context = await build_context(service, settings)

        await collect_all(context)

        (edge,) = context.relationships
        assert edge.type == RelationshipType.INHERITANCE
        assert edge.is_cross_language is True
        assert edge.is_cross_project is False
