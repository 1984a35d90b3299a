"""
Semantic Solution Analyzer

Drives one analysis run:

    0. Project enumeration        (fatal on failure)
    1. Symbol discovery            (one task per project)
    2. Relationship collection     (one task per node)
    3. Role classification         (per node, pure)
    4. Feature boundary detection  (single pass)
    5. Cross-project aggregation   (single pass)
    6. Project info + metadata     (final assembly)

Per-project and per-node failures are logged, recorded in
``metadata.errors`` and absorbed. Cancellation is checked at every phase
entry and around every resolver call, and always propagates.
"""

import asyncio
import time
from collections import Counter

from unigraph_shared.common.exceptions import AnalysisCancelledError, WorkspaceLoadError
from unigraph_shared.common.observability import BatchLogger, bind_context, clear_context, get_logger
from unigraph_shared.config import Settings, get_settings

from ..domain.languages import language_from_path
from ..domain.models import (
    UNKNOWN_FEATURE,
    ArchitecturalRole,
    GraphMetadata,
    ProjectInfo,
    ProjectMetrics,
    Relationship,
    SymbolNode,
    UnifiedSemanticGraph,
)
from ..infrastructure.cross_project import CrossProjectDependencyAggregator
from ..infrastructure.feature_boundaries import FeatureBoundaryDetector
from ..infrastructure.node_builder import NodeBuilder
from ..infrastructure.relationship_collector import RelationshipCollector
from ..infrastructure.role_classifier import ArchitecturalRoleClassifier
from ..ports import ProjectHandle, SymbolResolutionService, Workspace
from .context import AnalysisContext, CancellationToken

logger = get_logger(__name__)

UNKNOWN = "Unknown"


class SemanticSolutionAnalyzer:
    """
    Builds a UnifiedSemanticGraph from a symbol resolution service.

    Usage:
        analyzer = SemanticSolutionAnalyzer(service)
        graph = await analyzer.analyze_solution(Workspace(path="/src/Shop.sln"))

    The analyzer itself is stateless between runs; every call builds a fresh
    AnalysisContext, so one instance may serve concurrent analyses.
    Logging is left to the host application (see ``setup_logging``).
    """

    def __init__(
        self,
        service: SymbolResolutionService,
        settings: Settings | None = None,
        node_builder: NodeBuilder | None = None,
        relationship_collector: RelationshipCollector | None = None,
        role_classifier: ArchitecturalRoleClassifier | None = None,
        boundary_detector: FeatureBoundaryDetector | None = None,
        dependency_aggregator: CrossProjectDependencyAggregator | None = None,
    ):
        self.service = service
        self.settings = settings or get_settings()
        self.node_builder = node_builder or NodeBuilder(self.settings.analysis)
        self.relationship_collector = relationship_collector or RelationshipCollector()
        self.role_classifier = role_classifier or ArchitecturalRoleClassifier()
        self.boundary_detector = boundary_detector or FeatureBoundaryDetector(self.settings.boundaries)
        self.dependency_aggregator = dependency_aggregator or CrossProjectDependencyAggregator()

    @property
    def resolver_name(self) -> str:
        return getattr(self.service, "name", None) or type(self.service).__name__

    async def analyze_solution(
        self,
        workspace: Workspace,
        cancellation: CancellationToken | None = None,
    ) -> UnifiedSemanticGraph:
        """
        Analyze every project of ``workspace``.

        Args:
            workspace: Workspace handle passed to the resolver
            cancellation: Optional token; cancel it to stop the run

        Returns:
            The assembled graph

        Raises:
            WorkspaceLoadError: Projects cannot be enumerated
            AnalysisCancelledError: The token was cancelled
        """
        # Every event of this run, including component logs, carries both keys
        bind_context(workspace=workspace.path, resolver=self.resolver_name)
        try:
            return await self._analyze(workspace, cancellation)
        finally:
            clear_context("workspace", "resolver")

    async def _analyze(self, workspace: Workspace, cancellation: CancellationToken | None) -> UnifiedSemanticGraph:
        start_time = time.perf_counter()
        context = AnalysisContext(self.service, self.settings, cancellation)
        logger.info("analysis_started")

        try:
            projects = await self._load_projects(workspace, context)
            await self._discover_symbols(projects, context)
            await self._collect_relationships(context)
            self._classify_roles(context)
            self._detect_feature_boundaries(context)

            context.cancellation.raise_if_cancelled()
            relationships = sorted(context.relationships, key=_relationship_sort_key)
            dependencies = self.dependency_aggregator.aggregate(context.nodes, relationships, projects)
        except AnalysisCancelledError as e:
            logger.warning("analysis_cancelled", reason=e.details.get("reason"))
            raise

        _count_references(context.nodes, relationships)
        project_info = {p.project_id: self._build_project_info(p, context, relationships) for p in projects}

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        metadata = self._build_metadata(workspace, projects, context, relationships, duration_ms)

        logger.info(
            "analysis_complete",
            projects=len(projects),
            nodes=len(context.nodes),
            relationships=len(relationships),
            cross_project_dependencies=len(dependencies),
            errors=len(context.errors),
            duration_ms=duration_ms,
        )

        return UnifiedSemanticGraph(
            nodes=dict(sorted(context.nodes.items())),
            relationships=relationships,
            project_info=project_info,
            cross_project_dependencies=dependencies,
            metadata=metadata,
        )

    # ============================================================
    # Phase 0: projects
    # ============================================================

    async def _load_projects(self, workspace: Workspace, context: AnalysisContext) -> list[ProjectHandle]:
        context.cancellation.raise_if_cancelled()
        try:
            projects = await context.call(self.service.enumerate_projects, workspace)
        except AnalysisCancelledError:
            raise
        except Exception as e:
            logger.error("workspace_load_failed", error=str(e))
            raise WorkspaceLoadError(
                f"Cannot enumerate projects of {workspace.path}",
                {"workspace": workspace.path, "resolver": self.resolver_name},
            ) from e

        projects = list(projects)
        if not projects:
            logger.warning("workspace_has_no_projects")
        return projects

    # ============================================================
    # Phase 1: discovery
    # ============================================================

    async def _discover_symbols(self, projects: list[ProjectHandle], context: AnalysisContext) -> None:
        context.cancellation.raise_if_cancelled()
        counts = await asyncio.gather(*(self._discover_project(p, context) for p in projects))
        logger.info("symbol_discovery_finished", projects=len(projects), nodes=len(context.nodes), built=sum(counts))

    async def _discover_project(self, project: ProjectHandle, context: AnalysisContext) -> int:
        try:
            symbols = await context.call(self.service.enumerate_declared_symbols, project)
        except AnalysisCancelledError:
            raise
        except Exception as e:
            logger.warning("project_discovery_failed", project=project.project_id, error=str(e))
            context.record_error(f"Symbol discovery failed for project {project.name}: {e}")
            return 0

        built = 0
        sample_size = self.settings.observability.batch_sample_size
        with BatchLogger(logger, "symbol_discovery", sample_size=sample_size) as batch:
            for symbol in symbols:
                known = len(context.nodes)
                node = self.node_builder.build_node(symbol, project, context)
                if node is not None and len(context.nodes) > known:
                    built += 1
                    batch.record(project=project.project_id, symbol_id=node.id)
        return built

    # ============================================================
    # Phase 2: relationships
    # ============================================================

    async def _collect_relationships(self, context: AnalysisContext) -> None:
        context.cancellation.raise_if_cancelled()
        nodes = list(context.nodes.values())
        await asyncio.gather(*(self.relationship_collector.collect_relationships(n, context) for n in nodes))
        logger.info("relationship_collection_finished", nodes=len(nodes), relationships=len(context.relationships))

    # ============================================================
    # Phase 3 / 4: roles and features
    # ============================================================

    def _classify_roles(self, context: AnalysisContext) -> None:
        context.cancellation.raise_if_cancelled()
        for node in context.nodes.values():
            try:
                node.role = self.role_classifier.classify(node)
            except Exception as e:
                logger.warning("role_classification_failed", node_id=node.id, error=str(e))
                context.record_error(f"Role classification failed for {node.id}: {e}")
                node.role = ArchitecturalRole.UNKNOWN

    def _detect_feature_boundaries(self, context: AnalysisContext) -> None:
        context.cancellation.raise_if_cancelled()
        boundaries = self.boundary_detector.detect_boundaries(context.nodes.values(), context.relationships)
        for feature, members in boundaries.items():
            for node_id in members:
                node = context.nodes.get(node_id)
                if node is not None:
                    node.feature_boundary = feature

        for node in context.nodes.values():
            if node.feature_boundary is None:
                node.feature_boundary = UNKNOWN_FEATURE

    # ============================================================
    # Final assembly
    # ============================================================

    def _build_project_info(
        self,
        project: ProjectHandle,
        context: AnalysisContext,
        relationships: list[Relationship],
    ) -> ProjectInfo:
        nodes = [n for n in context.nodes.values() if n.project_id == project.project_id]
        node_ids = {n.id for n in nodes}

        touching = [r for r in relationships if r.source_id in node_ids or r.target_id in node_ids]
        complexities = [n.metrics.cyclomatic_complexity for n in nodes if n.metrics.cyclomatic_complexity is not None]
        language_distribution = Counter(language_from_path(n.location.file) for n in nodes if n.location)

        return ProjectInfo(
            project_id=project.project_id,
            name=project.name,
            path=project.path or UNKNOWN,
            target_framework=project.target_framework or UNKNOWN,
            languages=list(project.languages) or sorted(language_distribution),
            project_references=list(project.project_references),
            role_distribution=dict(Counter(n.role for n in nodes)),
            feature_boundaries=sorted({n.feature_boundary or UNKNOWN_FEATURE for n in nodes}),
            metrics=ProjectMetrics(
                total_symbols=len(nodes),
                total_relationships=len(touching),
                cross_project_reference_count=sum(1 for r in touching if r.is_cross_project),
                average_complexity=sum(complexities) / len(complexities) if complexities else 0.0,
                language_distribution=dict(language_distribution),
            ),
        )

    def _build_metadata(
        self,
        workspace: Workspace,
        projects: list[ProjectHandle],
        context: AnalysisContext,
        relationships: list[Relationship],
        duration_ms: float,
    ) -> GraphMetadata:
        nodes = context.nodes.values()
        return GraphMetadata(
            workspace_path=workspace.path,
            analysis_duration_ms=duration_ms,
            resolver_name=self.resolver_name,
            total_projects=len(projects),
            total_symbols=len(context.nodes),
            total_relationships=len(relationships),
            cross_project_relationships=sum(1 for r in relationships if r.is_cross_project),
            cross_language_relationships=sum(1 for r in relationships if r.is_cross_language),
            skipped_symbols=context.skipped_symbols,
            symbol_distribution=dict(Counter(n.kind for n in nodes)),
            relationship_distribution=dict(Counter(r.type for r in relationships)),
            role_distribution=dict(Counter(n.role for n in nodes)),
            errors=list(context.errors),
        )


def _relationship_sort_key(r: Relationship) -> tuple[str, str, str]:
    return (r.source_id, r.target_id, r.type.value)


def _count_references(nodes: dict[str, SymbolNode], relationships: list[Relationship]) -> None:
    incoming = Counter(r.target_id for r in relationships)
    outgoing = Counter(r.source_id for r in relationships)
    for node_id, node in nodes.items():
        node.incoming_reference_count = incoming[node_id]
        node.outgoing_reference_count = outgoing[node_id]


async def analyze_solution(
    service: SymbolResolutionService,
    workspace: Workspace,
    settings: Settings | None = None,
    cancellation: CancellationToken | None = None,
) -> UnifiedSemanticGraph:
    """Convenience wrapper: analyze ``workspace`` with default components."""
    analyzer = SemanticSolutionAnalyzer(service, settings=settings)
    return await analyzer.analyze_solution(workspace, cancellation=cancellation)

