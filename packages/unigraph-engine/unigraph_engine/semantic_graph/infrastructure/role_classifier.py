"""
Architectural Role Classifier

Maps a Type node to one role of the closed ArchitecturalRole taxonomy using
name, namespace and file path heuristics. Pure and deterministic: no
resolver calls.

Rules are evaluated in order and the first rule that yields a role wins.
Later rules are broader buckets, so the order matters:

    1. UI               (namespace ui/view/presentation, Views/ViewModels dirs, code-behind files)
    2. Business         (namespace business/domain/service/logic/core)
    3. Data             (namespace data/repository/persistence/storage/dal)
    4. Infrastructure   (namespace infrastructure/api/web/controller/middleware)
    5. Structural       (interface, abstract, *Factory, *Builder)
    6. Cross-cutting    (namespace common/shared/utility/helper/extension)
    7. Unknown

A rule whose namespace matches but whose name suffix does not may decline
(return None) and let later rules try; UI, business and data rules always
answer once they apply.
"""

from collections.abc import Callable
from dataclasses import dataclass

from ..domain.models import ArchitecturalRole, SymbolKind, SymbolNode, TypeCategory

XAML_CODE_BEHIND_SUFFIX = ".xaml.cs"
CODE_BEHIND_SUFFIXES = (XAML_CODE_BEHIND_SUFFIX, ".axaml.cs", ".razor.cs")

UI_NAMESPACE_MARKERS = ("ui", "view", "presentation")
UI_PATH_MARKERS = ("Views", "ViewModels")
BUSINESS_NAMESPACE_MARKERS = ("business", "domain", "service", "logic", "core")
DATA_NAMESPACE_MARKERS = ("data", "repository", "persistence", "storage", "dal")
INFRASTRUCTURE_NAMESPACE_MARKERS = ("infrastructure", "api", "web", "controller", "middleware")
CROSS_CUTTING_NAMESPACE_MARKERS = ("common", "shared", "utility", "helper", "extension")


@dataclass(frozen=True)
class RoleSignals:
    """Classifier inputs extracted from a node"""

    type_name: str  # lower-cased simple name
    namespace: str  # lower-cased containing namespace
    file_path: str  # as reported (case preserved)
    is_interface: bool
    is_abstract: bool

    @classmethod
    def from_node(cls, node: SymbolNode) -> "RoleSignals":
        return cls(
            type_name=node.name.lower(),
            namespace=(node.containing_namespace or "").lower(),
            file_path=node.location.file if node.location else "",
            is_interface=node.declared_type_category == TypeCategory.INTERFACE,
            is_abstract=node.is_abstract,
        )

    def namespace_has(self, markers: tuple[str, ...]) -> bool:
        return any(marker in self.namespace for marker in markers)

    def name_ends_with(self, *suffixes: str) -> bool:
        return self.type_name.endswith(suffixes)

    @property
    def is_code_behind(self) -> bool:
        return self.file_path.lower().endswith(CODE_BEHIND_SUFFIXES)


@dataclass(frozen=True)
class RoleRule:
    name: str
    applies: Callable[[RoleSignals], bool]
    refine: Callable[[RoleSignals], ArchitecturalRole | None]


# ============================================================
# Rule refinements
# ============================================================


def _is_ui(s: RoleSignals) -> bool:
    return s.namespace_has(UI_NAMESPACE_MARKERS) or any(m in s.file_path for m in UI_PATH_MARKERS) or s.is_code_behind


def _refine_ui(s: RoleSignals) -> ArchitecturalRole:
    if s.name_ends_with("viewmodel") or "viewmodel" in s.namespace:
        return ArchitecturalRole.VIEW_MODEL
    # XAML code-behind counts as the view itself
    if s.name_ends_with("view") or s.file_path.lower().endswith(XAML_CODE_BEHIND_SUFFIX):
        return ArchitecturalRole.VIEW
    if s.name_ends_with("window"):
        return ArchitecturalRole.WINDOW
    if s.name_ends_with("page"):
        return ArchitecturalRole.PAGE
    if s.name_ends_with("usercontrol"):
        return ArchitecturalRole.USER_CONTROL
    if s.is_code_behind:
        return ArchitecturalRole.CODE_BEHIND
    return ArchitecturalRole.VIEW


def _refine_business(s: RoleSignals) -> ArchitecturalRole:
    if s.name_ends_with("service") or "service" in s.namespace:
        return ArchitecturalRole.SERVICE
    if s.name_ends_with("entity") or "entities" in s.namespace:
        return ArchitecturalRole.ENTITY
    if "domain" in s.namespace:
        return ArchitecturalRole.DOMAIN
    if s.name_ends_with("valueobject"):
        return ArchitecturalRole.VALUE_OBJECT
    return ArchitecturalRole.BUSINESS_LOGIC


def _refine_data(s: RoleSignals) -> ArchitecturalRole:
    if s.name_ends_with("repository") or "repository" in s.namespace:
        return ArchitecturalRole.REPOSITORY
    if s.name_ends_with("dbcontext", "context"):
        return ArchitecturalRole.DB_CONTEXT
    if "data" in s.namespace:
        return ArchitecturalRole.DATA_ACCESS
    return ArchitecturalRole.DATA_MODEL


def _refine_infrastructure(s: RoleSignals) -> ArchitecturalRole | None:
    if s.name_ends_with("apicontroller"):
        return ArchitecturalRole.API_CONTROLLER
    if s.name_ends_with("controller"):
        return ArchitecturalRole.CONTROLLER
    if s.name_ends_with("middleware"):
        return ArchitecturalRole.MIDDLEWARE
    if s.name_ends_with("configuration", "config"):
        return ArchitecturalRole.CONFIGURATION
    return None


def _refine_structural(s: RoleSignals) -> ArchitecturalRole | None:
    if s.is_interface:
        return ArchitecturalRole.INTERFACE
    if s.is_abstract:
        return ArchitecturalRole.ABSTRACT_CLASS
    if s.name_ends_with("factory"):
        return ArchitecturalRole.FACTORY
    if s.name_ends_with("builder"):
        return ArchitecturalRole.BUILDER
    return None


def _refine_cross_cutting(s: RoleSignals) -> ArchitecturalRole | None:
    if s.name_ends_with("helper"):
        return ArchitecturalRole.HELPER
    if s.name_ends_with("utility", "util"):
        return ArchitecturalRole.UTILITY
    if s.name_ends_with("extension", "extensions"):
        return ArchitecturalRole.EXTENSION
    if s.name_ends_with("attribute"):
        return ArchitecturalRole.ATTRIBUTE
    return None


ROLE_RULES: tuple[RoleRule, ...] = (
    RoleRule("ui", _is_ui, _refine_ui),
    RoleRule("business", lambda s: s.namespace_has(BUSINESS_NAMESPACE_MARKERS), _refine_business),
    RoleRule("data", lambda s: s.namespace_has(DATA_NAMESPACE_MARKERS), _refine_data),
    RoleRule("infrastructure", lambda s: s.namespace_has(INFRASTRUCTURE_NAMESPACE_MARKERS), _refine_infrastructure),
    RoleRule("structural", lambda s: True, _refine_structural),
    RoleRule("cross_cutting", lambda s: s.namespace_has(CROSS_CUTTING_NAMESPACE_MARKERS), _refine_cross_cutting),
)


# ============================================================
# Classifier
# ============================================================


def classify_signals(signals: RoleSignals) -> ArchitecturalRole:
    for rule in ROLE_RULES:
        if rule.applies(signals):
            role = rule.refine(signals)
            if role is not None:
                return role
    return ArchitecturalRole.UNKNOWN


class ArchitecturalRoleClassifier:
    """
    Classifies nodes into architectural roles.

    Only Type nodes carry a role; members classify as Unknown.
    """

    def classify(self, node: SymbolNode) -> ArchitecturalRole:
        if node.kind != SymbolKind.TYPE:
            return ArchitecturalRole.UNKNOWN
        return classify_signals(RoleSignals.from_node(node))
