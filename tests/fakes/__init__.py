"""
Test Fakes Module

Sample workspace and fake resolution services.
"""

from tests.fakes.fake_resolvers import CancellingResolver, CountingResolver, DelegatingResolver, FailingResolver
from tests.fakes.shop_workspace import WORKSPACE_PATH, ShopSymbols, build_shop_service, build_shop_symbols

__all__ = [
    "CancellingResolver",
    "CountingResolver",
    "DelegatingResolver",
    "FailingResolver",
    "ShopSymbols",
    "WORKSPACE_PATH",
    "build_shop_service",
    "build_shop_symbols",
]
