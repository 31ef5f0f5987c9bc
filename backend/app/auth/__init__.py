"""
认证模块
提供身份提供方边界定义
"""

from .identity import ProviderUser, IdentityProvider, StaticIdentityProvider

__all__ = [
    "ProviderUser",
    "IdentityProvider",
    "StaticIdentityProvider"
]
