"""Post-generation processing of rendered artifacts."""

from .hooks import HookChain, HookKind, Listener, Transform

__all__ = ["HookChain", "HookKind", "Listener", "Transform"]
