# turfboard/middleware/__init__.py
from .identity import Identity, init_identity_middleware, load_identity_from_request

__all__ = ["Identity", "init_identity_middleware", "load_identity_from_request"]
