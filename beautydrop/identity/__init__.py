from .dedupe import dedupe, identity_key

__all__ = ["dedupe", "identity_key"]
