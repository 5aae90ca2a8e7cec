from .block_store import BlockStore

__all__ = ["BlockStore"]
