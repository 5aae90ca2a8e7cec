class BlockError(Exception):
    """Base class for content block errors raised below the HTTP layer."""


class BlockNotFound(BlockError):
    pass


class SlugConflict(BlockError):
    pass


class StoreUnavailable(BlockError):
    """The Block Store could not be reached or timed out."""
