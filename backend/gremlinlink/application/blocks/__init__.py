from .create_block import create_block
from .update_block import update_block
from .delete_block import delete_block
from .reorder_children import reorder_children

__all__ = ["create_block", "update_block", "delete_block", "reorder_children"]
