from .block import ContentBlock, BLOCK_KINDS
from .click import ClickEvent
from .landing import LandingSelection, LANDING_ROW_ID
from .user import User

__all__ = [
    "ContentBlock",
    "BLOCK_KINDS",
    "ClickEvent",
    "LandingSelection",
    "LANDING_ROW_ID",
    "User",
]
