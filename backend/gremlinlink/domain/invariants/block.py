from .exceptions import InvariantViolation


def assert_block_kind(block):
    if block.kind == "child" and not block.parent_id:
        raise InvariantViolation("Child blocks must reference a parent block.")

    if block.kind == "root" and block.parent_id:
        raise InvariantViolation("Root blocks cannot have a parent block.")


def assert_renderer_unchanged(block, renderer):
    if renderer is not None and renderer != block.renderer:
        raise InvariantViolation(
            f"Renderer of block '{block.slug}' cannot change from {block.renderer} to {renderer}."
        )


def assert_can_be_landing(block):
    if not block.is_published:
        raise InvariantViolation("Only published blocks can be the landing block.")

    if block.kind != "root":
        raise InvariantViolation("Only root blocks can be the landing block.")


def assert_privacy_change(block, is_private):
    # Landing blocks stay public for as long as they are the landing block
    if is_private and block.is_landing_block:
        raise InvariantViolation(
            "The landing block must stay public. Remove it as landing block first."
        )
