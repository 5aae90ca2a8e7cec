from gremlinlink.domain.invariants.exceptions import InvariantViolation
from gremlinlink.renderers import RendererType, get_renderer
from gremlinlink.renderers.article import reading_stats

# renderers whose string fields are trimmed before validation
_STRIPPED_FIELDS = {
    RendererType.REDIRECT: ("url",),
    RendererType.ARTICLE: ("title",),
    RendererType.CARD: ("title",),
}


def prepare_block_data(renderer_tag, data):
    """
    Check `data` against its renderer and return the payload to store.

    Text fields are trimmed first, so a whitespace-only title is rejected.
    Article payloads are enriched with word count and reading time.
    """
    renderer = get_renderer(renderer_tag)
    if renderer is None:
        raise InvariantViolation(f"Unknown renderer: {renderer_tag}")

    prepared = dict(data)
    for field in _STRIPPED_FIELDS.get(renderer.renderer_type, ()):
        if isinstance(prepared.get(field), str):
            prepared[field] = prepared[field].strip()

    if not renderer.validate(prepared):
        raise InvariantViolation(f"Invalid data for renderer: {renderer_tag}")

    if renderer.renderer_type is RendererType.ARTICLE:
        words, minutes = reading_stats(prepared.get("content"))
        prepared["word_count"] = words
        prepared["reading_time"] = minutes

    return prepared
