"""Comments on a page: /api/sites/{parent_id}/pages/{child_id}/comments."""


async def index(request, params):
    return [{"site": params["parent_id"], "page": params["child_id"], "text": "Nice"}]


async def archive(request, params):
    """Not a method key, so no route is registered."""
    return []
