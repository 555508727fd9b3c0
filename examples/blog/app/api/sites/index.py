"""GET /api/sites — the sites collection itself."""

SITES = [{"id": "main", "name": "Main site"}]


def index(request, params):
    return SITES
