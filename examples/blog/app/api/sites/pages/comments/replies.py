"""Never mounted: nesting is limited to two levels."""


async def index(request, params):
    return []
