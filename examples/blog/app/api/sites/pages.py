"""Pages of a site — built by a factory that receives the chirp App."""


def setup(app):
    pages = {"about": {"id": "about", "title": "About"}}

    async def index(request, params):
        return {"site": params["parent_id"], "pages": list(pages.values())}

    async def show(request, id, params):
        return pages.get(id)

    return {"index": index, "show": show}
