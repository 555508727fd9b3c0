"""Posts — the full set of REST handlers backed by an in-memory dict."""

from chirp.validation import max_length, required

from perch._errors import RestError

POSTS: dict[str, dict[str, str]] = {
    "1": {"id": "1", "title": "Hello", "body": "First post"},
}


async def index(request, params):
    return list(POSTS.values())


def show(request, id, params):
    post = POSTS.get(id)
    if post is None:
        raise RestError(404, f"post {id} not found")
    return post


create_rule = {"title": [required, max_length(80)], "body": [required]}


async def create(request, params):
    post_id = str(len(POSTS) + 1)
    post = {"id": post_id, "title": params["title"], "body": params["body"]}
    POSTS[post_id] = post
    return post


update_rule = {"title": [max_length(80)]}


async def update(request, id, params):
    post = show(request, id, params)
    post.update({k: params[k] for k in ("title", "body") if k in params})
    return post


async def destroy(request, id, params):
    POSTS.pop(id, None)
