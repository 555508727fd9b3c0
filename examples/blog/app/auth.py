"""Token check for the blog api — every request needs ``X-Token: demo``."""

from chirp import Request


def check_token(request: Request) -> bool:
    return request.headers.get("x-token") == "demo"
