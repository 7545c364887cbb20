from fastapi import Request

from newsapi.stores.base import NewsStorer


def get_store(request: Request) -> NewsStorer:
    """
    FastAPI dependency returning the store the application was built
    with (see ``create_app``).

    Tests replace it through ``app.dependency_overrides[get_store]`` or
    by passing their own store to ``create_app``.
    """
    return request.app.state.news_store
