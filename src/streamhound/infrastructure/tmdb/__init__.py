from .client import HttpxTmdbClient, build_search_query

__all__ = [
    "HttpxTmdbClient",
    "build_search_query",
]
