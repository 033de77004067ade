from .stream_lookup import StreamLookupUseCase

__all__ = ["StreamLookupUseCase"]
