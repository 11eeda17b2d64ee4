"""Backends and file I/O: PostgREST client, JSON fetchers, settings, serializers."""
