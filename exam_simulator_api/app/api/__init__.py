"""
API package containing versioned routes.

A version subpackage such as ``v1`` exposes a top-level ``router``
that includes its domain endpoints.  ``main.create_app`` mounts it
under ``settings.api_prefix``.
"""
