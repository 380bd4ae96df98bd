"""
Catalog loading for the docshelf library.

This package is responsible for:
* Reading the bundled baseline language packs shipped with the application.
* Reading the downloaded overlay packs from the sandboxed pack directory.
* Validating overlay documents and deleting the ones that cannot be parsed.
* Merging baseline and overlays into one catalog, overlays taking precedence.
"""
