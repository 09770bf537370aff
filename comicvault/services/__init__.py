"""
ComicVault services.

Business logic for catalog search, issue resolution, importing and
collection browsing. Import from the submodules directly.
"""
