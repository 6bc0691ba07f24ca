# ABOUTME: Bookcase, a personal book catalog with import, export, and backup pipelines.
# ABOUTME: Subpackages: db (record store), covers, core (pipelines), metadata, cli.

__version__ = "0.1.0"
