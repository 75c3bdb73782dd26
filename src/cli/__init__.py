"""Command-line tools for the newsrag article collection.

- ``python -m src.cli ingest`` -- ingest the CSV article list
- ``python -m src.cli ingest-url --url URL`` -- ingest one article
- ``python -m src.cli query --text TEXT`` -- top-K search
- ``python -m src.cli stats`` -- collection size
"""
