"""
doc-indexer: chunk documents, bind them to embeddings and retrieve the
passages most similar to a query.
"""

__version__ = "1.0.0"
