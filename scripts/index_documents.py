import asyncio
import logging
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from doc_indexer.config import settings
from doc_indexer.core.errors import IndexerError
from doc_indexer.embeddings.embedder import Embedder
from doc_indexer.pipeline import run_indexing


async def main() -> int:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    embedder = Embedder()

    try:
        index = await run_indexing(
            documents_dir=settings.documents_dir,
            output_path=settings.index_path,
            provider=embedder,
            chunk_size=settings.chunk_size,
            overlap=settings.chunk_overlap,
        )
    except IndexerError:
        logging.getLogger("indexer.script").exception("Indexing failed")
        return 1

    if index is None:
        print(f"No documents to process. Add .txt or .md files to {settings.documents_dir}/")
        return 0

    print(f"Done! {index.metadata.total_chunks} chunk(s) saved to {settings.index_path}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
