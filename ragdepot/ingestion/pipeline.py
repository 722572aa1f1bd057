# ragdepot/ingestion/pipeline.py
"""
Resumable indexing pipeline.

Flow per run:
    ReadDocuments
      -> ResolveSettings (collection lock wins over current defaults)
      -> ChunkAll
      -> PersistChunksForInspection
      -> LoadExistingForResume
      -> EmbedAndCheckpointLoop
      -> Finalize

Resume is content-based: a chunk whose chunk_id is already stored (or
was already embedded earlier in this run) is skipped, so re-running
after a crash never pays twice for the same text.

Checkpoints are JsonEmbeddingStore.save_incremental() calls every
`checkpoint_interval` new records. An interruption loses at most one
interval of embedding calls; the file on disk is always the last fully
merged checkpoint.

Embedding calls are sequential. Ordering defines checkpoint boundaries
and the providers are rate limited anyway; the client's own retry
policy is the throttle.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from ragdepot.config.schema import ImportSettings
from ragdepot.core.chunk import Chunk
from ragdepot.core.exceptions import ConfigurationError, IndexingError
from ragdepot.core.records import CHUNK_ID_KEY, CollectionSettings, EmbeddingRecord, StoreContents
from ragdepot.ingestion.chunking.chunker import SlidingWindowChunker
from ragdepot.ingestion.reader.base import DocumentReader
from ragdepot.llm.base import EmbeddingClient
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import PIPELINE
from ragdepot.storage.store import JsonEmbeddingStore, write_chunks_file

logger = get_logger(__name__)

# progress(current, total, message)
ProgressCallback = Callable[[int, int, str], None]
ChunkerFactory = Callable[[CollectionSettings], SlidingWindowChunker]


@dataclass
class IndexingResult:
    """Outcome of one indexing run."""

    collection: str
    documents: int = 0
    chunks: int = 0
    existing_count: int = 0
    new_count: int = 0
    skipped_count: int = 0
    checkpoints: int = 0

    @property
    def total(self) -> int:
        return self.existing_count + self.new_count


def resolve_settings(
    contents: StoreContents,
    defaults: ImportSettings,
) -> CollectionSettings:
    """Locked collection settings if present, otherwise the current defaults."""
    if contents.settings is not None:
        return contents.settings
    return defaults.to_collection_settings()


def default_chunker(settings: CollectionSettings) -> SlidingWindowChunker:
    return SlidingWindowChunker(
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
    )


def build_record(chunk: Chunk, vector: List[float]) -> EmbeddingRecord:
    return EmbeddingRecord(
        text=chunk.text,
        vector=vector,
        source=chunk.source_document,
        metadata={
            CHUNK_ID_KEY: chunk.chunk_id,
            "chunkIndex": chunk.sequence_index,
            "startPosition": chunk.start_offset,
            "endPosition": chunk.end_offset,
            "totalChunks": chunk.total_chunks_in_document,
            "source": chunk.source_document,
        },
    )


class IndexingPipeline:
    """
    Documents -> chunks -> (dedup) -> embeddings -> checkpointed store.

    Usage:
        pipeline = IndexingPipeline(
            collection="manuals",
            reader=FileSystemDocumentReader(),
            embedding_client=client,
            store=JsonEmbeddingStore(RagPaths.embeddings("manuals")),
            chunks_path=RagPaths.chunks("manuals"),
        )
        result = pipeline.run("./documents", import_settings)
    """

    def __init__(
        self,
        *,
        reader: DocumentReader,
        embedding_client: EmbeddingClient,
        store: JsonEmbeddingStore,
        collection: str = "default",
        chunks_path: Optional[Path] = None,
        progress: Optional[ProgressCallback] = None,
        chunker_factory: Optional[ChunkerFactory] = None,
    ):
        self.reader = reader
        self.embedding_client = embedding_client
        self.store = store
        self.collection = collection
        self.chunks_path = chunks_path
        self._progress = progress
        self._chunker_factory = chunker_factory or default_chunker

    def run(self, documents_path: str | Path, defaults: ImportSettings) -> IndexingResult:
        """
        Index everything under documents_path.

        Raises:
            ConfigurationError: The embedding client's model differs from the
                model locked into the collection.
            IndexingError: An embedding call failed. Checkpointed records stay
                on disk; the failing chunk is never skipped silently.
            DocumentReadError / StoreError: Propagated from reader / store.
        """
        result = IndexingResult(collection=self.collection)

        # ReadDocuments
        documents = self.reader.read_documents(documents_path)
        result.documents = len(documents)
        if not documents:
            logger.warning(f"{PIPELINE} No documents found in {documents_path}")
            return result

        # ResolveSettings + LoadExistingForResume
        contents = self.store.load()
        settings = resolve_settings(contents, defaults)
        self._check_embedding_model(settings)
        if contents.settings is not None:
            logger.info(f"{PIPELINE} Using settings locked in collection '{self.collection}'")

        # ChunkAll
        chunker = self._chunker_factory(settings)
        chunks: List[Chunk] = []
        for doc in documents:
            chunks.extend(chunker.chunk(doc.text, doc.file_name))
        result.chunks = len(chunks)
        logger.info(
            f"{PIPELINE} Created {len(chunks)} chunks from {len(documents)} document(s) "
            f"with {chunker.chunker_id}"
        )

        # PersistChunksForInspection
        if self.chunks_path is not None:
            write_chunks_file(self.chunks_path, chunks)
            logger.info(f"{PIPELINE} Chunks saved to {self.chunks_path} for inspection")

        existing_ids = contents.chunk_ids()
        result.existing_count = len(contents.records)
        if existing_ids:
            logger.info(f"{PIPELINE} Resume: found {len(existing_ids)} existing embeddings")

        # EmbedAndCheckpointLoop
        seen = set(existing_ids)
        buffer: List[EmbeddingRecord] = []
        total = len(chunks)

        for i, chunk in enumerate(chunks):
            if chunk.chunk_id in seen:
                result.skipped_count += 1
                continue

            self._report(i + 1, total, f"Embedding chunk {i + 1}/{total}")
            vector = self._embed(chunk, i)

            buffer.append(build_record(chunk, vector))
            seen.add(chunk.chunk_id)
            result.new_count += 1

            if len(buffer) >= settings.checkpoint_interval:
                self._flush(buffer, settings, result)
                buffer = []

        # Finalize
        if buffer:
            self._flush(buffer, settings, result)

        if result.skipped_count:
            logger.info(f"{PIPELINE} Skipped {result.skipped_count} already-embedded chunks")
        logger.info(
            f"{PIPELINE} Indexing complete: {result.total} embeddings "
            f"({result.existing_count} existing, {result.new_count} new, "
            f"{result.skipped_count} skipped)"
        )
        return result

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_embedding_model(self, settings: CollectionSettings) -> None:
        client_model = getattr(self.embedding_client, "model", None)
        if isinstance(client_model, str) and client_model != settings.embedding_model:
            raise ConfigurationError(
                f"Collection '{self.collection}' is locked to embedding model "
                f"'{settings.embedding_model}', but the client uses '{client_model}'"
            )

    def _embed(self, chunk: Chunk, index: int) -> List[float]:
        try:
            vector = self.embedding_client.embed(chunk.text)
        except Exception as e:
            logger.error(f"{PIPELINE} Failed to embed chunk {index + 1}: {e}")
            raise IndexingError(
                f"Failed to generate embedding: {e}",
                chunk_index=index,
                source=chunk.source_document,
            ) from e

        if not vector:
            raise IndexingError(
                "Embedding client returned an empty vector",
                chunk_index=index,
                source=chunk.source_document,
            )
        return list(vector)

    def _flush(
        self,
        buffer: List[EmbeddingRecord],
        settings: CollectionSettings,
        result: IndexingResult,
    ) -> None:
        logger.info(f"{PIPELINE} Checkpoint: saving {len(buffer)} embeddings")
        self.store.save_incremental(buffer, settings=settings)
        result.checkpoints += 1

    def _report(self, current: int, total: int, message: str) -> None:
        if self._progress is not None:
            self._progress(current, total, message)


__all__ = [
    "IndexingPipeline",
    "IndexingResult",
    "ProgressCallback",
    "ChunkerFactory",
    "default_chunker",
    "resolve_settings",
    "build_record",
]
