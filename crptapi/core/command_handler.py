"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), feeds documents into
the DocumentClient and reports each outcome through the UserInterface.
"""

import logging
import time
from concurrent.futures import Future, wait
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from crptapi.core.document_client import DocumentClient
from crptapi.domain.errors import CrptApiError
from crptapi.domain.interfaces.user_interface import UserInterface
from crptapi.domain.models.common import DocumentLabel
from crptapi.domain.models.document import Document
from crptapi.domain.models.submission import CompletionResult, SerializationFailed
from crptapi.infrastructure.samples.document_factory import SampleDocumentFactory
from crptapi.infrastructure.serialization.json_serializer import load_documents

logger = logging.getLogger(__name__)


class CommandHandler:
    """Handles incoming commands and delegates to the document client."""

    def __init__(
        self,
        client: DocumentClient,
        ui: UserInterface,
        sample_factory: SampleDocumentFactory,
    ):
        """Initializes the CommandHandler with required services."""
        self.client = client
        self.ui = ui
        self.sample_factory = sample_factory

    def handle_submit_samples(self, count: int) -> List[CompletionResult]:
        """Handles the 'submit-samples' command: generates and submits random documents."""
        logger.info(f"Handling 'submit-samples' command for {count} documents.")
        try:
            documents = self.sample_factory.create_documents(count)
        except ValueError as e:
            self.ui.display_error(f"Submit-samples command failed: {e}")
            return []
        batch = [(document, self.sample_factory.random_label()) for document in documents]
        self.ui.display_info(f"Generated {len(batch)} sample document(s).")
        return self._submit_batch(batch)

    def handle_submit_files(self, paths: Sequence[Path]) -> List[CompletionResult]:
        """Handles the 'submit' command: loads documents from JSON files and submits them."""
        logger.info(f"Handling 'submit' command for {len(paths)} file(s).")
        batch: List[Tuple[Document, DocumentLabel]] = []
        for path in paths:
            try:
                documents = load_documents(path)
            except (OSError, CrptApiError) as e:
                logger.error(f"Failed to load documents from {path}: {e}")
                self.ui.display_error(f"Could not load {path}: {e}")
                continue
            for index, document in enumerate(documents):
                label = DocumentLabel(document.doc_id or f"{Path(path).stem}#{index + 1}")
                batch.append((document, label))

        if not batch:
            self.ui.display_warning("No documents to submit.")
            return []
        self.ui.display_info(f"Loaded {len(batch)} document(s) from {len(paths)} file(s).")
        return self._submit_batch(batch)

    def _submit_batch(self, batch: Iterable[Tuple[Document, DocumentLabel]]) -> List[CompletionResult]:
        """Submits every document, then waits for all outcomes and shows a summary."""
        futures: List[Future] = []
        start_time = time.perf_counter()
        try:
            for document, label in batch:
                future = self.client.submit_document(document, label, sink=self.ui.display_outcome)
                if future.cancelled():
                    break
                futures.append(future)
                if not (future.done() and isinstance(future.result(), SerializationFailed)):
                    self.ui.display_request_sent(label)
            wait(futures)
        except KeyboardInterrupt:
            logger.warning("Interrupted; closing client without waiting for in-flight requests.")
            self.ui.display_warning("Interrupted. Pending submissions were abandoned.")
            self.client.close(wait=False)
        except Exception as e:
            logger.error(f"Submission batch failed: {e}", exc_info=True)
            self.ui.display_error(f"Submission failed: {e}")

        results = [f.result() for f in futures if f.done() and not f.cancelled()]
        self.ui.display_summary(results, time.perf_counter() - start_time)
        return results
