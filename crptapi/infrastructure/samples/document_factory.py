"""Generates random documents and labels for trial submissions.

Used by the `submit-samples` command to exercise the rate gate against the
remote endpoint without preparing real documents.
"""

import logging
import random
import string
from typing import List, Optional

from crptapi.domain.models.common import DocumentLabel
from crptapi.domain.models.document import LP_INTRODUCE_GOODS, Description, Document, Product

logger = logging.getLogger(__name__)

SAMPLE_DATE = "2020-01-23"
LABEL_LENGTH = 10
FIELD_LENGTH = 8
MIN_PRODUCTS = 1
MAX_PRODUCTS = 4


class SampleDocumentFactory:
    """Builds documents filled with random lowercase identifiers."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def random_string(self, length: int = FIELD_LENGTH) -> str:
        return "".join(self._rng.choice(string.ascii_lowercase) for _ in range(length))

    def random_label(self) -> DocumentLabel:
        """Returns a label used to identify a submission in reports."""
        return DocumentLabel(self.random_string(LABEL_LENGTH))

    def create_product(self) -> Product:
        return Product(
            certificate_document=self.random_string(),
            certificate_document_date=SAMPLE_DATE,
            certificate_document_number=self.random_string(),
            owner_inn=self.random_string(),
            producer_inn=self.random_string(),
            production_date=SAMPLE_DATE,
            tnved_code=self.random_string(),
            uit_code=self.random_string(),
            uitu_code=self.random_string(),
        )

    def create_document(self) -> Document:
        """Creates one goods-introduction document with 1 to 4 products."""
        products_count = self._rng.randint(MIN_PRODUCTS, MAX_PRODUCTS)
        return Document(
            description=Description(participant_inn=self.random_string()),
            doc_id=self.random_string(),
            doc_status=self.random_string(),
            doc_type=LP_INTRODUCE_GOODS,
            import_request=True,
            owner_inn=self.random_string(),
            participant_inn=self.random_string(),
            producer_inn=self.random_string(),
            production_date=SAMPLE_DATE,
            production_type=self.random_string(),
            products=[self.create_product() for _ in range(products_count)],
            reg_date=SAMPLE_DATE,
            reg_number=self.random_string(),
        )

    def create_documents(self, limit: int) -> List[Document]:
        """Creates `limit` random documents."""
        if limit < 0:
            raise ValueError("Document count must not be negative.")
        documents = [self.create_document() for _ in range(limit)]
        logger.debug(f"Generated {len(documents)} sample documents.")
        return documents
