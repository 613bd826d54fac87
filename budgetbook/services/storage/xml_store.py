"""
XML File Storage Implementation

Transactions and tags are kept in two XML files, in the layout used by
earlier releases of the application:

    <transactions>
      <transaction id="1735689600000">
        <amount>100.0</amount>
        <type>EXPENSE</type>
        <date>2025-01-01</date>
        <tags><tag id="1" name="Food"/></tags>
      </transaction>
    </transactions>

    <tags>
      <tag id="1" name="Food">
        <tag id="2" name="Groceries"/>
      </tag>
    </tags>

The tag file encodes the hierarchy structurally (nesting), not by parent id.

TRADEOFFS:
- Each save rewrites the whole transaction file (fine for personal use)
- Writes go through a temp file + os.replace, so a crash mid-write leaves
  the previous file intact
- No locking: one writer at a time
"""

import os
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

import structlog
from lxml import etree
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from budgetbook.config import StorageSettings, get_settings
from budgetbook.models.results import LoadResult
from budgetbook.models.transaction import Tag, Transaction, TransactionType
from budgetbook.services.storage.interface import (
    StoreUnavailableError,
    TransactionStorageInterface,
)


logger = structlog.get_logger(__name__)

TRANSACTIONS_ROOT = "transactions"
TAGS_ROOT = "tags"

# Anything that can go wrong turning a document into models
_READ_ERRORS = (
    etree.XMLSyntaxError,
    OSError,
    ValueError,
    TypeError,
    LookupError,
    ArithmeticError,
)


def _parser() -> etree.XMLParser:
    return etree.XMLParser(
        remove_blank_text=True,
        resolve_entities=False,
        no_network=True,
    )


def _required_text(element: etree._Element, child: str) -> str:
    text = element.findtext(child)
    if text is None or not text.strip():
        raise ValueError(
            f"<{element.tag} id={element.get('id')!r}> is missing <{child}>"
        )
    return text.strip()


def _required_attr(element: etree._Element, name: str) -> str:
    value = element.get(name)
    if value is None:
        raise ValueError(f"<{element.tag}> is missing attribute {name!r}")
    return value


class XmlTransactionStorage(TransactionStorageInterface):
    """
    XML implementation of the transaction and tag stores.

    A missing file reads as EMPTY. A file that exists but cannot be parsed,
    or holds a malformed record, reads as FAILED; save() refuses to
    overwrite such a file.
    """

    def __init__(
        self,
        transactions_path: Union[str, Path],
        tags_path: Union[str, Path],
        write_attempts: int = 3,
    ):
        if write_attempts < 1:
            raise ValueError("write_attempts must be at least 1")
        self._transactions_path = Path(transactions_path)
        self._tags_path = Path(tags_path)
        self._write_attempts = write_attempts

    @classmethod
    def from_settings(
        cls,
        settings: Optional[StorageSettings] = None,
    ) -> "XmlTransactionStorage":
        settings = settings or get_settings().storage
        return cls(
            transactions_path=settings.transactions_path,
            tags_path=settings.tags_path,
            write_attempts=settings.write_attempts,
        )

    @property
    def transactions_path(self) -> Path:
        return self._transactions_path

    @property
    def tags_path(self) -> Path:
        return self._tags_path

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def _element_to_transaction(self, element: etree._Element) -> Transaction:
        tags = []
        tags_element = element.find("tags")
        if tags_element is not None:
            for tag_element in tags_element.iterchildren("tag"):
                # Parent links are not stored per transaction
                tags.append(Tag(
                    id=int(_required_attr(tag_element, "id")),
                    name=_required_attr(tag_element, "name"),
                ))

        return Transaction(
            id=int(_required_attr(element, "id")),
            amount=Decimal(_required_text(element, "amount")),
            transaction_type=TransactionType[_required_text(element, "type").upper()],
            transaction_date=date.fromisoformat(_required_text(element, "date")),
            tags=tags,
        )

    def _transaction_to_element(self, transaction: Transaction) -> etree._Element:
        element = etree.Element("transaction", id=str(transaction.id))
        etree.SubElement(element, "amount").text = str(transaction.amount)
        etree.SubElement(element, "type").text = transaction.transaction_type.name
        etree.SubElement(element, "date").text = transaction.transaction_date.isoformat()

        tags_element = etree.SubElement(element, "tags")
        for tag in transaction.tags:
            etree.SubElement(tags_element, "tag", id=str(tag.id), name=tag.name)
        return element

    def _collect_tags(
        self,
        element: etree._Element,
        parent_id: Optional[int],
        tags: list[Tag],
    ) -> None:
        tag = Tag(
            id=int(_required_attr(element, "id")),
            name=_required_attr(element, "name"),
            parent_id=parent_id,
        )
        tags.append(tag)
        for child in element.iterchildren("tag"):
            self._collect_tags(child, tag.id, tags)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def load_result(self) -> LoadResult:
        path = self._transactions_path
        if not path.exists():
            return LoadResult.empty()

        try:
            root = etree.parse(str(path), _parser()).getroot()
            transactions = [
                self._element_to_transaction(element)
                for element in root.iter("transaction")
            ]
        except _READ_ERRORS as e:
            logger.warning("transactions_load_failed", path=str(path), error=str(e))
            return LoadResult.failed(f"Could not read {path}: {e}")

        return LoadResult.loaded(transactions)

    def load_tags_result(self) -> LoadResult:
        path = self._tags_path
        if not path.exists():
            return LoadResult.empty()

        tags: list[Tag] = []
        try:
            root = etree.parse(str(path), _parser()).getroot()
            for element in root.iterchildren("tag"):
                self._collect_tags(element, None, tags)
        except _READ_ERRORS as e:
            logger.warning("tags_load_failed", path=str(path), error=str(e))
            return LoadResult.failed(f"Could not read {path}: {e}")

        return LoadResult.loaded(tags)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _read_for_append(self) -> etree._ElementTree:
        path = self._transactions_path
        if not path.exists():
            return etree.ElementTree(etree.Element(TRANSACTIONS_ROOT))

        try:
            document = etree.parse(str(path), _parser())
        except (etree.XMLSyntaxError, OSError) as e:
            raise StoreUnavailableError(
                f"Refusing to append to unreadable store {path}: {e}"
            ) from e

        if document.getroot().tag != TRANSACTIONS_ROOT:
            raise StoreUnavailableError(
                f"Unexpected root <{document.getroot().tag}> in {path}"
            )
        return document

    def _replace_file(self, path: Path, payload: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.",
            suffix=".tmp",
            dir=path.parent,
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def _write(self, path: Path, payload: bytes) -> None:
        retrying = Retrying(
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(multiplier=0.1, max=2),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                self._replace_file(path, payload)

    def save(self, transaction: Transaction) -> None:
        """Append a transaction to the XML store."""
        document = self._read_for_append()
        document.getroot().append(self._transaction_to_element(transaction))
        payload = etree.tostring(
            document,
            xml_declaration=True,
            encoding="UTF-8",
            pretty_print=True,
        )

        try:
            self._write(self._transactions_path, payload)
        except OSError as e:
            logger.error(
                "transaction_save_failed",
                path=str(self._transactions_path),
                transaction_id=transaction.id,
                error=str(e),
            )
            raise StoreUnavailableError(
                f"Failed to save transaction {transaction.id}: {e}"
            ) from e

        logger.debug(
            "transaction_saved",
            path=str(self._transactions_path),
            transaction_id=transaction.id,
        )
