"""
In-memory product list shown on the dashboard.

The repository owns the committed collection for one session. Form input
arrives as a ProductDraft of raw text and is parsed and validated here.
"""

import uuid
import datetime
import logging
from decimal import Decimal, InvalidOperation
from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from .outcomes import Outcome, Reason
from . import config

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass
class Product:
    """Represents a single committed product."""
    id: str
    name: str
    quantity: int = 0
    expiry_date: str = ""
    exits: int = 0
    price: Decimal = field(default_factory=Decimal)

    @property
    def expiry(self) -> Optional[datetime.date]:
        return parse_expiry(self.expiry_date)


@dataclass
class ProductDraft:
    """Field values as typed into the add/edit form, before parsing."""
    name: str = ""
    quantity: str = ""
    expiry_date: str = ""
    exits: str = ""
    price: str = ""

    @classmethod
    def from_product(cls, product: Product) -> 'ProductDraft':
        """Prefill an edit form from a committed product."""
        return cls(
            name=product.name,
            quantity=str(product.quantity),
            expiry_date=product.expiry_date,
            exits=str(product.exits),
            price=str(product.price),
        )


class SortKey(str, Enum):
    QUANTITY = "quantity"
    EXPIRY_DATE = "expiry_date"
    EXITS = "exits"


def parse_expiry(text: str) -> Optional[datetime.date]:
    """Parse a DD-MM-YYYY date, or None if it is not a valid calendar date."""
    try:
        return datetime.datetime.strptime(text.strip(), config.EXPIRY_DATE_FORMAT).date()
    except (ValueError, AttributeError):
        return None


def _parse_count(value) -> int:
    # Unparseable and negative input both count as zero
    try:
        count = int(str(value).strip())
    except ValueError:
        return 0
    return max(count, 0)


def _parse_price(value) -> Decimal:
    """Parse a price in cents precision; unparseable or out-of-range input is zero."""
    try:
        price = Decimal(str(value).strip())
        if not price.is_finite() or price < 0:
            return Decimal(0)
        return price.quantize(CENTS)
    except InvalidOperation:
        return Decimal(0)


def _expiry_sort_key(product: Product):
    expiry = product.expiry
    # Products without a valid date go last
    return (expiry is None, expiry or datetime.date.min)


class ProductRepository:
    """
    Holds the session's products and produces sorted views of them.

    Collaborators are optional and best-effort:
        notifier: object with schedule_immediate(title, body)
        haptics: object with pulse()
    """

    def __init__(self, notifier=None, haptics=None):
        self.notifier = notifier
        self.haptics = haptics
        self._products: List[Product] = []

    @classmethod
    def with_sample_products(cls, notifier=None, haptics=None) -> 'ProductRepository':
        """Create a repository seeded with the demo products, without announcing them."""
        repo = cls(notifier=notifier, haptics=haptics)
        for fields in config.SAMPLE_PRODUCTS:
            product = repo._build(str(uuid.uuid4()), ProductDraft(**fields))
            repo._products.append(product)
        return repo

    def __len__(self) -> int:
        return len(self._products)

    def list(self) -> List[Product]:
        """All products in insertion order."""
        return list(self._products)

    def get(self, product_id: str) -> Optional[Product]:
        return next((p for p in self._products if p.id == product_id), None)

    def draft_for(self, product_id: str) -> Optional[ProductDraft]:
        product = self.get(product_id)
        return ProductDraft.from_product(product) if product else None

    def add(self, draft: ProductDraft) -> Outcome:
        """
        Validate a draft and append it as a new product.

        On success the haptic pulse and the product-added notification fire;
        their failures never undo the add.

        Returns:
            Created with the new Product, or Rejected(validation_error)
        """
        product = self._build(str(uuid.uuid4()), draft)
        if not self._is_valid(product):
            return Outcome.rejected(Reason.VALIDATION_ERROR)

        self._products.append(product)
        logger.info(f"Product added: {product.id}")
        self._announce(product)
        return Outcome.created(product)

    def update(self, product_id: str, draft: ProductDraft) -> Outcome:
        """
        Replace the product with the given id, keeping its id and position.

        Returns:
            Updated with the new Product, or Rejected with validation_error
            or not_found
        """
        product = self._build(product_id, draft)
        if not self._is_valid(product):
            return Outcome.rejected(Reason.VALIDATION_ERROR)

        for i, existing in enumerate(self._products):
            if existing.id == product_id:
                self._products[i] = product
                logger.info(f"Product updated: {product_id}")
                return Outcome.updated(product)
        return Outcome.rejected(Reason.NOT_FOUND)

    def remove(self, product_id: str, confirm: Callable[[str], bool]) -> bool:
        """
        Delete a product after the user confirms.

        Args:
            product_id: Id of the product to delete
            confirm: Prompt returning True when the user confirms

        Returns:
            True if a product was deleted
        """
        product = self.get(product_id)
        if product is None:
            return False
        if not confirm(config.CONFIRM_DELETE_PRODUCT.format(name=product.name)):
            return False

        self._products = [p for p in self._products if p.id != product_id]
        logger.info(f"Product deleted: {product_id}")
        return True

    def project(self, sort_key: Union[SortKey, str]) -> List[Product]:
        """
        Return a sorted copy of the products; the stored order is untouched.

        quantity and expiry_date sort ascending, exits descending. Ties keep
        insertion order. An unknown key returns insertion order.
        """
        try:
            key = SortKey(sort_key)
        except ValueError:
            logger.debug(f"Unknown sort key {sort_key!r}, keeping insertion order")
            return self.list()

        if key is SortKey.QUANTITY:
            return sorted(self._products, key=lambda p: p.quantity)
        if key is SortKey.EXPIRY_DATE:
            return sorted(self._products, key=_expiry_sort_key)
        return sorted(self._products, key=lambda p: -p.exits)

    def _build(self, product_id: str, draft: ProductDraft) -> Product:
        return Product(
            id=product_id,
            name=(draft.name or "").strip(),
            quantity=_parse_count(draft.quantity),
            expiry_date=(draft.expiry_date or "").strip(),
            exits=_parse_count(draft.exits),
            price=_parse_price(draft.price),
        )

    @staticmethod
    def _is_valid(product: Product) -> bool:
        return bool(product.name) and product.price > 0

    def _announce(self, product: Product) -> None:
        if self.haptics is not None:
            try:
                self.haptics.pulse()
            except Exception as e:
                logger.warning(f"Haptic pulse failed: {e}")

        if self.notifier is not None:
            try:
                self.notifier.schedule_immediate(
                    config.NOTIFICATION_TITLE_PRODUCT_ADDED,
                    config.NOTIFICATION_BODY_PRODUCT_ADDED.format(name=product.name),
                )
            except Exception as e:
                logger.warning(f"Product notification failed: {e}")
