"""
Line Item Extractor Module.

Reads the billable rows of an invoice with a small state machine:

    SCANNING --header line--> IN_SECTION --terminator line--> DONE

A header line contains "Description", "Quantity" or "unit price"; it is
consumed, not emitted. Inside the section each line is parsed as
"<description> <quantity> [$]<unit price> [$]<line total>"; rows that do
not fit are matched against a catalog of known services. Scanning stops
at the first line mentioning "Subtotal", "VAT" or "Total Amount".

If the section yields nothing, the whole document is searched for
catalog services instead, using their default prices when a line has no
number.

Author: ML Engineering Team
"""

import re
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from config import get_config
from src.postprocessor.normalizers import AmountNormalizer
from src.utils.logger import get_logger
from .extraction_result import LineItem
from .patterns import AMOUNT, CURRENCY, PRICE_TOKEN_RE, contains_any

# Initialize module logger
logger = get_logger(__name__)


HEADER_TERMS = ("Description", "Quantity", "unit price")
TERMINATOR_TERMS = ("Subtotal", "VAT", "Total Amount")

ROW_PATTERNS = (
    re.compile(rf"^(.+?)\s+(\d+)\s+{CURRENCY}?({AMOUNT})\s+{CURRENCY}?({AMOUNT})$"),
    re.compile(rf"^(.+?)\s+(\d+)\s+({AMOUNT})\s+({AMOUNT})$"),
)

DEFAULT_SERVICES = {
    "Web Design Service": "500.00",
    "Hosting": "100.00",
    "Domain Name": "20.00",
}


class SectionState(Enum):
    """States of the items-section scan."""
    SCANNING = "scanning-for-header"
    IN_SECTION = "items-section"
    DONE = "done"


class ServiceCatalog:
    """
    Lookup table of known service names and their default unit prices.

    Matching is a case-insensitive substring test in catalog order.

    Example:
        >>> catalog = ServiceCatalog({"Hosting": "100.00"})
        >>> catalog.match("Hosting (12 months)")
        ('Hosting', Decimal('100.00'))
    """

    def __init__(self, services: Mapping[str, object]) -> None:
        self._services: Dict[str, Decimal] = {
            name: Decimal(str(price)) for name, price in services.items()
        }

    @classmethod
    def from_config(cls) -> 'ServiceCatalog':
        return cls(get_config("extraction.line_items.known_services", DEFAULT_SERVICES))

    @property
    def names(self) -> List[str]:
        return list(self._services)

    def match(self, line: str) -> Optional[Tuple[str, Decimal]]:
        """Return (name, default price) of the first service named on the line."""
        lowered = line.lower()
        for name, price in self._services.items():
            if name.lower() in lowered:
                return name, price
        return None


class LineItemExtractor:
    """
    Extracts invoice line items.

    Attributes:
        catalog: Known services used when positional parsing fails.

    Example:
        >>> extractor = LineItemExtractor()
        >>> extractor.extract([
        ...     "Description Quantity UnitPrice LineTotal",
        ...     "Hosting 1 $100.00 $100.00",
        ...     "Subtotal: $100.00",
        ... ])
        [LineItem(description='Hosting', quantity=1, ...)]
    """

    def __init__(
        self,
        catalog: Optional[ServiceCatalog] = None,
        amount_normalizer: Optional[AmountNormalizer] = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else ServiceCatalog.from_config()
        self.amount_normalizer = amount_normalizer or AmountNormalizer()

    def extract(self, lines: Sequence[str]) -> List[LineItem]:
        """
        Extract line items in document order.

        Args:
            lines: Normalized OCR lines.

        Returns:
            Line items; may be empty. Repeated services are kept.
        """
        items = self.extract_section(lines)
        if items:
            logger.info(f"Extracted {len(items)} line item(s) from items section")
            return items

        items = self.extract_from_catalog(lines)
        if items:
            logger.info(f"Extracted {len(items)} line item(s) from service catalog")
        else:
            logger.debug("No line items found")
        return items

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    @staticmethod
    def is_header(line: str) -> bool:
        return contains_any(line, HEADER_TERMS)

    @staticmethod
    def is_terminator(line: str) -> bool:
        return contains_any(line, TERMINATOR_TERMS)

    def transition(self, state: SectionState, line: str) -> Tuple[SectionState, bool]:
        """
        Apply one line to the section state machine.

        Args:
            state: Current state.
            line: Next line.

        Returns:
            Tuple of (next_state, is_item_candidate).
        """
        if state is SectionState.DONE:
            return state, False
        if self.is_header(line):
            return SectionState.IN_SECTION, False
        if state is SectionState.SCANNING:
            return state, False
        if self.is_terminator(line):
            return SectionState.DONE, False
        return state, bool(line.strip())

    def extract_section(self, lines: Sequence[str]) -> List[LineItem]:
        items: List[LineItem] = []
        state = SectionState.SCANNING

        for line in lines:
            state, is_candidate = self.transition(state, line)
            if state is SectionState.DONE:
                break
            if not is_candidate:
                continue

            item = self.parse_row(line)
            if item is not None:
                items.append(item)
            else:
                logger.debug(f"Skipped unparsable item line: {line}")

        return items

    # ------------------------------------------------------------------
    # Row parsing
    # ------------------------------------------------------------------

    def parse_row(self, line: str) -> Optional[LineItem]:
        """
        Parse one items-section line.

        Args:
            line: Candidate row.

        Returns:
            LineItem, or None when the line is neither a positional row
            nor a catalog service.
        """
        text = line.strip()

        for pattern in ROW_PATTERNS:
            match = pattern.match(text)
            if match is None:
                continue
            description = match.group(1).strip()
            quantity = self.amount_normalizer.to_int(match.group(2))
            unit_price = self.amount_normalizer.to_decimal(match.group(3))
            line_total = self.amount_normalizer.to_decimal(match.group(4))
            if description and quantity is not None and unit_price is not None \
                    and line_total is not None:
                return LineItem(
                    description=description,
                    quantity=quantity,
                    unit_price=unit_price,
                    line_total=line_total,
                )

        service = self.catalog.match(text)
        if service is not None:
            name, _ = service
            price = self.price_from_line(text)
            return self._service_item(name, price if price is not None else Decimal("0"))

        return None

    def extract_from_catalog(self, lines: Sequence[str]) -> List[LineItem]:
        """Scan every line for catalog services, using default prices as needed."""
        items: List[LineItem] = []
        for line in lines:
            service = self.catalog.match(line)
            if service is None:
                continue
            name, default_price = service
            price = self.price_from_line(line)
            items.append(self._service_item(name, price if price is not None else default_price))
        return items

    def price_from_line(self, line: str) -> Optional[Decimal]:
        """Return the first number on the line as a price."""
        for match in PRICE_TOKEN_RE.finditer(line):
            price = self.amount_normalizer.to_decimal(match.group(1))
            if price is not None:
                return price
        return None

    @staticmethod
    def _service_item(name: str, price: Decimal) -> LineItem:
        return LineItem(description=name, quantity=1, unit_price=price, line_total=price)
