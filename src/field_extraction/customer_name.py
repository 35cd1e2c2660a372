"""
Customer Name Extractor Module.

Cascade, first success wins:
    1. Explicit label on the same line ("Customer Name: ...", "Bill To: ...")
    2. Label alone on a line, name on the next line
    3. Catalog of known names found anywhere in the text
    4. Structural person-name heuristic
    5. Default sentinel

Author: ML Engineering Team
"""

from typing import Optional, Sequence

from config import get_config
from src.utils.logger import get_logger
from .filters import is_likely_person_name, is_numeric_or_symbol
from .patterns import PatternRule, scan_lines

# Initialize module logger
logger = get_logger(__name__)


LABEL_PATTERNS = (
    PatternRule("customer-name", r"Customer\s*Name\s*:?\s*(.+)"),
    PatternRule("arabic-customer-name", r"اسم\s*العميل\s*:?\s*(.+)"),
    PatternRule("customer", r"Customer:\s*(.+)"),
    PatternRule("name", r"Name:\s*(.+)"),
    PatternRule("bill-to", r"Bill\s*To:\s*(.+)"),
    PatternRule("client", r"Client:\s*(.+)"),
)

# Lowercase label fragments announcing a name on the following line
NEXT_LINE_LABELS = ("customer name", "customer:", "bill to", "اسم العميل")

DEFAULT_KNOWN_NAMES = ("Ali Mohamed", "محمد علي", "Mahmoud Nour", "محمود نور")


class CustomerNameExtractor:
    """
    Cascade extractor for the customer name.

    Attributes:
        default_name: Value returned when every pass fails.
        known_names: Catalog checked by the lookup pass.

    Example:
        >>> CustomerNameExtractor().extract(["Bill To: Sara Ahmed"])
        'Sara Ahmed'
    """

    def __init__(
        self,
        default_name: Optional[str] = None,
        known_names: Optional[Sequence[str]] = None,
        min_name_length: Optional[int] = None,
        max_name_length: Optional[int] = None,
        min_letter_ratio: Optional[float] = None,
    ) -> None:
        if known_names is None:
            known_names = get_config("extraction.customer.known_names", DEFAULT_KNOWN_NAMES)
        self.known_names = tuple(known_names)
        settings = {
            "default_name": (default_name, "Unknown Customer"),
            "min_name_length": (min_name_length, 3),
            "max_name_length": (max_name_length, 50),
            "min_letter_ratio": (min_letter_ratio, 0.7),
        }
        for name, (value, default) in settings.items():
            if value is None:
                value = get_config(f"extraction.customer.{name}", default)
            setattr(self, name, value)

    def extract(self, lines: Sequence[str]) -> str:
        """
        Run the cascade.

        Args:
            lines: Normalized OCR lines.

        Returns:
            Customer name, or the default sentinel.
        """
        for name, run_pass in (
            ("label", self.label_pass),
            ("next line", self.next_line_pass),
            ("known name", self.known_name_pass),
            ("person name", self.person_name_pass),
        ):
            customer = run_pass(lines)
            if customer:
                logger.info(f"Customer name '{customer}' found by {name} pass")
                return customer

        logger.debug(f"No customer name found, using '{self.default_name}'")
        return self.default_name

    def label_pass(self, lines: Sequence[str]) -> Optional[str]:
        candidate = scan_lines(lines, LABEL_PATTERNS, self._interpret_label)
        return candidate.value if candidate else None

    def next_line_pass(self, lines: Sequence[str]) -> Optional[str]:
        for index in range(len(lines) - 1):
            lowered = lines[index].lower()
            if any(label in lowered for label in NEXT_LINE_LABELS):
                next_line = lines[index + 1].strip()
                if next_line and not is_numeric_or_symbol(next_line):
                    return next_line
        return None

    def known_name_pass(self, lines: Sequence[str]) -> Optional[str]:
        for line in lines:
            lowered = line.lower()
            for name in self.known_names:
                if name.lower() in lowered:
                    return name
        return None

    def person_name_pass(self, lines: Sequence[str]) -> Optional[str]:
        for line in lines:
            text = line.strip()
            if is_likely_person_name(
                text,
                min_length=self.min_name_length,
                max_length=self.max_name_length,
                min_letter_ratio=self.min_letter_ratio,
            ):
                return text
        return None

    @staticmethod
    def _interpret_label(match, line: str) -> Optional[str]:
        name = match.group(1).strip()
        if not name or is_numeric_or_symbol(name):
            return None
        return name
