"""
Shared fixtures for the invoice OCR extraction tests.
"""

import logging
from datetime import datetime

import pytest

from config import ConfigurationManager
from src.utils.logger import ROOT_LOGGER_NAME

FIXED_NOW = datetime(2026, 1, 21, 14, 30, 22)


@pytest.fixture(autouse=True)
def fresh_config():
    """Every test starts from the bundled settings.yaml"""
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


@pytest.fixture(autouse=True)
def detach_log_handlers():
    """Drop handlers bound to captured streams once a test finishes"""
    yield
    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.handlers.clear()
    app_logger.setLevel(logging.NOTSET)
    app_logger.propagate = True


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def fixed_clock():
    """Clock returning 2026-01-21 14:30:22"""
    return lambda: FIXED_NOW


@pytest.fixture
def english_invoice_text():
    return (
        "ACME Web Services\n"
        "Invoice # 482910\n"
        "Date: Jan 21, 2026\n"
        "Customer Name: Sara Ahmed\n"
        "Total Amount: $805.00\n"
        "\n"
        "Description Quantity Unit Price Total\n"
        "Web Design Service 1 $500.00 $500.00\n"
        "Hosting 2 $100.00 $200.00\n"
        "Subtotal: $700.00\n"
        "VAT (15%): $105.00\n"
        "   Thank you for your business   \n"
    )


@pytest.fixture
def arabic_invoice_text():
    return (
        "فاتورة رقم 1001\n"
        "تاريخ الفاتورة: 2026-02-15\n"
        "اسم العميل: محمد علي\n"
        "المجموع: $230.00\n"
    )
