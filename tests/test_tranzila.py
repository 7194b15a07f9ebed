"""
Tranzila payment page integration tests
"""

import json
from urllib.parse import parse_qs, urlsplit

import pytest

from src.domain.value_objects.payment_signal import PaymentSignalKind
from src.infrastructure.services.tranzila import (
    build_iframe_url,
    extract_transaction_id,
    parse_payment_message,
    parse_redirect_params,
)


class TestBuildIframeUrl:
    """Test hosted payment page URLs"""

    def test_url_carries_amount_and_redirects(self):
        url = build_iframe_url(
            "kingsman", 24.66, "https://shop.example.com/",
            customer_email="rider@example.com", customer_name="Dana Rider",
        )
        parts = urlsplit(url)
        query = parse_qs(parts.query)

        assert parts.netloc == "directng.tranzila.com"
        assert parts.path == "/kingsman/iframenew.php"
        assert query["sum"] == ["24.66"]
        assert query["currency"] == ["ILS"]
        assert query["success_url"] == ["https://shop.example.com/payment/success"]
        assert query["error_url"] == ["https://shop.example.com/payment/failed"]
        assert query["cancel_url"] == ["https://shop.example.com/payment/failed"]
        assert query["email"] == ["rider@example.com"]
        assert query["contact"] == ["Dana Rider"]
        assert "phone" not in query

    def test_amount_has_two_decimals(self):
        query = parse_qs(urlsplit(build_iframe_url("kingsman", 2.6, "https://shop")).query)
        assert query["sum"] == ["2.60"]

    def test_terminal_required(self):
        with pytest.raises(ValueError):
            build_iframe_url("", 10, "https://shop")


class TestTransactionId:
    """Test transaction id aliases"""

    @pytest.mark.parametrize("field", ["transactionId", "TransactionId", "RefNo", "TranzilaTK"])
    def test_aliases(self, field):
        assert extract_transaction_id({field: " abc123 "}) == "abc123"

    def test_first_source_wins_and_blanks_are_skipped(self):
        assert extract_transaction_id({"transactionId": ""}, None, {"RefNo": "R1"}) == "R1"
        assert extract_transaction_id({"transactionId": None}) is None


class TestParsePaymentMessage:
    """Test window message normalization"""

    def test_success_variants(self):
        assert parse_payment_message({"type": "payment_success", "RefNo": "R1"}).kind is PaymentSignalKind.SUCCESS
        assert parse_payment_message({"status": "success"}).kind is PaymentSignalKind.SUCCESS
        signal = parse_payment_message(json.dumps({"Response": "000", "TranzilaTK": "TK1", "sum": "24.66"}))
        assert signal.kind is PaymentSignalKind.SUCCESS
        assert signal.transaction_id == "TK1"
        assert signal.amount == 24.66

    def test_cancel_and_load_are_not_failures(self):
        assert parse_payment_message({"type": "payment_cancelled"}).kind is PaymentSignalKind.CANCELLED
        assert parse_payment_message({"status": "cancelled"}).kind is PaymentSignalKind.CANCELLED
        assert parse_payment_message({"type": "iframe_loaded"}).kind is PaymentSignalKind.LOADED

    def test_declined(self):
        signal = parse_payment_message({"Response": "004", "ErrorMessage": "Declined"})
        assert signal.kind is PaymentSignalKind.FAILED
        assert signal.message == "Declined"

    def test_unparseable_string(self):
        signal = parse_payment_message("{not json")
        assert signal.kind is PaymentSignalKind.FAILED
        assert "Unparseable" in signal.message

    def test_unexpected_shape(self):
        assert parse_payment_message([1, 2]).kind is PaymentSignalKind.FAILED


class TestParseRedirectParams:
    """Test success/failure redirect normalization"""

    def test_success_redirect(self):
        signal = parse_redirect_params({"Response": "000", "RefNo": "R9", "sum": "10.00"}, "/payment/success")
        assert signal.is_success
        assert signal.transaction_id == "R9"

    def test_declined_code_on_success_page(self):
        signal = parse_redirect_params({"Response": "033"}, "/payment/success")
        assert signal.kind is PaymentSignalKind.FAILED

    def test_failure_page(self):
        signal = parse_redirect_params({"Response": "000"}, "/payment/failed")
        assert signal.kind is PaymentSignalKind.FAILED
        assert signal.message == "Payment failed"
