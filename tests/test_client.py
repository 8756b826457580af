from decimal import Decimal

import pytest

from cloudpayments import (
    CloudPaymentsClient,
    Money,
    PaymentDeclinedError,
    PendingChallenge,
    RequestError,
    TransactionResult,
    compute_signature,
)
from cloudpayments.core.transport import Transport
from conftest import RecordingTransport


def _charge_card(client, **kwargs):
    return client.charge_card(
        Decimal("10.00"),
        "RUB",
        "203.0.113.5",
        "CARD HOLDER",
        "cryptogram-packet",
        **kwargs,
    )


class TestChargeCard:
    def test_posts_card_fields_to_charge_endpoint(self, client, transport):
        transport.response = {"Success": True, "Model": {"TransactionId": 1, "ReasonCode": 0}}

        _charge_card(client)

        assert transport.last_call == (
            "/payments/cards/charge",
            {
                "Amount": "10.00",
                "Currency": "RUB",
                "IpAddress": "203.0.113.5",
                "Name": "CARD HOLDER",
                "CardCryptogramPacket": "cryptogram-packet",
            },
        )

    def test_two_step_uses_auth_endpoint(self, client, transport):
        transport.response = {"Success": True, "Model": {"TransactionId": 1}}

        _charge_card(client, require_confirmation=True)

        assert transport.last_call[0] == "/payments/cards/auth"

    def test_caller_params_override_defaults(self, client, transport):
        transport.response = {"Success": True, "Model": {"TransactionId": 1}}

        _charge_card(client, params={"InvoiceId": "order-1", "Name": "OTHER NAME"})

        fields = transport.last_call[1]
        assert fields["InvoiceId"] == "order-1"
        assert fields["Name"] == "OTHER NAME"

    def test_success_returns_transaction(self, client, transport):
        transport.response = {
            "Success": True,
            "Model": {"TransactionId": 42, "Amount": 10.0, "Currency": "USD", "ReasonCode": 0},
        }

        result = _charge_card(client)

        assert isinstance(result, TransactionResult)
        assert (result.transaction_id, result.amount, result.currency) == (42, Decimal("10.0"), "USD")

    def test_decline_raises_payment_declined(self, client, transport):
        transport.response = {"Success": False, "Message": "", "Model": {"ReasonCode": 5051}}

        with pytest.raises(PaymentDeclinedError) as excinfo:
            _charge_card(client)

        assert excinfo.value.reason_code == 5051
        assert excinfo.value.response == transport.response

    def test_message_raises_request_error(self, client, transport):
        transport.response = {"Success": False, "Message": "Invalid amount", "Model": {"ReasonCode": 5051}}

        with pytest.raises(RequestError):
            _charge_card(client)

    def test_challenge_is_returned(self, client, transport):
        transport.response = {
            "Success": False,
            "Message": "",
            "Model": {"TransactionId": 7, "ReasonCode": 0, "AcsUrl": "https://acs.test", "PaReq": "req"},
        }

        result = _charge_card(client)

        assert isinstance(result, PendingChallenge)
        assert result.acs_url == "https://acs.test"
        assert result.pa_req == "req"

    def test_empty_response_raises_request_error(self, client, transport):
        transport.response = {}

        with pytest.raises(RequestError) as excinfo:
            _charge_card(client)

        assert excinfo.value.response == {}

    @pytest.mark.parametrize(("amount", "sent"), [("-1", "-1"), (-1, "-1"), ("10,50", "10,50")])
    def test_amount_is_passed_through_to_gateway(self, client, transport, amount, sent):
        transport.response = {"Success": False, "Message": "Amount is invalid"}

        with pytest.raises(RequestError, match="Amount is invalid"):
            client.charge_card(amount, "RUB", "127.0.0.1", "NAME", "packet")

        assert transport.last_call[1]["Amount"] == sent

    def test_money_amount_is_accepted(self, client, transport):
        transport.response = {"Success": True, "Model": {"TransactionId": 1}}

        client.charge_card(Money(Decimal("7.25"), "RUB"), "RUB", "127.0.0.1", "NAME", "packet")

        assert transport.last_call[1]["Amount"] == "7.25"

    def test_unparseable_timestamp_keeps_transaction(self, client, transport):
        transport.response = {
            "Success": True,
            "Model": {"TransactionId": 1, "ReasonCode": 0, "CreatedDateIso": "09.08.2014 11:49:41"},
        }

        result = _charge_card(client)

        assert result.transaction_id == 1
        assert result.created_at is None
        assert result.raw["CreatedDateIso"] == "09.08.2014 11:49:41"


class TestChargeToken:
    def test_posts_token_fields(self, client, transport):
        transport.response = {"Success": True, "Model": {"TransactionId": 3}}

        client.charge_token(5, "EUR", "user@example.test", "tk_123")

        assert transport.last_call == (
            "/payments/tokens/charge",
            {"Amount": "5", "Currency": "EUR", "AccountId": "user@example.test", "Token": "tk_123"},
        )

    def test_two_step_uses_auth_endpoint(self, client, transport):
        transport.response = {"Success": True, "Model": {"TransactionId": 3}}

        client.charge_token(5, "EUR", "acc", "tk", require_confirmation=True)

        assert transport.last_call[0] == "/payments/tokens/auth"

    def test_decline_raises(self, client, transport):
        transport.response = {"Success": False, "Model": {"ReasonCode": 5054}}

        with pytest.raises(PaymentDeclinedError):
            client.charge_token(5, "EUR", "acc", "tk")


class TestConfirm3ds:
    def test_returns_transaction(self, client, transport):
        transport.response = {"Success": False, "Message": None, "Model": {"TransactionId": 7, "ReasonCode": 0}}

        result = client.confirm_3ds(7, "pa-res")

        assert transport.last_call == ("/payments/cards/post3ds", {"TransactionId": 7, "PaRes": "pa-res"})
        assert isinstance(result, TransactionResult)

    def test_decline_raises(self, client, transport):
        transport.response = {"Success": False, "Model": {"TransactionId": 7, "ReasonCode": 5206}}

        with pytest.raises(PaymentDeclinedError):
            client.confirm_3ds(7, "pa-res")


class TestSimpleOperations:
    @pytest.mark.parametrize(
        ("call", "expected"),
        [
            (lambda c: c.test(), ("/test", {})),
            (lambda c: c.confirm_payment(11, "9.99"), ("/payments/confirm", {"TransactionId": 11, "Amount": "9.99"})),
            (lambda c: c.void_payment(11), ("/payments/void", {"TransactionId": 11})),
            (lambda c: c.refund_payment(11, 2.5), ("/payments/refund", {"TransactionId": 11, "Amount": "2.5"})),
        ],
    )
    def test_endpoints_and_fields(self, client, transport, call, expected):
        assert call(client) is None
        assert transport.last_call == expected

    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.test(),
            lambda c: c.confirm_payment(11, 1),
            lambda c: c.void_payment(11),
            lambda c: c.refund_payment(11, 1),
            lambda c: c.find_payment("order-1"),
        ],
    )
    def test_false_success_raises_request_error(self, client, transport, call):
        transport.response = {"Success": False, "Message": None, "Model": None}

        with pytest.raises(RequestError):
            call(client)

    def test_find_returns_transaction(self, client, transport):
        transport.response = {"Success": True, "Model": {"TransactionId": 5, "InvoiceId": "order-1"}}

        result = client.find_payment("order-1")

        assert transport.last_call == ("/payments/find", {"InvoiceId": "order-1"})
        assert result.transaction_id == 5


class TestClientConfiguration:
    def test_with_locale_returns_new_client(self, client):
        other = client.with_locale("ru-RU")

        assert other.locale == "ru-RU"
        assert client.locale == "en-US"

    def test_with_url_strips_trailing_slash(self, client):
        assert client.with_url("https://other.test/").url == "https://other.test"

    def test_with_credentials(self, client):
        other = client.with_credentials("pk_live", "live-secret")

        assert other.public_key == "pk_live"
        assert client.public_key == "pk_test"

    def test_logger_comes_from_transport(self, config):
        transport = RecordingTransport()

        assert CloudPaymentsClient(config, transport=transport).logger is transport.logger

    def test_verify_notification_uses_private_key(self, client):
        body = b'{"TransactionId": 1}'
        headers = {"Content-HMAC": compute_signature(body, "secret")}

        assert client.verify_notification("POST", headers, body=body)
        assert not client.with_credentials("pk_test", "other").verify_notification("POST", headers, body=body)

    def test_derived_client_uses_default_transport(self, client, transport):
        other = client.with_locale("ru-RU")

        assert isinstance(other.transport, Transport)
        assert other.transport.config.locale == "ru-RU"
        assert other.logger is transport.logger
        assert client.transport is transport

    def test_non_numeric_refund_amount_is_sent_as_given(self, client, transport):
        client.refund_payment(11, "abc")

        assert transport.last_call == ("/payments/refund", {"TransactionId": 11, "Amount": "abc"})
