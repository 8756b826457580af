import pytest

from cloudpayments import CloudPaymentsClient, compute_signature
from cloudpayments import cli
from conftest import RecordingTransport

CREDENTIALS = [
    "--set",
    "CLOUDPAYMENTS_PUBLIC_KEY=pk_cli",
    "--set",
    "CLOUDPAYMENTS_PRIVATE_KEY=cli-secret",
]


@pytest.fixture()
def cli_transport(monkeypatch, tmp_path):
    transport = RecordingTransport()

    def fake_create_client(*, config, session=None):
        return CloudPaymentsClient(config, transport=transport)

    monkeypatch.setattr(cli, "create_client", fake_create_client)
    monkeypatch.chdir(tmp_path)
    return transport


def _run(*args):
    return cli.run_cli(["--env-file", "missing.env", *CREDENTIALS, *args])


def test_test_command(cli_transport):
    assert _run("test") == 0
    assert cli_transport.last_call == ("/test", {})


def test_find_command(cli_transport):
    cli_transport.response = {"Success": True, "Model": {"TransactionId": 8, "InvoiceId": "order-8"}}

    assert _run("find", "order-8") == 0
    assert cli_transport.last_call == ("/payments/find", {"InvoiceId": "order-8"})


def test_refund_command(cli_transport):
    assert _run("refund", "8", "12.50") == 0
    assert cli_transport.last_call == ("/payments/refund", {"TransactionId": "8", "Amount": "12.50"})


def test_failed_operation_exits_with_error(cli_transport):
    cli_transport.response = {"Success": False, "Message": "Transaction not found"}

    assert _run("void", "8") == 1


def test_missing_credentials_exit_with_error(cli_transport, monkeypatch):
    monkeypatch.delenv("CLOUDPAYMENTS_PUBLIC_KEY", raising=False)
    monkeypatch.delenv("CLOUDPAYMENTS_PRIVATE_KEY", raising=False)

    assert cli.run_cli(["--env-file", "missing.env", "test"]) == 1
    assert cli_transport.calls == []


def test_verify_signature_command(cli_transport, tmp_path):
    body_file = tmp_path / "notification.txt"
    body_file.write_bytes(b"TransactionId=1&Status=Completed")
    signature = compute_signature(body_file.read_bytes(), "cli-secret")

    assert _run("verify-signature", "--file", str(body_file), "--signature", signature) == 0
    assert _run("verify-signature", "--file", str(body_file), "--signature", "bogus") == 1


def test_malformed_override_is_rejected():
    with pytest.raises(SystemExit):
        cli.run_cli(["--set", "missing-equals", "test"])


@pytest.mark.parametrize("command", ["refund", "confirm"])
def test_non_numeric_amount_is_a_usage_error(cli_transport, capsys, command):
    with pytest.raises(SystemExit) as excinfo:
        _run(command, "8", "abc")

    assert excinfo.value.code == 2
    assert "Amount must be a decimal number" in capsys.readouterr().err
    assert cli_transport.calls == []
