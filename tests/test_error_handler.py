import logging

from marketplace.error_handler import ErrorHandler
from marketplace.errors import DepositLimitExceeded, TransientStoreError, Unauthorized


def test_handle_exception_returns_generic_payload(caplog):
    eh = ErrorHandler()
    with caplog.at_level(logging.ERROR):
        status, out = eh.handle_exception(Exception("boom"), context={"k": "v"})
    assert status == 500
    assert out == {"error": "Internal server error"}
    assert "boom" in caplog.text


def test_handle_domain_error_uses_status_and_message():
    eh = ErrorHandler()
    assert eh.handle_domain_error(DepositLimitExceeded()) == (400, {"error": "Deposit amount exceeds maximum allowed"})
    assert eh.handle_domain_error(TransientStoreError())[0] == 503


def test_custom_message_overrides_default():
    err = Unauthorized("Unauthorized: Only clients can pay for jobs")
    assert str(err) == "Unauthorized: Only clients can pay for jobs"
    assert err.status_code == 403
    assert Unauthorized().message == "Unauthorized: Access denied"
