"""Tests for the SMTP2GO email provider."""

from unittest.mock import MagicMock

from chairtext import DeliveryStatus, EmailMessage, Smtp2GoConfig
from chairtext.email.smtp2go import SMTP2GO_API_URL, Smtp2GoProvider


def _make_provider(api_key: str = "test_key", mock_response: MagicMock | None = None) -> tuple[Smtp2GoProvider, MagicMock]:
    """Create a provider with a mocked httpx client."""
    provider = Smtp2GoProvider(Smtp2GoConfig(api_key=api_key))
    mock_client = MagicMock()
    if mock_response is not None:
        mock_client.post = MagicMock(return_value=mock_response)
    provider._client = mock_client
    return provider, mock_client


def _ok_response(email_id: str = "1rX9-abc") -> MagicMock:
    response = MagicMock(status_code=200, text="OK")
    response.json.return_value = {"data": {"succeeded": 1, "email_id": email_id}}
    return response


def _message(**overrides) -> EmailMessage:
    fields = {
        "to": "8327080194@vtext.com",
        "subject": "Test",
        "text_content": "Hello",
        "from_email": "shop@example.com",
    }
    fields.update(overrides)
    return EmailMessage(**fields)


class TestSmtp2GoSend:
    def test_send_success(self):
        provider, _ = _make_provider(mock_response=_ok_response())

        result = provider.send(_message(from_name="Test Shop"))

        assert result.succeeded
        assert result.status == DeliveryStatus.SENT
        assert result.external_id == "1rX9-abc"

    def test_send_failure_status(self):
        provider, _ = _make_provider(mock_response=MagicMock(status_code=500, text="Internal Server Error"))

        result = provider.send(_message())

        assert not result.succeeded
        assert "500" in result.error_code

    def test_send_exception(self):
        provider, mock_client = _make_provider()
        mock_client.post = MagicMock(side_effect=ConnectionError("timeout"))

        result = provider.send(_message())

        assert not result.succeeded
        assert "timeout" in result.error_message

    def test_payload(self):
        provider, mock_client = _make_provider(mock_response=_ok_response())

        provider.send(_message(from_name="Test Shop", html_content="<p>Hello</p>"))

        call_args = mock_client.post.call_args
        payload = call_args.kwargs["json"]
        assert payload["sender"] == "Test Shop <shop@example.com>"
        assert payload["to"] == ["8327080194@vtext.com"]
        assert payload["text_body"] == "Hello"
        assert payload["html_body"] == "<p>Hello</p>"

    def test_payload_without_html(self):
        provider, mock_client = _make_provider(mock_response=_ok_response())

        provider.send(_message())

        payload = mock_client.post.call_args.kwargs["json"]
        assert payload["sender"] == "shop@example.com"
        assert "html_body" not in payload

    def test_send_uses_correct_api_url_and_headers(self):
        provider, mock_client = _make_provider(api_key="my_secret_key", mock_response=_ok_response())

        provider.send(_message())

        call_args = mock_client.post.call_args
        assert call_args[0][0] == SMTP2GO_API_URL
        assert call_args.kwargs["headers"]["X-Smtp2go-Api-Key"] == "my_secret_key"


class TestSmtp2GoContextManager:
    def test_context_manager_calls_close(self):
        provider = Smtp2GoProvider(Smtp2GoConfig(api_key="test_key"))
        provider.close = MagicMock()
        with provider:
            pass
        provider.close.assert_called_once()

    async def test_async_context_manager_calls_close(self):
        provider = Smtp2GoProvider(Smtp2GoConfig(api_key="test_key"))
        provider.close = MagicMock()
        async with provider:
            pass
        provider.close.assert_called_once()


class TestSmtp2GoSendAsync:
    async def test_send_async_returns_result(self):
        provider, _ = _make_provider(mock_response=_ok_response())
        result = await provider.send_async(_message())
        assert result.succeeded
