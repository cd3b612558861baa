import unittest
from unittest.mock import patch

import requests

from clash_subscription_patcher.errors import DecodeError, NetworkError, ParseError, UnsupportedFormatError
from clash_subscription_patcher.subscription import SubscriptionFetcher, is_yaml_url
from clash_subscription_patcher.utils import encode_base64

from tests.helpers import fake_get, fake_response

YAML_DOC = "dns:\n  nameserver:\n    - 223.5.5.5\n    - 8.8.8.8\n"


class TestFetch(unittest.TestCase):
    @patch("requests.get")
    def test_fetch_returns_body_on_success(self, mock_get):
        mock_get.return_value = fake_response("hello")
        fetcher = SubscriptionFetcher(timeout=5)

        self.assertEqual(fetcher.fetch("https://example.com/sub"), "hello")
        mock_get.assert_called_once()
        _, kwargs = mock_get.call_args
        self.assertEqual(kwargs["timeout"], 5)
        self.assertIn("User-Agent", kwargs["headers"])

    @patch("requests.get")
    def test_fetch_defaults_to_no_timeout_override(self, mock_get):
        mock_get.return_value = fake_response("ok")
        SubscriptionFetcher().fetch("https://example.com/sub")
        self.assertIsNone(mock_get.call_args[1]["timeout"])

    @patch("requests.get")
    def test_fetch_raises_on_non_success_status(self, mock_get):
        mock_get.return_value = fake_response("oops", status_code=500)

        with self.assertRaises(NetworkError) as ctx:
            SubscriptionFetcher().fetch("https://example.com/sub")
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.url, "https://example.com/sub")
        self.assertEqual(mock_get.call_count, 1)

    @patch("requests.get", side_effect=requests.exceptions.ConnectionError("refused"))
    def test_fetch_wraps_transport_errors(self, mock_get):
        with self.assertRaises(NetworkError) as ctx:
            SubscriptionFetcher().fetch("https://example.com/sub")
        self.assertIsNone(ctx.exception.status_code)
        self.assertIn("refused", str(ctx.exception))
        self.assertEqual(mock_get.call_count, 1)


class TestResponseEncoding(unittest.TestCase):
    GROUPS_DOC = "proxy-groups:\n  - {name: '🚀 节点选择', url: 'http://old'}\n"

    def _response(self, body: bytes, content_type: str):
        response = requests.Response()
        response.status_code = 200
        response._content = body
        response.headers["Content-Type"] = content_type
        response.encoding = requests.utils.get_encoding_from_headers(response.headers)
        return response

    @patch("requests.get")
    def test_utf8_body_without_charset_keeps_unicode_names(self, mock_get):
        mock_get.return_value = self._response(self.GROUPS_DOC.encode("utf-8"), "text/plain")

        config = SubscriptionFetcher().resolve_document("https://example.com/clash.yaml")

        self.assertEqual(config["proxy-groups"][0]["name"], "🚀 节点选择")

    @patch("requests.get")
    def test_declared_charset_is_respected(self, mock_get):
        mock_get.return_value = self._response("rules:\n  - 直连\n".encode("gbk"), "text/plain; charset=gbk")

        config = SubscriptionFetcher().resolve_document("https://example.com/clash.yaml")

        self.assertEqual(config["rules"], ["直连"])

    @patch("requests.get")
    def test_non_utf8_body_without_charset_raises_decode_error(self, mock_get):
        mock_get.return_value = self._response(b"rules: [\xff\xfe]\n", "text/plain")

        with self.assertRaises(DecodeError):
            SubscriptionFetcher().fetch("https://example.com/clash.yaml")


class TestResolveDocument(unittest.TestCase):
    def test_is_yaml_url_checks_path_suffix_only(self):
        self.assertTrue(is_yaml_url("https://example.com/clash.yaml"))
        self.assertTrue(is_yaml_url("https://example.com/CLASH.YML?token=abc"))
        self.assertFalse(is_yaml_url("https://example.com/sub?file=clash.yaml"))
        self.assertFalse(is_yaml_url("https://example.com/sub"))

    @patch("requests.get")
    def test_yaml_suffix_is_parsed_directly(self, mock_get):
        mock_get.return_value = fake_response(YAML_DOC)
        config = SubscriptionFetcher().resolve_document("https://example.com/clash.yaml")
        self.assertEqual(config["dns"]["nameserver"], ["223.5.5.5", "8.8.8.8"])

    @patch("requests.get")
    def test_base64_content_is_decoded_then_parsed(self, mock_get):
        mock_get.return_value = fake_response(encode_base64(YAML_DOC))
        config = SubscriptionFetcher().resolve_document("https://example.com/sub")
        self.assertEqual(config["dns"]["nameserver"], ["223.5.5.5", "8.8.8.8"])

    @patch("requests.get")
    def test_suffix_wins_over_content_sniffing(self, mock_get):
        # 后缀为.yaml时即使内容像Base64也按YAML解析
        encoded = encode_base64(YAML_DOC)
        mock_get.return_value = fake_response(encoded)
        with self.assertRaises(ParseError):
            SubscriptionFetcher().resolve_document("https://example.com/clash.yml")

    @patch("requests.get")
    def test_plain_yaml_without_suffix_is_unsupported(self, mock_get):
        mock_get.return_value = fake_response(YAML_DOC)
        with self.assertRaises(UnsupportedFormatError):
            SubscriptionFetcher().resolve_document("https://example.com/sub")

    @patch("requests.get")
    def test_malformed_yaml_raises_parse_error(self, mock_get):
        mock_get.return_value = fake_response("dns: [unclosed")
        with self.assertRaises(ParseError):
            SubscriptionFetcher().resolve_document("https://example.com/clash.yaml")

    @patch("requests.get")
    def test_non_mapping_document_raises_parse_error(self, mock_get):
        mock_get.return_value = fake_response("- a\n- b\n")
        with self.assertRaises(ParseError):
            SubscriptionFetcher().resolve_document("https://example.com/clash.yaml")

    @patch("requests.get")
    def test_empty_document_is_empty_config(self, mock_get):
        mock_get.return_value = fake_response("")
        self.assertEqual(SubscriptionFetcher().resolve_document("https://example.com/clash.yaml"), {})

    @patch("requests.get")
    def test_base64_with_invalid_utf8_is_unsupported(self, mock_get):
        mock_get.return_value = fake_response("//79")
        with self.assertRaises(UnsupportedFormatError):
            SubscriptionFetcher().resolve_document("https://example.com/sub")

    def test_fetch_failure_propagates(self):
        routes = {"https://example.com/clash.yaml": fake_response("", status_code=404)}
        with patch("requests.get", side_effect=fake_get(routes)):
            with self.assertRaises(NetworkError):
                SubscriptionFetcher().resolve_document("https://example.com/clash.yaml")


if __name__ == "__main__":
    unittest.main()
