import logging
import requests
from urllib.parse import urlparse

from .errors import DecodeError, NetworkError, UnsupportedFormatError, ParseError
from .utils import is_base64, decode_base64, load_yaml

logger = logging.getLogger(__name__)

YAML_SUFFIXES = ('.yaml', '.yml')

DEFAULT_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36',
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
}


def _response_text(response):
    """
    取响应文本。响应头没有声明charset时按UTF-8解码，而不是requests默认的ISO-8859-1。
    """
    content_type = response.headers.get('Content-Type') or ''
    if 'charset' in content_type.lower():
        return response.text

    try:
        return response.content.decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecodeError(f"response body is not valid UTF-8: {e}") from e


def is_yaml_url(url):
    """根据URL路径的后缀判断是否为YAML订阅，忽略查询参数和大小写。"""
    path = urlparse(url).path.lower()
    return path.endswith(YAML_SUFFIXES)


class SubscriptionFetcher:
    """订阅获取器，负责下载订阅内容并解析成配置树"""

    def __init__(self, timeout=None, headers=None):
        """
        初始化订阅获取器

        Args:
            timeout (float, optional): 请求超时时间（秒），None表示沿用调用方的默认行为
            headers (dict, optional): 请求头，默认使用浏览器User-Agent
        """
        self.timeout = timeout
        self.headers = dict(DEFAULT_HEADERS if headers is None else headers)

    def fetch(self, url):
        """
        获取远程文本内容，只请求一次，不重试

        Args:
            url (str): 资源地址

        Returns:
            str: 响应文本

        Raises:
            NetworkError: 连接失败或状态码不是2xx
            DecodeError: 响应头未声明charset且内容不是UTF-8
        """
        logger.info(f"开始获取: {url}")

        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"请求异常: {e}")
            raise NetworkError(f"request to {url} failed: {e}", url=url) from e

        if not 200 <= response.status_code < 300:
            logger.warning(f"获取失败，状态码: {response.status_code}")
            raise NetworkError(
                f"request to {url} returned HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        logger.info(f"成功获取内容，长度: {len(response.content)} 字节")
        return _response_text(response)

    def resolve_document(self, url):
        """
        获取订阅并解析为配置字典

        先看URL后缀（.yaml/.yml直接按YAML解析），再检测内容是否为Base64。

        Args:
            url (str): 订阅地址

        Returns:
            dict: 配置树

        Raises:
            NetworkError: 获取失败
            DecodeError: Base64解码失败或响应内容不是UTF-8
            ParseError: YAML格式错误或顶层不是映射
            UnsupportedFormatError: 无法识别的订阅格式
        """
        content = self.fetch(url)

        if is_yaml_url(url):
            logger.info("根据URL后缀按YAML解析")
            text = content
        elif is_base64(content):
            logger.info("检测到BASE64编码，解码后按YAML解析")
            text = decode_base64(content)
        else:
            raise UnsupportedFormatError(f"unrecognized subscription format at {url}")

        config = load_yaml(text)
        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ParseError(f"subscription document is a {type(config).__name__}, expected a mapping")
        return config
