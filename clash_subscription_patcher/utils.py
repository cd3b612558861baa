import base64
import binascii
import logging
import re
import yaml

from .errors import DecodeError, ParseError

logger = logging.getLogger(__name__)

_BASE64_PATTERN = re.compile(r'^[A-Za-z0-9+/_-]+={0,2}$')
_WHITESPACE = re.compile(r'\s+')


def _compact(s: str) -> str:
    # 订阅内容经常按76字符换行
    return _WHITESPACE.sub('', s)


def is_base64(s: str) -> bool:
    """
    判断字符串是否像是Base64编码的订阅内容。

    同时接受标准字母表和URL安全字母表，允许缺少padding。
    """
    if not isinstance(s, str) or not s:
        return False

    s = _compact(s)
    if not s or len(s) % 4 == 1:
        return False

    if not _BASE64_PATTERN.match(s):
        return False

    try:
        decode_base64(s)
        return True
    except DecodeError:
        return False


def decode_base64(encoded_str: str) -> str:
    """
    解码Base64字符串。

    Args:
        encoded_str (str): Base64编码的内容，可以包含换行

    Returns:
        str: 解码后的UTF-8文本

    Raises:
        DecodeError: 内容不是合法的Base64或解码结果不是UTF-8
    """
    encoded_str = _compact(encoded_str).replace('-', '+').replace('_', '/')

    # 补充=号，直到长度是4的倍数
    padding = len(encoded_str) % 4
    if padding > 0:
        encoded_str += '=' * (4 - padding)

    try:
        decoded_bytes = base64.b64decode(encoded_str, validate=True)
        return decoded_bytes.decode('utf-8')
    except (binascii.Error, UnicodeDecodeError) as e:
        logger.debug(f"Base64解码失败: {e}")
        raise DecodeError(f"invalid base64 content: {e}") from e


def encode_base64(text: str) -> str:
    """将文本按UTF-8编码为标准Base64字符串。"""
    return base64.b64encode(text.encode('utf-8')).decode('ascii')


def load_yaml(text: str):
    """
    解析YAML文本。

    Args:
        text (str): YAML内容

    Returns:
        解析后的对象（通常是dict）

    Raises:
        ParseError: YAML格式错误
    """
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"invalid YAML document: {e}") from e


def dump_yaml(data) -> str:
    """
    将配置序列化为YAML文本，保留键顺序和非ASCII字符（例如分组名中的emoji）。
    """
    return yaml.safe_dump(data, allow_unicode=True, sort_keys=False, default_flow_style=False)
