import logging

from .config_editor import (
    NODE_REQUEST_TYPES,
    append_remote_rule,
    identity_node_editor,
    remove_nameserver,
    set_proxy_group_url,
)
from .errors import InvalidRequestError, SubscriptionError
from .options import PatchOptions
from .subscription import SubscriptionFetcher
from .utils import dump_yaml, encode_base64

logger = logging.getLogger(__name__)

DECODE_FAILED = "Failed to decode subscription"
RULES_FAILED = "Failed to fetch remote rules"
PROCESS_FAILED = "Failed to process subscription"


class EditRequest:
    """一次处理请求：{url, type, payload}"""

    def __init__(self, url, type=None, payload=None):
        self.url = url
        self.type = type
        self.payload = payload

    @classmethod
    def from_message(cls, message):
        """
        从入站消息创建请求

        Raises:
            InvalidRequestError: 消息不是字典或缺少url
        """
        if not isinstance(message, dict):
            raise InvalidRequestError(f"request must be a mapping, got {type(message).__name__}")

        url = message.get('url')
        if not isinstance(url, str) or not url.strip():
            raise InvalidRequestError("request is missing 'url'")

        return cls(url.strip(), message.get('type'), message.get('payload'))


def _failure(prefix, error):
    message = f"{prefix}: {error}"
    logger.error(message)
    return {'error': message}


class SubscriptionPipeline:
    """订阅处理流程：获取 -> 解码 -> 修改 -> 编码"""

    def __init__(self, options=None, fetcher=None, node_editor=None):
        """
        Args:
            options (PatchOptions, optional): 修改参数，默认使用内置值
            fetcher (SubscriptionFetcher, optional): 订阅获取器
            node_editor (callable, optional): 处理 add/remove 请求的钩子，
                签名为 (config, request_type, payload)，返回修改后的配置或None（原地修改）
        """
        self.options = options or PatchOptions()
        self.fetcher = fetcher or SubscriptionFetcher(timeout=self.options.timeout)
        self.node_editor = node_editor or identity_node_editor

    def process(self, message):
        """
        处理一次请求，返回 {'url': 配置} 或 {'error': 错误信息}，不会抛出异常

        远程规则获取失败也会终止处理，只返回错误，不返回部分结果。

        Args:
            message (dict): 入站消息 {url, type, payload}

        Returns:
            dict: 处理结果
        """
        try:
            request = EditRequest.from_message(message)
        except InvalidRequestError as e:
            return _failure(PROCESS_FAILED, e)

        logger.info(f"开始处理订阅: {request.url}")

        try:
            config = self.fetcher.resolve_document(request.url)
        except SubscriptionError as e:
            return _failure(DECODE_FAILED, e)

        try:
            remove_nameserver(config, self.options.dns_to_remove)
            set_proxy_group_url(config, self.options.group_url)

            # 远程规则获取失败时直接结束，不返回未追加规则的配置
            try:
                append_remote_rule(config, self.options.rules_url, self.fetcher.fetch)
            except SubscriptionError as e:
                return _failure(RULES_FAILED, e)

            config = self._edit_nodes(config, request)
            encoded = self._encode(config)
        except Exception as e:
            logger.debug("处理订阅时出错", exc_info=True)
            return _failure(PROCESS_FAILED, e)

        logger.info(f"订阅处理完成，输出长度: {len(encoded)}")
        return {'url': encoded}

    def _edit_nodes(self, config, request):
        if request.type not in NODE_REQUEST_TYPES:
            return config

        logger.info(f"执行节点编辑: {request.type}")
        edited = self.node_editor(config, request.type, request.payload)
        return config if edited is None else edited

    def _encode(self, config):
        text = dump_yaml(config)
        if self.options.output_format == 'base64':
            return encode_base64(text)
        return text


def process_subscription(message, options=None):
    """
    使用默认组件处理一次请求

    Args:
        message (dict): 入站消息 {url, type, payload}
        options (PatchOptions, optional): 修改参数

    Returns:
        dict: {'url': ...} 或 {'error': ...}
    """
    return SubscriptionPipeline(options).process(message)
