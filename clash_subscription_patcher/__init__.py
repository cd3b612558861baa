"""
Clash Subscription Patcher

获取远程 Clash 订阅，删除指定DNS、替换代理组测速地址、追加远程规则，然后重新编码返回。
"""

__version__ = '0.1.0'
__author__ = 'ClashSubscriptionPatcher'

from .config_editor import append_remote_rule, identity_node_editor, remove_nameserver, set_proxy_group_url
from .errors import (
    DecodeError,
    InvalidRequestError,
    NetworkError,
    ParseError,
    SubscriptionError,
    UnsupportedFormatError,
)
from .options import PatchOptions
from .pipeline import EditRequest, SubscriptionPipeline, process_subscription
from .subscription import SubscriptionFetcher
from .utils import decode_base64, dump_yaml, encode_base64, is_base64, load_yaml
from .worker import handle_message

__all__ = [
    'SubscriptionPipeline',
    'SubscriptionFetcher',
    'EditRequest',
    'PatchOptions',
    'process_subscription',
    'handle_message',
    'remove_nameserver',
    'set_proxy_group_url',
    'append_remote_rule',
    'identity_node_editor',
    'is_base64',
    'decode_base64',
    'encode_base64',
    'load_yaml',
    'dump_yaml',
    'SubscriptionError',
    'NetworkError',
    'DecodeError',
    'ParseError',
    'UnsupportedFormatError',
    'InvalidRequestError',
]
