import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_DNS_TO_REMOVE = '223.5.5.5'
DEFAULT_GROUP_URL = 'https://api.v2fly.org/checkConnection.svgz'
DEFAULT_RULES_URL = 'https://raw.githubusercontent.com/yzcjd/proxy-rules/main/clash.cool.ini'

OUTPUT_FORMATS = ('yaml', 'base64')

ENV_PREFIX = 'CLASH_PATCH_'

# 外部键名（camelCase） -> 参数名
_KEY_ALIASES = {
    'dnsToRemove': 'dns_to_remove',
    'groupUrl': 'group_url',
    'rulesUrl': 'rules_url',
    'outputFormat': 'output_format',
}


class PatchOptions:
    """订阅修改参数"""

    def __init__(self, dns_to_remove=DEFAULT_DNS_TO_REMOVE, group_url=DEFAULT_GROUP_URL,
                 rules_url=DEFAULT_RULES_URL, output_format='yaml', timeout=None):
        """
        Args:
            dns_to_remove (str): 要从 dns.nameserver 中删除的地址
            group_url (str): 代理组新的测速地址
            rules_url (str): 远程规则地址
            output_format (str): 输出格式，'yaml' 或 'base64'
            timeout (float, optional): 网络请求超时（秒），None表示不覆盖
        """
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {OUTPUT_FORMATS}, got {output_format!r}")
        if timeout is not None:
            timeout = float(timeout)
            if timeout <= 0:
                raise ValueError(f"timeout must be positive, got {timeout}")

        self.dns_to_remove = dns_to_remove
        self.group_url = group_url
        self.rules_url = rules_url
        self.output_format = output_format
        self.timeout = timeout

    def __repr__(self):
        return (f"PatchOptions(dns_to_remove={self.dns_to_remove!r}, group_url={self.group_url!r}, "
                f"rules_url={self.rules_url!r}, output_format={self.output_format!r}, timeout={self.timeout!r})")

    @classmethod
    def from_dict(cls, data):
        """
        从字典创建参数，同时支持 dnsToRemove 和 dns_to_remove 两种写法

        Args:
            data (dict): 参数字典，未知的键会被忽略

        Returns:
            PatchOptions: 参数对象
        """
        kwargs = {}
        for key, value in (data or {}).items():
            name = _KEY_ALIASES.get(key, key)
            if name in ('dns_to_remove', 'group_url', 'rules_url', 'output_format', 'timeout'):
                kwargs[name] = value
            else:
                logger.debug(f"忽略未知参数: {key}")
        return cls(**kwargs)

    @classmethod
    def from_env(cls, environ=None):
        """
        从环境变量读取参数（CLASH_PATCH_DNS_TO_REMOVE 等），未设置的使用默认值
        """
        environ = os.environ if environ is None else environ
        kwargs = {}
        for name in ('dns_to_remove', 'group_url', 'rules_url', 'output_format', 'timeout'):
            value = environ.get(ENV_PREFIX + name.upper())
            if value:
                kwargs[name] = value
        return cls(**kwargs)
