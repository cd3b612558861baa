"""
对Clash配置树做字段级修改。

所有函数都原地修改传入的配置并返回同一个对象，目标字段不存在时什么也不做。
"""
import logging

logger = logging.getLogger(__name__)

NODE_REQUEST_TYPES = ('add', 'remove')


def remove_nameserver(config, address):
    """
    从 dns.nameserver 中移除指定的DNS地址

    Args:
        config (dict): 配置树
        address (str): 要移除的地址，按字符串完全匹配

    Returns:
        dict: 修改后的配置
    """
    dns = config.get('dns')
    if not isinstance(dns, dict):
        return config

    nameservers = dns.get('nameserver')
    if not isinstance(nameservers, list):
        return config

    kept = [server for server in nameservers if server != address]
    if len(kept) != len(nameservers):
        logger.info(f"已移除DNS服务器 {address}，剩余 {len(kept)} 个")
    dns['nameserver'] = kept
    return config


def set_proxy_group_url(config, new_url):
    """
    将所有带 url 字段的代理组的测速地址替换为 new_url，不会给没有 url 的组添加字段

    Args:
        config (dict): 配置树
        new_url (str): 新的测速地址

    Returns:
        dict: 修改后的配置
    """
    groups = config.get('proxy-groups')
    if not isinstance(groups, list):
        return config

    updated = 0
    for group in groups:
        if isinstance(group, dict) and 'url' in group:
            group['url'] = new_url
            updated += 1

    logger.info(f"已更新 {updated} 个代理组的测速地址")
    return config


def build_rule_set_reference(rules_url):
    return f"RULE-SET: {rules_url}, DIRECT"


def append_remote_rule(config, rules_url, fetch):
    """
    检查远程规则是否可用，然后在 rules 末尾追加一条 RULE-SET 引用

    远程内容只用于确认可访问，不会合并进配置。获取失败时异常向上抛出，rules 保持不变。

    Args:
        config (dict): 配置树
        rules_url (str): 远程规则地址
        fetch (callable): 获取函数，失败时抛出 NetworkError

    Returns:
        dict: 修改后的配置
    """
    fetch(rules_url)

    rule = build_rule_set_reference(rules_url)
    rules = config.get('rules')
    if isinstance(rules, list):
        rules.append(rule)
    else:
        config['rules'] = [rule]

    logger.info(f"已追加远程规则: {rule}")
    return config


def identity_node_editor(config, request_type, payload):
    """默认的节点编辑钩子：不做任何修改。"""
    return config
