"""
消息驱动的入口：把一条入站消息交给流程处理，并通过回调发回唯一的结果。
"""
import logging

from .pipeline import SubscriptionPipeline

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(debug=False):
    """设置日志格式和级别"""
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT)


def handle_message(message, post_message, pipeline=None):
    """
    处理一条消息并调用 post_message 发回结果

    Args:
        message (dict): 入站消息 {url, type, payload}
        post_message (callable): 接收结果字典的回调，每条消息只调用一次
        pipeline (SubscriptionPipeline, optional): 处理流程，默认使用内置参数

    Returns:
        dict: 发出的结果
    """
    pipeline = pipeline or SubscriptionPipeline()
    result = pipeline.process(message)
    post_message(result)
    return result


def make_handler(pipeline=None):
    """
    创建绑定了同一个流程的消息处理函数，便于注册到消息队列或HTTP框架
    """
    pipeline = pipeline or SubscriptionPipeline()

    def handler(message, post_message):
        return handle_message(message, post_message, pipeline)

    return handler
