"""异常定义模块"""


class ParseError(ValueError):
    """输入文本无法解析，或解析结果未通过校验"""


class StoreError(Exception):
    """数据存储层错误（统一封装底层 sqlite3 异常）"""


class NotFoundError(StoreError):
    """指定 ID 的记录不存在"""


class InvalidArgumentError(StoreError):
    """参数不合法（如更新时缺少 ID）"""
