"""
统一异常处理模块

定义项目中使用的异常层次结构，提供清晰的错误分类和友好的错误信息。
文件系统层面的 I/O 错误（OSError 及其子类）不会被包装，直接向上传播。
"""


class XelhuaError(Exception):
    """基础异常类 - 所有项目异常的父类"""

    def __init__(self, message: str = "", details: str = ""):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class CellTypeError(XelhuaError):
    """单元格类型不匹配（例如按数字读取文本单元格，或按日期读取未设置日期格式的单元格）"""

    pass


class CellFormatError(XelhuaError):
    """单元格内容格式错误（数值或日期序列值无法解析）"""

    pass


class HeaderNotFoundError(XelhuaError):
    """在表头行中找不到指定名称的列"""

    def __init__(self, name: str, details: str = ""):
        self.name = name
        super().__init__(f"表头行中找不到名为 '{name}' 的列", details)


class DocumentError(XelhuaError):
    """工作簿内容无法解析或无法序列化"""

    pass


class ConfigError(XelhuaError):
    """配置相关错误"""

    pass
