"""
错误类型
只有拉取失败会中断整次聚合，其余错误按城市记录在运行摘要中
"""


class LocalSentimentError(Exception):
    """本地情感模块的基础异常"""


class DataFetchError(LocalSentimentError):
    """时间窗口内的记录拉取失败，整次聚合中止，不提交任何汇总"""


class UpsertError(LocalSentimentError):
    """单个城市的汇总写入失败"""

    def __init__(self, city: str, region: str, message: str):
        super().__init__(f"{city}/{region}: {message}")
        self.city = city
        self.region = region
