"""
聚合模块
按时间窗口把已打标的内容记录汇总为城市日汇总
"""

from .ranking import top_n, classify_threat
from .engine import AggregationEngine, LocalityAccumulator, default_window

__all__ = [
    'top_n', 'classify_threat',
    'AggregationEngine', 'LocalityAccumulator', 'default_window'
]
