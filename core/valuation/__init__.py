"""
평가(Valuation) 모듈

Price Normalizer(순수 함수)와 Asset Valuator(협력자 결합)
"""

from core.valuation.price_normalizer import check_price, value_of
from core.valuation.valuator import AssetValuator, unix_now

__all__ = [
    "value_of",
    "check_price",
    "AssetValuator",
    "unix_now",
]
