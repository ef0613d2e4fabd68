from lunchbot.models.shop import Shop

__all__ = ["Shop"]
