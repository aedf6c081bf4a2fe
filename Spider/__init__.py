from Spider.Spider import Spider

__all__ = ["Spider"]
