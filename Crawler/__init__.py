from Crawler.Crawler import CrawlState, SiteCrawler, crawl

__all__ = ["CrawlState", "SiteCrawler", "crawl"]
