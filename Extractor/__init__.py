from Extractor.Extractor import PageExtractor, classify_link

__all__ = ["PageExtractor", "classify_link"]
