from Storage.Store import FileScreenshotStore, ScreenshotStore, persist_screenshots

__all__ = ["FileScreenshotStore", "ScreenshotStore", "persist_screenshots"]
