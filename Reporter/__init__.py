from Reporter.Reporter import Reporter

__all__ = ["Reporter"]
