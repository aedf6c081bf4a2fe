from Probe.Client import SiteProbe

__all__ = ["SiteProbe"]
