from Browser.Navigator import Navigator
from Browser.Session import BrowserSession

__all__ = ["BrowserSession", "Navigator"]
