from Auth.Manager import AuthManager

__all__ = ["AuthManager"]
