from .member_model import Member

__all__ = ["Member"]
