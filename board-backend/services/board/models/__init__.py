from .board_model import BoardText, BoardReply

__all__ = ["BoardText", "BoardReply"]
