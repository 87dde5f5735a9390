from .error_handler import CustomErrorHandler
from .preparsed import PreparsedDocument

__all__ = ["CustomErrorHandler", "PreparsedDocument"]
