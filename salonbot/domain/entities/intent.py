from enum import Enum


class MenuAction(str, Enum):
    BOOK = "book"
    VIEW = "view"
    MODIFY = "modify"
