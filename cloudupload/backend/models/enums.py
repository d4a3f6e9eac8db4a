from enum import Enum


class ResponseFormat(str, Enum):
    XML = "xml"
