"""MIME types accepted for consumes / produces."""

from enum import Enum


class MIME(str, Enum):
    JSON = "application/json"
    XML = "application/xml"
    URLFORM = "application/x-www-form-urlencoded"
    MULTIFORM = "multipart/form-data"
    PLAINTEXT = "text/plain"
    HTML = "text/html"
    JAVASCRIPT = "application/javascript"
    YAML = "application/x-yaml"
    PDF = "application/pdf"
    CSV = "text/csv"
    BINARY = "application/octet-stream"
