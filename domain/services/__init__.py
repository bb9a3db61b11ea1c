from .pagination import PAGE_LENGTH, PAGE_TOKEN_SEPARATOR, encode_page_token, decode_page_token

__all__ = ["PAGE_LENGTH", "PAGE_TOKEN_SEPARATOR", "encode_page_token", "decode_page_token"]
