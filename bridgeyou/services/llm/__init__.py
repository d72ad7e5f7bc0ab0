"""Language model services"""

from .completion_client import CompletionClient, extract_json_block

__all__ = ["CompletionClient", "extract_json_block"]
