"""Request sources that feed the dispatcher"""

from .request_source import RandomRequestSource, ScriptedRequestSource

__all__ = [
    'RandomRequestSource',
    'ScriptedRequestSource',
]
