from .state import BaseGraphState, BaseResult, generate_request_id
from .audit import append_event, new_audit
from .execution import GraphExecutor

__all__ = [
    'BaseGraphState',
    'BaseResult',
    'generate_request_id',
    'append_event',
    'new_audit',
    'GraphExecutor',
]
