from .criteria import Condition, ConnectionInterface, Criteria, InMemoryConnection, ModelCriteria

__all__ = ["Condition", "ConnectionInterface", "Criteria", "InMemoryConnection", "ModelCriteria"]
