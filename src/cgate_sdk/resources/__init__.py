from .chat import Chat, ChatCompletions
from .embeddings import Embeddings
from .files import FileBuckets, Files
from .tracing import Tracing
from .vectors import VectorIndexes, VectorProviders, Vectors

__all__ = [
    "Chat",
    "ChatCompletions",
    "Embeddings",
    "FileBuckets",
    "Files",
    "Tracing",
    "VectorIndexes",
    "VectorProviders",
    "Vectors",
]
