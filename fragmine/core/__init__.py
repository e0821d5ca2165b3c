from .canonical import CanonicalForm
from .embedding import Embedding
from .graph import Edge, Graph, Node
from .recoder import Recoder
from .types import TypeManager

__all__ = ["CanonicalForm", "Edge", "Embedding", "Graph", "Node", "Recoder", "TypeManager"]
