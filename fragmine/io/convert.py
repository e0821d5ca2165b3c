"""Conversions between :class:`Graph` and other graph representations.

networkx graphs are converted in both directions. Molecules can be read
from RDKit ``Mol`` objects or SMILES strings; node types are atomic
numbers and edge types are the bond codes below, chosen so that masking
with :data:`BOND_MASK_DOWNGRADE` turns aromatic bonds into single or
double bonds. RDKit is optional and only imported when needed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

from ..core.graph import Graph
from ..errors import BackendUnavailableError, GraphInputError
from ..utils.checks import is_module_available
from ..utils.logging import get_logger

if TYPE_CHECKING:
    import networkx

logger = get_logger(__name__)

__all__ = [
    "BOND_SINGLE",
    "BOND_AROMATIC",
    "BOND_DOUBLE",
    "BOND_TRIPLE",
    "to_networkx",
    "from_networkx",
    "from_rdkit",
    "from_smiles",
]

BOND_NULL = 0x0000
BOND_SINGLE = 0x0001
BOND_AROMATIC = 0x0007
BOND_DOUBLE = 0x000F
BOND_TRIPLE = 0x0011
BOND_MASK = 0x001F
# masks for Graph.mask_types()
BOND_MASK_SAMETYPE = ~0x001E
BOND_MASK_DOWNGRADE = ~0x0006
BOND_MASK_UPGRADE = ~0x000C

_RDKIT_BONDS: Dict[str, int] = {
    "SINGLE": BOND_SINGLE,
    "AROMATIC": BOND_AROMATIC,
    "DOUBLE": BOND_DOUBLE,
    "TRIPLE": BOND_TRIPLE,
}


def to_networkx(graph: Graph) -> "networkx.Graph":
    """Convert a :class:`Graph` into a ``networkx.Graph``."""
    return graph.to_networkx()


def from_networkx(
    G: "networkx.Graph", node_attr: str = "type", edge_attr: str = "type", **kwargs: Any
) -> Graph:
    """Create a :class:`Graph` from a networkx graph.

    Self loops and multigraphs are rejected with :class:`GraphInputError`.
    """
    if G.is_multigraph():
        raise GraphInputError("Multigraphs are not supported")
    return Graph.from_networkx(G, node_attr=node_attr, edge_attr=edge_attr, **kwargs)


def _chem():
    if not is_module_available("rdkit"):
        raise BackendUnavailableError(
            "RDKit is required for molecule conversion; install fragmine[chem]"
        )
    from rdkit import Chem

    return Chem


def from_rdkit(mol: Any, **kwargs: Any) -> Graph:
    """Create a :class:`Graph` from an RDKit molecule.

    Explicit atoms become nodes typed by atomic number; bonds become edges
    typed by their bond code (unknown bond kinds get ``BOND_NULL``).
    """
    if mol is None:
        raise GraphInputError("No molecule given")
    graph = Graph(**kwargs)
    for atom in mol.GetAtoms():
        graph.add_node(atom.GetAtomicNum())
    for bond in mol.GetBonds():
        code = _RDKIT_BONDS.get(str(bond.GetBondType()), BOND_NULL)
        graph.add_edge(bond.GetBeginAtomIdx(), bond.GetEndAtomIdx(), code)
    return graph


def from_smiles(smiles: str, **kwargs: Any) -> Graph:
    """Parse a SMILES string with RDKit and convert the molecule."""
    Chem = _chem()
    mol = Chem.MolFromSmiles(smiles)
    if mol is None:
        raise GraphInputError(f"Cannot parse SMILES '{smiles}'")
    graph = from_rdkit(mol, **kwargs)
    logger.debug("Parsed %s into %r", smiles, graph)
    return graph
