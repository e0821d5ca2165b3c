from .convert import from_networkx, from_rdkit, from_smiles, to_networkx

__all__ = ["to_networkx", "from_networkx", "from_rdkit", "from_smiles"]
