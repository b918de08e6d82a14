from .store import ScadaStore

__all__ = ['ScadaStore']
