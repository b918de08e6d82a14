from typing import Dict, Any


class ScadaStore:
    """
    Latest tag snapshot published by the frame loop.
    Read by the dashboard endpoints.
    """
    def __init__(self):
        self._store: Dict[str, Any] = {}

    def update(self, tags: Dict[str, Any]):
        """
        Replace the snapshot (batch count may have shrunk).
        """
        self._store = dict(tags)

    def get_all(self) -> Dict[str, Any]:
        """
        Get entire state snapshot.
        """
        return self._store.copy()
